from .errors import FailureCategory, classify_error, failure_notification

__all__ = ["FailureCategory", "classify_error", "failure_notification"]
