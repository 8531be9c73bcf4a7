"""
Result types for explicit success/failure tracking during synchronization.

A resync is allowed to lose individual campaigns (a corrupt or missing record
must not blank the whole view), so the aggregator reports what it dropped
through these types instead of raising.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class ErrorSeverity(Enum):
    """Severity levels for processing errors."""

    WARNING = "warning"  # Continue processing, log issue
    ERROR = "error"  # Skip this item, continue others
    CRITICAL = "critical"  # Stop processing entirely


@dataclass
class ProcessingError:
    """
    Represents a single processing error with context.

    Attributes:
        source: Component that generated the error (e.g., "sync", "rating")
        message: Human-readable error description
        severity: How severe the error is (affects control flow)
        context: Additional context like campaign_id or method
        exception: Original exception if available
    """

    source: str
    message: str
    severity: ErrorSeverity
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[Exception] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "source": self.source,
            "message": self.message,
            "severity": self.severity.value,
            "context": self.context,
        }


@dataclass
class Result(Generic[T]):
    """
    Result type that carries success/failure information.

    Attributes:
        success: Whether the operation succeeded
        data: The result data (may be present on failure as a safe default)
        errors: Errors encountered (warnings are allowed on success)
    """

    success: bool
    data: Optional[T] = None
    errors: List[ProcessingError] = field(default_factory=list)

    @classmethod
    def ok(cls, data: T) -> "Result[T]":
        """Create a successful result with data."""
        return cls(success=True, data=data)

    @classmethod
    def fail_with_message(
        cls,
        source: str,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[Dict[str, Any]] = None,
        exception: Optional[Exception] = None,
        data: Optional[T] = None,
    ) -> "Result[T]":
        """Create a failed result with a message (convenience method)."""
        error = ProcessingError(
            source=source,
            message=message,
            severity=severity,
            context=context or {},
            exception=exception,
        )
        return cls(success=False, data=data, errors=[error])

    def add_warning(
        self,
        source: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        exception: Optional[Exception] = None,
    ) -> "Result[T]":
        """Add a warning to the result (convenience method)."""
        self.errors.append(
            ProcessingError(
                source=source,
                message=message,
                severity=ErrorSeverity.WARNING,
                context=context or {},
                exception=exception,
            )
        )
        return self

    def has_errors(self) -> bool:
        """Check if result has any ERROR or CRITICAL level errors."""
        return any(
            e.severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL)
            for e in self.errors
        )

    def has_warnings(self) -> bool:
        """Check if result has any WARNING level errors."""
        return any(e.severity == ErrorSeverity.WARNING for e in self.errors)

    def get_error_messages(self) -> List[str]:
        """Get all error messages as strings."""
        return [e.message for e in self.errors]

    def unwrap(self) -> T:
        """Return data, raising RuntimeError if the operation failed."""
        if not self.success:
            raise RuntimeError("; ".join(self.get_error_messages()))
        return self.data


@dataclass
class SyncSummary:
    """Counters for one full resynchronization."""

    campaign_count: int = 0
    campaigns_loaded: int = 0
    campaigns_skipped: int = 0
    ratings_defaulted: int = 0
    skipped_ids: List[int] = field(default_factory=list)

    def record_skip(self, campaign_id: int) -> None:
        self.campaigns_skipped += 1
        self.skipped_ids.append(campaign_id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert summary to dictionary for JSON serialization."""
        return {
            "campaign_count": self.campaign_count,
            "campaigns_loaded": self.campaigns_loaded,
            "campaigns_skipped": self.campaigns_skipped,
            "ratings_defaulted": self.ratings_defaulted,
            "skipped_ids": list(self.skipped_ids),
        }
