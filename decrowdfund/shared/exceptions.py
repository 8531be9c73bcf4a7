"""
Exception hierarchy for the DeCrowdFund client.

Exception Categories:
- RetryableException: Transient failures that may succeed on retry (RPC, network)
- NonRetryableException: Permanent failures that won't benefit from retry
- ConfigurationException: Session/config errors that prevent operation

Concrete exceptions:
- ChainReadException -> RetryableException (transport failure on a view call)
- ValidationException -> NonRetryableException (bad user input, no chain call)
- TransactionFailed -> NonRetryableException (classified write failure)
"""


class RetryableException(Exception):
    """
    Base class for exceptions that may succeed on retry.

    Use for transient failures like:
    - RPC timeouts
    - Dropped connections to the node
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NonRetryableException(Exception):
    """
    Base class for exceptions that won't benefit from retry.

    Use for permanent failures like:
    - Invalid user input
    - Contract reverts
    - Missing deployments
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationException(NonRetryableException):
    """
    Exception for configuration/session errors.

    Use when:
    - The contract is not deployed on the connected network
    - The contract artifact cannot be loaded
    - The provider exposes no accounts

    Fatal for the session that raised it.
    """

    pass


class ChainReadException(RetryableException):
    """Exception for failed view calls against the contract."""

    def __init__(self, method: str, message: str):
        super().__init__(f"{method}: {message}")
        self.method = method


class ValidationException(NonRetryableException):
    """
    Exception for invalid user input.

    Raised before any chain call is attempted; the dispatcher surfaces
    it as a warning and the user can simply re-enter the value.
    """

    pass


class TransactionFailed(NonRetryableException):
    """
    Exception for a write that was rejected, reverted or failed in transit.

    Attributes:
        category: FailureCategory assigned by the error classifier
        cause: Original transport exception, if any
    """

    def __init__(self, category, message: str, cause: Exception = None):
        super().__init__(message)
        self.category = category
        self.cause = cause
