"""
Exception handling utilities.

Defines categorized exception types for proper error handling.
Every ledger error carries a user-facing message; the UI layer turns it
into a notification. No error is fatal to the process.
"""

from sqlalchemy.exc import DBAPIError, OperationalError


class TaskMinerError(Exception):
    """Base class for ledger errors."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None, **context: object) -> None:
        self.user_message = message or self.default_message
        self.context = context
        super().__init__(self.user_message)


class ValidationError(TaskMinerError):
    """Bad user input (amount, wallet address, minimums). Nothing mutated."""

    default_message = "Invalid request"


class QuotaExceededError(TaskMinerError):
    """Task completion attempted beyond the daily quota."""

    default_message = "All tasks for today are completed"


class InsufficientBalanceError(TaskMinerError):
    """Debit would make a balance field negative."""

    default_message = "Insufficient balance"


class AuthorizationError(TaskMinerError):
    """Caller is not allowed to perform the operation."""

    default_message = "Access denied"


class NotFoundError(TaskMinerError):
    """Referenced profile or transaction does not exist."""

    default_message = "Not found"


class TransactionAlreadyProcessedError(TaskMinerError):
    """Transition attempted on a transaction in a terminal state."""

    default_message = "Transaction has already been processed"


class TransientBackendError(TaskMinerError):
    """Network, timeout or conflict failure. Safe to retry."""

    default_message = "Service is temporarily busy. Please try again."


class InconsistentStateError(TaskMinerError):
    """
    A multi-row mutation could not be fully applied.

    Indicates a transaction-boundary bug rather than a user error and must
    never be silently swallowed.
    """

    default_message = "Operation failed and was not applied"


# Exception categories based on handling strategy

# Retry the whole operation
RETRYABLE = (
    TransientBackendError,
    OperationalError,  # Lock conflicts, dropped connections
    TimeoutError,
)

# Show the message to the user as is
USER_FACING = (
    ValidationError,
    QuotaExceededError,
    InsufficientBalanceError,
    AuthorizationError,
    NotFoundError,
    TransactionAlreadyProcessedError,
)

# Must be logged at ERROR level and surfaced distinctly
MUST_ALERT = (
    InconsistentStateError,
    DBAPIError,
)


def is_retryable(exc: Exception) -> bool:
    """
    Check if an operation failing with exception can be retried.

    Args:
        exc: Exception to check

    Returns:
        True if exception is transient
    """
    return isinstance(exc, RETRYABLE)


def is_user_error(exc: Exception) -> bool:
    """
    Check if exception is caused by the user's request.

    Args:
        exc: Exception to check

    Returns:
        True if exception is a user-facing validation-type error
    """
    return isinstance(exc, USER_FACING)


def must_alert(exc: Exception) -> bool:
    """
    Check if exception signals a consistency problem.

    Args:
        exc: Exception to check

    Returns:
        True if exception must be reported to operators
    """
    return isinstance(exc, MUST_ALERT)


def user_message_for(exc: Exception) -> str:
    """
    Get the notification text for an exception.

    Unknown exceptions get a generic message so internals never leak
    into the UI.
    """
    if isinstance(exc, TaskMinerError):
        return exc.user_message
    if is_retryable(exc):
        return TransientBackendError.default_message
    return TaskMinerError.default_message
