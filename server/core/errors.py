"""Error types and failure classification for turn processing."""


class ConfigurationError(Exception):
    """A required classifier or knowledge-base binding is missing. Fatal at startup."""


# LUIS and QnA clients map httpx failures onto these
_RETRYABLE_ERRORS = (
    ConnectionError,
    TimeoutError,
)


def is_retryable(exc: Exception) -> bool:
    """Classify an exception as transient (retryable) or permanent."""
    return isinstance(exc, _RETRYABLE_ERRORS)


def classify_error(exc: Exception) -> str:
    """Return a machine-readable error code for the exception."""
    if isinstance(exc, TimeoutError):
        return "timeout"
    if isinstance(exc, ConnectionError):
        return "connection_error"
    return "internal_error"
