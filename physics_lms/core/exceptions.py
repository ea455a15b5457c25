"""Domain errors raised by services and mapped to HTTP status by routers."""


class LMSError(Exception):
    """Base service error."""

    def __init__(self, message: str, code: str = "lms_error"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(LMSError):
    """Requested record does not exist."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, "not_found")


class ValidationError(LMSError):
    """Request data failed a business rule."""

    def __init__(self, message: str):
        super().__init__(message, "validation_error")


class AuthorizationError(LMSError):
    """Caller may not act on the target record."""

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, "not_authorized")


def error_message(error: BaseException, default: str = "Unknown error") -> str:
    """Message exposed to API callers for an unexpected failure."""
    if isinstance(error, Exception):
        return str(error)
    return default
