"""
Error taxonomy.

Services raise these; the handlers in ``pinboard.main`` render every one
of them as::

    {"error": {"code": ..., "message": ..., "details": ...}}

Each class carries its HTTP status, machine-readable code and default
message as class attributes, so most subclasses are declarations only:

    raise AccessDeniedException("Only the board owner can delete this board")
    raise ConflictException("Username or email already registered")
"""
from typing import Any, Optional


class APIException(Exception):
    """
    Base API exception.

    Attributes:
        status_code: HTTP status code
        error_code: Machine-readable error code
        message: Human-readable error message
        details: Additional error details (any JSON-serializable value)
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Any] = None,
        *,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ):
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        if message is not None:
            self.message = message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Render as the standard error envelope."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# 400
# =============================================================================
class ValidationException(APIException):
    """Malformed or missing input."""
    status_code = 400
    error_code = "VALIDATION_ERROR"
    message = "Validation error"


class InvalidOperationException(APIException):
    """Well-formed request that makes no sense for the resource (e.g. following yourself)."""
    status_code = 400
    error_code = "INVALID_OPERATION"
    message = "Invalid operation"


# =============================================================================
# 401
# =============================================================================
class UnauthorizedException(APIException):
    status_code = 401
    error_code = "UNAUTHORIZED"
    message = "Authentication required"


class InvalidCredentialsException(UnauthorizedException):
    # Same message for unknown email and wrong password
    error_code = "INVALID_CREDENTIALS"
    message = "Invalid email or password"


class TokenExpiredException(UnauthorizedException):
    error_code = "TOKEN_EXPIRED"
    message = "Token has expired"


# =============================================================================
# 403
# =============================================================================
class AccessDeniedException(APIException):
    """Authenticated, but not the owner/collaborator the resource requires."""
    status_code = 403
    error_code = "ACCESS_DENIED"
    message = "Access denied"


# =============================================================================
# 404
# =============================================================================
class NotFoundException(APIException):
    status_code = 404
    error_code = "NOT_FOUND"
    message = "Resource not found"


class UserNotFoundException(NotFoundException):
    error_code = "USER_NOT_FOUND"
    message = "User not found"


class PinNotFoundException(NotFoundException):
    error_code = "PIN_NOT_FOUND"
    message = "Pin not found"


class BoardNotFoundException(NotFoundException):
    error_code = "BOARD_NOT_FOUND"
    message = "Board not found"


class CommentNotFoundException(NotFoundException):
    error_code = "COMMENT_NOT_FOUND"
    message = "Comment not found"


# =============================================================================
# 409
# =============================================================================
class ConflictException(APIException):
    status_code = 409
    error_code = "CONFLICT"
    message = "Resource conflict"


class AlreadyExistsException(ConflictException):
    """Duplicate membership: follow, collaborator."""
    error_code = "ALREADY_EXISTS"
    message = "Resource already exists"


class AlreadySavedException(ConflictException):
    error_code = "ALREADY_SAVED"
    message = "Pin already saved"


class AlreadyLikedException(ConflictException):
    error_code = "ALREADY_LIKED"
    message = "Pin already liked"


class EmailAlreadyExistsException(ConflictException):
    error_code = "EMAIL_EXISTS"
    message = "Email already registered"


class UsernameTakenException(ConflictException):
    error_code = "USERNAME_TAKEN"
    message = "Username already taken"


# =============================================================================
# 429 / 500
# =============================================================================
class RateLimitExceededException(APIException):
    status_code = 429
    error_code = "RATE_LIMIT_EXCEEDED"
    message = "Too many requests from this IP, please try again later."

    def __init__(self, message: Optional[str] = None, retry_after: Optional[int] = None):
        super().__init__(message, {"retry_after": retry_after} if retry_after else None)


class DatabaseException(APIException):
    error_code = "DATABASE_ERROR"
    message = "Database error"
