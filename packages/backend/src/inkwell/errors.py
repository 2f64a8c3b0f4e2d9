"""Error taxonomy for the blog backend.

Learn: Services raise these instead of HTTPException so the same
logic works outside a request (CLI, tests). Each class carries the
HTTP status it maps to; the app factory registers one handler that
renders any BlogError as {"error": "<message>"}.

    BlogError
    ├── ValidationError       400
    ├── Unauthorized          401
    │   ├── InvalidCredentials
    │   ├── MissingToken
    │   ├── InvalidOrExpiredToken
    │   └── MalformedClaims
    ├── Forbidden             403
    ├── NotFound              404
    ├── Conflict              409
    └── InternalFailure       500
        ├── HashingFailure
        ├── TokenSigningFailure
        └── StorageFailure
"""

from typing import Optional


class BlogError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code: int = 500
    message: str = "Internal server error"
    headers: Optional[dict[str, str]] = None

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(BlogError):
    """Malformed or missing input."""

    status_code = 400
    message = "Invalid input"


class Unauthorized(BlogError):
    """Bad credentials, or a missing/invalid/expired bearer token."""

    status_code = 401
    message = "Unauthorized"
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidCredentials(Unauthorized):
    # Same message for unknown user and wrong password.
    message = "Invalid username or password"


class MissingToken(Unauthorized):
    message = "Authorization token required"


class InvalidOrExpiredToken(Unauthorized):
    message = "Invalid or expired token"


class MalformedClaims(Unauthorized):
    message = "Token claims invalid"


class Forbidden(BlogError):
    """Authenticated, but not the owner of the resource."""

    status_code = 403
    message = "Permission denied"


class NotFound(BlogError):
    status_code = 404
    message = "Not found"


class Conflict(BlogError):
    """A unique field (username, email) is already taken."""

    status_code = 409
    message = "Conflict"


class InternalFailure(BlogError):
    status_code = 500
    message = "Internal server error"


class HashingFailure(InternalFailure):
    message = "Internal server error during password hashing"


class TokenSigningFailure(InternalFailure):
    message = "Failed to generate authentication token"


class StorageFailure(InternalFailure):
    message = "Database error"
