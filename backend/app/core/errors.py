# app/core/errors.py
"""
Application error taxonomy.
Every error carries the HTTP status it maps to and a message that is safe to
show to the caller. Handlers in app.main render them as {"error": message}.
"""


class AppError(Exception):
    """Base class for errors that are converted into JSON error responses."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Required input is missing or malformed."""

    status_code = 400
    default_message = "Username and password are required"


class ConflictError(AppError):
    """The username is already taken."""

    status_code = 400
    default_message = "Username already exists"


class AuthError(AppError):
    """Unknown username or wrong password. Deliberately undifferentiated."""

    status_code = 401
    default_message = "Invalid username or password"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Endpoint not found"


class InternalError(AppError):
    """Unexpected failure; details are logged server-side only."""

    status_code = 500
    default_message = "Internal server error"
