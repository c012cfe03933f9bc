# app/core/errors.py
"""
Application errors surfaced to API callers.
Each error carries its HTTP status and the exact message placed in the
`{"message": ...}` response body by the handler registered in app.main.
"""


class AppError(Exception):
    status_code: int = 400
    message: str = "Error: Bad request"
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidCredentialsError(AppError):
    """Unknown username or wrong password; the two are never distinguished."""
    status_code = 401
    message = "Error: Bad credentials"


class UnauthenticatedError(AppError):
    """No token, or a token that failed verification."""
    status_code = 401
    message = "Error: Unauthorized"
    headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(AppError):
    """Valid identity whose role is not allowed to perform the operation."""
    status_code = 403
    message = "Error: Access denied"


class UsernameTakenError(AppError):
    status_code = 400
    message = "Error: Username is already taken!"


class EmailTakenError(AppError):
    status_code = 400
    message = "Error: Email is already in use!"
