"""
Error taxonomy shared by the stores, services and HTTP layer.

Services raise AppError subclasses; the handlers registered in app.main
render them as {"error": message} with the matching status code.
"""

from typing import Any, Dict, List, Optional


class AppError(Exception):
    status_code = 500
    default_message = "An error occurred"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationFailedError(AppError):
    status_code = 422
    default_message = "Invalid input"

    def __init__(self, fields: List[Dict[str, str]], message: Optional[str] = None):
        self.fields = fields
        if message is None:
            names = ", ".join(dict.fromkeys(f["field"] for f in fields))
            message = f"Invalid input: {names}" if names else self.default_message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "fields": self.fields}


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource already exists"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Access denied"


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Could not validate credentials"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class InternalError(AppError):
    status_code = 500
    default_message = "Internal server error"


# Collaborator failures. These never reach the client directly; services
# translate them into InternalError (or ConflictError for duplicates).

class StoreError(Exception):
    """Raised by the stores when the database call fails"""


class DuplicateRecordError(StoreError):
    """Raised when a unique constraint rejects an insert"""


class HashingError(Exception):
    """Raised when the password hasher cannot hash or verify"""


class TokenSigningError(Exception):
    """Raised when a token cannot be signed"""
