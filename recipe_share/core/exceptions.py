"""
Application exception hierarchy.

Domain modules (visibility, moderation, filters) raise these instead of
HTTPException so they stay usable outside a request. Handlers registered in
main.py turn them into JSON responses:

    RecipeShareError (base)          -> 500
    ├── ValidationError              -> 400
    ├── AuthenticationRequired       -> 401
    ├── ForbiddenError               -> 403
    ├── NotFoundError                -> 404
    └── EmailDeliveryError           -> 500
"""

from typing import Any, Dict, Optional


class RecipeShareError(Exception):
    """
    Base exception for all application errors.

    `message` is safe to return to the client; `context` is only logged.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(RecipeShareError):
    status_code = 400

    def __init__(self, message: str = "Invalid request", context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)


class AuthenticationRequired(RecipeShareError):
    status_code = 401

    def __init__(self, message: str = "Authentication required", context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)


class ForbiddenError(RecipeShareError):
    status_code = 403

    def __init__(self, message: str = "Not authorized", context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)


class NotFoundError(RecipeShareError):
    status_code = 404

    def __init__(self, message: str = "Resource not found", context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)


class EmailDeliveryError(RecipeShareError):
    status_code = 500

    def __init__(self, message: str = "Error sending email", context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)
