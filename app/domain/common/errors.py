from __future__ import annotations

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base for errors the core raises on purpose. Message is safe to show to callers."""

    def __init__(self, message: str, data: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data


class ValidationError(DomainError):
    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message, dict(errors) if errors else None)
        self.errors: Dict[str, str] = dict(errors or {})


class NoChangesError(ValidationError):
    def __init__(self, message: str = "No changes provided") -> None:
        super().__init__(message)


class AuthenticationError(DomainError):
    pass


class InvalidSignatureError(AuthenticationError):
    pass


class TokenExpiredError(AuthenticationError):
    pass


class MalformedTokenError(AuthenticationError):
    pass


class AccountNotFoundError(DomainError):
    def __init__(self, message: str = "Account not found. Please register first.") -> None:
        super().__init__(message, {"suggestion": "register"})


class IncorrectCredentialError(DomainError):
    def __init__(self, message: str = "Incorrect password. Please try again.") -> None:
        super().__init__(message, {"suggestion": "try_again"})


class ConflictError(DomainError):
    pass


class NotFoundError(DomainError):
    pass


class PartialDeletionError(DomainError):
    """Dependents were removed but the owning record could not be."""
