"""
Service-layer errors.

Every failure carries a human-readable message that clients display
verbatim. The app maps each family to an HTTP status code.
"""

from __future__ import annotations


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    status_code = 400


class MissingFieldError(ValidationError):
    def __init__(self, fields: list[str]):
        super().__init__("Please fill in all required fields")
        self.fields = fields


class InvalidDomainError(ValidationError):
    def __init__(self):
        super().__init__(
            "Please use your LMU email address for LMU affiliation"
        )


class InvalidVideoHostError(ValidationError):
    def __init__(self):
        super().__init__("Please provide a valid YouTube or Vimeo URL")


class ConflictError(ServiceError):
    status_code = 409


class DuplicateEmailError(ConflictError):
    def __init__(self):
        super().__init__("User with this email already exists")


class DuplicateUsernameError(ConflictError):
    def __init__(self):
        super().__init__("Username is already taken")


class NotFoundError(ServiceError):
    status_code = 404


class MultipleResultsError(ServiceError):
    """Raised when an index lookup expected to be unique matches several rows."""

    status_code = 500
