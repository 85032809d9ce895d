"""
Exception types raised by the service layer.

Each exception maps to exactly one HTTP outcome; the mapping lives in
``main.create_app`` where the exception handlers are registered.
"""


class UserRecordError(Exception):
    """Base class for all user record errors."""


class RecordValidationError(UserRecordError):
    """A request failed field or identifier validation (HTTP 400)."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class UserNotFoundError(UserRecordError):
    """No stored record matches the requested identifier (HTTP 404)."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__("User not found")


class StoreError(UserRecordError):
    """The relational store failed while executing a statement (HTTP 500)."""
