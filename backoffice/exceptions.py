# backoffice/exceptions.py
"""
Typed outcomes raised by the store and the repository operations.
The HTTP layer (main.py) maps each one to a status code.
"""

from typing import Optional


class BackofficeError(Exception):
    """Base class for every error the application raises on purpose."""


class StoreInitError(BackofficeError):
    """The store could not be opened. Fatal at startup, never retried."""


class StoreNotInitializedError(BackofficeError):
    def __init__(self):
        super().__init__("Store not initialized. Call acquire() first.")


class UnauthenticatedError(BackofficeError):
    pass


class NotFoundError(BackofficeError):
    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ConflictError(BackofficeError):
    def __init__(self, entity: str, field: str, value):
        self.entity = entity
        self.field = field
        self.value = value
        super().__init__(f"Another {entity} already has {field} '{value}'")


class ValidationFailedError(BackofficeError):
    def __init__(self, message: str, fields: Optional[list[str]] = None):
        self.fields = fields or []
        super().__init__(message)

    @classmethod
    def missing(cls, fields: list[str]):
        return cls(f"Missing required fields: {', '.join(fields)}", fields)
