"""
Domain exceptions for the local library.

Recoverable outcomes (a blocked deletion, a declined payment) are returned as
values, not raised. The exceptions below are for operations that cannot
produce their result at all.
"""

from typing import List, Optional, TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from .validation import ValidationIssue


class LibraryError(Exception):
    """Base class for every error raised by the library core."""


class EntityNotFoundError(LibraryError):
    """An entity id did not resolve in the catalog."""

    def __init__(self, kind: str, entity_id: UUID) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} with id '{entity_id}' not found")


class ValidationError(LibraryError):
    """Submitted data failed one or more validation rules."""

    def __init__(self, issues: List["ValidationIssue"]) -> None:
        self.issues = list(issues)
        fields = ", ".join(issue.field for issue in self.issues)
        super().__init__(f"Validation failed for: {fields}")


class GatewayError(LibraryError):
    """The payment gateway could not be reached or answered garbage."""

    def __init__(self, operation: str, reason: Optional[str] = None) -> None:
        self.operation = operation
        self.reason = reason
        message = f"Payment gateway {operation} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class CatalogStoreError(LibraryError):
    """The catalog database failed while executing a query."""


class InternalError(LibraryError):
    """A concurrent branch failed with an unexpected exception."""
