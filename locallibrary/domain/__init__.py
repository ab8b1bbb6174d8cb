"""
Domain layer - Core business logic and entities.

This layer contains the catalog entities, value objects, and defines
the ports (interfaces) that the infrastructure layer must implement.

It has NO dependencies on external frameworks, databases, or APIs.
"""

from .entities import Author, Book, BookInstance, BookInstanceStatus, Genre
from .value_objects import CatalogSummary, DeletionResult, DeletionStatus, Outcome

__all__ = [
    # Entities
    "Author",
    "Book",
    "BookInstance",
    "BookInstanceStatus",
    "Genre",
    # Value Objects
    "CatalogSummary",
    "DeletionResult",
    "DeletionStatus",
    "Outcome",
]
