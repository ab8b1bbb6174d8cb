"""
Port interfaces (protocols) for the domain layer.

Ports define the contracts between the domain and infrastructure layers.
They are implemented by adapters in the infrastructure layer, allowing
the domain to remain independent of technical details.

Both ports are synchronous. Services run them off the event loop with
asyncio.to_thread so independent calls can proceed concurrently.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence, Union
from uuid import UUID

from .entities import Author, Book, BookInstance, Genre
from .value_objects import SaleRequest, SaleResult

Entity = Union[Book, Author, Genre, BookInstance]


class EntityKind(str, Enum):
    """The four persisted entity kinds."""

    BOOK = "book"
    AUTHOR = "author"
    GENRE = "genre"
    BOOK_INSTANCE = "book_instance"

    @property
    def label(self) -> str:
        """Human readable name used in error messages."""
        return {
            EntityKind.BOOK: "Book",
            EntityKind.AUTHOR: "Author",
            EntityKind.GENRE: "Genre",
            EntityKind.BOOK_INSTANCE: "BookInstance",
        }[self]


def kind_of(entity: Entity) -> EntityKind:
    """Return the EntityKind matching an entity instance."""
    if isinstance(entity, Book):
        return EntityKind.BOOK
    if isinstance(entity, Author):
        return EntityKind.AUTHOR
    if isinstance(entity, Genre):
        return EntityKind.GENRE
    if isinstance(entity, BookInstance):
        return EntityKind.BOOK_INSTANCE
    raise TypeError(f"Not a catalog entity: {type(entity).__name__}")


class CatalogStore(Protocol):
    """
    Port for persisting and retrieving catalog entities.

    Every operation targets a single entity kind. Joins across kinds
    ("book with its instances") are done by the caller issuing several
    calls, never by the store.

    Implementations should handle:
    - Equality filters on the kind's own fields (unknown fields are rejected)
    - Upsert semantics for save()
    - Translating database faults into CatalogStoreError
    """

    def find_by_id(self, kind: EntityKind, entity_id: UUID) -> Optional[Entity]:
        """
        Retrieve one entity by id.

        Returns:
            The entity if found, None otherwise
        """
        ...

    def find(
        self,
        kind: EntityKind,
        filters: Optional[Mapping[str, Any]] = None,
        sort: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> List[Entity]:
        """
        Retrieve entities matching every filter.

        Args:
            kind: Entity kind to query
            filters: Field name -> value, equality match, AND-combined
            sort: Field names; a leading '-' sorts descending
            limit: Optional maximum number of entities

        Raises:
            ValueError: If a filter or sort field does not exist for the kind
            CatalogStoreError: If the query fails
        """
        ...

    def count(self, kind: EntityKind, filters: Optional[Mapping[str, Any]] = None) -> int:
        """Count entities matching every filter."""
        ...

    def save(self, entity: Entity) -> Entity:
        """
        Insert or fully replace an entity, keyed by its id.

        Raises:
            ValueError: If the entity violates store constraints
            CatalogStoreError: If a database error occurs
        """
        ...

    def remove(self, kind: EntityKind, entity_id: UUID) -> bool:
        """
        Delete an entity.

        Returns:
            True if the entity was deleted, False if not found
        """
        ...

    def remove_unreferenced(
        self,
        kind: EntityKind,
        entity_id: UUID,
        referenced_by: EntityKind,
        reference_field: str,
    ) -> bool:
        """
        Delete an entity only if nothing references it, atomically.

        The row is removed only when no `referenced_by` entity has
        `reference_field == entity_id` at the moment of deletion.

        Returns:
            True if the entity was deleted, False if it was missing or referenced
        """
        ...


class PaymentGateway(Protocol):
    """
    Port for the external payment gateway.

    Implementations translate SDK objects into domain value objects and
    raise GatewayError on transport or protocol failures.
    """

    def generate_client_token(self, options: Optional[Dict[str, Any]] = None) -> str:
        """
        Issue a short-lived client authorization token for the browser form.

        Raises:
            GatewayError: If the token cannot be generated
        """
        ...

    def sale(self, request: SaleRequest) -> SaleResult:
        """
        Submit a sale transaction.

        Declines and validation failures come back as an unsuccessful
        SaleResult; only transport-level failures raise.

        Raises:
            GatewayError: If the gateway cannot be reached
        """
        ...
