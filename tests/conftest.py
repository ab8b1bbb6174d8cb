"""
Shared fixtures: an in-memory CatalogStore and a scriptable payment gateway.

The fakes record calls so tests can assert on collaborator usage, and can be
told to fail specific operations.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence
from uuid import UUID

import pytest

from locallibrary.domain.entities import Author, Book, BookInstance, BookInstanceStatus, Genre
from locallibrary.domain.exceptions import GatewayError
from locallibrary.domain.ports import EntityKind, kind_of
from locallibrary.domain.value_objects import SaleRequest, SaleResult, TransactionRecord


def _norm(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    return value


class InMemoryCatalogStore:
    """Dict-backed CatalogStore with call counting and failure injection."""

    def __init__(self) -> None:
        self.entities: Dict[EntityKind, Dict[UUID, Any]] = {kind: {} for kind in EntityKind}
        self.calls: List[str] = []
        self.failures: Dict[str, Exception] = {}
        self.before_remove = None

    def fail(self, operation: str, error: Exception) -> None:
        self.failures[operation] = error

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failures:
            raise self.failures[operation]

    def _matches(self, entity: Any, filters: Optional[Mapping[str, Any]]) -> bool:
        for field_name, value in (filters or {}).items():
            if _norm(getattr(entity, field_name)) != _norm(value):
                return False
        return True

    def find_by_id(self, kind: EntityKind, entity_id: UUID):
        self._enter("find_by_id")
        return self.entities[kind].get(entity_id)

    def find(self, kind, filters=None, sort: Optional[Sequence[str]] = None, limit=None):
        self._enter("find")
        found = [e for e in self.entities[kind].values() if self._matches(e, filters)]
        for key in reversed(sort or []):
            field_name = key.lstrip("-")
            found.sort(key=lambda e: _norm(getattr(e, field_name)), reverse=key.startswith("-"))
        return found[:limit] if limit is not None else found

    def count(self, kind, filters=None) -> int:
        self._enter(f"count:{kind.value}")
        return sum(1 for e in self.entities[kind].values() if self._matches(e, filters))

    def save(self, entity):
        self._enter("save")
        self.entities[kind_of(entity)][entity.id] = entity
        return entity

    def remove(self, kind, entity_id) -> bool:
        self._enter("remove")
        return self.entities[kind].pop(entity_id, None) is not None

    def remove_unreferenced(self, kind, entity_id, referenced_by, reference_field) -> bool:
        self._enter("remove_unreferenced")
        if self.before_remove is not None:
            self.before_remove()
        if entity_id not in self.entities[kind]:
            return False
        for entity in self.entities[referenced_by].values():
            if _norm(getattr(entity, reference_field)) == _norm(entity_id):
                return False
        del self.entities[kind][entity_id]
        return True


class FakePaymentGateway:
    """PaymentGateway returning canned answers and counting calls."""

    def __init__(
        self,
        token: str = "fake-client-token",
        sale_result: Optional[SaleResult] = None,
        token_error: Optional[Exception] = None,
        sale_error: Optional[Exception] = None,
    ) -> None:
        self.token = token
        self.sale_result = sale_result or SaleResult(
            success=True, transaction=TransactionRecord(status="Settled", id="txn-1")
        )
        self.token_error = token_error
        self.sale_error = sale_error
        self.token_calls = 0
        self.sale_requests: List[SaleRequest] = []

    def generate_client_token(self, options=None) -> str:
        self.token_calls += 1
        if self.token_error is not None:
            raise self.token_error
        return self.token

    def sale(self, request: SaleRequest) -> SaleResult:
        self.sale_requests.append(request)
        if self.sale_error is not None:
            raise self.sale_error
        return self.sale_result


@pytest.fixture
def store():
    return InMemoryCatalogStore()


@pytest.fixture
def gateway():
    return FakePaymentGateway()


@pytest.fixture
def unreachable_gateway():
    return FakePaymentGateway(
        token_error=GatewayError("client token generation", "connection refused"),
        sale_error=GatewayError("sale", "connection refused"),
    )


@pytest.fixture
def catalog(store):
    """
    A small catalog: 3 books, 5 copies (2 available), 2 authors, 4 genres.

    Returns a dict of the saved entities keyed by name.
    """
    tolkien = store.save(Author.create_new("John Ronald Reuel", "Tolkien"))
    le_guin = store.save(Author.create_new("Ursula", "Le Guin"))

    fantasy = store.save(Genre.create_new("Fantasy"))
    classic = store.save(Genre.create_new("Classic"))
    science_fiction = store.save(Genre.create_new("Science Fiction"))
    poetry = store.save(Genre.create_new("Poetry"))

    hobbit = store.save(
        Book.create_new(
            "The Hobbit", tolkien.id, "There and back again.", "9780261102217",
            Decimal("8.99"), [fantasy.id, classic.id],
        )
    )
    earthsea = store.save(
        Book.create_new(
            "A Wizard of Earthsea", le_guin.id, "Ged learns true names.", "9780553262506",
            Decimal("7.50"), [fantasy.id],
        )
    )
    dispossessed = store.save(
        Book.create_new(
            "The Dispossessed", le_guin.id, "An ambiguous utopia.", "9780061054884",
            Decimal("10.00"), [science_fiction.id],
        )
    )

    copies = [
        store.save(BookInstance.create_new(hobbit.id, "Allen & Unwin, 1937", BookInstanceStatus.AVAILABLE)),
        store.save(BookInstance.create_new(hobbit.id, "HarperCollins, 1995")),
        store.save(BookInstance.create_new(earthsea.id, "Parnassus, 1968", BookInstanceStatus.AVAILABLE)),
        store.save(BookInstance.create_new(earthsea.id, "Bantam, 1975", BookInstanceStatus.RESERVED)),
        store.save(BookInstance.create_new(earthsea.id, "Puffin, 1971", BookInstanceStatus.MAINTENANCE)),
    ]

    store.calls.clear()
    return {
        "tolkien": tolkien,
        "le_guin": le_guin,
        "fantasy": fantasy,
        "classic": classic,
        "science_fiction": science_fiction,
        "poetry": poetry,
        "hobbit": hobbit,
        "earthsea": earthsea,
        "dispossessed": dispossessed,
        "copies": copies,
    }
