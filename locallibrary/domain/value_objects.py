"""
Value objects for the domain layer.

Value objects are immutable objects that represent descriptive aspects
of the domain with no conceptual identity: query results, payment requests
and the classified outcome of a sale.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple
from uuid import UUID

from .entities import Author, Book, BookInstance, Genre


@dataclass(frozen=True)
class CatalogSummary:
    """Dashboard counts. Each count is an independent snapshot."""

    book_count: int
    book_instance_count: int
    available_instance_count: int
    author_count: int
    genre_count: int


@dataclass(frozen=True)
class BookSummary:
    """Projection of a Book used by the book list (title, author, price)."""

    id: UUID
    title: str
    author_name: Optional[str]
    price: Decimal
    url: str


@dataclass(frozen=True)
class BookDetail:
    """A Book with its author and genres resolved."""

    book: Book
    author: Optional[Author]
    """None when the referenced author no longer exists"""

    genres: Tuple[Genre, ...] = ()


@dataclass(frozen=True)
class BookPage:
    """Everything the book detail view shows."""

    detail: BookDetail
    instances: Tuple[BookInstance, ...] = ()


@dataclass(frozen=True)
class BookFormOptions:
    """Choices offered by the book create/update form."""

    authors: Tuple[Author, ...] = ()
    genres: Tuple[Genre, ...] = ()


@dataclass(frozen=True)
class BookDraft:
    """
    Raw, user-submitted book fields before validation.

    Values are strings as they arrive from a form; the catalog service
    sanitizes and validates them before building a Book.
    """

    title: str = ""
    author: str = ""
    summary: str = ""
    isbn: str = ""
    price: str = ""
    genre: Tuple[str, ...] = ()


class DeletionStatus(str, Enum):
    DELETED = "deleted"
    DELETABLE = "deletable"
    BLOCKED = "blocked"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class DeletionResult:
    """
    Outcome of a guarded deletion.

    BLOCKED is a normal result, not an error: `dependents` lists the
    instances that still reference the book.
    """

    status: DeletionStatus
    book: Optional[Book] = None
    dependents: Tuple[BookInstance, ...] = ()

    @property
    def is_blocked(self) -> bool:
        return self.status is DeletionStatus.BLOCKED


@dataclass(frozen=True)
class CustomerIdentity:
    first_name: str = ""
    last_name: str = ""
    email: str = ""


@dataclass(frozen=True)
class PaymentRequest:
    """
    A visitor's payment submission.

    `amount` is caller-supplied and is not checked against the book price.
    """

    amount: str
    nonce: str
    customer: CustomerIdentity = field(default_factory=CustomerIdentity)


@dataclass(frozen=True)
class SaleRequest:
    """Parameters of a gateway sale call."""

    amount: str
    payment_method_nonce: str
    customer: CustomerIdentity = field(default_factory=CustomerIdentity)
    submit_for_settlement: bool = True


@dataclass(frozen=True)
class GatewayErrorDetail:
    """One structured validation error returned by the gateway."""

    code: str
    message: str


@dataclass(frozen=True)
class TransactionRecord:
    status: str
    id: Optional[str] = None


@dataclass(frozen=True)
class SaleResult:
    """Gateway answer to a sale, translated out of the SDK types."""

    success: bool
    transaction: Optional[TransactionRecord] = None
    errors: Tuple[GatewayErrorDetail, ...] = ()


@dataclass(frozen=True)
class Outcome:
    """User-facing classification of a sale attempt."""

    success: bool
    header: str
    icon: str
    message: str


@dataclass(frozen=True)
class CheckoutBundle:
    """Data needed to render the checkout page."""

    detail: BookDetail
    instances: Tuple[BookInstance, ...]
    client_token: str

    @property
    def book(self) -> Book:
        return self.detail.book
