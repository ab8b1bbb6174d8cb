"""
Pydantic models for the HTTP API.

These mirror the domain entities and value objects for requests and
responses; converters.py maps between the two.
"""

from datetime import date
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Author(BaseModel):
    id: UUID
    first_name: str
    family_name: str
    name: str = Field(description="Display name: 'Family, First'")
    lifespan: str = Field(description="Birth and death years, e.g. '1920 - 1992'")
    date_of_birth: date | None = None
    date_of_death: date | None = None
    url: str


class Genre(BaseModel):
    id: UUID
    name: str
    url: str


class BookInstance(BaseModel):
    id: UUID
    book_id: UUID
    imprint: str
    status: Literal["Available", "Maintenance", "Loaned", "Reserved"]
    due_back: date | None = None
    url: str


class Book(BaseModel):
    """
    API representation of a Book with its references resolved.
    """

    id: UUID = Field(description="Unique identifier for this book in our system")
    title: str
    summary: str
    isbn: str
    price: Decimal
    author: Author | None = Field(default=None, description="None if the author no longer exists")
    genres: list[Genre] = Field(default_factory=list)
    url: str


class BookSummary(BaseModel):
    id: UUID
    title: str
    author_name: str | None = None
    price: Decimal
    url: str


class BookPage(BaseModel):
    book: Book
    instances: list[BookInstance] = Field(default_factory=list)


class BookForm(BaseModel):
    """
    Request body for creating or updating a book.

    Values are accepted as raw strings and validated by the catalog service.
    """

    title: str = ""
    author: str = Field(default="", description="Author id")
    summary: str = ""
    isbn: str = ""
    price: str = ""
    genre: list[str] | str | None = Field(default=None, description="Genre id or list of ids")


class BookFormOptions(BaseModel):
    authors: list[Author] = Field(default_factory=list)
    genres: list[Genre] = Field(default_factory=list)


class GenreForm(BaseModel):
    name: str = ""


class ValidationIssue(BaseModel):
    field: str
    message: str


class CatalogSummary(BaseModel):
    """Flat record of five integer counts."""

    book_count: int
    book_instance_count: int
    available_instance_count: int
    author_count: int
    genre_count: int


class DeletionResponse(BaseModel):
    status: Literal["deleted", "deletable", "blocked"]
    book: Book | None = None
    dependents: list[BookInstance] = Field(default_factory=list)
    redirect_url: str | None = Field(
        default=None, description="Where the client should go after a deletion"
    )


class CheckoutResponse(BaseModel):
    book: Book
    instances: list[BookInstance] = Field(default_factory=list)
    client_token: str = Field(serialization_alias="clientToken")


class PaymentForm(BaseModel):
    """Request body for POST /payment. Field names follow the browser form."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    # missing values go to the gateway, which declines them
    amount: str = ""
    payment_method_nonce: str = ""
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    email: str = ""


class PaymentResponse(BaseModel):
    success: bool
