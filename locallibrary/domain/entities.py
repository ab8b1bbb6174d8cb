"""
Domain entities for the local library catalog.

Entities are objects with a unique identity that runs through time and
different representations. Relationships between them are plain id fields;
resolving a reference is the job of the services, never of the entity.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import List, Optional
from uuid import UUID

from .utils.uuid7 import uuid7


class BookInstanceStatus(str, Enum):
    """Availability of a physical copy."""

    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    LOANED = "Loaned"
    RESERVED = "Reserved"


@dataclass
class Author:
    """A person who wrote one or more books."""

    id: UUID
    first_name: str
    family_name: str
    date_of_birth: Optional[date] = None
    date_of_death: Optional[date] = None

    def __post_init__(self) -> None:
        """Validate author data."""
        if not self.first_name or not self.first_name.strip():
            raise ValueError("Author first name cannot be empty")

        if not self.family_name or not self.family_name.strip():
            raise ValueError("Author family name cannot be empty")

        if self.date_of_birth and self.date_of_death:
            if self.date_of_death < self.date_of_birth:
                raise ValueError(
                    f"date_of_death ({self.date_of_death}) cannot be before "
                    f"date_of_birth ({self.date_of_birth})"
                )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Author):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def name(self) -> str:
        """Full name as shown in listings: 'Family, First'."""
        return f"{self.family_name}, {self.first_name}"

    @property
    def lifespan(self) -> str:
        """Years of birth and death, e.g. '1920 - 1992' or '1965 - '."""
        born = str(self.date_of_birth.year) if self.date_of_birth else ""
        died = str(self.date_of_death.year) if self.date_of_death else ""
        return f"{born} - {died}"

    @property
    def url(self) -> str:
        return f"/catalog/author/{self.id}"

    @staticmethod
    def create_new(first_name: str, family_name: str, **kwargs) -> "Author":
        """Create a new author with an auto-generated ID."""
        return Author(id=uuid7(), first_name=first_name, family_name=family_name, **kwargs)


@dataclass
class Genre:
    """A category a book can belong to."""

    id: UUID
    name: str

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Genre name cannot be empty")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Genre):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def url(self) -> str:
        return f"/catalog/genre/{self.id}"

    @staticmethod
    def create_new(name: str) -> "Genre":
        """Create a new genre with an auto-generated ID."""
        return Genre(id=uuid7(), name=name)


@dataclass
class Book:
    """
    Represents a book in the catalog.

    A book references exactly one author and any number of genres by id.
    Physical copies are separate BookInstance entities pointing back at it.
    """

    id: UUID
    """Unique identifier for this book in our system"""

    title: str
    """Book title"""

    author_id: UUID
    """ID of the Author who wrote the book"""

    summary: str
    """Short description of the book"""

    isbn: str
    """International Standard Book Number"""

    price: Decimal
    """Shelf price, in the shop currency"""

    genre_ids: List[UUID] = field(default_factory=list)
    """IDs of the genres the book belongs to (order irrelevant)"""

    def __post_init__(self) -> None:
        """Validate book data and normalize price and genres."""
        if not self.title or not self.title.strip():
            raise ValueError("Book title cannot be empty")

        if not self.isbn or not self.isbn.strip():
            raise ValueError("Book ISBN cannot be empty")

        try:
            self.price = Decimal(str(self.price))
        except InvalidOperation as e:
            raise ValueError(f"price must be a decimal number, got '{self.price}'") from e

        if not self.price.is_finite() or self.price < 0:
            raise ValueError(f"price must be a non-negative number, got '{self.price}'")

        # genres are a set; keep first-seen order for stable serialization
        self.genre_ids = list(dict.fromkeys(self.genre_ids))

    def __eq__(self, other: object) -> bool:
        """Two books are equal if they have the same ID."""
        if not isinstance(other, Book):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on book ID."""
        return hash(self.id)

    @property
    def url(self) -> str:
        """Stable display URL derived from the id."""
        return f"/catalog/book/{self.id}"

    def has_genre(self, genre_id: UUID) -> bool:
        return genre_id in self.genre_ids

    @staticmethod
    def create_new(
        title: str,
        author_id: UUID,
        summary: str,
        isbn: str,
        price: Decimal,
        genre_ids: Optional[List[UUID]] = None,
    ) -> "Book":
        """
        Factory method to create a new book with auto-generated ID.

        Args:
            title: Book title
            author_id: ID of the book's author
            summary: Short description
            isbn: ISBN string
            price: Shelf price
            genre_ids: Optional list of genre IDs

        Returns:
            A new Book instance with a generated UUIDv7
        """
        return Book(
            id=uuid7(),
            title=title,
            author_id=author_id,
            summary=summary,
            isbn=isbn,
            price=price,
            genre_ids=list(genre_ids or []),
        )


@dataclass
class BookInstance:
    """
    A physical, loanable copy of a Book.

    The due-back date only makes sense while the copy is on loan.
    """

    id: UUID
    book_id: UUID
    imprint: str
    status: BookInstanceStatus = BookInstanceStatus.MAINTENANCE
    due_back: Optional[date] = None

    def __post_init__(self) -> None:
        """Validate instance data."""
        if not self.imprint or not self.imprint.strip():
            raise ValueError("Book instance imprint cannot be empty")

        # accepts the raw string values as well ("Available", ...)
        self.status = BookInstanceStatus(self.status)

        if self.due_back is not None and self.status is not BookInstanceStatus.LOANED:
            raise ValueError(
                f"due_back is only allowed for loaned copies, status is '{self.status.value}'"
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BookInstance):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def url(self) -> str:
        return f"/catalog/bookinstance/{self.id}"

    def is_available(self) -> bool:
        return self.status is BookInstanceStatus.AVAILABLE

    @staticmethod
    def create_new(
        book_id: UUID,
        imprint: str,
        status: BookInstanceStatus = BookInstanceStatus.MAINTENANCE,
        due_back: Optional[date] = None,
    ) -> "BookInstance":
        """Create a new copy of a book with an auto-generated ID."""
        return BookInstance(
            id=uuid7(),
            book_id=book_id,
            imprint=imprint,
            status=status,
            due_back=due_back,
        )
