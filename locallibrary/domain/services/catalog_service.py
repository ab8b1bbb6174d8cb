"""
Catalog browsing and editing use cases.

References between entities are plain ids, so "populating" a book means
issuing explicit lookups for its author and genres. Independent lookups are
fanned out and joined.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from ..entities import Author, Book, BookInstance, Genre
from ..exceptions import EntityNotFoundError, ValidationError
from ..ports import CatalogStore, EntityKind
from ..utils.concurrency import fan_out, run_blocking
from ..utils.uuid7 import uuid7
from ..validation import BOOK_RULES, GENRE_RULES, ValidationIssue, sanitize, validate
from ..value_objects import BookDetail, BookDraft, BookFormOptions, BookPage, BookSummary

logger = logging.getLogger(__name__)


def _resolve_genres(store: CatalogStore, genre_ids: List[UUID]) -> Tuple[Genre, ...]:
    genres = []
    for genre_id in genre_ids:
        genre = store.find_by_id(EntityKind.GENRE, genre_id)
        if genre is not None:
            genres.append(genre)
    return tuple(genres)


async def load_book_detail(store: CatalogStore, book_id: UUID) -> Optional[BookDetail]:
    """
    Fetch a book with its author and genres resolved.

    Dangling author or genre references are tolerated: the author comes
    back as None and missing genres are skipped.

    Returns:
        The BookDetail, or None if the book does not exist
    """
    book = await run_blocking(store.find_by_id, EntityKind.BOOK, book_id)
    if book is None:
        return None

    related = await fan_out(
        author=lambda: run_blocking(store.find_by_id, EntityKind.AUTHOR, book.author_id),
        genres=lambda: run_blocking(_resolve_genres, store, book.genre_ids),
    )
    return BookDetail(book=book, author=related["author"], genres=related["genres"])


async def load_instances(store: CatalogStore, book_id: UUID) -> Tuple[BookInstance, ...]:
    instances = await run_blocking(store.find, EntityKind.BOOK_INSTANCE, {"book_id": book_id})
    return tuple(instances)


class CatalogService:
    """
    Orchestrates catalog reads and the book/genre edit forms.

    Usage:
        service = CatalogService(store)
        page = await service.get_book_detail(book_id)
        book = await service.create_book(BookDraft(title="...", ...))
    """

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    async def list_books(self) -> List[BookSummary]:
        """List every book with its author name, sorted by title."""
        loaded = await fan_out(
            books=lambda: run_blocking(self._store.find, EntityKind.BOOK, None, ["title"]),
            authors=lambda: run_blocking(self._store.find, EntityKind.AUTHOR),
        )
        authors = {author.id: author for author in loaded["authors"]}

        summaries = []
        for book in loaded["books"]:
            author = authors.get(book.author_id)
            summaries.append(
                BookSummary(
                    id=book.id,
                    title=book.title,
                    author_name=author.name if author else None,
                    price=book.price,
                    url=book.url,
                )
            )
        return summaries

    async def list_authors(self) -> List[Author]:
        return await run_blocking(
            self._store.find, EntityKind.AUTHOR, None, ["family_name", "first_name"]
        )

    async def list_genres(self) -> List[Genre]:
        return await run_blocking(self._store.find, EntityKind.GENRE, None, ["name"])

    async def get_book_detail(self, book_id: UUID) -> BookPage:
        """
        Fetch a book (author and genres resolved) and its copies concurrently.

        Raises:
            EntityNotFoundError: If the book does not exist
        """
        loaded = await fan_out(
            detail=lambda: load_book_detail(self._store, book_id),
            instances=lambda: load_instances(self._store, book_id),
        )
        if loaded["detail"] is None:
            raise EntityNotFoundError(EntityKind.BOOK.label, book_id)

        return BookPage(detail=loaded["detail"], instances=loaded["instances"])

    async def get_book_form_options(self) -> BookFormOptions:
        """Authors and genres offered by the book form."""
        loaded = await fan_out(authors=self.list_authors, genres=self.list_genres)
        return BookFormOptions(authors=tuple(loaded["authors"]), genres=tuple(loaded["genres"]))

    def _book_from_draft(self, book_id: Optional[UUID], draft: BookDraft) -> Book:
        data = sanitize(
            {
                "title": draft.title,
                "author": draft.author,
                "summary": draft.summary,
                "isbn": draft.isbn,
                "price": draft.price,
                "genre": list(draft.genre),
            }
        )
        issues = validate(data, BOOK_RULES)

        author_id = _parse_uuid(data["author"])
        if data["author"] and author_id is None:
            issues.append(ValidationIssue("author", "Author must be a valid id.", data["author"]))

        genre_ids = []
        for raw in data["genre"]:
            genre_id = _parse_uuid(raw)
            if genre_id is None:
                issues.append(ValidationIssue("genre", "Genre must be a valid id.", raw))
            else:
                genre_ids.append(genre_id)

        if issues:
            raise ValidationError(issues)

        return Book(
            id=book_id or uuid7(),
            title=data["title"],
            author_id=author_id,
            summary=data["summary"],
            isbn=data["isbn"],
            price=data["price"],
            genre_ids=genre_ids,
        )

    async def create_book(self, draft: BookDraft) -> Book:
        """
        Validate a submitted form and persist a new book.

        Raises:
            ValidationError: With every failing rule
        """
        book = self._book_from_draft(None, draft)
        saved = await run_blocking(self._store.save, book)
        logger.info(f"Created book {saved.id} '{saved.title}'")
        return saved

    async def update_book(self, book_id: UUID, draft: BookDraft) -> Book:
        """
        Replace every field of an existing book, keeping its id.

        Raises:
            ValidationError: With every failing rule
            EntityNotFoundError: If the book does not exist
        """
        book = self._book_from_draft(book_id, draft)

        existing = await run_blocking(self._store.find_by_id, EntityKind.BOOK, book_id)
        if existing is None:
            raise EntityNotFoundError(EntityKind.BOOK.label, book_id)

        saved = await run_blocking(self._store.save, book)
        logger.info(f"Updated book {book_id}")
        return saved

    async def update_genre(self, genre_id: UUID, name: str) -> Genre:
        """
        Rename a genre. The id is preserved across the full replace.

        Raises:
            ValidationError: If the name is empty or too long
            EntityNotFoundError: If the genre does not exist
        """
        data = sanitize({"name": name})
        issues = validate(data, GENRE_RULES)
        if issues:
            raise ValidationError(issues)

        existing = await run_blocking(self._store.find_by_id, EntityKind.GENRE, genre_id)
        if existing is None:
            raise EntityNotFoundError(EntityKind.GENRE.label, genre_id)

        saved = await run_blocking(self._store.save, Genre(id=genre_id, name=data["name"]))
        logger.info(f"Updated genre {genre_id}")
        return saved


def _parse_uuid(value: object) -> Optional[UUID]:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None
