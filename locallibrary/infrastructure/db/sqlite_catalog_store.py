"""
SQLite implementation of the CatalogStore port.

This adapter persists the four catalog entity kinds to one SQLite database,
handling serialization/deserialization and query building. A new connection
is opened per call, so the store can be used from worker threads.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple
from uuid import UUID

from locallibrary.domain.entities import Author, Book, BookInstance, Genre
from locallibrary.domain.exceptions import CatalogStoreError
from locallibrary.domain.ports import CatalogStore, Entity, EntityKind, kind_of

logger = logging.getLogger(__name__)


def _to_db(value: Any) -> Any:
    """Convert a domain value to a SQLite parameter."""
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def _parse_date(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _book_to_row(book: Book) -> Dict[str, Any]:
    return {
        "id": str(book.id),
        "title": book.title,
        "author_id": str(book.author_id),
        "summary": book.summary,
        "isbn": book.isbn,
        "price": str(book.price),
        "genre_ids": json.dumps([str(genre_id) for genre_id in book.genre_ids]),
    }


def _row_to_book(row: sqlite3.Row) -> Book:
    return Book(
        id=UUID(row["id"]),
        title=row["title"],
        author_id=UUID(row["author_id"]),
        summary=row["summary"],
        isbn=row["isbn"],
        price=Decimal(row["price"]),
        genre_ids=[UUID(genre_id) for genre_id in json.loads(row["genre_ids"] or "[]")],
    )


def _author_to_row(author: Author) -> Dict[str, Any]:
    return {
        "id": str(author.id),
        "first_name": author.first_name,
        "family_name": author.family_name,
        "date_of_birth": _to_db(author.date_of_birth),
        "date_of_death": _to_db(author.date_of_death),
    }


def _row_to_author(row: sqlite3.Row) -> Author:
    return Author(
        id=UUID(row["id"]),
        first_name=row["first_name"],
        family_name=row["family_name"],
        date_of_birth=_parse_date(row["date_of_birth"]),
        date_of_death=_parse_date(row["date_of_death"]),
    )


def _genre_to_row(genre: Genre) -> Dict[str, Any]:
    return {"id": str(genre.id), "name": genre.name}


def _row_to_genre(row: sqlite3.Row) -> Genre:
    return Genre(id=UUID(row["id"]), name=row["name"])


def _instance_to_row(instance: BookInstance) -> Dict[str, Any]:
    return {
        "id": str(instance.id),
        "book_id": str(instance.book_id),
        "imprint": instance.imprint,
        "status": instance.status.value,
        "due_back": _to_db(instance.due_back),
    }


def _row_to_instance(row: sqlite3.Row) -> BookInstance:
    return BookInstance(
        id=UUID(row["id"]),
        book_id=UUID(row["book_id"]),
        imprint=row["imprint"],
        status=row["status"],
        due_back=_parse_date(row["due_back"]),
    )


@dataclass(frozen=True)
class _Table:
    """How one entity kind maps onto a table."""

    name: str
    columns: Tuple[str, ...]
    to_row: Callable[[Any], Dict[str, Any]]
    from_row: Callable[[sqlite3.Row], Any]
    unfilterable: Tuple[str, ...] = ()
    numeric: Tuple[str, ...] = ()

    @property
    def filterable(self) -> Tuple[str, ...]:
        return tuple(c for c in self.columns if c not in self.unfilterable)


_TABLES: Dict[EntityKind, _Table] = {
    EntityKind.BOOK: _Table(
        name="books",
        columns=("id", "title", "author_id", "summary", "isbn", "price", "genre_ids"),
        to_row=_book_to_row,
        from_row=_row_to_book,
        unfilterable=("genre_ids",),
        numeric=("price",),
    ),
    EntityKind.AUTHOR: _Table(
        name="authors",
        columns=("id", "first_name", "family_name", "date_of_birth", "date_of_death"),
        to_row=_author_to_row,
        from_row=_row_to_author,
    ),
    EntityKind.GENRE: _Table(
        name="genres",
        columns=("id", "name"),
        to_row=_genre_to_row,
        from_row=_row_to_genre,
    ),
    EntityKind.BOOK_INSTANCE: _Table(
        name="book_instances",
        columns=("id", "book_id", "imprint", "status", "due_back"),
        to_row=_instance_to_row,
        from_row=_row_to_instance,
    ),
}


class SqliteCatalogStore(CatalogStore):
    """
    One table per entity kind; references are plain id columns.

    No foreign keys are declared: a BookInstance may reference a book id
    that is later removed without the guard, and readers must cope with it.
    """

    def __init__(self, db_path: Path) -> None:
        """
        Initialize the store with a database path
        """
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection with row factory."""
        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _connection(self, action: str) -> Iterator[sqlite3.Connection]:
        """Yield a connection, commit on success and translate sqlite errors."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise ValueError(f"Catalog constraint violated while {action}: {e}") from e
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Database error while {action}: {e}")
            raise CatalogStoreError(f"Database error while {action}: {e}") from e
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Create the catalog tables if they don't exist."""
        with self._connection("creating schema") as conn:
            conn.executescript("""
            CREATE TABLE IF NOT EXISTS authors (
                id TEXT PRIMARY KEY,
                first_name TEXT NOT NULL,
                family_name TEXT NOT NULL,
                date_of_birth TEXT,
                date_of_death TEXT
            );

            CREATE TABLE IF NOT EXISTS genres (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS books (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                author_id TEXT NOT NULL,
                summary TEXT NOT NULL,
                isbn TEXT NOT NULL,
                price TEXT NOT NULL,
                genre_ids TEXT NOT NULL DEFAULT '[]'
            );

            CREATE TABLE IF NOT EXISTS book_instances (
                id TEXT PRIMARY KEY,
                book_id TEXT NOT NULL,
                imprint TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'Maintenance',
                due_back TEXT
            );

            CREATE INDEX IF NOT EXISTS idx_books_author ON books(author_id);
            CREATE INDEX IF NOT EXISTS idx_instances_book ON book_instances(book_id);
            CREATE INDEX IF NOT EXISTS idx_instances_status ON book_instances(status);
            """)

    def _where(
        self, table: _Table, filters: Optional[Mapping[str, Any]]
    ) -> Tuple[str, List[Any]]:
        if not filters:
            return "", []

        clauses = []
        params = []
        for field_name, value in filters.items():
            if field_name not in table.filterable:
                raise ValueError(f"Cannot filter {table.name} by '{field_name}'")
            if value is None:
                clauses.append(f"{field_name} IS NULL")
            else:
                clauses.append(f"{field_name} = ?")
                params.append(_to_db(value))
        return " WHERE " + " AND ".join(clauses), params

    def _order_by(self, table: _Table, sort: Optional[Sequence[str]]) -> str:
        if not sort:
            return ""

        terms = []
        for key in sort:
            descending = key.startswith("-")
            column = key.lstrip("-")
            if column not in table.filterable:
                raise ValueError(f"Cannot sort {table.name} by '{column}'")
            expression = f"CAST({column} AS REAL)" if column in table.numeric else column
            terms.append(f"{expression} {'DESC' if descending else 'ASC'}")
        return " ORDER BY " + ", ".join(terms)

    def find_by_id(self, kind: EntityKind, entity_id: UUID) -> Optional[Entity]:
        """Retrieve an entity by its UUID."""
        table = _TABLES[kind]
        with self._connection(f"reading {table.name}") as conn:
            row = conn.execute(
                f"SELECT * FROM {table.name} WHERE id = ?",
                (str(entity_id),)
            ).fetchone()

        if row is None:
            return None
        return table.from_row(row)

    def find(
        self,
        kind: EntityKind,
        filters: Optional[Mapping[str, Any]] = None,
        sort: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> List[Entity]:
        """Retrieve entities matching every filter."""
        table = _TABLES[kind]
        where, params = self._where(table, filters)
        query = f"SELECT * FROM {table.name}{where}{self._order_by(table, sort)}"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        with self._connection(f"querying {table.name}") as conn:
            rows = conn.execute(query, params).fetchall()

        return [table.from_row(row) for row in rows]

    def count(self, kind: EntityKind, filters: Optional[Mapping[str, Any]] = None) -> int:
        """Count entities matching every filter."""
        table = _TABLES[kind]
        where, params = self._where(table, filters)
        with self._connection(f"counting {table.name}") as conn:
            result = conn.execute(
                f"SELECT COUNT(*) AS cnt FROM {table.name}{where}", params
            ).fetchone()
        return result["cnt"]

    def save(self, entity: Entity) -> Entity:
        """Insert or fully replace an entity."""
        table = _TABLES[kind_of(entity)]
        row = table.to_row(entity)
        columns = ", ".join(table.columns)
        placeholders = ", ".join(f":{c}" for c in table.columns)
        updates = ", ".join(f"{c}=excluded.{c}" for c in table.columns if c != "id")

        with self._connection(f"saving into {table.name}") as conn:
            conn.execute(
                f"INSERT INTO {table.name} ({columns}) VALUES ({placeholders}) "
                f"ON CONFLICT(id) DO UPDATE SET {updates}",
                row,
            )
        return entity

    def remove(self, kind: EntityKind, entity_id: UUID) -> bool:
        """Delete an entity. Returns True if deleted."""
        table = _TABLES[kind]
        with self._connection(f"deleting from {table.name}") as conn:
            cursor = conn.execute(
                f"DELETE FROM {table.name} WHERE id = ?",
                (str(entity_id),)
            )
            return cursor.rowcount > 0

    def remove_unreferenced(
        self,
        kind: EntityKind,
        entity_id: UUID,
        referenced_by: EntityKind,
        reference_field: str,
    ) -> bool:
        """Delete an entity in one statement, only if nothing references it."""
        table = _TABLES[kind]
        referencing = _TABLES[referenced_by]
        if reference_field not in referencing.filterable:
            raise ValueError(f"Unknown reference field '{reference_field}' on {referencing.name}")

        with self._connection(f"deleting from {table.name}") as conn:
            cursor = conn.execute(
                f"DELETE FROM {table.name} WHERE id = ? AND NOT EXISTS "
                f"(SELECT 1 FROM {referencing.name} WHERE {reference_field} = ?)",
                (str(entity_id), str(entity_id)),
            )
            return cursor.rowcount > 0
