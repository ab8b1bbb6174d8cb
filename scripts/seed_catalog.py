#!/usr/bin/env python3
"""
Catalog seeding script.

This script fills an empty catalog database with a few authors, genres,
books and copies so the API has something to show.

Usage:
    python -m scripts.seed_catalog --db-path data/catalog.db
"""

import argparse
import logging
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

from locallibrary.domain.entities import Author, Book, BookInstance, BookInstanceStatus, Genre
from locallibrary.domain.ports import EntityKind
from locallibrary.infrastructure.db.sqlite_catalog_store import SqliteCatalogStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("data/catalog.db")


def seed(store: SqliteCatalogStore) -> int:
    """
    Insert the sample catalog.

    Returns:
        Number of entities saved
    """
    rothfuss = Author.create_new("Patrick", "Rothfuss", date_of_birth=date(1973, 6, 6))
    asimov = Author.create_new(
        "Isaac", "Asimov", date_of_birth=date(1920, 1, 2), date_of_death=date(1992, 4, 6)
    )
    fantasy = Genre.create_new("Fantasy")
    science_fiction = Genre.create_new("Science Fiction")

    wind = Book.create_new(
        title="The Name of the Wind",
        author_id=rothfuss.id,
        summary="Kvothe tells the story of how he became a legend.",
        isbn="9780756404741",
        price=Decimal("12.99"),
        genre_ids=[fantasy.id],
    )
    robots = Book.create_new(
        title="I, Robot",
        author_id=asimov.id,
        summary="Nine stories about robots and the Three Laws.",
        isbn="9780553382563",
        price=Decimal("9.50"),
        genre_ids=[science_fiction.id],
    )

    copies = [
        BookInstance.create_new(wind.id, "DAW, 2007", BookInstanceStatus.AVAILABLE),
        BookInstance.create_new(
            wind.id,
            "DAW, 2008",
            BookInstanceStatus.LOANED,
            due_back=date.today() + timedelta(days=14),
        ),
        BookInstance.create_new(robots.id, "Gnome Press, 1950", BookInstanceStatus.AVAILABLE),
        BookInstance.create_new(robots.id, "Bantam, 2004"),
    ]

    entities = [rothfuss, asimov, fantasy, science_fiction, wind, robots, *copies]
    for entity in entities:
        store.save(entity)
    return len(entities)


def main(db_path: Path, force: bool = False) -> int:
    """Seed the catalog at db_path unless it already holds books."""
    store = SqliteCatalogStore(db_path)

    existing = store.count(EntityKind.BOOK)
    if existing and not force:
        logger.error(f"Catalog at {db_path} already has {existing} book(s); use --force")
        sys.exit(1)

    saved = seed(store)
    logger.info(f"Seeded {saved} entities into {db_path}")
    return saved


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the catalog with sample data")
    parser.add_argument(
        "--db-path",
        type=Path,
        default=DEFAULT_DB_PATH,
        help="SQLite database path (default: data/catalog.db)"
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Seed even if the catalog already contains books"
    )

    args = parser.parse_args()
    main(args.db_path, args.force)
