"""
Tests for CatalogService: listings, detail pages and the edit forms.
"""

from decimal import Decimal

import pytest

from locallibrary.domain.exceptions import EntityNotFoundError, ValidationError
from locallibrary.domain.ports import EntityKind
from locallibrary.domain.services import CatalogService
from locallibrary.domain.utils.uuid7 import uuid7
from locallibrary.domain.value_objects import BookDraft


def draft(catalog, **overrides):
    fields = {
        "title": "The Tombs of Atuan",
        "author": str(catalog["le_guin"].id),
        "summary": "Tenar, priestess of the Nameless Ones.",
        "isbn": "9780689845369",
        "price": "6.99",
        "genre": (str(catalog["fantasy"].id),),
    }
    fields.update(overrides)
    return BookDraft(**fields)


@pytest.mark.asyncio
class TestListings:

    async def test_list_books_sorted_with_author_names(self, store, catalog):
        books = await CatalogService(store).list_books()

        assert [b.title for b in books] == [
            "A Wizard of Earthsea",
            "The Dispossessed",
            "The Hobbit",
        ]
        assert books[0].author_name == "Le Guin, Ursula"
        assert books[2].price == Decimal("8.99")
        assert books[2].url == catalog["hobbit"].url

    async def test_list_books_with_missing_author(self, store, catalog):
        store.remove(EntityKind.AUTHOR, catalog["tolkien"].id)

        books = await CatalogService(store).list_books()

        hobbit = next(b for b in books if b.id == catalog["hobbit"].id)
        assert hobbit.author_name is None

    async def test_list_genres_sorted_by_name(self, store, catalog):
        genres = await CatalogService(store).list_genres()
        assert [g.name for g in genres] == ["Classic", "Fantasy", "Poetry", "Science Fiction"]

    async def test_form_options(self, store, catalog):
        options = await CatalogService(store).get_book_form_options()

        assert len(options.authors) == 2
        assert len(options.genres) == 4


@pytest.mark.asyncio
class TestBookDetail:

    async def test_detail_resolves_references_and_copies(self, store, catalog):
        page = await CatalogService(store).get_book_detail(catalog["earthsea"].id)

        assert page.detail.book == catalog["earthsea"]
        assert page.detail.author == catalog["le_guin"]
        assert page.detail.genres == (catalog["fantasy"],)
        assert len(page.instances) == 3

    async def test_missing_genre_is_skipped(self, store, catalog):
        store.remove(EntityKind.GENRE, catalog["classic"].id)

        page = await CatalogService(store).get_book_detail(catalog["hobbit"].id)

        assert page.detail.genres == (catalog["fantasy"],)

    async def test_unknown_book(self, store, catalog):
        with pytest.raises(EntityNotFoundError, match="Book with id"):
            await CatalogService(store).get_book_detail(uuid7())


@pytest.mark.asyncio
class TestCreateAndUpdateBook:

    async def test_create_book(self, store, catalog):
        book = await CatalogService(store).create_book(draft(catalog, title="  The Tombs of Atuan "))

        assert book.title == "The Tombs of Atuan"
        assert book.author_id == catalog["le_guin"].id
        assert book.genre_ids == [catalog["fantasy"].id]
        assert store.find_by_id(EntityKind.BOOK, book.id) == book

    async def test_create_book_reports_every_issue(self, store, catalog):
        with pytest.raises(ValidationError) as excinfo:
            await CatalogService(store).create_book(BookDraft())

        fields = [issue.field for issue in excinfo.value.issues]
        assert fields == ["title", "author", "summary", "isbn", "price"]
        assert "save" not in store.calls

    async def test_create_book_rejects_malformed_ids(self, store, catalog):
        with pytest.raises(ValidationError) as excinfo:
            await CatalogService(store).create_book(
                draft(catalog, author="not-an-id", genre=("also-not-an-id",))
            )

        assert [issue.field for issue in excinfo.value.issues] == ["author", "genre"]

    async def test_update_book_keeps_id(self, store, catalog):
        book_id = catalog["dispossessed"].id

        updated = await CatalogService(store).update_book(
            book_id, draft(catalog, title="The Dispossessed: An Ambiguous Utopia")
        )

        assert updated.id == book_id
        assert store.find_by_id(EntityKind.BOOK, book_id).title == (
            "The Dispossessed: An Ambiguous Utopia"
        )
        assert store.count(EntityKind.BOOK) == 3

    async def test_update_unknown_book(self, store, catalog):
        with pytest.raises(EntityNotFoundError):
            await CatalogService(store).update_book(uuid7(), draft(catalog))


@pytest.mark.asyncio
class TestUpdateGenre:

    async def test_rename_preserves_id(self, store, catalog):
        genre_id = catalog["poetry"].id

        genre = await CatalogService(store).update_genre(genre_id, "  Verse ")

        assert genre.id == genre_id
        assert genre.name == "Verse"
        assert store.find_by_id(EntityKind.GENRE, genre_id).name == "Verse"
        assert store.count(EntityKind.GENRE) == 4

    async def test_empty_name_is_rejected(self, store, catalog):
        with pytest.raises(ValidationError) as excinfo:
            await CatalogService(store).update_genre(catalog["poetry"].id, "   ")

        assert excinfo.value.issues[0].message == "Genre name required"

    async def test_unknown_genre(self, store):
        with pytest.raises(EntityNotFoundError, match="Genre with id"):
            await CatalogService(store).update_genre(uuid7(), "Horror")
