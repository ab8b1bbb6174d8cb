"""
Tests for DeletionGuard.

A book is removed only while no copy references it; otherwise the result
is BLOCKED and lists every referencing copy.
"""

import pytest

from locallibrary.domain.entities import BookInstance
from locallibrary.domain.exceptions import CatalogStoreError
from locallibrary.domain.ports import EntityKind
from locallibrary.domain.services import DeletionGuard
from locallibrary.domain.utils.uuid7 import uuid7
from locallibrary.domain.value_objects import DeletionStatus


@pytest.mark.asyncio
class TestDeleteBook:

    async def test_unreferenced_book_is_deleted(self, store, catalog):
        # Arrange
        guard = DeletionGuard(store)
        book = catalog["dispossessed"]

        # Act
        result = await guard.delete_book(book.id)

        # Assert
        assert result.status is DeletionStatus.DELETED
        assert result.book == book
        assert store.find_by_id(EntityKind.BOOK, book.id) is None

    async def test_referenced_book_is_blocked(self, store, catalog):
        guard = DeletionGuard(store)
        book = catalog["earthsea"]

        result = await guard.delete_book(book.id)

        assert result.status is DeletionStatus.BLOCKED
        assert result.is_blocked
        assert len(result.dependents) == 3
        assert all(copy.book_id == book.id for copy in result.dependents)
        assert store.find_by_id(EntityKind.BOOK, book.id) == book

    async def test_blocked_deletion_does_not_mutate(self, store, catalog):
        await DeletionGuard(store).delete_book(catalog["hobbit"].id)

        assert "remove" not in store.calls
        assert "remove_unreferenced" not in store.calls

    async def test_unknown_book_is_not_found(self, store, catalog):
        result = await DeletionGuard(store).delete_book(uuid7())

        assert result.status is DeletionStatus.NOT_FOUND
        assert result.book is None

    async def test_copy_created_after_check_blocks_deletion(self, store, catalog):
        """The conditional delete refuses when a copy appears between check and act."""
        book = catalog["dispossessed"]
        late_copy = BookInstance.create_new(book.id, "Harper, 1974")
        store.before_remove = lambda: store.entities[EntityKind.BOOK_INSTANCE].update(
            {late_copy.id: late_copy}
        )

        result = await DeletionGuard(store).delete_book(book.id)

        assert result.status is DeletionStatus.BLOCKED
        assert result.dependents == (late_copy,)
        assert store.find_by_id(EntityKind.BOOK, book.id) == book

    async def test_book_removed_concurrently_is_not_found(self, store, catalog):
        book = catalog["dispossessed"]
        store.before_remove = lambda: store.entities[EntityKind.BOOK].pop(book.id)

        result = await DeletionGuard(store).delete_book(book.id)

        assert result.status is DeletionStatus.NOT_FOUND

    async def test_copy_that_comes_and_goes_does_not_block(self, store, catalog, monkeypatch):
        """A refused delete with no dependents on re-check is retried, not BLOCKED."""
        book = catalog["dispossessed"]
        passing_copy = BookInstance.create_new(book.id, "Avon, 1975")
        instances = store.entities[EntityKind.BOOK_INSTANCE]
        inserted = []

        def insert_once():
            if not inserted:
                inserted.append(passing_copy)
                instances[passing_copy.id] = passing_copy

        find = store.find

        def find_after_withdrawal(kind, *args, **kwargs):
            instances.pop(passing_copy.id, None)
            return find(kind, *args, **kwargs)

        store.before_remove = insert_once
        monkeypatch.setattr(store, "find", find_after_withdrawal)

        result = await DeletionGuard(store).delete_book(book.id)

        assert result.status is DeletionStatus.DELETED
        assert store.calls.count("remove_unreferenced") == 2
        assert store.find_by_id(EntityKind.BOOK, book.id) is None

    async def test_persistent_refusal_never_reports_empty_block(self, store, catalog, monkeypatch):
        book = catalog["dispossessed"]
        flicker = BookInstance.create_new(book.id, "Avon, 1975")
        instances = store.entities[EntityKind.BOOK_INSTANCE]
        find = store.find

        def find_after_withdrawal(kind, *args, **kwargs):
            instances.pop(flicker.id, None)
            return find(kind, *args, **kwargs)

        store.before_remove = lambda: instances.update({flicker.id: flicker})
        monkeypatch.setattr(store, "find", find_after_withdrawal)

        with pytest.raises(CatalogStoreError, match="refused 3 times"):
            await DeletionGuard(store).delete_book(book.id)

        assert store.calls.count("remove_unreferenced") == 3
        assert store.find_by_id(EntityKind.BOOK, book.id) == book

    async def test_store_failure_propagates(self, store, catalog):
        store.fail("find", CatalogStoreError("disk I/O error"))

        with pytest.raises(CatalogStoreError):
            await DeletionGuard(store).delete_book(catalog["dispossessed"].id)

        assert store.find_by_id(EntityKind.BOOK, catalog["dispossessed"].id) is not None


@pytest.mark.asyncio
class TestPreviewBookDeletion:

    async def test_preview_of_unreferenced_book(self, store, catalog):
        result = await DeletionGuard(store).preview_book_deletion(catalog["dispossessed"].id)

        assert result.status is DeletionStatus.DELETABLE
        assert result.dependents == ()

    async def test_preview_lists_dependents_without_deleting(self, store, catalog):
        book = catalog["hobbit"]

        result = await DeletionGuard(store).preview_book_deletion(book.id)

        assert result.status is DeletionStatus.BLOCKED
        assert len(result.dependents) == 2
        assert store.find_by_id(EntityKind.BOOK, book.id) == book

    async def test_preview_of_unknown_book(self, store):
        result = await DeletionGuard(store).preview_book_deletion(uuid7())
        assert result.status is DeletionStatus.NOT_FOUND
