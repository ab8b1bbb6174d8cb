"""
Referential-integrity guard for book deletion.

A book can only be removed while no BookInstance points at it. A blocked
deletion is a normal result carrying the dependents so the caller can show
them; it is never raised.
"""

import logging
from uuid import UUID

from ..exceptions import CatalogStoreError
from ..ports import CatalogStore, EntityKind
from ..utils.concurrency import fan_out, run_blocking
from ..value_objects import DeletionResult, DeletionStatus

logger = logging.getLogger(__name__)

MAX_DELETE_ATTEMPTS = 3


class DeletionGuard:
    """
    Check-then-act deletion of books.

    The check (book + dependents, fetched concurrently) is followed by the
    store's conditional delete, which refuses to remove a book that gained
    an instance after the check. No lock is held between the two phases.
    """

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    async def _load(self, book_id: UUID):
        loaded = await fan_out(
            book=lambda: run_blocking(self._store.find_by_id, EntityKind.BOOK, book_id),
            dependents=lambda: run_blocking(
                self._store.find, EntityKind.BOOK_INSTANCE, {"book_id": book_id}
            ),
        )
        return loaded["book"], tuple(loaded["dependents"])

    async def preview_book_deletion(self, book_id: UUID) -> DeletionResult:
        """Report whether a book could be deleted, without mutating anything."""
        book, dependents = await self._load(book_id)

        if book is None:
            return DeletionResult(status=DeletionStatus.NOT_FOUND)
        if dependents:
            return DeletionResult(status=DeletionStatus.BLOCKED, book=book, dependents=dependents)
        return DeletionResult(status=DeletionStatus.DELETABLE, book=book)

    async def delete_book(self, book_id: UUID) -> DeletionResult:
        """
        Delete a book if no instance references it.

        When the conditional delete is refused but a fresh check shows no
        dependents (the blocking instance came and went), the delete is
        attempted again, up to MAX_DELETE_ATTEMPTS times.

        Returns:
            DELETED when the book was removed,
            BLOCKED with every referencing instance otherwise,
            NOT_FOUND when the id does not resolve.

        Raises:
            CatalogStoreError: If the store keeps refusing a book that has
                no dependents when checked
        """
        for attempt in range(1, MAX_DELETE_ATTEMPTS + 1):
            book, dependents = await self._load(book_id)

            if book is None:
                return DeletionResult(status=DeletionStatus.NOT_FOUND)

            if dependents:
                logger.info(
                    f"Deletion of book {book_id} blocked by {len(dependents)} instance(s)"
                )
                return DeletionResult(
                    status=DeletionStatus.BLOCKED, book=book, dependents=dependents
                )

            removed = await run_blocking(
                self._store.remove_unreferenced,
                EntityKind.BOOK,
                book_id,
                EntityKind.BOOK_INSTANCE,
                "book_id",
            )
            if removed:
                logger.info(f"Deleted book {book_id}")
                return DeletionResult(status=DeletionStatus.DELETED, book=book)

            logger.warning(
                f"Deletion of book {book_id} refused by the store "
                f"(attempt {attempt}/{MAX_DELETE_ATTEMPTS}), checking again"
            )

        raise CatalogStoreError(
            f"Deletion of book {book_id} refused {MAX_DELETE_ATTEMPTS} times "
            f"while no instance referenced it"
        )
