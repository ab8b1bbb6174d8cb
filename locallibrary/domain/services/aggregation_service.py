"""
Dashboard aggregation over the catalog.
"""

import logging

from ..entities import BookInstanceStatus
from ..ports import CatalogStore, EntityKind
from ..utils.concurrency import fan_out, run_blocking
from ..value_objects import CatalogSummary

logger = logging.getLogger(__name__)


class AggregationService:
    """
    Computes the catalog summary shown on the home page.

    The five counts are independent queries issued concurrently; no
    transaction ties them together, so e.g. the available count is only
    expected (not guaranteed) to be <= the total instance count.
    """

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    def _count(self, kind: EntityKind, **filters):
        return lambda: run_blocking(self._store.count, kind, filters or None)

    async def summarize(self) -> CatalogSummary:
        """
        Count books, instances, available instances, authors and genres.

        Raises:
            The first error raised by any count; no partial summary is returned.
        """
        counts = await fan_out(
            book_count=self._count(EntityKind.BOOK),
            book_instance_count=self._count(EntityKind.BOOK_INSTANCE),
            available_instance_count=self._count(
                EntityKind.BOOK_INSTANCE, status=BookInstanceStatus.AVAILABLE.value
            ),
            author_count=self._count(EntityKind.AUTHOR),
            genre_count=self._count(EntityKind.GENRE),
        )

        summary = CatalogSummary(**counts)
        logger.debug(f"Catalog summary: {summary}")
        return summary
