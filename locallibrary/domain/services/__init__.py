"""
Domain services package.

Services orchestrate domain logic that doesn't naturally belong to a single
entity. They coordinate between entities and ports to implement use cases.

Following Hexagonal Architecture principles, services depend only on domain
entities, value objects, and port protocols (never on concrete implementations).
"""

from .aggregation_service import AggregationService
from .catalog_service import CatalogService
from .checkout_service import CheckoutService
from .deletion_guard import DeletionGuard
from .transaction_classifier import SUCCESS_STATUSES, classify, format_errors

__all__ = [
    "AggregationService",
    "CatalogService",
    "CheckoutService",
    "DeletionGuard",
    "SUCCESS_STATUSES",
    "classify",
    "format_errors",
]
