"""
FastAPI dependencies for dependency injection.

The store, the payment gateway and the services are built once when the
application starts (see main.create_app) and kept on app.state. Routes
get them through the providers below, so tests can inject fakes by building
their own ServiceContainer.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Request, status

from locallibrary.config import Settings
from locallibrary.domain.ports import CatalogStore, PaymentGateway
from locallibrary.domain.services import (
    AggregationService,
    CatalogService,
    CheckoutService,
    DeletionGuard,
)
from locallibrary.infrastructure.db.sqlite_catalog_store import SqliteCatalogStore
from locallibrary.infrastructure.payments.braintree_gateway import BraintreePaymentGateway

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Everything the routes need, wired around one store and one gateway."""

    store: CatalogStore
    catalog_service: CatalogService
    aggregation_service: AggregationService
    deletion_guard: DeletionGuard
    checkout_service: Optional[CheckoutService] = None

    @classmethod
    def wire(cls, store: CatalogStore, gateway: Optional[PaymentGateway]) -> "ServiceContainer":
        return cls(
            store=store,
            catalog_service=CatalogService(store),
            aggregation_service=AggregationService(store),
            deletion_guard=DeletionGuard(store),
            checkout_service=CheckoutService(store, gateway) if gateway is not None else None,
        )


def build_container(settings: Settings) -> ServiceContainer:
    """Create the production store and gateway from settings."""
    store = SqliteCatalogStore(settings.db_path)

    gateway = None
    if settings.has_braintree_credentials:
        gateway = BraintreePaymentGateway.from_credentials(
            environment=settings.braintree_environment,
            merchant_id=settings.braintree_merchant_id,
            public_key=settings.braintree_public_key,
            private_key=settings.braintree_private_key,
        )
    else:
        logger.warning("Braintree credentials not configured, checkout is disabled")

    return ServiceContainer.wire(store, gateway)


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_catalog_service(request: Request) -> CatalogService:
    return get_container(request).catalog_service


def get_aggregation_service(request: Request) -> AggregationService:
    return get_container(request).aggregation_service


def get_deletion_guard(request: Request) -> DeletionGuard:
    return get_container(request).deletion_guard


def get_checkout_service(request: Request) -> CheckoutService:
    """Provide the checkout service, or 503 when no gateway is configured."""
    service = get_container(request).checkout_service
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Payment gateway is not configured",
        )
    return service
