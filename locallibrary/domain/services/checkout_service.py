"""
Checkout orchestration: client-token issuance and sale submission.

The payment gateway is injected by the caller, who owns its lifecycle.
"""

import logging
from uuid import UUID

from ..exceptions import EntityNotFoundError, GatewayError
from ..ports import CatalogStore, EntityKind, PaymentGateway
from ..utils.concurrency import fan_out, run_blocking
from ..value_objects import CheckoutBundle, Outcome, PaymentRequest, SaleRequest
from .catalog_service import load_book_detail, load_instances
from .transaction_classifier import classify, generic_failure

logger = logging.getLogger(__name__)


class CheckoutService:
    """
    Composes the catalog with the payment gateway.

    begin_checkout() gathers what the checkout page needs; submit_payment()
    runs a sale and classifies the gateway's answer into an Outcome.

    The amount is taken from the caller as-is; it is not compared with the
    book's recorded price.
    """

    def __init__(self, store: CatalogStore, gateway: PaymentGateway) -> None:
        self._store = store
        self._gateway = gateway

    async def begin_checkout(self, book_id: UUID) -> CheckoutBundle:
        """
        Load the book and its copies, then request a client token.

        Raises:
            EntityNotFoundError: If the book does not exist (gateway not called)
            GatewayError: If the client token cannot be generated
        """
        loaded = await fan_out(
            detail=lambda: load_book_detail(self._store, book_id),
            instances=lambda: load_instances(self._store, book_id),
        )
        if loaded["detail"] is None:
            raise EntityNotFoundError(EntityKind.BOOK.label, book_id)

        client_token = await run_blocking(self._gateway.generate_client_token, {})
        if not client_token:
            raise GatewayError("client token generation", "empty token")

        logger.info(f"Issued client token for checkout of book {book_id}")
        return CheckoutBundle(
            detail=loaded["detail"],
            instances=loaded["instances"],
            client_token=client_token,
        )

    async def submit_payment(self, request: PaymentRequest) -> Outcome:
        """
        Submit a sale (with settlement) and classify the result.

        Returns:
            Success or Failure outcome. Declines never raise.

        Raises:
            GatewayError: If the gateway cannot be reached
        """
        sale = SaleRequest(
            amount=request.amount,
            payment_method_nonce=request.nonce,
            customer=request.customer,
            submit_for_settlement=True,
        )
        result = await run_blocking(self._gateway.sale, sale)

        if result.transaction is None:
            if result.success:
                logger.warning("Gateway reported a successful sale without a transaction record")
            else:
                logger.info(f"Sale rejected without a transaction ({len(result.errors)} error(s))")
            return generic_failure(result.errors)

        outcome = classify(result.transaction.status, result.errors)
        logger.info(
            f"Sale {result.transaction.id or '-'} finished with status "
            f"'{result.transaction.status}' (success={outcome.success})"
        )
        return outcome
