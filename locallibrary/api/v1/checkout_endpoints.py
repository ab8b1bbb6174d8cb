"""
API endpoints for the mock checkout flow.

GET /books/{id}/checkout hands the browser a client token for the payment
form; POST /payment submits the sale. The payment response is deliberately
minimal: only whether the sale succeeded.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from locallibrary.domain.exceptions import LibraryError
from locallibrary.domain.services import CheckoutService
from locallibrary.api.v1 import schemas as api
from locallibrary.api.v1.converters import api_payment_form_to_domain, domain_checkout_to_api
from locallibrary.api.v1.dependencies import get_checkout_service
from locallibrary.api.v1.errors import to_http_error

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/books/{book_id}/checkout", response_model=api.CheckoutResponse)
async def begin_checkout(
    book_id: UUID,
    service: CheckoutService = Depends(get_checkout_service),
) -> api.CheckoutResponse:
    """
    Book, copies and a gateway client token for the checkout page.

    Raises:
        404: Book not found (no token is requested)
        502: The gateway could not issue a client token
    """
    try:
        bundle = await service.begin_checkout(book_id)
    except (LibraryError, ValueError) as e:
        raise to_http_error(e)
    return domain_checkout_to_api(bundle)


@router.post(
    "/payment",
    response_model=api.PaymentResponse,
    responses={status.HTTP_402_PAYMENT_REQUIRED: {"model": api.PaymentResponse}},
)
async def submit_payment(
    form: api.PaymentForm,
    service: CheckoutService = Depends(get_checkout_service),
):
    """
    Submit a sale with immediate settlement.

    Returns {"success": true} for a successful outcome and a 402 with
    {"success": false} for a declined or failed one. A gateway that cannot
    be reached is a 502, not a decline.
    """
    try:
        outcome = await service.submit_payment(api_payment_form_to_domain(form))
    except (LibraryError, ValueError) as e:
        raise to_http_error(e)

    if outcome.success:
        return api.PaymentResponse(success=True)

    logger.info(f"Payment failed: {outcome.header}")
    return JSONResponse(
        status_code=status.HTTP_402_PAYMENT_REQUIRED,
        content=api.PaymentResponse(success=False).model_dump(),
    )
