"""
Braintree implementation of the PaymentGateway port.

This adapter:
1. Implements a domain PORT (PaymentGateway)
2. Handles infrastructure concerns (the Braintree SDK, its result objects)
3. Translates SDK results into domain value objects (SaleResult)

The constructor accepts an optional `gateway` parameter:
- In production: a braintree.BraintreeGateway built from credentials
- In tests: a fake object exposing client_token.generate / transaction.sale

Braintree reports statuses in snake_case ('submitted_for_settlement'); the
domain works with the canonical CamelCase names ('SubmittedForSettlement').
"""

import logging
from typing import Any, Dict, Optional

import braintree

from locallibrary.domain.exceptions import GatewayError
from locallibrary.domain.ports import PaymentGateway
from locallibrary.domain.value_objects import (
    GatewayErrorDetail,
    SaleRequest,
    SaleResult,
    TransactionRecord,
)

logger = logging.getLogger(__name__)

_ENVIRONMENTS = {
    "sandbox": braintree.Environment.Sandbox,
    "production": braintree.Environment.Production,
    "development": braintree.Environment.Development,
}


def canonical_status(status: Any) -> str:
    """'submitted_for_settlement' -> 'SubmittedForSettlement'."""
    text = "" if status is None else str(status)
    if "_" not in text and text[:1].isupper():
        return text
    return "".join(part.capitalize() for part in text.split("_"))


class BraintreePaymentGateway(PaymentGateway):
    """
    Payment gateway backed by the Braintree SDK.

    Usage:
        # Production
        gateway = BraintreePaymentGateway.from_credentials(
            environment="sandbox",
            merchant_id="...",
            public_key="...",
            private_key="...",
        )
        token = gateway.generate_client_token()

        # Testing (with fake SDK gateway)
        gateway = BraintreePaymentGateway(gateway=fake_gateway)
    """

    def __init__(self, gateway: Any) -> None:
        """
        Args:
            gateway: A braintree.BraintreeGateway, or a fake with the same shape
        """
        self._gateway = gateway

    @classmethod
    def from_credentials(
        cls,
        environment: str,
        merchant_id: str,
        public_key: str,
        private_key: str,
    ) -> "BraintreePaymentGateway":
        """
        Build the adapter around a real Braintree SDK gateway.

        Raises:
            ValueError: If the environment name is unknown
        """
        try:
            env = _ENVIRONMENTS[environment.lower()]
        except KeyError:
            raise ValueError(
                f"environment must be one of {sorted(_ENVIRONMENTS)}, got '{environment}'"
            ) from None

        sdk_gateway = braintree.BraintreeGateway(
            braintree.Configuration(
                environment=env,
                merchant_id=merchant_id,
                public_key=public_key,
                private_key=private_key,
            )
        )
        return cls(gateway=sdk_gateway)

    def generate_client_token(self, options: Optional[Dict[str, Any]] = None) -> str:
        """Issue a client token for the browser drop-in form."""
        try:
            token = self._gateway.client_token.generate(options or {})
        except Exception as e:
            logger.error(f"Braintree client token generation failed: {e}")
            raise GatewayError("client token generation", str(e)) from e

        if not token:
            raise GatewayError("client token generation", "empty token")
        return token

    def sale(self, request: SaleRequest) -> SaleResult:
        """Submit a sale and translate the SDK result."""
        params = {
            "amount": request.amount,
            "payment_method_nonce": request.payment_method_nonce,
            "customer": {
                "first_name": request.customer.first_name,
                "last_name": request.customer.last_name,
                "email": request.customer.email,
            },
            "options": {"submit_for_settlement": request.submit_for_settlement},
        }

        try:
            result = self._gateway.transaction.sale(params)
        except Exception as e:
            logger.error(f"Braintree sale failed: {e}")
            raise GatewayError("sale", str(e)) from e

        return self._parse_result(result)

    def _parse_result(self, result: Any) -> SaleResult:
        """Translate a Braintree SuccessfulResult/ErrorResult into a SaleResult."""
        transaction = None
        sdk_transaction = getattr(result, "transaction", None)
        if sdk_transaction is not None:
            transaction = TransactionRecord(
                status=canonical_status(getattr(sdk_transaction, "status", None)),
                id=getattr(sdk_transaction, "id", None),
            )

        errors = []
        sdk_errors = getattr(result, "errors", None)
        if sdk_errors is not None:
            for error in getattr(sdk_errors, "deep_errors", None) or []:
                errors.append(
                    GatewayErrorDetail(
                        code=str(getattr(error, "code", "")),
                        message=str(getattr(error, "message", "")),
                    )
                )

        return SaleResult(
            success=bool(getattr(result, "is_success", False)),
            transaction=transaction,
            errors=tuple(errors),
        )
