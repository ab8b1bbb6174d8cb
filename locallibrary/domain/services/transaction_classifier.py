"""
Classification of gateway transactions into user-facing outcomes.

Pure functions: no I/O, no randomness, inputs are never mutated, and every
input (including None or non-string statuses) yields an Outcome.
"""

from typing import Iterable, Optional

from ..value_objects import GatewayErrorDetail, Outcome

SUCCESS_STATUSES = frozenset(
    {
        "Authorizing",
        "Authorized",
        "Settled",
        "Settling",
        "SettlementConfirmed",
        "SettlementPending",
        "SubmittedForSettlement",
    }
)

SUCCESS_HEADER = "Sweet Success!"
SUCCESS_ICON = "success"
SUCCESS_MESSAGE = (
    "Your test transaction has been successfully processed. "
    "See the gateway response and try again."
)

FAILURE_HEADER = "Transaction Failed"
FAILURE_ICON = "fail"


def format_errors(errors: Optional[Iterable[GatewayErrorDetail]]) -> str:
    """
    Render structured gateway errors as one diagnostic string.

    One "Error: <code>: <message>" line per entry, in iteration order.
    """
    if not errors:
        return ""
    return "".join(
        f"Error: {getattr(error, 'code', '')}: {getattr(error, 'message', '')}\n"
        for error in errors
    )


def classify(
    status: object,
    errors: Optional[Iterable[GatewayErrorDetail]] = None,
) -> Outcome:
    """
    Map a transaction status to a Success or Failure outcome.

    Args:
        status: Canonical gateway status (e.g. 'Settled')
        errors: Optional structured errors appended to a failure message

    Returns:
        Success if the status is in SUCCESS_STATUSES, Failure otherwise.
        A failure message always contains the literal status.
    """
    if isinstance(status, str) and status in SUCCESS_STATUSES:
        return Outcome(
            success=True,
            header=SUCCESS_HEADER,
            icon=SUCCESS_ICON,
            message=SUCCESS_MESSAGE,
        )

    message = (
        f"Your test transaction has a status of {status}. "
        "See the gateway response and try again."
    )
    details = format_errors(errors)
    if details:
        message = f"{message}\n{details}"

    return Outcome(success=False, header=FAILURE_HEADER, icon=FAILURE_ICON, message=message)


def generic_failure(errors: Optional[Iterable[GatewayErrorDetail]] = None) -> Outcome:
    """Failure outcome for a sale that produced no transaction record."""
    message = "Your test transaction could not be processed. See the gateway response and try again."
    details = format_errors(errors)
    if details:
        message = f"{message}\n{details}"
    return Outcome(success=False, header=FAILURE_HEADER, icon=FAILURE_ICON, message=message)
