"""Deposit hold protocol on top of a payment gateway"""

from dataclasses import dataclass
from typing import Optional

import structlog

from resto.booking.errors import PaymentError
from resto.payments.gateways.base import BasePaymentGateway, GatewayError

logger = structlog.get_logger()

SUPPORTED_CURRENCIES = ("SGD", "USD", "MYR")

# Intent statuses after which there is no hold left
SETTLED_STATUSES = ("succeeded", "canceled")

AMOUNT_TOO_SMALL_MESSAGE = (
    "The deposit amount is too low for our payment processor to handle. "
    "Please contact the restaurant directly to make your reservation."
)
HOLD_FAILED_MESSAGE = (
    "Failed to make card authorization hold. "
    "Please contact the restaurant directly to continue with the reservation."
)


@dataclass(frozen=True)
class DepositHold:
    """An authorized, not yet captured deposit"""
    intent_id: str
    client_secret: Optional[str]
    amount_cents: int
    currency: str


def _is_amount_too_small(error: GatewayError) -> bool:
    return error.code == "amount_too_small" or "Amount must be at least" in error.message


class DepositService:
    """
    Authorize, capture, void and verify deposit holds.
    Only verify is retried; capture and void run once with an idempotency key.
    """

    def __init__(self, gateway: BasePaymentGateway, verify_attempts: int = 3):
        self.gateway = gateway
        self.verify_attempts = max(1, verify_attempts)

    async def authorize(
        self,
        amount_cents: int,
        currency: str,
        restaurant_id: str,
        customer_email: str,
    ) -> DepositHold:
        if not currency:
            raise PaymentError("Currency is required")
        currency = currency.upper()
        if currency not in SUPPORTED_CURRENCIES:
            raise PaymentError(
                f"Invalid currency code: {currency}. "
                f"Supported currencies are: {', '.join(SUPPORTED_CURRENCIES)}"
            )
        if amount_cents <= 0:
            raise PaymentError("Deposit amount must be positive")

        try:
            intent = await self.gateway.create_hold(
                amount=amount_cents,
                currency=currency,
                metadata={"restaurant_id": str(restaurant_id)},
                receipt_email=customer_email,
            )
        except GatewayError as e:
            if _is_amount_too_small(e):
                raise PaymentError(AMOUNT_TOO_SMALL_MESSAGE, amount_too_small=True)
            raise PaymentError(HOLD_FAILED_MESSAGE)

        logger.info(
            "Deposit hold authorized",
            intent_id=intent.id,
            restaurant_id=str(restaurant_id),
            amount_cents=amount_cents,
            currency=currency,
        )

        return DepositHold(
            intent_id=intent.id,
            client_secret=intent.client_secret,
            amount_cents=intent.amount,
            currency=intent.currency,
        )

    async def capture(self, intent_id: str) -> None:
        try:
            await self.gateway.capture(intent_id, idempotency_key=f"capture-{intent_id}")
        except GatewayError as e:
            raise PaymentError(f"Failed to capture deposit: {e.message}")
        logger.info("Deposit captured", intent_id=intent_id)

    async def void(self, intent_id: str) -> None:
        try:
            await self.gateway.cancel(intent_id, idempotency_key=f"void-{intent_id}")
        except GatewayError as e:
            raise PaymentError(f"Failed to void deposit: {e.message}")
        logger.info("Deposit voided", intent_id=intent_id)

    async def verify(self, intent_id: str) -> bool:
        """True while the hold is neither captured nor voided"""
        last_error: Optional[GatewayError] = None
        for attempt in range(1, self.verify_attempts + 1):
            try:
                intent = await self.gateway.retrieve(intent_id)
            except GatewayError as e:
                last_error = e
                logger.warning(
                    "Deposit verification failed",
                    intent_id=intent_id,
                    attempt=attempt,
                    error=e.message,
                )
                continue
            return intent.status not in SETTLED_STATUSES

        raise PaymentError(f"Failed to verify deposit: {last_error.message}")
