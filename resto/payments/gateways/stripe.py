"""Stripe payment gateway"""

import asyncio
from typing import Dict, Optional

import stripe
import structlog

from resto.config import settings
from resto.payments.gateways.base import BasePaymentGateway, GatewayError, GatewayIntent

logger = structlog.get_logger()


class StripeGateway(BasePaymentGateway):
    """Stripe PaymentIntents with manual capture"""

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.stripe_secret_key

    def _to_intent(self, intent) -> GatewayIntent:
        return GatewayIntent(
            id=intent.id,
            status=intent.status,
            amount=intent.amount,
            currency=str(intent.currency).upper(),
            client_secret=getattr(intent, "client_secret", None),
            metadata=dict(intent.metadata or {}),
        )

    async def _call(self, operation: str, func, *args, **kwargs) -> GatewayIntent:
        # The SDK is synchronous
        try:
            intent = await asyncio.to_thread(func, *args, api_key=self.api_key, **kwargs)
        except stripe.StripeError as e:
            logger.warning(
                "Stripe request failed",
                operation=operation,
                code=e.code,
                error=str(e),
            )
            raise GatewayError(e.user_message or str(e), code=e.code)
        return self._to_intent(intent)

    async def create_hold(
        self,
        amount: int,
        currency: str,
        metadata: Dict[str, str],
        receipt_email: Optional[str] = None,
    ) -> GatewayIntent:
        params = {
            "amount": amount,
            "currency": currency.lower(),
            "capture_method": "manual",
            "metadata": metadata,
            "automatic_payment_methods": {"enabled": True},
        }
        if receipt_email:
            params["receipt_email"] = receipt_email

        return await self._call("create_hold", stripe.PaymentIntent.create, **params)

    async def capture(self, intent_id: str, idempotency_key: Optional[str] = None) -> GatewayIntent:
        return await self._call(
            "capture",
            stripe.PaymentIntent.capture,
            intent_id,
            idempotency_key=idempotency_key,
        )

    async def cancel(self, intent_id: str, idempotency_key: Optional[str] = None) -> GatewayIntent:
        return await self._call(
            "cancel",
            stripe.PaymentIntent.cancel,
            intent_id,
            idempotency_key=idempotency_key,
        )

    async def retrieve(self, intent_id: str) -> GatewayIntent:
        return await self._call("retrieve", stripe.PaymentIntent.retrieve, intent_id)
