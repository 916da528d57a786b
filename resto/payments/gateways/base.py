"""Base payment gateway interface"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional


class GatewayError(Exception):
    """Failure reported by the payment gateway"""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


@dataclass
class GatewayIntent:
    """Gateway-side view of a payment intent"""
    id: str
    status: str
    amount: int
    currency: str
    client_secret: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)


class BasePaymentGateway(ABC):
    """Abstract base class for payment gateways"""

    @abstractmethod
    async def create_hold(
        self,
        amount: int,
        currency: str,
        metadata: Dict[str, str],
        receipt_email: Optional[str] = None,
    ) -> GatewayIntent:
        """Authorize an amount with manual capture"""
        pass

    @abstractmethod
    async def capture(self, intent_id: str, idempotency_key: Optional[str] = None) -> GatewayIntent:
        """Settle a previously authorized hold"""
        pass

    @abstractmethod
    async def cancel(self, intent_id: str, idempotency_key: Optional[str] = None) -> GatewayIntent:
        """Release a hold without charging"""
        pass

    @abstractmethod
    async def retrieve(self, intent_id: str) -> GatewayIntent:
        """Fetch the current state of an intent"""
        pass
