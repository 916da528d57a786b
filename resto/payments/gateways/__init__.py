"""Payment gateway implementations"""

from resto.payments.gateways.base import BasePaymentGateway, GatewayError, GatewayIntent
from resto.payments.gateways.stripe import StripeGateway

__all__ = [
    "BasePaymentGateway",
    "GatewayError",
    "GatewayIntent",
    "StripeGateway",
]
