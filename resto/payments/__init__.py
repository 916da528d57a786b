"""Deposit payments"""

from resto.payments.deposit import DepositHold, DepositService, SUPPORTED_CURRENCIES

__all__ = ["DepositHold", "DepositService", "SUPPORTED_CURRENCIES"]
