"""
Payment Service Abstraction Layer
==================================

Provides a unified interface for charging marketplace transactions.
"""

from .factory import PaymentFactory
from .interface import PaymentException, PaymentProviderInterface, PaymentReceipt, PaymentStatus
from .simulated_provider import SUPPORTED_METHODS, SimulatedPaymentProvider

__all__ = [
    "PaymentProviderInterface",
    "PaymentReceipt",
    "PaymentStatus",
    "PaymentException",
    "SimulatedPaymentProvider",
    "SUPPORTED_METHODS",
    "PaymentFactory",
]
