"""
Simulated Payment Provider
==========================

Approves every charge locally. Stands in for a real gateway until one is
integrated; receipts carry a generated identifier so clients can display them.
"""

import logging
import uuid
from decimal import Decimal

from django.utils import timezone

from .interface import PaymentException, PaymentProviderInterface, PaymentReceipt, PaymentStatus

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("card", "eft", "wallet")


class SimulatedPaymentProvider(PaymentProviderInterface):
    def charge(self, transaction_id: str, amount: Decimal, payment_method: str) -> PaymentReceipt:
        if payment_method not in SUPPORTED_METHODS:
            raise PaymentException(f"Unsupported payment method: {payment_method}")
        if amount <= 0:
            raise PaymentException("Payment amount must be positive")

        receipt = PaymentReceipt(
            payment_id=f"payment-{uuid.uuid4().hex[:16]}",
            transaction_id=str(transaction_id),
            amount=amount,
            payment_method=payment_method,
            status=PaymentStatus.COMPLETED,
            date=timezone.now(),
        )
        logger.info(f"Simulated payment {receipt.payment_id} for transaction {transaction_id}")
        return receipt
