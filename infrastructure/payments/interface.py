"""
Payment Provider Interface
===========================

Abstract base class defining the contract for charging a transaction.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict


class PaymentStatus(str, Enum):
    """Payment status enumeration."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass
class PaymentReceipt:
    """
    Represents a processed payment.

    Attributes:
        payment_id: Unique payment identifier issued by the provider
        transaction_id: Marketplace transaction the payment belongs to
        amount: Amount charged
        payment_method: Method chosen by the payer (e.g. 'card', 'eft')
        status: Outcome of the charge
        date: When the provider processed the charge
    """

    payment_id: str
    transaction_id: str
    amount: Decimal
    payment_method: str
    status: PaymentStatus
    date: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.payment_id,
            "transaction_id": self.transaction_id,
            "amount": str(self.amount),
            "payment_method": self.payment_method,
            "status": self.status.value,
            "date": self.date.isoformat(),
        }


class PaymentException(Exception):
    """Raised when the provider refuses or cannot process a charge."""

    pass


class PaymentProviderInterface(ABC):
    """
    Abstract interface for payment provider operations.

    Concrete implementations:
        - SimulatedPaymentProvider: accepts every charge without an external gateway
    """

    @abstractmethod
    def charge(self, transaction_id: str, amount: Decimal, payment_method: str) -> PaymentReceipt:
        """
        Charge ``amount`` for a marketplace transaction.

        Raises:
            PaymentException: If the charge cannot be processed
        """
        pass
