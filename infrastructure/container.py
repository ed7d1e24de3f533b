"""
Dependency Injection Container
================================

Simple service locator for the marketplace, messaging and notification
services and the infrastructure they depend on (event bus, payment provider).

Usage:
    from infrastructure.container import container

    proposals = container.proposal_service()
    payment = container.payment()
"""

import logging
from typing import Optional

from .events import EventBus, get_event_bus
from .payments import PaymentFactory, PaymentProviderInterface

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for infrastructure and domain services.

    Implements lazy initialization and caching of service instances.
    Singleton pattern.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize container (only once)."""
        if not self._initialized:
            self._reset_instances()
            self._initialized = True
            logger.info("Service container initialized")

    def _reset_instances(self):
        self._event_bus: Optional[EventBus] = None
        self._payment: Optional[PaymentProviderInterface] = None

        # Domain Services
        self._provider_stats_service = None
        self._request_service = None
        self._offering_service = None
        self._proposal_service = None
        self._transaction_service = None
        self._chat_service = None
        self._notification_service = None

    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            self._event_bus = get_event_bus()
        return self._event_bus

    def payment(self, backend: Optional[str] = None) -> PaymentProviderInterface:
        """
        Get payment provider instance.

        Args:
            backend: Payment backend type ('simulated')
                    If None, uses PAYMENT_PROVIDER from settings

        Returns:
            PaymentProviderInterface implementation (cached)
        """
        if self._payment is None or backend is not None:
            self._payment = PaymentFactory.create(backend)
            logger.debug(f"Created payment service: {type(self._payment).__name__}")

        return self._payment

    def provider_stats_service(self):
        if self._provider_stats_service is None:
            from marketplace.services import ProviderStatsService

            self._provider_stats_service = ProviderStatsService()
        return self._provider_stats_service

    def request_service(self):
        """Get RequestService instance."""
        if self._request_service is None:
            from marketplace.services import RequestService

            self._request_service = RequestService(
                event_bus=self.event_bus(), stats_service=self.provider_stats_service()
            )
            logger.debug("Created RequestService")
        return self._request_service

    def offering_service(self):
        """Get OfferingService instance."""
        if self._offering_service is None:
            from marketplace.services import OfferingService

            self._offering_service = OfferingService(
                event_bus=self.event_bus(), stats_service=self.provider_stats_service()
            )
            logger.debug("Created OfferingService")
        return self._offering_service

    def proposal_service(self):
        """Get ProposalService instance."""
        if self._proposal_service is None:
            from marketplace.services import ProposalService

            self._proposal_service = ProposalService(
                event_bus=self.event_bus(), stats_service=self.provider_stats_service()
            )
            logger.debug("Created ProposalService")
        return self._proposal_service

    def transaction_service(self):
        """Get TransactionService instance."""
        if self._transaction_service is None:
            from marketplace.services import TransactionService

            # TransactionService charges through the configured payment provider
            self._transaction_service = TransactionService(event_bus=self.event_bus(), payment_provider=self.payment())
            logger.debug("Created TransactionService")
        return self._transaction_service

    def chat_service(self):
        """Get ChatService instance."""
        if self._chat_service is None:
            from chat.domain.services.chat_service import ChatService

            self._chat_service = ChatService(event_bus=self.event_bus())
            logger.debug("Created ChatService")
        return self._chat_service

    def notification_service(self):
        """Get NotificationService instance."""
        if self._notification_service is None:
            from notifications.domain.services.notification_service import NotificationService

            self._notification_service = NotificationService()
            logger.debug("Created NotificationService")
        return self._notification_service

    def reset(self):
        """
        Reset all cached service instances.

        Useful for testing or when switching between environments.
        """
        self._reset_instances()
        logger.info("Service container reset")


# Global singleton instance
container = ServiceContainer()
