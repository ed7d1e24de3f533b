"""
Service Container Tests
========================

Unit tests for dependency injection container.
"""

from django.test import TestCase, override_settings

from chat.domain.services.chat_service import ChatService
from infrastructure.container import ServiceContainer, container
from infrastructure.events import get_event_bus
from infrastructure.payments import PaymentProviderInterface, SimulatedPaymentProvider
from marketplace.services import ProposalService, TransactionService
from notifications.domain.services.notification_service import NotificationService


class ServiceContainerTest(TestCase):
    """Test ServiceContainer implementation."""

    def setUp(self):
        """Set up test fixtures."""
        # Reset container before each test
        container.reset()

    def tearDown(self):
        container.reset()

    def test_container_is_singleton(self):
        """Test that ServiceContainer is a singleton."""
        container1 = ServiceContainer()
        container2 = ServiceContainer()

        self.assertIs(container1, container2)
        self.assertIs(container1, container)

    @override_settings(PAYMENT_PROVIDER="simulated")
    def test_get_payment_provider(self):
        payment = container.payment()

        self.assertIsInstance(payment, PaymentProviderInterface)
        self.assertIsInstance(payment, SimulatedPaymentProvider)

        # Second call should return cached instance
        self.assertIs(payment, container.payment())

    def test_domain_services_are_cached(self):
        proposals = container.proposal_service()

        self.assertIsInstance(proposals, ProposalService)
        self.assertIs(proposals, container.proposal_service())

    def test_services_share_the_global_event_bus(self):
        self.assertIs(container.proposal_service().event_bus, get_event_bus())
        self.assertIs(container.chat_service().event_bus, get_event_bus())
        self.assertIsInstance(container.chat_service(), ChatService)
        self.assertIsInstance(container.notification_service(), NotificationService)

    def test_transaction_service_uses_container_payment_provider(self):
        service = container.transaction_service()

        self.assertIsInstance(service, TransactionService)
        self.assertIs(service.payment_provider, container.payment())

    def test_reset_clears_cached_instances(self):
        first = container.proposal_service()
        container.reset()

        self.assertIsNot(first, container.proposal_service())
