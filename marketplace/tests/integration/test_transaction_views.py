"""
Integration tests for transaction status changes, reviews and payments.
"""

from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.domain.state_machine import ProposalStatus, RequestStatus, TransactionStatus
from marketplace.models import ServiceTransaction
from marketplace.tests.factories import ServiceTransactionFactory, UserFactory
from notifications.models import Notification


class TransactionTestCase(TestCase):
    initial_status = TransactionStatus.IN_PROGRESS

    def setUp(self):
        container.reset()
        self.client = APIClient()
        self.service_transaction = ServiceTransactionFactory(status=self.initial_status)
        self.buyer = self.service_transaction.client
        self.seller = self.service_transaction.provider
        self.url = reverse("marketplace:transaction-detail", args=[self.service_transaction.id])

    def put_as(self, user, payload):
        self.client.force_authenticate(user=user)
        return self.client.put(self.url, payload, format="json")


class TransactionStatusTests(TransactionTestCase):
    def test_client_completes_and_cascades(self):
        response = self.put_as(self.buyer, {"status": "COMPLETED"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], TransactionStatus.COMPLETED)
        self.assertIsNotNone(response.data["completed_at"])

        self.service_transaction.refresh_from_db()
        proposal = self.service_transaction.proposal
        self.assertEqual(proposal.status, ProposalStatus.COMPLETED)
        self.assertEqual(proposal.request.status, RequestStatus.COMPLETED)

    def test_completion_notifies_provider(self):
        self.put_as(self.buyer, {"status": "COMPLETED"})

        notification = Notification.objects.get(user=self.seller)
        self.assertEqual(notification.type, "TRANSACTION_COMPLETED")
        self.assertEqual(notification.title, "Transaction Completed")

    def test_provider_cannot_complete(self):
        response = self.put_as(self.seller, {"status": "COMPLETED"})

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_either_party_can_dispute(self):
        response = self.put_as(self.seller, {"status": "DISPUTED"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        notification = Notification.objects.get(user=self.buyer)
        self.assertEqual(notification.title, "Transaction Updated")
        self.assertIn("DISPUTED", notification.message)

    def test_cancel_in_progress(self):
        response = self.put_as(self.seller, {"status": "CANCELLED"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], TransactionStatus.CANCELLED)

    def test_cannot_cancel_completed(self):
        self.put_as(self.buyer, {"status": "COMPLETED"})

        response = self.put_as(self.buyer, {"status": "CANCELLED"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Cannot cancel a completed transaction")
        self.service_transaction.refresh_from_db()
        self.assertEqual(self.service_transaction.status, TransactionStatus.COMPLETED)

    def test_invalid_status_value(self):
        response = self.put_as(self.buyer, {"status": "FINISHED"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Invalid status value")

    def test_outsider_is_forbidden(self):
        response = self.put_as(UserFactory(), {"status": "CANCELLED"})

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_empty_update(self):
        response = self.put_as(self.buyer, {})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class PendingTransactionStatusTests(TransactionTestCase):
    initial_status = TransactionStatus.PENDING

    def test_dispute_from_pending_is_refused(self):
        response = self.put_as(self.buyer, {"status": "DISPUTED"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.service_transaction.refresh_from_db()
        self.assertEqual(self.service_transaction.status, TransactionStatus.PENDING)

    def test_client_starts_transaction(self):
        response = self.put_as(self.buyer, {"status": "IN_PROGRESS"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Notification.objects.get(user=self.seller).type, "TRANSACTION_IN_PROGRESS")

    def test_provider_cannot_start_transaction(self):
        response = self.put_as(self.seller, {"status": "IN_PROGRESS"})

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class TransactionReviewTests(TransactionTestCase):
    initial_status = TransactionStatus.COMPLETED

    def test_rating_bounds_are_inclusive(self):
        self.assertEqual(self.put_as(self.buyer, {"client_rating": 1}).status_code, status.HTTP_200_OK)
        self.assertEqual(self.put_as(self.buyer, {"client_rating": 5}).status_code, status.HTTP_200_OK)

    def test_rating_out_of_range(self):
        for rating in (0, 6):
            response = self.put_as(self.buyer, {"client_rating": rating})

            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(response.data["error"], "Rating must be between 1 and 5")

        self.service_transaction.refresh_from_db()
        self.assertIsNone(self.service_transaction.client_rating)

    def test_client_review_is_recorded_and_provider_fields_ignored(self):
        response = self.put_as(
            self.buyer,
            {"client_rating": 4, "client_review": "Good job", "provider_rating": 1, "provider_review": "ignored"},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.service_transaction.refresh_from_db()
        self.assertEqual(self.service_transaction.client_rating, 4)
        self.assertEqual(self.service_transaction.client_review, "Good job")
        self.assertIsNone(self.service_transaction.provider_rating)
        self.assertIsNone(self.service_transaction.provider_review)

    def test_provider_reviews_independently(self):
        response = self.put_as(self.seller, {"provider_rating": 5, "provider_review": "Lovely client"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.service_transaction.refresh_from_db()
        self.assertEqual(self.service_transaction.provider_rating, 5)
        self.assertIsNone(self.service_transaction.client_rating)

    def test_review_notifies_reviewed_party(self):
        self.put_as(self.buyer, {"client_rating": 5})

        notification = Notification.objects.get(user=self.seller, type="NEW_REVIEW")
        self.assertIn("5-star", notification.message)

    def test_review_does_not_change_status(self):
        self.put_as(self.seller, {"provider_rating": 3})

        self.service_transaction.refresh_from_db()
        self.assertEqual(self.service_transaction.status, TransactionStatus.COMPLETED)

    def test_non_integer_rating(self):
        response = self.put_as(self.buyer, {"client_rating": "great"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class TransactionListTests(TestCase):
    def setUp(self):
        container.reset()
        self.client = APIClient()
        self.user = UserFactory()
        self.as_client = ServiceTransactionFactory(proposal__request__requested_by=self.user)
        self.as_provider = ServiceTransactionFactory(
            proposal__provider=self.user, status=TransactionStatus.COMPLETED
        )
        ServiceTransactionFactory()
        self.client.force_authenticate(user=self.user)
        self.url = reverse("marketplace:transaction-list")

    def test_lists_both_roles_by_default(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["pagination"]["total"], 2)

    def test_filter_by_role(self):
        response = self.client.get(self.url, {"role": "provider"})

        self.assertEqual([item["id"] for item in response.data["items"]], [str(self.as_provider.id)])

    def test_filter_by_status(self):
        response = self.client.get(self.url, {"status": "COMPLETED"})

        self.assertEqual(response.data["pagination"]["total"], 1)

    def test_unknown_role(self):
        response = self.client.get(self.url, {"role": "admin"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_retrieve_by_outsider(self):
        self.client.force_authenticate(user=UserFactory())

        response = self.client.get(reverse("marketplace:transaction-detail", args=[self.as_client.id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class PaymentTests(TestCase):
    def setUp(self):
        container.reset()
        self.client = APIClient()
        self.service_transaction = ServiceTransactionFactory(proposal__price=Decimal("750.00"))
        self.url = reverse("marketplace:payment-list")

    def pay_as(self, user, **overrides):
        payload = {"transaction_id": str(self.service_transaction.id), "payment_method": "card"}
        payload.update(overrides)
        self.client.force_authenticate(user=user)
        return self.client.post(self.url, payload, format="json")

    def test_client_pays_and_starts_transaction(self):
        response = self.pay_as(self.service_transaction.client)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Payment processed successfully")
        self.assertEqual(response.data["transaction"]["status"], TransactionStatus.IN_PROGRESS)
        self.assertEqual(response.data["payment"]["amount"], "750.00")
        self.assertEqual(response.data["payment"]["status"], "COMPLETED")

        self.service_transaction.refresh_from_db()
        self.assertEqual(self.service_transaction.status, TransactionStatus.IN_PROGRESS)

    def test_payment_notifies_provider(self):
        self.pay_as(self.service_transaction.client)

        notification = Notification.objects.get(user=self.service_transaction.provider)
        self.assertEqual(notification.title, "Transaction Started")

    def test_provider_cannot_pay(self):
        response = self.pay_as(self.service_transaction.provider)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_cannot_pay_twice(self):
        self.pay_as(self.service_transaction.client)

        response = self.pay_as(self.service_transaction.client)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Payment can only be made for pending transactions")

    def test_missing_payment_method(self):
        response = self.pay_as(self.service_transaction.client, payment_method="")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Transaction ID and payment method are required")

    def test_unsupported_payment_method(self):
        response = self.pay_as(self.service_transaction.client, payment_method="cheque")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.service_transaction.refresh_from_db()
        self.assertEqual(self.service_transaction.status, TransactionStatus.PENDING)
        self.assertFalse(ServiceTransaction.objects.filter(status=TransactionStatus.IN_PROGRESS).exists())

    def test_unknown_transaction(self):
        response = self.pay_as(
            self.service_transaction.client, transaction_id="0d7f3f1c-3f55-4f1e-9a0e-5f7a0c1b2d3e"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
