"""
Integration tests for the notification inbox endpoints.
"""

from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.tests.factories import NotificationFactory, UserFactory
from notifications.models import Notification


class NotificationInboxTests(TestCase):
    def setUp(self):
        container.reset()
        self.client = APIClient()
        self.user = UserFactory()
        self.client.force_authenticate(user=self.user)
        self.url = reverse("notifications:notification_list")

        now = timezone.now()
        self.old = NotificationFactory(user=self.user, title="Old")
        self.new = NotificationFactory(user=self.user, title="New")
        self.read = NotificationFactory(user=self.user, title="Read", is_read=True)
        # auto_now_add ignores the factory value, so set timestamps explicitly
        Notification.objects.filter(pk=self.old.pk).update(created_at=now - timedelta(hours=2))
        Notification.objects.filter(pk=self.new.pk).update(created_at=now)
        Notification.objects.filter(pk=self.read.pk).update(created_at=now - timedelta(hours=1))
        NotificationFactory()  # someone else's

    def test_newest_first(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["title"] for item in response.data["items"]], ["New", "Read", "Old"])
        self.assertEqual(response.data["unread_count"], 2)
        self.assertEqual(response.data["pagination"]["limit"], 20)

    def test_pagination(self):
        response = self.client.get(self.url, {"page": 2, "limit": 2})

        self.assertEqual([item["title"] for item in response.data["items"]], ["Old"])
        self.assertEqual(response.data["pagination"]["pages"], 2)

    def test_unread_only(self):
        response = self.client.get(self.url, {"unread_only": "true"})

        self.assertEqual({item["title"] for item in response.data["items"]}, {"New", "Old"})

    def test_unread_count_endpoint(self):
        response = self.client.get(reverse("notifications:unread_count"))

        self.assertEqual(response.data, {"unread_count": 2})

    def test_mark_one_read(self):
        url = reverse("notifications:notification_detail", args=[self.new.id])

        response = self.client.put(url, {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["is_read"])
        self.new.refresh_from_db()
        self.assertTrue(self.new.is_read)

    def test_mark_unread_again(self):
        url = reverse("notifications:notification_detail", args=[self.read.id])

        response = self.client.put(url, {"is_read": False}, format="json")

        self.assertFalse(response.data["is_read"])

    def test_cannot_touch_someone_elses_notification(self):
        other = NotificationFactory()
        url = reverse("notifications:notification_detail", args=[other.id])

        response = self.client.put(url, {"is_read": True}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        other.refresh_from_db()
        self.assertFalse(other.is_read)

    def test_unknown_notification(self):
        url = reverse("notifications:notification_detail", args=["5e0b8a11-6a2b-4f53-9b1e-2c4d6f8a0b1c"])

        response = self.client.put(url, {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_mark_all_read(self):
        response = self.client.put(reverse("notifications:mark_all_read"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"message": "All notifications marked as read", "updated": 2})
        self.assertFalse(Notification.objects.filter(user=self.user, is_read=False).exists())
        # Other users' inboxes are untouched
        self.assertEqual(Notification.objects.filter(is_read=False).count(), 1)
