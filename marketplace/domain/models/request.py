import uuid

from django.contrib.auth import get_user_model
from django.db import models

from marketplace.domain.state_machine import RequestStatus

User = get_user_model()


class ServiceRequest(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    requested_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name="service_requests")

    title = models.CharField(max_length=200)
    description = models.TextField()
    category = models.CharField(max_length=100, db_index=True)
    budget = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    deadline = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=RequestStatus.choices, default=RequestStatus.OPEN)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [models.Index(fields=["status", "category"], name="request_status_category_idx")]

    def __str__(self):
        return f"{self.title} ({self.status})"
