import uuid

from django.contrib.auth import get_user_model
from django.db import models
from django.db.models import Q

from marketplace.domain.state_machine import ProposalStatus

from .request import ServiceRequest

User = get_user_model()


class ServiceProposal(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    request = models.ForeignKey(ServiceRequest, on_delete=models.CASCADE, related_name="proposals")
    provider = models.ForeignKey(User, on_delete=models.CASCADE, related_name="service_proposals")

    description = models.TextField()
    price = models.DecimalField(max_digits=10, decimal_places=2)
    delivery_time = models.CharField(max_length=100)
    status = models.CharField(max_length=20, choices=ProposalStatus.choices, default=ProposalStatus.PENDING)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        constraints = [
            models.UniqueConstraint(fields=["request", "provider"], name="unique_proposal_per_provider"),
            models.UniqueConstraint(
                fields=["request"],
                condition=Q(status=ProposalStatus.ACCEPTED),
                name="single_accepted_proposal_per_request",
            ),
        ]

    def __str__(self):
        return f"Proposal {str(self.id)[:8]} on {self.request_id} ({self.status})"

    @property
    def has_transaction(self) -> bool:
        return hasattr(self, "transaction")
