import uuid

from django.contrib.auth import get_user_model
from django.db import models
from django.db.models import Q

from marketplace.domain.state_machine import TransactionStatus

from .proposal import ServiceProposal

User = get_user_model()


class ServiceTransaction(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    proposal = models.OneToOneField(ServiceProposal, on_delete=models.PROTECT, related_name="transaction")
    client = models.ForeignKey(User, on_delete=models.CASCADE, related_name="client_transactions")
    provider = models.ForeignKey(User, on_delete=models.CASCADE, related_name="provider_transactions")

    amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=20, choices=TransactionStatus.choices, default=TransactionStatus.PENDING)

    # Reviews (set independently by each party)
    client_rating = models.PositiveSmallIntegerField(null=True, blank=True)
    client_review = models.TextField(null=True, blank=True)
    provider_rating = models.PositiveSmallIntegerField(null=True, blank=True)
    provider_review = models.TextField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        constraints = [
            models.CheckConstraint(
                condition=Q(client_rating__isnull=True) | Q(client_rating__gte=1, client_rating__lte=5),
                name="client_rating_between_1_and_5",
            ),
            models.CheckConstraint(
                condition=Q(provider_rating__isnull=True) | Q(provider_rating__gte=1, provider_rating__lte=5),
                name="provider_rating_between_1_and_5",
            ),
        ]

    def __str__(self):
        return f"Transaction {str(self.id)[:8]} ({self.status})"

    def is_party(self, user) -> bool:
        return user.pk in (self.client_id, self.provider_id)

    def counterparty_id(self, user):
        return self.provider_id if user.pk == self.client_id else self.client_id
