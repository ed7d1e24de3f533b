"""
ProviderStatsService - provider reputation figures

Average client rating (rounded to one decimal, 0 when unrated) and number of
completed transactions, shown next to every offering and proposal.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List

from django.db.models import Avg, Count, Q

from marketplace.domain.state_machine import TransactionStatus
from marketplace.models import ServiceTransaction

from .base import BaseService, ServiceResult, service_ok

REVIEW_LIMIT = 10


def _round_rating(value) -> float:
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class ProviderStatsService(BaseService):
    def stats_for(self, provider_ids: Iterable) -> Dict[str, dict]:
        """Return ``{provider_id: {"rating", "completed_services"}}`` using one grouped query."""
        ids = {str(pid) for pid in provider_ids}
        stats = {pid: {"rating": 0.0, "completed_services": 0} for pid in ids}
        if not ids:
            return stats

        rows = (
            ServiceTransaction.objects.filter(provider_id__in=ids)
            .values("provider_id")
            .annotate(
                average=Avg("client_rating"),
                completed=Count("id", filter=Q(status=TransactionStatus.COMPLETED)),
            )
        )
        for row in rows:
            stats[str(row["provider_id"])] = {
                "rating": _round_rating(row["average"]),
                "completed_services": row["completed"],
            }
        return stats

    @BaseService.log_performance
    def recent_reviews(self, provider_id, limit: int = REVIEW_LIMIT) -> ServiceResult[List[dict]]:
        """Latest client reviews left on the provider's transactions."""
        transactions = (
            ServiceTransaction.objects.filter(
                provider_id=provider_id, client_rating__isnull=False, client_review__isnull=False
            )
            .select_related("client")
            .order_by("-completed_at", "-updated_at")[:limit]
        )
        reviews = [
            {
                "id": str(t.id),
                "rating": t.client_rating,
                "comment": t.client_review,
                "created_at": t.completed_at,
                "reviewer": {"id": str(t.client.id), "name": t.client.name, "image": t.client.image},
            }
            for t in transactions
        ]
        return service_ok(reviews)
