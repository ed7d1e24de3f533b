"""
Model serializers for the marketplace API.

Provider reputation is not stored on the user row; views pass the figures
computed by ProviderStatsService in ``context["provider_stats"]`` keyed by
provider id, and ``ProviderSerializer`` merges them into the embedded user.
"""

from rest_framework import serializers

from authentication.api.serializers import UserSummarySerializer
from marketplace.models import ServiceOffering, ServiceProposal, ServiceRequest, ServiceTransaction

EMPTY_STATS = {"rating": 0.0, "completed_services": 0}


class ProviderField(serializers.Field):
    """Read-only user summary plus ``rating`` and ``completed_services``."""

    def __init__(self, **kwargs):
        kwargs["read_only"] = True
        super().__init__(**kwargs)

    def to_representation(self, user):
        data = dict(UserSummarySerializer(user).data)
        stats = self.context.get("provider_stats", {}).get(str(user.pk), EMPTY_STATS)
        data.update(stats)
        return data


class ServiceRequestSerializer(serializers.ModelSerializer):
    requested_by = UserSummarySerializer(read_only=True)
    proposal_count = serializers.SerializerMethodField()

    class Meta:
        model = ServiceRequest
        fields = (
            "id",
            "title",
            "description",
            "category",
            "budget",
            "deadline",
            "status",
            "requested_by",
            "proposal_count",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def get_proposal_count(self, obj) -> int:
        count = getattr(obj, "proposal_count", None)
        return count if count is not None else obj.proposals.count()


class ServiceRequestBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = ServiceRequest
        fields = ("id", "title", "category", "status", "requested_by_id")
        read_only_fields = fields


class ServiceOfferingSerializer(serializers.ModelSerializer):
    provider = ProviderField()

    class Meta:
        model = ServiceOffering
        fields = (
            "id",
            "title",
            "description",
            "category",
            "price",
            "delivery_time",
            "features",
            "is_active",
            "provider",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class ServiceProposalSerializer(serializers.ModelSerializer):
    request = ServiceRequestBriefSerializer(read_only=True)
    provider = ProviderField()
    has_transaction = serializers.BooleanField(read_only=True)

    class Meta:
        model = ServiceProposal
        fields = (
            "id",
            "request",
            "provider",
            "description",
            "price",
            "delivery_time",
            "status",
            "has_transaction",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class ServiceTransactionSerializer(serializers.ModelSerializer):
    proposal_id = serializers.UUIDField(read_only=True)
    request = ServiceRequestBriefSerializer(source="proposal.request", read_only=True)
    client = UserSummarySerializer(read_only=True)
    provider = UserSummarySerializer(read_only=True)

    class Meta:
        model = ServiceTransaction
        fields = (
            "id",
            "proposal_id",
            "request",
            "client",
            "provider",
            "amount",
            "status",
            "client_rating",
            "client_review",
            "provider_rating",
            "provider_review",
            "created_at",
            "updated_at",
            "completed_at",
        )
        read_only_fields = fields
