"""
Request body serializers for the marketplace API.

Fields are optional at this layer so that missing-field errors carry the
services' own messages; these serializers only coerce types.
"""

from rest_framework import serializers


class ServiceRequestWriteSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    budget = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    deadline = serializers.DateTimeField(required=False, allow_null=True)
    status = serializers.CharField(required=False, allow_blank=True, help_text="Only CANCELLED is accepted")


class ServiceOfferingWriteSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    delivery_time = serializers.CharField(max_length=100, required=False, allow_blank=True)
    features = serializers.ListField(child=serializers.CharField(max_length=200), required=False)
    is_active = serializers.BooleanField(required=False)


class ProposalCreateSerializer(serializers.Serializer):
    request_id = serializers.UUIDField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    delivery_time = serializers.CharField(max_length=100, required=False, allow_blank=True)


class ProposalStatusSerializer(serializers.Serializer):
    status = serializers.CharField(required=False, allow_blank=True, help_text="ACCEPTED, REJECTED or COMPLETED")


class TransactionUpdateSerializer(serializers.Serializer):
    status = serializers.CharField(required=False, allow_null=True)
    client_rating = serializers.IntegerField(required=False, allow_null=True)
    client_review = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    provider_rating = serializers.IntegerField(required=False, allow_null=True)
    provider_review = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class PaymentRequestSerializer(serializers.Serializer):
    transaction_id = serializers.UUIDField(required=False, allow_null=True)
    payment_method = serializers.CharField(required=False, allow_blank=True, help_text="card, eft or wallet")


# ===== Response Serializers (schema only) =====


class PaginationSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    limit = serializers.IntegerField()
    pages = serializers.IntegerField()


class PaymentReceiptSerializer(serializers.Serializer):
    id = serializers.CharField()
    transaction_id = serializers.CharField()
    amount = serializers.CharField()
    payment_method = serializers.CharField()
    status = serializers.CharField()
    date = serializers.DateTimeField()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
