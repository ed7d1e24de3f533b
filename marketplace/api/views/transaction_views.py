from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.serializers import (
    ErrorResponseSerializer,
    PaymentReceiptSerializer,
    PaymentRequestSerializer,
    ServiceTransactionSerializer,
    TransactionUpdateSerializer,
)
from marketplace.services import TransactionService
from utils.pagination import parse_page_params
from utils.responses import error_response, validation_error_response


class TransactionViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> TransactionService:
        return container.transaction_service()

    @extend_schema(
        operation_id="transactions_list",
        summary="List my transactions",
        parameters=[
            OpenApiParameter(name="role", type=str, description="client or provider (default: either)"),
            OpenApiParameter(name="status", type=str, description="Filter by transaction status"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="limit", type=int, description="Items per page (default: 10)"),
        ],
        responses={200: ServiceTransactionSerializer(many=True), 400: ErrorResponseSerializer},
        tags=["Marketplace - Transactions"],
    )
    def list(self, request):
        page, limit = parse_page_params(request.query_params)
        result = self.get_service().list_transactions(
            request.user,
            role=request.query_params.get("role"),
            status=request.query_params.get("status"),
            page=page,
            limit=limit,
        )
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "items": ServiceTransactionSerializer(result.value["items"], many=True).data,
                "pagination": result.value["pagination"],
            }
        )

    @extend_schema(
        operation_id="transactions_retrieve",
        summary="Get a transaction",
        responses={
            200: ServiceTransactionSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not client or provider"),
            404: ErrorResponseSerializer,
        },
        tags=["Marketplace - Transactions"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_transaction(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(ServiceTransactionSerializer(result.value).data)

    @extend_schema(
        operation_id="transactions_update",
        summary="Change status or leave a review",
        description="""
        **What it receives:**
        - `status` (optional):
          - IN_PROGRESS, COMPLETED: client only
          - CANCELLED: either party, not once COMPLETED
          - DISPUTED: either party, from IN_PROGRESS
        - `client_rating`/`client_review` (client) or `provider_rating`/`provider_review` (provider);
          ratings are integers from 1 to 5. Fields addressed to the other party are ignored.

        **What it does:**
        - COMPLETED stamps `completed_at` and completes the proposal and the request
        """,
        request=TransactionUpdateSerializer,
        responses={
            200: ServiceTransactionSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid status or rating"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not allowed for this party"),
            404: ErrorResponseSerializer,
        },
        tags=["Marketplace - Transactions"],
    )
    def update(self, request, pk=None):
        serializer = TransactionUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().update_transaction(request.user, pk, **serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(ServiceTransactionSerializer(result.value).data)


class PaymentViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> TransactionService:
        return container.transaction_service()

    @extend_schema(
        operation_id="payments_create",
        summary="Pay for a pending transaction",
        description="""
        **What it receives:**
        - `transaction_id`: a PENDING transaction where the caller is the client
        - `payment_method`: card, eft or wallet

        **What it returns:**
        - `transaction`: now IN_PROGRESS
        - `payment`: the receipt issued by the payment provider
        """,
        request=PaymentRequestSerializer,
        responses={
            200: OpenApiResponse(response=PaymentReceiptSerializer, description="Payment processed"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Not pending or invalid method"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the client"),
            404: ErrorResponseSerializer,
        },
        tags=["Marketplace - Payments"],
    )
    def create(self, request):
        serializer = PaymentRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().process_payment(
            request.user,
            serializer.validated_data.get("transaction_id"),
            serializer.validated_data.get("payment_method"),
        )
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "transaction": ServiceTransactionSerializer(result.value["transaction"]).data,
                "payment": result.value["payment"].to_dict(),
                "message": "Payment processed successfully",
            }
        )
