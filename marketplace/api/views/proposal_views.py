from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.serializers import (
    ErrorResponseSerializer,
    MessageResponseSerializer,
    ProposalCreateSerializer,
    ProposalStatusSerializer,
    ServiceProposalSerializer,
    ServiceTransactionSerializer,
)
from marketplace.services import ProposalService
from utils.pagination import parse_page_params
from utils.responses import error_response, validation_error_response


class ProposalViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> ProposalService:
        return container.proposal_service()

    @extend_schema(
        operation_id="proposals_list",
        summary="List proposals I sent or received",
        description="""
        **What it receives:**
        - Optional filters: `request_id`, `provider_id`, `status`
        - Pagination parameters (page, limit)

        **What it returns:**
        - Proposals where the caller is the provider or owns the request,
          each with provider `rating` and `completed_services`
        """,
        parameters=[
            OpenApiParameter(name="request_id", type=str),
            OpenApiParameter(name="provider_id", type=str),
            OpenApiParameter(name="status", type=str, description="PENDING, ACCEPTED, REJECTED, COMPLETED or all"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="limit", type=int, description="Items per page (default: 10)"),
        ],
        responses={200: ServiceProposalSerializer(many=True), 400: ErrorResponseSerializer},
        tags=["Marketplace - Proposals"],
    )
    def list(self, request):
        page, limit = parse_page_params(request.query_params)
        result = self.get_service().list_proposals(
            request.user,
            request_id=request.query_params.get("request_id"),
            provider_id=request.query_params.get("provider_id"),
            status=request.query_params.get("status"),
            page=page,
            limit=limit,
        )
        if not result.ok:
            return error_response(result)

        context = {"provider_stats": result.value["provider_stats"]}
        return Response(
            {
                "items": ServiceProposalSerializer(result.value["items"], many=True, context=context).data,
                "pagination": result.value["pagination"],
            }
        )

    @extend_schema(
        operation_id="proposals_retrieve",
        summary="Get a proposal",
        responses={
            200: ServiceProposalSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not provider or request owner"),
            404: ErrorResponseSerializer,
        },
        tags=["Marketplace - Proposals"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_proposal(request.user, pk)
        if not result.ok:
            return error_response(result)

        context = {"provider_stats": result.value["provider_stats"]}
        return Response(ServiceProposalSerializer(result.value["proposal"], context=context).data)

    @extend_schema(
        operation_id="proposals_create",
        summary="Submit a proposal on an open request",
        description="""
        **What it receives:**
        - `request_id`, `description`, `price`, `delivery_time` (all required)

        **Fails with 400 when:**
        - A field is missing
        - The request is not OPEN, is the caller's own, or already has a proposal from the caller
        """,
        request=ProposalCreateSerializer,
        responses={
            200: ServiceProposalSerializer,
            400: ErrorResponseSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Request not found"),
        },
        tags=["Marketplace - Proposals"],
    )
    def create(self, request):
        serializer = ProposalCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = serializer.validated_data
        result = self.get_service().submit_proposal(
            request.user,
            data.get("request_id"),
            data.get("description"),
            data.get("price"),
            data.get("delivery_time"),
        )
        if not result.ok:
            return error_response(result)
        return Response(ServiceProposalSerializer(result.value).data)

    @extend_schema(
        operation_id="proposals_update_status",
        summary="Accept, reject or complete a proposal",
        description="""
        **What it receives:**
        - `status`: ACCEPTED or REJECTED (request owner), COMPLETED (provider)

        **What it does on ACCEPTED (atomically):**
        - Proposal becomes ACCEPTED and a PENDING transaction is created for its price
        - The request becomes IN_PROGRESS
        - Every other PENDING proposal on the request is rejected

        **What it returns:**
        - The proposal, plus `transaction` when one was created or completed
        """,
        request=ProposalStatusSerializer,
        responses={
            200: ServiceProposalSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid status or transition"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Role mismatch"),
            404: ErrorResponseSerializer,
        },
        tags=["Marketplace - Proposals"],
    )
    def update(self, request, pk=None):
        serializer = ProposalStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().update_status(request.user, pk, serializer.validated_data.get("status"))
        if not result.ok:
            return error_response(result)

        data = ServiceProposalSerializer(result.value["proposal"]).data
        service_transaction = result.value["transaction"]
        data["transaction"] = ServiceTransactionSerializer(service_transaction).data if service_transaction else None
        return Response(data)

    @extend_schema(
        operation_id="proposals_delete",
        summary="Withdraw a proposal",
        responses={
            200: MessageResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Accepted or has a transaction"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the provider"),
            404: ErrorResponseSerializer,
        },
        tags=["Marketplace - Proposals"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_proposal(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response({"message": "Proposal deleted successfully"})
