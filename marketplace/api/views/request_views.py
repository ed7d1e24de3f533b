from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.serializers import (
    ErrorResponseSerializer,
    MessageResponseSerializer,
    ServiceProposalSerializer,
    ServiceRequestSerializer,
    ServiceRequestWriteSerializer,
)
from marketplace.services import RequestService
from utils.pagination import parse_page_params
from utils.responses import error_response, validation_error_response

REQUEST_FILTER_PARAMS = ("category", "status", "user_id", "search")


class ServiceRequestViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> RequestService:
        return container.request_service()

    @extend_schema(
        operation_id="service_requests_list",
        summary="List service requests",
        description="""
        **What it receives:**
        - Optional filters: `category`, `status`, `user_id`, `search` (title/description)
        - Pagination parameters (page, limit)

        **What it returns:**
        - `items`: requests newest first, each with `proposal_count`
        - `pagination`: total, page, limit, pages
        """,
        parameters=[
            OpenApiParameter(name="category", type=str, description="Exact category (or 'all')"),
            OpenApiParameter(name="status", type=str, description="OPEN, IN_PROGRESS, COMPLETED, CANCELLED or all"),
            OpenApiParameter(name="user_id", type=str, description="Only requests posted by this user"),
            OpenApiParameter(name="search", type=str, description="Search in title and description"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="limit", type=int, description="Items per page (default: 10)"),
        ],
        responses={
            200: OpenApiResponse(response=ServiceRequestSerializer(many=True), description="Requests retrieved"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid filter"),
        },
        tags=["Marketplace - Service Requests"],
    )
    def list(self, request):
        page, limit = parse_page_params(request.query_params)
        filters = {key: request.query_params.get(key) for key in REQUEST_FILTER_PARAMS if key in request.query_params}

        result = self.get_service().list_requests(request.user, filters, page, limit)
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "items": ServiceRequestSerializer(result.value["items"], many=True).data,
                "pagination": result.value["pagination"],
            }
        )

    @extend_schema(
        operation_id="service_requests_retrieve",
        summary="Get a service request",
        description="""
        **What it returns:**
        - The request, plus `proposals`: every proposal for the owner, only
          the caller's own proposal for anyone else
        """,
        responses={
            200: OpenApiResponse(response=ServiceRequestSerializer, description="Request retrieved"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Request not found"),
        },
        tags=["Marketplace - Service Requests"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_request(request.user, pk)
        if not result.ok:
            return error_response(result)

        data = ServiceRequestSerializer(result.value["request"]).data
        context = {"provider_stats": result.value["provider_stats"]}
        data["proposals"] = ServiceProposalSerializer(result.value["proposals"], many=True, context=context).data
        return Response(data)

    @extend_schema(
        operation_id="service_requests_create",
        summary="Post a service request",
        request=ServiceRequestWriteSerializer,
        responses={
            201: OpenApiResponse(response=ServiceRequestSerializer, description="Request created"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Missing title/description/category"),
        },
        tags=["Marketplace - Service Requests"],
    )
    def create(self, request):
        serializer = ServiceRequestWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        fields = {k: v for k, v in serializer.validated_data.items() if k != "status"}
        result = self.get_service().create_request(request.user, **fields)
        if not result.ok:
            return error_response(result)
        return Response(ServiceRequestSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="service_requests_update",
        summary="Edit or cancel a service request",
        description="""
        **What it receives:**
        - Any of `title`, `description`, `category`, `budget`, `deadline`
        - `status`: only `CANCELLED`, and only while the request is OPEN
        - Must be the request owner
        """,
        request=ServiceRequestWriteSerializer,
        responses={
            200: OpenApiResponse(response=ServiceRequestSerializer, description="Request updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid status change"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the owner"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Request not found"),
        },
        tags=["Marketplace - Service Requests"],
    )
    def update(self, request, pk=None):
        serializer = ServiceRequestWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().update_request(request.user, pk, **serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(ServiceRequestSerializer(result.value).data)

    @extend_schema(
        operation_id="service_requests_delete",
        summary="Delete a service request",
        responses={
            200: OpenApiResponse(response=MessageResponseSerializer, description="Request deleted"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="A transaction exists"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the owner"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Request not found"),
        },
        tags=["Marketplace - Service Requests"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_request(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response({"message": "Service request deleted successfully"})
