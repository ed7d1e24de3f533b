from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.serializers import (
    ErrorResponseSerializer,
    MessageResponseSerializer,
    ServiceOfferingSerializer,
    ServiceOfferingWriteSerializer,
)
from marketplace.services import OfferingService
from utils.pagination import parse_page_params
from utils.responses import error_response, validation_error_response

OFFERING_FILTER_PARAMS = ("category", "provider_id", "search", "min_price", "max_price")


class ServiceOfferingViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> OfferingService:
        return container.offering_service()

    @extend_schema(
        operation_id="service_offerings_list",
        summary="List active service offerings",
        description="""
        **What it receives:**
        - Optional filters: `category`, `provider_id`, `search`, `min_price`, `max_price`
        - Pagination parameters (page, limit)

        **What it returns:**
        - `items`: active offerings newest first; `provider` carries `rating` and `completed_services`
        - `pagination`: total, page, limit, pages
        """,
        parameters=[
            OpenApiParameter(name="category", type=str, description="Exact category (or 'all')"),
            OpenApiParameter(name="provider_id", type=str, description="Only offerings of this provider"),
            OpenApiParameter(name="search", type=str, description="Search in title and description"),
            OpenApiParameter(name="min_price", type=float),
            OpenApiParameter(name="max_price", type=float),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="limit", type=int, description="Items per page (default: 10)"),
        ],
        responses={200: ServiceOfferingSerializer(many=True), 400: ErrorResponseSerializer},
        tags=["Marketplace - Service Offerings"],
    )
    def list(self, request):
        page, limit = parse_page_params(request.query_params)
        filters = {key: request.query_params.get(key) for key in OFFERING_FILTER_PARAMS if key in request.query_params}

        result = self.get_service().list_offerings(request.user, filters, page, limit)
        if not result.ok:
            return error_response(result)

        context = {"provider_stats": result.value["provider_stats"]}
        return Response(
            {
                "items": ServiceOfferingSerializer(result.value["items"], many=True, context=context).data,
                "pagination": result.value["pagination"],
            }
        )

    @extend_schema(
        operation_id="service_offerings_retrieve",
        summary="Get a service offering",
        description="""
        **What it returns:**
        - The offering with provider stats
        - `reviews`: up to 10 latest client reviews of the provider
        """,
        responses={200: ServiceOfferingSerializer, 404: ErrorResponseSerializer},
        tags=["Marketplace - Service Offerings"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_offering(request.user, pk)
        if not result.ok:
            return error_response(result)

        context = {"provider_stats": result.value["provider_stats"]}
        data = ServiceOfferingSerializer(result.value["offering"], context=context).data
        data["reviews"] = result.value["reviews"]
        return Response(data)

    @extend_schema(
        operation_id="service_offerings_create",
        summary="Publish a service offering",
        request=ServiceOfferingWriteSerializer,
        responses={
            201: ServiceOfferingSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Missing required fields"),
        },
        tags=["Marketplace - Service Offerings"],
    )
    def create(self, request):
        serializer = ServiceOfferingWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        fields = {k: v for k, v in serializer.validated_data.items() if k != "is_active"}
        result = self.get_service().create_offering(request.user, **fields)
        if not result.ok:
            return error_response(result)
        return Response(ServiceOfferingSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="service_offerings_update",
        summary="Edit a service offering",
        request=ServiceOfferingWriteSerializer,
        responses={
            200: ServiceOfferingSerializer,
            400: ErrorResponseSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the provider"),
            404: ErrorResponseSerializer,
        },
        tags=["Marketplace - Service Offerings"],
    )
    def update(self, request, pk=None):
        serializer = ServiceOfferingWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().update_offering(request.user, pk, **serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(ServiceOfferingSerializer(result.value).data)

    @extend_schema(
        operation_id="service_offerings_delete",
        summary="Delete a service offering",
        responses={
            200: MessageResponseSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the provider"),
            404: ErrorResponseSerializer,
        },
        tags=["Marketplace - Service Offerings"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_offering(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response({"message": "Service offering deleted successfully"})
