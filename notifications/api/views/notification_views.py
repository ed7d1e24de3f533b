from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers import ErrorResponseSerializer
from infrastructure.container import container
from notifications.api.serializers import NotificationSerializer, NotificationUpdateSerializer, UnreadCountSerializer
from utils.pagination import parse_page_params
from utils.responses import error_response, validation_error_response


# Dependency Injection Helper
def get_notification_service():
    """Factory to get NotificationService instance."""
    return container.notification_service()


def _truthy(value) -> bool:
    return str(value).lower() in ("1", "true", "yes")


class NotificationListAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="notifications_list",
        summary="List my notifications, newest first",
        parameters=[
            OpenApiParameter("page", int, OpenApiParameter.QUERY),
            OpenApiParameter("limit", int, OpenApiParameter.QUERY),
            OpenApiParameter("unread_only", bool, OpenApiParameter.QUERY),
        ],
        responses={200: NotificationSerializer(many=True), 401: ErrorResponseSerializer},
        tags=["Notifications"],
    )
    def get(self, request):
        service = get_notification_service()
        default_limit = settings.MARKETPLACE["NOTIFICATION_PAGE_SIZE"]
        page, limit = parse_page_params(request.query_params, default_limit=default_limit)
        result = service.list_notifications(
            request.user, page=page, limit=limit, unread_only=_truthy(request.query_params.get("unread_only"))
        )
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "items": NotificationSerializer(result.value["items"], many=True).data,
                "pagination": result.value["pagination"],
                "unread_count": result.value["unread_count"],
            }
        )


class NotificationDetailAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="notifications_update",
        summary="Mark a notification read or unread",
        request=NotificationUpdateSerializer,
        responses={
            200: NotificationSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the recipient"),
            404: ErrorResponseSerializer,
        },
        tags=["Notifications"],
    )
    def put(self, request, pk):
        serializer = NotificationUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = get_notification_service().mark_read(request.user, pk, serializer.validated_data["is_read"])
        if not result.ok:
            return error_response(result)
        return Response(NotificationSerializer(result.value).data)


class MarkAllReadAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="notifications_mark_all_read",
        summary="Mark all my notifications as read",
        request=None,
        responses={200: OpenApiResponse(description="Number of notifications updated")},
        tags=["Notifications"],
    )
    def put(self, request):
        result = get_notification_service().mark_all_read(request.user)
        if not result.ok:
            return error_response(result)
        return Response({"message": "All notifications marked as read", "updated": result.value})


class UnreadCountAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="notifications_unread_count",
        summary="Number of unread notifications",
        responses={200: UnreadCountSerializer},
        tags=["Notifications"],
    )
    def get(self, request):
        result = get_notification_service().unread_count(request.user)
        if not result.ok:
            return error_response(result)
        return Response({"unread_count": result.value})
