from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers import ErrorResponseSerializer
from chat.api.serializers import (
    ConversationDetailSerializer,
    ConversationSerializer,
    MessageSerializer,
    SendMessageSerializer,
    StartConversationSerializer,
)
from infrastructure.container import container
from utils.pagination import parse_page_params
from utils.responses import error_response, validation_error_response


# Dependency Injection Helper
def get_chat_service():
    """Factory to get ChatService instance."""
    return container.chat_service()


class SendMessageAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="messages_send",
        summary="Send a message to a conversation",
        request=SendMessageSerializer,
        responses={
            200: MessageSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Missing conversation or content"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a participant"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Conversation not found"),
        },
        tags=["Messages"],
    )
    def post(self, request):
        serializer = SendMessageSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = get_chat_service().send_message(
            serializer.validated_data.get("conversation_id"),
            request.user,
            serializer.validated_data.get("content"),
        )
        if not result.ok:
            return error_response(result)
        return Response(MessageSerializer(result.value).data, status=status.HTTP_200_OK)


class ConversationListAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="conversations_list",
        summary="List my conversations, most recently active first",
        parameters=[
            OpenApiParameter("page", int, OpenApiParameter.QUERY),
            OpenApiParameter("limit", int, OpenApiParameter.QUERY),
        ],
        responses={200: ConversationSerializer(many=True)},
        tags=["Messages"],
    )
    def get(self, request):
        page, limit = parse_page_params(request.query_params)
        result = get_chat_service().list_conversations(request.user, page=page, limit=limit)
        if not result.ok:
            return error_response(result)

        items = ConversationSerializer(result.value["items"], many=True, context={"request": request}).data
        return Response({"items": items, "pagination": result.value["pagination"]})

    @extend_schema(
        operation_id="conversations_start",
        summary="Get or create the conversation with another user",
        request=StartConversationSerializer,
        responses={
            200: OpenApiResponse(response=ConversationSerializer, description="Existing conversation"),
            201: OpenApiResponse(response=ConversationSerializer, description="Conversation created"),
            400: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        tags=["Messages"],
    )
    def post(self, request):
        serializer = StartConversationSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = get_chat_service().start_conversation(request.user, serializer.validated_data.get("user_id"))
        if not result.ok:
            return error_response(result)

        data = ConversationSerializer(result.value["conversation"], context={"request": request}).data
        created = result.value["created"]
        return Response(data, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)


class ConversationDetailAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="conversations_open",
        summary="Open a conversation",
        description="Returns the messages oldest first and marks the other participant's messages as read.",
        responses={200: ConversationDetailSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=["Messages"],
    )
    def get(self, request, pk):
        result = get_chat_service().open_conversation(pk, request.user)
        if not result.ok:
            return error_response(result)

        context = {"request": request, "messages": result.value["messages"]}
        return Response(ConversationDetailSerializer(result.value["conversation"], context=context).data)
