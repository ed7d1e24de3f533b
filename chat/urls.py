from django.urls import path

from chat.api.views.conversation_views import (
    ConversationDetailAPIView,
    ConversationListAPIView,
    SendMessageAPIView,
)

app_name = "chat"

urlpatterns = [
    path("", SendMessageAPIView.as_view(), name="message_send"),
    path("conversations/", ConversationListAPIView.as_view(), name="conversation_list"),
    path("conversations/<uuid:pk>/", ConversationDetailAPIView.as_view(), name="conversation_detail"),
]
