from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .api.views import LoginAPIView, MeAPIView, RegisterAPIView

app_name = "authentication"

urlpatterns = [
    path("register/", RegisterAPIView.as_view(), name="register"),
    path("login/", LoginAPIView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("me/", MeAPIView.as_view(), name="me"),
]
