from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers import (
    ErrorResponseSerializer,
    LoginRequestSerializer,
    LoginResponseSerializer,
    UserRegistrationSerializer,
    UserSerializer,
)
from authentication.domain.services.auth_service import AuthService
from utils.responses import validation_error_response


# Dependency Injection Helper
def get_auth_service():
    """Factory to get AuthService instance."""
    return AuthService()


class LoginAPIView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(
        operation_id="auth_login",
        summary="Login with email and password",
        description="Authenticate with email and password and receive a JWT access/refresh pair.",
        request=LoginRequestSerializer,
        responses={
            200: OpenApiResponse(
                response=LoginResponseSerializer,
                description="Login successful",
                examples=[
                    OpenApiExample(
                        "Successful Login",
                        value={
                            "message": "Login successful",
                            "access": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                            "refresh": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                            "user": {
                                "id": "123e4567-e89b-12d3-a456-426614174000",
                                "name": "Thandi Nkosi",
                                "email": "thandi@example.com",
                                "role": "learner",
                            },
                        },
                    )
                ],
            ),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid credentials"),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        email = request.data.get("email")
        password = request.data.get("password")

        service = get_auth_service()
        result = service.login(email, password)

        if result.success:
            return Response(
                {
                    "message": result.message,
                    "access": result.access_token,
                    "refresh": result.refresh_token,
                    "user": UserSerializer(result.user).data,
                },
                status=status.HTTP_200_OK,
            )

        return Response({"error": result.error}, status=status.HTTP_401_UNAUTHORIZED)


class RegisterAPIView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(
        operation_id="auth_register",
        summary="Register new user account",
        request=UserRegistrationSerializer,
        responses={
            201: OpenApiResponse(response=UserSerializer, description="Account created"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid input or duplicate e-mail"),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        serializer = UserRegistrationSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        service = get_auth_service()
        result = service.register(**serializer.validated_data)

        if result.success:
            return Response({"user": UserSerializer(result.user).data}, status=status.HTTP_201_CREATED)
        if result.errors:
            return Response({"error": "User already exists"}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"error": result.error}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class MeAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="auth_me",
        summary="Current user profile",
        responses={200: UserSerializer, 401: ErrorResponseSerializer},
        tags=["Authentication"],
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)

    @extend_schema(
        operation_id="auth_me_update",
        summary="Update name, bio or image of the current user",
        request=UserSerializer,
        responses={200: UserSerializer, 400: ErrorResponseSerializer, 401: ErrorResponseSerializer},
        tags=["Authentication"],
    )
    def put(self, request):
        serializer = UserSerializer(request.user, data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)
        serializer.save()
        return Response(serializer.data)
