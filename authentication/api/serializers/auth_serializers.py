from rest_framework import serializers

from authentication.domain.models import CustomUser


class UserSerializer(serializers.ModelSerializer):
    created_at = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta:
        model = CustomUser
        fields = ("id", "name", "email", "role", "bio", "image", "created_at")
        read_only_fields = ("id", "email", "role", "created_at")


class UserSummarySerializer(serializers.ModelSerializer):
    """Public fields embedded in marketplace and chat payloads."""

    class Meta:
        model = CustomUser
        fields = ("id", "name", "image")
        read_only_fields = fields


class UserRegistrationSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=100)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    role = serializers.ChoiceField(choices=["learner", "mentor"], default="learner", required=False)


class LoginRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class LoginResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    access = serializers.CharField()
    refresh = serializers.CharField()
    user = UserSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
