from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""
    
    avatarUri = serializers.URLField(source='avatar_uri', required=False, allow_blank=True)
    pushToken = serializers.CharField(
        source='push_token', required=False, allow_blank=True, write_only=True
    )
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    
    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'avatarUri',
            'pushToken',
            'createdAt',
        ]
        read_only_fields = ['id', 'email', 'createdAt']


class UserRegistrationSerializer(serializers.Serializer):
    """Serializer for user registration."""
    
    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    avatarUri = serializers.URLField(required=False, allow_blank=True)
    
    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""
    
    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )
    pushToken = serializers.CharField(max_length=255, required=False, allow_blank=True)


class PushTokenSerializer(serializers.Serializer):
    """Device token for plan notifications; blank clears it."""

    pushToken = serializers.CharField(max_length=255, allow_blank=True)


class UserPublicSerializer(serializers.ModelSerializer):
    """Public user info (for displaying in plans and invites)."""
    
    avatarUri = serializers.CharField(source='avatar_uri', read_only=True)
    
    class Meta:
        model = User
        fields = ['id', 'name', 'avatarUri']
        read_only_fields = fields
