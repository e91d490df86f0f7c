"""
Accounts app serializers

Serializers for User model and the session credential.
"""
from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for User model.

    Exposes user details including role and remaining resume slots.
    Password is write-only for security.
    """

    resumes_available = serializers.IntegerField(read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'first_name',
            'last_name',
            'role',
            'resumes_available',
            'password',
        ]
        extra_kwargs = {
            'password': {'write_only': True},
        }

    def create(self, validated_data):
        """Create user with hashed password."""
        password = validated_data.pop('password', None)
        user = User(**validated_data)
        if password:
            user.set_password(password)
        user.save()
        return user

    def update(self, instance, validated_data):
        """Update user, handling password properly."""
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance


class CredentialSerializer(serializers.Serializer):
    """
    Replacement API key submitted from the credential prompt.

    Only non-emptiness is checked; the backend decides validity.
    """

    api_key = serializers.CharField(trim_whitespace=True, allow_blank=False)
