"""
Accounts app views

ViewSet and endpoints for user management and authentication.
"""
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser

from .models import User
from .serializers import UserSerializer, CredentialSerializer
from .permissions import IsAdminOrSelf
from .utils import set_api_key, clear_api_key, has_session_api_key
from django.shortcuts import render, redirect
from .forms import CustomUserCreationForm
from django.contrib import messages


class UserViewSet(viewsets.ModelViewSet):
    """
    ViewSet for User management.

    - List/create: Staff/admin only
    - Retrieve/update/delete: Admin or self only
    - Special 'me' endpoint for current user
    - 'credential' endpoint for the session-scoped AI key
    """

    queryset = User.objects.all()
    serializer_class = UserSerializer

    def get_permissions(self):
        """
        Instantiate and return the list of permissions that this view requires.
        """
        if self.action in ['list', 'create']:
            permission_classes = [IsAdminUser]
        elif self.action in ['me', 'credential']:
            permission_classes = [IsAuthenticated]
        else:
            permission_classes = [IsAdminOrSelf]
        return [permission() for permission in permission_classes]

    @action(detail=False, methods=['get'])
    def me(self, request):
        """
        Return the current authenticated user's data.

        GET /api/users/me/
        """
        serializer = self.get_serializer(request.user)
        return Response(serializer.data)

    @action(detail=False, methods=['get', 'post', 'delete'])
    def credential(self, request):
        """
        Manage the AI credential stored in the current session.

        GET    /api/users/credential/ - whether a session key is set
        POST   /api/users/credential/ - store a replacement key
        DELETE /api/users/credential/ - forget the session key
        """
        if request.method == 'POST':
            serializer = CredentialSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            set_api_key(request, serializer.validated_data['api_key'])
            return Response({'has_session_key': True}, status=status.HTTP_200_OK)

        if request.method == 'DELETE':
            clear_api_key(request)
            return Response(status=status.HTTP_204_NO_CONTENT)

        return Response({'has_session_key': has_session_api_key(request)})


def signup(request):
    if request.method == "POST":
        form = CustomUserCreationForm(request.POST)
        if form.is_valid():
            form.save()
            messages.success(request, "Account created successfully! Please log in.")
            return redirect("login")
    else:
        form = CustomUserCreationForm()

    return render(request, "accounts/signup.html", {"form": form})
