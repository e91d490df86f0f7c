"""
Accounts app models

Custom User model extending AbstractUser with role-based access.
"""
from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom user model with a role flag.

    Extends Django's AbstractUser to add:
    - role: Distinguish between admins and resume authors
    """

    ADMIN = 'ADMIN'
    AUTHOR = 'AUTHOR'

    ROLE_CHOICES = [
        (ADMIN, 'Admin'),
        (AUTHOR, 'Author'),
    ]

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=AUTHOR,
    )

    def __str__(self):
        return f"{self.username} ({self.role})"

    @property
    def resume_limit(self) -> int:
        return getattr(settings, 'RESUME_LIMIT', 7)

    @property
    def resumes_available(self) -> int:
        """
        Remaining resume slots before the per-user limit is hit.
        """
        return max(self.resume_limit - self.resumes.count(), 0)

    class Meta:
        verbose_name = 'User'
        verbose_name_plural = 'Users'
