"""
accounts/models.py
──────────────────
Identity and authorisation models.

User     – extends AbstractUser; students and coordinators both sign in with it.
UserRole – links an account to a role string.  Only "admin" exists today and
           it gates the management dashboard.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom user model for the Field Experience portal.

    A student's account is linked to their academic record
    (placements.Student.user) the first time they register for a school.
    """

    @property
    def is_portal_admin(self):
        """True when a UserRole row with role=admin exists for this account."""
        if not self.is_authenticated or self.pk is None:
            return False
        return self.roles.filter(role=UserRole.Role.ADMIN).exists()

    def __str__(self):
        return self.get_full_name() or self.username

    class Meta:
        verbose_name = 'User'
        verbose_name_plural = 'Users'


class UserRole(models.Model):
    """
    Grants a role to an account.

    The dashboard only checks for the presence of an ADMIN row; role
    management itself happens in the Django admin.
    """

    class Role(models.TextChoices):
        ADMIN = 'admin', 'Administrator'

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='roles',
    )
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.ADMIN,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'User Role'
        verbose_name_plural = 'User Roles'
        constraints = [
            models.UniqueConstraint(fields=['user', 'role'], name='unique_user_role'),
        ]

    def __str__(self):
        return f"{self.user} ({self.get_role_display()})"
