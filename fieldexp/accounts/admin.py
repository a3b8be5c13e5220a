"""
accounts/admin.py
─────────────────
Admin registrations for User and UserRole.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User, UserRole


class UserRoleInline(admin.TabularInline):
    model = UserRole
    extra = 0


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Extends the default UserAdmin so roles can be granted from the user page.
    """

    inlines = (UserRoleInline,)


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    list_display  = ('user', 'role', 'created_at')
    list_filter   = ('role',)
    search_fields = ('user__username', 'user__first_name', 'user__last_name')
    raw_id_fields = ('user',)
