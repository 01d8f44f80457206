from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Site users. Granting staff status makes a user a Pub Club admin."""

    list_display = ['email', 'display_name', 'is_staff', 'is_active', 'created_at', 'last_login']
    list_filter = ['is_staff', 'is_active']
    search_fields = ['email', 'display_name']
    ordering = ['-created_at']
    readonly_fields = ['created_at', 'last_login']

    fieldsets = (
        (None, {'fields': ('email', 'display_name', 'password')}),
        ('Access', {'fields': ('is_active', 'is_staff', 'is_superuser')}),
        ('Activity', {'fields': ('created_at', 'last_login')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'password1', 'password2', 'is_staff'),
        }),
    )
    filter_horizontal = []

    actions = ['grant_admin', 'revoke_admin']

    @admin.action(description='Make selected users Pub Club admins')
    def grant_admin(self, request, queryset):
        count = queryset.update(is_staff=True)
        self.message_user(request, f'{count} user(s) can now use the admin API.')

    @admin.action(description='Remove admin access from selected users')
    def revoke_admin(self, request, queryset):
        """Superusers keep their access."""
        count = queryset.filter(is_superuser=False).update(is_staff=False)
        self.message_user(request, f'Removed admin access from {count} user(s).')
