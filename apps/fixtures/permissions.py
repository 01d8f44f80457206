from rest_framework import permissions

from .authentication import CronJob


class IsCronJob(permissions.BasePermission):
    """Allows access only to requests authenticated with the cron secret."""

    message = 'Unauthorized'

    def has_permission(self, request, view):
        return isinstance(request.user, CronJob)
