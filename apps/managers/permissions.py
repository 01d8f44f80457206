from rest_framework import permissions

from .services import PubManagerSession


class IsPubManager(permissions.BasePermission):
    """
    Permission: Request carries a valid pub-manager token.
    """

    message = 'Unauthorized'

    def has_permission(self, request, view):
        return isinstance(request.user, PubManagerSession)
