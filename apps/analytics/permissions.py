"""
Custom permission classes for analytics app.

This module contains DRF permission classes that control access to
analytics endpoints. These replace inline permission checks in views.

Permission Classes:
    CanViewPubAnalytics - Requires the pub manager to manage the requested pub

Usage:
    from apps.analytics.permissions import CanViewPubAnalytics

    @api_view(['GET'])
    @authentication_classes([PubManagerAuthentication])
    @permission_classes([IsPubManager, CanViewPubAnalytics])
    def pub_analytics(request):
        # Permission already verified by CanViewPubAnalytics
        ...
"""

from rest_framework.permissions import BasePermission
from apps.managers.services import PubManagerSession

ALL_PUBS = 'all'


class CanViewPubAnalytics(BasePermission):
    """
    Permission check for pub analytics access.

    This permission class checks if the authenticated pub manager may see
    analytics for the pub named in the request. It reads ``pub_id`` from
    the URL kwargs first and falls back to the query parameters.

    Access is allowed if:
    - No pub_id is specified (the token's own pub is used)
    - pub_id is 'all' (every pub the manager manages)
    - The manager's token pub or linked pubs include pub_id

    Access is denied if:
    - The request is not authenticated as a pub manager
    - The manager does not manage the requested pub

    Used by:
        - pub_analytics (pub_id in query params, 'all' allowed)
        - pub_benchmark (pub_id in query params)
    """

    message = 'Access denied to this pub'

    def has_permission(self, request, view):
        """
        Check if the manager may view analytics for the requested pub.

        Args:
            request: The HTTP request
            view: The view being accessed

        Returns:
            bool: True if access allowed, False otherwise
        """
        session = request.user
        if not isinstance(session, PubManagerSession):
            return False

        pub_id = getattr(view, 'kwargs', {}).get('pub_id')
        if not pub_id:
            pub_id = request.query_params.get('pub_id')

        if not pub_id or pub_id == ALL_PUBS:
            return True

        return session.can_access(pub_id)
