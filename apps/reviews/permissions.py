from rest_framework import permissions


class IsReviewAuthorOrReadOnly(permissions.BasePermission):
    """
    Anyone may read a visible review; only its author may change it.

    Hidden reviews are readable by their author alone.
    """

    message = 'You can only modify your own reviews'

    def has_object_permission(self, request, view, obj):
        is_author = obj.user_id == getattr(request.user, 'id', None)
        if request.method in permissions.SAFE_METHODS:
            return obj.is_visible or is_author
        return is_author
