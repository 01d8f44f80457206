"""
Pub-manager portal services.

This package contains the business operations behind the portal:
- Token issue/verification and login
- Pub edits, photos and change requests
- Connection requests and the insights newsletter
- Admin management of managers and requests
"""

from .tokens import issue_token, decode_token
from .access import PubManagerSession, load_session, resolve_managed_pub
from .login import login_manager
from .pub_updates import update_managed_pub, amenity_key
from .requests import (
    submit_pub_request,
    create_change_request,
    list_change_requests,
    describe_change_request,
    list_pub_requests,
    update_pub_request,
)
from .connections import (
    list_connection_requests,
    request_connection,
    search_connectable_pubs,
    list_all_connection_requests,
    process_connection_request,
)
from .newsletter import is_signed_up, sign_up_for_newsletter
from .photos import list_photos, upload_photo, set_photo_cover, delete_photo
from .admin_managers import list_managers, last_login_for, add_manager_to_pub, remove_manager_from_pub

# Domain Exceptions
from .exceptions import (
    ManagersServiceError,
    InvalidCredentialsError,
    NoPasswordSetError,
    InvalidTokenError,
    PubAccessDeniedError,
    ManagedPubNotFoundError,
    InvalidManagerRequestError,
    AlreadyManagedError,
    RequestNotFoundError,
    RequestAlreadyProcessedError,
    PhotoNotFoundError,
    ManagerLinkNotFoundError,
)

__all__ = [
    # Tokens & sessions
    'issue_token',
    'decode_token',
    'PubManagerSession',
    'load_session',
    'resolve_managed_pub',
    'login_manager',
    # Pub edits
    'update_managed_pub',
    'amenity_key',
    # Requests
    'submit_pub_request',
    'create_change_request',
    'list_change_requests',
    'describe_change_request',
    'list_pub_requests',
    'update_pub_request',
    # Connections
    'list_connection_requests',
    'request_connection',
    'search_connectable_pubs',
    'list_all_connection_requests',
    'process_connection_request',
    # Newsletter
    'is_signed_up',
    'sign_up_for_newsletter',
    # Photos
    'list_photos',
    'upload_photo',
    'set_photo_cover',
    'delete_photo',
    # Admin
    'list_managers',
    'last_login_for',
    'add_manager_to_pub',
    'remove_manager_from_pub',
    # Exceptions
    'ManagersServiceError',
    'InvalidCredentialsError',
    'NoPasswordSetError',
    'InvalidTokenError',
    'PubAccessDeniedError',
    'ManagedPubNotFoundError',
    'InvalidManagerRequestError',
    'AlreadyManagedError',
    'RequestNotFoundError',
    'RequestAlreadyProcessedError',
    'PhotoNotFoundError',
    'ManagerLinkNotFoundError',
]
