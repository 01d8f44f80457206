"""
Pub requests.

Two flows share the ``PubRequest`` table: the public "list my pub" form
and change requests managers raise from the portal.
"""

import logging

from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db.models import QuerySet

from ..models import PubRequest, PubRequestStatus
from .access import PubManagerSession, resolve_managed_pub
from .exceptions import InvalidManagerRequestError, RequestNotFoundError

logger = logging.getLogger(__name__)

PUBLIC_REQUEST_FIELDS = ('pub_name', 'postcode', 'manager_name', 'contact_email', 'contact_phone')


def submit_pub_request(
    *,
    pub_name: str,
    postcode: str,
    manager_name: str,
    contact_email: str,
    contact_phone: str,
) -> PubRequest:
    """
    Public request to list a pub.

    Raises:
        InvalidManagerRequestError: If a field is blank or the email is invalid
    """
    values = {
        'pub_name': pub_name,
        'postcode': postcode,
        'manager_name': manager_name,
        'contact_email': contact_email,
        'contact_phone': contact_phone,
    }
    values = {key: (value or '').strip() for key, value in values.items()}
    if not all(values.values()):
        raise InvalidManagerRequestError("All fields are required")

    values['contact_email'] = values['contact_email'].lower()
    try:
        validate_email(values['contact_email'])
    except ValidationError:
        raise InvalidManagerRequestError("Invalid email address")

    pub_request = PubRequest.objects.create(status=PubRequestStatus.PENDING, **values)
    logger.info("Pub request %s submitted for %s", pub_request.id, pub_request.pub_name)
    return pub_request


def create_change_request(
    *,
    session: PubManagerSession,
    request_type: str,
    subject: str,
    description: str,
    pub_id=None,
) -> PubRequest:
    """
    Change request raised by a manager for one of their pubs.

    Raises:
        InvalidManagerRequestError: If type, subject or description is blank
        PubAccessDeniedError: If ``pub_id`` is not managed by the caller
    """
    request_type, subject, description = ((value or '').strip() for value in (request_type, subject, description))
    if not request_type or not subject or not description:
        raise InvalidManagerRequestError("Type, subject, and description are required")

    pub = resolve_managed_pub(session=session, pub_id=pub_id)
    return PubRequest.objects.create(
        pub_name=pub.name,
        postcode=pub.postcode or '',
        manager_name=session.email,
        contact_email=session.email,
        contact_phone='',
        status=PubRequestStatus.PENDING,
        notes={
            'type': request_type,
            'subject': subject,
            'description': description,
            'pub_id': str(pub.id),
            'manager_email': session.email,
        },
    )


def describe_change_request(pub_request: PubRequest) -> dict:
    notes = pub_request.notes if isinstance(pub_request.notes, dict) else {}
    return {
        'id': pub_request.id,
        'type': notes.get('type') or 'other',
        'subject': notes.get('subject') or pub_request.pub_name,
        'status': pub_request.status,
        'created_at': pub_request.created_at,
        'pub_name': pub_request.pub_name,
    }


def list_change_requests(*, session: PubManagerSession, pub_id=None) -> list[dict]:
    """Change requests for the manager's pubs, newest first."""
    pub_names = [pub.name for pub in session.pubs]
    queryset = PubRequest.objects.filter(pub_name__in=pub_names).order_by('-created_at')
    requests = list(queryset)
    if pub_id:
        requests = [
            r for r in requests
            if isinstance(r.notes, dict) and r.notes.get('pub_id') == str(pub_id)
        ]
    return [describe_change_request(r) for r in requests]


def list_pub_requests(*, status: str = None) -> QuerySet[PubRequest]:
    queryset = PubRequest.objects.order_by('-created_at')
    if status and status != 'all':
        queryset = queryset.filter(status=status)
    return queryset


def update_pub_request(*, request_id, status: str, notes=None) -> PubRequest:
    """
    Admin status change.

    Raises:
        InvalidManagerRequestError: If the status is not a known one
        RequestNotFoundError: If the request does not exist
    """
    if status not in PubRequestStatus.values:
        raise InvalidManagerRequestError("Invalid status")
    try:
        pub_request = PubRequest.objects.get(id=request_id)
    except (PubRequest.DoesNotExist, ValidationError, ValueError):
        raise RequestNotFoundError("Pub request not found")

    pub_request.status = status
    pub_request.notes = notes or None
    pub_request.save(update_fields=['status', 'notes', 'updated_at'])
    return pub_request
