"""Managers asking to be connected to more pubs, and admin approval."""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet, Case, When, Value, IntegerField

from apps.pubs.models import Pub
from ..models import Manager, PubManager, PubManagerConnectionRequest, ConnectionStatus
from .access import PubManagerSession
from .exceptions import (
    AlreadyManagedError,
    InvalidManagerRequestError,
    ManagedPubNotFoundError,
    RequestNotFoundError,
    RequestAlreadyProcessedError,
)

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 20
MAX_SEARCH_LIMIT = 50


def list_connection_requests(*, session: PubManagerSession) -> QuerySet[PubManagerConnectionRequest]:
    return (
        PubManagerConnectionRequest.objects
        .filter(email=session.email)
        .select_related('pub')
        .order_by('-created_at')
    )


@transaction.atomic
def request_connection(*, session: PubManagerSession, pub_id) -> PubManagerConnectionRequest:
    """
    Ask to manage another pub. Re-requesting resets the request to pending.

    Raises:
        InvalidManagerRequestError: If pub_id is blank
        AlreadyManagedError: If the manager already manages the pub
        ManagedPubNotFoundError: If the pub does not exist
    """
    pub_id = str(pub_id or '').strip()
    if not pub_id:
        raise InvalidManagerRequestError("pub_id is required.")
    if session.can_access(pub_id):
        raise AlreadyManagedError("You already manage this pub.")

    try:
        pub = Pub.objects.get(id=pub_id)
    except (Pub.DoesNotExist, ValidationError, ValueError):
        raise ManagedPubNotFoundError("Pub not found.")

    connection, created = PubManagerConnectionRequest.objects.get_or_create(
        email=session.email,
        pub=pub,
        defaults={'status': ConnectionStatus.PENDING},
    )
    if not created and connection.status != ConnectionStatus.PENDING:
        connection.status = ConnectionStatus.PENDING
        connection.save(update_fields=['status', 'updated_at'])

    logger.info("Connection request from %s for pub %s", session.email, pub.id)
    return connection


def search_connectable_pubs(*, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[Pub]:
    """Pubs whose name contains ``query`` (at least two characters)."""
    query = (query or '').strip()
    if len(query) < 2:
        return []
    limit = max(1, min(limit, MAX_SEARCH_LIMIT))
    return list(
        Pub.objects.with_area()
        .filter(name__icontains=query)
        .select_related('city', 'borough')
        .order_by('name')[:limit]
    )


def list_all_connection_requests() -> QuerySet[PubManagerConnectionRequest]:
    """Pending first, then newest first."""
    return (
        PubManagerConnectionRequest.objects
        .select_related('pub__borough', 'pub__city')
        .annotate(status_rank=Case(
            When(status=ConnectionStatus.PENDING, then=Value(0)),
            default=Value(1),
            output_field=IntegerField(),
        ))
        .order_by('status_rank', '-created_at')
    )


@transaction.atomic
def process_connection_request(*, request_id, status: str) -> PubManagerConnectionRequest:
    """
    Approve or reject a pending request. Approval links the email's
    manager (created if needed) to the pub as owner.

    Raises:
        InvalidManagerRequestError: If status is not approved/rejected
        RequestNotFoundError: If the request does not exist
        RequestAlreadyProcessedError: If it is no longer pending
    """
    if status not in (ConnectionStatus.APPROVED, ConnectionStatus.REJECTED):
        raise InvalidManagerRequestError("status must be approved or rejected")

    try:
        connection = PubManagerConnectionRequest.objects.select_for_update().get(id=request_id)
    except (PubManagerConnectionRequest.DoesNotExist, ValidationError, ValueError):
        raise RequestNotFoundError("Request not found")

    if connection.status != ConnectionStatus.PENDING:
        raise RequestAlreadyProcessedError("Request already processed")

    if status == ConnectionStatus.APPROVED:
        manager, _ = Manager.objects.get_or_create(email=connection.email.lower())
        PubManager.objects.get_or_create(manager=manager, pub_id=connection.pub_id, defaults={'role': 'owner'})

    connection.status = status
    connection.save(update_fields=['status', 'updated_at'])
    logger.info("Connection request %s %s", connection.id, status)
    return connection
