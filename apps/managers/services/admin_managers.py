"""Admin management of pub managers."""

import logging

from django.contrib.auth.hashers import make_password
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, QuerySet, Prefetch

from apps.pubs.models import Pub
from ..models import Manager, ManagerLogin, PubManager
from .exceptions import InvalidManagerRequestError, ManagerLinkNotFoundError

logger = logging.getLogger(__name__)


def list_managers() -> QuerySet[Manager]:
    """Managers newest first, with login_count and their pub links."""
    return (
        Manager.objects
        .annotate(login_count=Count('logins', distinct=True))
        .prefetch_related(
            Prefetch('pub_links', queryset=PubManager.objects.select_related('pub')),
        )
        .order_by('-created_at')
    )


def last_login_for(manager: Manager):
    return ManagerLogin.objects.filter(manager=manager).select_related('pub').order_by('-created_at').first()


@transaction.atomic
def add_manager_to_pub(*, actor: str, pub: Pub, email: str, password: str, name: str = '', role: str = 'owner') -> PubManager:
    """
    Link a manager (created when new) to a pub.

    The pub's own manager credentials are filled in when it has none, so the
    manager can log in straight away.

    Raises:
        InvalidManagerRequestError: If email or password is missing
    """
    from apps.analytics.services import record_audit

    email = (email or '').strip().lower()
    password = (password or '').strip()
    if not email:
        raise InvalidManagerRequestError("Email is required")
    if not password:
        raise InvalidManagerRequestError("Password is required")

    manager, created = Manager.objects.get_or_create(email=email, defaults={'name': (name or '').strip()})
    link, _ = PubManager.objects.update_or_create(manager=manager, pub=pub, defaults={'role': role or 'owner'})

    if not pub.manager_email:
        pub.manager_email = email
        pub.manager_password = make_password(password)
        pub.save(update_fields=['manager_email', 'manager_password', 'updated_at'])

    record_audit(actor=actor, action='add_manager', entity='pub', entity_id=pub.id,
                 diff={'manager_email': email, 'role': link.role})
    logger.info("Manager %s linked to pub %s (%s)", email, pub.id, 'new' if created else 'existing')
    return link


@transaction.atomic
def remove_manager_from_pub(*, actor: str, pub: Pub, manager_id) -> None:
    """
    Raises:
        InvalidManagerRequestError: If manager_id is missing
        ManagerLinkNotFoundError: If the manager is not linked to the pub
    """
    from apps.analytics.services import record_audit

    if not manager_id:
        raise InvalidManagerRequestError("manager_id is required")
    try:
        deleted, _ = PubManager.objects.filter(pub=pub, manager_id=manager_id).delete()
    except (ValidationError, ValueError):
        deleted = 0
    if not deleted:
        raise ManagerLinkNotFoundError("Manager is not linked to this pub")

    record_audit(actor=actor, action='remove_manager', entity='pub', entity_id=pub.id,
                 diff={'manager_id': str(manager_id)})
