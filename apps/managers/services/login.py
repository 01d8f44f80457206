"""Pub-manager login."""

import logging

from django.contrib.auth.hashers import check_password
from django.db import transaction

from apps.pubs.models import Pub
from ..models import Manager, ManagerLogin
from .exceptions import InvalidCredentialsError, NoPasswordSetError, InvalidManagerRequestError
from .tokens import issue_token

logger = logging.getLogger(__name__)

NO_PASSWORD_MESSAGE = (
    "No password set for this pub. Please contact Pub Club support to set your password."
)


def _find_pub_for_credentials(email: str, password: str):
    """Returns (pub, manager) or raises."""
    manager = Manager.objects.filter(email=email).first()

    direct = Pub.objects.filter(manager_email__iexact=email).exclude(manager_password='').first()
    if direct and check_password(password, direct.manager_password):
        return direct, manager

    if manager is None:
        raise InvalidCredentialsError("Invalid email or password")

    linked = list(manager.pubs.order_by('name'))
    if not linked:
        raise InvalidCredentialsError("Invalid email or password")

    with_password = [pub for pub in linked if pub.manager_password]
    if not with_password:
        raise NoPasswordSetError(NO_PASSWORD_MESSAGE)

    # Prefer the pub whose own manager email matches
    with_password.sort(key=lambda pub: (pub.manager_email or '').lower() != email)
    for pub in with_password:
        if check_password(password, pub.manager_password):
            return pub, manager

    raise InvalidCredentialsError("Invalid email or password")


@transaction.atomic
def login_manager(*, email: str, password: str) -> dict:
    """
    Check manager credentials and issue a portal token.

    The pub whose ``manager_email`` matches is tried first, then every pub
    linked to the manager. Each successful login is recorded.

    Args:
        email: Manager email (case-insensitive, trimmed)
        password: Plain password (trimmed)

    Returns:
        Dict with token, pub and manager (None for credential-only pubs)

    Raises:
        InvalidManagerRequestError: If email or password is empty
        InvalidCredentialsError: If nothing matches
        NoPasswordSetError: If the manager's pubs have no password yet
    """
    email = (email or '').strip().lower()
    password = (password or '').strip()
    if not email or not password:
        raise InvalidManagerRequestError("Email and password are required")

    pub, manager = _find_pub_for_credentials(email, password)

    ManagerLogin.objects.create(manager=manager, pub=pub, email=email)
    logger.info("Pub manager %s logged in for pub %s", email, pub.id)

    return {
        'token': issue_token(pub=pub, email=email),
        'pub': pub,
        'manager': manager,
    }
