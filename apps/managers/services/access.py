"""Resolve a pub-manager token to the pubs it may act on."""

from dataclasses import dataclass, field
from typing import Optional

from apps.pubs.models import Pub
from ..models import Manager
from .exceptions import InvalidTokenError, PubAccessDeniedError, ManagedPubNotFoundError
from .tokens import decode_token


@dataclass
class PubManagerSession:
    """
    Authenticated pub manager.

    ``pub`` is the pub the token was issued for; ``pubs`` adds every pub
    linked to the manager's email.
    """

    email: str
    pub: Pub
    manager: Optional[Manager] = None
    pubs: list = field(default_factory=list)
    is_authenticated = True

    @property
    def pub_ids(self) -> set:
        return {str(pub.id) for pub in self.pubs}

    def can_access(self, pub_id) -> bool:
        return str(pub_id) in self.pub_ids


def load_session(*, token: str) -> PubManagerSession:
    """
    Raises:
        InvalidTokenError: If the token is invalid or its pub no longer exists
    """
    payload = decode_token(token)
    email = payload['email'].strip().lower()

    try:
        pub = Pub.objects.select_related('city', 'borough').get(id=payload['pub_id'])
    except (Pub.DoesNotExist, ValueError):
        raise InvalidTokenError("Invalid token")

    manager = Manager.objects.filter(email=email).first()
    pubs = [pub]
    if manager:
        for linked in manager.pubs.select_related('city', 'borough').order_by('name'):
            if linked.id != pub.id:
                pubs.append(linked)

    return PubManagerSession(email=email, pub=pub, manager=manager, pubs=pubs)


def resolve_managed_pub(*, session: PubManagerSession, pub_id=None) -> Pub:
    """
    The pub a request targets: ``pub_id`` when given, else the token's pub.

    Raises:
        PubAccessDeniedError: If the manager may not act on that pub
        ManagedPubNotFoundError: If the pub is gone
    """
    if not pub_id:
        return session.pub
    if not session.can_access(pub_id):
        raise PubAccessDeniedError("Access denied to this pub")
    for pub in session.pubs:
        if str(pub.id) == str(pub_id):
            return pub
    raise ManagedPubNotFoundError("Pub not found")
