"""Check-in service."""

from typing import Optional
from datetime import datetime

from django.db import transaction, IntegrityError
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.pubs.models import Pub
from apps.reviews.models import Checkin
from .aggregates import adjust_counter
from .exceptions import DuplicateCheckinError, CheckinNotFoundError


@transaction.atomic
def create_checkin(*, user: User, pub: Pub, note: str = '', visited_at: Optional[datetime] = None) -> Checkin:
    """
    Record a visit and bump the pub's checkin_count.

    Raises:
        DuplicateCheckinError: If the user already checked in here
    """
    if Checkin.objects.filter(user=user, pub=pub).exists():
        raise DuplicateCheckinError("You have already checked in to this pub")

    try:
        checkin = Checkin.objects.create(
            user=user,
            pub=pub,
            note=note or '',
            visited_at=visited_at or timezone.now(),
        )
    except IntegrityError:
        raise DuplicateCheckinError("You have already checked in to this pub")

    adjust_counter(pub_id=pub.id, field='checkin_count', delta=1)
    return checkin


@transaction.atomic
def delete_checkin(*, user: User, pub: Pub) -> None:
    """
    Raises:
        CheckinNotFoundError: If the user has no check-in here
    """
    deleted, _ = Checkin.objects.filter(user=user, pub=pub).delete()
    if not deleted:
        raise CheckinNotFoundError("Check-in not found")
    adjust_counter(pub_id=pub.id, field='checkin_count', delta=-1)


def get_user_checkins(*, user: User) -> QuerySet[Checkin]:
    return Checkin.objects.filter(user=user).select_related('pub').order_by('-visited_at')
