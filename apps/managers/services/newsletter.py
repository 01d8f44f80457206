"""Monthly insights sign-up for managed pubs."""

from ..models import PubManagerNewsletter
from .access import PubManagerSession


def is_signed_up(*, session: PubManagerSession) -> bool:
    return PubManagerNewsletter.objects.filter(pub=session.pub).exists()


def sign_up_for_newsletter(*, session: PubManagerSession) -> PubManagerNewsletter:
    """Sign the token's pub up; signing up again refreshes name and email."""
    signup, _ = PubManagerNewsletter.objects.update_or_create(
        pub=session.pub,
        defaults={'pub_name': session.pub.name, 'email': session.email},
    )
    return signup
