"""
Pub-manager tokens.

Managers are not site users, so they get their own HS256 JWT signed with
``PUB_MANAGER_JWT_SECRET`` rather than a simplejwt token.
"""

from django.conf import settings
from django.utils import timezone
import jwt

from .exceptions import InvalidTokenError

TOKEN_TYPE = 'pub-manager'
ALGORITHM = 'HS256'


def issue_token(*, pub, email: str) -> str:
    """Sign a token for ``email`` acting on ``pub``."""
    payload = {
        'pub_id': str(pub.id),
        'pub_name': pub.name,
        'email': email,
        'type': TOKEN_TYPE,
        'iat': timezone.now(),
        'exp': timezone.now() + settings.PUB_MANAGER_TOKEN_LIFETIME,
    }
    return jwt.encode(payload, settings.PUB_MANAGER_JWT_SECRET, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """
    Verify signature, expiry and type.

    Raises:
        InvalidTokenError: If the token cannot be trusted
    """
    try:
        payload = jwt.decode(token, settings.PUB_MANAGER_JWT_SECRET, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise InvalidTokenError("Token has expired")
    except jwt.InvalidTokenError:
        raise InvalidTokenError("Invalid token")

    if payload.get('type') != TOKEN_TYPE or not payload.get('pub_id') or not payload.get('email'):
        raise InvalidTokenError("Invalid token")
    return payload
