"""
Site-user sign-up and sign-in.

Site users authenticate with simplejwt access/refresh pairs. Pub managers
use their own token (see ``apps.managers``) and are not site users.
"""

import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.models import update_last_login
from django.db import transaction, IntegrityError
from rest_framework_simplejwt.tokens import RefreshToken

from .exceptions import (
    UserRegistrationError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InactiveAccountError,
)

User = get_user_model()

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"


def token_pair(user) -> dict:
    """Fresh refresh/access pair for a site user."""
    refresh = RefreshToken.for_user(user)
    return {'refresh': str(refresh), 'access': str(refresh.access_token)}


@transaction.atomic
def register_user(*, email: str, password: str, display_name: str = "") -> User:
    """
    Create a site user.

    The email is stored lowercased; the display name falls back to the
    part of the email before the ``@``.

    Raises:
        DuplicateEmailError: If the email already has an account
        UserRegistrationError: If the user model rejects the input
    """
    email = email.strip().lower()
    if User.objects.filter(email=email).exists():
        raise DuplicateEmailError(DUPLICATE_EMAIL_MESSAGE)

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=(display_name or '').strip() or email.split('@')[0],
        )
    except IntegrityError:
        raise DuplicateEmailError(DUPLICATE_EMAIL_MESSAGE)
    except ValueError as e:
        raise UserRegistrationError(f"Registration failed: {e}")

    logger.info("New site user %s", user.id)
    return user


def authenticate_user(*, email: str, password: str) -> User:
    """
    Check an email/password pair and stamp ``last_login``.

    Inactive accounts are only reported once the password is right, so the
    error does not reveal which emails are registered.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        InactiveAccountError: Correct password on a deactivated account
    """
    user = User.objects.filter(email=email.strip().lower()).first()
    if user is None or not user.check_password(password):
        raise InvalidCredentialsError("Invalid email or password")
    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    update_last_login(None, user)
    return user
