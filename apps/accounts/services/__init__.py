"""
Accounts services - Business logic layer.

Site-user registration, sign-in and JWT issuance. Staff users are the
admins of the back-office API.
"""

from .auth import register_user, authenticate_user, token_pair

# Domain Exceptions
from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InactiveAccountError,
)

__all__ = [
    # Auth
    'register_user',
    'authenticate_user',
    'token_pair',
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'DuplicateEmailError',
    'InvalidCredentialsError',
    'InactiveAccountError',
]
