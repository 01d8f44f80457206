"""Domain exceptions for accounts app."""


class AccountsServiceError(Exception):
    """Base exception for all accounts service errors."""
    pass


class UserRegistrationError(AccountsServiceError):
    pass


class DuplicateEmailError(UserRegistrationError):
    """The email is already registered (HTTP 409)."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Unknown email or wrong password (HTTP 401)."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Deactivated account (HTTP 403)."""
    pass
