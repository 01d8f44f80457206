"""Domain exceptions for the pub-manager portal."""


class ManagersServiceError(Exception):
    """Base exception for all pub-manager service errors."""
    pass


class InvalidCredentialsError(ManagersServiceError):
    """Email/password pair did not match any managed pub."""
    pass


class NoPasswordSetError(ManagersServiceError):
    """Manager exists but none of their pubs has a password."""
    pass


class InvalidTokenError(ManagersServiceError):
    """Token missing, expired, tampered with or of the wrong type."""
    pass


class PubAccessDeniedError(ManagersServiceError):
    """Manager does not manage the requested pub."""
    pass


class ManagedPubNotFoundError(ManagersServiceError):
    pass


class InvalidManagerRequestError(ManagersServiceError):
    """Missing or malformed input."""
    pass


class AlreadyManagedError(ManagersServiceError):
    """Connection requested for a pub the manager already manages."""
    pass


class RequestNotFoundError(ManagersServiceError):
    pass


class RequestAlreadyProcessedError(ManagersServiceError):
    """Connection request is no longer pending."""
    pass


class PhotoNotFoundError(ManagersServiceError):
    pass


class ManagerLinkNotFoundError(ManagersServiceError):
    pass
