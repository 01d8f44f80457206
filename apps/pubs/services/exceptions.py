"""Domain exceptions for pubs app."""


class PubsServiceError(Exception):
    """Base exception for all pubs service errors."""
    pass


class PubNotFoundError(PubsServiceError):
    """Pub does not exist."""
    pass


class AreaNotFoundError(PubsServiceError):
    """No pubs are listed under this area slug."""
    pass


class AmenityFilterNotFoundError(PubsServiceError):
    """Amenity slug is not one of the known amenity filters."""
    pass


class InvalidFilterError(PubsServiceError):
    """A search or random-pick filter could not be parsed."""
    pass


class NoPubsMatchError(PubsServiceError):
    """No pubs match the requested filters."""
    pass


class NoPubsAfterExclusionsError(PubsServiceError):
    """Every matching pub was excluded by the caller."""
    pass


class PubImportError(PubsServiceError):
    """A CSV row could not be imported."""
    pass


class PhotoFetchError(PubsServiceError):
    """
    Upstream photo could not be served.

    Carries the HTTP status the proxy should answer with.
    """

    def __init__(self, message, status=502):
        super().__init__(message)
        self.status = status
