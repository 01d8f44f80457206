"""Domain exceptions for homepage app."""


class HomepageServiceError(Exception):
    """Base exception for all homepage service errors."""
    pass


class InvalidSlotsError(HomepageServiceError):
    """A manual slot selection could not be applied."""
    pass
