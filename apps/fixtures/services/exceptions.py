"""Domain exceptions for fixtures app."""


class FixturesServiceError(Exception):
    """Base exception for all fixtures service errors."""
    pass


class SportsDbNotConfiguredError(FixturesServiceError):
    """No TheSportsDB API key is configured."""
    pass
