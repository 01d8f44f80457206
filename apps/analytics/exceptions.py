"""
Domain exceptions for analytics app.

Event ingestion logs and skips bad events one by one; the only hard
failure is a batch that is not a list at all.

Exception Hierarchy:
    AnalyticsServiceError (base)
    └── InvalidEventsError

Usage:
    from apps.analytics.exceptions import InvalidEventsError

    try:
        processed = ingest_events(events=payload.get('events'))
    except InvalidEventsError as e:
        return Response({'error': str(e)}, status=400)
"""


class AnalyticsServiceError(Exception):
    """Base exception for all analytics service errors."""

    pass


class InvalidEventsError(AnalyticsServiceError):
    """
    The tracking payload's ``events`` is missing or not a list.

    Example:
        raise InvalidEventsError("Events must be an array")
    """

    pass
