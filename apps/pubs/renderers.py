from rest_framework.renderers import JSONRenderer


class AnyMediaJSONRenderer(JSONRenderer):
    """
    Satisfies any ``Accept`` header.

    Used by views that answer with a raw ``HttpResponse`` (images, feeds) so
    content negotiation never rejects ``image/*`` or ``application/rss+xml``
    clients. Error ``Response`` objects from those views are still JSON.
    """
    media_type = '*/*'
