"""
Serializers for analytics app.

This module contains:
1. Input serializers - Request body and query parameter validation
2. Response serializers - API documentation and output formatting

Input Serializers:
    EventBatchSerializer - Validates the events payload shape
    PubAnalyticsQuerySerializer - Validates pub_id and date range parameters
    BenchmarkQuerySerializer - Validates benchmark period and radius
    OverviewQuerySerializer - Validates admin overview date range

Response Serializers:
    EventBatchResponseSerializer - Ingestion result
    PubAnalyticsResponseSerializer - Pub manager dashboard numbers
    BenchmarkResponseSerializer - Pub compared with all and nearby pubs
    AdminOverviewSerializer - Site-wide admin numbers
    AdminAuditSerializer - Audit log entries
"""

from datetime import datetime, time, timedelta

from django.utils import timezone
from rest_framework import serializers

from .models import AdminAudit


def _start_of_day(value):
    return timezone.make_aware(datetime.combine(value, time.min))


def _end_of_day(value):
    return timezone.make_aware(datetime.combine(value, time.max))


# =============================================================================
# Input Serializers
# =============================================================================

class EventBatchSerializer(serializers.Serializer):
    """
    Validate the event batch posted by the browser.

    Only the outer shape is checked; individual events are validated
    during ingestion so one bad event never rejects the batch.
    """

    events = serializers.ListField(
        child=serializers.JSONField(),
        allow_empty=True,
        help_text='List of {type, data} events'
    )


class DateRangeQuerySerializer(serializers.Serializer):
    """
    Validate ``from``/``to`` dates or a ``period`` in days.

    Query Parameters:
        from (date): Start of range (YYYY-MM-DD)
        to (date): End of range (YYYY-MM-DD)
        period (int): Number of days back from now (1-365)

    Note:
        Explicit dates take precedence. Validated data always contains
        aware ``start`` and ``end`` datetimes.
    """

    period = serializers.IntegerField(
        min_value=1,
        max_value=365,
        required=False,
        default=30,
        help_text='Number of days to consider (1-365)'
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # 'from' is a keyword, so the fields are added by name
        self.fields['from'] = serializers.DateField(required=False)
        self.fields['to'] = serializers.DateField(required=False)

    def validate(self, attrs):
        """Turn the date parameters into a start/end datetime pair."""
        now = timezone.now()
        date_from = attrs.pop('from', None)
        date_to = attrs.pop('to', None)

        end = _end_of_day(date_to) if date_to else now
        if date_from:
            start = _start_of_day(date_from)
        else:
            start = end - timedelta(days=attrs['period'])

        if start > end:
            raise serializers.ValidationError({
                'from': 'Start date must be before end date'
            })

        attrs['start'] = start
        attrs['end'] = end
        return attrs


class PubAnalyticsQuerySerializer(DateRangeQuerySerializer):
    """
    Validate query parameters for pub analytics.

    Used by: pub_analytics

    Query Parameters:
        pub_id (str): Pub UUID or 'all' for every managed pub
    """

    pub_id = serializers.CharField(required=False, allow_blank=True)


class BenchmarkQuerySerializer(serializers.Serializer):
    """
    Validate query parameters for the benchmark endpoint.

    Used by: pub_benchmark
    """

    pub_id = serializers.CharField(required=False, allow_blank=True)
    period = serializers.IntegerField(min_value=1, max_value=365, default=30)
    radius = serializers.FloatField(
        min_value=0.1,
        max_value=100,
        default=5.0,
        help_text='Neighbourhood radius in kilometres'
    )


class OverviewQuerySerializer(DateRangeQuerySerializer):
    """Validate query parameters for the admin overview."""


# =============================================================================
# Response Serializers (API Documentation)
# =============================================================================

class EventBatchResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    processed = serializers.IntegerField()


class PubAnalyticsOverviewSerializer(serializers.Serializer):
    """Headline numbers for the pub-manager dashboard."""
    total_views = serializers.IntegerField()
    unique_visitors = serializers.IntegerField()
    unique_users = serializers.IntegerField()
    avg_views_per_day = serializers.FloatField()
    total_cta_clicks = serializers.IntegerField()
    cta_click_rate = serializers.FloatField()


class PubAnalyticsResponseSerializer(serializers.Serializer):
    """Response serializer for pub analytics."""
    overview = PubAnalyticsOverviewSerializer()
    views_over_time = serializers.ListField(child=serializers.DictField())
    popular_times = serializers.ListField(child=serializers.DictField())
    device_breakdown = serializers.ListField(child=serializers.DictField())
    referral_sources = serializers.ListField(child=serializers.DictField())
    cta_breakdown = serializers.ListField(child=serializers.DictField())
    date_range = serializers.DictField()


class BenchmarkPubSerializer(serializers.Serializer):
    views = serializers.IntegerField()
    rating = serializers.FloatField()
    review_count = serializers.IntegerField()
    amenity_count = serializers.IntegerField()
    photo_count = serializers.IntegerField()


class BenchmarkResponseSerializer(serializers.Serializer):
    """Response serializer for the pub benchmark."""
    pub = BenchmarkPubSerializer()
    all_pubs = serializers.DictField()
    nearby_pubs = serializers.DictField()


class AdminOverviewSerializer(serializers.Serializer):
    """Response serializer for the admin analytics overview."""
    total_views = serializers.IntegerField()
    total_searches = serializers.IntegerField()
    unique_pubs_viewed = serializers.IntegerField()
    active_managers = serializers.IntegerField()
    filters_top = serializers.ListField(child=serializers.DictField())
    views_by_day = serializers.ListField(child=serializers.DictField())
    searches_by_day = serializers.ListField(child=serializers.DictField())
    high_potential_pubs = serializers.ListField(child=serializers.DictField())
    spin_the_wheel = serializers.DictField()
    homepage_tiles = serializers.DictField()


class AdminAuditSerializer(serializers.ModelSerializer):
    class Meta:
        model = AdminAudit
        fields = ['id', 'actor', 'action', 'entity', 'entity_id', 'diff', 'created_at']
        read_only_fields = fields


class ErrorSerializer(serializers.Serializer):
    """Standard error response serializer."""
    error = serializers.CharField()
