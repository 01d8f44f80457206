from django.conf import settings
from django.db import models
from django.utils import timezone
import uuid


class EventPageView(models.Model):
    """Page view of a pub or area page."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='page_views',
    )
    session_id = models.CharField(max_length=100, db_index=True)
    pub = models.ForeignKey('pubs.Pub', on_delete=models.CASCADE, null=True, blank=True, related_name='page_views')
    area_slug = models.CharField(max_length=100, blank=True, db_index=True)
    ref = models.CharField(max_length=500, blank=True)
    utm = models.JSONField(null=True, blank=True)
    device = models.CharField(max_length=20, blank=True)
    ts = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'events_page_view'
        indexes = [
            models.Index(fields=['pub', 'ts']),
            models.Index(fields=['session_id', 'pub']),
        ]


class EventSearch(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='searches',
    )
    session_id = models.CharField(max_length=100, blank=True)
    query = models.CharField(max_length=255)
    city = models.CharField(max_length=100, blank=True)
    borough = models.CharField(max_length=100, blank=True)
    results_count = models.PositiveIntegerField(null=True, blank=True)
    ts = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'events_search'


class EventFilterUsage(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session_id = models.CharField(max_length=100, blank=True)
    filter_key = models.CharField(max_length=100, db_index=True)
    city = models.CharField(max_length=100, blank=True)
    borough = models.CharField(max_length=100, blank=True)
    ts = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'events_filter_usage'
        indexes = [
            models.Index(fields=['session_id', 'filter_key']),
        ]


class CtaType(models.TextChoices):
    BOOK = 'book', 'Book'
    CALL = 'call', 'Call'
    WEBSITE = 'website', 'Website'
    SPIN = 'spin', 'Spin the wheel'
    SPIN_VIEW_PUB = 'spin_view_pub', 'View pub after spin'


class EventCtaClick(models.Model):
    """Call-to-action click. Spin events carry no pub."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session_id = models.CharField(max_length=100, blank=True)
    pub = models.ForeignKey('pubs.Pub', on_delete=models.CASCADE, null=True, blank=True, related_name='cta_clicks')
    type = models.CharField(max_length=20, choices=CtaType.choices)
    ts = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'events_cta_click'
        indexes = [
            models.Index(fields=['type', 'ts']),
        ]


class TileEventType(models.TextChoices):
    IMPRESSION = 'impression', 'Impression'
    CLICK = 'click', 'Click'


class EventHomepageTile(models.Model):
    """Impression or click on a homepage tile."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session_id = models.CharField(max_length=100, blank=True)
    type = models.CharField(max_length=20, choices=TileEventType.choices)
    slot_id = models.CharField(max_length=100, db_index=True)
    title = models.CharField(max_length=255, blank=True)
    amenity = models.CharField(max_length=100, blank=True)
    city = models.CharField(max_length=100, blank=True)
    href = models.CharField(max_length=500, blank=True)
    ts = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'events_homepage_tile'
        indexes = [
            models.Index(fields=['type', 'ts']),
        ]


class AdminAudit(models.Model):
    """Change made through the admin back-office or the manager portal."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    actor = models.CharField(max_length=255)
    action = models.CharField(max_length=50, db_index=True)
    entity = models.CharField(max_length=50)
    entity_id = models.CharField(max_length=255, blank=True)
    diff = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'admin_audit'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.actor} {self.action} {self.entity} {self.entity_id}"
