from django.db import models
import uuid


class UpcomingFixture(models.Model):
    """
    A televised fixture shown to pub-goers.

    One row per event and broadcast: ``external_id`` is
    ``{event_id}-{channel}-{country}`` as reported by TheSportsDB.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    external_id = models.CharField(max_length=255, unique=True)
    event_id = models.CharField(max_length=50, db_index=True)
    name = models.CharField(max_length=255, blank=True, null=True)
    sport = models.CharField(max_length=100, blank=True, null=True)
    league = models.CharField(max_length=255, blank=True, null=True)
    image_url = models.CharField(max_length=1000, blank=True, null=True)
    starting_at = models.DateTimeField(db_index=True)
    channel_slug = models.CharField(max_length=100, blank=True, null=True)
    channel_name = models.CharField(max_length=100)
    channel_link = models.CharField(max_length=500)
    country = models.CharField(max_length=100, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'upcoming_fixtures'
        ordering = ['starting_at']

    def __str__(self):
        return f"{self.name} ({self.channel_name})"
