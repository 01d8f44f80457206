from django.db import models
import uuid


class HomepageSlot(models.Model):
    """
    A promoted area x amenity tile on the homepage.

    Only active slots are shown, ordered by ``position`` then score.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    area_slug = models.CharField(max_length=100)
    amenity_slug = models.CharField(max_length=100)
    title = models.CharField(max_length=255)
    subtitle = models.CharField(max_length=255, blank=True)
    href = models.CharField(max_length=500)
    icon = models.CharField(max_length=20, default='🍺')
    pub_count = models.PositiveIntegerField(default=0)
    score = models.FloatField(default=0)
    is_seasonal = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True, db_index=True)
    position = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'homepage_slots'
        ordering = ['position', '-score']
        constraints = [
            models.UniqueConstraint(fields=['area_slug', 'amenity_slug'], name='unique_homepage_slot'),
        ]

    def __str__(self):
        return self.title
