from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator, MinLengthValidator
import uuid


class Review(models.Model):
    """A site user's review of a pub."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='reviews')
    pub = models.ForeignKey('pubs.Pub', on_delete=models.CASCADE, related_name='reviews')
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    title = models.CharField(max_length=100, blank=True)
    body = models.TextField(validators=[MinLengthValidator(10)], max_length=2000)
    photos = models.JSONField(default=list, blank=True)
    is_visible = models.BooleanField(default=True)
    is_edited = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'reviews'
        unique_together = [['user', 'pub']]
        indexes = [
            models.Index(fields=['pub', 'is_visible', 'created_at']),
            models.Index(fields=['user', 'created_at']),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user.get_display_name()} - {self.pub.name} ({self.rating}★)"


class Checkin(models.Model):
    """A user's record of having visited a pub."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='checkins')
    pub = models.ForeignKey('pubs.Pub', on_delete=models.CASCADE, related_name='checkins')
    note = models.CharField(max_length=500, blank=True)
    visited_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'checkins'
        unique_together = [['user', 'pub']]
        ordering = ['-visited_at']

    def __str__(self):
        return f"{self.user.get_display_name()} @ {self.pub.name}"


class WishlistItem(models.Model):
    """Pub a user wants to visit."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='wishlist_items')
    pub = models.ForeignKey('pubs.Pub', on_delete=models.CASCADE, related_name='wishlist_items')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'wishlist_items'
        unique_together = [['user', 'pub']]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user.get_display_name()} wants {self.pub.name}"
