from django.db import models
from django.db.models.functions import Coalesce
from django.core.validators import MinValueValidator, MaxValueValidator
import uuid


class City(models.Model):
    """City a pub belongs to (London for nearly everything)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'cities'
        ordering = ['name']
        verbose_name_plural = 'cities'

    def __str__(self):
        return self.name


class Borough(models.Model):
    """Borough within a city. The borough name is what the site calls an area."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, db_index=True)
    city = models.ForeignKey(City, on_delete=models.CASCADE, related_name='boroughs')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'boroughs'
        unique_together = [['city', 'name']]
        ordering = ['name']

    def __str__(self):
        return self.name


class Amenity(models.Model):
    """Amenity a pub can offer, e.g. ``beer-garden`` / ``Beer Garden``."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.CharField(max_length=100, unique=True)
    label = models.CharField(max_length=100)

    class Meta:
        db_table = 'amenities'
        ordering = ['label']
        verbose_name_plural = 'amenities'

    def __str__(self):
        return self.label


class PubQuerySet(models.QuerySet):

    def with_area(self):
        """Annotate ``area_name``: borough name, falling back to the city name."""
        return self.annotate(area_name=Coalesce('borough__name', 'city__name'))

    def in_area(self, name):
        return self.with_area().filter(area_name__iexact=name)


class Pub(models.Model):
    """A pub listed in the directory."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    place_id = models.CharField(max_length=255, unique=True, null=True, blank=True)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True)
    type = models.CharField(max_length=50, default='Traditional')
    features = models.JSONField(default=list, blank=True)
    rating = models.FloatField(default=0, validators=[MinValueValidator(0), MaxValueValidator(5)])
    review_count = models.PositiveIntegerField(default=0)

    # Contact & location
    address = models.CharField(max_length=500, blank=True)
    postcode = models.CharField(max_length=20, blank=True, db_index=True)
    phone = models.CharField(max_length=50, blank=True)
    website = models.CharField(max_length=500, blank=True)
    opening_hours = models.TextField(blank=True)
    lat = models.FloatField(null=True, blank=True)
    lng = models.FloatField(null=True, blank=True)
    city = models.ForeignKey(City, on_delete=models.SET_NULL, null=True, blank=True, related_name='pubs')
    borough = models.ForeignKey(Borough, on_delete=models.SET_NULL, null=True, blank=True, related_name='pubs')

    # Google Places photo pointers
    photo_url = models.CharField(max_length=1000, blank=True)
    photo_name = models.CharField(max_length=500, blank=True)

    amenities = models.ManyToManyField(Amenity, through='PubAmenity', related_name='pubs', blank=True)

    # Pub-manager credentials (password is hashed)
    manager_email = models.EmailField(blank=True, db_index=True)
    manager_password = models.CharField(max_length=255, blank=True)
    last_updated = models.DateTimeField(null=True, blank=True)
    updated_by = models.CharField(max_length=255, blank=True)

    # Community aggregates maintained by the reviews app
    user_review_count = models.PositiveIntegerField(default=0)
    user_rating_avg = models.FloatField(null=True, blank=True)
    checkin_count = models.PositiveIntegerField(default=0)
    wishlist_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PubQuerySet.as_manager()

    class Meta:
        db_table = 'pubs'
        indexes = [
            models.Index(fields=['rating']),
            models.Index(fields=['lat', 'lng']),
            models.Index(fields=['borough', 'rating']),
        ]
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            from apps.pubs.services.slugs import pub_slug
            self.slug = pub_slug(self.name, self.place_id or str(self.id))
        super().save(*args, **kwargs)

    @property
    def area(self):
        """Borough name, else city name, else empty string."""
        if self.borough_id:
            return self.borough.name
        if self.city_id:
            return self.city.name
        return ''

    def amenity_labels(self):
        return [pa.amenity.label for pa in self.pub_amenities.all()]

    def display_features(self):
        """Stored features followed by amenity labels, without duplicates."""
        combined = []
        for item in list(self.features or []) + self.amenity_labels():
            if item and item not in combined:
                combined.append(item)
        return combined


class PubAmenity(models.Model):
    """Amenity attached to a pub, optionally with a free-text value."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    pub = models.ForeignKey(Pub, on_delete=models.CASCADE, related_name='pub_amenities')
    amenity = models.ForeignKey(Amenity, on_delete=models.CASCADE, related_name='pub_amenities')
    value = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = 'pub_amenities'
        unique_together = [['pub', 'amenity']]
        verbose_name_plural = 'pub amenities'

    def __str__(self):
        return f"{self.pub.name} - {self.amenity.label}"


class PubPhoto(models.Model):
    """Photo uploaded by a pub manager."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    pub = models.ForeignKey(Pub, on_delete=models.CASCADE, related_name='photos')
    url = models.CharField(max_length=1000)
    is_cover = models.BooleanField(default=False)
    uploaded_by = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'pub_photos'
        indexes = [
            models.Index(fields=['pub', 'is_cover']),
        ]
        ordering = ['-is_cover', '-created_at']

    def __str__(self):
        return f"{self.pub.name} photo ({'cover' if self.is_cover else 'gallery'})"


class AreaFeaturedPub(models.Model):
    """Pub promoted at the top of an area page."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    area_name = models.CharField(max_length=100, db_index=True)
    pub = models.ForeignKey(Pub, on_delete=models.CASCADE, related_name='area_features')
    image_url = models.CharField(max_length=1000, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'area_featured_pubs'
        unique_together = [['area_name', 'pub']]
        ordering = ['area_name', 'created_at']

    def __str__(self):
        return f"{self.area_name}: {self.pub.name}"
