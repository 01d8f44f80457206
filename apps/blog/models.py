from django.db import models
import math
import uuid


class BlogPost(models.Model):
    """Blog article. Only published posts are visible to the public."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    slug = models.SlugField(max_length=255, unique=True)
    title = models.CharField(max_length=255)
    excerpt = models.TextField(blank=True)
    content = models.TextField(blank=True)
    author = models.CharField(max_length=100, default='Pub Club')
    published = models.BooleanField(default=False, db_index=True)
    published_at = models.DateTimeField(null=True, blank=True)

    # SEO
    meta_title = models.CharField(max_length=255, blank=True, null=True)
    meta_description = models.TextField(blank=True, null=True)
    image_url = models.CharField(max_length=1000, blank=True, null=True)

    # Call to action under the post, e.g. an area or amenity page
    suggested_link_type = models.CharField(max_length=50, blank=True, null=True)
    suggested_link_slug = models.CharField(max_length=255, blank=True, null=True)
    suggested_link_label = models.CharField(max_length=255, blank=True, null=True)
    map_config = models.JSONField(null=True, blank=True)

    tags = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'blog_posts'
        ordering = ['-published_at', '-created_at']

    def __str__(self):
        return self.title

    @property
    def reading_time(self) -> int:
        """Minutes to read at 200 words per minute, at least 1."""
        words = len(self.content.split())
        return max(1, math.ceil(words / 200))


class BlogSubscription(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'blog_subscriptions'
        ordering = ['-created_at']

    def __str__(self):
        return self.email
