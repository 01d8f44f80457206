"""Blog post service - public reading, RSS and admin editing."""

import logging
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from django.utils.feedgenerator import Rss201rev2Feed

from apps.pubs.services.slugs import generate_slug
from apps.blog.models import BlogPost
from .exceptions import BlogPostNotFoundError, SlugInUseError, InvalidBlogPostError

logger = logging.getLogger(__name__)

RSS_ITEMS = 20
ADMIN_MAX_LIMIT = 100

# Fields an admin may set directly; slug, tags and published are handled separately
EDITABLE_FIELDS = (
    'title',
    'excerpt',
    'content',
    'author',
    'meta_title',
    'meta_description',
    'image_url',
    'suggested_link_type',
    'suggested_link_slug',
    'suggested_link_label',
    'map_config',
)


def published_posts():
    return BlogPost.objects.filter(published=True).order_by('-published_at', '-created_at')


def blog_config() -> dict:
    """
    Whether the blog has enough published posts to show.

    Below ``BLOG_MIN_PUBLISHED`` posts the site shows a coming-soon page.
    """
    count = published_posts().count()
    return {
        'min_published': settings.BLOG_MIN_PUBLISHED,
        'published_count': count,
        'coming_soon': count < settings.BLOG_MIN_PUBLISHED,
    }


def list_published_posts(*, limit: int = 20, offset: int = 0) -> list[BlogPost]:
    return list(published_posts()[offset:offset + limit])


def get_published_post(*, slug: str) -> BlogPost:
    """
    Raises:
        BlogPostNotFoundError: If no published post has this slug
    """
    try:
        return published_posts().get(slug=slug)
    except BlogPost.DoesNotExist:
        raise BlogPostNotFoundError("Post not found")


def related_posts(*, post: BlogPost, limit: int = 3) -> list[BlogPost]:
    """Newest other published posts, preferring ones sharing a tag."""
    others = list(published_posts().exclude(id=post.id)[:50])
    tags = set(post.tags or [])
    others.sort(key=lambda other: not tags.intersection(other.tags or []))
    return others[:limit]


def build_rss_feed() -> str:
    """RSS 2.0 document with the latest published posts."""
    base_url = settings.SITE_URL.rstrip('/')
    feed = Rss201rev2Feed(
        title='Pub Club Blog',
        link=f'{base_url}/blog',
        description=(
            "Discover the latest pub news, events, and insights into London's vibrant nightlife scene."
        ),
        language='en-GB',
        feed_url=f'{base_url}/blog/rss.xml',
    )
    for post in published_posts()[:RSS_ITEMS]:
        link = f'{base_url}/blog/{post.slug}'
        feed.add_item(
            title=post.title,
            link=link,
            description=post.excerpt,
            unique_id=link,
            unique_id_is_permalink=True,
            pubdate=post.published_at or post.created_at,
            author_name=post.author,
            categories=post.tags or [],
        )
    return feed.writeString('utf-8')


# =============================================================================
# Admin
# =============================================================================

def parse_tags(value) -> list[str]:
    """Accept a list or a comma separated string."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(tag).strip() for tag in value if str(tag).strip()]
    return [tag.strip() for tag in str(value).split(',') if tag.strip()]


def list_posts(*, published: Optional[bool] = None, limit: int = 50, offset: int = 0) -> tuple[list[BlogPost], int]:
    """
    Posts for the admin list, most recently edited first.

    Returns:
        (posts, total) where total ignores limit and offset
    """
    queryset = BlogPost.objects.order_by('-updated_at')
    if published is not None:
        queryset = queryset.filter(published=published)
    limit = max(1, min(limit, ADMIN_MAX_LIMIT))
    offset = max(0, offset)
    return list(queryset[offset:offset + limit]), queryset.count()


def get_post(*, post_id) -> BlogPost:
    try:
        return BlogPost.objects.get(id=post_id)
    except (BlogPost.DoesNotExist, ValueError):
        raise BlogPostNotFoundError("Not found")


@transaction.atomic
def create_post(*, data: dict) -> BlogPost:
    """
    Create a post. The slug defaults to the slugified title.

    Raises:
        InvalidBlogPostError: If neither slug nor title is given
        SlugInUseError: If the slug is taken
    """
    slug = (data.get('slug') or '').strip() or generate_slug(data.get('title') or '')
    if not slug:
        raise InvalidBlogPostError("Slug or title required")
    if BlogPost.objects.filter(slug=slug).exists():
        raise SlugInUseError("Slug already in use")

    fields = {field: data[field] for field in EDITABLE_FIELDS if data.get(field) is not None}
    fields.setdefault('title', 'Untitled')
    published = bool(data.get('published'))

    post = BlogPost.objects.create(
        slug=slug,
        published=published,
        published_at=timezone.now() if published else None,
        tags=parse_tags(data.get('tags')),
        **fields,
    )
    logger.info("Blog post created: %s", slug)
    return post


@transaction.atomic
def update_post(*, post_id, data: dict) -> BlogPost:
    """
    Update the fields present in ``data``.

    ``published_at`` is stamped the first time a post is published and
    kept through later unpublish/republish cycles.

    Raises:
        BlogPostNotFoundError: If the post doesn't exist
        SlugInUseError: If the new slug belongs to another post
    """
    post = get_post(post_id=post_id)

    if 'slug' in data and data['slug'] is not None:
        slug = data['slug'].strip()
        if slug and slug != post.slug:
            if BlogPost.objects.filter(slug=slug).exclude(id=post.id).exists():
                raise SlugInUseError("Slug already in use")
            post.slug = slug

    for field in EDITABLE_FIELDS:
        if field in data:
            setattr(post, field, data[field])

    if 'tags' in data and data['tags'] is not None:
        post.tags = parse_tags(data['tags'])

    if 'published' in data:
        post.published = bool(data['published'])
        if post.published and post.published_at is None:
            post.published_at = timezone.now()

    post.save()
    return post


@transaction.atomic
def delete_post(*, post_id) -> None:
    post = get_post(post_id=post_id)
    post.delete()
    logger.info("Blog post deleted: %s", post.slug)


def blog_link_options() -> dict:
    """Every area and amenity filter, for the editor's suggested link and map pickers."""
    from apps.pubs.services import list_areas, AMENITY_FILTERS

    return {
        'areas': [{'slug': area['slug'], 'name': area['name']} for area in list_areas()],
        'amenities': [{'slug': amenity.slug, 'title': amenity.title} for amenity in AMENITY_FILTERS],
    }
