"""
Blog services - Business logic layer.

This package contains all business operations for the blog app:
- Published posts, reading time and the RSS feed
- Coming-soon state while too few posts are published
- Admin post editing
- Newsletter subscriptions
"""

from .posts import (
    blog_config,
    list_published_posts,
    get_published_post,
    related_posts,
    build_rss_feed,
    parse_tags,
    list_posts,
    get_post,
    create_post,
    update_post,
    delete_post,
    blog_link_options,
)
from .subscriptions import subscribe, list_subscriptions

# Domain Exceptions
from .exceptions import (
    BlogServiceError,
    BlogPostNotFoundError,
    SlugInUseError,
    InvalidBlogPostError,
    InvalidSubscriptionError,
)

__all__ = [
    # Public
    'blog_config',
    'list_published_posts',
    'get_published_post',
    'related_posts',
    'build_rss_feed',
    # Admin
    'parse_tags',
    'list_posts',
    'get_post',
    'create_post',
    'update_post',
    'delete_post',
    'blog_link_options',
    # Subscriptions
    'subscribe',
    'list_subscriptions',
    # Exceptions
    'BlogServiceError',
    'BlogPostNotFoundError',
    'SlugInUseError',
    'InvalidBlogPostError',
    'InvalidSubscriptionError',
]
