"""Domain exceptions for blog app."""


class BlogServiceError(Exception):
    """Base exception for all blog service errors."""
    pass


class BlogPostNotFoundError(BlogServiceError):
    pass


class SlugInUseError(BlogServiceError):
    """Another post already uses this slug."""
    pass


class InvalidBlogPostError(BlogServiceError):
    """Neither a slug nor a title to derive one from."""
    pass


class InvalidSubscriptionError(BlogServiceError):
    pass
