class BlogError(Exception):
    """Base class for errors raised by the blog discovery core."""


class PostNotFoundError(BlogError):
    def __init__(self, slug: str):
        super().__init__(f"Post not found: {slug}")
        self.slug = slug


class PostForbiddenError(BlogError):
    """The post exists but is not published."""

    def __init__(self, slug: str):
        super().__init__(f"Post not published: {slug}")
        self.slug = slug


class FeedDisabledError(BlogError):
    def __init__(self):
        super().__init__("RSS feed is disabled")


class CorpusValidationError(BlogError):
    """Content failed validation while building a corpus snapshot."""
