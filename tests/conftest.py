import datetime
import textwrap

from app.repos.corpus_repo import CorpusSnapshot
from app.schemas.blog import Author, Category, FeaturedImage, Post, Tag
from app.settings import Settings

AUTHOR = Author(name="Griffin Rutherford", role="Engineer")

CATEGORIES = {
    "marketing": Category(name="Marketing", slug="marketing"),
    "automation": Category(name="Automation", slug="automation"),
    "growth": Category(name="Growth", slug="growth"),
}

TAGS = {
    slug: Tag(name=slug.replace("-", " ").title(), slug=slug)
    for slug in ("seo", "crm", "email", "ai-tools", "analytics")
}


def make_post(slug: str, **overrides) -> Post:
    """
    Build a valid Post with sensible defaults.

    ``tags`` and ``category`` may be given as slugs; ``date`` as a date, a
    datetime or an ISO string.
    """
    tags = overrides.pop("tags", ())
    tags = tuple(TAGS.get(t, Tag(name=t.title(), slug=t)) if isinstance(t, str) else t for t in tags)
    primary = overrides.pop("primaryTag", None)
    if isinstance(primary, str):
        primary = TAGS.get(primary, Tag(name=primary.title(), slug=primary))
    category = overrides.pop("category", "marketing")
    if isinstance(category, str):
        category = CATEGORIES.get(category, Category(name=category.title(), slug=category))

    fields = {
        "id": slug,
        "slug": slug,
        "title": slug.replace("-", " ").title(),
        "excerpt": f"Excerpt for {slug}",
        "content": f"Content for {slug}",
        "author": AUTHOR,
        "date": datetime.date(2025, 1, 1),
        "category": category,
        "tags": tags,
        "primaryTag": primary,
        "readTime": 5,
        "published": True,
    }
    fields.update(overrides)
    return Post(**fields)


def make_snapshot(posts, categories=None, tags=None) -> CorpusSnapshot:
    return CorpusSnapshot(
        posts=posts,
        categories=CATEGORIES if categories is None else categories,
        tags=TAGS if tags is None else tags,
    )


def make_settings(**overrides) -> Settings:
    defaults = {
        "SITE_URL": "https://example.com",
        "BLOG_BASE_PATH": "/blog",
        "CONTENT_WATCH_ENABLED": False,
    }
    defaults.update(overrides)
    return Settings(**defaults)


def image(url: str = "/images/hero.png") -> FeaturedImage:
    return FeaturedImage(url=url, alt="hero")


def write_content(root, taxonomy: str, posts: dict) -> None:
    """Write a content directory: taxonomy.yaml plus posts/<name>.md files."""
    (root / "taxonomy.yaml").write_text(textwrap.dedent(taxonomy).lstrip(), encoding="utf-8")
    posts_dir = root / "posts"
    posts_dir.mkdir(parents=True, exist_ok=True)
    for name, raw in posts.items():
        path = posts_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(raw).lstrip(), encoding="utf-8")


TAXONOMY = """
authors:
  griffin:
    name: Griffin Rutherford
    role: Engineer
categories:
  marketing:
    name: Marketing
  automation:
    name: Automation
tags:
  seo: {name: SEO}
  crm: {name: CRM}
"""


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    """

    def __init__(self, **returns):
        self.returns = returns
        self.calls = []

    def _result(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        value = self.returns.get(name)
        if isinstance(value, Exception):
            raise value
        return value

    def list_posts(self, **kwargs):
        return self._result("list_posts", **kwargs)

    def get_post(self, slug, **kwargs):
        return self._result("get_post", slug, **kwargs)

    def search(self, query, **kwargs):
        return self._result("search", query, **kwargs)

    def list_tags(self):
        return self._result("list_tags")

    def list_categories(self):
        return self._result("list_categories")

    def render_feed(self, self_url=""):
        return self._result("render_feed", self_url=self_url)


class FakeStore:
    """CorpusStore stand-in whose reload can be made to fail."""

    def __init__(self, error: Exception = None):
        self.error = error
        self.reloads = 0

    def reload(self):
        self.reloads += 1
        if self.error:
            raise self.error
        return make_snapshot([])
