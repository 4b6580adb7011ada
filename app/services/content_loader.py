import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import frontmatter
import yaml
from pydantic import ValidationError

from app.exceptions import CorpusValidationError
from app.repos.corpus_repo import CorpusSnapshot
from app.schemas.blog import Author, Category, Post, Tag
from app.utils import (
    calculate_reading_time,
    generate_excerpt,
    generate_slug,
    humanize_slug,
)

logger = logging.getLogger(__name__)

TAXONOMY_FILE = "taxonomy.yaml"
POSTS_DIR = "posts"


def load_corpus(content_dir: Union[str, Path]) -> CorpusSnapshot:
    """
    Build a validated snapshot from a content directory.

    Layout::

        content_dir/taxonomy.yaml   authors / categories / tags keyed by slug
        content_dir/posts/**/*.md   one post per file, YAML frontmatter + markdown body
    """
    root = Path(content_dir)
    authors, categories, tags = load_taxonomy(root / TAXONOMY_FILE)

    posts = []
    posts_root = root / POSTS_DIR
    if not posts_root.is_dir():
        logger.warning(f"No posts directory found at {posts_root}")
    else:
        for path in sorted(posts_root.rglob("*.md")):
            posts.append(
                parse_post_file(path, authors=authors, categories=categories, tags=tags)
            )

    snapshot = CorpusSnapshot(
        posts=posts, categories=categories, tags=tags, authors=authors
    )
    logger.info(
        f"Loaded {len(snapshot)} posts, {len(categories)} categories and "
        f"{len(tags)} tags from {root}"
    )
    return snapshot


def load_taxonomy(path: Path):
    if not path.is_file():
        raise CorpusValidationError(f"Taxonomy file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise CorpusValidationError(f"Invalid taxonomy file {path}: {e}") from e

    if not isinstance(data, dict):
        raise CorpusValidationError(f"Taxonomy file {path} must contain a mapping")

    authors = _build_entries(data.get("authors"), Author, path, with_slug=False)
    categories = _build_entries(data.get("categories"), Category, path)
    tags = _build_entries(data.get("tags"), Tag, path)
    return authors, categories, tags


def _build_entries(raw, model, path: Path, with_slug: bool = True) -> Dict[str, Any]:
    entries = {}
    for key, value in (raw or {}).items():
        fields = dict(value or {})
        if with_slug:
            fields.setdefault("slug", key)
        fields.setdefault("name", humanize_slug(str(key)))
        try:
            entries[str(key)] = model(**fields)
        except ValidationError as e:
            raise CorpusValidationError(
                f"Invalid {model.__name__.lower()} '{key}' in {path}: {e}"
            ) from e
    return entries


def parse_post_file(
    path: Path,
    *,
    authors: Mapping[str, Author],
    categories: Mapping[str, Category],
    tags: Mapping[str, Tag],
) -> Post:
    """Parse one markdown file into a Post, resolving taxonomy references."""
    try:
        parsed = frontmatter.load(str(path))
    except Exception as e:
        raise CorpusValidationError(f"Failed to parse {path}: {e}") from e

    metadata = parsed.metadata or {}
    content = parsed.content

    slug = str(metadata.get("slug") or generate_slug(path.stem))
    if "date" not in metadata:
        raise CorpusValidationError(f"Post {path} has no date")

    post_tags = tuple(
        _resolve(tags, tag_key, "tag", path) for tag_key in metadata.get("tags") or []
    )
    primary_key = metadata.get("primaryTag")
    primary_tag = _resolve(tags, primary_key, "tag", path) if primary_key else None

    fields = {
        "id": str(metadata.get("id") or slug),
        "slug": slug,
        "title": metadata.get("title") or humanize_slug(slug),
        "excerpt": metadata.get("excerpt") or generate_excerpt(content),
        "content": content,
        "author": _resolve_author(authors, metadata.get("author"), path),
        "date": metadata["date"],
        "category": _resolve(categories, metadata.get("category"), "category", path),
        "tags": post_tags,
        "primaryTag": primary_tag,
        "readTime": (
            metadata["readTime"]
            if metadata.get("readTime") is not None
            else calculate_reading_time(content)
        ),
        "featuredImage": metadata.get("featuredImage"),
        "seo": metadata.get("seo"),
        "published": _is_published(metadata),
    }

    try:
        post = Post(**fields)
    except ValidationError as e:
        raise CorpusValidationError(f"Invalid post {path}: {e}") from e

    logger.debug(f"Parsed post {post.slug} from {path}")
    return post


def _resolve(mapping: Mapping[str, Any], key, label: str, path: Path):
    if key is None:
        raise CorpusValidationError(f"Post {path} has no {label}")
    try:
        return mapping[str(key)]
    except KeyError:
        raise CorpusValidationError(f"Unknown {label} '{key}' in {path}") from None


def _resolve_author(authors: Mapping[str, Author], value, path: Path) -> Author:
    if isinstance(value, dict):
        try:
            return Author(**value)
        except ValidationError as e:
            raise CorpusValidationError(f"Invalid author in {path}: {e}") from e
    return _resolve(authors, value, "author", path)


def _is_published(metadata: Dict[str, Any]) -> bool:
    published: Optional[bool] = metadata.get("published")
    if published is None:
        return not metadata.get("draft", False)
    return bool(published)
