import logging
import threading
from types import MappingProxyType
from typing import Callable, Iterable, List, Mapping, Optional, Tuple

from app.exceptions import CorpusValidationError
from app.schemas.blog import Author, Category, Post, Tag

logger = logging.getLogger(__name__)


class CorpusSnapshot:
    """
    One immutable version of the corpus.

    Posts are kept in load order; lookups by slug go through a read-only index.
    Category and tag mappings are keyed by slug.
    """

    def __init__(
        self,
        posts: Iterable[Post] = (),
        categories: Optional[Mapping[str, Category]] = None,
        tags: Optional[Mapping[str, Tag]] = None,
        authors: Optional[Mapping[str, Author]] = None,
    ):
        self._posts: Tuple[Post, ...] = tuple(posts)
        self._categories = MappingProxyType(dict(categories or {}))
        self._tags = MappingProxyType(dict(tags or {}))
        self._authors = MappingProxyType(dict(authors or {}))
        self._by_slug = MappingProxyType(self._index_posts(self._posts))
        self._validate_taxonomy()

    @staticmethod
    def _index_posts(posts: Tuple[Post, ...]) -> dict:
        index = {}
        for post in posts:
            if post.slug in index:
                raise CorpusValidationError(f"Duplicate post slug: {post.slug}")
            index[post.slug] = post
        return index

    def _validate_taxonomy(self) -> None:
        for label, mapping in (("category", self._categories), ("tag", self._tags)):
            seen = set()
            for item in mapping.values():
                if item.slug in seen:
                    raise CorpusValidationError(f"Duplicate {label} slug: {item.slug}")
                seen.add(item.slug)

    @property
    def posts(self) -> Tuple[Post, ...]:
        return self._posts

    @property
    def categories(self) -> Mapping[str, Category]:
        return self._categories

    @property
    def tags(self) -> Mapping[str, Tag]:
        return self._tags

    @property
    def authors(self) -> Mapping[str, Author]:
        return self._authors

    def __len__(self) -> int:
        return len(self._posts)

    def get_post(self, slug: str) -> Optional[Post]:
        """Look up a post by slug, published or not."""
        return self._by_slug.get(slug)

    def published_posts(self) -> List[Post]:
        return [post for post in self._posts if post.published]

    def posts_by_category(self, category_slug: str) -> List[Post]:
        return [
            post
            for post in self.published_posts()
            if post.category.slug == category_slug
        ]

    def posts_by_tag(self, tag_slug: str) -> List[Post]:
        return [post for post in self.published_posts() if tag_slug in post.tag_slugs]


class CorpusStore:
    """
    Holds the current snapshot and swaps it wholesale on reload.

    Readers grab ``store.snapshot`` once and keep using that object; writers
    build the replacement completely before the reference changes.
    """

    def __init__(
        self,
        snapshot: Optional[CorpusSnapshot] = None,
        loader: Optional[Callable[[], CorpusSnapshot]] = None,
    ):
        self._snapshot = snapshot if snapshot is not None else CorpusSnapshot()
        self._loader = loader
        self._write_lock = threading.Lock()

    @property
    def snapshot(self) -> CorpusSnapshot:
        return self._snapshot

    def set_loader(self, loader: Callable[[], CorpusSnapshot]) -> None:
        self._loader = loader

    def replace(self, snapshot: CorpusSnapshot) -> CorpusSnapshot:
        with self._write_lock:
            previous = self._snapshot
            self._snapshot = snapshot
        logger.info(f"Corpus snapshot replaced ({len(previous)} -> {len(snapshot)} posts)")
        return previous

    def reload(self) -> CorpusSnapshot:
        """Build a fresh snapshot with the configured loader and swap it in."""
        if self._loader is None:
            raise RuntimeError("No corpus loader configured")
        snapshot = self._loader()
        self.replace(snapshot)
        return snapshot


# Global store, populated on application startup
corpus_store = CorpusStore()
