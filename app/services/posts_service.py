import logging
from typing import Iterable, List, Optional

from app.exceptions import FeedDisabledError, PostForbiddenError, PostNotFoundError
from app.repos.corpus_repo import CorpusSnapshot
from app.schemas.blog import Post
from app.schemas.discovery import (
    CategoriesResponse,
    FeatureFlags,
    PaginationBlock,
    PostConfig,
    PostDetailResponse,
    PostFilters,
    PostListResponse,
    SearchResponse,
    SearchResult,
    TagsResponse,
)
from app.services.feed import FeedMetadata, render_rss_feed
from app.services.pagination import DEFAULT_LIMIT, paginate
from app.services.related import find_related_posts
from app.services.search import create_snippet, normalize_search_fields, search_posts
from app.services.seo import generate_seo_metadata
from app.services.taxonomy import count_categories, count_tags, generate_tag_cloud
from app.settings import Settings
from app.utils import generate_share_urls, generate_table_of_contents

logger = logging.getLogger(__name__)

SORT_FIELDS = ("date", "title", "readTime")
SORT_ORDERS = ("asc", "desc")
SNIPPET_LENGTH = 200


def sort_posts(posts: Iterable[Post], sort_by: str, sort_order: str) -> List[Post]:
    """Sort by date, title (case-insensitive) or readTime; equal keys fall back to slug."""
    keys = {
        "date": lambda post: post.date,
        "title": lambda post: post.title.casefold(),
        "readTime": lambda post: post.readTime,
    }
    ordered = sorted(posts, key=lambda post: post.slug)
    ordered.sort(key=keys.get(sort_by, keys["date"]), reverse=sort_order == "desc")
    return ordered


class PostsService:
    """Read-only queries over one corpus snapshot."""

    def __init__(self, snapshot: CorpusSnapshot, settings: Settings):
        self.snapshot = snapshot
        self.settings = settings

    def list_posts(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = "date",
        sort_order: str = "desc",
    ) -> PostListResponse:
        sort_by = sort_by if sort_by in SORT_FIELDS else "date"
        sort_order = sort_order if sort_order in SORT_ORDERS else "desc"
        limit = limit or self.settings.POSTS_PER_PAGE

        if category:
            posts = self.snapshot.posts_by_category(category)
        else:
            posts = self.snapshot.published_posts()
        if tag:
            tagged = {post.slug for post in self.snapshot.posts_by_tag(tag)}
            posts = [post for post in posts if post.slug in tagged]
        if search:
            posts = search_posts(posts, search)

        posts = sort_posts(posts, sort_by, sort_order)
        pagination = paginate(len(posts), page, limit)
        window = posts[pagination.startIndex : pagination.endIndex]

        return PostListResponse(
            posts=[post.to_preview() for post in window],
            pagination=PaginationBlock.from_pagination(pagination),
            filters=PostFilters(
                category=category,
                tag=tag,
                search=search,
                sortBy=sort_by,
                sortOrder=sort_order,
            ),
        )

    def get_post(
        self,
        slug: str,
        include_related: bool = True,
        related_count: Optional[int] = None,
    ) -> PostDetailResponse:
        post = self.snapshot.get_post(slug)
        if post is None:
            raise PostNotFoundError(slug)
        if not post.published:
            raise PostForbiddenError(slug)

        related: List[Post] = []
        if include_related and self.settings.RELATED_POSTS_ENABLED:
            related = find_related_posts(
                post,
                self.snapshot.published_posts(),
                count=related_count or self.settings.RELATED_POSTS_COUNT,
                algorithm=self.settings.RELATED_POSTS_ALGORITHM,
            )

        share_urls = {}
        if self.settings.SOCIAL_SHARING_ENABLED:
            share_urls = generate_share_urls(
                post.title,
                post.excerpt,
                self.settings.post_url(post.slug),
                self.settings.SOCIAL_SHARING_PLATFORMS,
            )

        return PostDetailResponse(
            post=post,
            seo=generate_seo_metadata(post, self.settings),
            relatedPosts=[item.to_preview() for item in related],
            tableOfContents=generate_table_of_contents(post.content),
            shareUrls=share_urls,
            config=PostConfig(features=self._feature_flags()),
        )

    def _feature_flags(self) -> FeatureFlags:
        comments = {"enabled": self.settings.COMMENTS_ENABLED}
        if self.settings.COMMENTS_PROVIDER:
            comments["provider"] = self.settings.COMMENTS_PROVIDER
        return FeatureFlags(
            comments=comments,
            socialSharing={
                "enabled": self.settings.SOCIAL_SHARING_ENABLED,
                "platforms": list(self.settings.SOCIAL_SHARING_PLATFORMS),
            },
        )

    def search(
        self,
        query: str,
        limit: int = DEFAULT_LIMIT,
        search_in: Optional[Iterable[str]] = None,
    ) -> SearchResponse:
        fields = list(normalize_search_fields(search_in))
        query = (query or "").strip()
        if not query:
            return SearchResponse(query="", total=0, results=[], searchIn=fields)

        matches = search_posts(self.snapshot.published_posts(), query, fields)
        results = [
            SearchResult(
                **post.to_preview().model_dump(),
                snippet=create_snippet(post.content, query, SNIPPET_LENGTH),
            )
            for post in matches[:limit]
        ]
        return SearchResponse(
            results=results, query=query, total=len(matches), searchIn=fields
        )

    def list_tags(self) -> TagsResponse:
        posts = self.snapshot.published_posts()
        tags = count_tags(posts, self.snapshot.tags)
        return TagsResponse(tags=tags, tagCloud=generate_tag_cloud(posts), total=len(tags))

    def list_categories(self) -> CategoriesResponse:
        categories = count_categories(
            self.snapshot.published_posts(), self.snapshot.categories
        )
        return CategoriesResponse(categories=categories, total=len(categories))

    def render_feed(self, self_url: str = "") -> str:
        if not self.settings.RSS_ENABLED:
            raise FeedDisabledError()

        posts = sort_posts(self.snapshot.published_posts(), "date", "desc")
        metadata = FeedMetadata(
            title=self.settings.feed_title,
            description=self.settings.feed_description,
            site_url=self.settings.SITE_URL,
            base_path=self.settings.blog_base_path,
            self_url=self_url,
            language=self.settings.RSS_LANGUAGE,
        )
        return render_rss_feed(posts, metadata)
