import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app import dependencies as deps
from app.exceptions import PostForbiddenError, PostNotFoundError
from app.schemas.discovery import (
    CategoriesResponse,
    PostDetailResponse,
    PostListResponse,
    SearchResponse,
    TagsResponse,
)
from app.services.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, parse_int_param
from app.services.posts_service import PostsService
from app.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()

# Numeric parameters are taken as strings so malformed values fall back to
# their defaults instead of failing validation.


@router.get("/posts", response_model=PostListResponse)
def list_posts(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    category: Optional[str] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    sortBy: str = "date",
    sortOrder: str = "desc",
    service: PostsService = Depends(deps.get_posts_service),
    current_settings: Settings = Depends(deps.get_settings),
):
    """List published posts with filtering, sorting and pagination."""
    try:
        return service.list_posts(
            page=parse_int_param(page, DEFAULT_PAGE),
            limit=parse_int_param(limit, current_settings.POSTS_PER_PAGE),
            category=category or None,
            tag=tag or None,
            search=search or None,
            sort_by=sortBy,
            sort_order=sortOrder,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch blog posts")


@router.get("/posts/{slug}", response_model=PostDetailResponse)
def get_post(
    slug: str,
    includeRelated: str = "true",
    relatedCount: Optional[str] = None,
    service: PostsService = Depends(deps.get_posts_service),
    current_settings: Settings = Depends(deps.get_settings),
):
    """Get a single published post with SEO metadata and related posts."""
    try:
        return service.get_post(
            slug,
            include_related=includeRelated.lower() != "false",
            related_count=parse_int_param(
                relatedCount, current_settings.RELATED_POSTS_COUNT
            ),
        )
    except PostNotFoundError:
        raise HTTPException(status_code=404, detail="Post not found")
    except PostForbiddenError:
        raise HTTPException(status_code=403, detail="Post not published")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch blog post")


@router.get("/search", response_model=SearchResponse)
def search_posts(
    q: Optional[str] = None,
    query: Optional[str] = None,
    limit: Optional[str] = None,
    searchIn: Optional[str] = Query(
        None, description="Comma separated fields: title, excerpt, content, tags, category"
    ),
    service: PostsService = Depends(deps.get_posts_service),
):
    """Search published posts; every result carries a highlighted snippet."""
    try:
        fields = [field for field in (searchIn or "").split(",") if field.strip()]
        return service.search(
            q or query or "",
            limit=parse_int_param(limit, DEFAULT_LIMIT),
            search_in=fields or None,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error searching posts: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to search blog posts")


@router.get("/tags", response_model=TagsResponse)
def list_tags(service: PostsService = Depends(deps.get_posts_service)):
    """List tags with post counts, plus the tag cloud."""
    try:
        return service.list_tags()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing tags: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch tags")


@router.get("/categories", response_model=CategoriesResponse)
def list_categories(service: PostsService = Depends(deps.get_posts_service)):
    """List categories with post counts."""
    try:
        return service.list_categories()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing categories: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch categories")
