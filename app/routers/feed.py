import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response

from app import dependencies as deps
from app.exceptions import FeedDisabledError
from app.services.feed import RSS_CACHE_CONTROL, RSS_CONTENT_TYPE
from app.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/rss")
def get_rss_feed(
    request: Request,
    service: PostsService = Depends(deps.get_posts_service),
):
    """
    RSS 2.0 feed of all published posts, newest first.
    """
    try:
        xml = service.render_feed(self_url=str(request.url_for("get_rss_feed")))
    except FeedDisabledError:
        raise HTTPException(status_code=404, detail="RSS feed is disabled")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error generating RSS feed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to generate RSS feed")

    return Response(
        content=xml,
        media_type=RSS_CONTENT_TYPE,
        headers={"Cache-Control": RSS_CACHE_CONTROL},
    )
