import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.repos.corpus_repo import corpus_store
from app.routers import feed, posts
from app.services.content_loader import load_corpus
from app.services.content_watcher import start_watcher, stop_watcher
from app.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Blog Discovery API",
    description="Listing, search, taxonomy, related posts and RSS over a blog corpus",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    corpus_store.set_loader(lambda: load_corpus(settings.CONTENT_DIR))
    corpus_store.reload()
    logger.info(f"Corpus loaded with {len(corpus_store.snapshot)} posts")

    watcher_thread = None
    if settings.CONTENT_WATCH_ENABLED:
        watcher_thread = start_watcher(corpus_store)

    try:
        yield
    finally:
        if watcher_thread is not None:
            stop_watcher()
            watcher_thread.join(timeout=10)
            logger.info("Content watcher exited gracefully")


app.router.lifespan_context = lifespan

app.include_router(posts.router)
app.include_router(feed.router)


@app.get("/")
async def root():
    return {
        "message": "Blog Discovery API is running",
        "posts": len(corpus_store.snapshot),
    }
