import logging
import threading
from pathlib import Path
from typing import Optional, Tuple, Union

from app.repos.corpus_repo import CorpusStore, corpus_store
from app.settings import settings

logger = logging.getLogger(__name__)

STOP_WATCHER_EVENT = threading.Event()  # thread-safe shutdown signal

Fingerprint = Tuple[Tuple[str, int, int], ...]


def content_fingerprint(content_dir: Union[str, Path]) -> Fingerprint:
    """(relative path, mtime_ns, size) for every file under content_dir, sorted."""
    root = Path(content_dir)
    if not root.is_dir():
        return ()

    entries = []
    for path in root.rglob("*"):
        if not path.is_file():
            continue
        try:
            stat = path.stat()
        except FileNotFoundError:
            # removed between listing and stat
            continue
        entries.append((path.relative_to(root).as_posix(), stat.st_mtime_ns, stat.st_size))
    return tuple(sorted(entries))


def check_for_changes(
    store: CorpusStore,
    content_dir: Union[str, Path],
    last_fingerprint: Fingerprint,
) -> Fingerprint:
    """
    Reload the store when the content directory changed since last_fingerprint.

    Returns the fingerprint the next poll should compare against. A failed
    reload keeps the previous snapshot in place and is retried on the next
    change.
    """
    fingerprint = content_fingerprint(content_dir)
    if fingerprint == last_fingerprint:
        return last_fingerprint

    logger.info(f"Content change detected in {content_dir}, reloading corpus...")
    try:
        snapshot = store.reload()
        logger.info(f"Corpus reloaded with {len(snapshot)} posts")
    except Exception as e:
        logger.error(f"Corpus reload failed, keeping previous snapshot: {e}")
    return fingerprint


def watch_content(
    store: CorpusStore = corpus_store,
    content_dir: Optional[Union[str, Path]] = None,
    poll_seconds: Optional[float] = None,
):
    content_dir = content_dir or settings.CONTENT_DIR
    poll_seconds = poll_seconds or settings.CONTENT_POLL_SECONDS
    logger.info(f"Content watcher thread started for {content_dir}")

    fingerprint = content_fingerprint(content_dir)
    while not STOP_WATCHER_EVENT.wait(poll_seconds):
        try:
            fingerprint = check_for_changes(store, content_dir, fingerprint)
        except Exception as e:
            logger.error(f"Unexpected watcher error: {e}")

    logger.info("Content watcher stopping...")


def start_watcher(store: CorpusStore = corpus_store):
    """Start watcher in a daemon thread"""
    STOP_WATCHER_EVENT.clear()
    thread = threading.Thread(
        target=watch_content, args=(store,), daemon=True, name="ContentWatcher"
    )
    thread.start()
    logger.info("Content watcher started in background thread")
    return thread


def stop_watcher():
    """Signal watcher to stop"""
    STOP_WATCHER_EVENT.set()
    logger.info("Content watcher stopping...")
