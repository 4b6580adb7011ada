from fastapi import Depends

from app.repos.corpus_repo import CorpusSnapshot, CorpusStore, corpus_store
from app.services.posts_service import PostsService
from app.settings import Settings, settings


def get_settings() -> Settings:
    """Small wrapper to allow dependency overrides in tests."""
    return settings


def get_corpus_store() -> CorpusStore:
    return corpus_store


def get_snapshot(store: CorpusStore = Depends(get_corpus_store)) -> CorpusSnapshot:
    """Pin one snapshot for the whole request, so a reload mid-request is invisible."""
    return store.snapshot


def get_posts_service(
    snapshot: CorpusSnapshot = Depends(get_snapshot),
    current_settings: Settings = Depends(get_settings),
):
    return PostsService(snapshot=snapshot, settings=current_settings)
