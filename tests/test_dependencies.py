from app.dependencies import get_posts_service, get_snapshot
from app.repos.corpus_repo import CorpusStore
from app.services.posts_service import PostsService
from tests.conftest import make_post, make_settings, make_snapshot


def test_get_snapshot_pins_current_snapshot():
    first = make_snapshot([make_post("one")])
    store = CorpusStore(first)

    pinned = get_snapshot(store=store)
    store.replace(make_snapshot([]))

    assert pinned is first
    assert len(pinned) == 1
    assert get_snapshot(store=store) is not first


def test_get_posts_service_constructs_service():
    snapshot = make_snapshot([])
    current_settings = make_settings()

    svc = get_posts_service(snapshot=snapshot, current_settings=current_settings)

    assert isinstance(svc, PostsService)
    assert svc.snapshot is snapshot
    assert svc.settings is current_settings
