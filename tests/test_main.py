from fastapi.testclient import TestClient

import app.main as main_module
from app.main import app
from app.repos.corpus_repo import corpus_store
from tests.conftest import make_post, make_snapshot


class DummyThread:
    def __init__(self):
        self.join_called = False
        self.join_timeout = None

    def join(self, timeout=None):
        self.join_called = True
        self.join_timeout = timeout


def test_root_endpoint_runs_lifespan(monkeypatch):
    thread = DummyThread()
    started = []
    stopped = []
    loaded = []

    def fake_load_corpus(content_dir):
        loaded.append(content_dir)
        return make_snapshot([make_post("one"), make_post("two")])

    def fake_start_watcher(store):
        started.append(store)
        return thread

    monkeypatch.setattr(main_module, "load_corpus", fake_load_corpus)
    monkeypatch.setattr(main_module, "start_watcher", fake_start_watcher)
    monkeypatch.setattr(main_module, "stop_watcher", lambda: stopped.append(True))
    monkeypatch.setattr(main_module.settings, "CONTENT_DIR", "somewhere")
    monkeypatch.setattr(main_module.settings, "CONTENT_WATCH_ENABLED", True)

    with TestClient(app) as client:
        res = client.get("/")
        assert res.status_code == 200
        assert res.json() == {"message": "Blog Discovery API is running", "posts": 2}

    assert loaded == ["somewhere"]
    assert started == [corpus_store]
    assert stopped == [True]
    assert thread.join_called is True
    assert thread.join_timeout == 10


def test_watcher_not_started_when_disabled(monkeypatch):
    started = []

    monkeypatch.setattr(main_module, "load_corpus", lambda content_dir: make_snapshot([]))
    monkeypatch.setattr(main_module, "start_watcher", lambda store: started.append(store))
    monkeypatch.setattr(main_module.settings, "CONTENT_WATCH_ENABLED", False)

    with TestClient(app) as client:
        assert client.get("/").json()["posts"] == 0

    assert started == []


def test_routes_served_from_loaded_corpus(monkeypatch):
    posts = [make_post("hello", tags=["seo"]), make_post("draft", published=False)]
    monkeypatch.setattr(main_module, "load_corpus", lambda content_dir: make_snapshot(posts))
    monkeypatch.setattr(main_module.settings, "CONTENT_WATCH_ENABLED", False)

    with TestClient(app) as client:
        listing = client.get("/posts").json()
        assert [p["slug"] for p in listing["posts"]] == ["hello"]
        assert client.get("/posts/draft").status_code == 403
        assert client.get("/rss").status_code == 200
        assert client.get("/tags").json()["tagCloud"][0]["slug"] == "seo"
