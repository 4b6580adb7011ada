import datetime

import pytest

from app.services.search import (
    create_snippet,
    highlight,
    normalize_search_fields,
    search_posts,
)
from tests.conftest import make_post


def _corpus():
    return [
        make_post("content-only", title="Unrelated", excerpt="Nothing", content="Hello world"),
        make_post("title-hit", title="Hello there", excerpt="Nothing", content="Nothing"),
        make_post("excerpt-hit", title="Other", excerpt="Say hello", content="Nothing"),
        make_post("miss", title="Other", excerpt="Other", content="Other"),
    ]


def test_search_is_case_insensitive():
    posts = _corpus()
    upper = [p.slug for p in search_posts(posts, "HELLO")]
    lower = [p.slug for p in search_posts(posts, "hello")]
    assert upper == lower
    assert set(lower) == {"content-only", "title-hit", "excerpt-hit"}


def test_search_ranks_by_field_weight():
    result = search_posts(_corpus(), "hello")
    assert [p.slug for p in result] == ["title-hit", "excerpt-hit", "content-only"]


def test_weights_are_per_field_not_per_occurrence():
    many = make_post("many", title="x", excerpt="x", content="hello hello hello hello")
    title = make_post("title", title="hello", excerpt="x", content="x")
    assert [p.slug for p in search_posts([many, title], "hello")] == ["title", "many"]


def test_weights_sum_across_fields():
    both = make_post("both", title="python", excerpt="x", content="python")
    title = make_post("title", title="python", excerpt="x", content="x")
    assert [p.slug for p in search_posts([title, both], "python")] == ["both", "title"]


def test_ties_break_on_date_then_slug():
    old = make_post("b-old", title="match", date=datetime.date(2024, 1, 1))
    new = make_post("z-new", title="match", date=datetime.date(2025, 1, 1))
    same_day = make_post("a-new", title="match", date=datetime.date(2025, 1, 1))
    result = search_posts([old, new, same_day], "match")
    assert [p.slug for p in result] == ["a-new", "z-new", "b-old"]


def test_empty_query_returns_nothing():
    posts = _corpus()
    assert search_posts(posts, "") == []
    assert search_posts(posts, "   ") == []


def test_search_restricted_to_fields():
    result = search_posts(_corpus(), "hello", ["title"])
    assert [p.slug for p in result] == ["title-hit"]


def test_search_tags_and_category_fields():
    post = make_post("tagged", tags=["crm"], category="automation")
    assert search_posts([post], "crm") == []
    assert search_posts([post], "crm", ["tags"]) == [post]
    assert search_posts([post], "automation", ["category"]) == [post]


def test_query_with_pattern_characters_matches_literally():
    post = make_post("regex", title="C++ (and) [friends] .*")
    other = make_post("other", title="Cxx and friends")
    assert search_posts([post, other], "c++ (and)") == [post]
    assert search_posts([post, other], ".*") == [post]


def test_normalize_search_fields():
    assert normalize_search_fields(None) == ("title", "excerpt", "content")
    assert normalize_search_fields(["bogus"]) == ("title", "excerpt", "content")
    assert normalize_search_fields([" title", "tags", "title", "nope"]) == ("title", "tags")


def test_snippet_match_near_start_has_no_leading_ellipsis():
    snippet = create_snippet("The quick brown fox jumps", "quick", 200)
    assert "<mark>quick</mark>" in snippet
    assert not snippet.startswith("...")
    assert not snippet.endswith("...")


def test_snippet_window_adds_ellipses_on_both_sides():
    content = "a" * 100 + "needle" + "b" * 300
    snippet = create_snippet(content, "needle")
    assert snippet.startswith("...")
    assert snippet.endswith("...")
    body = snippet[3:-3]
    assert body == "a" * 50 + "<mark>needle</mark>" + "b" * 150


def test_snippet_preserves_case_and_highlights_all_occurrences():
    snippet = create_snippet("Python is fun. I like PYTHON.", "python")
    assert snippet == "<mark>Python</mark> is fun. I like <mark>PYTHON</mark>."


def test_snippet_without_match_truncates():
    content = "x" * 250
    assert create_snippet(content, "missing", 200) == "x" * 200 + "..."
    assert create_snippet("short", "missing", 200) == "short"


def test_snippet_escapes_pattern_characters():
    snippet = create_snippet("price is $5 (approx)", "$5 (approx")
    assert snippet == "price is <mark>$5 (approx</mark>)"


def test_snippet_handles_pathological_query():
    content = "a" * 5000
    query = "(a+)+$"
    assert create_snippet(content, query, 20) == "a" * 20 + "..."


def test_highlight_with_empty_query_is_noop():
    assert highlight("text", "") == "text"


@pytest.mark.parametrize("query", ["i̇stanbul", "İstanbul", "ISTANBUL", "stanbul"])
def test_every_match_gets_a_highlighted_snippet(query):
    post = make_post("city", title="Trip", excerpt="Notes", content="Visit İSTANBUL today")

    hits = search_posts([post], query, ["content"])
    snippet = create_snippet(post.content, query)

    assert bool(hits) == ("<mark>" in snippet)
