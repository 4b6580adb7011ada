import pytest

from app.schemas.blog import Category, Tag
from app.services.taxonomy import (
    count_categories,
    count_tags,
    generate_tag_cloud,
    tag_size,
)
from tests.conftest import CATEGORIES, make_post

A = Tag(name="Alpha", slug="a")
B = Tag(name="beta", slug="b")
C = Tag(name="Gamma", slug="c")


def _posts_with_counts(counts):
    """One post per (tag, index) so each tag ends up with the requested count."""
    posts = []
    for tag, count in counts:
        for i in range(count):
            posts.append(make_post(f"{tag.slug}-{i}", tags=[tag]))
    return posts


def test_tag_cloud_sizes_and_order():
    cloud = generate_tag_cloud(_posts_with_counts([(C, 1), (B, 10), (A, 10)]))

    assert [(item.slug, item.count, item.size) for item in cloud] == [
        ("a", 10, "xl"),
        ("b", 10, "xl"),
        ("c", 1, "xs"),
    ]


def test_tag_cloud_name_sort_is_case_insensitive():
    lower_first = Tag(name="apple", slug="apple")
    upper_later = Tag(name="Banana", slug="banana")
    cloud = generate_tag_cloud(_posts_with_counts([(upper_later, 2), (lower_first, 2)]))
    assert [item.name for item in cloud] == ["apple", "Banana"]


def test_single_tag_is_xl():
    cloud = generate_tag_cloud([make_post("only", tags=[A])])
    assert len(cloud) == 1
    assert cloud[0].size == "xl"


def test_empty_corpus_has_empty_cloud():
    assert generate_tag_cloud([]) == []
    assert generate_tag_cloud([make_post("untagged")]) == []


def test_post_counts_once_per_tag():
    cloud = generate_tag_cloud([make_post("dup", tags=[A, A])])
    assert cloud[0].count == 1


@pytest.mark.parametrize(
    "count,size",
    [(1, "xs"), (19, "xs"), (20, "sm"), (39, "sm"), (40, "md"), (60, "lg"), (79, "lg"), (80, "xl"), (100, "xl")],
)
def test_tag_size_tiers(count, size):
    assert tag_size(count, 100) == size


def test_count_tags_includes_unused_tags():
    tags = {"a": A, "b": B, "c": C}
    result = count_tags(_posts_with_counts([(A, 3), (B, 1)]), tags)
    assert [(t.slug, t.postCount, t.size) for t in result] == [
        ("a", 3, "xl"),
        ("b", 1, "sm"),
        ("c", 0, "xs"),
    ]


def test_count_categories_covers_all_known_categories():
    posts = [
        make_post("m1", category="marketing"),
        make_post("g1", category="growth"),
        make_post("g2", category="growth"),
    ]
    result = count_categories(posts, CATEGORIES)

    assert [(c.slug, c.postCount) for c in result] == [
        ("growth", 2),
        ("marketing", 1),
        ("automation", 0),
    ]


def test_count_categories_ties_sort_by_name():
    categories = {
        "z": Category(name="Zebra", slug="z"),
        "a": Category(name="aardvark", slug="a"),
    }
    result = count_categories([], categories)
    assert [c.name for c in result] == ["aardvark", "Zebra"]
    assert all(c.postCount == 0 for c in result)
