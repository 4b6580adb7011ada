import logging
from collections import Counter
from typing import Dict, Iterable, List, Mapping

from app.schemas.blog import Category, Post, Tag
from app.schemas.discovery import CategoryCount, TagCloudItem, TagCount

logger = logging.getLogger(__name__)

# (lower bound of count / max_count, size), checked from the top down
SIZE_TIERS = (
    (0.8, "xl"),
    (0.6, "lg"),
    (0.4, "md"),
    (0.2, "sm"),
    (0.0, "xs"),
)


def tag_size(count: int, max_count: int) -> str:
    if max_count <= 0:
        return "xs"
    ratio = count / max_count
    for threshold, size in SIZE_TIERS:
        if ratio >= threshold:
            return size
    return "xs"


def _count_desc_name_asc(name: str, count: int):
    return (-count, name.casefold(), name)


def generate_tag_cloud(posts: Iterable[Post]) -> List[TagCloudItem]:
    """
    Count how many posts carry each tag and bucket the counts into five sizes.

    Size is relative to the most used tag: below 20% is "xs", 80% and above
    is "xl". Sorted by count descending, then name.
    """
    counts: Counter = Counter()
    seen_tags: Dict[str, Tag] = {}
    for post in posts:
        # a post counts once per tag even if the tag is listed twice
        for tag in {tag.slug: tag for tag in post.tags}.values():
            seen_tags.setdefault(tag.slug, tag)
            counts[tag.slug] += 1

    if not counts:
        return []

    max_count = max(counts.values())
    items = [
        TagCloudItem(
            name=seen_tags[slug].name,
            slug=slug,
            count=count,
            size=tag_size(count, max_count),
        )
        for slug, count in counts.items()
    ]
    items.sort(key=lambda item: _count_desc_name_asc(item.name, item.count))
    return items


def count_tags(posts: Iterable[Post], tags: Mapping[str, Tag]) -> List[TagCount]:
    """Every known tag with its post count and cloud size ("xs" when unused)."""
    cloud = {item.slug: item for item in generate_tag_cloud(posts)}
    result = []
    for tag in tags.values():
        item = cloud.get(tag.slug)
        result.append(
            TagCount(
                name=tag.name,
                slug=tag.slug,
                postCount=item.count if item else 0,
                size=item.size if item else "xs",
            )
        )
    result.sort(key=lambda tag: _count_desc_name_asc(tag.name, tag.postCount))
    return result


def count_categories(
    posts: Iterable[Post], categories: Mapping[str, Category]
) -> List[CategoryCount]:
    """Every known category with its post count, including empty ones."""
    counts = Counter(post.category.slug for post in posts)
    result = [
        CategoryCount(**category.model_dump(), postCount=counts.get(category.slug, 0))
        for category in categories.values()
    ]
    result.sort(key=lambda category: _count_desc_name_asc(category.name, category.postCount))
    return result
