import datetime
import logging
import mimetypes
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from feedgen.feed import FeedGenerator

from app.schemas.blog import Post

logger = logging.getLogger(__name__)

RSS_CONTENT_TYPE = "application/rss+xml; charset=utf-8"
RSS_CACHE_CONTROL = "public, max-age=3600"
DEFAULT_ENCLOSURE_TYPE = "image/jpeg"

# Characters XML 1.0 cannot represent at all, escaped or not.
XML_ILLEGAL_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


@dataclass(frozen=True)
class FeedMetadata:
    title: str
    description: str
    site_url: str
    base_path: str = "/blog"
    self_url: str = ""
    language: str = "en-US"

    @property
    def link(self) -> str:
        return f"{self.site_url.rstrip('/')}{self.base_path}"

    def item_link(self, slug: str) -> str:
        return f"{self.link}/{slug}"


def xml_text(value) -> str:
    """Drop characters that have no XML representation."""
    text = "" if value is None else str(value)
    return XML_ILLEGAL_CHARS.sub("", text)


def absolute_url(site_url: str, url: str) -> str:
    if url.startswith(("http://", "https://", "//")):
        return url
    return f"{site_url.rstrip('/')}/{url.lstrip('/')}"


def _create_feed_generator(metadata: FeedMetadata) -> FeedGenerator:
    fg = FeedGenerator()
    fg.load_extension("dc")
    fg.title(xml_text(metadata.title))
    if metadata.self_url:
        fg.link(href=xml_text(metadata.self_url), rel="self", type="application/rss+xml")
    # the channel <link> is taken from the last link added
    fg.link(href=xml_text(metadata.link), rel="alternate")
    fg.description(xml_text(metadata.description or metadata.title))
    fg.language(metadata.language)
    return fg


def _add_entry(fg: FeedGenerator, post: Post, metadata: FeedMetadata) -> None:
    link = xml_text(metadata.item_link(post.slug))

    entry = fg.add_entry(order="append")
    entry.title(xml_text(post.title))
    entry.link(href=link)
    entry.guid(link, permalink=True)
    if post.excerpt:
        entry.description(xml_text(post.excerpt))
    entry.pubDate(post.date)
    entry.dc.dc_creator(xml_text(post.author.name))
    entry.category(
        [{"term": xml_text(post.category.name)}]
        + [{"term": xml_text(tag.name)} for tag in post.tags]
    )

    if post.featuredImage:
        image_url = absolute_url(metadata.site_url, post.featuredImage.url)
        mime_type = mimetypes.guess_type(image_url)[0] or DEFAULT_ENCLOSURE_TYPE
        entry.enclosure(xml_text(image_url), "0", mime_type)


def render_rss_feed(
    posts: Iterable[Post],
    metadata: FeedMetadata,
    build_date: Optional[datetime.datetime] = None,
) -> str:
    """
    Serialize posts as an RSS 2.0 document.

    Posts are written in the order given; callers pass published posts sorted
    newest first.
    """
    fg = _create_feed_generator(metadata)
    fg.lastBuildDate(build_date or datetime.datetime.now(datetime.timezone.utc))

    count = 0
    for post in posts:
        _add_entry(fg, post, metadata)
        count += 1

    logger.debug(f"Rendered RSS feed with {count} items")
    return fg.rss_str(pretty=True).decode("utf-8")
