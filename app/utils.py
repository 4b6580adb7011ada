import math
import re
import urllib.parse
from typing import Dict, Iterable, List

HTML_TAG_RE = re.compile(r"<[^>]*>")
CODE_BLOCK_RE = re.compile(r"```[\s\S]*?```")
HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$", re.MULTILINE)

# Applied in order; images before links so "![alt](src)" is not left as "!alt".
MARKDOWN_STRIP_RULES = [
    (re.compile(r"^#{1,6}\s+(.*)$", re.MULTILINE), r"\1"),
    (re.compile(r"\*\*([^*]+)\*\*"), r"\1"),
    (re.compile(r"\*([^*]+)\*"), r"\1"),
    (re.compile(r"__([^_]+)__"), r"\1"),
    (re.compile(r"(?<!\w)_([^_]+)_(?!\w)"), r"\1"),
    (re.compile(r"!\[([^\]]*)\]\([^)]+\)"), ""),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (CODE_BLOCK_RE, ""),
    (re.compile(r"`([^`]+)`"), r"\1"),
    (re.compile(r"^>\s+(.*)$", re.MULTILINE), r"\1"),
    (re.compile(r"^\s*[-*+]\s+(.*)$", re.MULTILINE), r"\1"),
    (re.compile(r"^\s*\d+\.\s+(.*)$", re.MULTILINE), r"\1"),
    (HTML_TAG_RE, ""),
]


def calculate_reading_time(text: str, words_per_minute: int = 200) -> int:
    plain = CODE_BLOCK_RE.sub("", HTML_TAG_RE.sub("", text or ""))
    words = plain.split()
    return max(1, math.ceil(len(words) / words_per_minute))


def strip_markdown(text: str) -> str:
    for pattern, replacement in MARKDOWN_STRIP_RULES:
        text = pattern.sub(replacement, text)
    return text


def generate_excerpt(text: str, max_length: int = 160, markdown: bool = True) -> str:
    """Plain-text excerpt cut at the last whole word that fits in max_length."""
    if markdown:
        text = strip_markdown(text or "")
    text = re.sub(r"\s+", " ", text or "").strip()
    if len(text) <= max_length:
        return text

    truncated = text[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > 0:
        return truncated[:last_space] + "..."
    return truncated + "..."


def generate_slug(text: str) -> str:
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def humanize_slug(slug: str) -> str:
    clean_slug = slug.split("/")[-1]
    return clean_slug.replace("-", " ").replace("_", " ").title()


def generate_table_of_contents(content: str) -> List[Dict]:
    """
    Build a nested heading tree from markdown content.

    Each node is {"id", "text", "level", "children"}; ids are heading slugs,
    suffixed with the heading index after the first heading so they stay unique.
    """
    items: List[Dict] = []
    stack: List[Dict] = []

    for index, match in enumerate(HEADING_RE.finditer(content or "")):
        level = len(match.group(1))
        text = match.group(2).strip()
        slug = generate_slug(text)
        item = {
            "id": f"{slug}-{index}" if index > 0 else slug,
            "text": text,
            "level": level,
            "children": [],
        }

        while stack and stack[-1]["level"] >= level:
            stack.pop()

        if stack:
            stack[-1]["children"].append(item)
        else:
            items.append(item)
        stack.append(item)

    return items


def generate_share_urls(
    title: str,
    excerpt: str,
    post_url: str,
    platforms: Iterable[str] = ("twitter", "facebook", "linkedin", "email"),
) -> Dict[str, str]:
    platforms = set(platforms)
    quoted_title = urllib.parse.quote(title, safe="")
    quoted_excerpt = urllib.parse.quote(excerpt, safe="")
    quoted_url = urllib.parse.quote(post_url, safe="")

    urls: Dict[str, str] = {}
    if "twitter" in platforms:
        urls["twitter"] = (
            f"https://twitter.com/intent/tweet?text={quoted_title}&url={quoted_url}"
        )
    if "facebook" in platforms:
        urls["facebook"] = f"https://www.facebook.com/sharer/sharer.php?u={quoted_url}"
    if "linkedin" in platforms:
        urls["linkedin"] = (
            f"https://www.linkedin.com/sharing/share-offsite/?url={quoted_url}"
        )
    if "email" in platforms:
        urls["email"] = (
            f"mailto:?subject={quoted_title}&body={quoted_excerpt}%0A%0A{quoted_url}"
        )
    if "whatsapp" in platforms:
        urls["whatsapp"] = f"https://wa.me/?text={quoted_title}%20{quoted_url}"
    return urls
