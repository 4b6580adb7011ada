import logging
import re
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from app.schemas.blog import Post

logger = logging.getLogger(__name__)

ELLIPSIS = "..."
HIGHLIGHT_OPEN = "<mark>"
HIGHLIGHT_CLOSE = "</mark>"
SNIPPET_CONTEXT_BEFORE = 50
SNIPPET_CONTEXT_AFTER = 150

DEFAULT_SEARCH_FIELDS: Tuple[str, ...] = ("title", "excerpt", "content")

FIELD_WEIGHTS: Dict[str, int] = {
    "title": 3,
    "excerpt": 2,
    "content": 1,
    "tags": 1,
    "category": 1,
}

# Each extractor returns the texts of a post that a field matches against.
FIELD_TEXTS: Dict[str, Callable[[Post], Iterable[str]]] = {
    "title": lambda post: (post.title,),
    "excerpt": lambda post: (post.excerpt,),
    "content": lambda post: (post.content,),
    "tags": lambda post: [text for tag in post.tags for text in (tag.name, tag.slug)],
    "category": lambda post: (post.category.name, post.category.slug),
}


def normalize_search_fields(fields: Optional[Iterable[str]]) -> Tuple[str, ...]:
    """Keep known field names in the order given; fall back to the defaults."""
    if not fields:
        return DEFAULT_SEARCH_FIELDS
    normalized = []
    for field in fields:
        name = field.strip()
        if name in FIELD_WEIGHTS and name not in normalized:
            normalized.append(name)
        elif name:
            logger.debug(f"Ignoring unknown search field '{name}'")
    return tuple(normalized) or DEFAULT_SEARCH_FIELDS


def score_post(post: Post, pattern: re.Pattern, fields: Sequence[str]) -> int:
    """Sum of the weights of the fields where pattern matches."""
    score = 0
    for field in fields:
        texts = FIELD_TEXTS[field](post)
        if any(pattern.search(text) for text in texts):
            score += FIELD_WEIGHTS[field]
    return score


def search_posts(
    posts: Iterable[Post],
    query: str,
    fields: Optional[Iterable[str]] = None,
) -> List[Post]:
    """
    Case-insensitive substring search ranked by field weight.

    Title matches weigh 3, excerpt 2, content 1, per matching field rather than
    per occurrence. Ties go to the newer post, then to the lower slug. An empty
    query matches nothing.
    """
    needle = (query or "").strip()
    if not needle:
        return []

    # same matching rule as create_snippet, so every hit can be highlighted
    pattern = _literal_pattern(needle)
    selected = normalize_search_fields(fields)
    scored = []
    for post in posts:
        score = score_post(post, pattern, selected)
        if score > 0:
            scored.append((score, post))

    # slug ascending first, then a stable sort on (score, date) descending
    scored.sort(key=lambda item: item[1].slug)
    scored.sort(key=lambda item: (item[0], item[1].date), reverse=True)
    return [post for _, post in scored]


def create_snippet(content: str, query: str, max_length: int = 200) -> str:
    """
    Excerpt of content around the first match of query, with matches highlighted.

    The query is matched literally and case-insensitively; it is never
    interpreted as a pattern.
    """
    content = content or ""
    query = (query or "").strip()

    match = _literal_pattern(query).search(content) if query else None
    if match is None:
        if len(content) > max_length:
            return content[:max_length] + ELLIPSIS
        return content

    start = max(0, match.start() - SNIPPET_CONTEXT_BEFORE)
    end = min(len(content), match.end() + SNIPPET_CONTEXT_AFTER)

    snippet = highlight(content[start:end], query)
    if start > 0:
        snippet = ELLIPSIS + snippet
    if end < len(content):
        snippet = snippet + ELLIPSIS
    return snippet


def highlight(text: str, query: str) -> str:
    """Wrap every case-insensitive occurrence of the literal query in <mark> tags."""
    if not query:
        return text
    return _literal_pattern(query).sub(
        lambda m: f"{HIGHLIGHT_OPEN}{m.group(0)}{HIGHLIGHT_CLOSE}", text
    )


def _literal_pattern(query: str) -> re.Pattern:
    return re.compile(re.escape(query), re.IGNORECASE)
