import logging
from typing import Dict, Iterable, List, Tuple, Type

from app.schemas.blog import Post

logger = logging.getLogger(__name__)

PRIMARY_TAG_WEIGHT = 10
SHARED_TAG_WEIGHT = 3
CATEGORY_WEIGHT = 5
# Upper bound of the recency bonus. Relevance scores are integers, so a bonus
# below 1 can only reorder candidates whose relevance is equal.
RECENCY_BONUS_MAX = 0.5

DEFAULT_ALGORITHM = "hybrid"


class RelatedScoringStrategy:
    """
    Scores one candidate against the target post.

    ``relevance`` holds the terms that make a candidate related at all;
    ``bonus`` holds tie-breaking terms that never qualify a candidate on
    their own.
    """

    name: str = ""

    def relevance(self, target: Post, candidate: Post) -> int:
        raise NotImplementedError

    def bonus(self, target: Post, candidate: Post) -> float:
        return 0.0

    def score(self, target: Post, candidate: Post) -> float:
        return self.relevance(target, candidate) + self.bonus(target, candidate)


def tag_score(target: Post, candidate: Post) -> int:
    candidate_tags = set(candidate.tag_slugs)
    shared = set(target.tag_slugs) & candidate_tags

    score = 0
    primary = target.primaryTag.slug if target.primaryTag else None
    if primary and primary in candidate_tags:
        score += PRIMARY_TAG_WEIGHT
        shared.discard(primary)
    return score + SHARED_TAG_WEIGHT * len(shared)


def category_score(target: Post, candidate: Post) -> int:
    return CATEGORY_WEIGHT if target.category.slug == candidate.category.slug else 0


def recency_bonus(target: Post, candidate: Post) -> float:
    days = abs((target.date - candidate.date).total_seconds()) / 86400
    return RECENCY_BONUS_MAX / (1 + days)


class TagOverlapStrategy(RelatedScoringStrategy):
    name = "tag-overlap"

    def relevance(self, target: Post, candidate: Post) -> int:
        return tag_score(target, candidate)


class CategoryMatchStrategy(RelatedScoringStrategy):
    name = "category-match"

    def relevance(self, target: Post, candidate: Post) -> int:
        return category_score(target, candidate)


class HybridStrategy(RelatedScoringStrategy):
    name = "hybrid"

    def relevance(self, target: Post, candidate: Post) -> int:
        return tag_score(target, candidate) + category_score(target, candidate)

    def bonus(self, target: Post, candidate: Post) -> float:
        return recency_bonus(target, candidate)


STRATEGIES: Dict[str, Type[RelatedScoringStrategy]] = {
    TagOverlapStrategy.name: TagOverlapStrategy,
    CategoryMatchStrategy.name: CategoryMatchStrategy,
    HybridStrategy.name: HybridStrategy,
}

# Older configuration values
ALGORITHM_ALIASES = {
    "tags": TagOverlapStrategy.name,
    "category": CategoryMatchStrategy.name,
}


def get_strategy(algorithm: str = DEFAULT_ALGORITHM) -> RelatedScoringStrategy:
    name = (algorithm or DEFAULT_ALGORITHM).strip().lower()
    name = ALGORITHM_ALIASES.get(name, name)
    strategy_cls = STRATEGIES.get(name)
    if strategy_cls is None:
        logger.warning(
            f"Unknown related posts algorithm '{algorithm}', using {DEFAULT_ALGORITHM}"
        )
        strategy_cls = STRATEGIES[DEFAULT_ALGORITHM]
    return strategy_cls()


def find_related_posts(
    target: Post,
    candidates: Iterable[Post],
    count: int = 3,
    algorithm: str = DEFAULT_ALGORITHM,
) -> List[Post]:
    """
    Rank candidates by similarity to target and return at most count of them.

    The target itself and unpublished posts are never returned, nor are
    candidates with no tag or category relation. Ordering is total score
    descending, then date descending, then slug ascending.
    """
    if count < 1:
        return []

    strategy = get_strategy(algorithm)
    scored: List[Tuple[float, Post]] = []
    for candidate in candidates:
        if not candidate.published:
            continue
        if candidate.id == target.id or candidate.slug == target.slug:
            continue
        relevance = strategy.relevance(target, candidate)
        if relevance <= 0:
            continue
        scored.append((relevance + strategy.bonus(target, candidate), candidate))

    scored.sort(key=lambda item: item[1].slug)
    scored.sort(key=lambda item: (item[0], item[1].date), reverse=True)
    return [post for _, post in scored[:count]]
