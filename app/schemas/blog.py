import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def coerce_datetime(value):
    """Accept dates, naive datetimes and ISO strings; always return an aware UTC datetime."""
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.datetime.fromisoformat(text)
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc)
    if isinstance(value, datetime.date):
        return datetime.datetime(
            value.year, value.month, value.day, tzinfo=datetime.timezone.utc
        )
    return value


class ContentModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class Author(ContentModel):
    name: str
    role: str = ""
    avatar: Optional[str] = None
    bio: Optional[str] = None


class Category(ContentModel):
    name: str
    slug: str
    description: Optional[str] = None


class Tag(ContentModel):
    name: str
    slug: str


class FeaturedImage(ContentModel):
    url: str
    alt: str = ""
    width: Optional[int] = None
    height: Optional[int] = None


class SeoOverrides(ContentModel):
    metaTitle: Optional[str] = None
    metaDescription: Optional[str] = None
    keywords: Optional[Tuple[str, ...]] = None


class PostPreview(ContentModel):
    """A post without its body, as returned by list, search and related queries."""

    id: str
    slug: str
    title: str
    excerpt: str
    author: Author
    date: datetime.datetime
    category: Category
    tags: Tuple[Tag, ...] = ()
    primaryTag: Optional[Tag] = None
    readTime: int = Field(gt=0)
    featuredImage: Optional[FeaturedImage] = None
    seo: Optional[SeoOverrides] = None
    published: bool = True

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value):
        return coerce_datetime(value)

    @model_validator(mode="after")
    def _primary_tag_is_one_of_tags(self):
        if self.primaryTag is not None and self.primaryTag.slug not in self.tag_slugs:
            raise ValueError(
                f"primaryTag '{self.primaryTag.slug}' is not one of the post tags"
            )
        return self

    @property
    def tag_slugs(self) -> Tuple[str, ...]:
        return tuple(tag.slug for tag in self.tags)


class Post(PostPreview):
    content: str = ""

    def to_preview(self) -> PostPreview:
        return PostPreview(**self.model_dump(exclude={"content"}))
