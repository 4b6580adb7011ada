from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from app.schemas.blog import Category, Post, PostPreview

TagSize = Literal["xs", "sm", "md", "lg", "xl"]


class Pagination(BaseModel):
    currentPage: int
    itemsPerPage: int
    totalItems: int
    totalPages: int
    startIndex: int
    endIndex: int
    hasNext: bool
    hasPrevious: bool


class PaginationBlock(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int
    hasNext: bool
    hasPrevious: bool

    @classmethod
    def from_pagination(cls, pagination: Pagination) -> "PaginationBlock":
        return cls(
            page=pagination.currentPage,
            limit=pagination.itemsPerPage,
            total=pagination.totalItems,
            totalPages=pagination.totalPages,
            hasNext=pagination.hasNext,
            hasPrevious=pagination.hasPrevious,
        )


class PostFilters(BaseModel):
    category: Optional[str] = None
    tag: Optional[str] = None
    search: Optional[str] = None
    sortBy: str = "date"
    sortOrder: str = "desc"


class PostListResponse(BaseModel):
    posts: List[PostPreview]
    pagination: PaginationBlock
    filters: PostFilters


class TocItem(BaseModel):
    id: str
    text: str
    level: int
    children: List["TocItem"] = Field(default_factory=list)


TocItem.model_rebuild()


class FeatureFlags(BaseModel):
    comments: Dict[str, Any]
    socialSharing: Dict[str, Any]


class PostConfig(BaseModel):
    features: FeatureFlags


class PostDetailResponse(BaseModel):
    post: Post
    seo: Dict[str, Any]
    relatedPosts: List[PostPreview] = Field(default_factory=list)
    tableOfContents: List[TocItem] = Field(default_factory=list)
    shareUrls: Dict[str, str] = Field(default_factory=dict)
    config: PostConfig


class SearchResult(PostPreview):
    snippet: str


class SearchResponse(BaseModel):
    results: List[SearchResult] = Field(default_factory=list)
    query: str = ""
    total: int = 0
    searchIn: List[str] = Field(default_factory=list)


class TagCloudItem(BaseModel):
    name: str
    slug: str
    count: int
    size: TagSize


class TagCount(BaseModel):
    name: str
    slug: str
    postCount: int
    size: TagSize = "xs"


class TagsResponse(BaseModel):
    tags: List[TagCount]
    tagCloud: List[TagCloudItem]
    total: int


class CategoryCount(Category):
    postCount: int


class CategoriesResponse(BaseModel):
    categories: List[CategoryCount]
    total: int
