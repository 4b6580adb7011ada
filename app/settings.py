from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Content source
    CONTENT_DIR: str = "content"
    CONTENT_WATCH_ENABLED: bool = True
    CONTENT_POLL_SECONDS: float = 5.0

    # Logging
    LOG_LEVEL: str = "INFO"

    # Blog
    BLOG_NAME: str = "TrueFlow Blog"
    BLOG_DESCRIPTION: str = "Insights and resources for business growth"
    SITE_URL: str = "http://localhost:3000"
    BLOG_BASE_PATH: str = "/blog"
    POSTS_PER_PAGE: int = 10

    # Features
    RELATED_POSTS_ENABLED: bool = True
    RELATED_POSTS_ALGORITHM: str = "hybrid"
    RELATED_POSTS_COUNT: int = 3

    RSS_ENABLED: bool = True
    RSS_TITLE: str = ""
    RSS_DESCRIPTION: str = ""
    RSS_LANGUAGE: str = "en-US"

    COMMENTS_ENABLED: bool = False
    COMMENTS_PROVIDER: str = ""

    SOCIAL_SHARING_ENABLED: bool = True
    SOCIAL_SHARING_PLATFORMS: List[str] = ["twitter", "facebook", "linkedin", "email"]

    # SEO
    SEO_TITLE_TEMPLATE: str = "%s | TrueFlow Blog"
    SEO_DEFAULT_KEYWORDS: List[str] = ["business", "automation", "AI", "growth"]
    SEO_LOCALE: str = "en_US"
    SEO_TWITTER_HANDLE: str = ""
    SEO_TWITTER_CARD: str = "summary_large_image"
    SEO_JSONLD_ENABLED: bool = True
    SEO_ORGANIZATION_NAME: str = ""
    SEO_ORGANIZATION_LOGO: str = ""

    @property
    def blog_url(self) -> str:
        return f"{self.SITE_URL.rstrip('/')}{self.blog_base_path}"

    @property
    def blog_base_path(self) -> str:
        path = self.BLOG_BASE_PATH.strip().rstrip("/")
        if path and not path.startswith("/"):
            path = f"/{path}"
        return path

    def post_url(self, slug: str) -> str:
        return f"{self.blog_url}/{slug}"

    @property
    def feed_title(self) -> str:
        return self.RSS_TITLE or self.BLOG_NAME

    @property
    def feed_description(self) -> str:
        return self.RSS_DESCRIPTION or self.BLOG_DESCRIPTION


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
