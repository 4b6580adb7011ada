from typing import Any, Dict, Optional

from app.schemas.blog import Post
from app.services.feed import absolute_url
from app.settings import Settings


def generate_seo_metadata(post: Post, settings: Settings) -> Dict[str, Any]:
    """
    Page metadata for a post: formatted title, Open Graph and Twitter cards,
    and schema.org BlogPosting JSON-LD when enabled.
    """
    seo = post.seo
    title = (seo.metaTitle if seo else None) or post.title
    description = (seo.metaDescription if seo else None) or post.excerpt
    keywords = list(seo.keywords) if seo and seo.keywords else list(settings.SEO_DEFAULT_KEYWORDS)
    image: Optional[str] = (
        absolute_url(settings.SITE_URL, post.featuredImage.url)
        if post.featuredImage
        else None
    )
    url = settings.post_url(post.slug)

    template = settings.SEO_TITLE_TEMPLATE or "%s"
    metadata: Dict[str, Any] = {
        "title": template.replace("%s", title),
        "description": description,
        "keywords": keywords,
        "openGraph": {
            "title": title,
            "description": description,
            "type": "article",
            "url": url,
            "image": image,
            "siteName": settings.BLOG_NAME,
            "locale": settings.SEO_LOCALE,
        },
        "twitter": {
            "card": settings.SEO_TWITTER_CARD,
            "title": title,
            "description": description,
            "image": image,
            "creator": settings.SEO_TWITTER_HANDLE or None,
        },
    }

    if settings.SEO_JSONLD_ENABLED:
        metadata["jsonLd"] = _json_ld(post, settings, title, description, image, url)

    return metadata


def _json_ld(post: Post, settings: Settings, title, description, image, url) -> dict:
    published = post.date.isoformat()
    json_ld = {
        "@context": "https://schema.org",
        "@type": "BlogPosting",
        "headline": title,
        "description": description,
        "author": {
            "@type": "Person",
            "name": post.author.name,
            "jobTitle": post.author.role,
        },
        "datePublished": published,
        "dateModified": published,
        "image": image,
        "mainEntityOfPage": {"@type": "WebPage", "@id": url},
    }
    if settings.SEO_ORGANIZATION_NAME:
        json_ld["publisher"] = {
            "@type": "Organization",
            "name": settings.SEO_ORGANIZATION_NAME,
            "logo": {"@type": "ImageObject", "url": settings.SEO_ORGANIZATION_LOGO},
        }
    return json_ld
