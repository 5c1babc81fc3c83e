"""SEO metadata for rendered pages.

Combines a content record with the site-wide metadata blob
(metadata.json, key "siteMetadata").
"""

from dataclasses import dataclass, field
from typing import Any

from sitestage.core.content import ContentAccessor, ContentRecord, strip_user_uid
from sitestage.core.errors import ConfigMissingError
from sitestage.core.types import HOME_SLUG


@dataclass(frozen=True)
class PageMetadata:
    """Structured page metadata."""

    title: str | None
    description: str | None
    keywords: list[str]
    url: str
    open_graph: dict[str, Any] = field(default_factory=dict)
    twitter: dict[str, Any] = field(default_factory=dict)
    robots: dict[str, bool] | None = None

    def meta_tags(self) -> list[tuple[str, str]]:
        """Flatten metadata into (name, content) pairs for <meta> tags.

        Names starting with "og:" are Open Graph properties.
        """
        tags: list[tuple[str, str]] = []
        if self.description:
            tags.append(("description", self.description))
        if self.keywords:
            tags.append(("keywords", ", ".join(self.keywords)))
        if self.robots is not None:
            index = "index" if self.robots.get("index") else "noindex"
            follow = "follow" if self.robots.get("follow") else "nofollow"
            tags.append(("robots", f"{index}, {follow}"))

        for key, value in self.open_graph.items():
            if key == "images":
                for image in value or []:
                    tags.append(("og:image", str(image["url"])))
                    if image.get("alt"):
                        tags.append(("og:image:alt", str(image["alt"])))
            elif _is_scalar(value):
                tags.append((f"og:{_snake(key)}", str(value)))

        for key, value in self.twitter.items():
            if _is_scalar(value):
                tags.append((f"twitter:{key}", str(value)))

        return tags


def load_site_metadata(accessor: ContentAccessor, locale: str) -> dict[str, Any]:
    """Load the siteMetadata block of metadata.json.

    Raises:
        ConfigMissingError: If the blob is missing or has no siteMetadata
    """
    try:
        data = accessor.load_config_strict("metadata", locale)
    except Exception as e:
        raise ConfigMissingError("metadata") from e

    site_metadata = data.get("siteMetadata")
    if not isinstance(site_metadata, dict):
        raise ConfigMissingError("metadata")
    return site_metadata


def page_url(base_url: str, slug: str, user_uid: str | None = None) -> str:
    """Build the canonical URL for a slug.

    The home page maps to the base URL itself; preview identifiers are
    removed from the slug.
    """
    clean_slug = strip_user_uid(slug, user_uid)
    if clean_slug == HOME_SLUG:
        return base_url
    return f"{base_url.rstrip('/')}/{clean_slug}"


def generate_page_metadata(
    content: ContentRecord,
    slug: str,
    site_metadata: dict[str, Any],
    user_uid: str | None = None,
) -> PageMetadata:
    """Generate page metadata for a content record.

    Args:
        content: Content record being rendered
        slug: Requested slug (may carry the preview identifier)
        site_metadata: siteMetadata block with baseUrl, openGraph, twitter
        user_uid: Preview identifier; preview pages are not indexable

    Returns:
        PageMetadata for the page
    """
    url = page_url(str(site_metadata.get("baseUrl", "")), slug, user_uid)

    open_graph: dict[str, Any] = {
        **(site_metadata.get("openGraph") or {}),
        "title": content.title,
        "description": content.description,
        "url": url,
    }
    if content.cover_image_url:
        open_graph["images"] = [
            {
                "url": content.cover_image_url,
                "alt": content.cover_image_alt or content.title,
            }
        ]
    else:
        open_graph.pop("images", None)

    twitter: dict[str, Any] = {
        **(site_metadata.get("twitter") or {}),
        "title": content.title,
        "description": content.description,
    }

    return PageMetadata(
        title=content.title,
        description=content.description,
        keywords=list(content.tags),
        url=url,
        open_graph=open_graph,
        twitter=twitter,
        robots={"index": False, "follow": False} if user_uid else None,
    )


def _is_scalar(value: object) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def _snake(key: str) -> str:
    """Convert camelCase Open Graph keys (siteName) to og:site_name form."""
    return "".join(f"_{ch.lower()}" if ch.isupper() else ch for ch in key)
