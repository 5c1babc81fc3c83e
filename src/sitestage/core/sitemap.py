"""Sitemap generation.

One entry for the homepage plus one per published page-type slug.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from urllib.parse import urljoin
from xml.etree import ElementTree as ET

from sitestage.core.content import ContentAccessor
from sitestage.core.types import HOME_SLUG, PAGE_CONTENT_TYPES

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"

HOME_PRIORITY = 1.0
PAGE_PRIORITY = 0.7
CHANGE_FREQUENCY = "weekly"


@dataclass(frozen=True)
class SitemapEntry:
    """Single sitemap URL entry."""

    url: str
    last_modified: datetime
    change_frequency: str
    priority: float

    def to_dict(self) -> dict[str, str | float]:
        """Convert to dictionary for JSON serialization."""
        return {
            "url": self.url,
            "lastModified": self.last_modified.isoformat(),
            "changeFrequency": self.change_frequency,
            "priority": self.priority,
        }


def generate_sitemap(
    accessor: ContentAccessor,
    locale: str,
    base_url: str,
    now: datetime | None = None,
) -> list[SitemapEntry]:
    """Generate sitemap entries for published pages.

    Args:
        accessor: Content accessor
        locale: Content locale
        base_url: Site base URL
        now: Timestamp used as last-modified (default: current time)

    Returns:
        Homepage entry followed by one entry per content page
    """
    timestamp = now or datetime.now(UTC)
    slugs = accessor.list_slugs(locale, PAGE_CONTENT_TYPES)
    content_slugs = [slug for slug in slugs if slug not in (HOME_SLUG, "")]

    entries = [
        SitemapEntry(
            url=base_url,
            last_modified=timestamp,
            change_frequency=CHANGE_FREQUENCY,
            priority=HOME_PRIORITY,
        )
    ]
    entries.extend(
        SitemapEntry(
            url=urljoin(base_url, slug),
            last_modified=timestamp,
            change_frequency=CHANGE_FREQUENCY,
            priority=PAGE_PRIORITY,
        )
        for slug in content_slugs
    )
    return entries


def render_sitemap_xml(entries: list[SitemapEntry]) -> str:
    """Render entries as a sitemaps.org XML document."""
    urlset = ET.Element("urlset", xmlns=SITEMAP_NAMESPACE)
    for entry in entries:
        url = ET.SubElement(urlset, "url")
        ET.SubElement(url, "loc").text = entry.url
        ET.SubElement(url, "lastmod").text = entry.last_modified.isoformat()
        ET.SubElement(url, "changefreq").text = entry.change_frequency
        ET.SubElement(url, "priority").text = f"{entry.priority:.1f}"

    body = ET.tostring(urlset, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'
