"""Core type definitions."""

from typing import NewType

# Content slug as stored in the CMS (e.g., "home", "projects/leadcms")
# Distinct from URL paths which carry a leading slash
Slug = NewType("Slug", str)

# Content types that represent actual pages (not components/configuration).
# Used for static generation and sitemap output.
PAGE_CONTENT_TYPES: tuple[str, ...] = ("home", "project")

HOME_SLUG = Slug("home")
NOT_FOUND_SLUG = Slug("not-found")
