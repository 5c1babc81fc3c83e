"""Content access for LeadCMS-style content directories.

Layout:
    .leadcms/content/
    ├── home.mdx                  # default-locale content, addressed by slug
    ├── projects/
    │   ├── leadcms.mdx
    │   └── leadcms-<guid>.mdx    # preview draft for one previewer
    ├── header.json               # named configuration blobs
    ├── header-<guid>.json        # preview override
    ├── footer.json
    ├── metadata.json
    └── de/                       # other locales mirror the layout
        └── home.mdx

A record is a draft when its publishedAt is absent or in the future.
Nothing is cached: every call reads the files again.
"""

import json
import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any, Protocol

import frontmatter

logger = logging.getLogger(__name__)

CONTENT_SUFFIXES = (".mdx", ".md")

USER_UID_RE = re.compile(
    r"-([0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12})$"
)

LOCALE_DIR_RE = re.compile(r"^[a-z]{2,3}(?:-[A-Za-z]{2,4})?$")


@dataclass(frozen=True)
class ContentRecord:
    """Content record resolved from a slug and locale."""

    slug: str
    locale: str
    type: str | None
    body: str
    title: str | None = None
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    published_at: datetime | None = None
    cover_image_url: str | None = None
    cover_image_alt: str | None = None
    fields: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a raw frontmatter field."""
        return self.fields.get(key, default)

    def is_draft(self, now: datetime | None = None) -> bool:
        """Check whether the record is unpublished."""
        if self.published_at is None:
            return True
        return self.published_at > (now or datetime.now(UTC))


class ContentAccessor(Protocol):
    """Read access to CMS content and configuration blobs."""

    def get_config(self) -> dict[str, Any]: ...

    def list_slugs(
        self,
        locale: str,
        types: tuple[str, ...] | list[str] | None = None,
        include_drafts: bool = False,
        user_uid: str | None = None,
    ) -> list[str]: ...

    def get_content(
        self,
        slug: str,
        locale: str,
        include_drafts: bool = False,
    ) -> ContentRecord | None: ...

    def get_content_with_draft_support(
        self,
        slug: str,
        locale: str,
        user_uid: str | None = None,
        include_drafts: bool = False,
    ) -> ContentRecord | None: ...

    def load_config_strict(
        self,
        name: str,
        locale: str,
        user_uid: str | None = None,
    ) -> dict[str, Any]: ...


def extract_user_uid_from_slug(slug: str) -> str | None:
    """Extract the preview identifier from a slug.

    Args:
        slug: Content slug, e.g. "my-page-3fa85f64-5717-4562-b3fc-2c963f66afa6"

    Returns:
        The trailing GUID, or None for regular slugs
    """
    match = USER_UID_RE.search(slug)
    if match is None:
        return None
    return match.group(1)


def strip_user_uid(slug: str, user_uid: str | None) -> str:
    """Remove the '-{user_uid}' suffix from a preview slug."""
    if user_uid and slug.endswith(f"-{user_uid}"):
        return slug[: -len(user_uid) - 1]
    return slug


class FileContentStore:
    """Content accessor backed by a content directory on disk."""

    def __init__(self, content_dir: Path, default_language: str) -> None:
        """Initialize store.

        Args:
            content_dir: Root content directory (e.g., .leadcms/content)
            default_language: Locale whose content lives at the root
        """
        self._content_dir = content_dir
        self._default_language = default_language

    @property
    def content_dir(self) -> Path:
        """Root content directory."""
        return self._content_dir

    @property
    def default_language(self) -> str:
        """Locale stored at the content root."""
        return self._default_language

    def get_config(self) -> dict[str, Any]:
        """Return accessor settings in the CMS SDK shape."""
        return {"defaultLanguage": self._default_language}

    def list_slugs(
        self,
        locale: str,
        types: tuple[str, ...] | list[str] | None = None,
        include_drafts: bool = False,
        user_uid: str | None = None,
    ) -> list[str]:
        """List content slugs for a locale.

        Args:
            locale: Content locale
            types: Restrict to these content types (None for all)
            include_drafts: Include unpublished content
            user_uid: Previewer whose draft files are included

        Returns:
            Sorted unique slugs; preview files contribute their base slug
        """
        slugs: set[str] = set()
        for slug, path in self._iter_content_files(locale):
            uid = extract_user_uid_from_slug(slug)
            if uid is not None:
                if not include_drafts or uid != user_uid:
                    continue
                slug = strip_user_uid(slug, uid)
                record = self._read_record(path, slug, locale)
            else:
                record = self._read_record(path, slug, locale)
                if not include_drafts and record.is_draft():
                    continue

            if types is not None and record.type not in types:
                continue
            slugs.add(slug)

        return sorted(slugs)

    def get_content(
        self,
        slug: str,
        locale: str,
        include_drafts: bool = False,
    ) -> ContentRecord | None:
        """Get content record by slug.

        Args:
            slug: Content slug (may carry a preview identifier)
            locale: Content locale
            include_drafts: Return unpublished and preview content

        Returns:
            ContentRecord if found and visible, None otherwise
        """
        user_uid = extract_user_uid_from_slug(slug)
        if user_uid is not None and not include_drafts:
            return None

        path = self._resolve_content_path(slug, locale)
        if path is None:
            if user_uid is not None:
                # Preview of a page without a personal draft shows the base page
                return self.get_content(strip_user_uid(slug, user_uid), locale, include_drafts)
            logger.debug(f"No content file for slug '{slug}' ({locale})")
            return None

        record = self._read_record(path, slug, locale)
        if not include_drafts and record.is_draft():
            logger.debug(f"Skipping draft content '{slug}' ({locale})")
            return None
        return record

    def get_content_with_draft_support(
        self,
        slug: str,
        locale: str,
        user_uid: str | None = None,
        include_drafts: bool = False,
    ) -> ContentRecord | None:
        """Get content record, preferring the previewer's draft version.

        Args:
            slug: Base content slug
            locale: Content locale
            user_uid: Previewer identifier
            include_drafts: Return unpublished content

        Returns:
            The '{slug}-{user_uid}' record under the base slug when present,
            otherwise the regular record
        """
        if user_uid:
            preview = self.get_content(f"{slug}-{user_uid}", locale, include_drafts=True)
            if preview is not None:
                return replace(preview, slug=slug)
        return self.get_content(slug, locale, include_drafts)

    def load_config_strict(
        self,
        name: str,
        locale: str,
        user_uid: str | None = None,
    ) -> dict[str, Any]:
        """Load a named JSON configuration blob.

        Args:
            name: Blob name (e.g., "header", "footer", "metadata")
            locale: Content locale
            user_uid: Previewer whose override file takes precedence

        Returns:
            Parsed JSON object

        Raises:
            FileNotFoundError: If neither the override nor the base file exists
            ValueError: If the file does not hold a JSON object
        """
        locale_dir = self._locale_dir(locale)
        candidates = []
        if user_uid:
            candidates.append(locale_dir / f"{name}-{user_uid}.json")
        candidates.append(locale_dir / f"{name}.json")

        for candidate in candidates:
            if candidate.is_file():
                data = json.loads(candidate.read_text(encoding="utf-8"))
                if not isinstance(data, dict):
                    raise ValueError(f"Configuration {candidate} must be a JSON object")
                return data

        raise FileNotFoundError(f"Configuration file not found: {candidates[-1]}")

    def _locale_dir(self, locale: str) -> Path:
        if locale == self._default_language:
            return self._content_dir
        return self._content_dir / locale

    def _resolve_content_path(self, slug: str, locale: str) -> Path | None:
        locale_dir = self._locale_dir(locale)
        for suffix in CONTENT_SUFFIXES:
            candidate = locale_dir / f"{slug}{suffix}"
            if candidate.is_file():
                return candidate
        return None

    def _iter_content_files(self, locale: str) -> Iterator[tuple[str, Path]]:
        """Yield (slug, path) for every content file of a locale."""
        locale_dir = self._locale_dir(locale)
        if not locale_dir.is_dir():
            return

        is_default = locale == self._default_language
        for path in sorted(locale_dir.rglob("*")):
            if path.suffix not in CONTENT_SUFFIXES or not path.is_file():
                continue
            relative = path.relative_to(locale_dir)
            if is_default and len(relative.parts) > 1 and LOCALE_DIR_RE.match(relative.parts[0]):
                continue
            yield relative.with_suffix("").as_posix(), path

    def _read_record(self, path: Path, slug: str, locale: str) -> ContentRecord:
        post = frontmatter.loads(path.read_text(encoding="utf-8"))
        return build_record(slug, locale, dict(post.metadata), post.content)


def build_record(slug: str, locale: str, meta: dict[str, Any], body: str) -> ContentRecord:
    """Build a ContentRecord from frontmatter fields and body."""
    tags = meta.get("tags") or []
    if isinstance(tags, str):
        tags = [tag.strip() for tag in tags.split(",") if tag.strip()]

    content_type = meta.get("type")
    title = meta.get("title")
    description = meta.get("description")
    return ContentRecord(
        slug=slug,
        locale=locale,
        type=str(content_type) if content_type else None,
        body=body,
        title=str(title) if title is not None else None,
        description=str(description) if description is not None else None,
        tags=[str(tag) for tag in tags],
        published_at=parse_timestamp(meta.get("publishedAt")),
        cover_image_url=meta.get("coverImageUrl"),
        cover_image_alt=meta.get("coverImageAlt"),
        fields=meta,
    )


def parse_timestamp(value: object) -> datetime | None:
    """Parse a frontmatter timestamp into an aware datetime.

    Naive values are taken as UTC; unparseable values yield None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Ignoring invalid publishedAt value: {value!r}")
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
