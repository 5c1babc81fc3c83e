"""Tests for the file content store."""

from datetime import UTC, date, datetime
from pathlib import Path

import pytest
from sitestage.core.content import (
    ContentRecord,
    FileContentStore,
    build_record,
    extract_user_uid_from_slug,
    parse_timestamp,
    strip_user_uid,
)

from tests.conftest import PREVIEW_UID, write_json, write_mdx


class TestExtractUserUid:
    """Tests for extract_user_uid_from_slug()."""

    def test__guid_suffix__returns_guid(self) -> None:
        """Extract a trailing GUID."""
        slug = f"projects/leadcms-{PREVIEW_UID}"

        assert extract_user_uid_from_slug(slug) == PREVIEW_UID

    def test__uppercase_guid__returns_guid(self) -> None:
        """GUID matching is case-insensitive."""
        uid = PREVIEW_UID.upper()

        assert extract_user_uid_from_slug(f"home-{uid}") == uid

    @pytest.mark.parametrize(
        "slug",
        ["home", "projects/leadcms", "my-page-3fa85f64", f"{PREVIEW_UID}-suffix"],
    )
    def test__regular_slug__returns_none(self, slug: str) -> None:
        """Slugs without a trailing GUID are not previews."""
        assert extract_user_uid_from_slug(slug) is None

    def test__strip_user_uid__removes_suffix(self) -> None:
        """Strip the preview identifier from a slug."""
        assert strip_user_uid(f"home-{PREVIEW_UID}", PREVIEW_UID) == "home"
        assert strip_user_uid("home", None) == "home"


class TestParseTimestamp:
    """Tests for parse_timestamp()."""

    def test__iso_string_with_z__parses_utc(self) -> None:
        assert parse_timestamp("2024-03-01T10:00:00Z") == datetime(2024, 3, 1, 10, tzinfo=UTC)

    def test__naive_datetime__assumed_utc(self) -> None:
        assert parse_timestamp(datetime(2024, 3, 1)) == datetime(2024, 3, 1, tzinfo=UTC)

    def test__date__parses_midnight_utc(self) -> None:
        assert parse_timestamp(date(2024, 3, 1)) == datetime(2024, 3, 1, tzinfo=UTC)

    @pytest.mark.parametrize("value", [None, "", "not a date", 42])
    def test__invalid__returns_none(self, value: object) -> None:
        assert parse_timestamp(value) is None


class TestContentRecord:
    """Tests for ContentRecord.is_draft()."""

    def test__missing_published_at__is_draft(self) -> None:
        record = ContentRecord(slug="x", locale="en", type="project", body="")

        assert record.is_draft()

    def test__future_published_at__is_draft(self) -> None:
        record = ContentRecord(
            slug="x",
            locale="en",
            type="project",
            body="",
            published_at=datetime(2030, 1, 1, tzinfo=UTC),
        )

        assert record.is_draft(now=datetime(2024, 1, 1, tzinfo=UTC))

    def test__past_published_at__is_published(self) -> None:
        record = ContentRecord(
            slug="x",
            locale="en",
            type="project",
            body="",
            published_at=datetime(2020, 1, 1, tzinfo=UTC),
        )

        assert not record.is_draft(now=datetime(2024, 1, 1, tzinfo=UTC))


class TestBuildRecord:
    """Tests for build_record()."""

    def test__non_string_title_and_description__coerced(self) -> None:
        record = build_record("x", "en", {"title": 2024, "description": 3.5, "type": "project"}, "")

        assert record.title == "2024"
        assert record.description == "3.5"

    def test__missing_title__stays_none(self) -> None:
        record = build_record("x", "en", {"type": "project"}, "")

        assert record.title is None
        assert record.description is None

    def test__comma_separated_tags__split(self) -> None:
        record = build_record("x", "en", {"tags": "a, b,,c"}, "")

        assert record.tags == ["a", "b", "c"]


class TestGetContent:
    """Tests for FileContentStore.get_content()."""

    def test__existing_slug__returns_record(self, store: FileContentStore) -> None:
        """Load frontmatter fields and body."""
        record = store.get_content("projects/leadcms", "en")

        assert record is not None
        assert record.slug == "projects/leadcms"
        assert record.type == "project"
        assert record.title == "LeadCMS - Headless CMS"
        assert record.tags == ["Python", "PostgreSQL"]
        assert record.published_at == datetime(2024, 3, 1, tzinfo=UTC)
        assert record.get("badge") == "Open Source"
        assert "A headless CMS." in record.body

    def test__missing_slug__returns_none(self, store: FileContentStore) -> None:
        assert store.get_content("nope", "en") is None

    def test__draft__hidden_unless_requested(self, store: FileContentStore) -> None:
        """Drafts are only returned with include_drafts."""
        assert store.get_content("projects/draft", "en") is None
        assert store.get_content("projects/draft", "en", include_drafts=True) is not None

    def test__preview_slug__requires_include_drafts(
        self, content_dir: Path, store: FileContentStore
    ) -> None:
        """Preview slugs resolve only when drafts are included."""
        write_mdx(
            content_dir / f"home-{PREVIEW_UID}.mdx",
            {"title": "Draft Home", "type": "home"},
            "Draft body\n",
        )

        assert store.get_content(f"home-{PREVIEW_UID}", "en") is None
        record = store.get_content(f"home-{PREVIEW_UID}", "en", include_drafts=True)
        assert record is not None
        assert record.title == "Draft Home"

    def test__preview_slug_without_draft__falls_back_to_base(self, store: FileContentStore) -> None:
        """Previewing a page with no personal draft shows the base page."""
        record = store.get_content(f"home-{PREVIEW_UID}", "en", include_drafts=True)

        assert record is not None
        assert record.title == "Jane Doe - Portfolio"

    def test__other_locale__reads_locale_dir(self, content_dir: Path, store: FileContentStore) -> None:
        """Non-default locales live in a subdirectory."""
        write_mdx(
            content_dir / "de" / "home.mdx",
            {"title": "Startseite", "type": "home", "publishedAt": "2024-01-01T00:00:00Z"},
        )

        record = store.get_content("home", "de")

        assert record is not None
        assert record.title == "Startseite"
        assert record.locale == "de"


class TestDraftSupport:
    """Tests for FileContentStore.get_content_with_draft_support()."""

    def test__preview_file__returned_under_base_slug(
        self, content_dir: Path, store: FileContentStore
    ) -> None:
        """The previewer's draft replaces the base record."""
        write_mdx(
            content_dir / "projects" / f"leadcms-{PREVIEW_UID}.mdx",
            {"title": "LeadCMS v2", "type": "project"},
        )

        record = store.get_content_with_draft_support("projects/leadcms", "en", PREVIEW_UID, True)

        assert record is not None
        assert record.title == "LeadCMS v2"
        assert record.slug == "projects/leadcms"

    def test__no_preview_file__returns_base(self, store: FileContentStore) -> None:
        record = store.get_content_with_draft_support("projects/leadcms", "en", PREVIEW_UID, True)

        assert record is not None
        assert record.title == "LeadCMS - Headless CMS"


class TestListSlugs:
    """Tests for FileContentStore.list_slugs()."""

    def test__published_only__by_default(self, store: FileContentStore) -> None:
        assert store.list_slugs("en") == ["home", "not-found", "projects/leadcms"]

    def test__types__filter_slugs(self, store: FileContentStore) -> None:
        assert store.list_slugs("en", ["project"]) == ["projects/leadcms"]

    def test__include_drafts__lists_drafts(self, store: FileContentStore) -> None:
        assert store.list_slugs("en", ["project"], include_drafts=True) == [
            "projects/draft",
            "projects/leadcms",
        ]

    def test__preview_files__only_for_matching_user(
        self, content_dir: Path, store: FileContentStore
    ) -> None:
        """Preview files contribute their base slug for their own previewer."""
        write_mdx(
            content_dir / "projects" / f"secret-{PREVIEW_UID}.mdx",
            {"title": "Secret", "type": "project"},
        )
        other_uid = "00000000-0000-0000-0000-000000000000"

        assert "projects/secret" not in store.list_slugs("en", ["project"])
        assert "projects/secret" not in store.list_slugs("en", ["project"], True, other_uid)
        assert "projects/secret" in store.list_slugs("en", ["project"], True, PREVIEW_UID)

    def test__default_locale__skips_locale_dirs(
        self, content_dir: Path, store: FileContentStore
    ) -> None:
        """Other locales' files are not listed for the default locale."""
        write_mdx(
            content_dir / "de" / "home.mdx",
            {"title": "Startseite", "type": "home", "publishedAt": "2024-01-01T00:00:00Z"},
        )

        assert "de/home" not in store.list_slugs("en")
        assert store.list_slugs("de") == ["home"]

    def test__missing_locale_dir__returns_empty(self, store: FileContentStore) -> None:
        assert store.list_slugs("fr") == []


class TestLoadConfigStrict:
    """Tests for FileContentStore.load_config_strict()."""

    def test__base_file__loaded(self, store: FileContentStore) -> None:
        assert store.load_config_strict("header", "en")["logo"]["text"] == "Jane Doe"

    def test__preview_override__preferred(self, content_dir: Path, store: FileContentStore) -> None:
        write_json(content_dir / f"header-{PREVIEW_UID}.json", {"logo": {"text": "Preview"}})

        data = store.load_config_strict("header", "en", PREVIEW_UID)

        assert data["logo"]["text"] == "Preview"

    def test__missing__raises_file_not_found(self, store: FileContentStore) -> None:
        with pytest.raises(FileNotFoundError):
            store.load_config_strict("sidebar", "en")

    def test__non_object__raises_value_error(self, content_dir: Path, store: FileContentStore) -> None:
        write_json(content_dir / "sidebar.json", [1, 2])

        with pytest.raises(ValueError, match="must be a JSON object"):
            store.load_config_strict("sidebar", "en")
