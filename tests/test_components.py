"""Tests for MDX components."""

from pathlib import Path

import pytest
from markupsafe import Markup
from sitestage.core.components import (
    RenderContext,
    button,
    get_mdx_components,
    project_icon,
    select_projects,
)
from sitestage.core.content import ContentRecord, FileContentStore

from tests.conftest import PREVIEW_UID, write_mdx


@pytest.fixture
def projects_store(tmp_path: Path) -> FileContentStore:
    """Store with five projects, one without publishedAt."""
    content = tmp_path / "content"
    dates = {
        "alpha": "2024-01-01T00:00:00Z",
        "beta": "2024-05-01T00:00:00Z",
        "gamma": "2023-06-01T00:00:00Z",
        "delta": "2024-03-01T00:00:00Z",
    }
    for name, published in dates.items():
        write_mdx(
            content / "projects" / f"{name}.mdx",
            {"title": name.capitalize(), "type": "project", "publishedAt": published},
        )
    write_mdx(content / "projects" / "undated.mdx", {"title": "Undated", "type": "project"})
    return FileContentStore(content, "en")


def _record(title: str | None = None, **fields: object) -> ContentRecord:
    return ContentRecord(
        slug="projects/x",
        locale="en",
        type="project",
        body="",
        title=title,
        fields=dict(fields),
    )


class TestSelectProjects:
    """Tests for select_projects()."""

    def test__max_projects__newest_first(self, projects_store: FileContentStore) -> None:
        """Three newest projects by publishedAt descending."""
        projects = select_projects(projects_store, "en", max_projects=3)

        assert [p.slug for p in projects] == [
            "projects/beta",
            "projects/delta",
            "projects/alpha",
        ]

    def test__undated_with_drafts__sorted_oldest(self, projects_store: FileContentStore) -> None:
        """Records without publishedAt sort after every dated record."""
        projects = select_projects(projects_store, "en", user_uid=PREVIEW_UID, max_projects=10)

        assert len(projects) == 5
        assert projects[-1].slug == "projects/undated"

    def test__preview_draft__replaces_project(
        self, tmp_path: Path, projects_store: FileContentStore
    ) -> None:
        """The previewer's draft is shown in place of the published project."""
        write_mdx(
            tmp_path / "content" / "projects" / f"beta-{PREVIEW_UID}.mdx",
            {"title": "Beta Draft", "type": "project", "publishedAt": "2024-05-01T00:00:00Z"},
        )

        projects = select_projects(projects_store, "en", user_uid=PREVIEW_UID, max_projects=1)

        assert projects[0].title == "Beta Draft"
        assert projects[0].slug == "projects/beta"


class TestDynamicProjectGrid:
    """Tests for the DynamicProjectGrid component."""

    def test__renders_three_cards_in_order(self, projects_store: FileContentStore) -> None:
        components = get_mdx_components(RenderContext(accessor=projects_store, locale="en"))

        html = components["DynamicProjectGrid"]({"maxProjects": 3}, Markup(""))

        assert html.count('class="card project-card') == 3
        assert html.index('data-slug="projects/beta"') < html.index('data-slug="projects/delta"')
        assert html.index('data-slug="projects/delta"') < html.index('data-slug="projects/alpha"')
        assert "Featured Projects" in html

    def test__card_title__drops_suffix(self, store: FileContentStore) -> None:
        """Card titles drop everything after the first dash."""
        components = get_mdx_components(RenderContext(accessor=store, locale="en"))

        html = components["DynamicProjectGrid"]({"title": "Work"}, Markup(""))

        assert "Learn about LeadCMS\n" in html
        assert "Open Source" in html
        assert 'href="https://www.leadcms.ai"' in html

    def test__numeric_title__rendered_as_text(self, tmp_path: Path) -> None:
        content = tmp_path / "numeric"
        write_mdx(
            content / "projects" / "year.mdx",
            {"title": 2024, "description": 42, "type": "project", "publishedAt": "2024-01-01T00:00:00Z"},
        )
        store = FileContentStore(content, "en")
        components = get_mdx_components(RenderContext(accessor=store, locale="en"))

        html = components["DynamicProjectGrid"]({}, Markup(""))

        assert "2024" in html
        assert 'data-slug="projects/year"' in html


class TestProjectIcon:
    """Tests for project_icon()."""

    @pytest.mark.parametrize(
        ("fields", "expected"),
        [
            ({"category": "Excel Automation"}, "Wrench"),
            ({"category": "CMS Platform"}, "Code2"),
            ({"category": "CMMS"}, "Database"),
            ({"title": "TagPoint Monitor"}, "Database"),
            ({"category": "Mobile"}, "Code2"),
        ],
    )
    def test__category_and_title__select_icon(self, fields: dict, expected: str) -> None:
        assert project_icon(_record(**fields)) == expected


class TestButton:
    """Tests for the Button component."""

    def test__external_link__opens_new_tab(self) -> None:
        html = button({"href": "https://example.com"}, Markup("<p>Visit</p>\n"))

        assert 'target="_blank"' in html
        assert ">Visit</a>" in html

    def test__internal_link__same_tab(self) -> None:
        html = button({"href": "/"}, Markup("Home"))

        assert 'target="_blank"' not in html
        assert 'href="/"' in html

    def test__no_href__renders_button(self) -> None:
        html = button({}, Markup("Click"))

        assert html.startswith("<button")


class TestContactSection:
    """Tests for the ContactSection component."""

    def test__form_action__from_context(self, store: FileContentStore) -> None:
        context = RenderContext(accessor=store, locale="en", contact_action="/api/contact")

        html = get_mdx_components(context)["ContactSection"](
            {"title": "Get in touch", "description": "Say hi"},
            Markup(""),
        )

        assert 'id="contact"' in html
        assert 'action="/api/contact"' in html
        assert 'name="firstName"' in html
        assert 'data-state="idle"' in html
