"""MDX component registry.

Components available inside MDX bodies. Each receives the tag props and
the rendered children; data-fetching components are bound to the render
context so preview identifiers reach their content queries.
"""

import logging
import re
from dataclasses import dataclass
from functools import partial
from typing import Any

from markupsafe import Markup

from sitestage.core.contact import render_contact_form
from sitestage.core.content import ContentAccessor, ContentRecord
from sitestage.core.mdx import Component, text_content
from sitestage.core.templating import render_template

logger = logging.getLogger(__name__)

PROJECT_TYPE = "project"

CARD_VARIANTS = {
    "primary": {
        "card": "group hover:border-primary/50 transition-all duration-300",
        "icon_bg": "bg-primary/10 group-hover:bg-primary/20",
        "icon_color": "text-primary",
        "button": "text-primary hover:text-primary",
    },
    "accent": {
        "card": "group hover:border-accent/50 transition-all duration-300",
        "icon_bg": "bg-accent/10 group-hover:bg-accent/20",
        "icon_color": "text-accent",
        "button": "text-accent hover:text-accent",
    },
    "chart-2": {
        "card": "group hover:border-chart-2/50 transition-all duration-300",
        "icon_bg": "bg-chart-2/10 group-hover:bg-chart-2/20",
        "icon_color": "text-chart-2",
        "button": "text-chart-2 hover:bg-chart-2/10 hover:text-chart-2",
    },
    "chart-3": {
        "card": "group hover:border-chart-3/50 transition-all duration-300",
        "icon_bg": "bg-chart-3/10 group-hover:bg-chart-3/20",
        "icon_color": "text-chart-3",
        "button": "text-chart-3 hover:text-chart-3",
    },
}

# Variants a dynamic project card may take from its badgeVariant field
PROJECT_GRID_VARIANTS = ("primary", "chart-2", "chart-3")

ICONS = ("Database", "Code2", "Wrench")

_TITLE_SUFFIX_RE = re.compile(r"\s*-.*$")


@dataclass(frozen=True)
class RenderContext:
    """Inputs shared by templates and components during one page render."""

    accessor: ContentAccessor
    locale: str
    user_uid: str | None = None
    contact_action: str | None = None


def get_mdx_components(context: RenderContext) -> dict[str, Component]:
    """Return the component registry for one render.

    Args:
        context: Render context threaded into data-fetching components

    Returns:
        Mapping of component name to implementation
    """
    return {
        "HeroSection": hero_section,
        "ProjectCard": project_card,
        "ProjectGrid": project_grid,
        "DynamicProjectGrid": partial(dynamic_project_grid, context=context),
        "ContactSection": partial(contact_section, context=context),
        "Button": button,
        "NotFoundSection": not_found_section,
    }


def hero_section(props: dict[str, Any], children: Markup) -> str:
    return render_template(
        "components/hero_section.html",
        name=props.get("name", ""),
        headline=props.get("headline", ""),
        subheadline=props.get("subheadline", ""),
        image_url=props.get("imageUrl", ""),
        image_alt=props.get("imageAlt", ""),
        quote=props.get("quote", ""),
        quote_author=props.get("quoteAuthor", ""),
        children=children,
    )


def project_card(props: dict[str, Any], children: Markup) -> str:
    icon = props.get("icon")
    variant = props.get("variant", "primary")
    return render_template(
        "components/project_card.html",
        icon=icon if icon in ICONS else None,
        title=props.get("title", ""),
        subtitle=props.get("subtitle", ""),
        href=props.get("href", "#"),
        classes=CARD_VARIANTS.get(variant, CARD_VARIANTS["primary"]),
        children=children,
    )


def project_grid(props: dict[str, Any], children: Markup) -> str:
    return render_template(
        "components/project_grid.html",
        title=props.get("title"),
        children=children,
    )


def button(props: dict[str, Any], children: Markup) -> str:
    """Render a link or plain button.

    External links (http, mailto) open in a new tab.
    """
    href = props.get("href")
    return render_template(
        "components/button.html",
        href=href,
        external=bool(href) and (href.startswith("http") or href.startswith("mailto:")),
        variant=props.get("variant", "default"),
        size=props.get("size", "default"),
        class_name=props.get("className", ""),
        text=text_content(children),
    )


def not_found_section(props: dict[str, Any], children: Markup) -> str:
    description = props.get("description")
    return render_template(
        "components/not_found_section.html",
        badge=props.get("badge", "404"),
        title=text_content(str(props.get("title", ""))),
        description=text_content(str(description)) if description else None,
        children=children,
    )


def contact_section(props: dict[str, Any], children: Markup, *, context: RenderContext) -> str:
    form_html = render_contact_form(action=context.contact_action, language=context.locale)
    return render_template(
        "components/contact_section.html",
        title=props.get("title", ""),
        description=props.get("description", ""),
        form=Markup(form_html),
    )


def dynamic_project_grid(props: dict[str, Any], children: Markup, *, context: RenderContext) -> str:
    """Render a grid of the most recently published projects."""
    projects = select_projects(
        context.accessor,
        context.locale,
        user_uid=context.user_uid,
        max_projects=int(props.get("maxProjects", 3)),
    )
    cards = []
    for project in projects:
        variant = project_variant(project)
        title = project.title or ""
        cards.append(
            {
                "slug": project.slug,
                "title": _TITLE_SUFFIX_RE.sub("", title) or title,
                "subtitle": project.get("badge") or project.get("category") or "Project",
                "description": project.description or "",
                "external_link": project.get("externalLink"),
                "github_link": project.get("githubLink"),
                "icon": project_icon(project),
                "classes": CARD_VARIANTS[variant],
            }
        )

    return render_template(
        "components/dynamic_project_grid.html",
        title=props.get("title", "Featured Projects"),
        cards=cards,
    )


def select_projects(
    accessor: ContentAccessor,
    locale: str,
    *,
    user_uid: str | None = None,
    max_projects: int = 3,
) -> list[ContentRecord]:
    """Select the newest projects for a grid.

    Lists project slugs (with the previewer's drafts when user_uid is set),
    fetches each, and orders them by publishedAt descending. Records
    without publishedAt sort as oldest.

    Args:
        accessor: Content accessor
        locale: Content locale
        user_uid: Previewer identifier
        max_projects: Maximum number of projects returned

    Returns:
        At most max_projects project records
    """
    include_drafts = bool(user_uid)
    slugs = accessor.list_slugs(locale, [PROJECT_TYPE], include_drafts, user_uid)

    projects: list[ContentRecord] = []
    for slug in slugs:
        record = accessor.get_content_with_draft_support(slug, locale, user_uid, include_drafts)
        if record is None or record.type != PROJECT_TYPE:
            continue
        if user_uid:
            logger.info(f"Loaded project: {slug} - {record.title}")
        projects.append(record)

    projects.sort(key=_published_sort_key, reverse=True)
    return projects[:max_projects]


def _published_sort_key(record: ContentRecord) -> float:
    if record.published_at is None:
        return float("-inf")
    return record.published_at.timestamp()


def project_icon(project: ContentRecord) -> str:
    """Pick a card icon from the project category and title."""
    category = str(project.get("category") or "").lower()
    title = (project.title or "").lower()

    if "excel" in category or "excel" in title:
        return "Wrench"
    if "cms" in category or "platform" in category or "cms" in title:
        return "Code2"
    if "cmms" in category or "tagpoint" in title:
        return "Database"
    return "Code2"


def project_variant(project: ContentRecord) -> str:
    variant = project.get("badgeVariant")
    if variant in PROJECT_GRID_VARIANTS:
        return variant
    return "primary"
