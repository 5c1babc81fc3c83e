"""Page template registry.

Maps content types to the templates that render them. Unregistered
types fall back to the default full-width template.
"""

from collections.abc import Callable
from urllib.parse import urlsplit

from markupsafe import Markup

from sitestage.core.components import RenderContext, get_mdx_components
from sitestage.core.content import ContentRecord
from sitestage.core.mdx import MDXRenderer
from sitestage.core.templating import render_template

PageTemplate = Callable[[ContentRecord, RenderContext], str]

BADGE_CLASSES = {
    "primary": "bg-primary text-primary-foreground",
    "chart-2": "bg-chart-2 text-chart-2-foreground",
    "chart-3": "bg-chart-3 text-chart-3-foreground",
}

LINK_BUTTON_CLASSES = {
    "primary": "bg-primary hover:bg-primary/90 text-primary-foreground",
    "chart-2": "bg-chart-2 hover:bg-chart-2/90 text-chart-2-foreground",
    "chart-3": "bg-chart-3 hover:bg-chart-3/90 text-chart-3-foreground",
}


def render_body(content: ContentRecord, context: RenderContext) -> Markup:
    """Render a record's MDX body with the component registry."""
    renderer = MDXRenderer(get_mdx_components(context))
    return Markup(renderer.render(content.body, {"userUid": context.user_uid}))


def default_template(content: ContentRecord, context: RenderContext) -> str:
    return render_template("pages/default.html", body=render_body(content, context))


def not_found_template(content: ContentRecord, context: RenderContext) -> str:
    return render_template("pages/not_found.html", body=render_body(content, context))


def project_template(content: ContentRecord, context: RenderContext) -> str:
    """Project detail page with badge, technology stack and links."""
    variant = content.get("badgeVariant")
    external_link = content.get("externalLink")
    return render_template(
        "pages/project.html",
        body=render_body(content, context),
        badge=content.get("badge"),
        badge_class=BADGE_CLASSES.get(variant, ""),
        tags=content.tags,
        external_link=external_link,
        external_label=external_link_label(content) if external_link else None,
        button_class=LINK_BUTTON_CLASSES.get(variant, ""),
        github_link=content.get("githubLink"),
    )


def external_link_label(content: ContentRecord) -> str:
    """Label for the external link button.

    Uses the linkLabel field, else the link's host name.
    """
    label = content.get("linkLabel")
    if label:
        return str(label)

    host = urlsplit(str(content.get("externalLink", ""))).hostname
    if not host:
        return "Visit Website"
    return f"Visit {host.removeprefix('www.')}"


TEMPLATE_REGISTRY: dict[str, PageTemplate] = {
    "project": project_template,
    "home": default_template,
    "not-found": not_found_template,
}


def get_template(content_type: str) -> PageTemplate:
    """Get the template for a content type, falling back to the default."""
    return TEMPLATE_REGISTRY.get(content_type, default_template)
