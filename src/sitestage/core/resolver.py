"""Route resolution.

Maps slugs to content records and renders them as complete pages:
header, type-dispatched template and footer inside the page layout.
Missing content or a missing content type aborts the render.
"""

import logging
from dataclasses import dataclass

from markupsafe import Markup

from sitestage.core.chrome import render_footer, render_header
from sitestage.core.components import RenderContext
from sitestage.core.content import ContentAccessor, ContentRecord, extract_user_uid_from_slug
from sitestage.core.errors import ContentNotFoundError, ContentTypeMissingError
from sitestage.core.metadata import PageMetadata, generate_page_metadata, load_site_metadata
from sitestage.core.templates import get_template
from sitestage.core.templating import render_template
from sitestage.core.types import HOME_SLUG, NOT_FOUND_SLUG, PAGE_CONTENT_TYPES

logger = logging.getLogger(__name__)


@dataclass
class RenderedPage:
    """Result of resolving and rendering a slug."""

    slug: str
    html: str
    content: ContentRecord
    metadata: PageMetadata
    user_uid: str | None


class PageResolver:
    """Resolves slugs to rendered pages for one locale."""

    def __init__(
        self,
        accessor: ContentAccessor,
        locale: str | None = None,
        *,
        contact_action: str | None = None,
        live_reload: bool = False,
    ) -> None:
        """Initialize resolver.

        Args:
            accessor: Content accessor
            locale: Locale all pages are rendered in (default: the
                accessor's default language)
            contact_action: Action URL for contact forms
            live_reload: Inject the live reload client script
        """
        self._accessor = accessor
        self._locale = locale or str(accessor.get_config()["defaultLanguage"])
        self._contact_action = contact_action
        self._live_reload = live_reload

    @property
    def accessor(self) -> ContentAccessor:
        return self._accessor

    @property
    def locale(self) -> str:
        return self._locale

    def resolve(self, slug: str) -> RenderedPage:
        """Render the page for a slug.

        A slug ending in a preview identifier renders draft content for
        that previewer.

        Args:
            slug: Content slug (e.g., "projects/leadcms")

        Returns:
            RenderedPage with the full HTML document

        Raises:
            ContentNotFoundError: If no content exists for the slug
            ContentTypeMissingError: If the content has no type
            ConfigMissingError: If header, footer or site metadata is missing
        """
        user_uid = extract_user_uid_from_slug(slug)
        include_drafts = user_uid is not None

        content = self._accessor.get_content(slug, self._locale, include_drafts)
        if content is None:
            raise ContentNotFoundError(slug)
        if not content.type:
            raise ContentTypeMissingError(slug)

        return self._render(slug, content, user_uid)

    def resolve_home(self) -> RenderedPage:
        return self.resolve(HOME_SLUG)

    def resolve_not_found(self) -> RenderedPage:
        """Render the CMS-driven not-found page.

        Raises:
            ContentNotFoundError: If not-found content is missing
            ContentTypeMissingError: If not-found content has no type
        """
        content = self._accessor.get_content(NOT_FOUND_SLUG, self._locale)
        if content is None:
            raise ContentNotFoundError(
                NOT_FOUND_SLUG,
                "Not-found page content missing. Please ensure not-found.mdx exists in the "
                "content directory with slug: 'not-found' and type: 'not-found' "
                "or sync content from the CMS.",
            )
        if not content.type:
            raise ContentTypeMissingError(
                NOT_FOUND_SLUG,
                "Not-found page type is missing. "
                "Please ensure not-found.mdx has 'type: \"not-found\"' field in frontmatter.",
            )

        return self._render(NOT_FOUND_SLUG, content, None)

    def static_slugs(self) -> list[str]:
        """List published page slugs to pre-render."""
        return self._accessor.list_slugs(self._locale, PAGE_CONTENT_TYPES)

    def page_metadata(self, slug: str) -> PageMetadata | None:
        """Generate metadata for a slug without rendering it.

        Returns:
            PageMetadata, or None when no content exists for the slug
        """
        user_uid = extract_user_uid_from_slug(slug)
        content = self._accessor.get_content(slug, self._locale, user_uid is not None)
        if content is None:
            return None
        site_metadata = load_site_metadata(self._accessor, self._locale)
        return generate_page_metadata(content, slug, site_metadata, user_uid)

    def _render(self, slug: str, content: ContentRecord, user_uid: str | None) -> RenderedPage:
        logger.debug(f"Rendering '{slug}' with template for type '{content.type}'")

        context = RenderContext(
            accessor=self._accessor,
            locale=self._locale,
            user_uid=user_uid,
            contact_action=self._contact_action,
        )
        template = get_template(content.type or "")
        site_metadata = load_site_metadata(self._accessor, self._locale)
        metadata = generate_page_metadata(content, slug, site_metadata, user_uid)

        html = render_template(
            "layout.html",
            locale=self._locale,
            metadata=metadata,
            header=Markup(render_header(self._accessor, self._locale, user_uid)),
            main=Markup(template(content, context)),
            footer=Markup(render_footer(self._accessor, self._locale, user_uid)),
            live_reload=self._live_reload,
        )

        return RenderedPage(
            slug=slug,
            html=html,
            content=content,
            metadata=metadata,
            user_uid=user_uid,
        )
