"""Static site export.

Output structure:
    out/
    ├── index.html                 # home
    ├── projects/
    │   └── leadcms/
    │       └── index.html
    ├── 404.html                   # not-found content
    ├── sitemap.xml
    └── ...                        # copied public files
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from sitestage.config import Config
from sitestage.core.contact import ContactForm
from sitestage.core.content import FileContentStore
from sitestage.core.metadata import load_site_metadata
from sitestage.core.resolver import PageResolver
from sitestage.core.sitemap import generate_sitemap, render_sitemap_xml
from sitestage.core.types import HOME_SLUG

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Summary of a static export."""

    output_dir: Path
    pages: list[str] = field(default_factory=list)
    sitemap_entries: int = 0


class StaticSiteBuilder:
    """Renders every published page to static HTML files."""

    def __init__(self, config: Config) -> None:
        self._config = config
        self._accessor = FileContentStore(
            config.content.content_dir,
            config.content.default_language,
        )
        self._resolver = PageResolver(
            self._accessor,
            contact_action=ContactForm(config.cms.url).endpoint,
        )

    @property
    def output_dir(self) -> Path:
        return self._config.site.output_dir

    def build(self) -> BuildResult:
        """Export the site.

        Any content or configuration error aborts the build.

        Returns:
            BuildResult listing written pages
        """
        output_dir = self.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)
        result = BuildResult(output_dir=output_dir)

        self._copy_public_dir(output_dir)

        for slug in self._resolver.static_slugs():
            page = self._resolver.resolve(slug)
            target = output_path_for_slug(output_dir, slug)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(page.html, encoding="utf-8")
            result.pages.append(slug)
            logger.info(f"Wrote {target}")

        not_found = self._resolver.resolve_not_found()
        (output_dir / "404.html").write_text(not_found.html, encoding="utf-8")

        locale = self._resolver.locale
        site_metadata = load_site_metadata(self._accessor, locale)
        entries = generate_sitemap(self._accessor, locale, str(site_metadata.get("baseUrl", "")))
        (output_dir / "sitemap.xml").write_text(render_sitemap_xml(entries), encoding="utf-8")
        result.sitemap_entries = len(entries)

        logger.info(f"Exported {len(result.pages)} pages to {output_dir}")
        return result

    def _copy_public_dir(self, output_dir: Path) -> None:
        public_dir = self._config.site.public_dir
        if not public_dir.is_dir():
            return
        shutil.copytree(public_dir, output_dir, dirs_exist_ok=True)


def output_path_for_slug(output_dir: Path, slug: str) -> Path:
    """Map a slug to its exported index.html path."""
    if slug == HOME_SLUG:
        return output_dir / "index.html"
    return output_dir / slug / "index.html"
