"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
from sitestage.config import (
    CMSConfig,
    Config,
    ContentConfig,
    LiveReloadConfig,
    ServerConfig,
    SiteConfig,
)
from sitestage.core.content import FileContentStore

PREVIEW_UID = "3fa85f64-5717-4562-b3fc-2c963f66afa6"

HEADER = {
    "logo": {"text": "Jane Doe", "href": "/"},
    "navigation": [
        {"label": "Projects", "href": "/#projects"},
        {"label": "Contact", "href": "/#contact"},
    ],
}

FOOTER = {
    "text": "Built with",
    "link": {"text": "LeadCMS", "href": "https://leadcms.ai"},
    "suffix": "and care.",
}

METADATA = {
    "siteMetadata": {
        "baseUrl": "https://example.com",
        "openGraph": {"siteName": "Jane Doe", "type": "website"},
        "twitter": {"card": "summary_large_image"},
    }
}


def write_mdx(path: Path, frontmatter: dict[str, object], body: str = "") -> Path:
    """Write an MDX file with YAML frontmatter."""
    lines = ["---"]
    for key, value in frontmatter.items():
        lines.append(f"{key}: {json.dumps(value)}")
    lines.append("---")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n\n" + body, encoding="utf-8")
    return path


def write_json(path: Path, data: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Create a content directory with chrome, metadata and a few pages."""
    content = tmp_path / "content"
    content.mkdir()

    write_json(content / "header.json", HEADER)
    write_json(content / "footer.json", FOOTER)
    write_json(content / "metadata.json", METADATA)

    write_mdx(
        content / "home.mdx",
        {
            "title": "Jane Doe - Portfolio",
            "description": "Selected work",
            "type": "home",
            "publishedAt": "2024-01-01T00:00:00Z",
        },
        "# Welcome\n\nHello from the **home** page.\n",
    )
    write_mdx(
        content / "not-found.mdx",
        {
            "title": "Page Not Found",
            "type": "not-found",
            "publishedAt": "2024-01-01T00:00:00Z",
        },
        '<NotFoundSection title="Lost?" description="Nothing here.">\n'
        '  <Button href="/">Go Home</Button>\n'
        "</NotFoundSection>\n",
    )
    write_mdx(
        content / "projects" / "leadcms.mdx",
        {
            "title": "LeadCMS - Headless CMS",
            "description": "An open source CMS",
            "type": "project",
            "publishedAt": "2024-03-01T00:00:00Z",
            "category": "CMS Platform",
            "badge": "Open Source",
            "badgeVariant": "chart-2",
            "tags": ["Python", "PostgreSQL"],
            "externalLink": "https://www.leadcms.ai",
        },
        "## Overview\n\nA headless CMS.\n",
    )
    write_mdx(
        content / "projects" / "draft.mdx",
        {"title": "Draft Project", "type": "project"},
        "Unfinished.\n",
    )
    return content


@pytest.fixture
def store(content_dir: Path) -> FileContentStore:
    return FileContentStore(content_dir, "en")


@pytest.fixture
def test_config(tmp_path: Path, content_dir: Path) -> Config:
    """Create a test configuration with tmp_path directories.

    Live reload is disabled and no CMS URL is configured.
    """
    return Config(
        server=ServerConfig(),
        content=ContentConfig(content_dir=content_dir, default_language="en"),
        site=SiteConfig(output_dir=tmp_path / "out", public_dir=tmp_path / "public"),
        cms=CMSConfig(),
        live_reload=LiveReloadConfig(enabled=False),
    )
