"""Configuration management for sitestage.

Supports TOML configuration format with auto-discovery and environment
overrides for the CMS locale and URL.
"""

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "sitestage.toml"

DEFAULT_LANGUAGE = "en"

DEFAULT_WATCH_PATTERNS = ["**/*.mdx", "**/*.md", "**/*.json"]

LANGUAGE_ENV_VARS = ("LEADCMS_DEFAULT_LANGUAGE", "NEXT_PUBLIC_LEADCMS_DEFAULT_LANGUAGE")
CMS_URL_ENV_VARS = ("LEADCMS_URL", "NEXT_PUBLIC_LEADCMS_URL")


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class ContentConfig:
    """Content directory configuration."""

    content_dir: Path = field(default_factory=lambda: Path(".leadcms/content"))
    default_language: str = DEFAULT_LANGUAGE


@dataclass
class SiteConfig:
    """Static export configuration."""

    output_dir: Path = field(default_factory=lambda: Path("out"))
    public_dir: Path = field(default_factory=lambda: Path("public"))


@dataclass
class CMSConfig:
    """CMS API configuration (contact form submissions)."""

    url: str | None = None


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True
    watch_patterns: list[str] | None = None


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    content: ContentConfig
    site: SiteConfig
    cms: CMSConfig
    live_reload: LiveReloadConfig
    config_path: Path | None = None

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "Config":
        """Load configuration from file and environment.

        If config_path is provided, loads from that file.
        Otherwise, searches for sitestage.toml in current directory and parents.
        Environment variables override the default language and CMS URL.

        Args:
            config_path: Optional explicit path to config file
            environ: Environment mapping (default: os.environ)

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            config = cls._load_from_file(config_path)
        else:
            discovered_path = cls._discover_config()
            config = cls._default() if discovered_path is None else cls._load_from_file(discovered_path)

        return config._apply_environment(os.environ if environ is None else environ)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        """Create config with all defaults."""
        return cls(
            server=ServerConfig(),
            content=ContentConfig(),
            site=SiteConfig(),
            cms=CMSConfig(),
            live_reload=LiveReloadConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            content=cls._parse_content(data.get("content"), config_dir),
            site=cls._parse_site(data.get("site"), config_dir),
            cms=cls._parse_cms(data.get("cms")),
            live_reload=cls._parse_live_reload(data.get("live_reload")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_content(cls, data: object, config_dir: Path) -> ContentConfig:
        """Parse content configuration section.

        Args:
            data: Raw content section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            ContentConfig instance
        """
        if data is None:
            return ContentConfig(content_dir=config_dir / ".leadcms" / "content")

        if not isinstance(data, dict):
            raise ValueError("content section must be a dictionary")

        content_dir = data.get("content_dir", ".leadcms/content")
        if not isinstance(content_dir, str):
            raise ValueError("content.content_dir must be a string")

        default_language = data.get("default_language", DEFAULT_LANGUAGE)
        if not isinstance(default_language, str) or not default_language:
            raise ValueError("content.default_language must be a non-empty string")

        return ContentConfig(
            content_dir=config_dir / content_dir,
            default_language=default_language,
        )

    @classmethod
    def _parse_site(cls, data: object, config_dir: Path) -> SiteConfig:
        if data is None:
            return SiteConfig(
                output_dir=config_dir / "out",
                public_dir=config_dir / "public",
            )

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        output_dir = data.get("output_dir", "out")
        if not isinstance(output_dir, str):
            raise ValueError("site.output_dir must be a string")

        public_dir = data.get("public_dir", "public")
        if not isinstance(public_dir, str):
            raise ValueError("site.public_dir must be a string")

        return SiteConfig(
            output_dir=config_dir / output_dir,
            public_dir=config_dir / public_dir,
        )

    @classmethod
    def _parse_cms(cls, data: object) -> CMSConfig:
        if data is None:
            return CMSConfig()

        if not isinstance(data, dict):
            raise ValueError("cms section must be a dictionary")

        url = data.get("url")
        if url is not None and not isinstance(url, str):
            raise ValueError("cms.url must be a string")

        return CMSConfig(url=url)

    @classmethod
    def _parse_live_reload(cls, data: object) -> LiveReloadConfig:
        """Parse live_reload configuration section.

        Args:
            data: Raw live_reload section data

        Returns:
            LiveReloadConfig instance
        """
        if data is None:
            return LiveReloadConfig()

        if not isinstance(data, dict):
            raise ValueError("live_reload section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("live_reload.enabled must be a boolean")

        watch_patterns_raw = data.get("watch_patterns")
        watch_patterns: list[str] | None = None
        if watch_patterns_raw is not None:
            if not isinstance(watch_patterns_raw, list):
                raise ValueError("live_reload.watch_patterns must be a list")
            watch_patterns = []
            for item in watch_patterns_raw:
                if not isinstance(item, str):
                    raise ValueError("live_reload.watch_patterns items must be strings")
                watch_patterns.append(item)

        return LiveReloadConfig(enabled=enabled, watch_patterns=watch_patterns)

    def _apply_environment(self, environ: Mapping[str, str]) -> "Config":
        """Apply environment overrides for locale and CMS URL."""
        language = _first_env(environ, LANGUAGE_ENV_VARS)
        cms_url = _first_env(environ, CMS_URL_ENV_VARS)

        content = self.content
        if language is not None:
            content = replace(self.content, default_language=language)

        cms = self.cms
        if cms_url is not None:
            cms = replace(self.cms, url=cms_url)

        return replace(self, content=content, cms=cms)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        content_dir: Path | None = None,
        output_dir: Path | None = None,
        live_reload_enabled: bool | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            content_dir: Override content.content_dir
            output_dir: Override site.output_dir
            live_reload_enabled: Override live_reload.enabled

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        content = self.content
        if content_dir is not None:
            content = replace(self.content, content_dir=content_dir)

        site = self.site
        if output_dir is not None:
            site = replace(self.site, output_dir=output_dir)

        live_reload = self.live_reload
        if live_reload_enabled is not None:
            live_reload = replace(self.live_reload, enabled=live_reload_enabled)

        return replace(
            self,
            server=server,
            content=content,
            site=site,
            live_reload=live_reload,
        )


def _first_env(environ: Mapping[str, str], names: tuple[str, ...]) -> str | None:
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return None
