"""Shared page chrome: header navigation and footer.

Both are driven by locale-scoped configuration blobs, optionally
overridden per preview identifier.
"""

import logging
from typing import Any

from sitestage.core.content import ContentAccessor
from sitestage.core.errors import ConfigMissingError
from sitestage.core.templating import render_template

logger = logging.getLogger(__name__)


def load_chrome_config(
    accessor: ContentAccessor,
    name: str,
    locale: str,
    user_uid: str | None = None,
) -> dict[str, Any]:
    """Load a chrome configuration blob.

    Raises:
        ConfigMissingError: If the blob cannot be loaded
    """
    try:
        return accessor.load_config_strict(name, locale, user_uid)
    except Exception as e:
        logger.error(f"Failed to load {name} configuration for {locale}: {e}")
        raise ConfigMissingError(name, user_uid) from e


def render_header(
    accessor: ContentAccessor,
    locale: str,
    user_uid: str | None = None,
) -> str:
    config = load_chrome_config(accessor, "header", locale, user_uid)
    return render_template(
        "chrome/header.html",
        logo=config.get("logo") or {},
        navigation=config.get("navigation") or [],
    )


def render_footer(
    accessor: ContentAccessor,
    locale: str,
    user_uid: str | None = None,
) -> str:
    config = load_chrome_config(accessor, "footer", locale, user_uid)
    return render_template(
        "chrome/footer.html",
        text=config.get("text", ""),
        link=config.get("link"),
        suffix=config.get("suffix", ""),
    )
