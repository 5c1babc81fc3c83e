"""Site rendering errors.

Every content or configuration failure aborts the render. Each error
carries a machine-readable kind alongside the remediation hint.
"""

from enum import Enum


class ErrorKind(Enum):
    """Kind of site rendering failure."""

    CONTENT_NOT_FOUND = "content-not-found"
    TYPE_MISSING = "type-missing"
    CONFIG_MISSING = "config-missing"


class SiteError(Exception):
    """Base class for fatal content and configuration errors."""

    def __init__(self, message: str, kind: ErrorKind) -> None:
        super().__init__(message)
        self.kind = kind


class ContentNotFoundError(SiteError):
    """No content record exists for a slug."""

    def __init__(self, slug: str, message: str | None = None) -> None:
        if message is None:
            message = (
                f"Content not found for slug: {slug}. "
                "Please ensure the corresponding MDX file exists in the content directory "
                "or sync content from the CMS."
            )
        super().__init__(message, ErrorKind.CONTENT_NOT_FOUND)
        self.slug = slug


class ContentTypeMissingError(SiteError):
    """Content record has no 'type' frontmatter field."""

    def __init__(self, slug: str, message: str | None = None) -> None:
        if message is None:
            message = (
                f"Content type is missing for slug: {slug}. "
                "Please ensure the MDX file has 'type' field in frontmatter."
            )
        super().__init__(message, ErrorKind.TYPE_MISSING)
        self.slug = slug


class ConfigMissingError(SiteError):
    """Named JSON configuration blob could not be loaded."""

    def __init__(self, name: str, user_uid: str | None = None) -> None:
        message = (
            f"{name.capitalize()} configuration not found. "
            f"Please ensure {name}.json exists in the content directory"
        )
        if user_uid:
            message += f" (or {name}-{user_uid}.json for preview {user_uid})"
        message += " or sync content from the CMS."
        super().__init__(message, ErrorKind.CONFIG_MISSING)
        self.name = name
        self.user_uid = user_uid
