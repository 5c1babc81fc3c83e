"""Jinja2 environment for page, chrome and component templates."""

from functools import cache

from jinja2 import Environment, PackageLoader, select_autoescape


@cache
def get_environment() -> Environment:
    """Return the shared template environment.

    Templates are bundled in the sitestage package under templates/.
    """
    return Environment(
        loader=PackageLoader("sitestage", "templates"),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def render_template(name: str, **context: object) -> str:
    """Render a bundled template by name."""
    return get_environment().get_template(name).render(**context)
