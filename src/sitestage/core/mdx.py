"""MDX rendering.

Markdown is converted with mistune. JSX-style tags naming a registered
component (``<HeroSection name="x">...</HeroSection>``) are rendered by
that component and spliced into the HTML output. Children are rendered
recursively as MDX before being handed to the component.
"""

import ast
import html
import json
import logging
import re
import textwrap
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import mistune
from markupsafe import Markup

logger = logging.getLogger(__name__)

# Components receive their props and the rendered children HTML
Component = Callable[[dict[str, Any], Markup], str]

_START_RE = re.compile(r"<([A-Z][A-Za-z0-9]*)|\{/\*")
_FENCE_RE = re.compile(
    r"^[ \t]*(`{3,}|~{3,})[^\n]*\n.*?^[ \t]*\1[ \t]*$",
    re.MULTILINE | re.DOTALL,
)
# Inline code span; may wrap lines but not cross a blank line
_CODE_SPAN_RE = re.compile(r"(?<!`)(`+)(?!`)(?:(?!\n[ \t]*\n).)+?(?<!`)\1(?!`)", re.DOTALL)
_ATTR_NAME_RE = re.compile(r"[A-Za-z_][\w:-]*")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")
_TAG_RE = re.compile(r"<[^>]+>")

_JS_LITERALS: dict[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
}


class MDXSyntaxError(ValueError):
    """Malformed component markup in an MDX body."""


@dataclass
class _Tag:
    name: str
    props: dict[str, Any]
    self_closing: bool
    end: int


def text_content(children: str) -> str:
    """Extract plain text from rendered children.

    Useful for buttons and labels where the paragraph wrapper added by
    markdown rendering is unwanted.
    """
    return html.unescape(_TAG_RE.sub("", str(children))).strip()


class MDXRenderer:
    """Renders MDX bodies with a fixed component registry."""

    def __init__(self, components: Mapping[str, Component]) -> None:
        """Initialize renderer.

        Args:
            components: Mapping of component name to implementation
        """
        self._components = dict(components)
        self._markdown = mistune.create_markdown(
            escape=False,
            plugins=["strikethrough", "table", "url"],
        )

    @property
    def components(self) -> dict[str, Component]:
        """Registered components."""
        return self._components

    def render(self, source: str, scope: Mapping[str, Any] | None = None) -> str:
        """Render an MDX body to HTML.

        Args:
            source: MDX source text
            scope: Values for identifier expressions such as {userUid}

        Returns:
            Rendered HTML

        Raises:
            MDXSyntaxError: If a component tag is malformed or unclosed
        """
        scope = scope or {}
        text, fragments = self._extract_components(source, scope)
        output = str(self._markdown(text))

        for token, fragment in fragments.items():
            output = output.replace(f"<p>{token}</p>", fragment).replace(token, fragment)

        return output

    def _extract_components(
        self,
        source: str,
        scope: Mapping[str, Any],
    ) -> tuple[str, dict[str, str]]:
        """Replace component tags with placeholder tokens.

        Returns:
            Source with placeholders and the rendered fragment per token
        """
        code = _code_ranges(source)
        fragments: dict[str, str] = {}
        parts: list[str] = []
        pos = 0
        search_pos = 0

        while True:
            match = _START_RE.search(source, search_pos)
            if match is None:
                break

            start = match.start()
            code_end = _enclosing_code_end(code, start)
            if code_end is not None:
                search_pos = code_end
                continue

            if match.group(1) is None:
                end = source.find("*/}", start)
                if end == -1:
                    raise MDXSyntaxError("Unterminated JSX comment")
                parts.append(source[pos:start])
                pos = search_pos = end + 3
                continue

            name = match.group(1)
            component = self._components.get(name)
            if component is None:
                search_pos = match.end()
                continue

            tag = _parse_open_tag(source, start, scope)
            if tag.self_closing:
                children_source = ""
                end = tag.end
            else:
                inner_end, end = _find_closing_tag(source, tag, scope, code)
                children_source = source[tag.end : inner_end]

            children = Markup("")
            if children_source.strip():
                children = Markup(self.render(textwrap.dedent(children_source).strip("\n"), scope))

            logger.debug(f"Rendering MDX component <{name}> with props {sorted(tag.props)}")
            token = f"mdxcomponent{len(fragments)}placeholder"
            fragments[token] = str(component(tag.props, children))

            parts.append(source[pos:start])
            parts.append(f"\n\n{token}\n\n" if _starts_line(source, start) else token)
            pos = search_pos = end

        parts.append(source[pos:])
        return "".join(parts), fragments


def _code_ranges(source: str) -> list[tuple[int, int]]:
    """Return (start, end) offsets of fenced code blocks and inline code spans."""
    fences = [(m.start(), m.end()) for m in _FENCE_RE.finditer(source)]
    # Backticks inside fences never open a span
    masked = _FENCE_RE.sub(lambda m: " " * len(m.group(0)), source)
    spans = [(m.start(), m.end()) for m in _CODE_SPAN_RE.finditer(masked)]
    return fences + spans


def _enclosing_code_end(ranges: list[tuple[int, int]], index: int) -> int | None:
    for start, end in ranges:
        if start <= index < end:
            return end
    return None


def _starts_line(source: str, index: int) -> bool:
    line_start = source.rfind("\n", 0, index) + 1
    return source[line_start:index].strip() == ""


def _parse_open_tag(source: str, start: int, scope: Mapping[str, Any]) -> _Tag:
    """Parse a component opening tag starting at '<'."""
    match = _START_RE.match(source, start)
    if match is None or match.group(1) is None:
        raise MDXSyntaxError(f"Expected component tag at offset {start}")

    name = match.group(1)
    props: dict[str, Any] = {}
    pos = match.end()
    length = len(source)

    while pos < length:
        if source[pos].isspace():
            pos += 1
            continue
        if source.startswith("/>", pos):
            return _Tag(name=name, props=props, self_closing=True, end=pos + 2)
        if source[pos] == ">":
            return _Tag(name=name, props=props, self_closing=False, end=pos + 1)

        attr = _ATTR_NAME_RE.match(source, pos)
        if attr is None:
            raise MDXSyntaxError(f"Invalid attribute syntax in <{name}> at offset {pos}")
        key = attr.group(0)
        pos = _skip_whitespace(source, attr.end())

        if pos < length and source[pos] == "=":
            pos = _skip_whitespace(source, pos + 1)
            value, pos = _parse_attr_value(source, pos, name, scope)
        else:
            value = True
        props[key] = value

    raise MDXSyntaxError(f"Unterminated <{name}> tag")


def _skip_whitespace(source: str, pos: int) -> int:
    while pos < len(source) and source[pos].isspace():
        pos += 1
    return pos


def _parse_attr_value(
    source: str,
    pos: int,
    name: str,
    scope: Mapping[str, Any],
) -> tuple[Any, int]:
    if pos >= len(source):
        raise MDXSyntaxError(f"Missing attribute value in <{name}>")

    quote = source[pos]
    if quote in ('"', "'"):
        end = source.find(quote, pos + 1)
        if end == -1:
            raise MDXSyntaxError(f"Unterminated string attribute in <{name}>")
        return source[pos + 1 : end], end + 1

    if quote == "{":
        end = _match_brace(source, pos)
        return _evaluate_expression(source[pos + 1 : end], scope), end + 1

    raise MDXSyntaxError(f"Unsupported attribute value in <{name}> at offset {pos}")


def _match_brace(source: str, start: int) -> int:
    """Return the index of the brace closing the one at start."""
    depth = 0
    pos = start
    quote: str | None = None
    while pos < len(source):
        ch = source[pos]
        if quote is not None:
            if ch == "\\":
                pos += 2
                continue
            if ch == quote:
                quote = None
        elif ch in ('"', "'", "`"):
            quote = ch
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return pos
        pos += 1
    raise MDXSyntaxError(f"Unbalanced braces in expression at offset {start}")


def _evaluate_expression(expression: str, scope: Mapping[str, Any]) -> Any:
    """Evaluate a literal attribute expression.

    Supports JSON and Python literals, JS keyword literals, and bare
    identifiers resolved from scope. Anything else is kept as text.
    """
    expression = expression.strip()
    if expression in _JS_LITERALS:
        return _JS_LITERALS[expression]
    if _IDENTIFIER_RE.match(expression):
        return scope.get(expression)

    try:
        return json.loads(expression)
    except ValueError:
        pass

    try:
        return ast.literal_eval(expression)
    except (ValueError, SyntaxError):
        logger.debug(f"Keeping unsupported MDX expression as text: {expression!r}")
        return expression


def _find_closing_tag(
    source: str,
    tag: _Tag,
    scope: Mapping[str, Any],
    code: list[tuple[int, int]],
) -> tuple[int, int]:
    """Find the closing tag matching an opening tag.

    Returns:
        (start of closing tag, index after closing tag)
    """
    pattern = re.compile(rf"<{tag.name}(?![A-Za-z0-9])|</{tag.name}\s*>")
    depth = 1
    pos = tag.end
    while True:
        match = pattern.search(source, pos)
        if match is None:
            raise MDXSyntaxError(f"Missing closing tag </{tag.name}>")

        code_end = _enclosing_code_end(code, match.start())
        if code_end is not None:
            pos = code_end
            continue

        if match.group(0).startswith("</"):
            depth -= 1
            if depth == 0:
                return match.start(), match.end()
            pos = match.end()
        else:
            nested = _parse_open_tag(source, match.start(), scope)
            if not nested.self_closing:
                depth += 1
            pos = nested.end
