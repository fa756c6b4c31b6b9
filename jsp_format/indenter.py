"""Structural re-indentation of the placeholder skeleton."""

from __future__ import annotations

import re

from .config import FormatOptions
from .constants import BLOCK_SCOPED_NAMES, SINGLE_TAG_NAMES, VOID_ELEMENTS
from .models import TagClass

# Whole line is exactly one tag; `[^>]*` keeps a second tag off the line.
CLOSING_TAG_PATTERN = re.compile(r"^</([a-zA-Z:][^>]*)>$")
SELF_CLOSING_TAG_PATTERN = re.compile(r"^<[a-zA-Z:][^>]*/>$")
OPENING_TAG_PATTERN = re.compile(r"^<(?P<name>[a-zA-Z:][\w:.-]*)(?P<rest>[^>]*)>$")

# Custom block tags only need to start the line.
CUSTOM_CLOSING_PATTERN = re.compile(r"^</(?P<name>\w+:\w+)\s*>")
CUSTOM_OPENING_PATTERN = re.compile(r"^<(?P<name>\w+:\w+)(?=[\s/>])(?P<rest>[^>]*)>")


def is_void_element(name: str) -> bool:
    """Return True when `name` never carries a body.

    Examples:
        is_void_element("BR")  # True
        is_void_element("c:out")  # True
        is_void_element("c:if")  # False
    """
    return name.lower() in VOID_ELEMENTS or name in SINGLE_TAG_NAMES


def is_block_scoped(name: str) -> bool:
    return name in BLOCK_SCOPED_NAMES


def classify_line(trimmed: str) -> TagClass:
    """Classify a trimmed skeleton line for indentation purposes.

    Recognised custom block tags (``c:if``, ``c:forEach``, ...) open or close
    a scope whenever the line starts with them, unless the line also closes
    the tag it opens. Any other tag only counts when it is alone on the line;
    void HTML elements and single-tag custom elements never open a scope.

    Args:
        trimmed: Line content without surrounding whitespace.

    Returns:
        TagClass: How the line affects nesting depth.

    Examples:
        classify_line("<div class=\\"row\\">")  # TagClass.OPENING
        classify_line("<br>")  # TagClass.PLAIN
        classify_line("</c:forEach>")  # TagClass.CLOSING
    """
    if CLOSING_TAG_PATTERN.match(trimmed):
        return TagClass.CLOSING

    custom_close = CUSTOM_CLOSING_PATTERN.match(trimmed)
    if custom_close and is_block_scoped(custom_close.group("name")):
        return TagClass.CLOSING

    if SELF_CLOSING_TAG_PATTERN.match(trimmed):
        return TagClass.SELF_CLOSING

    custom_open = CUSTOM_OPENING_PATTERN.match(trimmed)
    if custom_open and is_block_scoped(custom_open.group("name")):
        name = custom_open.group("name")
        if custom_open.group("rest").endswith("/") or f"</{name}" in trimmed:
            return TagClass.PLAIN
        return TagClass.OPENING

    tag = OPENING_TAG_PATTERN.match(trimmed)
    if tag and not tag.group("rest").endswith("/") and not is_void_element(tag.group("name")):
        return TagClass.OPENING

    return TagClass.PLAIN


def indent_structure(text: str, options: FormatOptions | None = None) -> str:
    """Re-indent `text` line by line from its tag structure.

    Closing lines lower the depth before they are written, opening lines
    raise it after. Depth never drops below zero, so stray closing tags are
    tolerated. Blank lines are emitted empty.

    Args:
        text: Skeleton text with protected regions already replaced.
        options: Formatting options; defaults to `FormatOptions()`.

    Returns:
        str: Re-indented text, lines joined with ``\\n``.

    Examples:
        indent_structure("<ul>\\n<li>\\nItem\\n</li>\\n</ul>")
    """
    options = options or FormatOptions()
    indent = options.indent_unit
    result: list[str] = []
    level = 0

    for raw_line in text.split("\n"):
        trimmed = raw_line.strip()
        if trimmed == "":
            result.append("")
            continue

        tag_class = classify_line(trimmed)

        if tag_class is TagClass.CLOSING:
            level = max(0, level - 1)

        result.append(indent * level + trimmed)

        if tag_class is TagClass.OPENING:
            level += 1

    return "\n".join(result)
