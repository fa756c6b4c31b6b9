"""Directive block layout."""

from __future__ import annotations

import logging
import re

from .constants import DIRECTIVE_ATTRIBUTE_INDENT, DIRECTIVE_WRAP_THRESHOLD
from .exceptions import MalformedDirectiveError

logger = logging.getLogger(__name__)

DIRECTIVE_PATTERN = re.compile(r"^(<%@\s*\w+)\s+(.*?)\s*(%>)$")
ATTRIBUTE_PATTERN = re.compile(r'[\w-]+(?::[\w-]+)?="[^"]*"')


def split_directive(content: str) -> tuple[str, list[str], str]:
    """Split a whitespace-collapsed directive into opener, attributes, and closer.

    Args:
        content: Directive text with whitespace runs already collapsed.

    Returns:
        tuple[str, list[str], str]: Opener (``<%@ page``), the ``name="value"``
            pairs in source order, and the closer.

    Raises:
        MalformedDirectiveError: If the directive shape is not recognised or
            the attribute text holds anything besides well-formed pairs.

    Examples:
        split_directive('<%@ page a="1" b="2" %>')
        # ('<%@ page', ['a="1"', 'b="2"'], '%>')
    """
    match = DIRECTIVE_PATTERN.match(content)
    if not match:
        raise MalformedDirectiveError(content, "unrecognised directive shape")

    prefix, attributes, suffix = match.groups()
    pairs = ATTRIBUTE_PATTERN.findall(attributes)
    if ATTRIBUTE_PATTERN.sub("", attributes).strip():
        raise MalformedDirectiveError(content, "unexpected attribute syntax")

    return prefix, pairs, suffix


def format_directive(directive: str) -> str:
    """Lay out a directive on one line, or one attribute per line when long.

    Directives at or under the wrap threshold, or with at most one attribute,
    stay on one line. Longer ones put the opener on its own line followed by
    one indented attribute per line, with the closer after the last attribute.
    Malformed long directives are returned unchanged.

    Args:
        directive: Full directive text including ``<%@`` and ``%>``.

    Returns:
        str: The laid-out directive.

    Examples:
        format_directive('<%@  page   import="java.util.*" %>')
        # '<%@ page import="java.util.*" %>'
    """
    content = re.sub(r"\s+", " ", directive).strip()
    if len(content) <= DIRECTIVE_WRAP_THRESHOLD:
        return content

    try:
        prefix, pairs, suffix = split_directive(content)
    except MalformedDirectiveError as error:
        logger.debug("Keeping directive unchanged: %s", error)
        return directive

    if len(pairs) <= 1:
        return content

    lines = [prefix]
    lines.extend(f"{DIRECTIVE_ATTRIBUTE_INDENT}{pair}" for pair in pairs)
    lines[-1] += f" {suffix}"
    return "\n".join(lines)
