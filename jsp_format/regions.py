"""Protected-region extraction.

Every region the structural indenter must not touch (JSP comments, scripting
blocks, directives, EL fragments, raw ``<script>``/``<style>`` bodies) is
swapped for a placeholder token. The transformed region text is kept in a
content table keyed by that token until the reassembler puts it back.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import NamedTuple

from .config import FormatOptions
from .constants import COMMENT_INLINE_LIMIT
from .directive import format_directive
from .models import ExtractionResult, RegionKind
from .placeholders import choose_sentinel, make_token
from .scriptlet import format_scriptlet

logger = logging.getLogger(__name__)


class RegionRule(NamedTuple):
    """Extraction pattern and content transform for one region kind."""

    pattern: re.Pattern[str]
    transform: Callable[[str, FormatOptions], str]
    tag: str


def format_comment(comment: str, options: FormatOptions | None = None) -> str:
    """Normalise a JSP comment's padding when it fits on one short line.

    Args:
        comment: Full comment text including ``<%--`` and ``--%>``.
        options: Unused; accepted for a uniform transform signature.

    Returns:
        str: ``<%-- content --%>`` for single-line content under the inline
            limit, otherwise the comment unchanged.

    Examples:
        format_comment("<%--note--%>")  # "<%-- note --%>"
    """
    content = comment[4:-4].strip()
    if "\n" not in content and len(content) < COMMENT_INLINE_LIMIT:
        return f"<%-- {content} --%>"
    return comment


def collapse_whitespace(text: str, options: FormatOptions | None = None) -> str:
    """Collapse every whitespace run to a single space and trim."""
    return re.sub(r"\s+", " ", text).strip()


def keep_verbatim(text: str, options: FormatOptions | None = None) -> str:
    """Return `text` unchanged; used for EL fragments and raw script or style bodies."""
    return text


REGION_RULES: dict[RegionKind, RegionRule] = {
    RegionKind.COMMENT: RegionRule(
        re.compile(r"<%--[\s\S]*?--%>"), format_comment, "JSP_COMMENT"
    ),
    RegionKind.DECLARATION: RegionRule(
        re.compile(r"<%![\s\S]*?%>"), format_scriptlet, "JSP_DECL"
    ),
    RegionKind.EXPRESSION: RegionRule(
        re.compile(r"<%=[\s\S]*?%>"), collapse_whitespace, "JSP_EXPR"
    ),
    RegionKind.SCRIPTLET: RegionRule(
        re.compile(r"<%(?![=!@-])[\s\S]*?%>"), format_scriptlet, "JSP_SCRIPT"
    ),
    RegionKind.DIRECTIVE: RegionRule(
        re.compile(r"<%@[\s\S]*?%>"), lambda text, options: format_directive(text), "JSP_DIR"
    ),
    RegionKind.EL_IMMEDIATE: RegionRule(re.compile(r"\$\{[^}]*\}"), keep_verbatim, "EL"),
    RegionKind.EL_DEFERRED: RegionRule(re.compile(r"#\{[^}]*\}"), keep_verbatim, "DEL"),
    RegionKind.SCRIPT_BODY: RegionRule(
        re.compile(r"<script[\s\S]*?</script>", re.IGNORECASE), keep_verbatim, "SCRIPT"
    ),
    RegionKind.STYLE_BODY: RegionRule(
        re.compile(r"<style[\s\S]*?</style>", re.IGNORECASE), keep_verbatim, "STYLE"
    ),
}

# Later kinds must never match inside earlier ones.
EXTRACTION_ORDER = tuple(RegionKind)


def extract_kind(
    result: ExtractionResult, kind: RegionKind, options: FormatOptions
) -> ExtractionResult:
    """Replace every region of one kind in `result.text` with a placeholder.

    Args:
        result: Extraction state to update in place.
        kind: Region kind to extract.
        options: Formatting options passed to the kind's transform.

    Returns:
        ExtractionResult: The same `result`, for chaining.
    """
    rule = REGION_RULES[kind]
    found = 0

    def _substitute(match: re.Match[str]) -> str:
        nonlocal found
        token = make_token(result.sentinel, rule.tag, len(result.table))
        result.table[token] = rule.transform(match.group(0), options)
        found += 1
        return token

    result.text = rule.pattern.sub(_substitute, result.text)
    if found:
        logger.debug("Extracted %d %s region(s)", found, kind.name)
    return result


def extract_regions(text: str, options: FormatOptions | None = None) -> ExtractionResult:
    """Swap every protected region of `text` for a placeholder token.

    Unterminated openers never match a pattern and stay as literal text.

    Args:
        text: Document text.
        options: Formatting options; defaults to `FormatOptions()`.

    Returns:
        ExtractionResult: Skeleton text and the content table.

    Examples:
        result = extract_regions('<p>${user.name}</p>')
        len(result.table)  # 1
    """
    options = options or FormatOptions()
    result = ExtractionResult(text=text, sentinel=choose_sentinel(text))
    for kind in EXTRACTION_ORDER:
        extract_kind(result, kind, options)
    return result
