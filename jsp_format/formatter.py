"""JSP document formatting entry points."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .config import FormatOptions, validate_options
from .indenter import indent_structure
from .models import TextEdit
from .reassembler import finalize, restore_regions
from .regions import extract_regions

logger = logging.getLogger(__name__)


def detect_line_ending(text: str) -> str:
    """Return ``"\\r\\n"`` when CRLF line endings dominate `text`, else ``"\\n"``."""
    crlf_count = text.count("\r\n")
    lf_count = text.count("\n") - crlf_count
    return "\r\n" if crlf_count > lf_count else "\n"


def format_jsp(text: str, options: FormatOptions | None = None) -> str:
    """Format a JSP document.

    Protected regions are swapped for placeholders, the remaining tag
    skeleton is re-indented, and the regions are put back. Never raises for
    any input text: spans the formatter does not understand are left as they
    are.

    Args:
        text: Document text.
        options: Formatting options; defaults to `FormatOptions()`.

    Returns:
        str: Formatted text ending in exactly one newline, using the input's
            dominant line ending. An empty document stays empty.

    Raises:
        ConfigError: If `options` fails validation.

    Examples:
        format_jsp("<c:if test=\\"${ok}\\">\\n<br>\\nHi\\n</c:if>")
        # '<c:if test="${ok}">\\n    <br>\\n    Hi\\n</c:if>\\n'
    """
    options = options or FormatOptions()
    validate_options(options)
    if not text:
        return text

    line_ending = detect_line_ending(text)
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")

    extraction = extract_regions(normalized, options)
    logger.debug("Protected %d region(s)", len(extraction.table))

    indented = indent_structure(extraction.text, options)
    restored = restore_regions(indented, extraction.table)
    formatted = finalize(restored, options)

    if line_ending != "\n":
        formatted = formatted.replace("\n", line_ending)
    return formatted


def format_range(
    text: str,
    start: int,
    end: int,
    options: FormatOptions | None = None,
    is_cancelled: Callable[[], bool] | None = None,
) -> list[TextEdit]:
    """Format ``text[start:end]`` and describe the change as edits.

    The selection is formatted as a standalone document. The computation is
    never interrupted; when `is_cancelled` reports True once it has finished,
    the result is discarded.

    Args:
        text: Full document text.
        start: Zero-based start offset of the range, inclusive.
        end: Zero-based end offset of the range, exclusive.
        options: Formatting options; defaults to `FormatOptions()`.
        is_cancelled: Optional callback polled after formatting.

    Returns:
        list[TextEdit]: One replacement edit, or an empty list when the range
            is already formatted or the request was cancelled.

    Raises:
        ValueError: If the offsets do not describe a range inside `text`.
        ConfigError: If `options` fails validation.

    Examples:
        edits = format_range(document, 0, len(document))
    """
    if not 0 <= start <= end <= len(text):
        raise ValueError(f"Invalid range [{start}, {end}) for text of length {len(text)}")

    original = text[start:end]
    formatted = format_jsp(original, options)

    if is_cancelled is not None and is_cancelled():
        logger.debug("Formatting request cancelled; discarding result")
        return []

    if formatted == original:
        logger.debug("No edit needed")
        return []

    return [TextEdit(start, end, formatted)]


def format_document(
    text: str,
    options: FormatOptions | None = None,
    is_cancelled: Callable[[], bool] | None = None,
) -> list[TextEdit]:
    """Format a whole document; see `format_range`."""
    return format_range(text, 0, len(text), options, is_cancelled)
