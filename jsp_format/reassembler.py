"""Restore protected regions and normalise final whitespace."""

from __future__ import annotations

import re

from .config import FormatOptions
from .placeholders import restore_tokens


def restore_regions(text: str, table: dict[str, str]) -> str:
    """Replace every placeholder token in `text` with its stored content.

    Args:
        text: Indented skeleton text.
        table: Content table produced by the region extractor.

    Returns:
        str: Text with all protected regions back in place.
    """
    return restore_tokens(text, table)


def collapse_blank_lines(text: str, maximum: int) -> str:
    """Cap runs of blank lines at `maximum`.

    Only truly empty lines count; the indenter emits blank lines without
    indentation.

    Examples:
        collapse_blank_lines("a\\n\\n\\n\\nb", 1)  # "a\\n\\nb"
    """
    pattern = re.compile(r"\n{%d,}" % (maximum + 2))
    return pattern.sub("\n" * (maximum + 1), text)


def finalize(text: str, options: FormatOptions | None = None) -> str:
    """Apply the blank-line cap and guarantee a single trailing newline.

    Args:
        text: Reassembled document text.
        options: Formatting options; defaults to `FormatOptions()`.

    Returns:
        str: Final text ending in exactly one ``\\n``.
    """
    options = options or FormatOptions()

    if options.preserve_newlines:
        text = collapse_blank_lines(text, options.max_preserve_newlines)

    return text.rstrip() + "\n"
