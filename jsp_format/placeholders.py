"""Placeholder tokens that stand in for protected text."""

from __future__ import annotations

import itertools


def choose_sentinel(text: str) -> str:
    """Pick a delimiter character that does not occur in `text`.

    Tries NUL first, then private-use and higher code points, so tokens built
    from the result can never collide with document content.

    Examples:
        choose_sentinel("plain")  # "\\x00"
    """
    for code_point in itertools.chain([0], range(0xE000, 0x110000)):
        candidate = chr(code_point)
        if candidate not in text:
            return candidate
    raise ValueError("No free sentinel character available")


def make_token(sentinel: str, tag: str, index: int) -> str:
    return f"{sentinel}{tag}_{index}{sentinel}"


def restore_tokens(text: str, table: dict[str, str]) -> str:
    """Put stored content back in place of its token.

    Tokens are restored newest first, so a token captured inside a later
    region's stored text is restored after that region is. Each token is
    replaced at most once; tokens missing from `text` are ignored.

    Args:
        text: Text containing placeholder tokens.
        table: Mapping of token to replacement text, in insertion order.

    Returns:
        str: Text with every present token replaced.
    """
    for token in reversed(list(table)):
        text = text.replace(token, table[token], 1)
    return text
