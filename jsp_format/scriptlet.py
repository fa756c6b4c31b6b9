"""Scriptlet and declaration body layout.

A heuristic, line-based Java layout: statements and braces are put on their
own lines and re-indented by brace depth. It is not a Java parser. Braces
inside character literals or comments, lambda bodies, nested block comments
and ``)`` inside a ``for`` header are not understood and may be misplaced.
"""

from __future__ import annotations

import re

from .config import FormatOptions
from .constants import CONTINUATION_KEYWORDS, SCRIPTLET_INLINE_LIMIT
from .placeholders import choose_sentinel, make_token, restore_tokens

STRING_LITERAL_PATTERN = re.compile(r'"(?:[^"\\]|\\.)*"')
SEMICOLON_WITHOUT_BREAK = re.compile(r";(?!\s*\n)")
OPEN_BRACE_WITHOUT_BREAK = re.compile(r"\{(?!\s*\n)")
WHITESPACE_BEFORE_CLOSE_BRACE = re.compile(r"(\s*)\}")
CLOSE_BRACE_WITHOUT_BREAK = re.compile(
    r"\}(?!\s*(?:" + "|".join(CONTINUATION_KEYWORDS) + r"|\n))"
)
FOR_HEADER_PATTERN = re.compile(r"\bfor\s*\([^)]*\)")
HEADER_BREAK = re.compile(r";[ \t]*\n[ \t]*")


def _protect_strings(code: str) -> tuple[str, dict[str, str]]:
    """Swap double-quoted string literals for local placeholders.

    Returns:
        tuple[str, dict[str, str]]: Code with placeholders, and the mapping
            used to restore them.
    """
    sentinel = choose_sentinel(code)
    literals: dict[str, str] = {}

    def _substitute(match: re.Match[str]) -> str:
        token = make_token(sentinel, "STR", len(literals))
        literals[token] = match.group(0)
        return token

    return STRING_LITERAL_PATTERN.sub(_substitute, code), literals


def _break_before_closing_braces(code: str) -> str:
    def _substitute(match: re.Match[str]) -> str:
        whitespace = match.group(1)
        if "\n" in whitespace:
            return match.group(0)
        return f"{whitespace}\n}}"

    return WHITESPACE_BEFORE_CLOSE_BRACE.sub(_substitute, code)


def _join_for_headers(code: str) -> str:
    return FOR_HEADER_PATTERN.sub(lambda match: HEADER_BREAK.sub("; ", match.group(0)), code)


def format_java_code(code: str, indent: str) -> str:
    """Re-break and re-indent Java statements by brace depth.

    Indentation starts one level deep because the code sits inside a JSP
    block. Lines starting with ``}`` are dedented before they are emitted
    (never below one level); lines ending with ``{`` indent what follows.

    Args:
        code: Inner code of a scriptlet or declaration.
        indent: Text for one indentation level.

    Returns:
        str: The re-laid-out code without a trailing newline.

    Examples:
        format_java_code("a(); b();", "  ")  # "  a();\\n  b();"
    """
    code, literals = _protect_strings(code)

    code = code.replace("\r\n", "\n").replace("\r", "\n")
    code = SEMICOLON_WITHOUT_BREAK.sub(";\n", code)
    code = OPEN_BRACE_WITHOUT_BREAK.sub("{\n", code)
    code = _break_before_closing_braces(code)
    code = CLOSE_BRACE_WITHOUT_BREAK.sub("}\n", code)
    code = _join_for_headers(code)

    result: list[str] = []
    level = 1

    for raw_line in code.split("\n"):
        trimmed = raw_line.strip()
        if trimmed == "":
            result.append("")
            continue

        if trimmed.startswith("}"):
            level = max(1, level - 1)

        result.append(indent * level + trimmed)

        if trimmed.endswith("{"):
            level += 1

    while result and result[-1] == "":
        result.pop()

    return restore_tokens("\n".join(result), literals)


def format_scriptlet(block: str, options: FormatOptions | None = None) -> str:
    """Lay out a scriptlet (``<% %>``) or declaration (``<%! %>``) block.

    Short, brace-free code with at most one statement stays on one line;
    everything else is split over several lines between the delimiters.

    Args:
        block: Full block text including delimiters.
        options: Formatting options; defaults to `FormatOptions()`.

    Returns:
        str: The laid-out block.

    Examples:
        format_scriptlet("<%int x = 1;%>")  # "<% int x = 1; %>"
    """
    options = options or FormatOptions()
    prefix = "<%!" if block.startswith("<%!") else "<%"
    content = block[len(prefix) : -2].strip()

    if not content:
        return f"{prefix} %>"

    if (
        "\n" not in content
        and len(content) < SCRIPTLET_INLINE_LIMIT
        and "{" not in content
        and content.count(";") <= 1
    ):
        return f"{prefix} {content} %>"

    formatted = format_java_code(content, options.indent_unit)
    return f"{prefix}\n{formatted}\n%>"
