"""Constants and tag vocabulary tables used across the jsp-format package."""

from __future__ import annotations

# File handling
JSP_EXTENSIONS = (".jsp", ".jspf", ".jspx", ".tag", ".tagx")
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024

# Directive layout
DIRECTIVE_WRAP_THRESHOLD = 120
DIRECTIVE_ATTRIBUTE_INDENT = "    "

# Scriptlet and comment short-circuit limits (exclusive)
SCRIPTLET_INLINE_LIMIT = 60
COMMENT_INLINE_LIMIT = 80

# Keywords that may follow a closing brace on the same line
CONTINUATION_KEYWORDS = ("else", "catch", "finally")

# Tag vocabulary, version 1.
# HTML elements that never carry a body; matched case-insensitively.
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Custom tags that never carry a body, keyed by namespace prefix.
SINGLE_TAG_ELEMENTS = {
    "jsp": frozenset({"param", "setProperty", "getProperty"}),
    "c": frozenset({"out", "set", "remove", "param", "redirect"}),
    "fmt": frozenset(
        {
            "message",
            "formatNumber",
            "formatDate",
            "setLocale",
            "setBundle",
            "requestEncoding",
            "setTimeZone",
        }
    ),
    "sql": frozenset({"param", "dateParam", "setDataSource"}),
}

# Custom tags whose open/close forms nest and drive indentation depth.
BLOCK_SCOPED_TAGS = {
    "c": frozenset(
        {"if", "choose", "when", "otherwise", "forEach", "forTokens", "catch", "import", "url"}
    ),
    "fmt": frozenset({"bundle", "timeZone"}),
    "sql": frozenset({"query", "update", "transaction"}),
    "x": frozenset({"parse", "if", "choose", "when", "otherwise", "forEach", "transform"}),
    "jsp": frozenset({"include", "forward", "useBean", "element", "body", "attribute"}),
}


def _qualify(table: dict[str, frozenset[str]]) -> frozenset[str]:
    return frozenset(f"{prefix}:{name}" for prefix, names in table.items() for name in names)


SINGLE_TAG_NAMES = _qualify(SINGLE_TAG_ELEMENTS)
BLOCK_SCOPED_NAMES = _qualify(BLOCK_SCOPED_TAGS)
