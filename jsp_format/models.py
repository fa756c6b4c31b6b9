"""Data models for jsp-format."""

from dataclasses import dataclass, field
from enum import Enum, auto


class RegionKind(Enum):
    """Kinds of protected regions, in extraction order.

    Attributes:
        COMMENT: JSP comment ``<%-- ... --%>``.
        DECLARATION: Declaration block ``<%! ... %>``.
        EXPRESSION: Expression block ``<%= ... %>``.
        SCRIPTLET: Scriptlet block ``<% ... %>``.
        DIRECTIVE: Directive block ``<%@ ... %>``.
        EL_IMMEDIATE: Immediate EL fragment ``${...}``.
        EL_DEFERRED: Deferred EL fragment ``#{...}``.
        SCRIPT_BODY: Raw ``<script>`` element.
        STYLE_BODY: Raw ``<style>`` element.
    """

    COMMENT = auto()
    DECLARATION = auto()
    EXPRESSION = auto()
    SCRIPTLET = auto()
    DIRECTIVE = auto()
    EL_IMMEDIATE = auto()
    EL_DEFERRED = auto()
    SCRIPT_BODY = auto()
    STYLE_BODY = auto()


class TagClass(Enum):
    """Classification of one trimmed skeleton line.

    Attributes:
        OPENING: Opens a scope; depth increases after the line.
        CLOSING: Closes a scope; depth decreases before the line.
        SELF_CLOSING: A complete ``<tag/>``; depth unchanged.
        PLAIN: Text or anything else; depth unchanged.
    """

    OPENING = auto()
    CLOSING = auto()
    SELF_CLOSING = auto()
    PLAIN = auto()


@dataclass
class ExtractionResult:
    """Skeleton text plus the protected content it refers to.

    Attributes:
        text: Document text with every region replaced by a placeholder token.
        table: Mapping of placeholder token to replacement text, in insertion order.
        sentinel: Character delimiting placeholder tokens; absent from the input.
    """

    text: str
    table: dict[str, str] = field(default_factory=dict)
    sentinel: str = "\x00"


@dataclass(frozen=True)
class TextEdit:
    """A replacement of ``document[start:end]`` with `new_text`.

    Attributes:
        start: Zero-based start offset, inclusive.
        end: Zero-based end offset, exclusive.
        new_text: Replacement text.
    """

    start: int
    end: int
    new_text: str

    def apply(self, document: str) -> str:
        return document[: self.start] + self.new_text + document[self.end :]
