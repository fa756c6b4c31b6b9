"""
jsp-format: structural formatter for JSP documents.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    jsp-format --write index.jsp

Library Usage:
    from pathlib import Path
    from jsp_format import FormatOptions, format_jsp

    content = Path("index.jsp").read_text()
    formatted = format_jsp(content, FormatOptions(tab_size=2))
"""

from .config import ConfigError, FormatOptions
from .directive import format_directive
from .exceptions import FormatError, FormatFileError, MalformedDirectiveError
from .formatter import format_document, format_jsp, format_range
from .indenter import classify_line, indent_structure
from .models import RegionKind, TagClass, TextEdit
from .regions import extract_regions
from .scriptlet import format_java_code, format_scriptlet

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "format_jsp",
    "format_document",
    "format_range",
    # Pipeline stages
    "extract_regions",
    "format_directive",
    "format_scriptlet",
    "format_java_code",
    "classify_line",
    "indent_structure",
    # Data models
    "FormatOptions",
    "RegionKind",
    "TagClass",
    "TextEdit",
    # Exceptions
    "ConfigError",
    "FormatError",
    "FormatFileError",
    "MalformedDirectiveError",
    # Version
    "__version__",
]
