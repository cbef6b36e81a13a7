"""
gherkin-format: tokenizer and pretty-printer for Gherkin feature files.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    gherkin-format features/login.feature
    gherkin-format --check features/*.feature

Library Usage:
    from pathlib import Path
    from gherkin_format import reindent_and_align, tokenize

    content = Path("login.feature").read_text()
    formatted = reindent_and_align(content)
    spans = tokenize(content)
"""

from .config import ConfigError, FormatterConfig
from .exceptions import FileTooLargeError, FormatFileError, InvalidEncodingError
from .formatter import align_tables, is_formatted, reindent, reindent_and_align, split_row
from .lexer import iter_tokens, tokenize
from .models import TableBlock, TokenCategory, TokenSpan

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "tokenize",
    "iter_tokens",
    "reindent",
    "align_tables",
    "reindent_and_align",
    "is_formatted",
    "split_row",
    # Data models
    "TokenCategory",
    "TokenSpan",
    "TableBlock",
    # Configuration
    "FormatterConfig",
    # Exceptions
    "ConfigError",
    "FormatFileError",
    "FileTooLargeError",
    "InvalidEncodingError",
    # Version
    "__version__",
]
