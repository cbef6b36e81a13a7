"""Terminal rendering of token spans.

The lexer only names a category per span; this module is the host-side
mapping from category to terminal style.
"""

from __future__ import annotations

from collections.abc import Iterable

import click

from .models import TokenCategory, TokenSpan

STYLES: dict[TokenCategory, dict[str, object]] = {
    TokenCategory.COMMENT: {"fg": (148, 163, 184), "italic": True},
    TokenCategory.TAG: {"fg": (14, 165, 233), "bold": True, "italic": True},
    TokenCategory.SECTION_KEYWORD: {"fg": (79, 70, 229), "bold": True},
    TokenCategory.STEP_KEYWORD: {"fg": (37, 99, 235), "bold": True},
    TokenCategory.STRING_LITERAL: {"fg": (217, 70, 239), "bold": True},
    TokenCategory.STRING_ESCAPE: {"fg": (190, 24, 93)},
    TokenCategory.INVALID_STRING: {"fg": "red", "underline": True},
    TokenCategory.PLACEHOLDER: {"fg": (245, 158, 11), "bold": True},
    TokenCategory.TABLE_PIPE: {"fg": (167, 139, 250), "bold": True},
    TokenCategory.NUMBER: {"fg": (217, 70, 239)},
    TokenCategory.DELIMITER: {"fg": (148, 163, 184)},
}


def style_span(span: TokenSpan) -> str:
    """Wrap a span's text in the ANSI codes for its category."""
    style = STYLES.get(span.category)
    if not style:
        return span.text
    return click.style(span.text, **style)


def render_tokens(tokens: Iterable[TokenSpan]) -> str:
    """Rebuild the document from its spans with every span styled.

    Args:
        tokens: Spans partitioning the document, in order.

    Returns:
        str: Document text with ANSI styling applied per category.
    """
    return "".join(style_span(span) for span in tokens)


def describe_tokens(tokens: Iterable[TokenSpan]) -> list[str]:
    """List spans as ``line:column CATEGORY 'text'`` rows, skipping whitespace.

    Examples:
        describe_tokens(tokenize("@smoke"))  # ["1:1    TAG              '@smoke'"]
    """
    rows = []
    for span in tokens:
        if span.category is TokenCategory.PLAIN_TEXT and not span.text.strip():
            continue
        position = f"{span.line + 1}:{span.column + 1}"
        rows.append(f"{position:<6} {span.category.name:<16} {span.text!r}")
    return rows
