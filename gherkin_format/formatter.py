"""Canonical indentation and table alignment for feature documents.

Formatting runs two independent passes over an array of lines:

1. `reindent_lines` assigns every line a nesting depth from a flat state
   machine keyed on the last keyword line seen.
2. `align_tables` rewrites every contiguous run of ``|`` rows with padded,
   column-aligned cells.

Both passes are total: they never raise on malformed input.
"""

from __future__ import annotations

from .config import FormatterConfig
from .constants import (
    EXAMPLES_LEVEL,
    EXAMPLES_PREFIX,
    FEATURE_LEVEL,
    FEATURE_PREFIX,
    LINE_BREAK_PATTERN,
    SCENARIO_LEVEL,
    SCENARIO_PREFIXES,
    STEP_LEVEL,
    STEP_PREFIXES,
    TABLE_PIPE,
    TAG_PREFIX,
)
from .logger import get_logger
from .models import IndentContext, TableBlock

logger = get_logger(__name__)


def split_document(document: str) -> list[str]:
    """Split a document on any line terminator.

    A trailing line break yields a final empty line so that joining with
    ``"\\n"`` restores it.

    Examples:
        split_document("a\\r\\nb\\n")  # ["a", "b", ""]
    """
    return LINE_BREAK_PATTERN.split(document)


def is_table_row(line: str) -> bool:
    return line.strip().startswith(TABLE_PIPE)


def indent_line(ctx: IndentContext, line: str, config: FormatterConfig | None = None) -> str:
    """Re-emit one line with its canonical indentation.

    Args:
        ctx: Indentation state, updated in place by section keyword lines.
        line: Raw input line.
        config: Formatting configuration; defaults to `FormatterConfig()`.

    Returns:
        str: The trimmed line prefixed with its indentation, or ``""`` for a
            blank line.

    Examples:
        ctx = IndentContext()
        indent_line(ctx, "Feature: Login")  # "Feature: Login", level now 1
        indent_line(ctx, "   Given a user")  # "    Given a user"
    """
    config = config or FormatterConfig()
    trimmed = line.strip()
    if not trimmed:
        return ""

    if trimmed.startswith(TAG_PREFIX):
        level = ctx.current_indent_level
    elif trimmed.startswith(FEATURE_PREFIX):
        level = FEATURE_LEVEL
        ctx.current_indent_level = FEATURE_LEVEL + 1
    elif trimmed.startswith(SCENARIO_PREFIXES):
        level = SCENARIO_LEVEL
        ctx.current_indent_level = SCENARIO_LEVEL + 1
    elif trimmed.startswith(STEP_PREFIXES):
        level = STEP_LEVEL
    elif trimmed.startswith(EXAMPLES_PREFIX):
        level = EXAMPLES_LEVEL
        ctx.current_indent_level = EXAMPLES_LEVEL
    elif trimmed.startswith(TABLE_PIPE):
        # Provisional margin, replaced by the alignment pass
        level = config.table_indent_level
    else:
        level = ctx.current_indent_level

    return " " * (config.indent_width * level) + trimmed


def reindent_lines(lines: list[str], config: FormatterConfig | None = None) -> list[str]:
    """Apply the indentation pass to an array of lines.

    Args:
        lines: Raw document lines without terminators.
        config: Formatting configuration; defaults to `FormatterConfig()`.

    Returns:
        list[str]: One re-indented line per input line.
    """
    config = config or FormatterConfig()
    ctx = IndentContext()
    return [indent_line(ctx, line, config) for line in lines]


def reindent(document: str, config: FormatterConfig | None = None) -> str:
    """Re-indent a feature document without aligning its tables.

    Args:
        document: Full document text.
        config: Formatting configuration; defaults to `FormatterConfig()`.

    Returns:
        str: Document with canonical indentation, lines joined by ``"\\n"``.

    Examples:
        reindent("Feature: Login\\nScenario: Valid\\nGiven a user")
    """
    return "\n".join(reindent_lines(split_document(document), config))


def split_row(line: str) -> list[str]:
    r"""Split a table row into trimmed cell values.

    Every pipe separates cells, even one preceded by a backslash, so N pipes
    give N + 1 fragments. The first and last fragments are the artifacts of the
    leading and trailing pipe and are dropped.

    Args:
        line: Table row, with or without surrounding whitespace.

    Returns:
        list[str]: Cell values with surrounding whitespace removed.

    Examples:
        split_row("|a| bb |")  # ["a", "bb"]
        split_row("|a\\|b|")  # ["a\\", "b"]
    """
    fragments = line.strip().split(TABLE_PIPE)
    return [cell.strip() for cell in fragments[1:-1]]


def find_table_blocks(lines: list[str]) -> list[TableBlock]:
    """Collect every maximal run of table rows.

    Args:
        lines: Document lines.

    Returns:
        list[TableBlock]: Blocks in document order with per-column widths
            computed independently for each block.
    """
    blocks: list[TableBlock] = []
    i = 0
    while i < len(lines):
        if not is_table_row(lines[i]):
            i += 1
            continue

        block = TableBlock(start=i)
        while i < len(lines) and is_table_row(lines[i]):
            block.rows.append(split_row(lines[i]))
            i += 1

        block.column_count = max(len(row) for row in block.rows)
        block.widths = [0] * block.column_count
        for row in block.rows:
            for column, cell in enumerate(row):
                block.widths[column] = max(block.widths[column], len(cell))
        blocks.append(block)

    return blocks


def render_table_block(block: TableBlock, config: FormatterConfig | None = None) -> list[str]:
    """Render a table block with padded, column-aligned cells.

    Rows with fewer cells than the block are padded with empty cells, so every
    rendered row has the same length.

    Args:
        block: Table block produced by `find_table_blocks`.
        config: Formatting configuration; defaults to `FormatterConfig()`.

    Returns:
        list[str]: One rendered line per row, shaped ``margin|cell|cell|``.

    Examples:
        block = find_table_blocks(["|a|bb|", "|ccc|d|"])[0]
        render_table_block(block)  # ["      | a   | bb |", "      | ccc | d  |"]
    """
    config = config or FormatterConfig()
    rendered: list[str] = []
    for row in block.rows:
        cells = row + [""] * (block.column_count - len(row))
        padded = "".join(
            f" {cell.ljust(width)} {TABLE_PIPE}" for cell, width in zip(cells, block.widths)
        )
        rendered.append(f"{config.table_margin}{TABLE_PIPE}{padded}")
    return rendered


def align_tables(lines: list[str], config: FormatterConfig | None = None) -> list[str]:
    """Apply the table alignment pass to an array of lines.

    Args:
        lines: Lines produced by the indentation pass.
        config: Formatting configuration; defaults to `FormatterConfig()`.

    Returns:
        list[str]: Lines with every table block realigned; all other lines are
            copied verbatim.
    """
    config = config or FormatterConfig()
    output: list[str] = []
    cursor = 0
    for block in find_table_blocks(lines):
        output.extend(lines[cursor : block.start])
        output.extend(render_table_block(block, config))
        logger.debug(
            "Aligned table at line %d: %d rows, widths %s",
            block.start + 1,
            len(block.rows),
            block.widths,
        )
        cursor = block.end
    output.extend(lines[cursor:])
    return output


def reindent_and_align(full_text: str, config: FormatterConfig | None = None) -> str:
    """Format a whole feature document.

    Runs the indentation pass, then the table alignment pass. The result is
    idempotent: formatting it again returns the same text.

    Args:
        full_text: Full document text.
        config: Formatting configuration; defaults to `FormatterConfig()`.

    Returns:
        str: Replacement text for the entire document.

    Examples:
        reindent_and_align("Feature: Login\\n|a|bb|\\n|ccc|d|\\n")
    """
    config = config or FormatterConfig()
    lines = reindent_lines(split_document(full_text), config)
    return "\n".join(align_tables(lines, config))


def is_formatted(text: str, config: FormatterConfig | None = None) -> bool:
    """Return True when formatting `text` would not change it."""
    return reindent_and_align(text, config) == text
