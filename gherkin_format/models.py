"""Data models for gherkin-format."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class TokenCategory(Enum):
    """Classification attached to every token span.

    The host maps each category to a presentation style; the lexer only
    guarantees a stable name per span.
    """

    COMMENT = auto()
    TAG = auto()
    SECTION_KEYWORD = auto()
    STEP_KEYWORD = auto()
    STRING_LITERAL = auto()
    STRING_ESCAPE = auto()
    INVALID_STRING = auto()
    PLACEHOLDER = auto()
    TABLE_PIPE = auto()
    NUMBER = auto()
    DELIMITER = auto()
    PLAIN_TEXT = auto()


@dataclass(frozen=True)
class TokenSpan:
    """A maximal run of characters sharing one classification.

    Attributes:
        start: Zero-based offset of the first character in the document.
        end: Zero-based offset one past the last character.
        category: Classification of the run.
        line: Zero-based index of the line holding the run.
        column: Zero-based offset of the first character within its line.
        text: Characters covered by the run.
    """

    start: int
    end: int
    category: TokenCategory
    line: int
    column: int
    text: str

    def __len__(self) -> int:
        return self.end - self.start


class LexerState(Enum):
    """Lexer modes.

    Attributes:
        NORMAL: Default mode, ordered matchers apply.
        IN_STRING: Inside a double-quoted string until the closing quote.
    """

    NORMAL = auto()
    IN_STRING = auto()


@dataclass
class LexerContext:
    """Encapsulate lexer state while walking one line.

    Attributes:
        state: Current lexer mode.
        pos: Scan position within the current line.
        line_start: Index of the first non-whitespace character of the line.
    """

    state: LexerState = LexerState.NORMAL
    pos: int = 0
    line_start: int = 0


@dataclass
class IndentContext:
    """State threaded through the indentation pass.

    Nesting is tracked by the last keyword line seen, never by a stack.
    """

    current_indent_level: int = 0


@dataclass
class TableBlock:
    """A contiguous run of table rows.

    Attributes:
        start: Zero-based index of the first row in the line array.
        rows: Trimmed cell values for every row.
        column_count: Largest number of cells found in any row.
        widths: Column widths, the longest trimmed cell per column.
    """

    start: int
    rows: list[list[str]] = field(default_factory=list)
    column_count: int = 0
    widths: list[int] = field(default_factory=list)

    @property
    def end(self) -> int:
        """Index one past the last row of the block."""
        return self.start + len(self.rows)
