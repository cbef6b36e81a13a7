"""Token classification for feature documents."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from .constants import (
    LINE_BREAK_PATTERN,
    NUMBER_PATTERN,
    PLACEHOLDER_PATTERN,
    PLAIN_TEXT_PATTERN,
    SECTION_KEYWORD_PATTERN,
    STEP_KEYWORD_PATTERN,
    TAG_PATTERN,
)
from .models import LexerContext, LexerState, TokenCategory, TokenSpan

# (start, end, category) relative to the current line
RawSpan = tuple[int, int, TokenCategory]
Matcher = Callable[[LexerContext, str], list[RawSpan] | None]


def find_closing_quote(line: str, pos: int) -> int | None:
    """Locate the next unescaped double quote.

    A backslash always consumes the character after it, so ``\\"`` never
    closes a string.

    Args:
        line: Line to scan.
        pos: Index where scanning starts (just after the opening quote).

    Returns:
        int | None: Index of the closing quote, or None when the line ends first.

    Examples:
        find_closing_quote('"abc" tail', 1)  # 4
        find_closing_quote('"ab\\\\"c', 1)  # None
    """
    i = pos
    while i < len(line):
        character = line[i]
        if character == "\\":
            i += 2
            continue
        if character == '"':
            return i
        i += 1
    return None


def _at_line_start(ctx: LexerContext) -> bool:
    return ctx.pos == ctx.line_start


def _match_comment(ctx: LexerContext, line: str) -> list[RawSpan] | None:
    if line[ctx.pos] != "#":
        return None
    start, ctx.pos = ctx.pos, len(line)
    return [(start, ctx.pos, TokenCategory.COMMENT)]


def _match_tag(ctx: LexerContext, line: str) -> list[RawSpan] | None:
    match = TAG_PATTERN.match(line, ctx.pos)
    if not match:
        return None
    ctx.pos = match.end()
    return [(match.start(), match.end(), TokenCategory.TAG)]


def _match_section_keyword(ctx: LexerContext, line: str) -> list[RawSpan] | None:
    if not _at_line_start(ctx):
        return None
    match = SECTION_KEYWORD_PATTERN.match(line, ctx.pos)
    if not match:
        return None

    spans = [(match.start("keyword"), match.end("keyword"), TokenCategory.SECTION_KEYWORD)]
    if match.group("space"):
        spans.append((match.start("space"), match.end("space"), TokenCategory.PLAIN_TEXT))
    spans.append((match.start("colon"), match.end("colon"), TokenCategory.DELIMITER))
    ctx.pos = match.end()
    return spans


def _match_step_keyword(ctx: LexerContext, line: str) -> list[RawSpan] | None:
    if not _at_line_start(ctx):
        return None
    match = STEP_KEYWORD_PATTERN.match(line, ctx.pos)
    if not match:
        return None
    # The separating whitespace is left for the plain-text matcher
    ctx.pos = match.end("keyword")
    return [(match.start("keyword"), ctx.pos, TokenCategory.STEP_KEYWORD)]


def _match_invalid_string(ctx: LexerContext, line: str) -> list[RawSpan] | None:
    if line[ctx.pos] != '"' or find_closing_quote(line, ctx.pos + 1) is not None:
        return None
    start, ctx.pos = ctx.pos, len(line)
    return [(start, ctx.pos, TokenCategory.INVALID_STRING)]


def _match_string_open(ctx: LexerContext, line: str) -> list[RawSpan] | None:
    if line[ctx.pos] != '"':
        return None
    ctx.state = LexerState.IN_STRING
    ctx.pos += 1
    return [(ctx.pos - 1, ctx.pos, TokenCategory.STRING_LITERAL)]


def _match_placeholder(ctx: LexerContext, line: str) -> list[RawSpan] | None:
    match = PLACEHOLDER_PATTERN.match(line, ctx.pos)
    if not match:
        return None
    ctx.pos = match.end()
    return [(match.start(), match.end(), TokenCategory.PLACEHOLDER)]


def _match_table_pipe(ctx: LexerContext, line: str) -> list[RawSpan] | None:
    if line[ctx.pos] != "|":
        return None
    ctx.pos += 1
    return [(ctx.pos - 1, ctx.pos, TokenCategory.TABLE_PIPE)]


def _match_number(ctx: LexerContext, line: str) -> list[RawSpan] | None:
    match = NUMBER_PATTERN.match(line, ctx.pos)
    if not match:
        return None
    ctx.pos = match.end()
    return [(match.start(), match.end(), TokenCategory.NUMBER)]


def _match_plain_text(ctx: LexerContext, line: str) -> list[RawSpan]:
    start = ctx.pos
    match = PLAIN_TEXT_PATTERN.match(line, start)
    ctx.pos = match.end() if match else start + 1
    return [(start, ctx.pos, TokenCategory.PLAIN_TEXT)]


# Order matters: the first matcher returning spans wins at each position.
NORMAL_MATCHERS: tuple[Matcher, ...] = (
    _match_comment,
    _match_tag,
    _match_section_keyword,
    _match_step_keyword,
    _match_invalid_string,
    _match_string_open,
    _match_placeholder,
    _match_table_pipe,
    _match_number,
    _match_plain_text,
)


def _scan_string(ctx: LexerContext, line: str) -> list[RawSpan]:
    """Consume one piece of a double-quoted string.

    Args:
        ctx: Lexer context in `LexerState.IN_STRING`.
        line: Line being scanned.

    Returns:
        list[RawSpan]: A single escape, literal run, or closing-quote span.
    """
    start = ctx.pos
    character = line[start]

    if character == "\\" and start + 1 < len(line):
        ctx.pos = start + 2
        return [(start, ctx.pos, TokenCategory.STRING_ESCAPE)]

    if character == '"':
        ctx.pos = start + 1
        ctx.state = LexerState.NORMAL
        return [(start, ctx.pos, TokenCategory.STRING_LITERAL)]

    end = start + 1
    while end < len(line) and line[end] not in '\\"':
        end += 1
    ctx.pos = end
    return [(start, end, TokenCategory.STRING_LITERAL)]


def _lex_line(ctx: LexerContext, line: str) -> Iterator[RawSpan]:
    # An unterminated string never carries over a line break
    ctx.state = LexerState.NORMAL
    ctx.pos = 0
    ctx.line_start = len(line) - len(line.lstrip())

    while ctx.pos < len(line):
        if ctx.state is LexerState.IN_STRING:
            yield from _scan_string(ctx, line)
            continue

        for matcher in NORMAL_MATCHERS:
            spans = matcher(ctx, line)
            if spans:
                yield from spans
                break


def _merge_spans(spans: Iterator[RawSpan]) -> Iterator[RawSpan]:
    pending: RawSpan | None = None
    for start, end, category in spans:
        if pending is not None and pending[2] is category and pending[1] == start:
            pending = (pending[0], end, category)
            continue
        if pending is not None:
            yield pending
        pending = (start, end, category)
    if pending is not None:
        yield pending


def split_lines(document: str) -> Iterator[tuple[str, str]]:
    """Split a document into lines while keeping each line terminator.

    Args:
        document: Full document text.

    Returns:
        Iterator[tuple[str, str]]: ``(line, terminator)`` pairs; the terminator
            is ``""`` for a final line without a line break.

    Examples:
        list(split_lines("a\\r\\nb"))  # [("a", "\\r\\n"), ("b", "")]
    """
    offset = 0
    for match in LINE_BREAK_PATTERN.finditer(document):
        yield document[offset : match.start()], match.group()
        offset = match.end()
    if offset < len(document):
        yield document[offset:], ""


def iter_tokens(document: str) -> Iterator[TokenSpan]:
    """Lazily classify a feature document into token spans.

    Each line is scanned left to right with ordered matchers; string mode is
    the only state and it is reset at every line break. Line terminators are
    emitted as plain text so the spans partition the whole document.

    Args:
        document: Full document text.

    Returns:
        Iterator[TokenSpan]: Spans in document order, adjacent spans of the same
            category on one line already merged.

    Examples:
        [span.category for span in iter_tokens("@smoke")]  # [TokenCategory.TAG]
    """
    ctx = LexerContext()
    offset = 0

    for line_index, (line, terminator) in enumerate(split_lines(document)):
        raw_spans = _lex_line(ctx, line)
        if terminator:
            raw_spans = _with_terminator(raw_spans, len(line), terminator)

        for start, end, category in _merge_spans(raw_spans):
            yield TokenSpan(
                start=offset + start,
                end=offset + end,
                category=category,
                line=line_index,
                column=start,
                text=document[offset + start : offset + end],
            )
        offset += len(line) + len(terminator)


def _with_terminator(spans: Iterator[RawSpan], length: int, terminator: str) -> Iterator[RawSpan]:
    yield from spans
    yield (length, length + len(terminator), TokenCategory.PLAIN_TEXT)


def tokenize(document: str) -> list[TokenSpan]:
    """Classify a feature document into token spans.

    Never raises: unmatched characters fall through as plain text and an
    unterminated quote marks the rest of its line as an invalid string.

    Args:
        document: Full document text, possibly mid-edit or malformed.

    Returns:
        list[TokenSpan]: Spans covering every character exactly once.

    Examples:
        tokenize('Given a "quoted value" exists')
    """
    return list(iter_tokens(document))
