from __future__ import annotations

import time

import pytest

from gherkin_format.lexer import find_closing_quote, iter_tokens, split_lines, tokenize
from gherkin_format.models import TokenCategory

C = TokenCategory


def _pairs(document: str) -> list[tuple[str, TokenCategory]]:
    return [(span.text, span.category) for span in tokenize(document)]


def test_step_with_quoted_value():
    assert _pairs('Given a "quoted value" exists') == [
        ("Given", C.STEP_KEYWORD),
        (" a ", C.PLAIN_TEXT),
        ('"quoted value"', C.STRING_LITERAL),
        (" exists", C.PLAIN_TEXT),
    ]


def test_unterminated_string_is_invalid():
    assert _pairs('Given a "unterminated') == [
        ("Given", C.STEP_KEYWORD),
        (" a ", C.PLAIN_TEXT),
        ('"unterminated', C.INVALID_STRING),
    ]


def test_section_keyword_and_delimiter():
    assert _pairs("Feature: Login") == [
        ("Feature", C.SECTION_KEYWORD),
        (":", C.DELIMITER),
        (" Login", C.PLAIN_TEXT),
    ]


def test_scenario_outline_wins_over_scenario():
    assert _pairs("  Scenario Outline : Add") == [
        ("  ", C.PLAIN_TEXT),
        ("Scenario Outline", C.SECTION_KEYWORD),
        (" ", C.PLAIN_TEXT),
        (":", C.DELIMITER),
        (" Add", C.PLAIN_TEXT),
    ]


@pytest.mark.parametrize("keyword", ["Feature", "Background", "Scenario", "Examples"])
def test_section_keywords(keyword: str):
    spans = tokenize(f"{keyword}:")

    assert spans[0].category is C.SECTION_KEYWORD
    assert spans[0].text == keyword
    assert spans[1].category is C.DELIMITER


def test_section_keyword_only_at_line_start():
    assert _pairs("see Feature: x") == [("see Feature: x", C.PLAIN_TEXT)]


def test_section_keyword_requires_colon():
    assert _pairs("Features list") == [("Features list", C.PLAIN_TEXT)]


@pytest.mark.parametrize("keyword", ["Given", "When", "Then", "And", "But"])
def test_step_keywords(keyword: str):
    spans = tokenize(f"    {keyword} something")

    assert [(span.text, span.category) for span in spans] == [
        ("    ", C.PLAIN_TEXT),
        (keyword, C.STEP_KEYWORD),
        (" something", C.PLAIN_TEXT),
    ]


def test_step_keyword_needs_trailing_whitespace():
    assert _pairs("Given") == [("Given", C.PLAIN_TEXT)]
    assert _pairs("Givens are") == [("Givens are", C.PLAIN_TEXT)]


def test_step_keyword_only_at_line_start():
    assert _pairs("a Given b") == [("a Given b", C.PLAIN_TEXT)]


def test_tags():
    assert _pairs("@smoke @wip_2") == [
        ("@smoke", C.TAG),
        (" ", C.PLAIN_TEXT),
        ("@wip_2", C.TAG),
    ]


def test_tag_must_start_with_letter_or_underscore():
    assert _pairs("@1") == [("@", C.PLAIN_TEXT), ("1", C.NUMBER)]


def test_full_line_comment():
    assert _pairs("  # Given \"x\" <y> | 3") == [
        ("  ", C.PLAIN_TEXT),
        ('# Given "x" <y> | 3', C.COMMENT),
    ]


def test_trailing_comment_after_other_tokens():
    assert _pairs("Given x # note") == [
        ("Given", C.STEP_KEYWORD),
        (" x ", C.PLAIN_TEXT),
        ("# note", C.COMMENT),
    ]


def test_hash_inside_string_is_not_a_comment():
    assert _pairs('"a # b"') == [('"a # b"', C.STRING_LITERAL)]


def test_table_row_with_placeholder_and_number():
    assert _pairs("| <name> | 42 |") == [
        ("|", C.TABLE_PIPE),
        (" ", C.PLAIN_TEXT),
        ("<name>", C.PLACEHOLDER),
        (" ", C.PLAIN_TEXT),
        ("|", C.TABLE_PIPE),
        (" ", C.PLAIN_TEXT),
        ("42", C.NUMBER),
        (" ", C.PLAIN_TEXT),
        ("|", C.TABLE_PIPE),
    ]


def test_number_after_word():
    assert _pairs("abc123") == [("abc", C.PLAIN_TEXT), ("123", C.NUMBER)]


def test_string_escape():
    assert _pairs('Then "a\\"b"') == [
        ("Then", C.STEP_KEYWORD),
        (" ", C.PLAIN_TEXT),
        ('"a', C.STRING_LITERAL),
        ('\\"', C.STRING_ESCAPE),
        ('b"', C.STRING_LITERAL),
    ]


def test_escaped_quote_does_not_close_string():
    assert _pairs('"abc\\"') == [('"abc\\"', C.INVALID_STRING)]


def test_placeholder_inside_string_stays_string():
    assert _pairs('"<name>"') == [('"<name>"', C.STRING_LITERAL)]


def test_string_state_does_not_cross_line_break():
    spans = tokenize('Given "a\nb"')

    assert [(span.text, span.category, span.line) for span in spans] == [
        ("Given", C.STEP_KEYWORD, 0),
        (" ", C.PLAIN_TEXT, 0),
        ('"a', C.INVALID_STRING, 0),
        ("\n", C.PLAIN_TEXT, 0),
        ("b", C.PLAIN_TEXT, 1),
        ('"', C.INVALID_STRING, 1),
    ]


def test_offsets_lines_and_columns():
    document = "Feature: A\r\n  Scenario: B"
    spans = tokenize(document)

    scenario = next(span for span in spans if span.text == "Scenario")
    assert scenario.line == 1
    assert scenario.column == 2
    assert scenario.start == 14
    assert document[scenario.start : scenario.end] == "Scenario"
    assert (" A\r\n", C.PLAIN_TEXT) in [(span.text, span.category) for span in spans]


def test_spans_partition_document():
    document = '@tag\nFeature: X\n  Scenario: Y\n    Given "a\\"b" and <c>\n      | 1 | two |\n'
    spans = tokenize(document)

    assert "".join(span.text for span in spans) == document
    assert spans[0].start == 0
    assert spans[-1].end == len(document)
    for previous, current in zip(spans, spans[1:]):
        assert previous.end == current.start
        assert previous.start < previous.end


def test_adjacent_spans_never_share_a_category_on_one_line():
    spans = tokenize("Given a  b  c 1 2 || <x><y>")

    for previous, current in zip(spans, spans[1:]):
        if previous.line == current.line:
            assert previous.category is not current.category


def test_empty_document():
    assert tokenize("") == []


def test_tokenize_is_restartable_and_iter_tokens_is_lazy():
    spans = tokenize("Feature: X")

    assert list(spans) == list(spans)
    assert list(iter_tokens("Feature: X")) == spans
    assert next(iter_tokens("@a")).category is C.TAG


def test_split_lines_keeps_terminators():
    assert list(split_lines("a\r\nb\rc\n")) == [("a", "\r\n"), ("b", "\r"), ("c", "\n")]
    assert list(split_lines("a")) == [("a", "")]
    assert list(split_lines("")) == []


def test_find_closing_quote():
    assert find_closing_quote('"abc" tail', 1) == 4
    assert find_closing_quote('"a\\"b', 1) is None
    assert find_closing_quote('"a\\\\"b', 1) == 4


def test_keywords_after_mixed_leading_whitespace():
    assert _pairs("\t  Given x") == [
        ("\t  ", C.PLAIN_TEXT),
        ("Given", C.STEP_KEYWORD),
        (" x", C.PLAIN_TEXT),
    ]
    assert _pairs(" \t Feature: Y")[:2] == [(" \t ", C.PLAIN_TEXT), ("Feature", C.SECTION_KEYWORD)]


def test_long_line_lexes_in_linear_time():
    def _best_elapsed(words: int) -> float:
        document = "word " * words
        timings = []
        for _ in range(3):
            start = time.perf_counter()
            spans = tokenize(document)
            timings.append(time.perf_counter() - start)
        assert [span.text for span in spans] == [document]
        return min(timings)

    small = _best_elapsed(10_000)
    large = _best_elapsed(80_000)

    # Eight times the input; quadratic scanning would cost about 64 times as much
    assert large < small * 24
