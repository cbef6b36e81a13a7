"""Constants used across the gherkin-format package."""

from __future__ import annotations

import re

from .config import FormatterConfig

DEFAULT_CONFIG = FormatterConfig()

STEP_KEYWORDS = ("Given", "When", "Then", "And", "But")

# Lexer patterns; "Scenario Outline" precedes "Scenario" so the longer keyword wins
SECTION_KEYWORD_PATTERN = re.compile(
    r"(?P<keyword>Feature|Scenario Outline|Scenario|Background|Examples)(?P<space>\s*)(?P<colon>:)"
)
STEP_KEYWORD_PATTERN = re.compile(r"(?P<keyword>Given|When|Then|And|But)\s")
TAG_PATTERN = re.compile(r"@[A-Za-z_]\w*")
PLACEHOLDER_PATTERN = re.compile(r"<[^>]+>")
NUMBER_PATTERN = re.compile(r"\d+")
PLAIN_TEXT_PATTERN = re.compile(r"\s+|[^\W\d]+|.", re.DOTALL)
LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")

# Indentation pass
FEATURE_PREFIX = "Feature:"
SCENARIO_PREFIXES = ("Background:", "Scenario:", "Scenario Outline:")
EXAMPLES_PREFIX = "Examples:"
STEP_PREFIXES = tuple(f"{keyword} " for keyword in STEP_KEYWORDS)
TAG_PREFIX = "@"
TABLE_PIPE = "|"

FEATURE_LEVEL = 0
SCENARIO_LEVEL = 1
STEP_LEVEL = 2
EXAMPLES_LEVEL = 2

# Defaults
FEATURE_EXTENSIONS = DEFAULT_CONFIG.extensions
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
