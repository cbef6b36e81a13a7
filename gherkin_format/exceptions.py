"""Package-specific exception types.

The lexer and formatter never raise; these errors only occur at the file
boundary.
"""

from __future__ import annotations

from pathlib import Path


class FormatFileError(IOError):
    """Raised when a feature file cannot be read or written."""


class InvalidEncodingError(FormatFileError):
    """Raised when a feature file is not valid UTF-8.

    Args:
        filepath: Path of the offending file.
        reason: Decoder message describing the invalid sequence.
    """

    def __init__(self, filepath: Path, reason: str):
        self.filepath = filepath
        self.reason = reason
        super().__init__(f"Invalid UTF-8 sequence in {self.filepath}: {self.reason}")


class FileTooLargeError(FormatFileError):
    """Raised when a feature file exceeds the configured size limit.

    Args:
        filepath: Path of the offending file.
        max_size: Maximum allowed size in bytes.
    """

    def __init__(self, filepath: Path, max_size: int):
        self.filepath = filepath
        self.max_size = max_size
        super().__init__(f"{self.filepath} exceeds the maximum allowed size of {self.max_size} bytes.")
