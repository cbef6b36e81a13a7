"""Filesystem helpers for gherkin-format."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE, FEATURE_EXTENSIONS
from .exceptions import FileTooLargeError, FormatFileError, InvalidEncodingError
from .logger import get_logger

logger = get_logger(__name__)

MAX_FILE_SIZE_ENV_VAR = "GHERKIN_FORMAT_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the size limit from `GHERKIN_FORMAT_MAX_FILE_SIZE`, or `default`.

    Raises:
        ValueError: If the environment value is not a positive integer.
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError:
        max_size = 0
    if max_size <= 0:
        raise ValueError(
            f"{MAX_FILE_SIZE_ENV_VAR} must be a positive number of bytes, got {env_value!r}."
        )
    return max_size


def contains_symlink(path: Path) -> bool:
    """Check whether a path or any of its parents is a symlink.

    Unreadable components are treated as regular directories.
    """
    for candidate in (path, *path.parents):
        try:
            is_link = candidate.is_symlink()
        except OSError:
            is_link = False
        if is_link:
            return True
    return False


def normalize_filepath(
    raw_path: str, base_dir: Path, extensions: Iterable[str] = FEATURE_EXTENSIONS
) -> Path:
    """Resolve a user-supplied path to a feature file under `base_dir`.

    Args:
        raw_path: Path to a feature file, absolute or relative.
        base_dir: Working directory that constrains allowed paths.
        extensions: File extensions routed to the formatter.

    Returns:
        Path: Absolute path to the feature file.

    Raises:
        ValueError: If the path is missing, a symlink, not a regular file,
            outside `base_dir`, or has an unsupported extension.

    Examples:
        normalize_filepath("features/login.feature", Path.cwd())
    """
    path = Path(raw_path).expanduser()
    if contains_symlink(path):
        raise ValueError(f"Symlinks are not supported for security reasons: {path}")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Error resolving {path}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved} is not a regular file.")
    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{resolved} is outside of the working directory {base_dir}.")

    extensions = tuple(extensions)
    if resolved.suffix.lower() not in extensions:
        supported = ", ".join(extensions)
        raise ValueError(f"{resolved} is not a feature file.\nSupported extensions are: {supported}")
    return resolved


@dataclass(frozen=True)
class DocumentSnapshot:
    """A feature file read in one piece, plus what is needed to replace it.

    Attributes:
        path: Absolute path of the feature file.
        text: Decoded document, line terminators untouched.
        fingerprint: Inode, device, size and mtime observed at read time.
        mode: Permission bits to carry over to the rewritten file.
    """

    path: Path
    text: str
    fingerprint: tuple[int, int, int, int]
    mode: int


def file_fingerprint(stat_result: os.stat_result) -> tuple[int, int, int, int]:
    return (
        stat_result.st_ino,
        stat_result.st_dev,
        stat_result.st_size,
        stat_result.st_mtime_ns,
    )


def stat_feature_file(filepath: Path) -> os.stat_result:
    """Stat a feature file without following symlinks.

    Raises:
        FormatFileError: If the path is inaccessible or not a regular file.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        raise FormatFileError(f"Error accessing {filepath}: {error}") from error

    if not stat.S_ISREG(stat_result.st_mode):
        raise FormatFileError(f"{filepath} is not a regular file.")
    return stat_result


def read_document(filepath: Path, max_size: int = DEFAULT_MAX_FILE_SIZE) -> DocumentSnapshot:
    """Read a whole feature file as UTF-8 without translating line endings.

    Args:
        filepath: Path to the feature file.
        max_size: Largest accepted file size in bytes.

    Returns:
        DocumentSnapshot: The decoded text and the file state it was read from.

    Raises:
        FileTooLargeError: If the file is larger than `max_size`.
        InvalidEncodingError: If the file is not valid UTF-8.
        FormatFileError: If the file cannot be opened or read.

    Examples:
        snapshot = read_document(Path("login.feature"))
        formatted = reindent_and_align(snapshot.text)
    """
    stat_result = stat_feature_file(filepath)
    if stat_result.st_size > max_size:
        raise FileTooLargeError(filepath, max_size)

    try:
        raw = filepath.read_bytes()
    except OSError as error:
        raise FormatFileError(f"Error accessing {filepath}: {error}") from error

    # The file may have grown between stat and read
    if len(raw) > max_size:
        raise FileTooLargeError(filepath, max_size)

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as error:
        raise InvalidEncodingError(filepath, str(error)) from error

    return DocumentSnapshot(
        path=filepath,
        text=text,
        fingerprint=file_fingerprint(stat_result),
        mode=stat.S_IMODE(stat_result.st_mode),
    )


def write_document(snapshot: DocumentSnapshot, text: str):
    """Atomically replace the document behind a snapshot.

    The replacement goes to a temporary file in the same directory, which is
    then renamed over the original with the original permission bits.

    Args:
        snapshot: Snapshot returned by `read_document`.
        text: Replacement text for the whole document.

    Raises:
        FormatFileError: If the file changed since it was read or cannot be
            replaced.
    """
    filepath = snapshot.path
    if file_fingerprint(stat_feature_file(filepath)) != snapshot.fingerprint:
        raise FormatFileError(f"{filepath} changed during processing; refusing to overwrite.")

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb", delete=False, dir=filepath.parent, prefix=f".{filepath.name}."
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(text.encode("utf-8"))
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
        os.chmod(temp_path, snapshot.mode)
        os.replace(temp_path, filepath)
        temp_path = None
    except OSError as error:
        raise FormatFileError(f"Could not rewrite {filepath}: {error}") from error
    finally:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)

    logger.debug("Wrote %d characters to %s", len(text), filepath)
