"""Safe reading and rewriting of JSP files on disk."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_MAX_FILE_SIZE, JSP_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "JSP_FORMAT_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Read the file size limit from ``JSP_FORMAT_MAX_FILE_SIZE``.

    Args:
        default: Limit in bytes used when the variable is unset.

    Returns:
        int: Limit in bytes.

    Raises:
        ValueError: If the variable holds anything but a positive integer.

    Examples:
        os.environ["JSP_FORMAT_MAX_FILE_SIZE"] = "524288"
        get_max_file_size()  # 524288
    """
    raw_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw_value is None:
        return default

    try:
        limit = int(raw_value)
    except ValueError:
        limit = 0

    if limit <= 0:
        raise ValueError(
            f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer number of bytes, "
            f"got {raw_value!r}."
        )
    return limit


def is_jsp_path(path: Path) -> bool:
    return path.suffix.lower() in JSP_EXTENSIONS


def contains_symlink(path: Path) -> bool:
    """Return True when `path` or one of its parents is a symlink.

    Components that cannot be inspected are skipped.
    """
    for component in (path, *path.parents):
        try:
            if component.is_symlink():
                return True
        except OSError:
            continue
    return False


def normalize_filepath(raw_path: str, base_dir: Path) -> Path:
    """Resolve a user-supplied JSP path and check it is safe to format.

    Args:
        raw_path: Path given on the command line, absolute or relative.
        base_dir: Directory the file must live under.

    Returns:
        Path: The resolved absolute path.

    Raises:
        ValueError: If the path goes through a symlink, does not exist, is
            not a regular file, lies outside `base_dir`, or lacks a JSP
            extension.

    Examples:
        normalize_filepath("src/main/webapp/index.jsp", Path.cwd())
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

    if not is_jsp_path(resolved):
        raise ValueError(
            f"{resolved} is not a JSP file. "
            f"Supported extensions are: {', '.join(JSP_EXTENSIONS)}"
        )

    return resolved


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Stat `filepath` without following symlinks.

    Raises:
        IOError: If the file cannot be inspected, is a symlink, or is not a
            regular file (directory, FIFO, socket, device).
    """
    try:
        stat_result = os.lstat(filepath)
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error

    mode = stat_result.st_mode
    if stat.S_ISLNK(mode):
        raise IOError(f"Symlinks are not supported: {filepath}.")
    if not stat.S_ISREG(mode):
        raise IOError(f"{filepath} is not a regular file.")
    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    if stat_result.st_size > max_size:
        raise IOError(f"{filepath} exceeds the maximum allowed size of {max_size} bytes.")


def _fingerprint(stat_result: os.stat_result) -> tuple[object, ...]:
    return (
        getattr(stat_result, "st_ino", None),
        getattr(stat_result, "st_dev", None),
        stat_result.st_size,
        stat_result.st_mtime_ns,
    )


def ensure_file_unchanged(
    expected_stat: os.stat_result, current_stat: os.stat_result, filepath: Path
):
    """Refuse to continue when a file was replaced or edited since it was read.

    Raises:
        IOError: If inode, device, size, or modification time differ.
    """
    if _fingerprint(expected_stat) != _fingerprint(current_stat):
        raise IOError(f"{filepath} changed during processing; refusing to overwrite.")


def safe_read(filepath: Path) -> TextIO:
    """Open a JSP file as UTF-8 text, keeping its line endings.

    Raises:
        IOError: If the path is missing, unreadable, or a directory.

    Examples:
        with safe_read(Path("index.jsp")) as handle:
            source = handle.read()
    """
    try:
        return open(filepath, encoding="UTF-8", newline="")
    except (FileNotFoundError, PermissionError, IsADirectoryError, NotADirectoryError) as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error


def write_formatted(filepath: Path, content: str, expected_stat: os.stat_result):
    """Replace a file with its formatted text in one atomic step.

    The text goes to a temporary file in the same directory, which gets the
    original permission bits and is then moved over the original.

    Args:
        filepath: JSP file to rewrite.
        content: Formatted text, written with its line endings untouched.
        expected_stat: Stat taken before the file was read.

    Raises:
        IOError: If the file changed since `expected_stat` was taken or the
            replacement fails.

    Examples:
        write_formatted(Path("index.jsp"), formatted, stat_before)
    """
    ensure_file_unchanged(expected_stat, collect_file_stat(filepath), filepath)

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="UTF-8",
            newline="",
            prefix=f".{filepath.name}.",
            delete=False,
            dir=filepath.parent,
        ) as handle:
            temp_path = Path(handle.name)
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        temp_path.chmod(stat.S_IMODE(expected_stat.st_mode))
        os.replace(temp_path, filepath)
    except OSError as error:
        raise IOError(f"Error writing {filepath}: {error}") from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
