"""
File discovery and size-limited reading.

Directories are walked for files with a known source extension; explicit
file arguments are always taken regardless of extension. Problems with a
single path become InputError values so that one bad path never stops the
batch.
"""

from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable

from ..config import CheckerConfig
from ..exceptions import ErrorCode, InputError
from ..logging_config import get_logger
from .languages import supported_extensions

logger = get_logger(__name__)


def should_skip_file(relative: Path, exclude_patterns: Iterable[str]) -> bool:
    """
    Check if a file should be skipped based on exclusion patterns.

    Patterns are matched against the path relative to the walked root, at
    any depth (``vendor/*`` also excludes ``lib/vendor/x.c``).

    Args:
        relative: File path relative to the directory being walked
        exclude_patterns: Glob patterns to exclude

    Returns:
        True if file should be skipped
    """
    text = relative.as_posix()
    for pattern in exclude_patterns:
        if fnmatch(text, pattern) or fnmatch(text, f"*/{pattern}"):
            return True
    return False


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") and part not in (".", "..") for part in relative.parts)


def discover_files(
    paths: Iterable[Path], config: CheckerConfig
) -> tuple[list[Path], list[InputError]]:
    """
    Expand command-line paths into the list of files to analyse.

    Args:
        paths: Files and/or directories
        config: Exclusion patterns and hidden-file policy

    Returns:
        (files sorted by path without duplicates, input errors for missing paths)
    """
    extensions = supported_extensions()
    found: dict[str, Path] = {}
    errors: list[InputError] = []

    for root in paths:
        root = Path(root)
        if not root.exists():
            logger.warning(f"Path does not exist: {root}")
            errors.append(InputError(root, "path does not exist", ErrorCode.SG201))
            continue

        if root.is_file():
            found.setdefault(str(root), root)
            continue

        skipped = 0
        for filepath in sorted(root.rglob("*")):
            if not filepath.is_file() or filepath.suffix.lower() not in extensions:
                continue
            relative = filepath.relative_to(root)
            if not config.allow_hidden_files and _is_hidden(relative):
                skipped += 1
                continue
            if should_skip_file(relative, config.exclude_patterns):
                skipped += 1
                logger.debug(f"Skipped (pattern): {filepath}")
                continue
            found.setdefault(str(filepath), filepath)
        logger.debug(f"Walked {root}: {skipped} file(s) skipped")

    return [found[key] for key in sorted(found)], errors


def read_source(filepath: Path, config: CheckerConfig) -> bytes:
    """
    Read a source file as bytes, enforcing the size limit.

    Raises:
        InputError: If the file is too large or cannot be read
    """
    try:
        size = filepath.stat().st_size
        if size > config.max_file_size_bytes:
            raise InputError(
                filepath,
                f"file is {size} bytes, limit is {config.max_file_size_bytes}",
                ErrorCode.SG202,
            )
        return filepath.read_bytes()
    except OSError as e:
        raise InputError(filepath, f"OS error: {e}") from e
