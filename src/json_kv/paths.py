"""Helpers for locating and probing the backing file of a store."""

import os
from pathlib import Path

from json_kv.errors import InvalidPathError, StoreAccessError, StoreReadError, StoreStatError

DOCUMENT_EXTENSION = ".json"


def normalize_path(path: str | os.PathLike[str]) -> Path:
    """Validate a store path and append the document extension if it is missing.

    The path is kept relative if it was given relative; it is not resolved.

    Raises:
        InvalidPathError: If the path is not a non-empty string or path-like object.
    """
    if not isinstance(path, (str, os.PathLike)):
        raise InvalidPathError(path=path)

    raw_path = os.fspath(path)

    if not isinstance(raw_path, str) or not raw_path:
        raise InvalidPathError(path=path)

    if not raw_path.endswith(DOCUMENT_EXTENSION):
        raw_path += DOCUMENT_EXTENSION

    return Path(raw_path)


def ensure_parent_directory(path: Path) -> Path:
    """Create the parent directory of `path`, and any missing ancestors."""
    directory = path.parent

    try:
        directory.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        raise StoreAccessError(path=str(directory), operation="mkdir") from e

    return directory


def probe_file(path: Path) -> int | None:
    """Return the size of the file at `path`, or None if it does not exist.

    Raises:
        StoreAccessError: If the file cannot be examined, or exists but is not both readable and writable.
        StoreStatError: If examining the file fails for any other reason.
    """
    try:
        stat_result = os.stat(path)
    except FileNotFoundError:
        return None
    except PermissionError as e:
        raise StoreAccessError(path=str(path), operation="stat") from e
    except OSError as e:
        raise StoreStatError(path=str(path), cause=e) from e

    if not os.access(path, os.R_OK | os.W_OK):
        raise StoreAccessError(path=str(path), operation="access")

    return stat_result.st_size


def read_document_text(path: Path) -> str:
    """Read the backing file as UTF-8 text.

    Raises:
        StoreAccessError: If the process may not read the file.
        StoreReadError: If reading fails for any other reason, for example when the path is a directory.
    """
    try:
        return path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise StoreAccessError(path=str(path), operation="read") from e
    except OSError as e:
        raise StoreReadError(path=str(path), cause=e) from e
