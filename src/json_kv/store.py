import logging
import os
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from typing_extensions import Self

from json_kv.errors import (
    DeserializationError,
    InvalidDocumentError,
    MalformedDocumentError,
    SerializationError,
    StoreWriteError,
)
from json_kv.options import StoreOptions, resolve_options
from json_kv.paths import ensure_parent_directory, normalize_path, probe_file, read_document_text
from json_kv.writer import BackgroundWriter, write_document

logger = logging.getLogger(__name__)


class JSONStore:
    """A key-value store kept in memory and persisted as a single JSON document.

    Reads are served from memory. Every mutation (`init`, `set`, `delete`, `delete_all`) updates
    memory first and then, when `sync_on_write` is enabled, calls `sync`, which rewrites the whole
    document. Memory is authoritative: if a write fails the in-memory mapping keeps the change and
    the file contents are unknown until the next successful `sync`.

    The store assumes it is the only writer of its file. There is no locking, so two stores (or two
    processes) writing the same path race each other.

    Warning:
        With `async_write` enabled, `sync` returns before the file is written. A failed background
        write cannot be caught by the caller; it is logged and raised as `AsyncWriteError` on the
        process-wide unhandled-failure channel (see `json_kv.writer`). Background writes are not
        ordered and may leave a stale file if several are in flight.
    """

    _path: Path
    _options: StoreOptions
    _data: dict[str, Any]
    _writer: BackgroundWriter

    def __init__(self, path: str | os.PathLike[str], options: StoreOptions | Mapping[str, Any] | None = None, **overrides: Any) -> None:
        """Open a store, loading the backing file if it exists.

        Args:
            path: The backing file. `.json` is appended if the path does not already end with it.
                Missing parent directories are created.
            options: A `StoreOptions`, or a mapping of option names (camelCase names such as
                `syncOnWrite` are accepted). Defaults apply to every option left unspecified.
            **overrides: Individual options, applied on top of `options`.

        Raises:
            InvalidPathError: If `path` is not a non-empty string or path-like object.
            StoreAccessError: If the file exists but is not readable and writable.
            StoreStatError: If the file cannot be examined for another reason.
            StoreReadError: If the file exists but its contents cannot be read.
            MalformedDocumentError: If the file is not empty and does not hold a JSON object.
        """
        self._path = normalize_path(path=path)
        self._options = resolve_options(options=options, overrides=overrides)
        self._data = {}
        self._writer = BackgroundWriter(path=self._path)

        _ = ensure_parent_directory(path=self._path)

        size: int | None = probe_file(path=self._path)

        if not size:
            logger.debug("Opened store without existing data", extra={"path": str(self._path)})
            return

        self._data = self._load()

        logger.debug("Loaded store", extra={"path": str(self._path), "keys": len(self._data)})

    def _load(self) -> dict[str, Any]:
        try:
            text = read_document_text(path=self._path)
            return self._options.codec.load_document(text=text)
        except (DeserializationError, UnicodeDecodeError) as e:
            logger.error(
                "The specified file is not empty and does not contain valid JSON.",
                extra={"path": str(self._path), "error": str(e)},
                exc_info=True,
            )
            raise MalformedDocumentError(path=str(self._path), cause=e) from e

    @property
    def path(self) -> Path:
        return self._path

    @property
    def options(self) -> StoreOptions:
        return self._options

    def init(self, key: str, value: Any) -> None:
        """Store `value` under `key` unless the key is already present."""
        if key not in self._data:
            self._data[key] = value

        self._sync_on_write()

    def set(self, key: str, value: Any) -> None:
        """Store `value` under `key`, replacing any existing value."""
        self._data[key] = value

        self._sync_on_write()

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under `key`, or `default` if the key is absent.

        A stored `None` and an absent key both return `None` with the default `default`; use `has`
        to tell them apart.
        """
        return self._data.get(key, default)

    def has(self, key: str) -> bool:
        return key in self._data

    def delete(self, key: str) -> bool:
        """Remove `key`, returning True if it was present and False if it was absent."""
        removed: bool = key in self._data
        if removed:
            del self._data[key]

        self._sync_on_write()

        return removed

    def delete_all(self) -> Self:
        """Remove every key, one `delete` at a time.

        With `sync_on_write` enabled this writes the document once per key.
        """
        for key in list(self._data):
            _ = self.delete(key=key)

        return self

    def keys(self) -> list[str]:
        return list(self._data)

    def sync(self) -> None:
        """Write the whole mapping to the backing file.

        Raises:
            StoreAccessError: If the write is blocking and the file may not be written.
            StoreWriteError: If the mapping cannot be serialized, or a blocking write fails.
        """
        try:
            text: str = self._options.codec.dump_document(document=self._data, indent=self._options.indent)
        except SerializationError as e:
            raise StoreWriteError(path=str(self._path), cause=e) from e

        if self._options.async_write:
            self._writer.dispatch(text=text)
            logger.debug("Dispatched background write", extra={"path": str(self._path)})
            return

        write_document(path=self._path, text=text)
        logger.debug("Synced store", extra={"path": str(self._path), "keys": len(self._data)})

    def document(self, replacement: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Return a deep copy of the whole mapping, optionally replacing it first.

        A replacement must survive an encode/decode round trip through the store's codec and decode
        to a string-keyed mapping. The decoded copy becomes the new mapping, so later changes to
        `replacement` do not leak into the store. Replacing does not write to disk.

        Raises:
            InvalidDocumentError: If `replacement` is not serializable. The store is left unchanged.
        """
        if replacement is not None:
            try:
                self._data = self._options.codec.copy_document(document=replacement)
            except (SerializationError, DeserializationError, TypeError, ValueError) as e:
                raise InvalidDocumentError(cause=e) from e

        return self._options.codec.copy_document(document=self._data)

    def wait_for_writes(self, timeout: float | None = None) -> None:
        """Block until background writes dispatched from threads without an event loop have finished."""
        self._writer.wait_for_writes(timeout=timeout)

    async def await_writes(self) -> None:
        """Wait for background writes dispatched from the running event loop."""
        await self._writer.await_writes()

    def _sync_on_write(self) -> None:
        if self._options.sync_on_write:
            self.sync()

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path={str(self._path)!r}, keys={len(self._data)})"
