"""Codecs for converting the store's mapping to and from document text.

A codec is the serialize/deserialize strategy of a store. `JSONCodec` is the default; `FunctionCodec`
adapts a pair of plain callables (for example `json.dumps` / `json.loads`, or `orjson` wrappers).
"""

import json
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

from typing_extensions import override

from json_kv.errors import DeserializationError, SerializationError


class DocumentCodec(ABC):
    """Base class for document codecs.

    Subclasses implement `dumps` and `loads`. The store only ever calls `dump_document` and
    `load_document`, which add the checks that the root of a document is a string-keyed mapping.
    """

    @abstractmethod
    def dumps(self, value: Any, *, indent: int | None = None) -> str:
        """Serialize a value to text, raising `SerializationError` on failure."""

    @abstractmethod
    def loads(self, text: str) -> Any:
        """Deserialize text to a value, raising `DeserializationError` on failure."""

    def dump_document(self, document: Mapping[str, Any], *, indent: int | None = None) -> str:
        return self.dumps(dict(document), indent=indent)

    def load_document(self, text: str) -> dict[str, Any]:
        return verify_dict(obj=self.loads(text))

    def copy_document(self, document: Mapping[str, Any]) -> dict[str, Any]:
        """Return an independent copy of a document by encoding and decoding it."""
        return self.load_document(text=self.dump_document(document=document))


class JSONCodec(DocumentCodec):
    """The standard JSON codec.

    Non-ASCII characters are written as-is (the file is UTF-8) and `NaN`/`Infinity` are rejected, so
    everything written can be read back by any JSON parser.

    The indentation comes from the caller of `dumps`; `None` or `0` produce compact output.
    """

    @override
    def dumps(self, value: Any, *, indent: int | None = None) -> str:
        try:
            if not indent:
                return json.dumps(value, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
            return json.dumps(value, ensure_ascii=False, allow_nan=False, indent=indent)
        except (TypeError, ValueError, RecursionError) as e:
            msg: str = f"Failed to serialize object to JSON: {e}"
            raise SerializationError(msg) from e

    @override
    def loads(self, text: str) -> Any:
        try:
            return json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            msg: str = f"Failed to deserialize JSON string: {e}"
            raise DeserializationError(msg) from e

    @override
    def __eq__(self, other: object) -> bool:
        return isinstance(other, JSONCodec)

    @override
    def __hash__(self) -> int:
        return hash(JSONCodec)

    @override
    def __repr__(self) -> str:
        return "JSONCodec()"


class FunctionCodec(DocumentCodec):
    """A codec built from a pair of callables.

    `serialize` is called as `serialize(value, indent=indent)` and must return text;
    `deserialize` is called as `deserialize(text)`. `json.dumps` and `json.loads` satisfy both.
    Any exception raised by either callable is chained into a `SerializationError` or a
    `DeserializationError`.
    """

    def __init__(self, serialize: Callable[..., str], deserialize: Callable[[str], Any]) -> None:
        self._serialize = serialize
        self._deserialize = deserialize

    @override
    def dumps(self, value: Any, *, indent: int | None = None) -> str:
        try:
            text = self._serialize(value, indent=indent)
        except Exception as e:
            msg: str = f"Failed to serialize object: {e}"
            raise SerializationError(msg) from e

        if not isinstance(text, str):
            msg = f"Serializer returned {type(text).__name__}, expected str"
            raise SerializationError(msg)

        return text

    @override
    def loads(self, text: str) -> Any:
        try:
            return self._deserialize(text)
        except Exception as e:
            msg: str = f"Failed to deserialize document: {e}"
            raise DeserializationError(msg) from e


def verify_dict(obj: Any) -> dict[str, Any]:
    if not isinstance(obj, Mapping):
        msg = "Object is not a dictionary"
        raise DeserializationError(msg)

    if not all(isinstance(key, str) for key in obj):  # pyright: ignore[reportUnknownVariableType]
        msg = "Object contains non-string keys"
        raise DeserializationError(msg)

    return dict(obj)  # pyright: ignore[reportUnknownArgumentType]
