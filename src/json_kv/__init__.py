"""json-kv - a key-value store persisted as a single JSON document."""

from json_kv.codec import DocumentCodec, FunctionCodec, JSONCodec
from json_kv.errors import (
    AsyncWriteError,
    DeserializationError,
    DocumentError,
    InvalidDocumentError,
    InvalidPathError,
    JSONStoreError,
    MalformedDocumentError,
    SerializationError,
    StoreAccessError,
    StoreError,
    StoreReadError,
    StoreStatError,
    StoreWriteError,
)
from json_kv.options import StoreOptions
from json_kv.store import JSONStore

__all__ = [
    "AsyncWriteError",
    "DeserializationError",
    "DocumentCodec",
    "DocumentError",
    "FunctionCodec",
    "InvalidDocumentError",
    "InvalidPathError",
    "JSONCodec",
    "JSONStore",
    "JSONStoreError",
    "MalformedDocumentError",
    "SerializationError",
    "StoreAccessError",
    "StoreError",
    "StoreOptions",
    "StoreReadError",
    "StoreStatError",
    "StoreWriteError",
]
