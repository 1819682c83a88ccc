"""Error classes for JSON store operations.

Exception Hierarchy:
    JSONStoreError (base for all store errors)
    ├── StoreError (file-system level errors)
    │   ├── InvalidPathError
    │   ├── StoreAccessError
    │   ├── StoreStatError
    │   ├── StoreReadError
    │   ├── StoreWriteError
    │   └── AsyncWriteError
    └── DocumentError (document level errors)
        ├── MalformedDocumentError
        ├── InvalidDocumentError
        ├── SerializationError
        └── DeserializationError
"""

from json_kv.errors.base import ExtraInfoType, JSONStoreError
from json_kv.errors.document import (
    DeserializationError,
    DocumentError,
    InvalidDocumentError,
    MalformedDocumentError,
    SerializationError,
)
from json_kv.errors.store import (
    AsyncWriteError,
    InvalidPathError,
    StoreAccessError,
    StoreError,
    StoreReadError,
    StoreStatError,
    StoreWriteError,
)

__all__ = [
    "AsyncWriteError",
    "DeserializationError",
    "DocumentError",
    "ExtraInfoType",
    "InvalidDocumentError",
    "InvalidPathError",
    "JSONStoreError",
    "MalformedDocumentError",
    "SerializationError",
    "StoreAccessError",
    "StoreError",
    "StoreReadError",
    "StoreStatError",
    "StoreWriteError",
]
