"""Document-level error classes, raised when content cannot be encoded or decoded."""

from json_kv.errors.base import JSONStoreError


class DocumentError(JSONStoreError):
    """Base exception for all document-level errors."""


class SerializationError(DocumentError):
    """Raised when a value cannot be serialized by a codec."""


class DeserializationError(DocumentError):
    """Raised when text cannot be deserialized by a codec."""


class MalformedDocumentError(DocumentError):
    """Raised when the backing file is not empty and does not hold a valid document."""

    def __init__(self, path: str, cause: BaseException):
        super().__init__(
            message="The specified file is not empty and does not contain valid JSON.",
            extra_info={"path": path, "error": str(cause)},
        )


class InvalidDocumentError(DocumentError):
    """Raised when a replacement document is not serializable by the configured codec."""

    def __init__(self, cause: BaseException):
        super().__init__(
            message="Provided value is not a valid JSON object.",
            extra_info={"error": str(cause)},
        )
