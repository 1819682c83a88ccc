"""Store-level error classes, raised around access to the backing file."""

from json_kv.errors.base import JSONStoreError


class StoreError(JSONStoreError):
    """Base exception for all file-system level store errors."""


class InvalidPathError(StoreError):
    """Raised when the supplied path is not a usable file path."""

    def __init__(self, path: object):
        super().__init__(
            message="Invalid file path.",
            extra_info={"path": repr(path)},
        )


class StoreAccessError(StoreError):
    """Raised when the backing file exists but cannot be read or written."""

    def __init__(self, path: str, operation: str):
        super().__init__(
            message=f'Cannot access path "{path}". Check permissions!',
            extra_info={"operation": operation},
        )


class StoreStatError(StoreError):
    """Raised when probing the backing file fails for a reason other than absence or permissions."""

    def __init__(self, path: str, cause: BaseException):
        super().__init__(
            message=f'Error checking path "{path}"',
            extra_info={"error": str(cause)},
        )


class StoreReadError(StoreError):
    """Raised when the backing file exists but its contents cannot be read."""

    def __init__(self, path: str, cause: BaseException):
        super().__init__(
            message=f'Read error at "{path}"',
            extra_info={"error": str(cause)},
        )


class StoreWriteError(StoreError):
    """Raised when a blocking write of the document fails."""

    def __init__(self, path: str, cause: BaseException):
        super().__init__(
            message=f'Write error at "{path}"',
            extra_info={"error": str(cause)},
        )


class AsyncWriteError(StoreError):
    """Raised when a background write fails.

    The caller of `sync` has already returned by the time this happens, so it is never raised to
    that caller. It is delivered to the process-wide unhandled-failure channel instead: the
    `threading.excepthook` of the writer thread, or the exception handler of the event loop that
    ran the write.
    """

    def __init__(self, path: str, cause: BaseException):
        super().__init__(
            message=f'Background write failed at "{path}"',
            extra_info={"error": str(cause)},
        )
