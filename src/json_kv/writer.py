"""Writing the serialized document to the backing file.

`write_document` blocks the caller. `BackgroundWriter` dispatches a write without blocking and
never reports its outcome to the caller: a failure is logged at CRITICAL and handed, as an
`AsyncWriteError`, to the process-wide unhandled-failure channel.

Background writes are not ordered with respect to each other. Two writes dispatched back to back
may overlap or finish out of order, leaving a stale or corrupted file behind. Join them with
`wait_for_writes` / `await_writes` and follow with a blocking write when the final file contents
matter.
"""

import asyncio
import logging
import os
import threading
import uuid
from pathlib import Path

from aiofile import async_open as aopen

from json_kv.errors import AsyncWriteError, StoreAccessError, StoreWriteError

logger = logging.getLogger(__name__)


def write_document(path: Path, text: str) -> None:
    """Overwrite `path` with `text`, blocking until done.

    Raises:
        StoreAccessError: If the process may not write the file.
        StoreWriteError: If the write fails for any other reason.
    """
    try:
        _ = path.write_text(text, encoding="utf-8")
    except PermissionError as e:
        raise StoreAccessError(path=str(path), operation="write") from e
    except OSError as e:
        raise StoreWriteError(path=str(path), cause=e) from e


async def write_document_async(path: Path, text: str) -> None:
    """Write `text` to a staging file beside `path`, then move it over `path`.

    The backing file is only replaced once the new contents are fully written, so a write that is
    cancelled or fails midway leaves the previous document in place.
    """
    staging = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")

    try:
        async with aopen(file_specifier=staging, mode="w", encoding="utf-8") as f:
            _ = await f.write(data=text)
        os.replace(staging, path)
    except BaseException:
        staging.unlink(missing_ok=True)
        raise


class BackgroundWriter:
    """Fire-and-forget writer for one backing file.

    When `dispatch` is called from a thread that runs an asyncio event loop, the write is scheduled
    as a task on that loop and performed with non-blocking file I/O; a failure is passed to
    `loop.call_exception_handler`. A task cancelled before it finishes, for example by `asyncio.run`
    shutting down its loop, counts as a failed write. Otherwise the write runs on a new (non-daemon)
    thread and a failure is raised out of that thread, reaching `threading.excepthook`.
    """

    _path: Path
    _lock: threading.Lock
    _threads: set[threading.Thread]
    _tasks: set["asyncio.Task[None]"]

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = threading.Lock()
        self._threads = set()
        self._tasks = set()

    def dispatch(self, text: str) -> None:
        try:
            loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            task: asyncio.Task[None] = loop.create_task(self._write_in_loop(text=text))
            with self._lock:
                self._tasks.add(task)
            task.add_done_callback(self._on_task_done)
            return

        thread = threading.Thread(target=self._write_in_thread, kwargs={"text": text}, name=f"json-kv-writer:{self._path}")
        with self._lock:
            self._prune_threads()
            self._threads.add(thread)
            thread.start()

    def wait_for_writes(self, timeout: float | None = None) -> None:
        """Block until the background threads dispatched so far have finished."""
        with self._lock:
            threads = list(self._threads)

        for thread in threads:
            thread.join(timeout=timeout)

        with self._lock:
            self._prune_threads()

    async def await_writes(self) -> None:
        """Wait for the loop tasks dispatched so far. Their failures stay with the loop's exception handler."""
        with self._lock:
            tasks = list(self._tasks)

        if tasks:
            _ = await asyncio.gather(*tasks, return_exceptions=True)

    def _fail(self, cause: BaseException) -> AsyncWriteError:
        logger.critical(
            "Background write of the store document failed",
            extra={"path": str(self._path), "error": str(cause)},
            exc_info=cause,
        )
        return AsyncWriteError(path=str(self._path), cause=cause)

    def _write_in_thread(self, text: str) -> None:
        try:
            _ = self._path.write_text(text, encoding="utf-8")
        except Exception as e:
            raise self._fail(cause=e) from e

        logger.debug("Background write completed", extra={"path": str(self._path)})

    def _prune_threads(self) -> None:
        # A finished thread may still be running threading.excepthook until it is no longer alive.
        self._threads = {thread for thread in self._threads if thread.is_alive()}

    async def _write_in_loop(self, text: str) -> None:
        try:
            await write_document_async(path=self._path, text=text)
        except Exception as e:
            raise self._fail(cause=e) from e

        logger.debug("Background write completed", extra={"path": str(self._path)})

    def _on_task_done(self, task: "asyncio.Task[None]") -> None:
        with self._lock:
            self._tasks.discard(task)

        error: BaseException | None
        if task.cancelled():
            # The loop shut down, or someone cancelled the task, before the document was written.
            error = self._fail(cause=asyncio.CancelledError("background write was cancelled before it completed"))
        elif (error := task.exception()) is None:
            return

        task.get_loop().call_exception_handler(
            {
                "message": "Background write of the store document failed",
                "exception": error,
                "task": task,
            }
        )
