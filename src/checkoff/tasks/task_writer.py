# src/checkoff/tasks/task_writer.py

"""
Fire-and-forget task list writers.

The task store hands every committed snapshot to a SaveScheduler and returns
immediately. Writers here decide when the blob actually reaches storage:

- BackgroundTaskWriter: daemon thread, keeps only the newest pending blob.
- AsyncioTaskWriter: same policy for hosts that already run an event loop.
- InlineTaskWriter: saves synchronously (tests, single-shot scripts).

All of them log failed writes and drop them. Nothing is retried: the next
mutation produces a newer snapshot anyway.
"""

from __future__ import annotations

import asyncio
import logging
import threading

from ..core.ports import BlobPersistence
from ..storage.errors import StorageUnavailable

logger = logging.getLogger(__name__)


def _save_logged(persistence: BlobPersistence, blob: str) -> bool:
    try:
        persistence.save(blob)
    except StorageUnavailable as e:
        logger.warning("Unable to save tasks: %s", e)
        return False
    except Exception:
        logger.exception("Unexpected failure while saving tasks")
        return False
    logger.debug("Saved task list bytes=%d", len(blob))
    return True


class InlineTaskWriter:
    """Saves on the caller's thread. Same failure absorption as the async writers."""

    def __init__(self, persistence: BlobPersistence) -> None:
        self._persistence = persistence
        self.saved = 0
        self.failed = 0

    def submit(self, blob: str) -> None:
        if _save_logged(self._persistence, blob):
            self.saved += 1
        else:
            self.failed += 1

    def flush(self, timeout: float | None = None) -> bool:
        return True

    def close(self, timeout: float | None = None) -> bool:
        return True


class BackgroundTaskWriter:
    """
    Single daemon thread draining a one-slot mailbox.

    submit() overwrites the slot, so a burst of mutations collapses into one
    write of the latest state (last-write-wins). Every submit is eventually
    covered by a save of a state at least as recent.

    submit() never waits on storage, even after close(): a late blob either
    lands in the slot of a drain thread that is still alive (possibly stuck
    in a slow save) or starts a fresh drain thread. At most one drain thread
    runs at a time, so saves never overtake each other.
    """

    def __init__(self, persistence: BlobPersistence, *, name: str = "checkoff-writer") -> None:
        self._persistence = persistence
        self._name = name
        self._cond = threading.Condition()
        self._pending: str | None = None
        self._submitted = 0  # sequence number of the newest submit
        self._finished = 0  # sequence number covered by the last finished save
        self._closed = False
        self._draining = False  # a drain thread owns the slot
        self._thread: threading.Thread | None = None
        self.saved = 0
        self.failed = 0

        with self._cond:
            self._start_drain()
        logger.debug("Background writer started thread=%s", name)

    def _start_drain(self) -> None:
        """Caller holds the condition."""
        self._draining = True
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def submit(self, blob: str) -> None:
        with self._cond:
            self._submitted += 1
            self._pending = blob
            if self._draining:
                self._cond.notify_all()
                return
            # Closed and the previous drain already exited: one-shot drain for the late blob.
            logger.debug("Late submit after close; starting a one-shot drain")
            self._start_drain()

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until everything submitted so far has been written (or has failed)."""
        with self._cond:
            target = self._submitted
            return self._cond.wait_for(lambda: self._finished >= target, timeout=timeout)

    def close(self, timeout: float | None = None) -> bool:
        """Drain the pending blob and stop the thread. Returns False on timeout."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()
            thread = self._thread
        if thread is not None:
            thread.join(timeout=timeout)
        with self._cond:
            stopped = not self._draining
        if not stopped:
            logger.warning("Background writer did not stop within %.1fs", timeout or 0.0)
        return stopped

    def _record(self, ok: bool) -> None:
        if ok:
            self.saved += 1
        else:
            self.failed += 1

    def _run(self) -> None:
        while True:
            with self._cond:
                while self._pending is None and not self._closed:
                    self._cond.wait()
                if self._pending is None:
                    self._draining = False
                    self._cond.notify_all()
                    logger.debug("Background writer stopped (saved=%d failed=%d)", self.saved, self.failed)
                    return
                blob, self._pending = self._pending, None
                seq = self._submitted

            ok = _save_logged(self._persistence, blob)

            with self._cond:
                self._record(ok)
                self._finished = seq
                self._cond.notify_all()


class AsyncioTaskWriter:
    """
    Writer for hosts that own an asyncio loop.

    The blocking save runs in a worker thread via asyncio.to_thread; at most
    one drain task is alive and it always writes the newest pending blob.
    submit() is safe to call from other threads: such submits are counted
    until the loop picks them up, so flush() also waits for them.
    """

    def __init__(self, persistence: BlobPersistence, *, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._persistence = persistence
        self._loop = loop or asyncio.get_running_loop()
        self._pending: str | None = None
        self._drain_task: asyncio.Task[None] | None = None
        self._handoffs = 0  # cross-thread submits not yet seen by the loop
        self._handoff_lock = threading.Lock()
        self.saved = 0
        self.failed = 0

    def submit(self, blob: str) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._enqueue(blob)
            return

        with self._handoff_lock:
            self._handoffs += 1
        self._loop.call_soon_threadsafe(self._enqueue_handoff, blob)

    def _enqueue_handoff(self, blob: str) -> None:
        with self._handoff_lock:
            self._handoffs -= 1
        self._enqueue(blob)

    def _enqueue(self, blob: str) -> None:
        self._pending = blob
        if self._drain_task is None or self._drain_task.done():
            self._drain_task = self._loop.create_task(self._drain())

    async def _drain(self) -> None:
        while self._pending is not None:
            blob, self._pending = self._pending, None
            ok = await asyncio.to_thread(_save_logged, self._persistence, blob)
            if ok:
                self.saved += 1
            else:
                self.failed += 1

    def _has_handoffs(self) -> bool:
        with self._handoff_lock:
            return self._handoffs > 0

    async def flush(self) -> None:
        """Wait until every blob submitted so far (from any thread) has been written or has failed."""
        while True:
            if self._drain_task is not None and not self._drain_task.done():
                # a timed-out aclose() leaves the save running
                await asyncio.shield(self._drain_task)
            elif self._has_handoffs():
                # let queued call_soon_threadsafe callbacks run
                await asyncio.sleep(0)
            else:
                return

    async def aclose(self, timeout: float | None = None) -> bool:
        """Flush pending writes. Returns False if they did not finish within timeout."""
        try:
            await asyncio.wait_for(self.flush(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Asyncio writer did not drain within %.1fs", timeout or 0.0)
            return False
        return True
