"""Background file watcher feeding debounced change batches to the reload hub."""

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

CREATED = "created"
MODIFIED = "modified"
DEBOUNCE_SECONDS = 0.1

FULL_RELOAD = "full-reload"
CSS_CHANGE = "css-change"


@dataclass(frozen=True)
class ChangeEvent:
    paths: FrozenSet[str]
    kind: str


@dataclass(frozen=True)
class ChangeBatch:
    files: FrozenSet[str]


@dataclass(frozen=True)
class ReloadMessage:
    kind: str
    files: tuple

    def to_json(self) -> dict:
        return {"type": self.kind, "files": list(self.files)}


def classify(batch: ChangeBatch) -> ReloadMessage:
    files = tuple(sorted(batch.files))
    if files and all(f.endswith(".css") for f in files):
        return ReloadMessage(CSS_CHANGE, files)
    return ReloadMessage(FULL_RELOAD, files)


# -------- watchdog thread -> event loop --------
class _EventBridge(FileSystemEventHandler):
    def __init__(self, watcher):
        self.watcher = watcher

    def on_created(self, event):
        if not event.is_directory:
            self.watcher.feed(ChangeEvent(frozenset([event.src_path]), CREATED))

    def on_modified(self, event):
        if not event.is_directory:
            self.watcher.feed(ChangeEvent(frozenset([event.src_path]), MODIFIED))

    def on_moved(self, event):
        # editors that save through a temp file and rename show up as moves
        if not event.is_directory:
            self.watcher.feed(ChangeEvent(frozenset([event.dest_path]), CREATED))


class ChangeWatcher:
    def __init__(self, root, extensions: Iterable[str], hub,
                 delay: float = DEBOUNCE_SECONDS, observer_factory=Observer):
        self.root = Path(root)
        self.extensions = frozenset(e.lower().lstrip(".") for e in extensions)
        self.hub = hub
        self.delay = delay
        self.observer_factory = observer_factory
        self.observer = None
        self.task: Optional[asyncio.Task] = None
        self.pending = set()
        self._loop = None
        self._queue = None

    @property
    def running(self) -> bool:
        return self.task is not None and not self.task.done()

    def start(self, observe: bool = True) -> bool:
        """Start the consumer task and, with ``observe``, the watchdog observer.

        Returns False and leaves the watcher stopped when the root cannot be
        watched.
        """
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        if observe:
            try:
                if not self.root.is_dir():
                    raise NotADirectoryError(f"{self.root} is not a directory")
                observer = self.observer_factory()
                observer.schedule(_EventBridge(self), str(self.root), recursive=True)
                observer.start()
            except OSError as exc:
                logger.error("Live reload disabled, cannot watch %s: %s", self.root, exc)
                return False
            self.observer = observer
        self.task = self._loop.create_task(self.run())
        logger.info("Watching %s for changes", self.root)
        return True

    async def stop(self):
        if self.observer is not None:
            observer, self.observer = self.observer, None
            observer.stop()
            await asyncio.to_thread(observer.join)
        if self.task is not None:
            task, self.task = self.task, None
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self.pending.clear()

    def feed(self, event: ChangeEvent):
        """Hand a raw event to the consumer loop; safe from any thread."""
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._queue.put_nowait, event)

    def accept(self, event: ChangeEvent) -> bool:
        if event.kind not in (CREATED, MODIFIED):
            return False
        matched = {p for p in event.paths if self._watched(p)}
        self.pending.update(self._relative(p) for p in matched)
        return bool(matched)

    def _watched(self, path: str) -> bool:
        ext = os.path.splitext(path)[1].lower().lstrip(".")
        return ext in self.extensions

    def _relative(self, path: str) -> str:
        for base in (self.root, self.root.resolve()):
            try:
                return Path(path).relative_to(base).as_posix()
            except ValueError:
                continue
        return Path(path).as_posix()

    async def run(self):
        loop = asyncio.get_running_loop()
        deadline = None
        try:
            while True:
                timeout = None if deadline is None else max(0.0, deadline - loop.time())
                try:
                    event = await asyncio.wait_for(self._queue.get(), timeout)
                except asyncio.TimeoutError:
                    deadline = None
                    try:
                        await self.flush()
                    except Exception:
                        logger.exception("Failed to broadcast file changes")
                    continue
                if self.accept(event):
                    deadline = loop.time() + self.delay
        finally:
            self.pending.clear()

    async def flush(self):
        if not self.pending:
            return
        batch = ChangeBatch(frozenset(self.pending))
        self.pending.clear()
        message = classify(batch)
        logger.info("File changed: %s", ", ".join(message.files))
        await self.hub.broadcast(message)
