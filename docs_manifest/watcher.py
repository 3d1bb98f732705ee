"""Regenerate the manifest whenever the docs tree changes.

A generation run is treated as one atomic unit. :class:`RegenerationScheduler`
guarantees that two runs never overlap and that at most one rerun is queued
while a run is in flight: any number of change notifications arriving during
a run collapse into a single follow-up run. Notifications are additionally
debounced so a burst of editor saves triggers one run.

File events come from a ``watchdog`` observer on the input directory; events
below skipped or dot-prefixed directories, and writes to the manifest
itself, are ignored.
"""

from __future__ import annotations

import logging
import os
import threading
import typing as typ
from pathlib import Path, PurePosixPath

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from docs_manifest._constants import SKIP_DIR_NAMES
from docs_manifest.generator import GenerationResult, ManifestGenerator

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from docs_manifest.config import SiteConfig

logger = logging.getLogger(__name__)

IGNORED_EVENT_TYPES = frozenset({"opened", "closed", "closed_no_write"})


class RegenerationScheduler:
    """Debounce change requests and coalesce them around in-flight runs.

    Parameters
    ----------
    action : Callable[[], None]
        The regeneration to run.
    debounce : float
        Seconds to wait after the latest :meth:`request` before running.
    on_error : Callable[[Exception], None], optional
        Receives exceptions raised by ``action``; defaults to logging them.
        A failed run never stops the scheduler.
    """

    def __init__(
        self,
        action: cabc.Callable[[], None],
        *,
        debounce: float = 0.15,
        on_error: cabc.Callable[[Exception], None] | None = None,
    ) -> None:
        self._action = action
        self._debounce = debounce
        self._on_error = on_error or self._log_error
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._timer: threading.Timer | None = None
        self._running = False
        self._pending = False
        self._closed = False

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending

    def request(self) -> None:
        """Schedule a run after the debounce window, restarting the window."""
        with self._lock:
            if self._closed:
                return
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self._debounce, self._on_timer)
            self._timer.daemon = True
            self._timer.start()

    def trigger(self) -> None:
        """Run now in the calling thread, or queue one rerun if already running."""
        with self._lock:
            if self._closed:
                return
            if self._running:
                self._pending = True
                return
            self._running = True
        self._drain()

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no run is in flight; return ``False`` on timeout."""
        with self._idle:
            return self._idle.wait_for(lambda: not self._running, timeout=timeout)

    def close(self, *, wait: bool = True) -> None:
        """Cancel any scheduled run and optionally wait for the current one."""
        with self._lock:
            self._closed = True
            self._pending = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        if wait:
            self.wait_idle()

    def _on_timer(self) -> None:
        with self._lock:
            self._timer = None
        self.trigger()

    def _drain(self) -> None:
        while True:
            try:
                self._action()
            except Exception as exc:  # noqa: BLE001 - reported via on_error
                self._on_error(exc)
            with self._lock:
                if self._pending and not self._closed:
                    self._pending = False
                    continue
                self._running = False
                self._idle.notify_all()
                return

    @staticmethod
    def _log_error(exc: Exception) -> None:
        logger.error("docs generation failed: %s", exc)


def should_ignore_path(rel_path: str, skip_dirs: cabc.Collection[str] = ()) -> bool:
    """Return ``True`` for paths under dot-prefixed or skipped directories."""
    skipped = SKIP_DIR_NAMES | frozenset(skip_dirs)
    return any(
        part.startswith(".") or part in skipped
        for part in PurePosixPath(rel_path).parts
    )


class DocsChangeHandler(FileSystemEventHandler):
    """Forward relevant docs tree events to a :class:`RegenerationScheduler`."""

    def __init__(
        self,
        root: Path,
        scheduler: RegenerationScheduler,
        *,
        skip_dirs: cabc.Collection[str] = (),
        ignored_files: cabc.Collection[Path] = (),
    ) -> None:
        super().__init__()
        self.root = root
        self.scheduler = scheduler
        self.skip_dirs = frozenset(skip_dirs)
        self.ignored_files = frozenset(path.resolve() for path in ignored_files)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in IGNORED_EVENT_TYPES:
            return
        candidates = [event.src_path, getattr(event, "dest_path", "")]
        if any(self.is_relevant(os.fsdecode(path)) for path in candidates if path):
            logger.debug("change detected: %s %s", event.event_type, event.src_path)
            self.scheduler.request()

    def is_relevant(self, raw_path: str) -> bool:
        path = Path(raw_path)
        if path.resolve() in self.ignored_files:
            return False
        try:
            rel_path = path.relative_to(self.root).as_posix()
        except ValueError:
            return False
        if rel_path == ".":
            return False
        return not should_ignore_path(rel_path, self.skip_dirs)


def watch_docs(
    config: SiteConfig,
    *,
    on_result: cabc.Callable[[GenerationResult], None] | None = None,
    on_error: cabc.Callable[[Exception], None] | None = None,
    stop: threading.Event | None = None,
) -> None:
    """Generate once, then regenerate on every relevant change until stopped.

    Parameters
    ----------
    config : SiteConfig
        Configuration shared by every run.
    on_result : Callable[[GenerationResult], None], optional
        Called after each successful run.
    on_error : Callable[[Exception], None], optional
        Called when a run fails; watching continues.
    stop : threading.Event, optional
        Ends the loop when set. Without it the loop runs until
        ``KeyboardInterrupt``.
    """

    def _regenerate() -> None:
        result = ManifestGenerator(config).run()
        if on_result is not None:
            on_result(result)

    scheduler = RegenerationScheduler(
        _regenerate, debounce=config.debounce_ms / 1000, on_error=on_error
    )
    scheduler.trigger()

    root = config.input_dir.resolve()
    handler = DocsChangeHandler(
        root,
        scheduler,
        skip_dirs=config.slugs.skip_dirs,
        ignored_files=[config.out_file],
    )
    observer = Observer()
    observer.schedule(handler, str(root), recursive=True)
    observer.start()
    stop_event = stop or threading.Event()
    try:
        while not stop_event.wait(0.5):
            pass
    except KeyboardInterrupt:
        logger.info("stopping docs watcher")
    finally:
        observer.stop()
        observer.join()
        scheduler.close()


__all__ = [
    "DocsChangeHandler",
    "RegenerationScheduler",
    "should_ignore_path",
    "watch_docs",
]
