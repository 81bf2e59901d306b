from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from ..models.pinned_file import PinnedFile
from .api import VaultApiError, guess_content_type

logger = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], Any]

PROGRESS_STEP = 5
PROGRESS_INTERVAL_SECONDS = 0.3
PROGRESS_CEILING = 95
NOTICE_SECONDS = 3.0
COPY_NOTICE_SECONDS = 2.0

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")
VIDEO_EXTENSIONS = (".mp4", ".webm", ".ogg")
AUDIO_EXTENSIONS = (".mp3", ".wav")
SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


class Tab(str, Enum):
    EXPLORE = "explore"
    UPLOAD = "upload"


def preview_kind_for_mime(content_type: str | None) -> str:
    ctype = (content_type or "").lower()
    for kind in ("image", "audio", "video"):
        if ctype.startswith(f"{kind}/"):
            return kind
    return "file"


def preview_kind_for_name(name: str) -> str:
    lowered = name.lower()
    if lowered.endswith(IMAGE_EXTENSIONS):
        return "image"
    if lowered.endswith(VIDEO_EXTENSIONS):
        return "video"
    if lowered.endswith(AUDIO_EXTENSIONS):
        return "audio"
    return "file"


def file_label(name: str) -> str:
    if "." not in name:
        return "FILE"
    return name.rsplit(".", 1)[-1].upper() or "FILE"


def format_file_size(size: int) -> str:
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[unit]}"


def _daemon_timer(interval: float, fn: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(interval, fn)
    timer.daemon = True
    return timer


class PreviewRegistry:
    """
    Local, revocable preview handles for selected files (the counterpart of
    browser object URLs). ``released`` records every handle actually revoked.
    """

    def __init__(self) -> None:
        self._live: dict[str, Path] = {}
        self.created: list[str] = []
        self.released: list[str] = []

    def create(self, path: Path) -> str:
        handle = f"preview:{uuid.uuid4().hex}"
        self._live[handle] = path
        self.created.append(handle)
        return handle

    def revoke(self, handle: str) -> bool:
        if self._live.pop(handle, None) is None:
            logger.warning("Preview handle %s is not live", handle)
            return False
        self.released.append(handle)
        return True

    @property
    def live(self) -> list[str]:
        return list(self._live)


@dataclass
class Notification:
    kind: str       # success | error | info
    message: str
    duration: float
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])


class NotificationCenter:
    """Transient notifications that dismiss themselves after their duration."""

    def __init__(self, timer_factory: TimerFactory = _daemon_timer,
                 on_show: Callable[[Notification], None] | None = None) -> None:
        self._timer_factory = timer_factory
        self._on_show = on_show
        self._timers: dict[str, Any] = {}
        self._lock = threading.Lock()
        self.active: list[Notification] = []

    def show(self, kind: str, message: str, duration: float = NOTICE_SECONDS) -> Notification:
        note = Notification(kind=kind, message=message, duration=duration)
        timer = self._timer_factory(duration, lambda: self.dismiss(note.id))
        with self._lock:
            self.active.append(note)
            self._timers[note.id] = timer
        timer.start()
        if self._on_show:
            self._on_show(note)
        return note

    def dismiss(self, note_id: str) -> None:
        with self._lock:
            self.active = [n for n in self.active if n.id != note_id]
            timer = self._timers.pop(note_id, None)
        if timer is not None:
            timer.cancel()

    def close(self) -> None:
        for note in list(self.active):
            self.dismiss(note.id)


class ProgressTicker:
    """
    Cosmetic progress: +step every interval up to ceiling. Not tied to bytes sent.
    """

    def __init__(self, on_tick: Callable[[int], None], *, step: int = PROGRESS_STEP,
                 interval: float = PROGRESS_INTERVAL_SECONDS, ceiling: int = PROGRESS_CEILING,
                 timer_factory: TimerFactory = _daemon_timer) -> None:
        self._on_tick = on_tick
        self.step = step
        self.interval = interval
        self.ceiling = ceiling
        self._timer_factory = timer_factory
        self._timer = None
        self._lock = threading.Lock()
        self.value = 0
        self.running = False

    def start(self) -> None:
        with self._lock:
            self.value = 0
            self.running = True
            self._schedule()

    def _schedule(self) -> None:
        self._timer = self._timer_factory(self.interval, self._tick)
        self._timer.start()

    def _tick(self) -> None:
        with self._lock:
            if not self.running:
                return
            self.value = min(self.value + self.step, self.ceiling)
            value = self.value
            if value >= self.ceiling:
                self.running = False
                self._timer = None
            else:
                self._schedule()
        self._on_tick(value)

    def cancel(self) -> None:
        with self._lock:
            self.running = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


@dataclass
class SelectedFile:
    path: Path
    name: str
    content_type: str


class PageController:
    """
    Headless explore/upload page state over a VaultApiClient-like ``api``
    (``list_files()`` and ``upload(path, content_type=, on_progress=)``).
    """

    def __init__(self, api, *, previews: PreviewRegistry | None = None,
                 notifications: NotificationCenter | None = None,
                 timer_factory: TimerFactory = _daemon_timer,
                 on_change: Callable[["PageController"], None] | None = None) -> None:
        self.api = api
        self.previews = previews or PreviewRegistry()
        self.notifications = notifications or NotificationCenter(timer_factory=timer_factory)
        self._timer_factory = timer_factory
        self._on_change = on_change
        self._progress_lock = threading.Lock()
        self._ticker: ProgressTicker | None = None
        self._opened = False

        self.active_tab = Tab.EXPLORE
        self.files: list[PinnedFile] = []
        self.is_loading = False
        self.selected: SelectedFile | None = None
        self.file_url: str | None = None
        self.local_preview: str | None = None
        self.is_uploading = False
        self.upload_progress = 0

    def _changed(self) -> None:
        if self._on_change:
            self._on_change(self)

    @property
    def file_type(self) -> str:
        return self.selected.content_type if self.selected else ""

    @property
    def preview_kind(self) -> str:
        return preview_kind_for_mime(self.file_type)

    @property
    def can_upload(self) -> bool:
        return self.selected is not None and not self.is_uploading

    def open(self) -> None:
        # initial display lists once
        if self._opened:
            return
        self._opened = True
        self.refresh_files()

    def set_tab(self, tab: Tab | str) -> None:
        self.active_tab = Tab(tab)
        self._changed()

    def refresh_files(self) -> None:
        self.is_loading = True
        self._changed()
        try:
            self.files = self.api.list_files()
        except VaultApiError:
            logger.exception("Error fetching files")
        finally:
            self.is_loading = False
            self._changed()

    def _release_local_preview(self) -> None:
        if self.local_preview is not None:
            self.previews.revoke(self.local_preview)
            if self.file_url == self.local_preview:
                self.file_url = None
            self.local_preview = None

    def select_file(self, path: str | Path, content_type: str | None = None) -> None:
        path = Path(path)
        self._release_local_preview()
        self.selected = SelectedFile(
            path=path,
            name=path.name,
            content_type=content_type if content_type is not None else guess_content_type(path),
        )
        self.local_preview = self.previews.create(path)
        self.file_url = self.local_preview
        self._changed()

    def _set_progress(self, value: int) -> None:
        with self._progress_lock:
            if value > self.upload_progress:
                self.upload_progress = value
        self._changed()

    def _on_transfer(self, bytes_read: int, total: int) -> None:
        if total <= 0:
            return
        self._set_progress(min(bytes_read * 100 // total, PROGRESS_CEILING))

    def _stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def upload(self) -> Optional[str]:
        """Upload the selected file; returns the remote URL, or None on refusal/failure."""
        if not self.can_upload:
            return None

        selected = self.selected
        self.is_uploading = True
        self.upload_progress = 0
        self._ticker = ProgressTicker(self._set_progress, timer_factory=self._timer_factory)
        self._ticker.start()
        self._changed()

        try:
            url = self.api.upload(selected.path, content_type=selected.content_type or None,
                                  on_progress=self._on_transfer)
        except (VaultApiError, OSError):
            self._stop_ticker()
            logger.exception("Error uploading file")
            self.notifications.show("error", "Failed to upload file")
            return None
        else:
            self._stop_ticker()
            with self._progress_lock:
                self.upload_progress = 100
            self._release_local_preview()
            self.file_url = url
            self.notifications.show("success", "File uploaded successfully to IPFS via Pinata!")
            self.refresh_files()
            self.active_tab = Tab.EXPLORE
            return url
        finally:
            self.is_uploading = False
            self._changed()

    def copy_cid(self, item: PinnedFile) -> str:
        self.notifications.show("info", "CID copied to clipboard", COPY_NOTICE_SECONDS)
        return item.content_hash

    def close(self) -> None:
        self._stop_ticker()
        self._release_local_preview()
        self.notifications.close()
