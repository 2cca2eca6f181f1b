"""
Background sync gating for favorites.

`SyncCoordinator` decides, per favorite key, whether a background push to the remote
store may start now. It does no I/O; it only tracks two facts per key:
- `last_sync_time`: when the last attempt *started* (throttle is measured from attempts,
  so a failing remote cannot be retried in a tight loop),
- `in_flight`: whether an attempt is running (at most one per key).

Both `should_sync` and `complete_sync` run under one lock, so the check and the state
flip in `should_sync` are a single step even with concurrent callers. The lock is never
held across an await; the push itself runs in `run_guarded_sync`, outside it.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Awaitable, Callable

from marinerkit.config.settings import Settings
from marinerkit.core.time import ensure_tz, format_since

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncState:
    """Snapshot of one key's sync bookkeeping."""

    last_sync_time: datetime | None = None
    in_flight: bool = False


class SyncOutcome(str, Enum):
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SyncCoordinator:
    """Per-key throttle + in-flight dedup for favorite syncs (thread- and task-safe)."""

    def __init__(self, throttle_window: timedelta = timedelta(seconds=10)):
        if throttle_window < timedelta(0):
            raise ValueError("throttle_window must be >= 0")
        self._default_window = throttle_window
        self._states: dict[str, SyncState] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> SyncCoordinator:
        return cls(timedelta(seconds=settings.sync.throttle_window_seconds))

    @property
    def throttle_window(self) -> timedelta:
        return self._default_window

    def should_sync(
        self,
        key: str,
        now: datetime | None = None,
        throttle_window: timedelta | None = None,
    ) -> bool:
        """Return True (and mark `key` in flight) if a sync may start now.

        A naive `now` is taken as UTC, matching the default clock.
        """
        now = _utcnow() if now is None else ensure_tz(now, "UTC")
        window = self._default_window if throttle_window is None else throttle_window
        with self._lock:
            state = self._states.get(key)
            if state is not None:
                if state.in_flight:
                    logger.debug("Skipping sync for %s - already in progress", key)
                    return False
                if state.last_sync_time is not None and now - state.last_sync_time < window:
                    logger.debug("Skipping sync for %s - throttled", key)
                    return False
            self._states[key] = SyncState(last_sync_time=now, in_flight=True)
        logger.debug("Starting sync for %s", key)
        return True

    def complete_sync(self, key: str) -> None:
        """Clear the in-flight flag; call on success and on failure alike."""
        with self._lock:
            state = self._states.get(key)
            if state is None:
                return
            self._states[key] = SyncState(last_sync_time=state.last_sync_time, in_flight=False)

    def status(self, key: str) -> SyncState | None:
        with self._lock:
            return self._states.get(key)

    def is_in_flight(self, key: str) -> bool:
        state = self.status(key)
        return bool(state and state.in_flight)


async def run_guarded_sync(
    coordinator: SyncCoordinator,
    key: str,
    push: Callable[[str], Awaitable[object]],
    *,
    now: datetime | None = None,
    throttle_window: timedelta | None = None,
) -> SyncOutcome:
    """Run `push(key)` if the coordinator allows it, always releasing the key afterwards.

    Transport errors are logged and reported as `FAILED`; they do not propagate.
    Cancellation does propagate, but the key is still released.
    """
    if not coordinator.should_sync(key, now=now, throttle_window=throttle_window):
        return SyncOutcome.SKIPPED
    try:
        await push(key)
    except Exception as exc:
        logger.warning("Sync failed for %s: %s", key, exc)
        return SyncOutcome.FAILED
    finally:
        coordinator.complete_sync(key)
    logger.info("Sync completed for %s", key)
    return SyncOutcome.SUCCEEDED


def status_label(state: SyncState | None, now: datetime) -> str:
    """Short status line for a favorites screen ("Syncing...", "Just now", ...)."""
    if state is not None and state.in_flight:
        return "Syncing..."
    return format_since(state.last_sync_time if state else None, now)
