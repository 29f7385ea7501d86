"""In-memory fixed-window rate limiter keyed by client identity."""
from __future__ import annotations

import enum
import time
from dataclasses import dataclass, replace
from threading import Lock
from typing import Callable, Dict, Optional


class Decision(str, enum.Enum):
    """Outcome of a single rate-limit check."""

    ADMIT = "admit"
    REJECT = "reject"


@dataclass
class WindowState:
    count: int
    window_start: float


class RateLimiter:
    """Counts requests per client inside fixed windows.

    A window opens on a client's first request and is replaced by a fresh one on
    the first request that arrives more than ``window_seconds`` after it opened.
    Every request is recorded, including rejected ones.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        *,
        max_clients: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window = window_seconds
        # Zero or negative caps mean unbounded.
        self.max_clients = max_clients if max_clients and max_clients > 0 else None
        self._clock = clock
        self._windows: Dict[str, WindowState] = {}
        self._lock = Lock()
        self._last_sweep: Optional[float] = None

    def check_and_record(self, client_id: str, now: Optional[float] = None) -> Decision:
        """Record a request from ``client_id`` and decide whether to admit it."""

        with self._lock:
            if now is None:
                now = self._clock()
            self._maybe_sweep(now)

            state = self._windows.get(client_id)
            if state is None:
                self._windows[client_id] = WindowState(count=1, window_start=now)
                self._enforce_capacity(now, keep=client_id)
                return Decision.ADMIT

            # A request landing exactly on the boundary still belongs to the old window.
            if now - state.window_start > self.window:
                state.count = 1
                state.window_start = now
                return Decision.ADMIT

            state.count += 1
            if state.count > self.limit:
                return Decision.REJECT
            return Decision.ADMIT

    def allow(self, client_id: str) -> bool:
        return self.check_and_record(client_id) is Decision.ADMIT

    def snapshot(self, client_id: str) -> Optional[WindowState]:
        """Return a copy of the tracked window for ``client_id``, if any."""

        with self._lock:
            state = self._windows.get(client_id)
            return replace(state) if state else None

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
            self._last_sweep = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    def _maybe_sweep(self, now: float) -> None:
        if self._last_sweep is None:
            self._last_sweep = now
            return
        if now - self._last_sweep <= self.window:
            return
        self._sweep(now)

    def _sweep(self, now: float) -> None:
        # An expired entry decides exactly like a missing one, so dropping it is invisible.
        expired = [
            client_id
            for client_id, state in self._windows.items()
            if now - state.window_start > self.window
        ]
        for client_id in expired:
            del self._windows[client_id]
        self._last_sweep = now

    def _enforce_capacity(self, now: float, *, keep: str) -> None:
        if self.max_clients is None or len(self._windows) <= self.max_clients:
            return
        self._sweep(now)
        while len(self._windows) > self.max_clients:
            oldest = min(
                (cid for cid in self._windows if cid != keep),
                key=lambda cid: self._windows[cid].window_start,
            )
            del self._windows[oldest]
