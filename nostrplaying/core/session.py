"""One-shot session handoff and the session context shared by routes and the poll loop."""
import logging
import threading
from typing import Any

from nostrplaying.core.errors import HandoffError
from nostrplaying.models.player import PlayerSnapshot

logger = logging.getLogger(__name__)


class SessionHandoff:
    """Single-assignment slot: put() once, wait() blocks until a value arrives."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._value: Any = None
        self._filled = False
        self._cancelled = False

    def put(self, value: Any) -> None:
        with self._lock:
            if self._filled:
                raise HandoffError("Session was already handed off")
            self._value = value
            self._filled = True
        self._ready.set()

    def cancel(self) -> None:
        """Release waiters without a value (shutdown)."""
        self._cancelled = True
        self._ready.set()

    def wait(self, timeout: float | None = None) -> Any:
        """Return the handed-off value, or None on timeout/cancel."""
        if not self._ready.wait(timeout):
            return None
        with self._lock:
            return self._value if self._filled else None

    @property
    def filled(self) -> bool:
        return self._filled

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class Session:
    """Authenticated Spotify client plus the player snapshot taken after login."""

    def __init__(self, client: Any, player: PlayerSnapshot | None = None) -> None:
        self.client = client
        self._player = player or PlayerSnapshot()
        self._lock = threading.Lock()

    @property
    def player(self) -> PlayerSnapshot:
        with self._lock:
            return PlayerSnapshot(
                shuffle=self._player.shuffle,
                device_name=self._player.device_name,
                device_type=self._player.device_type,
            )

    def toggle_shuffle(self) -> bool:
        """Flip the local shuffle flag and return the new value (not re-synced from Spotify)."""
        with self._lock:
            self._player.shuffle = not self._player.shuffle
            return self._player.shuffle
