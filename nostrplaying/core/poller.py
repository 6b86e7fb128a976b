"""Poll currently playing, dedup against the played log, announce new tracks."""
import logging
import threading
from typing import Callable

from nostrplaying.config import POLL_INTERVAL_SEC
from nostrplaying.core.errors import ErrorPolicy, NostrPlayingError
from nostrplaying.core.played_log import PlayedLog
from nostrplaying.core.spotify_client import fetch_currently_playing

logger = logging.getLogger(__name__)

IDLE = "idle"
DUPLICATE = "duplicate"
ANNOUNCED = "announced"


class Poller:
    """One poll cycle at a time; run() repeats it every interval until stopped."""

    def __init__(
        self,
        session,
        played_log: PlayedLog,
        announcer,
        policy: ErrorPolicy | None = None,
        interval_sec: float = POLL_INTERVAL_SEC,
        fetch: Callable = fetch_currently_playing,
    ) -> None:
        self.session = session
        self.played_log = played_log
        self.announcer = announcer
        self.policy = policy or ErrorPolicy()
        self.interval_sec = interval_sec
        self._fetch = fetch
        self._lock = threading.Lock()
        # Name of the last announced track; survives across cycles
        self.previous: str | None = None
        self.now_playing: str | None = None

    def poll_once(self) -> str:
        """Run one fetch/dedup/announce cycle and return its outcome.

        Raises FetchError or PlayedLogError; relay failures never reach the caller.
        """
        with self._lock:
            track = self._fetch(self.session.client)
            if track is None:
                logger.debug("Nothing playing")
                return IDLE
            self.now_playing = track.name

            if track.name in self.played_log.names() or track.name == self.previous:
                logger.info("Track already played before: %s", track.name)
                return DUPLICATE

            line = self.played_log.append(track)
            self.previous = track.name
            self.announcer.announce(line, track.url)
            return ANNOUNCED

    def run(self, stop_event: threading.Event, on_fatal: Callable[[], None] | None = None) -> None:
        """Poll until stop_event is set or the error policy says stop."""
        logger.info("Poll loop started (interval %.0fs)", self.interval_sec)
        while not stop_event.is_set():
            try:
                self.poll_once()
            except NostrPlayingError as e:
                if not self.policy.handle(e):
                    if on_fatal is not None:
                        on_fatal()
                    return
            if stop_event.wait(timeout=self.interval_sec):
                break
        logger.info("Poll loop stopped")
