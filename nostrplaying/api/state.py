"""Shared application state (injected into routes)."""
import threading

from nostrplaying.config import CREATE_PLAYED_LOG, FETCH_ERRORS, LOG_ERRORS, PLAYED_LOG_PATH
from nostrplaying.core.errors import ErrorPolicy
from nostrplaying.core.played_log import PlayedLog
from nostrplaying.core.poller import Poller
from nostrplaying.core.session import Session, SessionHandoff


class AppState:
    def __init__(self) -> None:
        self.handoff = SessionHandoff()
        self.played_log = PlayedLog(PLAYED_LOG_PATH, create=CREATE_PLAYED_LOG)
        self.policy = ErrorPolicy(fetch_errors=FETCH_ERRORS, log_errors=LOG_ERRORS)
        self.announcer = None
        self.stop_event = threading.Event()
        self._session: Session | None = None
        self._poller: Poller | None = None
        self._lock = threading.Lock()

    @property
    def session(self) -> Session | None:
        """Session once login has completed, else None."""
        with self._lock:
            return self._session

    @property
    def poller(self) -> Poller | None:
        with self._lock:
            return self._poller

    def start_session(self, session: Session) -> Poller:
        """Install the logged-in session and build its poller."""
        poller = Poller(session, self.played_log, self.announcer, policy=self.policy)
        with self._lock:
            self._session = session
            self._poller = poller
        return poller


_state = AppState()


def get_state() -> AppState:
    return _state
