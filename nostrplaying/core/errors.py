"""Error kinds and the policy that decides whether the poll loop keeps going."""
import logging

logger = logging.getLogger(__name__)

EXIT = "exit"
SKIP = "skip"


class NostrPlayingError(Exception):
    """Base class for errors raised by nostrplaying."""


class ConfigError(NostrPlayingError):
    """Missing or invalid configuration (e.g. NOSTR_KEY)."""


class AuthError(NostrPlayingError):
    """Spotify authorization failed (state mismatch, code exchange)."""


class HandoffError(NostrPlayingError):
    """The session handoff was filled more than once."""


class FetchError(NostrPlayingError):
    """Spotify currently-playing request failed."""


class PlayedLogError(NostrPlayingError):
    """Played-track log could not be opened, read or written."""


class RelayError(NostrPlayingError):
    """A relay rejected the event or did not answer."""


class ErrorPolicy:
    """Maps error kinds to "exit" or "skip".

    handle() returns True when the loop should continue with the next
    cycle and False when it should stop.
    """

    def __init__(self, fetch_errors: str = EXIT, log_errors: str = EXIT) -> None:
        for value in (fetch_errors, log_errors):
            if value not in (EXIT, SKIP):
                raise ConfigError(f"Error policy must be '{EXIT}' or '{SKIP}', got {value!r}")
        self._actions = {
            FetchError: fetch_errors,
            PlayedLogError: log_errors,
        }

    def action_for(self, exc: BaseException) -> str:
        for kind, action in self._actions.items():
            if isinstance(exc, kind):
                return action
        return EXIT

    def handle(self, exc: BaseException) -> bool:
        action = self.action_for(exc)
        if action == SKIP:
            logger.warning("%s: %s (skipping this cycle)", type(exc).__name__, exc)
            return True
        logger.critical("%s: %s (stopping)", type(exc).__name__, exc)
        return False
