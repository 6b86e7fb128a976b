"""Sign "now playing" status events and publish them to Nostr relays."""
import json
import logging
import time
from typing import Callable, List, Sequence

from pynostr.event import Event
from pynostr.key import PrivateKey
from websockets.exceptions import WebSocketException
from websockets.sync.client import connect as ws_connect

from nostrplaying.config import NOSTR_EVENT_KIND, NOSTR_KEY, RELAY_TIMEOUT_SEC, RELAYS
from nostrplaying.core.errors import ConfigError, RelayError
from nostrplaying.models.relay import RelayResult

logger = logging.getLogger(__name__)


def load_private_key(value: str) -> PrivateKey:
    """Load the signing key from hex or nsec (bech32)."""
    value = (value or "").strip()
    if not value:
        raise ConfigError("NOSTR_KEY not set")
    try:
        if value.startswith("nsec"):
            return PrivateKey.from_nsec(value)
        return PrivateKey.from_hex(value)
    except Exception as e:
        raise ConfigError(f"NOSTR_KEY is not a valid hex or nsec key: {e}") from e


def build_event(
    private_key: PrivateKey,
    content: str,
    source_url: str,
    created_at: int | None = None,
) -> Event:
    """Build and sign a music status event (kind 30315, d=music, r=<source_url>)."""
    event = Event(
        content=content,
        pubkey=private_key.public_key.hex(),
        created_at=int(time.time()) if created_at is None else created_at,
        kind=NOSTR_EVENT_KIND,
        tags=[["d", "music"], ["r", source_url]],
    )
    event.sign(private_key.hex())
    return event


def _default_connect(url: str, timeout: float):
    return ws_connect(url, open_timeout=timeout, close_timeout=timeout)


def publish_to_relay(
    event: Event,
    url: str,
    timeout: float = RELAY_TIMEOUT_SEC,
    connect: Callable = _default_connect,
) -> RelayResult:
    """Send the event to one relay and wait for its OK.

    Raises RelayError when the relay closes or stays silent; connection
    errors from websockets propagate.
    """
    message = json.dumps(["EVENT", event.to_dict()])
    deadline = time.monotonic() + timeout
    with connect(url, timeout) as ws:
        ws.send(message)
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise RelayError(f"no OK from {url} within {timeout:.0f}s")
            raw = ws.recv(timeout=remaining)
            try:
                reply = json.loads(raw)
            except ValueError:
                logger.debug("%s: ignoring non-JSON frame", url)
                continue
            if not isinstance(reply, list) or not reply:
                continue
            if reply[0] == "OK" and len(reply) >= 3 and reply[1] == event.id:
                return RelayResult(
                    url=url,
                    ok=bool(reply[2]),
                    message=str(reply[3]) if len(reply) > 3 else "",
                )
            if reply[0] == "NOTICE":
                logger.info("%s: NOTICE %s", url, reply[1:] if len(reply) > 1 else "")


class Announcer:
    """Signs announcements with one key and fans them out to a fixed relay list."""

    def __init__(
        self,
        private_key: PrivateKey,
        relays: Sequence[str] = RELAYS,
        timeout: float = RELAY_TIMEOUT_SEC,
        connect: Callable = _default_connect,
    ) -> None:
        self.private_key = private_key
        self.relays = list(relays)
        self.timeout = timeout
        self._connect = connect

    @classmethod
    def from_config(cls) -> "Announcer":
        return cls(load_private_key(NOSTR_KEY))

    def announce(self, content: str, source_url: str) -> List[RelayResult]:
        """Publish to every relay in order; a failing relay is logged and skipped."""
        event = build_event(self.private_key, content, source_url)
        logger.info("Announcing %r (%s)", content, source_url)
        results = []
        for url in self.relays:
            try:
                result = publish_to_relay(event, url, self.timeout, self._connect)
            except (RelayError, WebSocketException, OSError) as e:
                logger.warning("Publish to %s failed: %s", url, e)
                results.append(RelayResult(url=url, ok=False, message=str(e)))
                continue
            if result.ok:
                logger.info("Published to %s: %s", url, result.message or "ok")
            else:
                logger.warning("Relay %s rejected event: %s", url, result.message)
            results.append(result)
        return results
