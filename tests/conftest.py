"""Shared fakes: Spotify client, relay connections, signing key."""
import json

import pytest
from pynostr.key import PrivateKey

from nostrplaying.config import DEFAULT_RELAYS
from nostrplaying.core.announcer import Announcer
from nostrplaying.core.played_log import PlayedLog
from nostrplaying.core.session import Session


def playing(name, artists, url="https://open.spotify.com/track/x"):
    """Spotify currently_playing() payload for one track."""
    return {
        "is_playing": True,
        "item": {
            "name": name,
            "artists": [{"name": a} for a in artists],
            "external_urls": {"spotify": url},
        },
    }


class FakeSpotify:
    def __init__(self, current=None):
        self.current = current
        self.calls = []
        self.fail = None

    def currently_playing(self):
        if self.fail:
            raise self.fail
        return self.current

    def current_user(self):
        return {"id": "listener"}

    def current_playback(self):
        return {"shuffle_state": False, "device": {"name": "Desk", "type": "Computer"}}

    def start_playback(self):
        self.calls.append(("play",))

    def pause_playback(self):
        self.calls.append(("pause",))

    def next_track(self):
        self.calls.append(("next",))

    def previous_track(self):
        self.calls.append(("previous",))

    def shuffle(self, state):
        self.calls.append(("shuffle", state))


class FakeRelay:
    """Answers every EVENT with OK true."""

    def __init__(self, url, log):
        self.url = url
        self.log = log
        self._event_id = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def send(self, message):
        kind, event = json.loads(message)
        self.log.append((self.url, event))
        self._event_id = event["id"]

    def recv(self, timeout=None):
        return json.dumps(["OK", self._event_id, True, ""])


class RelayNetwork:
    """Connect factory recording one attempt per relay; some URLs refuse connections."""

    def __init__(self, down=()):
        self.down = set(down)
        self.attempts = []
        self.published = []

    def __call__(self, url, timeout):
        self.attempts.append(url)
        if url in self.down:
            raise ConnectionRefusedError(f"{url} refused")
        return FakeRelay(url, self.published)


@pytest.fixture
def private_key():
    return PrivateKey()


@pytest.fixture
def network():
    return RelayNetwork()


@pytest.fixture
def announcer(private_key, network):
    return Announcer(private_key, relays=DEFAULT_RELAYS, timeout=1.0, connect=network)


@pytest.fixture
def played_log(tmp_path):
    path = tmp_path / "previouslyPlayed.txt"
    path.touch()
    return PlayedLog(path)


@pytest.fixture
def spotify():
    return FakeSpotify()


@pytest.fixture
def session(spotify):
    return Session(spotify)
