import pytest
from fastapi.testclient import TestClient

from conftest import FakeSpotify, playing
from nostrplaying.api.app import app
from nostrplaying.api.routes import auth
from nostrplaying.api.routes.player import MENU_HTML
from nostrplaying.api.state import AppState, get_state
from nostrplaying.config import OAUTH_STATE
from nostrplaying.core.errors import AuthError
from nostrplaying.core.session import Session
from nostrplaying.models.player import PlayerSnapshot


class RecordingAnnouncer:
    def __init__(self):
        self.calls = []

    def announce(self, content, source_url):
        self.calls.append(content)
        return []


@pytest.fixture
def app_state(played_log):
    state = AppState()
    state.played_log = played_log
    state.announcer = RecordingAnnouncer()
    app.dependency_overrides[get_state] = lambda: state
    yield state
    app.dependency_overrides.clear()


@pytest.fixture
def client(app_state):
    return TestClient(app)


@pytest.fixture
def logged_in(app_state):
    spotify = FakeSpotify()
    app_state.start_session(Session(spotify, PlayerSnapshot(shuffle=False)))
    return spotify


class TestPlayerRoutes:
    @pytest.mark.parametrize("action", ["play", "pause", "next", "previous"])
    def test_actions_proxy_to_spotify(self, client, logged_in, action):
        resp = client.get(f"/player/{action}")
        assert resp.status_code == 200
        assert resp.text == MENU_HTML
        assert logged_in.calls == [(action,)]

    def test_shuffle_toggles_snapshot(self, client, logged_in, app_state):
        client.get("/player/shuffle")
        client.get("/player/shuffle")
        assert logged_in.calls == [("shuffle", True), ("shuffle", False)]

    def test_nowplaying_runs_one_cycle(self, client, logged_in, app_state):
        logged_in.current = playing("Song B", ["Artist2"])
        resp = client.get("/player/nowplaying")
        assert resp.status_code == 200
        assert app_state.announcer.calls == ["Song B - [Artist2]"]

    def test_errors_still_render_menu(self, client, logged_in):
        logged_in.fail = RuntimeError("Spotify down")
        resp = client.get("/player/nowplaying")
        assert resp.status_code == 200
        assert "Now Playing" in resp.text

    def test_before_login(self, client):
        resp = client.get("/player/play")
        assert resp.status_code == 200
        assert resp.text == MENU_HTML

    def test_unknown_action(self, client, logged_in):
        resp = client.get("/player/rewind")
        assert resp.status_code == 200
        assert logged_in.calls == []


class TestCallback:
    def test_state_mismatch_does_not_hand_off(self, client, app_state):
        resp = client.get("/callback", params={"code": "abc", "state": "forged"})
        assert resp.status_code == 404
        assert not app_state.handoff.filled

    def test_exchange_failure(self, client, app_state, monkeypatch):
        def fail(code, state):
            raise AuthError("bad code")

        monkeypatch.setattr(auth, "exchange_code", fail)
        resp = client.get("/callback", params={"code": "abc", "state": OAUTH_STATE})
        assert resp.status_code == 403
        assert not app_state.handoff.filled

    def test_success_hands_off_once(self, client, app_state, monkeypatch):
        spotify = FakeSpotify()
        monkeypatch.setattr(auth, "exchange_code", lambda code, state: spotify)
        resp = client.get("/callback", params={"code": "abc", "state": OAUTH_STATE})
        assert resp.status_code == 200
        assert resp.text.startswith("Login Completed!")
        assert app_state.handoff.wait(timeout=0) is spotify

        again = client.get("/callback", params={"code": "abc", "state": OAUTH_STATE})
        assert again.status_code == 409
        assert app_state.handoff.wait(timeout=0) is spotify


def test_root_is_a_noop(client):
    assert client.get("/").status_code == 200
