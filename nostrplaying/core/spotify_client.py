"""Spotify API client via Spotipy: OAuth code exchange, cached token, playback calls."""
import logging

from spotipy import Spotify
from spotipy.cache_handler import CacheFileHandler
from spotipy.oauth2 import SpotifyOAuth

from nostrplaying.config import (
    OAUTH_STATE,
    SPOTIFY_CLIENT_ID,
    SPOTIFY_CLIENT_SECRET,
    SPOTIFY_REDIRECT_URI,
    SPOTIFY_SCOPES,
    SPOTIFY_TOKEN_CACHE,
)
from nostrplaying.core.errors import AuthError, FetchError
from nostrplaying.models.player import PlayerSnapshot, snapshot_from_playback
from nostrplaying.models.track import Track, track_from_currently_playing

logger = logging.getLogger(__name__)


def _oauth() -> SpotifyOAuth:
    cache = CacheFileHandler(cache_path=str(SPOTIFY_TOKEN_CACHE))
    return SpotifyOAuth(
        client_id=SPOTIFY_CLIENT_ID,
        client_secret=SPOTIFY_CLIENT_SECRET,
        redirect_uri=SPOTIFY_REDIRECT_URI,
        scope=SPOTIFY_SCOPES,
        state=OAUTH_STATE,
        cache_handler=cache,
        open_browser=False,
    )


def credentials_configured() -> bool:
    return bool(SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET)


def get_auth_url() -> str:
    """Return the Spotify authorization URL carrying the configured state token."""
    return _oauth().get_authorize_url(state=OAUTH_STATE)


def get_cached_client() -> Spotify | None:
    """Return a client from a still-valid cached token, or None if a login is needed."""
    if not credentials_configured():
        return None
    auth = _oauth()
    token_info = auth.validate_token(auth.cache_handler.get_cached_token())
    if token_info is None:
        return None
    return Spotify(auth_manager=auth)


def exchange_code(code: str, state: str | None) -> Spotify:
    """Validate the state token, exchange the code and return an authenticated client."""
    if state != OAUTH_STATE:
        raise AuthError(f"State mismatch: {state} != {OAUTH_STATE}")
    if not code:
        raise AuthError("Missing authorization code")
    if not credentials_configured():
        raise AuthError("SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET not set")
    auth = _oauth()
    try:
        auth.get_access_token(code=code, as_dict=False, check_cache=False)
    except Exception as e:
        raise AuthError(f"Couldn't get token: {e}") from e
    return Spotify(auth_manager=auth)


def fetch_currently_playing(sp) -> Track | None:
    """Return the currently playing track, None if nothing is playing."""
    try:
        payload = sp.currently_playing()
    except Exception as e:
        raise FetchError(f"couldn't get currently playing track: {e}") from e
    return track_from_currently_playing(payload)


def fetch_player_snapshot(sp) -> PlayerSnapshot:
    try:
        pb = sp.current_playback()
    except Exception as e:
        raise FetchError(f"couldn't get player state: {e}") from e
    return snapshot_from_playback(pb)
