"""FastAPI app, Spotify login bootstrap and the background poll thread."""
import logging
import os
import signal
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI

from nostrplaying.config import LOG_LEVEL

# Configure logging in the worker process so poll-loop INFO logs are visible under uvicorn
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(levelname)s: %(name)s: %(message)s",
)

from nostrplaying.api.state import AppState, get_state
from nostrplaying.core.announcer import Announcer
from nostrplaying.core.errors import ConfigError, FetchError, PlayedLogError
from nostrplaying.core.session import Session
from nostrplaying.core.spotify_client import (
    credentials_configured,
    fetch_player_snapshot,
    get_auth_url,
    get_cached_client,
)

# Import routes after state to avoid circular imports
from nostrplaying.api.routes import auth, player

__all__ = ["app", "AppState", "get_state"]

logger = logging.getLogger(__name__)

_state = get_state()


def _request_shutdown() -> None:
    """Ask uvicorn to shut down cleanly (runs lifespan teardown)."""
    logger.critical("Shutting down")
    os.kill(os.getpid(), signal.SIGTERM)


def _bootstrap(state: AppState, stop_event: threading.Event) -> None:
    """Wait for the login handoff, capture player state, then run the poll loop."""
    client = state.handoff.wait()
    if client is None:
        return
    try:
        try:
            user = client.current_user()
        except Exception as e:
            raise FetchError(f"couldn't get current user: {e}") from e
        logger.info("You are logged in as: %s", (user or {}).get("id"))
        snapshot = fetch_player_snapshot(client)
    except FetchError as e:
        if not state.policy.handle(e):
            _request_shutdown()
            return
        snapshot = None
    if snapshot is not None and snapshot.device_name:
        logger.info("Found your %s (%s)", snapshot.device_type, snapshot.device_name)
    else:
        logger.info("No active Spotify device found")

    poller = state.start_session(Session(client, snapshot))
    poller.run(stop_event, on_fatal=_request_shutdown)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not credentials_configured():
        raise ConfigError("SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET not set")
    _state.announcer = Announcer.from_config()
    try:
        _state.played_log.ensure_exists()
    except PlayedLogError as e:
        if not _state.policy.handle(e):
            raise

    cached = get_cached_client()
    if cached is not None:
        logger.info("Using cached Spotify token")
        _state.handoff.put(cached)
    else:
        logger.info(
            "Please log in to Spotify by visiting the following page in your browser: %s",
            get_auth_url(),
        )

    _state.stop_event.clear()
    _bootstrap_thread = threading.Thread(
        target=_bootstrap,
        args=(_state, _state.stop_event),
        daemon=True,
    )
    _bootstrap_thread.start()

    yield

    _state.stop_event.set()
    _state.handoff.cancel()
    _bootstrap_thread.join(timeout=5.0)


app = FastAPI(
    title="nostrplaying",
    description="Announce the currently playing Spotify track to Nostr relays",
    lifespan=lifespan,
)

app.include_router(player.router, prefix="/player", tags=["player"])
app.include_router(auth.router, tags=["auth"])
