"""Playback control endpoints; every response is the static action menu."""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from nostrplaying.api.state import AppState, get_state

logger = logging.getLogger(__name__)

router = APIRouter()

MENU_HTML = """
<br/>
<a href="/player/play">Play</a><br/>
<a href="/player/pause">Pause</a><br/>
<a href="/player/next">Next track</a><br/>
<a href="/player/previous">Previous Track</a><br/>
<a href="/player/shuffle">Shuffle</a><br/>
<a href="/player/nowplaying">Now Playing</a><br/>
"""

ACTIONS = ("play", "pause", "next", "previous", "shuffle", "nowplaying")


def _run_action(action: str, state: AppState) -> None:
    session = state.session
    if session is None:
        logger.warning("Player %s: not logged in to Spotify yet", action)
        return
    sp = session.client
    if action == "play":
        sp.start_playback()
    elif action == "pause":
        sp.pause_playback()
    elif action == "next":
        sp.next_track()
    elif action == "previous":
        sp.previous_track()
    elif action == "shuffle":
        sp.shuffle(session.toggle_shuffle())
    elif action == "nowplaying":
        outcome = state.poller.poll_once()
        logger.info("Now playing: %s (%s)", state.poller.now_playing, outcome)


@router.get("/{action}", response_class=HTMLResponse)
def player_action(action: str, state: AppState = Depends(get_state)):
    """Proxy one action to Spotify; errors are logged, the menu is always returned."""
    logger.info("Got request for: %s", action)
    if action not in ACTIONS:
        logger.warning("Unknown player action: %s", action)
    else:
        try:
            _run_action(action, state)
        except Exception as e:
            logger.error("Player %s failed: %s", action, e)
    return HTMLResponse(MENU_HTML)
