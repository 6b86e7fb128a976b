"""Spotify OAuth callback: exchange the code and hand the client to the bootstrap thread."""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response

from nostrplaying.api.routes.player import MENU_HTML
from nostrplaying.api.state import AppState, get_state
from nostrplaying.config import OAUTH_STATE
from nostrplaying.core.errors import AuthError, HandoffError
from nostrplaying.core.spotify_client import exchange_code

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/callback")
def spotify_callback(
    code: str | None = None,
    state: str | None = None,
    app_state: AppState = Depends(get_state),
):
    """Complete the login; failures are logged and the login link stays usable."""
    if state != OAUTH_STATE:
        logger.error("State mismatch: %s != %s", state, OAUTH_STATE)
        return HTMLResponse("<body><p>Not found</p></body>", status_code=404)
    if app_state.handoff.filled:
        logger.warning("Callback after login already completed, ignoring")
        return HTMLResponse("<body><p>Already logged in.</p></body>" + MENU_HTML, status_code=409)
    try:
        client = exchange_code(code or "", state)
    except AuthError as e:
        logger.error("Spotify login failed: %s", e)
        return HTMLResponse("<body><p>Couldn't get token</p></body>", status_code=403)
    try:
        app_state.handoff.put(client)
    except HandoffError as e:
        logger.warning("%s", e)
        return HTMLResponse("<body><p>Already logged in.</p></body>" + MENU_HTML, status_code=409)
    return HTMLResponse("Login Completed!" + MENU_HTML)


@router.get("/")
def root(request: Request):
    logger.info("Got request for: %s", request.url)
    return Response()
