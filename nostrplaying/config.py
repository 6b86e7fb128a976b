"""Configuration: env, Spotify credentials, Nostr key, relays, poll loop."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of nostrplaying package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so SPOTIFY_CLIENT_ID, NOSTR_KEY etc. are set
load_dotenv(BASE_DIR / ".env")


def _bool_env(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _list_env(name: str, default: tuple) -> tuple:
    raw = os.getenv(name, "")
    if not raw.strip():
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


# API
API_HOST = os.getenv("NOSTRPLAYING_HOST", "127.0.0.1")
API_PORT = int(os.getenv("NOSTRPLAYING_PORT", "8080"))
LOG_LEVEL = os.getenv("NOSTRPLAYING_LOG_LEVEL", "INFO").upper()

# Spotify (OAuth; token cached on disk after first login)
SPOTIFY_CLIENT_ID = os.getenv("SPOTIFY_CLIENT_ID", "")
SPOTIFY_CLIENT_SECRET = os.getenv("SPOTIFY_CLIENT_SECRET", "")
SPOTIFY_REDIRECT_URI = os.getenv("SPOTIFY_REDIRECT_URI", "http://localhost:8080/callback")
SPOTIFY_SCOPES = (
    "user-read-currently-playing user-read-recently-played "
    "user-read-playback-state user-modify-playback-state"
)
SPOTIFY_TOKEN_CACHE = Path(os.getenv("NOSTRPLAYING_TOKEN_CACHE", ".spotify-token"))
# Must come back unchanged on /callback
OAUTH_STATE = os.getenv("NOSTRPLAYING_OAUTH_STATE", "nostrplaying")

# Nostr
NOSTR_KEY = os.getenv("NOSTR_KEY", "")
NOSTR_EVENT_KIND = 30315  # NIP-38 user status
DEFAULT_RELAYS = (
    "wss://relay.damus.io",
    "wss://nos.lol",
    "wss://nostr.wine",
    "wss://eden.nostr.land",
    "wss://relay.snort.social",
    "wss://blastr.f7z.xyz",
    "wss://relay.primal.net",
    "wss://relayable.org",
)
RELAYS = _list_env("NOSTRPLAYING_RELAYS", DEFAULT_RELAYS)
RELAY_TIMEOUT_SEC = float(os.getenv("NOSTRPLAYING_RELAY_TIMEOUT", "10"))

# Poll loop
PLAYED_LOG_PATH = Path(os.getenv("NOSTRPLAYING_PLAYED_LOG", "previouslyPlayed.txt"))
CREATE_PLAYED_LOG = _bool_env("NOSTRPLAYING_CREATE_PLAYED_LOG")
POLL_INTERVAL_SEC = float(os.getenv("NOSTRPLAYING_POLL_INTERVAL", "120"))

# Error policy per kind: "exit" stops the process, "skip" waits for the next cycle
FETCH_ERRORS = os.getenv("NOSTRPLAYING_FETCH_ERRORS", "exit").lower()
LOG_ERRORS = os.getenv("NOSTRPLAYING_LOG_ERRORS", "exit").lower()
