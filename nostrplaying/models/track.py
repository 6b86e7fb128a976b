"""Track read from Spotify's currently-playing endpoint."""
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Track:
    """A playing track: name, artist names and external Spotify URL."""
    name: str
    artists: List[str] = field(default_factory=list)
    url: str = ""


def track_from_currently_playing(payload: dict | None) -> Track | None:
    """Map a Spotify currently_playing() response to a Track, or None if no track is playing."""
    if not payload:
        return None
    item = payload.get("item") or {}
    name = item.get("name")
    if not name:
        # Ads and podcast episodes come back without a usable track item
        return None
    artists = [a.get("name", "") for a in item.get("artists") or []]
    url = (item.get("external_urls") or {}).get("spotify", "")
    return Track(name=name, artists=artists, url=url)
