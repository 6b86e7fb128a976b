"""Data models for tracks, player state and relay results."""
from nostrplaying.models.player import PlayerSnapshot
from nostrplaying.models.relay import RelayResult
from nostrplaying.models.track import Track

__all__ = [
    "PlayerSnapshot",
    "RelayResult",
    "Track",
]
