"""Player state snapshot captured after login."""
from dataclasses import dataclass


@dataclass
class PlayerSnapshot:
    """Last known shuffle flag and active device."""
    shuffle: bool = False
    device_name: str | None = None
    device_type: str | None = None


def snapshot_from_playback(pb: dict | None) -> PlayerSnapshot:
    """Map a Spotify current_playback() response; no active device gives an empty snapshot."""
    if not pb:
        return PlayerSnapshot()
    device = pb.get("device") or {}
    return PlayerSnapshot(
        shuffle=bool(pb.get("shuffle_state", False)),
        device_name=device.get("name"),
        device_type=device.get("type"),
    )
