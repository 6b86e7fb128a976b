"""Announce the currently playing Spotify track to Nostr relays."""
__version__ = "0.1.0"
