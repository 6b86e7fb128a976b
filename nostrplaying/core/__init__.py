"""Core: session handoff, Spotify client, played log, announcer, poll loop."""
