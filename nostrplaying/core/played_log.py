"""Append-only text log of announced tracks, used as a set of track names."""
import logging
import os
from pathlib import Path
from typing import Iterable, List, Set

from nostrplaying.core.errors import PlayedLogError
from nostrplaying.models.track import Track

logger = logging.getLogger(__name__)

SEPARATOR = " - "


def format_artists(artists: Iterable[str]) -> str:
    """Render artists as "[A B]" so new lines match logs written by earlier versions."""
    return "[" + " ".join(artists) + "]"


def format_record(track: Track) -> str:
    """One log line (without newline): "<name> - [<artists>]"."""
    return f"{track.name}{SEPARATOR}{format_artists(track.artists)}"


def parse_name(line: str) -> str | None:
    """Return the track name of a log line, or None for a malformed line.

    Records end in the bracketed artist list, so the name is everything
    before the last " - [". Lines without that tail fall back to the text
    before the first " - ".
    """
    if line.endswith("]"):
        idx = line.rfind(SEPARATOR + "[")
        if idx >= 0:
            return line[:idx]
    idx = line.find(SEPARATOR)
    if idx < 0:
        return None
    return line[:idx]


class PlayedLog:
    """Played-track log at a fixed path. The file must exist unless create=True."""

    def __init__(self, path: Path, create: bool = False) -> None:
        self.path = Path(path)
        self.create = create

    def ensure_exists(self) -> None:
        if self.path.exists():
            return
        if not self.create:
            raise PlayedLogError(f"couldn't open file: {self.path} does not exist")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch()
        except OSError as e:
            raise PlayedLogError(f"couldn't create file {self.path}: {e}") from e
        logger.info("Created played log %s", self.path)

    def lines(self) -> List[str]:
        self.ensure_exists()
        try:
            with self.path.open("r", encoding="utf-8") as f:
                return [line.rstrip("\r\n") for line in f]
        except (OSError, UnicodeDecodeError) as e:
            raise PlayedLogError(f"couldn't read file {self.path}: {e}") from e

    def names(self) -> Set[str]:
        """Set of track names already logged. Malformed lines are skipped with a warning."""
        out = set()
        for lineno, line in enumerate(self.lines(), start=1):
            if not line:
                continue
            name = parse_name(line)
            if name is None:
                logger.warning("%s:%d: no %r separator, ignoring line", self.path, lineno, SEPARATOR)
                continue
            out.add(name)
        return out

    def append(self, track: Track) -> str:
        """Append the record for track and return the written line (without newline)."""
        self.ensure_exists()
        line = format_record(track)
        try:
            # Hand-edited files may lack a trailing newline
            needs_newline = False
            if self.path.stat().st_size > 0:
                with self.path.open("rb") as f:
                    f.seek(-1, os.SEEK_END)
                    needs_newline = f.read(1) != b"\n"
            with self.path.open("a", encoding="utf-8") as f:
                if needs_newline:
                    f.write("\n")
                f.write(line + "\n")
        except OSError as e:
            raise PlayedLogError(f"couldn't write to file {self.path}: {e}") from e
        return line
