"""Outcome of publishing one announcement to one relay."""
from dataclasses import dataclass


@dataclass
class RelayResult:
    url: str
    ok: bool
    message: str = ""
