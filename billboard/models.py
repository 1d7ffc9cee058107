from dataclasses import dataclass


@dataclass(frozen=True)
class TrendingEntry:
    name: str
    # Multi-line blob, the artist is on the second line
    artist: str


@dataclass(frozen=True)
class ResolveResult:
    success: bool
    # Only meaningful when success is True
    url: str


@dataclass(frozen=True)
class SongRecord:
    name: str
    artist: str
    url: str
