"""URL parse results."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ParsedOk:
    """A URL that parsed cleanly.

    ``query_segments`` keeps the raw ``&``-separated segments in their
    original order so callers can filter and rejoin them without
    re-encoding anything.
    """

    raw: str
    scheme: str
    host: str
    path: str
    query_segments: tuple[str, ...] = field(default_factory=tuple)
    fragment: str = ""

    @property
    def ok(self) -> bool:
        return True

    @property
    def query(self) -> tuple[tuple[str, str], ...]:
        pairs: list[tuple[str, str]] = []
        for segment in self.query_segments:
            key, _, value = segment.partition("=")
            pairs.append((key, value))
        return tuple(pairs)

    @property
    def base(self) -> str:
        """Everything before the first ``?``."""
        return self.raw.split("?", 1)[0]


@dataclass(frozen=True)
class ParsedFallback:
    """A URL that could not be parsed; the original text is kept verbatim."""

    original: str
    error: str = ""

    @property
    def ok(self) -> bool:
        return False


ParsedUrl = ParsedOk | ParsedFallback
