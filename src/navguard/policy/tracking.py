"""Tracking query-parameter stripping."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable

from navguard.domain.url.extract import parse_url
from navguard.domain.url.models import ParsedFallback

logger = logging.getLogger(__name__)

TRACKING_PARAMS = (
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "fbclid",
    "gclid",
    "msclkid",
    "twclid",
    "igshid",
    "mc_eid",
    "mc_cid",
    "_ga",
    "_gl",
    "ref",
    "source",
)
# Streaming CDNs sign their chunk URLs over the full query string.
NO_REWRITE_HOSTS = ("googlevideo.com",)


@dataclass(frozen=True)
class StripResult:
    url: str
    removed: tuple[str, ...] = ()
    fallback: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.removed)


class TrackingParamStripper:
    """Removes tracking keys from query strings.

    A key is dropped when it equals, or starts with, any configured keyword.
    Surviving pairs keep their original order and encoding.
    """

    def __init__(
        self,
        params: Iterable[str] = TRACKING_PARAMS,
        *,
        no_rewrite_hosts: Iterable[str] = NO_REWRITE_HOSTS,
    ) -> None:
        self.params = tuple(dict.fromkeys(item.strip().lower() for item in params if item.strip()))
        self.no_rewrite_hosts = tuple(
            dict.fromkeys(item.strip().lower() for item in no_rewrite_hosts if item.strip())
        )

    def is_tracking_key(self, key: str) -> bool:
        name = key.lower()
        return any(name == param or name.startswith(param) for param in self.params)

    def is_exempt(self, url: str) -> bool:
        lowered = url.lower()
        return any(host in lowered for host in self.no_rewrite_hosts)

    def strip(self, url: str | None) -> StripResult:
        raw = url or ""
        if "?" not in raw or self.is_exempt(raw):
            return StripResult(url=raw)

        parsed = parse_url(raw)
        if isinstance(parsed, ParsedFallback):
            logger.debug("cannot parse url, leaving as is: %s (%s)", raw, parsed.error)
            return StripResult(url=raw, fallback=True)
        if not parsed.query_segments:
            return StripResult(url=raw)

        kept: list[str] = []
        removed: list[str] = []
        for segment in parsed.query_segments:
            key = segment.split("=", 1)[0]
            if self.is_tracking_key(key):
                removed.append(key.lower())
            else:
                kept.append(segment)
        if not removed:
            return StripResult(url=raw)

        cleaned = parsed.base
        if kept:
            cleaned = f"{cleaned}?{'&'.join(kept)}"
        if parsed.fragment:
            cleaned = f"{cleaned}#{parsed.fragment}"
        logger.debug("stripped tracking params %s from %s", removed, raw)
        return StripResult(url=cleaned, removed=tuple(removed))

    def clean_url(self, url: str | None) -> str:
        return self.strip(url).url
