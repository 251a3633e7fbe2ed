"""Tracker, ad and malware domain blocklist."""

from __future__ import annotations

import logging
import threading
from typing import Iterable

logger = logging.getLogger(__name__)

DEFAULT_WHITELIST = ("youtube.com", "googlevideo.com")

BLOCKED_TRACKER_DOMAINS = (
    # Analytics
    "google-analytics.com",
    "googletagmanager.com",
    "googleadservices.com",
    "doubleclick.net",
    "googlesyndication.com",
    "googletagservices.com",
    # Facebook
    "facebook.net",
    "fbcdn.net",
    "facebook.com/tr",
    "connect.facebook.net",
    # Twitter
    "ads-twitter.com",
    "analytics.twitter.com",
    # Session recording and product analytics
    "hotjar.com",
    "mixpanel.com",
    "segment.io",
    "amplitude.com",
    "newrelic.com",
    "nr-data.net",
    "fullstory.com",
    "mouseflow.com",
    "crazyegg.com",
    "luckyorange.com",
    # Ad networks
    "adnxs.com",
    "adsrvr.org",
    "advertising.com",
    "adform.net",
    "criteo.com",
    "criteo.net",
    "outbrain.com",
    "taboola.com",
    "amazon-adsystem.com",
    "media.net",
    "pubmatic.com",
)
BLOCKED_MALWARE_DOMAINS = (
    "malware.com",
    "phishing-site.com",
    "fake-bank.com",
    "virus-download.net",
    "steal-passwords.com",
    "tracking-ads.com",
    "crypto-scam.com",
    "free-iphone-winner.com",
    "your-computer-infected.com",
    "click-here-now.xyz",
)


def _normalize_entry(domain: str | None) -> str:
    return (domain or "").strip().lower()


class DomainBlocklist:
    """Substring matcher over a mutable set of blocked domains.

    Entries match anywhere in the lower-cased URL, so path-qualified entries
    such as ``facebook.com/tr`` work. Any whitelist token in the URL wins
    over every entry. The entry set is replaced wholesale on mutation, so a
    reader always sees one complete snapshot.
    """

    def __init__(
        self,
        domains: Iterable[str] = (),
        *,
        whitelist: Iterable[str] = DEFAULT_WHITELIST,
    ) -> None:
        self._lock = threading.Lock()
        self._domains: frozenset[str] = frozenset()
        self._ordered: tuple[str, ...] = ()
        self._replace(frozenset(entry for entry in (_normalize_entry(item) for item in domains) if entry))
        self._whitelist: tuple[str, ...] = tuple(
            entry for entry in (_normalize_entry(item) for item in whitelist) if entry
        )

    def _replace(self, domains: frozenset[str]) -> None:
        # Callers hold _lock, except during __init__.
        self._ordered = tuple(sorted(domains))
        self._domains = domains

    @classmethod
    def with_defaults(cls, extra: Iterable[str] = (), **kwargs) -> "DomainBlocklist":
        return cls((*BLOCKED_TRACKER_DOMAINS, *BLOCKED_MALWARE_DOMAINS, *extra), **kwargs)

    @property
    def whitelist(self) -> tuple[str, ...]:
        return self._whitelist

    def snapshot(self) -> frozenset[str]:
        return self._domains

    def __len__(self) -> int:
        return len(self._domains)

    def __contains__(self, domain: object) -> bool:
        return isinstance(domain, str) and _normalize_entry(domain) in self._domains

    def is_whitelisted(self, url: str | None) -> bool:
        lowered = (url or "").lower()
        return any(token in lowered for token in self._whitelist)

    def match(self, url: str | None) -> str | None:
        """Return the blocklist entry found in ``url``, or None."""

        lowered = (url or "").lower()
        if not lowered:
            return None
        if self.is_whitelisted(lowered):
            logger.debug("whitelisted url=%s", url)
            return None
        for entry in self._ordered:
            if entry in lowered:
                return entry
        return None

    def is_blocked(self, url: str | None) -> bool:
        return self.match(url) is not None

    def add(self, domain: str) -> bool:
        """Add ``domain``; returns False when it was empty or already present."""

        entry = _normalize_entry(domain)
        if not entry:
            return False
        with self._lock:
            if entry in self._domains:
                return False
            self._replace(self._domains | {entry})
        logger.info("blocklist add domain=%s", entry)
        return True

    def update(self, domains: Iterable[str]) -> int:
        entries = {entry for entry in (_normalize_entry(item) for item in domains) if entry}
        with self._lock:
            added = entries - self._domains
            if added:
                self._replace(self._domains | added)
        return len(added)

    def remove(self, domain: str) -> bool:
        entry = _normalize_entry(domain)
        with self._lock:
            if entry not in self._domains:
                return False
            self._replace(self._domains - {entry})
        logger.info("blocklist remove domain=%s", entry)
        return True
