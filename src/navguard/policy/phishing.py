"""Brand-protection phishing and lookalike heuristics."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
import threading
from typing import Iterable, Mapping

from navguard.domain.url.extract import bare_host
from navguard.domain.verdicts import PhishingVerdict

logger = logging.getLogger(__name__)

CONFIDENCE_KNOWN_DOMAIN = 100
CONFIDENCE_CHAR_SUBSTITUTION = 90
CONFIDENCE_LOOKALIKE_DOMAIN = 85
CONFIDENCE_RAW_IP = 75
CONFIDENCE_SUSPICIOUS_PATTERN = 70
CONFIDENCE_DEEP_SUBDOMAIN = 60

MAX_HOST_DOTS = 3


@dataclass(frozen=True)
class Brand:
    name: str
    domains: tuple[str, ...]

    def owns(self, host: str) -> bool:
        return any(host == domain or host.endswith(f".{domain}") for domain in self.domains)


PROTECTED_BRANDS = (
    Brand("paypal", ("paypal.com", "paypal.me")),
    Brand("google", ("google.com", "gmail.com", "accounts.google.com")),
    Brand("apple", ("apple.com", "icloud.com", "appleid.apple.com")),
    Brand("amazon", ("amazon.com", "aws.amazon.com")),
    Brand("microsoft", ("microsoft.com", "live.com", "outlook.com")),
    Brand("facebook", ("facebook.com", "fb.com", "meta.com")),
    Brand("netflix", ("netflix.com",)),
    Brand("bank", ("chase.com", "bankofamerica.com", "wellsfargo.com", "citi.com")),
)

LOOKALIKES: dict[str, tuple[str, ...]] = {
    "a": ("4", "@", "α"),
    "e": ("3", "€"),
    "i": ("1", "!", "l", "|"),
    "o": ("0",),
    "s": ("5", "$"),
    "l": ("1", "|", "i"),
}

# Single-character lookalikes such as paypa1.com are left to the
# substitution heuristic so they report as impersonation.
KNOWN_PHISHING_DOMAINS = (
    "paypal-verify.com",
    "paypal-secure.net",
    "google-login.net",
    "accounts-google.com",
    "apple-id-verify.com",
    "icloud-secure.net",
    "amazon-order.net",
    "amazon-secure.com",
    "facebook-login.net",
    "fb-verify.com",
    "netflix-update.com",
    "microsoft-verify.net",
    "chasebank-verify.com",
    "bankofamerica-secure.net",
    "secure-login-verify.com",
    "account-update-required.net",
    "verify-your-account.com",
    "payment-update.net",
)

SUSPICIOUS_PATTERNS = (
    re.compile(r"login.*verify"),
    re.compile(r"account.*suspended"),
    re.compile(r"update.*payment"),
    re.compile(r"secure.*login"),
    re.compile(r"verify.*identity"),
    re.compile(r"confirm.*account"),
)
_IPV4_PATTERN = re.compile(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}")


def lookalike_variants(brand: str, lookalikes: Mapping[str, Iterable[str]] = LOOKALIKES) -> list[str]:
    """Spellings of ``brand`` with exactly one character swapped for a homoglyph."""

    variants: list[str] = []
    for index, char in enumerate(brand):
        for substitute in lookalikes.get(char, ()):
            variants.append(f"{brand[:index]}{substitute}{brand[index + 1:]}")
    return list(dict.fromkeys(variants))


class PhishingDetector:
    """Ordered rule chain; the first rule that fires decides the verdict."""

    def __init__(
        self,
        known_domains: Iterable[str] = KNOWN_PHISHING_DOMAINS,
        *,
        brands: Iterable[Brand] = PROTECTED_BRANDS,
        lookalikes: Mapping[str, Iterable[str]] = LOOKALIKES,
        patterns: Iterable[re.Pattern[str]] = SUSPICIOUS_PATTERNS,
    ) -> None:
        self._lock = threading.Lock()
        self._known: frozenset[str] = frozenset(
            item.strip().lower() for item in known_domains if item and item.strip()
        )
        self.brands = tuple(brands)
        self.patterns = tuple(patterns)
        self._variants = {brand.name: lookalike_variants(brand.name, lookalikes) for brand in self.brands}

    def known_domains(self) -> frozenset[str]:
        return self._known

    def add_domain(self, domain: str) -> bool:
        entry = (domain or "").strip().lower()
        if not entry:
            return False
        with self._lock:
            if entry in self._known:
                return False
            self._known = self._known | {entry}
        logger.info("phishing blacklist add domain=%s", entry)
        return True

    def check(self, url: str | None) -> PhishingVerdict:
        raw = url or ""
        if not raw.strip():
            return PhishingVerdict()
        host = bare_host(raw) or raw.lower()
        lowered_url = raw.lower()

        if host in self._known:
            return PhishingVerdict(is_phishing=True, reason="Known phishing domain", confidence=CONFIDENCE_KNOWN_DOMAIN)

        for brand in self.brands:
            if brand.name in host and not brand.owns(host):
                return PhishingVerdict(
                    is_phishing=True,
                    reason=f"Suspicious {brand.name} lookalike domain",
                    confidence=CONFIDENCE_LOOKALIKE_DOMAIN,
                )
            if any(variant in host for variant in self._variants[brand.name]):
                return PhishingVerdict(
                    is_phishing=True,
                    reason=f"Possible {brand.name} impersonation (character substitution)",
                    confidence=CONFIDENCE_CHAR_SUBSTITUTION,
                )

        if any(pattern.search(lowered_url) for pattern in self.patterns):
            return PhishingVerdict(
                is_phishing=True,
                reason="Suspicious URL pattern detected",
                confidence=CONFIDENCE_SUSPICIOUS_PATTERN,
            )
        if host.count(".") > MAX_HOST_DOTS:
            return PhishingVerdict(
                is_phishing=True,
                reason="Unusually complex domain structure",
                confidence=CONFIDENCE_DEEP_SUBDOMAIN,
            )
        if _IPV4_PATTERN.search(raw):
            return PhishingVerdict(
                is_phishing=True,
                reason="URL contains IP address (suspicious)",
                confidence=CONFIDENCE_RAW_IP,
            )
        return PhishingVerdict()
