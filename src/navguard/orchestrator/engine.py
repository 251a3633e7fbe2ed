"""Policy engine: one call per navigation or download."""

from __future__ import annotations

from collections import Counter
import logging
import threading
from typing import Callable, Iterable, Protocol

from navguard.domain.url.extract import DEFAULT_SEARCH_URL_TEMPLATE, is_plain_http, normalize_address
from navguard.domain.verdicts import (
    Allowed,
    Blocked,
    DownloadVerdict,
    PhishingVerdict,
    SecurityLevel,
)
from navguard.orchestrator.state import PolicyState
from navguard.policy.blocklist import DomainBlocklist
from navguard.policy.downloads import DownloadRiskClassifier
from navguard.policy.phishing import PhishingDetector
from navguard.policy.profiles import ProfileId, ProfileSettings, ProfileStore
from navguard.policy.tracking import TrackingParamStripper

logger = logging.getLogger(__name__)

REASON_HTTPS_ONLY = "HTTPS-only mode"
REASON_BLOCKLIST = "tracker/malware"
REASON_PHISHING = "phishing"

REFERRER_NO_REFERRER = "no-referrer"
REFERRER_DEFAULT = "strict-origin-when-cross-origin"

STAT_KEYS = (
    "trackers_blocked",
    "profile_blocks",
    "https_only_blocks",
    "https_upgrades",
    "urls_rewritten",
    "phishing_flags",
    "dangerous_downloads",
)


class PanicHandler(Protocol):
    def __call__(self) -> None: ...


def upgrade_to_https(url: str) -> str:
    if is_plain_http(url):
        return f"https://{url[len('http://'):]}"
    return url


def _toggle(name: str, doc: str) -> property:
    def getter(self: "PolicyEngine") -> bool:
        return getattr(self._state, name)

    def setter(self: "PolicyEngine", value: bool) -> None:
        self.set_toggles(**{name: value})

    return property(getter, setter, doc=doc)


class PolicyEngine:
    """Composes the policy services behind ``evaluate``/``classify_download``.

    All shared state lives in an immutable :class:`PolicyState` that is
    swapped under ``_lock``; evaluation reads one state object and one
    profile record up front and never observes a half-applied switch.
    """

    def __init__(
        self,
        *,
        blocklist: DomainBlocklist,
        stripper: TrackingParamStripper,
        phishing: PhishingDetector,
        downloads: DownloadRiskClassifier,
        profiles: ProfileStore,
        state: PolicyState | None = None,
        search_url_template: str = DEFAULT_SEARCH_URL_TEMPLATE,
        block_phishing: bool = False,
        on_blocklist_change: Callable[[frozenset[str]], None] | None = None,
        on_profile_switch: Callable[[ProfileId], None] | None = None,
        panic_handlers: Iterable[PanicHandler] = (),
    ) -> None:
        self.blocklist = blocklist
        self.stripper = stripper
        self.phishing = phishing
        self.downloads = downloads
        self.profiles = profiles
        self.search_url_template = search_url_template
        self.block_phishing = block_phishing
        self._lock = threading.RLock()
        # Serializes blocklist edits with their change notifications.
        self._blocklist_lock = threading.RLock()
        self._state = state or PolicyState()
        self._stats: Counter[str] = Counter({key: 0 for key in STAT_KEYS})
        self._on_blocklist_change = on_blocklist_change
        self._on_profile_switch = on_profile_switch
        self._panic_handlers: list[PanicHandler] = list(panic_handlers)

    # -- state -----------------------------------------------------------

    @property
    def state(self) -> PolicyState:
        return self._state

    @property
    def active_profile(self) -> ProfileId:
        return self._state.active_profile

    def active_settings(self) -> ProfileSettings:
        with self._lock:
            return self.profiles.get(self._state.active_profile)

    def _snapshot(self) -> tuple[PolicyState, ProfileSettings]:
        with self._lock:
            state = self._state
            return state, self.profiles.get(state.active_profile)

    force_https = _toggle("force_https", "Upgrade http:// navigations to https://.")
    https_only = _toggle("https_only", "Refuse http:// navigations outright.")
    private_mode = _toggle("private_mode", "Do not record history.")
    clear_on_exit = _toggle("clear_on_exit", "Wipe browsing data when the shell exits.")
    block_trackers = _toggle("block_trackers", "Apply the tracker blocklist.")
    block_ads = _toggle("block_ads", "Apply the ad blocklist.")
    javascript_enabled = _toggle("javascript_enabled", "Allow page scripts.")
    block_referrer = _toggle("block_referrer", "Send no Referer header.")
    send_do_not_track = _toggle("send_do_not_track", "Send the DNT header.")
    block_third_party_cookies = _toggle("block_third_party_cookies", "Refuse third-party cookies.")

    def set_toggles(self, **flags: bool) -> PolicyState:
        with self._lock:
            self._state = self._state.with_toggles(**flags)
            return self._state

    def switch_profile(self, profile_id: ProfileId | str) -> ProfileSettings:
        key = ProfileId.parse(profile_id)
        with self._lock:
            settings = self.profiles.get(key)
            self._state = self._state.with_profile(key, settings)
        logger.info("switched profile=%s", key.value)
        self._notify(self._on_profile_switch, key)
        return settings

    # -- blocklists ------------------------------------------------------

    def add_blocked_domain(self, domain: str) -> bool:
        with self._blocklist_lock:
            added = self.blocklist.add(domain)
            if added:
                self._notify(self._on_blocklist_change, self.blocklist.snapshot())
        return added

    def remove_blocked_domain(self, domain: str) -> bool:
        with self._blocklist_lock:
            removed = self.blocklist.remove(domain)
            if removed:
                self._notify(self._on_blocklist_change, self.blocklist.snapshot())
        return removed

    def blocked_domains(self) -> frozenset[str]:
        return self.blocklist.snapshot()

    def add_phishing_domain(self, domain: str) -> bool:
        return self.phishing.add_domain(domain)

    # -- evaluation ------------------------------------------------------

    def evaluate(self, raw_url: str | None) -> Allowed | Blocked:
        state, settings = self._snapshot()
        url = normalize_address(raw_url, search_url_template=self.search_url_template)

        if state.https_only and is_plain_http(url):
            self._count("https_only_blocks")
            logger.info("blocked by https-only mode url=%s", url)
            return Blocked(
                reason=REASON_HTTPS_ONLY,
                category="https_only",
                url=url,
                detail="This site uses insecure HTTP. Connection blocked.",
            )

        if state.force_https and is_plain_http(url):
            url = upgrade_to_https(url)
            self._count("https_upgrades")

        stripped = self.stripper.strip(url)
        if stripped.changed:
            self._count("urls_rewritten")
        url = stripped.url

        if settings.should_block_site(url):
            self._count("profile_blocks")
            logger.info("blocked by profile=%s url=%s", state.active_profile.value, url)
            return Blocked(reason=settings.block_message, category="profile", url=url)

        if state.block_trackers or state.block_ads:
            entry = self.blocklist.match(url)
            if entry is not None:
                self._count("trackers_blocked")
                logger.info("blocked domain (%s) url=%s", entry, url)
                return Blocked(
                    reason=REASON_BLOCKLIST,
                    category="blocklist",
                    url=url,
                    detail=f"matched {entry}",
                )

        verdict = self.phishing.check(url)
        if verdict.is_phishing:
            self._count("phishing_flags")
            if self.block_phishing:
                logger.info("blocked phishing url=%s reason=%s", url, verdict.reason)
                return Blocked(
                    reason=REASON_PHISHING,
                    category="phishing",
                    url=url,
                    detail=verdict.reason or "",
                )

        return Allowed(url=url, rewritten=url != (raw_url or "").strip(), phishing=verdict)

    def should_block_site(self, url: str | None) -> bool:
        return self.active_settings().should_block_site(url)

    def check_phishing(self, url: str | None) -> PhishingVerdict:
        return self.phishing.check(url)

    def classify_download(self, filename: str | None) -> DownloadVerdict:
        verdict = self.downloads.classify(filename)
        if verdict.is_dangerous:
            self._count("dangerous_downloads")
        return verdict

    def is_https_violation(self, url: str | None) -> bool:
        return self._state.https_only and is_plain_http(url)

    def upgrade_to_https(self, url: str | None) -> str:
        raw = url or ""
        return upgrade_to_https(raw) if self._state.force_https else raw

    def security_level(self, url: str | None) -> SecurityLevel:
        raw = url or ""
        if not raw:
            return SecurityLevel.UNKNOWN
        if self.blocklist.is_blocked(raw):
            return SecurityLevel.DANGEROUS
        lowered = raw.lower()
        if lowered.startswith("https://"):
            return SecurityLevel.SECURE
        if lowered.startswith("http://"):
            return SecurityLevel.INSECURE
        return SecurityLevel.UNKNOWN

    def referrer_policy(self) -> str:
        return REFERRER_NO_REFERRER if self._state.block_referrer else REFERRER_DEFAULT

    def is_javascript_allowed(self, url: str | None = None) -> bool:
        return self._state.javascript_enabled

    def records_history(self) -> bool:
        return not self._state.private_mode

    def should_clear_on_exit(self) -> bool:
        return self._state.clear_on_exit

    # -- panic / stats ---------------------------------------------------

    def add_panic_handler(self, handler: PanicHandler) -> None:
        with self._lock:
            self._panic_handlers.append(handler)

    def panic_clear(self) -> int:
        """Tell every registered collaborator to wipe its data."""

        with self._lock:
            handlers = list(self._panic_handlers)
        logger.info("panic clear issued handlers=%d", len(handlers))
        notified = 0
        for handler in handlers:
            if self._notify(handler):
                notified += 1
        return notified

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {key: int(self._stats[key]) for key in STAT_KEYS}

    def _count(self, key: str) -> None:
        with self._lock:
            self._stats[key] += 1

    def _notify(self, callback: Callable[..., None] | None, *args: object) -> bool:
        if callback is None:
            return False
        try:
            callback(*args)
        except Exception:
            logger.warning("policy observer %r failed", callback, exc_info=True)
            return False
        return True
