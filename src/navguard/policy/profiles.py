"""Named browsing profiles and their site policies."""

from __future__ import annotations

from enum import Enum
import logging
import threading
from typing import Any, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from navguard.core.errors import UnknownProfileError

logger = logging.getLogger(__name__)


class ProfileId(str, Enum):
    DEFAULT = "default"
    GAMING = "gaming"
    WORK = "work"
    CODING = "coding"
    SECURE = "secure"

    @classmethod
    def parse(cls, value: "ProfileId | str") -> "ProfileId":
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        try:
            return cls(key)
        except ValueError:
            raise UnknownProfileError(f"unknown profile: {value!r}") from None


class ProfileSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    display_name: str
    description: str = ""
    block_message: str = Field(default="This site is blocked by your current profile.", min_length=2)
    block_trackers: bool = True
    block_ads: bool = True
    force_https: bool = True
    https_only: bool = False
    javascript_enabled: bool = True
    block_referrer: bool = False
    performance_mode: bool = False
    developer_mode: bool = False
    blocked_sites: frozenset[str] = Field(default_factory=frozenset)
    allowed_sites: frozenset[str] | None = None

    def should_block_site(self, url: str | None) -> bool:
        lowered = (url or "").lower()
        if not lowered:
            return False
        if self.allowed_sites and any(token in lowered for token in self.allowed_sites):
            return False
        return any(token in lowered for token in self.blocked_sites)


GAMING_BLOCKED = (
    "facebook.com",
    "twitter.com",
    "instagram.com",
    "tiktok.com",
    "reddit.com",
    "news.ycombinator.com",
    "linkedin.com",
)
WORK_BLOCKED = (
    "youtube.com",
    "twitch.tv",
    "netflix.com",
    "reddit.com",
    "tiktok.com",
    "instagram.com",
    "twitter.com",
    "discord.com",
    "steampowered.com",
    "epicgames.com",
)
CODING_ALLOWED = (
    "localhost",
    "127.0.0.1",
    "github.com",
    "stackoverflow.com",
    "developer.mozilla.org",
    "docs.oracle.com",
)

PROFILE_TABLE: Mapping[ProfileId, ProfileSettings] = {
    ProfileId.DEFAULT: ProfileSettings(
        display_name="Default",
        description="Balanced browsing experience",
    ),
    ProfileId.GAMING: ProfileSettings(
        display_name="Gaming",
        description="Performance mode - minimal distractions",
        block_message="Gaming Mode: This site is blocked to minimize distractions.\nFocus on your game!",
        blocked_sites=frozenset(GAMING_BLOCKED),
        performance_mode=True,
    ),
    ProfileId.WORK: ProfileSettings(
        display_name="Work",
        description="Productivity focused - blocks social media",
        block_message="Work Mode: This site is blocked for productivity.\nGet back to work!",
        blocked_sites=frozenset(WORK_BLOCKED),
    ),
    ProfileId.CODING: ProfileSettings(
        display_name="Coding",
        description="Developer mode - allows localhost, relaxed security",
        # Tracker blocking breaks some dev tools; plain HTTP is needed for localhost.
        block_trackers=False,
        force_https=False,
        allowed_sites=frozenset(CODING_ALLOWED),
        developer_mode=True,
    ),
    ProfileId.SECURE: ProfileSettings(
        display_name="Secure",
        description="Maximum privacy - blocks everything",
        block_message="Secure Mode: This site is blocked for security reasons.",
        https_only=True,
        javascript_enabled=False,
        block_referrer=True,
    ),
}


def _lower_set(items: Iterable[str]) -> frozenset[str]:
    return frozenset(item.strip().lower() for item in items if item and item.strip())


class ProfileStore:
    """Holds one settings record per profile.

    Records are immutable; :meth:`update` swaps in an edited copy.
    """

    def __init__(self, table: Mapping[ProfileId, ProfileSettings] = PROFILE_TABLE) -> None:
        missing = [item.value for item in ProfileId if item not in table]
        if missing:
            raise ValueError(f"profile table is missing: {missing}")
        self._lock = threading.Lock()
        self._table: dict[ProfileId, ProfileSettings] = dict(table)

    def get(self, profile_id: ProfileId | str) -> ProfileSettings:
        return self._table[ProfileId.parse(profile_id)]

    def items(self) -> list[tuple[ProfileId, ProfileSettings]]:
        table = self._table
        return [(item, table[item]) for item in ProfileId]

    def update(self, profile_id: ProfileId | str, **changes: Any) -> ProfileSettings:
        key = ProfileId.parse(profile_id)
        unknown = sorted(set(changes) - set(ProfileSettings.model_fields))
        if unknown:
            raise ValueError(f"unknown profile settings: {unknown}")
        for name in ("blocked_sites", "allowed_sites"):
            if changes.get(name) is not None:
                changes[name] = _lower_set(changes[name])
        with self._lock:
            current = self._table[key]
            edited = ProfileSettings.model_validate({**current.model_dump(), **changes})
            self._table[key] = edited
        logger.info("profile settings edited profile=%s fields=%s", key.value, sorted(changes))
        return edited

    def extend_sites(
        self,
        profile_id: ProfileId | str,
        *,
        blocked: Iterable[str] = (),
        allowed: Iterable[str] = (),
    ) -> ProfileSettings:
        key = ProfileId.parse(profile_id)
        blocked_extra = _lower_set(blocked)
        allowed_extra = _lower_set(allowed)
        with self._lock:
            current = self._table[key]
            allowed_sites = current.allowed_sites
            if allowed_extra:
                allowed_sites = (allowed_sites or frozenset()) | allowed_extra
            edited = current.model_copy(
                update={
                    "blocked_sites": current.blocked_sites | blocked_extra,
                    "allowed_sites": allowed_sites,
                }
            )
            self._table[key] = edited
        return edited
