"""Process-wide policy state owned by the engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from navguard.policy.profiles import ProfileId, ProfileSettings

# Toggles that every profile switch re-applies together.
PROFILE_OWNED_TOGGLES = (
    "block_trackers",
    "block_ads",
    "javascript_enabled",
    "https_only",
    "block_referrer",
    "force_https",
)


@dataclass(frozen=True)
class PolicyState:
    active_profile: ProfileId = ProfileId.DEFAULT
    force_https: bool = True
    https_only: bool = False
    private_mode: bool = False
    clear_on_exit: bool = False
    block_trackers: bool = True
    block_ads: bool = True
    javascript_enabled: bool = True
    block_referrer: bool = True
    send_do_not_track: bool = True
    block_third_party_cookies: bool = True

    @classmethod
    def toggle_names(cls) -> tuple[str, ...]:
        return tuple(item.name for item in fields(cls) if item.name != "active_profile")

    def with_profile(self, profile_id: ProfileId, settings: ProfileSettings) -> "PolicyState":
        changes: dict[str, Any] = {name: getattr(settings, name) for name in PROFILE_OWNED_TOGGLES}
        return replace(self, active_profile=profile_id, **changes)

    def with_toggles(self, **flags: bool) -> "PolicyState":
        known = set(self.toggle_names())
        unknown = sorted(set(flags) - known)
        if unknown:
            raise KeyError(f"unknown toggles: {unknown}")
        return replace(self, **{name: bool(value) for name, value in flags.items()})

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["active_profile"] = self.active_profile.value
        return payload
