"""Build and wire the policy engine."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable

from navguard.config.settings import AppConfig, load_config
from navguard.core.errors import UnknownProfileError
from navguard.infra.blocklist_store import load_custom_blocklist
from navguard.orchestrator.engine import PanicHandler, PolicyEngine
from navguard.orchestrator.state import PolicyState
from navguard.policy.blocklist import DomainBlocklist
from navguard.policy.downloads import DownloadRiskClassifier
from navguard.policy.phishing import KNOWN_PHISHING_DOMAINS, PhishingDetector
from navguard.policy.profiles import ProfileId, ProfileStore
from navguard.policy.tracking import TrackingParamStripper

logger = logging.getLogger(__name__)


def _startup_profile(name: str) -> ProfileId:
    try:
        return ProfileId.parse(name)
    except UnknownProfileError:
        logger.warning("unknown profile %r in config, using %s", name, ProfileId.DEFAULT.value)
        return ProfileId.DEFAULT


def create_engine(
    config: AppConfig | None = None,
    *,
    config_path: str | Path | None = None,
    profile_override: str | None = None,
    on_blocklist_change: Callable[[frozenset[str]], None] | None = None,
    on_profile_switch: Callable[[ProfileId], None] | None = None,
    panic_handlers: Iterable[PanicHandler] = (),
) -> tuple[PolicyEngine, dict[str, object]]:
    cfg = config
    if cfg is None:
        cfg, _ = load_config(config_path, profile_override=profile_override)

    custom_domains = load_custom_blocklist(cfg.custom_blocklist_path)
    blocklist = DomainBlocklist.with_defaults(
        (*cfg.extra_blocked_domains, *custom_domains),
        whitelist=cfg.whitelist_domains,
    )
    profiles = ProfileStore()
    for name, overrides in cfg.profiles.items():
        try:
            profiles.extend_sites(name, blocked=overrides.blocked_sites, allowed=overrides.allowed_sites)
        except UnknownProfileError:
            logger.warning("ignoring site overrides for unknown profile %r", name)

    engine = PolicyEngine(
        blocklist=blocklist,
        stripper=TrackingParamStripper(cfg.tracking_params, no_rewrite_hosts=cfg.no_rewrite_hosts),
        phishing=PhishingDetector((*KNOWN_PHISHING_DOMAINS, *cfg.extra_phishing_domains)),
        downloads=DownloadRiskClassifier(),
        profiles=profiles,
        state=PolicyState(),
        search_url_template=cfg.search_url_template,
        block_phishing=cfg.block_phishing,
        on_blocklist_change=on_blocklist_change,
        on_profile_switch=on_profile_switch,
        panic_handlers=panic_handlers,
    )

    startup = _startup_profile(profile_override or cfg.profile)
    engine.switch_profile(startup)
    overrides = {
        "private_mode": cfg.private_mode,
        "clear_on_exit": cfg.clear_on_exit,
        "send_do_not_track": cfg.send_do_not_track,
        "block_third_party_cookies": cfg.block_third_party_cookies,
    }
    if cfg.force_https is not None:
        overrides["force_https"] = cfg.force_https
    if cfg.https_only is not None:
        overrides["https_only"] = cfg.https_only
    engine.set_toggles(**overrides)

    runtime: dict[str, object] = {
        "profile": startup.value,
        "profile_choices": [item.value for item in ProfileId],
        "config_path": cfg.config_path,
        "custom_blocklist_path": cfg.custom_blocklist_path,
        "custom_blocklist_entries": len(custom_domains),
        "blocked_domains": len(blocklist),
    }
    return engine, runtime
