"""Config loader from yaml + env."""

from __future__ import annotations

from pathlib import Path
import os
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from navguard.core.errors import ConfigError
from navguard.domain.url.extract import DEFAULT_SEARCH_URL_TEMPLATE, check_search_url_template
from navguard.infra.blocklist_store import DEFAULT_BLOCKLIST_PATH
from navguard.policy.blocklist import DEFAULT_WHITELIST
from navguard.policy.tracking import NO_REWRITE_HOSTS, TRACKING_PARAMS

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "config" / "defaults.yaml"


class ProfileOverrides(BaseModel):
    blocked_sites: list[str] = Field(default_factory=list)
    allowed_sites: list[str] = Field(default_factory=list)


class AppConfig(BaseModel):

    profile: str = Field(default="default")
    log_level: str = Field(default="INFO")
    force_https: bool | None = Field(default=None)
    https_only: bool | None = Field(default=None)
    private_mode: bool = Field(default=False)
    clear_on_exit: bool = Field(default=False)
    send_do_not_track: bool = Field(default=True)
    block_third_party_cookies: bool = Field(default=True)
    block_phishing: bool = Field(default=False)
    search_url_template: str = Field(default=DEFAULT_SEARCH_URL_TEMPLATE)
    custom_blocklist_path: str | None = Field(default=str(DEFAULT_BLOCKLIST_PATH))
    extra_blocked_domains: list[str] = Field(default_factory=list)
    extra_phishing_domains: list[str] = Field(default_factory=list)
    whitelist_domains: list[str] = Field(default_factory=lambda: list(DEFAULT_WHITELIST))
    no_rewrite_hosts: list[str] = Field(default_factory=lambda: list(NO_REWRITE_HOSTS))
    tracking_params: list[str] = Field(default_factory=lambda: list(TRACKING_PARAMS))
    profiles: dict[str, ProfileOverrides] = Field(default_factory=dict)
    config_path: str = Field(default=str(DEFAULT_CONFIG_PATH))

    @field_validator("search_url_template")
    @classmethod
    def _check_search_template(cls, value: str) -> str:
        return check_search_url_template(value)


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}
    try:
        payload = yaml.safe_load(p.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"cannot read config {p}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid yaml in {p}: {exc}") from exc
    return payload if isinstance(payload, dict) else {}


def _pick_env(name: str, fallback: Any) -> Any:
    value = os.getenv(name)
    return value if value not in (None, "") else fallback


def _parse_bool(raw: Any, fallback: bool | None) -> bool | None:
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return fallback
    value = str(raw).strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    if value in {"null", "none", "auto"}:
        return None
    return fallback


def _parse_str(raw: Any, fallback: str) -> str:
    value = str(raw if raw is not None else "").strip()
    return value or fallback


def _parse_list(raw: Any, fallback: list[str]) -> list[str]:
    if isinstance(raw, str):
        return list(dict.fromkeys(item.strip() for item in raw.split(",") if item.strip()))
    if isinstance(raw, (list, tuple)):
        return list(dict.fromkeys(str(item).strip() for item in raw if str(item).strip()))
    return list(fallback)


def _resolve_user_config_path(path: str | Path | None) -> Path | None:
    if path is not None:
        return Path(path)
    env_path = os.getenv("NAVGUARD_DEFAULT_CONFIG_PATH")
    if env_path:
        return Path(env_path)
    return None


def load_config(
    path: str | Path | None = None,
    *,
    profile_override: str | None = None,
) -> tuple[AppConfig, dict[str, Any]]:
    merged = load_yaml(DEFAULT_CONFIG_PATH)
    user_path = _resolve_user_config_path(path)
    if user_path is not None:
        merged.update(load_yaml(user_path))

    defaults = AppConfig()
    raw_profiles = merged.get("profiles")
    profile_map = raw_profiles if isinstance(raw_profiles, dict) else {}

    def _flag(name: str, fallback: bool | None) -> bool | None:
        return _parse_bool(_pick_env(f"NAVGUARD_{name.upper()}", merged.get(name, fallback)), fallback)

    payload = {
        "profile": _parse_str(
            profile_override or _pick_env("NAVGUARD_PROFILE", merged.get("profile")),
            defaults.profile,
        ).lower(),
        "log_level": _parse_str(
            _pick_env("NAVGUARD_LOG_LEVEL", merged.get("log_level")),
            defaults.log_level,
        ).upper(),
        "force_https": _flag("force_https", None),
        "https_only": _flag("https_only", None),
        "private_mode": _flag("private_mode", defaults.private_mode),
        "clear_on_exit": _flag("clear_on_exit", defaults.clear_on_exit),
        "send_do_not_track": _flag("send_do_not_track", defaults.send_do_not_track),
        "block_third_party_cookies": _flag("block_third_party_cookies", defaults.block_third_party_cookies),
        "block_phishing": _flag("block_phishing", defaults.block_phishing),
        "search_url_template": _parse_str(
            _pick_env("NAVGUARD_SEARCH_URL_TEMPLATE", merged.get("search_url_template")),
            defaults.search_url_template,
        ),
        "custom_blocklist_path": _pick_env(
            "NAVGUARD_CUSTOM_BLOCKLIST_PATH",
            merged.get("custom_blocklist_path", defaults.custom_blocklist_path),
        ),
        "extra_blocked_domains": _parse_list(
            _pick_env("NAVGUARD_EXTRA_BLOCKED_DOMAINS", merged.get("extra_blocked_domains")),
            defaults.extra_blocked_domains,
        ),
        "extra_phishing_domains": _parse_list(
            _pick_env("NAVGUARD_EXTRA_PHISHING_DOMAINS", merged.get("extra_phishing_domains")),
            defaults.extra_phishing_domains,
        ),
        "whitelist_domains": _parse_list(
            _pick_env("NAVGUARD_WHITELIST_DOMAINS", merged.get("whitelist_domains")),
            defaults.whitelist_domains,
        ),
        "no_rewrite_hosts": _parse_list(
            _pick_env("NAVGUARD_NO_REWRITE_HOSTS", merged.get("no_rewrite_hosts")),
            defaults.no_rewrite_hosts,
        ),
        "tracking_params": _parse_list(
            _pick_env("NAVGUARD_TRACKING_PARAMS", merged.get("tracking_params")),
            defaults.tracking_params,
        ),
        "profiles": {
            str(key).strip().lower(): value if isinstance(value, dict) else {}
            for key, value in profile_map.items()
        },
        "config_path": str(user_path or DEFAULT_CONFIG_PATH),
    }

    try:
        cfg = AppConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc
    return cfg, merged
