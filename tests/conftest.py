from __future__ import annotations

import pytest

from navguard.orchestrator.engine import PolicyEngine
from navguard.orchestrator.state import PolicyState
from navguard.policy.blocklist import DomainBlocklist
from navguard.policy.downloads import DownloadRiskClassifier
from navguard.policy.phishing import PhishingDetector
from navguard.policy.profiles import ProfileStore
from navguard.policy.tracking import TrackingParamStripper


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for name in (
        "NAVGUARD_PROFILE",
        "NAVGUARD_DEFAULT_CONFIG_PATH",
        "NAVGUARD_FORCE_HTTPS",
        "NAVGUARD_HTTPS_ONLY",
        "NAVGUARD_BLOCK_PHISHING",
        "NAVGUARD_EXTRA_BLOCKED_DOMAINS",
        "NAVGUARD_LOG_LEVEL",
        "NAVGUARD_SEARCH_URL_TEMPLATE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NAVGUARD_CUSTOM_BLOCKLIST_PATH", str(tmp_path / "blocklist.txt"))


@pytest.fixture
def make_engine():
    def _make(**kwargs) -> PolicyEngine:
        engine = PolicyEngine(
            blocklist=kwargs.pop("blocklist", DomainBlocklist.with_defaults()),
            stripper=kwargs.pop("stripper", TrackingParamStripper()),
            phishing=kwargs.pop("phishing", PhishingDetector()),
            downloads=kwargs.pop("downloads", DownloadRiskClassifier()),
            profiles=kwargs.pop("profiles", ProfileStore()),
            state=kwargs.pop("state", PolicyState()),
            **kwargs,
        )
        engine.switch_profile("default")
        return engine

    return _make


@pytest.fixture
def engine(make_engine) -> PolicyEngine:
    return make_engine()
