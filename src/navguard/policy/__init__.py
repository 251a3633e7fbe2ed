"""Leaf policy services composed by the orchestrator."""

from navguard.policy.blocklist import DomainBlocklist
from navguard.policy.downloads import DownloadRiskClassifier
from navguard.policy.phishing import Brand, PhishingDetector
from navguard.policy.profiles import ProfileId, ProfileSettings, ProfileStore
from navguard.policy.tracking import TrackingParamStripper

__all__ = [
    "Brand",
    "DomainBlocklist",
    "DownloadRiskClassifier",
    "PhishingDetector",
    "ProfileId",
    "ProfileSettings",
    "ProfileStore",
    "TrackingParamStripper",
]
