"""Verdict and decision structures returned to the browser shell."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class PhishingVerdict(BaseModel):
    is_phishing: bool = False
    reason: str | None = None
    confidence: int = Field(default=0, ge=0, le=100)


class DownloadVerdict(BaseModel):
    is_dangerous: bool = False
    show_warning: bool = False
    message: str | None = None


class Allowed(BaseModel):
    """Navigation may proceed to ``url``, which may differ from the input."""

    kind: Literal["allowed"] = "allowed"
    url: str
    rewritten: bool = False
    phishing: PhishingVerdict = Field(default_factory=PhishingVerdict)


class Blocked(BaseModel):
    kind: Literal["blocked"] = "blocked"
    reason: str = Field(min_length=2)
    category: Literal["https_only", "profile", "blocklist", "phishing"]
    url: str = ""
    detail: str = ""


class SecurityLevel(str, Enum):
    SECURE = "secure"
    INSECURE = "insecure"
    DANGEROUS = "dangerous"
    UNKNOWN = "unknown"
