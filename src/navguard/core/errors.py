"""Custom exceptions for navguard."""


class NavguardError(Exception):
    """Base exception for application-level errors."""


class ConfigError(NavguardError):
    """Raised when configuration cannot be loaded or validated."""


class UnknownProfileError(NavguardError, ValueError):
    """Raised when a profile identifier does not name a known profile."""
