"""URL parsing, host extraction and address-bar normalization."""

from __future__ import annotations

import re
from string import Formatter
from urllib.parse import quote_plus, urlsplit

from navguard.domain.url.models import ParsedFallback, ParsedOk, ParsedUrl

_SCHEME_PREFIX = re.compile(r"^(?:https?://)?", re.IGNORECASE)
_ILLEGAL_URI_CHARS = re.compile(r"[\s\"<>\\^`{|}]")
_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

DEFAULT_SEARCH_URL_TEMPLATE = "https://duckduckgo.com/?q={query}"
SEARCH_QUERY_PLACEHOLDER = "{query}"


def parse_url(url: str | None) -> ParsedUrl:
    """Parse ``url`` into its parts, or return a fallback holding the input."""

    raw = url or ""
    illegal = _ILLEGAL_URI_CHARS.search(raw)
    if illegal is not None:
        return ParsedFallback(original=raw, error=f"illegal character {illegal.group(0)!r} at {illegal.start()}")
    if _BAD_PERCENT_ESCAPE.search(raw):
        return ParsedFallback(original=raw, error="malformed percent escape")
    try:
        parts = urlsplit(raw)
        # Accessing .port validates the netloc.
        _ = parts.port
    except ValueError as exc:
        return ParsedFallback(original=raw, error=str(exc))

    segments = tuple(item for item in parts.query.split("&") if item) if parts.query else ()
    return ParsedOk(
        raw=raw,
        scheme=parts.scheme.lower(),
        host=(parts.hostname or "").lower(),
        path=parts.path,
        query_segments=segments,
        fragment=parts.fragment,
    )


def bare_host(url: str | None) -> str:
    """Strip scheme, path and query; the remainder is treated as the domain.

    Unlike :func:`parse_url` this never refuses input: whatever text is left
    after stripping is returned, so lookups degrade to the raw string.
    """

    raw = (url or "").strip().lower()
    host = _SCHEME_PREFIX.sub("", raw, count=1)
    host = host.split("/", 1)[0]
    host = host.split("?", 1)[0]
    return host


def has_http_scheme(url: str | None) -> bool:
    lowered = (url or "").lower()
    return lowered.startswith("http://") or lowered.startswith("https://")


def is_plain_http(url: str | None) -> bool:
    return (url or "").lower().startswith("http://")


def normalize_address(text: str | None, *, search_url_template: str = DEFAULT_SEARCH_URL_TEMPLATE) -> str:
    """Turn address-bar input into a navigable URL.

    Text that already carries an http(s) scheme is returned as typed. Text
    that looks like a bare host (has a dot, no spaces) gets ``https://``;
    anything else becomes a search query.
    """

    raw = (text or "").strip()
    if has_http_scheme(raw):
        return raw
    if "." in raw and " " not in raw:
        return f"https://{raw}"
    return search_url_template.replace(SEARCH_QUERY_PLACEHOLDER, quote_plus(raw))


def check_search_url_template(template: str) -> str:
    """Return ``template`` if its only placeholder is ``{query}``; raise ValueError otherwise."""

    try:
        fields = [name for _, name, _, _ in Formatter().parse(template) if name is not None]
    except ValueError as exc:
        raise ValueError(f"malformed search url template {template!r}: {exc}") from exc
    if SEARCH_QUERY_PLACEHOLDER not in template:
        raise ValueError(f"search url template must contain {SEARCH_QUERY_PLACEHOLDER}: {template!r}")
    unknown = sorted(set(fields) - {"query"})
    if unknown:
        raise ValueError(f"search url template has unknown placeholders {unknown}: {template!r}")
    return template
