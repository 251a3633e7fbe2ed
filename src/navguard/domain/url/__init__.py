"""URL parsing and normalization."""

from navguard.domain.url.extract import (
    bare_host,
    check_search_url_template,
    has_http_scheme,
    is_plain_http,
    normalize_address,
    parse_url,
)
from navguard.domain.url.models import ParsedFallback, ParsedOk, ParsedUrl

__all__ = [
    "ParsedOk",
    "ParsedFallback",
    "ParsedUrl",
    "parse_url",
    "bare_host",
    "check_search_url_template",
    "has_http_scheme",
    "is_plain_http",
    "normalize_address",
]
