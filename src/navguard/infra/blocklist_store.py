"""Plain-text custom blocklist: one domain per line, ``#`` comments."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

DEFAULT_BLOCKLIST_PATH = Path("~/.navguard/blocklist.txt")


def parse_blocklist(text: str) -> list[str]:
    domains: list[str] = []
    for line in text.splitlines():
        row = line.strip().lower()
        if not row or row.startswith("#"):
            continue
        domains.append(row)
    return list(dict.fromkeys(domains))


def load_custom_blocklist(path: str | Path | None) -> list[str]:
    """Read user additions; a missing or unreadable file yields no additions."""

    if path is None:
        return []
    candidate = Path(path).expanduser()
    if not candidate.exists():
        return []
    try:
        text = candidate.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("could not load custom blocklist %s: %s", candidate, exc)
        return []
    domains = parse_blocklist(text)
    logger.info("loaded %d custom blocklist entries from %s", len(domains), candidate)
    return domains


def save_custom_blocklist(path: str | Path, domains: Iterable[str]) -> Path:
    candidate = Path(path).expanduser()
    candidate.parent.mkdir(parents=True, exist_ok=True)
    lines = sorted({item.strip().lower() for item in domains if item and item.strip()})
    candidate.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    return candidate
