"""Download filename risk classification."""

from __future__ import annotations

import logging
import re

from navguard.domain.verdicts import DownloadVerdict

logger = logging.getLogger(__name__)

DANGEROUS_EXTENSIONS = frozenset(
    {
        # Executables
        "exe", "msi", "bat", "cmd", "com", "scr", "pif",
        # Scripts
        "vbs", "js", "jse", "ws", "wsf", "wsh", "ps1", "psm1",
        # macOS
        "app", "dmg", "pkg",
        # Linux
        "sh", "run", "bin",
        # Runnable archives
        "jar", "apk",
        # Office macros
        "docm", "xlsm", "pptm",
    }
)
CAUTION_EXTENSIONS = frozenset({"zip", "rar", "7z", "tar", "gz", "iso", "img", "torrent"})

DOUBLE_EXTENSION_SUFFIXES = (
    ".pdf.exe",
    ".doc.exe",
    ".jpg.exe",
    ".png.exe",
    ".txt.exe",
    ".xls.exe",
    ".mp3.exe",
    ".mp4.exe",
    ".pdf.scr",
    ".doc.scr",
    ".jpg.js",
    ".png.vbs",
)
_DOUBLE_EXTENSION_FAMILY = re.compile(
    r"\.(?:pdf|doc|docx|xls|xlsx|jpg|png|gif|mp3|mp4)\.(?:exe|scr|bat|cmd|com|vbs|js)$"
)


def file_extension(filename: str) -> str:
    """Lower-cased text after the final dot, or ``""``.

    A leading dot (``.bashrc``) or a trailing one (``report.``) yields no
    extension.
    """

    lower = filename.lower()
    index = lower.rfind(".")
    if 0 < index < len(lower) - 1:
        return lower[index + 1 :]
    return ""


def has_double_extension(filename: str) -> bool:
    lower = filename.lower()
    if lower.endswith(DOUBLE_EXTENSION_SUFFIXES):
        return True
    return _DOUBLE_EXTENSION_FAMILY.search(lower) is not None


class DownloadRiskClassifier:
    def __init__(
        self,
        *,
        dangerous: frozenset[str] = DANGEROUS_EXTENSIONS,
        caution: frozenset[str] = CAUTION_EXTENSIONS,
    ) -> None:
        overlap = dangerous & caution
        if overlap:
            raise ValueError(f"extension sets overlap: {sorted(overlap)}")
        self.dangerous = frozenset(item.lower().lstrip(".") for item in dangerous)
        self.caution = frozenset(item.lower().lstrip(".") for item in caution)

    def classify(self, filename: str | None) -> DownloadVerdict:
        if not filename:
            return DownloadVerdict()

        if has_double_extension(filename):
            logger.info("hidden extension in download filename=%s", filename)
            return DownloadVerdict(
                is_dangerous=True,
                show_warning=True,
                message=(
                    "DANGEROUS: File has hidden extension!\n"
                    f"This file appears to be '{filename.lower()}'\n"
                    "but may actually be an executable."
                ),
            )

        extension = file_extension(filename)
        if extension in self.dangerous:
            logger.info("dangerous download extension=%s filename=%s", extension, filename)
            return DownloadVerdict(
                is_dangerous=True,
                show_warning=True,
                message=(
                    "DANGEROUS: Executable file detected!\n\n"
                    f"File: {filename}\n"
                    f"Type: .{extension}\n\n"
                    "This file type can harm your computer.\n"
                    "Only download if you trust the source."
                ),
            )
        if extension in self.caution:
            return DownloadVerdict(
                is_dangerous=False,
                show_warning=True,
                message=(
                    "Caution: Archive file\n\n"
                    f"File: {filename}\n\n"
                    "Archives can contain harmful files.\n"
                    "Scan with antivirus before opening."
                ),
            )
        return DownloadVerdict()
