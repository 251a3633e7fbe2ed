import pytest

from navguard.policy.downloads import (
    CAUTION_EXTENSIONS,
    DANGEROUS_EXTENSIONS,
    DownloadRiskClassifier,
    file_extension,
    has_double_extension,
)


def test_double_extensions_are_dangerous():
    classifier = DownloadRiskClassifier()
    for name in ("resume.pdf.exe", "photo.jpg.vbs", "Invoice.DOCX.Scr", "song.mp3.js"):
        verdict = classifier.classify(name)
        assert verdict.is_dangerous is True
        assert verdict.show_warning is True
        assert "hidden extension" in (verdict.message or "")


def test_dangerous_extension_message_names_the_type():
    verdict = DownloadRiskClassifier().classify("Setup.EXE")
    assert verdict.is_dangerous is True
    assert verdict.show_warning is True
    assert "Type: .exe" in (verdict.message or "")
    assert "File: Setup.EXE" in (verdict.message or "")


def test_archive_warns_without_blocking():
    verdict = DownloadRiskClassifier().classify("archive.zip")
    assert verdict.is_dangerous is False
    assert verdict.show_warning is True
    assert "Archive" in (verdict.message or "")


def test_plain_files_have_no_warning():
    classifier = DownloadRiskClassifier()
    for name in ("notes.txt", "report.pdf", "README", "trailing.", ".bashrc", "photo.jpg.txt"):
        verdict = classifier.classify(name)
        assert verdict.is_dangerous is False
        assert verdict.show_warning is False
        assert verdict.message is None


def test_absent_filename_is_safe():
    classifier = DownloadRiskClassifier()
    assert classifier.classify(None).show_warning is False
    assert classifier.classify("").is_dangerous is False


def test_file_extension_uses_last_suffix():
    assert file_extension("a.tar.GZ") == "gz"
    assert file_extension("noext") == ""
    assert file_extension("ends.") == ""
    assert file_extension(".hidden") == ""


def test_double_extension_literal_and_family():
    assert has_double_extension("x.txt.exe") is True
    assert has_double_extension("x.gif.cmd") is True
    assert has_double_extension("x.exe.pdf") is False
    assert has_double_extension("x.zip.exe") is False


def test_extension_sets_are_disjoint_and_normalized():
    assert not DANGEROUS_EXTENSIONS & CAUTION_EXTENSIONS
    assert all(item == item.lower() and not item.startswith(".") for item in DANGEROUS_EXTENSIONS | CAUTION_EXTENSIONS)


def test_overlapping_sets_are_rejected():
    with pytest.raises(ValueError):
        DownloadRiskClassifier(dangerous=frozenset({"zip"}), caution=frozenset({"zip"}))
