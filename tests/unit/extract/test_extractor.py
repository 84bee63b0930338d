"""Tests for the external CHM extractor wrapper."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from chmdocset.errors import ExtractionError, ExtractorNotFoundError
from chmdocset.extract import ChmExtractor, default_program


def test_default_program_per_platform():
    assert default_program(windows=False) == "extract_chmLib"
    assert default_program(windows=True) == "hh.exe"


def test_posix_command_order():
    ex = ChmExtractor(windows=False)
    cmd = ex.command("/usr/bin/extract_chmLib", Path("a/b.chm"), Path("out/Documents"))
    assert cmd == [
        "/usr/bin/extract_chmLib",
        os.path.normpath("a/b.chm"),
        os.path.normpath("out/Documents"),
    ]


def test_windows_command_order():
    ex = ChmExtractor(windows=True)
    assert ex.program == "hh.exe"
    cmd = ex.command("hh.exe", Path("b.chm"), Path("Documents"))
    assert cmd == ["hh.exe", "-decompile", "Documents", "b.chm"]


def test_program_override():
    assert ChmExtractor(program="/opt/chm/extract", windows=False).program == "/opt/chm/extract"


def test_missing_program_raises():
    ex = ChmExtractor(windows=False)
    with patch("chmdocset.extract.shutil.which", return_value=None):
        with pytest.raises(ExtractorNotFoundError) as info:
            ex.ensure_available()
    assert info.value.program == "extract_chmLib"
    assert "PATH" in str(info.value)


def test_extract_runs_program_without_capturing(tmp_path):
    ex = ChmExtractor(windows=False)
    with (
        patch("chmdocset.extract.shutil.which", return_value="/usr/bin/extract_chmLib"),
        patch("chmdocset.extract.subprocess.run") as mock_run,
    ):
        ex.extract(tmp_path / "a.chm", tmp_path / "Documents")

    args, kwargs = mock_run.call_args
    assert args[0][0] == "/usr/bin/extract_chmLib"
    assert kwargs["check"] is True
    assert kwargs["shell"] is False
    assert "capture_output" not in kwargs
    assert "stdout" not in kwargs
    assert "stderr" not in kwargs


def test_extract_nonzero_exit(tmp_path):
    ex = ChmExtractor(windows=False)
    error = subprocess.CalledProcessError(3, ["extract_chmLib"])
    with (
        patch("chmdocset.extract.shutil.which", return_value="/usr/bin/extract_chmLib"),
        patch("chmdocset.extract.subprocess.run", side_effect=error),
    ):
        with pytest.raises(ExtractionError) as info:
            ex.extract(tmp_path / "a.chm", tmp_path / "Documents")
    assert info.value.returncode == 3


def test_extract_missing_program(tmp_path):
    ex = ChmExtractor(windows=False)
    with (
        patch("chmdocset.extract.shutil.which", return_value=None),
        patch("chmdocset.extract.subprocess.run") as mock_run,
    ):
        with pytest.raises(ExtractorNotFoundError):
            ex.extract(tmp_path / "a.chm", tmp_path / "Documents")
    mock_run.assert_not_called()
