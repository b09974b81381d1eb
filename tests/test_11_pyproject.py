"""Tests for pyproject.toml and package layout."""
from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

PYPROJECT = Path(__file__).parent.parent / "pyproject.toml"


class TestPackageInstallation:
    """Test that the package is importable."""

    def test_version_defined(self):
        import xi_tts
        assert isinstance(xi_tts.__version__, str)
        assert len(xi_tts.__version__) > 0

    def test_core_modules_importable(self):
        from xi_tts.core import config
        from xi_tts.core import logging
        from xi_tts.api import schemas
        from xi_tts.services import errors, speech_client, validators
        from xi_tts.utils import audio, timeit

        for module in (config, logging, schemas, errors, speech_client, validators, audio, timeit):
            assert module is not None

    def test_top_level_exports(self):
        import xi_tts

        for name in ("SpeechClient", "SpeechRequestBuilder", "SpeechRequest", "SpeechResponse",
                     "TtsModel", "Voice", "AudioFormat", "VoiceSettings", "TTSError", "ApiError"):
            assert hasattr(xi_tts, name), name


class TestCLIEntryPoint:

    def test_cli_help_exits_zero(self):
        result = subprocess.run(
            [sys.executable, "-m", "xi_tts.cli", "--help"],
            capture_output=True,
            text=True,
            cwd=Path(__file__).parent.parent / "src",
        )
        assert result.returncode == 0
        assert "xi-tts CLI" in result.stdout


class TestPyprojectToml:
    """Test pyproject.toml configuration."""

    @pytest.fixture
    def data(self):
        tomllib = pytest.importorskip("tomllib")  # Python 3.11+
        return tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))

    def test_name(self, data):
        assert data["project"]["name"] == "xi-tts"

    def test_dependencies(self, data):
        deps = data["project"]["dependencies"]
        dep_names = [d.split(">=")[0].split("[")[0] for d in deps]
        for name in ("httpx", "pydantic", "pyyaml", "numpy", "soundfile"):
            assert name in dep_names

    def test_console_script(self, data):
        assert data["project"]["scripts"]["xi-tts"] == "xi_tts.cli:main"

    def test_version_matches_package(self, data):
        import xi_tts
        assert data["project"]["version"] == xi_tts.__version__
