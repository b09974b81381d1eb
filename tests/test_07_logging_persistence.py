import io
import json
import logging

from xi_tts.core.logging import PACKAGE_LOGGER, configure_logging, get_logger, set_request_id, success


def test_logging_jsonl_persistence(monkeypatch, tmp_path):
    monkeypatch.setenv("XI_TTS_LOG_DIR", str(tmp_path))
    monkeypatch.setenv("XI_TTS_JSONL_FILE", "test.jsonl")
    monkeypatch.delenv("XI_TTS_LOG_LEVEL", raising=False)

    configure_logging(stream=io.StringIO())
    set_request_id("rid-1")
    success(get_logger("xi-tts.client"), "speech_ok", event="synthesize", status=200, bytes=1024, seconds=0.25)

    for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
        handler.flush()

    log_path = tmp_path / "test.jsonl"
    assert log_path.exists()

    line = log_path.read_text(encoding="utf-8").strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["message"] == "speech_ok"
    assert payload["tag"] == "SUCCESS"
    assert payload["level"] == 2
    assert payload["request_id"] == "rid-1"
    assert payload["event"] == "synthesize"
    assert payload["seconds"] == 0.25
    assert payload["extra"] == {"status": 200, "bytes": 1024}


def test_no_log_file_without_log_dir(monkeypatch, tmp_path):
    monkeypatch.delenv("XI_TTS_LOG_DIR", raising=False)
    monkeypatch.setenv("XI_TTS_SETTINGS", str(tmp_path / "missing.yaml"))

    configure_logging(level=2, stream=io.StringIO())

    handlers = logging.getLogger(PACKAGE_LOGGER).handlers
    assert not any(isinstance(h, logging.FileHandler) for h in handlers)
