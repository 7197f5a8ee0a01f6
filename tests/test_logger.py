import json, logging
from authkeys_core.logger import get_logger


def test_json_lines_to_file(tmp_path):
    path = tmp_path / "logs" / "authkeys.log"
    log = get_logger("authkeys.test.file", to_file=str(path))
    try:
        log.info("hello")
        record = json.loads(path.read_text().splitlines()[-1])
    finally:
        for handler in list(log.handlers):
            handler.close()
            log.removeHandler(handler)
    assert record["msg"] == "hello"
    assert record["level"] == "INFO"
    assert record["name"] == "authkeys.test.file"
    assert record["ts"].endswith("Z")


def test_level_from_env(monkeypatch):
    monkeypatch.setenv("AUTHKEYS_LOG_LEVEL", "debug")
    assert get_logger("authkeys.test.level").level == logging.DEBUG
    assert get_logger("authkeys.test.level", level=logging.ERROR).level == logging.ERROR


def test_unknown_level_falls_back_to_info(monkeypatch):
    monkeypatch.setenv("AUTHKEYS_LOG_LEVEL", "verbose")
    assert get_logger("authkeys.test.badlevel").level == logging.INFO
