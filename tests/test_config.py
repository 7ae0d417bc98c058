"""Tests for environment-driven configuration."""

import importlib
import logging
import os

import pytest

from mailflow import config
from mailflow.utils import logging_cfg


ENV_VARS = (
    "MAILFLOW_COMMAND_URL",
    "MAILFLOW_COMMAND_TIMEOUT",
    "MAILFLOW_LOG_DIR",
    "MAILFLOW_DEBUG",
    "MAILFLOW_DISCARD_STALE",
)


@pytest.fixture
def fresh_config(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield importlib.reload(config)
    for name in ENV_VARS:
        os.environ.pop(name, None)
    importlib.reload(config)


def test_defaults(fresh_config, tmp_path):
    fresh_config.load_env(dotenv_path=tmp_path / "missing.env")

    assert fresh_config.COMMAND_URL == "http://127.0.0.1:1420/invoke"
    assert fresh_config.COMMAND_TIMEOUT_SECONDS == 30.0
    assert fresh_config.DEBUG is False
    assert fresh_config.DISCARD_STALE_RESULTS is False


def test_dotenv_file_is_read(fresh_config, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "MAILFLOW_COMMAND_URL=http://localhost:9000/invoke\n"
        "MAILFLOW_COMMAND_TIMEOUT=2.5\n"
        f"MAILFLOW_LOG_DIR={tmp_path / 'logs'}\n"
        "MAILFLOW_DEBUG=true\n"
        "MAILFLOW_DISCARD_STALE=1\n",
        encoding="utf-8",
    )

    fresh_config.load_env(dotenv_path=env_file)

    assert fresh_config.COMMAND_URL == "http://localhost:9000/invoke"
    assert fresh_config.COMMAND_TIMEOUT_SECONDS == 2.5
    assert fresh_config.LOG_DIR == tmp_path / "logs"
    assert fresh_config.DEBUG is True
    assert fresh_config.DISCARD_STALE_RESULTS is True


def test_environment_wins_over_dotenv(fresh_config, tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("MAILFLOW_COMMAND_URL=http://from-file/\n", encoding="utf-8")
    monkeypatch.setenv("MAILFLOW_COMMAND_URL", "http://from-env/")

    fresh_config.load_env(dotenv_path=env_file)

    assert fresh_config.COMMAND_URL == "http://from-env/"


def test_bad_timeout(fresh_config, tmp_path, monkeypatch):
    monkeypatch.setenv("MAILFLOW_COMMAND_TIMEOUT", "soon")

    with pytest.raises(ValueError, match="MAILFLOW_COMMAND_TIMEOUT"):
        fresh_config.load_env(dotenv_path=tmp_path / "missing.env")


def test_setup_logging_writes_rotating_file(tmp_path):
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        log_file = logging_cfg.setup_logging(debug=True, log_dir=tmp_path)
        logging.getLogger("mailflow.test").debug("hello from test")
        for handler in root.handlers:
            handler.flush()

        assert log_file == tmp_path / "app.log"
        assert "hello from test" in log_file.read_text(encoding="utf-8")
        assert logging.getLogger("urllib3").level == logging.WARNING
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
