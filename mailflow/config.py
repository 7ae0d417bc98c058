"""
Global settings and constants for the MailFlow client.

This module provides configuration constants and helpers. It is
framework-agnostic and designed to be easily unit-testable: ``load_env``
reads the environment (and an optional ``.env`` file) into the module
globals, and everything else reads those globals.
"""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# Command boundary
DEFAULT_COMMAND_URL: str = "http://127.0.0.1:1420/invoke"
COMMAND_URL: str = DEFAULT_COMMAND_URL
COMMAND_TIMEOUT_SECONDS: float = 30.0

# Logging
LOG_DIR: Path = Path.home() / ".mailflow" / "logs"
DEBUG: bool = False

# Store behaviour
DISCARD_STALE_RESULTS: bool = False

# Request defaults shared with the host
DEFAULT_PAGE_SIZE: int = 50
DEFAULT_OFFSET: int = 0
DEFAULT_SUMMARY_LANGUAGE: str = "zh"

# Bootstrap folder list shown before the real list arrives
DEFAULT_FOLDERS = ("INBOX", "草稿箱", "已发送", "垃圾邮件", "已删除")
DEFAULT_FOLDER: str = "INBOX"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_env(dotenv_path: Optional[Path] = None) -> None:
    """
    Load environment variables and apply sensible defaults.

    Reads a ``.env`` file first (existing environment variables win), then
    copies the recognised ``MAILFLOW_*`` variables into this module. It
    should be called once at application startup.

    Args:
        dotenv_path: Explicit ``.env`` file. Defaults to searching upwards
            from the working directory.
    """
    global COMMAND_URL, COMMAND_TIMEOUT_SECONDS, LOG_DIR, DEBUG, DISCARD_STALE_RESULTS

    load_dotenv(dotenv_path=dotenv_path)

    COMMAND_URL = os.environ.get("MAILFLOW_COMMAND_URL") or DEFAULT_COMMAND_URL

    timeout_env = os.environ.get("MAILFLOW_COMMAND_TIMEOUT")
    if timeout_env:
        try:
            COMMAND_TIMEOUT_SECONDS = float(timeout_env)
        except ValueError:
            raise ValueError(f"MAILFLOW_COMMAND_TIMEOUT must be a number, got {timeout_env!r}") from None

    log_dir_env = os.environ.get("MAILFLOW_LOG_DIR")
    if log_dir_env:
        LOG_DIR = Path(log_dir_env)

    DEBUG = _env_flag("MAILFLOW_DEBUG")
    DISCARD_STALE_RESULTS = _env_flag("MAILFLOW_DISCARD_STALE")
