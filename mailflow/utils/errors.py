"""
Centralized error hierarchy for the MailFlow client.

This module provides a base exception class and specific error types for
the command boundary and the store, along with a helper for turning any
failure into the single message string the UI shows in its error banner.
"""
import logging
from typing import Any, Optional


logger = logging.getLogger(__name__)


NO_ACCOUNT_ADDED = "请先添加邮箱账户"
NO_ACCOUNT_SELECTED = "请先选择邮箱账户"
NO_ACCOUNT_AVAILABLE = "没有可用的账户"


class MailFlowError(Exception):
    """
    Base exception class for all MailFlow client errors.

    All application-specific exceptions inherit from this class so callers
    can catch client failures without catching programming errors.
    """
    pass


class CommandError(MailFlowError):
    """Raised when the host rejects a command or the call itself fails."""

    def __init__(self, message: str, command: Optional[str] = None):
        super().__init__(message)
        self.command = command


class TransportError(CommandError):
    """Raised when the host endpoint cannot be reached or answers garbage."""
    pass


class SchemaError(CommandError):
    """Raised when a command response does not match the expected shape."""
    pass


class NoAccountError(MailFlowError):
    """Raised when an operation needs an account and none is available."""
    pass


def handle_error(error: Any) -> str:
    """
    Normalise any failure into a message string and log it.

    Exceptions yield their message; every other value is stringified.

    Args:
        error: The exception (or arbitrary raised value) to normalise.

    Returns:
        The message to store as the store's ``error``.
    """
    if isinstance(error, BaseException):
        logger.error("%s: %s", type(error).__name__, error)
        if error.args and isinstance(error.args[0], str):
            return error.args[0]
        return str(error)
    logger.error("%r", error)
    return str(error)

