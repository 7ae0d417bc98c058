"""Tests for error normalisation."""

import pytest

from mailflow.utils.errors import (
    CommandError,
    MailFlowError,
    NoAccountError,
    SchemaError,
    TransportError,
    handle_error,
)


def test_handle_error_uses_exception_message():
    assert handle_error(CommandError("连接超时")) == "连接超时"
    assert handle_error(ValueError("bad value")) == "bad value"


def test_handle_error_stringifies_other_values():
    assert handle_error("plain string") == "plain string"
    assert handle_error(404) == "404"
    assert handle_error(None) == "None"


def test_handle_error_exception_without_message():
    assert handle_error(RuntimeError()) == ""


@pytest.mark.parametrize("error_class", [CommandError, TransportError, SchemaError, NoAccountError])
def test_client_errors_share_a_base(error_class):
    assert issubclass(error_class, MailFlowError)


def test_command_error_keeps_command_name():
    error = SchemaError("fetch_emails: expected a list", "fetch_emails")

    assert isinstance(error, CommandError)
    assert error.command == "fetch_emails"
    assert handle_error(error) == "fetch_emails: expected a list"
