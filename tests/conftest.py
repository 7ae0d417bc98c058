"""Shared fixtures for the MailFlow client tests."""

import pytest

from factories import make_account, make_summary
from mailflow.commands.client import CommandClient
from mailflow.commands.transport import InMemoryTransport
from mailflow.models import EmailAccount, EmailSummary
from mailflow.store.email_store import EmailStore


@pytest.fixture
def transport():
    """In-memory transport with no handlers registered."""
    return InMemoryTransport()


@pytest.fixture
def store(transport):
    """Store wired to the in-memory transport, last response wins."""
    return EmailStore(CommandClient(transport), discard_stale_results=False)


@pytest.fixture
def account_a():
    return EmailAccount.from_dict(make_account("a"))


@pytest.fixture
def account_b():
    return EmailAccount.from_dict(make_account("b", is_default=True))


@pytest.fixture
def summaries():
    return [
        EmailSummary.from_dict(make_summary(1)),
        EmailSummary.from_dict(make_summary(2, is_read=True)),
    ]
