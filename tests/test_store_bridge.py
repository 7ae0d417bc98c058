"""Tests for the Qt signal bridge."""

import pytest

pytest.importorskip("PyQt5.QtCore")

from mailflow.models import EmailSummary  # noqa: E402
from mailflow.store.state import StateContainer  # noqa: E402
from mailflow.ui.store_bridge import StoreSignals  # noqa: E402


def test_signals_follow_container_changes():
    container = StateContainer()
    signals = StoreSignals(container)
    states, errors, emails, loading = [], [], [], []
    signals.state_changed.connect(states.append)
    signals.error_changed.connect(errors.append)
    signals.emails_changed.connect(emails.append)
    signals.loading_changed.connect(lambda name, value: loading.append((name, value)))

    container.set(is_loading_emails=True, error=None)
    container.set(is_loading_emails=False, emails=[EmailSummary(id="m1", uid=1)])
    container.set(error="boom")

    assert len(states) == 3
    assert states[-1] is container.get()
    assert errors == ["boom"]
    assert [[e.uid for e in batch] for batch in emails] == [[1]]
    assert loading == [("is_loading_emails", True), ("is_loading_emails", False)]


def test_detach_stops_emitting():
    container = StateContainer()
    signals = StoreSignals(container)
    states = []
    signals.state_changed.connect(states.append)

    signals.detach()
    container.set(error="ignored")

    assert states == []
