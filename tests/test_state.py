"""Tests for the state container."""

import pytest

from mailflow.store.state import StateContainer, StoreState


def test_set_swaps_whole_snapshot():
    container = StateContainer()
    before = container.get()

    after = container.set(is_loading_emails=True, selected_folder="已发送")

    assert after is container.get()
    assert after is not before
    assert before.is_loading_emails is False
    assert after.is_loading_emails is True
    assert after.selected_folder == "已发送"


def test_sequences_are_stored_as_tuples():
    container = StateContainer()

    state = container.set(folders=["INBOX", "Archive"], emails=[])

    assert state.folders == ("INBOX", "Archive")
    assert state.emails == ()


def test_updater_function_sees_current_snapshot():
    container = StateContainer()
    container.set(selected_folder="A")

    state = container.set(lambda s: {"selected_folder": s.selected_folder + "B"})

    assert state.selected_folder == "AB"


def test_unknown_field_raises():
    container = StateContainer()

    with pytest.raises(TypeError):
        container.set(not_a_field=1)


def test_listeners_see_one_notification_per_set():
    container = StateContainer()
    seen = []
    unsubscribe = container.subscribe(lambda new, old: seen.append((old.is_loading_emails, new.is_loading_emails, new.error)))

    container.set(is_loading_emails=True, error=None)
    container.set(is_loading_emails=False, error="x")
    unsubscribe()
    container.set(error=None)

    assert seen == [(False, True, None), (True, False, "x")]


def test_reset_restores_initial_snapshot():
    initial = StoreState(selected_folder="Sent")
    container = StateContainer(initial)
    container.set(selected_folder="INBOX", error="oops")

    container.reset()

    assert container.get() is initial
