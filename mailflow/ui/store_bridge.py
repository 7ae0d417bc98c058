"""
Qt signal bridge for the state container.

Widgets should not poll the store. ``StoreSignals`` subscribes to a
``StateContainer`` and re-emits every snapshot swap as Qt signals, so views
connect slots the same way they connect to any other widget signal.
"""
from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal

from mailflow.store.state import StateContainer, StoreState


class StoreSignals(QObject):
    """Re-emits state container changes as Qt signals."""

    state_changed = pyqtSignal(object)  # new StoreState
    error_changed = pyqtSignal(object)  # new error message or None
    emails_changed = pyqtSignal(object)  # tuple of EmailSummary
    loading_changed = pyqtSignal(str, bool)  # flag name, value

    _LOADING_FLAGS = ("is_loading_accounts", "is_loading_emails", "is_loading_email")

    def __init__(self, container: StateContainer, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._unsubscribe = container.subscribe(self._on_change)

    def _on_change(self, new: StoreState, old: StoreState) -> None:
        self.state_changed.emit(new)
        if new.error != old.error:
            self.error_changed.emit(new.error)
        if new.emails != old.emails:
            self.emails_changed.emit(new.emails)
        for flag in self._LOADING_FLAGS:
            value = getattr(new, flag)
            if value != getattr(old, flag):
                self.loading_changed.emit(flag, value)

    def detach(self) -> None:
        """Stop listening to the container."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
