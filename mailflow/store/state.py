"""
State container for the MailFlow client.

Holds one immutable ``StoreState`` snapshot. Every mutation builds a complete
new snapshot and swaps it in with a single assignment, so a reader never
sees half an update (for example ``is_loading_emails`` already False while
``emails`` still holds the previous folder).
"""
import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union

from mailflow import config
from mailflow.models import AppConfig, Email, EmailAccount, EmailSummary


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreState:
    """A consistent snapshot of everything the UI renders."""
    # accounts
    accounts: Tuple[EmailAccount, ...] = ()
    current_account: Optional[EmailAccount] = None
    is_loading_accounts: bool = False

    # mail
    emails: Tuple[EmailSummary, ...] = ()
    current_email: Optional[Email] = None
    selected_folder: str = config.DEFAULT_FOLDER
    folders: Tuple[str, ...] = field(default=config.DEFAULT_FOLDERS)
    is_loading_emails: bool = False
    is_loading_email: bool = False

    # configuration
    config: Optional[AppConfig] = None

    # last failure, shown as a dismissible banner
    error: Optional[str] = None


Listener = Callable[[StoreState, StoreState], None]
Updater = Callable[[StoreState], dict]

_SEQUENCE_FIELDS = ("accounts", "emails", "folders")


class StateContainer:
    """
    Single mutable holder of the current ``StoreState``.

    ``set`` accepts either field overrides or a function of the current
    snapshot returning overrides. Listeners are called after the swap with
    ``(new_state, old_state)``.
    """

    def __init__(self, initial: Optional[StoreState] = None):
        self._initial = initial or StoreState()
        self._state = self._initial
        self._listeners: List[Listener] = []

    def get(self) -> StoreState:
        return self._state

    def set(self, updater: Union[Updater, None] = None, **changes) -> StoreState:
        if updater is not None:
            changes = {**updater(self._state), **changes}
        for name in _SEQUENCE_FIELDS:
            if name in changes:
                changes[name] = tuple(changes[name])

        old = self._state
        self._state = dataclasses.replace(old, **changes)
        self._notify(self._state, old)
        return self._state

    def reset(self) -> None:
        """Restore the snapshot the container was created with."""
        old = self._state
        self._state = self._initial
        self._notify(self._state, old)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, new: StoreState, old: StoreState) -> None:
        for listener in list(self._listeners):
            listener(new, old)
