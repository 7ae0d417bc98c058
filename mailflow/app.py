"""
Application context.

Everything stateful is built once here at startup and handed to the view
layer; nothing in the package keeps a module-level store.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from mailflow import config
from mailflow.commands.client import CommandClient
from mailflow.commands.transport import CommandTransport, HttpCommandTransport
from mailflow.store.email_store import EmailStore
from mailflow.store.state import StateContainer


logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """The objects shared by every view for one application run."""
    transport: CommandTransport
    client: CommandClient
    container: StateContainer
    store: EmailStore

    async def bootstrap(self) -> None:
        """
        Run the startup sequence.

        Loads the configuration and the account list; when that leaves an
        account selected, also loads its folders and the selected folder's
        emails. Failures end up in ``store.state.error`` like any other
        silent load.
        """
        await self.store.load_config()
        await self.store.load_accounts()
        state = self.store.state
        if state.current_account is None:
            logger.info("No accounts configured")
            return
        await self.store.load_folders()
        await self.store.load_emails(self.store.state.selected_folder)

    def close(self) -> None:
        self.transport.close()


def create_app_context(
    transport: Optional[CommandTransport] = None,
    discard_stale_results: Optional[bool] = None,
) -> AppContext:
    """
    Build the application context.

    Args:
        transport: Command transport to use. Defaults to the HTTP transport
            pointed at ``config.COMMAND_URL``.
        discard_stale_results: Passed to ``EmailStore``; defaults to
            ``config.DISCARD_STALE_RESULTS``.
    """
    if transport is None:
        transport = HttpCommandTransport()
        logger.info("Using command endpoint %s", config.COMMAND_URL)
    client = CommandClient(transport)
    container = StateContainer()
    store = EmailStore(client, container, discard_stale_results=discard_stale_results)
    return AppContext(transport=transport, client=client, container=container, store=store)
