"""
Main application entry point.

Builds the application context against the host command endpoint, runs the
startup sequence and reports what was loaded. The view layer attaches to
``AppContext`` the same way.
"""
import asyncio
import logging
import sys

from mailflow import config
from mailflow.app import create_app_context
from mailflow.utils.logging_cfg import setup_logging


logger = logging.getLogger(__name__)


async def run() -> int:
    context = create_app_context()
    try:
        await context.bootstrap()
    finally:
        context.close()

    state = context.store.state
    if state.error:
        print(f"MailFlow: {state.error}", file=sys.stderr)
        return 1

    account = state.current_account
    print(f"Accounts: {len(state.accounts)}")
    if account is not None:
        print(f"Current account: {account.name or account.email} <{account.email}>")
        print(f"Folders: {', '.join(state.folders)}")
        print(f"{state.selected_folder}: {len(state.emails)} email(s)")
    return 0


def main():
    """Main function"""
    # Load environment variables (and .env) before anything reads config
    config.load_env()
    setup_logging(debug=config.DEBUG)
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
