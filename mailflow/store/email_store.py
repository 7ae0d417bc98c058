"""
Email store: the coordinator between UI intents and the host commands.

Every operation follows the same shape. It raises the relevant loading flag,
invokes one host command through ``CommandClient``, merges the result into
the fields that operation owns and lowers the flag again, success or not.
A failure is recorded as the store's ``error`` message; whether it is also
re-raised to the caller is decided by the operation's ``ErrorPolicy``.

The store holds no cache: every load is a fresh round trip, optionally
asking the host to bypass its own cache with ``force_refresh``.
"""
import dataclasses
import logging
from typing import Any, Dict, List, NoReturn, Optional, Sequence, Tuple

from mailflow import config
from mailflow.commands.client import CommandClient
from mailflow.commands.policies import ErrorPolicy, policy_for
from mailflow.models import AppConfig, EmailAccount, EmailSummary, FilterRule
from mailflow.store.state import StateContainer, StoreState
from mailflow.utils.errors import (
    NO_ACCOUNT_ADDED,
    NO_ACCOUNT_AVAILABLE,
    NO_ACCOUNT_SELECTED,
    NoAccountError,
    handle_error,
)


logger = logging.getLogger(__name__)


def _pick_current(accounts: Sequence[EmailAccount]) -> EmailAccount:
    """The default-flagged account, else the first one."""
    for account in accounts:
        if account.is_default:
            return account
    return accounts[0]


def _without_uid(emails: Sequence[EmailSummary], uid: int) -> List[EmailSummary]:
    """Drop the first summary with ``uid``; order of the rest is kept."""
    remaining = list(emails)
    for index, email in enumerate(remaining):
        if email.uid == uid:
            del remaining[index]
            break
    return remaining


class EmailStore:
    """
    Stateful client over the host's account, mail, AI and config commands.

    Args:
        client: Typed command client.
        container: State container to write to. A fresh one is created if
            omitted.
        discard_stale_results: When True, each of ``emails``,
            ``current_email`` and ``folders`` carries a request epoch and a
            response that is no longer the latest request for its field is
            dropped. When False (the default) the last response to arrive
            wins.
    """

    def __init__(
        self,
        client: CommandClient,
        container: Optional[StateContainer] = None,
        discard_stale_results: Optional[bool] = None,
    ):
        self.client = client
        self.container = container or StateContainer()
        if discard_stale_results is None:
            discard_stale_results = config.DISCARD_STALE_RESULTS
        self.discard_stale_results = discard_stale_results
        self._epochs: Dict[str, int] = {"emails": 0, "current_email": 0, "folders": 0}

    @property
    def state(self) -> StoreState:
        return self.container.get()

    # Internals

    def _set(self, **changes) -> None:
        self.container.set(**changes)

    def _record_failure(self, operation: str, error: Exception, **changes) -> None:
        """
        Store the failure message as ``error``, together with ``changes``.

        Re-raises ``error`` when the operation is PROPAGATING; callers of
        SILENT operations return after this call.
        """
        message = handle_error(error)
        logger.warning("%s failed: %s", operation, message)
        self.container.set(error=message, **changes)
        if policy_for(operation) is ErrorPolicy.PROPAGATING:
            raise error

    def _next_epoch(self, field_name: str) -> int:
        self._epochs[field_name] += 1
        return self._epochs[field_name]

    def _is_stale(self, field_name: str, epoch: int) -> bool:
        if not self.discard_stale_results:
            return False
        if epoch != self._epochs[field_name]:
            logger.debug("discarding stale %s result (epoch %d < %d)",
                         field_name, epoch, self._epochs[field_name])
            return True
        return False

    def _resolve_account(self) -> Tuple[Optional[EmailAccount], Dict[str, Any]]:
        """
        Find the account an operation should run against.

        Returns the account (None if there are no accounts at all) and the
        state changes to fold into the operation's first write: when no
        account is current but some exist, the first one is selected.
        """
        state = self.state
        if state.current_account is not None:
            return state.current_account, {}
        if state.accounts:
            account = state.accounts[0]
            logger.info("No current account, selecting %s", account.id)
            return account, {"current_account": account}
        return None, {}

    def _fail_precondition(self, operation: str, message: str) -> NoReturn:
        logger.warning("%s: %s", operation, message)
        self._set(error=message)
        raise NoAccountError(message)

    def _require_current_account(self, operation: str, message: str) -> EmailAccount:
        """The current account, without auto-selection; records and raises if unset."""
        account = self.state.current_account
        if account is None:
            self._fail_precondition(operation, message)
        return account

    def _require_account(self, operation: str, message: str = NO_ACCOUNT_SELECTED) -> EmailAccount:
        """Resolve an account (auto-selecting) or record and raise ``NoAccountError``."""
        account, changes = self._resolve_account()
        if account is None:
            self._fail_precondition(operation, message)
        if changes:
            self._set(**changes)
        return account

    # Accounts

    async def load_accounts(self) -> None:
        logger.debug("load_accounts")
        self._set(is_loading_accounts=True, error=None)
        try:
            accounts = await self.client.list_accounts()
        except Exception as e:
            self._record_failure("load_accounts", e, is_loading_accounts=False)
            return

        logger.info("Loaded %d account(s)", len(accounts))
        if not accounts:
            self._set(accounts=[], current_account=None, emails=[], is_loading_accounts=False)
            return

        changes: Dict[str, Any] = {"accounts": accounts, "is_loading_accounts": False}
        current = self.state.current_account
        refreshed = None
        if current is not None:
            refreshed = next((a for a in accounts if a.id == current.id), None)
        # Keep the current identity while it exists; otherwise pick again
        changes["current_account"] = refreshed if refreshed is not None else _pick_current(accounts)
        self._set(**changes)

    async def add_account(self, email: str, password: str, name: str, provider: str) -> None:
        logger.debug("add_account %s (%s)", email, provider)
        self._set(is_loading_accounts=True, error=None)
        try:
            account_id = await self.client.add_account(email, password, name, provider)
        except Exception as e:
            self._record_failure("add_account", e, is_loading_accounts=False)

        await self.load_accounts()
        new_account = next((a for a in self.state.accounts if a.id == account_id), None)
        if new_account is not None:
            self._set(current_account=new_account)

    async def delete_account(self, account_id: str) -> None:
        logger.debug("delete_account %s", account_id)
        self._set(error=None)
        try:
            await self.client.delete_account(account_id)
        except Exception as e:
            self._record_failure("delete_account", e)
        await self.load_accounts()

    async def set_default_account(self, account_id: str) -> None:
        try:
            await self.client.set_default_account(account_id)
        except Exception as e:
            self._record_failure("set_default_account", e)
        await self.load_accounts()

    def set_current_account(self, account: Optional[EmailAccount]) -> None:
        self._set(current_account=account)

    async def test_connection(self) -> str:
        account = self._require_current_account("test_connection", NO_ACCOUNT_AVAILABLE)
        logger.debug("test_connection %s", account.id)
        try:
            result = await self.client.test_connection(account.id)
        except Exception as e:
            self._record_failure("test_connection", e)
        logger.info("Connection test for %s: %s", account.id, result)
        return result

    # Mail

    async def load_folders(self, force_refresh: bool = False) -> None:
        account, changes = self._resolve_account()
        if account is None:
            self._set(error=NO_ACCOUNT_SELECTED)
            return
        if changes:
            self._set(**changes)

        epoch = self._next_epoch("folders")
        try:
            folders = await self.client.fetch_folders(account.id, force_refresh=force_refresh)
        except Exception as e:
            if not self._is_stale("folders", epoch):
                self._record_failure("load_folders", e)
            return
        if not self._is_stale("folders", epoch):
            self._set(folders=folders)

    async def load_emails(
        self,
        folder: str,
        limit: int = config.DEFAULT_PAGE_SIZE,
        offset: int = config.DEFAULT_OFFSET,
        force_refresh: bool = False,
    ) -> None:
        logger.debug("load_emails folder=%s limit=%d offset=%d", folder, limit, offset)
        account, changes = self._resolve_account()
        if account is None:
            self._set(error=NO_ACCOUNT_ADDED, is_loading_emails=False, emails=[])
            return

        epoch = self._next_epoch("emails")
        self._set(is_loading_emails=True, error=None, selected_folder=folder, **changes)
        try:
            emails = await self.client.fetch_emails(
                account.id, folder, limit=limit, offset=offset, force_refresh=force_refresh
            )
        except Exception as e:
            if not self._is_stale("emails", epoch):
                self._record_failure("load_emails", e, is_loading_emails=False)
            return

        if self._is_stale("emails", epoch):
            return
        logger.debug("Loaded %d email(s) from %s", len(emails), folder)
        self._set(emails=emails, is_loading_emails=False)

    async def load_email_detail(self, folder: str, uid: int, force_refresh: bool = False) -> None:
        account, changes = self._resolve_account()
        if account is None:
            self._set(error=NO_ACCOUNT_SELECTED)
            return

        epoch = self._next_epoch("current_email")
        self._set(is_loading_email=True, error=None, **changes)
        try:
            email = await self.client.fetch_email_detail(
                account.id, folder, uid, force_refresh=force_refresh
            )
        except Exception as e:
            if not self._is_stale("current_email", epoch):
                self._record_failure("load_email_detail", e, is_loading_email=False)
            return

        if not self._is_stale("current_email", epoch):
            self._set(current_email=email, is_loading_email=False)

    async def mark_as_read(self, folder: str, uid: int) -> None:
        account, changes = self._resolve_account()
        if account is None:
            self._set(error=NO_ACCOUNT_SELECTED)
            return
        if changes:
            self._set(**changes)

        try:
            await self.client.mark_email_read(account.id, folder, uid)
        except Exception as e:
            self._record_failure("mark_as_read", e)
            return

        # Optimistic local update; the list is not re-fetched
        self.container.set(lambda state: {
            "emails": [
                dataclasses.replace(e, is_read=True) if e.uid == uid else e
                for e in state.emails
            ],
        })

    async def delete_email(self, folder: str, uid: int) -> None:
        account = self._require_account("delete_email")
        logger.debug("delete_email folder=%s uid=%d", folder, uid)
        try:
            await self.client.delete_email(account.id, folder, uid)
        except Exception as e:
            self._record_failure("delete_email", e)
        self.container.set(lambda state: {"emails": _without_uid(state.emails, uid)})

    async def move_email(self, folder: str, uid: int, dest_folder: str) -> None:
        account = self._require_account("move_email")
        logger.debug("move_email folder=%s uid=%d dest=%s", folder, uid, dest_folder)
        try:
            await self.client.move_email(account.id, folder, uid, dest_folder)
        except Exception as e:
            self._record_failure("move_email", e)
        # The destination folder's list is not touched; it is fetched when opened
        self.container.set(lambda state: {"emails": _without_uid(state.emails, uid)})

    async def send_email(self, to: List[str], subject: str, body: str, is_html: bool = False) -> None:
        account = self._require_current_account("send_email", NO_ACCOUNT_SELECTED)
        logger.debug("send_email to=%d recipient(s)", len(to))
        try:
            await self.client.send_email(account.id, to, subject, body, is_html=is_html)
        except Exception as e:
            self._record_failure("send_email", e)
        logger.info("Email sent from %s", account.email or account.id)

    async def clear_email_cache(self, folder: Optional[str] = None) -> None:
        account = self._require_account("clear_email_cache")
        try:
            await self.client.clear_email_cache(account.id, folder)
        except Exception as e:
            self._record_failure("clear_email_cache", e)

    # AI

    async def classify_email(self, subject: str, sender: str, body: str) -> str:
        try:
            return await self.client.classify_email(subject, sender, body)
        except Exception as e:
            self._record_failure("classify_email", e)

    async def summarize_email(self, content: str, language: str = config.DEFAULT_SUMMARY_LANGUAGE) -> str:
        try:
            return await self.client.summarize_email(content, language)
        except Exception as e:
            self._record_failure("summarize_email", e)

    async def translate_text(self, text: str, target_lang: str) -> str:
        try:
            return await self.client.translate_text(text, target_lang)
        except Exception as e:
            self._record_failure("translate_text", e)

    async def generate_reply(self, subject: str, sender: str, body: str) -> str:
        try:
            return await self.client.generate_reply(subject, sender, body)
        except Exception as e:
            self._record_failure("generate_reply", e)

    async def extract_key_info(self, email_body: str) -> str:
        try:
            return await self.client.extract_key_info(email_body)
        except Exception as e:
            self._record_failure("extract_key_info", e)

    # Config

    async def load_config(self) -> None:
        try:
            app_config = await self.client.get_app_config()
        except Exception as e:
            self._record_failure("load_config", e)
            return
        self._set(config=app_config)

    async def update_config(self, app_config: AppConfig) -> None:
        try:
            await self.client.update_app_config(app_config)
        except Exception as e:
            self._record_failure("update_config", e)
        # The submitted value is stored as-is, not re-fetched
        self._set(config=app_config)

    async def set_ai_api_key(self, api_key: str) -> None:
        try:
            await self.client.set_ai_api_key(api_key)
        except Exception as e:
            self._record_failure("set_ai_api_key", e)
        await self.load_config()

    async def load_filter_rules(self) -> List[FilterRule]:
        try:
            return await self.client.get_filter_rules()
        except Exception as e:
            self._record_failure("load_filter_rules", e)
            return []

    async def save_filter_rule(self, rule: FilterRule) -> List[FilterRule]:
        try:
            await self.client.save_filter_rule(rule)
            return await self.client.get_filter_rules()
        except Exception as e:
            self._record_failure("save_filter_rule", e)

    async def delete_filter_rule(self, rule_id: str) -> List[FilterRule]:
        try:
            await self.client.delete_filter_rule(rule_id)
            return await self.client.get_filter_rules()
        except Exception as e:
            self._record_failure("delete_filter_rule", e)

    # View helpers

    def set_error(self, error: Optional[str]) -> None:
        self._set(error=error)

    def clear_current_email(self) -> None:
        self._set(current_email=None)

    def set_folder(self, folder: str) -> None:
        self._set(selected_folder=folder)

    async def select_folder(self, folder: str, force_refresh: bool = False) -> None:
        """A folder became selected: record it and load its emails."""
        self.set_folder(folder)
        await self.load_emails(folder, force_refresh=force_refresh)

    async def open_email(self, folder: str, uid: int) -> None:
        """An email was opened: fetch its detail, then mark it read if needed."""
        await self.load_email_detail(folder, uid)
        current = self.state.current_email
        if current is not None and current.uid == uid and not current.is_read:
            await self.mark_as_read(folder, uid)
