"""
Typed client over the host command boundary.

One method per host command. Each method builds the argument object with the
host's exact field names, invokes the transport and decodes the response into
domain models. A response of the wrong shape raises ``SchemaError``, which
the store treats like any other failed call.
"""
import logging
from typing import Any, Callable, List, Optional, TypeVar

from mailflow import config
from mailflow.commands.transport import CommandTransport
from mailflow.models import AppConfig, Email, EmailAccount, EmailSummary, FilterRule
from mailflow.utils.errors import SchemaError


logger = logging.getLogger(__name__)

T = TypeVar("T")


def _decode(command: str, decoder: Callable[[Any], T], data: Any) -> T:
    try:
        return decoder(data)
    except SchemaError as e:
        raise SchemaError(f"{command}: {e}", command) from e


def _decode_list(command: str, decoder: Callable[[Any], T], data: Any) -> List[T]:
    if not isinstance(data, list):
        raise SchemaError(f"{command}: expected a list, got {type(data).__name__}", command)
    return [_decode(command, decoder, item) for item in data]


def _decode_str(command: str, data: Any) -> str:
    if not isinstance(data, str):
        raise SchemaError(f"{command}: expected a string, got {type(data).__name__}", command)
    return data


class CommandClient:
    """Typed wrapper around a ``CommandTransport``."""

    def __init__(self, transport: CommandTransport):
        self.transport = transport

    async def _call(self, command: str, args: Optional[dict] = None) -> Any:
        logger.debug("invoke %s", command)
        if args is None:
            return await self.transport.invoke(command)
        return await self.transport.invoke(command, args)

    # Accounts

    async def list_accounts(self) -> List[EmailAccount]:
        data = await self._call("list_accounts")
        return _decode_list("list_accounts", EmailAccount.from_dict, data)

    async def add_account(self, email: str, password: str, name: str, provider: str) -> str:
        data = await self._call("add_account", {
            "email": email,
            "password": password,
            "name": name,
            "provider": provider,
        })
        return _decode_str("add_account", data)

    async def delete_account(self, account_id: str) -> None:
        await self._call("delete_account", {"id": account_id})

    async def set_default_account(self, account_id: str) -> None:
        await self._call("set_default_account", {"id": account_id})

    async def test_connection(self, account_id: str) -> str:
        data = await self._call("test_connection", {"accountId": account_id})
        return _decode_str("test_connection", data)

    # Mail

    async def fetch_folders(self, account_id: str, force_refresh: bool = False) -> List[str]:
        data = await self._call("fetch_folders", {
            "accountId": account_id,
            "forceRefresh": force_refresh,
        })
        if not isinstance(data, list) or not all(isinstance(name, str) for name in data):
            raise SchemaError("fetch_folders: expected a list of folder names", "fetch_folders")
        return list(data)

    async def fetch_emails(
        self,
        account_id: str,
        folder: str,
        limit: int = config.DEFAULT_PAGE_SIZE,
        offset: int = config.DEFAULT_OFFSET,
        force_refresh: bool = False,
    ) -> List[EmailSummary]:
        data = await self._call("fetch_emails", {
            "accountId": account_id,
            "folder": folder,
            "limit": limit,
            "offset": offset,
            "forceRefresh": force_refresh,
        })
        return _decode_list("fetch_emails", EmailSummary.from_dict, data)

    async def fetch_email_detail(
        self,
        account_id: str,
        folder: str,
        uid: int,
        force_refresh: bool = False,
    ) -> Email:
        data = await self._call("fetch_email_detail", {
            "accountId": account_id,
            "folder": folder,
            "uid": uid,
            "forceRefresh": force_refresh,
        })
        return _decode("fetch_email_detail", Email.from_dict, data)

    async def mark_email_read(self, account_id: str, folder: str, uid: int) -> None:
        await self._call("mark_email_read", {"accountId": account_id, "folder": folder, "uid": uid})

    async def delete_email(self, account_id: str, folder: str, uid: int) -> None:
        await self._call("delete_email", {"accountId": account_id, "folder": folder, "uid": uid})

    async def move_email(self, account_id: str, folder: str, uid: int, dest_folder: str) -> None:
        await self._call("move_email", {
            "accountId": account_id,
            "folder": folder,
            "uid": uid,
            "destFolder": dest_folder,
        })

    async def send_email(
        self,
        account_id: str,
        to: List[str],
        subject: str,
        body: str,
        is_html: bool = False,
    ) -> None:
        await self._call("send_email", {
            "accountId": account_id,
            "to": list(to),
            "subject": subject,
            "body": body,
            "isHtml": is_html,
        })

    async def clear_email_cache(self, account_id: str, folder: Optional[str] = None) -> None:
        await self._call("clear_email_cache", {"accountId": account_id, "folder": folder})

    # AI

    async def classify_email(self, subject: str, sender: str, body: str) -> str:
        data = await self._call("classify_email_ai", {"subject": subject, "from": sender, "body": body})
        return _decode_str("classify_email_ai", data)

    async def summarize_email(self, content: str, language: str = config.DEFAULT_SUMMARY_LANGUAGE) -> str:
        data = await self._call("summarize_email", {"content": content, "language": language})
        return _decode_str("summarize_email", data)

    async def translate_text(self, text: str, target_lang: str) -> str:
        data = await self._call("translate_text", {"text": text, "targetLang": target_lang})
        return _decode_str("translate_text", data)

    async def generate_reply(self, subject: str, sender: str, body: str) -> str:
        data = await self._call("generate_reply", {"subject": subject, "from": sender, "body": body})
        return _decode_str("generate_reply", data)

    async def extract_key_info(self, email_body: str) -> str:
        data = await self._call("extract_key_info", {"emailBody": email_body})
        return _decode_str("extract_key_info", data)

    # Config

    async def get_app_config(self) -> AppConfig:
        data = await self._call("get_app_config")
        return _decode("get_app_config", AppConfig.from_dict, data)

    async def update_app_config(self, app_config: AppConfig) -> None:
        await self._call("update_app_config", {"config": app_config.to_dict()})

    async def set_ai_api_key(self, api_key: str) -> None:
        await self._call("set_ai_api_key", {"apiKey": api_key})

    async def get_filter_rules(self) -> List[FilterRule]:
        data = await self._call("get_filter_rules")
        return _decode_list("get_filter_rules", FilterRule.from_dict, data)

    async def save_filter_rule(self, rule: FilterRule) -> None:
        await self._call("save_filter_rule", {"rule": rule.to_dict()})

    async def delete_filter_rule(self, rule_id: str) -> None:
        await self._call("delete_filter_rule", {"id": rule_id})
