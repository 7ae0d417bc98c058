"""
Core domain models for the MailFlow client.

This module contains pure domain models (dataclasses) without any transport
or UI dependencies. Every model that crosses the command boundary knows how
to decode itself from the host's JSON shape (``from_dict``) and how to encode
itself back (``to_dict``). Decoding is strict about identity fields and
lenient about everything else, mirroring what the host actually sends.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from mailflow.utils.errors import SchemaError


DEFAULT_AI_API_BASE = "https://open.bigmodel.cn/api/paas/v4/"
DEFAULT_AI_MODEL = "glm-4.7"


def _require_mapping(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise SchemaError(f"Expected an object for {what}, got {type(data).__name__}")
    return data


def _require_str(data: Dict[str, Any], key: str, what: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise SchemaError(f"{what}: field '{key}' must be a string")
    return value


def _require_int(data: Dict[str, Any], key: str, what: str) -> int:
    value = data.get(key)
    # bool is an int subclass; a uid of True is never valid
    if isinstance(value, bool) or not isinstance(value, int):
        raise SchemaError(f"{what}: field '{key}' must be an integer")
    return value


def _str_list(value: Any, key: str, what: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SchemaError(f"{what}: field '{key}' must be a list of strings")
    return list(value)


@dataclass(slots=True)
class EmailAccount:
    """Represents a configured mailbox as reported by the host."""
    id: str
    email: str = ""
    name: str = ""
    imap_server: str = ""
    imap_port: int = 993
    smtp_server: str = ""
    smtp_port: int = 465
    is_default: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> "EmailAccount":
        data = _require_mapping(data, "account")
        return cls(
            id=_require_str(data, "id", "account"),
            email=data.get("email") or "",
            name=data.get("name") or "",
            imap_server=data.get("imap_server") or "",
            imap_port=data.get("imap_port") or 993,
            smtp_server=data.get("smtp_server") or "",
            smtp_port=data.get("smtp_port") or 465,
            is_default=bool(data.get("is_default", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "imap_server": self.imap_server,
            "imap_port": self.imap_port,
            "smtp_server": self.smtp_server,
            "smtp_port": self.smtp_port,
            "is_default": self.is_default,
        }


@dataclass(slots=True)
class EmailSummary:
    """A row of a folder listing."""
    id: str
    uid: int
    subject: str = ""
    from_: str = ""  # wire key "from"
    date: str = ""
    is_read: bool = False
    is_starred: bool = False
    has_attachment: bool = False
    category: Optional[str] = None
    preview: str = ""
    body: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "EmailSummary":
        data = _require_mapping(data, "email summary")
        return cls(
            id=str(data.get("id", "")),
            uid=_require_int(data, "uid", "email summary"),
            subject=data.get("subject") or "",
            from_=data.get("from") or "",
            date=data.get("date") or "",
            is_read=bool(data.get("is_read", False)),
            is_starred=bool(data.get("is_starred", False)),
            has_attachment=bool(data.get("has_attachment", False)),
            category=data.get("category"),
            preview=data.get("preview") or "",
            body=data.get("body") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "uid": self.uid,
            "subject": self.subject,
            "from": self.from_,
            "date": self.date,
            "is_read": self.is_read,
            "is_starred": self.is_starred,
            "has_attachment": self.has_attachment,
            "category": self.category,
            "preview": self.preview,
            "body": self.body,
        }


@dataclass(slots=True)
class Email:
    """Full message detail fetched on demand for one (folder, uid)."""
    id: str
    uid: int
    subject: str = ""
    from_: str = ""
    to: List[str] = field(default_factory=list)
    date: str = ""
    body: str = ""
    html_body: Optional[str] = None
    folder: str = ""
    flags: List[str] = field(default_factory=list)
    is_read: bool = False
    is_starred: bool = False
    category: Optional[str] = None
    has_attachment: bool = False
    size: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "Email":
        data = _require_mapping(data, "email")
        return cls(
            id=str(data.get("id", "")),
            uid=_require_int(data, "uid", "email"),
            subject=data.get("subject") or "",
            from_=data.get("from") or "",
            to=_str_list(data.get("to"), "to", "email"),
            date=data.get("date") or "",
            body=data.get("body") or "",
            html_body=data.get("html_body"),
            folder=data.get("folder") or "",
            flags=_str_list(data.get("flags"), "flags", "email"),
            is_read=bool(data.get("is_read", False)),
            is_starred=bool(data.get("is_starred", False)),
            category=data.get("category"),
            has_attachment=bool(data.get("has_attachment", False)),
            size=data.get("size") or 0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "uid": self.uid,
            "subject": self.subject,
            "from": self.from_,
            "to": list(self.to),
            "date": self.date,
            "body": self.body,
            "html_body": self.html_body,
            "folder": self.folder,
            "flags": list(self.flags),
            "is_read": self.is_read,
            "is_starred": self.is_starred,
            "category": self.category,
            "has_attachment": self.has_attachment,
            "size": self.size,
        }


@dataclass(slots=True)
class AiConfig:
    """AI provider settings."""
    api_key: Optional[str] = None
    api_base: str = DEFAULT_AI_API_BASE
    model: str = DEFAULT_AI_MODEL
    auto_classify: bool = False
    auto_summarize: bool = False
    summary_language: str = "zh"

    @classmethod
    def from_dict(cls, data: Any) -> "AiConfig":
        data = _require_mapping(data, "ai_config")
        return cls(
            api_key=data.get("zhipu_api_key"),
            api_base=data.get("zhipu_api_base") or DEFAULT_AI_API_BASE,
            model=data.get("zhipu_model") or DEFAULT_AI_MODEL,
            auto_classify=bool(data.get("auto_classify", False)),
            auto_summarize=bool(data.get("auto_summarize", False)),
            summary_language=data.get("summary_language") or "zh",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "zhipu_api_key": self.api_key,
            "zhipu_api_base": self.api_base,
            "zhipu_model": self.model,
            "auto_classify": self.auto_classify,
            "auto_summarize": self.auto_summarize,
            "summary_language": self.summary_language,
        }


@dataclass(slots=True)
class UiConfig:
    """User interface preferences."""
    theme: str = "light"
    language: str = "zh"
    emails_per_page: int = 50
    show_preview: bool = True
    font_size: int = 14

    @classmethod
    def from_dict(cls, data: Any) -> "UiConfig":
        data = _require_mapping(data, "ui_config")
        return cls(
            theme=data.get("theme") or "light",
            language=data.get("language") or "zh",
            emails_per_page=data.get("emails_per_page") or 50,
            show_preview=bool(data.get("show_preview", True)),
            font_size=data.get("font_size") or 14,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "theme": self.theme,
            "language": self.language,
            "emails_per_page": self.emails_per_page,
            "show_preview": self.show_preview,
            "font_size": self.font_size,
        }


@dataclass(slots=True)
class AppConfig:
    """Application configuration singleton, replaced wholesale on update."""
    accounts: List[str] = field(default_factory=list)
    default_account_id: Optional[str] = None
    ai_config: AiConfig = field(default_factory=AiConfig)
    ui_config: UiConfig = field(default_factory=UiConfig)

    @classmethod
    def from_dict(cls, data: Any) -> "AppConfig":
        data = _require_mapping(data, "config")
        ai = data.get("ai_config")
        ui = data.get("ui_config")
        return cls(
            accounts=_str_list(data.get("accounts"), "accounts", "config"),
            default_account_id=data.get("default_account_id"),
            ai_config=AiConfig.from_dict(ai) if ai is not None else AiConfig(),
            ui_config=UiConfig.from_dict(ui) if ui is not None else UiConfig(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accounts": list(self.accounts),
            "default_account_id": self.default_account_id,
            "ai_config": self.ai_config.to_dict(),
            "ui_config": self.ui_config.to_dict(),
        }


FILTER_FIELDS = ("from", "to", "subject", "body", "date")
FILTER_OPERATORS = ("contains", "notContains", "equals", "notEquals", "regex")
FILTER_ACTIONS = ("moveToFolder", "markAsRead", "markAsStarred", "delete", "addTag")


@dataclass(slots=True)
class FilterCondition:
    field: str
    operator: str
    value: str

    @classmethod
    def from_dict(cls, data: Any) -> "FilterCondition":
        data = _require_mapping(data, "filter condition")
        field_name = _require_str(data, "field", "filter condition")
        operator = _require_str(data, "operator", "filter condition")
        if field_name not in FILTER_FIELDS:
            raise SchemaError(f"filter condition: unknown field '{field_name}'")
        if operator not in FILTER_OPERATORS:
            raise SchemaError(f"filter condition: unknown operator '{operator}'")
        return cls(field=field_name, operator=operator, value=str(data.get("value", "")))

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "operator": self.operator, "value": self.value}


@dataclass(slots=True)
class FilterAction:
    type: str
    folder: Optional[str] = None  # moveToFolder
    tag: Optional[str] = None  # addTag

    @classmethod
    def from_dict(cls, data: Any) -> "FilterAction":
        data = _require_mapping(data, "filter action")
        action_type = _require_str(data, "type", "filter action")
        if action_type not in FILTER_ACTIONS:
            raise SchemaError(f"filter action: unknown type '{action_type}'")
        if action_type == "moveToFolder":
            return cls(type=action_type, folder=_require_str(data, "folder", "filter action"))
        if action_type == "addTag":
            return cls(type=action_type, tag=_require_str(data, "tag", "filter action"))
        return cls(type=action_type)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.type}
        if self.folder is not None:
            result["folder"] = self.folder
        if self.tag is not None:
            result["tag"] = self.tag
        return result


@dataclass(slots=True)
class FilterRule:
    """A host-side mail filter rule."""
    id: str
    name: str = ""
    conditions: List[FilterCondition] = field(default_factory=list)
    actions: List[FilterAction] = field(default_factory=list)
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: Any) -> "FilterRule":
        data = _require_mapping(data, "filter rule")
        conditions = data.get("conditions") or []
        actions = data.get("actions") or []
        if not isinstance(conditions, list) or not isinstance(actions, list):
            raise SchemaError("filter rule: conditions and actions must be lists")
        return cls(
            id=_require_str(data, "id", "filter rule"),
            name=data.get("name") or "",
            conditions=[FilterCondition.from_dict(c) for c in conditions],
            actions=[FilterAction.from_dict(a) for a in actions],
            enabled=bool(data.get("enabled", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "conditions": [c.to_dict() for c in self.conditions],
            "actions": [a.to_dict() for a in self.actions],
            "enabled": self.enabled,
        }
