"""Tests for decoding host payloads into domain models."""

import pytest

from factories import make_account, make_detail, make_summary
from mailflow.models import (
    AppConfig,
    Email,
    EmailAccount,
    EmailSummary,
    FilterRule,
)
from mailflow.utils.errors import SchemaError


def test_account_from_dict():
    account = EmailAccount.from_dict(make_account("1", is_default=True))

    assert account.id == "1"
    assert account.email == "user1@163.com"
    assert account.imap_port == 993
    assert account.smtp_port == 465
    assert account.is_default is True


def test_account_minimal_payload_gets_defaults():
    account = EmailAccount.from_dict({"id": "x"})

    assert account.email == ""
    assert account.is_default is False


@pytest.mark.parametrize("payload", [None, [], "id", {"email": "a@b.c"}, {"id": 5}])
def test_account_rejects_bad_payloads(payload):
    with pytest.raises(SchemaError):
        EmailAccount.from_dict(payload)


def test_summary_maps_from_key():
    summary = EmailSummary.from_dict(make_summary(3, **{"from": "boss@example.com"}))

    assert summary.uid == 3
    assert summary.from_ == "boss@example.com"
    assert summary.to_dict()["from"] == "boss@example.com"


@pytest.mark.parametrize("uid", ["3", None, True, 2.5])
def test_summary_requires_integer_uid(uid):
    data = make_summary(1)
    data["uid"] = uid

    with pytest.raises(SchemaError, match="uid"):
        EmailSummary.from_dict(data)


def test_email_detail_lists():
    email = Email.from_dict(make_detail(4, to=["a@x.com", "b@x.com"], flags=["\\Seen"]))

    assert email.to == ["a@x.com", "b@x.com"]
    assert email.flags == ["\\Seen"]
    assert email.size == 1024
    assert email.html_body is None


def test_email_detail_rejects_bad_recipient_list():
    with pytest.raises(SchemaError, match="to"):
        Email.from_dict(make_detail(4, to="a@x.com"))


def test_app_config_defaults_when_sections_missing():
    cfg = AppConfig.from_dict({"accounts": ["a"]})

    assert cfg.ai_config.api_base == "https://open.bigmodel.cn/api/paas/v4/"
    assert cfg.ai_config.model == "glm-4.7"
    assert cfg.ai_config.summary_language == "zh"
    assert cfg.ui_config.emails_per_page == 50
    assert cfg.ui_config.font_size == 14


def test_app_config_wire_names():
    cfg = AppConfig()
    cfg.ai_config.api_key = "sk"

    data = cfg.to_dict()

    assert data["ai_config"]["zhipu_api_key"] == "sk"
    assert data["ai_config"]["zhipu_model"] == "glm-4.7"
    assert data["ui_config"]["show_preview"] is True
    assert AppConfig.from_dict(data) == cfg


def test_filter_rule_validates_actions():
    with pytest.raises(SchemaError, match="unknown type"):
        FilterRule.from_dict({"id": "r", "actions": [{"type": "explode"}]})

    with pytest.raises(SchemaError, match="folder"):
        FilterRule.from_dict({"id": "r", "actions": [{"type": "moveToFolder"}]})


def test_filter_rule_validates_conditions():
    with pytest.raises(SchemaError, match="operator"):
        FilterRule.from_dict({
            "id": "r",
            "conditions": [{"field": "subject", "operator": "startsWith", "value": "x"}],
        })


def test_filter_rule_defaults():
    rule = FilterRule.from_dict({"id": "r", "actions": [{"type": "addTag", "tag": "vip"}]})

    assert rule.enabled is True
    assert rule.conditions == []
    assert rule.actions[0].to_dict() == {"type": "addTag", "tag": "vip"}
