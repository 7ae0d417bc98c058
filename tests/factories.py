"""Builders for host-shaped payloads used across the tests."""


def make_account(account_id: str, is_default: bool = False, **overrides) -> dict:
    data = {
        "id": account_id,
        "email": f"user{account_id}@163.com",
        "name": f"账户{account_id}",
        "imap_server": "imap.163.com",
        "imap_port": 993,
        "smtp_server": "smtp.163.com",
        "smtp_port": 465,
        "is_default": is_default,
    }
    data.update(overrides)
    return data


def make_summary(uid: int, **overrides) -> dict:
    data = {
        "id": f"msg-{uid}",
        "uid": uid,
        "subject": f"Subject {uid}",
        "from": "sender@example.com",
        "date": "2025-01-15T10:30:00",
        "is_read": False,
        "is_starred": False,
        "has_attachment": False,
        "category": None,
        "preview": "preview",
        "body": "body",
    }
    data.update(overrides)
    return data


def make_detail(uid: int, **overrides) -> dict:
    data = {
        "id": f"msg-{uid}",
        "uid": uid,
        "subject": f"Subject {uid}",
        "from": "sender@example.com",
        "to": ["me@163.com"],
        "date": "2025-01-15T10:30:00",
        "body": "hello",
        "html_body": None,
        "folder": "INBOX",
        "flags": [],
        "is_read": False,
        "is_starred": False,
        "category": "work",
        "has_attachment": False,
        "size": 1024,
    }
    data.update(overrides)
    return data

