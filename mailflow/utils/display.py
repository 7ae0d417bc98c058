"""
Display helpers for email rows and the detail pane.

Pure functions mapping raw email/category data to labels, style tokens
and formatted dates. Nothing here touches the store.
"""
import re
from datetime import date, datetime, time
from typing import Any, Union


CATEGORY_LABELS = {
    "spam": "垃圾",
    "ads": "广告",
    "subscription": "订阅",
    "work": "工作",
    "personal": "个人",
    "other": "其他",
}

CATEGORY_STYLES = {
    "spam": "bg-red-100 text-red-700 dark:bg-red-900/30 dark:text-red-400",
    "ads": "bg-orange-100 text-orange-700 dark:bg-orange-900/30 dark:text-orange-400",
    "subscription": "bg-blue-100 text-blue-700 dark:bg-blue-900/30 dark:text-blue-400",
    "work": "bg-purple-100 text-purple-700 dark:bg-purple-900/30 dark:text-purple-400",
    "personal": "bg-green-100 text-green-700 dark:bg-green-900/30 dark:text-green-400",
    "other": "bg-gray-100 text-gray-700 dark:bg-gray-900/30 dark:text-gray-400",
}

SHORT_DATE_FORMAT = "MM/dd HH:mm"
FULL_DATE_FORMAT = "yyyy年MM月dd日 HH:mm"

_TOKENS = {
    "yyyy": "%Y",
    "MM": "%m",
    "dd": "%d",
    "HH": "%H",
    "mm": "%M",
    "ss": "%S",
}
_TOKEN_RE = re.compile("|".join(_TOKENS))

DateInput = Union[datetime, date, int, float, str]


def get_category_label(category: Any) -> str:
    """Return the display label for a category, falling back to "other"."""
    if isinstance(category, str) and category in CATEGORY_LABELS:
        return CATEGORY_LABELS[category]
    return CATEGORY_LABELS["other"]


def get_category_style(category: Any) -> str:
    """Return the style token for a category, falling back to "other"."""
    if isinstance(category, str) and category in CATEGORY_STYLES:
        return CATEGORY_STYLES[category]
    return CATEGORY_STYLES["other"]


def to_datetime(value: DateInput) -> datetime:
    """
    Coerce a timestamp, date value or ISO-8601 string to a local datetime.

    Aware values are converted to local time and returned aware; naive
    values are taken as already local.

    Raises:
        ValueError: If the value cannot be interpreted as a point in time.
    """
    if isinstance(value, datetime):
        return value.astimezone() if value.tzinfo else value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, bool):
        raise ValueError(f"Not a date: {value!r}")
    if isinstance(value, (int, float)):
        # Epoch numbers are always milliseconds
        return datetime.fromtimestamp(value / 1000)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
        return parsed.astimezone() if parsed.tzinfo else parsed
    raise ValueError(f"Not a date: {value!r}")


def _to_strftime(pattern: str) -> str:
    out = []
    pos = 0
    for match in _TOKEN_RE.finditer(pattern):
        out.append(pattern[pos:match.start()].replace("%", "%%"))
        out.append(_TOKENS[match.group(0)])
        pos = match.end()
    out.append(pattern[pos:].replace("%", "%%"))
    return "".join(out)


def format_email_date(value: DateInput, pattern: str = SHORT_DATE_FORMAT) -> str:
    """Format a date for list rows, e.g. ``01/15 10:30``."""
    return to_datetime(value).strftime(_to_strftime(pattern))


def format_full_date(value: DateInput) -> str:
    """Format a date for the detail pane, e.g. ``2025年01月15日 10:30``."""
    return format_email_date(value, FULL_DATE_FORMAT)
