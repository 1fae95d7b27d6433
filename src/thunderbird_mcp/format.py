"""
Render tool answers as rows of text.

Tool-agnostic: callers that know a tool's payload shape format it themselves,
these helpers cover everything else.
"""

from typing import Any

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

INDENT = "  "


def _scalar(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_rows(value: Any) -> list[str]:
    """
    Format a JSON value as text rows.

    Objects give one `key: value` row per entry, with nested containers
    indented under a `key:` row. Array elements follow each other, separated
    by a blank row when they are containers.
    """
    if value is None:
        return []
    if isinstance(value, dict):
        rows: list[str] = []
        for key, item in value.items():
            if isinstance(item, (dict, list)) and item:
                rows.append(f"{key}:")
                rows.extend(INDENT + row if row else row for row in format_rows(item))
            else:
                rows.append(f"{key}: {_scalar(item)}")
        return rows
    if isinstance(value, list):
        if not value:
            return ["[]"]
        rows = []
        for index, item in enumerate(value):
            if isinstance(item, (dict, list)):
                if index:
                    rows.append("")
                rows.extend(format_rows(item))
            else:
                rows.append(_scalar(item))
        return rows
    return [_scalar(value)]


def truncate(text: str, max_len: int) -> str:
    """Flatten newlines and cut to `max_len` characters, ending in "..."."""
    if not text:
        return ""
    trimmed = text.replace("\n", " ").strip()
    if len(trimmed) > max_len:
        return trimmed[: max(max_len - 3, 0)] + "..."
    return trimmed


def format_date(iso: str) -> str:
    """
    Format an ISO 8601 timestamp as "19 Feb 2026 14:30".

    Anything that does not start with YYYY-MM-DDThh:mm is returned unchanged.
    """
    if len(iso) < 16:
        return iso
    try:
        month = int(iso[5:7])
    except ValueError:
        return iso
    if not 1 <= month <= 12:
        return iso
    return f"{iso[8:10]} {MONTHS[month - 1]} {iso[0:4]} {iso[11:13]}:{iso[14:16]}"
