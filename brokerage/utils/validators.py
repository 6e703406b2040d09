"""Deterministic sanitizers used before persistence and rendering."""

from __future__ import annotations

import html
import re

_EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")


def sanitize_text(value: str | None, max_len: int = 20000) -> str:
    """Sanitize free-form content before persistence/display."""
    if value is None:
        return ""
    cleaned = str(value).replace("\x00", "").strip()
    cleaned = cleaned[:max_len]
    return cleaned


def escape_html(value: object | None, max_len: int = 20000) -> str:
    """Escape user-entered text before it lands in an HTML document."""
    return html.escape(sanitize_text(None if value is None else str(value), max_len=max_len))


def clean_email_html(value: str | None) -> str:
    # Some mail clients render literal CRLF escapes verbatim.
    return (value or "").replace("\\r\\n", " ").replace("\r\n", " ")


def is_valid_email(value: str | None) -> bool:
    return bool(value) and bool(_EMAIL_RE.match(value.strip()))
