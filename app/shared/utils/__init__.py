"""Shared utilities: datetime, generators, sanitization."""

from app.shared.utils.datetime import (
    add_days,
    ensure_utc,
    parse_date,
    today_iso,
    utc_now,
    utc_now_iso,
)
from app.shared.utils.generators import generate_cuid
from app.shared.utils.sanitization import (
    InputSanitizer,
    sanitize_input,
)

__all__ = [
    "generate_cuid",
    "utc_now",
    "utc_now_iso",
    "today_iso",
    "ensure_utc",
    "parse_date",
    "add_days",
    "InputSanitizer",
    "sanitize_input",
]
