"""
LIMIT/OFFSET clause generation for the DM dialect.
"""

from __future__ import annotations

import re
from typing import Any

from .base import PaginationError

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_LEGACY_OCTAL_RE = re.compile(r"[+-]?0[0-9_]+")


def parse_int(value: Any) -> int:
    """
    Parse ``value`` as a signed 64-bit integer.

    Strings may carry a ``0x``/``0o``/``0b`` prefix or a legacy leading-zero
    octal form. Booleans are rejected, as are strings with surrounding
    whitespace or non-ASCII digits.
    """
    if isinstance(value, bool):
        raise PaginationError(f"invalid integer value {value!r}")
    if isinstance(value, int):
        parsed = value
    else:
        text = str(value)
        if not text or not text.isascii() or text != text.strip():
            raise PaginationError(f"invalid integer value {value!r}")
        try:
            if _LEGACY_OCTAL_RE.fullmatch(text):
                parsed = int(text, 8)
            else:
                parsed = int(text, 0)
        except ValueError as exc:
            raise PaginationError(f"invalid integer value {value!r}") from exc
    if not _INT64_MIN <= parsed <= _INT64_MAX:
        raise PaginationError(f"integer value {value!r} out of range")
    return parsed


def limit_and_offset_sql(limit: Any, offset: Any) -> str:
    """
    Render `` LIMIT n OFFSET m`` for the given values.

    A missing or negative limit yields an empty fragment; an offset is only
    rendered after a limit.
    """
    if limit is None:
        return ""

    parsed_limit = parse_int(limit)
    if parsed_limit < 0:
        return ""

    sql = f" LIMIT {parsed_limit}"
    if offset is not None:
        parsed_offset = parse_int(offset)
        if parsed_offset >= 0:
            sql += f" OFFSET {parsed_offset}"
    return sql
