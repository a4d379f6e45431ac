"""Masking of secrets in URL options and logged statement parameters."""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

REDACTED_VALUE = "***"

# dmPython option names carrying secrets: password, ssl_pwd, ukey_pin, ...
_SECRET_OPTION_RE = re.compile(r"pass|pwd|pin|secret|token|ssl_path", re.IGNORECASE)
_SECRET_TEXT_RE = re.compile(r"passw|secret|token|bearer|authorization", re.IGNORECASE)


def redact_query_params(query: Mapping[str, str]) -> dict[str, str]:
    return {
        key: REDACTED_VALUE if _SECRET_OPTION_RE.search(key) else value
        for key, value in query.items()
    }


def _mask(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return type(value)(_mask(item) for item in value)
    text = value
    if isinstance(value, (bytes, bytearray)):
        text = bytes(value).decode("utf-8", errors="ignore")
    if isinstance(text, str) and _SECRET_TEXT_RE.search(text):
        return REDACTED_VALUE
    return value


def redact_params(params: Iterable[Any] | None) -> list[Any]:
    """
    Copy of ``params`` with values that look like credentials masked.
    """
    return [_mask(value) for value in params or ()]
