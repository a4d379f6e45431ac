"""
Identifier naming helpers for DM indexes and constraints.
"""

import hashlib
import re


MAX_IDENTIFIER_LENGTH = 128
# SHA-1 renders as 40 hex characters; 88 + 40 stays within the limit.
MAX_PREFIX_LENGTH = MAX_IDENTIFIER_LENGTH - 40

_NON_ALNUM_RE = re.compile("[^a-zA-Z0-9]+")


def sanitize_identifier(name: str) -> str:
    """
    Collapse every run of non-alphanumeric characters into one underscore.
    """
    return _NON_ALNUM_RE.sub("_", name)


def build_key_name(kind: str, table_name: str, *fields: str) -> str:
    """
    Build a deterministic index/constraint name of at most 128 characters.

    Short names are returned sanitized. Longer ones become the sanitized first
    field (truncated to 88 characters) followed by the SHA-1 hex digest of the
    full sanitized name.
    """
    key_name = sanitize_identifier(f"{kind}_{table_name}_{'_'.join(fields)}")
    if len(key_name) <= MAX_IDENTIFIER_LENGTH:
        return key_name

    digest = hashlib.sha1(key_name.encode("utf-8")).hexdigest()
    prefix = sanitize_identifier(fields[0])[:MAX_PREFIX_LENGTH] if fields else ""
    return f"{prefix}{digest}"
