"""Security helpers for dmdialect."""

from .dsns import DEFAULT_DM_PORT, DSNConfig, DSNError, parse_dsn
from .redaction import REDACTED_VALUE, redact_params, redact_query_params

__all__ = [
    "DEFAULT_DM_PORT",
    "DSNConfig",
    "DSNError",
    "REDACTED_VALUE",
    "parse_dsn",
    "redact_params",
    "redact_query_params",
]
