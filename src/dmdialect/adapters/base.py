"""
Adapter contract and DM connection settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable, Protocol, Sequence

from ..dialects.base import Dialect
from ..security.dsns import DSNConfig, DSNError, parse_dsn


class AdapterError(RuntimeError):
    """Base error for adapter-related failures."""


class AdapterConfigurationError(AdapterError):
    """Raised when configuration or required dependencies are invalid."""


class AdapterConnectionError(AdapterError):
    """Raised when establishing or using a connection fails."""


class AdapterExecutionError(AdapterError, ValueError):
    """Raised when SQL execution or parameter validation fails."""


DEFAULT_DSN_ENV_VAR = "DMDIALECT_DSN"

# dmPython.LANGUAGE_CN / LANGUAGE_EN / LANGUAGE_CNT_HK
DM_LANGUAGES = {"cn": 0, "en": 1, "cnt_hk": 2}


def _to_bool(value: str, key: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise AdapterConfigurationError(f"Option '{key}' expects a boolean, got {value!r}")


def _to_int(value: str, key: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise AdapterConfigurationError(f"Option '{key}' expects an integer, got {value!r}") from exc


def _to_language(value: str, key: str) -> int:
    code = DM_LANGUAGES.get(value.strip().lower())
    return code if code is not None else _to_int(value, key)


# URL query options understood by DM connections.
_OPTION_PARSERS: dict[str, Callable[[str, str], Any]] = {
    "autocommit": _to_bool,
    "strict_introspection": _to_bool,
    "login_timeout": _to_int,
    "lang_id": _to_language,
    "local_code": _to_int,
}


@dataclass
class ConnectionConfig:
    """
    Settings for one DM connection.

    ``login_timeout`` is in seconds. ``lang_id`` selects the server message
    language and ``local_code`` the client character set, both as dmPython
    integer codes.
    """

    url: str
    dsn: DSNConfig | None = None
    autocommit: bool = False
    login_timeout: int | None = None
    lang_id: int | None = None
    local_code: int | None = None
    strict_introspection: bool = False
    source: str | None = None

    def __post_init__(self) -> None:
        if self.login_timeout is not None and self.login_timeout < 0:
            raise AdapterConfigurationError(
                f"login_timeout must be non-negative, got {self.login_timeout}"
            )
        if self.lang_id is not None and self.lang_id not in DM_LANGUAGES.values():
            raise AdapterConfigurationError(f"Unknown DM lang_id {self.lang_id}")
        if self.local_code is not None and self.local_code <= 0:
            raise AdapterConfigurationError(f"local_code must be positive, got {self.local_code}")

    @classmethod
    def from_dsn(cls, dsn: str, **overrides: Any) -> "ConnectionConfig":
        """
        Build a config from a ``dm://`` URL; keyword arguments win over URL options.
        """
        try:
            parsed = parse_dsn(dsn)
        except DSNError as exc:
            raise AdapterConfigurationError(str(exc)) from exc

        settings: dict[str, Any] = {}
        for key, value in parsed.query.items():
            parser = _OPTION_PARSERS.get(key)
            if parser is None:
                raise AdapterConfigurationError(f"Unsupported DM connection option '{key}'")
            settings[key] = parser(value, key)
        settings.update(overrides)
        return cls(url=dsn, dsn=parsed, **settings)

    @classmethod
    def from_env(cls, env_var: str = DEFAULT_DSN_ENV_VAR, **overrides: Any) -> "ConnectionConfig":
        value = os.getenv(env_var)
        if not value:
            raise AdapterConfigurationError(f"Environment variable {env_var} is not set")
        return cls.from_dsn(value, source=env_var, **overrides)

    def connect_kwargs(self) -> dict[str, Any]:
        """
        Keyword arguments for ``dmPython.connect``.
        """
        if self.dsn is None:
            raise AdapterConfigurationError(
                "ConnectionConfig must be built from a DSN for DM connections."
            )
        kwargs: dict[str, Any] = {
            "user": self.dsn.username,
            "password": self.dsn.password,
            "server": self.dsn.host,
            "port": self.dsn.port,
            "autoCommit": self.autocommit,
        }
        if self.dsn.schema:
            kwargs["schema"] = self.dsn.schema
        for key in ("login_timeout", "lang_id", "local_code"):
            value = getattr(self, key)
            if value is not None:
                kwargs[key] = value
        return kwargs

    def describe(self) -> str:
        target = self.dsn.redacted() if self.dsn else "<unparsed DSN>"
        return f"{self.source} ({target})" if self.source else target


class DatabaseAdapter(Protocol):
    """
    What sessions, transactions and the dialect need from a connection.

    ``close`` must be safe to call twice. ``last_insert_id`` returns the
    identity generated by the previous insert on the same connection.
    """

    dialect: Dialect
    slow_query_ms: int

    def connect(self, config: ConnectionConfig) -> Any: ...

    def close(self) -> None: ...

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> Any: ...

    def begin(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def last_insert_id(self, cursor: Any, table: str, pk_column: str) -> Any: ...
