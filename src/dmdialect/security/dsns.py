"""Parsing of ``dm://`` connection URLs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import parse_qsl, unquote, urlencode, urlsplit

from .redaction import REDACTED_VALUE, redact_query_params

DEFAULT_DM_PORT = 5236
DM_SCHEMES = ("dm", "dm+dmpython")


class DSNError(ValueError):
    """Raised for URLs that do not describe a DM server."""


@dataclass(frozen=True)
class DSNConfig:
    """
    Server address, credentials and default schema of a DM URL.

    Host and port are always filled in; DM listens on 5236 unless told
    otherwise.
    """

    scheme: str
    host: str
    port: int
    username: Optional[str] = None
    password: Optional[str] = None
    schema: Optional[str] = None
    query: dict[str, str] = field(default_factory=dict)

    @property
    def server(self) -> str:
        return f"{self.host}:{self.port}"

    def redacted(self) -> str:
        auth = ""
        if self.username:
            auth = self.username
            if self.password:
                auth += f":{REDACTED_VALUE}"
            auth += "@"
        text = f"{self.scheme}://{auth}{self.server}"
        if self.schema:
            text += f"/{self.schema}"
        if self.query:
            text += "?" + urlencode(redact_query_params(self.query))
        return text


def parse_dsn(dsn: str) -> DSNConfig:
    """
    Parse ``dm://user:password@host:port/SCHEMA?option=value``.
    """
    parts = urlsplit(dsn)
    scheme = parts.scheme.lower()
    if scheme not in DM_SCHEMES:
        raise DSNError(f"Unsupported URL scheme {parts.scheme!r}; expected one of {DM_SCHEMES}")
    try:
        port = parts.port
    except ValueError as exc:
        raise DSNError(f"Invalid port in DM URL: {exc}") from exc

    schema = unquote(parts.path.strip("/")) or None
    if schema and "/" in schema:
        raise DSNError(f"DM URL path must name a single schema, got {schema!r}")

    return DSNConfig(
        scheme=scheme,
        host=parts.hostname or "localhost",
        port=port or DEFAULT_DM_PORT,
        username=unquote(parts.username) if parts.username else None,
        password=unquote(parts.password) if parts.password else None,
        schema=schema,
        query=dict(parse_qsl(parts.query, keep_blank_values=True)),
    )
