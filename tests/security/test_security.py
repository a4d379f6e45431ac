import pytest

from dmdialect.security import DSNError, parse_dsn, redact_params


def test_parse_dsn_and_redact():
    config = parse_dsn("dm://SYSDBA:secret@localhost:5237/APP?ssl_pwd=abc&login_timeout=3")
    assert config.password == "secret"
    assert config.schema == "APP"
    assert config.server == "localhost:5237"
    assert config.redacted() == "dm://SYSDBA:***@localhost:5237/APP?ssl_pwd=%2A%2A%2A&login_timeout=3"


def test_parse_dsn_defaults_host_and_port():
    config = parse_dsn("dm://")
    assert config.host == "localhost"
    assert config.port == 5236
    assert config.schema is None
    assert config.redacted() == "dm://localhost:5236"


def test_parse_dsn_unquotes_credentials():
    config = parse_dsn("dm://SYSDBA:p%40ss@localhost/APP")
    assert config.password == "p@ss"


@pytest.mark.parametrize(
    "dsn",
    ["mysql://localhost/app", "dm://localhost:notaport/APP", "dm://localhost/APP/extra"],
)
def test_parse_dsn_rejects(dsn):
    with pytest.raises(DSNError):
        parse_dsn(dsn)


def test_redact_params():
    assert redact_params(["alice", "my password is x", 3, ("token abc",), b"secret"]) == [
        "alice",
        "***",
        3,
        ("***",),
        "***",
    ]
    assert redact_params(None) == []
