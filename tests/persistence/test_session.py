from dmdialect.adapters import ConnectionConfig
from dmdialect.core import ColumnKind, FieldDescriptor
from dmdialect.hooks import HookDispatcher
from dmdialect.persistence import Session


def user_fields():
    return [
        FieldDescriptor("id", ColumnKind.INT64, primary_key=True),
        FieldDescriptor("name", ColumnKind.STRING, size=64, nullable=False),
    ]


def test_session_connects_when_config_given(fake_adapter):
    config = ConnectionConfig.from_dsn("dm://SYSDBA:secret@localhost:5236/APP")
    Session(fake_adapter, connection_config=config)
    assert fake_adapter.events[0] == ("connect", config.url)


def test_insert_with_generated_key(fake_adapter):
    session = Session(fake_adapter)
    pk = session.insert("users", user_fields(), {"name": "alice"})
    assert pk == fake_adapter.identity_value
    assert fake_adapter.sql() == ['INSERT INTO "users" ("name") VALUES (?)']
    assert fake_adapter.statements[0][1] == ["alice"]
    assert fake_adapter.events[-1] == ("commit", None)


def test_insert_with_explicit_key_toggles_identity_insert(fake_adapter):
    session = Session(fake_adapter)
    pk = session.insert("users", user_fields(), {"id": 10, "name": "bob"})
    assert pk == 10
    assert fake_adapter.sql() == [
        "SET IDENTITY_INSERT users ON",
        'INSERT INTO "users" ("id", "name") VALUES (?, ?)',
        "SET IDENTITY_INSERT users OFF",
    ]


def test_insert_failure_still_turns_identity_insert_off(fake_adapter):
    fake_adapter.respond("INSERT INTO", error=RuntimeError("duplicate key"))
    session = Session(fake_adapter)
    try:
        session.insert("users", user_fields(), {"id": 10, "name": "bob"})
    except RuntimeError as exc:
        assert str(exc) == "duplicate key"
    else:
        raise AssertionError("insert should fail")
    assert fake_adapter.sql()[-1] == "SET IDENTITY_INSERT users OFF"
    assert fake_adapter.events[-1] == ("rollback", None)


def test_insert_default_values(fake_adapter):
    session = Session(fake_adapter)
    session.insert("counters", [FieldDescriptor("id", ColumnKind.INT, primary_key=True)], {})
    assert fake_adapter.sql() == ['INSERT INTO "counters" DEFAULT VALUES']


def test_insert_without_identity_key_returns_none(fake_adapter):
    session = Session(fake_adapter)
    fields = [FieldDescriptor("code", ColumnKind.STRING, size=8, primary_key=True)]
    assert session.insert("codes", fields, {}) is None


def test_custom_dispatcher_without_hooks(fake_adapter):
    session = Session(fake_adapter, hooks=HookDispatcher())
    session.insert("users", user_fields(), {"id": 10, "name": "bob"})
    assert fake_adapter.sql() == ['INSERT INTO "users" ("id", "name") VALUES (?, ?)']


def test_close_closes_adapter(fake_adapter):
    with Session(fake_adapter):
        pass
    assert fake_adapter.events[-1] == ("close", None)
