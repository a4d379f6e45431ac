import pytest

from dmdialect.adapters import (
    AdapterConfigurationError,
    AdapterConnectionError,
    AdapterExecutionError,
    ConnectionConfig,
    DMAdapter,
)


class FakeCursor:
    def __init__(self, rows):
        self.statements = []
        self.last_params = None
        self._rows = rows

    def execute(self, sql, params=None):
        self.statements.append(sql)
        self.last_params = params

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None


class FakeConnection:
    def __init__(self, rows):
        self.closed = False
        self.committed = False
        self.rolled_back = False
        self.cursors = []
        self._rows = rows

    def cursor(self):
        cursor = FakeCursor(self._rows)
        self.cursors.append(cursor)
        return cursor

    def close(self):
        self.closed = True

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True


class FakeDriver:
    def __init__(self):
        self.connections = []
        self.rows = [("APP",)]
        self.fail = False

    def connect(self, **kwargs):
        if self.fail:
            raise OSError("network unreachable")
        conn = FakeConnection(self.rows)
        conn.kwargs = kwargs
        self.connections.append(conn)
        return conn


@pytest.fixture
def fake_driver(monkeypatch):
    driver = FakeDriver()
    monkeypatch.setattr("dmdialect.adapters.dm._load_driver", lambda: driver)
    return driver


def connect(dsn="dm://SYSDBA:secret@db.local:5237/APP"):
    adapter = DMAdapter()
    adapter.connect(ConnectionConfig.from_dsn(dsn))
    return adapter


def test_connect_passes_dsn_parts(fake_driver):
    connect("dm://SYSDBA:secret@db.local:5237/APP?login_timeout=3")
    kwargs = fake_driver.connections[0].kwargs
    assert kwargs["user"] == "SYSDBA"
    assert kwargs["password"] == "secret"
    assert kwargs["server"] == "db.local"
    assert kwargs["port"] == 5237
    assert kwargs["schema"] == "APP"
    assert kwargs["autoCommit"] is False
    assert kwargs["login_timeout"] == 3


def test_connect_defaults_port_and_timeout(fake_driver):
    adapter = DMAdapter()
    adapter.connect(ConnectionConfig.from_dsn("dm://SYSDBA:secret@localhost", login_timeout=4))
    kwargs = fake_driver.connections[0].kwargs
    assert kwargs["port"] == 5236
    assert kwargs["login_timeout"] == 4
    assert "schema" not in kwargs


def test_connect_wires_dialect_to_adapter(fake_driver):
    adapter = connect()
    assert adapter.dialect.db is adapter
    assert adapter.dialect.current_database() == "APP"


def test_strict_introspection_from_dsn(fake_driver):
    adapter = connect("dm://SYSDBA:secret@localhost/APP?strict_introspection=true")
    assert adapter.dialect.introspector.strict is True


def test_execute_validates_placeholders(fake_driver):
    adapter = connect()
    cursor = adapter.execute("SELECT * FROM t WHERE id = ? AND name = '?'", [1])
    assert cursor.last_params == [1]
    with pytest.raises(AdapterExecutionError):
        adapter.execute("SELECT * FROM t WHERE id = ?", [])
    with pytest.raises(AdapterExecutionError):
        adapter.execute("SELECT 1 FROM DUAL", [1])


def test_catalog_queries_pass_validation(fake_driver):
    fake_driver.rows[:] = [(1,)]
    adapter = connect()
    adapter.dialect.set_db(adapter)
    assert adapter.dialect.has_table("APP.USERS") is True


def test_transactions_delegate_to_connection(fake_driver):
    adapter = connect()
    adapter.begin()
    adapter.commit()
    adapter.rollback()
    connection = fake_driver.connections[0]
    assert connection.committed is True
    assert connection.rolled_back is True


def test_last_insert_id_reads_scope_identity(fake_driver):
    fake_driver.rows[:] = [(99,)]
    adapter = connect()
    assert adapter.last_insert_id(None, "users", "id") == 99
    with pytest.raises(AdapterExecutionError):
        adapter.last_insert_id(None, "users", "id")


def test_close_is_idempotent(fake_driver):
    adapter = connect()
    adapter.close()
    adapter.close()
    assert fake_driver.connections[0].closed is True
    with pytest.raises(AdapterConnectionError):
        adapter.execute("SELECT 1 FROM DUAL")


def test_connection_failure_is_wrapped(fake_driver):
    fake_driver.fail = True
    with pytest.raises(AdapterConnectionError):
        connect()


def test_missing_driver_raises(monkeypatch):
    monkeypatch.setattr("dmdialect.adapters.dm._load_driver", lambda: None)
    with pytest.raises(AdapterConfigurationError):
        DMAdapter().connect(ConnectionConfig.from_dsn("dm://localhost/APP"))


def test_config_without_dsn_rejected(fake_driver):
    with pytest.raises(AdapterConfigurationError):
        DMAdapter().connect(ConnectionConfig(url="dm://localhost/APP"))
