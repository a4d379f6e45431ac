import pytest

from dmdialect.dialects import DMDialect


class FakeCursor:
    def __init__(self, rows=None):
        self._rows = list(rows or [])
        self.lastrowid = None

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None


class FakeAdapter:
    """
    Records statements and serves canned results keyed by SQL fragments.
    """

    def __init__(self, current_schema="SYSDBA"):
        self.current_schema = current_schema
        self.statements = []
        self.events = []
        self._responses = []
        self.identity_value = 41
        self.dialect = DMDialect(self)

    def respond(self, fragment, rows=None, error=None):
        self._responses.append((fragment, rows, error))

    def execute(self, sql, params=None):
        self.statements.append((sql, list(params or [])))
        self.events.append(("execute", sql))
        for fragment, rows, error in self._responses:
            if fragment in sql:
                if error is not None:
                    raise error
                return FakeCursor(rows)
        if "SYS_CONTEXT('USERENV', 'CURRENT_SCHEMA')" in sql:
            return FakeCursor([(self.current_schema,)])
        return FakeCursor()

    def sql(self):
        return [sql for sql, _ in self.statements]

    def connect(self, config):
        self.events.append(("connect", config.url))

    def close(self):
        self.events.append(("close", None))

    def begin(self):
        self.events.append(("begin", None))

    def commit(self):
        self.events.append(("commit", None))

    def rollback(self):
        self.events.append(("rollback", None))

    def last_insert_id(self, cursor, table, pk_column):
        return self.identity_value


@pytest.fixture
def fake_adapter():
    return FakeAdapter()


@pytest.fixture
def dialect(fake_adapter):
    return fake_adapter.dialect
