import pytest

from dmdialect.core import BoundField, ColumnKind, FieldDescriptor
from dmdialect.hooks import IdentityInsertState, set_identity_insert, turn_off_identity_insert
from dmdialect.persistence import TransactionScope


def make_scope(adapter, value, **pk_kwargs):
    pk = FieldDescriptor("id", pk_kwargs.pop("kind", ColumnKind.INT64), primary_key=True, **pk_kwargs)
    name = FieldDescriptor("name", ColumnKind.STRING, size=32)
    return TransactionScope(
        dialect=adapter.dialect,
        adapter=adapter,
        table_name="users",
        fields=[BoundField(pk, value), BoundField(name, "alice")],
    )


def test_state_tracks_tables():
    state = IdentityInsertState()
    assert not state
    state.enable("users")
    state.enable("users")
    assert state.tables == ("users",)
    assert state.is_on("users")
    state.disable("users")
    assert not state.is_on("users")


def test_explicit_key_turns_identity_insert_on(fake_adapter):
    scope = make_scope(fake_adapter, 7)
    set_identity_insert(scope)
    assert fake_adapter.sql() == ["SET IDENTITY_INSERT users ON"]
    assert scope.identity_insert.is_on("users")


def test_blank_key_leaves_identity_insert_off(fake_adapter):
    scope = make_scope(fake_adapter, None)
    set_identity_insert(scope)
    scope_zero = make_scope(fake_adapter, 0)
    set_identity_insert(scope_zero)
    assert fake_adapter.sql() == []
    assert not scope.identity_insert


def test_non_identity_key_is_ignored(fake_adapter):
    scope = make_scope(fake_adapter, 7, tag_settings={"AUTO_INCREMENT": "false"})
    set_identity_insert(scope)
    string_scope = make_scope(fake_adapter, "abc", kind=ColumnKind.STRING, size=10)
    set_identity_insert(string_scope)
    assert fake_adapter.sql() == []


def test_explicit_tag_enables_for_any_kind(fake_adapter):
    scope = make_scope(fake_adapter, "abc", kind=ColumnKind.STRING, size=10, tag_settings={"AUTO_INCREMENT": "AUTO_INCREMENT"})
    set_identity_insert(scope)
    assert fake_adapter.sql() == ["SET IDENTITY_INSERT users ON"]


def test_turn_off_issues_off_once_and_clears(fake_adapter):
    scope = make_scope(fake_adapter, 7)
    set_identity_insert(scope)
    turn_off_identity_insert(scope)
    turn_off_identity_insert(scope)
    assert fake_adapter.sql() == ["SET IDENTITY_INSERT users ON", "SET IDENTITY_INSERT users OFF"]
    assert not scope.identity_insert


def test_turn_off_without_on_is_noop(fake_adapter):
    scope = make_scope(fake_adapter, None)
    turn_off_identity_insert(scope)
    assert fake_adapter.sql() == []


def test_failed_off_still_clears_state(fake_adapter):
    scope = make_scope(fake_adapter, 7)
    set_identity_insert(scope)
    fake_adapter.respond("OFF", error=RuntimeError("connection lost"))
    with pytest.raises(RuntimeError):
        turn_off_identity_insert(scope)
    assert not scope.identity_insert


def test_failed_on_is_surfaced_and_not_recorded(fake_adapter):
    fake_adapter.respond("ON", error=RuntimeError("no privilege"))
    scope = make_scope(fake_adapter, 7)
    with pytest.raises(RuntimeError):
        set_identity_insert(scope)
    assert not scope.identity_insert


def test_other_dialects_are_skipped(fake_adapter):
    class OtherDialect:
        name = "sqlite"

    scope = make_scope(fake_adapter, 7)
    scope.dialect = OtherDialect()
    set_identity_insert(scope)
    scope.identity_insert.enable("users")
    turn_off_identity_insert(scope)
    assert fake_adapter.sql() == []
