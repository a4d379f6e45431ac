"""
Catalog introspection and simple DDL for DM.

Existence checks run fixed catalog queries against the ``SYS`` metadata views
and treat a non-zero count as "exists". By default a failing catalog query is
reported as "does not exist" (and logged); a strict introspector raises
:class:`IntrospectionError` instead.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from ..core.tables import split_table_name
from ..utils import get_logger
from .base import IntrospectionError, QueryExecutor

HAS_INDEX_SQL = """SELECT /*+ MAX_OPT_N_TABLES(5) */ COUNT(DISTINCT OBJ_INDS.NAME) FROM
(SELECT ID FROM SYS.SYSOBJECTS WHERE TYPE$ = 'SCH' AND NAME = ?) USERS,
(SELECT ID, SCHID FROM SYS.SYSOBJECTS WHERE TYPE$ = 'SCHOBJ' AND SUBTYPE$ = 'UTAB' AND NAME = ?) TAB,
(SELECT ID, PID, NAME FROM SYS.SYSOBJECTS WHERE SUBTYPE$='INDEX' AND NAME = ?) OBJ_INDS,
SYS.SYSINDEXES AS INDS, SYS.SYSCOLUMNS AS COLS
WHERE TAB.ID =COLS.ID AND TAB.ID =OBJ_INDS.PID AND INDS.ID=OBJ_INDS.ID AND TAB.SCHID= USERS.ID
AND SF_COL_IS_IDX_KEY(INDS.KEYNUM, INDS.KEYINFO, COLS.COLID)=1;"""

HAS_FOREIGN_KEY_SQL = """SELECT /*+ MAX_OPT_N_TABLES(5) */ COUNT(T_REF.REF_CONS_NAME) FROM
(SELECT T_REF_TAB.NAME AS NAME, T_REF_TAB.SCHNAME AS SCHNAME, T_REF_CONS.FINDEXID AS REFED_ID,
T_REF_CONS.NAME AS REF_CONS_NAME, SF_GET_INDEX_KEY_SEQ(T_REF_IND.KEYNUM, T_REF_IND.KEYINFO, T_REF_COL.COLID) AS REF_KEYNO,
T_REF_COL.NAME AS REF_COL_NAME, T_REF_CONS.FACTION AS FACTION FROM (SELECT NAME, INDEXID, FINDEXID, TABLEID, FACTION,
CONS.TYPE$ as TYPE FROM SYS.SYSCONS CONS, SYS.SYSOBJECTS OBJECTS WHERE NAME = ? AND CONS.ID = OBJECTS.ID) AS T_REF_CONS,
(SELECT TABS.NAME AS NAME, TABS.ID, SCHEMAS.NAME AS SCHNAME FROM(SELECT ID, PID, NAME FROM SYS.SYSOBJECTS WHERE TYPE$ = 'SCH' AND NAME = ?) SCHEMAS,
(SELECT ID, SCHID, NAME FROM SYS.SYSOBJECTS WHERE TYPE$ = 'SCHOBJ' AND SUBTYPE$ = 'UTAB' AND NAME = ?) TABS
WHERE SCHEMAS.ID == TABS.SCHID)T_REF_TAB,SYS.SYSINDEXES AS T_REF_IND, (SELECT ID, PID FROM SYS.SYSOBJECTS WHERE SUBTYPE$='INDEX') AS T_REF_INDS_OBJ,
SYS.SYSCOLUMNS AS T_REF_COL WHERE T_REF_TAB.ID = T_REF_CONS.TABLEID AND T_REF_CONS.TYPE='F' AND T_REF_TAB.ID = T_REF_INDS_OBJ.PID AND
T_REF_TAB.ID = T_REF_COL.ID AND T_REF_CONS.INDEXID = T_REF_INDS_OBJ.ID AND T_REF_IND.ID = T_REF_INDS_OBJ.ID AND
SF_COL_IS_IDX_KEY(T_REF_IND.KEYNUM, T_REF_IND.KEYINFO, T_REF_COL.COLID)=1) AS T_REF,
(SELECT T_REFED_CONS.INDEXID AS REFED_ID, T_REFED_TAB.SCH_NAME AS SCHNAME, T_REFED_TAB.TAB_NAME AS NAME, T_REFED_IND.ID AS REFED_IND_ID,
T_REFED_CONS.NAME AS REFED_CONS_NAME, SF_GET_INDEX_KEY_SEQ(T_REFED_IND.KEYNUM, T_REFED_IND.KEYINFO, T_REFED_COL.COLID) AS REFED_KEYNO,
T_REFED_COL.NAME AS REFED_COL_NAME FROM (SELECT NAME, INDEXID, FINDEXID, TABLEID, FACTION, CONS.TYPE$ as TYPE FROM
SYS.SYSCONS CONS, SYS.SYSOBJECTS OBJECTS WHERE CONS.ID = OBJECTS.ID) AS T_REFED_CONS, (SELECT TAB.ID AS ID, TAB.NAME AS TAB_NAME,
SCH.NAME AS SCH_NAME FROM SYS.SYSOBJECTS TAB, SYS.SYSOBJECTS SCH WHERE TAB.SUBTYPE$='UTAB' AND SCH.TYPE$='SCH' AND TAB.SCHID=SCH.ID) AS T_REFED_TAB,
SYS.SYSINDEXES AS T_REFED_IND, (SELECT ID, PID, NAME FROM SYS.SYSOBJECTS WHERE SUBTYPE$='INDEX') AS T_REFED_INDS_OBJ, SYS.SYSCOLUMNS AS T_REFED_COL
WHERE T_REFED_TAB.ID = T_REFED_CONS.TABLEID AND T_REFED_CONS.TYPE='P' AND T_REFED_TAB.ID = T_REFED_INDS_OBJ.PID AND
T_REFED_TAB.ID = T_REFED_COL.ID AND T_REFED_CONS.INDEXID = T_REFED_INDS_OBJ.ID AND T_REFED_IND.ID = T_REFED_INDS_OBJ.ID AND
SF_COL_IS_IDX_KEY(T_REFED_IND.KEYNUM, T_REFED_IND.KEYINFO, T_REFED_COL.COLID)=1) AS T_REFED WHERE
T_REF.REFED_ID = T_REFED.REFED_ID AND T_REF.REF_KEYNO = T_REFED.REFED_KEYNO;"""

HAS_TABLE_SQL = """SELECT /*+ MAX_OPT_N_TABLES(5) */ COUNT(TABS.NAME) FROM
(SELECT ID, PID FROM SYS.SYSOBJECTS WHERE TYPE$ = 'SCH' AND NAME = ?) SCHEMAS,
(SELECT ID, SCHID, NAME FROM SYS.SYSOBJECTS WHERE
NAME = ? AND TYPE$ = 'SCHOBJ' AND SUBTYPE$ IN ('UTAB', 'STAB', 'VIEW', 'SYNOM')
AND ((SUBTYPE$ ='UTAB' AND CAST((INFO3 & 0x00FF & 0x003F) AS INT) not in (9, 27, 29, 25, 12, 7, 21, 23, 18, 5))
OR SUBTYPE$ in ('STAB', 'VIEW', 'SYNOM'))) TABS
WHERE TABS.SCHID = SCHEMAS.ID AND SF_CHECK_PRIV_OPT(UID(), CURRENT_USERTYPE(), TABS.ID, SCHEMAS.PID, -1, TABS.ID) = 1;"""

HAS_COLUMN_SQL = """SELECT /*+ MAX_OPT_N_TABLES(5) */ COUNT(DISTINCT COLS.NAME) FROM
(SELECT ID FROM SYS.SYSOBJECTS WHERE TYPE$ = 'SCH' AND NAME = ?) SCHS,
(SELECT ID, SCHID FROM SYS.SYSOBJECTS WHERE TYPE$ = 'SCHOBJ' AND SUBTYPE$ IN ('UTAB', 'STAB', 'VIEW') AND NAME = ?) TABS,
(SELECT NAME, ID FROM SYS.SYSCOLUMNS WHERE NAME = ?) COLS
WHERE TABS.ID = COLS.ID AND SCHS.ID = TABS.SCHID;"""

CURRENT_SCHEMA_SQL = "SELECT SYS_CONTEXT('USERENV', 'CURRENT_SCHEMA');"


class SchemaIntrospector:
    """
    Answers existence questions about catalog objects and runs simple DDL.
    """

    def __init__(self, db: Optional[QueryExecutor] = None, *, strict: bool = False) -> None:
        self.db = db
        self.strict = strict
        self.logger = get_logger("dialects.introspection")

    def _require_db(self) -> QueryExecutor:
        if self.db is None:
            raise IntrospectionError("No database handle configured for introspection.")
        return self.db

    # ------------------------------------------------------------------ #
    # Table names
    # ------------------------------------------------------------------ #
    def split_table_name(self, table_name: str) -> tuple[str, str]:
        return split_table_name(table_name, self.current_database)

    def current_database(self) -> str:
        db = self._require_db()
        try:
            row = db.execute(CURRENT_SCHEMA_SQL).fetchone()
        except Exception as exc:
            if self.strict:
                raise IntrospectionError("Failed to read current schema.") from exc
            self.logger.warning("Current schema lookup failed: %s", exc)
            return ""
        if not row or row[0] is None:
            return ""
        return str(row[0])

    # ------------------------------------------------------------------ #
    # Existence checks
    # ------------------------------------------------------------------ #
    def has_table(self, table_name: str) -> bool:
        schema, table = self.split_table_name(table_name)
        return self._exists(HAS_TABLE_SQL, (schema, table), what=f"table {schema}.{table}")

    def has_column(self, table_name: str, column_name: str) -> bool:
        schema, table = self.split_table_name(table_name)
        return self._exists(
            HAS_COLUMN_SQL,
            (schema, table, column_name),
            what=f"column {schema}.{table}.{column_name}",
        )

    def has_index(self, table_name: str, index_name: str) -> bool:
        schema, table = self.split_table_name(table_name)
        return self._exists(
            HAS_INDEX_SQL,
            (schema, table, index_name),
            what=f"index {index_name} on {schema}.{table}",
        )

    def has_foreign_key(self, table_name: str, foreign_key_name: str) -> bool:
        schema, table = self.split_table_name(table_name)
        return self._exists(
            HAS_FOREIGN_KEY_SQL,
            (foreign_key_name, schema, table),
            what=f"foreign key {foreign_key_name} on {schema}.{table}",
        )

    # ------------------------------------------------------------------ #
    # DDL
    # ------------------------------------------------------------------ #
    def remove_index(self, table_name: str, index_name: str) -> None:
        schema, _ = self.split_table_name(table_name)
        self._require_db().execute(f'DROP INDEX "{schema}"."{index_name}";')

    def modify_column(self, table_name: str, column_name: str, column_type: str) -> None:
        # Identifiers arrive already quoted from the caller.
        self._require_db().execute(f"ALTER TABLE {table_name} MODIFY {column_name} {column_type}")

    # ------------------------------------------------------------------ #
    def _exists(self, sql: str, params: Sequence[Any], *, what: str) -> bool:
        db = self._require_db()
        try:
            row = db.execute(sql, list(params)).fetchone()
        except Exception as exc:
            if self.strict:
                raise IntrospectionError(f"Catalog lookup for {what} failed.") from exc
            self.logger.warning("Catalog lookup for %s failed; reporting absent: %s", what, exc)
            return False
        if not row:
            return False
        count = row[0] or 0
        return int(count) > 0
