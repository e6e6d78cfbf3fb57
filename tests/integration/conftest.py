from datetime import datetime
import pytest
from sqlalchemy import create_engine
from routine_catalog.models.catalog_model import metadata, routine_parms, routines

# SQLite has no SYSCAT schema; catalog tables live in the main database
SCHEMA_MAP = {"SYSCAT": None}

ROUTINE_ROWS = [
    {
        "ROUTINESCHEMA": "APP",
        "ROUTINEMODULENAME": None,
        "ROUTINENAME": "P1",
        "SPECIFICNAME": "SQL_P1",
        "ROUTINEID": 1001,
        "ROUTINETYPE": "P",
        "ORIGIN": "Q",
        "LANGUAGE": "SQL     ",
        "OWNER": "DB2INST1",
        "OWNERTYPE": "U",
        "CREATE_TIME": datetime(2024, 3, 1, 10, 15, 30),
        "TEXT": "CREATE PROCEDURE P1(IN IN_ID INTEGER, OUT OUT_TOTAL DECIMAL(10,2)) BEGIN END",
        "DETERMINISTIC": "N",
        "VALID": "Y",
        "DIALECT": "DB2 SQL PL",
    },
    {
        "ROUTINESCHEMA": "APP",
        "ROUTINEMODULENAME": None,
        "ROUTINENAME": "F1",
        "SPECIFICNAME": "SQL_F1",
        "ROUTINEID": 1002,
        "ROUTINETYPE": "F",
        "FUNCTIONTYPE": "T",
        "ORIGIN": "E",
        "LANGUAGE": "JAVA    ",
        "OWNER": "DB2INST1",
        "OWNERTYPE": "U",
        "IMPLEMENTATION": "jar1:com.acme.Funcs!table",
        "JAR_ID": "JAR1",
        "CLASS": "com.acme.Funcs",
        "VALID": "Y",
    },
    {
        "ROUTINESCHEMA": "APP",
        "ROUTINEMODULENAME": None,
        "ROUTINENAME": "BROKEN",
        "SPECIFICNAME": "SQL_BROKEN",
        "ROUTINETYPE": "Z",
        "LANGUAGE": "SQL     ",
        "VALID": "N",
    },
    {
        "ROUTINESCHEMA": "APP",
        "ROUTINEMODULENAME": "PAYROLL",
        "ROUTINENAME": "CALC",
        "SPECIFICNAME": "SQL_CALC",
        "ROUTINETYPE": "P",
        "LANGUAGE": "SQL     ",
        "VALID": "X",
    },
]

PARAMETER_ROWS = [
    {
        "ROUTINESCHEMA": "APP",
        "SPECIFICNAME": "SQL_P1",
        "PARMNAME": "OUT_TOTAL",
        "ORDINAL": 2,
        "ROWTYPE": "O",
        "TYPESCHEMA": "SYSIBM  ",
        "TYPENAME": "DECIMAL",
        "LENGTH": 10,
        "SCALE": 2,
        "LOCATOR": "N",
    },
    {
        "ROUTINESCHEMA": "APP",
        "SPECIFICNAME": "SQL_P1",
        "PARMNAME": "IN_ID",
        "ORDINAL": 1,
        "ROWTYPE": "P",
        "TYPESCHEMA": "SYSIBM  ",
        "TYPENAME": "INTEGER",
        "LENGTH": 4,
        "SCALE": 0,
        "LOCATOR": "N",
    },
]


def _complete(table, rows):
    """Give every row every column so they can be inserted in one batch."""
    return [{column.name: row.get(column.name) for column in table.c} for row in rows]


@pytest.fixture
def catalog_connection():
    """In-memory catalog holding a few routines and their parameters."""
    engine = create_engine("sqlite://")
    with engine.connect() as connection:
        connection = connection.execution_options(schema_translate_map=SCHEMA_MAP)
        metadata.create_all(connection)
        connection.execute(routines.insert(), _complete(routines, ROUTINE_ROWS))
        connection.execute(routine_parms.insert(), _complete(routine_parms, PARAMETER_ROWS))
        yield connection
    engine.dispose()
