from datetime import datetime
import pytest
from sqlalchemy import create_engine, literal, select
from routine_catalog.core.row_access import NamedColumnRow


@pytest.fixture
def row():
    return NamedColumnRow(
        {
            "ROUTINENAME": "P1",
            "language": "SQL     ",
            "ROUTINEID": "42",
            "RESULT_SETS": 2,
            "DETERMINISTIC": "Y",
            "REMARKS": None,
            "CREATE_TIME": "2024-03-01-10.15.30.123456",
            "ALTER_TIME": "2024-03-02T08:00:00",
            "LAST_REGEN_TIME": datetime(2024, 3, 3, 9, 0),
        }
    )


def test_get_string(row):
    assert row.get_string("ROUTINENAME") == "P1"
    assert row.get_string("routinename") == "P1"  # Case-insensitive


def test_absent_and_null_columns(row):
    """Absent columns and NULLs both read as None."""
    assert row.get_string("REMARKS") is None
    assert row.get_string("NOT_A_COLUMN") is None
    assert row.get_int("NOT_A_COLUMN") is None
    assert row.get_boolean("NOT_A_COLUMN") is None
    assert row.get_timestamp("NOT_A_COLUMN") is None
    assert "REMARKS" in row
    assert "NOT_A_COLUMN" not in row


@pytest.mark.parametrize(
    "value, expected",
    [
        (b"CREATE PROCEDURE P1() BEGIN END", "CREATE PROCEDURE P1() BEGIN END"),
        (bytearray(b"SQL     "), "SQL     "),
        ("Zürich".encode("utf-8"), "Zürich"),
        (b"\xff\xfe", "\ufffd\ufffd"),
    ],
)
def test_get_string_decodes_bytes(value, expected):
    assert NamedColumnRow({"TEXT": value}).get_string("TEXT") == expected


def test_get_string_trimmed_bytes():
    assert NamedColumnRow({"LANGUAGE": b"SQL     "}).get_string_trimmed("LANGUAGE") == "SQL"


def test_get_int_bytes():
    assert NamedColumnRow({"ORDINAL": b" 3 "}).get_int("ORDINAL") == 3


def test_get_string_trimmed(row):
    assert row.get_string("LANGUAGE") == "SQL     "
    assert row.get_string_trimmed("LANGUAGE") == "SQL"


def test_get_int(row):
    assert row.get_int("ROUTINEID") == 42
    assert row.get_int("RESULT_SETS") == 2


def test_get_int_invalid():
    """Unparsable integers are tolerated as None."""
    assert NamedColumnRow({"ROUTINEID": "abc"}).get_int("ROUTINEID") is None


@pytest.mark.parametrize("value, expected", [("Y", True), ("N", False), (True, True)])
def test_get_boolean(value, expected):
    assert NamedColumnRow({"FLAG": value}).get_boolean("FLAG") is expected


def test_get_timestamp(row):
    assert row.get_timestamp("CREATE_TIME") == datetime(2024, 3, 1, 10, 15, 30, 123456)
    assert row.get_timestamp("ALTER_TIME") == datetime(2024, 3, 2, 8, 0)
    assert row.get_timestamp("LAST_REGEN_TIME") == datetime(2024, 3, 3, 9, 0)


def test_get_timestamp_invalid():
    assert NamedColumnRow({"CREATE_TIME": "yesterday"}).get_timestamp("CREATE_TIME") is None


def test_sqlalchemy_row():
    """SQLAlchemy rows and row mappings are accepted as-is."""
    engine = create_engine("sqlite://")
    with engine.connect() as connection:
        result = connection.execute(
            select(literal("P1").label("ROUTINENAME"), literal(7).label("ROUTINEID"))
        )
        sa_row = result.one()

    wrapped = NamedColumnRow(sa_row)
    assert wrapped.get_string("ROUTINENAME") == "P1"
    assert wrapped.get_int("ROUTINEID") == 7

    wrapped = NamedColumnRow(sa_row._mapping)
    assert wrapped.get_string("routinename") == "P1"


def test_unsupported_row_type():
    with pytest.raises(TypeError, match="Unsupported row type"):
        NamedColumnRow(["P1", 7])
