import logging
from datetime import datetime
from typing import Any, Mapping, Union
from sqlalchemy.engine import Row, RowMapping

logger = logging.getLogger(__name__)

DB2_TIMESTAMP_FORMATS = ("%Y-%m-%d-%H.%M.%S.%f", "%Y-%m-%d-%H.%M.%S")


class NamedColumnRow:
    """
    Tolerant, read-only view over a single catalog row.

    Wraps a plain mapping, a SQLAlchemy ``Row`` or a ``RowMapping``. Column
    names are matched case-insensitively. Absent columns and SQL NULLs both
    read as None; a missing optional column is never an error.
    """

    def __init__(self, row: Any) -> None:
        if isinstance(row, Row):
            row = row._mapping
        if not isinstance(row, (Mapping, RowMapping)):
            raise TypeError(f"Unsupported row type: {type(row).__name__}")
        self._values = {str(column).upper(): value for column, value in row.items()}

    def __contains__(self, column: str) -> bool:
        return column.upper() in self._values

    def get(self, column: str) -> Any:
        return self._values.get(column.upper())

    def get_string(self, column: str) -> Union[str, None]:
        value = self.get(column)
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray)):
            # FOR BIT DATA and some drivers' CLOB values arrive undecoded
            return bytes(value).decode("utf-8", errors="replace")
        return value if isinstance(value, str) else str(value)

    def get_string_trimmed(self, column: str) -> Union[str, None]:
        """Read a CHAR column with its blank padding removed."""
        value = self.get_string(column)
        if value is None:
            return None
        return value.strip()

    def get_int(self, column: str) -> Union[int, None]:
        value = self.get(column)
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        try:
            return int(self.get_string(column).strip())
        except ValueError:
            logger.warning(f"⚠️ Non-integer value in column {column}: {value!r}")
            return None

    def get_boolean(self, column: str, true_value: str = "Y") -> Union[bool, None]:
        """Compare a flag column against its 'true' literal (catalog flags are Y/N)."""
        value = self.get(column)
        if value is None:
            return None
        if isinstance(value, bool):
            return value
        return str(value).strip() == true_value

    def get_timestamp(self, column: str) -> Union[datetime, None]:
        value = self.get(column)
        if value is None or isinstance(value, datetime):
            return value

        text = str(value).strip()
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            pass
        for fmt in DB2_TIMESTAMP_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue

        logger.warning(f"⚠️ Unparsable timestamp in column {column}: {value!r}")
        return None
