"""
DB2 catalog code tables.

Each enumeration maps the single-letter (or short) codes stored in the
SYSCAT views to a variant carrying the catalog literal and a display label.
Lookups are exact: an unrecognized literal is an error, never a default.
"""

from enum import Enum
from typing import Dict, Type, TypeVar, Union

from routine_catalog.core.errors import MappingError

E = TypeVar("E", bound="CatalogCode")


class CatalogCode(Enum):
    """Base for enumerations backed by a catalog literal."""

    def __init__(self, literal: Union[str, None], label: str) -> None:
        self.literal = literal
        self.label = label

    @classmethod
    def literal_table(cls: Type[E]) -> Dict[str, E]:
        """Return the literal -> variant table for this enumeration."""
        return {member.literal: member for member in cls if member.literal is not None}

    def __str__(self) -> str:
        return self.label


class ProcedureType(Enum):
    PROCEDURE = "procedure"
    FUNCTION = "function"


class ObjectState(Enum):
    NORMAL = "normal"
    UNKNOWN = "unknown"


class RoutineKind(CatalogCode):
    """SYSCAT.ROUTINES.ROUTINETYPE"""

    FUNCTION = ("F", "Function")
    METHOD = ("M", "Method")
    PROCEDURE = ("P", "Procedure")

    @property
    def procedure_type(self) -> ProcedureType:
        if self is RoutineKind.FUNCTION:
            return ProcedureType.FUNCTION
        return ProcedureType.PROCEDURE


class FunctionSubtype(CatalogCode):
    """SYSCAT.ROUTINES.FUNCTIONTYPE"""

    COLUMN_OR_AGGREGATE = ("C", "Column or aggregate")
    ROW = ("R", "Row")
    SCALAR = ("S", "Scalar")
    TABLE = ("T", "Table")


class RoutineOrigin(CatalogCode):
    """SYSCAT.ROUTINES.ORIGIN"""

    BUILT_IN = ("B", "Built-in")
    EXTERNAL = ("E", "User-defined, external")
    FEDERATED = ("F", "Federated procedure")
    TEMPLATE = ("M", "Template function")
    SQL_BODIED = ("Q", "SQL-bodied")
    SYSTEM_GENERATED = ("R", "System-generated")
    SYSTEM_GENERATED_SQL = ("S", "System-generated")
    SYSTEM_TRANSFORM = ("T", "System-generated transform")
    SOURCED = ("U", "User-defined, based on a source")


class RoutineLanguage(CatalogCode):
    """SYSCAT.ROUTINES.LANGUAGE (stored blank padded)"""

    C = ("C", "C")
    CLR = ("CLR", "Common Language Runtime")
    COBOL = ("COBOL", "COBOL")
    JAVA = ("JAVA", "Java")
    OLE = ("OLE", "OLE")
    OLEDB = ("OLEDB", "OLE DB")
    SQL = ("SQL", "SQL")


class OwnerType(CatalogCode):
    """SYSCAT.ROUTINES.OWNERTYPE"""

    SYSTEM = ("S", "System")
    USER = ("U", "User")


class ValidityState(CatalogCode):
    """SYSCAT.ROUTINES.VALID"""

    VALID = ("Y", "Valid")
    INVALID = ("N", "Invalid")
    INOPERATIVE = ("X", "Inoperative")
    UNKNOWN = (None, "Unknown")


class ParameterMode(CatalogCode):
    """SYSCAT.ROUTINEPARMS.ROWTYPE"""

    IN = ("P", "In")
    OUT = ("O", "Out")
    INOUT = ("B", "In/Out")
    RESULT_CAST = ("C", "Result after casting")
    RESULT = ("R", "Result before casting")


def lookup_literal(
    enum_cls: Type[E], column: str, raw: Union[str, None]
) -> Union[E, None]:
    """
    Resolve a catalog literal to its enumeration variant.

    Args:
        enum_cls (Type[CatalogCode]): Enumeration to resolve against.
        column (str): Source column, reported on failure.
        raw (Union[str, None]): Literal read from the row.

    Returns:
        Union[CatalogCode, None]: The variant, or None when the literal is empty.

    Raises:
        MappingError: If the literal is not in the enumeration's table.
    """
    if raw is None or raw == "":
        return None

    member = enum_cls.literal_table().get(raw)
    if member is None:
        raise MappingError.unknown_literal(enum_cls.__name__, column, raw)
    return member
