""" DB2 catalog views read by the routine mapper"""
from sqlalchemy import (
    Column,
    Integer,
    MetaData,
    SmallInteger,
    String,
    Table,
    Text,
    DateTime,
)

metadata = MetaData(schema="SYSCAT")

routines = Table(
    "ROUTINES",
    metadata,
    Column("ROUTINESCHEMA", String(128), nullable=False),
    Column("ROUTINEMODULENAME", String(128)),  # NULL unless owned by a module
    Column("ROUTINENAME", String(128), nullable=False),
    Column("SPECIFICNAME", String(128), nullable=False),
    Column("ROUTINEID", Integer),
    Column("ROUTINETYPE", String(1)),
    Column("FUNCTIONTYPE", String(1)),  # 9.7+
    Column("ORIGIN", String(1)),
    Column("LANGUAGE", String(8)),
    Column("OWNER", String(128)),
    Column("OWNERTYPE", String(1)),  # 9.5+
    Column("CREATE_TIME", DateTime),
    Column("ALTER_TIME", DateTime),
    Column("LAST_REGEN_TIME", DateTime),
    Column("TEXT", Text),
    Column("REMARKS", String(254)),
    Column("RESULT_SETS", SmallInteger),
    Column("PARAMETER_STYLE", String(8)),
    Column("DETERMINISTIC", String(1)),
    Column("IMPLEMENTATION", String(254)),
    Column("DEBUG_MODE", String(8)),
    Column("JAR_ID", String(128)),
    Column("JARSCHEMA", String(128)),
    Column("JAR_SIGNATURE", String(1024)),
    Column("CLASS", String(384)),
    Column("VALID", String(1)),
    Column("DIALECT", String(10)),  # 9.7+
)

routine_parms = Table(
    "ROUTINEPARMS",
    metadata,
    Column("ROUTINESCHEMA", String(128), nullable=False),
    Column("SPECIFICNAME", String(128), nullable=False),
    Column("PARMNAME", String(128)),
    Column("ORDINAL", SmallInteger, nullable=False),
    Column("ROWTYPE", String(1)),
    Column("TYPESCHEMA", String(128)),
    Column("TYPENAME", String(128)),
    Column("LENGTH", Integer),
    Column("SCALE", SmallInteger),
    Column("CODEPAGE", SmallInteger),
    Column("LOCATOR", String(1)),
    Column("DEFAULT", String(254)),
    Column("REMARKS", String(254)),
)
