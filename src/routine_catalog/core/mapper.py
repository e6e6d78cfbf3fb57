import functools
from typing import Any, Callable, Iterable, List, Literal, Type, Union

from pydantic import ValidationError

from routine_catalog.core.dictionary import (
    CatalogCode,
    FunctionSubtype,
    OwnerType,
    ParameterMode,
    RoutineKind,
    RoutineLanguage,
    RoutineOrigin,
    ValidityState,
    lookup_literal,
)
from routine_catalog.core.errors import MappingError, MappingErrorKind
from routine_catalog.core.logger import logger
from routine_catalog.core.naming import full_qualified_name
from routine_catalog.core.row_access import NamedColumnRow
from routine_catalog.core.schemas import (
    CapabilitySet,
    JavaBinding,
    MapperSettings,
    ParameterDescriptor,
    RoutineDescriptor,
    RowOutcome,
    resolve_schema,
)

EnumPolicy = Literal["strict", "lenient"]
NamingFunction = Callable[[Any, str], str]

# SYSCAT.ROUTINES
COL_ROUTINE_NAME = "ROUTINENAME"
COL_SPECIFIC_NAME = "SPECIFICNAME"
COL_ROUTINE_ID = "ROUTINEID"
COL_ROUTINE_TYPE = "ROUTINETYPE"
COL_FUNCTION_TYPE = "FUNCTIONTYPE"
COL_ORIGIN = "ORIGIN"
COL_LANGUAGE = "LANGUAGE"
COL_OWNER = "OWNER"
COL_OWNER_TYPE = "OWNERTYPE"
COL_CREATE_TIME = "CREATE_TIME"
COL_ALTER_TIME = "ALTER_TIME"
COL_LAST_REGEN_TIME = "LAST_REGEN_TIME"
COL_TEXT = "TEXT"
COL_REMARKS = "REMARKS"
COL_RESULT_SETS = "RESULT_SETS"
COL_PARAMETER_STYLE = "PARAMETER_STYLE"
COL_DETERMINISTIC = "DETERMINISTIC"
COL_IMPLEMENTATION = "IMPLEMENTATION"
COL_DEBUG_MODE = "DEBUG_MODE"
COL_JAR_ID = "JAR_ID"
COL_JAR_SCHEMA = "JARSCHEMA"
COL_JAR_SIGNATURE = "JAR_SIGNATURE"
COL_CLASS = "CLASS"
COL_VALID = "VALID"
COL_DIALECT = "DIALECT"

# SYSCAT.ROUTINEPARMS
COL_PARM_NAME = "PARMNAME"
COL_ORDINAL = "ORDINAL"
COL_ROW_TYPE = "ROWTYPE"
COL_TYPE_SCHEMA = "TYPESCHEMA"
COL_TYPE_NAME = "TYPENAME"
COL_LENGTH = "LENGTH"
COL_SCALE = "SCALE"
COL_CODEPAGE = "CODEPAGE"
COL_LOCATOR = "LOCATOR"
COL_DEFAULT = "DEFAULT"


def _read_code(
    row: NamedColumnRow,
    enum_cls: Type[CatalogCode],
    column: str,
    enum_policy: EnumPolicy,
    trimmed: bool = False,
    fallback: Union[CatalogCode, None] = None,
) -> Union[CatalogCode, None]:
    raw = row.get_string_trimmed(column) if trimmed else row.get_string(column)
    try:
        value = lookup_literal(enum_cls, column, raw)
    except MappingError:
        if enum_policy != "lenient":
            raise
        logger.warning(
            f"⚠️ Unknown {enum_cls.__name__} literal {raw!r} in column {column}, "
            f"downgraded to {fallback}"
        )
        return fallback
    return fallback if value is None else value


def _as_row(row: Any) -> NamedColumnRow:
    if isinstance(row, NamedColumnRow):
        return row
    try:
        return NamedColumnRow(row)
    except TypeError as e:
        raise MappingError(MappingErrorKind.INVALID_ROW, str(e), value=row) from e


def _resolve_policy(
    enum_policy: EnumPolicy, settings: Union[MapperSettings, None]
) -> EnumPolicy:
    return settings.enum_policy if settings is not None else enum_policy


def _qualified_name(naming_fn: NamingFunction, container: Any, name: str) -> str:
    try:
        qualified_name = naming_fn(container, name)
    except Exception as e:
        raise MappingError(
            MappingErrorKind.NAMING_FAILED,
            f"Naming function failed for {name!r}: {e}",
            value=name,
        ) from e
    if not qualified_name or not isinstance(qualified_name, str):
        raise MappingError(
            MappingErrorKind.NAMING_FAILED,
            f"Naming function returned {qualified_name!r} for {name!r}",
            value=qualified_name,
        )
    return qualified_name


def map_routine_row(
    row: Any,
    container: Any,
    capabilities: CapabilitySet,
    naming_fn: NamingFunction = full_qualified_name,
    enum_policy: EnumPolicy = "strict",
    settings: Union[MapperSettings, None] = None,
) -> RoutineDescriptor:
    """
    Project one SYSCAT.ROUTINES row into a `RoutineDescriptor`.

    Missing or NULL columns map to None (or the field default). Columns that
    only exist on newer servers (OWNERTYPE, DIALECT, FUNCTIONTYPE) are read
    only when `capabilities` says the server provides them.

    Args:
        row (Any): Mapping, SQLAlchemy Row/RowMapping or `NamedColumnRow`.
        container (Any): The schema or module owning the routine.
        capabilities (CapabilitySet): Feature set of the source catalog.
        naming_fn (Callable): Builds the qualified name from (container, name).
        enum_policy (str): `strict` raises on unknown literals, `lenient` downgrades.
        settings (MapperSettings): When given, its `enum_policy` wins over the argument.

    Returns:
        RoutineDescriptor: The mapped descriptor.

    Raises:
        MappingError: On a row of unsupported type, a missing routine name, an
            unknown literal (strict policy), a container with no resolvable
            schema, a failing naming function or values the descriptor rejects.
    """
    enum_policy = _resolve_policy(enum_policy, settings)
    row = _as_row(row)

    name = row.get_string(COL_ROUTINE_NAME)
    if not name:
        raise MappingError(
            MappingErrorKind.MISSING_REQUIRED_COLUMN,
            f"Catalog row has no {COL_ROUTINE_NAME}",
            column=COL_ROUTINE_NAME,
        )

    try:
        effective_schema = resolve_schema(container)
        # Computed once; descriptors are frozen
        qualified_name = _qualified_name(naming_fn, container, name)
        read = functools.partial(_read_code, row, enum_policy=enum_policy)

        routine_kind = read(RoutineKind, COL_ROUTINE_TYPE)

        owner_type = None
        if capabilities.supports_owner_type:
            owner_type = read(OwnerType, COL_OWNER_TYPE)

        dialect = None
        function_subtype = None
        if capabilities.supports_dialect:
            dialect = row.get_string(COL_DIALECT)
        if capabilities.supports_function_subtype and routine_kind is RoutineKind.FUNCTION:
            function_subtype = read(FunctionSubtype, COL_FUNCTION_TYPE)

        java_binding = JavaBinding(
            jar_id=row.get_string(COL_JAR_ID),
            jar_schema=row.get_string(COL_JAR_SCHEMA),
            jar_signature=row.get_string(COL_JAR_SIGNATURE),
            class_name=row.get_string(COL_CLASS),
        )
        if not any(java_binding.model_dump().values()):
            java_binding = None

        descriptor = RoutineDescriptor(
            name=name,
            specific_name=row.get_string(COL_SPECIFIC_NAME),
            routine_id=row.get_int(COL_ROUTINE_ID),
            routine_kind=routine_kind,
            function_subtype=function_subtype,
            origin=read(RoutineOrigin, COL_ORIGIN),
            language=read(RoutineLanguage, COL_LANGUAGE, trimmed=True),
            validity_state=read(
                ValidityState, COL_VALID, fallback=ValidityState.UNKNOWN
            ),
            source_text=row.get_string(COL_TEXT),
            dialect=dialect,
            external_name=row.get_string(COL_IMPLEMENTATION),
            java_binding=java_binding,
            parameter_style=row.get_string_trimmed(COL_PARAMETER_STYLE),
            deterministic=row.get_boolean(COL_DETERMINISTIC),
            result_sets=row.get_int(COL_RESULT_SETS),
            debug_mode=row.get_string(COL_DEBUG_MODE),
            remarks=row.get_string(COL_REMARKS),
            created_at=row.get_timestamp(COL_CREATE_TIME),
            altered_at=row.get_timestamp(COL_ALTER_TIME),
            last_regenerated_at=row.get_timestamp(COL_LAST_REGEN_TIME),
            owner_name=row.get_string(COL_OWNER),
            owner_type=owner_type,
            container=container,
            effective_schema=effective_schema,
            fully_qualified_name=qualified_name,
        )
    except MappingError as e:
        e.row_name = name
        raise
    except ValidationError as e:
        raise MappingError(
            MappingErrorKind.INVALID_ROW,
            f"Catalog row {name!r} rejected: {e.error_count()} invalid field(s)",
            row_name=name,
        ) from e

    return descriptor


def map_parameter_row(
    row: Any,
    enum_policy: EnumPolicy = "strict",
    settings: Union[MapperSettings, None] = None,
) -> ParameterDescriptor:
    """Project one SYSCAT.ROUTINEPARMS row into a `ParameterDescriptor`."""
    enum_policy = _resolve_policy(enum_policy, settings)
    row = _as_row(row)

    ordinal = row.get_int(COL_ORDINAL)
    if ordinal is None:
        raise MappingError(
            MappingErrorKind.MISSING_REQUIRED_COLUMN,
            f"Parameter row has no {COL_ORDINAL}",
            column=COL_ORDINAL,
        )

    return ParameterDescriptor(
        name=row.get_string(COL_PARM_NAME),
        ordinal=ordinal,
        mode=_read_code(row, ParameterMode, COL_ROW_TYPE, enum_policy),
        type_schema=row.get_string_trimmed(COL_TYPE_SCHEMA),
        type_name=row.get_string_trimmed(COL_TYPE_NAME),
        length=row.get_int(COL_LENGTH),
        scale=row.get_int(COL_SCALE),
        codepage=row.get_int(COL_CODEPAGE),
        is_locator=row.get_boolean(COL_LOCATOR),
        default_value=row.get_string(COL_DEFAULT),
        remarks=row.get_string(COL_REMARKS),
    )


def map_routine_rows(
    rows: Iterable[Any],
    container: Any,
    capabilities: CapabilitySet,
    naming_fn: NamingFunction = full_qualified_name,
    enum_policy: EnumPolicy = "strict",
    settings: Union[MapperSettings, None] = None,
) -> List[RowOutcome]:
    """
    Map every row of a catalog scan, collecting one outcome per row.

    A row that fails to map is recorded with its error; the scan carries on.
    """
    outcomes = []
    failed = 0
    for index, row in enumerate(rows):
        try:
            descriptor = map_routine_row(
                row, container, capabilities, naming_fn, enum_policy, settings
            )
            outcomes.append(RowOutcome(index=index, descriptor=descriptor))
        except MappingError as e:
            failed += 1
            logger.warning(f"⚠️ Skipping catalog row {index} ({e.row_name}): {e}")
            outcomes.append(RowOutcome(index=index, error=e))

    logger.info(f"Mapped {len(outcomes) - failed}/{len(outcomes)} catalog rows")
    return outcomes


def lenient(mapper: Callable[..., Any]) -> Callable[..., Any]:
    """Bind the lenient enum policy to a mapping function."""
    return functools.partial(mapper, enum_policy="lenient")
