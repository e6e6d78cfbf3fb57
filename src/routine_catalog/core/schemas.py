import re
from datetime import datetime
from typing import Any, Callable, Literal, Sequence, Tuple, Union
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    field_serializer,
    field_validator,
)

from routine_catalog.core.child_cache import ChildCache
from routine_catalog.core.dictionary import (
    CatalogCode,
    FunctionSubtype,
    ObjectState,
    OwnerType,
    ParameterMode,
    ProcedureType,
    RoutineKind,
    RoutineLanguage,
    RoutineOrigin,
    ValidityState,
)
from routine_catalog.core.errors import MappingError, RefreshError

VERSION_PATTERN = re.compile(r"^\d+(\.\d+)*$")


def parse_version(version: str) -> Tuple[int, ...]:
    """Turn a dotted server version ("9.7", "11.5.8.0") into a comparable tuple."""
    if not VERSION_PATTERN.match(version or ""):
        raise ValueError(f"Invalid server version: {version!r}")
    return tuple(int(part) for part in version.split("."))


class SchemaContainer(BaseModel):
    """A schema owning routines directly."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)


class ModuleContainer(BaseModel):
    """A module owning routines; its schema is the effective container."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    parent_schema: Union[SchemaContainer, None] = None


Container = Union[SchemaContainer, ModuleContainer]


def resolve_schema(container: Any) -> SchemaContainer:
    """
    Resolve the schema that effectively contains a routine.

    Raises:
        MappingError: If the container is neither a schema nor a module with a schema.
    """
    if isinstance(container, SchemaContainer):
        return container
    if isinstance(container, ModuleContainer) and container.parent_schema is not None:
        return container.parent_schema
    raise MappingError.unresolvable_container(container)


class CapabilityThresholds(BaseModel):
    """Minimum server versions at which optional catalog columns exist."""

    owner_type: str = "9.5"
    dialect: str = "9.7"
    function_subtype: str = "9.7"

    @field_validator("owner_type", "dialect", "function_subtype")
    @classmethod
    def validate_version(cls, v):
        parse_version(v)
        return v


class CapabilitySet(BaseModel):
    """
    What the source catalog can provide, derived from its server version.

    The mapper consults only this object, so it can be exercised without a
    live connection.
    """

    model_config = ConfigDict(frozen=True)

    server_version: str
    thresholds: CapabilityThresholds = Field(default_factory=CapabilityThresholds)

    @field_validator("server_version")
    @classmethod
    def validate_server_version(cls, v):
        parse_version(v)
        return v

    @classmethod
    def for_version(
        cls, version: str, thresholds: Union[CapabilityThresholds, None] = None
    ) -> "CapabilitySet":
        return cls(
            server_version=version,
            thresholds=thresholds or CapabilityThresholds(),
        )

    def is_at_least(self, version: str) -> bool:
        return parse_version(self.server_version) >= parse_version(version)

    @property
    def supports_owner_type(self) -> bool:
        return self.is_at_least(self.thresholds.owner_type)

    @property
    def supports_dialect(self) -> bool:
        return self.is_at_least(self.thresholds.dialect)

    @property
    def supports_function_subtype(self) -> bool:
        return self.is_at_least(self.thresholds.function_subtype)


class JavaBinding(BaseModel):
    """Jar coordinates of a Java routine."""

    model_config = ConfigDict(frozen=True)

    jar_id: Union[str, None] = None
    jar_schema: Union[str, None] = None
    jar_signature: Union[str, None] = None
    class_name: Union[str, None] = None


def _serialize_code(value: Union[CatalogCode, None]) -> Union[str, None]:
    return value.name if value is not None else None


class ParameterDescriptor(BaseModel):
    """One row of SYSCAT.ROUTINEPARMS."""

    model_config = ConfigDict(frozen=True)

    name: Union[str, None] = None
    ordinal: int
    mode: Union[ParameterMode, None] = None
    type_schema: Union[str, None] = None
    type_name: Union[str, None] = None
    length: Union[int, None] = None
    scale: Union[int, None] = None
    codepage: Union[int, None] = None
    is_locator: Union[bool, None] = None
    default_value: Union[str, None] = None
    remarks: Union[str, None] = None

    @field_serializer("mode", when_used="json")
    def serialize_mode(self, value):
        return _serialize_code(value)


class RoutineDescriptor(BaseModel):
    """
    Typed projection of one SYSCAT.ROUTINES row.

    Everything is fixed at construction except the parameter cache, which is
    filled on first access and emptied by `refresh()`.
    """

    model_config = ConfigDict(frozen=True)

    # Identity
    name: str = Field(..., min_length=1)
    specific_name: Union[str, None] = None
    routine_id: Union[int, None] = None

    # Classification
    routine_kind: Union[RoutineKind, None] = None
    function_subtype: Union[FunctionSubtype, None] = None
    origin: Union[RoutineOrigin, None] = None
    language: Union[RoutineLanguage, None] = None
    validity_state: ValidityState = ValidityState.UNKNOWN

    # Definition payload
    source_text: Union[str, None] = None
    dialect: Union[str, None] = None
    external_name: Union[str, None] = None
    java_binding: Union[JavaBinding, None] = None
    parameter_style: Union[str, None] = None
    deterministic: Union[bool, None] = None
    result_sets: Union[int, None] = None
    debug_mode: Union[str, None] = None
    remarks: Union[str, None] = None

    # Temporal
    created_at: Union[datetime, None] = None
    altered_at: Union[datetime, None] = None
    last_regenerated_at: Union[datetime, None] = None

    # Ownership
    owner_name: Union[str, None] = None
    owner_type: Union[OwnerType, None] = None

    # Relationships
    container: Container
    effective_schema: SchemaContainer
    fully_qualified_name: str = Field(..., min_length=1)

    _children: ChildCache = PrivateAttr(default_factory=ChildCache)

    def __copy__(self) -> "RoutineDescriptor":
        # Private attributes are copied shallowly; a copy gets its own cache
        copied = super().__copy__()
        copied.__pydantic_private__["_children"] = ChildCache()
        return copied

    @field_serializer(
        "routine_kind",
        "function_subtype",
        "origin",
        "language",
        "validity_state",
        "owner_type",
        when_used="json",
    )
    def serialize_codes(self, value):
        return _serialize_code(value)

    @property
    def procedure_type(self) -> Union[ProcedureType, None]:
        if self.routine_kind is None:
            return None
        return self.routine_kind.procedure_type

    @property
    def is_function(self) -> bool:
        return self.routine_kind is RoutineKind.FUNCTION

    @property
    def object_state(self) -> ObjectState:
        if self.validity_state is ValidityState.VALID:
            return ObjectState.NORMAL
        return ObjectState.UNKNOWN

    @property
    def parameters_loaded(self) -> bool:
        return self._children.is_populated

    def get_parameters(
        self, fetch_fn: Callable[["RoutineDescriptor"], Sequence[ParameterDescriptor]]
    ) -> Tuple[ParameterDescriptor, ...]:
        """Return the routine's parameters, fetching them on first access only."""
        return self._children.get_children(self, fetch_fn)

    async def aget_parameters(self, fetch_fn) -> Tuple[ParameterDescriptor, ...]:
        """Async counterpart of `get_parameters` for coroutine fetchers."""
        return await self._children.aget_children(self, fetch_fn)

    def refresh(self) -> "RoutineDescriptor":
        """
        Drop cached parameters so the next access fetches them again.

        Raises:
            RefreshError: If the cache could not be cleared.
        """
        try:
            self._children.clear()
        except Exception as e:
            raise RefreshError(self.fully_qualified_name, str(e)) from e
        return self


class RowOutcome(BaseModel):
    """Result of mapping one row of a catalog scan."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    index: int
    descriptor: Union[RoutineDescriptor, None] = None
    error: Union[MappingError, None] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class MapperSettings(BaseModel):
    """
    Mapper configuration.

    - `thresholds`: server versions gating optional catalog columns.
    - `enum_policy`: `strict` raises on unknown literals, `lenient` downgrades them.
    - `definition_format`: `as_is` or `formatted` routine source text.
    """

    thresholds: CapabilityThresholds = Field(default_factory=CapabilityThresholds)
    enum_policy: Literal["strict", "lenient"] = "strict"
    definition_format: Literal["as_is", "formatted"] = "as_is"

    def capabilities_for(self, version: str) -> CapabilitySet:
        return CapabilitySet.for_version(version, self.thresholds)
