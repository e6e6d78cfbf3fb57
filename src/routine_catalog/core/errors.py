"""Routine catalog error types."""

from enum import Enum
from typing import Any, Union


class RoutineCatalogError(Exception):
    """Base error for routine catalog operations."""

    pass


class MappingErrorKind(str, Enum):
    """Reasons a catalog row cannot be mapped."""

    UNKNOWN_ENUM_LITERAL = "unknown_enum_literal"
    UNRESOLVABLE_CONTAINER = "unresolvable_container"
    MISSING_REQUIRED_COLUMN = "missing_required_column"
    INVALID_ROW = "invalid_row"
    NAMING_FAILED = "naming_failed"


class MappingError(RoutineCatalogError):
    """A catalog row could not be projected into a descriptor."""

    def __init__(
        self,
        kind: MappingErrorKind,
        message: str,
        column: Union[str, None] = None,
        value: Any = None,
        row_name: Union[str, None] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.column = column
        self.value = value
        self.row_name = row_name

    @classmethod
    def unknown_literal(cls, enum_name: str, column: str, value: Any) -> "MappingError":
        return cls(
            MappingErrorKind.UNKNOWN_ENUM_LITERAL,
            f"Unknown {enum_name} literal {value!r} in column {column}",
            column=column,
            value=value,
        )

    @classmethod
    def unresolvable_container(cls, container: Any) -> "MappingError":
        return cls(
            MappingErrorKind.UNRESOLVABLE_CONTAINER,
            f"Cannot resolve a schema from container {container!r}",
            value=container,
        )


class FetchError(RoutineCatalogError):
    """Child fetch collaborator failed."""

    def __init__(self, qualified_name: str, reason: str) -> None:
        super().__init__(f"Failed to fetch parameters of {qualified_name}: {reason}")
        self.qualified_name = qualified_name


class RefreshError(RoutineCatalogError):
    """Explicit refresh of a descriptor failed."""

    def __init__(self, qualified_name: str, reason: str) -> None:
        super().__init__(f"Failed to refresh {qualified_name}: {reason}")
        self.qualified_name = qualified_name


class SettingsError(RoutineCatalogError):
    """Mapper settings could not be loaded."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Invalid mapper settings in {path}: {reason}")
        self.path = path
