import re
from typing import Any, List

from routine_catalog.core.errors import MappingError
from routine_catalog.core.schemas import ModuleContainer, SchemaContainer, resolve_schema

# Ordinary DB2 identifiers are stored upper case and need no delimiters
ORDINARY_IDENTIFIER = re.compile(r"^[A-Z_][A-Z0-9_$#@]*$")


def quote_identifier(name: str) -> str:
    """Return `name` as it must appear in SQL text, delimited when required."""
    if ORDINARY_IDENTIFIER.match(name):
        return name
    return '"' + name.replace('"', '""') + '"'


def container_chain(container: Any) -> List[str]:
    """Names from the outermost container down to `container`."""
    if isinstance(container, SchemaContainer):
        return [container.name]
    if isinstance(container, ModuleContainer):
        return [resolve_schema(container).name, container.name]
    raise MappingError.unresolvable_container(container)


def full_qualified_name(container: Any, routine_name: str) -> str:
    """
    Build the dotted, quoted name of a routine inside its container chain.

    >>> full_qualified_name(SchemaContainer(name="APP"), "Calc")
    'APP."Calc"'
    """
    parts = container_chain(container) + [routine_name]
    return ".".join(quote_identifier(part) for part in parts)
