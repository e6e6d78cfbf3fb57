import logging
from typing import Any, Callable, Dict, Union

from routine_catalog.core.dictionary import RoutineLanguage
from routine_catalog.core.schemas import MapperSettings, RoutineDescriptor

logger = logging.getLogger(__name__)

NO_DDL_FOR_NON_SQL_ROUTINES = (
    "-- Source code is not available for routines not written in SQL"
)

FORMAT_OPTION = "format"


def get_definition_text(
    descriptor: RoutineDescriptor,
    options: Union[Dict[str, Any], None] = None,
    formatter: Union[Callable[[str], str], None] = None,
    settings: Union[MapperSettings, None] = None,
) -> Union[str, None]:
    """
    Return the definition text shown for a routine.

    SQL routines yield their catalog source text, passed through `formatter`
    when the requested format is `formatted`. Other languages have no
    retrievable source and yield `NO_DDL_FOR_NON_SQL_ROUTINES`.

    Args:
        descriptor (RoutineDescriptor): The routine.
        options (Dict[str, Any]): Caller options; `format` overrides the settings.
        formatter (Callable[[str], str]): Source formatter for the `formatted` mode.
        settings (MapperSettings): Supplies `definition_format`; `as_is` without it.
    """
    if descriptor.language is not RoutineLanguage.SQL:
        return NO_DDL_FOR_NON_SQL_ROUTINES

    default_format = settings.definition_format if settings is not None else "as_is"
    fmt = (options or {}).get(FORMAT_OPTION, default_format)
    if fmt not in ("as_is", "formatted"):
        raise ValueError(f"Unsupported definition format: {fmt!r}")

    text = descriptor.source_text
    if fmt == "formatted" and text and formatter is not None:
        logger.debug(f"Formatting definition of {descriptor.fully_qualified_name}")
        return formatter(text)
    return text
