from typing import Union
from sqlalchemy import Select, select

from routine_catalog.core.schemas import (
    CapabilitySet,
    Container,
    ModuleContainer,
    RoutineDescriptor,
    resolve_schema,
)
from routine_catalog.models.catalog_model import routine_parms, routines


def routine_columns(capabilities: CapabilitySet):
    """Columns of SYSCAT.ROUTINES the server can provide."""
    gated = {
        "OWNERTYPE": capabilities.supports_owner_type,
        "DIALECT": capabilities.supports_dialect,
        "FUNCTIONTYPE": capabilities.supports_function_subtype,
    }
    return [column for column in routines.c if gated.get(column.name, True)]


def select_routines(
    capabilities: CapabilitySet,
    container: Union[Container, None] = None,
) -> Select:
    """
    Build the catalog query listing the routines of a container.

    The statement is only built here; executing it is up to the caller.

    - A schema container selects the routines outside any module.
    - A module container selects the routines of that module.
    - Without a container every routine is selected.
    """
    query = select(*routine_columns(capabilities))

    if container is not None:
        schema = resolve_schema(container)
        query = query.where(routines.c.ROUTINESCHEMA == schema.name)
        if isinstance(container, ModuleContainer):
            query = query.where(routines.c.ROUTINEMODULENAME == container.name)
        else:
            query = query.where(routines.c.ROUTINEMODULENAME.is_(None))

    return query.order_by(routines.c.ROUTINENAME, routines.c.SPECIFICNAME)


def select_parameters(descriptor: RoutineDescriptor) -> Select:
    """Build the query listing a routine's parameters in ordinal order."""
    specific_name = descriptor.specific_name or descriptor.name
    return (
        select(routine_parms)
        .where(routine_parms.c.ROUTINESCHEMA == descriptor.effective_schema.name)
        .where(routine_parms.c.SPECIFICNAME == specific_name)
        .order_by(routine_parms.c.ORDINAL)
    )
