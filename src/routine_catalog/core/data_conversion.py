from typing import Iterable, Union
import json
import yaml
import toml

from routine_catalog.core.schemas import RoutineDescriptor


def load_config_file(file_path: str) -> Union[dict, list]:
    """
    Load a configuration file, automatically detecting its format (JSON, YAML, TOML).

    Args:
        file_path (str): Path to the configuration file.

    Returns:
        Union[dict, list]: Parsed configuration data.

    Raises:
        ValueError: If the file format is unsupported.
    """
    with open(file_path, "r") as file:
        if file_path.endswith((".json", ".JSON")):
            return json.load(file)
        if file_path.endswith((".yaml", ".yml", ".YAML", ".YML")):
            return yaml.safe_load(file)
        if file_path.endswith((".toml", ".TOML")):
            return toml.load(file)

        raise ValueError("Unsupported config file format. Use JSON, YAML, or TOML.")


def convert_descriptors(descriptors: Iterable[RoutineDescriptor], fmt: str) -> str:
    """
    Render routine descriptors as a JSON, YAML, or TOML document.

    Args:
        descriptors (Iterable[RoutineDescriptor]): Descriptors to export.
        fmt (str): Desired format ("json", "yaml", "toml").

    Returns:
        str: The formatted string.

    Raises:
        ValueError: If the format is unsupported.
    """
    if fmt not in ("json", "yaml", "toml"):
        raise ValueError("Unsupported format. Choose 'json', 'yaml', or 'toml'.")

    # TOML has no null, so absent values are left out of every format
    routines = [
        descriptor.model_dump(mode="json", exclude_none=True)
        for descriptor in descriptors
    ]

    if fmt == "json":
        return json.dumps(routines, indent=4)

    if fmt == "yaml":
        return yaml.safe_dump(routines, default_flow_style=False, sort_keys=False)

    # A TOML document must be a table; routines become an array of tables
    return toml.dumps({"routines": routines})
