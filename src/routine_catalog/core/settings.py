from typing import Union
import yaml
from pydantic import ValidationError

from routine_catalog.core.data_conversion import load_config_file
from routine_catalog.core.errors import SettingsError
from routine_catalog.core.logger import logger
from routine_catalog.core.schemas import MapperSettings


def load_mapper_settings(file_path: Union[str, None] = None) -> MapperSettings:
    """
    Load mapper settings from a JSON, YAML or TOML file.

    Without a path, the defaults are returned. An empty file also yields the
    defaults.

    Raises:
        SettingsError: If the file cannot be read, has an unsupported format or
            does not validate.
    """
    if file_path is None:
        return MapperSettings()

    try:
        data = load_config_file(file_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise SettingsError(file_path, str(e)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SettingsError(file_path, "settings must be a mapping")

    try:
        settings = MapperSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(file_path, str(e)) from e

    logger.info(f"Loaded mapper settings from {file_path}: {settings.model_dump()}")
    return settings
