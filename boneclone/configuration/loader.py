"""Loads and validates the BoneClone configuration file."""

import os
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError
from ruamel.yaml.error import YAMLError

from boneclone.configuration.exceptions import ConfigurationLoadError
from boneclone.schemas.config import Config
from boneclone.utils.yaml import load_yaml_file

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def expand_environment_variables(value: Any) -> Any:
    """Expand $VAR and ${VAR} references in every string of a loaded YAML document.

    References to unset variables are left untouched.
    """
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, list):
        return [expand_environment_variables(item) for item in value]
    if isinstance(value, dict):
        return {key: expand_environment_variables(item) for key, item in value.items()}
    return value


def load_configuration(path: Path) -> Config:
    """Load, expand, and validate the configuration file at path.

    Raises:
        ConfigurationLoadError: If the file is missing, is not valid YAML, or does not match the schema.
    """
    logger.debug("Loading configuration", path=str(path))
    try:
        content = load_yaml_file(path)
    except FileNotFoundError as exc:
        raise ConfigurationLoadError(str(path), "file not found") from exc
    except (OSError, YAMLError) as exc:
        raise ConfigurationLoadError(str(path), str(exc)) from exc

    if content is None:
        content = {}
    if not isinstance(content, dict):
        raise ConfigurationLoadError(str(path), "top level of the configuration must be a mapping")

    try:
        config = Config.model_validate(expand_environment_variables(content))
    except ValidationError as exc:
        raise ConfigurationLoadError(str(path), str(exc)) from exc

    logger.info(
        "Loaded configuration",
        path=str(path),
        provider_count=len(config.providers),
        include_count=len(config.files.include),
        pull_request=config.git.pull_request,
    )
    return config
