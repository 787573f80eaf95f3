"""Contains utility functions for working with YAML files."""

from pathlib import Path
from typing import Any

from ruamel.yaml import YAML


def load_yaml_file(path: Path) -> Any:
    """Loads a YAML file and returns its content."""
    yaml = YAML(typ="safe")
    with open(path, encoding="utf-8") as f:
        return yaml.load(f)


def load_yaml_string(content: str) -> Any:
    """Loads YAML content from a string.

    ruamel.yaml loaders must not be shared between threads, so each call
    creates its own.
    """
    yaml = YAML(typ="safe")
    return yaml.load(content)
