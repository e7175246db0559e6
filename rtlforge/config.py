"""Centralized config loading — read once at import time.

``RTLFORGE_CONFIG`` points at an alternative YAML file; otherwise the bundled
``config.yaml`` is used.
"""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

from rtlforge.errors import ConfigurationError

# .env lives at the project root, next to rtlforge/
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"
CONFIG_PATH = Path(os.environ.get("RTLFORGE_CONFIG") or DEFAULT_CONFIG_PATH)

# Sections the dashboard and CLI read as mappings / option lists.
_MAPPING_KEYS = ("defaults",)
_LIST_KEYS = ("protocols", "architectures", "simulation_tools", "example_prompts")


def load_config(path: Path) -> dict:
    """Read and shape-check a config file.

    Raises ConfigurationError if the file is missing, is not YAML, or has a
    section of the wrong type.
    """
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Config file {path} is not valid YAML: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping at the top level.")
    for key in _MAPPING_KEYS:
        if key in data and not isinstance(data[key], dict):
            raise ConfigurationError(f"Config key '{key}' must be a mapping.")
    for key in _LIST_KEYS:
        if key in data and not isinstance(data[key], list):
            raise ConfigurationError(f"Config key '{key}' must be a list.")
    return data


_config = load_config(CONFIG_PATH)


def get_config() -> dict:
    """Return the loaded config dictionary."""
    return _config


def resolve_path(relative: str) -> Path:
    """Resolve a config-relative path against the project root."""
    path = Path(relative)
    return path if path.is_absolute() else _PROJECT_ROOT / path
