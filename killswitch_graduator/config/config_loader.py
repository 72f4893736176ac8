import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from killswitch_graduator.schemas.config_schemas_v1 import GraduatorConfig
from .env_utils import get_env_int, get_env_var

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when a graduator configuration file cannot be used."""


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def _apply_env_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    """Override config fields from environment variables."""
    activation_method = get_env_var("KS_ACTIVATION_METHOD")
    if activation_method:
        config["activation_method"] = activation_method

    import_pattern = get_env_var("KS_IMPORT_PATTERN")
    if import_pattern:
        config["import_pattern"] = import_pattern

    threshold_days = get_env_int("KS_THRESHOLD_DAYS")
    if threshold_days is not None:
        config["threshold_days"] = threshold_days

    log_level = get_env_var("LOG_LEVEL")
    if log_level:
        config["log_level"] = log_level

    log_dir = get_env_var("KS_LOG_DIR")
    if log_dir:
        config["log_dir"] = log_dir

    return config


def load_config(config_path: Optional[Union[str, Path]] = None) -> GraduatorConfig:
    """
    Build the graduator configuration.

    Precedence: environment variables > YAML file > model defaults.
    """
    data: Dict[str, Any] = {}
    if config_path is not None:
        data = _load_yaml(Path(config_path))
        logger.debug(f"Loaded graduator config from {config_path}")

    data = _apply_env_defaults(data)
    try:
        return GraduatorConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid graduator configuration: {e}") from e
