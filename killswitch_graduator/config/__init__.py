from .config_loader import ConfigurationError, load_config
from .env_utils import get_env_int, get_env_var, load_env_file

__all__ = ["ConfigurationError", "load_config", "get_env_int", "get_env_var", "load_env_file"]
