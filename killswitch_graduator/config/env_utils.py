"""
Environment lookups for graduator settings.

Settings such as ``KS_ACTIVATION_METHOD`` or ``KS_THRESHOLD_DAYS`` can live in
the process environment or in a ``.env`` file next to the project. The file is
read once with python-dotenv and never copied into ``os.environ``, so a run
does not leak its settings to the code it inspects.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = Path(".env")

_dotenv_cache: Dict[str, str] = {}
_dotenv_source: Optional[Path] = None


def load_env_file(path: Path | str = DEFAULT_ENV_FILE, *, force: bool = False) -> None:
    """Read ``path`` into the lookup cache; a missing file leaves it empty."""
    global _dotenv_cache, _dotenv_source
    env_path = Path(path)
    if _dotenv_source == env_path and not force:
        return
    values = dotenv_values(env_path) if env_path.is_file() else {}
    # keys without a value (a bare ``NAME`` line) carry None
    _dotenv_cache = {key: value for key, value in values.items() if value is not None}
    _dotenv_source = env_path
    if _dotenv_cache:
        logger.debug(f"Loaded {len(_dotenv_cache)} settings from {env_path}")


def get_env_var(name: str, default: Optional[str] = None) -> Optional[str]:
    """Look ``name`` up in the environment, then the ``.env`` file, then fall back to ``default``."""
    if _dotenv_source is None:
        load_env_file()
    value = os.getenv(name)
    if value is not None:
        return value
    return _dotenv_cache.get(name, default)


def get_env_int(name: str) -> Optional[int]:
    """Integer setting, or None when unset or not a whole number."""
    raw = get_env_var(name)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}")
        return None
