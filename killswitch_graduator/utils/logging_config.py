import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_basic_logging(level: int = logging.INFO,
                        log_dir: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """
    Configure the root logger for a graduator run.

    Log records always go to stderr. When ``log_dir`` is given, a timestamped
    ``killswitch_graduator_*.log`` file is created there as well.

    Args:
        level: Logging level, overridden by the ``LOG_LEVEL`` env var when set
        log_dir: Directory for an additional log file

    Returns:
        Path of the log file, or None when logging to stderr only.
    """
    from killswitch_graduator.config.env_utils import get_env_var

    env_level = get_env_var("LOG_LEVEL")
    if env_level:
        level_from_env = logging.getLevelName(env_level.upper())
        if isinstance(level_from_env, int):
            level = level_from_env

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    root = logging.getLogger()
    root.handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    log_filename: Optional[Path] = None
    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        log_filename = log_path / f"killswitch_graduator_{datetime.now():%Y%m%d_%H%M%S}.log"

        file_handler = logging.FileHandler(log_filename, encoding='utf-8')
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    root.setLevel(level)

    # libcst is chatty at DEBUG while resolving metadata
    logging.getLogger("libcst").setLevel(logging.WARNING)

    if log_filename:
        logger.debug(f"Logging configured. Level: {logging.getLevelName(level)}, Log file: {log_filename}")
    else:
        logger.debug(f"Logging configured. Level: {logging.getLevelName(level)}")
    return log_filename
