from typing import List, Optional

from pydantic import BaseModel, Field

from killswitch_graduator.utils.time_utils import DEFAULT_THRESHOLD_DAYS

DEFAULT_ACTIVATION_METHOD = "is_activated"
DEFAULT_IMPORT_PATTERN = "killswitch"
DEFAULT_EXCLUDE_DIRS = [
    ".git",
    ".hg",
    ".tox",
    ".venv",
    "venv",
    "__pycache__",
    "build",
    "dist",
    "node_modules",
]


class GraduatorConfig(BaseModel):
    """Settings for discovering and graduating kill switches."""
    activation_method: str = Field(
        default=DEFAULT_ACTIVATION_METHOD,
        description="Member name of the runtime activation check, e.g. KillSwitch.is_activated",
    )
    import_pattern: str = Field(
        default=DEFAULT_IMPORT_PATTERN,
        description="Case-insensitive substring an imported name must contain for a file to be scanned",
    )
    threshold_days: int = Field(
        default=DEFAULT_THRESHOLD_DAYS,
        ge=0,
        description="Kill switches older than this many days are considered graduated",
    )
    exclude_dirs: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS),
        description="Directory names skipped while loading a project",
    )
    source_roots: List[str] = Field(
        default_factory=lambda: ["src"],
        description="Directories (relative to the project root) that hold top-level packages",
    )
    simplify_conditions: bool = Field(
        default=True,
        description="Fold constant conditions left behind by the replacement",
    )
    log_level: str = Field(default="INFO")
    log_dir: Optional[str] = Field(
        default=None,
        description="Directory for a run log file; stderr only when unset",
    )
