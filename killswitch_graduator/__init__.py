"""
Kill Switch Graduator - retiring kill switches that have been off long enough

A kill switch helper wraps one runtime flag check::

    def is_new_checkout_disabled():
        return KillSwitch.is_activated("3fa85f64-5717-4562-b3fc-2c963f66afa6", "2023-01-01")

Once the flag is older than the threshold it is considered graduated: every
call of the helper is replaced with ``False`` (``not helper()`` with
``True``) across the project.

Key Features:
- Kill switch declaration discovery by id or by graduation date
- Cross-file call site resolution through libcst scope analysis
- Constant folding of the conditions left behind
"""

from .core import KillSwitchGraduator
from .analyzers import FindKillSwitchResult, KillSwitchDeclaration, find_killswitch_declarations
from .fixers import ReplacementOutcome, replace_fun_call_with_false, simplify_outcome
from .schemas import CoreOptions, GraduatorConfig, GraduationReport
from .workspace import Project, SourceFile, SourceFileNotFoundError

__version__ = "1.0.0"
__all__ = [
    "KillSwitchGraduator",
    "FindKillSwitchResult",
    "KillSwitchDeclaration",
    "find_killswitch_declarations",
    "ReplacementOutcome",
    "replace_fun_call_with_false",
    "simplify_outcome",
    "CoreOptions",
    "GraduatorConfig",
    "GraduationReport",
    "Project",
    "SourceFile",
    "SourceFileNotFoundError",
]
