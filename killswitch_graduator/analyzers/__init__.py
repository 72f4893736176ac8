"""
Kill Switch Graduator Analyzers - declaration discovery
"""

from .declaration_locator import FindKillSwitchResult, KillSwitchDeclaration, find_killswitch_declarations
from .declaration_shape import OtherShape, ReturnOfCall, classify_function

__all__ = [
    "FindKillSwitchResult",
    "KillSwitchDeclaration",
    "find_killswitch_declarations",
    "OtherShape",
    "ReturnOfCall",
    "classify_function",
]
