"""
Kill Switch Graduator Fixers - call site replacement and clean-up
"""

from .reference_replacer import NodeHandle, ReplacementOutcome, replace_fun_call_with_false
from .condition_simplifier import ConditionSimplifier, simplify_outcome

__all__ = [
    "NodeHandle",
    "ReplacementOutcome",
    "replace_fun_call_with_false",
    "ConditionSimplifier",
    "simplify_outcome",
]
