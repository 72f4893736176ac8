"""
Shape classification for kill switch helper functions.

Every function classifies into exactly one of two shapes:

* ``ReturnOfCall`` - the first ``return`` in the body returns
  ``<something>.<activation method>(...)``.
* ``OtherShape`` - anything else, with the reason it was rejected.
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Union

import libcst as cst


@dataclass(frozen=True)
class ReturnOfCall:
    function: cst.FunctionDef
    call: cst.Call

    @property
    def arguments(self) -> Sequence[cst.Arg]:
        return self.call.args

    @property
    def identifier_arg(self) -> Optional[cst.Arg]:
        return self.call.args[0] if self.call.args else None

    @property
    def date_arg(self) -> Optional[cst.Arg]:
        return self.call.args[1] if len(self.call.args) > 1 else None


@dataclass(frozen=True)
class OtherShape:
    function: cst.FunctionDef
    reason: str


DeclarationShape = Union[ReturnOfCall, OtherShape]

_STATEMENT_CONTAINERS = (cst.BaseSuite, cst.BaseStatement, cst.Else, cst.Finally, cst.ExceptHandler)


def _walk(node: cst.CSTNode) -> Iterator[cst.CSTNode]:
    """Yield statements under ``node`` in source order, skipping nested defs and classes."""
    if isinstance(node, (cst.FunctionDef, cst.ClassDef)):
        return
    if isinstance(node, (cst.SimpleStatementLine, cst.SimpleStatementSuite)):
        yield from node.body
        return
    if isinstance(node, cst.BaseCompoundStatement):
        yield node
    for child in node.children:
        if isinstance(child, _STATEMENT_CONTAINERS):
            yield from _walk(child)


def first_return(function: cst.FunctionDef) -> Optional[cst.Return]:
    """The first ``return`` statement of ``function`` in source order."""
    for statement in _walk(function.body):
        if isinstance(statement, cst.Return):
            return statement
    return None


def classify_function(function: cst.FunctionDef, activation_method: str) -> DeclarationShape:
    """Classify ``function`` as a kill switch helper or not."""
    if function.asynchronous is not None:
        return OtherShape(function, "async function")

    returned = first_return(function)
    if returned is None:
        return OtherShape(function, "no return statement")

    value = returned.value
    if not isinstance(value, cst.Call):
        return OtherShape(function, "return value is not a call")

    callee = value.func
    if not isinstance(callee, cst.Attribute) or callee.attr.value != activation_method:
        return OtherShape(function, f"callee is not .{activation_method}")

    return ReturnOfCall(function, value)
