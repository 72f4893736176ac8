"""
Reference Replacer - turns every call of a graduated kill switch into a constant.

A graduated kill switch is never activated again, so its helper always
returns False:

* ``helper()`` becomes ``False``
* ``not helper()`` becomes ``True``

References that are not calls (``callback = helper``, ``register(helper)``)
are left alone.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Set

import libcst as cst

from killswitch_graduator.analyzers.declaration_locator import KillSwitchDeclaration
from killswitch_graduator.utils.node_utils import iter_ancestors
from killswitch_graduator.workspace.project import Project, SourceFile
from killswitch_graduator.workspace.references import SymbolReference, find_references

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class NodeHandle:
    """A node of the current tree of ``source_file``."""
    source_file: SourceFile
    node: cst.CSTNode


@dataclass
class ReplacementOutcome:
    """Nodes whose children were replaced, and the files that held call sites."""
    modified_nodes: List[NodeHandle] = field(default_factory=list)
    modified_files: List[SourceFile] = field(default_factory=list)
    call_sites: int = 0


def _constant(value: str, original: cst.BaseExpression) -> cst.Name:
    # keep any parentheses that wrapped the replaced expression
    return cst.Name(value, lpar=original.lpar, rpar=original.rpar)


def _is_negation_of(node: cst.CSTNode, operand: cst.CSTNode) -> bool:
    return (
        isinstance(node, cst.UnaryOperation)
        and isinstance(node.operator, cst.Not)
        and node.expression is operand
    )


class CallSiteTransformer(cst.CSTTransformer):
    """Swap planned nodes for constants and capture their rebuilt parents."""

    def __init__(self, replacements: Dict[cst.CSTNode, cst.BaseExpression], watched: Set[cst.CSTNode]):
        super().__init__()
        self._replacements = replacements
        self._watched = watched
        self.updated_parents: List[cst.CSTNode] = []

    def on_leave(self, original_node, updated_node):
        replacement = self._replacements.get(original_node)
        if replacement is not None:
            return replacement
        if original_node in self._watched:
            self.updated_parents.append(updated_node)
        return updated_node


def _plan_file(source_file: SourceFile, references: List[SymbolReference]):
    """Pick the node to replace for each call site reference of one file."""
    parents = source_file.parents()
    planned: Dict[cst.CSTNode, cst.BaseExpression] = {}

    for reference in references:
        call = parents.get(reference.node)
        # not a call of the helper (e.g. an import or an assignment), skip
        if not isinstance(call, cst.Call) or call.func is not reference.node:
            continue

        negation = parents.get(call)
        if negation is not None and _is_negation_of(negation, call):
            target, replacement = negation, _constant("True", negation)
        else:
            target, replacement = call, _constant("False", call)

        if parents.get(target) is not None:
            planned[target] = replacement

    replacements: Dict[cst.CSTNode, cst.BaseExpression] = {}
    watched: Set[cst.CSTNode] = set()
    for target, replacement in planned.items():
        # a call nested in another replaced call disappears with it
        if any(ancestor in planned for ancestor in iter_ancestors(target, parents)):
            continue
        replacements[target] = replacement
        watched.add(parents[target])

    return replacements, watched


def replace_fun_call_with_false(project: Project, declaration: KillSwitchDeclaration) -> ReplacementOutcome:
    """
    Replace every call of ``declaration`` across the project with a constant.

    Each touched ``SourceFile`` gets its transformed module swapped in; nothing
    is written to disk.

    Returns:
        The rebuilt parents of the replaced nodes (the nodes a simplifier
        should look at) and the files that contained call sites.
    """
    outcome = ReplacementOutcome()
    logger.info(f"Finding references to {declaration.name} ({declaration.identifier})...")
    references = find_references(project, declaration.source_file, declaration.name)

    by_file: Dict[SourceFile, List[SymbolReference]] = {}
    for reference in references:
        by_file.setdefault(reference.source_file, []).append(reference)

    for source_file, file_references in by_file.items():
        replacements, watched = _plan_file(source_file, file_references)
        if not replacements:
            continue

        transformer = CallSiteTransformer(replacements, watched)
        source_file.module = source_file.module.visit(transformer)

        outcome.call_sites += len(replacements)
        outcome.modified_files.append(source_file)
        for node in transformer.updated_parents:
            outcome.modified_nodes.append(NodeHandle(source_file, node))
        logger.debug(f"Replaced {len(replacements)} call sites of {declaration.name} in {source_file.path}")

    logger.info(
        f"Replaced {outcome.call_sites} call sites of {declaration.name} in {len(outcome.modified_files)} files"
    )
    return outcome
