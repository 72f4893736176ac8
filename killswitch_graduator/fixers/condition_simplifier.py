"""
Condition Simplifier - folds the constant conditions a replacement leaves behind.

Only the rebuilt parents reported by the replacer and their ancestors are
touched; constant expressions elsewhere in the file were written on purpose
and stay as they are.

Folds are limited to rewrites that keep runtime behaviour for any operand:
``True and x`` becomes ``x``, but ``x and True`` is left alone because it
evaluates to ``x`` when ``x`` is falsy.
"""

import logging
from typing import Dict, List, Optional, Set, Union

import libcst as cst

from killswitch_graduator.utils.node_utils import is_ancestor_of, iter_ancestors, unwrap_block
from killswitch_graduator.workspace.project import SourceFile
from .reference_replacer import ReplacementOutcome

logger = logging.getLogger(__name__)


def constant_value(node: cst.BaseExpression) -> Optional[bool]:
    if isinstance(node, cst.Name) and node.value in ("True", "False"):
        return node.value == "True"
    return None


def _bool_name(value: bool, like: cst.BaseExpression) -> cst.Name:
    return cst.Name("True" if value else "False", lpar=like.lpar, rpar=like.rpar)


def _keep_parens(result: cst.BaseExpression, replaced: cst.BaseExpression) -> cst.BaseExpression:
    if replaced.lpar and not result.lpar:
        return result.with_changes(lpar=replaced.lpar, rpar=replaced.rpar)
    return result


class ConditionSimplifier(cst.CSTTransformer):
    """Fold constant booleans inside ``scope`` (a set of original nodes)."""

    def __init__(self, scope: Set[cst.CSTNode]):
        super().__init__()
        self._scope = scope
        self._elif_nodes: Set[cst.CSTNode] = set()
        self.folds = 0

    def visit_If(self, node: cst.If) -> Optional[bool]:
        if isinstance(node.orelse, cst.If):
            self._elif_nodes.add(node.orelse)
        return True

    def leave_UnaryOperation(self, original_node: cst.UnaryOperation,
                             updated_node: cst.UnaryOperation) -> cst.BaseExpression:
        if original_node not in self._scope or not isinstance(updated_node.operator, cst.Not):
            return updated_node
        value = constant_value(updated_node.expression)
        if value is None:
            return updated_node
        self.folds += 1
        return _bool_name(not value, updated_node)

    def leave_BooleanOperation(self, original_node: cst.BooleanOperation,
                               updated_node: cst.BooleanOperation) -> cst.BaseExpression:
        if original_node not in self._scope:
            return updated_node
        left = constant_value(updated_node.left)
        if left is None:
            return updated_node
        self.folds += 1
        if isinstance(updated_node.operator, cst.And):
            result = updated_node.right if left else updated_node.left
        else:
            result = updated_node.left if left else updated_node.right
        return _keep_parens(result, updated_node)

    def leave_IfExp(self, original_node: cst.IfExp, updated_node: cst.IfExp) -> cst.BaseExpression:
        if original_node not in self._scope:
            return updated_node
        value = constant_value(updated_node.test)
        if value is None:
            return updated_node
        self.folds += 1
        return _keep_parens(updated_node.body if value else updated_node.orelse, updated_node)

    def _fold_elif_chain(self, node: cst.If) -> cst.If:
        orelse = node.orelse
        while isinstance(orelse, cst.If):
            value = constant_value(orelse.test)
            if value is None:
                break
            self.folds += 1
            if value:
                orelse = cst.Else(body=orelse.body, leading_lines=orelse.leading_lines)
            else:
                orelse = orelse.orelse
        if orelse is node.orelse:
            return node
        return node.with_changes(orelse=orelse)

    def leave_If(self, original_node: cst.If, updated_node: cst.If
                 ) -> Union[cst.BaseStatement, cst.FlattenSentinel, cst.RemovalSentinel]:
        if original_node not in self._scope:
            return updated_node
        updated_node = self._fold_elif_chain(updated_node)
        # an elif is folded by the If that owns it
        if original_node in self._elif_nodes:
            return updated_node

        value = constant_value(updated_node.test)
        if value is None:
            return updated_node
        self.folds += 1
        if value:
            statements = unwrap_block(updated_node.body)
        elif updated_node.orelse is None:
            return cst.RemoveFromParent()
        elif isinstance(updated_node.orelse, cst.Else):
            statements = unwrap_block(updated_node.orelse.body)
        else:
            return updated_node.orelse.with_changes(leading_lines=updated_node.leading_lines)

        first, rest = statements[0], list(statements[1:])
        first = first.with_changes(leading_lines=[*updated_node.leading_lines, *first.leading_lines])
        return cst.FlattenSentinel([first, *rest])

    def leave_IndentedBlock(self, original_node: cst.IndentedBlock,
                            updated_node: cst.IndentedBlock) -> cst.IndentedBlock:
        if not updated_node.body:
            return updated_node.with_changes(body=[cst.SimpleStatementLine(body=[cst.Pass()])])
        return updated_node


def _simplification_scope(source_file: SourceFile, nodes: List[cst.CSTNode]) -> Set[cst.CSTNode]:
    parents = source_file.parents()
    scope: Set[cst.CSTNode] = set()
    for node in nodes:
        # nodes from an older tree of this file no longer apply
        if not is_ancestor_of(source_file.module, node, parents):
            continue
        scope.add(node)
        scope.update(iter_ancestors(node, parents))
    return scope


def simplify_outcome(outcome: ReplacementOutcome) -> int:
    """
    Fold constant conditions around the nodes a replacement modified.

    Returns:
        Number of folds applied across all files
    """
    by_file: Dict[SourceFile, List[cst.CSTNode]] = {}
    for handle in outcome.modified_nodes:
        by_file.setdefault(handle.source_file, []).append(handle.node)

    total = 0
    for source_file, nodes in by_file.items():
        scope = _simplification_scope(source_file, nodes)
        if not scope:
            continue
        simplifier = ConditionSimplifier(scope)
        new_module = source_file.module.visit(simplifier)
        if simplifier.folds:
            source_file.module = new_module
            total += simplifier.folds
            logger.debug(f"Folded {simplifier.folds} constant conditions in {source_file.path}")
    return total
