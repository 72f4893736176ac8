"""
Small helpers over libcst trees shared by the fixers.
"""

from typing import Mapping, Sequence, Union

import libcst as cst


def iter_ancestors(node: cst.CSTNode, parents: Mapping[cst.CSTNode, cst.CSTNode]):
    """Yield the ancestors of ``node`` from its parent up to the module."""
    current = parents.get(node)
    while current is not None:
        yield current
        current = parents.get(current)


def is_ancestor_of(node_a: cst.CSTNode, node_b: cst.CSTNode,
                   parents: Mapping[cst.CSTNode, cst.CSTNode]) -> bool:
    """Determine if node_a is an ancestor of node_b."""
    return any(ancestor is node_a for ancestor in iter_ancestors(node_b, parents))


def unwrap_block(
    block: Union[cst.IndentedBlock, cst.SimpleStatementSuite],
) -> Sequence[cst.BaseStatement]:
    """
    Return the statements of a block so they can be spliced into the parent.

    A one-line suite (``if x: a(); b()``) becomes a single statement line.
    """
    if isinstance(block, cst.SimpleStatementSuite):
        return [cst.SimpleStatementLine(body=block.body)]
    return list(block.body)
