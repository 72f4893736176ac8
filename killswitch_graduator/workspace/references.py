"""
Cross-file reference resolution for module level functions.

Usage sites are bound through libcst scope analysis
(``FullyQualifiedNameProvider``), so ``from pkg.flags import check as c``,
``import pkg.flags as f`` and relative imports all resolve to the defining
module. Re-exports (``pkg/__init__.py`` doing ``from .flags import check``)
are followed through an alias map built from module level ``from`` imports.
Star imports and dynamic lookups (``getattr``) are not followed.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Set

import libcst as cst

from .project import Project, SourceFile

logger = logging.getLogger(__name__)

AliasMap = Dict[str, Set[str]]


@dataclass(frozen=True, eq=False)
class SymbolReference:
    """A ``Name`` or ``Attribute`` node bound to the referenced symbol."""
    source_file: SourceFile
    node: cst.BaseExpression


def build_alias_map(project: Project) -> AliasMap:
    """
    Map ``<module>.<bound name>`` to the fully qualified names it re-exports.

    Only module level ``from ... import ...`` statements are considered.
    """
    aliases: AliasMap = {}
    for source_file in project.get_source_files():
        for import_from in source_file.get_module_level_imports():
            if isinstance(import_from.names, cst.ImportStar):
                continue
            module = source_file.resolve_import_from(import_from)
            if not module:
                continue
            for alias in import_from.names:
                imported = alias.name.value if isinstance(alias.name, cst.Name) else None
                if imported is None:
                    continue
                bound = imported
                if alias.asname is not None and isinstance(alias.asname.name, cst.Name):
                    bound = alias.asname.name.value
                key = f"{source_file.module_name}.{bound}" if source_file.module_name else bound
                aliases.setdefault(key, set()).add(f"{module}.{imported}")
    return aliases


def expand_name(name: str, aliases: AliasMap) -> Set[str]:
    """All names ``name`` can stand for once re-exports are followed."""
    seen: Set[str] = set()
    pending = [name]
    while pending:
        current = pending.pop()
        if current in seen:
            continue
        seen.add(current)
        parts = current.split(".")
        for i in range(len(parts), 0, -1):
            prefix = ".".join(parts[:i])
            for target in aliases.get(prefix, ()):
                pending.append(".".join([target] + parts[i:]))
    return seen


def _bound_names(target: str, aliases: AliasMap) -> Set[str]:
    """Local names under which ``target`` may be imported elsewhere."""
    names = {target.rsplit(".", 1)[-1]}
    for key in aliases:
        if target in expand_name(key, aliases):
            names.add(key.rsplit(".", 1)[-1])
    return names


def _is_member_access(node: cst.CSTNode, parent: cst.CSTNode) -> bool:
    # ``obj.check`` - the ``check`` Name is a member, not a binding lookup
    return isinstance(parent, cst.Attribute) and parent.attr is node


def find_references(project: Project, source_file: SourceFile, symbol_name: str) -> List[SymbolReference]:
    """
    Find every node bound to the module level ``symbol_name`` of ``source_file``.

    The definition itself is included (its ``FunctionDef.name``); callers
    decide which references matter.
    """
    target = f"{source_file.module_name}.{symbol_name}" if source_file.module_name else symbol_name
    aliases = build_alias_map(project)
    needles = _bound_names(target, aliases)

    references: List[SymbolReference] = []
    for candidate in project.get_source_files():
        text = candidate.text
        # cheap textual prefilter; binding is decided by scope analysis below
        if not any(needle in text for needle in needles):
            continue
        qualified_names = candidate.qualified_names()
        parents = candidate.parents()
        for node, names in qualified_names.items():
            if not isinstance(node, (cst.Name, cst.Attribute)) or not names:
                continue
            parent = parents.get(node)
            if parent is not None and _is_member_access(node, parent):
                continue
            if any(target in expand_name(qname.name, aliases) for qname in names):
                references.append(SymbolReference(candidate, node))

    logger.debug(f"Found {len(references)} references to {target}")
    return references
