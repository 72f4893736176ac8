"""
Project workspace - parsed libcst trees for every Python file under a root.

The project owns the syntax trees. Fixers never mutate nodes (libcst trees are
immutable); they build a transformed module and swap it into the owning
``SourceFile``, which drops any metadata computed for the previous tree.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Union

import libcst as cst
from libcst.helpers import calculate_module_and_package, get_full_name_for_node
from libcst.metadata import (
    FullyQualifiedNameProvider,
    MetadataWrapper,
    ParentNodeProvider,
    QualifiedName,
)

from killswitch_graduator.schemas.config_schemas_v1 import DEFAULT_EXCLUDE_DIRS

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_ROOTS = ("src",)

PathLike = Union[str, Path]


class SourceFileNotFoundError(LookupError):
    """Raised when a path does not name a source file of the project."""


class SourceFile:
    """A parsed Python module belonging to a ``Project``."""

    def __init__(self, path: Path, module_root: Path, module: cst.Module):
        self.path = path
        self._module = module
        self._wrapper: Optional[MetadataWrapper] = None
        self.is_modified = False
        self._module_and_package = calculate_module_and_package(module_root, path)

    def __repr__(self) -> str:
        return f"SourceFile({self.path})"

    @property
    def module_name(self) -> str:
        return self._module_and_package.name

    @property
    def package(self) -> str:
        return self._module_and_package.package

    @property
    def module(self) -> cst.Module:
        return self._module

    @module.setter
    def module(self, new_module: cst.Module) -> None:
        if new_module is self._module:
            return
        self._module = new_module
        self._wrapper = None
        self.is_modified = True

    @property
    def text(self) -> str:
        return self._module.code

    def metadata_wrapper(self) -> MetadataWrapper:
        # unsafe_skip_copy keeps metadata keyed by the nodes of self.module
        if self._wrapper is None:
            self._wrapper = MetadataWrapper(
                self._module,
                unsafe_skip_copy=True,
                cache={FullyQualifiedNameProvider: self._module_and_package},
            )
        return self._wrapper

    def parents(self) -> Mapping[cst.CSTNode, cst.CSTNode]:
        return self.metadata_wrapper().resolve(ParentNodeProvider)

    def qualified_names(self) -> Mapping[cst.CSTNode, Set[QualifiedName]]:
        return self.metadata_wrapper().resolve(FullyQualifiedNameProvider)

    def get_top_level_functions(self) -> List[cst.FunctionDef]:
        return [stmt for stmt in self._module.body if isinstance(stmt, cst.FunctionDef)]

    def get_imported_names(self) -> List[str]:
        """Names brought in by every import statement, at any depth."""
        collector = _ImportedNameCollector()
        self._module.visit(collector)
        return collector.names

    def get_module_level_imports(self) -> Iterable[cst.ImportFrom]:
        for stmt in self._module.body:
            if isinstance(stmt, cst.SimpleStatementLine):
                for small in stmt.body:
                    if isinstance(small, cst.ImportFrom):
                        yield small

    def resolve_import_from(self, node: cst.ImportFrom) -> Optional[str]:
        """Absolute module name an ``ImportFrom`` in this file refers to."""
        module = get_full_name_for_node(node.module) if node.module is not None else None
        level = len(node.relative)
        if level == 0:
            return module
        base_parts = self.package.split(".") if self.package else []
        if level - 1 >= len(base_parts):
            return None
        if level > 1:
            base_parts = base_parts[: len(base_parts) - (level - 1)]
        if module:
            base_parts = base_parts + module.split(".")
        return ".".join(base_parts) or None


class _ImportedNameCollector(cst.CSTVisitor):
    def __init__(self) -> None:
        super().__init__()
        self.names: List[str] = []

    def visit_Import(self, node: cst.Import) -> None:
        for alias in node.names:
            name = get_full_name_for_node(alias.name)
            if name:
                self.names.append(name)

    def visit_ImportFrom(self, node: cst.ImportFrom) -> None:
        if isinstance(node.names, cst.ImportStar):
            return
        for alias in node.names:
            name = get_full_name_for_node(alias.name)
            if name:
                self.names.append(name)


class Project:
    """
    Every parsable Python file under a root directory.

    Files that fail to parse are logged and left out so that one broken file
    does not stop a scan over the rest of the tree.
    """

    def __init__(self, root: PathLike, source_roots: Sequence[str] = DEFAULT_SOURCE_ROOTS):
        self.root = Path(root).resolve()
        self.source_roots = [self.root / name for name in source_roots]
        self._files: Dict[Path, SourceFile] = {}

    @classmethod
    def from_directory(cls, root: PathLike,
                       exclude_dirs: Optional[Sequence[str]] = None,
                       source_roots: Sequence[str] = DEFAULT_SOURCE_ROOTS) -> "Project":
        project = cls(root, source_roots=source_roots)
        excluded = set(DEFAULT_EXCLUDE_DIRS if exclude_dirs is None else exclude_dirs)

        for py_file in sorted(project.root.rglob("*.py")):
            relative_parts = py_file.relative_to(project.root).parts[:-1]
            if excluded.intersection(relative_parts):
                continue
            try:
                module = cst.parse_module(py_file.read_bytes())
            except (cst.ParserSyntaxError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping unparsable file {py_file}: {e}")
                continue
            project._add(py_file, module)

        logger.info(f"Loaded {len(project._files)} source files from {project.root}")
        return project

    def _add(self, path: Path, module: cst.Module) -> SourceFile:
        source_file = SourceFile(path, self._module_root_for(path), module)
        self._files[path] = source_file
        return source_file

    def _module_root_for(self, path: Path) -> Path:
        for source_root in self.source_roots:
            if source_root in path.parents:
                return source_root
        return self.root

    def get_source_files(self) -> List[SourceFile]:
        return list(self._files.values())

    def get_source_file(self, file_path: PathLike) -> Optional[SourceFile]:
        path = Path(file_path)
        if not path.is_absolute():
            path = self.root / path
        return self._files.get(path.resolve())

    def get_source_file_or_throw(self, file_path: PathLike) -> SourceFile:
        source_file = self.get_source_file(file_path)
        if source_file is None:
            raise SourceFileNotFoundError(f"Could not find source file in project: {file_path}")
        return source_file

    def get_modified_files(self) -> List[SourceFile]:
        return [f for f in self._files.values() if f.is_modified]
