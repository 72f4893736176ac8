from .project import Project, SourceFile, SourceFileNotFoundError
from .references import SymbolReference, build_alias_map, expand_name, find_references

__all__ = [
    "Project",
    "SourceFile",
    "SourceFileNotFoundError",
    "SymbolReference",
    "build_alias_map",
    "expand_name",
    "find_references",
]
