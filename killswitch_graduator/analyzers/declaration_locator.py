"""
Declaration Locator - finds kill switch helpers that are ready to graduate.

A helper wraps one runtime check::

    def is_checkout_v2_disabled():
        # graduates 2023-01-01
        return KillSwitch.is_activated("3fa85f64-5717-4562-b3fc-2c963f66afa6", "2023-01-01")

Nothing here raises for a malformed candidate: anything that does not fit
is simply not eligible.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import libcst as cst

from killswitch_graduator.schemas.config_schemas_v1 import GraduatorConfig
from killswitch_graduator.schemas.graduation_schemas_v1 import CoreOptions
from killswitch_graduator.utils.heuristics import extract_date_from_comments, is_valid_uuid, parse_date
from killswitch_graduator.utils.time_utils import is_before
from killswitch_graduator.workspace.project import Project, SourceFile, SourceFileNotFoundError
from .declaration_shape import ReturnOfCall, classify_function

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class KillSwitchDeclaration:
    """A helper function wrapping the activation check of one kill switch."""
    source_file: SourceFile
    function: cst.FunctionDef
    identifier: str
    date_argument: Optional[datetime] = None
    comment_date: Optional[datetime] = None

    @property
    def name(self) -> str:
        return self.function.name.value

    @property
    def graduation_date(self) -> Optional[datetime]:
        return self.date_argument if self.date_argument is not None else self.comment_date


@dataclass
class FindKillSwitchResult:
    """Eligible declarations and their identifiers, index aligned."""
    declarations: List[KillSwitchDeclaration] = field(default_factory=list)
    identifiers: List[str] = field(default_factory=list)

    def add(self, declaration: KillSwitchDeclaration) -> None:
        self.declarations.append(declaration)
        self.identifiers.append(declaration.identifier)


def string_literal_value(node: cst.BaseExpression) -> Optional[str]:
    """
    Value of a plain string literal, or None for anything else.

    f-strings, bytes, names and calls are rejected rather than guessed at.
    """
    if isinstance(node, cst.SimpleString):
        if "b" in node.prefix.lower():
            return None
        value = node.evaluated_value
        return value if isinstance(value, str) else None
    if isinstance(node, cst.ConcatenatedString):
        left = string_literal_value(node.left)
        right = string_literal_value(node.right)
        if left is None or right is None:
            return None
        return left + right
    return None


def _imports_killswitch(source_file: SourceFile, pattern: "re.Pattern[str]") -> bool:
    return any(pattern.search(name) for name in source_file.get_imported_names())


def select_candidate_files(project: Project, options: CoreOptions, config: GraduatorConfig) -> List[SourceFile]:
    """Files that may hold kill switch declarations."""
    if options.ks_file_path is not None:
        try:
            return [project.get_source_file_or_throw(options.ks_file_path)]
        except SourceFileNotFoundError:
            logger.error(f"Invalid kill switch file path: {options.ks_file_path}")
            return []

    # declarations can only live where a kill switch type is imported
    pattern = re.compile(re.escape(config.import_pattern), re.IGNORECASE)
    member_access = f".{config.activation_method}"
    return [
        source_file
        for source_file in project.get_source_files()
        if _imports_killswitch(source_file, pattern) and member_access in source_file.text
    ]


def _build_declaration(source_file: SourceFile, shape: ReturnOfCall) -> Optional[KillSwitchDeclaration]:
    identifier_arg = shape.identifier_arg
    if identifier_arg is None:
        return None
    identifier = string_literal_value(identifier_arg.value)
    if identifier is None:
        logger.debug(
            f"Skipping {shape.function.name.value} in {source_file.path}: kill switch id is not a string literal"
        )
        return None

    date_argument = None
    if shape.date_arg is not None:
        date_argument = parse_date(string_literal_value(shape.date_arg.value))
    comment_date = None if date_argument is not None else extract_date_from_comments(shape.function)

    return KillSwitchDeclaration(
        source_file=source_file,
        function=shape.function,
        identifier=identifier,
        date_argument=date_argument,
        comment_date=comment_date,
    )


def is_eligible(declaration: KillSwitchDeclaration, options: CoreOptions) -> bool:
    """Selection rule for targeted mode (``target_id``) and scan mode."""
    if options.target_id:
        return declaration.identifier == options.target_id

    if not is_valid_uuid(declaration.identifier):
        return False
    graduation_date = declaration.graduation_date
    if graduation_date is None:
        return False
    return is_before(graduation_date, options.threshold_date)


def find_killswitch_declarations(project: Project,
                                 options: Optional[CoreOptions] = None,
                                 config: Optional[GraduatorConfig] = None) -> FindKillSwitchResult:
    """
    Scan the project for kill switch declarations that can be graduated.

    Args:
        project: Loaded project to scan
        options: Target id, declaration file hint and threshold date
        config: Activation method and import pattern conventions

    Returns:
        Eligible declarations and their ids. The same id may appear more
        than once when several helpers wrap it.
    """
    options = options or CoreOptions()
    config = config or GraduatorConfig()
    result = FindKillSwitchResult()

    for source_file in select_candidate_files(project, options, config):
        for function in source_file.get_top_level_functions():
            shape = classify_function(function, config.activation_method)
            if not isinstance(shape, ReturnOfCall):
                continue
            declaration = _build_declaration(source_file, shape)
            if declaration is not None and is_eligible(declaration, options):
                result.add(declaration)

    logger.info(f"Found {len(result.declarations)} kill switch declarations eligible for graduation")
    return result
