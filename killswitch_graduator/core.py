"""
Core Kill Switch Graduator - main orchestrator for graduating kill switches
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from .analyzers.declaration_locator import (
    FindKillSwitchResult,
    KillSwitchDeclaration,
    find_killswitch_declarations,
)
from .fixers.condition_simplifier import simplify_outcome
from .fixers.reference_replacer import ReplacementOutcome, replace_fun_call_with_false
from .schemas.config_schemas_v1 import GraduatorConfig
from .schemas.graduation_schemas_v1 import CoreOptions, DeclarationReport, GraduationReport
from .utils.time_utils import default_threshold_date
from .workspace.project import Project

logger = logging.getLogger(__name__)


class KillSwitchGraduator:
    """
    Main orchestrator: discover graduated kill switches and neutralize their calls.

    The project is changed in memory only. Callers that want the new source
    read ``SourceFile.text`` from ``project.get_modified_files()``.
    """

    def __init__(self, config: Optional[GraduatorConfig] = None):
        self.config = config or GraduatorConfig()
        self.project: Optional[Project] = None

    def load_project(self, root: Union[str, Path]) -> Project:
        root_path = Path(root)
        if not root_path.is_dir():
            raise NotADirectoryError(f"Project root is not a directory: {root}")
        self.project = Project.from_directory(
            root_path,
            exclude_dirs=self.config.exclude_dirs,
            source_roots=self.config.source_roots,
        )
        return self.project

    def _require_project(self) -> Project:
        if self.project is None:
            raise RuntimeError("No project loaded; call load_project() first")
        return self.project

    def default_options(self) -> CoreOptions:
        return CoreOptions(threshold_date=default_threshold_date(self.config.threshold_days))

    def find_declarations(self, options: Optional[CoreOptions] = None) -> FindKillSwitchResult:
        """Find kill switch declarations eligible for graduation."""
        return find_killswitch_declarations(self._require_project(), options or self.default_options(), self.config)

    def replace_references(self, declaration: KillSwitchDeclaration) -> ReplacementOutcome:
        """Replace every call of ``declaration`` with a constant."""
        outcome = replace_fun_call_with_false(self._require_project(), declaration)
        if self.config.simplify_conditions and outcome.modified_nodes:
            folds = simplify_outcome(outcome)
            logger.debug(f"Simplified {folds} constant conditions after graduating {declaration.name}")
        return outcome

    def graduate(self, options: Optional[CoreOptions] = None) -> GraduationReport:
        """
        Run discovery and replacement over the loaded project.

        Returns:
            Report of every graduated declaration and the files it touched
        """
        project = self._require_project()
        options = options or self.default_options()
        logger.info("🔍 Scanning for graduated kill switches...")

        found = self.find_declarations(options)
        report = GraduationReport(
            project_root=str(project.root),
            threshold_date=options.threshold_date,
            target_id=options.target_id,
        )

        for declaration in found.declarations:
            outcome = self.replace_references(declaration)
            report.declarations.append(DeclarationReport(
                identifier=declaration.identifier,
                function_name=declaration.name,
                file_path=self._relative(declaration.source_file.path),
                graduation_date=declaration.graduation_date,
                call_sites_replaced=outcome.call_sites,
                files_touched=[self._relative(f.path) for f in outcome.modified_files],
            ))

        logger.info(
            f"Graduated {len(report.declarations)} kill switches, "
            f"{report.total_call_sites} call sites in {len(report.touched_files)} files"
        )
        return report

    def _relative(self, path: Path) -> str:
        project = self._require_project()
        try:
            return str(path.relative_to(project.root))
        except ValueError:
            return str(path)

    def write_report(self, report: GraduationReport, output: Union[str, Path]) -> Path:
        """Write a JSON graduation report."""
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(report.model_dump(mode="json"), f, indent=2)
        logger.info(f"Report written to {output_path}")
        return output_path
