from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from killswitch_graduator.utils.time_utils import default_threshold_date


class CoreOptions(BaseModel):
    """Options accepted by kill switch discovery."""
    target_id: Optional[str] = Field(
        default=None,
        description="Graduate exactly this kill switch id, skipping format and date checks",
    )
    ks_file_path: Optional[Path] = Field(
        default=None,
        description="File holding the kill switch declarations; skips the project scan",
    )
    threshold_date: datetime = Field(
        default_factory=default_threshold_date,
        description="Kill switches whose graduation date is earlier than this are eligible",
    )


class DeclarationReport(BaseModel):
    """Outcome of graduating a single kill switch declaration."""
    identifier: str
    function_name: str
    file_path: str
    graduation_date: Optional[datetime] = None
    call_sites_replaced: int = 0
    files_touched: List[str] = Field(default_factory=list)


class GraduationReport(BaseModel):
    """Summary of one graduation run over a project."""
    project_root: str
    threshold_date: datetime
    target_id: Optional[str] = None
    declarations: List[DeclarationReport] = Field(default_factory=list)

    @property
    def total_call_sites(self) -> int:
        return sum(d.call_sites_replaced for d in self.declarations)

    @property
    def touched_files(self) -> List[str]:
        seen: List[str] = []
        for declaration in self.declarations:
            for path in declaration.files_touched:
                if path not in seen:
                    seen.append(path)
        return seen
