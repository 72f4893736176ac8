from .config_schemas_v1 import GraduatorConfig
from .graduation_schemas_v1 import CoreOptions, DeclarationReport, GraduationReport

__all__ = [
    "GraduatorConfig",
    "CoreOptions",
    "DeclarationReport",
    "GraduationReport",
]
