"""
Domain models — Pydantic types for codegen orchestration.

All models are re-exported here for convenient access:

    from specforge.core.models import BuildFile, GenerationRequest, FileType
"""

from specforge.core.models.artifact import (
    ArtifactOrigin,
    DependencyArtifact,
    FileType,
    GeneratedArtifact,
)
from specforge.core.models.build import (
    SMITHY4S_COMPILE,
    SMITHY4S_MARKER,
    BuildFile,
    CodegenSettings,
    Repository,
)
from specforge.core.models.report import (
    ConfigurationReport,
    DependencyReport,
    ModuleReport,
)
from specforge.core.models.request import GenerationRequest

__all__ = [
    # artifact.py
    "ArtifactOrigin",
    # build.py
    "BuildFile",
    "CodegenSettings",
    # report.py
    "ConfigurationReport",
    "DependencyArtifact",
    "DependencyReport",
    "FileType",
    "GeneratedArtifact",
    # request.py
    "GenerationRequest",
    "ModuleReport",
    "Repository",
    "SMITHY4S_COMPILE",
    "SMITHY4S_MARKER",
]
