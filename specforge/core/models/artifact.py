"""
Artifact models — what flows into and out of the generator.

DependencyArtifacts are archives that may carry schema sources (and
namespaces already generated upstream). GeneratedArtifacts are the
files the generator wrote, tagged with how the build should consume them.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class FileType(str, Enum):
    """Kinds of generator output."""

    SOURCE = "Source"       # compiled by the host build
    RESOURCE = "Resource"   # packaged as-is (e.g. the specs themselves)


class ArtifactOrigin(str, Enum):
    """Where a dependency artifact came from."""

    LOCAL = "local"         # produced by an in-build dependency
    EXTERNAL = "external"   # resolved from a repository under the marker classifier


class DependencyArtifact(BaseModel):
    """An archive handed to the generator as a source of upstream specs."""

    model_config = ConfigDict(frozen=True)

    path: Path
    origin: ArtifactOrigin


class GeneratedArtifact(BaseModel):
    """A generator output file, classified by extension."""

    model_config = ConfigDict(frozen=True)

    path: Path
    file_type: FileType
