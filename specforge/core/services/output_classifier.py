"""
Output classifier — split generator outputs into sources and resources.

Anything not recognised as source code is a resource. The two buckets
are disjoint and together hold every input path, in order.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from specforge.core.models.artifact import FileType, GeneratedArtifact

DEFAULT_SOURCE_EXTENSIONS = (".scala",)


@dataclass
class ClassifiedOutputs:
    """Generator outputs partitioned by how the build consumes them."""

    sources: list[Path] = field(default_factory=list)
    resources: list[Path] = field(default_factory=list)

    def all(self) -> list[Path]:
        return self.sources + self.resources

    def artifacts(self) -> list[GeneratedArtifact]:
        return [GeneratedArtifact(path=p, file_type=FileType.SOURCE) for p in self.sources] + [
            GeneratedArtifact(path=p, file_type=FileType.RESOURCE) for p in self.resources
        ]

    def to_dict(self) -> dict:
        return {
            "sources": [str(p) for p in self.sources],
            "resources": [str(p) for p in self.resources],
        }


def classify_path(
    path: Path,
    source_extensions: Collection[str] = DEFAULT_SOURCE_EXTENSIONS,
) -> FileType:
    """Source if the extension matches, otherwise Resource."""
    return FileType.SOURCE if path.suffix in source_extensions else FileType.RESOURCE


def classify_outputs(
    paths: Iterable[str | Path],
    source_extensions: Collection[str] = DEFAULT_SOURCE_EXTENSIONS,
) -> ClassifiedOutputs:
    """Partition ``paths`` into source and resource buckets."""
    result = ClassifiedOutputs()
    for raw in paths:
        path = Path(raw)
        if classify_path(path, source_extensions) is FileType.SOURCE:
            result.sources.append(path)
        else:
            result.resources.append(path)
    return result


def apply_skip(classified: ClassifiedOutputs, skip: Collection[FileType]) -> ClassifiedOutputs:
    """Drop the buckets named in the request's skip set."""
    return ClassifiedOutputs(
        sources=[] if FileType.SOURCE in skip else list(classified.sources),
        resources=[] if FileType.RESOURCE in skip else list(classified.resources),
    )
