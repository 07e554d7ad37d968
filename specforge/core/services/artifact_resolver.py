"""
Dependency artifact resolver — collect archives that may carry specs.

Local archives (produced by in-build dependencies) always come first,
followed by every artifact resolved under the marker classifier.
Pure transformation over already-resolved data.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from specforge.core.models.artifact import ArtifactOrigin, DependencyArtifact
from specforge.core.models.build import SMITHY4S_MARKER
from specforge.core.models.report import DependencyReport

logger = logging.getLogger(__name__)


def find_codegen_dependencies(
    report: DependencyReport | None,
    marker: str = SMITHY4S_MARKER,
) -> list[Path]:
    """Artifact files of every module resolved under ``marker``.

    A marker configuration that wasn't resolved contributes nothing.
    """
    if report is None:
        return []

    conf_report = report.configuration(marker)
    if conf_report is None:
        logger.debug("Marker configuration '%s' not resolved — no external artifacts", marker)
        return []

    return [Path(f) for module in conf_report.modules for f in module.artifacts]


def resolve_dependency_artifacts(
    report: DependencyReport | None,
    local_archives: Iterable[str | Path],
    marker: str = SMITHY4S_MARKER,
) -> list[DependencyArtifact]:
    """Local archives first, then external ones. Duplicates are kept."""
    artifacts = [
        DependencyArtifact(path=Path(p), origin=ArtifactOrigin.LOCAL) for p in local_archives
    ]
    artifacts.extend(
        DependencyArtifact(path=p, origin=ArtifactOrigin.EXTERNAL)
        for p in find_codegen_dependencies(report, marker)
    )
    logger.debug("Resolved %d dependency artifacts", len(artifacts))
    return artifacts
