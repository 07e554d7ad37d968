"""
Request descriptor builder — settings in, GenerationRequest out.

Total and deterministic: the same settings always yield an equal
request, which is what makes cache hits possible. Allow/exclude sets
are passed through untouched; the generator applies them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from specforge.core.models.artifact import DependencyArtifact, FileType
from specforge.core.models.build import CodegenSettings, Repository
from specforge.core.models.request import GenerationRequest

logger = logging.getLogger(__name__)


def resolve_path(project_root: Path, value: str) -> Path:
    """Expand ``~`` and anchor relative paths at the project root."""
    path = Path(value).expanduser()
    return path if path.is_absolute() else project_root / path


def collect_inputs(input_dir: Path) -> tuple[Path, ...]:
    """The input directory, or nothing if it doesn't exist.

    Only the directory path enters the fingerprint, not the files below it,
    so editing a spec file alone does not trigger regeneration. Clear the
    configuration's cache to force a run.
    """
    if not input_dir.is_dir():
        logger.debug("Input directory %s missing — empty input set", input_dir)
        return ()
    return (input_dir,)


def remote_repository_roots(repositories: Iterable[Repository]) -> tuple[str, ...]:
    """Roots of remote repositories, in declaration order."""
    return tuple(repo.root for repo in repositories if repo.is_remote)


def skip_set(library: bool) -> frozenset[FileType]:
    """Non-library configurations don't package their specs."""
    return frozenset() if library else frozenset({FileType.RESOURCE})


def build_request(
    settings: CodegenSettings,
    project_root: Path,
    artifacts: Iterable[DependencyArtifact] = (),
    repositories: Iterable[Repository] = (),
) -> GenerationRequest:
    """Assemble the generation request for one configuration."""
    assert settings.input_dir is not None
    assert settings.output_dir is not None
    assert settings.resource_dir is not None

    allowed = settings.allowed_namespaces
    excluded = settings.excluded_namespaces

    return GenerationRequest(
        inputs=collect_inputs(resolve_path(project_root, settings.input_dir)),
        output=resolve_path(project_root, settings.output_dir),
        resource_output=resolve_path(project_root, settings.resource_dir),
        skip=skip_set(settings.library),
        discover_models=True,
        allowed_namespaces=frozenset(allowed) if allowed is not None else None,
        excluded_namespaces=frozenset(excluded) if excluded is not None else None,
        repositories=remote_repository_roots(repositories),
        dependencies=(),
        transformers=tuple(settings.transformers),
        local_jars=tuple(artifacts),
    )
