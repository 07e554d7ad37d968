"""
Codegen use case — the generation task, per configuration.

Ties together config loading, artifact resolution, request building,
the incremental cache engine, output classification, and the run
ledger. ``run_codegen_task`` is the task itself and lets generator
failures propagate; ``run_codegen`` wraps it for the CLI, stopping at
the first failing configuration.
"""

from __future__ import annotations

import logging
import shutil
import time
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from specforge.core.config.loader import (
    ConfigError,
    find_build_file,
    load_build,
    load_dependency_report,
    project_root as config_root,
)
from specforge.core.models.build import BuildFile, CodegenSettings
from specforge.core.models.report import DependencyReport
from specforge.core.models.request import GenerationRequest
from specforge.core.persistence.audit import CodegenLedger, CodegenRunEntry
from specforge.core.persistence.cache_store import CacheStore, cache_store_for
from specforge.core.services.artifact_resolver import resolve_dependency_artifacts
from specforge.core.services.codegen_cache import (
    CacheState,
    CodegenCache,
    CodegenOutcome,
    Generator,
)
from specforge.core.services.generator import GeneratorLoadError, load_generator
from specforge.core.services.output_classifier import (
    ClassifiedOutputs,
    apply_skip,
    classify_outputs,
)
from specforge.core.services.request_builder import build_request, resolve_path

logger = logging.getLogger(__name__)


@dataclass
class CodegenTaskResult:
    """Outcome of the generation task for one configuration."""

    configuration: str
    request: GenerationRequest
    outcome: CodegenOutcome
    classified: ClassifiedOutputs

    @property
    def outputs(self) -> list[Path]:
        """Sources + resources, after the skip set."""
        return self.classified.all()

    def to_dict(self) -> dict:
        return {
            "configuration": self.configuration,
            "state": self.outcome.state.value,
            "regenerated": self.outcome.regenerated,
            "fingerprint": self.outcome.fingerprint,
            **self.classified.to_dict(),
        }


@dataclass
class CodegenResult:
    """Result of the codegen use case across configurations."""

    build: BuildFile | None = None
    project_root: Path | None = None
    tasks: list[CodegenTaskResult] = field(default_factory=list)
    plans: dict[str, CacheState] = field(default_factory=dict)
    failed_configuration: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def outputs(self) -> list[Path]:
        return [p for task in self.tasks for p in task.outputs]

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            if self.failed_configuration:
                result["configuration"] = self.failed_configuration
            if not self.tasks:
                return result

        result["build"] = self.build.name if self.build else ""
        result["project_root"] = str(self.project_root)
        result["tasks"] = [task.to_dict() for task in self.tasks]
        if self.plans:
            result["plans"] = {name: state.value for name, state in self.plans.items()}
        return result


def generate_run_id() -> str:
    """Generate a unique run ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"gen-{now}-{short}"


def prepare_request(
    build: BuildFile,
    settings: CodegenSettings,
    project_root: Path,
    report: DependencyReport | None = None,
) -> GenerationRequest:
    """Resolve artifacts and assemble the request for one configuration."""
    if report is None:
        report = build.resolution

    local = [resolve_path(project_root, jar) for jar in settings.effective_local_jars]
    artifacts = resolve_dependency_artifacts(report, local)
    return build_request(settings, project_root, artifacts, build.repositories)


def run_codegen_task(
    build: BuildFile,
    settings: CodegenSettings,
    project_root: Path,
    generator: Generator,
    report: DependencyReport | None = None,
    store: CacheStore | None = None,
) -> CodegenTaskResult:
    """Run the generation task for one configuration.

    Returns:
        The classified outputs (sources + resources, after skip).

    Raises:
        Whatever the generator raises, unchanged. The cache is not
        updated in that case.
    """
    request = prepare_request(build, settings, project_root, report)
    if store is None:
        store = cache_store_for(project_root, settings.name)

    outcome = CodegenCache(store, generator).run(request)

    classified = apply_skip(
        classify_outputs(outcome.outputs, build.source_extensions),
        request.skip,
    )
    logger.info(
        "[%s] %d sources, %d resources (%s)",
        settings.name,
        len(classified.sources),
        len(classified.resources),
        "regenerated" if outcome.regenerated else "cached",
    )
    return CodegenTaskResult(
        configuration=settings.name,
        request=request,
        outcome=outcome,
        classified=classified,
    )


def _load(config_path: Path | None, result: CodegenResult) -> bool:
    try:
        if config_path is None:
            config_path = find_build_file()
        if config_path is None:
            result.error = "No specforge.yml found."
            return False

        result.build = load_build(config_path)
        result.project_root = config_root(config_path)
    except ConfigError as e:
        result.error = str(e)
        return False
    return True


def _select(build: BuildFile, configurations: list[str] | None) -> list[CodegenSettings]:
    if not configurations:
        return list(build.configurations.values())

    selected = []
    for name in configurations:
        settings = build.get_configuration(name)
        if settings is None:
            raise ConfigError(f"Unknown configuration '{name}'")
        selected.append(settings)
    return selected


def run_codegen(
    config_path: Path | None = None,
    configurations: list[str] | None = None,
    report_path: Path | None = None,
    generator: Generator | None = None,
    dry_run: bool = False,
) -> CodegenResult:
    """Run code generation for the selected configurations.

    Args:
        config_path: Optional explicit path to specforge.yml.
        configurations: Configuration names to run. None = all.
        report_path: Optional dependency report; overrides ``resolution``.
        generator: Optional generator callable; overrides the build file.
        dry_run: If True, only report each configuration's cache state.

    Returns:
        CodegenResult. On failure ``error`` carries the generator's message.
    """
    result = CodegenResult()
    if not _load(config_path, result):
        return result

    build = result.build
    project_root = result.project_root
    assert build is not None and project_root is not None

    try:
        selected = _select(build, configurations)
        report = load_dependency_report(report_path) if report_path else None
    except ConfigError as e:
        result.error = str(e)
        return result

    if dry_run:
        for settings in selected:
            request = prepare_request(build, settings, project_root, report)
            store = cache_store_for(project_root, settings.name)
            result.plans[settings.name] = CodegenCache(store, _not_invoked).evaluate(request)
        return result

    if generator is None:
        if not build.generator:
            result.error = "No generator configured — set 'generator' in specforge.yml."
            return result
        try:
            generator = load_generator(build.generator)
        except GeneratorLoadError as e:
            result.error = str(e)
            return result

    ledger = CodegenLedger(project_root=project_root)

    for settings in selected:
        entry = CodegenRunEntry(
            run_id=generate_run_id(),
            build=build.name,
            configuration=settings.name,
        )
        start = time.monotonic()
        try:
            task = run_codegen_task(build, settings, project_root, generator, report)
        except Exception as e:
            logger.error("Code generation failed for '%s': %s", settings.name, e)
            entry.status = "failed"
            entry.error = str(e) or type(e).__name__
            entry.duration_ms = int((time.monotonic() - start) * 1000)
            ledger.append(entry)
            result.failed_configuration = settings.name
            result.error = entry.error
            return result

        entry.status = "ok"
        entry.state = task.outcome.state.value
        entry.regenerated = task.outcome.regenerated
        entry.fingerprint = task.outcome.fingerprint
        entry.sources = len(task.classified.sources)
        entry.resources = len(task.classified.resources)
        entry.duration_ms = int((time.monotonic() - start) * 1000)
        ledger.append(entry)
        result.tasks.append(task)

    return result


def _not_invoked(request: GenerationRequest) -> list[Path]:
    raise RuntimeError("generator must not run during a dry run")


def clean_configuration(settings: CodegenSettings, project_root: Path) -> list[Path]:
    """Remove a configuration's generated directories and its cache store.

    Returns:
        The paths that were removed.
    """
    assert settings.output_dir is not None and settings.resource_dir is not None

    removed = []
    for raw in (settings.output_dir, settings.resource_dir):
        path = resolve_path(project_root, raw)
        if path.is_dir():
            shutil.rmtree(path)
            removed.append(path)

    store = cache_store_for(project_root, settings.name)
    if store.directory.is_dir():
        store.clear()
        removed.append(store.directory)

    logger.info("[%s] cleaned %d paths", settings.name, len(removed))
    return removed
