"""
Config check use case — validate specforge.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from specforge.core.config.loader import ConfigError, find_build_file, load_build
from specforge.core.models.build import BuildFile
from specforge.core.services.request_builder import resolve_path


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    build: BuildFile | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "build_name": self.build.name if self.build else None,
            "configurations": sorted(self.build.configurations) if self.build else [],
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate build configuration and report issues.

    Args:
        config_path: Optional explicit path to specforge.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_build_file()
    if config_path is None:
        result.errors.append("No specforge.yml found.")
        return result
    result.config_path = config_path

    try:
        build = load_build(config_path)
        result.build = build
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    project_root = config_path.parent

    # Generator entry point
    if not build.generator:
        result.warnings.append("No generator configured. 'codegen' will fail until one is set.")
    elif ":" not in build.generator:
        result.errors.append(
            f"Invalid generator '{build.generator}' — expected 'package.module:function'"
        )

    # Each configuration owns its output directories
    owners: dict[Path, str] = {}
    for settings in build.configurations.values():
        assert settings.output_dir is not None and settings.resource_dir is not None
        for raw in {settings.output_dir, settings.resource_dir}:
            path = resolve_path(project_root, raw)
            other = owners.setdefault(path, settings.name)
            if other != settings.name:
                result.errors.append(
                    f"Configurations '{other}' and '{settings.name}' share output directory {raw}"
                )

    for settings in build.configurations.values():
        assert settings.input_dir is not None
        if not resolve_path(project_root, settings.input_dir).is_dir():
            result.warnings.append(
                f"Configuration '{settings.name}' input directory does not exist: "
                f"{settings.input_dir}"
            )

        allowed = set(settings.allowed_namespaces or ())
        overlap = allowed & set(settings.excluded_namespaces or ())
        if overlap:
            result.warnings.append(
                f"Configuration '{settings.name}' both allows and excludes "
                f"{', '.join(sorted(overlap))} — exclusion wins."
            )

        for jar in settings.effective_local_jars:
            if not resolve_path(project_root, jar).exists():
                result.warnings.append(
                    f"Configuration '{settings.name}' local dependency archive not found: {jar}"
                )

    result.valid = len(result.errors) == 0
    return result
