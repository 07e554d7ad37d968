"""
Build model — the codegen settings of a project, loaded from specforge.yml.

Each configuration (compile, test, ...) carries its own settings and
therefore its own output directories and cache store. Defaults mirror
the conventional layout: specs under ``<source_dir>/smithy``, generated
code under ``target/src_managed/<conf>``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from specforge.core.models.report import DependencyReport

# Marker classifier: dependencies that only exist to supply schema sources
SMITHY4S_MARKER = "smithy4s"

# Shortcut for dependencies consumed at codegen time AND at compile time
SMITHY4S_COMPILE = ",".join([SMITHY4S_MARKER, "compile"])

DEFAULT_CONFIGURATION = "compile"

RepositoryKind = Literal["maven", "ivy", "file", "local"]


def check_configuration_name(name: str) -> str:
    """Reject names that are not a single path segment.

    Each configuration owns a store directory named after it, so names
    like ``./compile`` or ``..`` would alias or escape that directory.
    """
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise ValueError(f"Invalid configuration name '{name}'")
    return name


class Repository(BaseModel):
    """A resolver declared by the host build."""

    name: str = ""
    root: str
    kind: RepositoryKind = "maven"

    @property
    def is_remote(self) -> bool:
        """Only remote maven-style repositories are handed to the generator."""
        return self.kind == "maven" and not self.root.startswith("file:")


class CodegenSettings(BaseModel):
    """Codegen settings for one configuration."""

    name: str = DEFAULT_CONFIGURATION

    source_dir: str | None = None
    input_dir: str | None = None
    output_dir: str | None = None
    resource_dir: str | None = None

    allowed_namespaces: list[str] | None = None
    excluded_namespaces: list[str] | None = None

    library: bool = True
    transformers: list[str] = Field(default_factory=list)

    # In-build dependency archives; local_jars overrides them when set
    internal_dependencies: list[str] = Field(default_factory=list)
    local_jars: list[str] | None = None

    @model_validator(mode="after")
    def _fill_layout_defaults(self) -> CodegenSettings:
        if self.source_dir is None:
            self.source_dir = f"src/{self.name}"
        if self.input_dir is None:
            self.input_dir = f"{self.source_dir}/smithy"
        if self.output_dir is None:
            self.output_dir = f"target/src_managed/{self.name}"
        if self.resource_dir is None:
            self.resource_dir = f"target/resource_managed/{self.name}"
        return self

    @property
    def effective_local_jars(self) -> list[str]:
        """Local dependency archives, defaulting to all in-build dependencies."""
        if self.local_jars is not None:
            return self.local_jars
        return self.internal_dependencies


class BuildFile(BaseModel):
    """Root build model — loaded from specforge.yml."""

    version: int = 1

    name: str = ""
    generator: str = ""             # "package.module:function"
    source_extensions: list[str] = Field(default_factory=lambda: [".scala"])

    repositories: list[Repository] = Field(default_factory=list)
    resolution: DependencyReport | None = None
    configurations: dict[str, CodegenSettings] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _name_configurations(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        confs = data.get("configurations") or {DEFAULT_CONFIGURATION: {}}
        if isinstance(confs, dict):
            named = {}
            for conf_name, conf in confs.items():
                check_configuration_name(str(conf_name))
                if conf is None:
                    conf = {}
                named[conf_name] = {**conf, "name": conf_name} if isinstance(conf, dict) else conf
            confs = named
        data["configurations"] = confs
        resolution = data.get("resolution")
        if isinstance(resolution, dict) and "configurations" not in resolution:
            data["resolution"] = {"configurations": resolution}
        return data

    @field_validator("source_extensions")
    @classmethod
    def _dotted_extensions(cls, value: list[str]) -> list[str]:
        return [ext if ext.startswith(".") else f".{ext}" for ext in value]

    def get_configuration(self, name: str) -> CodegenSettings | None:
        """Look up a configuration's settings by name."""
        return self.configurations.get(name)
