"""
Dependency report — the host build's resolved-dependency view.

The host build tool resolves dependencies per configuration (compile,
test, the ``smithy4s`` marker, ...). This model is the slice of that
report the resolver needs: which modules were resolved under which
configuration, and which files each module contributed.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ModuleReport(BaseModel):
    """A single resolved module and its artifact files."""

    id: str = ""                    # e.g. "com.acme:specs:1.0"
    artifacts: list[str] = Field(default_factory=list)


class ConfigurationReport(BaseModel):
    """Modules resolved under one configuration."""

    modules: list[ModuleReport] = Field(default_factory=list)


class DependencyReport(BaseModel):
    """Resolved modules keyed by configuration name."""

    configurations: dict[str, ConfigurationReport] = Field(default_factory=dict)

    def configuration(self, name: str) -> ConfigurationReport | None:
        """Look up a configuration's report, or None if it wasn't resolved."""
        return self.configurations.get(name)
