"""
GenerationRequest — the complete, hashable description of one codegen run.

Two requests are equal iff every field is equal, and equal requests
always produce the same fingerprint. The fingerprint is what the cache
engine persists to decide whether the generator must run again.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from specforge.core.models.artifact import DependencyArtifact, FileType


class GenerationRequest(BaseModel):
    """Everything the generator needs, frozen."""

    model_config = ConfigDict(frozen=True)

    inputs: tuple[Path, ...] = ()
    output: Path
    resource_output: Path
    skip: frozenset[FileType] = frozenset()
    discover_models: bool = True

    allowed_namespaces: frozenset[str] | None = None
    excluded_namespaces: frozenset[str] | None = None

    repositories: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()
    transformers: tuple[str, ...] = ()
    local_jars: tuple[DependencyArtifact, ...] = ()

    def canonical(self) -> dict[str, Any]:
        """Order-stable rendering: sets sorted, sequences kept as-is."""
        return {
            "inputs": [str(p) for p in self.inputs],
            "output": str(self.output),
            "resource_output": str(self.resource_output),
            "skip": sorted(t.value for t in self.skip),
            "discover_models": self.discover_models,
            "allowed_namespaces": _sorted_or_none(self.allowed_namespaces),
            "excluded_namespaces": _sorted_or_none(self.excluded_namespaces),
            "repositories": list(self.repositories),
            "dependencies": list(self.dependencies),
            "transformers": list(self.transformers),
            "local_jars": [
                {"path": str(a.path), "origin": a.origin.value} for a in self.local_jars
            ],
        }

    def fingerprint(self) -> str:
        """SHA-256 over the canonical JSON form."""
        payload = json.dumps(self.canonical(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    def eligible_namespaces(
        self,
        candidates: Iterable[str],
        reserved: Iterable[str] = (),
    ) -> frozenset[str]:
        """Namespaces from ``candidates`` this request allows generating."""
        from specforge.core.services.namespace_filter import filter_namespaces

        return filter_namespaces(
            candidates,
            allowed=self.allowed_namespaces,
            excluded=self.excluded_namespaces,
            reserved=reserved,
        )


def _sorted_or_none(values: frozenset[str] | None) -> list[str] | None:
    return sorted(values) if values is not None else None
