"""
Incremental cache engine — run the generator only when it matters.

Two store entries per configuration:

    input   fingerprint of the last request that generated successfully
    output  the paths that run produced, tagged with the same fingerprint

State machine, per invocation:

    no readable ``input`` entry           → NoPriorRecord → generate
    fingerprint differs                   → Changed       → generate
    fingerprint equal, outputs empty/gone → Unchanged     → generate
    fingerprint equal, outputs present    → Unchanged     → reuse outputs

An empty recorded output is not trusted: a redundant regeneration is
preferred over returning stale emptiness. Generator failures propagate
untouched and leave both entries as they were, so the next build starts
from the same pre-failure state.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from specforge.core.models.request import GenerationRequest
from specforge.core.persistence.cache_store import CacheStore

logger = logging.getLogger(__name__)

INPUT_KEY = "input"
OUTPUT_KEY = "output"

Generator = Callable[[GenerationRequest], Iterable[str | os.PathLike]]


class CacheState(str, Enum):
    NO_PRIOR_RECORD = "NoPriorRecord"
    UNCHANGED = "Unchanged"
    CHANGED = "Changed"


@dataclass
class CacheRecord:
    """What the store remembers about the last successful run."""

    fingerprint: str | None = None
    outputs: list[Path] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "fingerprint": self.fingerprint,
            "outputs": [str(p) for p in self.outputs],
        }


@dataclass
class CodegenOutcome:
    """Result of one engine invocation."""

    state: CacheState
    regenerated: bool
    fingerprint: str
    outputs: list[Path] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "regenerated": self.regenerated,
            "fingerprint": self.fingerprint,
            "outputs": [str(p) for p in self.outputs],
        }


def _decode(raw: bytes | None, key: str) -> dict[str, Any] | None:
    if raw is None:
        return None
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Corrupt cache entry '%s': %s — ignoring", key, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Unexpected cache entry '%s' (%s) — ignoring", key, type(data).__name__)
        return None
    return data


def _encode(data: dict[str, Any]) -> bytes:
    return (json.dumps(data, indent=2, ensure_ascii=False) + "\n").encode("utf-8")


def read_record(store: CacheStore) -> CacheRecord:
    """Read both entries from ``store``. Unreadable data is treated as absent."""
    record = CacheRecord()

    input_data = _decode(store.read(INPUT_KEY), INPUT_KEY)
    if input_data is not None and isinstance(input_data.get("fingerprint"), str):
        record.fingerprint = input_data["fingerprint"]

    output_data = _decode(store.read(OUTPUT_KEY), OUTPUT_KEY)
    # Outputs only count when written by the same run as the fingerprint
    if output_data is not None and output_data.get("fingerprint") == record.fingerprint:
        outputs = output_data.get("outputs")
        if isinstance(outputs, list) and all(isinstance(p, str) for p in outputs):
            record.outputs = [Path(p) for p in outputs]
        else:
            logger.warning("Malformed output list in cache — ignoring")

    return record


def state_for(fingerprint: str, record: CacheRecord) -> CacheState:
    """Transition function: compare a fingerprint with the stored record."""
    if record.fingerprint is None:
        return CacheState.NO_PRIOR_RECORD
    if record.fingerprint == fingerprint:
        return CacheState.UNCHANGED
    return CacheState.CHANGED


class CodegenCache:
    """Fingerprint-keyed cache around a generator callable.

    One instance per configuration; the store it is given must not be
    shared with any other configuration.
    """

    def __init__(self, store: CacheStore, generator: Generator):
        self._store = store
        self._generator = generator

    @property
    def store(self) -> CacheStore:
        return self._store

    def evaluate(self, request: GenerationRequest) -> CacheState:
        """Classify ``request`` against the stored record without generating."""
        return state_for(request.fingerprint(), read_record(self._store))

    def run(self, request: GenerationRequest) -> CodegenOutcome:
        """Return outputs for ``request``, invoking the generator if needed."""
        fingerprint = request.fingerprint()
        record = read_record(self._store)
        state = state_for(fingerprint, record)

        if state is CacheState.UNCHANGED and record.outputs:
            logger.info("Codegen inputs unchanged — reusing %d outputs", len(record.outputs))
            return CodegenOutcome(
                state=state,
                regenerated=False,
                fingerprint=fingerprint,
                outputs=list(record.outputs),
            )

        if state is CacheState.UNCHANGED:
            logger.info("Codegen inputs unchanged but no outputs recorded — regenerating")
        else:
            logger.info("Codegen state %s — invoking generator", state.value)

        outputs = [Path(p) for p in self._generator(request)]

        self._store.write(
            OUTPUT_KEY,
            _encode({"fingerprint": fingerprint, "outputs": [str(p) for p in outputs]}),
        )
        self._store.write(
            INPUT_KEY,
            _encode({"fingerprint": fingerprint, "request": request.canonical()}),
        )
        logger.info("Generator produced %d files", len(outputs))

        return CodegenOutcome(
            state=state,
            regenerated=True,
            fingerprint=fingerprint,
            outputs=outputs,
        )
