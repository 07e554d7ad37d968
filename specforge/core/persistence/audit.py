"""
Codegen ledger — append-only history of generation runs.

Every codegen task invocation writes one entry to an NDJSON file:
which configuration ran, whether the generator was invoked or the
cache was reused, and how it ended. Useful for answering "why did
(or didn't) my build regenerate?".

Entries are never modified or deleted. Ledger I/O failures are logged
and never fail the build.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_LEDGER_DIR = ".state"
DEFAULT_LEDGER_FILE = "audit.ndjson"


class CodegenRunEntry(BaseModel):
    """A single codegen run."""

    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    run_id: str = ""
    build: str = ""
    configuration: str = ""

    state: str = ""                # NoPriorRecord, Unchanged, Changed
    regenerated: bool = False
    fingerprint: str = ""

    status: str = ""               # ok, failed
    sources: int = 0
    resources: int = 0
    duration_ms: int = 0
    error: str | None = None


class CodegenLedger:
    """Append-only ledger of codegen runs."""

    def __init__(self, path: Path | None = None, project_root: Path | None = None):
        if path is not None:
            self._path = path
        elif project_root is not None:
            self._path = project_root / DEFAULT_LEDGER_DIR / DEFAULT_LEDGER_FILE
        else:
            self._path = Path(DEFAULT_LEDGER_DIR) / DEFAULT_LEDGER_FILE

    @property
    def path(self) -> Path:
        return self._path

    def append(self, entry: CodegenRunEntry) -> None:
        """Append one entry as a JSON line."""
        line = json.dumps(entry.model_dump(mode="json"), ensure_ascii=False) + "\n"

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line)
            logger.debug("Ledger entry written: %s/%s", entry.configuration, entry.run_id)
        except OSError as e:
            logger.error("Failed to write ledger entry: %s", e)

    def read_all(self) -> list[CodegenRunEntry]:
        """All entries, oldest first. Corrupt lines are skipped."""
        if not self._path.is_file():
            return []

        entries = []
        try:
            with self._path.open("r", encoding="utf-8") as f:
                for line_num, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        entries.append(CodegenRunEntry.model_validate(json.loads(line)))
                    except ValueError as e:
                        logger.warning("Skipping corrupt ledger entry at line %d: %s", line_num, e)
        except OSError as e:
            logger.error("Failed to read ledger: %s", e)

        return entries

    def read_recent(self, n: int = 20, configuration: str | None = None) -> list[CodegenRunEntry]:
        """The most recent ``n`` entries, optionally for one configuration."""
        entries = self.read_all()
        if configuration is not None:
            entries = [e for e in entries if e.configuration == configuration]
        return entries[-n:] if n > 0 else []
