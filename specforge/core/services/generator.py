"""
Generator loading — resolve the "package.module:function" entry point
named in the build file into a callable.

The generator itself is opaque: it receives a GenerationRequest and
returns the paths it wrote, or raises.
"""

from __future__ import annotations

import importlib
import logging

from specforge.core.services.codegen_cache import Generator

logger = logging.getLogger(__name__)


class GeneratorLoadError(Exception):
    """Raised when the configured generator entry point can't be loaded."""


def load_generator(entry_point: str) -> Generator:
    """Import ``module:attr`` (attr may be dotted) and return it.

    Raises:
        GeneratorLoadError: If the reference is malformed, unimportable,
            or doesn't point at a callable.
    """
    module_name, sep, attr_path = entry_point.partition(":")
    if not sep or not module_name or not attr_path:
        raise GeneratorLoadError(
            f"Invalid generator entry point '{entry_point}' — expected 'package.module:function'"
        )

    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        raise GeneratorLoadError(f"Cannot import generator module '{module_name}': {e}") from e

    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise GeneratorLoadError(
                f"Generator '{entry_point}' not found: no attribute '{part}'"
            ) from e

    if not callable(target):
        raise GeneratorLoadError(f"Generator '{entry_point}' is not callable")

    logger.debug("Loaded generator %s", entry_point)
    return target
