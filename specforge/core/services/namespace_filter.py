"""
Namespace filter — which namespaces take part in generation.

Exclusion is always the last step: a namespace in the exclude set is
never eligible, even when the allow set names it explicitly.
"""

from __future__ import annotations

from collections.abc import Iterable


def is_reserved(namespace: str, reserved: Iterable[str]) -> bool:
    """True if ``namespace`` equals a reserved name or lives under one."""
    return any(namespace == r or namespace.startswith(r + ".") for r in reserved)


def filter_namespaces(
    candidates: Iterable[str],
    allowed: Iterable[str] | None = None,
    excluded: Iterable[str] | None = None,
    reserved: Iterable[str] = (),
) -> frozenset[str]:
    """Apply allow-list, then exclude-list, to ``candidates``.

    Args:
        candidates: Namespaces found in the model.
        allowed: Allow-list. None means "everything but reserved ones".
        excluded: Exclude-list, subtracted unconditionally.
        reserved: Namespaces owned by the generator's standard library.

    Returns:
        The eligible namespaces.
    """
    names = frozenset(candidates)

    if allowed is None:
        reserved = tuple(reserved)
        eligible = frozenset(ns for ns in names if not is_reserved(ns, reserved))
    else:
        eligible = names & frozenset(allowed)

    if excluded is not None:
        eligible = eligible - frozenset(excluded)

    return eligible
