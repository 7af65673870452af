"""Reconciliation of staged files against the required manifest.

``reconcile`` is the single place where the accepted set grows. It is pure:
given the files already accepted and a batch of newly offered ones, it returns
the merged set together with what is still missing and what was unexpected.

Merge policy is first-seen-wins. An offered file whose name is already
accepted (or appeared earlier in the same batch) is dropped, never swapped in,
so re-offering a file is a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from intake_portal.intake.models import AcceptedFile, OfferedFile
from intake_portal.manifest import DEFAULT_MANIFEST, RequiredManifest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of one reconciliation pass.

    Attributes:
        merged: Accepted files after the merge, previous files first
        missing: Manifest names not present in ``merged``, manifest order
        extra: Unexpected names, de-duplicated, order of first appearance
        found_count: Number of manifest names present in ``merged``
        added: How many offered files were actually appended
    """

    merged: tuple[AcceptedFile, ...]
    missing: tuple[str, ...]
    extra: tuple[str, ...]
    found_count: int
    added: int

    @property
    def total(self) -> int:
        return self.found_count + len(self.missing)

    @property
    def ready_to_submit(self) -> bool:
        return not self.missing

    @property
    def nothing_added(self) -> bool:
        return self.added == 0

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.merged)


def dedupe(names: Iterable[str]) -> list[str]:
    """Drop repeated names, keeping the first occurrence of each."""
    seen: set[str] = set()
    unique = []
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        unique.append(name)
    return unique


def reconcile(
    accepted: Sequence[AcceptedFile],
    offered: Sequence[Union[OfferedFile, AcceptedFile]],
    manifest: Optional[RequiredManifest] = None,
    extra_names: Iterable[str] = (),
) -> ReconcileResult:
    """Merge ``offered`` into ``accepted`` and recompute missing/extra.

    Args:
        accepted: Files already staged (assumed unique by name)
        offered: Newly introduced files, from direct selection or an archive
        manifest: Required names (defaults to the built-in manifest)
        extra_names: Unexpected names reported by the archive reader for the
            same interaction; combined with unexpected merged names

    Returns:
        ReconcileResult; ``len(merged) == len(accepted)`` means nothing new
    """
    manifest = manifest or DEFAULT_MANIFEST

    merged = list(accepted)
    staged_names = {f.name for f in merged}
    added = 0
    for candidate in offered:
        if candidate.name in staged_names:
            logger.debug(f"Skipping duplicate offer: {candidate.name}")
            continue
        staged_names.add(candidate.name)
        if isinstance(candidate, OfferedFile):
            candidate = AcceptedFile.from_offered(candidate)
        merged.append(candidate)
        added += 1

    merged_names = [f.name for f in merged]
    missing = manifest.missing(merged_names)
    extra = dedupe(name for name in [*merged_names, *extra_names] if name not in manifest)

    return ReconcileResult(
        merged=tuple(merged),
        missing=tuple(missing),
        extra=tuple(extra),
        found_count=len(manifest) - len(missing),
        added=added,
    )
