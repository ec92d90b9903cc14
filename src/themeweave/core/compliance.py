"""
Document checks: reference health, name collisions and AA contrast.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .contrast import AA_RATIO, DEFAULT_ON_TONE_CANDIDATES, color_contrast, normalize_hex, pick_on_tone
from .document_index import canonical_location
from .errors import (
    CyclicReference,
    MalformedReference,
    ResolutionError,
    ResolutionTooDeep,
    VariableNameCollision,
)
from .ir import Collection
from .references import validate_reference
from .resolver import Resolver, path_key
from .store import ThemeStore
from .synthesis import DEFAULT_SURFACES, plan_outputs

# =============================================================================
# Contrast audit
# =============================================================================


@dataclass(frozen=True)
class ContrastFinding:
    """A surface and the on-tone color chosen for it."""

    surface: str
    surface_color: str
    on_tone: str
    ratio: float
    aa_ratio: float = AA_RATIO

    @property
    def passes(self) -> bool:
        return self.ratio >= self.aa_ratio


def audit_contrast(
    resolver: Resolver,
    surfaces: Sequence[str] = DEFAULT_SURFACES,
    candidates: Sequence[str] = DEFAULT_ON_TONE_CANDIDATES,
    aa_ratio: float = AA_RATIO,
    include_passing: bool = False,
) -> list[ContrastFinding]:
    """
    List surface/on-tone pairs whose best on-tone still misses the AA ratio.

    Surfaces that do not resolve to a hex color are skipped.
    """
    findings = []
    for leaf in resolver.index.iter_leaves(Collection.BRAND):
        if not leaf.location or leaf.location[-1] not in surfaces:
            continue
        try:
            value = resolver.resolve(Collection.BRAND, leaf.location)
        except ResolutionError:
            continue
        surface = normalize_hex(value)
        if surface is None:
            continue
        on_tone = pick_on_tone(surface, candidates)
        finding = ContrastFinding(
            surface=path_key(Collection.BRAND, canonical_location(Collection.BRAND, leaf.location)),
            surface_color=surface,
            on_tone=on_tone,
            ratio=round(color_contrast(surface, on_tone), 2),
            aa_ratio=aa_ratio,
        )
        if include_passing or not finding.passes:
            findings.append(finding)
    return findings


# =============================================================================
# Document check
# =============================================================================


class CheckReport:
    """Result of checking a store's documents."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def __repr__(self) -> str:
        return f"CheckReport(errors={len(self.errors)}, warnings={len(self.warnings)})"


def check_store(
    store: ThemeStore,
    strict: bool = False,
    aa_ratio: float = AA_RATIO,
) -> CheckReport:
    """
    Check every output of a store without touching its projection.

    Cycles, runaway chains and name collisions are errors; unresolved
    references and AA misses are warnings. With strict=True, strings that
    look like references but do not parse are errors too.
    """
    report = CheckReport()
    resolver = store.resolver()

    try:
        planned = plan_outputs(
            resolver,
            store.elevation,
            surfaces=store.surfaces,
            candidates=store.on_tone_candidates,
        )
    except VariableNameCollision as e:
        report.add_error(e.message)
        planned = {}

    for name, output in planned.items():
        try:
            output.compute()
        except (CyclicReference, ResolutionTooDeep) as e:
            report.add_error(f"{name}: {e.message}")
        except ResolutionError as e:
            report.add_warning(f"{name}: {e.message}")

    if strict:
        for collection in Collection:
            for leaf in resolver.index.iter_leaves(collection):
                try:
                    validate_reference(leaf.raw_value)
                except MalformedReference as e:
                    report.add_error(f"{path_key(collection, leaf.location)}: {e.message}")

    for finding in audit_contrast(
        resolver,
        surfaces=store.surfaces,
        candidates=store.on_tone_candidates,
        aa_ratio=aa_ratio,
    ):
        report.add_warning(
            f"{finding.surface}: best on-tone {finding.on_tone} on {finding.surface_color} "
            f"has contrast {finding.ratio} (< {finding.aa_ratio})"
        )
    return report
