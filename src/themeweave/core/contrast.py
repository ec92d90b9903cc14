"""
WCAG contrast helpers and on-tone color selection.

relative_luminance() and contrast_ratio() follow the WCAG 2.x definitions;
pick_on_tone() chooses the candidate with the higher ratio against a surface
(ties go to black).
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

BLACK = "#000000"
WHITE = "#ffffff"
DEFAULT_ON_TONE_CANDIDATES: tuple[str, ...] = (BLACK, WHITE)
AA_RATIO = 4.5

_HEX_RE = re.compile(r"^#?([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)


def normalize_hex(value: object) -> str | None:
    """Return "#rrggbb" for a 3- or 6-digit hex string, else None."""
    if not isinstance(value, str):
        return None
    match = _HEX_RE.match(value.strip())
    if not match:
        return None
    digits = match.group(1).lower()
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"#{digits}"


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """Parse a hex color into 0-255 channels."""
    normalized = normalize_hex(value)
    if normalized is None:
        raise ValueError(f"Not a hex color: {value!r}")
    return (
        int(normalized[1:3], 16),
        int(normalized[3:5], 16),
        int(normalized[5:7], 16),
    )


def _linearize(channel: float) -> float:
    if channel <= 0.03928:
        return channel / 12.92
    return ((channel + 0.055) / 1.055) ** 2.4


def relative_luminance(value: str) -> float:
    r, g, b = (c / 255 for c in hex_to_rgb(value))
    return 0.2126 * _linearize(r) + 0.7152 * _linearize(g) + 0.0722 * _linearize(b)


def contrast_ratio(l1: float, l2: float) -> float:
    """Contrast ratio between two relative luminances."""
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def color_contrast(a: str, b: str) -> float:
    """Contrast ratio between two hex colors."""
    return contrast_ratio(relative_luminance(a), relative_luminance(b))


def _is_black(value: str) -> bool:
    return normalize_hex(value) == BLACK


def pick_on_tone(
    surface: str,
    candidates: Sequence[str] = DEFAULT_ON_TONE_CANDIDATES,
) -> str:
    """
    Choose the candidate with the highest contrast against a surface.

    Ties are broken toward black, then toward the earlier candidate.

    Args:
        surface: Surface color as hex
        candidates: On-tone colors to choose from (hex)

    Returns:
        The winning candidate as given
    """
    if not candidates:
        raise ValueError("pick_on_tone needs at least one candidate")
    surface_lum = relative_luminance(surface)
    best = candidates[0]
    best_ratio = -1.0
    for candidate in candidates:
        ratio = contrast_ratio(surface_lum, relative_luminance(candidate))
        if ratio > best_ratio or (ratio == best_ratio and _is_black(candidate) and not _is_black(best)):
            best, best_ratio = candidate, ratio
    return best


def pick_aa_on_tone(
    surface: str,
    candidates: Sequence[str] = DEFAULT_ON_TONE_CANDIDATES,
    aa_ratio: float = AA_RATIO,
) -> str:
    """Prefer candidates meeting AA; among those (or all, if none do) take the best."""
    compliant = [c for c in candidates if color_contrast(surface, c) >= aa_ratio]
    return pick_on_tone(surface, compliant or candidates)


@dataclass(frozen=True)
class PaletteStep:
    """One level of a palette family."""

    level: str
    hex: str


def pick_aa_step_in_family(
    background: str,
    steps: Sequence[PaletteStep],
    preferred_level: str | None = None,
    aa_ratio: float = AA_RATIO,
) -> PaletteStep:
    """
    First AA-compliant step of a palette family against a background.

    The preferred level wins if it is compliant; otherwise the first compliant
    step in order; otherwise the step with the highest contrast.
    """
    if not steps:
        raise ValueError("pick_aa_step_in_family needs at least one step")
    if preferred_level is not None:
        for step in steps:
            if step.level == preferred_level and color_contrast(background, step.hex) >= aa_ratio:
                return step
    for step in steps:
        if color_contrast(background, step.hex) >= aa_ratio:
            return step
    return max(steps, key=lambda step: color_contrast(background, step.hex))
