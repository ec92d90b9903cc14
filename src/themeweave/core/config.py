"""
Project configuration (themeweave.toml).

Every section and key is optional; a missing file yields the defaults.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .contrast import AA_RATIO, DEFAULT_ON_TONE_CANDIDATES
from .errors import ConfigError
from .ir import ColorMode, ElevationSettings, ScaleByDefault
from .overrides import OVERRIDES_STORAGE_KEY
from .preview import DEFAULT_DEBOUNCE_MS
from .resolver import DEFAULT_MAX_DEPTH, DEFAULT_PREFIX
from .synthesis import DEFAULT_SURFACES

CONFIG_FILE = "themeweave.toml"


@dataclass
class DocumentsConfig:
    """Source document file names, relative to the project root."""

    tokens: str = "tokens.json"
    brand: str = "brand.json"
    components: str = "components.json"


@dataclass
class ResolutionConfig:
    mode: str = ColorMode.LIGHT.value
    variable_prefix: str = DEFAULT_PREFIX
    max_depth: int = DEFAULT_MAX_DEPTH
    strict_references: bool = False


@dataclass
class OverridesConfig:
    storage_path: str = ".themeweave/storage.json"
    storage_key: str = OVERRIDES_STORAGE_KEY


@dataclass
class ElevationConfig:
    """Scale-by-default switches per axis."""

    scale_blur: bool = True
    scale_spread: bool = False
    scale_offset_x: bool = False
    scale_offset_y: bool = False

    def to_settings(self) -> ElevationSettings:
        return ElevationSettings(
            scale_by_default=ScaleByDefault(
                blur=self.scale_blur,
                spread=self.scale_spread,
                offset_x=self.scale_offset_x,
                offset_y=self.scale_offset_y,
            )
        )


@dataclass
class PreviewConfig:
    debounce_ms: int = DEFAULT_DEBOUNCE_MS


@dataclass
class ContrastConfig:
    candidates: list[str] = field(default_factory=lambda: list(DEFAULT_ON_TONE_CANDIDATES))
    surfaces: list[str] = field(default_factory=lambda: list(DEFAULT_SURFACES))
    aa_ratio: float = AA_RATIO


@dataclass
class ThemeweaveConfig:
    """Parsed themeweave.toml."""

    documents: DocumentsConfig = field(default_factory=DocumentsConfig)
    resolution: ResolutionConfig = field(default_factory=ResolutionConfig)
    overrides: OverridesConfig = field(default_factory=OverridesConfig)
    elevation: ElevationConfig = field(default_factory=ElevationConfig)
    preview: PreviewConfig = field(default_factory=PreviewConfig)
    contrast: ContrastConfig = field(default_factory=ContrastConfig)


def _section(data: dict, name: str) -> dict:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table")
    return section


def parse_config(data: dict) -> ThemeweaveConfig:
    """Build a config from already-parsed TOML data."""
    documents = _section(data, "documents")
    resolution = _section(data, "resolution")
    overrides = _section(data, "overrides")
    elevation = _section(data, "elevation")
    preview = _section(data, "preview")
    contrast = _section(data, "contrast")

    mode = resolution.get("mode", ColorMode.LIGHT.value)
    if mode not in {m.value for m in ColorMode}:
        raise ConfigError(f"resolution.mode must be 'light' or 'dark', got {mode!r}")
    max_depth = resolution.get("max_depth", DEFAULT_MAX_DEPTH)
    if not isinstance(max_depth, int) or max_depth < 1:
        raise ConfigError(f"resolution.max_depth must be a positive integer, got {max_depth!r}")

    return ThemeweaveConfig(
        documents=DocumentsConfig(
            tokens=documents.get("tokens", "tokens.json"),
            brand=documents.get("brand", "brand.json"),
            components=documents.get("components", "components.json"),
        ),
        resolution=ResolutionConfig(
            mode=mode,
            variable_prefix=resolution.get("variable_prefix", DEFAULT_PREFIX),
            max_depth=max_depth,
            strict_references=resolution.get("strict_references", False),
        ),
        overrides=OverridesConfig(
            storage_path=overrides.get("storage_path", ".themeweave/storage.json"),
            storage_key=overrides.get("storage_key", OVERRIDES_STORAGE_KEY),
        ),
        elevation=ElevationConfig(
            scale_blur=elevation.get("scale_blur", True),
            scale_spread=elevation.get("scale_spread", False),
            scale_offset_x=elevation.get("scale_offset_x", False),
            scale_offset_y=elevation.get("scale_offset_y", False),
        ),
        preview=PreviewConfig(debounce_ms=preview.get("debounce_ms", DEFAULT_DEBOUNCE_MS)),
        contrast=ContrastConfig(
            candidates=list(contrast.get("candidates", DEFAULT_ON_TONE_CANDIDATES)),
            surfaces=list(contrast.get("surfaces", DEFAULT_SURFACES)),
            aa_ratio=float(contrast.get("aa_ratio", AA_RATIO)),
        ),
    )


def get_config_path(project_root: Path) -> Path:
    return project_root / CONFIG_FILE


def load_config(project_root: Path) -> ThemeweaveConfig:
    """
    Load themeweave.toml from a project root.

    Raises:
        ConfigError: The file exists but is not valid TOML or has bad values
    """
    path = get_config_path(project_root)
    if not path.exists():
        return ThemeweaveConfig()
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid {CONFIG_FILE}: {e}") from e
    return parse_config(data)
