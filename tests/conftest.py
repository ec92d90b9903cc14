"""Shared pytest fixtures for themeweave tests."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from themeweave.core.document_index import DocumentIndex
from themeweave.core.overrides import OverrideLayer
from themeweave.core.resolver import Resolver
from themeweave.core.store import ThemeStore

TOKENS: dict[str, Any] = {
    "tokens": {
        "size": {
            "none": {"$type": "size", "$value": 0},
            "0-5x": {"$type": "size", "$value": 4},
            "1x": {"$type": "size", "$value": 8},
            "md": {"$type": "size", "$value": 16},
            "1-5x": {"$type": "size", "$value": 12},
            "2x": {"$type": "size", "$value": 24},
            "3x": {"$type": "size", "$value": 32},
        },
        "opacity": {
            "shadow": {"$type": "opacity", "$value": 0.4},
            "strong": {"$type": "opacity", "$value": 60},
        },
        "color": {
            "black": {"$type": "color", "$value": "#000000"},
            "gray": {
                "50": {"$type": "color", "$value": "#fafafa"},
                "900": {"$type": "color", "$value": "#111111"},
            },
            "blue": {"500": {"$type": "color", "$value": "#1f6feb"}},
        },
        "font": {"family": {"base": {"$type": "font-family", "$value": "Inter"}}},
    }
}

BRAND: dict[str, Any] = {
    "brand": {
        "typography": {
            "body": {"$type": "font-family", "$value": "{tokens.font.family.base}"},
        },
        "themes": {
            "light": {
                "palettes": {
                    "core": {"interactive": {"$type": "color", "$value": "{tokens.color.blue.500}"}},
                },
                "layers": {
                    "layer-1": {
                        "properties": {
                            "padding": {"$type": "size", "$value": "{tokens.size.md}"},
                            "surface": {"$type": "color", "$value": "{tokens.color.gray.50}"},
                            "border-color": {
                                "$type": "color",
                                "$value": "{brand.palettes.core.interactive}",
                            },
                        }
                    }
                },
                "elevations": {
                    "elevation-0": {
                        "blur": {"$value": "{tokens.size.none}"},
                        "spread": {"$value": "{tokens.size.none}"},
                        "x": {"$value": "{tokens.size.none}"},
                        "y": {"$value": "{tokens.size.none}"},
                        "color": {"$value": "{tokens.color.black}"},
                        "opacity": {"$value": "{tokens.opacity.shadow}"},
                    },
                    "elevation-1": {
                        "blur": {"$value": "{tokens.size.1x}"},
                        "spread": {"$value": "{tokens.size.none}"},
                        "x": {"$value": "{tokens.size.none}"},
                        "y": {"$value": "{tokens.size.0-5x}"},
                        "x-direction": {"$value": 1},
                        "y-direction": {"$value": 1},
                    },
                    "elevation-2": {
                        "blur": {"$value": "{tokens.size.md}"},
                        "y": {"$value": "{tokens.size.1x}"},
                        "opacity": {"$value": "{tokens.opacity.strong}"},
                    },
                    "elevation-3": {"y": {"$value": "{tokens.size.1-5x}"}},
                    "elevation-4": {"y": {"$value": "{tokens.size.md}"}},
                },
            },
            "dark": {
                "palettes": {
                    "core": {"interactive": {"$type": "color", "$value": "{tokens.color.blue.500}"}},
                },
                "layers": {
                    "layer-1": {
                        "properties": {
                            "padding": {"$type": "size", "$value": "{tokens.size.2x}"},
                            "surface": {"$type": "color", "$value": "{tokens.color.gray.900}"},
                        }
                    }
                },
            },
        },
    }
}

COMPONENTS: dict[str, Any] = {
    "ui-kit": {
        "button": {
            "padding": {"$type": "size", "$value": "{brand.layers.layer-1.properties.padding}"},
            "background": {"$type": "color", "$value": "{brand.palettes.core.interactive}"},
        }
    }
}


@pytest.fixture
def tokens_doc() -> dict[str, Any]:
    return copy.deepcopy(TOKENS)


@pytest.fixture
def brand_doc() -> dict[str, Any]:
    return copy.deepcopy(BRAND)


@pytest.fixture
def components_doc() -> dict[str, Any]:
    return copy.deepcopy(COMPONENTS)


@pytest.fixture
def index(tokens_doc, brand_doc, components_doc) -> DocumentIndex:
    """Return a light-mode index over the sample documents."""
    return DocumentIndex(tokens=tokens_doc, brand=brand_doc, components=components_doc)


@pytest.fixture
def resolver(index: DocumentIndex) -> Resolver:
    """Return a resolver without overrides."""
    return Resolver(index)


@pytest.fixture
def overrides() -> OverrideLayer:
    """Return an in-memory override layer."""
    return OverrideLayer()


@pytest.fixture
def store(tokens_doc, brand_doc, components_doc, overrides) -> ThemeStore:
    """Return a light-mode store over the sample documents."""
    return ThemeStore(
        tokens=tokens_doc,
        brand=brand_doc,
        components=components_doc,
        overrides=overrides,
    )


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """Create a project directory with config and the sample documents."""
    (tmp_path / "tokens.json").write_text(json.dumps(TOKENS, indent=2))
    (tmp_path / "brand.json").write_text(json.dumps(BRAND, indent=2))
    (tmp_path / "components.json").write_text(json.dumps(COMPONENTS, indent=2))
    (tmp_path / "themeweave.toml").write_text(
        """
[resolution]
mode = "light"

[overrides]
storage_path = ".themeweave/storage.json"
"""
    )
    return tmp_path
