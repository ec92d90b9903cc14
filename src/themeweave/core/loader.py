"""
Document loading and project assembly.

Source documents are JSON (.json) or YAML (.yaml / .yml) objects. open_project()
reads themeweave.toml, loads the three documents and the persisted overrides
and returns a ready ThemeStore.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .config import ThemeweaveConfig, load_config
from .errors import make_document_error
from .ir import Collection
from .overrides import JsonFileKeyValueStore, OverrideLayer
from .preview import PreviewChannel
from .store import ThemeStore

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}


def load_document(path: Path) -> dict[str, Any]:
    """
    Load one source document.

    Raises:
        DocumentError: The file is missing, unparsable or not an object
    """
    if not path.exists():
        raise make_document_error("Document not found", file=path)
    text = path.read_text(encoding="utf-8")

    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except yaml.YAMLError as e:
        raise make_document_error(f"Invalid YAML: {e}", file=path) from e
    except json.JSONDecodeError as e:
        raise make_document_error(f"Invalid JSON: {e.msg}", file=path, pointer=f"line {e.lineno}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise make_document_error("Document must contain an object at the top level", file=path)
    return data


def save_document(path: Path, document: dict[str, Any]) -> Path:
    """Write a document back in the format its suffix names."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in _YAML_SUFFIXES:
        content = yaml.dump(document, default_flow_style=False, sort_keys=False, allow_unicode=True)
    else:
        content = json.dumps(document, indent=2)
    path.write_text(content, encoding="utf-8")
    logger.info(f"Saved document to {path}")
    return path


def document_paths(project_root: Path, config: ThemeweaveConfig) -> dict[Collection, Path]:
    return {
        Collection.TOKENS: project_root / config.documents.tokens,
        Collection.BRAND: project_root / config.documents.brand,
        Collection.COMPONENTS: project_root / config.documents.components,
    }


def load_documents(project_root: Path, config: ThemeweaveConfig) -> dict[Collection, dict[str, Any]]:
    """Load the three documents; a missing file counts as an empty document."""
    documents: dict[Collection, dict[str, Any]] = {}
    for collection, path in document_paths(project_root, config).items():
        if path.exists():
            documents[collection] = load_document(path)
        else:
            logger.warning(f"No {collection} document at {path}; using an empty one")
            documents[collection] = {}
    return documents


def open_overrides(project_root: Path, config: ThemeweaveConfig) -> OverrideLayer:
    storage = JsonFileKeyValueStore(project_root / config.overrides.storage_path)
    return OverrideLayer(storage, storage_key=config.overrides.storage_key)


def open_project(project_root: Path, config: ThemeweaveConfig | None = None) -> ThemeStore:
    """
    Build a ThemeStore for a project directory.

    Args:
        project_root: Directory holding themeweave.toml and the documents
        config: Pre-loaded config (read from project_root when omitted)

    Raises:
        ConfigError: themeweave.toml is invalid
        DocumentError: A document cannot be parsed
        VariableNameCollision: The documents produce clashing output names
    """
    config = config or load_config(project_root)
    documents = load_documents(project_root, config)
    return ThemeStore(
        tokens=documents[Collection.TOKENS],
        brand=documents[Collection.BRAND],
        components=documents[Collection.COMPONENTS],
        overrides=open_overrides(project_root, config),
        mode=config.resolution.mode,
        elevation=config.elevation.to_settings(),
        max_depth=config.resolution.max_depth,
        prefix=config.resolution.variable_prefix,
        surfaces=config.contrast.surfaces,
        on_tone_candidates=config.contrast.candidates,
    )


def open_preview(store: ThemeStore, config: ThemeweaveConfig) -> PreviewChannel:
    """Put a debounced preview channel in front of an opened store."""
    return PreviewChannel(store, debounce_ms=config.preview.debounce_ms)
