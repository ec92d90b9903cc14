"""Version lookup for the themeweave package."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _distribution_version
from pathlib import Path

_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def get_version() -> str:
    """Return the checkout's pyproject version, else the installed distribution's."""
    if _PYPROJECT.is_file():
        with _PYPROJECT.open("rb") as f:
            project = tomllib.load(f).get("project", {})
        if project.get("name") == "themeweave" and "version" in project:
            return str(project["version"])
    try:
        return _distribution_version("themeweave")
    except PackageNotFoundError:
        return "0.0.0"
