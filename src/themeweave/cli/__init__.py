"""
themeweave CLI package.

- app.py: main application (resolve, css, check)
- overrides.py: override management sub-commands
- common.py: shared state and helpers
"""

from themeweave.cli.app import app, main
from themeweave.cli.overrides import overrides_app

__all__ = [
    "app",
    "main",
    "overrides_app",
]
