"""JSON config file loading utilities."""

import json
from pathlib import Path
from typing import Any

from facetheme.constants import THEME_CONFIG_DIR


def load_json(path: Path) -> Any:
    """Load and return parsed JSON from a file."""
    with open(path) as f:
        return json.load(f)


def load_theme_config(theme_id: str) -> dict[str, Any]:
    """Load a theme's default knob values from assets/config/themes/."""
    return load_json(THEME_CONFIG_DIR / f"{theme_id}.json")
