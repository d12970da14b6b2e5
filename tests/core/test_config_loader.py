"""Tests for theme config loading."""

from facetheme.core.config_loader import load_json, load_theme_config
from facetheme.styling.registry import available_themes


def test_every_theme_ships_a_config():
    for theme_id in available_themes():
        assert isinstance(load_theme_config(theme_id), dict)


def test_load_theme_config():
    cfg = load_theme_config("barbarian")
    assert cfg["scar_density"] == 0.3
    assert cfg["beard_enhancement"] is True


def test_load_json(tmp_path):
    path = tmp_path / "x.json"
    path.write_text('{"a": [1, 2]}')
    assert load_json(path) == {"a": [1, 2]}
