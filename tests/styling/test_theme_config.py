"""Tests for theme configs: loading, intensity scaling and quality tiers."""

import pytest

from facetheme.core.options import ProcessingOptions
from facetheme.styling.themes.anime import AnimeConfig
from facetheme.styling.themes.barbarian import BarbarianConfig
from facetheme.styling.themes.greek import GreekConfig
from facetheme.styling.themes.mystic import MysticConfig


def test_from_dict_coerces_types():
    cfg = BarbarianConfig.from_dict({"scar_density": 1, "beard_enhancement": 0})
    assert cfg.scar_density == 1.0
    assert isinstance(cfg.scar_density, float)
    assert cfg.beard_enhancement is False


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError, match="war_paint"):
        BarbarianConfig.from_dict({"war_paint": 1.0})


def test_knob_values_order():
    assert BarbarianConfig().knob_values() == [0.7, 0.6, 0.3, 0.8, 1.0, 1.0, 1.0]


def test_intensity_scales_float_knobs():
    cfg = BarbarianConfig().for_request(ProcessingOptions(style_intensity=0.5))
    assert cfg.ruggedness_factor == pytest.approx(0.35)
    assert cfg.scar_density == pytest.approx(0.15)
    assert cfg.beard_enhancement is True


def test_for_request_leaves_default_untouched():
    default = BarbarianConfig()
    default.for_request(ProcessingOptions(style_intensity=0.1, quality="high"))
    assert default.scar_density == 0.3


def test_barbarian_quality_tiers():
    fast = BarbarianConfig().for_request(ProcessingOptions(quality="fast", style_intensity=1.0))
    assert fast.scar_density == pytest.approx(0.15)
    assert fast.beard_enhancement is False
    high = BarbarianConfig().for_request(ProcessingOptions(quality="high", style_intensity=1.0))
    assert high.scar_density == pytest.approx(0.45)
    assert high.weathering_intensity == pytest.approx(0.72)


def test_greek_quality_tiers():
    fast = GreekConfig().for_request(ProcessingOptions(quality="fast"))
    assert not fast.golden_ratio_adjustment
    assert not fast.marble_texture
    high = GreekConfig().for_request(ProcessingOptions(quality="high", style_intensity=1.0))
    assert high.classical_proportions == pytest.approx(0.96)
    assert high.marble_smoothing == pytest.approx(0.91)


def test_mystic_fast_drops_runes_and_aura():
    fast = MysticConfig().for_request(ProcessingOptions(quality="fast"))
    assert not fast.rune_markings
    assert not fast.aura_lighting


def test_anime_shade_levels():
    assert AnimeConfig(cel_shading=0.0).shade_levels == 6
    assert AnimeConfig(cel_shading=1.0).shade_levels == 3
    assert AnimeConfig(cel_shading=10.0).shade_levels == 2
