"""Tests for lighting and atmosphere composition."""

import pytest

from facetheme.core.errors import LightingCompositionError, ThemeNotFoundError
from facetheme.core.options import ProcessingOptions
from facetheme.lighting.composer import compose_lighting
from facetheme.lighting.model import LightingAnalysis
from facetheme.styling.registry import available_themes
from facetheme.styling.themes import GreekStyle
from facetheme.texture.data import HairTextureData, TexturedResult, TextureData


@pytest.fixture
def textured(built_mesh):
    blank = TextureData.blank(4, 4)
    return TexturedResult(
        theme_id="test",
        textured_mesh=built_mesh,
        base_texture=blank,
        normal_texture=blank,
        specular_texture=blank,
        hair=HairTextureData(base=blank, secondary=blank, flow_map=blank),
    )


def _mean_softness(lit):
    return sum(s.softness for s in lit.lighting.shadows) / len(lit.lighting.shadows)


def test_barbarian_defaults(textured, options):
    lit = compose_lighting("barbarian", textured, options)
    assert lit.theme_id == "barbarian"
    assert lit.lighting.primary_light.intensity == pytest.approx(1.2)
    assert lit.lighting.primary_light.direction == (0.7, -0.5, 0.5)
    assert lit.lighting.ambient_light.intensity == pytest.approx(0.201)
    assert len(lit.lighting.shadows) == 3
    assert lit.atmosphere.color_grading.contrast == 1.3
    assert [p.type for p in lit.atmosphere.particles] == ["dust", "smoke"]


def test_greek_defaults(textured, options):
    lit = compose_lighting("greek", textured, options)
    assert lit.lighting.primary_light.intensity == pytest.approx(0.8)
    assert lit.lighting.ambient_light.intensity == pytest.approx(0.5)
    assert len(lit.lighting.shadows) == 4
    assert lit.atmosphere.mist.density == 0.05
    assert lit.atmosphere.color_grading.saturation == 0.9


def test_greek_shadows_softer_than_barbarian(textured, options):
    greek = compose_lighting("greek", textured, options)
    barbarian = compose_lighting("barbarian", textured, options)
    assert _mean_softness(greek) > _mean_softness(barbarian)


def test_custom_analysis(textured, options):
    analysis = LightingAnalysis(intensity=0.4, ambient_level=0.1)
    lit = compose_lighting("barbarian", textured, options, analysis)
    assert lit.lighting.primary_light.intensity == pytest.approx(0.6)
    greek = compose_lighting("greek", textured, options, analysis)
    # Soft lighting keeps a floor on ambient
    assert greek.lighting.ambient_light.intensity == pytest.approx(0.5)


def test_mystic_aura_depends_on_quality(textured):
    balanced = compose_lighting("mystic", textured, ProcessingOptions())
    fast = compose_lighting("mystic", textured, ProcessingOptions(quality="fast"))
    assert balanced.lighting.ambient_light.intensity == pytest.approx(0.57)
    assert fast.lighting.ambient_light.intensity == pytest.approx(0.45)
    assert len(balanced.atmosphere.particles) == 2
    assert len(fast.atmosphere.particles) == 1


def test_anime_has_no_mist(textured, options):
    lit = compose_lighting("anime", textured, options)
    assert lit.atmosphere.mist is None
    assert all(s.softness < 0.1 for s in lit.lighting.shadows)


@pytest.mark.parametrize("theme_id", available_themes())
def test_final_mesh_is_textured_mesh(theme_id, textured, options):
    lit = compose_lighting(theme_id, textured, options)
    assert lit.final_mesh is textured.textured_mesh
    assert lit.lighting.primary_light.type == "directional"


def test_unknown_theme(textured, options):
    with pytest.raises(ThemeNotFoundError):
        compose_lighting("pirate", textured, options)


def test_failure_is_wrapped(textured, options, monkeypatch):
    def boom(self, config):
        raise RuntimeError("no candles")

    monkeypatch.setattr(GreekStyle, "shadows", boom)
    with pytest.raises(LightingCompositionError, match="Greek lighting composition failed") as excinfo:
        compose_lighting("greek", textured, options)
    assert isinstance(excinfo.value.__cause__, RuntimeError)
