"""Lighting and atmosphere composition entry point."""

from __future__ import annotations

import logging
from typing import Optional, Union

from facetheme.core.errors import FaceThemeError, LightingCompositionError
from facetheme.core.options import ProcessingOptions
from facetheme.lighting.model import LightingAnalysis, LitResult
from facetheme.styling.base import ThemeStyle
from facetheme.styling.registry import resolve_theme
from facetheme.texture.data import TexturedResult

logger = logging.getLogger(__name__)


def compose_lighting(
    theme: Union[str, ThemeStyle],
    textured: TexturedResult,
    options: ProcessingOptions,
    analysis: Optional[LightingAnalysis] = None,
) -> LitResult:
    """Map a coarse lighting analysis into *theme*'s lighting and atmosphere.

    Without an *analysis* the neutral default estimate is used.
    """
    style = resolve_theme(theme)
    if analysis is None:
        analysis = LightingAnalysis()

    try:
        lit = style.compose_lighting(textured, options, analysis)
    except FaceThemeError:
        raise
    except Exception as exc:
        logger.error("%s lighting composition failed: %s", style.display_name, exc)
        raise LightingCompositionError(
            f"{style.display_name} lighting composition failed: {exc}", cause=exc) from exc

    logger.info(
        "Composed %s lighting: intensity %.2f, %d shadows, %d particle layers",
        style.theme_id, lit.lighting.primary_light.intensity,
        len(lit.lighting.shadows), len(lit.atmosphere.particles),
    )
    return lit
