"""Texture synthesis entry point.

Wraps a theme's texture recipe with a seeded random source and typed
error reporting.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

import numpy as np

from facetheme.core.errors import FaceThemeError, TextureSynthesisError
from facetheme.core.options import ProcessingOptions
from facetheme.styling.base import ThemeStyle
from facetheme.styling.features import StyledResult
from facetheme.styling.registry import resolve_theme
from facetheme.texture.data import TexturedResult

logger = logging.getLogger(__name__)


def synthesize_textures(
    theme: Union[str, ThemeStyle],
    styled: StyledResult,
    options: ProcessingOptions,
    seed: int = 0,
    rng: Optional[np.random.Generator] = None,
) -> TexturedResult:
    """Run *theme*'s texture recipe for a styled mesh.

    Discrete features (scars, runes) draw from *rng*, or from a generator
    seeded with *seed* (default 0) when no *rng* is given.  The same seed always gives
    byte-identical textures.

    Raises
    ------
    ThemeNotFoundError
        Unknown theme id.
    TextureSynthesisError
        Any failure inside the recipe.
    """
    style = resolve_theme(theme)
    if rng is None:
        rng = np.random.default_rng(seed)

    logger.info("Synthesizing %s textures", style.theme_id)
    try:
        result = style.synthesize_textures(styled, options, rng)
    except FaceThemeError:
        raise
    except Exception as exc:
        logger.error("%s texture synthesis failed: %s", style.display_name, exc)
        raise TextureSynthesisError(
            f"{style.display_name} texture synthesis failed: {exc}", cause=exc) from exc

    logger.info(
        "Synthesized %s textures: base %dx%d, %d strokes, facial hair=%s",
        style.theme_id, result.base_texture.width, result.base_texture.height,
        len(result.strokes), result.facial_hair is not None,
    )
    return result
