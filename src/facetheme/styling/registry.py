"""Theme lookup by identifier."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Union

from facetheme.core.errors import ThemeNotFoundError
from facetheme.styling.base import ThemeStyle
from facetheme.styling.themes import AnimeStyle, BarbarianStyle, GreekStyle, MysticStyle

logger = logging.getLogger(__name__)

THEME_CLASSES: dict[str, type[ThemeStyle]] = {
    cls.theme_id: cls for cls in (BarbarianStyle, GreekStyle, MysticStyle, AnimeStyle)
}


def available_themes() -> list[str]:
    return sorted(THEME_CLASSES)


@lru_cache(maxsize=None)
def get_theme(theme_id: str) -> ThemeStyle:
    """Theme instance with its packaged default config.

    Instances hold only an immutable config, so one per id is shared.
    """
    try:
        cls = THEME_CLASSES[theme_id]
    except KeyError:
        raise ThemeNotFoundError(
            f"Unknown theme '{theme_id}'; available: {', '.join(available_themes())}"
        ) from None
    logger.debug("Loaded theme %s", theme_id)
    return cls()


def resolve_theme(theme: Union[str, ThemeStyle]) -> ThemeStyle:
    if isinstance(theme, ThemeStyle):
        return theme
    return get_theme(theme)
