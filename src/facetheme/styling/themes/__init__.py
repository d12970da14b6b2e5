"""Concrete theme styles."""

from facetheme.styling.themes.anime import AnimeStyle
from facetheme.styling.themes.barbarian import BarbarianStyle
from facetheme.styling.themes.greek import GreekStyle
from facetheme.styling.themes.mystic import MysticStyle

__all__ = ["AnimeStyle", "BarbarianStyle", "GreekStyle", "MysticStyle"]
