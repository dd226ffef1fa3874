"""Theme plugin system for raml2html."""

# Import built-in themes to trigger registration
import raml2html.themes.default as _default  # noqa: F401
from raml2html.themes.base import Theme
from raml2html.themes.registry import ThemeRegistry, UnknownThemeError

__all__ = [
    "Theme",
    "ThemeRegistry",
    "UnknownThemeError",
]
