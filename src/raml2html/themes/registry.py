"""Theme plugin registry: discover and register theme implementations."""

from __future__ import annotations

import logging
from importlib.metadata import entry_points

from raml2html.themes.base import Theme

logger = logging.getLogger("raml2html.themes")

ENTRY_POINT_GROUP = "raml2html.themes"


class UnknownThemeError(Exception):
    """Raised when a requested theme is not registered."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.theme_name = name
        self.available = available
        super().__init__(f"Unknown theme '{name}'. Available: {', '.join(available)}")


class ThemeRegistry:
    """Registry for theme plugins.

    Built-in themes register themselves with the :meth:`register` decorator;
    installed distributions contribute themes through the
    ``raml2html.themes`` entry-point group.
    """

    _themes: dict[str, type[Theme]] = {}
    _discovered: bool = False

    @classmethod
    def register(cls, theme_class: type[Theme]) -> type[Theme]:
        """Register a theme class. Can be used as a decorator."""
        # Instantiate to read the name property
        instance = theme_class()
        cls._themes[instance.name] = theme_class
        return theme_class

    @classmethod
    def discover(cls) -> None:
        """Load themes advertised by installed distributions (once)."""
        if cls._discovered:
            return
        cls._discovered = True
        for ep in entry_points(group=ENTRY_POINT_GROUP):
            try:
                theme_class = ep.load()
            except ImportError as exc:
                logger.warning("Cannot load theme %r from %s: %s", ep.name, ep.value, exc)
                continue
            if isinstance(theme_class, type) and issubclass(theme_class, Theme):
                cls.register(theme_class)
            else:
                logger.warning("Entry point %r does not provide a Theme subclass", ep.name)

    @classmethod
    def get(cls, name: str) -> Theme:
        """Get an instance of the named theme."""
        if name not in cls._themes:
            cls.discover()
        if name not in cls._themes:
            raise UnknownThemeError(name, available=cls.available())
        return cls._themes[name]()

    @classmethod
    def available(cls) -> list[str]:
        """List registered theme names."""
        return sorted(cls._themes.keys())

    @classmethod
    def reset(cls) -> None:
        """Clear all registered themes (for testing)."""
        cls._themes.clear()
        cls._discovered = False
