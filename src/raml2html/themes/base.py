"""Abstract base theme: a packaged template plus its render hooks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from raml2html.config import RenderConfig


class Theme(ABC):
    """Abstract base for all themes.

    A theme turns the command-line options into a :class:`RenderConfig`.
    Theme-specific options (``pretty`` and friends) are read from the
    mapping handed to :meth:`configure`.
    """

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def configure(self, options: Mapping[str, Any]) -> RenderConfig: ...
