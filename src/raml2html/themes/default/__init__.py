"""Built-in ``raml2html-default-theme``: single-page HTML with resource navigation."""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import FileSystemLoader

from raml2html.config import RenderConfig, RenderOptions, create_environment
from raml2html.themes.base import Theme
from raml2html.themes.registry import ThemeRegistry

TEMPLATES_DIR = Path(__file__).parent / "templates"

_BETWEEN_TAGS_RE = re.compile(r">\s+<")


def minify_html(html: str, config: RenderConfig, options: RenderOptions) -> str:
    """Collapse whitespace between tags unless the ``pretty`` option is set."""
    if config.options.get("pretty"):
        return html
    return _BETWEEN_TAGS_RE.sub("><", html).strip() + "\n"


@ThemeRegistry.register
class DefaultTheme(Theme):
    """The theme used when neither ``--template`` nor ``--theme`` is given."""

    @property
    def name(self) -> str:
        return "raml2html-default-theme"

    def configure(self, options: Mapping[str, Any]) -> RenderConfig:
        env = create_environment(FileSystemLoader(str(TEMPLATES_DIR)))
        return RenderConfig(
            environment=env,
            main_template="index.html.j2",
            post_process_html=minify_html,
            options=options,
        )
