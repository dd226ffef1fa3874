"""Render configurations: which template renders the API and how."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from raml2html.models.raml import ApiDocument
from raml2html.output import OutputWriter, StandardOutputWriter
from raml2html.parser.builder import slugify

logger = logging.getLogger("raml2html.config")


@dataclass(frozen=True)
class RenderOptions:
    """Per-invocation options for :func:`raml2html.render.render`."""

    validate: bool = False
    extensions_and_overlays: tuple[str, ...] = ()


ProcessRamlObj = Callable[[ApiDocument, "RenderConfig", RenderOptions], ApiDocument]
PostProcessHtml = Callable[[str, "RenderConfig", RenderOptions], "str | bytes"]


@dataclass
class RenderConfig:
    """Everything the render pipeline needs besides the RAML document.

    ``output_writer`` is fixed when the config is built: themes that need a
    different destination (e.g. one file per resource) supply their own.
    """

    environment: Environment
    main_template: str
    process_raml_obj: ProcessRamlObj | None = None
    post_process_html: PostProcessHtml | None = None
    output_writer: OutputWriter = field(default_factory=StandardOutputWriter)
    options: Mapping[str, Any] = field(default_factory=dict)

    def template_context(self, api: ApiDocument) -> dict[str, Any]:
        return {"ramlObj": api, "api": api, "options": self.options}


def create_environment(loader: Any) -> Environment:
    """Jinja2 environment with HTML autoescaping and the shared filters."""
    env = Environment(
        loader=loader,
        autoescape=select_autoescape(default_for_string=True, default=True),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["slug"] = slugify
    return env


def get_config_for_template(main_template: str | Path) -> RenderConfig:
    """Config bound to an explicit template file, bypassing theme resolution."""
    template_path = Path(main_template)
    env = create_environment(FileSystemLoader(str(template_path.parent)))
    return RenderConfig(environment=env, main_template=template_path.name)


def get_config_for_theme(name: str, options: Mapping[str, Any] | None = None) -> RenderConfig:
    """Config for a registered theme; ``options`` are passed through to the theme."""
    from raml2html.themes import ThemeRegistry

    theme = ThemeRegistry.get(name)
    return theme.configure(dict(options or {}))


def select_config(
    template: str | None,
    theme: str | None,
    options: Mapping[str, Any],
    default_theme: str,
) -> RenderConfig:
    """Pick exactly one of: explicit template, or named theme (default if unset)."""
    if template:
        logger.debug("Using template %s", template)
        return get_config_for_template(template)
    theme_name = theme or default_theme
    logger.debug("Using theme %s", theme_name)
    return get_config_for_theme(theme_name, options)
