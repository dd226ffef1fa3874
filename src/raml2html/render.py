"""Render pipeline: RAML file → object model → template → HTML."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from jinja2 import TemplateError

from raml2html.config import RenderConfig, RenderOptions
from raml2html.models.errors import RenderError
from raml2html.models.raml import ApiDocument
from raml2html.parser.builder import RamlObjectBuilder
from raml2html.parser.loader import RamlLoader
from raml2html.parser.validator import RamlValidator

logger = logging.getLogger("raml2html.render")


def parse_api(
    source: str | Path,
    options: RenderOptions | None = None,
    loader: RamlLoader | None = None,
) -> ApiDocument:
    """Load, optionally validate and build the API object model.

    Loader errors always fail the parse. Validation errors fail it only when
    ``options.validate`` is set; warnings alone never do. Raises
    :class:`RenderError` carrying every diagnostic found, warnings included.
    """
    options = options or RenderOptions()
    loader = loader or RamlLoader()
    doc = loader.load_api(
        Path(source), [Path(p) for p in options.extensions_and_overlays]
    )
    if not doc.ok:
        raise RenderError(parser_errors=doc.errors)

    if options.validate:
        diagnostics = doc.errors + RamlValidator().validate(doc.data, doc.source_map, doc.file)
        if any(not d.is_warning for d in diagnostics):
            raise RenderError(parser_errors=diagnostics)
        for warning in diagnostics:
            logger.info("%s: %s (%s)", warning.code, warning.message, warning.path)

    return RamlObjectBuilder().build(doc.data)


def render_api(api: ApiDocument, config: RenderConfig, options: RenderOptions) -> str | bytes:
    """Run the config hooks and the main template over a built API."""
    if config.process_raml_obj is not None:
        api = config.process_raml_obj(api, config, options)
    try:
        template = config.environment.get_template(config.main_template)
        html = template.render(config.template_context(api))
    except TemplateError as exc:
        raise RenderError(message=f"Template error in '{config.main_template}': {exc}") from exc
    if config.post_process_html is not None:
        return config.post_process_html(html, config, options)
    return html


def _render_sync(
    source: str | Path, config: RenderConfig, options: RenderOptions, loader: RamlLoader | None
) -> str | bytes:
    api = parse_api(source, options, loader)
    logger.info("Parsed '%s' (%d top-level resources)", api.title, len(api.resources))
    return render_api(api, config, options)


async def render(
    source: str | Path,
    config: RenderConfig,
    options: RenderOptions | None = None,
    loader: RamlLoader | None = None,
) -> str | bytes:
    """Render a RAML document to HTML.

    Raises :class:`RenderError` with a ``message`` and/or ``parser_errors``
    when the document cannot be parsed, validated or rendered.
    """
    options = options or RenderOptions()
    logger.debug("Rendering %s (validate=%s)", source, options.validate)
    return await asyncio.to_thread(_render_sync, source, config, options, loader)
