"""``raml2html`` command: resolve arguments, render, write or report."""

from __future__ import annotations

import asyncio
import logging
import sys

from raml2html import __version__
from raml2html.cli.arguments import (
    CliOptions,
    ParserExit,
    UsageError,
    build_parser,
    parse_arguments,
)
from raml2html.cli.reporting import ErrorReporter
from raml2html.config import select_config
from raml2html.parser.loader import RamlLoader
from raml2html.render import render
from raml2html.settings import Settings

logger = logging.getLogger("raml2html.cli")


async def execute(options: CliOptions, settings: Settings) -> None:
    """Select a config, render the input and hand the result to the writer."""
    config = select_config(
        options.template,
        options.theme,
        options.theme_options(),
        default_theme=settings.default_theme,
    )
    loader = RamlLoader(
        max_document_size=settings.max_document_size,
        max_include_depth=settings.max_include_depth,
    )
    result = await render(options.input, config, options.render_options(), loader=loader)
    await config.output_writer.write(result, config, options)


def run(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    """Run the command and return its exit status."""
    settings = settings or Settings()
    parser = build_parser()
    try:
        options = parse_arguments(argv, parser)
    except ParserExit as exc:
        return exc.status
    except UsageError as exc:
        parser.print_help(sys.stderr)
        print(f"\n{parser.prog}: error: {exc}", file=sys.stderr)
        return 1

    reporter = ErrorReporter(options.input, color=settings.use_color(sys.stderr))
    try:
        asyncio.run(execute(options, settings))
    except Exception as exc:  # noqa: BLE001 - CLI boundary
        logger.debug("Render of %s failed", options.input, exc_info=True)
        return reporter.report(
            exc,
            raw_errors=options.raw_errors,
            suppress_warnings=options.suppress_warnings,
            pretty_errors=options.pretty_errors,
        )
    return 0


def main() -> None:
    """Entry point for the ``raml2html`` console script."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.debug("raml2html v%s", __version__)

    sys.exit(run(sys.argv[1:], settings))


if __name__ == "__main__":
    main()
