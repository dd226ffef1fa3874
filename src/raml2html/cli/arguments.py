"""Command-line argument resolution."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import asdict, dataclass
from typing import Any, NoReturn

from raml2html import __version__
from raml2html.config import RenderOptions

logger = logging.getLogger("raml2html.cli")


class UsageError(Exception):
    """Bad or missing command-line arguments."""


class ParserExit(Exception):
    """``--help`` / ``--version`` finished; carries the exit status."""

    def __init__(self, status: int = 0) -> None:
        self.status = status
        super().__init__(status)


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that raises instead of exiting the process."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)

    def exit(self, status: int = 0, message: str | None = None) -> NoReturn:
        if message:
            self._print_message(message, sys.stderr)
        raise ParserExit(status)


@dataclass(frozen=True)
class CliOptions:
    """Resolved command-line options."""

    input: str
    output: str | None = None
    template: str | None = None
    theme: str | None = None
    extensions_and_overlays: tuple[str, ...] = ()
    validate: bool = False
    raw_errors: bool = False
    suppress_warnings: bool = False
    pretty: bool = False
    pretty_errors: bool = False

    def theme_options(self) -> dict[str, Any]:
        """The full option set, as handed to themes."""
        return asdict(self)

    def render_options(self) -> RenderOptions:
        return RenderOptions(
            validate=self.validate,
            extensions_and_overlays=self.extensions_and_overlays,
        )


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="raml2html",
        description="Render a RAML 1.0 API description into HTML.",
    )
    parser.add_argument("inputs", nargs="*", metavar="input", help="RAML file to render")
    parser.add_argument("-i", "--input", help="RAML file to render (alternative to the positional argument)")
    parser.add_argument("-o", "--output", help="Output file; standard output if omitted")
    parser.add_argument("-t", "--template", help="Jinja2 template to render with; overrides --theme")
    parser.add_argument("--theme", help="Name of the theme to render with")
    parser.add_argument(
        "-e",
        "--extensionsAndOverlays",
        dest="extensions_and_overlays",
        nargs="+",
        action="extend",
        default=[],
        metavar="FILE",
        help="RAML extension or overlay documents to apply, in order",
    )
    parser.add_argument("-p", "--pretty", action="store_true", help="Do not minify the generated HTML")
    parser.add_argument("-v", "--validate", action="store_true", help="Fail on RAML validation diagnostics")
    parser.add_argument(
        "--raw-errors",
        action="store_true",
        help="Print validation diagnostics as a JSON array (requires --validate)",
    )
    parser.add_argument(
        "--suppress-warnings",
        action="store_true",
        help="Drop warning-level diagnostics (requires --validate)",
    )
    parser.add_argument(
        "--pretty-errors",
        action="store_true",
        help="Indent the JSON printed by --raw-errors",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_arguments(argv: list[str] | None, parser: ArgumentParser | None = None) -> CliOptions:
    """Resolve ``argv`` into :class:`CliOptions`.

    Raises :class:`UsageError` when no single input file can be resolved or
    when a flag that depends on ``--validate`` is used without it.
    """
    parser = parser or build_parser()
    ns = parser.parse_args(argv)

    if ns.input:
        if ns.inputs:
            logger.warning("--input given; ignoring positional argument(s): %s", " ".join(ns.inputs))
        input_path = ns.input
    elif len(ns.inputs) == 1:
        input_path = ns.inputs[0]
    elif not ns.inputs:
        raise UsageError("an input RAML file is required (positional argument or --input)")
    else:
        raise UsageError(f"exactly one input RAML file is expected, got {len(ns.inputs)}")

    for flag, enabled in (("--raw-errors", ns.raw_errors), ("--suppress-warnings", ns.suppress_warnings)):
        if enabled and not ns.validate:
            raise UsageError(f"{flag} requires --validate")

    return CliOptions(
        input=input_path,
        output=ns.output,
        template=ns.template,
        theme=ns.theme,
        extensions_and_overlays=tuple(ns.extensions_and_overlays),
        validate=ns.validate,
        raw_errors=ns.raw_errors,
        suppress_warnings=ns.suppress_warnings,
        pretty=ns.pretty,
        pretty_errors=ns.pretty_errors,
    )
