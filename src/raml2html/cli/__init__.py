"""Command-line front-end for raml2html."""

from raml2html.cli.arguments import CliOptions, UsageError, build_parser, parse_arguments
from raml2html.cli.main import main, run
from raml2html.cli.reporting import ErrorReporter

__all__ = [
    "CliOptions",
    "ErrorReporter",
    "UsageError",
    "build_parser",
    "main",
    "parse_arguments",
    "run",
]
