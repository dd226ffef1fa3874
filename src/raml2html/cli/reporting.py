"""Human- and machine-readable reporting of render failures."""

from __future__ import annotations

import json
import os
import sys
import textwrap
from typing import TextIO

from raml2html.models.errors import ParserError, RenderError

RED = "\x1b[31m"
YELLOW = "\x1b[33m"
RESET = "\x1b[39m"


def paint(text: str, color: str) -> str:
    return f"{color}{text}{RESET}"


class ErrorReporter:
    """Formats failures to a stream (standard error by default).

    Only the outermost diagnostic of each trace chain is coloured; every
    nested trace entry is rendered plain, whatever its own severity.
    """

    def __init__(self, input_path: str, stream: TextIO | None = None, color: bool = False) -> None:
        self._input_dir = os.path.dirname(input_path)
        self._stream = stream
        self._color = color

    # -- formatting ----------------------------------------------------------

    def location(self, error: ParserError) -> str | None:
        """``<input dir>/<path>:<line>:<column>``, leaving out whatever is missing."""
        parts: list[str] = []
        path = getattr(error, "path", None)
        if path is not None:
            parts.append(os.path.join(self._input_dir, path))
        start = getattr(getattr(error, "range", None), "start", None)
        if start is not None:
            parts.extend([str(getattr(start, "line", "")), str(getattr(start, "column", ""))])
        return ":".join(parts) if parts else None

    def _message(self, error: ParserError) -> str:
        message = f"{getattr(error, 'code', '')}: {getattr(error, 'message', '')}"
        location = self.location(error)
        return f"{message} ({location})" if location else message

    def _trace(self, error: ParserError) -> str:
        trace = getattr(error, "trace", None) or []
        if not trace:
            return ""
        return "\n" + textwrap.indent(self.format_nested(trace[0]), "  ")

    def format_root(self, error: ParserError) -> str:
        message = self._message(error)
        if self._color:
            message = paint(message, YELLOW if getattr(error, "is_warning", False) else RED)
        return message + self._trace(error)

    def format_nested(self, error: ParserError) -> str:
        return self._message(error) + self._trace(error)

    # -- reporting -----------------------------------------------------------

    def _print(self, text: str) -> None:
        print(text, file=self._stream if self._stream is not None else sys.stderr)

    def _error_text(self, text: str) -> str:
        return paint(text, RED) if self._color else text

    def report(
        self,
        exc: BaseException,
        *,
        raw_errors: bool = False,
        suppress_warnings: bool = False,
        pretty_errors: bool = False,
    ) -> int:
        """Print ``exc`` and return the process exit status (always 1)."""
        if not isinstance(exc, RenderError):
            self._print(self._error_text(str(exc) or type(exc).__name__))
            return 1

        if exc.message:
            self._print(self._error_text(exc.message))

        errors = exc.parser_errors
        if suppress_warnings:
            errors = [e for e in errors if not e.is_warning]

        if raw_errors:
            if not errors and exc.message:
                return 1
            self._print(json.dumps([e.to_json() for e in errors], indent=2 if pretty_errors else None))
        else:
            for error in errors:
                self._print(self.format_root(error))
        return 1
