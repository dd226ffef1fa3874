"""Output writers: where a rendered document ends up."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from raml2html.cli.arguments import CliOptions
    from raml2html.config import RenderConfig

logger = logging.getLogger("raml2html.output")


@runtime_checkable
class OutputWriter(Protocol):
    """Writes a rendered result to its destination.

    Writers see the config that produced ``result`` and the resolved
    command-line options (``options.output`` is None for standard output).
    """

    async def write(self, result: str | bytes, config: RenderConfig, options: CliOptions) -> None: ...


class StandardOutputWriter:
    """Default writer: truncate-and-write ``options.output``, else standard output."""

    encoding = "utf-8"

    async def write(self, result: str | bytes, config: RenderConfig, options: CliOptions) -> None:
        output = options.output
        if output:
            await asyncio.to_thread(self._write_file, result, Path(output))
            logger.info("Wrote %s", output)
        else:
            self._write_stdout(result)

    def _write_file(self, result: str | bytes, path: Path) -> None:
        data = result if isinstance(result, bytes) else result.encode(self.encoding)
        with path.open("wb") as handle:
            handle.write(data)

    @staticmethod
    def _write_stdout(result: str | bytes) -> None:
        if isinstance(result, bytes):
            sys.stdout.flush()
            sys.stdout.buffer.write(result)
            sys.stdout.buffer.flush()
        else:
            sys.stdout.write(result)
            sys.stdout.flush()
