"""Tests for output writers."""

from __future__ import annotations

import pytest

from raml2html.cli.arguments import CliOptions
from raml2html.config import RenderConfig, get_config_for_template
from raml2html.output import OutputWriter, StandardOutputWriter
from tests.conftest import SIMPLE_TEMPLATE


@pytest.fixture
def config() -> RenderConfig:
    return get_config_for_template(SIMPLE_TEMPLATE)


def _options(output=None) -> CliOptions:
    return CliOptions(input="api.raml", output=str(output) if output is not None else None)


class TestStandardOutputWriter:
    def test_is_output_writer(self) -> None:
        assert isinstance(StandardOutputWriter(), OutputWriter)

    async def test_writes_file_exactly(self, config: RenderConfig, tmp_path) -> None:
        target = tmp_path / "out.html"
        await StandardOutputWriter().write("<p>café</p>\n", config, _options(target))
        assert target.read_bytes() == "<p>café</p>\n".encode()

    async def test_truncates_existing_file(self, config: RenderConfig, tmp_path) -> None:
        target = tmp_path / "out.html"
        target.write_text("x" * 100, encoding="utf-8")
        await StandardOutputWriter().write("short", config, _options(target))
        assert target.read_text(encoding="utf-8") == "short"

    async def test_writes_bytes(self, config: RenderConfig, tmp_path) -> None:
        target = tmp_path / "out.bin"
        await StandardOutputWriter().write(b"\x00\x01html", config, _options(target))
        assert target.read_bytes() == b"\x00\x01html"

    async def test_stdout_when_no_output(self, config: RenderConfig, capsys) -> None:
        await StandardOutputWriter().write("<html></html>\n", config, _options())
        captured = capsys.readouterr()
        assert captured.out == "<html></html>\n"
        assert captured.err == ""
