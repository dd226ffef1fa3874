"""Tests for the theme registry, the default theme and config selection."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from raml2html.config import (
    RenderConfig,
    create_environment,
    get_config_for_template,
    select_config,
)
from raml2html.output import OutputWriter, StandardOutputWriter
from raml2html.themes import Theme, ThemeRegistry, UnknownThemeError
from raml2html.themes.default import DefaultTheme, minify_html
from tests.conftest import SIMPLE_TEMPLATE

DEFAULT_THEME = "raml2html-default-theme"


class _StubTheme(Theme):
    @property
    def name(self) -> str:
        return "stub-theme"

    def configure(self, options: Mapping[str, Any]) -> RenderConfig:
        from jinja2 import DictLoader

        env = create_environment(DictLoader({"main.html": "{{ ramlObj.title }}"}))
        return RenderConfig(environment=env, main_template="main.html", options=options)


@pytest.fixture
def stub_theme():
    ThemeRegistry.register(_StubTheme)
    yield
    ThemeRegistry._themes.pop("stub-theme", None)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestThemeRegistry:
    def test_default_theme_registered(self) -> None:
        assert DEFAULT_THEME in ThemeRegistry.available()

    def test_get_returns_instance(self) -> None:
        theme = ThemeRegistry.get(DEFAULT_THEME)
        assert isinstance(theme, DefaultTheme)
        assert theme.name == DEFAULT_THEME

    def test_register_as_decorator(self, stub_theme) -> None:
        assert "stub-theme" in ThemeRegistry.available()
        assert isinstance(ThemeRegistry.get("stub-theme"), _StubTheme)

    def test_unknown_theme(self) -> None:
        with pytest.raises(UnknownThemeError) as exc_info:
            ThemeRegistry.get("no-such-theme")
        assert exc_info.value.theme_name == "no-such-theme"
        assert DEFAULT_THEME in exc_info.value.available
        assert "no-such-theme" in str(exc_info.value)

    def test_reset_then_reregister(self) -> None:
        ThemeRegistry.reset()
        try:
            assert ThemeRegistry.available() == []
        finally:
            ThemeRegistry.register(DefaultTheme)
        assert DEFAULT_THEME in ThemeRegistry.available()


# ---------------------------------------------------------------------------
# Default theme
# ---------------------------------------------------------------------------


class TestDefaultTheme:
    def test_configure(self) -> None:
        config = DefaultTheme().configure({"pretty": True})
        assert config.main_template == "index.html.j2"
        assert config.post_process_html is minify_html
        assert config.options == {"pretty": True}
        assert isinstance(config.output_writer, StandardOutputWriter)
        assert isinstance(config.output_writer, OutputWriter)

    def test_minify_collapses_whitespace_between_tags(self) -> None:
        config = DefaultTheme().configure({})
        html = "<ul>\n  <li>a</li>\n  <li>b</li>\n</ul>\n\n"
        assert minify_html(html, config, None) == "<ul><li>a</li><li>b</li></ul>\n"

    def test_pretty_keeps_html(self) -> None:
        config = DefaultTheme().configure({"pretty": True})
        html = "<ul>\n  <li>a</li>\n</ul>\n"
        assert minify_html(html, config, None) == html


# ---------------------------------------------------------------------------
# Config selection
# ---------------------------------------------------------------------------


class TestSelectConfig:
    def test_template_config(self) -> None:
        config = get_config_for_template(SIMPLE_TEMPLATE)
        assert config.main_template == "simple.html.j2"
        assert config.process_raml_obj is None
        assert config.post_process_html is None
        assert config.environment.get_template("simple.html.j2") is not None

    def test_template_wins_over_theme(self) -> None:
        config = select_config(str(SIMPLE_TEMPLATE), "no-such-theme", {}, DEFAULT_THEME)
        assert config.main_template == "simple.html.j2"

    def test_named_theme(self, stub_theme) -> None:
        config = select_config(None, "stub-theme", {"pretty": False}, DEFAULT_THEME)
        assert config.main_template == "main.html"
        assert config.options == {"pretty": False}

    def test_default_theme_when_unset(self) -> None:
        config = select_config(None, None, {}, DEFAULT_THEME)
        assert config.main_template == "index.html.j2"

    def test_unknown_theme_raises(self) -> None:
        with pytest.raises(UnknownThemeError):
            select_config(None, "no-such-theme", {}, DEFAULT_THEME)

    def test_autoescape_and_slug_filter(self) -> None:
        from jinja2 import DictLoader

        env = create_environment(DictLoader({"t": "{{ v }}|{{ p | slug }}"}))
        assert env.get_template("t").render(v="<b>", p="/a/{b}") == "&lt;b&gt;|a_b"
