"""Shared test fixtures for raml2html."""

from __future__ import annotations

from pathlib import Path

import pytest

from raml2html.parser.builder import RamlObjectBuilder
from raml2html.parser.loader import RamlLoader
from raml2html.parser.validator import RamlValidator
from raml2html.settings import Settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"
LIBRARY_API = FIXTURES_DIR / "api" / "api.raml"
LIBRARY_OVERLAY = FIXTURES_DIR / "api" / "overlay.raml"
BROKEN_API = FIXTURES_DIR / "broken" / "api.raml"
SIMPLE_TEMPLATE = FIXTURES_DIR / "templates" / "simple.html.j2"


@pytest.fixture
def loader() -> RamlLoader:
    return RamlLoader()


@pytest.fixture
def validator() -> RamlValidator:
    return RamlValidator()


@pytest.fixture
def builder() -> RamlObjectBuilder:
    return RamlObjectBuilder()


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment: no colour, default theme."""
    return Settings(_env_file=None, color="never", log_level="WARNING")


@pytest.fixture
def write_raml(tmp_path: Path):
    """Write RAML text to ``tmp_path`` and return its path."""

    def _write(content: str, name: str = "api.raml") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


SAMPLE_RAML = """\
#%RAML 1.0
title: Sample API
version: v2
baseUri: http://localhost/{version}
description: A small API used across tests.
/users:
  displayName: Users
  get:
    queryParameters:
      limit:
        type: integer
        required: false
        default: 10
  /{userId}:
    uriParameters:
      userId:
        type: integer
        description: User identifier
    get:
      responses:
        200:
          body:
            application/json:
              example: {"id": 1, "name": "Ada"}
    delete:
"""

# One hard error (unknown root node) and one warning (resource without methods).
SAMPLE_RAML_WITH_DIAGNOSTICS = """\
#%RAML 1.0
title: Needs Work
description: Diagnostics fixture.
colour: blue
/empty:
  description: Nothing here yet.
"""
