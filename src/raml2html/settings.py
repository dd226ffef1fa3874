"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

import os
import sys
from typing import Literal, TextIO

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the raml2html command line.

    Values are read from ``RAML2HTML_*`` environment variables and from a
    ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="RAML2HTML_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "WARNING"

    # Rendering
    default_theme: str = "raml2html-default-theme"

    # Diagnostics output
    color: Literal["auto", "always", "never"] = "auto"

    # Loader safety limits
    max_document_size: int = 5_000_000  # characters
    max_include_depth: int = 10

    def use_color(self, stream: TextIO | None = None) -> bool:
        """Return True if diagnostics written to ``stream`` should be colourised."""
        if self.color == "always":
            return True
        if self.color == "never" or os.environ.get("NO_COLOR"):
            return False
        stream = stream if stream is not None else sys.stderr
        isatty = getattr(stream, "isatty", None)
        return bool(isatty and isatty())
