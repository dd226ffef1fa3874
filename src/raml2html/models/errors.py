"""Structured parser diagnostics with source position tracking."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Position(BaseModel):
    """A line/column pair inside a RAML source file."""

    line: int
    column: int

    model_config = {"frozen": True}


class Range(BaseModel):
    """Points to the exact location in RAML source for error reporting."""

    start: Position
    end: Position | None = None

    model_config = {"frozen": True}


class ParserError(BaseModel):
    """A parse or validation diagnostic.

    ``trace`` holds causally related diagnostics, innermost cause first.
    An include failure, for example, is reported at the ``!include`` site
    and carries the error found inside the included file as ``trace[0]``.
    """

    code: str = ""
    message: str = ""
    path: str | None = None
    range: Range | None = None
    is_warning: bool = Field(False, alias="isWarning")
    trace: list[ParserError] = []

    model_config = {"populate_by_name": True, "frozen": True}

    @classmethod
    def at(
        cls,
        code: str,
        message: str,
        path: str | None = None,
        position: Position | None = None,
        *,
        is_warning: bool = False,
        trace: list[ParserError] | None = None,
    ) -> ParserError:
        """Build a diagnostic anchored at ``position`` (if known)."""
        return cls(
            code=code,
            message=message,
            path=path,
            range=Range(start=position) if position is not None else None,
            is_warning=is_warning,
            trace=trace or [],
        )

    def to_json(self) -> dict:
        """Camel-case JSON shape used for the raw error dump."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RenderError(Exception):
    """Raised when a RAML document cannot be rendered.

    Carries a primary ``message`` and/or the structured ``parser_errors``
    collected while loading and validating the document.
    """

    def __init__(
        self,
        message: str | None = None,
        parser_errors: list[ParserError] | None = None,
    ) -> None:
        self.message = message
        self.parser_errors = list(parser_errors or [])
        super().__init__(message or f"{len(self.parser_errors)} RAML diagnostic(s)")

    @property
    def warnings(self) -> list[ParserError]:
        return [e for e in self.parser_errors if e.is_warning]

    @property
    def errors(self) -> list[ParserError]:
        return [e for e in self.parser_errors if not e.is_warning]
