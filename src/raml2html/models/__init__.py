"""Pydantic domain models for raml2html."""

from raml2html.models.errors import ParserError, Position, Range, RenderError
from raml2html.models.raml import (
    ApiDocument,
    Body,
    DocumentationItem,
    HttpMethod,
    Method,
    Parameter,
    Resource,
    Response,
    SecurityScheme,
    TypeDeclaration,
)

__all__ = [
    "ApiDocument",
    "Body",
    "DocumentationItem",
    "HttpMethod",
    "Method",
    "Parameter",
    "ParserError",
    "Position",
    "Range",
    "RenderError",
    "Resource",
    "Response",
    "SecurityScheme",
    "TypeDeclaration",
]
