"""RAML parsing with line fidelity for raml2html."""

from raml2html.parser.builder import RamlObjectBuilder
from raml2html.parser.loader import DocumentSafetyError, LoadedDocument, RamlLoader, SourceMap
from raml2html.parser.validator import RamlValidator

__all__ = [
    "DocumentSafetyError",
    "LoadedDocument",
    "RamlLoader",
    "RamlObjectBuilder",
    "RamlValidator",
    "SourceMap",
]
