"""raml2html: render RAML 1.0 API descriptions into HTML."""

__version__ = "0.1.0"
