"""Structural RAML 1.0 checks: root nodes, resources, methods, responses."""

from __future__ import annotations

import re
from typing import Any

from raml2html.models.errors import ParserError
from raml2html.models.raml import HttpMethod
from raml2html.parser.loader import SourceMap

ROOT_NODES = frozenset(
    {
        "title",
        "description",
        "version",
        "baseUri",
        "baseUriParameters",
        "protocols",
        "mediaType",
        "documentation",
        "schemas",
        "types",
        "traits",
        "resourceTypes",
        "annotationTypes",
        "securitySchemes",
        "securedBy",
        "uses",
    }
)

RESOURCE_NODES = frozenset(
    {"displayName", "description", "is", "type", "securedBy", "uriParameters"}
)

METHOD_NODES = frozenset(
    {
        "displayName",
        "description",
        "queryParameters",
        "headers",
        "queryString",
        "responses",
        "body",
        "protocols",
        "is",
        "securedBy",
    }
)

HTTP_METHODS = frozenset(m.value for m in HttpMethod)

_STATUS_CODE_RE = re.compile(r"^[1-5]\d\d$")


def _is_annotation(key: str) -> bool:
    return key.startswith("(") and key.endswith(")")


def reference_names(value: Any) -> list[str]:
    """Names referenced by an ``is`` / ``type`` node (string, list or parametrised map)."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, dict):
        return [str(k) for k in value]
    if isinstance(value, list):
        names: list[str] = []
        for item in value:
            names.extend(reference_names(item))
        return names
    return []


class RamlValidator:
    """Validates the structure of a loaded RAML 1.0 API document."""

    def validate(
        self, raw: dict[str, Any], source_map: SourceMap, file: str | None = None
    ) -> list[ParserError]:
        self._source_map = source_map
        self._file = file
        errors: list[ParserError] = []
        errors.extend(self._check_title(raw))
        errors.extend(self._check_description(raw))
        errors.extend(self._check_root_nodes(raw))
        errors.extend(self._check_version(raw))
        traits = set(_mapping(raw.get("traits")))
        resource_types = set(_mapping(raw.get("resourceTypes")))
        for key, value in raw.items():
            if key.startswith("/"):
                errors.extend(self._check_resource(key, value, key, traits, resource_types))
        return errors

    def _error(self, code: str, message: str, path: str, *, is_warning: bool = False) -> ParserError:
        return self._source_map.error(
            code, message, path, default_file=self._file, is_warning=is_warning
        )

    def _check_title(self, raw: dict[str, Any]) -> list[ParserError]:
        title = raw.get("title")
        if title is None or (isinstance(title, str) and not title.strip()):
            return [self._error("TITLE_REQUIRED", "Missing required property 'title'", "title")]
        return []

    def _check_description(self, raw: dict[str, Any]) -> list[ParserError]:
        if not raw.get("description"):
            return [
                self._error(
                    "MISSING_DESCRIPTION",
                    "API has no 'description'",
                    "title",
                    is_warning=True,
                )
            ]
        return []

    def _check_root_nodes(self, raw: dict[str, Any]) -> list[ParserError]:
        errors: list[ParserError] = []
        for key in raw:
            if key in ROOT_NODES or key.startswith("/") or _is_annotation(key):
                continue
            errors.append(self._error("UNKNOWN_NODE", f"Unknown node '{key}'", key))
        return errors

    def _check_version(self, raw: dict[str, Any]) -> list[ParserError]:
        base_uri = raw.get("baseUri")
        if isinstance(base_uri, str) and "{version}" in base_uri and raw.get("version") is None:
            return [
                self._error(
                    "MISSING_VERSION",
                    "'baseUri' uses '{version}' but no 'version' is declared",
                    "baseUri",
                )
            ]
        return []

    def _check_resource(
        self,
        uri: str,
        node: Any,
        path: str,
        traits: set[str],
        resource_types: set[str],
    ) -> list[ParserError]:
        errors: list[ParserError] = []
        node = node if isinstance(node, dict) else {}

        has_children = False
        for key, value in node.items():
            if key.startswith("/"):
                has_children = True
                errors.extend(
                    self._check_resource(key, value, f"{path}.{key}", traits, resource_types)
                )
            elif key.rstrip("?") in HTTP_METHODS:
                errors.extend(self._check_method(key, value, f"{path}.{key}", traits))
            elif key not in RESOURCE_NODES and not _is_annotation(key):
                errors.append(
                    self._error(
                        "INVALID_METHOD",
                        f"Resource '{uri}' has unknown method or property '{key}'",
                        f"{path}.{key}",
                    )
                )

        for name in reference_names(node.get("is")):
            if "." not in name and name not in traits:
                errors.append(self._error("UNKNOWN_TRAIT", f"Unknown trait '{name}'", f"{path}.is"))
        for name in reference_names(node.get("type")):
            if "." not in name and name not in resource_types:
                errors.append(
                    self._error(
                        "UNKNOWN_RESOURCE_TYPE",
                        f"Unknown resource type '{name}'",
                        f"{path}.type",
                    )
                )

        has_methods = any(k.rstrip("?") in HTTP_METHODS for k in node)
        if not has_methods and not has_children and "type" not in node:
            errors.append(
                self._error(
                    "EMPTY_RESOURCE",
                    f"Resource '{uri}' declares no methods",
                    path,
                    is_warning=True,
                )
            )
        return errors

    def _check_method(
        self, name: str, node: Any, path: str, traits: set[str]
    ) -> list[ParserError]:
        errors: list[ParserError] = []
        node = node if isinstance(node, dict) else {}
        for key in node:
            if key not in METHOD_NODES and not _is_annotation(key):
                errors.append(
                    self._error(
                        "UNKNOWN_NODE",
                        f"Method '{name}' has unknown property '{key}'",
                        f"{path}.{key}",
                    )
                )
        for trait in reference_names(node.get("is")):
            if "." not in trait and trait not in traits:
                errors.append(self._error("UNKNOWN_TRAIT", f"Unknown trait '{trait}'", f"{path}.is"))
        for code in _mapping(node.get("responses")):
            if not _STATUS_CODE_RE.match(str(code)):
                errors.append(
                    self._error(
                        "INVALID_STATUS_CODE",
                        f"'{code}' is not a valid HTTP status code",
                        f"{path}.responses.{code}",
                    )
                )
        return errors


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}
