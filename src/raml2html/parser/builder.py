"""Builds the typed RAML object model from a loaded document.

Resource types and traits are applied here, before the model is built, so
templates only ever see the effective methods of each resource.
"""

from __future__ import annotations

import copy
import re
from typing import Any

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
from raml2html.parser.validator import HTTP_METHODS, reference_names

DEFAULT_MEDIA_TYPE = "application/json"

_TEMPLATE_PARAM_RE = re.compile(r"<<\s*([A-Za-z_][\w]*)\s*((?:\|\s*![A-Za-z]+\s*)*)>>")
_URI_PARAM_RE = re.compile(r"\{([^}]+)\}")
_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    return _SLUG_RE.sub("_", value.lower()).strip("_") or "root"


def _transform(value: str, transformers: str) -> str:
    for name in re.findall(r"!([A-Za-z]+)", transformers):
        if name == "uppercase":
            value = value.upper()
        elif name == "lowercase":
            value = value.lower()
        elif name == "singularize":
            value = value[:-1] if value.endswith("s") else value
        elif name == "pluralize":
            value = value if value.endswith("s") else value + "s"
    return value


def substitute(node: Any, params: dict[str, str]) -> Any:
    """Replace ``<<name>>`` placeholders (with optional ``| !transform``) in keys and values."""
    if isinstance(node, str):
        def _replace(match: re.Match[str]) -> str:
            name, transformers = match.group(1), match.group(2)
            if name not in params:
                return match.group(0)
            return _transform(str(params[name]), transformers)

        return _TEMPLATE_PARAM_RE.sub(_replace, node)
    if isinstance(node, dict):
        return {substitute(k, params): substitute(v, params) for k, v in node.items()}
    if isinstance(node, list):
        return [substitute(v, params) for v in node]
    return node


def merge_defaults(defaults: dict[str, Any], node: dict[str, Any]) -> dict[str, Any]:
    """Merge ``node`` over ``defaults``; values declared in ``node`` win."""
    out = copy.deepcopy(defaults)
    for key, value in node.items():
        current = out.get(key)
        if value is None and current is not None:
            continue
        if isinstance(current, dict) and isinstance(value, dict):
            out[key] = merge_defaults(current, value)
        else:
            out[key] = copy.deepcopy(value)
    return out


def _references(value: Any) -> list[tuple[str, dict[str, Any]]]:
    """Split ``is`` / ``type`` nodes into (name, parameters) pairs."""
    refs: list[tuple[str, dict[str, Any]]] = []
    items = value if isinstance(value, list) else [value]
    for item in items:
        if isinstance(item, dict):
            for name, params in item.items():
                refs.append((str(name), params if isinstance(params, dict) else {}))
        elif isinstance(item, str):
            refs.append((item, {}))
    return refs


def resource_path_name(path: str) -> str:
    """Rightmost path segment that is not a URI parameter."""
    for segment in reversed([s for s in path.split("/") if s]):
        if not _URI_PARAM_RE.search(segment):
            return segment
    return ""


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


def _looks_like_schema(value: str) -> bool:
    stripped = value.lstrip()
    return stripped.startswith(("{", "<")) or "\n" in stripped


class RamlObjectBuilder:
    """Turns a raw RAML mapping into an :class:`ApiDocument`."""

    def build(self, raw: dict[str, Any]) -> ApiDocument:
        self._traits: dict[str, Any] = _mapping(raw.get("traits"))
        self._resource_types: dict[str, Any] = _mapping(raw.get("resourceTypes"))
        self._media_types = [str(m) for m in _as_list(raw.get("mediaType"))]

        version = _text(raw.get("version"))
        base_uri = _text(raw.get("baseUri"))
        if base_uri and version:
            base_uri = base_uri.replace("{version}", version)

        resources = [
            self._resource(key, value, parent_url="", base_uri=base_uri or "")
            for key, value in raw.items()
            if key.startswith("/")
        ]

        return ApiDocument(
            title=str(raw.get("title") or ""),
            version=version,
            base_uri=base_uri,
            description=_text(raw.get("description")),
            media_type=self._media_types,
            protocols=[str(p) for p in _as_list(raw.get("protocols"))],
            documentation=self._documentation(raw.get("documentation")),
            base_uri_parameters=self._parameters(raw.get("baseUriParameters")),
            types=self._types(raw.get("types") or raw.get("schemas")),
            security_schemes=self._security_schemes(raw.get("securitySchemes")),
            secured_by=[str(s) for s in _as_list(raw.get("securedBy")) if s is not None],
            resources=resources,
        )

    # -- resources -----------------------------------------------------------

    def _resource(self, relative_uri: str, node: Any, parent_url: str, base_uri: str) -> Resource:
        node = _mapping(node)
        full_path = parent_url + relative_uri
        node = self._apply_resource_type(node, full_path)

        methods: list[Method] = []
        children: list[Resource] = []
        resource_traits = _references(node.get("is"))
        for key, value in node.items():
            if key.startswith("/"):
                children.append(self._resource(key, value, full_path, base_uri))
            elif key in HTTP_METHODS:
                methods.append(self._method(key, value, full_path, resource_traits))

        declared = self._parameters(node.get("uriParameters"))
        names = {p.name for p in declared}
        implicit = [
            Parameter(name=name)
            for name in _URI_PARAM_RE.findall(relative_uri)
            if name not in names
        ]

        resource_type = reference_names(node.get("type"))
        return Resource(
            relative_uri=relative_uri,
            absolute_uri=base_uri.rstrip("/") + full_path,
            parent_url=parent_url,
            unique_id=slugify(full_path),
            display_name=_text(node.get("displayName")) or relative_uri,
            description=_text(node.get("description")),
            resource_type=resource_type[0] if resource_type else None,
            uri_parameters=declared + implicit,
            methods=methods,
            resources=children,
        )

    def _apply_resource_type(self, node: dict[str, Any], full_path: str) -> dict[str, Any]:
        refs = _references(node.get("type"))
        if not refs:
            return node
        name, params = refs[0]
        definition = self._resource_types.get(name)
        if not isinstance(definition, dict):
            return node
        values = {
            "resourcePath": full_path,
            "resourcePathName": resource_path_name(full_path),
            **{k: str(v) for k, v in params.items()},
        }
        defaults: dict[str, Any] = {}
        for key, value in definition.items():
            if key in ("usage", "type"):
                continue
            method = key[:-1] if key.endswith("?") else key
            if method in HTTP_METHODS:
                # optional methods only apply when the resource declares them
                if key.endswith("?") and method not in node:
                    continue
                defaults[method] = substitute(value, {**values, "methodName": method})
            else:
                defaults[substitute(key, values)] = substitute(value, values)
        return merge_defaults(defaults, node)

    def _method(
        self,
        name: str,
        node: Any,
        full_path: str,
        resource_traits: list[tuple[str, dict[str, Any]]],
    ) -> Method:
        node = _mapping(node)
        refs = resource_traits + _references(node.get("is"))
        for trait_name, params in refs:
            definition = self._traits.get(trait_name)
            if not isinstance(definition, dict):
                continue
            values = {
                "methodName": name,
                "resourcePath": full_path,
                "resourcePathName": resource_path_name(full_path),
                **{k: str(v) for k, v in params.items()},
            }
            trait = {k: v for k, v in substitute(definition, values).items() if k != "usage"}
            node = merge_defaults(trait, node)

        return Method(
            method=HttpMethod(name),
            display_name=_text(node.get("displayName")),
            description=_text(node.get("description")),
            query_parameters=self._parameters(node.get("queryParameters")),
            headers=self._parameters(node.get("headers")),
            body=self._bodies(node.get("body")),
            responses=self._responses(node.get("responses")),
            secured_by=[str(s) for s in _as_list(node.get("securedBy")) if s is not None],
            traits=[n for n, _ in refs],
        )

    def _responses(self, node: Any) -> list[Response]:
        responses = [
            Response(
                code=str(code),
                description=_text(_mapping(decl).get("description")),
                headers=self._parameters(_mapping(decl).get("headers")),
                body=self._bodies(_mapping(decl).get("body")),
            )
            for code, decl in _mapping(node).items()
        ]
        return sorted(responses, key=lambda r: r.code)

    # -- parameters and bodies -----------------------------------------------

    def _parameters(self, node: Any) -> list[Parameter]:
        params: list[Parameter] = []
        for raw_name, decl in _mapping(node).items():
            name = str(raw_name)
            required = True
            if name.endswith("?"):
                name, required = name[:-1], False
            if isinstance(decl, dict):
                params.append(
                    Parameter(
                        name=name,
                        display_name=_text(decl.get("displayName")),
                        type=_type_name(decl.get("type")) or "string",
                        description=_text(decl.get("description")),
                        required=bool(decl.get("required", required)),
                        default=decl.get("default"),
                        example=decl.get("example"),
                        enum=decl.get("enum"),
                        pattern=_text(decl.get("pattern")),
                    )
                )
            else:
                params.append(
                    Parameter(name=name, type=_type_name(decl) or "string", required=required)
                )
        return params

    def _bodies(self, node: Any) -> list[Body]:
        if node is None:
            return []
        default_types = self._media_types or [DEFAULT_MEDIA_TYPE]
        if isinstance(node, dict) and any("/" in str(k) for k in node):
            return [self._body(str(media), decl) for media, decl in node.items()]
        return [self._body(media, node) for media in default_types]

    def _body(self, media_type: str, decl: Any) -> Body:
        if isinstance(decl, str):
            if _looks_like_schema(decl):
                return Body(media_type=media_type, schema_content=decl)
            return Body(media_type=media_type, type=decl)
        decl = _mapping(decl)
        schema = decl.get("type") or decl.get("schema")
        schema_content = schema if isinstance(schema, str) and _looks_like_schema(schema) else None
        return Body(
            media_type=media_type,
            type=None if schema_content else _type_name(schema),
            description=_text(decl.get("description")),
            example=_example(decl),
            schema_content=schema_content,
            properties=self._parameters(decl.get("properties")),
        )

    # -- root-level collections ----------------------------------------------

    def _documentation(self, node: Any) -> list[DocumentationItem]:
        items: list[DocumentationItem] = []
        for entry in _as_list(node):
            entry = _mapping(entry)
            title = str(entry.get("title") or "")
            items.append(
                DocumentationItem(
                    title=title,
                    content=str(entry.get("content") or ""),
                    unique_id=slugify(title),
                )
            )
        return items

    def _types(self, node: Any) -> list[TypeDeclaration]:
        types: list[TypeDeclaration] = []
        for name, decl in _mapping(node).items():
            if isinstance(decl, str):
                if _looks_like_schema(decl):
                    types.append(TypeDeclaration(name=name, type="schema", schema_content=decl))
                else:
                    types.append(TypeDeclaration(name=name, type=decl))
                continue
            decl = _mapping(decl)
            properties = self._parameters(decl.get("properties"))
            types.append(
                TypeDeclaration(
                    name=name,
                    type=_type_name(decl.get("type")) or ("object" if properties else None),
                    description=_text(decl.get("description")),
                    properties=properties,
                    example=_example(decl),
                )
            )
        return types

    def _security_schemes(self, node: Any) -> list[SecurityScheme]:
        return [
            SecurityScheme(
                name=name,
                type=str(_mapping(decl).get("type") or ""),
                description=_text(_mapping(decl).get("description")),
                settings=_mapping(_mapping(decl).get("settings")),
            )
            for name, decl in _mapping(node).items()
        ]


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _type_name(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, list):
        return " | ".join(str(v) for v in value)
    if isinstance(value, dict):
        return "object"
    return str(value)


def _example(decl: dict[str, Any]) -> Any:
    if "example" in decl:
        return decl["example"]
    examples = decl.get("examples")
    if isinstance(examples, dict) and examples:
        first = next(iter(examples.values()))
        return first.get("value", first) if isinstance(first, dict) else first
    return None
