"""RAML object model handed to templates: API root, resources, methods, responses."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class HttpMethod(StrEnum):
    GET = "get"
    PATCH = "patch"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    TRACE = "trace"
    CONNECT = "connect"


class Parameter(BaseModel):
    """A named parameter (URI, query, header or form property)."""

    name: str
    display_name: str | None = Field(None, alias="displayName")
    type: str = "string"
    description: str | None = None
    required: bool = True
    default: Any = None
    example: Any = None
    enum: list[Any] | None = None
    pattern: str | None = None

    model_config = {"populate_by_name": True}


class Body(BaseModel):
    """A request or response payload for one media type."""

    media_type: str = Field(alias="mediaType")
    type: str | None = None
    description: str | None = None
    example: Any = None
    schema_content: str | None = Field(None, alias="schemaContent")
    properties: list[Parameter] = []

    model_config = {"populate_by_name": True}


class Response(BaseModel):
    code: str
    description: str | None = None
    headers: list[Parameter] = []
    body: list[Body] = []


class Method(BaseModel):
    """An HTTP method on a resource, with traits already applied."""

    method: HttpMethod
    display_name: str | None = Field(None, alias="displayName")
    description: str | None = None
    query_parameters: list[Parameter] = Field(default_factory=list, alias="queryParameters")
    headers: list[Parameter] = []
    body: list[Body] = []
    responses: list[Response] = []
    secured_by: list[str] = Field(default_factory=list, alias="securedBy")
    traits: list[str] = Field(default_factory=list, alias="is")

    model_config = {"populate_by_name": True}


class Resource(BaseModel):
    """A resource node; child resources are nested under ``resources``."""

    relative_uri: str = Field(alias="relativeUri")
    absolute_uri: str = Field(alias="absoluteUri")
    parent_url: str = Field("", alias="parentUrl")
    unique_id: str = Field(alias="uniqueId")
    display_name: str | None = Field(None, alias="displayName")
    description: str | None = None
    resource_type: str | None = Field(None, alias="type")
    uri_parameters: list[Parameter] = Field(default_factory=list, alias="uriParameters")
    methods: list[Method] = []
    resources: list[Resource] = []

    model_config = {"populate_by_name": True}


class DocumentationItem(BaseModel):
    title: str
    content: str = ""
    unique_id: str = Field(alias="uniqueId")

    model_config = {"populate_by_name": True}


class TypeDeclaration(BaseModel):
    name: str
    type: str | None = None
    description: str | None = None
    properties: list[Parameter] = []
    example: Any = None
    schema_content: str | None = Field(None, alias="schemaContent")

    model_config = {"populate_by_name": True}


class SecurityScheme(BaseModel):
    name: str
    type: str
    description: str | None = None
    settings: dict[str, Any] = {}


class ApiDocument(BaseModel):
    """Fully-built RAML API root, ready to be rendered."""

    title: str
    version: str | None = None
    base_uri: str | None = Field(None, alias="baseUri")
    description: str | None = None
    media_type: list[str] = Field(default_factory=list, alias="mediaType")
    protocols: list[str] = []
    documentation: list[DocumentationItem] = []
    base_uri_parameters: list[Parameter] = Field(default_factory=list, alias="baseUriParameters")
    types: list[TypeDeclaration] = []
    security_schemes: list[SecurityScheme] = Field(default_factory=list, alias="securitySchemes")
    secured_by: list[str] = Field(default_factory=list, alias="securedBy")
    resources: list[Resource] = []

    model_config = {"populate_by_name": True}

    def all_resources(self) -> list[Resource]:
        """Depth-first flattening of the resource tree."""
        out: list[Resource] = []
        stack = list(reversed(self.resources))
        while stack:
            resource = stack.pop()
            out.append(resource)
            stack.extend(reversed(resource.resources))
        return out
