"""
Pydantic V2 models for the OpenAPI 3.0 specification.

This is the canonical in-memory document consumed by the model extractor.
Swagger 2.0 documents are upgraded into these models (see
``oapigen.openapi.v2.Swagger.upgrade``) before extraction starts.

Only the parts of the specification the generator reads are modelled
strictly; everything else is carried through as vendor data so that the
embedded schema descriptor round-trips the document.

Usage Example:
-------------

    from oapigen.openapi.v3 import OpenAPI

    spec = OpenAPI.model_validate(document)
    for path, item in spec.paths.items():
        for verb, operation in item.operations().items():
            print(verb, path, operation.operationId)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

HTTP_VERBS = ('get', 'put', 'post', 'delete', 'options', 'head', 'patch', 'trace')

COMPONENT_PREFIXES = {
    'schemas': '#/components/schemas/',
    'parameters': '#/components/parameters/',
    'responses': '#/components/responses/',
    'requestBodies': '#/components/requestBodies/',
}


# ============================================================================
# Base Models
# ============================================================================


class BaseModelWithVendorExtensions(BaseModel):
    """Base model that allows vendor extensions (x- fields)."""

    model_config = ConfigDict(extra='allow', populate_by_name=True)


class Reference(BaseModel):
    """JSON Reference object."""

    model_config = ConfigDict(extra='allow', populate_by_name=True)

    ref: str = Field(..., alias='$ref')


# ============================================================================
# Info Models
# ============================================================================


class Contact(BaseModelWithVendorExtensions):
    name: Optional[str] = None
    url: Optional[str] = None
    email: Optional[str] = None


class License(BaseModelWithVendorExtensions):
    name: str
    url: Optional[str] = None


class Info(BaseModelWithVendorExtensions):
    title: str
    description: Optional[str] = None
    termsOfService: Optional[str] = None
    contact: Optional[Contact] = None
    license: Optional[License] = None
    version: str


class ServerVariable(BaseModelWithVendorExtensions):
    enum: Optional[List[str]] = None
    default: str
    description: Optional[str] = None


class Server(BaseModelWithVendorExtensions):
    url: str
    description: Optional[str] = None
    variables: Optional[Dict[str, ServerVariable]] = None


class ExternalDocumentation(BaseModelWithVendorExtensions):
    description: Optional[str] = None
    url: str


class Tag(BaseModelWithVendorExtensions):
    """API tag for grouping operations."""

    name: str
    description: Optional[str] = None
    externalDocs: Optional[ExternalDocumentation] = None


# ============================================================================
# Schema Model
# ============================================================================


class Schema(BaseModelWithVendorExtensions):
    """
    Schema object.

    A ``$ref`` is kept on the schema itself (``Schema.ref``) rather than as a
    separate union member, so every property, item and additionalProperties
    slot has a single type.
    """

    ref: Optional[str] = Field(None, alias='$ref')
    title: Optional[str] = None
    type: Optional[str] = None
    format: Optional[str] = None
    description: Optional[str] = None
    required: Optional[List[str]] = None
    properties: Optional[Dict[str, Schema]] = None
    items: Optional[Schema] = None
    additionalProperties: Optional[Union[Schema, bool]] = None
    allOf: Optional[List[Schema]] = None
    oneOf: Optional[List[Schema]] = None
    anyOf: Optional[List[Schema]] = None
    enum: Optional[List[Any]] = None
    default: Optional[Any] = None
    nullable: Optional[bool] = None
    readOnly: Optional[bool] = None
    writeOnly: Optional[bool] = None
    deprecated: Optional[bool] = None
    example: Optional[Any] = None

    @field_validator('type', mode='before')
    @classmethod
    def reduce_type_list(cls, value: Any) -> Any:
        """Accept OpenAPI 3.1 type lists such as ``["string", "null"]``."""
        if isinstance(value, list):
            concrete = [t for t in value if t != 'null']
            return concrete[0] if concrete else None
        return value

    def is_required(self, name: str) -> bool:
        return name in (self.required or [])


# ============================================================================
# Parameter, Request and Response Models
# ============================================================================


class MediaType(BaseModelWithVendorExtensions):
    schema_: Optional[Schema] = Field(None, alias='schema')
    example: Optional[Any] = None
    examples: Optional[Dict[str, Any]] = None


class Parameter(BaseModelWithVendorExtensions):
    name: str
    in_: str = Field(..., alias='in')
    description: Optional[str] = None
    required: Optional[bool] = False
    deprecated: Optional[bool] = False
    allowEmptyValue: Optional[bool] = None
    style: Optional[str] = None
    explode: Optional[bool] = None
    schema_: Optional[Schema] = Field(None, alias='schema')
    content: Optional[Dict[str, MediaType]] = None
    example: Optional[Any] = None


class RequestBody(BaseModelWithVendorExtensions):
    description: Optional[str] = None
    content: Dict[str, MediaType]
    required: Optional[bool] = False


class Header(BaseModelWithVendorExtensions):
    description: Optional[str] = None
    required: Optional[bool] = False
    schema_: Optional[Schema] = Field(None, alias='schema')


class Response(BaseModelWithVendorExtensions):
    description: str
    headers: Optional[Dict[str, Union[Reference, Header]]] = None
    content: Optional[Dict[str, MediaType]] = None
    links: Optional[Dict[str, Any]] = None


# ============================================================================
# Operation Models
# ============================================================================


class Operation(BaseModelWithVendorExtensions):
    """Operation (HTTP method) on a path."""

    tags: Optional[List[str]] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    externalDocs: Optional[ExternalDocumentation] = None
    operationId: Optional[str] = None
    parameters: Optional[List[Union[Reference, Parameter]]] = None
    requestBody: Optional[Union[Reference, RequestBody]] = None
    responses: Dict[str, Union[Reference, Response]] = Field(default_factory=dict)
    callbacks: Optional[Dict[str, Any]] = None
    deprecated: Optional[bool] = False
    security: Optional[List[Dict[str, List[str]]]] = None
    servers: Optional[List[Server]] = None

    @field_validator('responses', mode='before')
    @classmethod
    def stringify_status_codes(cls, value: Any) -> Any:
        """YAML reads unquoted status codes such as ``200:`` as integers."""
        if isinstance(value, dict):
            return {str(code): response for code, response in value.items()}
        return value


class PathItem(BaseModelWithVendorExtensions):
    """Path item with operations."""

    ref: Optional[str] = Field(None, alias='$ref')
    summary: Optional[str] = None
    description: Optional[str] = None
    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    patch: Optional[Operation] = None
    trace: Optional[Operation] = None
    servers: Optional[List[Server]] = None
    parameters: Optional[List[Union[Reference, Parameter]]] = None

    def operations(self) -> Dict[str, Operation]:
        """Return the declared operations keyed by upper-case HTTP verb.

        Path-level parameters are merged into every operation; an
        operation-level parameter with the same name and location wins.
        """
        result: Dict[str, Operation] = {}
        for verb in HTTP_VERBS:
            operation = getattr(self, verb)
            if operation is None:
                continue
            if self.parameters:
                operation = operation.model_copy(
                    update={'parameters': self._merge_parameters(operation)}
                )
            result[verb.upper()] = operation
        return result

    def _merge_parameters(self, operation: Operation) -> List[Union[Reference, Parameter]]:
        declared = list(operation.parameters or [])
        seen = {
            (param.name, param.in_) for param in declared if isinstance(param, Parameter)
        }
        for param in self.parameters or []:
            if isinstance(param, Parameter) and (param.name, param.in_) in seen:
                continue
            declared.append(param)
        return declared


# ============================================================================
# Components and Root Models
# ============================================================================


class Components(BaseModelWithVendorExtensions):
    schemas: Optional[Dict[str, Schema]] = None
    responses: Optional[Dict[str, Union[Reference, Response]]] = None
    parameters: Optional[Dict[str, Union[Reference, Parameter]]] = None
    examples: Optional[Dict[str, Any]] = None
    requestBodies: Optional[Dict[str, Union[Reference, RequestBody]]] = None
    headers: Optional[Dict[str, Union[Reference, Header]]] = None
    securitySchemes: Optional[Dict[str, Any]] = None
    links: Optional[Dict[str, Any]] = None
    callbacks: Optional[Dict[str, Any]] = None


class OpenAPI(BaseModelWithVendorExtensions):
    """
    Root OpenAPI 3 document.

    This is the canonical, read-only specification document handed to the
    model extractor.
    """

    openapi: str = Field(..., pattern=r'^3\.\d+\.\d+(-.+)?$')
    info: Info
    externalDocs: Optional[ExternalDocumentation] = None
    servers: Optional[List[Server]] = None
    security: Optional[List[Dict[str, List[str]]]] = None
    tags: Optional[List[Tag]] = None
    paths: Dict[str, PathItem] = Field(default_factory=dict)
    components: Optional[Components] = None

    @field_validator('paths', mode='before')
    @classmethod
    def drop_path_extensions(cls, value: Any) -> Any:
        """Vendor extensions (x-*) are allowed next to paths; they are not paths."""
        if isinstance(value, dict):
            return {k: v for k, v in value.items() if not k.startswith('x-')}
        return value

    @property
    def schemas(self) -> Dict[str, Schema]:
        if self.components and self.components.schemas:
            return self.components.schemas
        return {}

    def resolve_schema(self, schema: Schema) -> tuple[Schema | None, str | None]:
        """Resolve a local schema reference one level.

        Returns:
            A ``(schema, component_name)`` tuple. Inline schemas are returned
            as-is with no name; unresolvable references yield ``(None, name)``.
        """
        if schema.ref is None:
            return schema, None
        name = component_name(schema.ref, 'schemas')
        if name is None:
            return None, None
        return self.schemas.get(name), name

    def resolve_parameter(self, param: Union[Reference, Parameter]) -> Parameter | None:
        """Resolve a ``#/components/parameters/`` reference one level."""
        if isinstance(param, Parameter):
            return param
        name = component_name(param.ref, 'parameters')
        if name is None or not self.components or not self.components.parameters:
            return None
        resolved = self.components.parameters.get(name)
        return resolved if isinstance(resolved, Parameter) else None

    def resolve_response(self, response: Union[Reference, Response]) -> Response | None:
        """Resolve a ``#/components/responses/`` reference one level."""
        if isinstance(response, Response):
            return response
        name = component_name(response.ref, 'responses')
        if name is None or not self.components or not self.components.responses:
            return None
        resolved = self.components.responses.get(name)
        return resolved if isinstance(resolved, Response) else None


def component_name(ref: str, kind: str) -> str | None:
    """Return the component name of a local ``$ref``, or None for foreign refs."""
    prefix = COMPONENT_PREFIXES[kind]
    if not ref.startswith(prefix):
        return None
    return ref[len(prefix):]


Schema.model_rebuild()
PathItem.model_rebuild()
OpenAPI.model_rebuild()
