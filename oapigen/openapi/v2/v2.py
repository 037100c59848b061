"""
Pydantic V2 models for the Swagger 2.0 specification.

Swagger 2.0 is the legacy dialect: documents are validated against these
models and then upgraded to the canonical OpenAPI 3 models with
``Swagger.upgrade()``. The generator never extracts from a Swagger model
directly.

Usage Example:
-------------

    from oapigen.openapi.v2 import Swagger

    swagger = Swagger.model_validate(document)
    spec, warnings = swagger.upgrade()
    for warning in warnings:
        print(warning)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from oapigen.openapi.v3 import OpenAPI

DEFAULT_MEDIA_TYPE = 'application/json'

REF_REWRITES = {
    '#/definitions/': '#/components/schemas/',
    '#/parameters/': '#/components/parameters/',
    '#/responses/': '#/components/responses/',
}


# ============================================================================
# Enums
# ============================================================================


class SchemeType(str, Enum):
    HTTP = 'http'
    HTTPS = 'https'
    WS = 'ws'
    WSS = 'wss'


class ParameterLocation(str, Enum):
    QUERY = 'query'
    HEADER = 'header'
    PATH = 'path'
    FORM_DATA = 'formData'
    BODY = 'body'


class CollectionFormat(str, Enum):
    CSV = 'csv'
    SSV = 'ssv'
    TSV = 'tsv'
    PIPES = 'pipes'
    MULTI = 'multi'


# ============================================================================
# Base Models
# ============================================================================


class BaseModelWithVendorExtensions(BaseModel):
    """Base model that allows vendor extensions (x- fields)."""

    model_config = ConfigDict(extra='allow', populate_by_name=True)


class JsonReference(BaseModel):
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    ref: str = Field(..., alias='$ref')


class Contact(BaseModelWithVendorExtensions):
    name: Optional[str] = None
    url: Optional[str] = None
    email: Optional[str] = None


class License(BaseModelWithVendorExtensions):
    name: str
    url: Optional[str] = None


class Info(BaseModelWithVendorExtensions):
    title: str
    version: str
    description: Optional[str] = None
    terms_of_service: Optional[str] = Field(None, alias='termsOfService')
    contact: Optional[Contact] = None
    license: Optional[License] = None


class ExternalDocs(BaseModelWithVendorExtensions):
    url: str
    description: Optional[str] = None


class Tag(BaseModelWithVendorExtensions):
    name: str
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = Field(None, alias='externalDocs')


# ============================================================================
# Schema, Parameter and Response Models
# ============================================================================


class Schema(BaseModelWithVendorExtensions):
    """Swagger 2.0 schema object (a JSON Schema draft 4 subset)."""

    ref: Optional[str] = Field(None, alias='$ref')
    title: Optional[str] = None
    type: Optional[str] = None
    format: Optional[str] = None
    description: Optional[str] = None
    default: Optional[Any] = None
    enum: Optional[List[Any]] = None
    required: Optional[List[str]] = None
    properties: Optional[Dict[str, Schema]] = None
    items: Optional[Union[Schema, List[Schema]]] = None
    additional_properties: Optional[Union[Schema, bool]] = Field(
        None, alias='additionalProperties'
    )
    all_of: Optional[List[Schema]] = Field(None, alias='allOf')
    discriminator: Optional[str] = None
    read_only: Optional[bool] = Field(None, alias='readOnly')
    example: Optional[Any] = None


class Items(BaseModelWithVendorExtensions):
    """Primitive items of a non-body array parameter or header."""

    type: Optional[str] = None
    format: Optional[str] = None
    items: Optional[Items] = None
    collection_format: Optional[CollectionFormat] = Field(
        None, alias='collectionFormat'
    )
    default: Optional[Any] = None
    enum: Optional[List[Any]] = None


class Parameter(BaseModelWithVendorExtensions):
    """
    Swagger 2.0 parameter.

    Body parameters carry ``schema``; every other location carries the
    primitive ``type``/``format``/``items`` triple.
    """

    name: str
    in_: ParameterLocation = Field(..., alias='in')
    description: Optional[str] = None
    required: Optional[bool] = None
    schema_: Optional[Schema] = Field(None, alias='schema')
    type: Optional[str] = None
    format: Optional[str] = None
    items: Optional[Items] = None
    collection_format: Optional[CollectionFormat] = Field(
        None, alias='collectionFormat'
    )
    allow_empty_value: Optional[bool] = Field(None, alias='allowEmptyValue')
    default: Optional[Any] = None
    enum: Optional[List[Any]] = None


class Header(BaseModelWithVendorExtensions):
    type: str
    format: Optional[str] = None
    items: Optional[Items] = None
    description: Optional[str] = None


class Response(BaseModelWithVendorExtensions):
    description: str
    schema_: Optional[Schema] = Field(None, alias='schema')
    headers: Optional[Dict[str, Header]] = None
    examples: Optional[Dict[str, Any]] = None


# ============================================================================
# Operation Models
# ============================================================================


class Operation(BaseModelWithVendorExtensions):
    tags: Optional[List[str]] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    external_docs: Optional[ExternalDocs] = Field(None, alias='externalDocs')
    operation_id: Optional[str] = Field(None, alias='operationId')
    consumes: Optional[List[str]] = None
    produces: Optional[List[str]] = None
    parameters: Optional[List[Union[JsonReference, Parameter]]] = None
    responses: Dict[str, Union[JsonReference, Response]] = Field(default_factory=dict)
    schemes: Optional[List[SchemeType]] = None
    deprecated: Optional[bool] = None
    security: Optional[List[Dict[str, List[str]]]] = None

    @field_validator('responses', mode='before')
    @classmethod
    def stringify_status_codes(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(code): response for code, response in value.items()}
        return value


class PathItem(BaseModelWithVendorExtensions):
    ref: Optional[str] = Field(None, alias='$ref')
    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    patch: Optional[Operation] = None
    parameters: Optional[List[Union[JsonReference, Parameter]]] = None


# ============================================================================
# Main Swagger Model
# ============================================================================


class Swagger(BaseModelWithVendorExtensions):
    """
    Root Swagger 2.0 specification object.

    This is the legacy document form; ``upgrade()`` converts it to the
    canonical OpenAPI 3 model.
    """

    swagger: Literal['2.0']
    info: Info
    host: Optional[str] = None
    base_path: Optional[str] = Field(None, alias='basePath')
    schemes: Optional[List[SchemeType]] = None
    consumes: Optional[List[str]] = None
    produces: Optional[List[str]] = None
    paths: Dict[str, PathItem] = Field(default_factory=dict)
    definitions: Optional[Dict[str, Schema]] = None
    parameters: Optional[Dict[str, Parameter]] = None
    responses: Optional[Dict[str, Response]] = None
    security_definitions: Optional[Dict[str, Any]] = Field(
        None, alias='securityDefinitions'
    )
    security: Optional[List[Dict[str, List[str]]]] = None
    tags: Optional[List[Tag]] = None
    external_docs: Optional[ExternalDocs] = Field(None, alias='externalDocs')

    @field_validator('paths', mode='before')
    @classmethod
    def drop_path_extensions(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: v for k, v in value.items() if not k.startswith('x-')}
        return value

    def upgrade(self) -> tuple[OpenAPI, List[str]]:
        """
        Upgrade this Swagger 2.0 specification to OpenAPI 3.0.

        Returns:
            A tuple of (OpenAPI 3.0 model, list of warnings).

        Warnings are generated for lossy conversions: missing host/basePath,
        collection formats without an exact OpenAPI 3 style and body
        parameters declared at path level.
        """
        warnings: List[str] = []

        openapi_dict: Dict[str, Any] = {
            'openapi': '3.0.3',
            'info': self._convert_info(),
            'paths': {
                path: self._convert_path_item(item, warnings)
                for path, item in self.paths.items()
            },
            'servers': self._convert_servers(warnings),
        }

        components = self._convert_components(warnings)
        if components:
            openapi_dict['components'] = components

        if self.security:
            openapi_dict['security'] = self.security

        if self.tags:
            openapi_dict['tags'] = [self._convert_tag(tag) for tag in self.tags]

        if self.external_docs:
            openapi_dict['externalDocs'] = self.external_docs.model_dump(
                by_alias=True, exclude_none=True
            )

        openapi_dict.update(self._extract_vendor_extensions(self))

        return OpenAPI.model_validate(openapi_dict), warnings

    def _convert_info(self) -> Dict[str, Any]:
        return self.info.model_dump(by_alias=True, exclude_none=True)

    def _convert_tag(self, tag: Tag) -> Dict[str, Any]:
        return tag.model_dump(by_alias=True, exclude_none=True)

    def _convert_servers(self, warnings: List[str]) -> List[Dict[str, Any]]:
        """Convert host, basePath, and schemes to servers array."""
        if not self.host and not self.base_path:
            warnings.append(
                "No host or basePath specified, defaulting to server URL '/'"
            )
            return [{'url': '/'}]

        schemes = self.schemes or [SchemeType.HTTP]
        host = self.host or ''
        base_path = self.base_path or ''

        if not host:
            return [{'url': base_path}]
        return [{'url': f'{scheme.value}://{host}{base_path}'} for scheme in schemes]

    def _convert_components(self, warnings: List[str]) -> Dict[str, Any]:
        """Convert definitions, parameters, responses, and security to components."""
        components: Dict[str, Any] = {}

        if self.definitions:
            components['schemas'] = {
                name: self._convert_schema(schema)
                for name, schema in self.definitions.items()
            }

        if self.parameters:
            parameters = {}
            for name, param in self.parameters.items():
                if param.in_ in (ParameterLocation.BODY, ParameterLocation.FORM_DATA):
                    warnings.append(
                        f"Global {param.in_.value} parameter '{name}' has no "
                        'OpenAPI 3 component equivalent and was dropped'
                    )
                    continue
                parameters[name] = self._convert_parameter(param, warnings)
            if parameters:
                components['parameters'] = parameters

        if self.responses:
            components['responses'] = {
                name: self._convert_response(response, self.produces)
                for name, response in self.responses.items()
            }

        if self.security_definitions:
            components['securitySchemes'] = self.security_definitions

        return components

    def _convert_path_item(
        self, path_item: PathItem, warnings: List[str]
    ) -> Dict[str, Any]:
        result: Dict[str, Any] = {}

        if path_item.ref:
            result['$ref'] = self._update_ref(path_item.ref)

        for method in ('get', 'put', 'post', 'delete', 'options', 'head', 'patch'):
            operation = getattr(path_item, method)
            if operation:
                result[method] = self._convert_operation(operation, warnings)

        if path_item.parameters:
            params = []
            for param in path_item.parameters:
                if isinstance(param, Parameter) and param.in_ in (
                    ParameterLocation.BODY,
                    ParameterLocation.FORM_DATA,
                ):
                    warnings.append(
                        f"Path-level {param.in_.value} parameter '{param.name}' "
                        'was dropped'
                    )
                    continue
                params.append(self._convert_parameter_item(param, warnings))
            if params:
                result['parameters'] = params

        result.update(self._extract_vendor_extensions(path_item))
        return result

    def _convert_operation(
        self, operation: Operation, warnings: List[str]
    ) -> Dict[str, Any]:
        result: Dict[str, Any] = {}

        for key in ('tags', 'summary', 'description', 'deprecated', 'security'):
            value = getattr(operation, key)
            if value:
                result[key] = value

        if operation.operation_id:
            result['operationId'] = operation.operation_id

        if operation.external_docs:
            result['externalDocs'] = operation.external_docs.model_dump(
                by_alias=True, exclude_none=True
            )

        consumes = operation.consumes or self.consumes or [DEFAULT_MEDIA_TYPE]
        if operation.parameters:
            params, request_body = self._convert_parameters(
                operation.parameters, consumes, warnings
            )
            if params:
                result['parameters'] = params
            if request_body:
                result['requestBody'] = request_body

        produces = operation.produces or self.produces
        result['responses'] = {
            code: (
                {'$ref': self._update_ref(response.ref)}
                if isinstance(response, JsonReference)
                else self._convert_response(response, produces)
            )
            for code, response in operation.responses.items()
        }

        if operation.schemes:
            host = self.host or ''
            base_path = self.base_path or ''
            result['servers'] = [
                {'url': f'{scheme.value}://{host}{base_path}' if host else base_path}
                for scheme in operation.schemes
            ]

        result.update(self._extract_vendor_extensions(operation))
        return result

    def _convert_parameters(
        self,
        parameters: List[Union[JsonReference, Parameter]],
        consumes: List[str],
        warnings: List[str],
    ) -> tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Split parameters into OpenAPI 3 parameters and a requestBody."""
        result_params = []
        body_param = None
        form_params = []

        for param in parameters:
            if isinstance(param, JsonReference):
                result_params.append({'$ref': self._update_ref(param.ref)})
            elif param.in_ == ParameterLocation.BODY:
                body_param = param
            elif param.in_ == ParameterLocation.FORM_DATA:
                form_params.append(param)
            else:
                result_params.append(self._convert_parameter(param, warnings))

        request_body = None
        if body_param:
            request_body = self._convert_body_parameter(body_param, consumes)
        elif form_params:
            request_body = self._convert_form_parameters(form_params)

        return result_params, request_body

    def _convert_parameter_item(
        self, param: Union[JsonReference, Parameter], warnings: List[str]
    ) -> Dict[str, Any]:
        if isinstance(param, JsonReference):
            return {'$ref': self._update_ref(param.ref)}
        return self._convert_parameter(param, warnings)

    def _convert_parameter(
        self, param: Parameter, warnings: List[str]
    ) -> Dict[str, Any]:
        """Convert a query/header/path parameter to OpenAPI 3.0 format."""
        result: Dict[str, Any] = {
            'name': param.name,
            'in': param.in_.value,
            'schema': self._primitive_schema(param),
        }

        if param.description:
            result['description'] = param.description

        if param.required or param.in_ == ParameterLocation.PATH:
            result['required'] = True

        if param.allow_empty_value:
            result['allowEmptyValue'] = True

        if param.type == 'array' and param.collection_format:
            style, explode = self._convert_collection_format(
                param.collection_format, param.in_, warnings
            )
            if style:
                result['style'] = style
            if explode is not None:
                result['explode'] = explode

        result.update(self._extract_vendor_extensions(param))
        return result

    def _convert_body_parameter(
        self, param: Parameter, consumes: List[str]
    ) -> Dict[str, Any]:
        schema = self._convert_schema(param.schema_) if param.schema_ else {}
        result: Dict[str, Any] = {
            'content': {media_type: {'schema': schema} for media_type in consumes}
        }
        if param.description:
            result['description'] = param.description
        if param.required:
            result['required'] = True
        return result

    def _convert_form_parameters(self, params: List[Parameter]) -> Dict[str, Any]:
        has_file = any(p.type == 'file' for p in params)
        media_type = (
            'multipart/form-data' if has_file else 'application/x-www-form-urlencoded'
        )

        properties = {p.name: self._primitive_schema(p) for p in params}
        required = [p.name for p in params if p.required]

        schema: Dict[str, Any] = {'type': 'object', 'properties': properties}
        if required:
            schema['required'] = required

        return {'content': {media_type: {'schema': schema}}}

    def _convert_collection_format(
        self,
        collection_format: CollectionFormat,
        location: ParameterLocation,
        warnings: List[str],
    ) -> tuple[Optional[str], Optional[bool]]:
        """Convert collectionFormat to a (style, explode) pair."""
        if collection_format == CollectionFormat.MULTI:
            return 'form', True
        if collection_format == CollectionFormat.CSV:
            style = 'form' if location == ParameterLocation.QUERY else 'simple'
            return style, False
        if collection_format == CollectionFormat.SSV:
            return 'spaceDelimited', False
        if collection_format == CollectionFormat.TSV:
            warnings.append(
                "collectionFormat 'tsv' has no direct equivalent in OpenAPI 3.0, "
                'using pipeDelimited'
            )
        return 'pipeDelimited', False

    def _convert_response(
        self, response: Response, produces: Optional[List[str]]
    ) -> Dict[str, Any]:
        result: Dict[str, Any] = {'description': response.description}

        if response.schema_:
            schema = self._convert_schema(response.schema_)
            result['content'] = {
                media_type: {'schema': schema}
                for media_type in (produces or [DEFAULT_MEDIA_TYPE])
            }

        if response.headers:
            result['headers'] = {
                name: {
                    'description': header.description,
                    'schema': self._primitive_schema(header),
                }
                if header.description
                else {'schema': self._primitive_schema(header)}
                for name, header in response.headers.items()
            }

        result.update(self._extract_vendor_extensions(response))
        return result

    def _primitive_schema(self, obj: Union[Parameter, Header, Items]) -> Dict[str, Any]:
        """Build a schema dict from the primitive type/format/items triple."""
        if obj.type == 'file':
            return {'type': 'string', 'format': 'binary'}

        result: Dict[str, Any] = {}
        if obj.type:
            result['type'] = obj.type
        if obj.format:
            result['format'] = obj.format
        if obj.items:
            result['items'] = self._primitive_schema(obj.items)
        if getattr(obj, 'enum', None):
            result['enum'] = obj.enum
        if getattr(obj, 'default', None) is not None:
            result['default'] = obj.default
        return result

    def _convert_schema(self, schema: Schema) -> Dict[str, Any]:
        """Convert a Schema object to OpenAPI 3.0 format, rewriting refs."""
        if schema.ref:
            return {'$ref': self._update_ref(schema.ref)}

        if schema.type == 'file':
            return {'type': 'string', 'format': 'binary'}

        result = schema.model_dump(
            by_alias=True,
            exclude_none=True,
            exclude={
                'ref',
                'properties',
                'items',
                'additional_properties',
                'all_of',
                'discriminator',
            },
        )

        if schema.properties:
            result['properties'] = {
                name: self._convert_schema(prop)
                for name, prop in schema.properties.items()
            }

        if isinstance(schema.items, list):
            # Tuple validation has no OpenAPI 3.0 form, keep the first item.
            if schema.items:
                result['items'] = self._convert_schema(schema.items[0])
        elif schema.items is not None:
            result['items'] = self._convert_schema(schema.items)

        if isinstance(schema.additional_properties, Schema):
            result['additionalProperties'] = self._convert_schema(
                schema.additional_properties
            )
        elif schema.additional_properties is not None:
            result['additionalProperties'] = schema.additional_properties

        if schema.all_of:
            result['allOf'] = [self._convert_schema(s) for s in schema.all_of]

        if schema.discriminator:
            result['discriminator'] = {'propertyName': schema.discriminator}

        return result

    def _update_ref(self, ref: str) -> str:
        """Update $ref paths from Swagger 2.0 to OpenAPI 3.0 format."""
        for old, new in REF_REWRITES.items():
            if ref.startswith(old):
                return new + ref[len(old):]
        return ref

    def _extract_vendor_extensions(
        self, obj: BaseModelWithVendorExtensions
    ) -> Dict[str, Any]:
        """Extract vendor extensions (x-*) from an object."""
        if obj.__pydantic_extra__:
            return {
                k: v for k, v in obj.__pydantic_extra__.items() if k.startswith('x-')
            }
        return {}


Schema.model_rebuild()
Items.model_rebuild()
Swagger.model_rebuild()
