"""OpenAPI 3 specification models (the canonical document form)."""

from oapigen.openapi.v3.v3 import (
    HTTP_VERBS,
    Components,
    Contact,
    ExternalDocumentation,
    Header,
    Info,
    License,
    MediaType,
    OpenAPI,
    Operation,
    Parameter,
    PathItem,
    Reference,
    RequestBody,
    Response,
    Schema,
    Server,
    ServerVariable,
    Tag,
    component_name,
)

__all__ = [
    # Main model
    'OpenAPI',
    # Info models
    'Info',
    'Contact',
    'License',
    'Server',
    'ServerVariable',
    'Tag',
    'ExternalDocumentation',
    # Schema models
    'Schema',
    'Reference',
    # Operation models
    'Operation',
    'PathItem',
    'Parameter',
    'RequestBody',
    'MediaType',
    'Response',
    'Header',
    'Components',
    # Utilities
    'HTTP_VERBS',
    'component_name',
]
