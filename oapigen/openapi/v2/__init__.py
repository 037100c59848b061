"""Swagger 2.0 specification models (the legacy document form)."""

from oapigen.openapi.v2.v2 import (
    CollectionFormat,
    Contact,
    ExternalDocs,
    Header,
    Info,
    Items,
    JsonReference,
    License,
    Operation,
    Parameter,
    ParameterLocation,
    PathItem,
    Response,
    Schema,
    SchemeType,
    Swagger,
    Tag,
)

__all__ = [
    # Main model
    'Swagger',
    # Info models
    'Info',
    'Contact',
    'License',
    'Tag',
    'ExternalDocs',
    # Schema models
    'Schema',
    'Items',
    # Operation models
    'Parameter',
    'Header',
    'Response',
    'Operation',
    'PathItem',
    # Enums
    'SchemeType',
    'ParameterLocation',
    'CollectionFormat',
    # Utilities
    'JsonReference',
]
