"""Intermediate representation produced by the model extractor.

The IR is the contract between extraction and emission: services with their
methods, the methods' parameters, and the document's data models. Every
entity carries both the raw name from the API description and its
normalized Go identifier. All types are frozen and use tuples, so the IR
is read-only once published.
"""

import dataclasses
from enum import Enum

__all__ = [
    'DEFAULT_SERVICE_NAME',
    'CALL_SUFFIX',
    'ParameterLocation',
    'Parameter',
    'Property',
    'Model',
    'Method',
    'Service',
    'DiagnosticKind',
    'Diagnostic',
    'API',
]

DEFAULT_SERVICE_NAME = 'default'

# Suffix of the generated per-operation call struct.
CALL_SUFFIX = 'Call'


class ParameterLocation(str, Enum):
    PATH = 'path'
    QUERY = 'query'
    HEADER = 'header'
    COOKIE = 'cookie'


@dataclasses.dataclass(frozen=True)
class Parameter:
    raw_name: str
    name: str
    location: ParameterLocation
    type: str
    required: bool = False
    description: str | None = None


@dataclasses.dataclass(frozen=True)
class Property:
    raw_name: str
    name: str
    type: str
    required: bool = False
    description: str | None = None
    # Struct-valued (referenced model) properties are held by pointer.
    is_model: bool = False


@dataclasses.dataclass(frozen=True)
class Model:
    """A named schema of ``components.schemas``.

    Object schemas carry their properties; schemas without properties whose
    type resolves to a Go type become a named alias (``alias_type``).
    """

    raw_name: str
    name: str
    description: str | None = None
    properties: tuple[Property, ...] = ()
    alias_type: str | None = None

    @property
    def is_alias(self) -> bool:
        return self.alias_type is not None


@dataclasses.dataclass(frozen=True)
class Method:
    """One (path, HTTP verb) operation of a service."""

    raw_operation_id: str
    name: str
    verb: str
    path: str
    summary: str | None = None
    description: str | None = None
    path_params: tuple[Parameter, ...] = ()
    query_params: tuple[Parameter, ...] = ()
    header_params: tuple[Parameter, ...] = ()
    cookie_params: tuple[Parameter, ...] = ()
    response_type: str | None = None
    response_properties: tuple[Property, ...] = ()
    deprecated: bool = False

    @property
    def parameters(self) -> tuple[Parameter, ...]:
        return self.path_params + self.query_params + self.header_params + self.cookie_params

    def call_type(self, service_name: str) -> str:
        """Name of the generated per-operation call struct."""
        return f'{service_name}{self.name}{CALL_SUFFIX}'


@dataclasses.dataclass(frozen=True)
class Service:
    raw_name: str
    name: str
    description: str | None = None
    methods: tuple[Method, ...] = ()
    is_default: bool = False


class DiagnosticKind(str, Enum):
    SERVICE_NAME_COLLISION = 'service-name-collision'
    MODEL_NAME_COLLISION = 'model-name-collision'
    FIELD_COLLISION = 'field-collision'
    MULTI_TAG_OPERATION = 'multi-tag-operation'
    METHOD_COLLISION = 'method-collision'
    UNMATCHED_PLACEHOLDER = 'unmatched-placeholder'
    UNUSED_PATH_PARAMETER = 'unused-path-parameter'
    UNRESOLVED_TYPE = 'unresolved-type'
    UNRESOLVED_REFERENCE = 'unresolved-reference'


@dataclasses.dataclass(frozen=True)
class Diagnostic:
    """A soft failure recorded during extraction.

    The offending element was skipped (or passed through unchanged) and
    extraction went on.
    """

    kind: DiagnosticKind
    message: str
    location: str | None = None

    def __str__(self) -> str:
        if self.location:
            return f'[{self.kind.value}] {self.location}: {self.message}'
        return f'[{self.kind.value}] {self.message}'


@dataclasses.dataclass(frozen=True)
class API:
    """Root of the IR."""

    title: str
    version: str
    base_path: str
    services: tuple[Service, ...] = ()
    models: tuple[Model, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    def get_service(self, name: str) -> Service | None:
        for service in self.services:
            if service.name == name:
                return service
        return None
