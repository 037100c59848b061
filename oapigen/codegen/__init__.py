"""Code generation module for oapigen.

This module provides the pipeline that turns an API description into a Go
client package.

Main Components:
    - Codegen: The orchestrator running one document through the pipeline
    - SchemaLoader: Loads Swagger 2.0 / OpenAPI 3 documents from URLs or files
    - ModelExtractor: Builds the intermediate representation (services,
      methods, models and diagnostics)
    - TypeMapper: Maps schemas to Go type names
    - GoEmitter: Renders the Go source files

Example:
    >>> from oapigen.codegen import Codegen
    >>> from oapigen.config import DocumentConfig
    >>>
    >>> config = DocumentConfig(
    ...     source="./openapi.json",
    ...     output="./client"
    ... )
    >>> codegen = Codegen(config)
    >>> codegen.generate()
"""

from oapigen.codegen.codegen import Codegen
from oapigen.codegen.emitter import GoEmitter, write_files
from oapigen.codegen.extractor import ModelExtractor
from oapigen.codegen.ir import API, Diagnostic, DiagnosticKind, Method, Model, Service
from oapigen.codegen.naming import normalize
from oapigen.codegen.schema_loader import Dialect, SchemaLoader
from oapigen.codegen.type_mapper import TypeMapper, map_type

__all__ = [
    # Main classes
    'Codegen',
    'SchemaLoader',
    'Dialect',
    'ModelExtractor',
    'TypeMapper',
    'GoEmitter',
    # Intermediate representation
    'API',
    'Service',
    'Method',
    'Model',
    'Diagnostic',
    'DiagnosticKind',
    # Functions
    'map_type',
    'normalize',
    'write_files',
]
