"""oapigen - Generate Go client packages from OpenAPI and Swagger documents.

oapigen reads an API description (Swagger 2.0 or OpenAPI 3.x, JSON or YAML,
from a file or URL), upgrades it to the canonical OpenAPI 3 model, extracts
services, methods and models, and emits a self-contained Go client package
built on ``net/http``.

Quick Start:
    >>> from oapigen import Codegen, DocumentConfig
    >>>
    >>> config = DocumentConfig(
    ...     source="https://petstore.swagger.io/v2/swagger.json",
    ...     output="./petstore",
    ...     package="petstore",
    ... )
    >>> codegen = Codegen(config)
    >>> codegen.generate()

CLI Usage:
    $ oapigen generate ./api.yaml -o ./client -p client
    $ oapigen generate  # Process the documents of oapigen.yaml
    $ oapigen inspect ./api.yaml  # Show services, methods and models
"""

from importlib.metadata import PackageNotFoundError, version

from oapigen.codegen.codegen import Codegen
from oapigen.codegen.extractor import ModelExtractor
from oapigen.codegen.naming import normalize
from oapigen.codegen.schema_loader import Dialect, SchemaLoader
from oapigen.config import CodegenConfig, DocumentConfig, get_config
from oapigen.exceptions import (
    CodeGenerationError,
    ConfigurationError,
    OapigenError,
    OutputError,
    SchemaError,
    SchemaLoadError,
    SchemaUpgradeError,
    SchemaValidationError,
    UnknownDialectError,
)

__all__ = [
    # Main classes
    'Codegen',
    'SchemaLoader',
    'Dialect',
    'ModelExtractor',
    'normalize',
    # Configuration
    'CodegenConfig',
    'DocumentConfig',
    'get_config',
    # Exceptions
    'OapigenError',
    'SchemaError',
    'SchemaLoadError',
    'UnknownDialectError',
    'SchemaValidationError',
    'SchemaUpgradeError',
    'CodeGenerationError',
    'ConfigurationError',
    'OutputError',
]

try:
    __version__ = version('oapigen')
except PackageNotFoundError:
    __version__ = 'unknown'
