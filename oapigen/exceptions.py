"""Custom exceptions for oapigen.

This module defines the exception hierarchy used throughout oapigen. Loading
errors are fatal and abort a run before any intermediate representation is
built; extraction problems are never raised but collected as diagnostics
(see ``oapigen.codegen.ir.Diagnostic``).
"""


class OapigenError(Exception):
    """Base exception for all oapigen errors.

    Example:
        try:
            codegen.generate()
        except OapigenError as e:
            print(f"oapigen error: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class SchemaError(OapigenError):
    """Base exception for schema-related errors."""

    pass


class SchemaLoadError(SchemaError):
    """Failed to load a specification document from a source.

    Raised when the document is missing, the path is a directory, the bytes
    cannot be read or parsed, or the URL cannot be fetched.

    Attributes:
        source: The source path or URL that failed to load.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to load schema from '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class UnknownDialectError(SchemaError):
    """The document carries no recognizable dialect marker.

    Attributes:
        source: The source path or URL of the document.
    """

    def __init__(self, source: str):
        self.source = source
        super().__init__(
            f"Could not detect the schema dialect of '{source}': "
            "expected a 'swagger' or 'openapi' marker"
        )


class SchemaValidationError(SchemaError):
    """Document does not match the model of its dialect.

    Attributes:
        source: The source path or URL of the invalid schema.
        errors: List of validation error messages.
    """

    def __init__(self, source: str, errors: list[str] | None = None):
        self.source = source
        self.errors = errors or []
        message = f"Schema validation failed for '{source}'"
        if errors:
            message += f': {"; ".join(errors)}'
        super().__init__(message)


class SchemaUpgradeError(SchemaError):
    """A legacy (Swagger 2.0) document could not be upgraded to OpenAPI 3.

    Attributes:
        source: The source path or URL of the legacy document.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to convert '{source}' to an OpenAPI schema"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class CodeGenerationError(OapigenError):
    """Error while emitting source code from the intermediate representation.

    Attributes:
        context: Additional context about what was being generated.
        cause: The underlying exception that caused the failure.
    """

    def __init__(
        self, message: str, context: str | None = None, cause: Exception | None = None
    ):
        self.context = context
        self.cause = cause
        full_message = message
        if context:
            full_message = f'{message} (while generating {context})'
        if cause:
            full_message += f': {cause}'
        super().__init__(full_message)


class ConfigurationError(OapigenError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class OutputError(OapigenError):
    """Error writing generated output.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)
