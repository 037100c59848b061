"""Test suite for oapigen exceptions."""

import pytest

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


class TestOapigenError:
    """Tests for the base OapigenError exception."""

    def test_basic_message(self):
        """Test that the error stores the message."""
        error = OapigenError('Something went wrong')
        assert error.message == 'Something went wrong'
        assert str(error) == 'Something went wrong'

    @pytest.mark.parametrize(
        'error',
        [
            SchemaLoadError('api.yaml'),
            UnknownDialectError('api.yaml'),
            SchemaValidationError('api.yaml'),
            SchemaUpgradeError('api.yaml'),
            CodeGenerationError('failed'),
            ConfigurationError('invalid'),
            OutputError('./out'),
        ],
    )
    def test_inheritance(self, error):
        """Test that every error can be caught as OapigenError."""
        assert isinstance(error, OapigenError)

    def test_schema_errors(self):
        """Test the schema error family."""
        for error in (
            SchemaLoadError('a'),
            UnknownDialectError('a'),
            SchemaValidationError('a'),
            SchemaUpgradeError('a'),
        ):
            assert isinstance(error, SchemaError)


class TestSchemaErrors:
    """Tests for loading errors."""

    def test_load_error_with_cause(self):
        """Test that the cause is kept and shown."""
        cause = FileNotFoundError('File not found: api.yaml')
        error = SchemaLoadError('api.yaml', cause=cause)

        assert error.source == 'api.yaml'
        assert error.cause is cause
        assert str(error) == "Failed to load schema from 'api.yaml': File not found: api.yaml"

    def test_load_error_without_cause(self):
        """Test the message without a cause."""
        assert str(SchemaLoadError('api.yaml')) == "Failed to load schema from 'api.yaml'"

    def test_unknown_dialect(self):
        """Test the message of an undetectable dialect."""
        error = UnknownDialectError('api.json')

        assert error.source == 'api.json'
        assert "'swagger' or 'openapi'" in str(error)

    def test_validation_error(self):
        """Test that validation errors are joined into the message."""
        error = SchemaValidationError('api.json', errors=['info: Field required', 'paths: bad'])

        assert error.errors == ['info: Field required', 'paths: bad']
        assert str(error).endswith(': info: Field required; paths: bad')

    def test_validation_error_without_errors(self):
        """Test that errors default to an empty list."""
        assert SchemaValidationError('api.json').errors == []

    def test_upgrade_error(self):
        """Test the message of a failed upgrade."""
        error = SchemaUpgradeError('swagger.json', cause=ValueError('bad ref'))

        assert str(error) == "Failed to convert 'swagger.json' to an OpenAPI schema: bad ref"


class TestCodeGenerationError:
    """Tests for emission errors."""

    def test_context_and_cause(self):
        """Test the message with context and cause."""
        error = CodeGenerationError('Failed', context='api_pet.go', cause=KeyError('x'))

        assert error.context == 'api_pet.go'
        assert str(error) == "Failed (while generating api_pet.go): 'x'"

    def test_message_only(self):
        """Test the message without context."""
        assert str(CodeGenerationError('Failed')) == 'Failed'


class TestConfigurationError:
    """Tests for configuration errors."""

    def test_path_and_field(self):
        """Test the message with path and field."""
        error = ConfigurationError('Invalid', config_path='oapigen.yaml', field='documents.0.package')

        assert error.config_path == 'oapigen.yaml'
        assert error.field == 'documents.0.package'
        assert str(error) == "Invalid in 'oapigen.yaml' (field: documents.0.package)"

    def test_message_only(self):
        """Test the message without path and field."""
        assert str(ConfigurationError('Invalid')) == 'Invalid'


class TestOutputError:
    """Tests for output errors."""

    def test_with_cause(self):
        """Test the message with a cause."""
        error = OutputError('./out', cause=PermissionError('denied'))

        assert error.output_path == './out'
        assert str(error) == "Failed to write output to './out': denied"
