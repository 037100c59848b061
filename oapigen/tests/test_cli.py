"""Test CLI functionality."""

import json
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from oapigen.cli import app
from oapigen.codegen.ir import Diagnostic, DiagnosticKind
from oapigen.config import CodegenConfig, DocumentConfig
from oapigen.exceptions import ConfigurationError, SchemaLoadError

from oapigen.tests.fixtures import PETSTORE_SPEC


@pytest.fixture
def runner():
    """Fixture providing CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_config():
    """Fixture providing sample configuration."""
    return CodegenConfig(
        documents=[
            DocumentConfig(
                source='https://api.example.com/openapi.json',
                output='./generated',
                package='example',
            )
        ]
    )


@pytest.fixture
def mock_codegen():
    """Fixture patching Codegen with a mock producing one file."""
    with patch('oapigen.cli.Codegen') as mock_codegen_class:
        instance = MagicMock()
        instance.generate.return_value = ['generated/doc.go']
        instance.diagnostics = ()
        mock_codegen_class.return_value = instance
        yield mock_codegen_class


class TestGenerateCommand:
    """Test the generate command."""

    @patch('oapigen.cli.get_config')
    def test_generate_without_config_file(
        self, mock_get_config, mock_codegen, runner, sample_config
    ):
        """Test generate command without specifying config file."""
        mock_get_config.return_value = sample_config

        result = runner.invoke(app, ['generate'])

        assert result.exit_code == 0
        mock_get_config.assert_called_once_with(None)
        mock_codegen.assert_called_once_with(sample_config.documents[0])
        mock_codegen.return_value.generate.assert_called_once()
        assert 'generated/doc.go' in result.stdout

    @patch('oapigen.cli.get_config')
    def test_generate_with_short_config_option(
        self, mock_get_config, mock_codegen, runner, sample_config
    ):
        """Test generate command with short config option."""
        mock_get_config.return_value = sample_config

        result = runner.invoke(app, ['generate', '-c', 'custom-config.yaml'])

        assert result.exit_code == 0
        mock_get_config.assert_called_once_with('custom-config.yaml')

    @patch('oapigen.cli.get_config')
    def test_generate_with_source(self, mock_get_config, mock_codegen, runner):
        """Test that a SOURCE argument bypasses the configuration file."""
        result = runner.invoke(
            app, ['generate', 'petstore.yaml', '-o', './petstore', '-p', 'petstore']
        )

        assert result.exit_code == 0
        mock_get_config.assert_not_called()
        mock_codegen.assert_called_once_with(
            DocumentConfig(source='petstore.yaml', output='./petstore', package='petstore')
        )

    @patch('oapigen.cli.get_config')
    def test_generate_source_defaults(self, mock_get_config, mock_codegen, runner):
        """Test the output directory used without -o."""
        result = runner.invoke(app, ['generate', 'petstore.yaml'])

        assert result.exit_code == 0
        config = mock_codegen.call_args.args[0]
        assert config.output == '.'
        assert config.package == 'client'

    @patch('oapigen.cli.get_config')
    def test_options_override_config(
        self, mock_get_config, mock_codegen, runner, sample_config
    ):
        """Test that command line options override configured documents."""
        mock_get_config.return_value = sample_config

        result = runner.invoke(
            app,
            ['generate', '--package', 'override', '--dialect', 'swagger', '--match-tags', '--clean'],
        )

        assert result.exit_code == 0
        config = mock_codegen.call_args.args[0]
        assert config.source == 'https://api.example.com/openapi.json'
        assert config.package == 'override'
        assert config.dialect == 'swagger'
        assert config.match_tags is True
        assert config.clean is True

    @patch('oapigen.cli.get_config')
    def test_multiple_documents(self, mock_get_config, mock_codegen, runner):
        """Test that every configured document is generated."""
        mock_get_config.return_value = CodegenConfig(
            documents=[
                DocumentConfig(source='a.yaml', output='./a'),
                DocumentConfig(source='b.yaml', output='./b'),
            ]
        )

        result = runner.invoke(app, ['generate'])

        assert result.exit_code == 0
        assert mock_codegen.call_count == 2

    def test_invalid_package(self, mock_codegen, runner):
        """Test that an invalid package name is reported."""
        result = runner.invoke(app, ['generate', 'petstore.yaml', '-p', '1bad'])

        assert result.exit_code == 1
        assert 'Error' in result.stdout
        mock_codegen.assert_not_called()

    @patch('oapigen.cli.get_config')
    def test_configuration_error(self, mock_get_config, runner):
        """Test that a missing configuration exits with an error."""
        mock_get_config.side_effect = ConfigurationError('No configuration found')

        result = runner.invoke(app, ['generate'])

        assert result.exit_code == 1
        assert 'No configuration found' in result.stdout

    def test_generation_error(self, mock_codegen, runner):
        """Test that generation errors exit with an error."""
        mock_codegen.return_value.generate.side_effect = SchemaLoadError('petstore.yaml')

        result = runner.invoke(app, ['generate', 'petstore.yaml'])

        assert result.exit_code == 1
        assert 'Error' in result.stdout

    def test_diagnostics_printed(self, mock_codegen, runner):
        """Test that skipped elements are reported."""
        mock_codegen.return_value.diagnostics = (
            Diagnostic(DiagnosticKind.MULTI_TAG_OPERATION, 'skipped', location='GET /a'),
        )

        result = runner.invoke(app, ['generate', 'petstore.yaml'])

        assert result.exit_code == 0
        assert 'multi-tag-operation' in result.stdout


class TestInspectCommand:
    """Test the inspect command."""

    def test_inspect(self, runner, tmp_path):
        """Test the overview of a document."""
        source = tmp_path / 'petstore.json'
        source.write_text(json.dumps(PETSTORE_SPEC))

        result = runner.invoke(app, ['inspect', str(source), '--match-tags'])

        assert result.exit_code == 0
        assert 'Petstore' in result.stdout
        assert 'Pets' in result.stdout
        assert 'ListPets' in result.stdout
        assert 'Inventory' in result.stdout
        assert 'PetName' in result.stdout

    def test_inspect_missing_file(self, runner, tmp_path):
        """Test that load errors exit with an error."""
        result = runner.invoke(app, ['inspect', str(tmp_path / 'missing.json')])

        assert result.exit_code == 1
        assert 'Error' in result.stdout


class TestVersionCommand:
    """Test the version command."""

    def test_version(self, runner):
        """Test that the version is printed."""
        result = runner.invoke(app, ['version'])

        assert result.exit_code == 0
        assert 'oapigen version' in result.stdout


class TestHelp:
    """Test help output."""

    def test_no_args_shows_help(self, runner):
        """Test that invoking without a command shows usage."""
        result = runner.invoke(app, [])

        assert 'generate' in result.output
        assert 'inspect' in result.output
