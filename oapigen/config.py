import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from oapigen.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['oapigen.yaml', 'oapigen.yml']

PYPROJECT_TOOL = 'oapigen'


class DocumentConfig(BaseModel):
    """Represents a single document to be processed."""

    source: str = Field(..., description='Path or URL to the OpenAPI or Swagger document.')

    output: str = Field(..., description='Output directory for the generated Go package.')

    package: str = Field(
        'client', description='Go package name of the generated code.'
    )

    dialect: str | None = Field(
        None,
        description='Dialect of the document ("openapi" or "swagger"); detected when omitted.',
    )

    match_tags: bool = Field(
        False,
        description='Attach a single-tag operation only to the service of its own tag.',
    )

    embed_schema: bool = Field(
        True, description='Embed the gzipped schema document into client.go.'
    )

    format_code: bool = Field(
        True, description='Format the generated files with gofmt when available.'
    )

    clean: bool = Field(
        False, description='Remove previously generated files from the output directory.'
    )

    @field_validator('package')
    @classmethod
    def validate_package(cls, value: str) -> str:
        if not value.isidentifier() or not value.isascii():
            raise ValueError(f'{value!r} is not a valid Go package name')
        return value


class CodegenConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='OAPIGEN_')

    documents: list[DocumentConfig] = Field(
        ..., description='List of API documents to process.'
    )


def load_yaml(path: str | Path) -> dict:
    return yaml.safe_load(Path(path).read_text(encoding='utf-8')) or {}


def get_config(path: str | None = None) -> CodegenConfig:
    """Load configuration from a file or the project's default locations.

    Lookup order: the explicit ``path`` (YAML or JSON), ``oapigen.yaml`` /
    ``oapigen.yml`` in the working directory, then ``[tool.oapigen]`` in
    ``pyproject.toml``.

    Raises:
        ConfigurationError: No configuration was found, or it is invalid.
    """
    if path:
        if not Path(path).is_file():
            raise ConfigurationError('Configuration file not found', config_path=path)
        return _validate(_load(path), path)

    cwd = os.getcwd()

    for filename in DEFAULT_FILENAMES:
        candidate = Path(cwd) / filename
        if candidate.exists():
            return _validate(_load(candidate), str(candidate))

    candidate = Path(cwd) / 'pyproject.toml'

    if candidate.exists():
        import tomllib

        pyproject = tomllib.loads(candidate.read_text(encoding='utf-8'))
        tools = pyproject.get('tool', {})

        if PYPROJECT_TOOL in tools:
            return _validate(tools[PYPROJECT_TOOL], str(candidate))

    raise ConfigurationError(
        f'No configuration found: expected one of {", ".join(DEFAULT_FILENAMES)} '
        f'or [tool.{PYPROJECT_TOOL}] in pyproject.toml',
        config_path=cwd,
    )


def _load(path: str | Path) -> dict:
    try:
        return load_yaml(path)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f'Failed to read configuration: {e}', config_path=str(path))


def _validate(data: dict, source: str) -> CodegenConfig:
    try:
        return CodegenConfig.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = '.'.join(str(part) for part in first['loc'])
        raise ConfigurationError(
            f'Invalid configuration: {first["msg"]}', config_path=source, field=field
        )
