"""Schema loading utilities for API description documents.

This module loads Swagger 2.0 and OpenAPI 3.x documents from local files or
URLs, JSON or YAML, detects which dialect a document is written in and
upgrades legacy documents so that the rest of the generator only ever sees
the canonical OpenAPI 3 model.
"""

import json
import logging
import re
from enum import Enum
from pathlib import Path
from urllib.parse import urlparse

import httpx
import yaml
from pydantic import ValidationError

from oapigen.exceptions import (
    SchemaLoadError,
    SchemaUpgradeError,
    SchemaValidationError,
    UnknownDialectError,
)
from oapigen.openapi import OpenAPI, Swagger

logger = logging.getLogger(__name__)

# First top-level marker key wins, whether the document is JSON or YAML.
_DIALECT_MARKER = re.compile(r'''["']?(swagger|openapi)["']?\s*:''')


class Dialect(str, Enum):
    """Specification dialect of an input document."""

    OPENAPI = 'openapi'
    SWAGGER = 'swagger'

    @classmethod
    def from_hint(cls, hint: 'str | Dialect | None') -> 'Dialect | None':
        """Return the dialect named by a caller hint, or None when it names none."""
        if hint is None:
            return None
        if isinstance(hint, Dialect):
            return hint
        try:
            return cls(hint.strip().lower())
        except ValueError:
            return None

    @classmethod
    def sniff(cls, text: str) -> 'Dialect | None':
        """Detect the dialect from the raw document text."""
        match = _DIALECT_MARKER.search(text)
        if match is None:
            return None
        return cls(match.group(1))


class SchemaLoader:
    """Loads API description documents from URLs or file paths.

    Features:
        - Load from URLs (http/https) or local file paths
        - Support for both JSON and YAML formats
        - Dialect detection from an explicit hint or the document text
        - Automatic upgrade of Swagger 2.0 documents to OpenAPI 3

    Example:
        >>> loader = SchemaLoader()
        >>> spec = loader.load('https://api.example.com/openapi.json')
        >>> # or, forcing the legacy dialect
        >>> spec = loader.load('/path/to/swagger.yaml', dialect='swagger')
    """

    def __init__(self, http_client: httpx.Client | None = None):
        """Initialize the schema loader.

        Args:
            http_client: Optional HTTP client to use for URL requests.
                        If not provided, ``httpx.get`` is used.
        """
        self._http_client = http_client
        self._upgrade_warnings: list[str] = []
        self._detected_dialect: Dialect | None = None

    def load(self, source: str, dialect: 'str | Dialect | None' = None) -> OpenAPI:
        """Load and validate a document from a URL or file path.

        Args:
            source: URL or file path of the document.
            dialect: Optional dialect hint (``"openapi"`` or ``"swagger"``).
                     Any other value is ignored and the dialect is sniffed
                     from the document text.

        Returns:
            The canonical OpenAPI 3 document.

        Raises:
            SchemaLoadError: The document cannot be read or parsed.
            UnknownDialectError: No dialect hint and no marker in the text.
            SchemaValidationError: The document does not match its dialect.
            SchemaUpgradeError: A Swagger 2.0 document could not be upgraded.
        """
        source = str(source)
        if self._is_url(source):
            text = self._load_from_url(source)
        else:
            text = self._load_from_file(source)

        content = self._parse(text, source)

        resolved = Dialect.from_hint(dialect) or Dialect.sniff(text)
        if resolved is None:
            raise UnknownDialectError(source)
        self._detected_dialect = resolved
        logger.debug(f'Loading {source} as {resolved.value}')

        return self._validate_and_upgrade(content, resolved, source)

    def get_upgrade_warnings(self) -> list[str]:
        """Get any warnings generated during the last schema upgrade."""
        return self._upgrade_warnings.copy()

    def get_detected_dialect(self) -> Dialect | None:
        """Dialect of the most recently loaded document."""
        return self._detected_dialect

    def _is_url(self, text: str) -> bool:
        """Check if a string is a URL."""
        try:
            result = urlparse(text)
            return result.scheme in ('http', 'https')
        except ValueError:
            return False

    def _load_from_url(self, url: str) -> str:
        """Fetch the raw document text from a URL."""
        try:
            if self._http_client:
                response = self._http_client.get(url)
            else:
                response = httpx.get(url, follow_redirects=True, timeout=30.0)
            response.raise_for_status()
            return response.text
        except httpx.HTTPError as e:
            raise SchemaLoadError(url, cause=e)

    def _load_from_file(self, file_path: str) -> str:
        """Read the raw document text from a file."""
        path = Path(file_path)

        if not path.exists():
            raise SchemaLoadError(
                file_path, cause=FileNotFoundError(f'File not found: {path}')
            )
        if path.is_dir():
            raise SchemaLoadError(
                file_path, cause=IsADirectoryError(f'Path is a directory: {path}')
            )

        try:
            return path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise SchemaLoadError(file_path, cause=e)

    def _parse(self, text: str, source: str) -> dict:
        """Parse JSON or YAML text into a mapping.

        YAML sources (by suffix) are parsed as YAML; everything else is tried
        as JSON first and then as YAML, since YAML is a superset of JSON.
        """
        try:
            if source.lower().endswith(('.yaml', '.yml')):
                content = yaml.safe_load(text)
            else:
                try:
                    content = json.loads(text)
                except json.JSONDecodeError:
                    content = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise SchemaLoadError(source, cause=e)

        if not isinstance(content, dict):
            raise SchemaLoadError(
                source,
                cause=ValueError(
                    f'Expected a mapping at the document root, got {type(content).__name__}'
                ),
            )
        return content

    def _validate_and_upgrade(
        self, content: dict, dialect: Dialect, source: str
    ) -> OpenAPI:
        """Validate content against its dialect and upgrade it to OpenAPI 3."""
        self._upgrade_warnings = []

        if dialect is Dialect.OPENAPI:
            try:
                return OpenAPI.model_validate(content)
            except ValidationError as e:
                raise SchemaValidationError(source, errors=_format_errors(e))

        try:
            swagger = Swagger.model_validate(content)
        except ValidationError as e:
            raise SchemaValidationError(source, errors=_format_errors(e))

        try:
            spec, warnings = swagger.upgrade()
        except Exception as e:
            raise SchemaUpgradeError(source, cause=e)

        for warning in warnings:
            logger.warning(f'{source}: {warning}')
        self._upgrade_warnings.extend(warnings)
        return spec


def _format_errors(error: ValidationError) -> list[str]:
    """Flatten pydantic validation errors into ``loc: message`` strings."""
    return [
        f"{'.'.join(str(part) for part in detail['loc']) or '<root>'}: {detail['msg']}"
        for detail in error.errors()
    ]
