"""Code generation module for oapigen.

This module provides the ``Codegen`` class that runs one document through
the whole pipeline: load, extract, emit and write.
"""

import logging

from oapigen.codegen.emitter import GoEmitter, write_files
from oapigen.codegen.extractor import ModelExtractor
from oapigen.codegen.ir import API, Diagnostic
from oapigen.codegen.schema_loader import SchemaLoader
from oapigen.config import DocumentConfig
from oapigen.openapi.v3 import OpenAPI

logger = logging.getLogger(__name__)


class Codegen:
    """Generates a Go client package from an OpenAPI or Swagger document.

    Each stage runs once; later stages trigger the earlier ones on demand.

    Attributes:
        config: The DocumentConfig of the document.
        diagnostics: Soft failures recorded during extraction. Empty until
            ``extract()`` has run.

    Example:
        >>> from oapigen.config import DocumentConfig
        >>> from oapigen.codegen import Codegen
        >>>
        >>> config = DocumentConfig(
        ...     source='https://api.example.com/openapi.json',
        ...     output='./petstore',
        ...     package='petstore',
        ... )
        >>> Codegen(config).generate()
        # Writes doc.go, client.go, api_*.go, model_*.go and utils.go
    """

    def __init__(
        self, config: DocumentConfig, schema_loader: SchemaLoader | None = None
    ):
        """Initialize the code generator.

        Args:
            config: Configuration specifying source document and output location.
            schema_loader: Optional custom schema loader. If not provided,
                          a default SchemaLoader will be created.
        """
        self.config = config
        self._schema_loader = schema_loader or SchemaLoader()
        self.openapi: OpenAPI | None = None
        self.api: API | None = None
        self.diagnostics: tuple[Diagnostic, ...] = ()

    def load(self) -> OpenAPI:
        """Load the document and upgrade it to OpenAPI 3 if necessary."""
        if self.openapi is None:
            logger.info(f'Loading {self.config.source}')
            self.openapi = self._schema_loader.load(
                self.config.source, dialect=self.config.dialect
            )
        return self.openapi

    def extract(self) -> API:
        """Build the intermediate representation of the document."""
        if self.api is None:
            extractor = ModelExtractor(self.load(), match_tags=self.config.match_tags)
            self.api = extractor.extract()
            self.diagnostics = self.api.diagnostics
            if self.diagnostics:
                logger.info(
                    f'{len(self.diagnostics)} element(s) of {self.config.source} were skipped'
                )
        return self.api

    def emit(self) -> dict[str, str]:
        """Render the Go sources, keyed by file name."""
        emitter = GoEmitter(
            self.extract(),
            package=self.config.package,
            document=self.load(),
            embed_schema=self.config.embed_schema,
            format_code=self.config.format_code,
        )
        return emitter.emit()

    def generate(self) -> list[str]:
        """Run the whole pipeline and write the files.

        Returns:
            Paths of the written files.

        Raises:
            SchemaError: The document could not be loaded.
            CodeGenerationError: A file could not be generated.
            OutputError: The output could not be written.
        """
        files = self.emit()
        written = write_files(files, self.config.output, clean=self.config.clean)
        logger.info(f'Wrote {len(written)} file(s) to {self.config.output}')
        return written
