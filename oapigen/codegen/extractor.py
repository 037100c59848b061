"""Model extraction: from an OpenAPI document to the intermediate representation.

``ModelExtractor`` partitions operations into services by tag, builds one
method per (path, verb) pair with classified and ordered parameters, and
collects the document's schemas as models. Extraction never raises on bad
input: unresolved types and references, name collisions and unsupported
tag layouts are recorded as diagnostics and the offending element is
skipped.

Example:
    >>> extractor = ModelExtractor(spec)
    >>> api = extractor.extract()
    >>> for service in api.services:
    ...     print(service.name, [m.name for m in service.methods])
"""

import dataclasses
import logging
import re

from oapigen.codegen.ir import (
    API,
    CALL_SUFFIX,
    DEFAULT_SERVICE_NAME,
    Diagnostic,
    DiagnosticKind,
    Method,
    Model,
    Parameter,
    ParameterLocation,
    Property,
    Service,
)
from oapigen.codegen.naming import DIGIT_PREFIX, normalize
from oapigen.codegen.type_mapper import TypeMapper
from oapigen.openapi.v3 import MediaType, OpenAPI, Operation, Schema

logger = logging.getLogger(__name__)

__all__ = ['ModelExtractor']

PLACEHOLDER = re.compile(r'\{([^}]*)\}')

RETRIEVE_WORD = 'Get'

JSON_MEDIA_TYPE = 'application/json'


@dataclasses.dataclass
class _Bucket:
    """Operations attached to one service while partitioning."""

    raw_name: str
    name: str
    description: str | None = None
    is_default: bool = False
    # path -> verb -> operation
    operations: dict[str, dict[str, Operation]] = dataclasses.field(
        default_factory=dict
    )

    def attach(self, path: str, verb: str, operation: Operation) -> None:
        self.operations.setdefault(path, {})[verb] = operation


class ModelExtractor:
    """Builds the IR of one document.

    Service and method discovery run once per instance; later calls return
    the memoized result. The method-collision set is scoped to the instance,
    so separate extractors never share state.

    Args:
        document: The canonical OpenAPI document.
        match_tags: Attach a single-tag operation only to the service of its
            own tag. By default it is attached to every tag service.
    """

    def __init__(self, document: OpenAPI, match_tags: bool = False):
        self._document = document
        self._match_tags = match_tags
        self._types = TypeMapper(document)
        self._diagnostics: list[Diagnostic] = []
        self._seen: set[str] = set()

        self._buckets: dict[str, _Bucket] | None = None
        self._methods: dict[str, tuple[Method, ...]] | None = None
        self._services: tuple[Service, ...] | None = None
        self._models: tuple[Model, ...] | None = None

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    def extract(self) -> API:
        """Build the complete IR: services, models and diagnostics."""
        services = self.get_services()
        models = self.get_models()
        return API(
            title=self._document.info.title,
            version=self._document.info.version,
            base_path=self._base_path(),
            services=services,
            models=models,
            diagnostics=self.diagnostics,
        )

    def get_methods(self) -> dict[str, tuple[Method, ...]]:
        """Methods of every service, keyed by normalized service name."""
        if self._methods is None:
            methods = {}
            for name, bucket in self._partition().items():
                methods[name] = self._build_methods(bucket)
            self._methods = methods
        return self._methods

    def get_services(self) -> tuple[Service, ...]:
        """Services sorted by normalized name, each with its sorted methods."""
        if self._services is None:
            methods = self.get_methods()
            buckets = self._partition()
            self._services = tuple(
                Service(
                    raw_name=buckets[name].raw_name,
                    name=name,
                    description=buckets[name].description,
                    methods=methods[name],
                    is_default=buckets[name].is_default,
                )
                for name in sorted(buckets)
            )
        return self._services

    def get_models(self) -> tuple[Model, ...]:
        """Models of ``components.schemas``, sorted by raw schema name."""
        if self._models is None:
            self._models = self._build_models()
        return self._models

    # ------------------------------------------------------------------
    # Service partitioning
    # ------------------------------------------------------------------

    def _partition(self) -> dict[str, _Bucket]:
        if self._buckets is not None:
            return self._buckets

        buckets: dict[str, _Bucket] = {}
        tags = self._document.tags or []

        if not tags:
            default = self._default_bucket(buckets)
            for path, verb, operation in self._operations():
                default.attach(path, verb, operation)
            self._buckets = buckets
            return buckets

        for tag in tags:
            if not tag.name:
                continue
            name = normalize(tag.name, True)
            if name in buckets:
                self._record(
                    DiagnosticKind.SERVICE_NAME_COLLISION,
                    f"tag '{tag.name}' normalizes to '{name}' like tag "
                    f"'{buckets[name].raw_name}'; merged into one service",
                    level=logging.DEBUG,
                )
                continue
            buckets[name] = _Bucket(tag.name, name, tag.description)
        tag_buckets = list(buckets.values())

        for path, verb, operation in self._operations():
            op_tags = operation.tags or []
            if not op_tags:
                self._default_bucket(buckets).attach(path, verb, operation)
            elif len(op_tags) == 1:
                for bucket in self._targets(op_tags[0], tag_buckets, buckets):
                    bucket.attach(path, verb, operation)
            else:
                self._record(
                    DiagnosticKind.MULTI_TAG_OPERATION,
                    f'operation has {len(op_tags)} tags ({", ".join(op_tags)}); skipped',
                    location=f'{verb} {path}',
                )

        self._buckets = buckets
        return buckets

    def _targets(
        self, tag: str, tag_buckets: list[_Bucket], buckets: dict[str, _Bucket]
    ) -> list[_Bucket]:
        """Services a single-tag operation attaches to."""
        if self._match_tags:
            matching = [b for b in tag_buckets if b.raw_name == tag]
            return matching or [self._default_bucket(buckets)]
        return tag_buckets or [self._default_bucket(buckets)]

    def _default_bucket(self, buckets: dict[str, _Bucket]) -> _Bucket:
        name = normalize(DEFAULT_SERVICE_NAME, True)
        bucket = buckets.get(name)
        if bucket is None:
            bucket = _Bucket(DEFAULT_SERVICE_NAME, name, is_default=True)
            buckets[name] = bucket
        elif not bucket.is_default:
            # A declared "default" tag doubles as the default service.
            bucket.is_default = True
        return bucket

    def _operations(self):
        for path in sorted(self._document.paths):
            for verb, operation in sorted(self._document.paths[path].operations().items()):
                yield path, verb, operation

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------

    def _build_methods(self, bucket: _Bucket) -> tuple[Method, ...]:
        paths = sorted(bucket.operations)
        verbs = sorted({verb for ops in bucket.operations.values() for verb in ops})

        methods = []
        for path in paths:
            for verb in verbs:
                operation = bucket.operations[path].get(verb)
                if operation is None:
                    continue

                name = self._operation_name(operation, verb, path)
                call_type = f'{bucket.name}{name}{CALL_SUFFIX}'
                if call_type in self._seen:
                    self._record(
                        DiagnosticKind.METHOD_COLLISION,
                        f"'{name}' already defined in service '{bucket.name}'; skipped",
                        location=f'{verb} {path}',
                        level=logging.DEBUG,
                    )
                    continue
                self._seen.add(call_type)

                methods.append(self._build_method(name, verb, path, operation))
        return tuple(methods)

    def _operation_name(self, operation: Operation, verb: str, path: str) -> str:
        raw = operation.operationId or _synthesize_operation_id(verb, path)
        name = normalize(raw, True)
        if name != RETRIEVE_WORD:
            name = name.replace(RETRIEVE_WORD, '') or RETRIEVE_WORD
        if name[0].isdigit():
            name = DIGIT_PREFIX + name
        return name

    def _build_method(
        self, name: str, verb: str, path: str, operation: Operation
    ) -> Method:
        location = f'{verb} {path}'
        buckets = self._classify_parameters(operation, location)
        response_type, response_properties = self._response(operation, location)

        return Method(
            raw_operation_id=operation.operationId or '',
            name=name,
            verb=verb,
            path=path,
            summary=operation.summary,
            description=operation.description,
            path_params=self._order_path_params(
                path, buckets[ParameterLocation.PATH], location
            ),
            query_params=tuple(buckets[ParameterLocation.QUERY]),
            header_params=tuple(buckets[ParameterLocation.HEADER]),
            cookie_params=tuple(buckets[ParameterLocation.COOKIE]),
            response_type=response_type,
            response_properties=response_properties,
            deprecated=bool(operation.deprecated),
        )

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def _classify_parameters(
        self, operation: Operation, location: str
    ) -> dict[ParameterLocation, list[Parameter]]:
        buckets: dict[ParameterLocation, list[Parameter]] = {
            loc: [] for loc in ParameterLocation
        }

        for ref in operation.parameters or []:
            param = self._document.resolve_parameter(ref)
            if param is None:
                self._record(
                    DiagnosticKind.UNRESOLVED_REFERENCE,
                    f"parameter reference '{getattr(ref, 'ref', ref)}' not found; skipped",
                    location=location,
                )
                continue

            try:
                param_location = ParameterLocation(param.in_)
            except ValueError:
                self._record(
                    DiagnosticKind.UNRESOLVED_TYPE,
                    f"parameter '{param.name}' has unknown location '{param.in_}'; skipped",
                    location=location,
                )
                continue

            schema = param.schema_ or _content_schema(param.content)
            param_type = self._types.resolve(schema)
            if param_type is None:
                self._record(
                    DiagnosticKind.UNRESOLVED_TYPE,
                    f"parameter '{param.name}' has no mappable type; skipped",
                    location=location,
                )
                continue

            buckets[param_location].append(
                Parameter(
                    raw_name=param.name,
                    name=normalize(param.name, False),
                    location=param_location,
                    type=param_type,
                    required=bool(param.required) or param_location is ParameterLocation.PATH,
                    description=param.description,
                )
            )

        for loc, params in buckets.items():
            params.sort(key=lambda p: p.raw_name)
            buckets[loc] = self._drop_field_collisions(params, location)
        return buckets

    def _order_path_params(
        self, path: str, params: list[Parameter], location: str
    ) -> tuple[Parameter, ...]:
        """Order path parameters by their ``{placeholder}`` order in ``path``."""
        by_name = {param.raw_name: param for param in params}
        ordered: list[Parameter] = []

        for match in PLACEHOLDER.finditer(path):
            placeholder = match.group(1)
            param = by_name.get(placeholder)
            if param is None:
                self._record(
                    DiagnosticKind.UNMATCHED_PLACEHOLDER,
                    f"no path parameter declared for '{{{placeholder}}}'; left unsubstituted",
                    location=location,
                )
                continue
            if param not in ordered:
                ordered.append(param)

        for param in params:
            if param not in ordered:
                self._record(
                    DiagnosticKind.UNUSED_PATH_PARAMETER,
                    f"path parameter '{param.raw_name}' does not occur in the path; skipped",
                    location=location,
                )
        return tuple(ordered)

    # ------------------------------------------------------------------
    # Responses and models
    # ------------------------------------------------------------------

    def _response(
        self, operation: Operation, location: str
    ) -> tuple[str | None, tuple[Property, ...]]:
        """Resolve the success response to a type or to inline properties."""
        responses = operation.responses
        codes = ['200']
        codes += sorted(c for c in responses if c.startswith('2') and c != '200')
        codes.append('default')

        response = None
        for code in codes:
            if code in responses:
                response = self._document.resolve_response(responses[code])
                if response is None:
                    self._record(
                        DiagnosticKind.UNRESOLVED_REFERENCE,
                        f"response '{code}' reference not found",
                        location=location,
                    )
                break

        if response is None:
            return None, ()

        schema = _content_schema(response.content)
        if schema is None:
            return None, ()

        if schema.ref is None and schema.properties:
            return None, self._properties(schema, location)

        response_type = self._types.resolve(schema)
        if response_type is None:
            self._record(
                DiagnosticKind.UNRESOLVED_TYPE,
                'response schema has no mappable type',
                location=location,
            )
        return response_type, ()

    def _build_models(self) -> tuple[Model, ...]:
        models = []
        names: dict[str, str] = {}
        schemas = self._document.schemas

        for raw in sorted(schemas):
            schema = schemas[raw]
            name = normalize(raw, True)
            location = f'#/components/schemas/{raw}'

            if name in names:
                self._record(
                    DiagnosticKind.MODEL_NAME_COLLISION,
                    f"normalizes to '{name}' like schema '{names[name]}'; skipped",
                    location=location,
                )
                continue

            if schema.properties:
                models.append(
                    Model(
                        raw_name=raw,
                        name=name,
                        description=schema.description,
                        properties=self._properties(schema, location),
                    )
                )
                names[name] = raw
                continue

            alias_type = self._types.resolve(schema)
            if alias_type is None or alias_type == name:
                self._record(
                    DiagnosticKind.UNRESOLVED_TYPE,
                    'schema has no properties and no mappable type; skipped',
                    location=location,
                )
                continue
            models.append(
                Model(
                    raw_name=raw,
                    name=name,
                    description=schema.description,
                    alias_type=alias_type,
                )
            )
            names[name] = raw

        return tuple(models)

    def _properties(self, schema: Schema, location: str) -> tuple[Property, ...]:
        properties = []
        for raw in sorted(schema.properties or {}):
            prop = schema.properties[raw]
            prop_type = self._types.resolve(prop)
            if prop_type is None:
                self._record(
                    DiagnosticKind.UNRESOLVED_TYPE,
                    f"property '{raw}' has no mappable type; skipped",
                    location=location,
                )
                continue
            properties.append(
                Property(
                    raw_name=raw,
                    name=normalize(raw, True),
                    type=prop_type,
                    required=schema.is_required(raw),
                    description=prop.description,
                    is_model=self._types.is_model_reference(prop),
                )
            )
        return tuple(self._drop_field_collisions(properties, location))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _drop_field_collisions(self, fields: list, location: str) -> list:
        """Keep the first of several fields normalizing to the same identifier."""
        kept = []
        names: dict[str, str] = {}
        for field in fields:
            if field.name in names:
                self._record(
                    DiagnosticKind.FIELD_COLLISION,
                    f"'{field.raw_name}' normalizes to '{field.name}' like "
                    f"'{names[field.name]}'; skipped",
                    location=location,
                )
                continue
            names[field.name] = field.raw_name
            kept.append(field)
        return kept

    def _base_path(self) -> str:
        servers = self._document.servers or []
        if not servers:
            return '/'
        return servers[0].url

    def _record(
        self,
        kind: DiagnosticKind,
        message: str,
        location: str | None = None,
        level: int = logging.WARNING,
    ) -> None:
        diagnostic = Diagnostic(kind=kind, message=message, location=location)
        logger.log(level, str(diagnostic))
        self._diagnostics.append(diagnostic)


def _synthesize_operation_id(verb: str, path: str) -> str:
    """Operation id for operations that declare none, e.g. ``get-pets-petId``."""
    segments = [s.strip('{}') for s in path.split('/') if s]
    return '-'.join([verb.lower(), *segments])


def _content_schema(content: dict[str, MediaType] | None) -> Schema | None:
    """Schema of the JSON media type of ``content``, else of the first entry."""
    if not content:
        return None
    media = content.get(JSON_MEDIA_TYPE)
    if media is None:
        media = next((m for t, m in content.items() if 'json' in t), None)
    if media is None:
        media = next(iter(content.values()))
    return media.schema_
