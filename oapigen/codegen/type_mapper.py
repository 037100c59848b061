"""Mapping of specification types to Go types.

``map_type`` is the flat table lookup for a ``(type, format)`` pair.
``TypeMapper`` resolves a whole schema against its document: references to
object models become the model's identifier, arrays become slices and
objects with an ``additionalProperties`` shape resolve that shape. The
recursion is bounded to one level of nesting; anything deeper, and any pair
missing from the table, resolves to ``None`` (unresolved).
"""

import logging

from oapigen.codegen.naming import normalize
from oapigen.openapi.v3 import OpenAPI, Schema

logger = logging.getLogger(__name__)

# Type names of the swagger-codegen / openapi-generator Go generators, plus
# the OpenAPI ``format`` names that refine them.
TYPE_MAP: dict[str, str] = {
    'integer': 'int32',
    'long': 'int64',
    'number': 'float32',
    'float': 'float32',
    'double': 'float64',
    'BigDecimal': 'float64',
    'boolean': 'bool',
    'string': 'string',
    'UUID': 'string',
    'URI': 'string',
    'date': 'string',
    'DateTime': 'time.Time',
    'password': 'string',
    'File': '*os.File',
    'file': '*os.File',
    'binary': 'string',
    'ByteArray': 'string',
    'array': '[]interface{}',
    'object': 'map[string]interface{}',
    # formats
    'int32': 'int32',
    'int64': 'int64',
    'date-time': 'time.Time',
    'byte': 'string',
    'uuid': 'string',
    'uri': 'string',
    'email': 'string',
}

ANY_TYPE = 'interface{}'


def map_type(type_name: str | None, format: str | None = None) -> str | None:
    """Look up the Go type of a specification type/format pair.

    The format is consulted first, so ``('string', 'date-time')`` maps to
    ``time.Time``. Unknown formats fall back to the type.

    Returns:
        The Go type name, or None when neither is in ``TYPE_MAP``.
    """
    if format and format in TYPE_MAP:
        return TYPE_MAP[format]
    if type_name is None:
        return None
    return TYPE_MAP.get(type_name)


class TypeMapper:
    """Resolves schemas of one document to Go type names."""

    def __init__(self, document: OpenAPI):
        self._document = document

    def resolve(self, schema: Schema | None) -> str | None:
        """Resolve ``schema`` to a Go type name, or None when unresolved."""
        if schema is None:
            return None
        if schema.ref is not None:
            return self._resolve_ref(schema)
        return self._resolve_shape(schema)

    def is_model_reference(self, schema: Schema) -> bool:
        """Whether ``schema`` is a reference to an object model with properties."""
        if schema.ref is None:
            return False
        target, _ = self._document.resolve_schema(schema)
        return target is not None and bool(target.properties)

    def _resolve_ref(self, schema: Schema) -> str | None:
        target, name = self._document.resolve_schema(schema)
        if target is None:
            logger.debug(f'Unresolved schema reference {schema.ref}')
            return None
        if target.properties:
            return normalize(name, True)
        # Non-model components are inlined; their own refs are not followed.
        if target.ref is not None:
            return None
        return self._resolve_shape(target)

    def _resolve_shape(self, schema: Schema) -> str | None:
        if schema.type == 'array':
            element = self._resolve_element(schema.items)
            return None if element is None else '[]' + element

        if schema.type == 'object' or (schema.type is None and schema.properties):
            additional = schema.additionalProperties
            if isinstance(additional, Schema):
                return self._resolve_additional(additional)
            return TYPE_MAP['object']

        return map_type(schema.type, schema.format)

    def _resolve_element(self, items: Schema | None) -> str | None:
        if items is None:
            return ANY_TYPE
        if items.ref is not None:
            return self._resolve_ref(items)
        return map_type(items.type, items.format)

    def _resolve_additional(self, shape: Schema) -> str | None:
        """Resolve an ``additionalProperties`` shape one further level."""
        if shape.ref is not None:
            return self._resolve_ref(shape)
        if shape.type == 'array':
            element = self._resolve_element(shape.items)
            return None if element is None else '[]' + element
        if shape.type == 'object':
            if shape.items is not None:
                return map_type(shape.items.type, shape.items.format)
            return map_type(shape.type)
        if shape.type is None:
            # ``additionalProperties: {}`` allows any value.
            return TYPE_MAP['object']
        return map_type(shape.type, shape.format)
