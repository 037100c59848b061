"""Tests for mapping schemas to Go types."""

import pytest

from oapigen.codegen.type_mapper import ANY_TYPE, TypeMapper, map_type
from oapigen.openapi.v3 import OpenAPI, Schema

from oapigen.tests.fixtures import document


@pytest.fixture
def mapper():
    """Fixture providing a TypeMapper over a document with a few schemas."""
    spec = OpenAPI.model_validate(
        document(
            schemas={
                'Pet': {
                    'type': 'object',
                    'properties': {'name': {'type': 'string'}},
                },
                'PetName': {'type': 'string'},
                'Tags': {'type': 'array', 'items': {'type': 'string'}},
                'Indirect': {'$ref': '#/components/schemas/PetName'},
            }
        )
    )
    return TypeMapper(spec)


def ref(name):
    return Schema.model_validate({'$ref': f'#/components/schemas/{name}'})


class TestMapType:
    """Test the flat type table lookup."""

    @pytest.mark.parametrize(
        'type_name,format,expected',
        [
            ('integer', None, 'int32'),
            ('integer', 'int64', 'int64'),
            ('number', None, 'float32'),
            ('number', 'double', 'float64'),
            ('boolean', None, 'bool'),
            ('string', None, 'string'),
            ('string', 'date-time', 'time.Time'),
            ('string', 'binary', 'string'),
            ('file', None, '*os.File'),
            ('array', None, '[]interface{}'),
            ('object', None, 'map[string]interface{}'),
        ],
    )
    def test_known_pairs(self, type_name, format, expected):
        """Test that known type/format pairs map to their Go type."""
        assert map_type(type_name, format) == expected

    def test_unknown_format_falls_back_to_type(self):
        """Test that an unknown format does not hide the type."""
        assert map_type('string', 'hostname') == 'string'

    def test_unknown_type_unresolved(self):
        """Test that pairs missing from the table are unresolved."""
        assert map_type('mystery') is None
        assert map_type(None) is None


class TestTypeMapper:
    """Test resolution of whole schemas."""

    def test_none(self, mapper):
        """Test that a missing schema is unresolved."""
        assert mapper.resolve(None) is None

    def test_scalar(self, mapper):
        """Test a plain scalar schema."""
        assert mapper.resolve(Schema(type='integer', format='int64')) == 'int64'

    def test_model_reference(self, mapper):
        """Test that a reference to an object model yields the model name."""
        assert mapper.resolve(ref('Pet')) == 'Pet'
        assert mapper.is_model_reference(ref('Pet'))

    def test_non_model_reference_inlined(self, mapper):
        """Test that references to property-less schemas resolve to their shape."""
        assert mapper.resolve(ref('PetName')) == 'string'
        assert mapper.resolve(ref('Tags')) == '[]string'
        assert not mapper.is_model_reference(ref('PetName'))

    def test_reference_chain_unresolved(self, mapper):
        """Test that a reference to a reference is not followed."""
        assert mapper.resolve(ref('Indirect')) is None

    def test_missing_reference(self, mapper):
        """Test that a dangling reference is unresolved."""
        assert mapper.resolve(ref('Missing')) is None
        assert not mapper.is_model_reference(ref('Missing'))

    def test_array_of_models(self, mapper):
        """Test arrays of referenced models."""
        schema = Schema.model_validate({'type': 'array', 'items': {'$ref': '#/components/schemas/Pet'}})
        assert mapper.resolve(schema) == '[]Pet'

    def test_array_without_items(self, mapper):
        """Test that an array without items holds any value."""
        assert mapper.resolve(Schema(type='array')) == '[]' + ANY_TYPE

    def test_array_of_unknown_unresolved(self, mapper):
        """Test that an unresolvable element type makes the array unresolved."""
        schema = Schema.model_validate({'type': 'array', 'items': {'type': 'mystery'}})
        assert mapper.resolve(schema) is None

    def test_object_without_additional_properties(self, mapper):
        """Test the bare object shape."""
        assert mapper.resolve(Schema(type='object')) == 'map[string]interface{}'
        schema = Schema.model_validate({'type': 'object', 'additionalProperties': True})
        assert mapper.resolve(schema) == 'map[string]interface{}'

    def test_additional_properties_scalar(self, mapper):
        """Test that a scalar additionalProperties shape is mapped directly."""
        schema = Schema.model_validate(
            {'type': 'object', 'additionalProperties': {'type': 'integer'}}
        )
        assert mapper.resolve(schema) == 'int32'

    def test_additional_properties_array(self, mapper):
        """Test that an array additionalProperties shape resolves its element type."""
        schema = Schema.model_validate(
            {
                'type': 'object',
                'additionalProperties': {'type': 'array', 'items': {'type': 'boolean'}},
            }
        )
        assert mapper.resolve(schema) == '[]bool'

    def test_additional_properties_object(self, mapper):
        """Test that a nested object shape resolves one further level only."""
        schema = Schema.model_validate(
            {
                'type': 'object',
                'additionalProperties': {'type': 'object', 'items': {'type': 'string'}},
            }
        )
        assert mapper.resolve(schema) == 'string'

        schema = Schema.model_validate(
            {'type': 'object', 'additionalProperties': {'type': 'object'}}
        )
        assert mapper.resolve(schema) == 'map[string]interface{}'

    def test_additional_properties_reference(self, mapper):
        """Test that a referenced additionalProperties shape resolves the reference."""
        schema = Schema.model_validate(
            {
                'type': 'object',
                'additionalProperties': {'$ref': '#/components/schemas/Pet'},
            }
        )
        assert mapper.resolve(schema) == 'Pet'

    def test_openapi_31_type_list(self, mapper):
        """Test that a nullable type list resolves to its concrete member."""
        schema = Schema.model_validate({'type': ['string', 'null']})
        assert mapper.resolve(schema) == 'string'
