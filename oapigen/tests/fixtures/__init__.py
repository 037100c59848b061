"""Test fixtures for oapigen tests.

This module provides sample OpenAPI 3 and Swagger 2.0 documents used across
the loader, extractor, emitter and end-to-end tests.
"""

# Minimal OpenAPI 3.0 document for basic testing
MINIMAL_OPENAPI_SPEC = {
    'openapi': '3.0.0',
    'info': {'title': 'Minimal API', 'version': '1.0.0'},
    'paths': {},
}

# Petstore with two tags, path-level parameters, component references and
# a property-less schema that becomes an alias model.
PETSTORE_SPEC = {
    'openapi': '3.0.3',
    'info': {'title': 'Petstore', 'version': '1.0.0'},
    'servers': [{'url': 'https://petstore.example.com/v1'}],
    'tags': [
        {'name': 'pets', 'description': 'Everything about your pets'},
        {'name': 'store'},
    ],
    'paths': {
        '/pets': {
            'get': {
                'tags': ['pets'],
                'operationId': 'listPets',
                'summary': 'List all pets',
                'parameters': [
                    {
                        'name': 'limit',
                        'in': 'query',
                        'schema': {'type': 'integer', 'format': 'int32'},
                    },
                    {
                        'name': 'tags',
                        'in': 'query',
                        'schema': {'type': 'array', 'items': {'type': 'string'}},
                    },
                    {'$ref': '#/components/parameters/RequestId'},
                ],
                'responses': {
                    '200': {
                        'description': 'A list of pets',
                        'content': {
                            'application/json': {
                                'schema': {
                                    'type': 'array',
                                    'items': {'$ref': '#/components/schemas/Pet'},
                                }
                            }
                        },
                    }
                },
            },
            'post': {
                'tags': ['pets'],
                'operationId': 'createPet',
                'responses': {
                    '201': {
                        'description': 'Created',
                        'content': {
                            'application/json': {
                                'schema': {'$ref': '#/components/schemas/Pet'}
                            }
                        },
                    }
                },
            },
        },
        '/pets/{petId}': {
            'parameters': [
                {
                    'name': 'petId',
                    'in': 'path',
                    'required': True,
                    'schema': {'type': 'integer', 'format': 'int64'},
                }
            ],
            'get': {
                'tags': ['pets'],
                'operationId': 'getPetById',
                'responses': {'200': {'$ref': '#/components/responses/PetResponse'}},
            },
            'delete': {
                'tags': ['pets'],
                'operationId': 'deletePet',
                'deprecated': True,
                'responses': {'204': {'description': 'Deleted'}},
            },
        },
        '/store/inventory': {
            'get': {
                'tags': ['store'],
                'operationId': 'getInventory',
                'responses': {
                    '200': {
                        'description': 'Inventory counts',
                        'content': {
                            'application/json': {
                                'schema': {
                                    'type': 'object',
                                    'additionalProperties': {
                                        'type': 'integer',
                                        'format': 'int32',
                                    },
                                }
                            }
                        },
                    }
                },
            }
        },
    },
    'components': {
        'schemas': {
            'Pet': {
                'type': 'object',
                'required': ['id', 'name'],
                'properties': {
                    'id': {'type': 'integer', 'format': 'int64'},
                    'name': {'type': 'string'},
                    'tag': {'type': 'string'},
                    'owner': {'$ref': '#/components/schemas/Owner'},
                    'photoUrls': {'type': 'array', 'items': {'type': 'string'}},
                },
            },
            'Owner': {
                'type': 'object',
                'description': 'The owner of a pet',
                'properties': {
                    'userId': {'type': 'string'},
                    'createdAt': {'type': 'string', 'format': 'date-time'},
                },
            },
            'PetName': {'type': 'string'},
        },
        'parameters': {
            'RequestId': {
                'name': 'X-Request-ID',
                'in': 'header',
                'schema': {'type': 'string'},
            }
        },
        'responses': {
            'PetResponse': {
                'description': 'A pet',
                'content': {
                    'application/json': {
                        'schema': {'$ref': '#/components/schemas/Pet'}
                    }
                },
            }
        },
    },
}

# No tags at all: every operation belongs to the default service.
UNTAGGED_SPEC = {
    'openapi': '3.0.0',
    'info': {'title': 'Untagged API', 'version': '2.0.0'},
    'paths': {
        '/b': {'post': {'responses': {'200': {'description': 'OK'}}}},
        '/a': {'get': {'responses': {'200': {'description': 'OK'}}}},
    },
}

# Swagger 2.0 petstore subset
SWAGGER_SPEC = {
    'swagger': '2.0',
    'info': {'title': 'Swagger Petstore', 'version': '1.0.0'},
    'host': 'petstore.swagger.io',
    'basePath': '/v2',
    'schemes': ['https'],
    'tags': [{'name': 'pet', 'description': 'Everything about your Pets'}],
    'paths': {
        '/pet': {
            'post': {
                'tags': ['pet'],
                'operationId': 'addPet',
                'consumes': ['application/json'],
                'parameters': [
                    {
                        'in': 'body',
                        'name': 'body',
                        'required': True,
                        'schema': {'$ref': '#/definitions/Pet'},
                    }
                ],
                'responses': {'405': {'description': 'Invalid input'}},
            }
        },
        '/pet/findByStatus': {
            'get': {
                'tags': ['pet'],
                'operationId': 'findPetsByStatus',
                'parameters': [
                    {
                        'name': 'status',
                        'in': 'query',
                        'required': True,
                        'type': 'array',
                        'items': {'type': 'string'},
                        'collectionFormat': 'multi',
                    }
                ],
                'responses': {
                    '200': {
                        'description': 'successful operation',
                        'schema': {
                            'type': 'array',
                            'items': {'$ref': '#/definitions/Pet'},
                        },
                    }
                },
            }
        },
        '/pet/{petId}/uploadImage': {
            'post': {
                'tags': ['pet'],
                'operationId': 'uploadFile',
                'consumes': ['multipart/form-data'],
                'parameters': [
                    {
                        'name': 'petId',
                        'in': 'path',
                        'type': 'integer',
                        'format': 'int64',
                    },
                    {
                        'name': 'file',
                        'in': 'formData',
                        'required': False,
                        'type': 'file',
                    },
                ],
                'responses': {'200': {'description': 'successful operation'}},
            }
        },
        'x-internal': {'owner': 'platform'},
    },
    'definitions': {
        'Category': {
            'type': 'object',
            'properties': {
                'id': {'type': 'integer', 'format': 'int64'},
                'name': {'type': 'string'},
            },
        },
        'Pet': {
            'type': 'object',
            'required': ['name'],
            'properties': {
                'id': {'type': 'integer', 'format': 'int64'},
                'category': {'$ref': '#/definitions/Category'},
                'name': {'type': 'string'},
            },
        },
    },
}


def operation(operation_id=None, tags=None, parameters=None, responses=None, **extra):
    """Build an OpenAPI 3 operation dict with a default 200 response."""
    result = {'responses': responses or {'200': {'description': 'OK'}}, **extra}
    if operation_id is not None:
        result['operationId'] = operation_id
    if tags is not None:
        result['tags'] = tags
    if parameters is not None:
        result['parameters'] = parameters
    return result


def document(paths=None, tags=None, schemas=None, **extra):
    """Build an OpenAPI 3 document dict around the given paths."""
    result = {
        'openapi': '3.0.0',
        'info': {'title': 'Test API', 'version': '1.0.0'},
        'paths': paths or {},
        **extra,
    }
    if tags is not None:
        result['tags'] = [{'name': tag} for tag in tags]
    if schemas is not None:
        result.setdefault('components', {})['schemas'] = schemas
    return result
