from oapigen.openapi.v2 import Swagger
from oapigen.openapi.v3 import OpenAPI

__all__ = [
    'OpenAPI',
    'Swagger',
]
