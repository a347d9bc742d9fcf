"""
Transformers from external API descriptions to the apigen schema model.
"""

from apigen.transformers.openapi_to_schema import (
    OpenApiParser,
    OpenApiSchemaTransformer,
    load_openapi_spec,
)

__all__ = [
    "OpenApiParser",
    "OpenApiSchemaTransformer",
    "load_openapi_spec",
]
