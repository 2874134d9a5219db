"""GraphQL schema access and type resolution for zapier-graphql."""

from .loader import fetch_schema, get_mutation_definition, get_operation_definition, get_query_definition, load_schema_file
from .type_details import TypeDetails, resolve_type_details, resolve_type_details_with_children

__all__ = [
    "TypeDetails",
    "fetch_schema",
    "get_mutation_definition",
    "get_operation_definition",
    "get_query_definition",
    "load_schema_file",
    "resolve_type_details",
    "resolve_type_details_with_children",
]
