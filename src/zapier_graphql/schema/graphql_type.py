from enum import Enum

from graphql import (
    GraphQLType,
    is_enum_type,
    is_input_object_type,
    is_interface_type,
    is_list_type,
    is_non_null_type,
    is_object_type,
    is_scalar_type,
    is_union_type,
)

from zapier_graphql.errors import UnresolvedTypeError


class TypeKind(str, Enum):
    """Closed set of the type positions met while walking a GraphQL type reference."""

    LIST = "list"
    NON_NULL = "non_null"
    SCALAR = "scalar"
    ENUM = "enum"
    OBJECT = "object"
    INPUT_OBJECT = "input_object"
    INTERFACE = "interface"
    UNION = "union"


WRAPPER_KINDS = frozenset({TypeKind.LIST, TypeKind.NON_NULL})
EXPANDABLE_KINDS = frozenset({TypeKind.OBJECT, TypeKind.INPUT_OBJECT})


def get_type_kind(graphql_type: GraphQLType) -> TypeKind:
    """Classify a GraphQL type into its TypeKind.

    Args:
        graphql_type: Any wrapping or named GraphQL type

    Returns:
        The matching TypeKind

    Raises:
        UnresolvedTypeError: If the type is none of the known kinds
    """
    if is_list_type(graphql_type):
        return TypeKind.LIST
    if is_non_null_type(graphql_type):
        return TypeKind.NON_NULL
    if is_scalar_type(graphql_type):
        return TypeKind.SCALAR
    if is_enum_type(graphql_type):
        return TypeKind.ENUM
    if is_object_type(graphql_type):
        return TypeKind.OBJECT
    if is_input_object_type(graphql_type):
        return TypeKind.INPUT_OBJECT
    if is_interface_type(graphql_type):
        return TypeKind.INTERFACE
    if is_union_type(graphql_type):
        return TypeKind.UNION

    raise UnresolvedTypeError(getattr(graphql_type, "name", None) or repr(graphql_type))


def is_id_type(type_name: str) -> bool:
    return type_name == "ID"
