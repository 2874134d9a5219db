"""Build input and output field descriptors from resolved GraphQL types.

Both the GraphQL-oriented descriptors (used to write the operation document) and the
platform-oriented descriptors (shown to Zapier users) come from the same resolved
TypeDetails tree and the same depth limit, so both views always agree on which
fields exist.
"""

from graphql import GraphQLArgument, GraphQLNamedType, is_required_argument

from zapier_graphql import log
from zapier_graphql.config import Config
from zapier_graphql.errors import UnresolvedTypeError
from zapier_graphql.fields.models import InputField, OutputField
from zapier_graphql.fields.sorting import ID_KEY, KEY_SEPARATOR, sort_fields
from zapier_graphql.naming import humanize
from zapier_graphql.schema.graphql_type import TypeKind, get_type_kind, is_id_type
from zapier_graphql.schema.type_details import TypeDetails, resolve_type_details, resolve_type_details_with_children

# Zapier renders a single level of children below a top-level input field.
MAX_NESTING_DEPTH = 1

VALUE_KEY = "value"
ID_OUTPUT_TYPE = "string"


def resolve_arguments(arguments: dict[str, GraphQLArgument], config: Config) -> list[TypeDetails]:
    """Resolve every argument of an operation, in declaration order, with children."""
    resolved: list[TypeDetails] = []
    for name, argument in arguments.items():
        details = resolve_type_details_with_children(argument.type, config, field_name=name, description=argument.description)
        details.is_required = details.is_required or is_required_argument(argument)
        resolved.append(details)
    return resolved


def is_flattenable(arguments: list[TypeDetails]) -> bool:
    """A lone argument with children is replaced by its children on the platform side."""
    return len(arguments) == 1 and arguments[0].has_children


def get_depth_limit(arguments: list[TypeDetails]) -> int:
    """Deepest path length at which a leaf may still be emitted.

    A flattened wrapper argument does not count toward the platform nesting, so it
    gets one extra level.
    """
    return MAX_NESTING_DEPTH + 1 if is_flattenable(arguments) else MAX_NESTING_DEPTH


def _leaf_key(name: str, path: tuple[str, ...]) -> str:
    if len(path) > 1:
        return f"{path[-1]}{KEY_SEPARATOR}{name}"
    return name


def _build_leaf(details: TypeDetails, name: str, path: tuple[str, ...], for_gql: bool) -> InputField:
    return InputField(
        key=_leaf_key(name, path),
        field=name if for_gql else None,
        label=humanize(name),
        type=details.scalar_type,
        required=details.is_required,
        help_text=details.description,
        choices=details.enum_values or None,
    )


def _log_skipped(details: TypeDetails, path: tuple[str, ...]) -> None:
    if details.is_required:
        log.warning(f"Required input {'.'.join(path)} has no fields within the nesting limit and is left out")
    else:
        log.debug(f"Skipping input object {'.'.join(path)} without reachable fields")


def _build_input_fields(
    fields: list[TypeDetails],
    for_gql: bool,
    path: tuple[str, ...],
    depth_limit: int,
) -> list[InputField]:
    input_fields: list[InputField] = []

    for details in fields:
        name = details.field_name or details.type_name

        if details.is_leaf:
            if len(path) > depth_limit:
                log.debug(f"Skipping input field {'.'.join((*path, name))} beyond depth {depth_limit}")
                continue
            input_fields.append(_build_leaf(details, name, path, for_gql))
            continue

        children: list[InputField] = []
        if details.has_children and len(path) < depth_limit:
            children = _build_input_fields(list(details.children.values()), for_gql, (*path, name), depth_limit)

        if not children:
            _log_skipped(details, (*path, name))
            continue

        input_fields.append(
            InputField(
                key=name,
                field=name if for_gql else None,
                label=humanize(name),
                required=details.is_required,
                children=children,
            )
        )

    return input_fields


def build_input_fields(
    fields: list[TypeDetails],
    config: Config,
    for_gql: bool = False,
    depth_limit: int = MAX_NESTING_DEPTH,
) -> list[InputField]:
    """Build sorted input descriptors from resolved argument types.

    Leaves need a mapped scalar type, object types need at least one reachable child.
    Anything else, or anything past ``depth_limit``, is dropped. A leaf below a nested
    parent is keyed ``{parent}__{name}`` so keys stay unique after flattening.

    Args:
        fields: Resolved argument types, with children
        config: Project configuration
        for_gql: Whether to record the GraphQL field name on every descriptor
        depth_limit: Deepest path length at which a leaf may still be emitted

    Returns:
        The input field descriptors
    """
    return sort_fields(_build_input_fields(fields, for_gql, (), depth_limit), config)


def flatten_input_fields(fields: list[InputField]) -> list[InputField]:
    """Promote the children of a lone top-level parent field."""
    if len(fields) == 1 and fields[0].children:
        return list(fields[0].children)
    return fields


def build_operation_input_fields(
    arguments: dict[str, GraphQLArgument],
    config: Config,
    for_gql: bool = False,
) -> list[InputField]:
    """Build the input descriptors of an operation.

    The GraphQL-oriented view keeps every argument as declared. The platform-oriented
    view is flattened when the operation takes a single object argument.
    """
    resolved = resolve_arguments(arguments, config)
    input_fields = build_input_fields(resolved, config, for_gql, get_depth_limit(resolved))

    if for_gql:
        return input_fields
    return flatten_input_fields(input_fields)


def build_output_fields(output_type: GraphQLNamedType, config: Config, for_gql: bool = False) -> list[OutputField]:
    """Build the output descriptors of an operation from its named return type.

    Only scalar fields of the return type are kept. A scalar or enum return type has no
    selection set: the GraphQL-oriented view is empty and the platform-oriented view
    holds a single ``id`` (for ID) or ``value`` field. A type listed in the configured
    identifier map also gets an ``id`` field on the platform side.

    Raises:
        UnresolvedTypeError: If the return type is a union
    """
    kind = get_type_kind(output_type)

    if kind in (TypeKind.SCALAR, TypeKind.ENUM):
        if for_gql:
            return []
        details = resolve_type_details(output_type, config)
        key = ID_KEY if is_id_type(details.type_name) else VALUE_KEY
        return [OutputField(key=key, label=humanize(key), type=details.scalar_type, choices=details.enum_values or None)]

    if kind not in (TypeKind.OBJECT, TypeKind.INTERFACE):
        raise UnresolvedTypeError(output_type.name)

    output_fields: list[OutputField] = []
    for name, graphql_field in output_type.fields.items():  # type: ignore[attr-defined]
        details = resolve_type_details(graphql_field.type, config, field_name=name, description=graphql_field.description)
        if not details.is_leaf:
            continue
        output_fields.append(
            OutputField(key=name, label=humanize(name), type=details.scalar_type, choices=details.enum_values or None)
        )

    id_field = config.id_field_for(output_type.name)
    if not for_gql and id_field and not any(field.key == ID_KEY for field in output_fields):
        output_fields.append(OutputField(key=ID_KEY, label=humanize(ID_KEY), type=ID_OUTPUT_TYPE))

    return sort_fields(output_fields, config)
