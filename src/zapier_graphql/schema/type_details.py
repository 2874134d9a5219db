from dataclasses import dataclass, field

from graphql import GraphQLNamedType, GraphQLType, is_list_type, is_specified_scalar_type

from zapier_graphql import log
from zapier_graphql.config import Config
from zapier_graphql.errors import UnmappedScalarTypeError, UnresolvedTypeError
from zapier_graphql.schema.graphql_type import EXPANDABLE_KINDS, WRAPPER_KINDS, TypeKind, get_type_kind

# Children are expanded for the root (depth 0) and its direct children (depth 1) only,
# which bounds recursion over self-referencing input types.
MAX_EXPANSION_DEPTH = 1

ENUM_PLATFORM_TYPE = "string"


@dataclass
class TypeDetails:
    """Resolved view of a field or argument type, with wrappers folded into flags."""

    field_name: str | None
    type_name: str
    named_type: GraphQLNamedType
    kind: TypeKind
    scalar_type: str | None = None
    is_list: bool = False
    is_required: bool = False
    description: str | None = None
    enum_values: list[str] = field(default_factory=list)
    children: dict[str, "TypeDetails"] = field(default_factory=dict)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def is_leaf(self) -> bool:
        return self.scalar_type is not None


def _determine_scalar_type(graphql_type: GraphQLType, kind: TypeKind, config: Config, field_name: str | None) -> str | None:
    if kind is TypeKind.ENUM:
        return ENUM_PLATFORM_TYPE
    if kind is not TypeKind.SCALAR:
        return None

    type_name = graphql_type.name  # type: ignore[attr-defined]
    scalar_type = config.scalar_map.get(type_name)
    if scalar_type is None:
        raise UnmappedScalarTypeError(type_name, field_name)
    return scalar_type


def resolve_type_details(
    outer_type: GraphQLType,
    config: Config,
    field_name: str | None = None,
    description: str | None = None,
) -> TypeDetails:
    """Unwrap a type reference down to its named type.

    Every layer is visited: list and non-null wrappers set the corresponding flags
    (``[T!]`` and ``[T]!`` both yield a required list), the first description seen wins
    (built-in scalars such as ``Int`` contribute none) and the first scalar mapping seen
    wins.

    Args:
        outer_type: The type reference as declared on the field or argument
        config: Project configuration providing the scalar map
        field_name: Name of the field or argument being resolved
        description: Description declared on the field or argument itself, preferred
            over descriptions found along the type chain

    Returns:
        The resolved TypeDetails without children

    Raises:
        UnmappedScalarTypeError: If a scalar is missing from the scalar map
        UnresolvedTypeError: If the chain does not end on a named type
    """
    is_list = False
    is_required = False
    scalar_type: str | None = None
    enum_values: list[str] = []

    current = outer_type
    while True:
        kind = get_type_kind(current)

        if kind is TypeKind.LIST:
            is_list = True
        elif kind is TypeKind.NON_NULL:
            is_required = True

        # Built-in scalar descriptions are generic boilerplate, not help text
        if not (kind is TypeKind.SCALAR and is_specified_scalar_type(current)):  # type: ignore[arg-type]
            description = description or getattr(current, "description", None)

        if kind is TypeKind.ENUM and not enum_values:
            enum_values = list(current.values)  # type: ignore[attr-defined]

        if scalar_type is None:
            scalar_type = _determine_scalar_type(current, kind, config, field_name)

        if kind not in WRAPPER_KINDS:
            break
        current = current.of_type  # type: ignore[attr-defined]

    type_name = getattr(current, "name", None)
    if not type_name:
        raise UnresolvedTypeError(type_name, field_name)

    return TypeDetails(
        field_name=field_name,
        type_name=type_name,
        named_type=current,  # type: ignore[arg-type]
        kind=kind,
        scalar_type=scalar_type,
        is_list=is_list,
        is_required=is_required,
        description=description,
        enum_values=enum_values,
    )


def resolve_type_details_with_children(
    outer_type: GraphQLType,
    config: Config,
    field_name: str | None = None,
    description: str | None = None,
    depth: int = 0,
) -> TypeDetails:
    """Resolve a type and, for object and input-object types, its fields.

    Children are expanded while ``depth`` does not exceed MAX_EXPANSION_DEPTH, so a
    tree holds at most two levels below the root. Deeper object fields are resolved
    without children. A single list layer on a child's type is stripped before
    resolving it.
    """
    details = resolve_type_details(outer_type, config, field_name, description)

    if details.kind not in EXPANDABLE_KINDS or depth > MAX_EXPANSION_DEPTH:
        return details

    for child_name, child in details.named_type.fields.items():  # type: ignore[attr-defined]
        child_type = child.type.of_type if is_list_type(child.type) else child.type
        details.children[child_name] = resolve_type_details_with_children(
            child_type,
            config,
            field_name=child_name,
            description=child.description,
            depth=depth + 1,
        )

    log.debug(f"Resolved {len(details.children)} children of {details.type_name} at depth {depth}")
    return details
