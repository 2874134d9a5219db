"""Write the GraphQL operation document embedded in a generated action.

Argument values are JavaScript template placeholders reading from ``inputData``.
String-like values go through the runtime ``quote`` helper, everything else is
inserted as is.
"""

from zapier_graphql.errors import InvalidOperationKindError
from zapier_graphql.fields.models import InputField, OutputField
from zapier_graphql.schema.loader import OPERATION_KINDS

INDENT = "  "
QUOTED_TYPES = frozenset({"string", "datetime"})


def is_quoted(field: InputField) -> bool:
    return field.type in QUOTED_TYPES and not field.choices


def is_promoted(input_fields: list[InputField]) -> bool:
    """Whether the children of a lone argument are the inputs shown on the platform side."""
    return len(input_fields) == 1 and bool(input_fields[0].children)


def build_placeholder(field: InputField, scope: tuple[str, ...]) -> str:
    """Template placeholder for a leaf argument value.

    ``scope`` holds the names of the field's parents as seen on the platform side, the
    value is read from the immediate parent's object in ``inputData``. Optional values
    default to ``null``.
    """
    namespace = f"{scope[-1]}." if scope else ""
    expression = f"inputData.{namespace}{field.key}"
    if not field.required:
        expression = f"{expression} ?? null"
    if is_quoted(field):
        expression = f"quote({expression})"
    return f"${{{expression}}}"


def _build_argument_lines(
    fields: list[InputField],
    parents: tuple[str, ...],
    scope: tuple[str, ...],
    promoted: bool = False,
) -> list[str]:
    indent = INDENT * (len(parents) + 2)
    lines: list[str] = []

    for field in fields:
        name = field.field or field.key
        if field.children:
            child_scope = scope if promoted else (*scope, field.key)
            lines.append(f"{indent}{name}: {{")
            lines.extend(_build_argument_lines(field.children, (*parents, field.key), child_scope))
            lines.append(f"{indent}}}")
        else:
            lines.append(f"{indent}{name}: {build_placeholder(field, scope)}")

    return lines


def build_document(
    kind: str,
    operation: str,
    input_fields: list[InputField],
    output_fields: list[OutputField],
) -> str:
    """Build the operation document text.

    The argument block is omitted when there are no input fields and the selection
    set is omitted when there are no output fields, as for scalar results.

    Args:
        kind: ``query`` or ``mutation``
        operation: Root field name
        input_fields: GraphQL-oriented input descriptors
        output_fields: GraphQL-oriented output descriptors

    Returns:
        The document, without a trailing newline

    Raises:
        InvalidOperationKindError: If kind is neither query nor mutation
    """
    if kind not in OPERATION_KINDS:
        raise InvalidOperationKindError(kind)

    lines = [f"{kind} {{"]
    header = f"{INDENT}{operation}"

    if input_fields:
        lines.append(f"{header}(")
        lines.extend(_build_argument_lines(input_fields, (), (), promoted=is_promoted(input_fields)))
        header = f"{INDENT})"

    if output_fields:
        lines.append(f"{header} {{")
        lines.extend(f"{INDENT * 2}{field.key}" for field in output_fields)
        lines.append(f"{INDENT}}}")
    else:
        lines.append(header)

    lines.append("}")
    return "\n".join(lines)
