import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from graphql import GraphQLSchema
from jinja2 import Environment, PackageLoader, select_autoescape

from zapier_graphql import log
from zapier_graphql.config import Config
from zapier_graphql.errors import InvalidActionError, MissingArgumentsError
from zapier_graphql.fields.builder import build_operation_input_fields, build_output_fields
from zapier_graphql.fields.models import InputField, OutputField
from zapier_graphql.generators.document import build_document
from zapier_graphql.generators.samples import create_samples, to_js_literal
from zapier_graphql.naming import humanize, pluralize
from zapier_graphql.schema.loader import get_operation_definition
from zapier_graphql.schema.type_details import resolve_type_details

RESPONSE_DATA = "response.data.data"
DOCUMENT_INDENT = " " * 8


class Action(str, Enum):
    """Zapier action kinds that can be generated from a GraphQL operation."""

    TRIGGER = "trigger"
    SEARCH = "search"
    CREATE = "create"

    @property
    def directory(self) -> str:
        return ACTION_DIRECTORIES[self]

    @property
    def operation_kind(self) -> str:
        return "mutation" if self is Action.CREATE else "query"


ACTION_DIRECTORIES = {
    Action.TRIGGER: "triggers",
    Action.SEARCH: "searches",
    Action.CREATE: "creates",
}


def parse_action(value: str | Action) -> Action:
    try:
        return Action(value)
    except ValueError as e:
        raise InvalidActionError(str(value)) from e


@dataclass
class OperationArtifacts:
    """Everything needed to write the action and test modules of one operation."""

    action: Action
    operation: str
    document: str
    input_fields: list[InputField]
    output_fields: list[OutputField]
    sample: dict[str, Any]
    test_input_data: dict[str, Any]
    noun: str
    label: str
    description: str
    is_list: bool
    id_field: str | None = None
    id_mapping: str | None = None
    # Key wrapping a scalar or enum result into a record, "id" or "value"
    result_key: str | None = None

    @property
    def kind(self) -> str:
        return self.action.operation_kind


def build_id_mapping(operation: str, source_field: str, is_list: bool) -> str:
    """JavaScript statement copying ``source_field`` into ``id`` on the response data.

    A null result is left as is.
    """
    target = f"{RESPONSE_DATA}.{operation}"
    if is_list:
        return f"{target} = {target} && {target}.map(r => r && ({{...r, id: r.{source_field}}}));"
    return f"{target} = {target} && {{...{target}, id: {target}.{source_field}}};"


def build_label(action: Action, noun: str, is_list: bool) -> str:
    if action is Action.CREATE:
        return f"Creates multiple {pluralize(noun)}" if is_list else f"Create {noun}"
    return f"Finds {pluralize(noun)}" if is_list else f"Find {noun}"


def build_description(action: Action, noun: str, is_list: bool, label: str, definition_description: str | None) -> str:
    if definition_description:
        return definition_description
    if action is Action.TRIGGER:
        target = pluralize(noun) if is_list else f"a {noun}"
        return f"Triggers when performing lookup for {target}"
    return label


def build_return_expression(artifacts: OperationArtifacts) -> str:
    """JavaScript expression returned by ``perform``.

    Triggers and searches return a list of records, creates a single record. Scalar and
    enum results are wrapped into records under their output field key.
    """
    response = f"{RESPONSE_DATA}.{artifacts.operation}"
    returns_list = artifacts.action is not Action.CREATE
    key = artifacts.result_key

    if key and artifacts.is_list and returns_list:
        return f"{response}.map(r => ({{{key}: r}}))"
    if key:
        record = f"{{{key}: {response}}}"
        return f"[{record}]" if returns_list else record
    if artifacts.is_list or not returns_list:
        return response
    return f"[{response}]"


def build_operation_artifacts(
    schema: GraphQLSchema,
    config: Config,
    action: str | Action,
    operation: str,
) -> OperationArtifacts:
    """Build the document, fields and sample data of a Zapier action for one operation.

    Args:
        schema: The GraphQL schema
        config: Project configuration
        action: ``trigger``, ``search`` or ``create``
        operation: Name of the query (trigger, search) or mutation (create)

    Returns:
        The OperationArtifacts of the action

    Raises:
        InvalidActionError: If the action is unknown
        OperationNotFoundError: If the operation is not in the schema
        MissingArgumentsError: If a search is requested for a query without arguments
    """
    action = parse_action(action)
    definition = get_operation_definition(schema, action.operation_kind, operation)

    if action is Action.SEARCH and not definition.args:
        raise MissingArgumentsError(operation)

    log.info(f"Building {action.value} for {action.operation_kind} {operation}")

    return_type = resolve_type_details(definition.type, config, field_name=operation)
    output_type = return_type.named_type

    document = build_document(
        action.operation_kind,
        operation,
        build_operation_input_fields(definition.args, config, for_gql=True),
        build_output_fields(output_type, config, for_gql=True),
    )
    input_fields = build_operation_input_fields(definition.args, config)
    output_fields = build_output_fields(output_type, config)

    log.debug(f"{operation}: {len(input_fields)} input fields, {len(output_fields)} output fields")

    noun = humanize(return_type.type_name)
    label = build_label(action, noun, return_type.is_list)
    id_field = config.id_field_for(return_type.type_name)

    return OperationArtifacts(
        action=action,
        operation=operation,
        document=document,
        input_fields=input_fields,
        output_fields=output_fields,
        sample=create_samples(output_fields, config),
        test_input_data=create_samples(input_fields, config),
        noun=noun,
        label=label,
        description=build_description(action, noun, return_type.is_list, label, definition.description),
        is_list=return_type.is_list,
        id_field=id_field,
        id_mapping=build_id_mapping(operation, id_field, return_type.is_list) if id_field else None,
        result_key=output_fields[0].key if return_type.is_leaf else None,
    )


class ActionGenerator:
    """Render the JavaScript action and test modules of GraphQL operations."""

    def __init__(self, schema: GraphQLSchema, config: Config):
        self.schema = schema
        self.config = config

        self.env = Environment(
            loader=PackageLoader("zapier_graphql.generators", "templates"),
            autoescape=select_autoescape(),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def build(self, action: str | Action, operation: str) -> OperationArtifacts:
        return build_operation_artifacts(self.schema, self.config, action, operation)

    def render_action_module(self, artifacts: OperationArtifacts) -> str:
        template = self.env.get_template("action.js.j2")
        return template.render(self._build_template_vars(artifacts))

    def render_test_module(self, artifacts: OperationArtifacts) -> str:
        template = self.env.get_template("test.js.j2")
        return template.render(self._build_template_vars(artifacts))

    def _build_template_vars(self, artifacts: OperationArtifacts) -> dict[str, Any]:
        return_expression = build_return_expression(artifacts)
        returns_list = artifacts.action is not Action.CREATE

        return {
            "action": artifacts.action.value,
            "directory": artifacts.action.directory,
            "kind": artifacts.kind,
            "operation": artifacts.operation,
            "url_env_var": self.config.request.url_env_var,
            "document": "\n".join(DOCUMENT_INDENT + line for line in artifacts.document.splitlines()),
            "has_inputs": bool(artifacts.input_fields),
            "id_field": artifacts.id_field,
            "id_mapping": artifacts.id_mapping,
            "returns_list": returns_list,
            "return_expression": return_expression,
            "noun": json.dumps(artifacts.noun),
            "label": json.dumps(artifacts.label),
            "description": json.dumps(artifacts.description),
            "input_fields": to_js_literal([field.to_zapier() for field in artifacts.input_fields], indent=4),
            "output_fields": to_js_literal([field.to_zapier() for field in artifacts.output_fields], indent=4),
            "sample": to_js_literal(artifacts.sample, indent=4),
            "input_data": to_js_literal(artifacts.test_input_data, indent=6),
        }
