import re
from typing import cast

import pytest
from graphql import GraphQLObjectType, GraphQLSchema, parse, validate

from zapier_graphql.config import Config
from zapier_graphql.errors import InvalidOperationKindError
from zapier_graphql.fields.builder import build_operation_input_fields, build_output_fields
from zapier_graphql.fields.models import InputField, OutputField
from zapier_graphql.generators.document import build_document, build_placeholder
from zapier_graphql.schema.type_details import resolve_type_details

QUOTED_PLACEHOLDER_PATTERN = re.compile(r"\$\{quote\([^}]*\)\}")
PLACEHOLDER_PATTERN = re.compile(r"\$\{[^}]*\}")


def document_for(schema: GraphQLSchema, config: Config, kind: str, operation: str) -> str:
    root_type = cast(GraphQLObjectType, schema.query_type if kind == "query" else schema.mutation_type)
    definition = root_type.fields[operation]
    output_type = resolve_type_details(definition.type, config).named_type
    return build_document(
        kind,
        operation,
        build_operation_input_fields(definition.args, config, for_gql=True),
        build_output_fields(output_type, config, for_gql=True),
    )


def assert_valid_document(schema: GraphQLSchema, document: str) -> None:
    """Substitute string placeholders with a literal, the others with null, and validate against the schema."""
    document = QUOTED_PLACEHOLDER_PATTERN.sub('"sample"', document)
    errors = validate(schema, parse(PLACEHOLDER_PATTERN.sub("null", document)))
    assert errors == [], errors


class TestBuildDocument:
    """Operation documents written from GraphQL-oriented field descriptors."""

    def test_zero_argument_query(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        document = document_for(spacex_schema, config, "query", "dragon")

        assert document == (
            "query {\n"
            "  dragon {\n"
            "    id\n"
            "    active\n"
            "    crew_capacity\n"
            "    description\n"
            "    dry_mass_kg\n"
            "    first_flight\n"
            "    name\n"
            "    type\n"
            "  }\n"
            "}"
        )
        assert_valid_document(spacex_schema, document)

    def test_scalar_arguments(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        document = document_for(spacex_schema, config, "query", "dragons")

        assert document.startswith(
            "query {\n"
            "  dragons(\n"
            "    limit: ${inputData.limit ?? null}\n"
            "    offset: ${inputData.offset ?? null}\n"
            "  ) {\n"
            "    id\n"
        )
        assert_valid_document(spacex_schema, document)

    def test_nested_arguments_under_promoted_parent(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        document = document_for(spacex_schema, config, "mutation", "delete_users")

        assert (
            "mutation {\n"
            "  delete_users(\n"
            "    where: {\n"
            "      id: {\n"
            "        _eq: ${quote(inputData.id.id___eq ?? null)}\n"
            "        _gt: ${quote(inputData.id.id___gt ?? null)}\n"
            "        _in: ${quote(inputData.id.id___in)}\n"
            "        _is_null: ${inputData.id.id___is_null ?? null}\n"
            "        _neq: ${quote(inputData.id.id___neq ?? null)}\n"
            "      }\n"
            "      name: {\n"
        ) in document
        assert document.endswith("    }\n  ) {\n    affected_rows\n  }\n}")
        assert_valid_document(spacex_schema, document)

    def test_nested_arguments_without_promotion(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        document = document_for(spacex_schema, config, "query", "launchesPast")

        assert (
            "    find: {\n"
            "      launch_year: ${quote(inputData.find.launch_year ?? null)}\n"
            "      mission_name: ${quote(inputData.find.mission_name ?? null)}\n"
            "      rocket_id: ${quote(inputData.find.rocket_id ?? null)}\n"
            "      status: ${inputData.find.status ?? null}\n"
            "    }\n"
            "    limit: ${inputData.limit ?? null}\n"
        ) in document
        assert_valid_document(spacex_schema, document)

    def test_promoted_scalar_children_read_from_top_level(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        document = document_for(spacex_schema, config, "mutation", "insert_users")

        assert "    objects: {\n      id: ${quote(inputData.id ?? null)}\n" in document
        assert "      timestamp: ${quote(inputData.timestamp ?? null)}\n" in document
        assert_valid_document(spacex_schema, document)

    def test_scalar_result_has_no_selection_set(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        document = document_for(spacex_schema, config, "query", "capsuleStatus")

        assert document == "query {\n  capsuleStatus(\n    id: ${quote(inputData.id)}\n  )\n}"
        assert_valid_document(spacex_schema, document)

    def test_no_arguments_and_no_selection(self) -> None:
        assert build_document("query", "ping", [], []) == "query {\n  ping\n}"

    @pytest.mark.parametrize("kind", ["subscription", "Query", ""])
    def test_invalid_kind(self, kind: str) -> None:
        with pytest.raises(InvalidOperationKindError) as exc_info:
            build_document(kind, "dragon", [], [OutputField(key="id", label="Id", type="string")])

        assert exc_info.value.kind == kind


class TestPlaceholder:
    @pytest.mark.parametrize(
        "field, scope, expected",
        [
            (InputField(key="name", label="Name", type="string", required=True), (), "${quote(inputData.name)}"),
            (InputField(key="name", label="Name", type="string"), (), "${quote(inputData.name ?? null)}"),
            (InputField(key="limit", label="Limit", type="integer"), (), "${inputData.limit ?? null}"),
            (InputField(key="valuation", label="Valuation", type="number", required=True), (), "${inputData.valuation}"),
            (InputField(key="active", label="Active", type="boolean"), (), "${inputData.active ?? null}"),
            (InputField(key="at", label="At", type="datetime"), (), "${quote(inputData.at ?? null)}"),
            (
                InputField(key="status", label="Status", type="string", choices=["SUCCESS"]),
                ("find",),
                "${inputData.find.status ?? null}",
            ),
            (
                InputField(key="name___eq", label="Eq", type="string"),
                ("where", "name"),
                "${quote(inputData.name.name___eq ?? null)}",
            ),
        ],
    )
    def test_placeholder(self, field: InputField, scope: tuple[str, ...], expected: str) -> None:
        assert build_placeholder(field, scope) == expected
