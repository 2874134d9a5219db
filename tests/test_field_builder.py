from collections.abc import Callable
from typing import cast

import pytest
from graphql import GraphQLArgument, GraphQLObjectType, GraphQLSchema, build_schema

from zapier_graphql.config import Config
from zapier_graphql.errors import UnresolvedTypeError
from zapier_graphql.fields.builder import build_operation_input_fields, build_output_fields, flatten_input_fields
from zapier_graphql.fields.models import InputField
from zapier_graphql.naming import humanize

DEEP_SCHEMA = """
    input A {
        b: B
        x: String
    }

    input B {
        c: C
        y: Int
    }

    input C {
        d: D
        z: Int
    }

    input D {
        w: String
    }

    type Query {
        deep(a: A): String
        deepWithLimit(a: A, n: Int): String
    }
"""


def query_args(schema: GraphQLSchema, operation: str) -> dict[str, GraphQLArgument]:
    query_type = cast(GraphQLObjectType, schema.query_type)
    return query_type.fields[operation].args


def mutation_args(schema: GraphQLSchema, operation: str) -> dict[str, GraphQLArgument]:
    mutation_type = cast(GraphQLObjectType, schema.mutation_type)
    return mutation_type.fields[operation].args


def nesting_depth(fields: list[InputField]) -> int:
    return max((1 + nesting_depth(field.children) for field in fields if field.children), default=0)


class TestInputFields:
    """Argument lists turned into InputField descriptors."""

    def test_scalar_arguments(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        fields = build_operation_input_fields(query_args(spacex_schema, "dragons"), config)

        assert [field.key for field in fields] == ["limit", "offset"]
        assert fields[0].to_zapier() == {"key": "limit", "label": "Limit", "type": "integer", "required": False}

    def test_required_argument(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        [id_field] = build_operation_input_fields(query_args(spacex_schema, "dragonById"), config)

        assert id_field.key == "id"
        assert id_field.type == "string"
        assert id_field.required is True

    def test_no_arguments(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        assert build_operation_input_fields(query_args(spacex_schema, "dragon"), config) == []

    def test_single_object_argument_is_flattened(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        fields = build_operation_input_fields(mutation_args(spacex_schema, "delete_users"), config)

        # _and, _not and _or only hold nested objects, which are past the nesting limit
        assert [field.key for field in fields] == ["id", "name", "rocket", "timestamp", "twitter"]
        assert [child.key for child in fields[0].children or []] == [
            "id___eq",
            "id___gt",
            "id___in",
            "id___is_null",
            "id___neq",
        ]
        assert nesting_depth(fields) == 1

    def test_flattened_children_carry_platform_types(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        fields = build_operation_input_fields(mutation_args(spacex_schema, "delete_users"), config)
        timestamp = next(field for field in fields if field.key == "timestamp")

        assert timestamp.type is None
        assert timestamp.help_text is None
        assert {child.key: child.type for child in timestamp.children or []} == {
            "timestamp___eq": "datetime",
            "timestamp___gt": "datetime",
            "timestamp___lt": "datetime",
        }

    def test_gql_variant_keeps_wrapper_argument(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        [where] = build_operation_input_fields(mutation_args(spacex_schema, "delete_users"), config, for_gql=True)

        assert where.key == "where"
        assert where.field == "where"
        assert where.required is True
        id_exp = next(child for child in where.children or [] if child.key == "id")
        assert [(child.field, child.key) for child in id_exp.children or []][:2] == [
            ("_eq", "id___eq"),
            ("_gt", "id___gt"),
        ]

    def test_object_argument_next_to_scalar_is_not_flattened(
        self, spacex_schema: GraphQLSchema, config: Config
    ) -> None:
        fields = build_operation_input_fields(query_args(spacex_schema, "launchesPast"), config)

        assert [field.key for field in fields] == ["find", "limit"]
        find = fields[0]
        assert [child.key for child in find.children or []] == ["launch_year", "mission_name", "rocket_id", "status"]
        status = next(child for child in find.children or [] if child.key == "status")
        assert status.choices == ["SUCCESS", "FAILURE", "UPCOMING"]
        assert status.type == "string"

    def test_help_text_from_field_description(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        [find, _] = build_operation_input_fields(query_args(spacex_schema, "launchesPast"), config)
        rocket_id = next(child for child in find.children or [] if child.key == "rocket_id")

        assert rocket_id.help_text == "Identifier of the rocket"
        assert "helpText" in rocket_id.to_zapier()

    @pytest.mark.parametrize(
        "operation, expected",
        [
            ("deep", [("b", ["b__y"]), ("x", None)]),
            ("deepWithLimit", [("a", ["x"]), ("n", None)]),
        ],
    )
    def test_nesting_never_exceeds_one_level(
        self, config: Config, operation: str, expected: list[tuple[str, list[str] | None]]
    ) -> None:
        schema = build_schema(DEEP_SCHEMA)
        fields = build_operation_input_fields(query_args(schema, operation), config)

        assert [
            (field.key, [child.key for child in field.children] if field.children else None) for field in fields
        ] == expected
        assert nesting_depth(fields) <= 1

    def test_fields_are_not_sorted_when_disabled(
        self, spacex_schema: GraphQLSchema, config_factory: Callable[..., Config]
    ) -> None:
        config = config_factory(sortFields=False)
        fields = build_operation_input_fields(query_args(spacex_schema, "launchesPast"), config)

        assert [child.key for child in fields[0].children or []] == [
            "mission_name",
            "launch_year",
            "rocket_id",
            "status",
        ]

    def test_flatten_leaves_multiple_fields_alone(self) -> None:
        fields = [InputField(key="a", label="A", type="string"), InputField(key="b", label="B", type="string")]

        assert flatten_input_fields(fields) == fields


class TestOutputFields:
    """Return types turned into OutputField descriptors."""

    def test_object_scalar_fields_only(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        fields = build_output_fields(spacex_schema.type_map["Dragon"], config)

        assert [field.key for field in fields] == [
            "id",
            "active",
            "crew_capacity",
            "description",
            "dry_mass_kg",
            "first_flight",
            "name",
            "type",
        ]

    def test_enum_field_choices(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        fields = build_output_fields(spacex_schema.type_map["Launch"], config)
        status = next(field for field in fields if field.key == "status")

        assert status.to_zapier() == {
            "key": "status",
            "label": "Status",
            "type": "string",
            "choices": ["SUCCESS", "FAILURE", "UPCOMING"],
        }

    def test_id_mapping_adds_id_field(self, spacex_schema: GraphQLSchema, config: Config) -> None:
        response_type = spacex_schema.type_map["users_mutation_response"]

        platform = build_output_fields(response_type, config)
        gql = build_output_fields(response_type, config, for_gql=True)

        assert [field.key for field in platform] == ["id", "affected_rows"]
        assert platform[0].type == "string"
        assert [field.key for field in gql] == ["affected_rows"]

    @pytest.mark.parametrize(
        "type_name, key, choices",
        [
            ("ID", "id", None),
            ("String", "value", None),
            ("CapsuleStatus", "value", ["active", "retired", "unknown", "destroyed"]),
        ],
    )
    def test_leaf_return_type(
        self, spacex_schema: GraphQLSchema, config: Config, type_name: str, key: str, choices: list[str] | None
    ) -> None:
        leaf_type = spacex_schema.type_map[type_name]

        [field] = build_output_fields(leaf_type, config)
        assert field.key == key
        assert field.type == "string"
        assert field.choices == choices
        assert build_output_fields(leaf_type, config, for_gql=True) == []

    def test_union_return_type_is_unresolved(self, config: Config) -> None:
        schema = build_schema("""
            type A { a: String }
            type B { b: String }
            union AB = A | B
            type Query { ab: AB }
        """)

        with pytest.raises(UnresolvedTypeError, match="AB"):
            build_output_fields(schema.type_map["AB"], config)


class TestLabels:
    @pytest.mark.parametrize(
        "name, label",
        [
            ("user_full_name", "User Full Name"),
            ("id", "Id"),
            ("crew_capacity", "Crew Capacity"),
        ],
    )
    def test_humanize(self, name: str, label: str) -> None:
        assert humanize(name) == label
