import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from graphql import GraphQLSchema

from zapier_graphql.config import Config
from zapier_graphql.schema.loader import load_schema_file

URL_ENV_VAR = "SPACEX_API_URL"


class TestSchemaData:
    TESTS_DATA_DIR: Path = Path(__file__).parent / "data"
    SPACEX_SCHEMA: Path = TESTS_DATA_DIR / "spacex.graphql"
    ZAPIER_APP_DIR: Path = TESTS_DATA_DIR / "zapier_app"


def make_config(**overrides: Any) -> Config:
    """Config for the SpaceX test schema, overridable with camelCase keys."""
    raw: dict[str, Any] = {
        "request": {"urlEnvVar": URL_ENV_VAR},
        "scalarMap": {
            "ID": "string",
            "String": "string",
            "Int": "integer",
            "Float": "number",
            "Boolean": "boolean",
            "uuid": "string",
            "timestamptz": "datetime",
        },
        "idMap": {"users_mutation_response": "affected_rows"},
    }
    raw.update(overrides)
    return Config.model_validate(raw)


@pytest.fixture
def config() -> Config:
    return make_config()


@pytest.fixture(scope="module")
def spacex_schema() -> GraphQLSchema:
    assert TestSchemaData.SPACEX_SCHEMA.exists(), f"Missing test file: {TestSchemaData.SPACEX_SCHEMA}"
    return load_schema_file(TestSchemaData.SPACEX_SCHEMA)


@pytest.fixture
def zapier_app(tmp_path: Path) -> Path:
    """A minimal Zapier integration project with an empty app definition."""
    project_dir = tmp_path / "app"
    shutil.copytree(TestSchemaData.ZAPIER_APP_DIR, project_dir)
    return project_dir


@pytest.fixture
def config_factory() -> Callable[..., Config]:
    return make_config
