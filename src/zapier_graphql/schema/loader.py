import json
import os
from pathlib import Path
from typing import Any

import requests
from ariadne import load_schema_from_path
from graphql import GraphQLField, GraphQLSchema, build_client_schema, build_schema, get_introspection_query

from zapier_graphql import log
from zapier_graphql.config import Config
from zapier_graphql.errors import InvalidOperationKindError, OperationNotFoundError, SchemaFetchError

REQUEST_TIMEOUT_SECONDS = 30
OPERATION_KINDS = ("query", "mutation")


def get_api_url(config: Config) -> str:
    """Read the GraphQL API URL from the environment variable named in the configuration."""
    url = os.environ.get(config.request.url_env_var)
    if not url:
        raise SchemaFetchError(f"Environment variable {config.request.url_env_var} is not set")
    return url


def make_request(config: Config, query: str, url: str | None = None) -> dict[str, Any]:
    """POST a GraphQL query with the configured headers and return the decoded JSON body.

    Raises:
        SchemaFetchError: If the request fails or the server answers with a non-200 status
    """
    url = url or get_api_url(config)
    log.debug(f"Sending GraphQL request to {url}")

    try:
        response = requests.post(
            url,
            json={"query": query},
            headers=config.request.headers,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        raise SchemaFetchError(f"Request to {url} failed: {e}") from e

    if response.status_code != 200:
        raise SchemaFetchError(f"[HTTP {response.status_code}: {response.reason}] {response.text}")

    payload: dict[str, Any] = response.json()
    return payload


def fetch_schema(config: Config, url: str | None = None) -> GraphQLSchema:
    """Fetch the schema of the configured API through an introspection query."""
    payload = make_request(config, get_introspection_query(), url)

    if payload.get("errors"):
        messages = ", ".join(str(error.get("message", error)) for error in payload["errors"])
        raise SchemaFetchError(f"Introspection query failed: {messages}")
    if not payload.get("data"):
        raise SchemaFetchError("Introspection query returned no data")

    log.info("Fetched schema through introspection")
    return build_client_schema(payload["data"])


def load_schema_file(schema_path: Path) -> GraphQLSchema:
    """Load a schema from a saved introspection result (.json) or from SDL files.

    A JSON file may hold the bare introspection data or the full response with a
    top-level ``data`` key. Anything else is read as SDL, a directory being read as
    the concatenation of its GraphQL files.
    """
    if schema_path.is_file() and schema_path.suffix == ".json":
        introspection = json.loads(schema_path.read_text(encoding="utf-8"))
        introspection = introspection.get("data", introspection)
        log.debug(f"Loaded introspection result from {schema_path}")
        return build_client_schema(introspection)

    log.debug(f"Loaded schema definition from {schema_path}")
    return build_schema(load_schema_from_path(str(schema_path)))


def get_query_definition(schema: GraphQLSchema, operation: str) -> GraphQLField:
    return get_operation_definition(schema, "query", operation)


def get_mutation_definition(schema: GraphQLSchema, operation: str) -> GraphQLField:
    return get_operation_definition(schema, "mutation", operation)


def get_operation_definition(schema: GraphQLSchema, kind: str, operation: str) -> GraphQLField:
    """Look up a root field of the query or mutation type.

    Raises:
        InvalidOperationKindError: If kind is neither query nor mutation
        OperationNotFoundError: If the root type or the field does not exist
    """
    if kind not in OPERATION_KINDS:
        raise InvalidOperationKindError(kind)

    root_type = schema.query_type if kind == "query" else schema.mutation_type
    if root_type is None or operation not in root_type.fields:
        raise OperationNotFoundError(kind, operation)

    return root_type.fields[operation]
