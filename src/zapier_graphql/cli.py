import logging
import sys
from pathlib import Path
from typing import NoReturn

import rich_click as click
import yaml
from dotenv import load_dotenv
from graphql import GraphQLError, GraphQLSchema
from pydantic import ValidationError
from rich.traceback import install

from zapier_graphql import __version__, log
from zapier_graphql.config import CONFIG_FILENAME, Config, load_config
from zapier_graphql.errors import ZapierGraphQLError
from zapier_graphql.generators.action import Action, build_operation_artifacts
from zapier_graphql.project import add_action, init_project, remove_generated_files, update_configured_actions
from zapier_graphql.schema.loader import fetch_schema, load_schema_file

project_dir_option = click.option(
    "--project-dir",
    "-d",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    help="Root directory of the Zapier integration project",
    show_default=True,
)


CONFIG_ERRORS = (ValidationError, TypeError, yaml.YAMLError)


schema_option = click.option(
    "--schema",
    "-s",
    "schema_path",
    type=click.Path(exists=True, path_type=Path),
    help="Introspection result (.json) or GraphQL schema file or directory, instead of fetching the schema",
)


def load_project(project_dir: Path, schema_path: Path | None) -> tuple[Config, GraphQLSchema]:
    """Load the project configuration and the schema, from a file or through introspection."""
    load_dotenv(project_dir / ".env")
    config = load_config(project_dir / CONFIG_FILENAME)
    schema = load_schema_file(schema_path) if schema_path else fetch_schema(config)
    return config, schema


def _exit_with_error(message: str, error: Exception) -> NoReturn:
    log.error(f"{message}: {error}")
    sys.exit(1)


@click.group(context_settings={"auto_envvar_prefix": "ZAPIER_GRAPHQL"})
@click.option(
    "-l",
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default="INFO",
    help="Log level",
    show_default=True,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Log file",
)
@click.version_option(__version__)
def cli(log_level: str, log_file: Path | None) -> None:
    """Generate Zapier triggers, searches and creates from a GraphQL API."""
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setFormatter(logging.Formatter("%(asctime)s:%(levelname)s:%(message)s"))
        log.addHandler(file_handler)

    log.setLevel(log_level.upper())
    if log_level.upper() == "DEBUG":
        _ = install(show_locals=True)


@click.command()
@click.argument("url_env_var")
@project_dir_option
def init(url_env_var: str, project_dir: Path) -> None:
    """Create the .zapiergraphql config file, reading the API URL from URL_ENV_VAR."""
    try:
        config_file = init_project(url_env_var, project_dir)
    except (OSError, ValueError) as e:
        _exit_with_error("Initialization failed", e)

    log.success("Initialized zapier-graphql")
    log.written(config_file, project_dir)
    log.hint(f"Set {url_env_var} in your environment or .env file, then add actions with 'zapier-graphql trigger'")


def _add(action: Action, operation: str, project_dir: Path, schema_path: Path | None) -> None:
    try:
        config, schema = load_project(project_dir, schema_path)
        module_path = add_action(project_dir, schema, config, action, operation)
    except CONFIG_ERRORS as e:
        _exit_with_error(f"Invalid {CONFIG_FILENAME}", e)
    except GraphQLError as e:
        _exit_with_error("Invalid schema", e)
    except ZapierGraphQLError as e:
        _exit_with_error(f"Unable to add {action.value} {operation}", e)
    except OSError as e:
        _exit_with_error("File I/O error", e)

    if module_path is not None:
        log.success(f"Added {action.value} {operation}")
        log.written(module_path, project_dir)


@click.command()
@click.argument("query")
@project_dir_option
@schema_option
def trigger(query: str, project_dir: Path, schema_path: Path | None) -> None:
    """Add a trigger action for a GraphQL QUERY."""
    _add(Action.TRIGGER, query, project_dir, schema_path)


@click.command()
@click.argument("query")
@project_dir_option
@schema_option
def search(query: str, project_dir: Path, schema_path: Path | None) -> None:
    """Add a search action for a GraphQL QUERY with at least one argument."""
    _add(Action.SEARCH, query, project_dir, schema_path)


@click.command()
@click.argument("mutation")
@project_dir_option
@schema_option
def create(mutation: str, project_dir: Path, schema_path: Path | None) -> None:
    """Add a create action for a GraphQL MUTATION."""
    _add(Action.CREATE, mutation, project_dir, schema_path)


@click.command()
@project_dir_option
@schema_option
def update(project_dir: Path, schema_path: Path | None) -> None:
    """Regenerate every action added to the project against the current schema."""
    try:
        config, schema = load_project(project_dir, schema_path)
        updated = update_configured_actions(project_dir, schema, config)
    except CONFIG_ERRORS as e:
        _exit_with_error(f"Invalid {CONFIG_FILENAME}", e)
    except GraphQLError as e:
        _exit_with_error("Invalid schema", e)
    except ZapierGraphQLError as e:
        _exit_with_error("Update failed", e)
    except OSError as e:
        _exit_with_error("File I/O error", e)

    if not updated:
        log.warning("No generated actions found")
        return
    log.success(f"Updated {len(updated)} actions")
    for module_path in updated:
        log.written(module_path, project_dir)


@click.command()
@project_dir_option
@click.confirmation_option(prompt="Remove all generated triggers, searches, creates and their tests?")
def clean(project_dir: Path) -> None:
    """Remove the generated action and test directories."""
    try:
        removed = remove_generated_files(project_dir)
    except OSError as e:
        _exit_with_error("File I/O error", e)

    log.success(f"Removed {len(removed)} directories")
    log.hint("Registrations in the project's entry file are left in place, remove them by hand")


@click.command()
@click.argument("operation")
@click.option("--mutation", "-m", "is_mutation", is_flag=True, default=False, help="OPERATION is a mutation")
@project_dir_option
@schema_option
def inspect(operation: str, is_mutation: bool, project_dir: Path, schema_path: Path | None) -> None:
    """Print the document, fields and sample data generated for an OPERATION without writing files."""
    action = Action.CREATE if is_mutation else Action.TRIGGER
    try:
        config, schema = load_project(project_dir, schema_path)
        artifacts = build_operation_artifacts(schema, config, action, operation)
    except CONFIG_ERRORS as e:
        _exit_with_error(f"Invalid {CONFIG_FILENAME}", e)
    except GraphQLError as e:
        _exit_with_error("Invalid schema", e)
    except ZapierGraphQLError as e:
        _exit_with_error(f"Unable to inspect {operation}", e)

    log.rule(f"{artifacts.kind.capitalize()} {operation}")
    log.key_value("Key", artifacts.operation)
    log.key_value("Noun", artifacts.noun)
    log.key_value("Label", artifacts.label)
    log.key_value("Description", artifacts.description)
    log.rule("Document")
    log.code(artifacts.document)
    log.rule("Input fields")
    log.print_json({"inputFields": [field.to_zapier() for field in artifacts.input_fields]})
    log.rule("Output fields")
    log.print_json({"outputFields": [field.to_zapier() for field in artifacts.output_fields]})
    log.rule("Sample")
    log.print_json(artifacts.sample)
    if artifacts.id_mapping:
        log.rule("Identifier mapping")
        log.code(artifacts.id_mapping, "javascript")


cli.add_command(init)
cli.add_command(trigger)
cli.add_command(search)
cli.add_command(create)
cli.add_command(update)
cli.add_command(clean)
cli.add_command(inspect)

if __name__ == "__main__":
    cli()
