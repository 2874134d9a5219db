"""Read and write the files of the host Zapier integration project."""

import re
import shutil
from pathlib import Path

from graphql import GraphQLSchema

from zapier_graphql import log
from zapier_graphql.config import Config, create_default_config_file
from zapier_graphql.errors import EntryFileError
from zapier_graphql.generators.action import ACTION_DIRECTORIES, Action, ActionGenerator, parse_action
from zapier_graphql.naming import module_file_name, spec_file_name

ENTRY_FILENAME = "index.js"
TEST_DIRNAME = "test"
RUNTIME_HELPER_SOURCE = Path(__file__).parent / "defaults" / "zapier-graphql.js"
RUNTIME_HELPER_PATH = Path("lib") / "zapier-graphql.js"

REQUIRE_PATTERN = re.compile(r"^const\s+[\w${}\s,]+=\s*require\(.*\);?[ \t]*$", re.MULTILINE)
USE_STRICT_PATTERN = re.compile(r"^\s*['\"]use strict['\"];?[ \t]*$", re.MULTILINE)
KEY_PATTERN = re.compile(r"^\s*key:\s*'([^']+)'", re.MULTILINE)


def action_variable(action: Action, operation: str) -> str:
    """Name of the entry-file variable holding a generated action, e.g. ``dragonTrigger``."""
    return f"{operation}{action.value.capitalize()}"


def action_module_path(project_dir: Path, action: Action, operation: str) -> Path:
    return project_dir / action.directory / module_file_name(operation)


def action_test_path(project_dir: Path, action: Action, operation: str) -> Path:
    return project_dir / TEST_DIRNAME / action.directory / spec_file_name(operation)


def write_runtime_helper(project_dir: Path) -> Path:
    """Copy the runtime helper required by generated modules into the host project."""
    helper_path = project_dir / RUNTIME_HELPER_PATH
    helper_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(RUNTIME_HELPER_SOURCE, helper_path)
    log.info(f"Created {helper_path}")
    return helper_path


def init_project(url_env_var: str, project_dir: Path) -> Path:
    """Write the default configuration and the runtime helper into a host project."""
    config_file = create_default_config_file(url_env_var, project_dir)
    write_runtime_helper(project_dir)
    return config_file


def is_registered(entry_source: str, action: Action, operation: str) -> bool:
    variable = re.escape(action_variable(action, operation))
    return re.search(rf"\[{variable}\.key\]", entry_source) is not None


def _insert_require(entry_source: str, require_line: str) -> str:
    requires = list(REQUIRE_PATTERN.finditer(entry_source))
    if requires:
        position = requires[-1].end()
        return f"{entry_source[:position]}\n{require_line}{entry_source[position:]}"

    use_strict = USE_STRICT_PATTERN.search(entry_source)
    if use_strict:
        position = use_strict.end()
        return f"{entry_source[:position]}\n\n{require_line}{entry_source[position:]}"

    return f"{require_line}\n\n{entry_source}"


def _section_pattern(action: Action) -> re.Pattern[str]:
    return re.compile(rf"^([ \t]*){action.directory}\s*:\s*\{{", re.MULTILINE)


def read_entry_file(entry_file: Path, action: Action) -> str:
    """Read the entry file, checking it has the section the action is registered in.

    Raises:
        EntryFileError: If the entry file or the section is missing
    """
    if not entry_file.exists():
        raise EntryFileError(f"No {ENTRY_FILENAME} entry file found at {entry_file}")

    entry_source = entry_file.read_text(encoding="utf-8")
    if _section_pattern(action).search(entry_source) is None:
        raise EntryFileError(f"No '{action.directory}' section found in {entry_file}")
    return entry_source


def register_action(entry_file: Path, action: Action, operation: str) -> bool:
    """Register a generated action in the host project's entry file.

    Adds a ``require`` of the module after the last top-level ``require`` and an entry
    in the ``triggers``, ``searches`` or ``creates`` section of the exported app.

    Returns:
        False if the action was already registered, True otherwise

    Raises:
        EntryFileError: If the entry file or the section is missing
    """
    entry_source = read_entry_file(entry_file, action)
    if is_registered(entry_source, action, operation):
        return False

    variable = action_variable(action, operation)
    module_stem = Path(module_file_name(operation)).stem
    entry_source = _insert_require(
        entry_source, f"const {variable} = require('./{action.directory}/{module_stem}');"
    )

    section = _section_pattern(action).search(entry_source)
    if section is None:
        raise EntryFileError(f"No '{action.directory}' section found in {entry_file}")

    section_indent = section.group(1)
    registration = f"\n{section_indent}  [{variable}.key]: {variable},"
    position = section.end()
    if entry_source[position:].lstrip(" \t").startswith("}"):
        registration = f"{registration}\n{section_indent}"
        entry_source = entry_source[:position] + registration + entry_source[position:].lstrip(" \t")
    else:
        entry_source = entry_source[:position] + registration + entry_source[position:]

    entry_file.write_text(entry_source, encoding="utf-8")
    log.info(f"Registered {variable} in {entry_file}")
    return True


def write_action_files(
    project_dir: Path,
    generator: ActionGenerator,
    action: Action,
    operation: str,
    with_test: bool = True,
) -> Path:
    """Render and write the action module and, unless disabled, its test module.

    Returns:
        Path of the action module
    """
    artifacts = generator.build(action, operation)

    module_path = action_module_path(project_dir, action, operation)
    module_path.parent.mkdir(parents=True, exist_ok=True)
    module_path.write_text(generator.render_action_module(artifacts), encoding="utf-8")
    log.info(f"Created {module_path}")

    if not with_test:
        return module_path

    test_path = action_test_path(project_dir, action, operation)
    test_path.parent.mkdir(parents=True, exist_ok=True)
    test_path.write_text(generator.render_test_module(artifacts), encoding="utf-8")
    log.info(f"Created {test_path}")

    return module_path


def add_action(
    project_dir: Path,
    schema: GraphQLSchema,
    config: Config,
    action: str | Action,
    operation: str,
) -> Path | None:
    """Generate an action for an operation and register it in the host project.

    Returns:
        Path of the generated module, or None if the action was already registered
    """
    action = parse_action(action)
    entry_file = project_dir / ENTRY_FILENAME

    if is_registered(read_entry_file(entry_file, action), action, operation):
        log.warning(f"{action.value.capitalize()} {operation} is already registered, run update to regenerate it")
        return None

    module_path = write_action_files(project_dir, ActionGenerator(schema, config), action, operation)
    register_action(entry_file, action, operation)
    return module_path


def find_generated_actions(project_dir: Path) -> list[tuple[Action, str]]:
    """List the actions generated in the host project, read back from their ``key``."""
    actions: list[tuple[Action, str]] = []
    for action, directory in ACTION_DIRECTORIES.items():
        action_dir = project_dir / directory
        if not action_dir.is_dir():
            continue
        for module_path in sorted(action_dir.glob("*.js")):
            match = KEY_PATTERN.search(module_path.read_text(encoding="utf-8"))
            if match is None:
                log.debug(f"Skipping {module_path} without a key")
                continue
            actions.append((action, match.group(1)))
    return actions


def update_configured_actions(project_dir: Path, schema: GraphQLSchema, config: Config) -> list[Path]:
    """Regenerate every generated action module against the current schema.

    Test modules are not rewritten.
    """
    generator = ActionGenerator(schema, config)
    updated = [
        write_action_files(project_dir, generator, action, operation, with_test=False)
        for action, operation in find_generated_actions(project_dir)
    ]
    log.info(f"Updated {len(updated)} actions")
    return updated


def remove_generated_files(project_dir: Path) -> list[Path]:
    """Delete the action and test directories of the host project."""
    removed: list[Path] = []
    for directory in ACTION_DIRECTORIES.values():
        for path in (project_dir / directory, project_dir / TEST_DIRNAME / directory):
            if path.is_dir():
                shutil.rmtree(path)
                log.info(f"Removed {path}")
                removed.append(path)
    return removed
