import json
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from zapier_graphql import log
from zapier_graphql.errors import ConfigNotFoundError

CONFIG_FILENAME = ".zapiergraphql"
ZAPIER_APP_RC_FILENAME = ".zapierapprc"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "zapiergraphql.json"
URL_ENV_VAR_PLACEHOLDER = "{{urlEnvVar}}"

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


def _lowercase_keys(values: dict[str, Any]) -> dict[str, Any]:
    return {key.lower(): value for key, value in values.items()}


class RequestConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    url_env_var: str = Field(alias="urlEnvVar", min_length=1)
    headers: dict[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("headers")
    @classmethod
    def merge_default_headers(cls, headers: dict[str, str]) -> dict[str, str]:
        return {**DEFAULT_HEADERS, **headers}


class SampleFieldValues(BaseModel):
    """Configured sample values, matched case-insensitively against field keys.

    Iteration order of ``starting_with`` and ``ending_with`` is the declaration order of
    the configuration file, the first matching entry wins.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    exact: dict[str, Any] = Field(default_factory=dict)
    starting_with: dict[str, Any] = Field(default_factory=dict, alias="startingWith")
    ending_with: dict[str, Any] = Field(default_factory=dict, alias="endingWith")

    @field_validator("exact", "starting_with", "ending_with")
    @classmethod
    def lowercase_keys(cls, values: dict[str, Any]) -> dict[str, Any]:
        return _lowercase_keys(values)


class Config(BaseModel):
    """Project configuration, read once and passed to every resolver and generator."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    request: RequestConfig
    scalar_map: dict[str, str] = Field(default_factory=dict, alias="scalarMap")
    id_map: dict[str, str] = Field(default_factory=dict, alias="idMap")
    sort_fields: bool = Field(default=True, alias="sortFields")
    sample_field_values: SampleFieldValues = Field(default_factory=SampleFieldValues, alias="sampleFieldValues")
    test_bundle: dict[str, Any] = Field(default_factory=dict, alias="testBundle")

    @field_validator("scalar_map", "id_map")
    @classmethod
    def validate_mapped_values(cls, values: dict[str, str]) -> dict[str, str]:
        for key, value in values.items():
            if not value.strip():
                raise ValueError(f"Mapped value for '{key}' cannot be empty")
        return values

    def id_field_for(self, type_name: str) -> str | None:
        """Return the source field mapped to the platform ``id`` for a type, if any."""
        return self.id_map.get(type_name)


def load_config(config_path: Path) -> Config:
    """
    Load and validate the project configuration file.

    The file is JSON, parsed with the YAML loader so the same reader works for
    hand-written YAML configurations.

    Args:
        config_path: Path to the .zapiergraphql file

    Returns:
        The validated Config

    Raises:
        ConfigNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file cannot be parsed.
        TypeError: If the root is not a mapping.
        ValidationError: If validation against Config fails.
    """
    if not config_path.exists():
        raise ConfigNotFoundError(f"No {CONFIG_FILENAME} config file found at {config_path}")

    raw: Any
    with config_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    log.debug("Loaded config from %s", config_path)

    if not isinstance(raw, dict):
        raise TypeError(f"Config root must be a mapping, got {type(raw).__name__}")

    return Config.model_validate(cast(dict[str, Any], raw))


def create_default_config_file(url_env_var: str, project_dir: Path) -> Path:
    """
    Write the default configuration into a host project and include it in Zapier builds.

    Args:
        url_env_var: Name of the environment variable holding the GraphQL API URL
        project_dir: Root of the Zapier integration project

    Returns:
        Path of the written configuration file
    """
    if not url_env_var:
        raise ValueError("Missing URL environment variable parameter")

    contents = DEFAULT_CONFIG_PATH.read_text(encoding="utf-8").replace(URL_ENV_VAR_PLACEHOLDER, url_env_var)

    config_file = project_dir / CONFIG_FILENAME
    config_file.write_text(contents, encoding="utf-8")

    app_rc_file = project_dir / ZAPIER_APP_RC_FILENAME
    app_rc: dict[str, Any] = {}
    if app_rc_file.exists():
        app_rc = json.loads(app_rc_file.read_text(encoding="utf-8"))

    include_in_build = app_rc.setdefault("includeInBuild", [])
    if CONFIG_FILENAME not in include_in_build:
        include_in_build.append(CONFIG_FILENAME)
    app_rc_file.write_text(json.dumps(app_rc, indent=2), encoding="utf-8")

    log.info(f"Created {config_file}")
    return config_file
