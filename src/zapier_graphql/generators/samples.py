import json
import re
from typing import Any

from zapier_graphql.config import Config, SampleFieldValues
from zapier_graphql.errors import UnsupportedSampleTypeError
from zapier_graphql.fields.models import InputField, OutputField
from zapier_graphql.fields.sorting import ID_KEY

# Rendered as an expression producing the current time when written out as JavaScript.
CURRENT_TIMESTAMP = "CURRENT_TIMESTAMP"
CURRENT_TIMESTAMP_EXPRESSION = "new Date().toISOString()"

DEFAULT_STRING_SAMPLE = "Something"
DEFAULT_ID_SAMPLE = "1"
DEFAULT_SAMPLE_VALUES: dict[str, Any] = {
    "string": DEFAULT_STRING_SAMPLE,
    "number": 1.0,
    "integer": 1,
    "boolean": True,
    "datetime": CURRENT_TIMESTAMP,
}

JS_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

_NOT_CONFIGURED = object()


def get_configured_value(key: str, sample_values: SampleFieldValues) -> Any:
    """Look up a configured sample for a key, case-insensitively.

    An exact match wins over a prefix match, which wins over a suffix match. Within
    prefixes and suffixes the first matching entry in declaration order wins.
    """
    key = key.lower()

    if key in sample_values.exact:
        return sample_values.exact[key]
    for prefix, value in sample_values.starting_with.items():
        if key.startswith(prefix):
            return value
    for suffix, value in sample_values.ending_with.items():
        if key.endswith(suffix):
            return value

    return _NOT_CONFIGURED


def get_default_value(field: InputField | OutputField) -> Any:
    if field.type == "string":
        return DEFAULT_ID_SAMPLE if field.key == ID_KEY else DEFAULT_STRING_SAMPLE
    if field.type in DEFAULT_SAMPLE_VALUES:
        return DEFAULT_SAMPLE_VALUES[field.type]
    raise UnsupportedSampleTypeError(field.key, field.type)


def create_samples(fields: list[InputField] | list[OutputField], config: Config) -> dict[str, Any]:
    """Build a sample record for a list of fields, one entry per distinct key.

    Parents get a nested record built from their children, enum fields their first
    choice, others the configured sample or the default for their type.

    Raises:
        UnsupportedSampleTypeError: If a leaf has a type without a default sample
    """
    samples: dict[str, Any] = {}

    for field in fields:
        if field.key in samples:
            continue

        if isinstance(field, InputField) and field.children:
            samples[field.key] = create_samples(field.children, config)
        elif field.choices:
            samples[field.key] = field.choices[0]
        else:
            configured = get_configured_value(field.key, config.sample_field_values)
            samples[field.key] = get_default_value(field) if configured is _NOT_CONFIGURED else configured

    return samples


def _render_key(key: str) -> str:
    return key if JS_IDENTIFIER_PATTERN.match(key) else json.dumps(key)


def to_js_literal(value: Any, indent: int = 0, step: int = 2) -> str:
    """Render a value as a JavaScript literal for generated modules.

    Nested lines are indented relative to ``indent``, the column the literal starts
    on, so the result can be dropped into a template line as is.
    """
    padding = " " * (indent + step)
    closing = " " * indent

    if isinstance(value, dict):
        if not value:
            return "{}"
        items = [f"{padding}{_render_key(str(k))}: {to_js_literal(v, indent + step, step)}" for k, v in value.items()]
        return "{\n" + ",\n".join(items) + ",\n" + closing + "}"
    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        items = [f"{padding}{to_js_literal(v, indent + step, step)}" for v in value]
        return "[\n" + ",\n".join(items) + ",\n" + closing + "]"
    if value == CURRENT_TIMESTAMP:
        return CURRENT_TIMESTAMP_EXPRESSION
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value)
