from typing import TypeVar

from zapier_graphql.config import Config
from zapier_graphql.fields.models import InputField, OutputField

ID_KEY = "id"
KEY_SEPARATOR = "__"

FieldT = TypeVar("FieldT", InputField, OutputField)


def terminal_key_segment(key: str) -> str:
    """Last ``__``-separated segment of a key, e.g. ``id___eq`` -> ``_eq``."""
    return key.split(KEY_SEPARATOR)[-1]


def _sort_key(field: InputField | OutputField) -> tuple[bool, str]:
    segment = terminal_key_segment(field.key)
    return (segment != ID_KEY, segment)


def sort_fields(fields: list[FieldT], config: Config) -> list[FieldT]:
    """Order fields ``id`` first, then by terminal key segment, children included.

    Returns the fields untouched when sorting is disabled in the configuration.
    """
    if not config.sort_fields:
        return list(fields)

    sorted_fields: list[FieldT] = []
    for field in sorted(fields, key=_sort_key):
        if isinstance(field, InputField) and field.children:
            field = field.model_copy(update={"children": sort_fields(field.children, config)})
        sorted_fields.append(field)
    return sorted_fields
