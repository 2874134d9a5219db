"""Pydantic models for the field descriptors of generated Zapier actions."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Platform-oriented fields never carry the GraphQL field name.
ZAPIER_EXCLUDED_KEYS = {"field"}


class InputField(BaseModel):
    """An input descriptor, either a leaf with a platform type or a parent with children."""

    model_config = ConfigDict(populate_by_name=True)

    key: str
    label: str
    field: str | None = None
    type: str | None = None
    required: bool = False
    help_text: str | None = Field(default=None, alias="helpText")
    choices: list[str] | None = None
    children: list["InputField"] | None = None

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def to_zapier(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, exclude=ZAPIER_EXCLUDED_KEYS)


class OutputField(BaseModel):
    """An output descriptor for a scalar field of the operation result."""

    key: str
    label: str
    type: str | None = None
    choices: list[str] | None = None

    @property
    def has_children(self) -> bool:
        return False

    def to_zapier(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
