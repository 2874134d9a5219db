"""Input and output field descriptors for generated Zapier actions."""

from .builder import build_input_fields, build_operation_input_fields, build_output_fields, flatten_input_fields
from .models import InputField, OutputField
from .sorting import sort_fields

__all__ = [
    "InputField",
    "OutputField",
    "build_input_fields",
    "build_operation_input_fields",
    "build_output_fields",
    "flatten_input_fields",
    "sort_fields",
]
