"""Generators for the operation documents, sample data and modules of Zapier actions."""

from .action import Action, ActionGenerator, OperationArtifacts, build_operation_artifacts
from .document import build_document
from .samples import create_samples

__all__ = [
    "Action",
    "ActionGenerator",
    "OperationArtifacts",
    "build_document",
    "build_operation_artifacts",
    "create_samples",
]
