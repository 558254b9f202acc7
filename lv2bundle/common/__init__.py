"""Shared error, validation and labelling utilities."""

from .validation import IssueCategory, Severity, ValidationIssue, ValidationResult
from .errors import (
    BundleError,
    BundleLoadError,
    MappingWarning,
    MissingDocumentError,
    SerializationError,
    TurtleSyntaxError,
)
from .id_generator import LabelGenerator

__all__ = [
    'IssueCategory',
    'Severity',
    'ValidationIssue',
    'ValidationResult',
    'BundleError',
    'BundleLoadError',
    'MappingWarning',
    'MissingDocumentError',
    'SerializationError',
    'TurtleSyntaxError',
    'LabelGenerator',
]
