"""
lv2bundle - LV2 plugin bundle metadata pipeline.

Loads the Turtle documents of an LV2 bundle into a typed model, reports
every syntax error, mapping warning and validation issue, and writes the
model back to Turtle.

Usage:
    from lv2bundle import load_bundle, dump_bundle

    result = load_bundle({"manifest.ttl": manifest, "amp.ttl": data}, "file:///amp.lv2/")
    bundle = result.raise_for_errors()
    files = dump_bundle(bundle)
"""

__version__ = "0.1.0"

from .aggregator import BundleAggregator, dump_bundle, load_bundle
from .common.errors import (
    BundleError,
    BundleLoadError,
    MappingWarning,
    MissingDocumentError,
    SerializationError,
    TurtleSyntaxError,
)
from .common.validation import IssueCategory, Severity, ValidationIssue, ValidationResult
from .config import PipelineConfig
from .shared.models import (
    Bundle,
    BundleLoadResult,
    DocumentPlan,
    DynManifest,
    LocalizedText,
    Plugin,
    Port,
    Project,
)
from .vocabulary import STANDARD_VOCABULARY, Vocabulary

__all__ = [
    '__version__',
    'BundleAggregator',
    'dump_bundle',
    'load_bundle',
    'BundleError',
    'BundleLoadError',
    'MappingWarning',
    'MissingDocumentError',
    'SerializationError',
    'TurtleSyntaxError',
    'IssueCategory',
    'Severity',
    'ValidationIssue',
    'ValidationResult',
    'PipelineConfig',
    'Bundle',
    'BundleLoadResult',
    'DocumentPlan',
    'DynManifest',
    'LocalizedText',
    'Plugin',
    'Port',
    'Project',
    'STANDARD_VOCABULARY',
    'Vocabulary',
]
