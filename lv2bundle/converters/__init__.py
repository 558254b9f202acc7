"""
Converters between the statement graph and the typed bundle model.

Components:
- TypeMapper: literal to Python value conversion and back
- URIUtils: symbol validation and bundle document naming
- ClassResolver: plugin class hierarchy and entity classification
- SchemaMapper: graph to typed bundle
- BundleSerializer: typed bundle to Turtle documents
"""

from .type_mapper import TypeMapper
from .uri_utils import URIUtils
from .class_resolver import ClassResolver
from .schema_mapper import SchemaMapper
from .bundle_serializer import BundleSerializer

__all__ = [
    'TypeMapper',
    'URIUtils',
    'ClassResolver',
    'SchemaMapper',
    'BundleSerializer',
]
