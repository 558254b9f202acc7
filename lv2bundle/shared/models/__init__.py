"""
Shared data models for the bundle pipeline.

This module exports the statement-level types, the typed bundle model
and the pipeline result types.
"""

from .statements import (
    AnonymousResource,
    BackReference,
    FallbackValue,
    ParsedDocument,
    Statement,
    StatementBag,
)
from .bundle import (
    AtomPortPayload,
    Bundle,
    ClassSet,
    DynManifest,
    ExtensionPayload,
    LocalizedText,
    OptionsPayload,
    Person,
    Plugin,
    Port,
    PortGroup,
    PortGroupMembership,
    PortGroupsPayload,
    Project,
    RangeStepsPayload,
    ResizePortPayload,
    ScalePoint,
    UnitsPayload,
)
from .conversion import BundleLoadResult, DocumentPlan, MappingResult

__all__ = [
    'AnonymousResource',
    'BackReference',
    'FallbackValue',
    'ParsedDocument',
    'Statement',
    'StatementBag',
    'AtomPortPayload',
    'Bundle',
    'ClassSet',
    'DynManifest',
    'ExtensionPayload',
    'LocalizedText',
    'OptionsPayload',
    'Person',
    'Plugin',
    'Port',
    'PortGroup',
    'PortGroupMembership',
    'PortGroupsPayload',
    'Project',
    'RangeStepsPayload',
    'ResizePortPayload',
    'ScalePoint',
    'UnitsPayload',
    'BundleLoadResult',
    'DocumentPlan',
    'MappingResult',
]
