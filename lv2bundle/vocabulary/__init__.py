"""
Vocabulary package - the fixed LV2 vocabulary the pipeline recognizes.

Components:
- namespaces: rdflib Namespace objects and standard prefix bindings
- terms: IRI enumerations (plugin classes, port classes, features, units)
- vocabulary: the injectable, immutable Vocabulary table
"""

from .namespaces import (
    ATOM, BUFSZ, DMAN, DOAP, EV, FOAF, LV2, MORPH, OPTS, PARAM, PG, PPROPS,
    RSZ, STANDARD_PREFIXES, UNITS,
)
from .terms import (
    PLUGIN_CLASS_PARENTS,
    PORT_DIRECTION_CLASSES,
    PORT_TYPE_CLASSES,
    UNITS_IMPLIED_BY_DESIGNATION,
    Extension,
    ExtensionData,
    HostFeature,
    IriEnum,
    Option,
    PluginClass,
    PortClass,
    PortDesignation,
    PortProperty,
    Unit,
)
from .vocabulary import ENTITY_KIND_TABLE, STANDARD_VOCABULARY, EntityKind, Vocabulary

__all__ = [
    'ATOM', 'BUFSZ', 'DMAN', 'DOAP', 'EV', 'FOAF', 'LV2', 'MORPH', 'OPTS',
    'PARAM', 'PG', 'PPROPS', 'RSZ', 'STANDARD_PREFIXES', 'UNITS',
    'PLUGIN_CLASS_PARENTS',
    'PORT_DIRECTION_CLASSES',
    'PORT_TYPE_CLASSES',
    'UNITS_IMPLIED_BY_DESIGNATION',
    'Extension',
    'ExtensionData',
    'HostFeature',
    'IriEnum',
    'Option',
    'PluginClass',
    'PortClass',
    'PortDesignation',
    'PortProperty',
    'Unit',
    'ENTITY_KIND_TABLE',
    'STANDARD_VOCABULARY',
    'EntityKind',
    'Vocabulary',
]
