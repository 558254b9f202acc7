"""
Injectable vocabulary configuration.

``Vocabulary`` bundles the fixed tables the mapper, validator and
serializer consult: the ordered class IRI to entity kind table, the
plugin class hierarchy, the enabled extension set and the prefix
bindings offered to the writer. It is immutable; ``STANDARD_VOCABULARY``
is the default instance, and ``with_extensions`` derives a restricted
copy.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple, Union

from rdflib import URIRef

from .namespaces import DMAN, DOAP, LV2, STANDARD_PREFIXES
from .terms import PLUGIN_CLASS_PARENTS, Extension, PluginClass

logger = logging.getLogger(__name__)


class EntityKind(Enum):
    """Kinds of top-level entities an entry point can resolve to."""
    PLUGIN = "plugin"
    PROJECT = "project"
    DYN_MANIFEST = "dyn_manifest"
    UNKNOWN = "unknown"


# Ordered: the first row matching one of a subject's classes wins
ENTITY_KIND_TABLE: Tuple[Tuple[URIRef, EntityKind], ...] = (
    (LV2.Plugin, EntityKind.PLUGIN),
    (DOAP.Project, EntityKind.PROJECT),
    (DMAN.DynManifest, EntityKind.DYN_MANIFEST),
)


@dataclass(frozen=True)
class Vocabulary:
    """
    Immutable table of recognized classes, kinds and extensions.

    Attributes:
        entity_kinds: Ordered (class IRI, kind) pairs.
        plugin_class_parents: Direct superclasses of each plugin class.
        extensions: Extensions mapped into typed payloads; predicates of
            other extensions are kept in the generic fallback.
        prefixes: Prefix bindings offered to the Turtle writer.
    """
    entity_kinds: Tuple[Tuple[URIRef, EntityKind], ...] = ENTITY_KIND_TABLE
    plugin_class_parents: Mapping[PluginClass, Tuple[PluginClass, ...]] = field(
        default_factory=lambda: MappingProxyType(dict(PLUGIN_CLASS_PARENTS))
    )
    extensions: frozenset = frozenset(Extension)
    prefixes: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(STANDARD_PREFIXES))
    )

    def kind_for_class(self, iri: Union[str, URIRef]) -> Optional[EntityKind]:
        """Return the kind a class IRI maps to directly, if any."""
        for class_iri, kind in self.entity_kinds:
            if str(class_iri) == str(iri):
                return kind
        return None

    def kind_rank(self, kind: EntityKind) -> int:
        """Position of a kind in the lookup table (lower wins)."""
        for rank, (_, table_kind) in enumerate(self.entity_kinds):
            if table_kind is kind:
                return rank
        return len(self.entity_kinds)

    def supports(self, extension: Extension) -> bool:
        """Check whether an extension is mapped into typed payloads."""
        return extension in self.extensions

    def with_extensions(self, extensions: Iterable[Extension]) -> 'Vocabulary':
        """Return a copy that only maps the given extensions."""
        enabled = frozenset(extensions)
        logger.debug(f"Vocabulary restricted to extensions: {sorted(e.name for e in enabled)}")
        return replace(self, extensions=enabled)


STANDARD_VOCABULARY = Vocabulary()
