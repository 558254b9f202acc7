"""
Class Resolver - LV2 plugin class hierarchy resolution.

This module computes superclass closures over the plugin class table
(e.g. lv2:ReverbPlugin is also a DelayPlugin, a SimulatorPlugin and a
Plugin) and classifies subjects into entity kinds with the vocabulary's
ordered lookup table.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

from rdflib import URIRef

from ..vocabulary.terms import PluginClass
from ..vocabulary.vocabulary import STANDARD_VOCABULARY, EntityKind, Vocabulary

logger = logging.getLogger(__name__)


class ClassResolver:
    """
    Resolves plugin class ancestry and entity kinds.

    Handles the class table with:
    - Cycle detection to prevent infinite loops
    - Depth limiting for malformed tables

    Example:
        >>> resolver = ClassResolver()
        >>> sorted(c.name for c in resolver.ancestors(PluginClass.REVERB))
        ['DELAY', 'PLUGIN', 'SIMULATOR']
    """

    DEFAULT_MAX_DEPTH = 10

    def __init__(
        self,
        vocabulary: Vocabulary = STANDARD_VOCABULARY,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.vocabulary = vocabulary
        self.max_depth = max_depth
        self._parents: Mapping[PluginClass, Tuple[PluginClass, ...]] = vocabulary.plugin_class_parents
        self._cache: Dict[PluginClass, frozenset] = {}

    def ancestors(self, plugin_class: PluginClass) -> frozenset:
        """
        All superclasses of a plugin class, excluding the class itself.

        Args:
            plugin_class: The class to resolve

        Returns:
            Frozen set of superclasses
        """
        cached = self._cache.get(plugin_class)
        if cached is not None:
            return cached

        found: Set[PluginClass] = set()
        self._collect(plugin_class, found, visited=frozenset({plugin_class}), depth=self.max_depth)
        found.discard(plugin_class)
        result = frozenset(found)
        self._cache[plugin_class] = result
        return result

    def _collect(
        self,
        node: PluginClass,
        found: Set[PluginClass],
        visited: frozenset,
        depth: int,
    ) -> None:
        if depth <= 0:
            logger.warning(f"Maximum depth reached resolving superclasses of {node}")
            return
        for parent in self._parents.get(node, ()):
            if parent in visited:
                logger.debug(f"Cycle detected in class hierarchy at {parent}, skipping")
                continue
            found.add(parent)
            self._collect(parent, found, visited | {parent}, depth - 1)

    def ancestors_and_self(self, plugin_class: PluginClass) -> frozenset:
        return self.ancestors(plugin_class) | {plugin_class}

    def closure(self, classes: Iterable[PluginClass]) -> frozenset:
        """Classes plus every class they imply."""
        result: Set[PluginClass] = set()
        for plugin_class in classes:
            result |= self.ancestors_and_self(plugin_class)
        return frozenset(result)

    def is_subclass_of(self, child: PluginClass, parent: PluginClass) -> bool:
        """True when ``child`` is ``parent`` or one of its descendants."""
        return child == parent or parent in self.ancestors(child)

    def most_specific(self, classes: Iterable[PluginClass]) -> List[PluginClass]:
        """Classes not implied by another class in the collection, sorted."""
        classes = set(classes)
        implied: Set[PluginClass] = set()
        for plugin_class in classes:
            implied |= self.ancestors(plugin_class)
        return sorted(classes - implied, key=str)

    def entity_kind(self, types: Iterable[Union[URIRef, str]]) -> EntityKind:
        """
        Classify a subject by its rdf:type IRIs.

        Each type is expanded to itself plus its superclasses; the first
        row of the vocabulary's kind table matching any of them wins.

        Args:
            types: rdf:type objects of the subject

        Returns:
            The entity kind, or EntityKind.UNKNOWN
        """
        best: Optional[EntityKind] = None
        best_rank = len(self.vocabulary.entity_kinds)
        for iri in types:
            candidates: List[str] = [str(iri)]
            plugin_class = PluginClass.from_iri(iri)
            if plugin_class is not None:
                candidates.extend(str(c) for c in self.ancestors(plugin_class))
            for candidate in candidates:
                kind = self.vocabulary.kind_for_class(candidate)
                if kind is None:
                    continue
                rank = self.vocabulary.kind_rank(kind)
                if rank < best_rank:
                    best, best_rank = kind, rank
        return best or EntityKind.UNKNOWN
