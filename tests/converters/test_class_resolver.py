"""
Unit tests for plugin class resolution and entity classification.

Run with: python -m pytest tests/converters/test_class_resolver.py -v
"""

import pytest
from rdflib import URIRef

from lv2bundle.converters.class_resolver import ClassResolver
from lv2bundle.vocabulary.namespaces import DMAN, DOAP, LV2
from lv2bundle.vocabulary.terms import PluginClass
from lv2bundle.vocabulary.vocabulary import EntityKind, Vocabulary


@pytest.mark.unit
class TestClassHierarchy:
    """Test ancestor resolution over the plugin class table."""

    @pytest.fixture
    def resolver(self):
        return ClassResolver()

    def test_reverb_has_three_superclasses(self, resolver):
        assert resolver.ancestors(PluginClass.REVERB) == frozenset({
            PluginClass.DELAY, PluginClass.SIMULATOR, PluginClass.PLUGIN,
        })

    def test_reverb_is_subclass_of_delay_and_simulator(self, resolver):
        assert resolver.is_subclass_of(PluginClass.REVERB, PluginClass.DELAY)
        assert resolver.is_subclass_of(PluginClass.REVERB, PluginClass.SIMULATOR)
        assert resolver.is_subclass_of(PluginClass.REVERB, PluginClass.PLUGIN)
        assert not resolver.is_subclass_of(PluginClass.DELAY, PluginClass.REVERB)

    def test_multi_level_ancestry(self, resolver):
        assert resolver.ancestors(PluginClass.PARA_EQ) == frozenset({
            PluginClass.EQ, PluginClass.FILTER, PluginClass.PLUGIN,
        })

    def test_root_has_no_ancestors(self, resolver):
        assert resolver.ancestors(PluginClass.PLUGIN) == frozenset()
        assert resolver.ancestors_and_self(PluginClass.PLUGIN) == frozenset({PluginClass.PLUGIN})

    def test_closure(self, resolver):
        closure = resolver.closure([PluginClass.AMPLIFIER, PluginClass.LOWPASS])
        assert closure == frozenset({
            PluginClass.AMPLIFIER, PluginClass.DYNAMICS,
            PluginClass.LOWPASS, PluginClass.FILTER,
            PluginClass.PLUGIN,
        })

    def test_most_specific(self, resolver):
        classes = [PluginClass.PLUGIN, PluginClass.DYNAMICS, PluginClass.AMPLIFIER]
        assert resolver.most_specific(classes) == [PluginClass.AMPLIFIER]

    def test_cycle_terminates(self):
        vocabulary = Vocabulary(plugin_class_parents={
            PluginClass.DELAY: (PluginClass.REVERB,),
            PluginClass.REVERB: (PluginClass.DELAY,),
        })
        resolver = ClassResolver(vocabulary)
        assert resolver.ancestors(PluginClass.DELAY) == frozenset({PluginClass.REVERB})
        assert resolver.ancestors(PluginClass.REVERB) == frozenset({PluginClass.DELAY})


@pytest.mark.unit
class TestEntityKind:
    """Test classification of entry points by their types."""

    @pytest.fixture
    def resolver(self):
        return ClassResolver()

    def test_plugin(self, resolver):
        assert resolver.entity_kind([LV2.Plugin]) is EntityKind.PLUGIN

    def test_plugin_subclass_alone_is_a_plugin(self, resolver):
        assert resolver.entity_kind([LV2.ReverbPlugin]) is EntityKind.PLUGIN

    def test_project(self, resolver):
        assert resolver.entity_kind([DOAP.Project]) is EntityKind.PROJECT

    def test_dyn_manifest(self, resolver):
        assert resolver.entity_kind([DMAN.DynManifest]) is EntityKind.DYN_MANIFEST

    def test_first_table_row_wins(self, resolver):
        assert resolver.entity_kind([DOAP.Project, LV2.Plugin]) is EntityKind.PLUGIN

    def test_unknown(self, resolver):
        assert resolver.entity_kind([URIRef("http://example.org/Thing")]) is EntityKind.UNKNOWN
        assert resolver.entity_kind([]) is EntityKind.UNKNOWN
