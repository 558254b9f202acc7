"""
Unit tests for the schema mapper.

Tests cover:
- Typed extraction of plugins, ports, people, projects and dynamic manifests
- Fallback preservation of unknown predicates and classes
- Warnings for uninterpretable values, unknown entry points and
  unassociated statements
- Blank-node cycles
- Extension payloads and vocabulary restriction

Run with: python -m pytest tests/converters/test_schema_mapper.py -v
"""

import pytest
from rdflib import Literal, RDF, URIRef

from lv2bundle.common.validation import IssueCategory
from lv2bundle.converters.schema_mapper import SchemaMapper
from lv2bundle.formats.turtle.parser import TurtleParser
from lv2bundle.graph.index import GraphIndex
from lv2bundle.shared.models.bundle import (
    AtomPortPayload,
    LocalizedText,
    PortGroupMembership,
    PortGroupsPayload,
    RangeStepsPayload,
    ResizePortPayload,
    UnitsPayload,
)
from lv2bundle.shared.models.statements import AnonymousResource, BackReference
from lv2bundle.vocabulary.namespaces import ATOM, DOAP, FOAF, LV2, PG, UNITS
from lv2bundle.vocabulary.terms import (
    Extension,
    HostFeature,
    PluginClass,
    PortClass,
    PortProperty,
    Unit,
)
from lv2bundle.vocabulary.vocabulary import STANDARD_VOCABULARY


BASE = "file:///amp.lv2/"
AMP = URIRef("http://example.org/plugins/amp")
EX = "http://example.org/vocab#"

HEADER = '''
@prefix atom:  <http://lv2plug.in/ns/ext/atom#> .
@prefix dman:  <http://lv2plug.in/ns/ext/dynmanifest#> .
@prefix doap:  <http://usefulinc.com/ns/doap#> .
@prefix ex:    <http://example.org/vocab#> .
@prefix foaf:  <http://xmlns.com/foaf/0.1/> .
@prefix lv2:   <http://lv2plug.in/ns/lv2core#> .
@prefix opts:  <http://lv2plug.in/ns/ext/options#> .
@prefix pg:    <http://lv2plug.in/ns/ext/port-groups#> .
@prefix pprops: <http://lv2plug.in/ns/ext/port-props#> .
@prefix rdf:   <http://www.w3.org/1999/02/22-rdf-syntax-ns#> .
@prefix rdfs:  <http://www.w3.org/2000/01/rdf-schema#> .
@prefix rsz:   <http://lv2plug.in/ns/ext/resize-port#> .
@prefix units: <http://lv2plug.in/ns/extensions/units#> .
'''


def map_documents(documents, vocabulary=STANDARD_VOCABULARY):
    """Parse, merge and map documents the way the aggregator does."""
    parser = TurtleParser()
    index = GraphIndex()
    entry_points = []
    for name in sorted(documents, key=lambda n: (n != "manifest.ttl", n)):
        text = documents[name]
        if isinstance(text, str):
            text = HEADER + text
        document = parser.parse(text, BASE + name, name)
        index.insert(document)
        if name == "manifest.ttl":
            entry_points = document.typed_subjects(RDF.type)
    return SchemaMapper(vocabulary).map(index, entry_points, BASE)


def map_manifest(body, vocabulary=STANDARD_VOCABULARY):
    return map_documents({"manifest.ttl": body}, vocabulary)


def categories(result):
    return [w.category for w in result.warnings]


@pytest.mark.unit
class TestPluginMapping:
    """Test typed extraction from the amplifier bundle."""

    @pytest.fixture
    def result(self, amp_documents):
        return map_documents(amp_documents)

    def test_no_warnings(self, result):
        assert result.warnings == []
        assert result.consumed_count == result.statement_count

    def test_plugin_fields(self, result):
        plugin, = result.bundle.plugins
        assert plugin.uri == AMP
        assert plugin.binary == URIRef("file:///amp.lv2/amp.so")
        assert plugin.see_also == {URIRef("file:///amp.lv2/amp.ttl")}
        assert plugin.classes.known == {PluginClass.PLUGIN, PluginClass.AMPLIFIER}
        assert plugin.names == {
            LocalizedText("Simple Amp"),
            LocalizedText("Einfacher Verstaerker", "de"),
        }
        assert plugin.license == URIRef("http://opensource.org/licenses/isc")
        assert plugin.version == "2.0"
        assert HostFeature.HARD_RT_CAPABLE in plugin.optional_features

    def test_maintainer(self, result):
        plugin, = result.bundle.plugins
        maintainer, = plugin.maintainers
        assert maintainer.uri is None
        assert maintainer.name == "Jo Example"
        assert maintainer.mbox == URIRef("mailto:jo@example.org")
        assert maintainer.classes == frozenset({FOAF.Person})

    def test_ports_ordered_by_index(self, result):
        plugin, = result.bundle.plugins
        assert [p.index for p in plugin.ports] == [0, 1, 2]
        assert [p.symbol for p in plugin.ports] == ["gain", "in", "out"]
        assert plugin.port_by_index(2).symbol == "out"
        assert plugin.port_by_index(3) is None

    def test_control_port(self, result):
        gain = result.bundle.plugins[0].port_by_symbol("gain")
        assert gain.classes.known == {PortClass.INPUT, PortClass.CONTROL}
        assert gain.is_input and not gain.is_output
        assert (gain.minimum, gain.maximum, gain.default) == (-90.0, 24.0, 0.0)
        assert gain.unit is Unit.DECIBEL
        assert gain.extensions[Extension.UNITS] == UnitsPayload(Unit.DECIBEL)

    def test_scale_point(self, result):
        gain = result.bundle.plugins[0].port_by_symbol("gain")
        point, = gain.scale_points
        assert point.value == 0.0
        assert point.labels == frozenset({LocalizedText("Unity")})

    def test_metadata(self, result):
        assert result.bundle.metadata() == {
            "name": "Simple Amp",
            "license": "http://opensource.org/licenses/isc",
            "authors": ["Jo Example"],
        }


@pytest.mark.unit
class TestFallbackPreservation:
    """Test that nothing recognized-but-unknown is lost."""

    def test_unknown_predicate_kept_without_warning(self):
        result = map_manifest('''
            <http://example.org/plugins/amp> a lv2:Plugin ;
                ex:colour "red" .
        ''')
        plugin, = result.bundle.plugins
        assert (URIRef(EX + "colour"), Literal("red")) in plugin.unknown
        assert result.warnings == []

    def test_unknown_port_class_kept_verbatim(self):
        result = map_manifest('''
            <http://example.org/plugins/amp> a lv2:Plugin ;
                lv2:port [ a lv2:InputPort , ex:SidechainPort ; lv2:index 0 ; lv2:symbol "sc" ] .
        ''')
        port, = result.bundle.plugins[0].ports
        assert port.classes.known == {PortClass.INPUT}
        assert port.classes.unknown == {URIRef(EX + "SidechainPort")}

    def test_nested_blank_node_captured(self):
        result = map_manifest('''
            <http://example.org/plugins/amp> a lv2:Plugin ;
                ex:preset [ rdfs:label "Loud" ; ex:gain 6 ] .
        ''')
        plugin, = result.bundle.plugins
        nested, = plugin.unknown.values(URIRef(EX + "preset"))
        assert isinstance(nested, AnonymousResource)
        assert len(nested.statements) == 2
        assert result.warnings == []

    def test_bad_literal_warns_and_is_kept(self):
        result = map_manifest('''
            <http://example.org/plugins/amp> a lv2:Plugin ;
                lv2:port [ a lv2:InputPort , lv2:ControlPort ; lv2:index "zero" ; lv2:symbol "g" ] .
        ''')
        port, = result.bundle.plugins[0].ports
        assert port.index is None
        assert (LV2["index"], Literal("zero")) in port.unknown
        warning, = result.warnings
        assert warning.category is IssueCategory.UNINTERPRETABLE_VALUE
        assert warning.predicate == str(LV2["index"])

    def test_second_single_value_goes_to_fallback(self):
        result = map_manifest('''
            <http://example.org/plugins/amp> a lv2:Plugin ;
                lv2:binary <a.so> , <b.so> .
        ''')
        plugin, = result.bundle.plugins
        assert plugin.binary == URIRef(BASE + "a.so")
        assert (LV2.binary, URIRef(BASE + "b.so")) in plugin.unknown
        assert categories(result) == [IssueCategory.UNINTERPRETABLE_VALUE]

    def test_blank_node_cycle_kept_as_back_reference(self):
        result = map_manifest('''
            <http://example.org/plugins/amp> a lv2:Plugin ;
                ex:link _:a .
            _:a ex:next _:b .
            _:b ex:next _:a .
        ''')
        assert result.warnings == []
        plugin, = result.bundle.plugins
        first, = plugin.unknown.values(URIRef(EX + "link"))
        second, = first.statements.values(URIRef(EX + "next"))
        assert isinstance(second, AnonymousResource)
        assert second.statements.values(URIRef(EX + "next")) == [BackReference(2)]

    def test_self_loop(self):
        result = map_manifest('''
            <http://example.org/plugins/amp> a lv2:Plugin ;
                ex:link _:a .
            _:a ex:self _:a .
        ''')
        plugin, = result.bundle.plugins
        loop, = plugin.unknown.values(URIRef(EX + "link"))
        assert loop.statements.values(URIRef(EX + "self")) == [BackReference(1)]

    def test_reference_back_to_port_node(self):
        result = map_manifest('''
            <http://example.org/plugins/amp> a lv2:Plugin ;
                lv2:port _:p .
            _:p a lv2:InputPort , lv2:ControlPort ;
                lv2:index 0 ;
                lv2:symbol "gain" ;
                ex:owner [ ex:back _:p ] .
        ''')
        assert result.warnings == []
        port, = result.bundle.plugins[0].ports
        owner, = port.unknown.values(URIRef(EX + "owner"))
        assert owner.statements.values(URIRef(EX + "back")) == [BackReference(2)]


@pytest.mark.unit
class TestMappingWarnings:
    """Test what the mapper reports."""

    def test_unrecognized_entry_point(self):
        result = map_manifest('''
            <http://example.org/thing> a ex:Widget ; ex:size 3 .
        ''')
        assert result.bundle.plugins == []
        assert categories(result) == [IssueCategory.UNRECOGNIZED_ENTITY]
        assert result.warnings[0].subject == "<http://example.org/thing>"

    def test_unassociated_statement(self):
        result = map_documents({
            "manifest.ttl": '<http://example.org/plugins/amp> a lv2:Plugin ; rdfs:seeAlso <amp.ttl> .',
            "amp.ttl": '<http://example.org/orphan> ex:colour "blue" .',
        })
        warning, = result.warnings
        assert warning.category is IssueCategory.UNASSOCIATED_STATEMENT
        assert warning.subject == "<http://example.org/orphan>"
        assert result.consumed_count == result.statement_count - 1
        assert result.has_warnings
        assert result.warnings_by_category == {"unassociated_statement": 1}
        assert result.warnings_for(IssueCategory.UNRECOGNIZED_ENTITY) == []

    def test_port_without_statements(self):
        result = map_manifest('''
            <http://example.org/plugins/amp> a lv2:Plugin ;
                lv2:port <http://example.org/plugins/amp#p0> .
        ''')
        port, = result.bundle.plugins[0].ports
        assert port.uri == URIRef("http://example.org/plugins/amp#p0")
        assert port.index is None
        assert categories(result) == [IssueCategory.MISSING_REQUIRED]

    def test_negative_minimum_size_rejected(self):
        result = map_manifest('''
            <http://example.org/plugins/amp> a lv2:Plugin ;
                lv2:port [ a lv2:InputPort , atom:AtomPort ; lv2:index 0 ; lv2:symbol "ev" ;
                           rsz:minimumSize -1 ] .
        ''')
        port, = result.bundle.plugins[0].ports
        assert Extension.RESIZE_PORT not in port.extensions
        assert categories(result) == [IssueCategory.UNINTERPRETABLE_VALUE]


@pytest.mark.unit
class TestEntities:
    """Test projects, dynamic manifests and extension payloads."""

    def test_project_reached_through_plugin(self):
        result = map_documents({
            "manifest.ttl": '<http://example.org/plugins/amp> a lv2:Plugin ; rdfs:seeAlso <amp.ttl> .',
            "amp.ttl": '''
                <http://example.org/plugins/amp> lv2:project <http://example.org/suite> .
                <http://example.org/suite> a doap:Project ;
                    doap:name "Example Suite" ;
                    lv2:symbol "suite" ;
                    doap:developer [ foaf:name "Sam" ] .
            ''',
        })
        assert result.warnings == []
        project, = result.bundle.projects
        assert project.uri == URIRef("http://example.org/suite")
        assert project.names == {LocalizedText("Example Suite")}
        assert project.symbol == "suite"
        assert {d.name for d in project.developers} == {"Sam"}
        assert result.bundle.plugins[0].project == project.uri
        assert result.bundle.metadata()["name"] == "Example Suite"

    def test_dyn_manifest(self):
        result = map_manifest('''
            <http://example.org/dyn> a dman:DynManifest ; lv2:binary <dyn.so> ; rdfs:seeAlso <dyn.ttl> .
        ''')
        dyn, = result.bundle.dyn_manifests
        assert dyn.binary == URIRef(BASE + "dyn.so")
        assert dyn.see_also == {URIRef(BASE + "dyn.ttl")}
        assert result.warnings == []

    def test_port_extensions(self):
        result = map_manifest('''
            <http://example.org/plugins/amp> a lv2:Plugin ;
                pg:mainInput <http://example.org/plugins/amp#in> ;
                lv2:port [
                    a lv2:InputPort , atom:AtomPort ;
                    lv2:index 0 ; lv2:symbol "events" ;
                    atom:bufferType atom:Sequence ;
                    atom:supports <http://lv2plug.in/ns/ext/midi#MidiEvent> ;
                    rsz:minimumSize 4096 ;
                    pg:group <http://example.org/plugins/amp#in>
                ] , [
                    a lv2:InputPort , lv2:ControlPort ;
                    lv2:index 1 ; lv2:symbol "mode" ;
                    lv2:portProperty lv2:integer , lv2:enumeration ;
                    pprops:rangeSteps 3
                ] .
            <http://example.org/plugins/amp#in> a pg:InputGroup ; lv2:symbol "in" .
        ''')
        assert result.warnings == []
        plugin, = result.bundle.plugins
        events, mode = plugin.ports

        atom = events.extensions[Extension.ATOM]
        assert atom == AtomPortPayload(ATOM.Sequence, frozenset({URIRef("http://lv2plug.in/ns/ext/midi#MidiEvent")}))
        assert events.extensions[Extension.RESIZE_PORT] == ResizePortPayload(4096)
        assert events.extensions[Extension.PORT_GROUPS] == PortGroupMembership(URIRef("http://example.org/plugins/amp#in"))

        assert mode.properties.known == {PortProperty.INTEGER, PortProperty.ENUMERATION}
        assert mode.extensions[Extension.PORT_PROPS] == RangeStepsPayload(3)

        groups = plugin.extensions[Extension.PORT_GROUPS]
        assert isinstance(groups, PortGroupsPayload)
        assert groups.main_input == URIRef("http://example.org/plugins/amp#in")
        group = groups.groups[URIRef("http://example.org/plugins/amp#in")]
        assert group.symbol == "in"
        assert group.classes == frozenset({PG.InputGroup})

    def test_options(self):
        result = map_manifest('''
            <http://example.org/plugins/amp> a lv2:Plugin ;
                opts:supportedOption <http://lv2plug.in/ns/ext/buf-size#nominalBlockLength> .
        ''')
        options = result.bundle.plugins[0].extensions[Extension.OPTIONS]
        assert len(options.supported) == 1
        assert not options.required

    def test_disabled_extension_stays_in_fallback(self):
        vocabulary = STANDARD_VOCABULARY.with_extensions([])
        result = map_manifest('''
            <http://example.org/plugins/amp> a lv2:Plugin ;
                lv2:port [ a lv2:InputPort , lv2:ControlPort ; lv2:index 0 ; lv2:symbol "g" ;
                           units:unit units:db ] .
        ''', vocabulary)
        port, = result.bundle.plugins[0].ports
        assert port.extensions == {}
        assert (UNITS.unit, UNITS.db) in port.unknown
        assert result.warnings == []

    def test_reverb_subclass_alone_maps_as_plugin(self):
        result = map_manifest('<http://example.org/plugins/verb> a lv2:ReverbPlugin .')
        plugin, = result.bundle.plugins
        assert plugin.classes.known == {PluginClass.REVERB}
