"""
Unit tests for the bundle serializer.

Tests cover:
- Manifest / data document split
- Typed fields and fallback pairs re-emitted, blank-node cycles included
- Used-prefix declarations
- Deterministic output
- SerializationError for unrepresentable values

Run with: python -m pytest tests/converters/test_bundle_serializer.py -v
"""

import pytest
from rdflib import BNode, Literal, RDF, RDFS, URIRef, XSD

from lv2bundle.common.errors import SerializationError
from lv2bundle.converters.bundle_serializer import BundleSerializer
from lv2bundle.shared.models.bundle import (
    Bundle,
    ClassSet,
    DynManifest,
    LocalizedText,
    Plugin,
    Port,
    Project,
    ScalePoint,
    UnitsPayload,
)
from lv2bundle.shared.models.conversion import DocumentPlan
from lv2bundle.shared.models.statements import AnonymousResource, BackReference, StatementBag
from lv2bundle.vocabulary.namespaces import DMAN, DOAP, LV2, UNITS
from lv2bundle.vocabulary.terms import Extension, PluginClass, PortClass, Unit


BASE = "file:///amp.lv2/"
AMP = URIRef("http://example.org/plugins/amp")
EX = "http://example.org/vocab#"


def _gain_port():
    return Port(
        index=0,
        symbol="gain",
        names={LocalizedText("Gain")},
        classes=ClassSet.of(PortClass.INPUT, PortClass.CONTROL),
        minimum=-90.0,
        maximum=24.0,
        default=0.0,
        scale_points={ScalePoint(value=0.0, labels=frozenset({LocalizedText("Unity")}))},
        extensions={Extension.UNITS: UnitsPayload(Unit.DECIBEL)},
    )


def _bundle(**plugin_fields):
    fields = dict(
        uri=AMP,
        binary=URIRef(BASE + "amp.so"),
        see_also={URIRef(BASE + "amp.ttl")},
        classes=ClassSet.of(PluginClass.PLUGIN),
        names={LocalizedText("Simple Amp")},
        ports=[_gain_port()],
    )
    fields.update(plugin_fields)
    return Bundle(base_uri=BASE, plugins=[Plugin(**fields)])


@pytest.fixture
def serializer():
    return BundleSerializer()


@pytest.fixture
def plan():
    return DocumentPlan(plugin_documents={AMP: "amp.ttl"})


@pytest.mark.unit
class TestDocumentSplit:
    """Test which statements land in which document."""

    def test_manifest_holds_discovery_statements(self, serializer, plan):
        documents = serializer.to_documents(_bundle(), plan)
        manifest = documents["manifest.ttl"].statements
        assert manifest == frozenset({
            (AMP, RDF.type, LV2.Plugin),
            (AMP, LV2.binary, URIRef(BASE + "amp.so")),
            (AMP, RDFS.seeAlso, URIRef(BASE + "amp.ttl")),
        })

    def test_data_document_holds_detail(self, serializer, plan):
        data = serializer.to_documents(_bundle(), plan)["amp.ttl"].statements
        assert (AMP, DOAP.name, Literal("Simple Amp")) in data
        ports = [o for s, p, o in data if s == AMP and p == LV2.port]
        assert len(ports) == 1 and isinstance(ports[0], BNode)
        port = ports[0]
        assert (port, LV2["index"], Literal(0)) in data
        assert (port, UNITS.unit, UNITS.db) in data
        assert (port, LV2.minimum, Literal("-90.0", datatype=XSD.decimal)) in data

    def test_documents_listed_manifest_first(self, serializer, plan):
        assert list(serializer.to_documents(_bundle(), plan)) == ["manifest.ttl", "amp.ttl"]

    def test_everything_in_manifest_without_plan(self, serializer):
        documents = serializer.to_documents(_bundle(), DocumentPlan())
        assert list(documents) == ["manifest.ttl"]
        assert (AMP, DOAP.name, Literal("Simple Amp")) in documents["manifest.ttl"].statements

    def test_project_and_dyn_manifest(self, serializer):
        suite = URIRef("http://example.org/suite")
        dyn = URIRef("http://example.org/dyn")
        bundle = Bundle(
            base_uri=BASE,
            projects=[Project(uri=suite, names={LocalizedText("Suite")})],
            dyn_manifests=[DynManifest(uri=dyn, binary=URIRef(BASE + "dyn.so"), see_also={URIRef(BASE + "dyn.ttl")})],
        )
        manifest = serializer.to_documents(bundle, DocumentPlan())["manifest.ttl"].statements
        assert (suite, RDF.type, DOAP.Project) in manifest
        assert (suite, DOAP.name, Literal("Suite")) in manifest
        assert (dyn, RDF.type, DMAN.DynManifest) in manifest
        assert (dyn, LV2.binary, URIRef(BASE + "dyn.so")) in manifest
        assert (dyn, RDFS.seeAlso, URIRef(BASE + "dyn.ttl")) in manifest


@pytest.mark.unit
class TestFallbackEmission:
    """Test that fallback bags are written back."""

    def test_plain_pairs(self, serializer, plan):
        bag = StatementBag.from_pairs([(URIRef(EX + "colour"), Literal("red"))])
        data = serializer.to_documents(_bundle(unknown=bag), plan)["amp.ttl"].statements
        assert (AMP, URIRef(EX + "colour"), Literal("red")) in data

    def test_anonymous_resources_reemitted(self, serializer, plan):
        inner = StatementBag.from_pairs([(URIRef(EX + "gain"), Literal(6))])
        bag = StatementBag.from_pairs([(URIRef(EX + "preset"), AnonymousResource(inner))])
        data = serializer.to_documents(_bundle(unknown=bag), plan)["amp.ttl"].statements

        preset, = [o for s, p, o in data if s == AMP and p == URIRef(EX + "preset")]
        assert isinstance(preset, BNode)
        assert (preset, URIRef(EX + "gain"), Literal(6)) in data

    def test_back_reference_reuses_enclosing_node(self, serializer, plan):
        inner = StatementBag.from_pairs([(URIRef(EX + "next"), BackReference(2))])
        outer = StatementBag.from_pairs([(URIRef(EX + "next"), AnonymousResource(inner))])
        bag = StatementBag.from_pairs([(URIRef(EX + "link"), AnonymousResource(outer))])
        data = serializer.to_documents(_bundle(unknown=bag), plan)["amp.ttl"].statements

        first, = [o for s, p, o in data if s == AMP and p == URIRef(EX + "link")]
        second, = [o for s, p, o in data if s == first and p == URIRef(EX + "next")]
        assert (second, URIRef(EX + "next"), first) in data

    def test_back_reference_to_port_node(self, serializer, plan):
        port = _gain_port()
        port.unknown = StatementBag.from_pairs([(URIRef(EX + "self"), BackReference(1))])
        data = serializer.to_documents(_bundle(ports=[port]), plan)["amp.ttl"].statements

        node, = [o for s, p, o in data if s == AMP and p == LV2.port]
        assert (node, URIRef(EX + "self"), node) in data


@pytest.mark.unit
class TestRendering:
    """Test the rendered Turtle bytes."""

    def test_only_used_prefixes(self, serializer, plan):
        files = serializer.serialize(_bundle(), plan)
        manifest = files["manifest.ttl"].decode("utf-8")
        assert "@prefix lv2:" in manifest
        assert "@prefix units:" not in manifest
        assert "@prefix units:" in files["amp.ttl"].decode("utf-8")
        assert "@prefix atom:" not in files["amp.ttl"].decode("utf-8")

    def test_output_is_deterministic(self, serializer, plan):
        assert serializer.serialize(_bundle(), plan) == serializer.serialize(_bundle(), plan)

    def test_non_finite_number_written_as_double(self, serializer, plan):
        port = _gain_port()
        port.maximum = float("inf")
        data = serializer.to_documents(_bundle(ports=[port]), plan)["amp.ttl"].statements
        maximum, = [o for _, p, o in data if p == LV2.maximum]
        assert maximum.datatype == XSD.double


@pytest.mark.unit
class TestSerializationErrors:
    """Test values that cannot be written."""

    def test_relative_iri(self, serializer, plan):
        with pytest.raises(SerializationError) as exc_info:
            serializer.to_documents(_bundle(binary=URIRef("amp.so")), plan)
        assert exc_info.value.field_name == "Plugin.binary"

    def test_non_integer_index(self, serializer, plan):
        port = _gain_port()
        port.index = 1.5
        with pytest.raises(SerializationError):
            serializer.to_documents(_bundle(ports=[port]), plan)

    def test_boolean_is_not_a_number(self, serializer, plan):
        port = _gain_port()
        port.default = True
        with pytest.raises(SerializationError):
            serializer.to_documents(_bundle(ports=[port]), plan)

    def test_back_reference_beyond_enclosing_nodes(self, serializer, plan):
        bag = StatementBag.from_pairs([(URIRef(EX + "up"), BackReference(1))])
        with pytest.raises(SerializationError):
            serializer.to_documents(_bundle(unknown=bag), plan)

    def test_unsupported_payload(self, serializer, plan):
        port = _gain_port()
        port.extensions[Extension.ATOM] = object()
        with pytest.raises(SerializationError):
            serializer.to_documents(_bundle(ports=[port]), plan)
