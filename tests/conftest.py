"""
Pytest configuration and fixtures for the test suite.

Defines markers for selective test execution:
    pytest -m unit          # Fast unit tests
    pytest -m integration   # Whole load/dump pipeline tests
    pytest -m slow          # Tests that take >1s

Fixtures hold the documents of a small amplifier bundle as inline Turtle.
"""

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Whole load/dump pipeline tests")
    config.addinivalue_line("markers", "slow: Tests that take more than 1 second")


BASE_URI = "file:///amp.lv2/"
PLUGIN_URI = "http://example.org/plugins/amp"

MANIFEST_TTL = b'''
@prefix lv2:  <http://lv2plug.in/ns/lv2core#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .

<http://example.org/plugins/amp>
    a lv2:Plugin , lv2:AmplifierPlugin ;
    lv2:binary <amp.so> ;
    rdfs:seeAlso <amp.ttl> .
'''

AMP_TTL = b'''
@prefix doap:  <http://usefulinc.com/ns/doap#> .
@prefix foaf:  <http://xmlns.com/foaf/0.1/> .
@prefix lv2:   <http://lv2plug.in/ns/lv2core#> .
@prefix rdf:   <http://www.w3.org/1999/02/22-rdf-syntax-ns#> .
@prefix rdfs:  <http://www.w3.org/2000/01/rdf-schema#> .
@prefix units: <http://lv2plug.in/ns/extensions/units#> .

# A mono amplifier with one control port
<http://example.org/plugins/amp>
    a lv2:Plugin ;
    doap:name "Simple Amp" , "Einfacher Verstaerker"@de ;
    doap:license <http://opensource.org/licenses/isc> ;
    doap:maintainer [
        a foaf:Person ;
        foaf:name "Jo Example" ;
        foaf:mbox <mailto:jo@example.org>
    ] ;
    lv2:minorVersion 2 ;
    lv2:microVersion 0 ;
    lv2:optionalFeature lv2:hardRTCapable ;
    lv2:port [
        a lv2:InputPort , lv2:ControlPort ;
        lv2:index 0 ;
        lv2:symbol "gain" ;
        lv2:name "Gain" ;
        lv2:default 0.0 ;
        lv2:minimum -90.0 ;
        lv2:maximum 24.0 ;
        units:unit units:db ;
        lv2:scalePoint [ rdfs:label "Unity" ; rdf:value 0.0 ]
    ] , [
        a lv2:AudioPort , lv2:InputPort ;
        lv2:index 1 ;
        lv2:symbol "in" ;
        lv2:name "In"
    ] , [
        a lv2:AudioPort , lv2:OutputPort ;
        lv2:index 2 ;
        lv2:symbol "out" ;
        lv2:name "Out"
    ] .
'''

MALFORMED_TTL = b'''@prefix lv2: <http://lv2plug.in/ns/lv2core#> .
<http://example.org/plugins/amp> a lv2:Plugin .
<http://example.org/plugins/amp> lv2:binary .
'''


@pytest.fixture
def base_uri():
    """Bundle directory IRI used throughout the tests."""
    return BASE_URI


@pytest.fixture
def plugin_uri():
    return PLUGIN_URI


@pytest.fixture
def manifest_ttl():
    """Manifest declaring one plugin with its binary and data document."""
    return MANIFEST_TTL


@pytest.fixture
def amp_ttl():
    """Plugin data document: names, maintainer and three ports."""
    return AMP_TTL


@pytest.fixture
def amp_documents():
    """All documents of the amplifier bundle."""
    return {"manifest.ttl": MANIFEST_TTL, "amp.ttl": AMP_TTL}


@pytest.fixture
def malformed_ttl():
    """Document whose third line is missing an object."""
    return MALFORMED_TTL
