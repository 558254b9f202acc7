"""
LV2 namespace table.

rdflib ``Namespace`` objects for LV2 core, the LV2
standard extensions and the general-purpose vocabularies LV2 bundles
use. ``STANDARD_PREFIXES`` lists the prefix bindings written to output
documents.
"""

from typing import Dict

from rdflib import Namespace, RDF, RDFS, XSD

LV2 = Namespace("http://lv2plug.in/ns/lv2core#")
ATOM = Namespace("http://lv2plug.in/ns/ext/atom#")
BUFSZ = Namespace("http://lv2plug.in/ns/ext/buf-size#")
DATA_ACCESS = Namespace("http://lv2plug.in/ns/ext/data-access")
DMAN = Namespace("http://lv2plug.in/ns/ext/dynmanifest#")
EV = Namespace("http://lv2plug.in/ns/ext/event#")
INSTANCE_ACCESS = Namespace("http://lv2plug.in/ns/ext/instance-access")
LOG = Namespace("http://lv2plug.in/ns/ext/log#")
MIDI = Namespace("http://lv2plug.in/ns/ext/midi#")
MORPH = Namespace("http://lv2plug.in/ns/ext/morph#")
OPTS = Namespace("http://lv2plug.in/ns/ext/options#")
PARAM = Namespace("http://lv2plug.in/ns/ext/parameters#")
PG = Namespace("http://lv2plug.in/ns/ext/port-groups#")
PPROPS = Namespace("http://lv2plug.in/ns/ext/port-props#")
RSZ = Namespace("http://lv2plug.in/ns/ext/resize-port#")
STATE = Namespace("http://lv2plug.in/ns/ext/state#")
UI = Namespace("http://lv2plug.in/ns/extensions/ui#")
UNITS = Namespace("http://lv2plug.in/ns/extensions/units#")
URID = Namespace("http://lv2plug.in/ns/ext/urid#")
WORK = Namespace("http://lv2plug.in/ns/ext/worker#")
DOAP = Namespace("http://usefulinc.com/ns/doap#")
FOAF = Namespace("http://xmlns.com/foaf/0.1/")

# Prefix bindings offered to the Turtle writer; only used ones are emitted
STANDARD_PREFIXES: Dict[str, str] = {
    "rdf": str(RDF),
    "rdfs": str(RDFS),
    "xsd": str(XSD),
    "lv2": str(LV2),
    "atom": str(ATOM),
    "bufsz": str(BUFSZ),
    "dman": str(DMAN),
    "ev": str(EV),
    "log": str(LOG),
    "midi": str(MIDI),
    "morph": str(MORPH),
    "opts": str(OPTS),
    "param": str(PARAM),
    "pg": str(PG),
    "pprops": str(PPROPS),
    "rsz": str(RSZ),
    "state": str(STATE),
    "ui": str(UI),
    "units": str(UNITS),
    "urid": str(URID),
    "work": str(WORK),
    "doap": str(DOAP),
    "foaf": str(FOAF),
}
