"""
Bundle Serializer - Converts the typed bundle model back into Turtle documents.

The inverse of the schema mapper: every typed field and every fallback
pair of every entity is turned back into statements, the statements are
split across documents according to a DocumentPlan, and each document is
rendered by the Turtle writer.

Split policy:
- The manifest carries each plugin's classes, lv2:binary and
  rdfs:seeAlso, plus dynamic manifest generators.
- Each plugin's remaining detail goes to its planned data document.
- Projects go to their planned document.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Set, Tuple, Union

from rdflib import BNode, Literal, RDF, RDFS, URIRef
from rdflib.term import Node

from ..common.errors import SerializationError
from ..common.id_generator import LabelGenerator
from ..formats.turtle.writer import TurtleWriter
from ..shared.models.bundle import (
    AtomPortPayload,
    Bundle,
    ClassSet,
    DynManifest,
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
from ..shared.models.conversion import DocumentPlan
from ..shared.models.statements import (
    AnonymousResource,
    BackReference,
    ParsedDocument,
    Statement,
    StatementBag,
)
from ..vocabulary.namespaces import ATOM, DMAN, DOAP, FOAF, LV2, OPTS, PG, PPROPS, RSZ, UNITS
from ..vocabulary.terms import IriEnum
from ..vocabulary.vocabulary import STANDARD_VOCABULARY, Vocabulary
from .type_mapper import TypeMapper
from .uri_utils import URIUtils

logger = logging.getLogger(__name__)


class BundleSerializer:
    """
    Serializes a typed bundle into per-document Turtle.

    Responsible for:
    - Turning typed fields and fallback bags into statements
    - Splitting statements across documents per the DocumentPlan
    - Rendering each document with the Turtle writer

    Example:
        >>> serializer = BundleSerializer()
        >>> files = serializer.serialize(bundle, DocumentPlan())
        >>> sorted(files)
        ['manifest.ttl']
    """

    def __init__(self, vocabulary: Vocabulary = STANDARD_VOCABULARY):
        self.vocabulary = vocabulary
        self.writer = TurtleWriter(vocabulary.prefixes)

    def serialize(self, bundle: Bundle, plan: DocumentPlan) -> Dict[str, bytes]:
        """
        Render the bundle as Turtle documents.

        Args:
            bundle: The bundle to write
            plan: Entity to document assignment

        Returns:
            Document name to UTF-8 bytes

        Raises:
            SerializationError: If a field value cannot be represented
        """
        documents = self.to_documents(bundle, plan)
        files: Dict[str, bytes] = {}
        for name, document in documents.items():
            files[name] = self.writer.write(document, base_uri=bundle.base_uri).encode("utf-8")
        logger.info(f"Serialized bundle into {len(files)} document(s)")
        return files

    def to_documents(self, bundle: Bundle, plan: DocumentPlan) -> Dict[str, ParsedDocument]:
        """
        Build the statements of every planned document.

        Returns:
            Document name to ParsedDocument, manifest first
        """
        emitter = _Emitter(plan)

        for plugin in bundle.plugins:
            self._emit_plugin(emitter, plugin, plan)
        for project in bundle.projects:
            self._emit_project(emitter, project, plan.document_for_project(project.uri))
        for dyn_manifest in bundle.dyn_manifests:
            self._emit_dyn_manifest(emitter, dyn_manifest, plan.manifest)

        prefixes = dict(bundle.prefixes)
        return {
            name: ParsedDocument(
                name=name,
                base_uri=URIUtils.document_uri(bundle.base_uri, name),
                prefixes=prefixes,
                statements=frozenset(emitter.statements(name)),
            )
            for name in plan.documents
        }

    # -------------------------------------------------------------------------
    # Entities
    # -------------------------------------------------------------------------

    def _emit_plugin(self, out: '_Emitter', plugin: Plugin, plan: DocumentPlan) -> None:
        uri = _iri(plugin.uri, "Plugin.uri")
        manifest = plan.manifest
        doc = plan.document_for_plugin(plugin.uri)

        for class_iri in plugin.classes.iris():
            out.add(manifest, uri, RDF.type, class_iri)
        if plugin.binary is not None:
            out.add(manifest, uri, LV2.binary, _iri(plugin.binary, "Plugin.binary"))
        for see_also in _sorted(plugin.see_also):
            out.add(manifest, uri, RDFS.seeAlso, _iri(see_also, "Plugin.see_also"))

        out.add_texts(doc, uri, DOAP.name, plugin.names)
        out.add_texts(doc, uri, LV2.shortName, plugin.short_names)
        out.add_texts(doc, uri, LV2.documentation, plugin.documentation)
        if plugin.symbol is not None:
            out.add(doc, uri, LV2.symbol, _string(plugin.symbol, "Plugin.symbol"))
        if plugin.project is not None:
            out.add(doc, uri, LV2.project, _iri(plugin.project, "Plugin.project"))
        if plugin.license is not None:
            out.add(doc, uri, DOAP.license, _iri(plugin.license, "Plugin.license"))
        self._emit_people(out, doc, uri, DOAP.maintainer, plugin.maintainers)
        self._emit_people(out, doc, uri, DOAP.developer, plugin.developers)
        if plugin.minor_version is not None:
            out.add(doc, uri, LV2.minorVersion, _integer(plugin.minor_version, "Plugin.minor_version"))
        if plugin.micro_version is not None:
            out.add(doc, uri, LV2.microVersion, _integer(plugin.micro_version, "Plugin.micro_version"))
        out.add_classes(doc, uri, LV2.requiredFeature, plugin.required_features)
        out.add_classes(doc, uri, LV2.optionalFeature, plugin.optional_features)
        out.add_classes(doc, uri, LV2.extensionData, plugin.extension_data)

        for port in plugin.ports:
            self._emit_port(out, doc, uri, port)
        for _, payload in sorted(plugin.extensions.items(), key=lambda item: str(item[0])):
            self._emit_payload(out, doc, uri, payload)
        out.add_bag(doc, uri, plugin.unknown)

    def _emit_port(self, out: '_Emitter', doc: str, plugin_uri: URIRef, port: Port) -> None:
        node = _iri(port.uri, "Port.uri") if port.uri is not None else out.bnode()
        out.add(doc, plugin_uri, LV2.port, node)

        for class_iri in port.classes.iris():
            out.add(doc, node, RDF.type, class_iri)
        if port.index is not None:
            out.add(doc, node, LV2["index"], _integer(port.index, "Port.index"))
        if port.symbol is not None:
            out.add(doc, node, LV2.symbol, _string(port.symbol, "Port.symbol"))
        out.add_texts(doc, node, LV2.name, port.names)
        out.add_texts(doc, node, LV2.shortName, port.short_names)
        out.add_texts(doc, node, LV2.documentation, port.documentation)
        for predicate, value, field_name in (
            (LV2.minimum, port.minimum, "Port.minimum"),
            (LV2.maximum, port.maximum, "Port.maximum"),
            (LV2.default, port.default, "Port.default"),
        ):
            if value is not None:
                out.add(doc, node, predicate, _number(value, field_name))
        out.add_classes(doc, node, LV2.portProperty, port.properties)
        out.add_classes(doc, node, LV2.designation, port.designations)
        for scale_point in sorted(port.scale_points, key=_scale_point_key):
            self._emit_scale_point(out, doc, node, scale_point)
        for _, payload in sorted(port.extensions.items(), key=lambda item: str(item[0])):
            self._emit_payload(out, doc, node, payload)
        out.add_bag(doc, node, port.unknown)

    def _emit_scale_point(self, out: '_Emitter', doc: str, port_node: Node, point: ScalePoint) -> None:
        node = out.bnode()
        out.add(doc, port_node, LV2.scalePoint, node)
        out.add_texts(doc, node, RDFS.label, point.labels)
        if point.value is not None:
            out.add(doc, node, RDF.value, _number(point.value, "ScalePoint.value"))
        out.add_bag(doc, node, point.unknown, enclosing=(port_node,))

    def _emit_people(
        self,
        out: '_Emitter',
        doc: str,
        owner: URIRef,
        predicate: URIRef,
        people: Iterable[Person],
    ) -> None:
        for person in sorted(people, key=_person_key):
            node = _iri(person.uri, "Person.uri") if person.uri is not None else out.bnode()
            out.add(doc, owner, predicate, node)
            for class_iri in _sorted(person.classes):
                out.add(doc, node, RDF.type, _iri(class_iri, "Person.classes"))
            if person.name is not None:
                out.add(doc, node, FOAF.name, _string(person.name, "Person.name"))
            if person.mbox is not None:
                out.add(doc, node, FOAF.mbox, _iri(person.mbox, "Person.mbox"))
            if person.homepage is not None:
                out.add(doc, node, FOAF.homepage, _iri(person.homepage, "Person.homepage"))
            out.add_bag(doc, node, person.unknown)

    def _emit_project(self, out: '_Emitter', project: Project, doc: str) -> None:
        uri = _iri(project.uri, "Project.uri")
        out.add(doc, uri, RDF.type, DOAP.Project)
        for class_iri in _sorted(project.classes):
            out.add(doc, uri, RDF.type, _iri(class_iri, "Project.classes"))
        out.add_texts(doc, uri, DOAP.name, project.names)
        out.add_texts(doc, uri, LV2.shortName, project.short_names)
        if project.symbol is not None:
            out.add(doc, uri, LV2.symbol, _string(project.symbol, "Project.symbol"))
        if project.license is not None:
            out.add(doc, uri, DOAP.license, _iri(project.license, "Project.license"))
        if project.homepage is not None:
            out.add(doc, uri, DOAP.homepage, _iri(project.homepage, "Project.homepage"))
        self._emit_people(out, doc, uri, DOAP.maintainer, project.maintainers)
        self._emit_people(out, doc, uri, DOAP.developer, project.developers)
        out.add_bag(doc, uri, project.unknown)

    def _emit_dyn_manifest(self, out: '_Emitter', dyn_manifest: DynManifest, doc: str) -> None:
        uri = _iri(dyn_manifest.uri, "DynManifest.uri")
        out.add(doc, uri, RDF.type, DMAN.DynManifest)
        if dyn_manifest.binary is not None:
            out.add(doc, uri, LV2.binary, _iri(dyn_manifest.binary, "DynManifest.binary"))
        for see_also in _sorted(dyn_manifest.see_also):
            out.add(doc, uri, RDFS.seeAlso, _iri(see_also, "DynManifest.see_also"))
        out.add_bag(doc, uri, dyn_manifest.unknown)

    # -------------------------------------------------------------------------
    # Extension payloads
    # -------------------------------------------------------------------------

    def _emit_payload(self, out: '_Emitter', doc: str, node: Node, payload: Any) -> None:
        if isinstance(payload, UnitsPayload):
            out.add(doc, node, UNITS.unit, _iri(payload.unit, "UnitsPayload.unit"))
        elif isinstance(payload, AtomPortPayload):
            if payload.buffer_type is not None:
                out.add(doc, node, ATOM.bufferType, _iri(payload.buffer_type, "AtomPortPayload.buffer_type"))
            for supported in _sorted(payload.supports):
                out.add(doc, node, ATOM.supports, _iri(supported, "AtomPortPayload.supports"))
        elif isinstance(payload, PortGroupMembership):
            out.add(doc, node, PG.group, _iri(payload.group, "PortGroupMembership.group"))
        elif isinstance(payload, ResizePortPayload):
            out.add(doc, node, RSZ.minimumSize, _integer(payload.minimum_size, "ResizePortPayload.minimum_size"))
        elif isinstance(payload, RangeStepsPayload):
            out.add(doc, node, PPROPS.rangeSteps, _integer(payload.steps, "RangeStepsPayload.steps"))
        elif isinstance(payload, OptionsPayload):
            out.add_classes(doc, node, OPTS.requiredOption, payload.required)
            out.add_classes(doc, node, OPTS.supportedOption, payload.supported)
        elif isinstance(payload, PortGroupsPayload):
            if payload.main_input is not None:
                out.add(doc, node, PG.mainInput, _iri(payload.main_input, "PortGroupsPayload.main_input"))
            if payload.main_output is not None:
                out.add(doc, node, PG.mainOutput, _iri(payload.main_output, "PortGroupsPayload.main_output"))
            for group in sorted(payload.groups.values(), key=lambda g: str(g.uri)):
                self._emit_port_group(out, doc, group)
        else:
            raise SerializationError(
                f"Unsupported extension payload type: {type(payload).__name__}",
                field_name="extensions",
                value=payload,
            )

    def _emit_port_group(self, out: '_Emitter', doc: str, group: PortGroup) -> None:
        uri = _iri(group.uri, "PortGroup.uri")
        for class_iri in _sorted(group.classes):
            out.add(doc, uri, RDF.type, _iri(class_iri, "PortGroup.classes"))
        if group.symbol is not None:
            out.add(doc, uri, LV2.symbol, _string(group.symbol, "PortGroup.symbol"))
        out.add_texts(doc, uri, LV2.name, group.names)
        out.add_bag(doc, uri, group.unknown)


class _Emitter:
    """Accumulates statements per document and hands out blank nodes."""

    def __init__(self, plan: DocumentPlan):
        self._documents: Dict[str, Set[Statement]] = {name: set() for name in plan.documents}
        self._labels = LabelGenerator(namespace_prefix="s")
        self._namespace = self._labels.next_namespace()

    def bnode(self) -> BNode:
        return BNode(self._labels.next_label(self._namespace))

    def add(self, doc: str, subject: Node, predicate: URIRef, obj: Node) -> None:
        self._documents.setdefault(doc, set()).add((subject, predicate, obj))

    def add_texts(self, doc: str, subject: Node, predicate: URIRef, texts: Iterable[LocalizedText]) -> None:
        for text in sorted(texts, key=lambda t: (t.lang or "", t.value)):
            self.add(doc, subject, predicate, _text(text))

    def add_classes(self, doc: str, subject: Node, predicate: URIRef, classes: ClassSet) -> None:
        for class_iri in classes.iris():
            self.add(doc, subject, predicate, class_iri)

    def add_bag(self, doc: str, subject: Node, bag: StatementBag, enclosing: Tuple[Node, ...] = ()) -> None:
        """
        Re-emit fallback pairs, expanding captured blank nodes.

        ``enclosing`` lists the entity nodes around ``subject``; together
        with ``subject`` their blank nodes are what back-references resolve to.
        """
        chain = tuple(n for n in enclosing + (subject,) if isinstance(n, BNode))
        for predicate, value in bag:
            if isinstance(value, AnonymousResource):
                node = self.bnode()
                self.add(doc, subject, _iri(predicate, "fallback predicate"), node)
                self.add_bag(doc, node, value.statements, chain)
            elif isinstance(value, BackReference):
                if not 0 < value.levels <= len(chain):
                    raise SerializationError(
                        f"Back-reference of {predicate} points {value.levels} levels up, "
                        f"but only {len(chain)} enclosing blank nodes exist",
                        field_name="unknown",
                        value=value,
                    )
                self.add(doc, subject, _iri(predicate, "fallback predicate"), chain[-value.levels])
            elif isinstance(value, (URIRef, Literal)):
                self.add(doc, subject, _iri(predicate, "fallback predicate"), value)
            else:
                raise SerializationError(
                    f"Fallback value of {predicate} is not an IRI, a literal, a resource or a back-reference",
                    field_name="unknown",
                    value=value,
                )

    def statements(self, doc: str) -> Set[Statement]:
        return self._documents.get(doc, set())


# =============================================================================
# Value conversion
# =============================================================================

def _iri(value: Union[URIRef, IriEnum, Any], field_name: str) -> URIRef:
    if isinstance(value, IriEnum):
        return value.iri
    if isinstance(value, URIRef) and ":" in str(value):
        return value
    raise SerializationError(
        f"{field_name} must be an absolute IRI, got {value!r}",
        field_name=field_name,
        value=value,
    )


def _string(value: Any, field_name: str) -> Literal:
    if not isinstance(value, str):
        raise SerializationError(
            f"{field_name} must be a string, got {type(value).__name__}",
            field_name=field_name,
            value=value,
        )
    return Literal(str(value))


def _text(value: Any) -> Literal:
    if isinstance(value, LocalizedText):
        return TypeMapper.to_literal(value)
    return _string(value, "text")


def _integer(value: Any, field_name: str) -> Literal:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SerializationError(
            f"{field_name} must be an integer, got {value!r}",
            field_name=field_name,
            value=value,
        )
    return TypeMapper.to_literal(value, field_name)


def _number(value: Any, field_name: str) -> Literal:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise SerializationError(
            f"{field_name} must be a number, got {value!r}",
            field_name=field_name,
            value=value,
        )
    return TypeMapper.to_literal(value, field_name)


def _sorted(items: Iterable[Any]) -> List[Any]:
    return sorted(items, key=str)


def _scale_point_key(point: ScalePoint):
    labels = tuple(sorted((t.lang or "", t.value) for t in point.labels))
    return (point.value is None, point.value if point.value is not None else 0, labels, repr(point.unknown))


def _person_key(person: Person):
    return (
        str(person.uri or ""),
        person.name or "",
        str(person.mbox or ""),
        str(person.homepage or ""),
        repr(person.unknown),
    )
