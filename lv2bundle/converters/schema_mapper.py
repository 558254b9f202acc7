"""
Schema Mapper - Projects the merged graph onto the typed bundle model.

Starting from the manifest's entry-point subjects, the mapper classifies
each subject with the vocabulary's ordered kind table, extracts known
predicates into typed fields and keeps every other predicate/object pair
in the entity's fallback StatementBag. Anything it cannot associate is
reported as a MappingWarning; nothing here raises for bad data.

Rules:
- A subject with no recognized class is skipped with a warning.
- A known predicate whose object cannot be read as the expected type is
  warned about and kept verbatim in the fallback.
- Blank nodes under unknown predicates are captured as nested
  AnonymousResource trees; a blank-node cycle becomes a BackReference
  to the enclosing resource.
- Every statement no entity consumed is reported as unassociated.
"""

import logging
from types import SimpleNamespace
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple, Union

from rdflib import BNode, Literal, RDF, RDFS, URIRef
from rdflib.term import Node

from ..common.errors import MappingWarning
from ..common.validation import IssueCategory
from ..graph.index import GraphIndex
from ..shared.models.bundle import (
    AtomPortPayload,
    Bundle,
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
from ..shared.models.conversion import MappingResult
from ..shared.models.statements import AnonymousResource, BackReference, FallbackValue, StatementBag
from ..vocabulary.namespaces import ATOM, DMAN, DOAP, FOAF, LV2, OPTS, PG, PPROPS, RSZ, UNITS
from ..vocabulary.terms import (
    Extension,
    ExtensionData,
    HostFeature,
    Option,
    PluginClass,
    PortClass,
    PortDesignation,
    PortProperty,
    Unit,
)
from ..vocabulary.vocabulary import STANDARD_VOCABULARY, EntityKind, Vocabulary
from .class_resolver import ClassResolver
from .type_mapper import TypeMapper

logger = logging.getLogger(__name__)

# Handler outcome: None = stored in a typed field, str = warning reason
# (the pair goes to the fallback), KEEP = fallback without a warning
KEEP = object()

Path = Tuple[BNode, ...]
Handler = Callable[[Node, Path], Any]


class SchemaMapper:
    """
    Maps a merged GraphIndex onto a draft Bundle.

    The mapper is stateless between calls; each ``map`` call runs in its
    own session, so one mapper can serve concurrent callers.

    Example:
        >>> mapper = SchemaMapper()
        >>> result = mapper.map(index, [URIRef("http://example.org/amp")], "file:///amp.lv2/")
        >>> result.bundle.plugins[0].uri
        rdflib.term.URIRef('http://example.org/amp')
    """

    def __init__(self, vocabulary: Vocabulary = STANDARD_VOCABULARY):
        self.vocabulary = vocabulary
        self.resolver = ClassResolver(vocabulary)

    def map(
        self,
        graph: GraphIndex,
        entry_points: Iterable[URIRef],
        base_uri: str = "",
        prefixes: Optional[Dict[str, str]] = None,
    ) -> MappingResult:
        """
        Map the graph reachable from the entry points.

        Args:
            graph: Merged statement index
            entry_points: Subjects the manifest declares
            base_uri: Bundle base IRI recorded on the bundle
            prefixes: Prefix bindings recorded on the bundle

        Returns:
            MappingResult with the draft bundle and all warnings
        """
        session = _MappingSession(graph, self.vocabulary, self.resolver)
        bundle = session.run(entry_points, base_uri, prefixes or {})
        result = MappingResult(
            bundle=bundle,
            warnings=session.warnings,
            statement_count=len(graph),
            consumed_count=len(session.consumed),
        )
        logger.info(
            f"Mapped {len(bundle.plugins)} plugin(s), {len(bundle.projects)} project(s), "
            f"{len(bundle.dyn_manifests)} dynamic manifest(s) with {len(result.warnings)} warning(s)"
        )
        return result


class _MappingSession:
    """State of one mapping run: consumed statement ids and warnings."""

    def __init__(self, graph: GraphIndex, vocabulary: Vocabulary, resolver: ClassResolver):
        self.graph = graph
        self.vocabulary = vocabulary
        self.resolver = resolver
        self.consumed: Set[int] = set()
        self.warnings: List[MappingWarning] = []
        self.project_refs: Set[URIRef] = set()

    # -------------------------------------------------------------------------
    # Driver
    # -------------------------------------------------------------------------

    def run(self, entry_points: Iterable[URIRef], base_uri: str, prefixes: Dict[str, str]) -> Bundle:
        plugins: Dict[URIRef, Plugin] = {}
        project_uris: Set[URIRef] = set()
        dyn_manifests: Dict[URIRef, DynManifest] = {}
        unknown: List[URIRef] = []

        for uri in sorted(set(entry_points), key=str):
            types = [o for o in self.graph.objects(uri, RDF.type) if isinstance(o, URIRef)]
            kind = self.resolver.entity_kind(types)
            if kind is EntityKind.PLUGIN:
                plugins[uri] = self.map_plugin(uri)
            elif kind is EntityKind.PROJECT:
                project_uris.add(uri)
            elif kind is EntityKind.DYN_MANIFEST:
                dyn_manifests[uri] = self.map_dyn_manifest(uri)
            else:
                unknown.append(uri)

        project_uris |= {ref for ref in self.project_refs if self.graph.has_subject(ref)}
        projects = [self.map_project(uri) for uri in sorted(project_uris, key=str)]

        # Typed subjects already mapped as part of an entity (port groups) are not entry points
        for uri in unknown:
            if self.consumed.issuperset(self.graph.statement_ids_for_subject(uri)):
                continue
            self.warn(
                "Entry point has no recognized class; skipped",
                uri, None, IssueCategory.UNRECOGNIZED_ENTITY,
            )
            self._consume(uri, {}, ())

        self._report_unassociated()

        return Bundle(
            base_uri=base_uri,
            plugins=[plugins[uri] for uri in sorted(plugins, key=str)],
            projects=projects,
            dyn_manifests=[dyn_manifests[uri] for uri in sorted(dyn_manifests, key=str)],
            prefixes=dict(prefixes),
        )

    def warn(
        self,
        message: str,
        subject: Optional[Node],
        predicate: Optional[Node],
        category: IssueCategory,
    ) -> None:
        warning = MappingWarning(
            message=message,
            subject=subject.n3() if subject is not None else None,
            predicate=str(predicate) if predicate is not None else None,
            category=category,
        )
        logger.warning(str(warning))
        self.warnings.append(warning)

    def _report_unassociated(self) -> None:
        for statement_id in range(len(self.graph)):
            if statement_id in self.consumed:
                continue
            s, p, _ = self.graph.statement(statement_id)
            self.warn(
                "Statement is not associated with any recognized entity",
                s, p, IssueCategory.UNASSOCIATED_STATEMENT,
            )

    # -------------------------------------------------------------------------
    # Generic consumption
    # -------------------------------------------------------------------------

    def _statements(self, subject: Node) -> List[Tuple[int, URIRef, Node]]:
        rows = []
        for statement_id in self.graph.statement_ids_for_subject(subject):
            _, p, o = self.graph.statement(statement_id)
            rows.append((statement_id, p, o))
        rows.sort(key=lambda row: (str(row[1]), type(row[2]).__name__, row[2].n3()))
        return rows

    def _consume(self, subject: Node, dispatch: Dict[URIRef, Handler], path: Path) -> StatementBag:
        """
        Consume every statement of a subject.

        Known predicates go through their handler; everything else, and
        every value a handler rejects, lands in the returned fallback bag.
        """
        if isinstance(subject, BNode):
            path = path + (subject,)
        pairs: List[Tuple[URIRef, FallbackValue]] = []
        for statement_id, p, o in self._statements(subject):
            self.consumed.add(statement_id)
            handler = dispatch.get(p)
            if handler is not None:
                outcome = handler(o, path)
                if outcome is None:
                    continue
                if outcome is not KEEP:
                    self.warn(str(outcome), subject, p, IssueCategory.UNINTERPRETABLE_VALUE)
            value = self._capture(o, path)
            if value is not None:
                pairs.append((p, value))
        return StatementBag.from_pairs(pairs)

    def _capture(self, node: Node, path: Path) -> Optional[FallbackValue]:
        """Fallback representation of an object: the term itself, a captured blank node or a back-reference."""
        if isinstance(node, (URIRef, Literal)):
            return node
        if isinstance(node, BNode):
            if node in path:
                return BackReference(len(path) - path.index(node))
            return AnonymousResource(self._consume(node, {}, path))
        return None

    def _enter(self, node: Node, path: Path, subject_label: str) -> Optional[str]:
        """Cycle check before mapping a nested blank-node entity."""
        if isinstance(node, BNode) and node in path:
            return f"{subject_label} refers back to an enclosing blank node"
        return None

    # -------------------------------------------------------------------------
    # Field helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _set_once(target: Any, attr: str, value: Any, what: str) -> Optional[str]:
        if value is None:
            return f"{what} value could not be interpreted"
        current = getattr(target, attr)
        if current is not None and current != value:
            return f"Multiple {what} values; extra value kept as fallback"
        setattr(target, attr, value)
        return None

    @staticmethod
    def _add_text(target: Set[LocalizedText], node: Node, what: str) -> Optional[str]:
        text = TypeMapper.to_text(node)
        if text is None:
            return f"{what} must be a string literal"
        target.add(text)
        return None

    @staticmethod
    def _add_iri(target: Set[URIRef], node: Node, what: str) -> Optional[str]:
        if not isinstance(node, URIRef):
            return f"{what} must be an IRI"
        target.add(node)
        return None

    @staticmethod
    def _add_class(class_set: Any, node: Node, enum_cls: type, what: str) -> Optional[str]:
        if not isinstance(node, URIRef):
            return f"{what} must be an IRI"
        class_set.add_iri(node, enum_cls)
        return None

    @staticmethod
    def _iri(node: Node) -> Optional[URIRef]:
        return node if isinstance(node, URIRef) else None

    # -------------------------------------------------------------------------
    # Plugins
    # -------------------------------------------------------------------------

    def map_plugin(self, uri: URIRef) -> Plugin:
        plugin = Plugin(uri=uri)
        ports: List[Port] = []
        options = OptionsPayload()
        groups = PortGroupsPayload()
        supports = self.vocabulary.supports

        def add_port(node: Node, path: Path) -> Optional[str]:
            reason = self._enter(node, path, "lv2:port")
            if reason:
                return reason
            if not isinstance(node, (URIRef, BNode)):
                return "lv2:port must refer to a port node"
            ports.append(self.map_port(node, path))
            return None

        def add_person(target: Set[Person]) -> Handler:
            def handler(node: Node, path: Path) -> Optional[str]:
                if isinstance(node, Literal):
                    return "Person must be a node, not a literal"
                reason = self._enter(node, path, "Person")
                if reason:
                    return reason
                target.add(self.map_person(node, path))
                return None
            return handler

        def set_project(node: Node, _path: Path) -> Optional[str]:
            reason = self._set_once(plugin, "project", self._iri(node), "lv2:project")
            if reason is None:
                self.project_refs.add(node)
            return reason

        dispatch: Dict[URIRef, Handler] = {
            RDF.type: lambda o, _: self._add_class(plugin.classes, o, PluginClass, "rdf:type"),
            LV2.binary: lambda o, _: self._set_once(plugin, "binary", self._iri(o), "lv2:binary"),
            RDFS.seeAlso: lambda o, _: self._add_iri(plugin.see_also, o, "rdfs:seeAlso"),
            DOAP.name: lambda o, _: self._add_text(plugin.names, o, "doap:name"),
            LV2.shortName: lambda o, _: self._add_text(plugin.short_names, o, "lv2:shortName"),
            LV2.documentation: lambda o, _: self._add_text(plugin.documentation, o, "lv2:documentation"),
            LV2.symbol: lambda o, _: self._set_once(plugin, "symbol", TypeMapper.to_string(o), "lv2:symbol"),
            LV2.project: set_project,
            DOAP.license: lambda o, _: self._set_once(plugin, "license", self._iri(o), "doap:license"),
            DOAP.maintainer: add_person(plugin.maintainers),
            DOAP.developer: add_person(plugin.developers),
            LV2.minorVersion: lambda o, _: self._set_once(
                plugin, "minor_version", TypeMapper.to_integer(o), "lv2:minorVersion"),
            LV2.microVersion: lambda o, _: self._set_once(
                plugin, "micro_version", TypeMapper.to_integer(o), "lv2:microVersion"),
            LV2.requiredFeature: lambda o, _: self._add_class(
                plugin.required_features, o, HostFeature, "lv2:requiredFeature"),
            LV2.optionalFeature: lambda o, _: self._add_class(
                plugin.optional_features, o, HostFeature, "lv2:optionalFeature"),
            LV2.extensionData: lambda o, _: self._add_class(
                plugin.extension_data, o, ExtensionData, "lv2:extensionData"),
            LV2.port: add_port,
        }
        if supports(Extension.OPTIONS):
            dispatch[OPTS.requiredOption] = lambda o, _: self._add_class(
                options.required, o, Option, "opts:requiredOption")
            dispatch[OPTS.supportedOption] = lambda o, _: self._add_class(
                options.supported, o, Option, "opts:supportedOption")
        if supports(Extension.PORT_GROUPS):
            dispatch[PG.mainInput] = lambda o, _: self._set_once(
                groups, "main_input", self._iri(o), "pg:mainInput")
            dispatch[PG.mainOutput] = lambda o, _: self._set_once(
                groups, "main_output", self._iri(o), "pg:mainOutput")

        plugin.unknown = self._consume(uri, dispatch, ())
        plugin.ports = sorted(ports, key=_port_sort_key)

        if options.required or options.supported:
            plugin.extensions[Extension.OPTIONS] = options
        if supports(Extension.PORT_GROUPS):
            self._map_port_groups(plugin, groups)

        logger.debug(f"Mapped plugin {uri} with {len(plugin.ports)} port(s)")
        return plugin

    def _map_port_groups(self, plugin: Plugin, groups: PortGroupsPayload) -> None:
        referenced: Set[URIRef] = set()
        for port in plugin.ports:
            membership = port.extensions.get(Extension.PORT_GROUPS)
            if isinstance(membership, PortGroupMembership):
                referenced.add(membership.group)
        for main in (groups.main_input, groups.main_output):
            if main is not None:
                referenced.add(main)

        for group_uri in sorted(referenced, key=str):
            if self.graph.has_subject(group_uri):
                groups.groups[group_uri] = self.map_port_group(group_uri)

        if groups.main_input or groups.main_output or groups.groups:
            plugin.extensions[Extension.PORT_GROUPS] = groups

    # -------------------------------------------------------------------------
    # Ports
    # -------------------------------------------------------------------------

    def map_port(self, node: Union[URIRef, BNode], path: Path) -> Port:
        port = Port(uri=node if isinstance(node, URIRef) else None)
        if not self.graph.has_subject(node):
            self.warn(
                "Port has no statements (index, symbol and classes missing)",
                node, LV2.port, IssueCategory.MISSING_REQUIRED,
            )
            return port

        supports = self.vocabulary.supports
        scale_points: Set[ScalePoint] = set()
        atom = SimpleNamespace(buffer_type=None, supports=set())
        single = SimpleNamespace(unit=None, group=None, minimum_size=None, range_steps=None)

        def add_scale_point(o: Node, p: Path) -> Optional[str]:
            if not isinstance(o, BNode):
                return "lv2:scalePoint must be a blank node"
            reason = self._enter(o, p, "lv2:scalePoint")
            if reason:
                return reason
            scale_points.add(self.map_scale_point(o, p))
            return None

        def set_unit(o: Node, _p: Path) -> Optional[str]:
            if not isinstance(o, URIRef):
                return "units:unit must be an IRI"
            return self._set_once(single, "unit", Unit.from_iri(o) or o, "units:unit")

        def set_non_negative(attr: str, what: str) -> Handler:
            def handler(o: Node, _p: Path) -> Optional[str]:
                value = TypeMapper.to_integer(o)
                if value is not None and value < 0:
                    return f"{what} must not be negative"
                return self._set_once(single, attr, value, what)
            return handler

        dispatch: Dict[URIRef, Handler] = {
            RDF.type: lambda o, _: self._add_class(port.classes, o, PortClass, "rdf:type"),
            LV2["index"]: lambda o, _: self._set_once(port, "index", TypeMapper.to_integer(o), "lv2:index"),
            LV2.symbol: lambda o, _: self._set_once(port, "symbol", TypeMapper.to_string(o), "lv2:symbol"),
            LV2.name: lambda o, _: self._add_text(port.names, o, "lv2:name"),
            LV2.shortName: lambda o, _: self._add_text(port.short_names, o, "lv2:shortName"),
            LV2.documentation: lambda o, _: self._add_text(port.documentation, o, "lv2:documentation"),
            LV2.minimum: lambda o, _: self._set_once(port, "minimum", TypeMapper.to_number(o), "lv2:minimum"),
            LV2.maximum: lambda o, _: self._set_once(port, "maximum", TypeMapper.to_number(o), "lv2:maximum"),
            LV2.default: lambda o, _: self._set_once(port, "default", TypeMapper.to_number(o), "lv2:default"),
            LV2.portProperty: lambda o, _: self._add_class(
                port.properties, o, PortProperty, "lv2:portProperty"),
            LV2.designation: lambda o, _: self._add_class(
                port.designations, o, PortDesignation, "lv2:designation"),
            LV2.scalePoint: add_scale_point,
        }
        if supports(Extension.UNITS):
            dispatch[UNITS.unit] = set_unit
        if supports(Extension.ATOM):
            dispatch[ATOM.bufferType] = lambda o, _: self._set_once(
                atom, "buffer_type", self._iri(o), "atom:bufferType")
            dispatch[ATOM.supports] = lambda o, _: self._add_iri(atom.supports, o, "atom:supports")
        if supports(Extension.PORT_GROUPS):
            dispatch[PG.group] = lambda o, _: self._set_once(single, "group", self._iri(o), "pg:group")
        if supports(Extension.RESIZE_PORT):
            dispatch[RSZ.minimumSize] = set_non_negative("minimum_size", "rsz:minimumSize")
        if supports(Extension.PORT_PROPS):
            dispatch[PPROPS.rangeSteps] = set_non_negative("range_steps", "pprops:rangeSteps")

        port.unknown = self._consume(node, dispatch, path)
        port.scale_points = scale_points

        if single.unit is not None:
            port.extensions[Extension.UNITS] = UnitsPayload(single.unit)
        if atom.buffer_type is not None or atom.supports:
            port.extensions[Extension.ATOM] = AtomPortPayload(atom.buffer_type, frozenset(atom.supports))
        if single.group is not None:
            port.extensions[Extension.PORT_GROUPS] = PortGroupMembership(single.group)
        if single.minimum_size is not None:
            port.extensions[Extension.RESIZE_PORT] = ResizePortPayload(single.minimum_size)
        if single.range_steps is not None:
            port.extensions[Extension.PORT_PROPS] = RangeStepsPayload(single.range_steps)
        return port

    def map_scale_point(self, node: BNode, path: Path) -> ScalePoint:
        fields = SimpleNamespace(value=None, labels=set())
        bag = self._consume(node, {
            RDFS.label: lambda o, _: self._add_text(fields.labels, o, "rdfs:label"),
            RDF.value: lambda o, _: self._set_once(fields, "value", TypeMapper.to_number(o), "rdf:value"),
        }, path)
        return ScalePoint(value=fields.value, labels=frozenset(fields.labels), unknown=bag)

    def map_port_group(self, uri: URIRef) -> PortGroup:
        fields = SimpleNamespace(symbol=None, names=set(), classes=set())
        bag = self._consume(uri, {
            RDF.type: lambda o, _: self._add_iri(fields.classes, o, "rdf:type"),
            LV2.symbol: lambda o, _: self._set_once(fields, "symbol", TypeMapper.to_string(o), "lv2:symbol"),
            LV2.name: lambda o, _: self._add_text(fields.names, o, "lv2:name"),
        }, ())
        return PortGroup(
            uri=uri,
            classes=frozenset(fields.classes),
            symbol=fields.symbol,
            names=frozenset(fields.names),
            unknown=bag,
        )

    # -------------------------------------------------------------------------
    # People, projects, dynamic manifests
    # -------------------------------------------------------------------------

    def map_person(self, node: Union[URIRef, BNode], path: Path) -> Person:
        fields = SimpleNamespace(name=None, mbox=None, homepage=None, classes=set())
        bag = self._consume(node, {
            RDF.type: lambda o, _: self._add_iri(fields.classes, o, "rdf:type"),
            FOAF.name: lambda o, _: self._set_once(fields, "name", TypeMapper.to_string(o), "foaf:name"),
            FOAF.mbox: lambda o, _: self._set_once(fields, "mbox", self._iri(o), "foaf:mbox"),
            FOAF.homepage: lambda o, _: self._set_once(fields, "homepage", self._iri(o), "foaf:homepage"),
        }, path)
        return Person(
            uri=node if isinstance(node, URIRef) else None,
            name=fields.name,
            mbox=fields.mbox,
            homepage=fields.homepage,
            classes=frozenset(fields.classes),
            unknown=bag,
        )

    def map_project(self, uri: URIRef) -> Project:
        project = Project(uri=uri)

        def add_type(o: Node, _p: Path) -> Optional[str]:
            if o == DOAP.Project:
                return None
            return self._add_iri(project.classes, o, "rdf:type")

        def add_person(target: Set[Person]) -> Handler:
            def handler(o: Node, p: Path) -> Optional[str]:
                if isinstance(o, Literal):
                    return "Person must be a node, not a literal"
                target.add(self.map_person(o, p))
                return None
            return handler

        project.unknown = self._consume(uri, {
            RDF.type: add_type,
            DOAP.name: lambda o, _: self._add_text(project.names, o, "doap:name"),
            LV2.shortName: lambda o, _: self._add_text(project.short_names, o, "lv2:shortName"),
            LV2.symbol: lambda o, _: self._set_once(project, "symbol", TypeMapper.to_string(o), "lv2:symbol"),
            DOAP.license: lambda o, _: self._set_once(project, "license", self._iri(o), "doap:license"),
            DOAP.homepage: lambda o, _: self._set_once(project, "homepage", self._iri(o), "doap:homepage"),
            DOAP.maintainer: add_person(project.maintainers),
            DOAP.developer: add_person(project.developers),
        }, ())
        return project

    def map_dyn_manifest(self, uri: URIRef) -> DynManifest:
        manifest = DynManifest(uri=uri)
        manifest.unknown = self._consume(uri, {
            RDF.type: lambda o, _: None if o == DMAN.DynManifest else KEEP,
            LV2.binary: lambda o, _: self._set_once(manifest, "binary", self._iri(o), "lv2:binary"),
            RDFS.seeAlso: lambda o, _: self._add_iri(manifest.see_also, o, "rdfs:seeAlso"),
        }, ())
        return manifest


def _port_sort_key(port: Port):
    return (
        port.index is None,
        port.index if port.index is not None else 0,
        port.symbol or "",
        str(port.uri or ""),
    )
