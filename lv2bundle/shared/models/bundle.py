"""
Bundle domain model.

Typed representation of an LV2 bundle: plugins, their ports, the
projects they belong to, and dynamic manifest generators. Every entity
carries an ``unknown`` StatementBag holding the statements the mapper
did not turn into typed fields.

Collections whose order is not meaningful in the graph are sets; ports
are ordered by index and plugins by IRI.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import (
    Any, Dict, FrozenSet, Generic, Iterable, Iterator, List, Optional, Set,
    Type, TypeVar, Union,
)

from rdflib import URIRef

from ...vocabulary.terms import (
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
from .statements import StatementBag

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=IriEnum)

Number = Union[int, float, Decimal]


@dataclass(frozen=True)
class LocalizedText:
    """A string literal with an optional language tag."""
    value: str
    lang: Optional[str] = None

    def __str__(self) -> str:
        return self.value


@dataclass
class ClassSet(Generic[E]):
    """
    Recognized members plus unrecognized IRIs in one class-like position.

    Unrecognized IRIs are retained verbatim so they survive a round trip.

    Attributes:
        known: Recognized enumeration members.
        unknown: IRIs that are not members of the enumeration.
    """
    known: Set[E] = field(default_factory=set)
    unknown: Set[URIRef] = field(default_factory=set)

    @classmethod
    def of(cls, *members: Union[E, URIRef]) -> 'ClassSet[E]':
        """Build a set from enumeration members and/or raw IRIs."""
        result: ClassSet[E] = cls()
        for member in members:
            if isinstance(member, IriEnum):
                result.known.add(member)  # type: ignore[arg-type]
            else:
                result.unknown.add(URIRef(member))
        return result

    def add_iri(self, iri: URIRef, enum_cls: Type[E]) -> bool:
        """
        Add an IRI, sorting it into known or unknown.

        Returns:
            True if the IRI was recognized.
        """
        member = enum_cls.from_iri(iri)
        if member is None:
            self.unknown.add(URIRef(iri))
            return False
        self.known.add(member)
        return True

    def iris(self) -> List[URIRef]:
        """Every IRI in the set, sorted."""
        return sorted([m.iri for m in self.known] + list(self.unknown), key=str)

    def __contains__(self, item: object) -> bool:
        return item in self.known or item in self.unknown

    def __iter__(self) -> Iterator[URIRef]:
        return iter(self.iris())

    def __len__(self) -> int:
        return len(self.known) + len(self.unknown)

    def __bool__(self) -> bool:
        return bool(self.known or self.unknown)

    def isdisjoint(self, other: 'ClassSet[E]') -> bool:
        return self.known.isdisjoint(other.known) and self.unknown.isdisjoint(other.unknown)

    def intersection(self, other: 'ClassSet[E]') -> List[URIRef]:
        """IRIs present in both sets, sorted."""
        return sorted(set(self.iris()) & set(other.iris()), key=str)


# =============================================================================
# Extension payloads
# =============================================================================

@dataclass(frozen=True)
class UnitsPayload:
    """units:unit of a port."""
    unit: Union[Unit, URIRef]


@dataclass(frozen=True)
class AtomPortPayload:
    """atom:bufferType and atom:supports of an atom port."""
    buffer_type: Optional[URIRef] = None
    supports: FrozenSet[URIRef] = frozenset()


@dataclass(frozen=True)
class PortGroupMembership:
    """pg:group of a port."""
    group: URIRef


@dataclass(frozen=True)
class ResizePortPayload:
    """rsz:minimumSize of a port buffer, in bytes."""
    minimum_size: int


@dataclass(frozen=True)
class RangeStepsPayload:
    """pprops:rangeSteps of a port."""
    steps: int


@dataclass(frozen=True)
class PortGroup:
    """
    A port group description (pg:Group subject).

    Attributes:
        uri: Group IRI.
        classes: rdf:type IRIs of the group (e.g. pg:StereoGroup).
        symbol: lv2:symbol of the group.
        names: lv2:name literals.
        unknown: Fallback statements.
    """
    uri: URIRef
    classes: FrozenSet[URIRef] = frozenset()
    symbol: Optional[str] = None
    names: FrozenSet[LocalizedText] = frozenset()
    unknown: StatementBag = field(default_factory=StatementBag)


@dataclass
class PortGroupsPayload:
    """Plugin-level port groups: main input/output and group descriptions."""
    main_input: Optional[URIRef] = None
    main_output: Optional[URIRef] = None
    groups: Dict[URIRef, PortGroup] = field(default_factory=dict)


@dataclass
class OptionsPayload:
    """opts:requiredOption and opts:supportedOption of a plugin."""
    required: ClassSet[Option] = field(default_factory=ClassSet)
    supported: ClassSet[Option] = field(default_factory=ClassSet)


ExtensionPayload = Union[
    UnitsPayload,
    AtomPortPayload,
    PortGroupMembership,
    ResizePortPayload,
    RangeStepsPayload,
    PortGroupsPayload,
    OptionsPayload,
]


# =============================================================================
# Entities
# =============================================================================

@dataclass(frozen=True)
class Person:
    """A doap:maintainer or doap:developer (foaf:Person)."""
    uri: Optional[URIRef] = None
    name: Optional[str] = None
    mbox: Optional[URIRef] = None
    homepage: Optional[URIRef] = None
    classes: FrozenSet[URIRef] = frozenset()
    unknown: StatementBag = field(default_factory=StatementBag)


@dataclass(frozen=True)
class ScalePoint:
    """A labelled value of an enumerated control port (lv2:scalePoint)."""
    value: Optional[Number] = None
    labels: FrozenSet[LocalizedText] = frozenset()
    unknown: StatementBag = field(default_factory=StatementBag)


@dataclass
class Port:
    """
    A plugin port.

    Attributes:
        index: lv2:index, unique and contiguous from zero within a plugin.
        symbol: lv2:symbol, unique within a plugin.
        names: lv2:name literals.
        short_names: lv2:shortName literals.
        documentation: lv2:documentation literals.
        classes: Direction and type classes (multi-class membership).
        minimum / maximum / default: Control range.
        properties: lv2:portProperty values.
        designations: lv2:designation values.
        scale_points: lv2:scalePoint entries.
        extensions: Typed payloads keyed by extension.
        unknown: Fallback statements.
        uri: Port IRI when the port is not a blank node.
    """
    index: Optional[int] = None
    symbol: Optional[str] = None
    names: Set[LocalizedText] = field(default_factory=set)
    short_names: Set[LocalizedText] = field(default_factory=set)
    documentation: Set[LocalizedText] = field(default_factory=set)
    classes: ClassSet[PortClass] = field(default_factory=ClassSet)
    minimum: Optional[Number] = None
    maximum: Optional[Number] = None
    default: Optional[Number] = None
    properties: ClassSet[PortProperty] = field(default_factory=ClassSet)
    designations: ClassSet[PortDesignation] = field(default_factory=ClassSet)
    scale_points: Set[ScalePoint] = field(default_factory=set)
    extensions: Dict[Extension, ExtensionPayload] = field(default_factory=dict)
    unknown: StatementBag = field(default_factory=StatementBag)
    uri: Optional[URIRef] = None

    @property
    def is_input(self) -> bool:
        return PortClass.INPUT in self.classes.known

    @property
    def is_output(self) -> bool:
        return PortClass.OUTPUT in self.classes.known

    @property
    def unit(self) -> Optional[Union[Unit, URIRef]]:
        """Declared unit, or the unit implied by the port's designation."""
        payload = self.extensions.get(Extension.UNITS)
        if isinstance(payload, UnitsPayload):
            return payload.unit
        for designation in sorted(self.designations.known, key=str):
            if designation in UNITS_IMPLIED_BY_DESIGNATION:
                return UNITS_IMPLIED_BY_DESIGNATION[designation]
        return None

    @property
    def label(self) -> str:
        """Identifier used in messages."""
        if self.symbol:
            return f"port '{self.symbol}'"
        if self.index is not None:
            return f"port #{self.index}"
        return f"port {self.uri or '(anonymous)'}"


@dataclass
class Plugin:
    """
    An LV2 plugin.

    Attributes:
        uri: Plugin IRI, unique within a bundle.
        binary: lv2:binary, the shared library entry point (not resolved).
        see_also: rdfs:seeAlso documents.
        classes: Plugin classes (lv2:Plugin and subclasses, plus unknown).
        names: doap:name literals.
        short_names: lv2:shortName literals.
        documentation: lv2:documentation literals.
        symbol: lv2:symbol.
        project: lv2:project IRI.
        license: doap:license IRI.
        maintainers / developers: doap:maintainer / doap:developer.
        minor_version / micro_version: lv2:minorVersion / lv2:microVersion.
        required_features / optional_features: Host features.
        extension_data: lv2:extensionData interfaces.
        ports: Ports, ordered by index.
        extensions: Typed payloads keyed by extension.
        unknown: Fallback statements.
    """
    uri: URIRef
    binary: Optional[URIRef] = None
    see_also: Set[URIRef] = field(default_factory=set)
    classes: ClassSet[PluginClass] = field(default_factory=ClassSet)
    names: Set[LocalizedText] = field(default_factory=set)
    short_names: Set[LocalizedText] = field(default_factory=set)
    documentation: Set[LocalizedText] = field(default_factory=set)
    symbol: Optional[str] = None
    project: Optional[URIRef] = None
    license: Optional[URIRef] = None
    maintainers: Set[Person] = field(default_factory=set)
    developers: Set[Person] = field(default_factory=set)
    minor_version: Optional[int] = None
    micro_version: Optional[int] = None
    required_features: ClassSet[HostFeature] = field(default_factory=ClassSet)
    optional_features: ClassSet[HostFeature] = field(default_factory=ClassSet)
    extension_data: ClassSet[ExtensionData] = field(default_factory=ClassSet)
    ports: List[Port] = field(default_factory=list)
    extensions: Dict[Extension, ExtensionPayload] = field(default_factory=dict)
    unknown: StatementBag = field(default_factory=StatementBag)

    def port_by_symbol(self, symbol: str) -> Optional[Port]:
        for port in self.ports:
            if port.symbol == symbol:
                return port
        return None

    def port_by_index(self, index: int) -> Optional[Port]:
        for port in self.ports:
            if port.index == index:
                return port
        return None

    @property
    def version(self) -> Optional[str]:
        """``minor.micro`` version string, when both parts are present."""
        if self.minor_version is None or self.micro_version is None:
            return None
        return f"{self.minor_version}.{self.micro_version}"


@dataclass
class Project:
    """A doap:Project referenced by plugins through lv2:project."""
    uri: URIRef
    names: Set[LocalizedText] = field(default_factory=set)
    short_names: Set[LocalizedText] = field(default_factory=set)
    symbol: Optional[str] = None
    license: Optional[URIRef] = None
    homepage: Optional[URIRef] = None
    maintainers: Set[Person] = field(default_factory=set)
    developers: Set[Person] = field(default_factory=set)
    classes: Set[URIRef] = field(default_factory=set)
    unknown: StatementBag = field(default_factory=StatementBag)


@dataclass
class DynManifest:
    """A dynamic manifest generator (dman:DynManifest) listed in the manifest."""
    uri: URIRef
    binary: Optional[URIRef] = None
    see_also: Set[URIRef] = field(default_factory=set)
    unknown: StatementBag = field(default_factory=StatementBag)


@dataclass
class Bundle:
    """
    Top-level bundle entity.

    Attributes:
        base_uri: Bundle directory IRI; document names resolve against it.
        plugins: Plugins, ordered by IRI.
        projects: Projects, ordered by IRI.
        dyn_manifests: Dynamic manifest generators, ordered by IRI.
        prefixes: Prefix bindings seen in the input (ignored by equality).
    """
    base_uri: str
    plugins: List[Plugin] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    dyn_manifests: List[DynManifest] = field(default_factory=list)
    prefixes: Dict[str, str] = field(default_factory=dict, compare=False)

    def plugin(self, uri: Union[str, URIRef]) -> Optional[Plugin]:
        for plugin in self.plugins:
            if str(plugin.uri) == str(uri):
                return plugin
        return None

    def project(self, uri: Union[str, URIRef]) -> Optional[Project]:
        for project in self.projects:
            if str(project.uri) == str(uri):
                return project
        return None

    def metadata(self) -> Dict[str, Any]:
        """
        Symbolic project metadata of the bundle.

        Taken from the first project, or from the first plugin when the
        bundle declares no project.

        Returns:
            Dictionary with ``name``, ``license`` and ``authors`` keys.
        """
        if self.projects:
            source: Union[Project, Plugin, None] = self.projects[0]
        elif self.plugins:
            source = self.plugins[0]
        else:
            return {"name": None, "license": None, "authors": []}

        names = sorted(source.names, key=lambda t: (t.lang or "", t.value))
        untagged = [t for t in names if t.lang is None]
        name = (untagged or names)[0].value if names else None
        people: Iterable[Person] = list(source.maintainers) + list(source.developers)
        authors = sorted({p.name or str(p.uri) for p in people if p.name or p.uri})
        return {
            "name": name,
            "license": str(source.license) if source.license else None,
            "authors": authors,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Short structural summary, for logging and reports."""
        return {
            "base_uri": self.base_uri,
            "plugins": [
                {"uri": str(p.uri), "ports": len(p.ports), "binary": str(p.binary) if p.binary else None}
                for p in self.plugins
            ],
            "projects": [str(p.uri) for p in self.projects],
            "dyn_manifests": [str(d.uri) for d in self.dyn_manifests],
            "metadata": self.metadata(),
        }
