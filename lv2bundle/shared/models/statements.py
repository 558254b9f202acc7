"""
Statement-level data types.

This module defines the parsed document produced by the Turtle parser
and the generic fallback payload that keeps unrecognized statements
attached to a recognized entity. Blank-node cycles are kept as
back-references to the enclosing resource.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, List, Tuple, Union

from rdflib import BNode, Literal, URIRef
from rdflib.term import Node

# (subject, predicate, object) using rdflib terms
Statement = Tuple[Node, URIRef, Node]


@dataclass(frozen=True)
class ParsedDocument:
    """
    One parsed Turtle document.

    Attributes:
        name: Logical document name (e.g. "manifest.ttl").
        base_uri: IRI relative references were resolved against.
        prefixes: Prefix bindings declared by the document.
        statements: The document's statements; order carries no meaning.
    """
    name: str
    base_uri: str
    prefixes: Dict[str, str] = field(default_factory=dict, compare=False, hash=False)
    statements: FrozenSet[Statement] = frozenset()

    def __len__(self) -> int:
        return len(self.statements)

    def subjects(self) -> List[Node]:
        """Distinct subjects, in a stable order."""
        return sorted({s for s, _, _ in self.statements}, key=str)

    def typed_subjects(self, type_predicate: URIRef) -> List[URIRef]:
        """IRI subjects that carry at least one ``type_predicate`` statement."""
        return sorted(
            {s for s, p, _ in self.statements if p == type_predicate and isinstance(s, URIRef)},
            key=str,
        )

    def blank_nodes(self) -> List[BNode]:
        """Distinct blank nodes appearing as subject or object."""
        nodes = set()
        for s, _, o in self.statements:
            if isinstance(s, BNode):
                nodes.add(s)
            if isinstance(o, BNode):
                nodes.add(o)
        return sorted(nodes, key=str)


@dataclass(frozen=True)
class AnonymousResource:
    """A blank node captured as the tree of statements hanging off it."""
    statements: 'StatementBag'

    def __repr__(self) -> str:
        return f"AnonymousResource({self.statements!r})"


@dataclass(frozen=True)
class BackReference:
    """
    A blank node that refers back to one of the resources enclosing it.

    ``levels`` counts outward from the resource holding the statement:
    1 is that resource itself, 2 the one holding it, and so on.
    """
    levels: int

    def __repr__(self) -> str:
        return f"BackReference({self.levels})"


# Object of a fallback statement
FallbackValue = Union[URIRef, Literal, AnonymousResource, BackReference]


@dataclass(frozen=True)
class StatementBag:
    """
    Order-independent set of (predicate, value) pairs.

    Holds every statement attached to an entity that the mapper did not
    turn into a typed field, so it can be written back verbatim.

    Example:
        >>> bag = StatementBag.from_pairs([(URIRef("http://example.org/p"), Literal("x"))])
        >>> len(bag)
        1
    """
    pairs: FrozenSet[Tuple[URIRef, FallbackValue]] = frozenset()

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[URIRef, FallbackValue]]) -> 'StatementBag':
        return cls(frozenset(pairs))

    def __iter__(self) -> Iterator[Tuple[URIRef, FallbackValue]]:
        return iter(sorted(self.pairs, key=_pair_sort_key))

    def __len__(self) -> int:
        return len(self.pairs)

    def __bool__(self) -> bool:
        return bool(self.pairs)

    def __contains__(self, pair: object) -> bool:
        return pair in self.pairs

    def predicates(self) -> List[URIRef]:
        """Distinct predicates, sorted."""
        return sorted({p for p, _ in self.pairs}, key=str)

    def values(self, predicate: URIRef) -> List[FallbackValue]:
        """All values recorded for a predicate."""
        return [v for p, v in self if p == predicate]

    def __repr__(self) -> str:
        inner = ", ".join(f"{p.n3()} {_value_repr(v)}" for p, v in self)
        return f"StatementBag({{{inner}}})"


def _value_repr(value: FallbackValue) -> str:
    if isinstance(value, (AnonymousResource, BackReference)):
        return repr(value)
    return value.n3()


def _pair_sort_key(pair: Tuple[URIRef, FallbackValue]) -> Tuple[str, int, str]:
    predicate, value = pair
    if isinstance(value, AnonymousResource):
        return (str(predicate), 2, repr(value))
    if isinstance(value, BackReference):
        return (str(predicate), 3, repr(value))
    if isinstance(value, Literal):
        return (str(predicate), 1, value.n3())
    return (str(predicate), 0, str(value))
