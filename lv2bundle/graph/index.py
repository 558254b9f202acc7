"""
Graph Index Module

In-memory index over the statements of one or more parsed documents.

Statements live in an arena addressed by small integer ids; subject,
predicate and object indexes map terms to id sets. Blank nodes from each
inserted document are relabelled into a namespace unique to that
insertion, so two documents using the same label never share a node.
Blank-node references are plain terms resolved through the indexes, so
cyclic structures need no special handling here.

Components:
- GraphIndex: arena, term indexes and thread-safe document merge
"""

import logging
import threading
from collections import defaultdict
from typing import DefaultDict, Dict, FrozenSet, Iterator, List, Optional, Set

from rdflib import BNode, URIRef
from rdflib.term import Node

from ..common.id_generator import LabelGenerator
from ..shared.models.statements import ParsedDocument, Statement

logger = logging.getLogger(__name__)

_EMPTY: FrozenSet[Statement] = frozenset()


class GraphIndex:
    """
    Merged, indexed view of parsed documents.

    Lookups never fail: unknown terms yield an empty set. No validation is
    performed; the index is purely structural.

    Example:
        >>> index = GraphIndex()
        >>> index.insert(document)
        0
        >>> index.lookup_by_predicate(LV2.binary)
        frozenset({...})
    """

    def __init__(self, labels: Optional[LabelGenerator] = None):
        """
        Args:
            labels: Generator for insertion namespaces (one per index by default)
        """
        self._labels = labels or LabelGenerator(namespace_prefix="d", label_prefix="b")
        self._lock = threading.Lock()
        self._statements: List[Statement] = []
        self._ids: Dict[Statement, int] = {}
        self._by_subject: DefaultDict[Node, Set[int]] = defaultdict(set)
        self._by_predicate: DefaultDict[Node, Set[int]] = defaultdict(set)
        self._by_object: DefaultDict[Node, Set[int]] = defaultdict(set)
        self._by_document: Dict[str, Set[int]] = {}
        self._blank_indices: Dict[BNode, int] = {}
        self._insertions = 0

    def insert(self, document: ParsedDocument) -> int:
        """
        Merge a document's statements into the graph.

        The document's blank nodes are remapped into a fresh namespace;
        statements already present are stored once.

        Args:
            document: Parsed document to merge

        Returns:
            Insertion number of this document

        Thread-safe.
        """
        with self._lock:
            insertion = self._insertions
            self._insertions += 1
            namespace = self._labels.next_namespace()
            remapped: Dict[BNode, BNode] = {}

            def remap(node: Node) -> Node:
                if not isinstance(node, BNode):
                    return node
                if node not in remapped:
                    fresh = BNode(self._labels.next_label(namespace))
                    remapped[node] = fresh
                    self._blank_indices[fresh] = len(self._blank_indices)
                return remapped[node]

            ids = self._by_document.setdefault(document.name, set())
            added = 0
            for s, p, o in sorted(document.statements, key=_insertion_key):
                statement_id, is_new = self._add((remap(s), p, remap(o)))
                ids.add(statement_id)
                added += is_new

        logger.debug(
            f"Inserted {document.name} as {namespace}: {added} new statements, "
            f"{len(remapped)} blank nodes"
        )
        return insertion

    def _add(self, statement: Statement):
        existing = self._ids.get(statement)
        if existing is not None:
            return existing, False
        statement_id = len(self._statements)
        self._statements.append(statement)
        self._ids[statement] = statement_id
        s, p, o = statement
        self._by_subject[s].add(statement_id)
        self._by_predicate[p].add(statement_id)
        self._by_object[o].add(statement_id)
        return statement_id, True

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def lookup_by_subject(self, node: Node) -> FrozenSet[Statement]:
        """Statements whose subject is ``node``."""
        return self._collect(self._by_subject, node)

    def lookup_by_predicate(self, iri: Node) -> FrozenSet[Statement]:
        """Statements whose predicate is ``iri``."""
        return self._collect(self._by_predicate, iri)

    def lookup_by_object(self, node: Node) -> FrozenSet[Statement]:
        """Statements whose object is ``node`` (an IRI, blank node or literal)."""
        return self._collect(self._by_object, node)

    def _collect(self, table: Dict[Node, Set[int]], key: Node) -> FrozenSet[Statement]:
        try:
            ids = table.get(key)
        except TypeError:
            return _EMPTY
        if not ids:
            return _EMPTY
        return frozenset(self._statements[i] for i in ids)

    def statement_ids_for_subject(self, node: Node) -> List[int]:
        """Ids of the statements whose subject is ``node``, ascending."""
        try:
            return sorted(self._by_subject.get(node, ()))
        except TypeError:
            return []

    def statement(self, statement_id: int) -> Statement:
        """The statement stored under an id."""
        return self._statements[statement_id]

    def objects(self, subject: Node, predicate: URIRef) -> List[Node]:
        """Objects of (subject, predicate, *) statements, in a stable order."""
        ids = self._by_subject.get(subject, set()) & self._by_predicate.get(predicate, set())
        return sorted((self._statements[i][2] for i in ids), key=_node_sort_key)

    def subjects(self) -> List[Node]:
        """Every subject in the graph, in a stable order."""
        return sorted((s for s, ids in self._by_subject.items() if ids), key=_node_sort_key)

    def has_subject(self, node: Node) -> bool:
        return bool(self._by_subject.get(node))

    def statements_from(self, document_name: str) -> FrozenSet[Statement]:
        """Statements contributed by a document (after blank-node remapping)."""
        ids = self._by_document.get(document_name, set())
        return frozenset(self._statements[i] for i in ids)

    def blank_index(self, node: Node) -> Optional[int]:
        """Dense integer index of a (remapped) blank node, or None."""
        if not isinstance(node, BNode):
            return None
        return self._blank_indices.get(node)

    @property
    def documents(self) -> List[str]:
        """Names of the inserted documents."""
        return sorted(self._by_document)

    @property
    def blank_node_count(self) -> int:
        return len(self._blank_indices)

    def __len__(self) -> int:
        return len(self._statements)

    def __iter__(self) -> Iterator[Statement]:
        return iter(list(self._statements))

    def __contains__(self, statement: object) -> bool:
        try:
            return statement in self._ids
        except TypeError:
            return False

    def __repr__(self) -> str:
        return f"GraphIndex(statements={len(self)}, documents={len(self._by_document)})"


def _node_sort_key(node: Node):
    return (type(node).__name__, node.n3() if hasattr(node, "n3") else str(node))


def _insertion_key(statement: Statement):
    return tuple(_node_sort_key(term) for term in statement)
