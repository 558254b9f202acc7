"""
Turtle Writer Module

The writer counterpart of ``TurtleParser``: renders a set of statements
as deterministic Turtle text. Prefixes are offered for every known
namespace but only the ones the output uses are declared.
"""

import logging
from typing import Dict, Iterable, Mapping, Optional

from rdflib import BNode, Graph
from rdflib.term import Node

from ...shared.models.statements import ParsedDocument, Statement

logger = logging.getLogger(__name__)


class TurtleWriter:
    """
    Writes statements as Turtle.

    Output is deterministic for a given statement set: blank nodes are
    relabelled in a stable order and rdflib's Turtle serializer sorts
    subjects and predicates. IRIs under ``base_uri`` are written relative
    to it, with an ``@base`` directive.

    Example:
        >>> writer = TurtleWriter({"lv2": "http://lv2plug.in/ns/lv2core#"})
        >>> text = writer.write(document, base_uri="file:///amp.lv2/")
    """

    FORMAT = "turtle"

    def __init__(self, prefixes: Optional[Mapping[str, str]] = None):
        """
        Args:
            prefixes: Preferred prefix bindings; they win over document bindings
        """
        self.prefixes: Dict[str, str] = dict(prefixes or {})

    def write(self, document: ParsedDocument, base_uri: Optional[str] = None) -> str:
        """
        Render a parsed document.

        Args:
            document: Statements and prefix table to write
            base_uri: Base for relative IRIs (defaults to none, all IRIs absolute)

        Returns:
            Turtle text
        """
        return self.write_statements(document.statements, document.prefixes, base_uri)

    def write_statements(
        self,
        statements: Iterable[Statement],
        prefixes: Optional[Mapping[str, str]] = None,
        base_uri: Optional[str] = None,
    ) -> str:
        """
        Render statements with the given document prefixes.

        Returns:
            Turtle text
        """
        graph = Graph(bind_namespaces="core")
        self._bind_prefixes(graph, prefixes or {})

        for statement in self.canonical_statements(statements):
            graph.add(statement)

        text = graph.serialize(format=self.FORMAT, base=base_uri)
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        logger.debug(f"Wrote {len(graph)} statements ({len(text)} characters)")
        return text

    def _bind_prefixes(self, graph: Graph, document_prefixes: Mapping[str, str]) -> None:
        for prefix, namespace in sorted(document_prefixes.items()):
            if not prefix or prefix in self.prefixes:
                continue
            if namespace in self.prefixes.values():
                continue
            graph.bind(prefix, namespace, override=True, replace=True)
        for prefix, namespace in sorted(self.prefixes.items()):
            graph.bind(prefix, namespace, override=True, replace=True)

    @staticmethod
    def canonical_statements(statements: Iterable[Statement]) -> list:
        """
        Sort statements and relabel their blank nodes ``b0``, ``b1``, ...

        Labels follow the order in which blank nodes first appear in the
        sorted statement list.
        """
        ordered = sorted(statements, key=_statement_sort_key)
        labels: Dict[BNode, BNode] = {}

        def relabel(node: Node) -> Node:
            if isinstance(node, BNode):
                if node not in labels:
                    labels[node] = BNode(f"b{len(labels)}")
                return labels[node]
            return node

        return [(relabel(s), p, relabel(o)) for s, p, o in ordered]


def _statement_sort_key(statement: Statement):
    s, p, o = statement
    return (
        isinstance(s, BNode),
        str(s),
        str(p),
        o.n3() if hasattr(o, "n3") else str(o),
    )
