"""
Turtle Parser Module

This module turns the raw bytes of one bundle document into a
``ParsedDocument``: the document's statements plus its prefix table.
It has no knowledge of the LV2 vocabulary.

Components:
- TurtleParser: rdflib-backed Turtle parsing with positioned syntax errors
- locate_offset: character offset to line, column and byte offset
"""

import logging
from typing import Dict, Optional, Tuple, Union

from rdflib import Graph
from rdflib.plugins.parsers.notation3 import BadSyntax

from ...common.errors import TurtleSyntaxError
from ...shared.models.statements import ParsedDocument

logger = logging.getLogger(__name__)


def locate_offset(text: str, index: int) -> Tuple[int, int, int]:
    """
    Convert a character offset into a position.

    Args:
        text: The decoded document text
        index: Character offset into ``text``

    Returns:
        Tuple of (1-based line, 1-based column, byte offset in UTF-8)
    """
    index = max(0, min(index, len(text)))
    line = text.count("\n", 0, index) + 1
    line_start = text.rfind("\n", 0, index) + 1
    column = index - line_start + 1
    offset = len(text[:index].encode("utf-8"))
    return line, column, offset


class TurtleParser:
    """
    Parses Turtle documents into ``ParsedDocument`` values.

    Relative IRIs resolve against the base IRI given per document (or an
    ``@base`` directive inside it). Parse failures raise
    ``TurtleSyntaxError`` carrying the failing line, column, byte offset
    and what the grammar expected there.

    Example:
        >>> parser = TurtleParser()
        >>> doc = parser.parse(b"<a> <b> <c> .", "file:///bundle/manifest.ttl", "manifest.ttl")
        >>> len(doc)
        1
    """

    FORMAT = "turtle"

    def __init__(self, large_document_bytes: int = 5_000_000):
        """
        Args:
            large_document_bytes: Size above which a warning is logged
        """
        self.large_document_bytes = large_document_bytes

    def parse(
        self,
        data: Union[bytes, bytearray, str],
        base_uri: str,
        name: Optional[str] = None,
    ) -> ParsedDocument:
        """
        Parse one Turtle document.

        Args:
            data: Raw UTF-8 bytes (or already decoded text)
            base_uri: IRI relative references resolve against
            name: Logical document name, used in errors and logs

        Returns:
            The parsed document

        Raises:
            TypeError: If data is not bytes or str
            TurtleSyntaxError: If the document is not valid UTF-8 Turtle
        """
        name = name or base_uri
        text = self.decode(data, name)

        size = len(text.encode("utf-8")) if isinstance(data, str) else len(data)
        if size > self.large_document_bytes:
            logger.warning(
                f"Large document detected: {name} ({size / (1024 * 1024):.1f} MB). "
                "Parsing may take a while."
            )

        if not text.strip():
            logger.debug(f"Document {name} is empty")
            return ParsedDocument(name=name, base_uri=base_uri)

        graph = Graph(bind_namespaces="none")
        try:
            graph.parse(data=text, format=self.FORMAT, publicID=base_uri)
        except BadSyntax as e:
            raise self._from_bad_syntax(e, text, name) from e
        except Exception as e:
            logger.error(f"Failed to parse {name}: {e}")
            raise TurtleSyntaxError(
                f"{name}: invalid Turtle: {e}",
                document=name,
                expected=str(e),
            ) from e

        prefixes = self.declared_prefixes(graph)
        statements = frozenset(graph)
        logger.info(f"Parsed {len(statements)} statements from {name}")

        return ParsedDocument(
            name=name,
            base_uri=base_uri,
            prefixes=prefixes,
            statements=statements,
        )

    @staticmethod
    def decode(data: Union[bytes, bytearray, str], name: str) -> str:
        """
        Decode document bytes as UTF-8.

        Raises:
            TypeError: If data is not bytes or str
            TurtleSyntaxError: At the first undecodable byte
        """
        if isinstance(data, str):
            return data
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError(f"Document {name} must be bytes, got {type(data).__name__}")
        try:
            return bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            valid = bytes(data[:e.start]).decode("utf-8")
            line, column, _ = locate_offset(valid, len(valid))
            raise TurtleSyntaxError(
                f"{name}:{line}:{column}: invalid UTF-8 byte sequence",
                document=name,
                line=line,
                column=column,
                offset=e.start,
                expected="UTF-8 encoded text",
            ) from e

    @staticmethod
    def declared_prefixes(graph: Graph) -> Dict[str, str]:
        """Collect the prefix bindings the parsed document declared, as absolute IRIs."""
        return {prefix: str(namespace) for prefix, namespace in graph.namespaces()}

    @staticmethod
    def _from_bad_syntax(error: BadSyntax, text: str, name: str) -> TurtleSyntaxError:
        """Translate rdflib's BadSyntax into a positioned TurtleSyntaxError."""
        source = getattr(error, "_str", None)
        if not isinstance(source, str):
            source = text
        index = getattr(error, "_i", None)
        why = getattr(error, "_why", None) or str(error)

        if isinstance(index, int):
            line, column, offset = locate_offset(source, index)
        else:
            line, column, offset = getattr(error, "lines", 0) + 1, 1, None

        logger.warning(f"Syntax error in {name} at {line}:{column}: {why}")
        return TurtleSyntaxError(
            f"{name}:{line}:{column}: bad syntax ({why})",
            document=name,
            line=line,
            column=column,
            offset=offset,
            expected=why,
        )
