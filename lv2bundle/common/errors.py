"""
Bundle pipeline exceptions.

Exceptions raised by the parsing, serialization and aggregation stages.
Mapping warnings are not exceptions: they are collected as
``MappingWarning`` records and returned alongside the draft bundle.

Usage:
    from lv2bundle.common.errors import TurtleSyntaxError

    try:
        document = parser.parse(data, base_uri, name="manifest.ttl")
    except TurtleSyntaxError as exc:
        print(exc.line, exc.column, exc.expected)
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .validation import IssueCategory


class BundleError(Exception):
    """Base exception for all bundle pipeline errors."""
    pass


class TurtleSyntaxError(BundleError):
    """Raised when a document is not well-formed Turtle."""

    def __init__(
        self,
        message: str,
        document: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        offset: Optional[int] = None,
        expected: Optional[str] = None,
    ):
        """
        Args:
            message: Error description
            document: Logical name of the failing document
            line: 1-based line of the failure
            column: 1-based column of the failure
            offset: Byte offset of the failure in the UTF-8 input
            expected: What the grammar expected at that position
        """
        self.document = document
        self.line = line
        self.column = column
        self.offset = offset
        self.expected = expected
        super().__init__(message)

    @property
    def position(self) -> str:
        """Human-readable ``line:column`` position, or ``?`` when unknown."""
        if self.line is None:
            return "?"
        return f"{self.line}:{self.column}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "document": self.document,
            "message": str(self),
            "line": self.line,
            "column": self.column,
            "offset": self.offset,
            "expected": self.expected,
        }


class MissingDocumentError(BundleError):
    """Raised (or recorded) when a document the bundle needs is absent."""

    def __init__(self, message: str, document: Optional[str] = None):
        self.document = document
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"document": self.document, "message": str(self)}


class SerializationError(BundleError):
    """Raised when a field value has no Turtle representation."""

    def __init__(self, message: str, field_name: Optional[str] = None, value: Any = None):
        """
        Args:
            message: Error description
            field_name: Name of the offending model field
            value: The value that could not be represented
        """
        self.field_name = field_name
        self.value = value
        super().__init__(message)


class BundleLoadError(BundleError):
    """Raised by ``BundleLoadResult.raise_for_errors`` for an invalid bundle."""

    def __init__(self, message: str, problems: Optional[List[str]] = None):
        self.problems = problems or []
        super().__init__(message)


@dataclass(frozen=True)
class MappingWarning:
    """
    A graph statement or subject the schema mapper could not fully associate.

    Attributes:
        message: Human-readable description.
        subject: Subject term of the offending statement or entity (N3 form).
        predicate: Predicate IRI of the offending statement, if any.
        category: Issue category for grouping.
    """
    message: str
    subject: Optional[str] = None
    predicate: Optional[str] = None
    category: IssueCategory = IssueCategory.UNASSOCIATED_STATEMENT

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Convert to dictionary format for serialization."""
        return {
            "message": self.message,
            "subject": self.subject,
            "predicate": self.predicate,
            "category": self.category.value,
        }

    def __str__(self) -> str:
        location = self.subject or "?"
        if self.predicate:
            location = f"{location} {self.predicate}"
        return f"[{self.category.value}] {self.message} ({location})"
