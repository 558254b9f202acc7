"""
Pipeline result data types.

This module defines the results handed back by the schema mapper and
by the bundle aggregator, including per-document errors, mapping
warnings and the validation report.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from rdflib import URIRef

from ...common.errors import (
    BundleError,
    BundleLoadError,
    MappingWarning,
    TurtleSyntaxError,
)
from ...common.validation import IssueCategory, ValidationResult
from .bundle import Bundle


@dataclass
class MappingResult:
    """
    Output of the schema mapper.

    Attributes:
        bundle: Best-effort typed bundle (may be incomplete).
        warnings: Statements or subjects that could not be associated.
        statement_count: Number of statements in the mapped graph.
        consumed_count: Number of statements associated with an entity.
    """
    bundle: Bundle
    warnings: List[MappingWarning] = field(default_factory=list)
    statement_count: int = 0
    consumed_count: int = 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def warnings_by_category(self) -> Dict[str, int]:
        """Get a count of warnings grouped by category."""
        counts: Dict[str, int] = {}
        for warning in self.warnings:
            counts[warning.category.value] = counts.get(warning.category.value, 0) + 1
        return counts

    def warnings_for(self, category: IssueCategory) -> List[MappingWarning]:
        return [w for w in self.warnings if w.category == category]


@dataclass
class DocumentPlan:
    """
    Assignment of entities to output documents.

    Entities without an explicit assignment go to the manifest.

    Attributes:
        manifest: Name of the manifest document.
        plugin_documents: Plugin IRI to the document holding its detail.
        project_documents: Project IRI to the document holding it.
    """
    manifest: str = "manifest.ttl"
    plugin_documents: Dict[URIRef, str] = field(default_factory=dict)
    project_documents: Dict[URIRef, str] = field(default_factory=dict)

    def document_for_plugin(self, uri: URIRef) -> str:
        return self.plugin_documents.get(uri, self.manifest)

    def document_for_project(self, uri: URIRef) -> str:
        return self.project_documents.get(uri, self.manifest)

    @property
    def documents(self) -> List[str]:
        """Every document the plan writes, manifest first."""
        others = set(self.plugin_documents.values()) | set(self.project_documents.values())
        others.discard(self.manifest)
        return [self.manifest] + sorted(others)


@dataclass
class BundleLoadResult:
    """
    Outcome of loading a bundle from its documents.

    ``bundle`` is set only when every document parsed, mapping produced
    no warning and validation found no error. ``draft`` always holds the
    best-effort mapping of whatever could be parsed.

    Attributes:
        bundle: The valid bundle, or None.
        draft: Best-effort bundle, valid or not.
        document_errors: Per-document failures keyed by document name.
        warnings: Mapping warnings.
        validation: Validation report of the draft.
        statement_count: Statements in the merged graph.
    """
    bundle: Optional[Bundle] = None
    draft: Optional[Bundle] = None
    document_errors: Dict[str, BundleError] = field(default_factory=dict)
    warnings: List[MappingWarning] = field(default_factory=list)
    validation: ValidationResult = field(default_factory=ValidationResult)
    statement_count: int = 0

    @property
    def syntax_errors(self) -> Dict[str, TurtleSyntaxError]:
        """Document errors that are Turtle syntax errors."""
        return {
            name: error for name, error in self.document_errors.items()
            if isinstance(error, TurtleSyntaxError)
        }

    @property
    def is_valid(self) -> bool:
        return self.bundle is not None

    @property
    def problems(self) -> List[str]:
        """Every error and warning, as human-readable lines."""
        lines: List[str] = []
        for name, error in sorted(self.document_errors.items()):
            if isinstance(error, TurtleSyntaxError):
                lines.append(str(error))
            else:
                lines.append(f"{name}: {error}")
        lines.extend(str(w) for w in self.warnings)
        lines.extend(str(issue) for issue in self.validation.errors)
        return lines

    def raise_for_errors(self) -> Bundle:
        """
        Return the valid bundle or raise a summary of everything wrong.

        Raises:
            BundleLoadError: If the bundle is not valid.
        """
        if self.bundle is not None:
            return self.bundle
        problems = self.problems
        raise BundleLoadError(
            f"Bundle is invalid: {len(problems)} problem(s) found",
            problems=problems,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the report to dictionary format."""
        return {
            "is_valid": self.is_valid,
            "statement_count": self.statement_count,
            "document_errors": {
                name: error.to_dict() if hasattr(error, "to_dict") else {"message": str(error)}
                for name, error in sorted(self.document_errors.items())
            },
            "warnings": [w.to_dict() for w in self.warnings],
            "validation": self.validation.to_dict(),
        }
