"""
Validation Issue Models.

The bundle validator reports rule violations as ``ValidationIssue``
values collected in a ``ValidationResult``. Mapping warnings share the
same ``IssueCategory`` vocabulary so both can be filtered the same way.

Usage:
    from lv2bundle.common.validation import ValidationResult, IssueCategory

    result = ValidationResult(source_path="file:///bundle/")
    result.add_error(IssueCategory.NAME_CONFLICT, "Duplicate port index 0")
    result.add_warning(IssueCategory.NAME_TOO_LONG, "Short name exceeds 16 characters")
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Severity(Enum):
    """
    WARNING issues leave a bundle valid; ERROR issues make it invalid.
    """
    WARNING = "warning"
    ERROR = "error"


class IssueCategory(Enum):
    """Categories shared by validation issues and mapping warnings."""
    # Structure
    MISSING_REQUIRED = "missing_required"
    INVALID_REFERENCE = "invalid_reference"
    INVALID_STRUCTURE = "invalid_structure"

    # Names and symbols
    NAME_TOO_LONG = "name_too_long"
    INVALID_CHARACTER = "invalid_character"
    NAME_CONFLICT = "name_conflict"

    # Values and combinations
    RANGE_VIOLATION = "range_violation"
    MUTUAL_EXCLUSION = "mutual_exclusion"
    CONSTRAINT_VIOLATION = "constraint_violation"

    # Mapping limitations
    UNRECOGNIZED_ENTITY = "unrecognized_entity"
    UNASSOCIATED_STATEMENT = "unassociated_statement"
    UNINTERPRETABLE_VALUE = "uninterpretable_value"
    UNKNOWN_CLASS = "unknown_class"


@dataclass
class ValidationIssue:
    """
    One rule violation.

    Attributes:
        severity: ERROR or WARNING.
        category: Issue category for grouping.
        message: Human-readable description.
        location: Plugin IRI, port or entity the issue concerns.
        details: Extra detail such as the offending class IRIs.
        recommendation: How to fix the bundle.
    """
    severity: Severity
    category: IssueCategory
    message: str
    location: Optional[str] = None
    details: Optional[str] = None
    recommendation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, leaving out empty optional fields."""
        result = {
            "severity": self.severity.value,
            "category": self.category.value,
            "message": self.message,
        }
        for key in ("location", "details", "recommendation"):
            value = getattr(self, key)
            if value:
                result[key] = value
        return result

    def __str__(self) -> str:
        where = f" ({self.location})" if self.location else ""
        return f"[{self.category.value}] {self.message}{where}"


@dataclass
class ValidationResult:
    """
    Collected outcome of validating one bundle.

    Issues are accumulated exhaustively, in discovery order; the result
    is valid while it holds no ERROR issue.

    Example:
        >>> result = ValidationResult(source_path="file:///amp.lv2/")
        >>> result.add_error(IssueCategory.RANGE_VIOLATION, "default outside range")
        >>> result.is_valid
        False
    """
    source_path: Optional[str] = None
    is_valid: bool = True
    issues: List[ValidationIssue] = field(default_factory=list)
    statistics: Dict[str, Any] = field(default_factory=dict)

    def add_issue(
        self,
        severity: Severity,
        category: IssueCategory,
        message: str,
        location: Optional[str] = None,
        details: Optional[str] = None,
        recommendation: Optional[str] = None,
    ) -> None:
        self.issues.append(ValidationIssue(severity, category, message, location, details, recommendation))
        if severity is Severity.ERROR:
            self.is_valid = False

    def add_error(self, category: IssueCategory, message: str, **kwargs: Any) -> None:
        self.add_issue(Severity.ERROR, category, message, **kwargs)

    def add_warning(self, category: IssueCategory, message: str, **kwargs: Any) -> None:
        self.add_issue(Severity.WARNING, category, message, **kwargs)

    @property
    def errors(self) -> List[ValidationIssue]:
        return self.get_issues_by_severity(Severity.ERROR)

    @property
    def warnings(self) -> List[ValidationIssue]:
        return self.get_issues_by_severity(Severity.WARNING)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def total_issues(self) -> int:
        return len(self.issues)

    @property
    def issues_by_category(self) -> Dict[str, int]:
        """Issue counts keyed by category value."""
        return dict(Counter(issue.category.value for issue in self.issues))

    def get_issues_by_severity(self, severity: Severity) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity is severity]

    def get_issues_by_category(self, category: IssueCategory) -> List[ValidationIssue]:
        return [i for i in self.issues if i.category is category]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for reports."""
        return {
            "source_path": self.source_path,
            "is_valid": self.is_valid,
            "summary": {
                "total_issues": self.total_issues,
                "errors": self.error_count,
                "warnings": self.warning_count,
            },
            "issues_by_category": self.issues_by_category,
            "issues": [i.to_dict() for i in self.issues],
            "statistics": self.statistics,
        }
