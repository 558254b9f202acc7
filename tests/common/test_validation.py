"""
Tests for the shared validation result model.

Run with: python -m pytest tests/common/test_validation.py -v
"""

import pytest

from lv2bundle.common.validation import (
    IssueCategory,
    Severity,
    ValidationIssue,
    ValidationResult,
)


@pytest.fixture
def result():
    result = ValidationResult(source_path="file:///amp.lv2/")
    result.add_error(
        IssueCategory.NAME_CONFLICT,
        "Port index 0 used by 2 ports",
        location="http://example.org/plugins/amp",
    )
    result.add_warning(IssueCategory.NAME_TOO_LONG, "Short name too long")
    result.add_warning(IssueCategory.NAME_TOO_LONG, "Another short name too long")
    return result


@pytest.mark.unit
class TestValidationResult:
    """Test issue accumulation and reporting."""

    def test_new_result_is_valid(self):
        result = ValidationResult()
        assert result.is_valid
        assert result.total_issues == 0

    def test_warning_keeps_result_valid(self):
        result = ValidationResult()
        result.add_warning(IssueCategory.NAME_TOO_LONG, "Short name too long")
        assert result.is_valid
        assert result.warning_count == 1

    def test_error_invalidates(self, result):
        assert not result.is_valid
        assert result.error_count == 1
        assert result.total_issues == 3

    def test_issue_lookups(self, result):
        assert [i.message for i in result.errors] == ["Port index 0 used by 2 ports"]
        assert len(result.get_issues_by_category(IssueCategory.NAME_TOO_LONG)) == 2
        assert result.issues_by_category == {"name_conflict": 1, "name_too_long": 2}

    def test_to_dict_summary(self, result):
        data = result.to_dict()
        assert data["source_path"] == "file:///amp.lv2/"
        assert data["summary"] == {"total_issues": 3, "errors": 1, "warnings": 2}
        assert data["issues"][0]["location"] == "http://example.org/plugins/amp"


@pytest.mark.unit
class TestValidationIssue:
    """Test single issue rendering."""

    def test_optional_fields_omitted(self):
        issue = ValidationIssue(Severity.WARNING, IssueCategory.UNKNOWN_CLASS, "Unknown class")
        assert issue.to_dict() == {
            "severity": "warning",
            "category": "unknown_class",
            "message": "Unknown class",
        }

    def test_str_is_one_line(self):
        issue = ValidationIssue(
            Severity.ERROR,
            IssueCategory.RANGE_VIOLATION,
            "Default outside range",
            location="port 'gain'",
        )
        assert str(issue) == "[range_violation] Default outside range (port 'gain')"
