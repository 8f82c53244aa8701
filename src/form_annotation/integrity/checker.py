"""Integrity report for form annotations.

Decoding, encoding and lookups accept annotations with duplicate ids or
dangling references. This module only reports such issues as warnings; it
never rejects or modifies an annotation.
"""

from collections import Counter
from typing import Iterable, List

from ..config.models import ValidationResult
from ..models.form import FormAnnotation
from ..query.field_query import FormQuery


def _duplicates(values: Iterable) -> List:
    counts = Counter(values)
    return [value for value, count in counts.items() if count > 1]


class IntegrityChecker:
    """Collects consistency warnings for a FormAnnotation."""

    def __init__(self, annotation: FormAnnotation):
        self.annotation = annotation
        self._query = FormQuery(annotation)

    def check(self) -> ValidationResult:
        """
        Run every check.

        Returns:
            ValidationResult that is always valid; issues are warnings.
        """
        result = ValidationResult()
        self._check_page_count(result)
        self._check_duplicate_pages(result)
        self._check_duplicate_fields(result)
        self._check_duplicate_groups(result)
        self._check_group_references(result)
        return result

    def _check_page_count(self, result: ValidationResult) -> None:
        declared = self.annotation.form_metadata.page_count
        actual = len(self.annotation.pages)
        if declared != actual:
            result.add_warning(
                f"Declared page_count {declared} does not match {actual} stored pages"
            )

    def _check_duplicate_pages(self, result: ValidationResult) -> None:
        numbers = [p.page_number for p in self.annotation.pages]
        for number in _duplicates(numbers):
            result.add_warning(f"Duplicate page_number: {number}")

    def _check_duplicate_fields(self, result: ValidationResult) -> None:
        ids = [f.field_id for f in self._query.iter_fields()]
        for field_id in _duplicates(ids):
            result.add_warning(f"Duplicate field_id: '{field_id}'")

    def _check_duplicate_groups(self, result: ValidationResult) -> None:
        ids = [g.group_id for g in self.annotation.field_groups]
        for group_id in _duplicates(ids):
            result.add_warning(f"Duplicate group_id: '{group_id}'")

    def _check_group_references(self, result: ValidationResult) -> None:
        group_ids = {g.group_id for g in self.annotation.field_groups}
        field_ids = {f.field_id for f in self._query.iter_fields()}

        for fld in self._query.iter_fields():
            if fld.group_id and fld.group_id not in group_ids:
                result.add_warning(
                    f"Field '{fld.field_id}' references unknown group '{fld.group_id}'"
                )

        for group in self.annotation.field_groups:
            for field_id in group.field_ids:
                if field_id not in field_ids:
                    result.add_warning(
                        f"Group '{group.group_id}' references unknown field '{field_id}'"
                    )


def check_integrity(annotation: FormAnnotation) -> ValidationResult:
    """Convenience function to run IntegrityChecker on an annotation."""
    return IntegrityChecker(annotation).check()
