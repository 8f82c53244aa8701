"""Read-only lookups over a loaded form annotation.

Every lookup is a linear scan in document order (pages in stored order, then
fields in stored order); no index is kept between calls. Lookups never raise:
a miss yields ``None`` or an empty list.

Aliasing: ``get_field_by_id``, ``get_page``, ``get_group``, ``resolve_group``
and ``get_fields_on_page`` hand back the objects stored in the annotation, so
mutating the result mutates the annotation. ``get_fields_by_value``,
``get_fields_by_group`` and ``get_all_fields`` return deep copies of the
matching fields; changing them leaves the annotation untouched. There is no
locking; callers that mutate an annotation from one thread while another
thread queries it must serialize access themselves.
"""

import copy
from typing import Iterator, List, Optional

from ..models.form import Field, FieldGroup, FormAnnotation, Page


class FormQuery:
    """
    Lookups over a single FormAnnotation.

    The query holds a reference to the annotation, not a snapshot: changes
    made to the annotation are visible to later calls.
    """

    def __init__(self, annotation: FormAnnotation):
        self.annotation = annotation

    def iter_fields(self) -> Iterator[Field]:
        """Yield every field in document order."""
        for page in self.annotation.pages:
            yield from page.fields

    def get_field_by_id(self, field_id: str) -> Optional[Field]:
        """
        Get the first field whose ``field_id`` matches.

        Returns the stored Field itself; None if no field matches.
        """
        for fld in self.iter_fields():
            if fld.field_id == field_id:
                return fld
        return None

    def get_fields_by_value(self, field_value: str) -> List[Field]:
        """Get copies of all fields whose ``field_value`` equals the given value."""
        return [copy.deepcopy(f) for f in self.iter_fields() if f.field_value == field_value]

    def get_page(self, page_number: int) -> Optional[Page]:
        """Get the first page with the given page number."""
        for page in self.annotation.pages:
            if page.page_number == page_number:
                return page
        return None

    def get_fields_on_page(self, page_number: int) -> List[Field]:
        """
        Get the field list of the first page with the given page number.

        The page's own list is returned, so appending to it adds a field to
        the page. A new empty list is returned when no page matches.
        """
        page = self.get_page(page_number)
        if page is None:
            return []
        return page.fields

    def get_fields_by_group(self, group_id: str) -> List[Field]:
        """
        Get copies of all fields whose ``group_id`` equals the given group id.

        An unset ``group_id`` compares as the empty string, so querying ""
        returns the ungrouped fields.
        """
        return [copy.deepcopy(f) for f in self.iter_fields() if (f.group_id or "") == group_id]

    def get_all_fields(self) -> List[Field]:
        """Get copies of every field across every page, in document order."""
        return copy.deepcopy(list(self.iter_fields()))

    def get_group(self, group_id: str) -> Optional[FieldGroup]:
        """Get the first field group with the given id."""
        for group in self.annotation.field_groups:
            if group.group_id == group_id:
                return group
        return None

    def resolve_group(self, group_id: str) -> List[Field]:
        """
        Resolve a group's ``field_ids`` to fields.

        Fields come back in ``field_ids`` order using first-match lookup per
        id. Ids that match no field are skipped. The stored Field objects
        are returned, not copies.
        """
        group = self.get_group(group_id)
        if group is None:
            return []
        resolved = []
        for field_id in group.field_ids:
            fld = self.get_field_by_id(field_id)
            if fld is not None:
                resolved.append(fld)
        return resolved


def get_field_by_id(annotation: FormAnnotation, field_id: str) -> Optional[Field]:
    """Convenience function for FormQuery.get_field_by_id."""
    return FormQuery(annotation).get_field_by_id(field_id)


def get_fields_by_value(annotation: FormAnnotation, field_value: str) -> List[Field]:
    """Convenience function for FormQuery.get_fields_by_value."""
    return FormQuery(annotation).get_fields_by_value(field_value)


def get_fields_on_page(annotation: FormAnnotation, page_number: int) -> List[Field]:
    """Convenience function for FormQuery.get_fields_on_page."""
    return FormQuery(annotation).get_fields_on_page(page_number)


def get_fields_by_group(annotation: FormAnnotation, group_id: str) -> List[Field]:
    """Convenience function for FormQuery.get_fields_by_group."""
    return FormQuery(annotation).get_fields_by_group(group_id)


def get_all_fields(annotation: FormAnnotation) -> List[Field]:
    """Convenience function for FormQuery.get_all_fields."""
    return FormQuery(annotation).get_all_fields()
