"""Form annotation data models.

The entity graph is a tree: a FormAnnotation owns its pages, a Page owns its
fields, and a Field owns its segments and styling records. ``group_id`` and
``field_ids`` are plain string keys and are never resolved or checked here.

Attributes that may be omitted from the JSON form are ``Optional`` and default
to ``None`` so that "never set" and "set to zero" stay distinguishable in
memory, even though both are omitted when encoded.
"""

from dataclasses import dataclass, field, fields
from typing import List, Optional

from .enums import DataType, FieldType


def is_zero_value(value) -> bool:
    """Check if a value is None, empty, zero, False, or an all-zero record."""
    if value is None:
        return True
    if isinstance(value, (list, str)):
        return len(value) == 0
    if isinstance(value, (bool, int, float)):
        return not value
    is_zero = getattr(value, "is_zero", None)
    return bool(is_zero and is_zero())


class _Record:
    """Mixin giving dataclass records a zero-value check."""

    def is_zero(self) -> bool:
        """Check if every attribute holds its zero value."""
        return all(is_zero_value(getattr(self, f.name)) for f in fields(self))


@dataclass
class PageSize(_Record):
    """Physical page size."""
    width: float = 0.0
    height: float = 0.0
    unit: str = ""  # "pt", "in", "mm"


@dataclass
class FormMetadata(_Record):
    """
    Identity of the annotated form.

    ``page_count`` is declarative and may disagree with the number of pages
    actually stored on the annotation.
    """
    form_id: str = ""
    form_name: str = ""
    year: int = 0
    page_count: int = 0
    page_size: PageSize = field(default_factory=PageSize)


@dataclass
class Position(_Record):
    """Rectangle on a page."""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    unit: str = ""


@dataclass
class Segment(_Record):
    """One box of a field that is split into several boxes (e.g. SSN digits)."""
    position: Position = field(default_factory=Position)
    length: int = 0


@dataclass
class TextStyle(_Record):
    """Text rendering hints for a field."""
    font_family: Optional[str] = None
    font_size: Optional[int] = None
    font_weight: Optional[str] = None
    text_align: Optional[str] = None
    vertical_align: Optional[str] = None
    color: Optional[str] = None
    letter_spacing: Optional[float] = None


@dataclass
class CheckStyle(_Record):
    """Mark rendering hints for a checkbox field."""
    mark_type: str = ""
    mark_size: int = 0
    mark_weight: str = ""


@dataclass
class Formatting(_Record):
    """Display formatting for a field value."""
    decimal_places: Optional[int] = None
    show_commas: Optional[bool] = None
    negative_format: Optional[str] = None
    prefix: Optional[str] = None
    suffix: Optional[str] = None
    date_format: Optional[str] = None
    text_transform: Optional[str] = None


@dataclass
class Validation(_Record):
    """
    Constraints on a field value.

    These are descriptive only; nothing in this package evaluates them.
    """
    required: Optional[bool] = None
    pattern: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None


@dataclass
class Field(_Record):
    """
    A single data-capture location on a page.

    ``field_id`` is meant to be unique across the document but this is not
    enforced; lookups return the first match in document order.
    ``field_value`` is always present and its meaning (literal value or a key
    into external data) is left to the caller.
    """
    field_id: str = ""
    irs_line_reference: Optional[str] = None
    field_type: FieldType = FieldType.TEXT
    data_type: DataType = DataType.STRING
    position: Optional[Position] = None
    segments: List[Segment] = field(default_factory=list)
    style: Optional[TextStyle] = None
    check_style: Optional[CheckStyle] = None
    formatting: Optional[Formatting] = None
    validation: Optional[Validation] = None
    group_id: Optional[str] = None
    field_value: str = ""

    @property
    def is_segmented(self) -> bool:
        """Check if the field is split into segments."""
        return len(self.segments) > 0


@dataclass
class Page(_Record):
    """A page and the fields placed on it, in storage order."""
    page_number: int = 0
    fields: List[Field] = field(default_factory=list)


@dataclass
class FieldGroup(_Record):
    """Named logical grouping of fields (radio set, repeating rows, ...)."""
    group_id: str = ""
    group_type: str = ""  # "radio", "repeating", free-form
    field_ids: List[str] = field(default_factory=list)


@dataclass
class FormAnnotation(_Record):
    """
    Root of an annotated form.

    Plain in-memory structure without internal locking: concurrent mutation
    from several threads must be serialized by the caller.
    """
    form_metadata: FormMetadata = field(default_factory=FormMetadata)
    pages: List[Page] = field(default_factory=list)
    field_groups: List[FieldGroup] = field(default_factory=list)
