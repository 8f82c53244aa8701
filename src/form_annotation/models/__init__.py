"""Data models and enums for form annotations."""

from .enums import DataType, FieldType
from .form import (
    CheckStyle,
    Field,
    FieldGroup,
    FormAnnotation,
    FormMetadata,
    Formatting,
    Page,
    PageSize,
    Position,
    Segment,
    TextStyle,
    Validation,
)

__all__ = [
    # Enums
    "DataType",
    "FieldType",
    # Document models
    "FormAnnotation",
    "FormMetadata",
    "PageSize",
    "Page",
    "Field",
    "FieldGroup",
    # Field detail models
    "Position",
    "Segment",
    "TextStyle",
    "CheckStyle",
    "Formatting",
    "Validation",
]
