"""
Form Annotation

Schema, JSON serialization and lookups for annotated paper and electronic
forms: pages, positioned fields, styling and validation metadata, and field
groups.
"""

__version__ = "0.1.0"

# Export main components
from .models.enums import DataType, FieldType
from .models.form import (
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
from .serialization import (
    DecodeError,
    EncodeError,
    FormAnnotationSerializer,
    decode,
    encode,
    from_text,
    load_from_file,
    save_to_file,
    to_text,
)
from .query import (
    FormQuery,
    get_all_fields,
    get_field_by_id,
    get_fields_by_group,
    get_fields_by_value,
    get_fields_on_page,
)
from .integrity import IntegrityChecker, check_integrity
from .config import (
    ConfigurationError,
    ConfigurationManager,
    SerializationSettings,
    ValidationResult,
)

__all__ = [
    "DataType",
    "FieldType",
    "FormAnnotation",
    "FormMetadata",
    "PageSize",
    "Page",
    "Field",
    "FieldGroup",
    "Position",
    "Segment",
    "TextStyle",
    "CheckStyle",
    "Formatting",
    "Validation",
    "FormAnnotationSerializer",
    "DecodeError",
    "EncodeError",
    "encode",
    "decode",
    "to_text",
    "from_text",
    "load_from_file",
    "save_to_file",
    "FormQuery",
    "get_field_by_id",
    "get_fields_by_value",
    "get_fields_on_page",
    "get_fields_by_group",
    "get_all_fields",
    "IntegrityChecker",
    "check_integrity",
    "ConfigurationManager",
    "ConfigurationError",
    "SerializationSettings",
    "ValidationResult",
]
