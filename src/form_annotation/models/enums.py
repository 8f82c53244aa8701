"""Enumerations for the form annotation schema."""

from enum import Enum


class FieldType(Enum):
    """How a field is presented on the page."""
    TEXT = "text"
    CURRENCY = "currency"
    NUMERIC = "numeric"
    CHECKBOX = "checkbox"
    DATE = "date"
    SEGMENTED = "segmented"
    SIGNATURE = "signature"


class DataType(Enum):
    """Type of the value a field captures."""
    STRING = "string"
    DECIMAL = "decimal"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    DATE = "date"
