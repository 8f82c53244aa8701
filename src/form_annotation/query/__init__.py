"""Lookups over loaded form annotations."""

from .field_query import (
    FormQuery,
    get_all_fields,
    get_field_by_id,
    get_fields_by_group,
    get_fields_by_value,
    get_fields_on_page,
)

__all__ = [
    "FormQuery",
    "get_field_by_id",
    "get_fields_by_value",
    "get_fields_on_page",
    "get_fields_by_group",
    "get_all_fields",
]
