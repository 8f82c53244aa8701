"""Serialization and deserialization of form annotations.

Encoding is deterministic: keys follow declaration order and nested objects
are indented by two spaces. Optional attributes equal to their zero value are
left out. Decoding ignores unknown keys, treats missing keys and ``null`` as
the zero value, and turns zero-valued optional attributes into ``None``, so
``decode(encode(decode(text)))`` equals ``decode(text)``. The non-standard
``NaN`` and ``Infinity`` literals are rejected in both directions.
"""

import json
import logging
from enum import Enum
from typing import Any, List, Optional, Type, Union

from ..config.models import SerializationSettings
from ..models.enums import DataType, FieldType
from ..models.form import (
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
    is_zero_value,
)
from .exceptions import DecodeError, EncodeError

logger = logging.getLogger(__name__)

_JSON_TYPE_NAMES = {
    bool: "boolean",
    int: "number",
    float: "number",
    str: "string",
    list: "array",
    dict: "object",
}

_ZERO_VALUES = {str: "", int: 0, float: 0.0, bool: False}


def _path(parent: str, key: Union[str, int]) -> str:
    if isinstance(key, int):
        return f"{parent}[{key}]"
    return f"{parent}.{key}" if parent else key


def _type_name(value: Any) -> str:
    return _JSON_TYPE_NAMES.get(type(value), type(value).__name__)


def _matches(value: Any, kind: type) -> bool:
    if kind is bool:
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if kind is float:
        return isinstance(value, (int, float))
    return isinstance(value, kind)


def _reject_constant(name: str) -> Any:
    raise DecodeError(f"Invalid JSON: non-finite number '{name}' is not allowed")


def _tag(fld: Field, attr: str, enum_cls: Type[Enum]) -> str:
    """Return the tag of an enum attribute; plain tag strings are accepted."""
    value = getattr(fld, attr)
    try:
        return enum_cls(value).value
    except ValueError:
        raise EncodeError(f"Unrecognized {attr} '{value}'", field_id=fld.field_id) from None


def _put_optional(out: dict[str, Any], key: str, value: Any) -> None:
    if not is_zero_value(value):
        out[key] = value


class FormAnnotationSerializer:
    """
    Handles serialization and deserialization of FormAnnotation structures.

    Ensures round-trip consistency: deserialize(serialize(doc)) == doc for
    every doc produced by deserialize.
    """

    def __init__(self, settings: Optional[SerializationSettings] = None):
        self.settings = settings or SerializationSettings()

    def serialize(self, doc: FormAnnotation) -> str:
        """
        Serialize a FormAnnotation to a JSON string.

        Args:
            doc: The FormAnnotation to serialize.

        Returns:
            JSON string representation of the annotation.

        Raises:
            EncodeError: If a field carries an unrecognized type tag or a
                number is NaN or infinite.
        """
        data = FormAnnotationSerializer.annotation_to_dict(doc)
        try:
            return json.dumps(
                data,
                ensure_ascii=self.settings.ensure_ascii,
                indent=self.settings.indent,
                allow_nan=False,
            )
        except ValueError as e:
            raise EncodeError(f"Cannot encode non-finite number: {e}") from e

    def deserialize(self, json_str: str) -> FormAnnotation:
        """
        Deserialize a JSON string to a FormAnnotation.

        Args:
            json_str: JSON string to deserialize.

        Returns:
            FormAnnotation reconstructed from the JSON.

        Raises:
            DecodeError: If the JSON is malformed or a value has the wrong type.
        """
        try:
            data = json.loads(json_str, parse_constant=_reject_constant)
        except json.JSONDecodeError as e:
            raise DecodeError.from_json_error(e) from e

        doc = FormAnnotationSerializer.dict_to_annotation(data)
        logger.debug(
            f"Decoded form annotation '{doc.form_metadata.form_id}' "
            f"with {len(doc.pages)} pages"
        )
        return doc

    def encode(self, doc: FormAnnotation) -> bytes:
        """
        Encode a FormAnnotation to bytes in the configured encoding.

        Raises:
            EncodeError: As for serialize, or if the text cannot be
                represented in the configured encoding.
        """
        text = self.serialize(doc)
        try:
            return text.encode(self.settings.encoding)
        except UnicodeEncodeError as e:
            raise EncodeError(
                f"Text cannot be encoded as {self.settings.encoding}: {e.reason}"
            ) from e

    def decode(self, data: Union[bytes, str]) -> FormAnnotation:
        """Decode bytes (or text) to a FormAnnotation."""
        if isinstance(data, (bytes, bytearray)):
            try:
                data = bytes(data).decode(self.settings.encoding)
            except UnicodeDecodeError as e:
                raise DecodeError(
                    f"Input is not valid {self.settings.encoding}: {e.reason} at byte {e.start}",
                ) from e
        return self.deserialize(data)

    # =========================================================================
    # Encoding
    # =========================================================================

    @staticmethod
    def annotation_to_dict(doc: FormAnnotation) -> dict[str, Any]:
        """Convert FormAnnotation to dictionary."""
        out = {
            "form_metadata": FormAnnotationSerializer._metadata_to_dict(doc.form_metadata),
            "pages": [FormAnnotationSerializer._page_to_dict(p) for p in doc.pages],
        }
        _put_optional(out, "field_groups", [
            FormAnnotationSerializer._group_to_dict(g) for g in doc.field_groups
        ])
        return out

    @staticmethod
    def _metadata_to_dict(meta: FormMetadata) -> dict[str, Any]:
        return {
            "form_id": meta.form_id,
            "form_name": meta.form_name,
            "year": meta.year,
            "page_count": meta.page_count,
            "page_size": {
                "width": meta.page_size.width,
                "height": meta.page_size.height,
                "unit": meta.page_size.unit,
            },
        }

    @staticmethod
    def _page_to_dict(page: Page) -> dict[str, Any]:
        return {
            "page_number": page.page_number,
            "fields": [FormAnnotationSerializer._field_to_dict(f) for f in page.fields],
        }

    @staticmethod
    def _position_to_dict(position: Position) -> dict[str, Any]:
        return {
            "x": position.x,
            "y": position.y,
            "width": position.width,
            "height": position.height,
            "unit": position.unit,
        }

    @staticmethod
    def _field_to_dict(fld: Field) -> dict[str, Any]:
        """Convert Field to dictionary, omitting zero-valued optional keys."""
        out: dict[str, Any] = {"field_id": fld.field_id}
        _put_optional(out, "irs_line_reference", fld.irs_line_reference)
        out["field_type"] = _tag(fld, "field_type", FieldType)
        out["data_type"] = _tag(fld, "data_type", DataType)
        if not is_zero_value(fld.position):
            out["position"] = FormAnnotationSerializer._position_to_dict(fld.position)
        _put_optional(out, "segments", [
            {
                "position": FormAnnotationSerializer._position_to_dict(s.position),
                "length": s.length,
            }
            for s in fld.segments
        ])
        if not is_zero_value(fld.style):
            out["style"] = FormAnnotationSerializer._style_to_dict(fld.style)
        if not is_zero_value(fld.check_style):
            out["check_style"] = {
                "mark_type": fld.check_style.mark_type,
                "mark_size": fld.check_style.mark_size,
                "mark_weight": fld.check_style.mark_weight,
            }
        if not is_zero_value(fld.formatting):
            out["formatting"] = FormAnnotationSerializer._formatting_to_dict(fld.formatting)
        if not is_zero_value(fld.validation):
            out["validation"] = FormAnnotationSerializer._validation_to_dict(fld.validation)
        _put_optional(out, "group_id", fld.group_id)
        out["field_value"] = fld.field_value
        return out

    @staticmethod
    def _style_to_dict(style: TextStyle) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put_optional(out, "font_family", style.font_family)
        _put_optional(out, "font_size", style.font_size)
        _put_optional(out, "font_weight", style.font_weight)
        _put_optional(out, "text_align", style.text_align)
        _put_optional(out, "vertical_align", style.vertical_align)
        _put_optional(out, "color", style.color)
        _put_optional(out, "letter_spacing", style.letter_spacing)
        return out

    @staticmethod
    def _formatting_to_dict(formatting: Formatting) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put_optional(out, "decimal_places", formatting.decimal_places)
        _put_optional(out, "show_commas", formatting.show_commas)
        _put_optional(out, "negative_format", formatting.negative_format)
        _put_optional(out, "prefix", formatting.prefix)
        _put_optional(out, "suffix", formatting.suffix)
        _put_optional(out, "date_format", formatting.date_format)
        _put_optional(out, "text_transform", formatting.text_transform)
        return out

    @staticmethod
    def _validation_to_dict(validation: Validation) -> dict[str, Any]:
        out: dict[str, Any] = {}
        _put_optional(out, "required", validation.required)
        _put_optional(out, "pattern", validation.pattern)
        _put_optional(out, "min", validation.min)
        _put_optional(out, "max", validation.max)
        _put_optional(out, "min_length", validation.min_length)
        _put_optional(out, "max_length", validation.max_length)
        return out

    @staticmethod
    def _group_to_dict(group: FieldGroup) -> dict[str, Any]:
        return {
            "group_id": group.group_id,
            "group_type": group.group_type,
            "field_ids": list(group.field_ids),
        }

    # =========================================================================
    # Decoding
    # =========================================================================

    @staticmethod
    def dict_to_annotation(data: Any) -> FormAnnotation:
        """Convert dictionary to FormAnnotation."""
        if not isinstance(data, dict):
            raise DecodeError(
                f"Expected object for FormAnnotation, got {_type_name(data)}",
                path="$",
            )

        meta = FormAnnotationSerializer._object(data, "form_metadata", "")
        pages = FormAnnotationSerializer._list(data, "pages", "")
        groups = FormAnnotationSerializer._list(data, "field_groups", "")
        return FormAnnotation(
            form_metadata=FormAnnotationSerializer._dict_to_metadata(meta or {}, "form_metadata"),
            pages=[
                FormAnnotationSerializer._dict_to_page(
                    FormAnnotationSerializer._item(p, i, "pages"), _path("pages", i)
                )
                for i, p in enumerate(pages)
            ],
            field_groups=[
                FormAnnotationSerializer._dict_to_group(
                    FormAnnotationSerializer._item(g, i, "field_groups"),
                    _path("field_groups", i),
                )
                for i, g in enumerate(groups)
            ],
        )

    @staticmethod
    def _dict_to_metadata(data: dict[str, Any], path: str) -> FormMetadata:
        read = FormAnnotationSerializer._scalar
        size = FormAnnotationSerializer._object(data, "page_size", path) or {}
        size_path = _path(path, "page_size")
        return FormMetadata(
            form_id=read(data, "form_id", path, str),
            form_name=read(data, "form_name", path, str),
            year=read(data, "year", path, int),
            page_count=read(data, "page_count", path, int),
            page_size=PageSize(
                width=read(size, "width", size_path, float),
                height=read(size, "height", size_path, float),
                unit=read(size, "unit", size_path, str),
            ),
        )

    @staticmethod
    def _dict_to_page(data: dict[str, Any], path: str) -> Page:
        fields_path = _path(path, "fields")
        return Page(
            page_number=FormAnnotationSerializer._scalar(data, "page_number", path, int),
            fields=[
                FormAnnotationSerializer._dict_to_field(
                    FormAnnotationSerializer._item(f, i, fields_path), _path(fields_path, i)
                )
                for i, f in enumerate(FormAnnotationSerializer._list(data, "fields", path))
            ],
        )

    @staticmethod
    def _dict_to_position(data: dict[str, Any], path: str) -> Position:
        read = FormAnnotationSerializer._scalar
        return Position(
            x=read(data, "x", path, float),
            y=read(data, "y", path, float),
            width=read(data, "width", path, float),
            height=read(data, "height", path, float),
            unit=read(data, "unit", path, str),
        )

    @staticmethod
    def _dict_to_field(data: dict[str, Any], path: str) -> Field:
        """Convert dictionary to Field."""
        read = FormAnnotationSerializer._scalar
        segments_path = _path(path, "segments")
        segments = []
        for i, s in enumerate(FormAnnotationSerializer._list(data, "segments", path)):
            item = FormAnnotationSerializer._item(s, i, segments_path)
            item_path = _path(segments_path, i)
            position = FormAnnotationSerializer._object(item, "position", item_path) or {}
            segments.append(Segment(
                position=FormAnnotationSerializer._dict_to_position(
                    position, _path(item_path, "position")
                ),
                length=read(item, "length", item_path, int),
            ))

        return Field(
            field_id=read(data, "field_id", path, str),
            irs_line_reference=read(data, "irs_line_reference", path, str, optional=True),
            field_type=FormAnnotationSerializer._enum(data, "field_type", path, FieldType),
            data_type=FormAnnotationSerializer._enum(data, "data_type", path, DataType),
            position=FormAnnotationSerializer._record(
                data, "position", path, FormAnnotationSerializer._dict_to_position
            ),
            segments=segments,
            style=FormAnnotationSerializer._record(
                data, "style", path, FormAnnotationSerializer._dict_to_style
            ),
            check_style=FormAnnotationSerializer._record(
                data, "check_style", path, FormAnnotationSerializer._dict_to_check_style
            ),
            formatting=FormAnnotationSerializer._record(
                data, "formatting", path, FormAnnotationSerializer._dict_to_formatting
            ),
            validation=FormAnnotationSerializer._record(
                data, "validation", path, FormAnnotationSerializer._dict_to_validation
            ),
            group_id=read(data, "group_id", path, str, optional=True),
            field_value=read(data, "field_value", path, str),
        )

    @staticmethod
    def _dict_to_style(data: dict[str, Any], path: str) -> TextStyle:
        read = FormAnnotationSerializer._scalar
        return TextStyle(
            font_family=read(data, "font_family", path, str, optional=True),
            font_size=read(data, "font_size", path, int, optional=True),
            font_weight=read(data, "font_weight", path, str, optional=True),
            text_align=read(data, "text_align", path, str, optional=True),
            vertical_align=read(data, "vertical_align", path, str, optional=True),
            color=read(data, "color", path, str, optional=True),
            letter_spacing=read(data, "letter_spacing", path, float, optional=True),
        )

    @staticmethod
    def _dict_to_check_style(data: dict[str, Any], path: str) -> CheckStyle:
        read = FormAnnotationSerializer._scalar
        return CheckStyle(
            mark_type=read(data, "mark_type", path, str),
            mark_size=read(data, "mark_size", path, int),
            mark_weight=read(data, "mark_weight", path, str),
        )

    @staticmethod
    def _dict_to_formatting(data: dict[str, Any], path: str) -> Formatting:
        read = FormAnnotationSerializer._scalar
        return Formatting(
            decimal_places=read(data, "decimal_places", path, int, optional=True),
            show_commas=read(data, "show_commas", path, bool, optional=True),
            negative_format=read(data, "negative_format", path, str, optional=True),
            prefix=read(data, "prefix", path, str, optional=True),
            suffix=read(data, "suffix", path, str, optional=True),
            date_format=read(data, "date_format", path, str, optional=True),
            text_transform=read(data, "text_transform", path, str, optional=True),
        )

    @staticmethod
    def _dict_to_validation(data: dict[str, Any], path: str) -> Validation:
        read = FormAnnotationSerializer._scalar
        return Validation(
            required=read(data, "required", path, bool, optional=True),
            pattern=read(data, "pattern", path, str, optional=True),
            min=read(data, "min", path, float, optional=True),
            max=read(data, "max", path, float, optional=True),
            min_length=read(data, "min_length", path, int, optional=True),
            max_length=read(data, "max_length", path, int, optional=True),
        )

    @staticmethod
    def _dict_to_group(data: dict[str, Any], path: str) -> FieldGroup:
        read = FormAnnotationSerializer._scalar
        ids_path = _path(path, "field_ids")
        field_ids = []
        for i, value in enumerate(FormAnnotationSerializer._list(data, "field_ids", path)):
            if not isinstance(value, str):
                raise DecodeError(
                    f"Expected string in 'field_ids', got {_type_name(value)}",
                    path=_path(ids_path, i),
                )
            field_ids.append(value)
        return FieldGroup(
            group_id=read(data, "group_id", path, str),
            group_type=read(data, "group_type", path, str),
            field_ids=field_ids,
        )

    # =========================================================================
    # Typed readers
    # =========================================================================

    @staticmethod
    def _scalar(
        data: dict[str, Any],
        key: str,
        path: str,
        kind: type,
        optional: bool = False,
    ) -> Any:
        """
        Read a scalar value of the given type.

        Missing keys and null read as the zero value, or None when optional.
        Zero values of optional keys also read as None.
        """
        value = data.get(key)
        if value is None:
            return None if optional else _ZERO_VALUES[kind]
        if not _matches(value, kind):
            raise DecodeError(
                f"Expected {_JSON_TYPE_NAMES[kind]} for '{key}', got {_type_name(value)}",
                path=_path(path, key),
            )
        if kind is float:
            value = float(value)
        if optional and not value:
            return None
        return value

    @staticmethod
    def _enum(data: dict[str, Any], key: str, path: str, enum_cls: Type[Enum]) -> Any:
        value = data.get(key)
        if value is None:
            raise DecodeError(f"Missing required key '{key}'", path=_path(path, key))
        if not isinstance(value, str):
            raise DecodeError(
                f"Expected string for '{key}', got {_type_name(value)}",
                path=_path(path, key),
            )
        try:
            return enum_cls(value)
        except ValueError:
            allowed = [member.value for member in enum_cls]
            raise DecodeError(
                f"Unrecognized {key} '{value}'",
                path=_path(path, key),
                allowed_values=allowed,
            ) from None

    @staticmethod
    def _object(data: dict[str, Any], key: str, path: str) -> Optional[dict[str, Any]]:
        value = data.get(key)
        if value is None:
            return None
        if not isinstance(value, dict):
            raise DecodeError(
                f"Expected object for '{key}', got {_type_name(value)}",
                path=_path(path, key),
            )
        return value

    @staticmethod
    def _list(data: dict[str, Any], key: str, path: str) -> List[Any]:
        value = data.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise DecodeError(
                f"Expected array for '{key}', got {_type_name(value)}",
                path=_path(path, key),
            )
        return value

    @staticmethod
    def _item(value: Any, index: int, path: str) -> dict[str, Any]:
        if not isinstance(value, dict):
            raise DecodeError(
                f"Expected object, got {_type_name(value)}",
                path=_path(path, index),
            )
        return value

    @staticmethod
    def _record(data: dict[str, Any], key: str, path: str, convert) -> Any:
        """Read an optional sub-record; an all-zero record reads as None."""
        value = FormAnnotationSerializer._object(data, key, path)
        if value is None:
            return None
        record = convert(value, _path(path, key))
        return None if record.is_zero() else record


_default_serializer = FormAnnotationSerializer()


def encode(doc: FormAnnotation) -> bytes:
    """Convenience function to encode a FormAnnotation to UTF-8 bytes."""
    return _default_serializer.encode(doc)


def decode(data: Union[bytes, str]) -> FormAnnotation:
    """Convenience function to decode a FormAnnotation from bytes or text."""
    return _default_serializer.decode(data)


def to_text(doc: FormAnnotation) -> str:
    """Convenience function to serialize a FormAnnotation to a JSON string."""
    return _default_serializer.serialize(doc)


def from_text(json_str: str) -> FormAnnotation:
    """Convenience function to deserialize a FormAnnotation from a JSON string."""
    return _default_serializer.deserialize(json_str)
