"""Unit tests for FormAnnotationSerializer."""

import json

import pytest

from form_annotation.config import SerializationSettings
from form_annotation.models import (
    CheckStyle,
    DataType,
    Field,
    FieldGroup,
    FieldType,
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
from form_annotation.serialization import (
    DecodeError,
    EncodeError,
    FormAnnotationSerializer,
    decode,
    encode,
    from_text,
    to_text,
)


SCENARIO_JSON = (
    '{"form_metadata":{"form_id":"1040","form_name":"US Individual","year":2023,'
    '"page_count":2,"page_size":{"width":612,"height":792,"unit":"pt"}},'
    '"pages":[{"page_number":1,"fields":[{"field_id":"f1","field_type":"text",'
    '"data_type":"string","field_value":"John Doe"}]}]}'
)


@pytest.fixture
def full_annotation():
    """Annotation exercising every attribute."""
    return FormAnnotation(
        form_metadata=FormMetadata(
            form_id="1040",
            form_name="U.S. Individual Income Tax Return",
            year=2023,
            page_count=2,
            page_size=PageSize(width=612.0, height=792.0, unit="pt"),
        ),
        pages=[
            Page(page_number=1, fields=[
                Field(
                    field_id="ssn",
                    irs_line_reference="SSN",
                    field_type=FieldType.SEGMENTED,
                    data_type=DataType.STRING,
                    position=Position(x=450.0, y=90.0, width=110.0, height=14.0, unit="pt"),
                    segments=[
                        Segment(position=Position(x=450.0, y=90.0, width=30.0, height=14.0, unit="pt"), length=3),
                        Segment(position=Position(x=485.0, y=90.0, width=20.0, height=14.0, unit="pt"), length=2),
                        Segment(position=Position(x=510.0, y=90.0, width=40.0, height=14.0, unit="pt"), length=4),
                    ],
                    style=TextStyle(font_family="Courier", font_size=10, letter_spacing=1.5),
                    validation=Validation(required=True, pattern=r"^\d{9}$", min_length=9, max_length=9),
                    field_value="taxpayer.ssn",
                ),
                Field(
                    field_id="wages",
                    irs_line_reference="1a",
                    field_type=FieldType.CURRENCY,
                    data_type=DataType.DECIMAL,
                    position=Position(x=500.0, y=400.0, width=72.0, height=12.0, unit="pt"),
                    formatting=Formatting(decimal_places=2, show_commas=True, negative_format="parentheses", prefix="$"),
                    validation=Validation(max=99999999.99),
                    field_value="income.wages",
                ),
            ]),
            Page(page_number=2, fields=[
                Field(
                    field_id="status_single",
                    field_type=FieldType.CHECKBOX,
                    data_type=DataType.BOOLEAN,
                    check_style=CheckStyle(mark_type="x", mark_size=8, mark_weight="bold"),
                    group_id="filing_status",
                    field_value="",
                ),
            ]),
        ],
        field_groups=[
            FieldGroup(group_id="filing_status", group_type="radio", field_ids=["status_single", "status_mfj"]),
        ],
    )


class TestEncoding:
    """Tests for encoding annotations to JSON."""

    def test_two_space_indent(self, full_annotation):
        text = to_text(full_annotation)

        assert text.startswith('{\n  "form_metadata": {\n    "form_id": "1040"')

    def test_key_order_follows_declaration(self, full_annotation):
        data = json.loads(to_text(full_annotation))
        field = data["pages"][0]["fields"][0]

        assert list(data) == ["form_metadata", "pages", "field_groups"]
        assert list(data["form_metadata"]) == ["form_id", "form_name", "year", "page_count", "page_size"]
        assert list(field) == [
            "field_id", "irs_line_reference", "field_type", "data_type", "position",
            "segments", "style", "validation", "field_value",
        ]
        assert list(field["position"]) == ["x", "y", "width", "height", "unit"]
        assert list(field["segments"][0]) == ["position", "length"]

    def test_enums_emitted_as_tags(self, full_annotation):
        data = json.loads(to_text(full_annotation))
        field = data["pages"][0]["fields"][1]

        assert field["field_type"] == "currency"
        assert field["data_type"] == "decimal"

    def test_absent_style_omitted(self):
        doc = FormAnnotation(pages=[Page(page_number=1, fields=[Field(field_id="a")])])
        field = json.loads(to_text(doc))["pages"][0]["fields"][0]

        assert "style" not in field
        assert "position" not in field
        assert "segments" not in field
        assert "group_id" not in field
        assert "irs_line_reference" not in field

    def test_zero_valued_style_omitted(self):
        doc = FormAnnotation(pages=[Page(page_number=1, fields=[
            Field(field_id="a", style=TextStyle(font_size=0)),
        ])])
        field = json.loads(to_text(doc))["pages"][0]["fields"][0]

        assert "style" not in field

    def test_zero_valued_optional_scalars_omitted(self):
        doc = FormAnnotation(pages=[Page(page_number=1, fields=[
            Field(
                field_id="a",
                style=TextStyle(font_family="Helvetica", font_size=0, color=""),
                formatting=Formatting(show_commas=False, prefix="$"),
            ),
        ])])
        field = json.loads(to_text(doc))["pages"][0]["fields"][0]

        assert field["style"] == {"font_family": "Helvetica"}
        assert field["formatting"] == {"prefix": "$"}

    def test_field_value_always_emitted(self):
        doc = FormAnnotation(pages=[Page(page_number=1, fields=[Field(field_id="a")])])
        field = json.loads(to_text(doc))["pages"][0]["fields"][0]

        assert field["field_value"] == ""

    def test_empty_groups_omitted_but_pages_kept(self):
        data = json.loads(to_text(FormAnnotation()))

        assert "field_groups" not in data
        assert data["pages"] == []
        assert data["form_metadata"]["page_size"] == {"width": 0.0, "height": 0.0, "unit": ""}

    def test_check_style_emits_all_keys(self, full_annotation):
        data = json.loads(to_text(full_annotation))
        field = data["pages"][1]["fields"][0]

        assert field["check_style"] == {"mark_type": "x", "mark_size": 8, "mark_weight": "bold"}

    def test_tag_strings_accepted(self):
        doc = FormAnnotation(pages=[Page(page_number=1, fields=[
            Field(field_id="a", field_type="date", data_type="date"),
        ])])
        field = json.loads(to_text(doc))["pages"][0]["fields"][0]

        assert field["field_type"] == "date"
        assert field["data_type"] == "date"

    def test_encode_returns_utf8_bytes(self):
        doc = FormAnnotation(form_metadata=FormMetadata(form_name="Déclaration"))
        data = encode(doc)

        assert isinstance(data, bytes)
        assert "Déclaration".encode("utf-8") in data

    def test_custom_indent(self, full_annotation):
        serializer = FormAnnotationSerializer(SerializationSettings(indent=4))

        assert serializer.serialize(full_annotation).startswith('{\n    "form_metadata"')

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_number_rejected(self, value):
        doc = FormAnnotation(pages=[Page(page_number=1, fields=[
            Field(field_id="a", validation=Validation(max=value)),
        ])])

        with pytest.raises(EncodeError):
            to_text(doc)

    def test_unrecognized_tag_string_rejected(self):
        doc = FormAnnotation(pages=[Page(page_number=1, fields=[
            Field(field_id="a", field_type="barcode"),
        ])])

        with pytest.raises(EncodeError) as exc_info:
            to_text(doc)

        assert exc_info.value.field_id == "a"
        assert "field_type" in str(exc_info.value)

    def test_unencodable_text_rejected(self):
        serializer = FormAnnotationSerializer(SerializationSettings(encoding="ascii"))
        doc = FormAnnotation(form_metadata=FormMetadata(form_name="Déclaration"))

        with pytest.raises(EncodeError):
            serializer.encode(doc)

    def test_ascii_escaping_with_ascii_encoding(self):
        serializer = FormAnnotationSerializer(
            SerializationSettings(encoding="ascii", ensure_ascii=True)
        )
        doc = FormAnnotation(form_metadata=FormMetadata(form_name="Déclaration"))

        assert b"D\\u00e9claration" in serializer.encode(doc)


class TestDecoding:
    """Tests for decoding JSON to annotations."""

    def test_scenario(self):
        doc = from_text(SCENARIO_JSON)

        assert doc.form_metadata.form_id == "1040"
        assert doc.form_metadata.form_name == "US Individual"
        assert doc.form_metadata.year == 2023
        assert doc.form_metadata.page_size == PageSize(width=612.0, height=792.0, unit="pt")
        assert len(doc.pages) == 1
        assert len(doc.pages[0].fields) == 1
        assert doc.pages[0].fields[0].field_value == "John Doe"
        assert doc.pages[0].fields[0].field_type == FieldType.TEXT

    def test_decode_accepts_bytes(self):
        doc = decode(SCENARIO_JSON.encode("utf-8"))

        assert doc.form_metadata.form_id == "1040"

    def test_unknown_keys_ignored(self):
        doc = from_text(
            '{"form_metadata": {"form_id": "W-2", "revision": "B"}, "pages": [], "extra": 1}'
        )

        assert doc.form_metadata.form_id == "W-2"

    def test_missing_keys_default_to_zero(self):
        doc = from_text('{"pages": [{"fields": [{"field_type": "text", "data_type": "string"}]}]}')
        field = doc.pages[0].fields[0]

        assert doc.form_metadata == FormMetadata()
        assert doc.pages[0].page_number == 0
        assert field.field_id == ""
        assert field.field_value == ""
        assert field.style is None
        assert field.segments == []
        assert doc.field_groups == []

    def test_null_treated_as_absent(self):
        doc = from_text(
            '{"form_metadata": null, "pages": [{"page_number": 1, "fields": null}], "field_groups": null}'
        )

        assert doc.pages[0].fields == []
        assert doc.field_groups == []

    def test_zero_valued_optionals_decode_to_none(self):
        doc = from_text(
            '{"pages": [{"page_number": 1, "fields": [{"field_id": "a", "field_type": "text",'
            ' "data_type": "string", "group_id": "", "style": {"font_size": 0},'
            ' "formatting": {"prefix": "$", "show_commas": false},'
            ' "position": {"x": 0, "y": 0, "width": 0, "height": 0, "unit": ""}}]}]}'
        )
        field = doc.pages[0].fields[0]

        assert field.group_id is None
        assert field.style is None
        assert field.position is None
        assert field.formatting == Formatting(prefix="$")

    def test_integer_accepted_for_float(self):
        doc = from_text(
            '{"pages": [{"page_number": 1, "fields": [{"field_id": "a", "field_type": "text",'
            ' "data_type": "string", "position": {"x": 10, "y": 20.5, "width": 30, "height": 12, "unit": "pt"}}]}]}'
        )
        position = doc.pages[0].fields[0].position

        assert isinstance(position.x, float)
        assert position.x == 10.0
        assert position.y == 20.5


class TestDecodeErrors:
    """Tests for decode failures."""

    def test_malformed_json(self):
        with pytest.raises(DecodeError) as exc_info:
            from_text('{"form_metadata": ')

        assert exc_info.value.message.startswith("Invalid JSON")
        assert exc_info.value.location.startswith("line 1 column")

    def test_top_level_must_be_object(self):
        with pytest.raises(DecodeError) as exc_info:
            from_text("[]")

        assert exc_info.value.location == "$"

    def test_string_where_number_expected(self):
        with pytest.raises(DecodeError) as exc_info:
            from_text('{"form_metadata": {"year": "2023"}}')

        assert exc_info.value.location == "form_metadata.year"
        assert "Expected number" in exc_info.value.message

    def test_nested_location(self):
        text = (
            '{"pages": [{"page_number": 1, "fields": ['
            '{"field_id": "a", "field_type": "text", "data_type": "string"},'
            '{"field_id": "b", "field_type": "text", "data_type": "string", "position": {"x": "left"}}'
            ']}]}'
        )

        with pytest.raises(DecodeError) as exc_info:
            from_text(text)

        assert exc_info.value.location == "pages[0].fields[1].position.x"
        assert exc_info.value.path == "pages[0].fields[1].position.x"
        assert exc_info.value.line is None

    def test_float_for_integer_rejected(self):
        with pytest.raises(DecodeError) as exc_info:
            from_text('{"pages": [{"page_number": 1.5}]}')

        assert exc_info.value.location == "pages[0].page_number"

    def test_boolean_for_integer_rejected(self):
        with pytest.raises(DecodeError):
            from_text('{"form_metadata": {"page_count": true}}')

    def test_wrong_container_type(self):
        with pytest.raises(DecodeError) as exc_info:
            from_text('{"pages": {"page_number": 1}}')

        assert exc_info.value.location == "pages"

    def test_non_string_field_id_in_group(self):
        with pytest.raises(DecodeError) as exc_info:
            from_text('{"field_groups": [{"group_id": "g", "group_type": "radio", "field_ids": ["a", 2]}]}')

        assert exc_info.value.location == "field_groups[0].field_ids[1]"

    def test_unrecognized_field_type(self):
        with pytest.raises(DecodeError) as exc_info:
            from_text(
                '{"pages": [{"page_number": 1, "fields": '
                '[{"field_id": "a", "field_type": "barcode", "data_type": "string"}]}]}'
            )

        assert exc_info.value.location == "pages[0].fields[0].field_type"
        assert "text" in exc_info.value.allowed_values

    def test_missing_data_type(self):
        with pytest.raises(DecodeError) as exc_info:
            from_text('{"pages": [{"page_number": 1, "fields": [{"field_id": "a", "field_type": "text"}]}]}')

        assert exc_info.value.location == "pages[0].fields[0].data_type"

    def test_invalid_utf8_bytes(self):
        with pytest.raises(DecodeError):
            decode(b'{"form_metadata": {"form_name": "\xff"}}')

    def test_error_message_includes_location(self):
        with pytest.raises(DecodeError) as exc_info:
            from_text('{"form_metadata": {"year": "x"}}')

        assert str(exc_info.value) == (
            "Expected number for 'year', got string | Location: form_metadata.year"
        )

    def test_syntax_error_line_and_column(self):
        with pytest.raises(DecodeError) as exc_info:
            from_text('{\n  "pages": [,]\n}')

        assert exc_info.value.path is None
        assert exc_info.value.line == 2
        assert exc_info.value.location == f"line 2 column {exc_info.value.column}"

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_constants_rejected(self, constant):
        text = (
            '{"pages": [{"page_number": 1, "fields": [{"field_id": "a", "field_type": "numeric",'
            ' "data_type": "decimal", "validation": {"min": ' + constant + '}}]}]}'
        )

        with pytest.raises(DecodeError) as exc_info:
            from_text(text)

        assert "non-finite" in exc_info.value.message


class TestRoundTrip:
    """Tests for decode/encode consistency."""

    def test_full_annotation_round_trip(self, full_annotation):
        assert from_text(to_text(full_annotation)) == full_annotation

    def test_decode_encode_decode_idempotent(self):
        text = (
            '{"form_metadata": {"form_id": "1040", "year": 2023},'
            ' "pages": [{"page_number": 1, "fields": [{"field_id": "a", "field_type": "numeric",'
            ' "data_type": "integer", "style": {"font_size": 0, "color": "#000000"},'
            ' "validation": {"required": false, "min": 0, "max": 10},'
            ' "check_style": {"mark_type": "check", "mark_size": 0, "mark_weight": ""},'
            ' "field_value": ""}]}],'
            ' "field_groups": [{"group_id": "g", "group_type": "repeating", "field_ids": []}]}'
        )
        first = from_text(text)
        second = from_text(to_text(first))

        assert second == first
        assert to_text(second) == to_text(first)

    def test_input_formatting_not_preserved(self):
        text = '{"pages": [], "form_metadata": {"form_id": "x"}}'

        assert to_text(from_text(text)) != text
