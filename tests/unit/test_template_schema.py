"""Unit tests for template document schemas."""

import pytest
from pydantic import ValidationError

from casework.application.templates import (
    CabinetTemplateSchema,
    TemplateDocument,
    TemplateError,
    describe_validation_error,
    parse_template_document,
)
from casework.domain import BackType, TopStyle


class TestCabinetTemplateSchema:
    """Tests for a single cabinet entry."""

    def test_valid_entry(self, base_cabinet_entry: dict) -> None:
        entry = CabinetTemplateSchema.model_validate(base_cabinet_entry)

        params = entry.to_parameters()
        assert entry.id == "base-600"
        assert params.width == 600
        assert params.options.back_type is BackType.GROOVE
        assert params.options.top_style is TopStyle.BETWEEN_SIDES

    def test_numeric_id_becomes_string(self, base_cabinet_entry: dict) -> None:
        base_cabinet_entry["id"] = 42
        assert CabinetTemplateSchema.model_validate(base_cabinet_entry).id == "42"

    def test_blank_id_means_none(self, base_cabinet_entry: dict) -> None:
        base_cabinet_entry["id"] = "   "
        assert CabinetTemplateSchema.model_validate(base_cabinet_entry).id is None

    def test_missing_options_use_defaults(self, base_cabinet_entry: dict) -> None:
        del base_cabinet_entry["options"]
        options = CabinetTemplateSchema.model_validate(base_cabinet_entry).to_parameters().options

        assert options.back_type is BackType.SCREWED
        assert options.top_style is TopStyle.BETWEEN_SIDES

    def test_non_mapping_options_use_defaults(self, base_cabinet_entry: dict) -> None:
        base_cabinet_entry["options"] = "groove"
        options = CabinetTemplateSchema.model_validate(base_cabinet_entry).to_parameters().options
        assert options.back_type is BackType.SCREWED

    def test_unknown_option_values_fall_back(self, base_cabinet_entry: dict) -> None:
        base_cabinet_entry["options"] = {"backType": "stapled", "legs": 4}
        options = CabinetTemplateSchema.model_validate(base_cabinet_entry).to_parameters().options
        assert options.back_type is BackType.SCREWED

    @pytest.mark.parametrize("value", [1, True, 2.5, ["groove"], {"kind": "groove"}])
    def test_non_string_option_values_fall_back(self, base_cabinet_entry: dict, value) -> None:
        base_cabinet_entry["options"] = {"backType": value, "topStyle": value}

        options = CabinetTemplateSchema.model_validate(base_cabinet_entry).to_parameters().options

        assert options.back_type is BackType.SCREWED
        assert options.top_style is TopStyle.BETWEEN_SIDES

    @pytest.mark.parametrize("field", ["width", "height", "depth", "thickness"])
    def test_non_positive_dimension_rejected(self, base_cabinet_entry: dict, field: str) -> None:
        base_cabinet_entry[field] = 0

        with pytest.raises(ValidationError) as exc_info:
            CabinetTemplateSchema.model_validate(base_cabinet_entry)
        assert any(line.startswith(field) for line in describe_validation_error(exc_info.value))

    def test_missing_dimension_rejected(self, base_cabinet_entry: dict) -> None:
        del base_cabinet_entry["depth"]
        with pytest.raises(ValidationError):
            CabinetTemplateSchema.model_validate(base_cabinet_entry)

    def test_thick_boards_rejected(self, base_cabinet_entry: dict) -> None:
        base_cabinet_entry["thickness"] = 300

        with pytest.raises(ValidationError, match="no room between the sides"):
            CabinetTemplateSchema.model_validate(base_cabinet_entry)

    def test_empty_name_rejected(self, base_cabinet_entry: dict) -> None:
        base_cabinet_entry["name"] = ""
        with pytest.raises(ValidationError):
            CabinetTemplateSchema.model_validate(base_cabinet_entry)


class TestParseTemplateDocument:
    """Tests for parse_template_document."""

    def test_accepts_dict(self, base_cabinet_entry: dict) -> None:
        document = parse_template_document({"cabinets": [base_cabinet_entry]})
        assert isinstance(document, TemplateDocument)
        assert len(document.cabinets) == 1

    def test_accepts_json_text(self) -> None:
        document = parse_template_document('{"cabinets": [], "author": "me"}')
        assert document.cabinets == []

    def test_passes_document_through(self) -> None:
        document = TemplateDocument(cabinets=[])
        assert parse_template_document(document) is document

    def test_invalid_json(self) -> None:
        with pytest.raises(TemplateError, match="not valid JSON") as exc_info:
            parse_template_document("{cabinets: ")
        assert exc_info.value.details[0]["line"] == 1

    @pytest.mark.parametrize("data", [{}, {"cabinets": "none"}, [], None])
    def test_missing_cabinets_array(self, data) -> None:
        with pytest.raises(TemplateError, match="missing cabinets array"):
            parse_template_document(data)
