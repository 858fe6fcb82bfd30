"""Tests for tool input validation: defaults, strictness and error messages."""

import pytest

from duracube_mcp.errors import INTERNAL_ERROR, ToolValidationError
from duracube_mcp.tools.schemas import (
    GetFinanceExtractionGuideInput,
    GetLearnedCorrectionsInput,
    GetOutputFormatInput,
    GetPrinciplesInput,
    GetSectionPrincipleMappingInput,
    validate_arguments,
)


def test_defaults_for_missing_arguments():
    """None and {} both produce the documented defaults."""
    for arguments in (None, {}):
        assert validate_arguments(GetPrinciplesInput, arguments).include_examples is False
        assert validate_arguments(GetLearnedCorrectionsInput, arguments).category == "all"
        finance = validate_arguments(GetFinanceExtractionGuideInput, arguments)
        assert finance.include_json_template is True
        assert finance.category == "all"
        mapping = validate_arguments(GetSectionPrincipleMappingInput, arguments)
        assert mapping.group_id == "all"
        assert mapping.include_prompts is True


def test_unknown_keys_are_ignored():
    params = validate_arguments(GetOutputFormatInput, {"verbose": True})
    assert params.model_dump() == {}


def test_string_boolean_is_rejected():
    """The string "true" is not a boolean."""
    with pytest.raises(ToolValidationError) as exc_info:
        validate_arguments(GetPrinciplesInput, {"include_examples": "true"})

    assert exc_info.value.code == INTERNAL_ERROR
    assert exc_info.value.message.startswith("include_examples:")


def test_integer_boolean_is_rejected():
    with pytest.raises(ToolValidationError):
        validate_arguments(GetSectionPrincipleMappingInput, {"include_prompts": 1})


def test_enum_is_case_sensitive():
    """Enum values match exactly; "Security" is not "security"."""
    with pytest.raises(ToolValidationError) as exc_info:
        validate_arguments(GetLearnedCorrectionsInput, {"category": "Security"})

    message = exc_info.value.message
    assert message.startswith("category:")
    assert "'security'" in message


def test_invalid_group_id():
    with pytest.raises(ToolValidationError) as exc_info:
        validate_arguments(GetSectionPrincipleMappingInput, {"group_id": "H"})
    assert "group_id" in exc_info.value.message


def test_invalid_finance_category():
    with pytest.raises(ToolValidationError) as exc_info:
        validate_arguments(GetFinanceExtractionGuideInput, {"category": "tax"})
    assert "category" in exc_info.value.message


def test_every_offending_field_is_named():
    with pytest.raises(ToolValidationError) as exc_info:
        validate_arguments(GetFinanceExtractionGuideInput, {"category": "tax", "include_json_template": "no"})

    message = exc_info.value.message
    assert "category:" in message
    assert "include_json_template:" in message


@pytest.mark.parametrize("arguments", [[], "all", 3])
def test_non_object_arguments_are_rejected(arguments):
    with pytest.raises(ToolValidationError) as exc_info:
        validate_arguments(GetLearnedCorrectionsInput, arguments)
    assert exc_info.value.message.startswith("Tool arguments must be an object")


def test_valid_arguments_pass_through():
    params = validate_arguments(GetSectionPrincipleMappingInput, {"group_id": "D", "include_prompts": False})
    assert params.group_id == "D"
    assert params.include_prompts is False
