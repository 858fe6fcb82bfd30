"""Tests for tool descriptors and registry lookup."""

from typing import get_args

import pytest

from duracube_mcp.errors import METHOD_NOT_FOUND, UnknownToolError
from duracube_mcp.tools.registry import TOOLS, get_tool, list_tool_descriptors

TOOL_NAMES = [
    "get_duracube_principles",
    "get_learned_corrections",
    "get_output_format",
    "get_finance_extraction_guide",
    "get_section_principle_mapping",
]


def test_all_tools_registered():
    assert list(TOOLS) == TOOL_NAMES
    assert [descriptor["name"] for descriptor in list_tool_descriptors()] == TOOL_NAMES


def test_descriptor_shape():
    for descriptor in list_tool_descriptors():
        assert set(descriptor) == {"name", "description", "inputSchema"}
        assert descriptor["description"]
        assert descriptor["inputSchema"]["type"] == "object"


@pytest.mark.parametrize("name", TOOL_NAMES)
def test_descriptor_matches_input_model(name):
    """Every advertised property has the model's default and, for enums, its values."""
    tool = TOOLS[name]
    properties = tool.input_schema["properties"]
    fields = tool.input_model.model_fields

    assert set(properties) == set(fields)
    for field_name, schema in properties.items():
        field = fields[field_name]
        assert schema["default"] == field.default
        if "enum" in schema:
            assert schema["enum"] == list(get_args(field.annotation))
        else:
            assert schema["type"] == "boolean"


def test_get_tool_unknown():
    with pytest.raises(UnknownToolError) as exc_info:
        get_tool("get_pricing")

    assert exc_info.value.code == METHOD_NOT_FOUND
    assert exc_info.value.message == "Unknown tool: get_pricing"


def test_get_tool_missing_name():
    with pytest.raises(UnknownToolError) as exc_info:
        get_tool(None)
    assert exc_info.value.message == "Unknown tool: None"


def test_tool_call_validates_and_runs(store):
    text = TOOLS["get_section_principle_mapping"].call({"group_id": "B"}, store)
    assert '"filter_applied": "B"' in text
