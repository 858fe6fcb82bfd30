"""Tool registry - descriptors and dispatch table for the knowledge tools.

Descriptors are hand-authored and are the contract clients see in
``tools/list``; the input models in ``schemas`` enforce the same enums and
defaults at call time.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from duracube_mcp.errors import UnknownToolError
from duracube_mcp.knowledge.store import KnowledgeStore
from duracube_mcp.tools import knowledge_tools
from duracube_mcp.tools.schemas import (
    GetFinanceExtractionGuideInput,
    GetLearnedCorrectionsInput,
    GetOutputFormatInput,
    GetPrinciplesInput,
    GetSectionPrincipleMappingInput,
    ToolInput,
    validate_arguments,
)


@dataclass(frozen=True)
class ToolSpec:
    """A registered tool: its public descriptor plus how to run it."""

    name: str
    description: str
    input_schema: dict[str, Any]
    input_model: type[ToolInput]
    handler: Callable[[Any, KnowledgeStore], str]

    def descriptor(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "inputSchema": self.input_schema}

    def call(self, arguments: Any, store: KnowledgeStore) -> str:
        """Validate arguments and run the tool.

        Raises:
            ToolValidationError: If arguments violate the input schema
            DocumentLoadError: If the backing knowledge document cannot be loaded
        """
        params = validate_arguments(self.input_model, arguments)
        return self.handler(params, store)


TOOLS: dict[str, ToolSpec] = {
    "get_duracube_principles": ToolSpec(
        name="get_duracube_principles",
        description="""Get all 28 DuraCube commercial principles with standards, search terms, red flags and compliance logic for contract review.

Returns:
- Every commercial principle with DuraCube's standard position
- Search terms for locating the relevant contract clauses
- Red flags that indicate a non-compliant term
- Compliance logic for classifying each clause
- Critical non-negotiables (PI insurance, unconditional guarantees, parent company guarantees)
- Review methodology (extraction passes and comparison steps)

Call this FIRST when reviewing a customer contract against DuraCube standards.""",
        input_schema={
            "type": "object",
            "properties": {
                "include_examples": {
                    "type": "boolean",
                    "default": False,
                    "description": "Include departure templates showing example language changes",
                },
            },
        },
        input_model=GetPrinciplesInput,
        handler=knowledge_tools.get_duracube_principles,
    ),
    "get_learned_corrections": ToolSpec(
        name="get_learned_corrections",
        description="""Get documented learnings from past contract review errors.

Returns:
- Documented errors with their corrections and resulting rules
- Decision trees for complex assessments
- Interconnected principle dependencies

Categories:
- security: bank guarantees, retention, parent company guarantees
- insurance: PI insurance, coverage limits, favorable absence of terms
- dlp: defects liability period versus warranty
- design: design scope limits, shop drawings
- methodology: page references, template analysis, favorability assessment

Call this to avoid repeating known errors and to handle edge cases.""",
        input_schema={
            "type": "object",
            "properties": {
                "category": {
                    "type": "string",
                    "enum": ["all", "security", "insurance", "dlp", "design", "methodology"],
                    "default": "all",
                    "description": "Filter learnings by category",
                },
            },
        },
        input_model=GetLearnedCorrectionsInput,
        handler=knowledge_tools.get_learned_corrections,
    ),
    "get_output_format": ToolSpec(
        name="get_output_format",
        description="""Get the exact CSV format specification for departure schedules.

Returns the CSV structure, column specifications, example rows, a quality
checklist and a complete CSV example.

Rules:
- Page references include clause numbers: "Page 5, Clause 8.1"
- Status is one of: Compliant | Non-Compliant | No Term
- Departures start with an action verb: Insert: | Replace: | Amend: | Delete:
- The Comments column is always empty

Call this BEFORE generating the final departure schedule.""",
        input_schema={"type": "object", "properties": {}},
        input_model=GetOutputFormatInput,
        handler=lambda params, store: knowledge_tools.get_output_format(store),
    ),
    "get_finance_extraction_guide": ToolSpec(
        name="get_finance_extraction_guide",
        description="""Get the guide for extracting 9 key finance data points from a contract.

For DuraCube's accounts receivable and project accounting team.
EXTRACT ONLY: no assessment, no comparison, no judgment.

Categories:
1. Contract Value (excluding GST)
2. Contract Parties (with ABN/ACN)
3. Payment Terms
4. Payment Claim Conditions
5. Retention and Securities
6. Additional Claim Documentation
7. Claim Submission Method
8. Project Manager
9. Dollar Value Mentions

Also returns the scan methodology, edge case handling, validation checklist,
domain terminology and, optionally, the JSON output template.

Use this for a FINANCE review, separate from the 28-principle commercial review.""",
        input_schema={
            "type": "object",
            "properties": {
                "include_json_template": {
                    "type": "boolean",
                    "default": True,
                    "description": "Include the complete JSON output template in the response",
                },
                "category": {
                    "type": "string",
                    "enum": [
                        "all",
                        "contract_value",
                        "parties",
                        "payment",
                        "retention",
                        "documentation",
                        "submission",
                        "project_manager",
                        "dollar_values",
                    ],
                    "default": "all",
                    "description": "Filter to specific extraction category",
                },
            },
        },
        input_model=GetFinanceExtractionGuideInput,
        handler=knowledge_tools.get_finance_extraction_guide,
    ),
    "get_section_principle_mapping": ToolSpec(
        name="get_section_principle_mapping",
        description="""Get the section-to-principle mapping for analysing LARGE contracts that exceed token limits.

Splits the review into 7 section groups (A to G), each mapped to the
principles it must be checked against:
- A: General & Administrative (principles 1-6)
- B: Payment & Security (14, 15, 16, 24), contains critical non-negotiables
- C: Liability & Indemnity (7-11)
- D: Insurance (25), PI insurance is non-compliant
- E: Disputes & Legal (13, 19)
- F: Variations, Extensions & Claims (17, 18, 20-23)
- G: Design, Defects & Completion (12, 26-28)

Workflow: get the mapping, ask the user for each group's page range, analyse
each group against its principles, then combine the results with the template
provided.

Use when a contract exceeds ~150 pages or a full pass hits token limits.""",
        input_schema={
            "type": "object",
            "properties": {
                "group_id": {
                    "type": "string",
                    "enum": ["all", "A", "B", "C", "D", "E", "F", "G"],
                    "default": "all",
                    "description": "Filter to specific section group (A=General, B=Payment/Security, C=Liability, D=Insurance, E=Disputes, F=Variations, G=Design/Completion)",
                },
                "include_prompts": {
                    "type": "boolean",
                    "default": True,
                    "description": "Include ready-to-use analysis prompts for each section group",
                },
            },
        },
        input_model=GetSectionPrincipleMappingInput,
        handler=knowledge_tools.get_section_principle_mapping,
    ),
}


def get_tool(name: Any, tools: dict[str, ToolSpec] = TOOLS) -> ToolSpec:
    """Look up a registered tool by name.

    Raises:
        UnknownToolError: If no tool is registered under ``name``
    """
    if not isinstance(name, str) or name not in tools:
        raise UnknownToolError(name)
    return tools[name]


def list_tool_descriptors(tools: dict[str, ToolSpec] = TOOLS) -> list[dict[str, Any]]:
    return [tool.descriptor() for tool in tools.values()]
