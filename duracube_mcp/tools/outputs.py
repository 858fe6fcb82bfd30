"""Output records returned by the knowledge tools.

Flag-dependent fields (``departure_template``, ``analysis_prompt``,
``output_format`` ...) are optional and only ever set explicitly; ``render``
serializes with ``exclude_unset`` so an unset field is absent from the output
rather than ``null``.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict

from duracube_mcp.knowledge.documents import (
    ComplianceLogic,
    ExtractionCategory,
    Learning,
    NegotiationPositions,
    PrincipleDetail,
    PrincipleSearchTerms,
)


class ToolOutput(BaseModel):
    model_config = ConfigDict(frozen=True)


class PrincipleRecord(ToolOutput):
    id: int
    name: str
    standard: str
    risk_level: str
    search_terms: PrincipleSearchTerms
    red_flags: list[str]
    compliance_logic: ComplianceLogic
    negotiation_positions: NegotiationPositions
    departure_template: str | None = None


class PrinciplesOutput(ToolOutput):
    total_principles: int
    principles: list[PrincipleRecord]
    critical_non_negotiables: dict[str, Any]
    methodology: dict[str, Any]
    interconnected_principles: list[Any]


class LearnedCorrectionsOutput(ToolOutput):
    total_learnings: int
    filter_applied: str
    learnings: list[Learning]
    decision_trees: dict[str, Any]
    category_summaries: dict[str, Any]


class FinanceExtractionOutput(ToolOutput):
    tool_purpose: str
    design_principle: str
    business_context: dict[str, Any]
    target_audience: dict[str, Any]
    total_categories: int
    filter_applied: str
    extraction_categories: list[ExtractionCategory]
    extraction_methodology: dict[str, Any]
    edge_case_handling: dict[str, Any]
    validation_checklist: list[str]
    explicit_constraints: dict[str, Any]
    domain_expertise: dict[str, Any]
    output_format: dict[str, Any] | None = None
    json_output_template: str | None = None


class SectionGroupRecord(ToolOutput):
    group_id: str
    group_name: str
    typical_sections: list[str]
    page_range_hint: str
    principles_to_check: list[int]
    principle_details: list[PrincipleDetail]
    critical_alerts: list[str] | None = None
    analysis_prompt: str | None = None


class SectionMappingOutput(ToolOutput):
    purpose: str
    when_to_use: str
    workflow: list[str]
    token_guidance: dict[str, Any]
    total_groups: int
    filter_applied: str
    section_groups: list[SectionGroupRecord]
    quick_reference: dict[str, Any]
    combining_results: dict[str, Any]


def render(document: BaseModel, exclude_unset: bool = True) -> str:
    """Serialize a tool output as two-space indented JSON text."""
    return json.dumps(document.model_dump(mode="json", exclude_unset=exclude_unset), indent=2, ensure_ascii=False)
