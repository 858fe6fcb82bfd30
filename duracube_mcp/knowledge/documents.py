"""Typed shapes of the five knowledge documents.

Documents are validated once when the store loads them and are frozen
afterwards. Unknown keys are kept so documents served verbatim stay verbatim.
Optional fields that a document omits stay unset, which lets the tool layer
serialize with ``exclude_unset`` and reproduce the source shape exactly.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

LearningCategory = Literal["security", "insurance", "dlp", "design", "methodology"]
SectionGroupId = Literal["A", "B", "C", "D", "E", "F", "G"]


class _Document(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")


def _assert_unique(values: list[Any], label: str) -> None:
    seen: set[Any] = set()
    duplicates: list[str] = []
    for value in values:
        if value in seen:
            duplicates.append(str(value))
        seen.add(value)
    if duplicates:
        raise ValueError(f"duplicate {label}: {', '.join(duplicates)}")


# ---------------------------------------------------------------------------
# Principles
# ---------------------------------------------------------------------------


class PrincipleSearchTerms(_Document):
    primary: list[str]
    alternative: list[str]
    related: list[str]


class ComplianceLogic(_Document):
    compliant_if: str
    non_compliant_if: str
    no_term_risk: str
    special_note: str | None = None
    critical_alert: str | None = None


class NegotiationPositions(_Document):
    preferred: str
    fallback: str
    deal_breaker: str


class Principle(_Document):
    id: int
    name: str
    standard: str
    risk_level: str
    search_terms: PrincipleSearchTerms
    red_flags: list[str]
    compliance_logic: ComplianceLogic
    negotiation_positions: NegotiationPositions
    departure_template: str | None = None


class PrincipleSet(_Document):
    principles: list[Principle]
    critical_non_negotiables: dict[str, Any]
    methodology: dict[str, Any]
    interconnected_principles: list[Any]

    @model_validator(mode="after")
    def check_unique_ids(self) -> "PrincipleSet":
        _assert_unique([p.id for p in self.principles], "principle id")
        return self


# ---------------------------------------------------------------------------
# Learnings
# ---------------------------------------------------------------------------


class Learning(_Document):
    id: str
    category: LearningCategory
    principle_id: int | None = None
    date_logged: str | None = None
    issue: str
    correction: str
    rule: str
    examples: dict[str, str | list[str]] | None = None
    interconnected_principles: list[int] | None = None
    decision_tree: dict[str, str] | None = None


class LearningSet(_Document):
    learnings: list[Learning]
    decision_trees: dict[str, Any]
    category_summaries: dict[str, Any]


# ---------------------------------------------------------------------------
# Output format
# ---------------------------------------------------------------------------


class FormatSpec(_Document):
    csv_structure: dict[str, Any]
    column_specifications: dict[str, Any]
    example_rows: list[str]
    quality_checklist: list[str]
    complete_csv_example: str


# ---------------------------------------------------------------------------
# Finance extraction
# ---------------------------------------------------------------------------


class ToolMetadata(_Document):
    name: str
    version: str
    purpose: str
    design_principle: str


class ExtractionSearchTerms(_Document):
    primary: list[str]
    secondary: list[str]
    related: list[str]


class ExtractionCategory(_Document):
    id: int = Field(ge=1, le=9)
    name: str
    description: str
    alternative_names: list[str] | None = None
    search_terms: ExtractionSearchTerms
    extraction_rules: list[str]
    output_fields: dict[str, str]


class FinanceExtractionGuide(_Document):
    tool_metadata: ToolMetadata
    business_context: dict[str, Any]
    target_audience: dict[str, Any]
    extraction_categories: list[ExtractionCategory]
    extraction_methodology: dict[str, Any]
    edge_case_handling: dict[str, Any]
    output_format: dict[str, Any]
    validation_checklist: list[str]
    explicit_constraints: dict[str, Any]
    domain_expertise: dict[str, Any]

    @model_validator(mode="after")
    def check_unique_ids(self) -> "FinanceExtractionGuide":
        _assert_unique([c.id for c in self.extraction_categories], "extraction category id")
        return self


# ---------------------------------------------------------------------------
# Section mapping
# ---------------------------------------------------------------------------


class MappingMetadata(_Document):
    version: str
    purpose: str
    created: str
    usage: str


class LargeContractGuidance(_Document):
    when_to_use: str
    strategy: str
    workflow: list[str]
    token_estimates: dict[str, Any]


class PrincipleDetail(_Document):
    id: int
    name: str
    search_for: str


class SectionGroup(_Document):
    group_id: SectionGroupId
    group_name: str
    typical_sections: list[str]
    page_range_hint: str
    principles_to_check: list[int]
    principle_details: list[PrincipleDetail]
    critical_alerts: list[str] | None = None
    analysis_prompt: str


class SectionMappingGuide(_Document):
    metadata: MappingMetadata
    large_contract_guidance: LargeContractGuidance
    section_groups: list[SectionGroup]
    quick_reference: dict[str, Any]
    combining_results_template: dict[str, Any]

    @model_validator(mode="after")
    def check_unique_group_ids(self) -> "SectionMappingGuide":
        _assert_unique([g.group_id for g in self.section_groups], "section group id")
        return self


KnowledgeDocument = PrincipleSet | LearningSet | FormatSpec | FinanceExtractionGuide | SectionMappingGuide
