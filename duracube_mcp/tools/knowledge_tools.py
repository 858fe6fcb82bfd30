"""Knowledge tools for the DuraCube contract MCP server.

Each tool is a pure function of its validated input and the knowledge store:
it filters a document, selects fields and returns the result as JSON text.
The store is never mutated.
"""

from loguru import logger

from duracube_mcp.knowledge.store import KnowledgeStore
from duracube_mcp.tools.outputs import (
    FinanceExtractionOutput,
    LearnedCorrectionsOutput,
    PrincipleRecord,
    PrinciplesOutput,
    SectionGroupRecord,
    SectionMappingOutput,
    render,
)
from duracube_mcp.tools.schemas import (
    GetFinanceExtractionGuideInput,
    GetLearnedCorrectionsInput,
    GetPrinciplesInput,
    GetSectionPrincipleMappingInput,
)

ALL_FINANCE_CATEGORY_IDS = (1, 2, 3, 4, 5, 6, 7, 8, 9)

FINANCE_CATEGORY_IDS: dict[str, tuple[int, ...]] = {
    "all": ALL_FINANCE_CATEGORY_IDS,
    "contract_value": (1,),
    "parties": (2,),
    "payment": (3, 4),
    "retention": (5,),
    "documentation": (6,),
    "submission": (7,),
    "project_manager": (8,),
    "dollar_values": (9,),
}

# Shown to callers as the exact shape a finance extraction must take.
# Hand-maintained; not derived from the guide document.
FINANCE_JSON_TEMPLATE = """{
  "extraction_metadata": {
    "document_name": "[PDF filename]",
    "extraction_date": "[DD/MM/YYYY]",
    "total_pages": "[Number]",
    "document_type": "[Subcontract/Supply Agreement/Other]"
  },

  "contract_value": {
    "amount": "$X,XXX,XXX",
    "gst_treatment": "[Exclusive/Inclusive/Not specified]",
    "source": "Page X, Clause X.X"
  },

  "contract_parties": [
    {
      "name": "[Full legal entity name]",
      "role": "[Principal/Head Contractor/Contractor/Subcontractor/Supplier]",
      "abn": "[11-digit ABN or null]",
      "acn": "[9-digit ACN or null]",
      "source": "Page X, Clause X.X"
    }
  ],

  "payment_terms": {
    "frequency": "[Monthly/Progress-based/Milestone/Upon completion]",
    "timing": "[e.g., 'Within 30 business days of valid claim']",
    "claim_due_date": "[e.g., '25th of each month']",
    "reference_period": "[e.g., 'Calendar month']",
    "source": "Page X, Clause X.X"
  },

  "payment_claim_conditions": {
    "required_documents": ["[Document 1]", "[Document 2]"],
    "conditions_precedent": ["[Condition 1]", "[Condition 2]"],
    "submission_email": "[Email address or null]",
    "tax_invoice_requirements": "[Requirements or null]",
    "source": "Page X, Clause X.X"
  },

  "retention_and_securities": {
    "retention_percentage": "[X%]",
    "retention_cap": "[Maximum amount or null]",
    "security_type": "[Bank Guarantee/Cash Retention/Insurance Bond/None required]",
    "security_amount": "[Amount or formula]",
    "release_conditions": "[Conditions for release]",
    "release_timing": "[When security is released]",
    "source": "Page X, Clause X.X"
  },

  "additional_claim_documentation": {
    "subcontractor_statement": "[Required/Not required/State-specific requirement]",
    "other_requirements": ["[Requirement 1]", "[Requirement 2]"],
    "source": "Page X, Clause X.X"
  },

  "claim_submission_method": {
    "method": "[Portal/Email/Hard copy/Multiple]",
    "portal_url": "[URL or null]",
    "email_address": "[Email or null]",
    "special_requirements": "[Any specific instructions or null]",
    "source": "Page X, Clause X.X"
  },

  "project_manager": {
    "name": "[Full name]",
    "company": "[Company they represent]",
    "email": "[Email or null]",
    "phone": "[Phone or null]",
    "source": "Page X, Clause X.X"
  },

  "dollar_values": [
    {
      "amount": "$X,XXX",
      "context": "[What this amount relates to]",
      "source": "Page X"
    }
  ],

  "edge_cases": {
    "conflicts_detected": [],
    "handwritten_amendments": [],
    "external_references": [],
    "conditional_values": []
  },

  "extraction_notes": "[Any factual observations about document quality or structure]"
}"""


def get_duracube_principles(params: GetPrinciplesInput, store: KnowledgeStore) -> str:
    """Get all DuraCube commercial principles with their metadata blocks.

    Departure templates are only included when ``include_examples`` is set.
    """
    data = store.principles()

    records = []
    for principle in data.principles:
        fields = {
            "id": principle.id,
            "name": principle.name,
            "standard": principle.standard,
            "risk_level": principle.risk_level,
            "search_terms": principle.search_terms,
            "red_flags": principle.red_flags,
            "compliance_logic": principle.compliance_logic,
            "negotiation_positions": principle.negotiation_positions,
        }
        if params.include_examples and principle.departure_template is not None:
            fields["departure_template"] = principle.departure_template
        records.append(PrincipleRecord(**fields))

    logger.debug(f"get_duracube_principles: {len(records)} principles, include_examples={params.include_examples}")

    return render(
        PrinciplesOutput(
            total_principles=len(records),
            principles=records,
            critical_non_negotiables=data.critical_non_negotiables,
            methodology=data.methodology,
            interconnected_principles=data.interconnected_principles,
        )
    )


def get_learned_corrections(params: GetLearnedCorrectionsInput, store: KnowledgeStore) -> str:
    """Get documented learnings from past review errors, optionally for one category.

    A category without a summary is reported as ``{category: null}``.
    """
    data = store.learnings()
    category = params.category

    if category == "all":
        learnings = list(data.learnings)
        summaries = data.category_summaries
    else:
        learnings = [learning for learning in data.learnings if learning.category == category]
        summaries = {category: data.category_summaries.get(category)}
        if category not in data.category_summaries:
            logger.warning(f"get_learned_corrections: no category summary for '{category}'")

    logger.debug(f"get_learned_corrections: category={category}, {len(learnings)} learnings")

    return render(
        LearnedCorrectionsOutput(
            total_learnings=len(learnings),
            filter_applied=category,
            learnings=learnings,
            decision_trees=data.decision_trees,
            category_summaries=summaries,
        )
    )


def get_output_format(store: KnowledgeStore) -> str:
    """Get the departure schedule CSV format specification, verbatim."""
    return render(store.output_format(), exclude_unset=False)


def get_finance_extraction_guide(params: GetFinanceExtractionGuideInput, store: KnowledgeStore) -> str:
    """Get the finance extraction guide, optionally narrowed to one category group.

    An unrecognised category falls back to all nine extraction categories.
    """
    data = store.finance_extraction()

    category_ids = FINANCE_CATEGORY_IDS.get(params.category, ALL_FINANCE_CATEGORY_IDS)
    categories = [category for category in data.extraction_categories if category.id in category_ids]

    fields = {
        "tool_purpose": data.tool_metadata.purpose,
        "design_principle": data.tool_metadata.design_principle,
        "business_context": data.business_context,
        "target_audience": data.target_audience,
        "total_categories": len(categories),
        "filter_applied": params.category,
        "extraction_categories": categories,
        "extraction_methodology": data.extraction_methodology,
        "edge_case_handling": data.edge_case_handling,
        "validation_checklist": data.validation_checklist,
        "explicit_constraints": data.explicit_constraints,
        "domain_expertise": data.domain_expertise,
    }
    if params.include_json_template:
        fields["output_format"] = data.output_format
        fields["json_output_template"] = FINANCE_JSON_TEMPLATE

    logger.debug(f"get_finance_extraction_guide: category={params.category}, ids={list(category_ids)}")

    return render(FinanceExtractionOutput(**fields))


def get_section_principle_mapping(params: GetSectionPrincipleMappingInput, store: KnowledgeStore) -> str:
    """Get the section-to-principle mapping for analysing large contracts in chunks."""
    data = store.section_mapping()
    guidance = data.large_contract_guidance

    groups = data.section_groups if params.group_id == "all" else [g for g in data.section_groups if g.group_id == params.group_id]

    records = []
    for group in groups:
        fields = {
            "group_id": group.group_id,
            "group_name": group.group_name,
            "typical_sections": group.typical_sections,
            "page_range_hint": group.page_range_hint,
            "principles_to_check": group.principles_to_check,
            "principle_details": group.principle_details,
        }
        if group.critical_alerts:
            fields["critical_alerts"] = group.critical_alerts
        if params.include_prompts:
            fields["analysis_prompt"] = group.analysis_prompt
        records.append(SectionGroupRecord(**fields))

    logger.debug(f"get_section_principle_mapping: group_id={params.group_id}, {len(records)} groups")

    return render(
        SectionMappingOutput(
            purpose=data.metadata.purpose,
            when_to_use=guidance.when_to_use,
            workflow=guidance.workflow,
            token_guidance=guidance.token_estimates,
            total_groups=len(records),
            filter_applied=params.group_id,
            section_groups=records,
            quick_reference=data.quick_reference,
            combining_results=data.combining_results_template,
        )
    )
