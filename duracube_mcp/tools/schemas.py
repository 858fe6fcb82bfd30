"""Input schemas for the knowledge tools.

Booleans are strict and enums are exact-match literals: invalid input is
rejected with a descriptive message, never coerced.
"""

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, StrictBool, ValidationError

from duracube_mcp.errors import ToolValidationError, format_validation_error

LearningCategoryFilter = Literal["all", "security", "insurance", "dlp", "design", "methodology"]
FinanceCategoryFilter = Literal[
    "all",
    "contract_value",
    "parties",
    "payment",
    "retention",
    "documentation",
    "submission",
    "project_manager",
    "dollar_values",
]
SectionGroupFilter = Literal["all", "A", "B", "C", "D", "E", "F", "G"]


class ToolInput(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class GetPrinciplesInput(ToolInput):
    include_examples: StrictBool = False


class GetLearnedCorrectionsInput(ToolInput):
    category: LearningCategoryFilter = "all"


class GetOutputFormatInput(ToolInput):
    pass


class GetFinanceExtractionGuideInput(ToolInput):
    include_json_template: StrictBool = True
    category: FinanceCategoryFilter = "all"


class GetSectionPrincipleMappingInput(ToolInput):
    group_id: SectionGroupFilter = "all"
    include_prompts: StrictBool = True


InputT = TypeVar("InputT", bound=ToolInput)


def validate_arguments(model: type[InputT], arguments: Any) -> InputT:
    """Validate raw tool arguments against a tool's input model.

    Args:
        model: Input model class for the tool
        arguments: Raw arguments from the request; None means no arguments

    Returns:
        Validated input model instance

    Raises:
        ToolValidationError: If arguments are not an object or violate the schema
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise ToolValidationError(f"Tool arguments must be an object, got {type(arguments).__name__}")

    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        raise ToolValidationError(format_validation_error(e)) from e
