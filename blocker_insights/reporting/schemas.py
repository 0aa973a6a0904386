"""Schemas for report synthesis."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from blocker_insights.models.report import ActionItem


class Analysis(BaseModel):
    """Synthesized analysis of a blocker list.

    Doubles as the structured-output contract for the model, whose JSON
    keys are camelCase: ``summary``, ``actionItems``, ``insights``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    summary: str = Field(
        description="2-3 sentence executive summary of the main challenges"
    )
    action_items: list[ActionItem] = Field(
        description="Specific, actionable recommendations per severity level",
    )
    insights: list[str] = Field(
        description="Pattern or trend observations and process recommendations",
    )
