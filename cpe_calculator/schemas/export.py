# cpe_calculator/schemas/export.py
from pydantic import BaseModel, ConfigDict, Field


class ExportRow(BaseModel):
    """
    Display/export projection of a ParticipantResult.

    Carries the email a user picked for an ambiguous match; the computed
    ParticipantResult itself is never changed.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    email: str = ""
    email_status: str = Field(
        ...,
        description="Resolver status, or 'selected' when a user picked the email.",
        examples=["selected"],
    )
    duration_minutes: int
    questions_answered: int
    credits: float
    status: str = Field(..., examples=["Qualified"])
