# cpe_calculator/schemas/participant_result.py
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from cpe_calculator.schemas.email_resolution import EmailStatus
from cpe_calculator.schemas.registrant import MatchCandidate


class ParticipantStatus(str, Enum):
    """
    Certificate verdict for a participant.
    """

    QUALIFIED = "Qualified"
    NOT_QUALIFIED = "Not Qualified"


class Eligibility(BaseModel):
    """
    Outcome of `credit_engine.eligibility`.
    """

    model_config = ConfigDict(frozen=True)

    eligible: bool
    status: ParticipantStatus
    reason: str = Field(
        "",
        description="Why the participant did not qualify; empty when eligible.",
        examples=["Duration < 50 minutes"],
    )


class ParticipantResult(BaseModel):
    """
    Final, immutable verdict row for one participant.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Original display name.", examples=["Dr. Jane Doe"])
    normalized_name: str = Field(..., examples=["jane doe"])
    email: str = Field(
        "",
        description="Resolved email; empty when none could be determined.",
        examples=["jane@example.com"],
    )
    email_status: EmailStatus = Field(..., examples=["matched"])
    match_candidates: list[MatchCandidate] = Field(
        default_factory=list,
        description="Registrants proposed by the resolver (0-3).",
    )
    duration_minutes: int = Field(..., ge=0, examples=[64])
    actual_credits: float = Field(
        ...,
        ge=0.0,
        description="Credits awarded after the engagement downgrade; 0 or at least 1.0.",
        examples=[1.0],
    )
    potential_credits: float = Field(
        ...,
        ge=0.0,
        description="Credits earned from duration alone.",
        examples=[1.0],
    )
    questions_answered: int = Field(
        ...,
        ge=0,
        description="Number of distinct polls the participant answered.",
        examples=[3],
    )
    required_questions_actual: int = Field(..., ge=0, examples=[3])
    required_questions_potential: int = Field(..., ge=0, examples=[3])
    eligible: bool = Field(..., examples=[True])
    status: ParticipantStatus = Field(..., examples=["Qualified"])
    reason: str = Field("", examples=["Did not earn minimum 1.0 credits"])


class CalculationSummary(BaseModel):
    """
    Aggregate counts over a result set.
    """

    model_config = ConfigDict(frozen=True)

    total: int = Field(..., ge=0, examples=[40])
    qualified: int = Field(..., ge=0, examples=[32])
    not_qualified: int = Field(..., ge=0, examples=[8])
    qualified_percent: float = Field(
        ...,
        description="qualified / total * 100, rounded to 2 decimals; 0.0 for an empty set.",
        examples=[80.0],
    )
    not_qualified_percent: float = Field(..., examples=[20.0])
    total_credits: float = Field(
        ...,
        description="Sum of actual credits over qualified participants, rounded to 1 decimal.",
        examples=[41.5],
    )


class CalculationReport(BaseModel):
    """
    Everything one calculation run produces.
    """

    model_config = ConfigDict(frozen=True)

    results: list[ParticipantResult]
    summary: CalculationSummary
