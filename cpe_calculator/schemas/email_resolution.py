# cpe_calculator/schemas/email_resolution.py
from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from cpe_calculator.schemas.registrant import MatchCandidate


class EmailStatus(str, Enum):
    """
    How a participant's email was obtained.
    """

    DIRECT = "direct"
    MATCHED = "matched"
    AMBIGUOUS = "ambiguous"
    NOT_FOUND = "not_found"


class DirectEmail(BaseModel):
    """
    The attendance log carried the email itself (possibly empty, in which
    case no lookup was attempted).
    """

    model_config = ConfigDict(frozen=True)

    status: Literal[EmailStatus.DIRECT] = EmailStatus.DIRECT
    email: str = ""

    @property
    def candidates(self) -> list[MatchCandidate]:
        return []


class MatchedEmail(BaseModel):
    """
    A single registrant clearly outscored every other one.
    """

    model_config = ConfigDict(frozen=True)

    status: Literal[EmailStatus.MATCHED] = EmailStatus.MATCHED
    candidate: MatchCandidate

    @property
    def email(self) -> str:
        return self.candidate.email

    @property
    def candidates(self) -> list[MatchCandidate]:
        return [self.candidate]


class AmbiguousEmail(BaseModel):
    """
    Several registrants scored too close to pick one automatically.

    `email` is the best-scoring candidate's address, offered as a suggestion.
    """

    model_config = ConfigDict(frozen=True)

    status: Literal[EmailStatus.AMBIGUOUS] = EmailStatus.AMBIGUOUS
    candidates: list[MatchCandidate] = Field(..., min_length=2)

    @property
    def email(self) -> str:
        return self.candidates[0].email


class NotFoundEmail(BaseModel):
    """
    No registrant reached the match threshold, or no directory was given.
    """

    model_config = ConfigDict(frozen=True)

    status: Literal[EmailStatus.NOT_FOUND] = EmailStatus.NOT_FOUND

    @property
    def email(self) -> str:
        return ""

    @property
    def candidates(self) -> list[MatchCandidate]:
        return []


EmailResolution = Annotated[
    Union[DirectEmail, MatchedEmail, AmbiguousEmail, NotFoundEmail],
    Field(discriminator="status"),
]
