# cpe_calculator/schemas/registrant.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from cpe_calculator.core.text import normalize_name


class Registrant(BaseModel):
    """
    One entry of the optional registrant directory used for email lookup.
    """

    model_config = ConfigDict(frozen=True)

    email: str = Field(..., examples=["jane@example.com"])
    first_name: str = Field("", examples=["Jane"])
    last_name: str = Field("", examples=["Doe"])
    normalized_full_name: str = Field(
        ...,
        description="normalize_name() of the full name; the primary matching key.",
        examples=["jane doe"],
    )
    original_full_name: str = Field(
        ...,
        description="Full name as registered, used for display.",
        examples=["Jane Doe"],
    )

    @classmethod
    def from_names(cls, email: str, first_name: str = "", last_name: str = "") -> "Registrant":
        """
        Build a registrant from its directory columns.

        The email is trimmed and lowercased; when only one of the name parts
        is present it becomes the full name on its own.
        """
        first_name = (first_name or "").strip()
        last_name = (last_name or "").strip()
        full_name = " ".join(part for part in (first_name, last_name) if part)

        return cls(
            email=email.strip().lower(),
            first_name=first_name,
            last_name=last_name,
            normalized_full_name=normalize_name(full_name),
            original_full_name=full_name,
        )


class MatchCandidate(BaseModel):
    """
    A registrant proposed for a participant, with its similarity score.
    """

    model_config = ConfigDict(frozen=True)

    email: str = Field(..., examples=["jane@example.com"])
    display_name: str = Field(..., examples=["Jane Doe"])
    score: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Best of the name similarity scores, between 0 and 1.",
        examples=[0.92],
    )
    confidence_percent: int = Field(
        ...,
        ge=0,
        le=100,
        description="round(score * 100), for display.",
        examples=[92],
    )
