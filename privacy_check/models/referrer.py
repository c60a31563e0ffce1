"""Pydantic models for referrer policy signals and their ratings."""

from __future__ import annotations

from typing import Literal

import pydantic

ReferrerSource = Literal["meta", "csp", "header"]

RatingStatus = Literal["success", "warning", "alert", "missing"]


class ReferrerPolicySignal(pydantic.BaseModel):
    """A referrer policy value and the place it was found."""

    model_config = pydantic.ConfigDict(frozen=True)

    source: ReferrerSource
    value: str


class ReferrerPolicyRating(pydantic.BaseModel):
    """The effective referrer policy of a page and how it rates."""

    model_config = pydantic.ConfigDict(frozen=True)

    source: ReferrerSource | None = None
    value: str | None = None
    status: RatingStatus


class ReferrerPolicyTable(pydantic.BaseModel):
    """Maps referrer policy tokens to a rating.

    Attributes:
        ratings: Lower-case policy token to status.
        unrecognized: Status for a value with no known token.
    """

    ratings: dict[str, Literal["success", "warning", "alert"]]
    unrecognized: Literal["success", "warning", "alert"] = "warning"

    @pydantic.field_validator("ratings")
    @classmethod
    def _lowercase_keys(cls, value: dict[str, str]) -> dict[str, str]:
        return {k.strip().lower(): v for k, v in value.items()}
