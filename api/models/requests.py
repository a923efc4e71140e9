"""
API Request Models

Pydantic models for API request validation.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProofStepModel(BaseModel):
    """One proof step in the exchange format."""

    model_config = ConfigDict(extra="forbid")

    sibling_hash: str = Field(..., min_length=1, description="Sibling digest (hex)")
    side: Literal["left", "right"] = Field(
        ...,
        description="Position of the current node under its parent",
    )


class VerifyProofRequest(BaseModel):
    """
    Request body for POST /verify/proof.

    Exactly one of ``encoding`` (canonical record text) or ``review`` (a raw
    dataset JSON object, encoded server-side) must be given.
    """

    model_config = ConfigDict(extra="forbid")

    encoding: str | None = Field(default=None, description="Canonical record encoding")
    review: dict[str, Any] | None = Field(default=None, description="Raw review JSON object")
    proof: list[ProofStepModel] = Field(default_factory=list, description="Proof steps, leaf to root")
    root_hash: str = Field(..., min_length=1, description="Trusted root digest")

    @model_validator(mode="after")
    def _one_record_source(self) -> "VerifyProofRequest":
        if (self.encoding is None) == (self.review is None):
            raise ValueError("Provide exactly one of 'encoding' or 'review'")
        return self


class CompareRootsRequest(BaseModel):
    """Request body for POST /roots/compare."""

    root_a: str = Field(default="", description="First root digest")
    root_b: str = Field(default="", description="Second root digest")


class CheckRootRequest(BaseModel):
    """Request body for POST /roots/{label}/check."""

    root_hash: str = Field(..., min_length=1, description="Candidate root digest")
