"""Pydantic response schemas for the reference classification server."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PredictionOut(BaseModel):
    """One element of the ``predict-json/`` response array."""

    model_config = ConfigDict(populate_by_name=True)

    label: str = Field(alias="class", description="Class label, e.g. 'rosa-canina'")
    prob: float = Field(description="Probability (0.0-1.0)")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    classifier: str
    concurrent_requests: int
    queue_depth: int


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
