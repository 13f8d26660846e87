"""Prediction values and the wire schema they are decoded from."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, TypeAdapter, field_validator

if TYPE_CHECKING:
    from snapclassify.client.errors import PredictionFailure


@dataclass(frozen=True)
class Prediction:
    """One label/probability pair, exactly as the server sent it."""

    label: str
    probability: float


class PredictionItem(BaseModel):
    """One element of the ``predict-json/`` response array."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    label: StrictStr = Field(alias="class")
    prob: StrictFloat | StrictInt

    @field_validator("prob")
    @classmethod
    def _as_float(cls, value: float | int) -> float:
        # JSON integers have no size limit; floats do.
        try:
            return float(value)
        except OverflowError:
            raise ValueError("prob is too large to fit in a float") from None

    def to_prediction(self) -> Prediction:
        return Prediction(label=self.label, probability=self.prob)


PREDICTION_LIST_ADAPTER: TypeAdapter[list[PredictionItem]] = TypeAdapter(list[PredictionItem])


@dataclass(frozen=True)
class PredictionResult:
    """Outcome of a single ``predict`` call: predictions or one failure."""

    predictions: tuple[Prediction, ...] = ()
    failure: PredictionFailure | None = None

    @classmethod
    def success(cls, predictions: list[Prediction]) -> PredictionResult:
        return cls(predictions=tuple(predictions))

    @classmethod
    def failed(cls, failure: PredictionFailure) -> PredictionResult:
        return cls(failure=failure)

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap(self) -> list[Prediction]:
        """Return the predictions, or raise the failure if there is one."""
        if self.failure is not None:
            raise self.failure
        return list(self.predictions)
