"""Text rendering of prediction results."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from snapclassify.client.errors import PredictionFailure
    from snapclassify.client.schemas import Prediction

HEADER = ("Genus", "Species", "Probability")


def split_label(label: str) -> tuple[str, str]:
    """Split a ``genus-species`` label on its first hyphen.

    The genus gets its first character upper-cased. Labels without a hyphen
    come back whole with an empty species.
    """
    genus, _, species = label.partition("-")
    return genus[:1].upper() + genus[1:], species


def format_probability(probability: float) -> str:
    """Render a probability in [0, 1] as a percentage, e.g. ``0.87`` -> ``"87.00%"``.

    The value is scaled by 100 before formatting; it is not printed raw with a
    ``%`` suffix.
    """
    return f"{probability * 100:.2f}%"


def format_prediction_rows(predictions: Sequence[Prediction]) -> list[tuple[str, str, str]]:
    """One (genus, species, probability) row per prediction, in server order."""
    rows = []
    for prediction in predictions:
        genus, species = split_label(prediction.label)
        rows.append((genus, species, format_probability(prediction.probability)))
    return rows


def render_table(predictions: Sequence[Prediction]) -> str:
    if not predictions:
        return "No predictions returned."

    rows = [HEADER, *format_prediction_rows(predictions)]
    widths = [max(len(row[col]) for row in rows) for col in range(len(HEADER))]
    lines = ["  ".join(cell.ljust(width) for cell, width in zip(row, widths, strict=True)).rstrip() for row in rows]
    return "\n".join(lines)


def describe_failure(failure: PredictionFailure) -> str:
    """User-facing message for a failed prediction."""
    return f"Upload failed: {failure.message}"
