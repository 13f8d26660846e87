"""Image classifiers for the reference server.

``DigestClassifier`` is a deterministic stand-in for a real model: it scores
the configured labels from the SHA-256 digest of the image bytes, so the same
image always gets the same predictions and different images usually differ.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True)
class ClassificationResult:
    """A single classification prediction."""

    label: str
    confidence: float


class ImageClassifier(Protocol):
    """Protocol for image classification models."""

    @property
    def model_name(self) -> str:
        """Return the model identifier string."""
        ...

    def classify(self, data: bytes, mime_type: str) -> list[ClassificationResult]:
        """Classify an image and return ranked labels.

        Args:
            data: Raw encoded image bytes.
            mime_type: Media type the client sent with the bytes.

        Returns:
            List of classification results sorted by confidence (descending).
        """
        ...


class DigestClassifier:
    """Scores labels from a hash of the image bytes."""

    def __init__(self, labels: Sequence[str], top_k: int = 3) -> None:
        if not labels:
            raise ValueError("DigestClassifier needs at least one label")
        if top_k < 1:
            raise ValueError(f"top_k must be >= 1, got {top_k}")
        self._labels = list(labels)
        self._top_k = top_k

    @property
    def model_name(self) -> str:
        return "digest-stub"

    def classify(self, data: bytes, mime_type: str) -> list[ClassificationResult]:
        digest = hashlib.sha256(data).digest()
        # One weight per label, cycling through the 32 digest bytes; +1 keeps every weight non-zero.
        weights = [digest[i % len(digest)] + 1 for i in range(len(self._labels))]
        total = sum(weights)
        scored = [
            ClassificationResult(label=label, confidence=weight / total)
            for label, weight in zip(self._labels, weights, strict=True)
        ]
        scored.sort(key=lambda r: r.confidence, reverse=True)
        return scored[: self._top_k]
