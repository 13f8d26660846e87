"""Admission control for classification requests.

At most ``max_concurrent`` classify calls run at once, each on Starlette's
worker threadpool. A request that cannot get a slot within
``acquire_timeout`` seconds is turned away so the route can answer 503.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from starlette.concurrency import run_in_threadpool

if TYPE_CHECKING:
    from snapclassify.server.classifier import ClassificationResult, ImageClassifier

logger = logging.getLogger(__name__)


class ClassifierBusy(Exception):
    """No classification slot became free within the acquire timeout."""


class ClassifierGate:
    """Bounds concurrent classify calls for one server instance."""

    def __init__(self, classifier: ImageClassifier, max_concurrent: int, acquire_timeout: float) -> None:
        self._classifier = classifier
        self._max_concurrent = max_concurrent
        self._acquire_timeout = acquire_timeout
        self._semaphore: asyncio.Semaphore | None = None
        # Only touched from the event loop thread.
        self._active = 0
        self._waiting = 0

    @property
    def classifier(self) -> ImageClassifier:
        return self._classifier

    @property
    def active_count(self) -> int:
        """Classify calls currently running."""
        return self._active

    @property
    def waiting_count(self) -> int:
        """Requests waiting for a slot."""
        return self._waiting

    async def classify(self, data: bytes, mime_type: str) -> list[ClassificationResult]:
        """Run the classifier on a worker thread once a slot is free.

        Raises:
            ClassifierBusy: If no slot frees up within the acquire timeout.
        """
        semaphore = self._get_semaphore()
        self._waiting += 1
        try:
            async with asyncio.timeout(self._acquire_timeout):
                await semaphore.acquire()
        except TimeoutError:
            raise ClassifierBusy(f"No classifier slot free after {self._acquire_timeout:g}s") from None
        finally:
            self._waiting -= 1

        self._active += 1
        try:
            return await run_in_threadpool(self._classifier.classify, data, mime_type)
        finally:
            self._active -= 1
            semaphore.release()

    def _get_semaphore(self) -> asyncio.Semaphore:
        # Created on first request so it belongs to the server's running loop.
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self._max_concurrent)
            logger.debug("Classifier gate opened with %d slots", self._max_concurrent)
        return self._semaphore
