"""HTTP client for the ``predict-json/`` image classification endpoint.

Architecture:
    ImagePayload -> multipart POST <base_url>predict-json/ -> JSON array -> PredictionResult

Every call opens and closes its own connection. Nothing is shared between
calls, so concurrent ``predict`` calls need no coordination.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from snapclassify.client.errors import (
    ConnectionFailure,
    DecodeFailure,
    PredictionFailure,
    ServerError,
    Timeout,
)
from snapclassify.client.schemas import PREDICTION_LIST_ADAPTER, PredictionResult

if TYPE_CHECKING:
    from snapclassify.client.payload import ImagePayload
    from snapclassify.client.schemas import Prediction
    from snapclassify.config import Settings

logger = logging.getLogger(__name__)

# Wire contract of the classification server. The trailing slash is part of the route.
PREDICT_PATH = "predict-json/"
FILE_FIELD = "file"


class PredictionClient:
    """Submits images to a classification endpoint and decodes the predictions."""

    def __init__(
        self,
        base_url: str,
        timeout: float,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        try:
            url = httpx.URL(self._base_url)
        except httpx.InvalidURL as exc:
            raise ValueError(f"Invalid base URL {base_url!r}: {exc}") from None
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"Base URL must be an absolute http(s) URL, got {base_url!r}")
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> PredictionClient:
        return cls(settings.base_url, settings.timeout, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def endpoint(self) -> str:
        """Absolute URL the payloads are posted to."""
        return self._base_url + PREDICT_PATH

    # -- Public API ---------------------------------------------------------

    async def predict(self, payload: ImagePayload) -> PredictionResult:
        """Classify one image with a single request/response round-trip.

        Never raises for network, HTTP, or decoding problems; those come back
        as the result's ``failure``. Cancellation still propagates.
        """
        logger.debug("POST %s (%r)", self.endpoint, payload)
        try:
            response = await self._post(payload)
        except (TimeoutError, httpx.TimeoutException):
            return self._fail(Timeout(self._timeout))
        except httpx.RequestError as exc:
            return self._fail(ConnectionFailure(f"{type(exc).__name__}: {exc}"))

        if not response.is_success:
            return self._fail(ServerError(response.status_code, response.text))

        try:
            items = PREDICTION_LIST_ADAPTER.validate_json(response.content)
        except ValidationError as exc:
            return self._fail(DecodeFailure(str(exc), response.text))

        predictions = [item.to_prediction() for item in items]
        logger.debug("Received %d predictions from %s", len(predictions), self.endpoint)
        return PredictionResult.success(predictions)

    def predict_sync(self, payload: ImagePayload) -> PredictionResult:
        """Blocking variant of ``predict`` for callers without an event loop."""
        return asyncio.run(self.predict(payload))

    async def predict_or_raise(self, payload: ImagePayload) -> list[Prediction]:
        """Like ``predict`` but raises the ``PredictionFailure`` instead of returning it."""
        result = await self.predict(payload)
        return result.unwrap()

    # -- Internal -----------------------------------------------------------

    async def _post(self, payload: ImagePayload) -> httpx.Response:
        files = {FILE_FIELD: (payload.filename, payload.data, payload.mime_type)}
        async with asyncio.timeout(self._timeout):
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            ) as http:
                return await http.post(PREDICT_PATH, files=files)

    def _fail(self, failure: PredictionFailure) -> PredictionResult:
        logger.warning("Prediction request to %s failed (%s): %s", self.endpoint, failure.kind, failure)
        return PredictionResult.failed(failure)
