"""Reference server route definitions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, UploadFile, status
from fastapi.responses import JSONResponse

from snapclassify.client.payload import DEFAULT_MIME_TYPE
from snapclassify.server.gate import ClassifierBusy
from snapclassify.server.schemas import ErrorResponse, HealthResponse, PredictionOut

if TYPE_CHECKING:
    from snapclassify.config import Settings
    from snapclassify.server.gate import ClassifierGate

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def _get_classifier_gate(request: Request) -> ClassifierGate:
    gate: ClassifierGate = request.app.state.classifier_gate
    return gate


@router.post(
    "/predict-json/",
    response_model=list[PredictionOut],
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_413_CONTENT_TOO_LARGE: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
    summary="Classify an image",
)
async def predict_json(request: Request, file: UploadFile) -> list[PredictionOut] | JSONResponse:
    """Classify an uploaded image and return ranked class/probability pairs."""
    settings = _get_settings(request)
    data = await file.read()

    if not data:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Uploaded file is empty"},
        )
    if len(data) > settings.max_file_size:
        return JSONResponse(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            content={"detail": f"Uploaded file exceeds {settings.max_file_size} bytes"},
        )

    gate = _get_classifier_gate(request)
    try:
        results = await gate.classify(data, file.content_type or DEFAULT_MIME_TYPE)
    except ClassifierBusy as exc:
        logger.warning("Rejecting %s: %s", file.filename, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Classifier busy, try again later"},
        )

    logger.info("Classified %s (%d bytes) -> %d labels", file.filename, len(data), len(results))
    return [PredictionOut(label=r.label, prob=r.confidence) for r in results]


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health(request: Request) -> HealthResponse:
    """Return service health status."""
    gate = _get_classifier_gate(request)
    return HealthResponse(
        status="ok",
        classifier=gate.classifier.model_name,
        concurrent_requests=gate.active_count,
        queue_depth=gate.waiting_count,
    )
