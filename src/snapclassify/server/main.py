"""Reference classification server (FastAPI application entry point).

Speaks the same ``predict-json/`` contract the client expects, backed by a
pluggable ``ImageClassifier``. Run with::

    snapclassify-server
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from snapclassify.server.classifier import ImageClassifier

from fastapi import FastAPI

from snapclassify.config import get_settings
from snapclassify.server.classifier import DigestClassifier
from snapclassify.server.gate import ClassifierGate
from snapclassify.server.routes import router

logger = logging.getLogger(__name__)


def init_app_state(app: FastAPI, classifier: ImageClassifier | None = None) -> None:
    """Attach settings and the classifier gate to ``app.state``."""
    settings = get_settings()
    app.state.settings = settings
    app.state.classifier_gate = ClassifierGate(
        classifier or DigestClassifier(settings.labels, top_k=settings.top_k),
        max_concurrent=settings.max_concurrent,
        acquire_timeout=settings.acquire_timeout,
    )


def create_app(classifier: ImageClassifier | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        init_app_state(app, classifier)
        settings = app.state.settings

        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
        logger.info(
            "Starting SnapClassify reference server (classifier=%s, max_concurrent=%s)",
            app.state.classifier_gate.classifier.model_name,
            settings.max_concurrent,
        )
        yield

        logger.info("Shutting down SnapClassify reference server")

    application = FastAPI(
        title="SnapClassify",
        description="Reference image classification server for the predict-json/ contract",
        version="0.1.0",
        lifespan=lifespan,
    )
    application.include_router(router)
    return application


app = create_app()


def run() -> None:
    """Serve the reference app with uvicorn on the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
