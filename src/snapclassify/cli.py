"""Command-line entry point: classify an image file against a remote endpoint."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import TYPE_CHECKING

from snapclassify.client.payload import payload_from_path
from snapclassify.client.prediction_client import PredictionClient
from snapclassify.config import get_settings
from snapclassify.presentation import describe_failure, render_table

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snapclassify",
        description="Send an image to a classification endpoint and print the predictions.",
    )
    parser.add_argument("image", help="Path to the image file")
    parser.add_argument("--base-url", help="Server prefix the predict-json/ path is resolved against")
    parser.add_argument("--timeout", type=float, help="Seconds to wait for a complete response")
    parser.add_argument("--mime-type", help="Media type of the image (guessed from the extension by default)")
    parser.add_argument("--filename", help="Filename to send with the image")
    parser.add_argument("--json", action="store_true", help="Print predictions as JSON instead of a table")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=args.log_level or settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        payload = payload_from_path(args.image, mime_type=args.mime_type, filename=args.filename)
    except (OSError, ValueError) as exc:
        print(f"Cannot read image: {exc}", file=sys.stderr)
        return EXIT_USAGE

    try:
        client = PredictionClient(
            args.base_url or settings.base_url,
            args.timeout if args.timeout is not None else settings.timeout,
        )
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_USAGE

    logger.info("Classifying %s via %s", args.image, client.endpoint)
    result = client.predict_sync(payload)
    if result.failure is not None:
        print(describe_failure(result.failure), file=sys.stderr)
        return EXIT_FAILURE

    if args.json:
        print(json.dumps([{"class": p.label, "prob": p.probability} for p in result.predictions]))
    else:
        print(render_table(result.predictions))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
