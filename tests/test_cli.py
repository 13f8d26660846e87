"""Tests for the snapclassify command-line entry point."""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING
from unittest.mock import patch

import httpx
import pytest

from snapclassify import cli
from snapclassify.client.prediction_client import PredictionClient

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


def _run(argv: list[str], transport: httpx.AsyncBaseTransport, **env_overrides: str) -> int:
    def client_factory(base_url: str, timeout: float) -> PredictionClient:
        return PredictionClient(base_url, timeout, transport=transport)

    with patch.dict(os.environ, env_overrides), patch.object(cli, "PredictionClient", side_effect=client_factory):
        return cli.main(argv)


@pytest.fixture()
def image(tmp_path: Path) -> Iterator[Path]:
    path = tmp_path / "rose.jpg"
    path.write_bytes(b"\xff\xd8 fake")
    yield path


class TestCli:
    def test_prints_table(self, image: Path, capsys: pytest.CaptureFixture[str]) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[{"class": "rosa-canina", "prob": 0.87}]))

        code = _run([str(image)], transport)

        assert code == cli.EXIT_OK
        out = capsys.readouterr().out
        assert "Rosa" in out
        assert "87.00%" in out

    def test_prints_json(self, image: Path, capsys: pytest.CaptureFixture[str]) -> None:
        body = [{"class": "rosa-canina", "prob": 0.87}, {"class": "moss", "prob": 0.13}]
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=body))

        code = _run([str(image), "--json"], transport)

        assert code == cli.EXIT_OK
        assert json.loads(capsys.readouterr().out) == body

    def test_base_url_from_environment(self, image: Path) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json=[])

        _run([str(image)], httpx.MockTransport(handler), SNAPCLASSIFY_BASE_URL="http://10.0.2.2:8001/")

        assert seen == ["http://10.0.2.2:8001/predict-json/"]

    def test_base_url_flag_overrides_environment(self, image: Path) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json=[])

        _run(
            [str(image), "--base-url", "http://flag.test/"],
            httpx.MockTransport(handler),
            SNAPCLASSIFY_BASE_URL="http://env.test/",
        )

        assert seen == ["http://flag.test/predict-json/"]

    def test_server_error_exit_code(self, image: Path, capsys: pytest.CaptureFixture[str]) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="boom"))

        code = _run([str(image)], transport)

        assert code == cli.EXIT_FAILURE
        assert "Upload failed: Server returned HTTP 500" in capsys.readouterr().err

    def test_missing_image_exit_code(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[]))

        code = _run([str(tmp_path / "missing.jpg")], transport)

        assert code == cli.EXIT_USAGE
        assert "Cannot read image" in capsys.readouterr().err

    def test_invalid_timeout_exit_code(self, image: Path) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[]))

        assert _run([str(image), "--timeout", "0"], transport) == cli.EXIT_USAGE

    def test_invalid_base_url_exit_code(self, image: Path, capsys: pytest.CaptureFixture[str]) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[]))

        assert _run([str(image), "--base-url", "http://[::1"], transport) == cli.EXIT_USAGE
        assert "base URL" in capsys.readouterr().err
