"""Shared fixtures: mocked Resend transport, in-memory analytics sink, span capture."""

import json
from typing import Any, Optional

import httpx
import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from app.config import Settings
from app.services.resend import ResendClient


class RecordingTransport:
    """MockTransport that records every request and replies with a canned response."""

    def __init__(
        self,
        status_code: int = 200,
        body: Any = None,
        text: Optional[str] = None,
        exc: Optional[Exception] = None,
    ):
        self.status_code = status_code
        self.body = {"id": "abc123"} if body is None and text is None else body
        self.text = text
        self.exc = exc
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def payloads(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]


class FakeSink:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.points: list[tuple[list[str], list[str], list[float]]] = []

    async def write_data_point(self, indexes, blobs, doubles) -> None:
        if self.fail:
            raise RuntimeError("analytics sink unavailable")
        self.points.append((list(indexes), list(blobs), list(doubles)))


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        resend_api_key="re_test_key",
        resend_api_url="https://api.resend.com",
        email_from="Odel Assistant <noreply@mail.odel.app>",
        subject_prefix="Odel has sent",
        report_abuse_base_url="https://odel.app/report-abuse",
        analytics_database_url="",
    )


@pytest.fixture
def make_client(test_settings):
    """Factory: (client, transport) pair backed by a RecordingTransport."""

    def _make(**kwargs) -> tuple[ResendClient, RecordingTransport]:
        recorder = RecordingTransport(**kwargs)
        client = ResendClient(
            test_settings.resend_api_key,
            base_url=test_settings.resend_api_url,
            transport=recorder.transport,
        )
        return client, recorder

    return _make


@pytest.fixture
def sink() -> FakeSink:
    return FakeSink()


@pytest.fixture
def spans(monkeypatch) -> InMemorySpanExporter:
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    monkeypatch.setattr(
        "app.services.email_sender.get_tracer",
        lambda: provider.get_tracer("test"),
    )
    return exporter


@pytest.fixture
def failing_sink() -> FakeSink:
    return FakeSink(fail=True)
