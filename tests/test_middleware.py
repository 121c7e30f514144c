from __future__ import annotations

import logging
import uuid
from fastapi import status
from typing import TYPE_CHECKING

from app.core.logging import RequestLogFilter, get_logger, request_id_var

if TYPE_CHECKING:
    from fastapi.testclient import TestClient


class TestCorrelationIdMiddleware:
    """Test correlation ID middleware functionality."""

    def test_correlation_id_generated_when_missing(self, test_client: TestClient) -> None:
        resp = test_client.get("/api/v1/books")
        assert resp.status_code == status.HTTP_200_OK
        corr_id = resp.headers["X-Request-ID"]
        assert len(corr_id) == 36 and corr_id.count("-") == 4

    def test_correlation_id_preserved_when_provided(
        self, test_client: TestClient, headers_with_correlation: dict[str, str]
    ) -> None:
        resp = test_client.get("/api/v1/books", headers=headers_with_correlation)
        assert resp.status_code == status.HTTP_200_OK
        assert resp.headers["X-Request-ID"] == headers_with_correlation["X-Request-ID"]

    def test_correlation_id_in_error_responses(self, test_client: TestClient) -> None:
        provided = str(uuid.uuid4())
        resp = test_client.get("/api/v1/books/999", headers={"X-Request-ID": provided})
        assert resp.status_code == status.HTTP_404_NOT_FOUND
        body = resp.json()
        assert body["meta"]["request_id"] == provided
        assert body["meta"]["path"] == "/api/v1/books/999"
        assert body["meta"]["method"] == "GET"
        assert resp.headers["X-Request-ID"] == provided

    def test_correlation_id_different_per_request(self, test_client: TestClient) -> None:
        r1 = test_client.get("/api/v1/books")
        r2 = test_client.get("/api/v1/books")
        assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]

    def test_correlation_id_with_invalid_uuid(self, test_client: TestClient) -> None:
        resp = test_client.get("/api/v1/books", headers={"X-Request-ID": "not-a-uuid"})
        assert resp.headers["X-Request-ID"] == "not-a-uuid"

    def test_correlation_id_blank_header(self, test_client: TestClient) -> None:
        resp = test_client.get("/api/v1/books", headers={"X-Request-ID": "   "})
        corr_id = resp.headers["X-Request-ID"]
        assert corr_id.strip()
        assert len(corr_id) == 36

    def test_request_id_reset_after_request(self, test_client: TestClient) -> None:
        test_client.get("/api/v1/books", headers={"X-Request-ID": "abc"})
        assert request_id_var.get() == "-"


class TestRequestLogging:
    """Test request-aware logging helpers."""

    def test_filter_fills_default_request_id(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        assert RequestLogFilter().filter(record) is True
        assert record.request_id == "-"

    def test_filter_uses_context_request_id(self) -> None:
        token = request_id_var.set("req-42")
        try:
            record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
            RequestLogFilter().filter(record)
        finally:
            request_id_var.reset(token)
        assert record.request_id == "req-42"

    def test_filter_keeps_explicit_request_id(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        record.request_id = "explicit"
        RequestLogFilter().filter(record)
        assert record.request_id == "explicit"

    def test_get_logger_without_request(self) -> None:
        adapter = get_logger("tests")
        assert adapter.logger.name == "tests"
        assert adapter.extra == {}

    def test_service_logs_create(self, test_client: TestClient, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="app.services.book_service"):
            test_client.post(
                "/api/v1/books",
                json={"title": "Logged", "author": "A", "genre": "G", "price": 1},
                headers={"X-Request-ID": "log-req"},
            )
        records = [r for r in caplog.records if r.getMessage() == "Book created"]
        assert len(records) == 1
        assert records[0].book_id == 1
