"""Tests for custom exception classes and handlers."""

import json
from unittest.mock import MagicMock

import pytest

from app.core.exceptions import (
    AppException,
    ChatNotFoundError,
    StorageError,
    UpstreamServiceError,
    ValidationFailedError,
    app_exception_handler,
    unhandled_exception_handler,
)


class TestExceptions:
    """Verify exception status codes and messages."""

    def test_app_exception_defaults(self) -> None:
        exc = AppException(message="err", code="ERR")
        assert exc.status_code == 400
        assert exc.code == "ERR"

    def test_validation_failed_error(self) -> None:
        exc = ValidationFailedError("bad role")
        assert exc.status_code == 400
        assert exc.code == "VALIDATION_ERROR"
        assert exc.message == "bad role"

    def test_chat_not_found_error(self) -> None:
        exc = ChatNotFoundError()
        assert exc.status_code == 404
        assert exc.code == "CHAT_NOT_FOUND"

    def test_upstream_service_error(self) -> None:
        exc = UpstreamServiceError()
        assert exc.status_code == 502

    def test_storage_error(self) -> None:
        exc = StorageError()
        assert exc.status_code == 503
        assert exc.code == "STORAGE_ERROR"


class TestHandlers:
    """Expected failures are delivered with HTTP 200, unexpected ones with 500."""

    @pytest.mark.asyncio
    async def test_app_exception_is_http_200(self) -> None:
        request = MagicMock()
        request.url.path = "/api/chats/ghost"

        response = await app_exception_handler(request, ChatNotFoundError())

        assert response.status_code == 200
        assert json.loads(response.body) == {
            "status": 404,
            "message": "Chat not found",
            "code": "CHAT_NOT_FOUND",
        }

    @pytest.mark.asyncio
    async def test_unhandled_is_http_500(self) -> None:
        request = MagicMock()
        request.url.path = "/api/chats"

        response = await unhandled_exception_handler(request, RuntimeError("boom"))

        assert response.status_code == 500
        assert json.loads(response.body)["code"] == "INTERNAL_ERROR"
