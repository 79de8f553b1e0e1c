"""Tests for the refresh-token exchange client."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from curl_cffi.requests import errors

from team_sweeper.config.constants import (
    OPENAI_CLIENT_ID,
    OPENAI_OAUTH_SCOPE,
    OPENAI_TOKEN_URL,
    REFRESH_TIMEOUT,
)
from team_sweeper.core.exceptions import (
    InvalidInputError,
    UpstreamRejectedError,
    UpstreamUnreachableError,
)
from team_sweeper.models.check_result import TokenPair
from team_sweeper.services.token_refresh import TokenRefreshService


def _run(coro):
    """Run a coroutine synchronously for testing."""
    return asyncio.run(coro)


def _response(status_code=200, payload=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    if isinstance(payload, Exception):
        response.json = MagicMock(side_effect=payload)
    else:
        response.json = MagicMock(return_value=payload)
    response.text = text
    return response


def _patched_session(response=None, exc=None):
    """Patch AsyncSession so that post() returns response or raises exc."""
    session = MagicMock()
    session.post = AsyncMock(return_value=response, side_effect=exc)
    session_cm = MagicMock()
    session_cm.__aenter__ = AsyncMock(return_value=session)
    session_cm.__aexit__ = AsyncMock(return_value=False)
    factory = MagicMock(return_value=session_cm)
    return patch("team_sweeper.services.token_refresh.AsyncSession", factory), session, factory


class TestRefresh:

    def test_empty_refresh_token_is_invalid_input(self):
        patcher, session, factory = _patched_session()
        with patcher:
            with pytest.raises(InvalidInputError) as exc_info:
                _run(TokenRefreshService().refresh("   "))
        assert exc_info.value.status == 400
        factory.assert_not_called()
        session.post.assert_not_awaited()

    def test_none_refresh_token_is_invalid_input(self):
        with pytest.raises(InvalidInputError):
            _run(TokenRefreshService().refresh(None))

    def test_request_carries_fixed_client_and_scope(self):
        patcher, session, _ = _patched_session(
            _response(200, {"access_token": "new-at", "refresh_token": "new-rt"})
        )
        with patcher:
            _run(TokenRefreshService().refresh(" old-rt "))

        session.post.assert_awaited_once()
        args, kwargs = session.post.call_args
        assert args[0] == OPENAI_TOKEN_URL
        assert kwargs["data"] == {
            "grant_type": "refresh_token",
            "client_id": OPENAI_CLIENT_ID,
            "refresh_token": "old-rt",
            "scope": OPENAI_OAUTH_SCOPE,
        }
        assert kwargs["timeout"] == REFRESH_TIMEOUT == 60

    def test_rotated_refresh_token_is_returned(self):
        patcher, _, _ = _patched_session(
            _response(200, {"access_token": "new-at", "refresh_token": "new-rt"})
        )
        with patcher:
            tokens = _run(TokenRefreshService().refresh("old-rt"))
        assert tokens == TokenPair(access_token="new-at", refresh_token="new-rt")

    def test_unrotated_refresh_token_echoes_input(self):
        patcher, _, _ = _patched_session(_response(200, {"access_token": "new-at"}))
        with patcher:
            tokens = _run(TokenRefreshService().refresh(" old-rt "))
        assert tokens == TokenPair(access_token="new-at", refresh_token="old-rt")

    def test_missing_access_token_is_rejected(self):
        patcher, _, _ = _patched_session(_response(200, {"token_type": "bearer"}))
        with patcher:
            with pytest.raises(UpstreamRejectedError) as exc_info:
                _run(TokenRefreshService().refresh("old-rt"))
        assert exc_info.value.status == 502
        assert "未返回有效凭证" in exc_info.value.message

    def test_non_success_status_uses_error_description(self):
        payload = {"error": "invalid_grant", "error_description": "Refresh token has been revoked"}
        patcher, _, _ = _patched_session(_response(400, payload))
        with patcher:
            with pytest.raises(UpstreamRejectedError) as exc_info:
                _run(TokenRefreshService().refresh("old-rt"))
        assert exc_info.value.message == "Refresh token has been revoked"

    def test_non_success_status_prefers_nested_error_message(self):
        payload = {"error": {"message": "refresh_token_reused", "type": "invalid_request_error"}}
        patcher, _, _ = _patched_session(_response(401, payload))
        with patcher:
            with pytest.raises(UpstreamRejectedError) as exc_info:
                _run(TokenRefreshService().refresh("old-rt"))
        assert exc_info.value.message == "refresh_token_reused"

    def test_non_success_status_with_plain_error_string(self):
        patcher, _, _ = _patched_session(_response(400, {"error": "invalid_grant"}))
        with patcher:
            with pytest.raises(UpstreamRejectedError) as exc_info:
                _run(TokenRefreshService().refresh("old-rt"))
        assert exc_info.value.message == "invalid_grant"

    def test_non_json_error_body_gets_generic_message(self):
        patcher, _, _ = _patched_session(_response(502, ValueError("not json"), "<html>"))
        with patcher:
            with pytest.raises(UpstreamRejectedError) as exc_info:
                _run(TokenRefreshService().refresh("old-rt"))
        assert exc_info.value.message == "刷新 token 失败"

    def test_transport_error_is_unreachable(self):
        patcher, _, _ = _patched_session(exc=errors.RequestsError("Connection refused"))
        with patcher:
            with pytest.raises(UpstreamUnreachableError) as exc_info:
                _run(TokenRefreshService().refresh("old-rt"))
        assert exc_info.value.status == 503
        assert "Connection refused" in exc_info.value.message
