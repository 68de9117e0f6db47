"""Mock aiohttp helpers shared by the client tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock, Mock


def make_response(status: int = 200, payload: Any = None, reason: str = "OK", headers=None) -> Mock:
    """Create a mock aiohttp response."""
    response = Mock()
    response.status = status
    response.reason = reason
    response.headers = headers or {}
    if isinstance(payload, Exception):
        response.json = AsyncMock(side_effect=payload)
    else:
        response.json = AsyncMock(return_value=payload)
    return response


def make_session(response: Mock | None = None, error: Exception | None = None) -> Mock:
    """Create a mock aiohttp session whose post() yields ``response``."""
    session = Mock()
    session.closed = False
    session.close = AsyncMock()
    if error is not None:
        session.post = Mock(side_effect=error)
    else:
        ctx = MagicMock()
        ctx.__aenter__ = AsyncMock(return_value=response)
        ctx.__aexit__ = AsyncMock(return_value=False)
        session.post = Mock(return_value=ctx)
    return session
