"""Convenience constructors for protocol messages."""

from __future__ import annotations

from typing import Any

from .message import (
    AuthResult,
    MessagePush,
    ResponseError,
    ResponseOk,
    ServerError,
)


def ok() -> ResponseOk:
    return ResponseOk()


def error(msg: str) -> ResponseError:
    """Acknowledge a request that failed for a domain reason."""
    return ResponseError(msg=msg)


def server_error(msg: str) -> ServerError:
    return ServerError(msg=msg)


def push(message: Any) -> MessagePush:
    return MessagePush(message=message)


def auth_success(session_id: str, expires_in_seconds: int) -> AuthResult:
    """Issue a session; both optional fields are always populated."""

    if session_id is None or expires_in_seconds is None:
        raise ValueError('a successful AuthResult needs a session_id and an expiry')

    return AuthResult(
        success=True,
        session_id=session_id,
        expires_in_seconds=expires_in_seconds,
    )


def auth_failure() -> AuthResult:
    """Reject credentials; neither optional field is populated."""
    return AuthResult(success=False)
