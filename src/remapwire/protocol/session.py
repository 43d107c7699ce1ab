""" The session envelope: conventions for the opaque *session_id* carried by
    client requests, and for recognizing the server replies that speak about
    authentication. None of this is a separate wire type; it is a layer of
    meaning on top of :mod:`remapwire.protocol.message`.

    On a connection-oriented transport that is already authenticated the
    token may be left out, the connection itself stands in for it. On a
    connectionless transport every request except
    :class:`~remapwire.protocol.message.Authenticate` is expected to carry
    the token issued in :class:`~remapwire.protocol.message.AuthResult`.
    Whether a token is valid, and for how long, is decided by the credential
    store, never here.
"""

from __future__ import annotations

import dataclasses
from typing import Optional

from .fields import SESSION_ID
from .message import (
    AuthRequired,
    AuthResult,
    Authenticate,
    ClientMessage,
    SessionExpired,
)


def requires_session(message) -> bool:
    """ Return True if *message* is a request that is gated by a session
        when the transport policy calls for one.
    """

    return isinstance(message, ClientMessage) and not isinstance(message, Authenticate)


def session_of(message) -> Optional[str]:
    """ Return the session token carried by *message*, or None. """

    if not requires_session(message):
        return None

    return getattr(message, SESSION_ID)


def with_session(message: ClientMessage, session_id: Optional[str]) -> ClientMessage:
    """ Return a copy of *message* carrying *session_id*. Passing None strips
        any token already present. An :class:`Authenticate` request has no
        session field and is returned as-is.
    """

    if not requires_session(message):
        return message

    return dataclasses.replace(message, **{SESSION_ID: session_id})


def is_auth_error(message) -> bool:
    """ Return True if *message* tells the client to (re-)authenticate
        rather than retry its request.
    """

    if isinstance(message, (AuthRequired, SessionExpired)):
        return True

    if isinstance(message, AuthResult):
        return not message.success

    return False
