"""Transport-agnostic session layer.

:class:`RequestServer` is the daemon side: it decodes a request, applies the
session policy in force, and hands the request to :func:`req_handler`.
:class:`ClientSession` is the control client side: it remembers the session
issued by the daemon and stamps it onto every request.

Validating tokens and issuing sessions is the business of a
:class:`CredentialStore`, which the daemon supplies.
"""

from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple

from .. import config
from ..protocol import factory
from ..protocol import session
from ..protocol import wire
from ..protocol.message import (
    AuthRequired,
    AuthResult,
    Authenticate,
    ClientMessage,
    DecodeError,
    ServerMessage,
    ServerResponse,
    SessionExpired,
)
from .base import Transport

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    VALID = 'valid'
    EXPIRED = 'expired'
    UNKNOWN = 'unknown'


class AuthenticationError(Exception):
    """ The daemon refused a request for authentication reasons. The reply
        that caused it is available as *reply*; the client should
        authenticate again rather than repeat the request.
    """

    def __init__(self, reply):
        self.reply = reply
        Exception.__init__(self, 'authentication refused: ' + reply.tag)


class CredentialStore(ABC):
    """Contract for the collaborator that issues and validates sessions."""

    @abstractmethod
    def authenticate(self, token: str, client_name: Optional[str] = None) -> Optional[Tuple[str, int]]:
        """ Return ``(session_id, expires_in_seconds)`` for an accepted
            *token*, or None to reject it.
        """

    @abstractmethod
    def check(self, session_id: str) -> SessionState:
        """Report whether *session_id* names a live session."""


class RequestServer:
    """ Server-side request handling. Subclasses override
        :func:`req_handler` to act on requests that made it past the session
        check.

        *require_session* defaults to :data:`remapwire.config.require_session`.
        When it is False, as on a stream socket that is authenticated by
        virtue of being connected, requests without a token are served.
        Authenticate requests are answered whenever a credential store is
        present.
    """

    def __init__(self, credentials: Optional[CredentialStore] = None, require_session: Optional[bool] = None):

        if require_session is None:
            require_session = config.require_session

        if require_session and credentials is None:
            raise ValueError('a credential store is required when sessions are enforced')

        self.credentials = credentials
        self.require_session = require_session


    # --- request handling hooks ---
    def req_handler(self, request: ClientMessage):
        """Override in subclasses.

        Return:
          - a ServerMessage or ServerResponse -> sent as the reply
          - an iterable of them               -> sent in order
          - None                              -> nothing is sent

        Raising an exception produces a ``ServerResponse.Error`` carrying the
        exception text.
        """

        return factory.ok()


    def handle(self, line) -> List:
        """ Decode one inbound line and return the replies for it. A line
            that does not decode raises :class:`DecodeError`; nothing about it
            has been acted on, and the caller should reset the connection.
        """

        try:
            request = wire.decode_client(line)
        except DecodeError as e:
            logger.warning('undecodable request: %s', e)
            raise

        return self.dispatch(request)


    def dispatch(self, request: ClientMessage) -> List:
        """Apply the session policy to a decoded request and run it."""

        if isinstance(request, Authenticate):
            return [self._authenticate(request)]

        if self.require_session:
            refusal = self._gate(request)
            if refusal is not None:
                return [refusal]

        try:
            replies = self.req_handler(request)
        except Exception as e:
            logger.exception('%s handler failed', request.tag)
            return [factory.error(str(e))]

        if replies is None:
            return []

        if isinstance(replies, (ServerMessage, ServerResponse)):
            return [replies]

        return list(replies)


    def encode_replies(self, replies: Iterable) -> bytes:
        """Frame *replies* for a single write."""
        return b''.join(wire.encode(reply) for reply in replies)


    # --- internal ---
    def _authenticate(self, request: Authenticate) -> AuthResult:

        client = request.client_name or '<unnamed>'

        if self.credentials is None:
            logger.info('authentication from %s refused: no credential store', client)
            return factory.auth_failure()

        issued = self.credentials.authenticate(request.token, request.client_name)

        if issued is None:
            logger.info('authentication from %s rejected', client)
            return factory.auth_failure()

        session_id, expires_in_seconds = issued
        logger.info('session issued to %s, expires in %d sec', client, expires_in_seconds)
        return factory.auth_success(session_id, expires_in_seconds)


    def _gate(self, request: ClientMessage) -> Optional[ServerMessage]:
        """Return the refusal for *request*, or None if it may proceed."""

        session_id = session.session_of(request)

        if session_id is None:
            logger.debug('%s without a session', request.tag)
            return AuthRequired()

        state = self.credentials.check(session_id)

        if state is SessionState.VALID:
            return None

        if state is SessionState.EXPIRED:
            logger.debug('%s with an expired session', request.tag)
            return SessionExpired()

        logger.debug('%s with an unknown session', request.tag)
        return AuthRequired()


class ClientSession:
    """ Client-side request/reply logic on top of a :class:`Transport`.
        Replies are read in order; any pushes the daemon sends ahead of a
        reply are returned as they come, use :func:`recv` to drain them.
    """

    timeout = 5.0

    def __init__(self, transport: Transport, client_name: Optional[str] = None):
        self.transport = transport
        self.client_name = client_name
        self.session_id: Optional[str] = None
        self.expires_in_seconds: Optional[int] = None


    @property
    def authenticated(self) -> bool:
        return self.session_id is not None


    def authenticate(self, token: str) -> AuthResult:
        """ Exchange *token* for a session. Raises
            :class:`AuthenticationError` if the daemon does not issue one,
            including a successful AuthResult that carries no session id.
        """

        self.transport.send(Authenticate(token=token, client_name=self.client_name))
        reply = self.transport.recv(self.timeout)

        if isinstance(reply, AuthResult) and reply.success and reply.session_id is None:
            logger.warning('daemon reported success without issuing a session')
        elif isinstance(reply, AuthResult) and reply.success:
            self.session_id = reply.session_id
            self.expires_in_seconds = reply.expires_in_seconds
            logger.debug('authenticated, session expires in %s sec', reply.expires_in_seconds)
            return reply

        self._forget()
        raise AuthenticationError(reply)


    def request(self, message: ClientMessage):
        """ Send *message*, stamped with the current session unless it
            already carries one, and return the next message received.
        """

        if self.session_id is not None and session.session_of(message) is None:
            message = session.with_session(message, self.session_id)

        self.transport.send(message)
        reply = self.transport.recv(self.timeout)

        if session.is_auth_error(reply):
            self._forget()
            raise AuthenticationError(reply)

        return reply


    def recv(self, timeout: Optional[float] = None):
        return self.transport.recv(timeout)


    def _forget(self):
        self.session_id = None
        self.expires_in_seconds = None
