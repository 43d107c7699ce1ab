"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`remapwire.protocol` so the protocol remains
transport-agnostic. Creating listeners and accepting connections is left to
the caller; a transport is handed a socket that is already connected.
"""

from __future__ import annotations

import collections
import logging
import socket
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

from .. import config
from ..protocol import wire
from .framing import LineReader

logger = logging.getLogger(__name__)


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """No complete message arrived in time."""


class TransportConnectionError(TransportError):
    """The connection is closed, or could not be used."""


class Transport(ABC):
    """Minimal contract for a wire-level transport."""

    @abstractmethod
    def open(self) -> None:
        """Make the transport ready for use."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection/socket."""

    @abstractmethod
    def send(self, message) -> None:
        """Send one protocol message."""

    @abstractmethod
    def recv(self, timeout: Optional[float] = None):
        """Receive the next protocol message."""

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False


class StreamTransport(Transport):
    """ Exchange framed messages over a connected stream socket, or anything
        with the same ``sendall``/``recv``/``settimeout``/``close`` methods.

        *decode* turns one received line into a message: a client uses the
        default, :func:`remapwire.protocol.wire.decode_server`; a server
        passes :func:`remapwire.protocol.wire.decode_client`.

        Writes are serialized with a lock so that concurrent senders never
        interleave partial frames. Reads are expected from a single thread.
    """

    def __init__(self, sock, decode: Callable = wire.decode_server, recv_size: Optional[int] = None, max_line: Optional[int] = None):

        if recv_size is None:
            recv_size = config.recv_size

        self.socket = sock
        self.decode = decode
        self.recv_size = recv_size
        self.reader = LineReader(max_line)

        self._lines = collections.deque()
        self._send_lock = threading.Lock()
        self._open = sock is not None


    def open(self) -> None:

        if self.socket is None:
            raise TransportConnectionError('no connected socket to open')

        self._open = True


    def close(self) -> None:

        self._open = False
        self._lines.clear()

        sock = self.socket
        self.socket = None

        if sock is None:
            return

        try:
            sock.close()
        except OSError:
            logger.debug('error closing socket', exc_info=True)

        pending = self.reader.pending
        if pending:
            logger.debug('discarding %d unframed bytes on close', pending)
        self.reader = LineReader(self.reader.max_line)


    @property
    def is_open(self) -> bool:
        return self._open


    def send(self, message) -> None:

        if not self._open:
            raise TransportConnectionError('transport is closed')

        data = wire.encode(message)

        with self._send_lock:
            try:
                self.socket.sendall(data)
            except OSError as e:
                raise TransportConnectionError('send failed: %s' % (e,)) from e


    def recv(self, timeout: Optional[float] = None):
        """ Return the next decoded message. *timeout* applies to each
            underlying socket read; None blocks indefinitely.

            A :class:`remapwire.protocol.DecodeError` propagates to the caller,
            who should close the transport. A peer that closes the connection
            cleanly raises :class:`TransportConnectionError`; if it did so in
            the middle of a message,
            :class:`remapwire.protocol.IncompleteMessage` is raised instead.
        """

        if not self._open:
            raise TransportConnectionError('transport is closed')

        while not self._lines:
            self.reader.check()
            self.socket.settimeout(timeout)

            try:
                data = self.socket.recv(self.recv_size)
            except socket.timeout:
                raise TransportTimeout('no message within %s sec' % (timeout,)) from None
            except OSError as e:
                raise TransportConnectionError('recv failed: %s' % (e,)) from e

            if not data:
                self._open = False
                self.reader.close()
                raise TransportConnectionError('connection closed by peer')

            self._lines.extend(self.reader.feed(data))

        line = self._lines.popleft()
        return self.decode(line)
