"""Newline framing for a continuous byte stream.

A socket read may return half a message, or several messages at once. The
:class:`LineReader` holds on to whatever has arrived so far and hands back
each complete line, in arrival order, as soon as its newline shows up.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .. import config
from ..protocol.fields import NEWLINE
from ..protocol.message import DecodeError
from ..protocol.wire import IncompleteMessage

logger = logging.getLogger(__name__)


class LineReader:
    """ Reassemble newline-terminated payloads from arbitrary chunks.

        *max_line* bounds how many bytes a single line may occupy; None uses
        :data:`remapwire.config.max_line`, zero disables the check. Lines
        completed ahead of an oversized one are still returned, in order;
        the :class:`DecodeError` for the oversized line is raised by the
        following :func:`check`, :func:`feed` or :func:`close`. After that
        the reader should be discarded along with the connection.
    """

    def __init__(self, max_line: Optional[int] = None):

        if max_line is None:
            max_line = config.max_line

        self.max_line = max_line
        self._buffer = bytearray()
        self._error = None


    @property
    def pending(self) -> int:
        """Number of bytes buffered that do not yet form a complete line."""
        return len(self._buffer)


    @property
    def failed(self) -> bool:
        """True once an oversized line has been seen."""
        return self._error is not None


    def check(self) -> None:
        """Raise the deferred :class:`DecodeError`, if there is one."""

        if self._error is not None:
            raise DecodeError(self._error)


    def feed(self, data: bytes) -> List[bytes]:
        """ Append *data* to the buffer and return every line completed by
            it, without the newline. Blank lines are skipped.
        """

        self.check()

        self._buffer.extend(data)
        lines = list()

        while True:
            index = self._buffer.find(NEWLINE)
            if index < 0:
                break

            line = bytes(self._buffer[:index])
            del self._buffer[:index + 1]

            if self._too_long(len(line)):
                break

            if line.strip():
                lines.append(line)

        if self._error is None:
            self._too_long(len(self._buffer))

        if self._error is not None and not lines:
            self.check()

        return lines


    def _too_long(self, length):

        if self.max_line and length > self.max_line:
            logger.debug('line of %d bytes exceeds the %d byte limit', length, self.max_line)
            self._buffer.clear()
            self._error = 'line exceeds %d bytes' % (self.max_line,)
            return True

        return False


    def close(self) -> None:
        """ Signal end of stream. Raises :class:`IncompleteMessage` if a
            partial line is still buffered, or the deferred
            :class:`DecodeError` if an oversized line was seen; the buffer is
            emptied either way.
        """

        remainder = bytes(self._buffer)
        self._buffer.clear()

        self.check()

        if remainder.strip():
            logger.debug('stream ended with %d unframed bytes', len(remainder))
            raise IncompleteMessage('stream ended partway through a message (%d bytes)' % (len(remainder),))
