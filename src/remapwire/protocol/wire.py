""" Encode messages to, and decode messages from, the bytes that go on the
    wire. Every message is a single compact JSON value followed by a single
    newline byte; nothing else separates or prefixes messages.

    Encoding is total for well-formed messages: a failure is a programming
    error and surfaces as :class:`EncodeError`. Decoding is where runtime
    faults show up; every way a payload can be wrong is reported as a
    :class:`DecodeError`, and the caller is expected to reset the affected
    connection rather than guess what the sender meant.
"""

from __future__ import annotations

from typing import List, Union

from .. import json
from .fields import NEWLINE, STATUS
from .message import (
    ClientMessage,
    DecodeError,
    EncodeError,
    ServerMessage,
    ServerResponse,
)


class IncompleteMessage(Exception):
    """ The stream ended, or a buffer was split, partway through a message.
        This is not a decode failure: the missing bytes may simply not have
        arrived yet.
    """


Data = Union[bytes, bytearray, memoryview, str]


def encapsulate(message) -> bytes:
    """ Return the JSON encoding of *message*, without the trailing newline.
    """

    try:
        structure = message.to_wire()
    except AttributeError:
        raise EncodeError('not a remapwire message: %r' % (message,)) from None

    try:
        return json.dumps(structure)
    except json.JSONEncodeError as e:
        raise EncodeError('cannot encode %r: %s' % (message, e)) from e


def encode(message) -> bytes:
    """ Return the framed wire representation of *message*: its JSON encoding
        followed by a newline.
    """

    return encapsulate(message) + NEWLINE


def _load(data: Data):

    if isinstance(data, (bytearray, memoryview)):
        data = bytes(data)

    if not data or not data.strip():
        raise DecodeError('empty payload')

    try:
        return json.loads(data)
    except json.JSONDecodeError as e:
        raise DecodeError('malformed JSON: %s' % (e,)) from e


def decode_client(data: Data) -> ClientMessage:
    """ Decode one server-side inbound payload. A trailing newline, if
        present, is ignored.
    """

    return ClientMessage.from_wire(_load(data))


def decode_server_message(data: Data) -> ServerMessage:
    return ServerMessage.from_wire(_load(data))


def decode_response(data: Data) -> ServerResponse:
    return ServerResponse.from_wire(_load(data))


def decode_server(data: Data) -> Union[ServerMessage, ServerResponse]:
    """ Decode one client-side inbound payload, which may be either a
        :class:`ServerResponse` or a :class:`ServerMessage`. The two are told
        apart by the presence of the ``status`` field; no variant of
        :class:`ServerMessage` is named ``status``, so there is no overlap.
    """

    structure = _load(data)

    if isinstance(structure, dict) and STATUS in structure:
        return ServerResponse.from_wire(structure)

    return ServerMessage.from_wire(structure)


def split_frames(data: Data) -> List[bytes]:
    """ Split a buffer holding one or more complete frames into the
        individual payloads, in order. The buffer must end on a frame
        boundary; trailing bytes after the last newline raise
        :class:`IncompleteMessage`. Use
        :class:`remapwire.transport.framing.LineReader` when reading
        incrementally from a stream.
    """

    if isinstance(data, str):
        data = data.encode('utf-8')
    else:
        data = bytes(data)

    *complete, remainder = data.split(NEWLINE)

    if remainder.strip():
        raise IncompleteMessage('%d bytes follow the last newline' % (len(remainder),))

    return [payload for payload in complete if payload.strip()]


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
