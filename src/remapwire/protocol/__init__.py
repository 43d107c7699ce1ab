from . import fields
from . import message
from . import wire
from . import session
from . import factory

from .message import (
    ClientMessage,
    ServerMessage,
    ServerResponse,
    FakeKeyActionMessage,
    DecodeError,
    EncodeError,
)
from .wire import (
    IncompleteMessage,
    encapsulate,
    encode,
    decode_client,
    decode_server,
    decode_server_message,
    decode_response,
    split_frames,
)


"""
remapwire Protocol Layer
========================

This package defines the messages exchanged between a keyboard-remapping
daemon and its control clients, and how they are written to and read from
a byte stream. It has no knowledge of sockets.

The protocol layer MUST NOT depend on any transport implementation.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

User Code
    │
    ▼
Session Envelope (session.py, factory.py)
    Conventions layered on the schema
    - requires_session() / with_session()
    - is_auth_error()
    - auth_success() / auth_failure()

    │
    ▼
Wire Codec (wire.py)
    One compact JSON value per line
    - encode()
    - decode_client() / decode_server()
    - split_frames()

    │
    ▼
Message Model (message.py)
    Immutable, closed variant families
    - ClientMessage
    - ServerMessage
    - ServerResponse
    - FakeKeyActionMessage

    │
    ▼
Field Vocabulary (fields.py)
    Canonical names for discriminators and shared fields

---------------------------------------------------------------------

Below the Protocol Layer (for context)
--------------------------------------

Session Layer (remapwire.transport.session)
    Authentication gating, request dispatch
    Credential store is an external collaborator

Framing (remapwire.transport.framing)
    Reassembles lines from partial reads

Transport (remapwire.transport.base)
    Moves bytes over an already-connected socket

---------------------------------------------------------------------

Wire Format
-----------

    ServerResponse                {"status":"Ok"}
                                  {"status":"Error","msg":"..."}

    ClientMessage, ServerMessage  {"ChangeLayer":{"new":"qwerty"}}
                                  "AuthRequired"

Unset optional fields are omitted, never written as null. A tag that does
not name a declared variant is a DecodeError.

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
