""" Python implementation of the remapwire control protocol, spoken between a
    keyboard-remapping daemon and the clients that drive it: the message
    schema, the line-framed JSON wire codec, and the session conventions for
    transports that do not authenticate per connection.
"""

# Utility components.

from . import json
from . import config

# Submodules used by multiple other components.

from . import protocol
from . import transport

# Primary public-facing interfaces.

from .protocol import (
    ClientMessage,
    ServerMessage,
    ServerResponse,
    FakeKeyActionMessage,
    DecodeError,
    EncodeError,
    IncompleteMessage,
    encode,
    decode_client,
    decode_server,
)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
