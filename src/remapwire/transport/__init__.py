"""Transport layer: framing, the transport contract, and session handling."""

from .base import (
    Transport,
    StreamTransport,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
)
from .framing import LineReader
from .session import (
    AuthenticationError,
    ClientSession,
    CredentialStore,
    RequestServer,
    SessionState,
)
