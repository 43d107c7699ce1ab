""" Process-wide defaults for remapwire, read once from the environment when
    the module is first imported. Everything here can also be overridden per
    instance; the environment only establishes the starting point.

    ``REMAPWIRE_REQUIRE_SESSION``
        Whether a :class:`remapwire.transport.session.RequestServer` gates
        requests behind a session token by default. Set this for
        connectionless transports.

    ``REMAPWIRE_MAX_LINE``
        Longest accepted line, in bytes, before a reader gives up on the
        connection. Zero disables the check.

    ``REMAPWIRE_RECV_SIZE``
        Number of bytes requested from the socket per read.
"""

import os


_true = ('1', 'true', 'yes', 'on')
_false = ('0', 'false', 'no', 'off')


def _boolean(name, default):

    raw = os.environ.get(name)

    if raw is None or raw.strip() == '':
        return default

    lowered = raw.strip().lower()

    if lowered in _true:
        return True
    if lowered in _false:
        return False

    raise ValueError('%s must be a boolean (0/1), got %r' % (name, raw))


def _integer(name, default, minimum=0):

    raw = os.environ.get(name)

    if raw is None or raw.strip() == '':
        return default

    try:
        value = int(raw)
    except ValueError:
        raise ValueError('%s must be an integer, got %r' % (name, raw)) from None

    if value < minimum:
        raise ValueError('%s must be at least %d, got %d' % (name, minimum, value))

    return value


require_session = _boolean('REMAPWIRE_REQUIRE_SESSION', False)
max_line = _integer('REMAPWIRE_MAX_LINE', 1048576)
recv_size = _integer('REMAPWIRE_RECV_SIZE', 4096, minimum=1)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
