''' Wrapper module to select the most performant available library to handle
    the equivalent of :func:`json.loads` and :func:`json.dumps`. Both
    backends emit compact UTF-8 bytes, with control characters inside
    strings escaped; an encoded value therefore never contains a raw newline,
    which is what allows one value per line on the wire.
'''

# The business about conditionally importing the libraries is intended to
# avoid importing less efficient libraries if they are not available. orjson
# is the declared dependency; msgspec is picked up when the optional extra
# is installed.

msgspec = None
orjson = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    import orjson


if msgspec is not None:
    backend = 'msgspec'
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
    JSONEncodeError = (msgspec.EncodeError, TypeError, ValueError, OverflowError)
    JSONDecodeError = (msgspec.DecodeError, UnicodeDecodeError)
else:
    backend = 'orjson'
    dumps = orjson.dumps
    loads = orjson.loads
    JSONEncodeError = (orjson.JSONEncodeError, TypeError, ValueError, OverflowError)
    JSONDecodeError = (orjson.JSONDecodeError, UnicodeDecodeError)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
