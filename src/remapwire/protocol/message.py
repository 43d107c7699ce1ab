""" Class representations of the remapwire messages. There are three closed
    families, one per direction plus the plain acknowledgement:

    :class:`ClientMessage`
        What a control client asks of the daemon.

    :class:`ServerMessage`
        Replies and asynchronous pushes from the daemon.

    :class:`ServerResponse`
        The minimal ``Ok``/``Error`` acknowledgement of a request.

    Each variant is a frozen dataclass registered with its family by name;
    the variant is reachable both as a module attribute and as an attribute
    of the family, so ``ClientMessage.Reload()`` and ``Reload()`` are the
    same thing. Where two families share a variant name (``Error``) only the
    family attribute is unambiguous, the module level names are prefixed.

    The methods here only translate between instances and plain Python
    structures; turning those structures into bytes is left to
    :mod:`remapwire.protocol.wire`.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field, fields as dataclass_fields
from typing import Any, ClassVar, Dict, Optional, Tuple

from .fields import JSON_INT_MIN, STATUS, UINT16_MAX, UINT64_MAX


class DecodeError(ValueError):
    """A payload does not describe any declared variant."""


class EncodeError(TypeError):
    """A message could not be serialized; this is always a programming error."""


class FakeKeyActionMessage(enum.Enum):
    """ The action applied to a named virtual key by an
        :class:`ActOnFakeKey` request. The wire form is the bare name.
    """

    Press = 'Press'
    Release = 'Release'
    Tap = 'Tap'
    Toggle = 'Toggle'


# Field checkers. Each one receives the proposed value and returns the value
# to store, raising TypeError or ValueError if it is unacceptable.

def _string(value):
    if not isinstance(value, str):
        raise TypeError('expected a string, got ' + type(value).__name__)

    # Lone surrogates have no UTF-8 form; UnicodeEncodeError is a ValueError.
    value.encode('utf-8')
    return value


def _unsigned(maximum):

    def check(value):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError('expected an integer, got ' + type(value).__name__)
        if value < 0 or value > maximum:
            raise ValueError('%d is outside the range 0..%d' % (value, maximum))
        return value

    return check


def _boolean(value):
    if isinstance(value, bool):
        return value
    raise TypeError('expected a boolean, got ' + type(value).__name__)


def _strings(value):
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise TypeError('expected a sequence of strings, got ' + type(value).__name__)
    return tuple(_string(item) for item in value)


def _action(value):
    if isinstance(value, FakeKeyActionMessage):
        return value
    if not isinstance(value, str):
        raise TypeError('expected a fake key action, got ' + type(value).__name__)
    try:
        return FakeKeyActionMessage(value)
    except ValueError:
        raise ValueError('unknown fake key action: %r' % (value,)) from None


def _json_value(value):
    """ Accept only what survives a trip through JSON unchanged: dicts with
        string keys, lists, strings, integers, finite floats, booleans and
        None. Tuples become lists, so the stored value is the decoded value.
    """

    if value is None or isinstance(value, bool):
        return value

    if isinstance(value, str):
        return _string(value)

    if isinstance(value, int):
        if value < JSON_INT_MIN or value > UINT64_MAX:
            raise ValueError('%d does not fit in a JSON integer' % (value,))
        return value

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise ValueError('%r has no JSON representation' % (value,))
        return value

    if isinstance(value, (list, tuple)):
        return [_json_value(item) for item in value]

    if isinstance(value, dict):
        result = dict()
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError('object keys must be strings, got ' + type(key).__name__)
            result[_string(key)] = _json_value(item)
        return result

    raise TypeError('%s is not a JSON value' % (type(value).__name__,))


def _required(check):
    return field(metadata={'check': check})


def _optional(check):
    return field(default=None, metadata={'check': check, 'optional': True})


def _is_optional(dataclass_field):
    return dataclass_field.metadata.get('optional', False)


class _Variant:
    """ Common machinery for every message family. A family is a direct
        subclass that declares its own ``variants`` dictionary; every further
        subclass is a variant and registers itself in that dictionary, keyed
        by its wire tag.
    """

    variants: ClassVar[Dict[str, type]]
    tag: ClassVar[str]

    def __init_subclass__(cls, tag=None, **kwargs):
        super().__init_subclass__(**kwargs)

        if 'variants' in cls.__dict__ or cls.__dict__.get('_abstract', False):
            # This is a family or shared plumbing, not a variant.
            return

        if tag is None:
            tag = cls.__name__

        family = cls._family()

        if tag in cls.variants:
            raise TypeError('%s already declares a variant named %r' % (family.__name__, tag))

        cls.tag = tag
        cls.variants[tag] = cls
        setattr(family, tag, cls)


    @classmethod
    def _family(cls):
        for klass in cls.__mro__:
            if 'variants' in klass.__dict__:
                return klass
        raise TypeError(cls.__name__ + ' does not belong to a message family')


    def __post_init__(self):

        for dataclass_field in dataclass_fields(self):
            name = dataclass_field.name
            value = getattr(self, name)

            if value is None and _is_optional(dataclass_field):
                continue

            check = dataclass_field.metadata['check']

            try:
                checked = check(value)
            except TypeError as e:
                raise TypeError('%s.%s: %s' % (self.tag, name, e)) from None
            except ValueError as e:
                raise ValueError('%s.%s: %s' % (self.tag, name, e)) from None

            if checked is not value:
                object.__setattr__(self, name, checked)


    @classmethod
    def is_unit(cls):
        """ Return True if this variant carries no fields at all. A variant
            whose fields are all optional is not a unit variant, even if none
            of them happen to be set.
        """

        return len(dataclass_fields(cls)) == 0


    def to_dict(self) -> Dict[str, Any]:
        """ Return the fields of this message as a dictionary, in declaration
            order, with unset optional fields left out entirely.
        """

        result = dict()

        for dataclass_field in dataclass_fields(self):
            value = getattr(self, dataclass_field.name)

            if value is None and _is_optional(dataclass_field):
                continue

            if isinstance(value, FakeKeyActionMessage):
                value = value.value
            elif isinstance(value, tuple):
                value = list(value)

            result[dataclass_field.name] = value

        return result


    @classmethod
    def _lookup(cls, tag):

        if not isinstance(tag, str):
            raise DecodeError('%s tag must be a string, got %s' % (cls._family().__name__, type(tag).__name__))

        try:
            return cls.variants[tag]
        except KeyError:
            raise DecodeError('unknown %s variant: %r' % (cls._family().__name__, tag)) from None


    @classmethod
    def _from_dict(cls, data):
        """ Build an instance of this variant from the dictionary of fields
            found on the wire. Fields not declared by the variant are ignored.
        """

        kwargs = dict()

        for dataclass_field in dataclass_fields(cls):
            name = dataclass_field.name
            optional = _is_optional(dataclass_field)

            try:
                value = data[name]
            except KeyError:
                if optional:
                    continue
                raise DecodeError('%s is missing required field %r' % (cls.tag, name)) from None

            if value is None and optional:
                continue

            kwargs[name] = value

        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as e:
            raise DecodeError(str(e)) from e


class _ExternallyTagged(_Variant):
    """ Wire form shared by :class:`ClientMessage` and :class:`ServerMessage`:
        ``{"Variant": {fields}}``, or the bare string ``"Variant"`` for a
        variant without fields.
    """

    _abstract = True

    def to_wire(self):
        if self.is_unit():
            return self.tag
        return {self.tag: self.to_dict()}


    @classmethod
    def from_wire(cls, value):
        """ Return the variant described by *value*, a structure as produced
            by :func:`to_wire`. Raises :class:`DecodeError` if the structure
            does not identify exactly one declared variant.
        """

        if isinstance(value, str):
            variant = cls._lookup(value)
            if not variant.is_unit():
                raise DecodeError('%s requires a body' % (variant.tag,))
            return variant()

        if not isinstance(value, dict):
            raise DecodeError('expected a %s, got %s' % (cls._family().__name__, type(value).__name__))

        if len(value) != 1:
            raise DecodeError('expected exactly one %s variant key, got %d' % (cls._family().__name__, len(value)))

        tag, body = next(iter(value.items()))
        variant = cls._lookup(tag)

        if variant.is_unit():
            if body is not None:
                raise DecodeError('%s does not take a body' % (variant.tag,))
            return variant()

        if not isinstance(body, dict):
            raise DecodeError('%s body must be an object, got %s' % (variant.tag, type(body).__name__))

        return variant._from_dict(body)


class ClientMessage(_ExternallyTagged):
    """ A single intent expressed by a control client. Every variant except
        :class:`Authenticate` carries an optional, opaque *session_id*; see
        :mod:`remapwire.protocol.session` for the conventions around it.
    """

    variants: ClassVar[Dict[str, type]] = dict()


    @classmethod
    def from_str(cls, text):
        """ Parse a complete, already buffered line into a
            :class:`ClientMessage`.
        """

        from .wire import decode_client
        return decode_client(text)


class ServerMessage(_ExternallyTagged):
    """ A reply or an unsolicited push from the daemon. """

    variants: ClassVar[Dict[str, type]] = dict()


class ServerResponse(_Variant):
    """ The two-way acknowledgement sent as the direct reply to a request.
        Unlike the other families the discriminator is an explicit ``status``
        field alongside the variant's own fields.
    """

    variants: ClassVar[Dict[str, type]] = dict()

    def to_wire(self):
        result = {STATUS: self.tag}
        result.update(self.to_dict())
        return result


    @classmethod
    def from_wire(cls, value):

        if not isinstance(value, dict):
            raise DecodeError('expected a ServerResponse object, got ' + type(value).__name__)

        try:
            tag = value[STATUS]
        except KeyError:
            raise DecodeError('ServerResponse is missing the %r field' % (STATUS,)) from None

        variant = cls._lookup(tag)
        return variant._from_dict(value)


### ClientMessage variants.

@dataclass(frozen=True)
class Authenticate(ClientMessage):
    token: str = _required(_string)
    client_name: Optional[str] = _optional(_string)


@dataclass(frozen=True)
class ChangeLayer(ClientMessage):
    new: str = _required(_string)
    session_id: Optional[str] = _optional(_string)


@dataclass(frozen=True)
class RequestLayerNames(ClientMessage):
    session_id: Optional[str] = _optional(_string)


@dataclass(frozen=True)
class RequestCurrentLayerInfo(ClientMessage):
    session_id: Optional[str] = _optional(_string)


@dataclass(frozen=True)
class RequestCurrentLayerName(ClientMessage):
    session_id: Optional[str] = _optional(_string)


@dataclass(frozen=True)
class ActOnFakeKey(ClientMessage):
    name: str = _required(_string)
    action: FakeKeyActionMessage = _required(_action)
    session_id: Optional[str] = _optional(_string)


@dataclass(frozen=True)
class SetMouse(ClientMessage):
    x: int = _required(_unsigned(UINT16_MAX))
    y: int = _required(_unsigned(UINT16_MAX))
    session_id: Optional[str] = _optional(_string)


@dataclass(frozen=True)
class Reload(ClientMessage):
    session_id: Optional[str] = _optional(_string)


@dataclass(frozen=True)
class ReloadNext(ClientMessage):
    session_id: Optional[str] = _optional(_string)


@dataclass(frozen=True)
class ReloadPrev(ClientMessage):
    session_id: Optional[str] = _optional(_string)


@dataclass(frozen=True)
class ReloadNum(ClientMessage):
    index: int = _required(_unsigned(UINT64_MAX))
    session_id: Optional[str] = _optional(_string)


@dataclass(frozen=True)
class ReloadFile(ClientMessage):
    path: str = _required(_string)
    session_id: Optional[str] = _optional(_string)


### ServerMessage variants.

@dataclass(frozen=True)
class LayerChange(ServerMessage):
    new: str = _required(_string)


@dataclass(frozen=True)
class LayerNames(ServerMessage):
    names: Tuple[str, ...] = _required(_strings)


@dataclass(frozen=True)
class CurrentLayerInfo(ServerMessage):
    name: str = _required(_string)
    cfg_text: str = _required(_string)


@dataclass(frozen=True)
class ConfigFileReload(ServerMessage):
    new: str = _required(_string)


@dataclass(frozen=True)
class CurrentLayerName(ServerMessage):
    name: str = _required(_string)


@dataclass(frozen=True)
class MessagePush(ServerMessage):
    """ Carries an arbitrary JSON-compatible value; its shape is up to the
        daemon's configuration, nothing here inspects it.
    """

    message: Any = _required(_json_value)


@dataclass(frozen=True)
class ServerError(ServerMessage, tag='Error'):
    msg: str = _required(_string)


@dataclass(frozen=True)
class AuthResult(ServerMessage):
    """ Outcome of an :class:`Authenticate` request. By convention
        *session_id* and *expires_in_seconds* are set if and only if
        *success* is True; the shape itself does not enforce that, use
        :func:`remapwire.protocol.factory.auth_success` and
        :func:`remapwire.protocol.factory.auth_failure` to build one.
    """

    success: bool = _required(_boolean)
    session_id: Optional[str] = _optional(_string)
    expires_in_seconds: Optional[int] = _optional(_unsigned(UINT64_MAX))


@dataclass(frozen=True)
class AuthRequired(ServerMessage):
    pass


@dataclass(frozen=True)
class SessionExpired(ServerMessage):
    pass


### ServerResponse variants.

@dataclass(frozen=True)
class ResponseOk(ServerResponse, tag='Ok'):
    pass


@dataclass(frozen=True)
class ResponseError(ServerResponse, tag='Error'):
    msg: str = _required(_string)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
