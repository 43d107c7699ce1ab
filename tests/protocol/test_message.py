import dataclasses
import pytest

import remapwire
from remapwire.protocol import message
from remapwire.protocol import wire
from remapwire.protocol.message import (
    ClientMessage,
    FakeKeyActionMessage,
    ServerMessage,
    ServerResponse,
)


def test_families():

    assert set(ClientMessage.variants) == set((
        'Authenticate', 'ChangeLayer', 'RequestLayerNames',
        'RequestCurrentLayerInfo', 'RequestCurrentLayerName', 'ActOnFakeKey',
        'SetMouse', 'Reload', 'ReloadNext', 'ReloadPrev', 'ReloadNum',
        'ReloadFile'))

    assert set(ServerMessage.variants) == set((
        'LayerChange', 'LayerNames', 'CurrentLayerInfo', 'ConfigFileReload',
        'CurrentLayerName', 'MessagePush', 'Error', 'AuthResult',
        'AuthRequired', 'SessionExpired'))

    assert set(ServerResponse.variants) == set(('Ok', 'Error'))

    # The same name in two families must resolve to distinct classes.

    assert ServerMessage.Error is message.ServerError
    assert ServerResponse.Error is message.ResponseError
    assert ServerMessage.Error is not ServerResponse.Error

    assert ClientMessage.Reload is message.Reload
    assert remapwire.ClientMessage is ClientMessage


def test_immutable():

    request = ClientMessage.ChangeLayer(new='qwerty')

    with pytest.raises(dataclasses.FrozenInstanceError):
        request.new = 'dvorak'


def test_optional_defaults():

    assert ClientMessage.Reload().session_id is None
    assert ClientMessage.Authenticate(token='t').client_name is None

    result = ServerMessage.AuthResult(success=False)
    assert result.session_id is None
    assert result.expires_in_seconds is None


def test_unit_variants():

    assert ServerMessage.AuthRequired.is_unit()
    assert ServerMessage.SessionExpired.is_unit()
    assert ServerResponse.Ok.is_unit()

    # All fields optional is still not a unit variant.

    assert not ClientMessage.Reload.is_unit()

    assert ServerMessage.AuthRequired() == ServerMessage.AuthRequired()
    assert ServerMessage.AuthRequired() != ServerMessage.SessionExpired()


def test_equality_is_per_variant():

    assert ServerMessage.Error(msg='x') != ServerResponse.Error(msg='x')
    assert ServerMessage.LayerChange(new='a') != ServerMessage.ConfigFileReload(new='a')
    assert ServerMessage.LayerChange(new='a') == ServerMessage.LayerChange(new='a')


def test_fake_key_action():

    request = ClientMessage.ActOnFakeKey(name='esc', action='Tap')
    assert request.action is FakeKeyActionMessage.Tap

    request = ClientMessage.ActOnFakeKey(name='esc', action=FakeKeyActionMessage.Toggle)
    assert request.action is FakeKeyActionMessage.Toggle

    with pytest.raises(ValueError):
        ClientMessage.ActOnFakeKey(name='esc', action='Smash')

    with pytest.raises(TypeError):
        ClientMessage.ActOnFakeKey(name='esc', action=1)

    assert [action.value for action in FakeKeyActionMessage] == ['Press', 'Release', 'Tap', 'Toggle']


def test_field_validation():

    ClientMessage.SetMouse(x=0, y=65535)

    with pytest.raises(ValueError):
        ClientMessage.SetMouse(x=65536, y=0)

    with pytest.raises(ValueError):
        ClientMessage.SetMouse(x=-1, y=0)

    with pytest.raises(TypeError):
        ClientMessage.SetMouse(x=1.5, y=0)

    with pytest.raises(TypeError):
        ClientMessage.SetMouse(x=True, y=0)

    with pytest.raises(TypeError):
        ClientMessage.ChangeLayer(new=None)

    with pytest.raises(TypeError):
        ClientMessage.ChangeLayer(new='base', session_id=5)

    with pytest.raises(ValueError):
        ClientMessage.ReloadNum(index=-1)

    with pytest.raises(TypeError):
        ServerMessage.AuthResult(success=1)

    with pytest.raises(TypeError):
        ServerMessage.LayerNames(names='base')

    with pytest.raises(TypeError):
        ServerMessage.LayerNames(names=['base', 2])

    with pytest.raises(TypeError):
        ClientMessage.ChangeLayer()


def test_layer_names_order():

    names = ServerMessage.LayerNames(names=['base', 'nav', 'sym'])
    assert names.names == ('base', 'nav', 'sym')
    assert names.to_dict() == {'names': ['base', 'nav', 'sym']}


def test_to_wire():

    assert ServerResponse.Ok().to_wire() == {'status': 'Ok'}
    assert ServerResponse.Error(msg='test').to_wire() == {'status': 'Error', 'msg': 'test'}

    assert ServerMessage.AuthRequired().to_wire() == 'AuthRequired'
    assert ClientMessage.Reload().to_wire() == {'Reload': {}}

    request = ClientMessage.ActOnFakeKey(name='esc', action='Press', session_id='s')
    assert request.to_wire() == {'ActOnFakeKey': {'name': 'esc', 'action': 'Press', 'session_id': 's'}}


def test_from_wire_unknown_tag():

    with pytest.raises(remapwire.DecodeError):
        ClientMessage.from_wire({'SelfDestruct': {}})

    with pytest.raises(remapwire.DecodeError):
        ServerMessage.from_wire('Hello')

    with pytest.raises(remapwire.DecodeError):
        ServerResponse.from_wire({'status': 'Maybe'})

    # A tag from another family is just as unknown.

    with pytest.raises(remapwire.DecodeError):
        ClientMessage.from_wire({'LayerChange': {'new': 'base'}})


def test_from_wire_shapes():

    with pytest.raises(remapwire.DecodeError):
        ClientMessage.from_wire({'Reload': {}, 'ReloadNext': {}})

    with pytest.raises(remapwire.DecodeError):
        ClientMessage.from_wire({'ChangeLayer': 'base'})

    with pytest.raises(remapwire.DecodeError):
        ClientMessage.from_wire(['ChangeLayer', {'new': 'base'}])

    # A variant with fields cannot be named bare.

    with pytest.raises(remapwire.DecodeError):
        ClientMessage.from_wire('Reload')

    with pytest.raises(remapwire.DecodeError):
        ServerMessage.from_wire({'AuthRequired': {'x': 1}})

    assert ServerMessage.from_wire({'AuthRequired': None}) == ServerMessage.AuthRequired()


def test_from_wire_fields():

    with pytest.raises(remapwire.DecodeError):
        ClientMessage.from_wire({'ChangeLayer': {}})

    with pytest.raises(remapwire.DecodeError):
        ClientMessage.from_wire({'SetMouse': {'x': 1}})

    with pytest.raises(remapwire.DecodeError):
        ClientMessage.from_wire({'SetMouse': {'x': 1, 'y': 70000}})

    with pytest.raises(remapwire.DecodeError):
        ClientMessage.from_wire({'ChangeLayer': {'new': None}})

    with pytest.raises(remapwire.DecodeError):
        ServerResponse.from_wire({'status': 'Error'})

    # Null for an optional field means the same as leaving it out.

    decoded = ClientMessage.from_wire({'Reload': {'session_id': None}})
    assert decoded == ClientMessage.Reload()

    # Fields the variant does not declare are ignored.

    decoded = ClientMessage.from_wire({'ChangeLayer': {'new': 'base', 'colour': 'red'}})
    assert decoded == ClientMessage.ChangeLayer(new='base')


def test_message_push_payload():

    payload = {'nested': [1, 2, {'three': None}], 'flag': True}
    push = ServerMessage.MessagePush(message=payload)
    assert ServerMessage.from_wire(push.to_wire()) == push

    # The payload may itself be null; it is required, not optional.

    push = ServerMessage.MessagePush(message=None)
    assert push.to_wire() == {'MessagePush': {'message': None}}
    assert ServerMessage.from_wire({'MessagePush': {'message': None}}) == push

    with pytest.raises(remapwire.DecodeError):
        ServerMessage.from_wire({'MessagePush': {}})


def test_message_push_json_only():

    # Tuples are stored as the lists they will decode to.

    push = ServerMessage.MessagePush(message=(1, (2, 3), {'four': (5,)}))
    assert push.message == [1, [2, 3], {'four': [5]}]
    assert wire.decode_server(wire.encode(push)) == push

    for bad in (float('nan'), float('inf'), {'v': float('-inf')}, [float('nan')]):
        with pytest.raises(ValueError):
            ServerMessage.MessagePush(message=bad)

    for bad in (object(), {None: 'none'}, {1: 'one'}, b'bytes', set((1,)), [object()]):
        with pytest.raises(TypeError):
            ServerMessage.MessagePush(message=bad)

    with pytest.raises(ValueError):
        ServerMessage.MessagePush(message=2 ** 64)

    with pytest.raises(ValueError):
        ServerMessage.MessagePush(message={'text': '\ud800'})

    with pytest.raises(ValueError):
        ClientMessage.ChangeLayer(new='\ud800')

    # The widest integers and ordinary floats survive unchanged.

    push = ServerMessage.MessagePush(message=[2 ** 64 - 1, -2 ** 63, 0.1, -0.0])
    assert wire.decode_server(wire.encode(push)) == push


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
