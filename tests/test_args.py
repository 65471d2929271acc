from pytest import raises

import tmilib
from tmilib.utils import _args


def test_client_from_args():
    client, args = _args.client_from_args('test', 'Test client.', argv=[
        '-u', 'TestBot', '-o', 'abcdef', '-c', '!', '-c', '?', '--replace-emotes', '-w', 'bob', 'hi there'])

    assert isinstance(client, tmilib.Client)
    assert client.username == 'testbot'
    assert client.credentials.oauth == 'oauth:abcdef'
    assert client.credentials.port == 6667
    assert client.command_identifiers == {'!', '?'}
    assert client.replace_emotes
    assert args.whisper == ['bob', 'hi there']


def test_client_from_args_tls():
    client, _ = _args.client_from_args('test', 'Test client.', argv=[
        '-u', 'testbot', '-o', 'abc', '--tls', '-s', 'localhost'])

    assert client.credentials.tls
    assert client.credentials.port == 6697
    assert client.credentials.host == 'localhost'


def test_client_from_args_environment(monkeypatch):
    monkeypatch.setenv(_args.USERNAME_ENV, 'envbot')
    monkeypatch.setenv(_args.OAUTH_ENV, 'oauth:fromenv')

    # Defaults are read when the parser is built.
    client, _ = _args.client_from_args('test', 'Test client.', cls=tmilib.WhisperClient, argv=[])
    assert isinstance(client, tmilib.WhisperClient)
    assert client.username == 'envbot'
    assert client.credentials.oauth == 'oauth:fromenv'


def test_client_from_args_missing_credentials(monkeypatch):
    monkeypatch.delenv(_args.USERNAME_ENV, raising=False)
    monkeypatch.delenv(_args.OAUTH_ENV, raising=False)

    with raises(SystemExit):
        _args.client_from_args('test', 'Test client.', argv=['-u', 'testbot'])
