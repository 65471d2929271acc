import tmilib

from pytest import mark
from .fixtures import with_client, USERNAME
from .mocks import MockClient, MockServer, MockConnection


@mark.asyncio
@mark.meta
@with_client(connected=False)
async def test_fixtures_with_client(server, client):
    assert isinstance(server, MockServer)
    assert isinstance(client, MockClient)
    assert client.__class__.__mro__[1] is MockClient, 'MockClient should be first in method resolution order'

    assert not client.connected


@mark.asyncio
@mark.meta
@with_client(tmilib.features.WhisperSupport, connected=False)
async def test_fixtures_with_client_features(server, client):
    assert isinstance(client, MockClient)
    assert client.__class__.__mro__[1] is MockClient, 'MockClient should be first in method resolution order'
    assert isinstance(client, tmilib.features.WhisperSupport)


@mark.asyncio
@mark.meta
@with_client(credentials=tmilib.ConnectionCredentials('Test_Runner', 'abc'), connected=False)
async def test_fixtures_with_client_credentials(server, client):
    assert client.username == 'test_runner'
    assert client.credentials.oauth == 'oauth:abc'


@mark.asyncio
@mark.meta
@with_client()
async def test_fixtures_with_client_connected(server, client):
    assert client.connected
    assert client.username == USERNAME
    assert isinstance(client.connection, MockConnection)
    assert server.connection is client.connection
