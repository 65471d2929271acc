import tmilib
from .mocks import MockServer, MockClient

USERNAME = 'testbot'
OAUTH = 'oauth:abcdef123456'


def with_client(*features, connected=True, credentials=None, **options):
    if not features:
        features = (tmilib.client.BasicClient,)
    if features not in with_client.classes:
        with_client.classes[features] = tmilib.featurize(MockClient, *features)

    def inner(f):
        async def run():
            server = MockServer()
            client = with_client.classes[features](
                credentials or tmilib.ConnectionCredentials(USERNAME, OAUTH), mock_server=server, **options)
            if connected:
                await client.connect()

            try:
                return await f(client=client, server=server)
            finally:
                await client.disconnect()
                if client._listener is not None:
                    await client._listener

        run.__name__ = f.__name__
        return run
    return inner

with_client.classes = {}
