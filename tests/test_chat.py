import pytest

import tmilib
from tmilib.features import ChatSupport
from .fixtures import with_client
from .lines import CHAT, chat


@pytest.mark.asyncio
@with_client(ChatSupport)
async def test_chat_message_received(server, client):
    messages = []
    client.subscribe('message_received', messages.append)
    await server.send(CHAT)

    assert len(messages) == 1
    message = messages[0]
    assert isinstance(message, tmilib.ChatMessage)
    assert message.channel == 'swiftyspiffy'
    assert message.username == 'swiftyspiffyv4'
    assert message.message == 'asd'
    assert message.is_broadcaster


@pytest.mark.asyncio
@with_client(ChatSupport, legacy_broadcaster_check=False)
async def test_chat_broadcaster_check(server, client):
    messages = []
    client.subscribe('message_received', messages.append)
    await server.send(CHAT)
    await server.send(chat('hi', user='swiftyspiffy'))

    assert [message.is_broadcaster for message in messages] == [False, True]


@pytest.mark.asyncio
@with_client(ChatSupport, command_identifier='!')
async def test_chat_command(server, client):
    commands = []
    client.subscribe('command_received', commands.append)
    await server.send(chat('!roll 2 d6'))

    assert len(commands) == 1
    assert commands[0].command == 'roll'
    assert commands[0].arguments == ['2', 'd6']
    assert commands[0].message.channel == 'swiftyspiffy'


@pytest.mark.asyncio
@with_client(ChatSupport)
async def test_chat_emotes_registered(server, client):
    await server.send(chat('Kappa hello', tags='emotes=25:0-4'))

    assert '25' in client.emotes
    assert client.emotes.get('25').text == 'Kappa'


@pytest.mark.asyncio
@with_client(ChatSupport, replace_emotes=True)
async def test_chat_replace_emotes(server, client):
    messages = []
    client.subscribe('message_received', messages.append)
    await server.send(chat('Kappa hello', tags='emotes=25:0-4'))

    assert messages[0].emote_replaced_message == 'https://static-cdn.jtvnw.net/emoticons/v1/25/1.0 hello'
    assert messages[0].message == 'Kappa hello'


@pytest.mark.asyncio
@with_client(ChatSupport)
async def test_chat_malformed(server, client):
    malformed = []
    client.subscribe('malformed_line', lambda line, error: malformed.append(error))
    await server.send(chat('hi', tags='user-id=x1'))

    assert len(malformed) == 1
    assert isinstance(malformed[0], tmilib.MalformedLine)
    assert client.connected
