import asyncio
import pytest
from pytest import raises

import tmilib
from tmilib.client import ConnectionState
from tmilib.features import WhisperSupport
from .fixtures import with_client, USERNAME
from .lines import GREETING, whisper
from .mocks import MockThrottler

RELAYED = ':testbot~testbot@testbot.tmi.twitch.tv PRIVMSG #jtv :/w {receiver} {message}\r\n'


## Receiving.

@pytest.mark.asyncio
@with_client(WhisperSupport)
async def test_whisper_received(server, client):
    received = []
    client.subscribe('whisper_received', received.append)
    await server.send(GREETING)
    await server.send(whisper('hello there'))

    assert len(received) == 1
    message = received[0]
    assert isinstance(message, tmilib.WhisperMessage)
    assert message.username == 'dara226'
    assert message.message == 'hello there'
    assert message.bot_username == USERNAME
    assert client.previous_whisper is message


@pytest.mark.asyncio
@with_client(WhisperSupport)
async def test_whisper_received_before_ready(server, client):
    received = []
    client.subscribe('whisper_received', received.append)
    await server.send(whisper('early'))

    assert client.state == ConnectionState.AUTH_PENDING
    assert [message.message for message in received] == ['early']


@pytest.mark.asyncio
@with_client(WhisperSupport)
async def test_whisper_previous_whisper(server, client):
    assert client.previous_whisper is None
    await server.send(whisper('one'))
    await server.send(whisper('two', user='someone'))

    assert client.previous_whisper.message == 'two'
    assert client.previous_whisper.username == 'someone'


@pytest.mark.asyncio
@with_client(WhisperSupport)
async def test_whisper_received_in_order(server, client):
    received = []
    done = asyncio.Event()

    def on_whisper(message):
        received.append(message.message)
        if len(received) == 3:
            done.set()

    client.subscribe('whisper_received', on_whisper)
    for body in ('a', 'b', 'c'):
        server.sendraw(whisper(body))
    await asyncio.wait_for(done.wait(), timeout=1)

    assert received == ['a', 'b', 'c']


@pytest.mark.asyncio
@with_client(WhisperSupport)
async def test_whisper_malformed(server, client):
    received = []
    malformed = []
    client.subscribe('whisper_received', received.append)
    client.subscribe('malformed_line', lambda line, error: malformed.append(line))

    line = whisper('hi', tags='user-id=notanumber')
    await server.send(line)
    await server.send(whisper('still here'))

    assert malformed == [line]
    assert [message.message for message in received] == ['still here']
    assert client.logger.warning.called
    assert client.connected


## Commands.

@pytest.mark.asyncio
@with_client(WhisperSupport, command_identifier='!')
async def test_whisper_command(server, client):
    commands = []
    client.subscribe('command_received', commands.append)
    await server.send(whisper('!greet bob smith'))

    assert len(commands) == 1
    command = commands[0]
    assert command.command == 'greet'
    assert command.identifier == '!'
    assert command.username == 'dara226'
    assert command.argument_string == 'bob smith'
    assert command.arguments == ['bob', 'smith']
    assert command.message is client.previous_whisper


@pytest.mark.asyncio
@with_client(WhisperSupport, command_identifier='!')
async def test_whisper_command_without_arguments(server, client):
    commands = []
    client.subscribe('command_received', commands.append)
    await server.send(whisper('!ping'))

    assert commands == [tmilib.Command('ping', '!', 'dara226', [], '')]


@pytest.mark.asyncio
@with_client(WhisperSupport)
async def test_whisper_no_command_identifiers(server, client):
    commands = []
    client.subscribe('command_received', commands.append)
    await server.send(whisper('!ping'))

    assert commands == []


@pytest.mark.asyncio
@with_client(WhisperSupport, command_identifiers=['!', '?'])
async def test_whisper_command_identifiers(server, client):
    commands = []
    client.subscribe('command_received', commands.append)
    await server.send(whisper('?help'))
    client.remove_command_identifier('?')
    await server.send(whisper('?help'))
    client.add_command_identifier('$')
    await server.send(whisper('$balance'))

    assert [command.command for command in commands] == ['help', 'balance']


@pytest.mark.asyncio
@with_client(WhisperSupport, connected=False)
async def test_whisper_invalid_command_identifier(server, client):
    for identifier in ('', '!!', None, 1):
        with raises(ValueError):
            client.add_command_identifier(identifier)


## Sending.

@pytest.mark.asyncio
@with_client(WhisperSupport)
async def test_send_whisper(server, client):
    sent = []
    client.subscribe('whisper_sent', lambda receiver, message: sent.append((receiver, message)))
    server.clear()
    await client.send_whisper('bob', 'hi')

    assert [data for data, _ in server.sent] == [RELAYED.format(receiver='bob', message='hi').encode('utf-8')]
    assert sent == [('bob', 'hi')]


@pytest.mark.asyncio
@with_client(WhisperSupport)
async def test_send_whisper_non_ascii(server, client):
    server.clear()
    await client.send_whisper('bob', 'grüße ❤')

    assert server.sent[0][0] == RELAYED.format(receiver='bob', message='grüße ❤').encode('utf-8')


@pytest.mark.asyncio
@with_client(WhisperSupport)
async def test_send_whisper_dry_run(server, client):
    sent = []
    client.subscribe('whisper_sent', lambda receiver, message: sent.append(receiver))
    server.clear()
    await client.send_whisper('bob', 'hi', dry_run=True)

    assert server.sent == []
    assert sent == []


@pytest.mark.asyncio
@with_client(WhisperSupport, throttler=MockThrottler(permitted=1))
async def test_send_whisper_throttled(server, client):
    sent = []
    client.subscribe('whisper_sent', lambda receiver, message: sent.append(message))
    server.clear()
    await client.send_whisper('bob', 'first')
    await client.send_whisper('bob', 'second')

    assert server.lines == [RELAYED.format(receiver='bob', message='first').rstrip('\r\n')]
    assert sent == ['first']
    assert client.throttler.attempts == ['first', 'second']


@pytest.mark.asyncio
@with_client(WhisperSupport, throttler=MockThrottler(permitted=0, apply_to_raw_messages=True))
async def test_send_whisper_dry_run_skips_throttler(server, client):
    await client.send_whisper('bob', 'hi', dry_run=True)
    assert client.throttler.attempts == []


@pytest.mark.asyncio
@with_client(WhisperSupport, connected=False)
async def test_send_whisper_not_connected(server, client):
    with raises(tmilib.NotConnected):
        await client.send_whisper('bob', 'hi')


@pytest.mark.asyncio
@with_client(WhisperSupport)
async def test_send_whisper_invalid(server, client):
    server.clear()
    with raises(tmilib.ProtocolViolation):
        await client.send_whisper('bob', 'hi\r\nPART #jtv')
    with raises(tmilib.ProtocolViolation):
        await client.send_whisper('', 'hi')
    assert server.sent == []
