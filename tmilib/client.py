## client.py
# Basic TMI client implementation.
import asyncio
import collections
import enum
import inspect
import logging

from . import connection, protocol
from .credentials import ConfigurationError, validate as validate_credentials
from .emotes import MessageEmoteCollection

__all__ = ['Error', 'NotConnected', 'AuthenticationRejected', 'ConfigurationError', 'ConnectionState',
           'BasicClient']


class Error(Exception):
    """ Base class for all tmilib errors. """
    pass


class NotConnected(Error):
    def __init__(self):
        super().__init__('Not connected.')


class AuthenticationRejected(Error):
    """ The server refused our login. """
    def __init__(self, line, username):
        super().__init__('Login rejected for {}: {}'.format(username, line))
        self.line = line
        self.username = username


class ConnectionState(enum.Enum):
    DISCONNECTED = 'disconnected'
    CONNECTING = 'connecting'
    AUTH_PENDING = 'auth_pending'
    READY = 'ready'


class BasicClient:
    """
    Base TMI client class.
    Owns the connection lifecycle: the login handshake, readiness and login rejection detection,
    the listen loop and notification fan-out. Message kinds are handled by features through on_raw_<command> methods.
    """
    READ_TIMEOUT = 300

    def __init__(self, credentials, throttler=None, emotes=None, encoding=protocol.DEFAULT_ENCODING, **kwargs):
        """ Create a client. Raises ConfigurationError for unusable credentials. """
        validate_credentials(credentials)
        self.credentials = credentials
        self.throttler = throttler
        self.emotes = emotes if emotes is not None else MessageEmoteCollection()
        self.encoding = encoding
        self._subscribers = collections.defaultdict(list)
        self._reset_connection_attributes()
        self._reset_attributes()

        if kwargs:
            self.logger.warning('Unused arguments: %s', ', '.join(kwargs.keys()))

    def _reset_attributes(self):
        """ Reset attributes. """
        self.state = ConnectionState.DISCONNECTED
        self.logger = logging.getLogger(__name__)

    def _reset_connection_attributes(self):
        """ Reset connection attributes. """
        self.connection = None
        self.error = None
        self._listener = None

    ## Connection.

    def run(self, **kwargs):
        """ Connect and handle lines until the connection goes away. """
        async def main():
            await self.connect(**kwargs)
            await self._listener

        asyncio.run(main())

    async def connect(self, **kwargs):
        """ Connect to the server and start logging in. """
        # Disconnect from current connection.
        if self.connected:
            await self.disconnect(expected=True)

        self._reset_connection_attributes()
        self.state = ConnectionState.CONNECTING
        self.logger.info('Connecting to %s:%s', self.credentials.host, self.credentials.port)
        try:
            await self._connect(**kwargs)

            # Set logger name.
            if self.server_tag:
                self.logger = logging.getLogger(self.__class__.__name__ + ':' + self.server_tag)

            await self._register()
        except (OSError, asyncio.TimeoutError):
            # Don't leave a half-open transport behind.
            if self.connection is not None:
                await self.connection.disconnect()
            self.state = ConnectionState.DISCONNECTED
            raise

        self.state = ConnectionState.AUTH_PENDING
        self._listener = asyncio.ensure_future(self.handle_forever())

    async def reconnect(self, **kwargs):
        """ Drop the current connection, if any, and log in again with the same credentials. """
        self.logger.info('Reconnecting to %s:%s', self.credentials.host, self.credentials.port)
        await self.connect(**kwargs)

    async def disconnect(self, expected=True):
        """ Disconnect from server. """
        if self.connected:
            await self._disconnect(expected)

    async def _disconnect(self, expected):
        # Shutdown connection.
        await self.connection.disconnect()

        # Reset any attributes.
        self._reset_attributes()

        # Callback.
        await self._notify('disconnect', expected)

    async def _connect(self, tls_verify=True, source_address=None):
        """ Open the transport. """
        self.connection = connection.Connection(self.credentials.host, self.credentials.port,
                                                tls=getattr(self.credentials, 'tls', False), tls_verify=tls_verify,
                                                source_address=source_address)
        await self.connection.connect()

    async def _register(self):
        """ Send the login handshake. The order of these lines matters to the server. """
        username = self.credentials.username

        # Don't let anything queue in front of the login.
        await self.rawmsg('PASS', self.credentials.oauth, priority=protocol.Priority.CRITICAL)
        await self.rawmsg('NICK', username, priority=protocol.Priority.CRITICAL)
        await self.rawmsg('USER', username, '0', '*', username, priority=protocol.Priority.CRITICAL)

        for capability in protocol.CAPABILITIES:
            await self.rawmsg('CAP', 'REQ', capability)

        await self.rawmsg('JOIN', protocol.RELAY_CHANNEL)

    async def _registration_completed(self):
        """ The server greeted us: we're logged in. """
        if self.state == ConnectionState.READY:
            return

        self.state = ConnectionState.READY
        self.logger.info('Logged in as %s.', self.username)
        await self._notify('connected', self.username)

    async def _login_rejected(self, line):
        """ The server refused our credentials. Close the connection and report it. """
        self.logger.error('Login rejected for %s.', self.username)
        error = AuthenticationRejected(line, self.username)
        await self.disconnect(expected=True)
        self.error = error
        await self._notify('incorrect_login', error)

    ## Attributes.

    @property
    def username(self):
        """ The login name of this client. """
        return self.credentials.username

    @property
    def connected(self):
        """ Whether or not we are connected. """
        return bool(self.connection and self.connection.connected)

    @property
    def ready(self):
        """ Whether or not the server accepted our login. """
        return self.state == ConnectionState.READY

    @property
    def server_tag(self):
        if self.connected and self.connection.hostname:
            tag = self.connection.hostname.lower()

            # Remove hostname prefix.
            if tag.startswith('irc.'):
                tag = tag[4:]

            # Check if host is either an FQDN or IPv4.
            if '.' in tag:
                # Attempt to cut off TLD.
                host, suffix = tag.rsplit('.', 1)

                # Make sure we aren't cutting off the last octet of an IPv4.
                try:
                    int(suffix)
                except ValueError:
                    tag = host

            return tag
        else:
            return None

    ## Notifications.

    def subscribe(self, event, handler):
        """ Call handler (a function or coroutine function) on every `event` notification. """
        self._subscribers[event].append(handler)

    def unsubscribe(self, event, handler):
        """ Stop calling handler for `event`. """
        handlers = self._subscribers.get(event)
        if handlers and handler in handlers:
            handlers.remove(handler)

    async def _notify(self, event, *args):
        """ Invoke the on_<event> callback, then every subscriber, in order. """
        handlers = [getattr(self, 'on_' + event)] + list(self._subscribers.get(event, ()))
        for handler in handlers:
            try:
                result = handler(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                self.logger.exception('Failed to execute %s handler.', event)

    ## API.

    async def raw(self, message):
        """ Send raw line. Throttled only if the throttler applies to raw lines. """
        throttler = self.throttler
        if throttler is not None and throttler.apply_to_raw_messages and not throttler.message_permitted(message):
            self.logger.debug('Raw line dropped by throttler: %s', message)
            return
        await self._send(message)

    async def rawmsg(self, command, *args, priority=protocol.Priority.NORMAL):
        """ Send raw message. """
        message = protocol.construct(command, *args)
        await self._send(message, priority=priority)

    async def _send(self, input, priority=protocol.Priority.NORMAL):
        if not self.connected:
            raise NotConnected()
        if isinstance(input, str):
            input = protocol.encode_line(input, self.encoding)

        self.logger.debug('>> %s', _loggable(input.decode(self.encoding, errors='replace')))
        await self.connection.send(input, priority)

    ## Overloadable callbacks.

    async def on_connected(self, username):
        """ Callback called when the server accepted our login. """
        pass

    async def on_incorrect_login(self, error):
        """ Callback called when the server rejected our login. The connection is already closed. """
        pass

    async def on_disconnect(self, expected):
        """ Callback called when the connection was closed. """
        if not expected:
            self.logger.error('Unexpected disconnect.')

    async def on_malformed_line(self, line, error):
        """ Callback called when a received line could not be decoded. """
        pass

    ## Line dispatch.

    async def handle_forever(self):
        """ Handle lines, one at a time and in order, until this connection goes away. """
        conn = self.connection
        while self.connection is conn and conn.connected:
            try:
                data = await self._receive(conn)
            except (OSError, ValueError) as e:
                # Broken socket, TLS failure or an overlong line: the transport is gone.
                if self.connection is conn and self.connected:
                    await self.on_data_error(e)
                break

            if not data:
                if self.connection is conn and self.connected:
                    await self.disconnect(expected=False)
                break
            await self.on_data(data)

    async def _receive(self, conn):
        """ Read one line, probing the server with a PING if it stays silent. Returns None on timeout. """
        try:
            return await conn.recv(timeout=self.READ_TIMEOUT)
        except asyncio.TimeoutError:
            self.logger.warning('>> Receive timeout reached, sending ping to check connection state...')

        try:
            await self.rawmsg('PING', self.credentials.host)
            return await conn.recv(timeout=self.READ_TIMEOUT)
        except (asyncio.TimeoutError, NotConnected):
            return None

    async def on_data_error(self, exception):
        """ Handle error. """
        self.logger.error('Encountered error on socket.',
                          exc_info=(type(exception), exception, None))
        await self.disconnect(expected=False)

    async def on_data(self, data):
        """ Handle received data. """
        line = protocol.decode_line(data, self.encoding)
        if line:
            await self.on_raw(line)

    async def on_raw(self, line):
        """ Handle a single line. Decode failures are reported and never end the session. """
        self.logger.debug('<< %s', line)
        try:
            await self._handle_line(line)
        except protocol.MalformedLine as e:
            self.logger.warning('Could not decode line: %s (%s)', line, e)
            await self._notify('malformed_line', line, e)
        except Exception:
            self.logger.exception('Failed to handle line: %s', line)

    async def _handle_line(self, line):
        words = line.split(' ')
        if words[0] == 'PING':
            await self.on_raw_ping(line)
            return

        segments = line.split(protocol.TRAILING_PREFIX)
        if len(segments) > 2 and segments[2] == protocol.GREETING:
            await self._registration_completed()

        handler = None
        if len(words) > 3 and _is_command(words[2]):
            handler = getattr(self, 'on_raw_' + protocol.identifierify(words[2]), None)

        if handler is not None:
            await handler(line)
        elif line == protocol.LOGIN_FAILED:
            await self._login_rejected(line)
        else:
            self.logger.debug('Unhandled line: %s', line)

    async def on_raw_ping(self, line):
        """ Keep the connection alive. """
        _, _, server = line.partition(' ')
        await self.rawmsg('PONG', server.lstrip(protocol.TRAILING_PREFIX) or self.credentials.host)


## Helpers.

def _is_command(word):
    return bool(protocol.COMMAND_PATTERN.match(word)) and word == word.upper()


def _loggable(line):
    """ Mask the token in a PASS line. """
    if line.startswith('PASS '):
        return 'PASS ' + '*' * 8
    return line.rstrip('\r\n')
