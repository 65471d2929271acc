## protocol.py
# TMI protocol constants and helpers.
import enum
import re

DEFAULT_ENCODING = 'utf-8'
FALLBACK_ENCODING = 'iso-8859-1'

DEFAULT_HOST = 'irc.chat.twitch.tv'
DEFAULT_PORT = 6667
DEFAULT_TLS_PORT = 6697


## Message parsing.

LINE_SEPARATOR = '\r\n'
MINIMAL_LINE_SEPARATOR = '\n'

TAG_INDICATOR = '@'
TAG_SEPARATOR = ';'
TAG_VALUE_SEPARATOR = '='
USER_SEPARATOR = '!'
HOST_SEPARATOR = '@'
CHANNEL_SIGIL = '#'
TRAILING_PREFIX = ':'

ACTION_DELIMITER = '\x01'
ACTION_PREFIX = ACTION_DELIMITER + 'ACTION '

EMOTE_SEPARATOR = '/'
EMOTE_ID_SEPARATOR = ':'
EMOTE_RANGE_SEPARATOR = ','
EMOTE_OFFSET_SEPARATOR = '-'
BADGE_SEPARATOR = ','
BADGE_VERSION_SEPARATOR = '/'


## Service literals.

GREETING = 'You are in a maze of twisty passages, all alike.'
LOGIN_FAILED = ':tmi.twitch.tv NOTICE * :Error logging in'
WHISPER_COMMAND = 'WHISPER'
CHAT_COMMAND = 'PRIVMSG'

RELAY_CHANNEL = '#jtv'
WHISPER_DIRECTIVE = '/w'
CAPABILITIES = ['twitch.tv/membership', 'twitch.tv/commands', 'twitch.tv/tags']

ARGUMENT_SEPARATOR = re.compile(' +', re.UNICODE)
COMMAND_PATTERN = re.compile('^([a-zA-Z]+|[0-9]+)$', re.UNICODE)
FORBIDDEN_CHARACTERS = {'\r', '\n', '\0'}


class Priority(enum.IntEnum):
    """ Write priority hint handed to the transport. """
    LOW = 0
    NORMAL = 1
    CRITICAL = 2


## Errors.

class ProtocolViolation(Exception):
    """ An error that occurred while parsing or constructing a line that violates the protocol. """
    def __init__(self, msg, message):
        super().__init__(msg)
        self.irc_message = message


class MalformedLine(ProtocolViolation):
    """ A single inbound line could not be decoded. """
    @property
    def line(self):
        return self.irc_message


## Construction.

def construct(command, *params):
    """ Build a raw line from a command and its parameters. Only the final parameter may be trailing. """
    command = str(command)
    if not COMMAND_PATTERN.match(command):
        raise ProtocolViolation('The constructed command does not follow the command pattern ({pat})'.format(
            pat=COMMAND_PATTERN.pattern), message=command)
    message = command.upper()

    for idx, param in enumerate(params):
        # Trailing parameter?
        if not param or ' ' in param or param[0] == TRAILING_PREFIX:
            if idx + 1 < len(params):
                raise ProtocolViolation('Only the final parameter of a message can be trailing and thus contain '
                                        'spaces, or start with a colon.', message=param)
            message += ' ' + TRAILING_PREFIX + param
        else:
            message += ' ' + param

    if any(ch in message for ch in FORBIDDEN_CHARACTERS):
        raise ProtocolViolation('The constructed message contains forbidden characters ({chs}).'.format(
            chs=', '.join(repr(ch) for ch in FORBIDDEN_CHARACTERS)), message=message)
    return message


def whisper_line(sender, receiver, message):
    """ Format the relay line that delivers a whisper from `sender` to `receiver`. """
    if not receiver or ARGUMENT_SEPARATOR.search(receiver):
        raise ProtocolViolation('Invalid whisper receiver: {!r}'.format(receiver), message=receiver)
    line = ':{u}~{u}@{u}.tmi.twitch.tv {cmd} {relay} :{directive} {receiver} {message}'.format(
        u=sender, cmd=CHAT_COMMAND, relay=RELAY_CHANNEL, directive=WHISPER_DIRECTIVE,
        receiver=receiver, message=message)
    if any(ch in line for ch in FORBIDDEN_CHARACTERS):
        raise ProtocolViolation('The constructed whisper contains forbidden characters.', message=line)
    return line


def encode_line(line, encoding=DEFAULT_ENCODING):
    """ Encode an outbound line for the wire, appending the line separator if missing. """
    if not line.endswith(LINE_SEPARATOR):
        line += LINE_SEPARATOR
    return line.encode(encoding)


def decode_line(data, encoding=DEFAULT_ENCODING):
    """ Decode a received line and strip its separator. """
    try:
        line = data.decode(encoding)
    except UnicodeDecodeError:
        # Try our fallback encoding.
        line = data.decode(FALLBACK_ENCODING)

    if line.endswith(LINE_SEPARATOR):
        line = line[:-len(LINE_SEPARATOR)]
    elif line.endswith(MINIMAL_LINE_SEPARATOR):
        line = line[:-len(MINIMAL_LINE_SEPARATOR)]
    return line


## Misc.

def identifierify(name):
    """ Clean up name so it works for a Python identifier. """
    name = name.lower()
    name = re.sub('[^a-z0-9]', '_', name)
    return name
