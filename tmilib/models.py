## models.py
# Decoded message and user model classes.
import collections
import enum


class UserType(enum.Enum):
    VIEWER = 'viewer'
    MODERATOR = 'mod'
    GLOBAL_MODERATOR = 'global_mod'
    ADMIN = 'admin'
    STAFF = 'staff'
    BROADCASTER = 'broadcaster'


Badge = collections.namedtuple('Badge', ['name', 'version'])
EmoteOccurrence = collections.namedtuple('EmoteOccurrence', ['emote_id', 'start', 'end'])


class ChatMessage:
    """ A chat message broadcast in a channel. """

    def __init__(self, *, raw, username, channel, message, user_id=None, display_name=None, color=None,
                 emote_set=None, emotes=(), is_action=False, user_type=UserType.VIEWER, subscriber=False,
                 turbo=False, is_moderator=False, is_broadcaster=False, badges=(), emote_replaced_message=None,
                 tags=None):
        self.raw = raw
        self.username = username
        self.channel = channel
        self.message = message
        self.user_id = user_id
        self.display_name = display_name
        self.color = color
        self.emote_set = emote_set
        self.emotes = list(emotes)
        self.is_action = is_action
        self.user_type = user_type
        self.subscriber = subscriber
        self.turbo = turbo
        self.is_moderator = is_moderator
        self.is_broadcaster = is_broadcaster
        self.badges = list(badges)
        self.emote_replaced_message = emote_replaced_message
        self.tags = dict(tags or {})

    @classmethod
    def parse(cls, line, emotes=None, replace_emotes=False, legacy_broadcaster_check=True):
        """
        Decode a raw PRIVMSG line into a ChatMessage.
        Raises MalformedLine if the line can't be decoded.
        """
        from .parsing import decode_chat_message
        return decode_chat_message(line, emotes=emotes, replace_emotes=replace_emotes,
                                   legacy_broadcaster_check=legacy_broadcaster_check)

    def __repr__(self):
        return '<{cls} #{channel} {user}: {message!r}>'.format(
            cls=self.__class__.__name__, channel=self.channel, user=self.username, message=self.message)


class WhisperMessage:
    """ A private message delivered to the client. """

    def __init__(self, *, raw, username, recipient, message, bot_username=None, user_id=None, display_name=None,
                 color=None, emote_set=None, emotes=(), is_action=False, user_type=UserType.VIEWER, turbo=False,
                 badges=(), message_id=None, thread_id=None, tags=None):
        self.raw = raw
        self.username = username
        self.recipient = recipient
        self.message = message
        self.bot_username = bot_username
        self.user_id = user_id
        self.display_name = display_name
        self.color = color
        self.emote_set = emote_set
        self.emotes = list(emotes)
        self.is_action = is_action
        self.user_type = user_type
        self.turbo = turbo
        self.badges = list(badges)
        self.message_id = message_id
        self.thread_id = thread_id
        self.tags = dict(tags or {})

    @classmethod
    def parse(cls, line, bot_username=None, emotes=None):
        """
        Decode a raw WHISPER line into a WhisperMessage.
        Raises MalformedLine if the line can't be decoded.
        """
        from .parsing import decode_whisper_message
        return decode_whisper_message(line, bot_username=bot_username, emotes=emotes)

    def __repr__(self):
        return '<{cls} {user} -> {recipient}: {message!r}>'.format(
            cls=self.__class__.__name__, user=self.username, recipient=self.recipient, message=self.message)


class Command:
    """ A command found at the start of a chat or whisper message. """

    def __init__(self, command, identifier, username, arguments, argument_string, message=None):
        self.command = command
        self.identifier = identifier
        self.username = username
        self.arguments = arguments
        self.argument_string = argument_string
        self.message = message

    def __eq__(self, other):
        if not isinstance(other, Command):
            return NotImplemented
        return (self.command, self.identifier, self.username, self.arguments, self.argument_string) == \
            (other.command, other.identifier, other.username, other.arguments, other.argument_string)

    def __repr__(self):
        return '<{cls} {identifier}{command} by {user} {args!r}>'.format(
            cls=self.__class__.__name__, identifier=self.identifier, command=self.command,
            user=self.username, args=self.arguments)
