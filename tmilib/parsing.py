## parsing.py
# Tagged TMI line decoding.
from . import protocol
from .protocol import MalformedLine
from .models import Badge, ChatMessage, Command, EmoteOccurrence, UserType, WhisperMessage

__all__ = ['parse_tags', 'parse_badges', 'parse_emotes', 'parse_user', 'parse_prefix', 'parse_action',
           'decode_chat_message', 'decode_whisper_message', 'parse_command']

USER_TYPES = {
    'mod': UserType.MODERATOR,
    'global_mod': UserType.GLOBAL_MODERATOR,
    'admin': UserType.ADMIN,
    'staff': UserType.STAFF,
}


## Tags.

def split_tags(line):
    """ Split a line into its raw tag segment (or None) and the rest of the line. """
    if line.startswith(protocol.TAG_INDICATOR) and ' ' in line:
        raw_tags, rest = line.split(' ', 1)
        return raw_tags, rest
    return None, line


def parse_tags(segment):
    """
    Parse a `key1=val1;key2=val2` metadata segment into a dict.
    The first occurrence of a key wins, pairs without a value separator are ignored and values are kept raw.
    """
    tags = {}
    if not segment:
        return tags
    if segment.startswith(protocol.TAG_INDICATOR):
        segment = segment[len(protocol.TAG_INDICATOR):]

    for raw_tag in segment.split(protocol.TAG_SEPARATOR):
        if protocol.TAG_VALUE_SEPARATOR not in raw_tag:
            continue
        key, value = raw_tag.split(protocol.TAG_VALUE_SEPARATOR, 1)
        if key and key not in tags:
            tags[key] = value
    return tags


def parse_badges(value):
    """ Parse a `name1/ver1,name2/ver2` badge list, in order. Entries without a version are skipped. """
    badges = []
    if not value:
        return badges

    for entry in value.split(protocol.BADGE_SEPARATOR):
        if protocol.BADGE_VERSION_SEPARATOR not in entry:
            continue
        name, version = entry.split(protocol.BADGE_VERSION_SEPARATOR, 1)
        badges.append(Badge(name, version))
    return badges


def parse_emotes(emote_set, message, registry=None):
    """
    Parse an `id1:s-e,s-e/id2:s-e` emote tag value against the message body.
    Occurrences that are malformed or fall outside of the message are dropped.
    Every accepted occurrence is registered with `registry`, if given.
    """
    occurrences = []
    if not emote_set or message is None:
        return occurrences

    for emote in emote_set.split(protocol.EMOTE_SEPARATOR):
        emote_id, _, ranges = emote.partition(protocol.EMOTE_ID_SEPARATOR)
        if not emote_id or not ranges:
            continue

        for span in ranges.split(protocol.EMOTE_RANGE_SEPARATOR):
            start, sep, end = span.partition(protocol.EMOTE_OFFSET_SEPARATOR)
            if not sep:
                continue
            try:
                start, end = int(start), int(end)
            except ValueError:
                continue
            if not 0 <= start < end < len(message):
                continue

            occurrences.append(EmoteOccurrence(emote_id, start, end))
            if registry is not None:
                registry.add(emote_id, message[start:end + 1])
    return occurrences


def _flag(tags, key):
    return tags.get(key) == '1'


def _user_id(tags, line):
    value = tags.get('user-id')
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise MalformedLine('Invalid user-id tag: {!r}'.format(value), message=line)


## Prefix.

def parse_user(raw):
    """ Parse nick(!user(@host)?)? structure. """
    nick = raw
    user = None
    host = None

    # Attempt to extract host.
    if protocol.HOST_SEPARATOR in raw:
        raw, host = raw.split(protocol.HOST_SEPARATOR, 1)
    # Attempt to extract user.
    if protocol.USER_SEPARATOR in raw:
        nick, user = raw.split(protocol.USER_SEPARATOR, 1)

    return nick, user, host


def parse_prefix(rest):
    """
    Find the username and channel in the untagged part of a line.
    The first `nick!user@host` segment supplies the username, the first `#` the channel (up to the next space).
    """
    username = None
    channel = None

    for segment in rest.split(' '):
        segment = segment.lstrip(protocol.TRAILING_PREFIX)
        if protocol.USER_SEPARATOR in segment and protocol.HOST_SEPARATOR in segment:
            _, username, _ = parse_user(segment)
            break

    if protocol.CHANNEL_SIGIL in rest:
        channel = rest.split(protocol.CHANNEL_SIGIL, 1)[1].split(' ', 1)[0]

    return username, channel


## Body.

def parse_action(body):
    """ Strip the `/me` action wrapping from a body. Returns the text and whether it was an action. """
    if (len(body) > len(protocol.ACTION_PREFIX) and body.startswith(protocol.ACTION_PREFIX)
            and body.endswith(protocol.ACTION_DELIMITER)):
        return body[len(protocol.ACTION_PREFIX):-len(protocol.ACTION_DELIMITER)], True
    return body, False


def _body_after(line, marker):
    index = line.find(marker)
    if index < 0:
        return None
    return line[index + len(marker):]


## Messages.

def decode_chat_message(line, emotes=None, replace_emotes=False, legacy_broadcaster_check=True):
    """
    Decode a tagged PRIVMSG line into a ChatMessage.

    `emotes` is the registry that located emotes are added to, and that renders `emote_replaced_message`
    when `replace_emotes` is set.
    With `legacy_broadcaster_check`, every message is marked as sent by the broadcaster, as historical
    clients did by comparing the channel to itself. Otherwise the channel is compared to the sender.
    """
    raw_tags, rest = split_tags(line)
    tags = parse_tags(raw_tags)

    username, channel = parse_prefix(rest)
    if username is None or channel is None:
        raise MalformedLine('No sender or channel found in chat line.', message=line)

    body = _body_after(line, ' {cmd} {sigil}{channel} {trailing}'.format(
        cmd=protocol.CHAT_COMMAND, sigil=protocol.CHANNEL_SIGIL, channel=channel, trailing=protocol.TRAILING_PREFIX))
    if body is None:
        raise MalformedLine('No message body found in chat line.', message=line)
    body, is_action = parse_action(body)

    user_type = USER_TYPES.get(tags.get('user-type', ''), UserType.VIEWER)
    occurrences = parse_emotes(tags.get('emotes'), body, registry=emotes)
    emote_replaced = None
    if replace_emotes and emotes is not None:
        emote_replaced = emotes.replace_emotes(body)

    if legacy_broadcaster_check:
        is_broadcaster = channel.lower() == channel.lower()
    else:
        is_broadcaster = channel.lower() == username.lower()
    if is_broadcaster:
        user_type = UserType.BROADCASTER

    return ChatMessage(
        raw=line,
        username=username,
        channel=channel,
        message=body,
        user_id=_user_id(tags, line),
        display_name=tags.get('display-name'),
        color=tags.get('color') or None,
        emote_set=tags.get('emotes'),
        emotes=occurrences,
        is_action=is_action,
        user_type=user_type,
        subscriber=_flag(tags, 'subscriber'),
        turbo=_flag(tags, 'turbo'),
        is_moderator=_flag(tags, 'mod'),
        is_broadcaster=is_broadcaster,
        badges=parse_badges(tags.get('badges')),
        emote_replaced_message=emote_replaced,
        tags=tags,
    )


def decode_whisper_message(line, bot_username=None, emotes=None):
    """ Decode a tagged WHISPER line into a WhisperMessage. """
    raw_tags, rest = split_tags(line)
    tags = parse_tags(raw_tags)

    username, _ = parse_prefix(rest)
    if username is None:
        raise MalformedLine('No sender found in whisper line.', message=line)

    target = _body_after(line, ' {cmd} '.format(cmd=protocol.WHISPER_COMMAND))
    if target is None:
        raise MalformedLine('No whisper marker found in line.', message=line)
    recipient, sep, body = target.partition(' ')
    if not sep or not body.startswith(protocol.TRAILING_PREFIX):
        raise MalformedLine('No message body found in whisper line.', message=line)
    body, is_action = parse_action(body[len(protocol.TRAILING_PREFIX):])

    return WhisperMessage(
        raw=line,
        username=username,
        recipient=recipient,
        message=body,
        bot_username=bot_username,
        user_id=_user_id(tags, line),
        display_name=tags.get('display-name'),
        color=tags.get('color') or None,
        emote_set=tags.get('emotes'),
        emotes=parse_emotes(tags.get('emotes'), body, registry=emotes),
        is_action=is_action,
        user_type=USER_TYPES.get(tags.get('user-type', ''), UserType.VIEWER),
        turbo=_flag(tags, 'turbo'),
        badges=parse_badges(tags.get('badges')),
        message_id=tags.get('message-id'),
        thread_id=tags.get('thread-id'),
        tags=tags,
    )


## Commands.

def parse_command(body, identifiers, username=None, message=None):
    """
    Split a message body into a Command if it starts with one of the given identifier characters.
    Returns None for anything that isn't a command.
    """
    if not body or body[0] not in identifiers:
        return None

    identifier = body[0]
    if ' ' not in body:
        return Command(body[1:], identifier, username, [], '', message=message)

    first, argument_string = body.split(' ', 1)
    command = first[1:]
    arguments = [arg for arg in body.split(' ') if arg != identifier + command]
    return Command(command, identifier, username, arguments, argument_string, message=message)
