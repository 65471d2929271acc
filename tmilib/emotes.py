## emotes.py
# Shared emote registry used for emote substitution.
import re

__all__ = ['MessageEmote', 'MessageEmoteCollection', 'DEFAULT_REPLACEMENT']

DEFAULT_REPLACEMENT = 'https://static-cdn.jtvnw.net/emoticons/v1/{id}/1.0'


class MessageEmote:
    """ An emote seen in a message: its id, the literal text it is typed as, and what to render it as. """

    def __init__(self, emote_id, text, replacement=DEFAULT_REPLACEMENT):
        self.id = emote_id
        self.text = text
        if callable(replacement):
            self.replacement = replacement(self)
        else:
            self.replacement = replacement.format(id=emote_id, text=text)
        self.pattern = re.compile(r'(?<!\S)' + re.escape(text) + r'(?!\S)')

    def __repr__(self):
        return '<{cls} {id} {text!r}>'.format(cls=self.__class__.__name__, id=self.id, text=self.text)


class MessageEmoteCollection:
    """
    Registry of emotes collected from decoded messages.
    Emotes are keyed by id: registering an id that is already known is a no-op.
    `replacement` is either a format string (with `{id}` and `{text}` fields) or a callable taking the MessageEmote.
    """

    def __init__(self, replacement=DEFAULT_REPLACEMENT):
        self.replacement = replacement
        self._emotes = {}

    def add(self, emote_id, text):
        """ Register an emote. Returns the registered MessageEmote. """
        if emote_id not in self._emotes:
            self._emotes[emote_id] = MessageEmote(emote_id, text, replacement=self.replacement)
        return self._emotes[emote_id]

    def remove(self, emote_id):
        self._emotes.pop(emote_id, None)

    def clear(self):
        self._emotes.clear()

    def get(self, emote_id):
        return self._emotes.get(emote_id)

    def replace_emotes(self, text):
        """ Replace every whole-word occurrence of a registered emote in text with its replacement. """
        for emote in self._emotes.values():
            text = emote.pattern.sub(lambda match: emote.replacement, text)
        return text

    def __contains__(self, emote_id):
        return emote_id in self._emotes

    def __len__(self):
        return len(self._emotes)

    def __iter__(self):
        return iter(self._emotes.values())
