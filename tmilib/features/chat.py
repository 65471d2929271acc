## chat.py
# Channel chat messages.
from tmilib.models import ChatMessage
from . import commands

__all__ = ['ChatSupport']


class ChatSupport(commands.CommandSupport):
    """
    Decode PRIVMSG lines into ChatMessage objects.
    With `replace_emotes`, messages carry their text with emotes rendered by the emote registry.
    `legacy_broadcaster_check` keeps the historical behaviour of flagging every sender as the broadcaster;
    turn it off to compare the channel name to the sender instead.
    """

    def __init__(self, *args, replace_emotes=False, legacy_broadcaster_check=True, **kwargs):
        self.replace_emotes = replace_emotes
        self.legacy_broadcaster_check = legacy_broadcaster_check
        super().__init__(*args, **kwargs)

    async def on_message_received(self, message):
        """ Callback called when a chat message was received. """
        pass

    async def on_raw_privmsg(self, line):
        message = ChatMessage.parse(line, emotes=self.emotes, replace_emotes=self.replace_emotes,
                                    legacy_broadcaster_check=self.legacy_broadcaster_check)

        await self._notify('message_received', message)
        await self._dispatch_command(message.message, message.username, message)
