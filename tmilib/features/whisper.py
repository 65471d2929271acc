## whisper.py
# Whispers: private messages relayed through the #jtv channel.
from tmilib import protocol
from tmilib.models import WhisperMessage
from . import commands

__all__ = ['WhisperSupport']


class WhisperSupport(commands.CommandSupport):
    """ Receive and send whispers. """

    def __init__(self, *args, **kwargs):
        self.previous_whisper = None
        super().__init__(*args, **kwargs)

    ## API.

    async def send_whisper(self, receiver, message, dry_run=False):
        """
        Whisper message to receiver.
        Nothing is sent on a dry run, or when the throttler does not permit the message.
        """
        if dry_run:
            return
        if self.throttler is not None and not self.throttler.message_permitted(message):
            self.logger.debug('Whisper to %s dropped by throttler.', receiver)
            return

        line = protocol.whisper_line(self.username, receiver, message)
        await self._send(line)
        await self._notify('whisper_sent', receiver, message)

    ## Callbacks.

    async def on_whisper_received(self, whisper):
        """ Callback called when a whisper was received. """
        pass

    async def on_whisper_sent(self, receiver, message):
        """ Callback called after a whisper was written to the connection. """
        pass

    ## Message handlers.

    async def on_raw_whisper(self, line):
        """ WHISPER: a private message to us. Processed whether or not the login completed. """
        whisper = WhisperMessage.parse(line, bot_username=self.username, emotes=self.emotes)
        self.previous_whisper = whisper

        await self._notify('whisper_received', whisper)
        await self._dispatch_command(whisper.message, whisper.username, whisper)
