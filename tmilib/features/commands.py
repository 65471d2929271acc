## commands.py
# Commands embedded in chat and whisper messages.
from tmilib import client, parsing

__all__ = ['CommandSupport']


class CommandSupport(client.BasicClient):
    """
    Command dispatch. A message whose first character is a registered command identifier
    fires on_command_received with the command name and its arguments.
    """

    def __init__(self, *args, command_identifier=None, command_identifiers=(), **kwargs):
        self.command_identifiers = set()
        super().__init__(*args, **kwargs)

        if command_identifier:
            self.add_command_identifier(command_identifier)
        for identifier in command_identifiers:
            self.add_command_identifier(identifier)

    ## API.

    def add_command_identifier(self, identifier):
        """ Treat messages starting with the given character as commands. """
        if not isinstance(identifier, str) or len(identifier) != 1:
            raise ValueError('Command identifier must be a single character: {!r}'.format(identifier))
        self.command_identifiers.add(identifier)

    def remove_command_identifier(self, identifier):
        """ Stop treating messages starting with the given character as commands. """
        self.command_identifiers.discard(identifier)

    ## Internals.

    async def _dispatch_command(self, body, username, message=None):
        """ Fire on_command_received if body is a command. """
        command = parsing.parse_command(body, self.command_identifiers, username=username, message=message)
        if command is None:
            return
        self.logger.debug('Command %s%s from %s.', command.identifier, command.command, username)
        await self._notify('command_received', command)

    ## Callbacks.

    async def on_command_received(self, command):
        """ Callback called when a message carrying a command was received. """
        pass
