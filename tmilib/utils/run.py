## run.py
# Run a client that prints whispers and commands.
import logging

from . import _args

logger = logging.getLogger(__name__)


def main(argv=None):
    client, args = _args.client_from_args('tmilib-whisper', description='Log in to Twitch chat and print whispers.',
                                          argv=argv)

    async def on_connected(username):
        print('Logged in as {}.'.format(username))
        if args.whisper:
            await client.send_whisper(*args.whisper)

    def on_whisper(whisper):
        print('[whisper] {}: {}'.format(whisper.display_name or whisper.username, whisper.message))

    def on_command(command):
        print('[command] {} {}{} {!r}'.format(command.username, command.identifier, command.command, command.arguments))

    def on_incorrect_login(error):
        logger.error('Incorrect login for %s.', error.username)

    client.subscribe('connected', on_connected)
    client.subscribe('whisper_received', on_whisper)
    client.subscribe('command_received', on_command)
    client.subscribe('incorrect_login', on_incorrect_login)
    client.run()


if __name__ == '__main__':
    main()
