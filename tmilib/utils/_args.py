## _args.py
# Common argument parsing code.
import argparse
import logging
import os

import tmilib

USERNAME_ENV = 'TMILIB_USERNAME'
OAUTH_ENV = 'TMILIB_OAUTH'


def client_from_args(name, description, cls=tmilib.Client, argv=None):
    """ Build a client from command line arguments. Returns the client and the parsed arguments. """
    parser = argparse.ArgumentParser(name, description=description, add_help=False,
        epilog='This program is part of {package}.'.format(package=tmilib.__name__))

    meta = parser.add_argument_group('Meta')
    meta.add_argument('-h', '--help', action='help', help='What you are reading right now.')
    meta.add_argument('-v', '--version', action='version', version='{package}/%(prog)s {ver}'.format(package=tmilib.__name__, ver=tmilib.__version__), help='Dump version number.')
    meta.add_argument('-V', '--verbose', help='Be verbose in warnings and errors.', action='store_true', default=False)
    meta.add_argument('-d', '--debug', help='Show debug output.', action='store_true', default=False)

    conn = parser.add_argument_group('Connection')
    conn.add_argument('-s', '--server', help='The server to connect to. (default: {})'.format(tmilib.protocol.DEFAULT_HOST), default=tmilib.protocol.DEFAULT_HOST, metavar='SERVER')
    conn.add_argument('-p', '--port', help='The port to use. (default: 6667, 6697 (TLS))', type=int, metavar='PORT')
    conn.add_argument('--tls', help='Use TLS. (default: no)', action='store_true', default=False)

    auth = parser.add_argument_group('Authentication')
    auth.add_argument('-u', '--username', help='Login name. (default: ${})'.format(USERNAME_ENV), default=os.getenv(USERNAME_ENV), metavar='USER')
    auth.add_argument('-o', '--oauth', help='OAuth token. (default: ${})'.format(OAUTH_ENV), default=os.getenv(OAUTH_ENV), metavar='TOKEN')

    init = parser.add_argument_group('Initialization')
    init.add_argument('-c', '--command-identifier', help='Character that marks a command. Can be set multiple times.', action='append', dest='command_identifiers', default=[], metavar='CHAR')
    init.add_argument('--replace-emotes', help='Render emotes in chat messages. (default: no)', action='store_true', default=False)

    action = parser.add_argument_group('Actions')
    action.add_argument('-w', '--whisper', help='Whisper MESSAGE to RECEIVER once logged in.', nargs=2, metavar=('RECEIVER', 'MESSAGE'))

    args = parser.parse_args(argv)

    # Set log level.
    if args.debug:
        log_level = logging.DEBUG
    elif args.verbose:
        log_level = logging.INFO
    else:
        log_level = logging.ERROR

    logging.basicConfig(level=log_level)

    # Setup client.
    try:
        credentials = tmilib.ConnectionCredentials(args.username, args.oauth, host=args.server, port=args.port, tls=args.tls)
    except tmilib.ConfigurationError as e:
        parser.error(str(e))

    client = cls(credentials, command_identifiers=args.command_identifiers, replace_emotes=args.replace_emotes)
    return client, args
