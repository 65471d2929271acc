## credentials.py
# Login credentials and connection target.
from . import protocol

__all__ = ['ConfigurationError', 'ConnectionCredentials']

OAUTH_PREFIX = 'oauth:'


class ConfigurationError(ValueError):
    """ Raised when the client is given unusable credentials. """
    pass


class ConnectionCredentials:
    """ Username, OAuth token and server to log in to. Validated on creation. """

    def __init__(self, username, oauth, host=protocol.DEFAULT_HOST, port=None, tls=False):
        if port is None:
            port = protocol.DEFAULT_TLS_PORT if tls else protocol.DEFAULT_PORT

        self.username = (username or '').strip().lower()
        self.oauth = normalize_oauth(oauth)
        self.host = host
        self.port = port
        self.tls = tls
        self.validate()

    def validate(self):
        """ Raise ConfigurationError if these credentials can't be used to log in. """
        validate(self)

    def __repr__(self):
        # Never show the token.
        return '<{cls} {user}@{host}:{port}>'.format(
            cls=self.__class__.__name__, user=self.username, host=self.host, port=self.port)


def normalize_oauth(token):
    """ Make sure the token carries the `oauth:` prefix the server expects in PASS. """
    token = (token or '').strip()
    if not token:
        return token
    if token.lower().startswith(OAUTH_PREFIX):
        return OAUTH_PREFIX + token[len(OAUTH_PREFIX):]
    return OAUTH_PREFIX + token


def validate(credentials):
    """ Check any credentials-like object: it needs a username, an OAuth token, a host and a port. """
    if credentials is None:
        raise ConfigurationError('No credentials given.')

    for attr in ('username', 'oauth', 'host', 'port'):
        if not hasattr(credentials, attr):
            raise ConfigurationError('Credentials are missing the {} attribute.'.format(attr))

    username = credentials.username
    if not username or not isinstance(username, str):
        raise ConfigurationError('A username is required.')
    if protocol.ARGUMENT_SEPARATOR.search(username) or any(ch in username for ch in ':!@#'):
        raise ConfigurationError('Invalid username: {!r}'.format(username))
    if not credentials.oauth or credentials.oauth == OAUTH_PREFIX:
        raise ConfigurationError('An OAuth token is required.')
    if not credentials.host:
        raise ConfigurationError('A host is required.')
    if not isinstance(credentials.port, int) or isinstance(credentials.port, bool) \
            or not 0 < credentials.port < 65536:
        raise ConfigurationError('Invalid port: {!r}'.format(credentials.port))
