from . import connection, protocol, client, features

from .client import Error, NotConnected, AuthenticationRejected, ConfigurationError, ConnectionState, BasicClient
from .credentials import ConnectionCredentials
from .emotes import MessageEmote, MessageEmoteCollection
from .models import Badge, ChatMessage, Command, EmoteOccurrence, UserType, WhisperMessage
from .protocol import MalformedLine, Priority, ProtocolViolation
from .throttling import Throttler

__name__ = 'tmilib'
__version__ = '0.1.0'
__version_info__ = (0, 1, 0)
__license__ = 'BSD'


def featurize(*features):
    """ Put features into proper MRO order. """
    from functools import cmp_to_key

    def compare_subclass(left, right):
        if issubclass(left, right):
            return -1
        elif issubclass(right, left):
            return 1
        return 0

    sorted_features = sorted(features, key=cmp_to_key(compare_subclass))
    name = 'FeaturizedClient[{features}]'.format(
        features=', '.join(feature.__name__ for feature in sorted_features))
    return type(name, tuple(sorted_features), {})


class Client(featurize(*features.ALL)):
    """ A client handling whispers, chat messages and commands. """
    pass


class WhisperClient(featurize(*features.LITE)):
    """ A client handling whispers and whispered commands only. """
    pass
