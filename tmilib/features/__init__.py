from . import commands, whisper, chat

from .commands import CommandSupport
from .whisper import WhisperSupport
from .chat import ChatSupport

ALL = [ WhisperSupport, ChatSupport, CommandSupport ]
LITE = [ WhisperSupport, CommandSupport ]
