## throttling.py
# Interface for outbound message throttling policies.
from abc import abstractmethod

__all__ = ['Throttler']


class Throttler:
    """
    Abstract throttling policy. Attach an instance to a client as `client.throttler`.
    The client asks it before every whisper, and before every raw line when `apply_to_raw_messages` is set.
    """
    apply_to_raw_messages = False

    @abstractmethod
    def message_permitted(self, message):
        """ Return whether `message` may be sent now. Implementations record the attempt. """
        raise NotImplementedError()
