"""Exception types raised by the session core."""


class ImpmonError(Exception):
    """Base class for impmon errors."""


class InvalidStateError(ImpmonError):
    """A control operation is not valid for the current session phase."""


class MalformedSampleError(ImpmonError, ValueError):
    """A stream payload could not be parsed as a finite number."""


class TransportDisruptionError(ImpmonError):
    """The stream connection dropped or a command could not be delivered."""
