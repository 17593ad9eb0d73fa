"""Exception hierarchy shared by the runtime components."""


class TrinittyError(Exception):
    """Base class for errors that end the application with a failure exit."""


class ConfigError(TrinittyError):
    """Invalid runtime configuration value."""


class TerminalError(TrinittyError):
    """The terminal could not be switched into (or out of) managed mode."""


class TerminalStateError(TerminalError):
    """A drawing operation was attempted while the session is released."""


class ChannelClosedError(TrinittyError):
    """The other end of the event channel has gone away."""


class InputStreamError(TrinittyError):
    """Reading from the terminal input stream failed.

    There is no retry policy for a broken input device, so this always
    ends the application.
    """
