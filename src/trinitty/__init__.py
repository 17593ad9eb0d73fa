"""
trinitty: a minimal terminal UI runtime

Merges keyboard/mouse input with a fixed-cadence tick into one ordered
event stream, renders a frame per event, and always hands the terminal
back in the state it was found.

Quick Start:
    $ trinitty          # press q to quit

    >>> from trinitty import RuntimeConfig, run_app
    >>> run_app(RuntimeConfig(tick_rate=0.25))
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from trinitty.config import RuntimeConfig
from trinitty.errors import (
    ChannelClosedError,
    ConfigError,
    InputStreamError,
    TerminalError,
    TerminalStateError,
    TrinittyError,
)
from trinitty.cli.studio.runtime import run_app

__all__ = [
    # Version
    "__version__",
    # Configuration
    "RuntimeConfig",
    # Errors
    "TrinittyError",
    "ConfigError",
    "TerminalError",
    "TerminalStateError",
    "ChannelClosedError",
    "InputStreamError",
    # Entry
    "run_app",
]
