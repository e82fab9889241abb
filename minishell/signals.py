"""Signal handling for the prompt, for running commands and for here-documents."""

from __future__ import annotations

import enum
import signal
from collections.abc import Callable
from types import FrameType

StatusCallback = Callable[[int], None]
Handler = Callable[[int, "FrameType | None"], None]


class SignalMode(enum.Enum):
    """What the shell is doing when a signal arrives."""

    PROMPT = 1
    FORK = 2
    HEREDOC = 3


def _prompt_handler(on_status: StatusCallback) -> Handler:
    def handler(signum: int, frame: FrameType | None) -> None:
        if signum == signal.SIGINT:
            print(flush=True)
            on_status(130)
            raise KeyboardInterrupt
        on_status(131)

    return handler


def _fork_handler(on_status: StatusCallback) -> Handler:
    def handler(signum: int, frame: FrameType | None) -> None:
        if signum == signal.SIGINT:
            print(flush=True)
            on_status(130)
        else:
            print("Quit (core dumped)", flush=True)
            on_status(131)

    return handler


def _heredoc_handler(on_status: StatusCallback) -> Handler:
    def handler(signum: int, frame: FrameType | None) -> None:
        if signum == signal.SIGINT:
            print(flush=True)
            on_status(130)
            raise KeyboardInterrupt
        on_status(0)

    return handler


_FACTORIES = {
    SignalMode.PROMPT: _prompt_handler,
    SignalMode.FORK: _fork_handler,
    SignalMode.HEREDOC: _heredoc_handler,
}


def set_signal_handler(mode: SignalMode, on_status: StatusCallback) -> None:
    """Install the SIGINT and SIGQUIT handlers for ``mode``.

    ``on_status`` receives the exit status a signal sets. At the prompt and
    in a here-document, SIGINT also raises KeyboardInterrupt to abandon input.
    """
    handler = _FACTORIES[SignalMode(mode)](on_status)
    signal.signal(signal.SIGINT, handler)
    sigquit = getattr(signal, "SIGQUIT", None)
    if sigquit is not None:
        signal.signal(sigquit, handler)