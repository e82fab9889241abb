"""The interactive shell: reading lines and running them."""

from __future__ import annotations

import os
import signal
import sys
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from minishell.builtins import ShellExit, exit_builtin
from minishell.environment import Environment
from minishell.executor import execute_pipeline
from minishell.expand import expand_commands
from minishell.heredoc import HeredocInterrupted, collect_heredocs
from minishell.lexer import ShellSyntaxError, UnclosedQuoteError, check_syntax, split_to_tokens
from minishell.parser import parse_to_commands
from minishell.redirect import apply_redirections
from minishell.signals import SignalMode, set_signal_handler

try:
    import readline  # noqa: F401  line editing and history for input()
except ImportError:
    pass

PROMPT = "Minishell❤️ :"
_RED = "\033[0;31m"
_RESET = "\033[0m"

Reader = Callable[[str], "str | None"]


def _terminal_reader(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def _handled_signals() -> list[int]:
    sigquit = getattr(signal, "SIGQUIT", None)
    return [signum for signum in (signal.SIGINT, sigquit) if signum is not None]


class Shell:
    """A shell session: its variables, its last exit status and its input."""

    def __init__(self, environ: Mapping[str, str] | Environment | None = None) -> None:
        self.env = Environment(os.environ if environ is None else environ)
        self.status = 0
        self.reader: Reader = _terminal_reader
        self._signals_active = False
        self._mode = SignalMode.PROMPT

    def _on_signal_status(self, status: int) -> None:
        self.status = status

    def _apply_mode(self, mode: SignalMode) -> None:
        self._mode = mode
        set_signal_handler(mode, self._on_signal_status)

    @contextmanager
    def _signal_mode(self, mode: SignalMode) -> Iterator[None]:
        if not self._signals_active:
            yield
            return
        previous = self._mode
        self._apply_mode(mode)
        try:
            yield
        finally:
            self._apply_mode(previous)

    def run_line(self, line: str) -> int:
        """Run one command line and return the new exit status.

        Raises ShellExit when the line asks the shell to terminate.
        """
        try:
            tokens = split_to_tokens(line)
        except UnclosedQuoteError as exc:
            print(f"{_RED}{exc}{_RESET}")
            return self.status
        try:
            if not check_syntax(tokens):
                return self.status
        except ShellSyntaxError as exc:
            print(f"{_RED}Minishell: {exc}{_RESET}")
            self.status = exc.status
            return self.status
        commands = parse_to_commands(tokens)
        with self._signal_mode(SignalMode.FORK):
            expand_commands(commands, self.env, self.status)
            self.status = 0
            try:
                with self._signal_mode(SignalMode.HEREDOC):
                    collect_heredocs(commands, self.env, self.status, self.reader)
            except HeredocInterrupted as exc:
                self.status = exc.status
                return self.status
            status = apply_redirections(commands)
            self.status = execute_pipeline(commands, self.env, status)
        return self.status

    def repl(self, reader: Reader | None = None) -> int:
        """Prompt for lines until ``exit`` or end of input; return the exit status.

        ``reader`` takes a prompt and returns a line, or None at end of input;
        by default the terminal is read.
        """
        if reader is not None:
            self.reader = reader
        saved: dict[int, Any] = {signum: signal.getsignal(signum) for signum in _handled_signals()}
        self._signals_active = True
        self._apply_mode(SignalMode.PROMPT)
        try:
            while True:
                try:
                    line = self.reader(PROMPT)
                except KeyboardInterrupt:
                    continue
                if line is None:
                    print("\nexit", end="")
                    exit_builtin(None, self.status)
                    continue
                self.run_line(line)
        except ShellExit as exc:
            return exc.status
        finally:
            self._signals_active = False
            for signum, handler in saved.items():
                if handler is not None:
                    signal.signal(signum, handler)


def main(argv: list[str] | None = None) -> int:
    """Start an interactive session on the terminal; the shell takes no options."""
    return Shell().repl()


if __name__ == "__main__":
    sys.exit(main())