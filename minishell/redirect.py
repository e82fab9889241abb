"""Opening the files and pipes that commands read from and write to."""

from __future__ import annotations

import contextlib
import os
import tempfile
from collections.abc import Iterable

from minishell.parser import Command

_RED = "\033[0;31m"
_RESET = "\033[0m"
_OPERATORS = ("<", ">")
_MISSING = -1
_NO_INPUT = -101
_CREATE_MODE = 0o644


def _close(fd: int) -> None:
    with contextlib.suppress(OSError):
        os.close(fd)


def close_fds(commands: Iterable[Command]) -> None:
    """Close every descriptor a command holds other than the standard streams.

    The command's fields are reset to 0 and 1, so closing twice is harmless.
    """
    for command in commands:
        if command.fd_in > 0:
            _close(command.fd_in)
            command.fd_in = 0
        if command.fd_out > 1:
            _close(command.fd_out)
            command.fd_out = 1


def _open_file(path: str, flags: int) -> int:
    try:
        return os.open(path, flags, _CREATE_MODE)
    except OSError:
        return _MISSING


def _heredoc_fd(text: str) -> int:
    """Return a descriptor positioned at the start of a file holding ``text``."""
    with tempfile.TemporaryFile() as spool:
        spool.write(text.encode("utf-8", "surrogateescape"))
        spool.flush()
        spool.seek(0)
        return os.dup(spool.fileno())


def _redirect(command: Command, operator: str, target: str) -> bool:
    """Apply one redirection; return True if it made the command fail."""
    if command.error:
        return False
    if operator.startswith(">"):
        if command.fd_out > 1:
            _close(command.fd_out)
        mode = os.O_TRUNC if operator == ">" else os.O_APPEND
        command.fd_out = _open_file(target, os.O_WRONLY | os.O_CREAT | mode)
    else:
        if command.fd_in > 0:
            _close(command.fd_in)
        if operator == "<":
            command.fd_in = _open_file(target, os.O_RDONLY)
        elif command.heredoc is not None:
            command.fd_in = _heredoc_fd(command.heredoc)
        else:
            command.fd_in = _NO_INPUT
    if command.fd_in >= 0 and command.fd_out >= 0:
        return False
    command.error = True
    if _MISSING in (command.fd_in, command.fd_out):
        print(f"{_RED}minishell: {target}: No such file or directory{_RESET}")
    return True


def _open_redirections(command: Command) -> bool:
    kept: list[str] = []
    failed = False
    words = iter(command.args)
    for word in words:
        if word.startswith(_OPERATORS):
            target = next(words, None)
            if target is not None and _redirect(command, word, target):
                failed = True
        else:
            kept.append(word)
    command.args = kept
    return failed


def apply_redirections(commands: Iterable[Command]) -> int:
    """Connect the pipeline with pipes and open every redirection.

    Redirection operators and their targets are removed from the arguments.
    A command whose redirection fails is marked as an error and its later
    redirections are skipped. Returns 1 if any redirection failed, else 0.
    """
    commands = list(commands)
    status = 0
    for command, following in zip(commands, [*commands[1:], None]):
        if not command.has_prev:
            command.fd_in = 0
        command.fd_out = 1
        if following is not None:
            following.fd_in, command.fd_out = os.pipe()
        if _open_redirections(command):
            status = 1
    return status