"""Running the commands of a pipeline."""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Iterable
from typing import Union

from minishell.builtins import run_builtin
from minishell.environment import Environment
from minishell.parser import Command
from minishell.redirect import close_fds

_RED = "\033[0;31m"
_RESET = "\033[0m"
_NOT_FOUND = 127
_NOT_EXECUTABLE = 126

_Outcome = Union["subprocess.Popen[bytes]", int]


def find_in_path(name: str, env: Environment) -> str | None:
    """Return the first ``DIR/name`` in PATH that is executable, or None."""
    for directory in env.path_entries():
        candidate = f"{directory}/{name}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None


def _spawn(command: Command, env: Environment) -> _Outcome:
    """Start an external program, or return the status of failing to find it."""
    name = command.args[0]
    program = name
    if not os.access(name, os.X_OK) or os.path.isdir(name):
        found = find_in_path(name, env)
        if found is None:
            return _NOT_EXECUTABLE if os.path.exists(name) else _NOT_FOUND
        program = found
    executable = program if os.sep in program else os.path.join(os.curdir, program)
    sys.stdout.flush()
    try:
        process = subprocess.Popen(
            [program, *command.args[1:]],
            executable=executable,
            stdin=None if command.fd_in == 0 else command.fd_in,
            stdout=None if command.fd_out == 1 else command.fd_out,
            env={},
            close_fds=True,
        )
    except FileNotFoundError:
        return _NOT_FOUND
    except OSError:
        return _NOT_EXECUTABLE
    command.pid = process.pid
    return process


def _exit_status(returncode: int) -> int:
    return returncode if returncode >= 0 else 128 - returncode


def _report(name: str, status: int) -> None:
    if status == _NOT_FOUND:
        print(f"{_RED}{name}: Command not found{_RESET}")
    elif status == _NOT_EXECUTABLE:
        reason = "Is a directory" if os.path.isdir(name) else "Permission denied"
        print(f"{_RED}{name}: {reason}{_RESET}")


def execute_pipeline(commands: Iterable[Command], env: Environment, status: int = 0) -> int:
    """Run every command of the pipeline and return the resulting exit status.

    Built-ins run in the shell itself; other programs are started with an
    empty environment. Commands marked as errors are skipped. The status is
    that of the last started program, or otherwise of the last built-in,
    starting from ``status``.
    """
    commands = list(commands)
    started: list[tuple[Command, _Outcome]] = []
    try:
        for command in commands:
            if not command.args:
                command.error = True
            if not command.error:
                result = run_builtin(command, env, status)
                if result is None:
                    started.append((command, _spawn(command, env)))
                else:
                    status = result
            close_fds([command])
    except BaseException:
        close_fds(commands)
        raise
    for command, outcome in started:
        if isinstance(outcome, int):
            status = outcome
        else:
            status = _exit_status(outcome.wait())
        _report(command.args[0], status)
    return status