"""The commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
from collections.abc import Callable
from itertools import dropwhile

from minishell.environment import Environment
from minishell.lexer import is_space
from minishell.parser import Command

_RED = "\033[0;31m"
_RESET = "\033[0m"
_INT_MAX = 2147483647
_DIGITS = frozenset("0123456789")

DECLARED = 321
"""Returned by check_identifier for a bare name that needs no assignment."""


class ShellExit(Exception):
    """The shell is to terminate; ``status`` is the process exit status."""

    def __init__(self, status: int) -> None:
        self.status = status % 256
        super().__init__(f"exit {self.status}")


def _write(fd: int, text: str) -> None:
    view = memoryview(text.encode("utf-8", "surrogateescape"))
    while view:
        written = os.write(fd, view)
        view = view[written:]


def _error(message: str) -> None:
    print(f"{_RED}{message}{_RESET}")


def _getcwd() -> str:
    try:
        return os.getcwd()
    except OSError:
        return ""


def atoi(text: str) -> int:
    """Read a leading decimal integer the way the shell's exit does.

    Leading blanks and one sign are accepted and reading stops at the first
    non-digit. A positive value past the int range gives -1 and a negative
    one past it gives 0.
    """
    pos = 0
    while pos < len(text) and is_space(text[pos]):
        pos += 1
    sign = 1
    if text[pos:pos + 1] in ("+", "-"):
        if text[pos] == "-":
            sign = -1
        pos += 1
    result = 0
    while pos < len(text) and text[pos] in _DIGITS and result < _INT_MAX + 3:
        result = result * 10 + int(text[pos])
        pos += 1
    if result > _INT_MAX and sign == 1:
        return -1
    if result > _INT_MAX + 1 and sign == -1:
        return 0
    return result * sign


def is_n_option(arg: str) -> bool:
    """Return True if ``arg`` is a dash followed by one or more ``n``."""
    return len(arg) > 1 and arg[0] == "-" and set(arg[1:]) == {"n"}


def echo(command: Command) -> int:
    """Write the arguments separated by spaces, with a newline unless ``-n`` leads."""
    words = command.args[1:]
    rest = list(dropwhile(is_n_option, words))
    text = " ".join(rest)
    if len(rest) == len(words):
        text += "\n"
    _write(command.fd_out, text)
    return 0


def pwd(command: Command) -> int:
    """Write the current working directory."""
    try:
        path = os.getcwd()
    except OSError:
        return 0
    _write(command.fd_out, path + "\n")
    return 0


def cd(command: Command, env: Environment) -> int:
    """Change the working directory and update PWD and OLDPWD.

    Does nothing inside a pipeline. Without an argument the directory stays
    the same but both variables are refreshed.
    """
    if command.in_pipeline():
        return 0
    old = _getcwd()
    args = command.args
    if len(args) > 2:
        _error("cd: too many arguments")
        return 1
    if len(args) == 2:
        try:
            os.chdir(args[1])
        except OSError:
            return 1
    env.set("OLDPWD", old)
    env.set("PWD", _getcwd())
    return 0


def check_identifier(arg: str, env: Environment) -> int:
    """Check an ``export`` argument.

    Returns 0 for an assignment still to be made, DECLARED for a bare name
    (which is defined empty if it was not yet set), and otherwise the
    non-zero exit status of an invalid identifier.
    """
    if arg.startswith(("=", "+")):
        return 1
    if arg.startswith("-"):
        return 2
    if arg and arg[0] in _DIGITS:
        return 1
    end = next((pos for pos, char in enumerate(arg) if char in "+="), len(arg))
    if arg[end:end + 1] == "+":
        end += 1
    if arg[end:end + 1] == "+":
        return 1
    if end >= len(arg):
        if arg not in env:
            env.set(arg, "")
        return DECLARED
    return 0


def _assign(arg: str, env: Environment) -> None:
    name, _, value = arg.partition("=")
    if name.endswith("+"):
        env.append(name[:-1], value)
    else:
        env.set(name, value)


def export(command: Command, env: Environment) -> int:
    """Define variables, or list them all sorted when given no argument.

    Assignments are ignored inside a pipeline. ``NAME+=VALUE`` appends.
    The first invalid identifier stops processing and gives its status.
    """
    if len(command.args) < 2:
        _write(
            command.fd_out,
            "".join(f'declare -x {key}="{value}"\n' for key, value in env.sorted_items()),
        )
        return 0
    if command.in_pipeline():
        return 0
    for arg in command.args[1:]:
        code = check_identifier(arg, env)
        if code == DECLARED:
            continue
        if code:
            _error(f"minishell: export: `{arg}' not a valid identifier")
            return code
        _assign(arg, env)
    return 0


def unset(command: Command, env: Environment) -> int:
    """Remove the named variables; does nothing inside a pipeline."""
    if command.in_pipeline():
        return 0
    args = command.args
    if len(args) > 1 and args[1].startswith("-"):
        _error(f"minishell: unset: -{args[1][1:2]}: invalid option")
        return 2
    for name in args:
        env.unset(name)
    return 0


def env_builtin(command: Command, env: Environment) -> int:
    """Write every variable with a non-empty value as ``KEY=VALUE``."""
    args = command.args
    if len(args) > 1:
        _error(f"env: invalid argument: ‘{args[1]}'")
        return 125 if args[1].startswith("-") else 127
    _write(command.fd_out, "".join(f"{key}={value}\n" for key, value in env if value))
    return 0


def exit_builtin(command: Command | None, status: int) -> int:
    """Terminate the shell by raising ShellExit.

    With no command (end of input) the shell leaves with ``status``. Inside a
    pipeline nothing happens. A non-numeric argument exits with 2; more than
    one argument reports an error and returns 1 without exiting.
    """
    if command is None:
        print()
        raise ShellExit(status)
    if command.in_pipeline():
        return 0
    args = command.args
    code = atoi(args[1]) if len(args) > 1 else 0
    if len(args) > 1 and not args[1].startswith("0") and code == 0:
        _error(f"minishell: exit: {args[1]}: numeric arguments required")
        raise ShellExit(2)
    if len(args) > 2:
        _error("minishell: exit: too many arguments")
        return 1
    print("exit")
    raise ShellExit(code)


_Builtin = Callable[[Command, Environment, int], int]

_BUILTINS: dict[str, _Builtin] = {
    "echo": lambda command, env, status: echo(command),
    "cd": lambda command, env, status: cd(command, env),
    "pwd": lambda command, env, status: pwd(command),
    "export": lambda command, env, status: export(command, env),
    "unset": lambda command, env, status: unset(command, env),
    "env": lambda command, env, status: env_builtin(command, env),
    "exit": lambda command, env, status: exit_builtin(command, status),
}


def run_builtin(command: Command, env: Environment, status: int) -> int | None:
    """Run ``command`` if it names a built-in and return its exit status.

    Returns None when the command is not a built-in. ``exit`` may raise
    ShellExit.
    """
    if not command.args:
        return None
    builtin = _BUILTINS.get(command.args[0])
    if builtin is None:
        return None
    return builtin(command, env, status)