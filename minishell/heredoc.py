"""Reading here-documents from the terminal."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from minishell.environment import Environment
from minishell.expand import expand_str
from minishell.parser import Command

_RED = "\033[0;31m"
_RESET = "\033[0m"

Reader = Callable[[str], "str | None"]


class HeredocInterrupted(Exception):
    """Reading a here-document was interrupted by the user."""

    status = 130

    def __init__(self) -> None:
        super().__init__("here-document interrupted")


def unquote(word: str) -> str:
    """Return ``word`` with every single and double quote removed."""
    return word.replace("'", "").replace('"', "")


def read_heredoc(delimiter: str, env: Environment, status: int, reader: Reader) -> str:
    """Read lines with ``reader`` until ``delimiter`` and return their expanded text.

    ``reader`` takes a prompt and returns a line, or None at end of input.
    An empty delimiter ends the document after its first line. End of input
    prints a warning and keeps what was read. KeyboardInterrupt from the
    reader raises HeredocInterrupted.
    """
    lines: list[str] = []
    line_number = 1
    while True:
        try:
            line = reader("> ")
        except KeyboardInterrupt:
            raise HeredocInterrupted() from None
        if line is None:
            print(
                f"\n{_RED}minishell: warning: here-document at line {line_number} "
                f"delimited by end-of-file (wanted `{delimiter}'){_RESET}"
            )
            break
        if line == delimiter:
            break
        lines.append(expand_str(line, None, env, status) + "\n")
        if not delimiter:
            break
        line_number += 1
    return "".join(lines)


def collect_heredocs(
    commands: Iterable[Command], env: Environment, status: int, reader: Reader
) -> None:
    """Read every here-document of every command.

    Each ``<<`` delimiter is unquoted in place, and a command's ``heredoc``
    is set to the text of its last here-document.
    """
    for command in commands:
        command.heredoc = None
        for index, arg in enumerate(command.args):
            if arg == "<<" and index + 1 < len(command.args):
                delimiter = unquote(command.args[index + 1])
                command.args[index + 1] = delimiter
                command.heredoc = read_heredoc(delimiter, env, status, reader)