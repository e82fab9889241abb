"""Grouping tokens into the commands of a pipeline."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field


@dataclass
class Command:
    """One simple command of a pipeline, with its arguments and redirections."""

    args: list[str] = field(default_factory=list)
    fd_in: int = 0
    fd_out: int = 1
    heredoc: str | None = None
    error: bool = False
    pid: int = 0
    has_prev: bool = False
    has_next: bool = False

    def in_pipeline(self) -> bool:
        """Return True if another command is piped into or out of this one."""
        return self.has_prev or self.has_next


def _split_on_pipes(tokens: Iterable[str]) -> Iterator[list[str]]:
    current: list[str] = []
    for token in tokens:
        if token.startswith("|"):
            yield current
            current = []
        else:
            current.append(token)
    yield current


def parse_to_commands(tokens: Iterable[str]) -> list[Command]:
    """Split ``tokens`` at every pipe token into a list of commands.

    Redirection operators and their targets stay among the arguments;
    an empty token list gives an empty pipeline.
    """
    tokens = list(tokens)
    if not tokens:
        return []
    commands = [Command(args=args) for args in _split_on_pipes(tokens)]
    for command in commands[1:]:
        command.has_prev = True
    for command in commands[:-1]:
        command.has_next = True
    return commands