"""Splitting a command line into tokens and checking their syntax."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from itertools import chain

_SPACES = frozenset("\t\n\v\f\r ")
_OPERATORS = frozenset("|<>")
_QUOTES = frozenset("'\"")
_REDIRECTIONS = ("<", ">")


class UnclosedQuoteError(ValueError):
    """A quote in the command line is never closed."""

    def __init__(self) -> None:
        super().__init__("Error: a quote is not closed !")


class ShellSyntaxError(ValueError):
    """A token appears where the grammar does not allow it."""

    status = 2

    def __init__(self, token: str | None) -> None:
        self.token = token if token is not None else "newline"
        super().__init__(f"syntax error near unexpected token `{self.token}'")


def is_space(char: str) -> bool:
    """Return True for a space or one of the characters tab through carriage return."""
    return char in _SPACES


def _token_end(line: str, start: int) -> int:
    """Return the index just past the token that begins at ``start``."""
    first = line[start]
    if first in _OPERATORS:
        end = start + 1
        if line[end:end + 1] == first:
            end += 1
        return end
    pos = start
    while pos < len(line) and not is_space(line[pos]) and line[pos] not in _OPERATORS:
        if line[pos] in _QUOTES:
            closing = line.find(line[pos], pos + 1)
            if closing == -1:
                raise UnclosedQuoteError()
            pos = closing
        pos += 1
    return pos


def _scan(line: str) -> Iterator[str]:
    pos = 0
    while pos < len(line):
        if is_space(line[pos]):
            pos += 1
            continue
        end = _token_end(line, pos)
        yield line[pos:end]
        pos = end


def split_to_tokens(line: str) -> list[str]:
    """Split ``line`` into words, quoted runs and the operators ``| || < << > >>``.

    Raises UnclosedQuoteError if a quote is left open.
    """
    return list(_scan(line))


def check_syntax(tokens: Sequence[str] | None) -> bool:
    """Check the order of pipes and redirections in ``tokens``.

    Returns False when there is nothing to run, True when the tokens are
    well formed, and raises ShellSyntaxError naming the offending token
    otherwise.
    """
    if not tokens:
        return False
    after_redirection = False
    after_pipe = True
    for token in chain(tokens, [None]):
        if after_redirection:
            if token is None or token.startswith(("<", ">", "|")):
                raise ShellSyntaxError(token)
            after_redirection = False
        elif token is not None and token.startswith(_REDIRECTIONS):
            after_redirection = True
        if after_pipe:
            if token is None or token.startswith("|"):
                raise ShellSyntaxError(token)
            after_pipe = False
        elif token is not None and token.startswith("|"):
            after_pipe = True
    return True