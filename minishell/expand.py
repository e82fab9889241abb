"""Expansion of ``$`` variables and removal of quotes."""

from __future__ import annotations

from collections.abc import Iterable

from minishell.environment import Environment
from minishell.lexer import is_space
from minishell.parser import Command

_KEY_STOPS = frozenset("$'\"")
_QUOTES = frozenset("'\"")


def _key_end(text: str, start: int) -> int:
    pos = start
    while pos < len(text) and not is_space(text[pos]) and text[pos] not in _KEY_STOPS:
        pos += 1
    return pos


def expand_key(text: str, env: Environment, status: int) -> tuple[str, int]:
    """Expand the ``$`` reference at the start of ``text``.

    Returns the replacement and the number of characters it stood for.
    ``$?`` gives ``status`` followed by the rest of the word; an undefined
    name gives an empty string.
    """
    end = _key_end(text, 1)
    if text[1:2] == "?":
        return str(status) + text[2:end], end
    return env.get(text[1:end]) or "", end


def _dollar_expands(sep: str | None, quote: str | None) -> bool:
    return not (sep and quote == sep)


def _literal_end(text: str, pos: int, sep: str | None, quote: str | None) -> int:
    while pos < len(text):
        char = text[pos]
        if char == "$" and _dollar_expands(sep, quote):
            break
        if quote is not None and char == quote:
            break
        if sep and quote is None and char in _QUOTES:
            break
        pos += 1
    return pos


def expand_str(text: str, sep: str | None, env: Environment, status: int) -> str:
    """Expand every ``$`` reference in ``text``.

    With ``sep`` set, quotes are removed and no expansion happens inside
    quotes of that kind. Without it, quotes are kept as ordinary text.
    """
    parts: list[str] = []
    quote: str | None = None
    pos = 0
    while pos < len(text):
        char = text[pos]
        if sep and quote is None and char in _QUOTES:
            quote = char
            pos += 1
        elif char == "$" and _dollar_expands(sep, quote):
            value, used = expand_key(text[pos:], env, status)
            parts.append(value)
            pos += used
        elif sep and char == quote:
            quote = None
            pos += 1
        else:
            end = _literal_end(text, pos + 1, sep, quote)
            parts.append(text[pos:end])
            pos = end
    return "".join(parts)


def expand_commands(commands: Iterable[Command], env: Environment, status: int) -> None:
    """Expand the arguments of every command in place.

    The word after a ``<<`` operator is left untouched.
    """
    for command in commands:
        expanded: list[str] = []
        skip_next = False
        for arg in command.args:
            if skip_next:
                expanded.append(arg)
                skip_next = False
                continue
            value = expand_str(arg, "'", env, status)
            expanded.append(value)
            skip_next = value == "<<"
        command.args = expanded