"""The shell's ordered table of environment variables."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


class Environment:
    """Variables kept in the order they were first defined.

    Iterating yields ``(key, value)`` pairs, so ``dict(env)`` gives a copy.
    """

    def __init__(self, items: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> None:
        self._vars: dict[str, str] = {}
        pairs = items.items() if isinstance(items, Mapping) else items
        for key, value in pairs:
            self.set(key, value)

    @classmethod
    def from_envp(cls, envp: Iterable[str]) -> Environment:
        """Build an environment from ``KEY=VALUE`` strings, splitting at the first ``=``."""
        env = cls()
        for entry in envp:
            key, _, value = entry.partition("=")
            env.set(key, value)
        return env

    def get(self, key: str) -> str | None:
        """Return the value of ``key``, or None if it is not defined."""
        return self._vars.get(key)

    def set(self, key: str, value: str) -> None:
        """Define ``key``; an existing variable keeps its position."""
        self._vars[key] = value

    def append(self, key: str, value: str) -> None:
        """Append ``value`` to ``key``, defining it if it is not yet set."""
        self._vars[key] = self._vars.get(key, "") + value

    def unset(self, key: str) -> None:
        """Remove ``key`` if it is defined."""
        self._vars.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(list(self._vars.items()))

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._vars!r})"

    def sorted_items(self) -> list[tuple[str, str]]:
        """Return all variables sorted by name."""
        return sorted(self._vars.items())

    def path_entries(self) -> list[str]:
        """Return the non-empty directories listed in PATH."""
        path = self._vars.get("PATH")
        if path is None:
            return []
        return [entry for entry in path.split(":") if entry]