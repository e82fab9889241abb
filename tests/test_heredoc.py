import pytest

from minishell.environment import Environment
from minishell.heredoc import HeredocInterrupted, collect_heredocs, read_heredoc, unquote
from minishell.parser import parse_to_commands


def make_reader(lines):
    pending = list(lines)
    prompts = []

    def reader(prompt):
        prompts.append(prompt)
        return pending.pop(0) if pending else None

    reader.pending = pending
    reader.prompts = prompts
    return reader


@pytest.fixture
def env():
    return Environment({"USER": "alice"})


def test_unquote():
    assert unquote("'E'O\"F\"") == "EOF"
    assert unquote("plain") == "plain"


def test_read_until_delimiter(env):
    reader = make_reader(["hello $USER", "EOF", "after"])
    assert read_heredoc("EOF", env, 0, reader) == "hello alice\n"
    assert reader.pending == ["after"]
    assert set(reader.prompts) == {"> "}


def test_status_expanded(env):
    reader = make_reader(["$?", "END"])
    assert read_heredoc("END", env, 5, reader) == "5\n"


def test_end_of_input_warns(env, capsys):
    reader = make_reader(["a"])
    assert read_heredoc("EOF", env, 0, reader) == "a\n"
    out = capsys.readouterr().out
    assert "delimited by end-of-file" in out
    assert "(wanted `EOF')" in out


def test_empty_delimiter_takes_one_line(env):
    reader = make_reader(["x", "y"])
    assert read_heredoc("", env, 0, reader) == "x\n"
    assert reader.pending == ["y"]


def test_interrupt(env):
    def reader(prompt):
        raise KeyboardInterrupt

    with pytest.raises(HeredocInterrupted) as info:
        read_heredoc("EOF", env, 0, reader)
    assert info.value.status == 130


def test_collect_sets_last_heredoc(env):
    commands = parse_to_commands(["cat", "<<", "'A'", "<<", "B", "|", "wc"])
    reader = make_reader(["one", "A", "two $USER", "B"])
    collect_heredocs(commands, env, 0, reader)
    assert commands[0].args == ["cat", "<<", "A", "<<", "B"]
    assert commands[0].heredoc == "two alice\n"
    assert commands[1].heredoc is None
    assert reader.pending == []


def test_collect_propagates_interrupt(env):
    commands = parse_to_commands(["cat", "<<", "X"])

    def reader(prompt):
        raise KeyboardInterrupt

    with pytest.raises(HeredocInterrupted):
        collect_heredocs(commands, env, 0, reader)