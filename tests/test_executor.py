import os
import sys

import pytest

from minishell.builtins import ShellExit
from minishell.environment import Environment
from minishell.executor import execute_pipeline, find_in_path
from minishell.parser import parse_to_commands
from minishell.redirect import apply_redirections


@pytest.fixture
def env(tmp_path):
    empty = tmp_path / "bin"
    empty.mkdir()
    return Environment({"PATH": str(empty)})


def _run(tokens, env):
    commands = parse_to_commands(tokens)
    status = apply_redirections(commands)
    return execute_pipeline(commands, env, status), commands


def test_find_in_path_returns_first_executable(tmp_path):
    other = tmp_path / "other"
    bindir = tmp_path / "bin"
    other.mkdir()
    bindir.mkdir()
    tool = bindir / "tool"
    tool.write_text("#!/bin/sh\n")
    tool.chmod(0o755)
    env = Environment({"PATH": f"{other}:{bindir}"})
    assert find_in_path("tool", env) == f"{bindir}/tool"


def test_find_in_path_ignores_non_executables(tmp_path):
    plain = tmp_path / "plain"
    plain.write_text("data")
    plain.chmod(0o644)
    env = Environment({"PATH": str(tmp_path)})
    assert find_in_path("plain", env) is None


def test_find_in_path_without_path():
    assert find_in_path("ls", Environment()) is None


def test_builtin_writes_to_redirected_file(tmp_path, env):
    out = tmp_path / "out.txt"
    status, _ = _run(["echo", "hello", ">", str(out)], env)
    assert status == 0
    assert out.read_text() == "hello\n"


def test_external_exit_status(env):
    status, commands = _run([sys.executable, "-c", "raise SystemExit(3)"], env)
    assert status == 3
    assert commands[0].pid > 0


def test_external_output_redirected(tmp_path, env):
    out = tmp_path / "out.txt"
    status, _ = _run([sys.executable, "-c", "print('out')", ">", str(out)], env)
    assert status == 0
    assert out.read_text() == "out\n"


def test_pipeline_passes_data(tmp_path, env):
    out = tmp_path / "out.txt"
    tokens = [
        sys.executable, "-c", "print('abc')", "|",
        sys.executable, "-c", "import sys; print(sys.stdin.read().upper(), end='')",
        ">", str(out),
    ]
    status, _ = _run(tokens, env)
    assert status == 0
    assert out.read_text() == "ABC\n"


def test_pipeline_status_is_last_program(env):
    tokens = [
        sys.executable, "-c", "raise SystemExit(0)", "|",
        sys.executable, "-c", "raise SystemExit(4)",
    ]
    status, _ = _run(tokens, env)
    assert status == 4


def test_children_get_empty_environment(env):
    env.set("MINISHELL_MARK", "present")
    code = "import os; raise SystemExit(1 if 'MINISHELL_MARK' in os.environ else 0)"
    status, _ = _run([sys.executable, "-c", code], env)
    assert status == 0


def test_unknown_command(env, capsys):
    status, _ = _run(["no-such-command-zz"], env)
    assert status == 127
    assert "no-such-command-zz: Command not found" in capsys.readouterr().out


def test_directory_is_not_executable(tmp_path, env, capsys):
    directory = tmp_path / "somedir"
    directory.mkdir()
    status, _ = _run([str(directory)], env)
    assert status == 126
    assert "Is a directory" in capsys.readouterr().out


def test_file_without_permission(tmp_path, env, capsys):
    plain = tmp_path / "script"
    plain.write_text("data")
    plain.chmod(0o644)
    status, _ = _run([str(plain)], env)
    assert status == 126
    assert "Permission denied" in capsys.readouterr().out


def test_failed_redirection_skips_command(tmp_path, env):
    out = tmp_path / "never"
    status, _ = _run(["echo", "hi", "<", str(tmp_path / "missing"), ">", str(out)], env)
    assert status == 1
    assert not out.exists()


def test_exit_builtin_raises_and_closes(tmp_path, env):
    commands = parse_to_commands(["exit", "5", ">", str(tmp_path / "f")])
    apply_redirections(commands)
    assert commands[0].fd_out > 1
    with pytest.raises(ShellExit) as info:
        execute_pipeline(commands, env, 0)
    assert info.value.status == 5
    assert commands[0].fd_out == 1


def test_descriptors_closed_after_run(tmp_path, env):
    out = tmp_path / "out.txt"
    status, commands = _run(["echo", "x", ">", str(out)], env)
    assert (commands[0].fd_in, commands[0].fd_out) == (0, 1)
    with pytest.raises(OSError):
        os.fstat(12345)
    assert status == 0