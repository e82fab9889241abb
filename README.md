# minishell

A small interactive shell. It reads a line, splits it into tokens, checks the
syntax, expands `$NAME` and `$?`, collects here-documents, applies
redirections and runs the resulting pipeline. External programs are looked up
along `PATH`.

## Features

- Pipelines joined with `|`
- Redirections `<`, `>`, `>>` and here-documents `<<`
- Single and double quotes; `$NAME` and `$?` are expanded outside single
  quotes, and the quotes themselves are removed
- Builtins: `echo` (with `-n`), `cd`, `pwd`, `export` (including
  `NAME+=VALUE`), `unset`, `env`, `exit`
- Ctrl-C and Ctrl-\ handled at the prompt, while commands run and inside
  here-documents
- Line editing and history through Python's `readline` module where it is
  available

## Installing

```
pip install .
```

## Running

```
minishell
```

The command takes no options. You get a prompt; type commands as you would
in a POSIX shell:

```
echo "hello $NAME" | tr a-z A-Z > out.txt
cat << EOF
line one
EOF
export GREETING=hi
env
exit 3
```

At end of input (Ctrl-D) the shell prints `exit` and leaves with the status
of the last command.

Programs other than the builtins are started with an empty environment:
variables set with `export` are seen by `$NAME` expansion and by `env`, but
not by the programs the shell starts. A command that cannot be found sets
the status to 127 and prints `Command not found`; one that exists but cannot
be run sets 126.

## Using it from Python

```python
from minishell.shell import Shell

shell = Shell({"PATH": "/usr/bin:/bin", "HOME": "/tmp"})
shell.run_line("export NAME=world")
status = shell.run_line("echo hello $NAME")
```

`Shell.run_line(line)` runs one line and returns the new exit status; it
raises `minishell.builtins.ShellExit` when the line runs `exit`.
`Shell.repl(reader)` runs the read–evaluate loop with any callable that takes
a prompt and returns a line, or `None` at end of input, and returns the exit
status.

The building blocks live in their own modules:

- `minishell.lexer`: `split_to_tokens`, `check_syntax`, `UnclosedQuoteError`,
  `ShellSyntaxError`
- `minishell.parser`: `parse_to_commands`, `Command`
- `minishell.expand`: `expand_key`, `expand_str`, `expand_commands`
- `minishell.heredoc`: `read_heredoc`, `collect_heredocs`, `unquote`,
  `HeredocInterrupted`
- `minishell.redirect`: `apply_redirections`, `close_fds`
- `minishell.executor`: `execute_pipeline`, `find_in_path`
- `minishell.builtins`: the builtin commands, `run_builtin` and `ShellExit`
- `minishell.environment`: `Environment`
- `minishell.signals`: `set_signal_handler`, `SignalMode`

## What it does not do

- There is no `;`, `&&`, background `&`, subshell or wildcard expansion;
  `||` is treated like `|`.
- `cd` without an argument stays in the current directory (it only
  refreshes `PWD` and `OLDPWD`); it does not go to `HOME`.
- `cd`, `export` with arguments, `unset` and `exit` do nothing inside a
  pipeline.
- The shell only reads interactively; it does not run script files or take
  a command with an option.

## Tests

```
pip install .[test]
pytest
```