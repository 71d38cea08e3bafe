# digcore

Building blocks for a host monitoring agent:

- **Filters** (`digcore.filter`): glob, literal and `/regex/` patterns with
  include/exclude logic.
- **Choices** (`digcore.choice`): checking that an option is one of a set of
  allowed values.
- **Command helpers** (`digcore.shellquote`, `digcore.cmdx`): shell-style word
  splitting and running commands with a timeout.
- **Configuration** (`digcore.cfg`): merging TOML, YAML and JSON
  configuration, where `*.local.toml` files override the rest.
- **Queues** (`digcore.safequeue`): thread-safe queues, with an optional size
  limit.
- **Reconnect policy** (`digcore.server.reconnect`): error kinds, backoff
  with jitter and connection headers for a link to a central server.
- **MCP** (`digcore.mcp`): a JSON-RPC client for tool servers that talk over
  standard input and output.
- **Small helpers**: `digcore.conv.human_bytes` and the environment helpers
  `digcore.osx.get_env` and `digcore.osx.get_host_proc`.

## Filters

```python
from digcore.filter import new_include_exclude_filter

f = new_include_exclude_filter(["net*", "/(?i)panic/"], ["netlink"], True, False)
f.match("network")      # True
f.match("KERNEL PANIC") # True
f.match("netlink")      # False
```

Globs and literals must match the whole string; patterns wrapped in slashes
are regular expressions searched anywhere in it. `compile_filter` builds a
single filter from a pattern list and returns `None` for an empty list.
Invalid patterns raise `ValueError`.

## Running commands

```python
from digcore.shellquote import quote_split

quote_split('grep -i "out of memory" /var/log/messages')
# ['grep', '-i', 'out of memory', '/var/log/messages']
```

Unterminated quotes or a trailing backslash raise
`UnterminatedSingleQuoteError`, `UnterminatedDoubleQuoteError` or
`UnterminatedEscapeError` (all `ValueError` subclasses).

`digcore.cmdx.command_run` splits a command line the same way, runs it and
returns a `CommandResult` with `stdout`, `stderr` and `returncode`. It raises
`CommandTimeoutError` when the command takes longer than the timeout; on
POSIX the command runs in its own process group and the whole group is
killed. `run_timeout` does the same for an argument list, and
`truncate_stderr` shortens error output to its first line.

## Configuration

```python
from digcore.cfg import load_config_by_dir

settings = load_config_by_dir("/etc/agent/conf.d")
```

JSON and YAML files load first, then regular `.toml` files in name order,
then `*.local.toml` files in name order. Later values win and nested tables
are merged. The result is a plain `dict`. `load_configs` merges a list of
`ConfigWithFormat` texts, `load_single_config` parses one, and
`guess_format` picks a `ConfigFormat` from a file name.

## Queues

`SafeQueue` takes items at the front with `push_front` and hands out the
oldest from the back with `pop_back`, `pop_back_n` or `pop_back_all`.
`LimitedQueue(max_size)` refuses new items, returning `False`, once it is
full.

## Reconnect backoff

```python
from digcore.server.reconnect import AuthFailedError, next_reconnect_state, jitter

step = next_reconnect_state(AuthFailedError(), backoff=1.0)
step.wait          # 60.0 seconds
step.next_backoff  # 120.0 seconds
delay = jitter(step.wait, 0.25)
```

A `DisconnectError` waits as long as the server asked (at least the normal
minimum) and resets the backoff; authentication failures back off between
60 and 1800 seconds; other errors double between 1 and 300 seconds, starting
over when wrapped in `ReconnectError(..., reset_backoff=True)`.
`build_headers` produces the headers sent when opening the connection.

## MCP tool servers

```python
from digcore.mcp.client import McpClient

with McpClient("prom", "/usr/local/bin/prom-mcp") as client:
    client.initialize(timeout=15)
    for tool in client.list_tools(timeout=10):
        print(tool.name, tool.extract_params())
    print(client.call_tool("query", {"query": "up"}, timeout=30))
```

Failures raise `McpError`; errors reported by the server in a response are
raised as `JsonRpcError`. Lines the server prints before its JSON-RPC stream,
and notifications without an id, are skipped. `client.stderr` holds what the
server wrote to standard error.

## What this package does not do

It has no alert event type, no notifiers that deliver alerts anywhere, no
alert buffer, and no code that opens or runs the connection to a central
server or handles remote sessions: `digcore.server.reconnect` only decides
when to reconnect. It has no command-line program.