# xkit

Building blocks for Python programs and command-line tools:

- **`xkit.app.env`** – an immutable container of environment variables,
  device-path checks and per-user home, config, cache and data directories.
- **`xkit.app.errors`** – `AppError`, an exception carrying a process exit code.
- **`xkit.app.container`** – a `Container` bundling environment, standard
  streams and arguments, with `run` and `main` to execute a program against it.
- **`xkit.app.positional_args`** – validators for positional arguments and
  shell completion directives.
- **`xkit.app.appcmd`** – a small command tree framework with flags, help,
  version output and shell completion scripts.
- **`xkit.app.appext`** – per-application directories and port taken from the
  environment, log-level selection and interceptor chaining.
- **`xkit.errorsext`** – typed errors (not found, already exists, permission
  denied, …) carrying a reason, a message, a cause and details.
- **`xkit.diffmyers`** – a linear-space Myers diff that produces edit scripts
  and prints them in unified diff format.
- **`xkit.condition`** – expression-style ternary, if/else and switch chains.
- **`xkit.configext`** – configuration sources for JSON, YAML and TOML files,
  in-memory JSON documents and dotted key/value pairs, plus small helpers.
- **`xkit.contextext`** – immutable, chained contexts carrying values.

Besides the standard library the package depends only on PyYAML. It supports
Python 3.11 and later.

## Environment containers

```python
from xkit.app.env import env_container_from_environ, environ, env_bool, config_dir_path

env = env_container_from_environ(["HOME=/home/me", "DEBUG=true", "EMPTY="])
env.env("HOME")                   # "/home/me"
env.env("EMPTY")                  # "" – empty values are dropped
environ(env)                      # ["DEBUG=true", "HOME=/home/me"], sorted
env_bool(env, "DEBUG", False)     # True
config_dir_path(env)              # "/home/me/.config" when XDG_CONFIG_HOME is unset
```

`env_container_from_environ` raises `ValueError` for an entry without `=`;
`env_bool` raises `ValueError` for a value that is not a boolean; the
directory functions raise `LookupError` when the variables they need are unset.

## Running an application

```python
from xkit.app.container import new_container, run
from xkit.app.errors import new_error, get_exit_code

def program(container):
    if container.env("TOKEN") == "":
        raise new_error(2, "TOKEN is not set")

container = new_container({}, None, None, None, "prog")
try:
    run(container, program)
except Exception as err:
    print(get_exit_code(err))     # 2
```

`run` writes the error message to the container's stderr before re-raising it;
`get_exit_code` returns 0 for `None`, the code carried by an `AppError` found
in the cause chain, and 1 for anything else. `main(func)` runs `func` against
the process's own environment, streams and `sys.argv`, and exits with that code.

## Commands

`xkit.app.appcmd.Command` describes a command tree: each command has a `use`
line, short and long help, flags bound through `bind_flags` and
`bind_persistent_flags`, positional argument rules from
`xkit.app.positional_args` (`exact_args`, `range_args`, `minimum_n_args`,
`maximum_n_args`, `match_all`, `NO_ARGS`, …) and either a `run` function or
`sub_commands`.

```python
from xkit.app.appcmd import Command, run
from xkit.app.container import new_container
from xkit.app.positional_args import exact_args

def greet(container):
    container.stdout.write(f"hello {container.args[0]}\n")

root = Command(
    use="tool",
    version="1.0.0",
    sub_commands=[Command(use="greet <name>", short="Say hello", args=exact_args(1), run=greet)],
)
run(new_container({}, None, None, None, "tool", "greet", "world"), root)
```

`run(container, command)` parses the container's arguments and dispatches to
the matching command. It handles `--help`/`-h`, `--version` when a version is
set, `--help-tree` on commands with sub-commands, a `help` sub-command and a
`completion` sub-command that prints scripts for bash, fish, powershell and
zsh. Raising `InvalidArgumentError` from a run function prints that command's
usage. `bind_multiple` combines several flag-binding functions.

## Named applications

```python
from xkit.app.env import EnvContainer
from xkit.app.appext import NameContainer

names = NameContainer(EnvContainer({"HOME": "/home/me", "MY_APP_PORT": "8080"}), "my-app")
names.config_dir_path()   # "/home/me/.config/my-app", or $MY_APP_CONFIG_DIR if set
names.port()              # 8080; falls back to $PORT, then 0
```

`get_log_level(default, debug, no_warn)` picks a `logging` level and
`chain_interceptors(*interceptors)` combines run-function wrappers, applied in
the order given.

## Typed errors

```python
from xkit.errorsext import NotFoundError, is_not_found, is_error

err = NotFoundError("user_missing", "user does not exist")
is_not_found(err)                                  # True
is_error(err, NotFoundError("user_missing", ""))   # True – empty fields match anything
```

Every error class in `xkit.errorsext` subclasses `XError` and has a matching
`is_…` predicate that looks through the chain of causes.

## Diffs

```python
from xkit.diffmyers import diff, print_edits

old = [b"Hello, world!\n"]
new = [b"Goodbye, world!\n"]
edits = diff(old, new)
print(print_edits(old, new, edits).decode())
# @@ -1,1 +1,1 @@
# -Hello, world!
# +Goodbye, world!
```

Lines may be `bytes` or `str`; the output has the same type.

## Conditions

```python
from xkit.condition import ternary, if_, switch

ternary(True, "yes", "no")                          # "yes"
if_(False, 1).else_if(True, 2).else_(3)             # 2
switch("b").case("a", 1).case("b", 2).default(0)    # 2
```

## Configuration sources

```python
from xkit.configext import KoanfFile, KoanfMemory, KoanfConfmap, get_address

KoanfFile("config.yaml", "parent.of").read()   # {"parent": {"of": {...file contents...}}}
KoanfMemory('{"dsn": "memory"}').read()         # {"dsn": "memory"}
KoanfConfmap([("a.b", "1")]).read()             # {"a": {"b": 1}}
get_address("localhost", 80)                    # "localhost:80"
```

`KoanfFile` chooses its parser from the `.json`, `.yaml`, `.yml` or `.toml`
extension and raises `ValueError` for any other.

### What configuration does not do

`xkit.configext` provides the individual sources only. It does not merge them
into one configuration, read settings from environment variables or flags,
validate against a JSON schema, or watch files for changes.

## Contexts

```python
from xkit.contextext import Context, new_context, from_context

ctx = new_context(Context(), "user", 11)
from_context(ctx, "user")          # (11, True)
ctx.value("missing")               # None
```