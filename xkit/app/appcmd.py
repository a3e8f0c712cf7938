"""A command tree with flags, help output, version and shell completion."""

from __future__ import annotations

import csv
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from xkit.app.container import Container, container_for_args
from xkit.app.container import main as _app_main
from xkit.app.container import run as _app_run
from xkit.app.positional_args import NO_ARGS, PositionalArgs, ShellCompDirective

_COMPLETE = "__complete"
_COMPLETE_NO_DESC = "__completeNoDesc"

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_TYPE_NAMES = {"string": "string", "int": "int", "float": "float64", "string_list": "strings"}


class InvalidArgumentError(ValueError):
    """An argument validation error; the failing command's usage is printed."""


@dataclass
class Flag:
    """A single command-line flag and its parsed value."""

    name: str
    kind: str
    default: Any
    usage: str = ""
    shorthand: str = ""
    hidden: bool = False
    required: bool = False
    value: Any = None
    changed: bool = False

    def __post_init__(self) -> None:
        self.value = list(self.default) if self.kind == "string_list" else self.default

    def set(self, raw: str) -> None:
        """Parse raw and store it as the flag's value."""
        if self.kind == "bool":
            if raw in _TRUE_VALUES:
                self.value = True
            elif raw in _FALSE_VALUES:
                self.value = False
            else:
                raise ValueError(f"invalid syntax for bool: {raw!r}")
        elif self.kind == "int":
            self.value = int(raw, 10)
        elif self.kind == "float":
            self.value = float(raw)
        elif self.kind == "string_list":
            parts = next(csv.reader([raw])) if raw else []
            self.value = parts if not self.changed else [*self.value, *parts]
        else:
            self.value = raw
        self.changed = True


class FlagSet:
    """A named collection of flags."""

    def __init__(self) -> None:
        self._flags: dict[str, Flag] = {}
        self._normalize: Callable[[str], str] | None = None

    def _norm(self, name: str) -> str:
        return self._normalize(name) if self._normalize else name

    def set_normalize(self, func: Callable[[str], str]) -> None:
        self._normalize = func
        self._flags = {self._norm(f.name): f for f in self._flags.values()}

    def _add(self, kind: str, name: str, default: Any, usage: str, shorthand: str) -> Flag:
        key = self._norm(name)
        if key in self._flags:
            raise ValueError(f"flag redefined: {name}")
        if shorthand and self.lookup_shorthand(shorthand) is not None:
            raise ValueError(f"unable to redefine {shorthand!r} shorthand")
        flag = Flag(key, kind, default, usage, shorthand)
        self._flags[key] = flag
        return flag

    def string(self, name: str, default: str = "", usage: str = "", shorthand: str = "") -> Flag:
        return self._add("string", name, default, usage, shorthand)

    def integer(self, name: str, default: int = 0, usage: str = "", shorthand: str = "") -> Flag:
        return self._add("int", name, default, usage, shorthand)

    def floating(self, name: str, default: float = 0.0, usage: str = "", shorthand: str = "") -> Flag:
        return self._add("float", name, default, usage, shorthand)

    def boolean(self, name: str, default: bool = False, usage: str = "", shorthand: str = "") -> Flag:
        return self._add("bool", name, default, usage, shorthand)

    def string_list(
        self, name: str, default: Sequence[str] = (), usage: str = "", shorthand: str = ""
    ) -> Flag:
        return self._add("string_list", name, list(default), usage, shorthand)

    def lookup(self, name: str) -> Flag | None:
        return self._flags.get(self._norm(name))

    def lookup_shorthand(self, shorthand: str) -> Flag | None:
        return next((f for f in self._flags.values() if f.shorthand == shorthand), None)

    def _require(self, name: str) -> Flag:
        flag = self.lookup(name)
        if flag is None:
            raise ValueError(f"no such flag -{name}")
        return flag

    def mark_hidden(self, name: str) -> None:
        self._require(name).hidden = True

    def mark_required(self, name: str) -> None:
        self._require(name).required = True

    def __iter__(self):
        return iter(sorted(self._flags.values(), key=lambda f: f.name))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None


@dataclass
class Command:
    """A command: either runnable or a parent of sub-commands."""

    use: str
    aliases: list[str] = field(default_factory=list)
    short: str = ""
    long: str = ""
    example: str = ""
    args: PositionalArgs | None = None
    valid_args: list[str] | None = None
    valid_args_function: (
        Callable[[list[str], str], tuple[Sequence[str], ShellCompDirective]] | None
    ) = None
    deprecated: str = ""
    hidden: bool = False
    bind_flags: Callable[[FlagSet], None] | None = None
    bind_persistent_flags: Callable[[FlagSet], None] | None = None
    normalize_flag: Callable[[str], str] | None = None
    normalize_persistent_flag: Callable[[str], str] | None = None
    run: Callable[[Container], Any] | None = None
    sub_commands: list[Command] = field(default_factory=list)
    version: str = ""

    def validate(self) -> None:
        """Raise ValueError if the command is not well formed."""
        if not self.use:
            raise ValueError("must set Command.use")
        if self.long and not self.short:
            raise ValueError("must set Command.short if Command.long is set")
        if self.run is not None and self.sub_commands:
            raise ValueError("cannot set both Command.run and Command.sub_commands")
        if self.run is None and not self.sub_commands:
            raise ValueError("must set one of Command.run and Command.sub_commands")


class _Node:
    def __init__(self, command: Command, parent: _Node | None) -> None:
        self.command = command
        self.parent = parent
        self.children: list[_Node] = []
        self.flags = FlagSet()
        self.persistent = FlagSet()

    @property
    def name(self) -> str:
        words = self.command.use.split()
        return words[0] if words else self.command.use

    @property
    def path(self) -> str:
        return f"{self.parent.path} {self.name}" if self.parent else self.name

    def child(self, token: str) -> _Node | None:
        for child in self.children:
            if child.name == token or token in child.command.aliases:
                return child
        return None

    def sorted_children(self) -> list[_Node]:
        return sorted(self.children, key=lambda c: c.name)

    def inherited(self) -> list[FlagSet]:
        sets = []
        node = self.parent
        while node is not None:
            sets.append(node.persistent)
            node = node.parent
        return sets

    def flag_sets(self) -> list[FlagSet]:
        return [self.flags, self.persistent, *self.inherited()]

    def lookup(self, name: str) -> Flag | None:
        for flag_set in self.flag_sets():
            flag = flag_set.lookup(name)
            if flag is not None:
                return flag
        return None

    def lookup_shorthand(self, shorthand: str) -> Flag | None:
        for flag_set in self.flag_sets():
            flag = flag_set.lookup_shorthand(shorthand)
            if flag is not None:
                return flag
        return None


def _build(command: Command, parent: _Node | None) -> _Node:
    command.validate()
    node = _Node(command, parent)
    if command.bind_flags:
        command.bind_flags(node.flags)
    if command.bind_persistent_flags:
        command.bind_persistent_flags(node.persistent)
    if command.normalize_flag:
        node.flags.set_normalize(command.normalize_flag)
    if command.normalize_persistent_flag:
        node.persistent.set_normalize(command.normalize_persistent_flag)
    node.children = [_build(sub, node) for sub in command.sub_commands]
    if command.sub_commands:
        node.flags.boolean("help-tree", False, "Print the entire sub-command tree")
    if command.version:
        node.flags.boolean("version", False, "Print the version")
    return node


def _init_help_flags(node: _Node) -> None:
    if node.lookup("help") is None:
        shorthand = "h" if node.lookup_shorthand("h") is None else ""
        node.flags.boolean("help", False, f"help for {node.name}", shorthand)
    for child in node.children:
        _init_help_flags(child)


def _first_positional(node: _Node, tokens: list[str]) -> int | None:
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token == "--":
            return None
        if token.startswith("--"):
            flag = node.lookup(token[2:])
            if "=" not in token and not (flag and flag.kind == "bool"):
                i += 1
        elif token.startswith("-") and len(token) > 1:
            flag = node.lookup_shorthand(token[1])
            if len(token) == 2 and not (flag and flag.kind == "bool"):
                i += 1
        else:
            return i
        i += 1
    return None


def _find(root: _Node, args: Iterable[str]) -> tuple[_Node, list[str]]:
    node = root
    rest = list(args)
    while True:
        index = _first_positional(node, rest)
        if index is None:
            break
        child = node.child(rest[index])
        if child is None:
            break
        node = child
        del rest[index]
    return node, rest


def _set_flag(flag: Flag, value: str, label: str) -> None:
    try:
        flag.set(value)
    except ValueError as err:
        raise ValueError(f'invalid argument "{value}" for "{label}" flag: {err}') from err


def _parse_flags(node: _Node, tokens: list[str]) -> list[str]:
    positionals: list[str] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if token == "--":
            positionals.extend(tokens[i:])
            break
        if token.startswith("--"):
            name, eq, value = token[2:].partition("=")
            flag = node.lookup(name)
            if flag is None:
                raise ValueError(f"unknown flag: --{name}")
            if not eq:
                if flag.kind == "bool":
                    value = "true"
                elif i < len(tokens):
                    value = tokens[i]
                    i += 1
                else:
                    raise ValueError(f"flag needs an argument: --{name}")
            _set_flag(flag, value, f"--{name}")
        elif token.startswith("-") and len(token) > 1:
            shorts = token[1:]
            j = 0
            while j < len(shorts):
                char = shorts[j]
                j += 1
                flag = node.lookup_shorthand(char)
                if flag is None:
                    raise ValueError(f"unknown shorthand flag: {char!r} in {token}")
                rest = shorts[j:]
                if flag.kind == "bool":
                    if rest.startswith("="):
                        _set_flag(flag, rest[1:], f"-{char}")
                        break
                    _set_flag(flag, "true", f"-{char}")
                    continue
                if rest:
                    value = rest[1:] if rest.startswith("=") else rest
                elif i < len(tokens):
                    value = tokens[i]
                    i += 1
                else:
                    raise ValueError(f"flag needs an argument: {char!r} in -{char}")
                _set_flag(flag, value, f"-{char}")
                break
        else:
            positionals.append(token)
    return positionals


def _check_required(node: _Node) -> None:
    missing = sorted(
        f.name
        for flag_set in node.flag_sets()
        for f in flag_set
        if f.required and not f.changed
    )
    if missing:
        names = '", "'.join(missing)
        raise ValueError(f'required flag(s) "{names}" not set')


def _validate_args(node: _Node, positionals: list[str]) -> None:
    command = node.command
    if command.args is not None:
        command.args.validate(positionals, command.valid_args or [])
    elif node.parent is None and node.children and positionals:
        raise ValueError(f'unknown command "{positionals[0]}" for "{node.path}"')


def _rpad(text: str, padding: int) -> str:
    return text.ljust(padding)


def _flag_usages(flag_sets: Iterable[FlagSet]) -> str:
    seen: dict[str, Flag] = {}
    for flag_set in flag_sets:
        for flag in flag_set:
            if not flag.hidden and flag.name not in seen:
                seen[flag.name] = flag
    rows = []
    for flag in sorted(seen.values(), key=lambda f: f.name):
        left = f"  -{flag.shorthand}, --{flag.name}" if flag.shorthand else f"      --{flag.name}"
        type_name = _TYPE_NAMES.get(flag.kind)
        if type_name:
            left += f" {type_name}"
        right = flag.usage
        if flag.default not in ("", 0, False, [], None):
            if flag.kind == "string":
                right += f' (default "{flag.default}")'
            elif flag.kind == "string_list":
                right += f" (default [{','.join(flag.default)}])"
            else:
                right += f" (default {flag.default})"
        rows.append((left, right))
    if not rows:
        return ""
    width = max(len(left) for left, _ in rows)
    return "\n".join(f"{_rpad(left, width)}   {right}".rstrip() for left, right in rows)


def _use_line(node: _Node) -> str:
    line = f"{node.parent.path} {node.command.use}" if node.parent else node.command.use
    has_flags = any(not f.hidden for fs in node.flag_sets() for f in fs)
    if has_flags and "[flags]" not in line:
        line += " [flags]"
    return line


def _usage(node: _Node) -> str:
    visible = [c for c in node.sorted_children() if not c.command.hidden]
    head = ["Usage:", f"  {_use_line(node)}"]
    if visible:
        head.append(f"  {node.path} [command]")
    sections = ["\n".join(head)]
    if node.command.aliases:
        sections.append("Aliases:\n  " + ", ".join([node.name, *node.command.aliases]))
    if node.command.example.strip():
        sections.append("Examples:\n" + node.command.example.strip())
    if visible:
        pad = max(len(c.name) for c in visible)
        lines = (f"  {_rpad(c.name, pad)} {c.command.short.strip()}".rstrip() for c in visible)
        sections.append("Available Commands:\n" + "\n".join(lines))
    local = _flag_usages([node.flags, node.persistent])
    if local:
        sections.append("Flags:\n" + local)
    inherited = _flag_usages(node.inherited())
    if inherited:
        sections.append("Global Flags:\n" + inherited)
    if visible:
        sections.append(
            f'Use "{node.path} [command] --help" for more information about a command.'
        )
    return "\n\n".join(sections) + "\n"


def _help(node: _Node) -> str:
    text = node.command.short.strip() + "\n\n"
    if node.command.long.strip():
        text += node.command.long.strip().rstrip() + "\n\n"
    return text + _usage(node)


def _max_padding(node: _Node, indent: int) -> int:
    padding = indent * 2 + len(node.name)
    for child in node.sorted_children():
        if not child.command.hidden:
            padding = max(padding, _max_padding(child, indent + 1))
    return padding


def _help_tree_rec(node: _Node, out: list[str], max_padding: int, indent: int) -> None:
    if node.command.hidden:
        return
    if node.name:
        out.append(" " * (indent * 2))
        out.append(node.name)
        out.append(" " * (max_padding - (len(node.name) + indent * 2)))
        out.append("  ")
        out.append(node.command.short.strip())
        out.append("\n")
    for child in node.sorted_children():
        _help_tree_rec(child, out, max_padding, indent + 1)


def _help_tree(node: _Node) -> str:
    out: list[str] = []
    _help_tree_rec(node, out, _max_padding(node, 0), 0)
    return "".join(out)


_BASH = """# bash completion for NAME
__FUNC_complete()
{
    local cur="${COMP_WORDS[COMP_CWORD]}"
    local out
    out=$("NAME" __completeNoDesc "${COMP_WORDS[@]:1:COMP_CWORD}" 2>/dev/null)
    out=$(printf '%s\\n' "$out" | grep -v '^:')
    COMPREPLY=($(compgen -W "$out" -- "$cur"))
}
complete -o default -F __FUNC_complete NAME
"""

_ZSH = """#compdef NAME
_FUNC() {
  local -a out
  out=("${(@f)$(NAME __completeNoDesc "${words[@]:1:$((CURRENT-1))}" 2>/dev/null)}")
  local -a completions
  completions=(${out[1,-2]})
  compadd -a completions
}
compdef _FUNC NAME
"""

_FISH = """function __FUNC_complete
    set -l args (commandline -opc)[2..-1] (commandline -ct)
    NAME __complete $args 2>/dev/null | string match -v -r '^:'
end
complete -c NAME -f -a '(__FUNC_complete)'
"""

_POWERSHELL = """Register-ArgumentCompleter -Native -CommandName 'NAME' -ScriptBlock {
    param($wordToComplete, $commandAst, $cursorPosition)
    $words = @($commandAst.CommandElements | Select-Object -Skip 1 | ForEach-Object { $_.ToString() })
    if ($wordToComplete -eq '') { $words += '""' }
    & 'NAME' __completeNoDesc @words 2>$null | Where-Object { $_ -notmatch '^:' } | ForEach-Object {
        [System.Management.Automation.CompletionResult]::new($_, $_, 'ParameterValue', $_)
    }
}
"""

_SCRIPTS = {"bash": _BASH, "fish": _FISH, "powershell": _POWERSHELL, "zsh": _ZSH}


def _completion_script(shell: str, name: str) -> str:
    func = re.sub(r"\W", "_", name)
    return _SCRIPTS[shell].replace("FUNC", func).replace("NAME", name)


def _completion_command(name: str) -> Command:
    def generator(shell: str) -> Callable[[Container], Any]:
        return lambda container: container.stdout.write(_completion_script(shell, name))

    return Command(
        use="completion",
        short="Generate auto-completion scripts for commonly used shells",
        sub_commands=[
            Command(
                use=shell,
                short=f"Generate auto-completion scripts for {shell}",
                args=NO_ARGS,
                run=generator(shell),
            )
            for shell in ("bash", "fish", "powershell", "zsh")
        ],
    )


def _help_command(root_ref: list[_Node]) -> Command:
    def show(container: Container) -> None:
        node, _ = _find(root_ref[0], container.args)
        container.stdout.write(_help(node))

    return Command(use="help [command]", short="Help about any command", run=show)


def _complete(container: Container, root: _Node, descriptions: bool, words: list[str]) -> None:
    to_complete = words[-1] if words else ""
    node, rest = _find(root, words[:-1])
    positionals = [w for w in rest if not w.startswith("-")]
    command = node.command
    if command.valid_args_function is not None:
        found, directive = command.valid_args_function(positionals, to_complete)
        candidates = list(found)
    else:
        has_choices = bool(node.children or command.valid_args)
        directive = ShellCompDirective.NO_FILE_COMP if has_choices else ShellCompDirective.DEFAULT
        candidates = []
        if node.children and not positionals:
            for child in node.sorted_children():
                if child.command.hidden or not child.name.startswith(to_complete):
                    continue
                short = child.command.short.strip()
                candidates.append(f"{child.name}\t{short}" if descriptions and short else child.name)
        for value in command.valid_args or []:
            if value.startswith(to_complete):
                candidates.append(value if descriptions else value.split("\t", 1)[0])
    for candidate in candidates:
        container.stdout.write(candidate + "\n")
    container.stdout.write(f":{int(directive)}\n")


def _run_node(container: Container, node: _Node, positionals: list[str]) -> None:
    command = node.command
    if command.version:
        flag = node.flags.lookup("version")
        if flag is not None and flag.value:
            container.stdout.write(command.version + "\n")
            return
    if command.sub_commands:
        flag = node.flags.lookup("help-tree")
        if flag is not None and flag.value:
            container.stdout.write(_help_tree(node))
            return
    if command.run is not None:
        try:
            command.run(container_for_args(container, *positionals))
        except InvalidArgumentError:
            container.stderr.write(_usage(node) + "\n")
            raise
        return
    container.stderr.write(_usage(node) + "\n")
    if not positionals:
        raise ValueError("Sub-command required.")
    raise ValueError("Unknown sub-command: " + " ".join(positionals))


def _execute(container: Container, command: Command) -> None:
    root = _build(command, None)
    if command.sub_commands:
        root_ref = [root]
        root.children.append(_build(_completion_command(root.name), root))
        root.children.append(_build(_help_command(root_ref), root))
    _init_help_flags(root)

    args = list(container.args[1:])
    if args and args[0] in (_COMPLETE, _COMPLETE_NO_DESC):
        _complete(container, root, args[0] == _COMPLETE, args[1:])
        return
    out = container.stdout if args and args[0].startswith("__complete") else container.stderr

    node, rest = _find(root, args)
    try:
        positionals = _parse_flags(node, rest)
        help_flag = node.lookup("help")
        if help_flag is not None and help_flag.value:
            container.stdout.write(_help(node))
            return
        _check_required(node)
        _validate_args(node, positionals)
    except ValueError:
        out.write(_usage(node) + "\n")
        raise
    if node.command.deprecated:
        out.write(f'Command "{node.name}" is deprecated, {node.command.deprecated}\n')
    _run_node(container, node, positionals)


def run(container: Container, command: Command) -> None:
    """Run command against container; errors are printed to stderr and raised."""
    _app_run(container, lambda c: _execute(c, command))


def main(command: Command) -> None:
    """Run command against the OS container and exit with the matching code."""
    _app_main(lambda c: _execute(c, command))


def bind_multiple(*args: Callable[[FlagSet], None]) -> Callable[[FlagSet], None]:
    """Combine several flag-binding functions into one."""
    bind_funcs = tuple(args)

    def bind(flag_set: FlagSet) -> None:
        for bind_func in bind_funcs:
            bind_func(flag_set)

    return bind