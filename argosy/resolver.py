"""
Argosy resolver: turn an argument vector into raw values for one command.

Phases (all synchronous)
1. walk the tokens left to right against the active command, which starts at
   the root and moves to a subcommand whenever a positional names one;
2. pair buffered positionals with the arity group of the same length;
3. reject named arguments the selected command does not declare;
4. expand the flag cluster into the args that own each character.

The schema is never mutated: the active command is a local of each call.
"""
import difflib
from collections import namedtuple

from .faults import *
from .tokens import tokenize
from .types import ArgType
from .utils import Unset


class Resolution(namedtuple("Resolution", ("command", "route", "values", "presets", "positions", "warnings"))):
    """
    Result of resolving an argument vector.

    - command: the selected (innermost) Command.
    - route: tuple of subcommand names taken from the root.
    - values: name → raw value (str, or None for a bare --name).
    - presets: name → typed value supplied through a short flag.
    - positions: name → index of the token that supplied it.
    - warnings: tuple of ParseWarning attached by the tokenizer.
    """
    __slots__ = ()

    def supplied(self, name, /):
        return name in self.values or name in self.presets


def _walk(command, argv):
    """
    tokenize and route every token; returns (command, route, defaults, values,
    positions, warnings) where defaults are the buffered positional tokens.
    """
    named = False
    route = []
    defaults = []
    values = {}
    positions = {}
    warnings = []

    for position, token in enumerate(argv):
        parsed = tokenize(token, position)
        if parsed.warning is not None:
            warnings.append(parsed.warning)

        if parsed.positional:
            if named:
                raise NamelessAfterNamedArgError(parsed.value, position)
            if command.subcommands:
                try:
                    command = command.subcommands[parsed.value]
                except KeyError:
                    suggestions = difflib.get_close_matches(parsed.value, command.subcommands.keys(), 3)
                    raise UnknownCommandError(parsed.value, position, suggestions=suggestions) from None
                route.append(parsed.value)
                continue
            defaults.append(parsed)
            continue

        named = True
        if parsed.name in values:
            raise DuplicateNamedArgError(parsed.name, position)
        values[parsed.name] = parsed.value
        positions[parsed.name] = position

    return command, route, defaults, values, positions, warnings


def resolve(command, argv, /):
    """
    resolve `argv` (a sequence of strings, program name excluded) against `command`.

    raises
    - ForbiddenArgNameError, NamelessAfterNamedArgError, UnknownCommandError,
      DuplicateNamedArgError while walking tokens;
    - DuplicateDefaultArgError when a positional binds an arg already given by name;
    - UnknownArgError for a --name the selected command does not declare;
    - UnknownFlagError / DuplicateNamedArgError while expanding the flag cluster.

    positionals whose count matches no arity group are left unassigned.
    """
    command, route, defaults, values, positions, warnings = _walk(command, argv)

    if (group := command.arity(len(defaults))) is not None:
        for name, parsed in zip(group, defaults):
            if name in values:
                raise DuplicateDefaultArgError(name, parsed.position)
            values[name] = parsed.value
            positions[name] = parsed.position

    for name in values:
        if name != "flags" and name not in command.args:
            suggestions = difflib.get_close_matches(name, command.args.keys(), 3)
            raise UnknownArgError(name, positions[name], suggestions=suggestions)

    presets = {}
    if (cluster := values.pop("flags", Unset)) is not Unset:
        position = positions.pop("flags")
        for flag in sorted(cluster):
            try:
                name = command.flags[flag]
            except KeyError:
                raise UnknownFlagError(flag, position) from None
            if name in values or name in presets:
                raise DuplicateNamedArgError(name, position)
            arg = command.args[name]
            presets[name] = True if arg.type is ArgType.BOOL else arg.flags[flag]
            positions[name] = position

    return Resolution(command, tuple(route), values, presets, positions, tuple(warnings))


__all__ = (
    "Resolution",
    "resolve",
)
