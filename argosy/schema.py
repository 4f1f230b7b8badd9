r"""
Argosy schema model: Arg and Command.

Overview
- Arg: one parameter's schema (type, requirement, default, short flags,
  allowed values, per-argument validator).
- Command: a schema node (ordered args, positional arity groups, CNF
  requirements, subcommands, command-level validator, handler).
- command(...): decorator that binds a handler function into a Command.

Immutability
- Every field is sanitized once at construction and exposed through read-only
  properties (see utils.mirror); containers come back as tuple / frozenset /
  MappingProxyType views. A schema can be shared by any number of concurrent
  execute() calls.

Construction-time invariants (TypeError for wrong kinds, ValueError for wrong values)
- Arg
  • type is an ArgType; required implies default is None.
  • default, flag values, and one_of members must belong to the declared type.
  • Bool flags are a plain set of single characters; other types map a
    character to a concrete value.
- Command
  • arg names are ASCII-letter strings and never "flags".
  • arity groups name declared args and have pairwise distinct lengths.
  • default_params and subcommands are mutually exclusive.
  • per-arg and CNF requirements only name declared args; empty clauses are dropped.
  • a short flag character belongs to at most one arg.

Quick example:
    >>> from argosy import Arg, Command, Nat, Bool, String
    >>> copy = Command(
    ...     "copy files",
    ...     args={
    ...         "src": Arg(type=String, required=True),
    ...         "dst": Arg(type=String),
    ...         "jobs": Arg(type=Nat, default=1, flags={"j": 4}),
    ...         "force": Arg(type=Bool, flags="f"),
    ...     },
    ...     default_params=[["src"], ["src", "dst"]],
    ...     handler=lambda record: record["src"],
    ... )
"""
import functools
import inspect
import operator
import re
from collections.abc import Iterable, Mapping

from rich.text import Text

from .types import ArgType
from .utils import *


class SchemaType(type):
    """
    Metaclass giving schema classes stable, introspectable shapes.

    Responsibilities
    - Expose every name in __introspectable__ as a read-only property (mirror()).
    - Provide readable __repr__/__rich_repr__ for diagnostics and rich.pretty.
    - Derive __typename__ from the class name for messages ("arg", "command").
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_help(cls, metadata, /):
    """
    Internal: help must be Unset or a non-empty (trimmed) string / rich Text.
    Unset becomes None.
    """
    if not isinstance(help := metadata["help"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")
    elif isinstance(help, str) and not (help := help.strip()):
        raise ValueError(f"{cls.__typename__} 'help' cannot be empty")
    metadata["help"] = coalesce(help)


def _sanitize_callable(cls, metadata, field, /):
    if (object := metadata[field]) is not Unset and not callable(object):
        raise TypeError(f"{cls.__typename__} {field!r} must be callable")
    metadata[field] = coalesce(object)


def _sanitize_names(cls, names, field, /):
    """
    Internal: normalize an iterable of argument names into a tuple, rejecting
    non-strings, bare strings (which would iterate as characters) and duplicates.
    """
    if isinstance(names, str) or not isinstance(names, Iterable):
        raise TypeError(f"{cls.__typename__} {field!r} must be a collection of names")
    sanitized = []
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} {field!r} names must be strings")
        if name in sanitized:
            raise ValueError(f"{cls.__typename__} {field!r} cannot contain duplicates")
        sanitized.append(name)
    return tuple(sanitized)


def _sanitize_arg_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the value-bearing fields of an Arg.

    Responsibilities
    - type: must be an ArgType.
    - required/default: a required arg cannot carry a default.
    - one_of: Unset (every value of the type) or an iterable of typed values.
    - default: None or a value of the declared type inside one_of; Float defaults
      become floats and a Bool default of False is stored as None.
    - flags: Bool → set of single characters; others → mapping char → typed value.
    - requires: collection of sibling names (resolved against the Command later).
    """
    if not isinstance(type := metadata["type"], ArgType):
        raise TypeError(f"{cls.__typename__} 'type' must be an arg-type")

    if metadata["required"] and metadata["default"] is not None:
        raise ValueError(f"required {cls.__typename__} cannot have a 'default'")

    if (one_of := metadata["one_of"]) is not Unset:
        if isinstance(one_of, str) or not isinstance(one_of, Iterable):
            raise TypeError(f"{cls.__typename__} 'one_of' must be a collection of values")
        one_of = frozenset(one_of)
        if not one_of:
            raise ValueError(f"{cls.__typename__} 'one_of' cannot be empty")
        for value in one_of:
            if not type.accepts(value):
                raise TypeError(f"{cls.__typename__} 'one_of' value {value!r} is not {type.label}")
        if type is ArgType.FLOAT:
            one_of = frozenset(map(float, one_of))
    metadata["one_of"] = one_of

    def _check(value, field):
        if not type.accepts(value):
            raise TypeError(f"{cls.__typename__} {field!r} value {value!r} is not {type.label}")
        if one_of and value not in one_of:
            raise ValueError(f"{cls.__typename__} {field!r} value {value!r} is not one of the allowed values")

    if (default := metadata["default"]) is not None:
        _check(default, "default")
        if type is ArgType.FLOAT:
            default = float(default)
        # an explicit False is the implicit absent value of a boolean
        if type is ArgType.BOOL and default is False:
            default = None
    metadata["default"] = default

    flags = metadata["flags"]
    if type is ArgType.BOOL:
        if isinstance(flags, Mapping):
            raise TypeError(f"boolean {cls.__typename__} 'flags' must be a set of characters, not a mapping")
        if not isinstance(flags, Iterable):
            raise TypeError(f"{cls.__typename__} 'flags' must be a set of characters")
        flags = frozenset(flags)
        keys = flags
    else:
        if not isinstance(flags, Mapping):
            if isinstance(flags, Iterable) and not flags:
                flags = {}
            else:
                raise TypeError(f"non-boolean {cls.__typename__} 'flags' must map characters to values")
        flags = dict(flags)
        keys = flags.keys()
        for value in flags.values():
            _check(value, "flags")
        if type is ArgType.FLOAT:
            flags = {key: float(value) for key, value in flags.items()}
    for key in keys:
        if not isinstance(key, str) or len(key) != 1:
            raise ValueError(f"{cls.__typename__} 'flags' must be single characters")
    metadata["flags"] = flags

    metadata["requires"] = frozenset(_sanitize_names(cls, metadata["requires"], "requires"))
    metadata["required"] = bool(metadata["required"])


class Arg(metaclass=SchemaType):
    """
    A single parameter's schema, scoped to the Command that declares it.

    Fields (read-only)
    - help: str | Text | None
    - type: ArgType (default String)
    - required: bool; a required arg cannot have a default
    - requires: frozenset of sibling names that must be present alongside this arg
    - default: value used when the arg is absent from the input (None for none)
    - flags: Bool → frozenset of characters; otherwise mapping char → value
    - one_of: frozenset of allowed values, or Unset for every value of the type
    - validate: callable(value) -> None | str | Exception, or None
    """

    __introspectable__ = (
        "help",
        "type",
        "required",
        "requires",
        "default",
        "flags",
        "one_of",
        "validate",
    )

    __displayable__ = (
        "help",
        "type",
        "required",
        "default",
        "flags",
    )

    def __new__(
            cls,
            help=Unset,
            /,
            type=ArgType.STRING,
            *,
            required=False,
            requires=(),
            default=None,
            flags=(),
            one_of=Unset,
            validate=Unset,
    ):
        metadata = {
            "help": help,
            "type": type,
            "required": required,
            "requires": requires,
            "default": default,
            "flags": flags,
            "one_of": one_of,
            "validate": validate,
        }
        _sanitize_help(cls, metadata)
        _sanitize_arg_metadata(cls, metadata)
        _sanitize_callable(cls, metadata, "validate")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def allows(self, value, /):
        """
        whether value passes the one_of restriction (always true when unrestricted).
        """
        return self.one_of is Unset or value in self.one_of


def _sanitize_command_metadata(cls, metadata, /):
    """
    Internal: validate the structural invariants of a Command.

    - args: mapping of ASCII-letter names (never "flags") to Arg.
    - default_params: arity groups naming declared args, distinct lengths.
    - requires: CNF clauses naming declared args (empty clauses dropped).
    - subcommands: mapping of non-empty names (not starting with '-') to Command.
    - default_params and subcommands cannot both be non-empty.
    - per-arg requires name declared siblings, and short flags are unique.
    """
    if not isinstance(args := metadata["args"], Mapping):
        raise TypeError(f"{cls.__typename__} 'args' must be a mapping of names to args")
    for name, arg in args.items():
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} arg names must be strings")
        if name == "flags":
            raise ValueError(f"{cls.__typename__} arg name 'flags' is reserved")
        if not re.fullmatch(r"[A-Za-z]+", name):
            raise ValueError(f"{cls.__typename__} arg names must contain ascii letters only")
        if not isinstance(arg, Arg):
            raise TypeError(f"{cls.__typename__} arg {name!r} must be an arg")
    metadata["args"] = dict(args)

    groups = {}
    if isinstance(metadata["default_params"], str) or not isinstance(metadata["default_params"], Iterable):
        raise TypeError(f"{cls.__typename__} 'default_params' must be a collection of name groups")
    for group in metadata["default_params"]:
        group = _sanitize_names(cls, group, "default_params")
        for name in group:
            if name not in args:
                raise ValueError(f"{cls.__typename__} 'default_params' names unknown arg {name!r}")
        if len(group) in groups:
            raise ValueError(f"{cls.__typename__} 'default_params' groups must have distinct lengths")
        groups[len(group)] = group
    metadata["default_params"] = tuple(groups.values())

    clauses = []
    if isinstance(metadata["requires"], str) or not isinstance(metadata["requires"], Iterable):
        raise TypeError(f"{cls.__typename__} 'requires' must be a collection of name clauses")
    for clause in metadata["requires"]:
        clause = _sanitize_names(cls, clause, "requires")
        for name in clause:
            if name not in args:
                raise ValueError(f"{cls.__typename__} 'requires' names unknown arg {name!r}")
        if clause and frozenset(clause) not in clauses:
            clauses.append(frozenset(clause))
    metadata["requires"] = tuple(clauses)

    if not isinstance(subcommands := metadata["subcommands"], Mapping):
        raise TypeError(f"{cls.__typename__} 'subcommands' must be a mapping of names to commands")
    for name, subcommand in subcommands.items():
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} subcommand names must be strings")
        if not name or name.startswith("-"):
            raise ValueError(f"{cls.__typename__} subcommand names must be non-empty and cannot start with '-'")
        if not isinstance(subcommand, Command):
            raise TypeError(f"{cls.__typename__} subcommand {name!r} must be a command")
    metadata["subcommands"] = dict(subcommands)

    if metadata["default_params"] and metadata["subcommands"]:
        raise ValueError(f"{cls.__typename__} cannot have both 'default_params' and 'subcommands'")

    owners = {}
    for name, arg in args.items():
        for sibling in arg.requires:
            if sibling == name:
                raise ValueError(f"{cls.__typename__} arg {name!r} cannot require itself")
            if sibling not in args:
                raise ValueError(f"{cls.__typename__} arg {name!r} requires unknown arg {sibling!r}")
        for flag in arg.flags:
            if owners.setdefault(flag, name) != name:
                raise ValueError(f"{cls.__typename__} flag {flag!r} is shared by {owners[flag]!r} and {name!r}")
    metadata["flags"] = owners


class Command(metaclass=SchemaType):
    """
    A schema node: what a command accepts and what runs once input is valid.

    Fields (read-only)
    - help: str | Text | None
    - args: ordered mapping name → Arg
    - default_params: tuple of arity groups (tuples of names), distinct lengths
    - requires: tuple of CNF clauses (frozensets; at least one name per clause present)
    - subcommands: mapping literal → Command
    - validate: callable(record) -> None | str | Exception, or None
    - handler: callable(record) -> result (may be a coroutine function), or None
    - flags: mapping flag character → owning arg name (derived)

    A Command never changes after construction; execute() tracks the active
    node per call instead of mutating the tree.
    """

    __introspectable__ = (
        "help",
        "args",
        "default_params",
        "requires",
        "subcommands",
        "validate",
        "handler",
        "flags",
    )

    __displayable__ = (
        "help",
        "args",
        "default_params",
        "requires",
        "subcommands",
    )

    def __new__(
            cls,
            help=Unset,
            /,
            args=None,
            *,
            default_params=(),
            requires=((),),
            subcommands=None,
            validate=Unset,
            handler=Unset,
    ):
        metadata = {
            "help": help,
            "args": args if args is not None else {},
            "default_params": default_params,
            "requires": requires,
            "subcommands": subcommands if subcommands is not None else {},
            "validate": validate,
            "handler": handler,
        }
        _sanitize_help(cls, metadata)
        _sanitize_command_metadata(cls, metadata)
        _sanitize_callable(cls, metadata, "validate")
        _sanitize_callable(cls, metadata, "handler")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def arity(self, count, /):
        """
        return the arity group with exactly `count` names, or None.
        """
        for group in self._default_params:
            if len(group) == count:
                return group
        return None


def command(source=Unset, /, **kwargs):
    """
    Create a Command from a handler, or return a decorator that does so.

    Usage
    - Bare decorator (help comes from the docstring):
        @command
        def hello(record): ...

    - Decorator with schema metadata:
        @command(args={"name": Arg(required=True)})
        def hello(record):
            '''greet someone'''
            return "hello %s" % record["name"]

    - Explicit help text:
        @command("greet someone", args={...})

    Keyword arguments are forwarded to Command (args, default_params, requires,
    subcommands, validate). The handler is bound exactly once.
    """
    if "handler" in kwargs:
        raise TypeError("@command() binds the decorated function as the handler")

    help = source if isinstance(source, str | Text) else Unset

    @rename("command")
    def wrapper(handler, /):
        if not callable(handler):
            raise TypeError("@command() must be applied to a callable")
        return Command(coalesce(help, inspect.getdoc(handler) or Unset), handler=handler, **kwargs)

    if source is not Unset and not isinstance(source, str | Text):
        return wrapper(source)
    return wrapper


__all__ = (
    "Arg",
    "Command",
    "command",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del SchemaType
