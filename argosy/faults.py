"""
Argosy faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the parsing
  pipeline can surface. Codes are grouped by domain so logs and searches stay
  predictable.
- ParseError / ParseWarning: base types carrying the argv position, a rendered
  message, and read-only options (title, code, hint, ...). They know how to
  render themselves through rich.
- trigger(): central entry point to surface a fault (raise, warn, or print in
  shell mode).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: every message names the ordinal position of the
  offending token ("at second position").
- Short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The pipeline raises ParseError subclasses directly; it never prints.
- Token warnings are emitted through warnings.warn so callers can filter them.
- invoke() in shell mode renders faults through a stderr rich console.
"""
import inspect
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce, ordinal

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the pipeline (stable identifiers).

    grouping (by high-level domain)
    - routing (111xx)
      • UNKNOWN_COMMAND
    - named tokens (112xx)
      • FORBIDDEN_ARG_NAME, UNKNOWN_ARG, UNKNOWN_FLAG, DUPLICATE_NAMED_ARG
    - positionals (113xx)
      • NAMELESS_AFTER_NAMED_ARG, DUPLICATE_DEFAULT_ARG
    - values (114xx)
      • CONVERSION_ERROR
    - constraints (115xx)
      • MISSING_REQUIRED, MISSING_DEPENDENCY, UNSATISFIED_REQUIREMENT, VALIDATION_ERROR
    - warnings (12xxx)
      • EMPTY_FLAG_ARG, DUPLICATE_FLAG

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- routing errors ---
    UNKNOWN_COMMAND          = 11101

    # --- named/flag token errors ---
    FORBIDDEN_ARG_NAME       = 11201
    UNKNOWN_ARG              = 11202
    UNKNOWN_FLAG             = 11203
    DUPLICATE_NAMED_ARG      = 11204

    # --- positional errors ---
    NAMELESS_AFTER_NAMED_ARG = 11301
    DUPLICATE_DEFAULT_ARG    = 11302

    # --- value errors ---
    CONVERSION_ERROR         = 11401

    # --- constraint errors ---
    MISSING_REQUIRED         = 11501
    MISSING_DEPENDENCY       = 11502
    UNSATISFIED_REQUIREMENT  = 11503
    VALIDATION_ERROR         = 11504

    # --- warnings ---
    EMPTY_FLAG_ARG           = 12101
    DUPLICATE_FLAG           = 12102

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels. when no mapping is
        present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _at(position):
    """
    position-first suffix for messages (" at third position"), empty when unknown.
    """
    if position is None:
        return ""
    return " at %s position" % ordinal(position + 1)


class _Fault:
    """
    shared state and rich rendering for errors and warnings.

    subclasses declare `code`, `title` and a `__palette__` of default styles;
    the host application may override any style via __styles__ in __main__.
    """
    code = Unset
    title = Unset
    __palette__ = {}

    def _setup(self, message, position, options):
        assert isinstance(message, str)
        self.message = message
        self.position = position
        self.options = MappingProxyType({
            "title": self.title,
            "code": self.code,
            "hint": "",
        } | options)

    def __str__(self):
        return self.message

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, type(self).__palette__ | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        prog = coalesce(
            getattr(main, "__prog__", Unset),
            self.options.get("prog") or os.path.basename(sys.argv[0]) or "argosy",
        )
        code = self.options["code"]

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else code, "code"),
            " | ",
            text(str(self.options["title"]).title(), "title"),
            " ]"
        )
        message = text(self.message, "message")
        hint = Text.assemble(text(" → ", "hint-arrow"), text(self.options["hint"], "hint"))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        clone = BaseException.__new__(type(self), *self.args)
        clone.__dict__.update(self.__dict__)
        clone.options = MappingProxyType({**self.options, **overrides})
        return clone


class ParseError(_Fault, Exception):
    """
    base of every fault raised by the parsing pipeline.

    attributes
    - position: 0-based index of the offending token in the argument vector
      (None when the fault is not tied to one token, e.g. a missing argument).
    - message: rendered, lowercased, position-first message.
    - options: read-only mapping with title, code, hint, and variant context.
    """
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #00E5FF",
        "title": "bold #FF4DA6",
        "message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    }

    def __init__(self, message, /, position=None, **options):
        super().__init__(message)
        self._setup(message, position, options)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)


class ForbiddenArgNameError(ParseError):
    code = FaultCode.FORBIDDEN_ARG_NAME
    title = "forbidden argument name"

    def __init__(self, token, position, offset, /, **options):
        self.token = token
        self.offset = offset
        name = token[2:].partition("=")[0]
        if not name:
            message = "empty argument name in %r%s" % (token, _at(position))
            hint = "write the name right after '--' (for example: --name=value)"
        elif name.isascii() and name.isalpha():
            message = "reserved argument name %r in %r%s" % (name, token, _at(position))
            hint = "short flags are passed as a cluster (for example: -abc)"
        else:
            message = "forbidden character %r in argument name %r%s" % (token[offset], token, _at(position))
            hint = "argument names may only contain ascii letters (for example: --name=value)"
        super().__init__(message, position, **{"hint": hint} | options)


class DuplicateNamedArgError(ParseError):
    code = FaultCode.DUPLICATE_NAMED_ARG
    title = "duplicate named argument"

    def __init__(self, name, position, /, **options):
        self.name = name
        if name == "flags":
            message = "duplicate flag cluster%s" % _at(position)
            hint = "merge the short flags into a single cluster (for example: -abc)"
        else:
            message = "duplicate named argument %r%s" % (name, _at(position))
            hint = "pass --%s only once" % name
        super().__init__(message, position, **{"hint": hint} | options)


class DuplicateDefaultArgError(ParseError):
    code = FaultCode.DUPLICATE_DEFAULT_ARG
    title = "duplicate default argument"

    def __init__(self, name, position, /, **options):
        self.name = name
        super().__init__(
            "positional value%s binds %r, which was already given by name" % (_at(position), name),
            position,
            **{"hint": "drop either the positional value or --%s" % name} | options
        )


class NamelessAfterNamedArgError(ParseError):
    code = FaultCode.NAMELESS_AFTER_NAMED_ARG
    title = "positional after named argument"

    def __init__(self, value, position, /, **options):
        self.value = value
        super().__init__(
            "positional value %r%s follows a named argument" % (value, _at(position)),
            position,
            **{"hint": "move positional values before any --name or -flags"} | options
        )


class UnknownCommandError(ParseError):
    code = FaultCode.UNKNOWN_COMMAND
    title = "unknown command"

    def __init__(self, token, position, /, suggestions=(), **options):
        self.token = token
        self.suggestions = tuple(suggestions)
        if self.suggestions:
            hint = "did you mean %r?" % self.suggestions[0]
        else:
            hint = "check the spelling of the subcommand"
        super().__init__(
            "unknown command %r%s" % (token, _at(position)),
            position,
            **{"hint": hint} | options
        )


class UnknownArgError(ParseError):
    code = FaultCode.UNKNOWN_ARG
    title = "unknown argument"

    def __init__(self, name, position, /, suggestions=(), **options):
        self.name = name
        self.suggestions = tuple(suggestions)
        if self.suggestions:
            hint = "did you mean --%s?" % self.suggestions[0]
        else:
            hint = "remove --%s" % name
        super().__init__(
            "unknown argument %r%s" % (name, _at(position)),
            position,
            **{"hint": hint} | options
        )


class UnknownFlagError(ParseError):
    code = FaultCode.UNKNOWN_FLAG
    title = "unknown flag"

    def __init__(self, flag, position, /, **options):
        self.flag = flag
        super().__init__(
            "unknown flag %r%s" % ("-" + flag, _at(position)),
            position,
            **{"hint": "remove %r from the flag cluster" % flag} | options
        )


class ConversionError(ParseError):
    """
    a raw value could not be converted to its declared type (or fell outside
    the argument's allowed values).
    """
    code = FaultCode.CONVERSION_ERROR
    title = "conversion error"

    def __init__(self, name, value, expected, position, /, reason=Unset, **options):
        self.name = name
        self.value = value
        self.expected = expected
        label = getattr(expected, "label", str(expected))
        if reason is not Unset:
            message = "value %r for %r%s %s" % (value, name, _at(position), reason)
        elif value is None:
            message = "argument %r%s expects %s but no value was given" % (name, _at(position), label)
        else:
            message = "cannot convert %r to %s for %r%s" % (value, label, name, _at(position))
        super().__init__(
            message,
            position,
            **{"hint": "pass a %s (for example: --%s=<value>)" % (label, name)} | options
        )


class MissingRequiredError(ParseError):
    code = FaultCode.MISSING_REQUIRED
    title = "missing required argument"

    def __init__(self, name, /, position=None, **options):
        self.name = name
        if position is None:
            message = "missing required argument %r" % name
        else:
            message = "required argument %r%s was given without a value" % (name, _at(position))
        super().__init__(
            message,
            position,
            **{"hint": "pass --%s=<value>" % name} | options
        )


class MissingDependencyError(ParseError):
    code = FaultCode.MISSING_DEPENDENCY
    title = "missing dependent argument"

    def __init__(self, name, missing, /, position=None, **options):
        self.name = name
        self.missing = tuple(missing)
        super().__init__(
            "argument %r%s requires %s" % (name, _at(position), ", ".join(map(repr, self.missing))),
            position,
            **{"hint": "also pass %s" % " ".join("--" + each for each in self.missing)} | options
        )


class UnsatisfiedRequirementError(ParseError):
    code = FaultCode.UNSATISFIED_REQUIREMENT
    title = "unsatisfied requirement"

    def __init__(self, clause, /, **options):
        self.clause = tuple(clause)
        if len(self.clause) == 1:
            message = "argument %r is required" % self.clause[0]
        else:
            message = "at least one of %s is required" % ", ".join(map(repr, self.clause))
        super().__init__(
            message,
            None,
            **{"hint": "pass one of %s" % " ".join("--" + each for each in self.clause)} | options
        )


class ValidationError(ParseError):
    """
    a validator rejected a value (name) or the whole record (name is None).
    """
    code = FaultCode.VALIDATION_ERROR
    title = "validation error"

    def __init__(self, reason, /, name=None, position=None, **options):
        self.reason = reason
        self.name = name
        if name is None:
            message = "invalid arguments: %s" % reason
        else:
            message = "invalid value for %r%s: %s" % (name, _at(position), reason)
        super().__init__(message, position, **options)


class ParseWarning(_Fault, Warning):
    """
    non-fatal finding attached to a token; emitted, never raised.
    """
    __palette__ = {
        "prog-name": "bold #E6E6F0",
        "code": "bold #FFB400",
        "title": "bold #FFC2E0",
        "message": "#D6D6DE",
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",
    }

    def __init__(self, message, /, position=None, **options):
        super().__init__(message)
        self._setup(message, position, options)

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)


class EmptyFlagArgWarning(ParseWarning):
    code = FaultCode.EMPTY_FLAG_ARG
    title = "empty flag cluster"

    def __init__(self, position, /, **options):
        super().__init__(
            "empty flag cluster '-'%s" % _at(position),
            position,
            **{"hint": "remove the lone '-' or add flag letters (for example: -v)"} | options
        )


class DuplicateFlagWarning(ParseWarning):
    code = FaultCode.DUPLICATE_FLAG
    title = "duplicate flag"

    def __init__(self, flag, position, /, **options):
        self.flag = flag
        super().__init__(
            "flag %r repeated in cluster%s" % (flag, _at(position)),
            position,
            **{"hint": "pass each flag letter once"} | options
        )


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace-style __replace__.
    - errors are raised (or printed then exit(1) in shell mode); warnings go
      through warnings.warn (or are printed in shell mode).

    typical options
    - shell, fancy, colorful, prog, hint, and any other context a renderer may show.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys are
    FaultCode instances and values are short documentation strings. returns None
    when not found.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "ParseError",
    "ForbiddenArgNameError",
    "DuplicateNamedArgError",
    "DuplicateDefaultArgError",
    "NamelessAfterNamedArgError",
    "UnknownCommandError",
    "UnknownArgError",
    "UnknownFlagError",
    "ConversionError",
    "MissingRequiredError",
    "MissingDependencyError",
    "UnsatisfiedRequirementError",
    "ValidationError",
    "ParseWarning",
    "EmptyFlagArgWarning",
    "DuplicateFlagWarning",
    "trigger",
    "getdoc",
)
