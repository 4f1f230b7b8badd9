"""
Argosy tokenizer: classify one raw argument string.

Lexical cases
- "--name" / "--name=value": named argument. The name runs from index 2 up to the
  first "=", and every character in it must be an ASCII letter. A bare "--name"
  carries no value (None); "--name=" carries the empty string.
- "-abc": flag cluster. The characters after "-" become a frozenset under the
  reserved name "flags". A repeated character attaches a DuplicateFlagWarning;
  a lone "-" yields an empty cluster with an EmptyFlagArgWarning.
- anything else: positional value, kept verbatim.

Warnings are advisory: they ride on the ParsedArg and the pipeline decides what
to do with them. Only ForbiddenArgNameError is raised here.
"""
from collections import Counter, namedtuple

from .faults import ForbiddenArgNameError, EmptyFlagArgWarning, DuplicateFlagWarning


class ParsedArg(namedtuple("ParsedArg", ("name", "value", "position", "warning"), defaults=(None,))):
    """
    One classified token.

    - name: parameter name, "flags" for a cluster, None for a positional.
    - value: str, frozenset of characters (clusters only), or None.
    - position: index of the token in the argument vector.
    - warning: optional ParseWarning attached by the tokenizer.
    """
    __slots__ = ()

    @property
    def positional(self):
        return self.name is None

    @property
    def cluster(self):
        return self.name == "flags"


def tokenize(token, position, /):
    """
    classify `token` (found at `position` in argv) into a ParsedArg.

    raises ForbiddenArgNameError for a named token whose name is empty, reserved
    ("flags"), or contains a non-letter; the error carries the character offset.
    """
    if not isinstance(token, str):
        raise TypeError("tokenize() argument must be a string")

    if token.startswith("--"):
        name, equals, value = token[2:].partition("=")
        for offset, char in enumerate(name, start=2):
            if not (char.isascii() and char.isalpha()):
                raise ForbiddenArgNameError(token, position, offset)
        if not name or name == "flags":
            raise ForbiddenArgNameError(token, position, 2)
        return ParsedArg(name, value if equals else None, position)

    if token.startswith("-"):
        if token == "-":
            return ParsedArg("flags", frozenset(), position, EmptyFlagArgWarning(position))
        letters = token[1:]
        flags = frozenset(letters)
        warning = None
        if len(flags) < len(letters):
            duplicated = next(flag for flag, count in Counter(letters).items() if count > 1)
            warning = DuplicateFlagWarning(duplicated, position)
        return ParsedArg("flags", flags, position, warning)

    return ParsedArg(None, token, position)


__all__ = (
    "ParsedArg",
    "tokenize",
)
