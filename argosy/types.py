"""
Argosy argument types.

ArgType is the closed set of value types an Arg may declare. Each member knows
how to convert a raw command-line string into its typed value (coerce) and how
to recognise an already-typed value (accepts), which the schema uses to check
defaults, flag values, and one_of members at construction time.

    type     raw "--x"      raw "--x=v"
    BOOL     True           "true" / "false"
    NAT      error          non-negative integer
    INT      error          signed integer
    FLOAT    error          floating-point number
    STRING   passed as-is   passed as-is
    FILE     path, opened later by the filesystem root
    FOLDER   path, opened later by the filesystem root

Module-level aliases (Bool, Nat, ...) keep schema declarations short:

    >>> Arg(type=Nat, default=1)
"""
import os
import re
from enum import Enum


class ArgType(Enum):
    BOOL = "bool"
    NAT = "nat"
    INT = "int"
    STRING = "string"
    FLOAT = "float"
    FILE = "file"
    FOLDER = "folder"

    @property
    def label(self):
        """
        article-prefixed name used in messages ("a natural number").
        """
        return {
            ArgType.BOOL: "a boolean ('true' or 'false')",
            ArgType.NAT: "a natural number",
            ArgType.INT: "an integer",
            ArgType.STRING: "a string",
            ArgType.FLOAT: "a floating-point number",
            ArgType.FILE: "a file path",
            ArgType.FOLDER: "a folder path",
        }[self]

    @property
    def resolvable(self):
        """
        whether values of this type are opened by the filesystem root.
        """
        return self in (ArgType.FILE, ArgType.FOLDER)

    def coerce(self, raw, /):
        """
        convert a raw token value (str, or None for a bare --name) to this type.

        raises ValueError when the raw value does not denote a value of this type.
        """
        match self:
            case ArgType.BOOL:
                if raw is None:
                    return True
                if raw == "true":
                    return True
                if raw == "false":
                    return False
                raise ValueError("expected 'true' or 'false'")
            case ArgType.NAT | ArgType.INT:
                if raw is None:
                    raise ValueError("missing value")
                if not re.fullmatch(r"[0-9]+" if self is ArgType.NAT else r"[+-]?[0-9]+", raw):
                    raise ValueError("not %s" % self.label)
                return int(raw)
            case ArgType.FLOAT:
                if raw is None:
                    raise ValueError("missing value")
                # float() tolerates surrounding whitespace and digit underscores
                if raw != raw.strip() or "_" in raw:
                    raise ValueError("not %s" % self.label)
                return float(raw)
            case ArgType.STRING | ArgType.FILE | ArgType.FOLDER:
                return raw

    def accepts(self, value, /):
        """
        whether an already-typed value belongs to this type.
        """
        match self:
            case ArgType.BOOL:
                return isinstance(value, bool)
            case ArgType.NAT:
                return isinstance(value, int) and not isinstance(value, bool) and value >= 0
            case ArgType.INT:
                return isinstance(value, int) and not isinstance(value, bool)
            case ArgType.FLOAT:
                return isinstance(value, int | float) and not isinstance(value, bool)
            case ArgType.STRING:
                return isinstance(value, str)
            case ArgType.FILE | ArgType.FOLDER:
                return isinstance(value, str | os.PathLike)

    def __repr__(self):
        return self.name.title()


Bool = ArgType.BOOL
Nat = ArgType.NAT
Int = ArgType.INT
String = ArgType.STRING
Float = ArgType.FLOAT
File = ArgType.FILE
Folder = ArgType.FOLDER


__all__ = (
    "ArgType",
    "Bool",
    "Nat",
    "Int",
    "String",
    "Float",
    "File",
    "Folder",
)
