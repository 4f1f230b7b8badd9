"""
Argosy constraint validation, run on the typed record right before dispatch.

Order (first failure wins)
1. required args must be supplied with a value;
2. an arg that is present needs every name in its `requires`;
3. every CNF clause of the command needs at least one present name;
4. each present arg's own validator sees its value;
5. the command validator sees the whole (read-only) record.

"Present" means supplied by the input or carrying a non-None default.

Validators return None on success. A string becomes a ValidationError, an
exception instance is raised as is, and anything a validator raises itself
propagates unchanged.
"""
from types import MappingProxyType

from rich.text import Text

from .faults import *


def _verdict(result, /, name=None, position=None):
    if result is None:
        return
    if isinstance(result, BaseException):
        raise result
    if isinstance(result, str | Text):
        raise ValidationError(str(result), name=name, position=position)
    raise TypeError("validators must return None, a string, or an exception")


def present(resolution, name, /):
    """
    whether `name` counts as present for requirement checks.
    """
    return resolution.supplied(name) or resolution.command.args[name].default is not None


def check(resolution, record, /):
    """
    enforce requirements and run validators for a coerced (and opened) record.
    """
    command = resolution.command
    positions = resolution.positions

    for name, arg in command.args.items():
        if not arg.required:
            continue
        if not resolution.supplied(name):
            raise MissingRequiredError(name)
        # a bare --name on a non-boolean arg carries no value
        if record[name] is None:
            raise MissingRequiredError(name, position=positions.get(name))

    for name, arg in command.args.items():
        if not arg.requires or not present(resolution, name):
            continue
        # report siblings in declared order
        missing = [each for each in command.args if each in arg.requires and not present(resolution, each)]
        if missing:
            raise MissingDependencyError(name, missing, position=positions.get(name))

    for clause in command.requires:
        if not any(present(resolution, name) for name in clause):
            raise UnsatisfiedRequirementError(each for each in command.args if each in clause)

    for name, arg in command.args.items():
        if arg.validate is not None and present(resolution, name):
            _verdict(arg.validate(record[name]), name=name, position=positions.get(name))

    if command.validate is not None:
        _verdict(command.validate(MappingProxyType(record)))


__all__ = (
    "present",
    "check",
)
