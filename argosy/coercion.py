"""
Argosy coercion engine: raw values → typed record.

Walks the selected command's args in declared order and produces one value per
arg:
- a value supplied through a short flag is already typed and kept;
- a raw value is converted with ArgType.coerce (File/Folder stay paths);
- an absent arg takes its default, else False for Bool and None otherwise.

Every supplied value must also satisfy the arg's one_of restriction. The first
failure raises ConversionError; nothing after it runs.
"""
from .faults import ConversionError
from .types import ArgType


def absent(arg, /):
    """
    value recorded for an arg the input did not supply.
    """
    if arg.default is not None:
        return arg.default
    return False if arg.type is ArgType.BOOL else None


def coerce(resolution, /):
    """
    build the typed record (a dict in declared arg order) for a Resolution.
    """
    record = {}
    for name, arg in resolution.command.args.items():
        position = resolution.positions.get(name)

        if name in resolution.presets:
            raw = value = resolution.presets[name]
        elif name in resolution.values:
            raw = resolution.values[name]
            try:
                value = arg.type.coerce(raw)
            except ValueError:
                raise ConversionError(name, raw, arg.type, position) from None
        else:
            record[name] = absent(arg)
            continue

        if not arg.allows(value):
            allowed = ", ".join(sorted(map(repr, arg.one_of)))
            raise ConversionError(name, raw, arg.type, position, reason="is not one of %s" % allowed)

        record[name] = value
    return record


__all__ = (
    "absent",
    "coerce",
)
