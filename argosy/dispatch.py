"""
Argosy dispatch: run the whole pipeline for one argument vector.

execute(command, argv, root)
    tokens → resolver (subcommand routing, positionals, flag expansion)
           → coercion (typed record; File/Folder still paths)
           → path resolution (concurrent opens through `root`)
           → constraint validation
           → handler(record)

  The coroutine returns the handler's result (or the read-only record when the
  selected command has no handler) and raises the first fault met on the way:
  a ParseError subclass from the pipeline, or, unchanged, whatever the root or
  a validator raised. Token warnings go through warnings.warn once the vector
  has resolved. Nothing is printed.

invoke(command, prompt, root, *, shell, fancy, colorful)
  Synchronous process-level runner. Normalizes the prompt (sys.argv[1:], a
  shell-like string, or an iterable of strings), runs execute() in a fresh
  event loop and, in shell mode, renders warnings and faults through rich and
  exits with status 1 on a fault.

Concurrency
- Only path resolution suspends. Every File/Folder value of the selected command
  is opened in its own task inside one asyncio.TaskGroup; the first failure
  cancels the remaining opens and is the single failure reported.
- Per-call state (the resolution and the record) is local to the call, so one
  Command can serve any number of concurrent execute() calls.
"""
import asyncio
import inspect
import shlex
import sys
import warnings
from collections.abc import Iterable
from types import MappingProxyType

from .coercion import coerce
from .faults import ParseError, ParseWarning, trigger
from .filesystem import LocalRoot
from .resolver import resolve
from .schema import Command
from .types import ArgType
from .utils import Unset
from .validation import check


async def _open(command, record, root):
    """
    replace every File/Folder path in `record` with the handle `root` opens for it.
    """
    openers = {}
    for name, arg in command.args.items():
        if arg.type.resolvable and record[name] is not None:
            openers[name] = root.open_file if arg.type is ArgType.FILE else root.open_folder

    if not openers:
        return

    try:
        async with asyncio.TaskGroup() as group:
            tasks = {name: group.create_task(opener(record[name])) for name, opener in openers.items()}
    except* Exception as failures:
        # the first failure cancelled its siblings; anything else recorded is discarded
        failure = failures.exceptions[0]
    else:
        failure = None

    if failure is not None:
        raise failure

    for name, task in tasks.items():
        record[name] = task.result()


async def execute(command, argv, root, /):
    """
    parse `argv` against `command`, resolve paths through `root`, validate, and
    call the selected command's handler with the typed record.

    parameters
    - command: the root Command.
    - argv: sequence of argument strings (program name excluded).
    - root: filesystem root (see argosy.filesystem.Root) for File/Folder args.

    returns
    - the handler's result (awaited when the handler is a coroutine function),
      or the read-only record when the selected command has no handler.
    """
    if not isinstance(command, Command):
        raise TypeError("execute() first argument must be a command")
    if isinstance(argv, str) or not isinstance(argv, Iterable):
        raise TypeError("execute() second argument must be an iterable of strings")
    argv = list(argv)
    for token in argv:
        if not isinstance(token, str):
            raise TypeError("execute() second argument must be an iterable of strings")

    resolution = resolve(command, argv)
    for warning in resolution.warnings:
        trigger(warning)

    record = coerce(resolution)
    await _open(resolution.command, record, root)
    check(resolution, record)

    record = MappingProxyType(record)
    if (handler := resolution.command.handler) is None:
        return record
    result = handler(record)
    if inspect.isawaitable(result):
        result = await result
    return result


def _tokens(prompt):
    """
    normalize an invoke() prompt into a list of argument strings.
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("invoke() prompt must be a string or an iterable of strings")
        return tokens
    raise TypeError("invoke() prompt must be a string or an iterable of strings")


def invoke(command, prompt=Unset, /, root=Unset, *, shell=False, fancy=False, colorful=True):
    """
    Run `command` once, synchronously, as a program would.

    Parameters
    - prompt:
      • Unset: read tokens from sys.argv[1:].
      • str: shell-like string, split via shlex.split.
      • Iterable[str]: pre-tokenized sequence.
    - root: filesystem root for File/Folder args (LocalRoot on the cwd by default).
    - shell: render warnings and faults on stderr and exit(1) on a fault instead
      of raising.
    - fancy / colorful: rendering options for shell mode.

    Returns
    - whatever execute() returns.
    """
    tokens = _tokens(prompt)
    root = LocalRoot() if root is Unset else root
    if not shell:
        return asyncio.run(execute(command, tokens, root))

    options = {"shell": shell, "fancy": fancy, "colorful": colorful}
    fault = Unset
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", ParseWarning)
        try:
            result = asyncio.run(execute(command, tokens, root))
        except ParseError as error:
            fault = error

    for each in caught:
        if isinstance(each.message, ParseWarning):
            trigger(each.message, **options)
        else:
            warnings.showwarning(each.message, each.category, each.filename, each.lineno)

    if fault is not Unset:
        trigger(fault, **options)
    return result


__all__ = (
    "execute",
    "invoke",
)
