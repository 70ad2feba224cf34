"""
Envoke faults: every error and warning the binder and the dispatcher report.

Contents
- FaultCode: stable numeric identifiers, 1xxxx for the command layer and
  2xxxx for configuration binding.
- EnvokeException: base error; BindingError and CommandException split it by
  layer. EnvokeWarning: base notice (RequiredDefaultWarning).
- trigger(fault, **options): merge runtime options into a fault and surface it.
- getdoc(code): documentation lookup supplied by the host program.

Surfacing
- outside shell mode errors are raised and warnings go to the warnings module.
- in shell mode both are printed with rich (stderr by default, or the
  `console` option) and errors end the process with status 1.

Rendering
    [ myapp — 21102 | Type Mismatch ]
    invalid int 'abc' for field 'app.port'
     → check the value of APP_PORT

The host program may define, in __main__: __styles__ (palette overrides),
__codes__ (FaultCode → label), __docs__ (FaultCode → text) and __prog__
(program name shown in the header).
"""
import copy
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    stable fault identifiers.

    - 111xx: command routing, flags and handler outcomes.
    - 211xx: binding errors.
    - 221xx: binding warnings.
    """
    # --- routing (111 0x) ---
    UNKNOWN_COMMAND             = 11101
    UNKNOWN_SUBCOMMAND          = 11102

    # --- flags (111 1x) ---
    MISSING_REQUIRED_FLAG       = 11111

    # --- handler outcomes (111 3x) ---
    DELEGATED_ERROR             = 11131
    CANCELLED_CONTEXT           = 11132

    # --- binding errors (211 xx) ---
    MISSING_REQUIRED            = 21101
    TYPE_MISMATCH               = 21102
    UNSUPPORTED_TYPE            = 21103
    MALFORMED_SOURCE            = 21111

    # --- binding warnings (221 xx) ---
    REQUIRED_DEFAULT            = 22101

    def normalize(self):
        """
        label shown in fault headers: __main__.__codes__[self] when the host
        program defines it, the numeric value otherwise.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, title_style, message_style):
    """
    Shared layout: header, message, hint; a Panel titled by the header when fancy.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", True)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        text(getattr(main, "__prog__", options.get("prog", "envoke")), styler("prog-name")),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
        " | ",
        text(str(options.get("title", type(fault).__name__)).title(), styler(title_style)),
        " ]",
    )
    message = text(fault.message if fault.message is not Unset else type(fault).__name__, styler(message_style))
    hint = Text.assemble(text(" → ", styler("hint-arrow")), text(options.get("hint", ""), styler("hint")))

    if options.get("fancy", False):
        return Panel(Group(message, hint), title=header, title_align="left")
    return Group(header, message, hint)


class Fault:
    """
    message + read-only options, shared by errors and warnings.

    str(fault) is the message so plain tracebacks and warning lines stay
    readable; copy.replace(fault, **options) returns a copy with merged options.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **self.options | overrides)


class EnvokeException(Fault, Exception):
    """
    base error. options typically carry title, code, hint and docs, plus the
    payload of the raiser (key, field, input, ...).
    """

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, "error-title", "error-message")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)
        sys.exit(1)


class BindingError(EnvokeException):
    """
    configuration could not be bound; the first one aborts the whole bind.
    """


class MissingRequiredError(BindingError): ...
class TypeMismatchError(BindingError): ...
class UnsupportedTypeError(BindingError): ...
class MalformedSourceError(BindingError): ...


class CommandException(EnvokeException):
    """
    command line could not be dispatched.

    routing and flag faults are raised before any handler runs; a cancelled
    context is raised from inside the handler through Context.check().
    """


class UnknownCommandError(CommandException): ...
class UnknownSubcommandError(CommandException): ...
class MissingRequiredFlagError(CommandException): ...
class DelegatedCommandError(CommandException): ...
class ContextCancelledError(CommandException): ...


class EnvokeWarning(Fault, Warning):
    """
    base notice; never interrupts the caller.
    """

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, "warning-title", "warning-message")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        self.options.get("console", console).print(self)


class RequiredDefaultWarning(EnvokeWarning): ...


def trigger(fault, /, **options):
    """
    Merge `options` into `fault` (copy.replace) and surface the copy.

    Recognized options: shell, fancy, colorful, console, prog, title, code,
    hint, docs. Anything else is kept as payload on the copy.
    """
    if not (callable(getattr(fault, "__trigger__", None)) and callable(getattr(fault, "__replace__", None))):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    Documentation for `code` from __main__.__docs__, or None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "EnvokeException",
    "BindingError",
    "MissingRequiredError",
    "TypeMismatchError",
    "UnsupportedTypeError",
    "MalformedSourceError",
    "CommandException",
    "UnknownCommandError",
    "UnknownSubcommandError",
    "MissingRequiredFlagError",
    "DelegatedCommandError",
    "ContextCancelledError",
    "EnvokeWarning",
    "RequiredDefaultWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
