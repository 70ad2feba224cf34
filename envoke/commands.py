"""
Envoke command layer: declare, parse and dispatch a small CLI.

What this module provides
- Flag: a named option with an optional short alias; carries a value when one
  follows it, otherwise records an empty string (boolean-style).
- Subcommand / Command: a named route with flags and a handler. Commands may
  also declare subcommands (`db init`, `db migrate`).
- App: the program (name, version, description) and its command list.
- Context: cancellable execution context handed to every handler.
- Invocation: the parsed result (command, subcommand, args, flags).
- classify(tokens, flags): split tokens into positionals and a flag mapping.
- parse(app, argv): route + classify + validate without invoking anything.
- dispatch(app, argv): parse, then invoke the matched handler.
- execute(app, argv): top-level runner; renders faults and exits with status 1.

Routing
- argv[0] equal to --help/-h renders the app help, --version/-v renders the version.
- empty argv (or an app without commands) renders the help; this is not a failure.
- argv[0] selects the first command with that name, otherwise UnknownCommandError.
- when the command declares subcommands and argv[1] exists, argv[1] must name one of
  them (UnknownSubcommandError otherwise) and parsing continues from argv[2:] with the
  subcommand's flags; with no argv[1] the command's own flags and handler are used.

Classification (left to right)
- '--name' is a long flag, '-n' (length > 1) a short flag, anything else positional.
- a declared flag (long or short name, whatever the dashes) consumes the next token as
  its value when that token exists and does not start with '-'; otherwise it maps to "".
- undeclared flag-shaped tokens are kept as positionals.
- the flag mapping is keyed by the literal name typed on the command line; '--output'
  and '-o' are not merged, handlers check both spellings when both are allowed.

Quick start
    from envoke import App, Command, Flag, execute

    def serve(context, args, flags):
        print("http:", flags.get("http"))

    app = App("myapp", version="1.0.0", description="demo", commands=[
        Command("serve", serve, short="start the server", flags=[Flag("http", usage="http mode")]),
    ])

    if __name__ == "__main__":
        execute(app)  # myapp serve --http all
"""
import difflib
import re
import shlex
import sys
import time
from collections import defaultdict
from collections.abc import Iterable

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from . import faults
from .faults import *
from .utils import *

_HELPERS = ("--help", "-h")
_VERSIONERS = ("--version", "-v")


class SpecType(type):
    """
    Metaclass giving command specs a stable typename and representation.

    - __typename__ is derived from the class name (camel-case split with hyphens).
    - __repr__/__rich_repr__ list the names declared in __introspectable__.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(cls, name, bases, namespace | {
            "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
        })

        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (type(self).__typename__, ", ".join("%s=%r" % pair for pair in self.__rich_repr__()))
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, name, label="name", /):
    """
    Internal: validate a bare command/flag name and return it trimmed.

    Names start with a letter or digit and continue with letters, digits, '_' or '-'.
    Dashes in front are rejected: flags are declared as "output", typed as "--output".
    """
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {label} must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} {label} cannot be empty")
    elif name.startswith("-"):
        raise ValueError(f"{cls.__typename__} {label} {name!r} must be given without leading dashes")
    elif not re.fullmatch(r"[^\W_][\w-]*", name):
        raise ValueError(f"{cls.__typename__} {label} {name!r} is not a valid name")
    return name


def _sanitize_text(cls, text, label, /):
    """
    Internal: optional help text (Unset or a non-empty string/Text) → None or value.
    """
    if not isinstance(text, str | Text | Unset):
        raise TypeError(f"{cls.__typename__} '{label}' must be a string")
    elif isinstance(text, str) and not (text := text.strip()):
        raise ValueError(f"{cls.__typename__} '{label}' cannot be empty")
    return coalesce(text)


def _sanitize_handler(cls, handler, /):
    if handler is not Unset and not callable(handler):
        raise TypeError(f"{cls.__typename__} handler must be callable")
    return coalesce(handler)


def _sanitize_flags(cls, flags, /):
    """
    Internal: ensure long names are unique and short names are unique.
    """
    if isinstance(flags, str | Flag) or not isinstance(flags, Iterable):
        raise TypeError(f"{cls.__typename__} flags must be an iterable of flags")
    longs = set()
    shorts = set()
    flags = list(flags)
    for flag in flags:
        if not isinstance(flag, Flag):
            raise TypeError(f"{cls.__typename__} flags must be an iterable of flags")
        if flag.name in longs:
            raise ValueError(f"{cls.__typename__} flag name {flag.name!r} is already in use")
        if flag.short is not None and flag.short in shorts:
            raise ValueError(f"{cls.__typename__} flag short name {flag.short!r} is already in use")
        longs.add(flag.name)
        if flag.short is not None:
            shorts.add(flag.short)
    return flags


def _sanitize_routes(cls, routes, kind, label, /):
    """
    Internal: validate commands/subcommands and their name uniqueness.
    """
    if isinstance(routes, str) or not isinstance(routes, Iterable):
        raise TypeError(f"{cls.__typename__} {label} must be an iterable of {kind.__typename__}s")
    names = set()
    routes = list(routes)
    for route in routes:
        if type(route) is not kind:
            raise TypeError(f"{cls.__typename__} {label} must be an iterable of {kind.__typename__}s")
        if route.name in names:
            raise ValueError(f"{cls.__typename__} {kind.__typename__} name {route.name!r} is already in use")
        names.add(route.name)
    return routes


class Flag(metaclass=SpecType):
    """
    Named option of a command or subcommand.

    Parameters
    - name: str (positional-only). Long name, typed as --name.
    - short: str (positional-only, optional). Short name, typed as -short.
    - usage: str (optional). One-line help text.
    - required: bool (keyword-only). Dispatch fails before the handler when
      neither spelling was typed.
    """
    __introspectable__ = ("name", "short", "usage", "required")

    name = mirror("name")
    short = mirror("short")
    usage = mirror("usage")
    required = mirror("required")

    def __init__(self, name, short=Unset, /, usage=Unset, *, required=False):
        self._name = _sanitize_name(type(self), name)
        self._short = coalesce(short) if short is Unset else _sanitize_name(type(self), short, "short name")
        self._usage = _sanitize_text(type(self), usage, "usage")
        if not isinstance(required, bool):
            raise TypeError(f"{type(self).__typename__} 'required' must be a boolean")
        self._required = required

    @property
    def names(self):
        """
        every spelling that selects this flag (long first).
        """
        return (self._name,) if self._short is None else (self._name, self._short)


class Subcommand(metaclass=SpecType):
    """
    Second-level route (e.g. 'init' under 'db') with its own flags and handler.

    The handler is called as handler(context, args, flags) where args is a tuple
    of positionals and flags a read-only mapping of typed flag names to values.
    """
    __introspectable__ = ("name", "short", "long", "flags", "handler")

    name = mirror("name")
    short = mirror("short")
    long = mirror("long")
    flags = mirror("flags")
    handler = mirror("handler")

    def __init__(self, name, handler=Unset, /, *, short=Unset, long=Unset, flags=()):
        self._name = _sanitize_name(type(self), name)
        self._handler = _sanitize_handler(type(self), handler)
        self._short = _sanitize_text(type(self), short, "short")
        self._long = _sanitize_text(type(self), long, "long")
        self._flags = _sanitize_flags(type(self), flags)


class Command(Subcommand):
    """
    Top-level route. May declare subcommands; when a subcommand token is present
    the command's own handler and flags are ignored.
    """
    __introspectable__ = ("name", "short", "long", "flags", "subcommands", "handler")

    subcommands = mirror("subcommands")

    def __init__(self, name, handler=Unset, /, *, short=Unset, long=Unset, flags=(), subcommands=()):
        super().__init__(name, handler, short=short, long=long, flags=flags)
        self._subcommands = _sanitize_routes(type(self), subcommands, Subcommand, "subcommands")


class App(metaclass=SpecType):
    """
    The program: identity used by help/version output and the command list.

    Parameters
    - name: str (positional-only). Program name.
    - version: str (keyword-only, optional).
    - description: str (keyword-only, optional).
    - commands: Iterable[Command] (keyword-only). Matched in declaration order.
    - fancy: bool. Wrap help/version/fault output in rich panels.
    - colorful: bool. Enable styling (palette overridable via __main__.__styles__).
    """
    __introspectable__ = ("name", "version", "description", "commands", "fancy", "colorful")

    name = mirror("name")
    version = mirror("version")
    description = mirror("description")
    commands = mirror("commands")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def __init__(self, name, /, *, version=Unset, description=Unset, commands=(), fancy=False, colorful=True):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} name must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{type(self).__typename__} name cannot be empty")
        self._name = name
        self._version = _sanitize_text(type(self), version, "version")
        self._description = _sanitize_text(type(self), description, "description")
        self._commands = _sanitize_routes(type(self), commands, Command, "commands")
        if not isinstance(fancy, bool) or not isinstance(colorful, bool):
            raise TypeError(f"{type(self).__typename__} 'fancy' and 'colorful' must be booleans")
        self._fancy = fancy
        self._colorful = colorful


class Context:
    """
    Cancellable execution context passed to handlers.

    The dispatcher never cancels a context on its own; the caller owns the
    policy (an explicit cancel() or a timeout given at construction). Long
    running handlers call check() at convenient points.
    """

    def __init__(self, *, timeout=Unset):
        if timeout is not Unset and (not isinstance(timeout, int | float) or isinstance(timeout, bool)):
            raise TypeError("context 'timeout' must be a number of seconds")
        elif timeout is not Unset and timeout < 0:
            raise ValueError("context 'timeout' cannot be negative")
        self._deadline = time.monotonic() + timeout if timeout is not Unset else None
        self._cancelled = False

    @property
    def deadline(self):
        """
        monotonic deadline (time.monotonic() scale), or None without a timeout.
        """
        return self._deadline

    @property
    def remaining(self):
        """
        seconds left before the deadline (never negative), or None without a timeout.
        """
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    @property
    def cancelled(self):
        return self._cancelled

    @property
    def expired(self):
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def done(self):
        return self._cancelled or self.expired

    def cancel(self):
        self._cancelled = True

    def check(self):
        """
        Raise ContextCancelledError once cancelled or past the deadline.
        """
        if not self.done:
            return
        reason = "cancelled" if self._cancelled else "deadline exceeded"
        trigger(ContextCancelledError(
            "execution context %s" % reason,
            title="context %s" % reason,
            code=FaultCode.CANCELLED_CONTEXT,
            reason=reason,
            hint="the command was stopped by its caller",
            docs=getdoc(FaultCode.CANCELLED_CONTEXT),
        ))

    def __repr__(self):
        return "context(cancelled=%r, remaining=%r)" % (self._cancelled, self.remaining)


class Invocation(metaclass=SpecType):
    """
    Parsed command line: built per dispatch, read-only, discarded afterwards.
    """
    __introspectable__ = ("command", "subcommand", "args", "flags")

    command = mirror("command")
    subcommand = mirror("subcommand")
    args = mirror("args")
    flags = mirror("flags")

    def __init__(self, command, subcommand, args, flags, /):
        self._command = command
        self._subcommand = subcommand
        self._args = args
        self._flags = flags

    @property
    def target(self):
        """
        the route whose flags and handler apply (subcommand when present).
        """
        return self._subcommand if self._subcommand is not None else self._command


def classify(tokens, flags, /):
    """
    Split tokens into positionals and a {typed name: value} flag mapping.

    Parameters
    - tokens: Iterable[str] remaining after command/subcommand selection.
    - flags: Iterable[Flag] declared for the active route.

    Returns
    - (tuple[str, ...], dict[str, str])

    Notes
    - a declared name matches with either prefix ('--o' and '-output' are accepted).
    - repeated flags keep the last value.
    """
    tokens = list(tokens)
    names = {name for flag in flags for name in flag.names}
    args = []
    values = {}

    index = 0
    while index < len(tokens):
        token = tokens[index]

        if token.startswith("--"):
            name = token[2:]
        elif token.startswith("-") and len(token) > 1:
            name = token[1:]
        else:
            args.append(token)
            index += 1
            continue

        if name not in names:
            # unknown flag-shaped token, kept as a positional
            args.append(token)
            index += 1
        elif index + 1 < len(tokens) and not tokens[index + 1].startswith("-"):
            values[name] = tokens[index + 1]
            index += 2
        else:
            values[name] = ""
            index += 1

    return tuple(args), values


def _tokenize(argv, /):
    """
    Normalize argv: Unset → sys.argv[1:], str → shlex.split, Iterable[str] → list.
    """
    if argv is Unset:
        return sys.argv[1:]
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("argv must be a string or an iterable of strings")
        return tokens
    raise TypeError("argv must be a string or an iterable of strings")


class Dispatcher:
    """
    Single-use dispatch pass over one app and one argv.

    Responsibilities
    - routing: help/version tokens, command and subcommand matching.
    - classification and required-flag validation.
    - rendering: help and version views (rich), printed to the output console;
      help shown alongside a routing fault goes to the error console.
    - invocation: call the matched handler with (context, args, flags).

    Consoles
    - console (output): help/version; defaults to a stdout Console.
    - errors: help printed on failures and fault rendering; defaults to the
      stderr console of envoke.faults. Passing console= routes both to one sink.
    """

    def __init__(self, app, /, *, console=Unset, quiet=False):
        if not isinstance(app, App):
            raise TypeError("dispatcher argument must be an app")
        self._app = app
        self._console = coalesce(console, Console())
        self._errors = coalesce(console, faults.console)
        self._quiet = quiet

    def trigger(self, fault, /):
        trigger(fault, prog=self._app.name, fancy=self._app.fancy, colorful=self._app.colorful, console=self._errors)

    def render(self, renderable, /, *, error=False):
        if self._quiet:
            return
        (self._errors if error else self._console).print(renderable)

    def parse(self, argv, /):
        """
        Route and classify argv.

        Returns
        - Invocation, or None when a help/version/no-command path was served.
        """
        tokens = _tokenize(argv)

        if tokens and tokens[0] in _HELPERS:
            self.render(self.helper())
            return None
        if tokens and tokens[0] in _VERSIONERS:
            self.render(self.versioner())
            return None

        if not tokens or not self._app.commands:
            self.render(self.helper())
            return None

        name = tokens[0]
        for command in self._app.commands:
            if command.name == name:
                break
        else:
            self.render(self.helper(), error=True)
            return self.unknown(UnknownCommandError, name, 1, [command.name for command in self._app.commands])

        if command.subcommands and len(tokens) > 1:
            name = tokens[1]
            for subcommand in command.subcommands:
                if subcommand.name == name:
                    break
            else:
                self.render(self.helper(command), error=True)
                return self.unknown(UnknownSubcommandError, name, 2, [subcommand.name for subcommand in command.subcommands], command)
            args, flags = classify(tokens[2:], subcommand.flags)
            invocation = Invocation(command, subcommand, args, flags)
        else:
            # a command with subcommands but no second token falls back to its own route
            args, flags = classify(tokens[1:], command.flags)
            invocation = Invocation(command, None, args, flags)

        self.validate(invocation)
        return invocation

    def unknown(self, exception, name, index, names, command=Unset, /):
        """
        Trigger an unknown command/subcommand fault with a "did you mean" hint.
        """
        suggestions = difflib.get_close_matches(name, names, 5)
        route = " ".join(part for part in (self._app.name, getattr(command, "name", None)) if part)
        type = "subcommand" if command is not Unset else "command"
        try:
            hint = "did you mean %r? you can also run '%s --help' to see available %ss" % (suggestions[0], self._app.name, type)
        except IndexError:
            hint = "run '%s --help' to see available %ss" % (self._app.name, type)
        code = FaultCode.UNKNOWN_SUBCOMMAND if command is not Unset else FaultCode.UNKNOWN_COMMAND

        self.trigger(exception(
            "unknown %s %r at %s position" % (type, name, ordinal(index)),
            title="unknown %s" % type,
            code=code,
            input=name,
            index=index,
            route=route,
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(code),
        ))

    def validate(self, invocation, /):
        """
        Fail with MissingRequiredFlagError when a required flag was not typed
        under its long name nor its short name.
        """
        for flag in invocation.target.flags:
            if not flag.required or any(name in invocation.flags for name in flag.names):
                continue
            if flag.short is not None:
                message = "required flag --%s or -%s not provided" % (flag.name, flag.short)
                hint = "add --%s <value> (or -%s <value>) to the command line" % (flag.name, flag.short)
            else:
                message = "required flag --%s not provided" % flag.name
                hint = "add --%s <value> to the command line" % flag.name
            self.trigger(MissingRequiredFlagError(
                message,
                title="missing required flag",
                code=FaultCode.MISSING_REQUIRED_FLAG,
                input=flag.name,
                short=flag.short,
                argument=flag,
                hint=hint,
                docs=getdoc(FaultCode.MISSING_REQUIRED_FLAG),
            ))

    def invoke(self, invocation, context, /):
        """
        Call the target handler; a route without a handler shows its help.
        """
        target = invocation.target
        if target.handler is None:
            self.render(self.helper(invocation.command))
            return None
        return target.handler(context, invocation.args, invocation.flags)

    def _palette(self):
        """
        Build the (styler, text) pair used by the renderers.
        """
        styles = defaultdict(str, {
            # === Head sections ===
            "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "program-version": "bold #00E6FF",  # CYAN version
            "description-section": "italic #A3A3A3",  # Neutral gray
            "version-label": "bold #FFFFFF",
            "epilog-section": "#737373",  # Dim footer gray

            # === Sections ===
            "section-label": "bold #FFFFFF",  # Pure white headers

            # === Routes ===
            "command": "bold #36C5F0",  # Sky-blue commands
            "subcommand": "bold #36C5F0",
            "route-description": "#9CA3AF",  # Muted gray

            # === Flags ===
            "flag-name": "bold #22C55E",  # GREEN for flags
            "flag-usage": "#9CA3AF",
            "required": "bold #FFD600",  # AMBER required marker

            # === Fancy panel ===
            "panel-title": "bold #FF4D94",
        } | getattr(__import__('__main__'), "__styles__", {}))

        colorful = self._app.colorful

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

        return styler, text

    def _flag_lines(self, flags, indent, styler, text, /):
        lines = []
        for flag in flags:
            line = Text(" " * indent)
            line.append(text("--" + flag.name, styler("flag-name")))
            if flag.short is not None:
                line.append(", ")
                line.append(text("-" + flag.short, styler("flag-name")))
            line.append(": ")
            line.append(text(flag.usage or "", styler("flag-usage")))
            if flag.required:
                line.append(" ")
                line.append(text("(required)", styler("required")))
            lines.append(line)
        return lines

    def _route_line(self, route, indent, style, styler, text, /):
        line = Text(" " * indent)
        line.append(text(route.name, styler(style)))
        line.append(" - ")
        line.append(text(route.short or "", styler("route-description")))
        return line

    def _route_lines(self, command, indent, styler, text, /):
        """
        Flags (for commands without subcommands) then subcommands with their flags.
        """
        lines = []
        if not command.subcommands and command.flags:
            lines.append(Text(" " * indent).append(text("Flags:", styler("section-label"))))
            lines.extend(self._flag_lines(command.flags, indent + 2, styler, text))
        if command.subcommands:
            lines.append(Text(" " * indent).append(text("Subcommands:", styler("section-label"))))
            for subcommand in command.subcommands:
                lines.append(self._route_line(subcommand, indent + 2, "subcommand", styler, text))
                if subcommand.flags:
                    lines.append(Text(" " * (indent + 4)).append(text("Flags:", styler("section-label"))))
                    lines.extend(self._flag_lines(subcommand.flags, indent + 6, styler, text))
        return lines

    def helper(self, command=Unset, /):
        """
        Build the help view: the whole app, or one command when given.

        Layout (app)
        - "<name> - <description>", "Version: <version>"
        - "Available commands:" with each command's short help, then its flags
          (commands without subcommands) or its subcommands and their flags.
        - footer hint.

        Layout (command)
        - "<name> - <short>", long description, flags or subcommands.
        """
        styler, text = self._palette()
        app = self._app
        renders = []

        if command is Unset:
            head = Text.assemble(text(app.name, styler("program-name")))
            if app.description:
                head.append(" - ")
                head.append(text(app.description, styler("description-section")))
            renders.append(head)
            renders.append(Text(""))
            renders.append(Text.assemble(
                text("Version:", styler("version-label")), " ",
                text(app.version or "unknown", styler("program-version")),
            ))
            if app.commands:
                renders.append(Text(""))
                renders.append(text("Available commands:", styler("section-label")))
                for route in app.commands:
                    renders.append(self._route_line(route, 2, "command", styler, text))
                    renders.extend(self._route_lines(route, 4, styler, text))
                renders.append(Text(""))
                renders.append(text("Use --help for more information about a command.", styler("epilog-section")))
            title = app.name
        else:
            renders.append(self._route_line(command, 0, "command", styler, text))
            if command.long:
                renders.append(Text(""))
                renders.append(text(command.long, styler("description-section")))
            lines = self._route_lines(command, 0, styler, text)
            if lines:
                renders.append(Text(""))
                renders.extend(lines)
            title = "%s %s" % (app.name, command.name)

        if app.fancy:
            return Panel(Group(*renders), title=text(title, styler("panel-title")), title_align="left")
        return Group(*renders)

    def versioner(self):
        """
        Build the version view: "<name> version <version>".
        """
        styler, text = self._palette()
        line = Text.assemble(
            text(self._app.name, styler("program-name")),
            " version ",
            text(self._app.version or "unknown", styler("program-version")),
        )
        if self._app.fancy:
            return Panel(line, title=text(self._app.name, styler("panel-title")), title_align="left")
        return line


def parse(app, argv=Unset, /):
    """
    Route and classify argv without printing or invoking anything.

    Returns
    - Invocation, or None for the help/version/no-command paths.

    Raises
    - UnknownCommandError, UnknownSubcommandError, MissingRequiredFlagError.
    """
    return Dispatcher(app, quiet=True).parse(argv)


def dispatch(app, argv=Unset, /, *, context=Unset, console=Unset):
    """
    Parse argv and invoke the matched handler.

    Parameters
    - app: App.
    - argv: Unset (sys.argv[1:]) | str (shlex-split) | Iterable[str].
    - context: Context handed to the handler (a fresh one by default).
    - console: rich Console receiving help/version output (and faults when
      they are rendered).

    Returns
    - the handler's return value, or None for help/version/no-command paths.

    Raises
    - UnknownCommandError, UnknownSubcommandError, MissingRequiredFlagError
      (the handler is never invoked in those cases).
    - whatever the handler raises, unchanged.
    """
    context = coalesce(context, Context())
    if not isinstance(context, Context):
        raise TypeError("dispatch() 'context' must be a context")
    dispatcher = Dispatcher(app, console=console)
    invocation = dispatcher.parse(argv)
    if invocation is None:
        return None
    return dispatcher.invoke(invocation, context)


def execute(app, argv=Unset, /, *, context=Unset, console=Unset):
    """
    Top-level runner: dispatch, render any failure, exit with status 1.

    - envoke faults are rendered as-is.
    - any other exception raised by a handler is rendered as a delegated error.
    - success returns normally (exit status 0 when used as the program entry).
    """
    options = {"shell": True, "prog": app.name, "fancy": app.fancy, "colorful": app.colorful}
    if console is not Unset:
        options["console"] = console
    try:
        return dispatch(app, argv, context=context, console=console)
    except EnvokeException as exception:
        trigger(exception, **options)
    except Exception as exception:
        trigger(DelegatedCommandError(
            str(exception) or type(exception).__name__,
            title="command failed",
            code=FaultCode.DELEGATED_ERROR,
            cause=exception,
            hint="the command reported %s; fix the cause and run it again" % type(exception).__name__,
            docs=getdoc(FaultCode.DELEGATED_ERROR),
        ), **options)


__all__ = (
    "Flag",
    "Subcommand",
    "Command",
    "App",
    "Context",
    "Invocation",
    "classify",
    "parse",
    "dispatch",
    "execute",
)

# Not part of the public API.
del SpecType
