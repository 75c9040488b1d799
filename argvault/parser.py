"""
Argvault parser layer: declare, parse and report through one object.

What this module provides
- Parser: owns a Registry and exposes one declaration method per kind
  (string, int, long, longlong, uint, ulong, ulonglong, float, double, bool, char),
  each returning the typed Handle of the declared argument. Composition replaces
  the "subclass and declare fields" style: build a Parser, keep the handles.
- invoke(parser, prompt): run a parser against sys.argv, a shell-like string or a
  token list and act on the outcome (print help, report faults, exit or raise).

Quick start
    from argvault import Parser, invoke

    parser = Parser("This program will print a message a number of times.", shell=True)
    message = parser.string("msg", "m", descr="The message to print.", required=True)
    times = parser.uint("times", "t", 1, "The number of times the message is printed.")
    numbered = parser.bool("num", "n", descr="Print line numbers for the message.")

    invoke(parser)             # exits on --help or on any fault (shell=True)
    for index in range(times.value):
        print(message.value)

Runtime flags
- shell: print help/faults through rich and exit the process (0 for help, 1 for
  faults). When False, help is printed and the result returned, faults raise ParseExit.
- colorful: style the rich output (palette overridable via __main__.__styles__).
- fancy: wrap the help and faults in panels.

Parser.parse never exits nor prints: it only returns the ParseResult.
"""
import os.path
import shlex
import sys
from collections import defaultdict
from collections.abc import Iterable

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .faults import *
from .kinds import Kind
from .registry import Registry, Status
from .utils import Unset, coalesce, mirror, rename


def _declarer(kind):
    """
    Build the declaration method bound to one kind (Parser.<kind>).
    """

    @rename(kind.value)
    def declare(self, long="", short="", default=Unset, descr=Unset, required=False):
        return self.argument(kind, long, short, default, descr, required)

    declare.__doc__ = (
        f"declare a {kind.value!r} argument as '--<long>' and/or '-<short>' and return its handle.\n\n"
        f"the default is {kind.default!r} unless given; "
        + ("the argument takes the following token as its value." if kind.consuming else
           "the argument takes no value token.")
    )
    return declare


class Parser:
    """
    builder owning a registry: declare typed arguments, parse, render help.

    parameters
    - welcome: first line of the help (default Registry's WELCOME).
    - name: program name shown in fault headers (default basename of sys.argv[0]).
    - help_enabled / allow_unknown: forwarded to the registry.
    - shell / colorful / fancy: runtime flags used by __invoke__ and __rich__.
    """

    registry = mirror("registry")
    name = mirror("name")
    shell = mirror("shell")
    colorful = mirror("colorful")
    fancy = mirror("fancy")

    def __init__(
            self,
            welcome=Unset,
            /,
            name=Unset,
            *,
            help_enabled=True,
            allow_unknown=False,
            shell=False,
            colorful=False,
            fancy=False
    ):
        for flag, value in (("shell", shell), ("colorful", colorful), ("fancy", fancy)):
            if not isinstance(value, bool):
                raise TypeError(f"Parser {flag!r} must be a boolean")
        if not isinstance(name := coalesce(name, os.path.basename(sys.argv[0]) or "argvault"), str):
            raise TypeError("Parser 'name' must be a string")
        self._registry = Registry(help_enabled=help_enabled, allow_unknown=allow_unknown, welcome=welcome)
        self._name = name
        self._shell = shell
        self._colorful = colorful
        self._fancy = fancy

    @property
    def welcome(self):
        return self._registry.welcome

    @property
    def error(self):
        """
        aggregated fault report of the last parse.
        """
        return self._registry.error

    def argument(self, kind, long="", short="", default=Unset, descr=Unset, required=False):
        """
        declare an argument of any kind (the per-kind methods forward here).
        """
        return self._registry.register(kind, long, short, default, descr, required)

    def parse(self, tokens=Unset):
        """
        parse tokens (sys.argv[1:] when Unset) and return the ParseResult.
        """
        return self._registry.parse(sys.argv[1:] if tokens is Unset else tokens)

    def help(self):
        """
        plain-text help (welcome line + one line per argument).
        """
        return self._registry.render()

    def __rich__(self):
        """
        Render the help as a rich renderable.

        Palette keys
        - welcome, option-name, flag-name, kind, required, argument-description, panel-title

        Customization
        - Define a mapping named __styles__ in __main__ to override any palette entry.
        - When colorful is False, styling is suppressed.
        """
        styles = defaultdict(str, {
            "welcome": "italic #A3A3A3",  # Neutral gray
            "option-name": "bold #00E6FF",  # CYAN for value-taking arguments
            "flag-name": "bold #22C55E",  # GREEN for bool/char arguments
            "kind": "bold #FFD600",  # AMBER for kinds
            "required": "bold #FF4D94",  # MAGENTA → required stands out
            "argument-description": "#9CA3AF",  # Muted gray
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self.colorful:
                return Text(str(fragment))
            return Text(str(fragment), style)

        table = Table(box=None, show_header=False, padding=(0, 1), pad_edge=False)
        table.add_column("short", justify="right")
        table.add_column("long", justify="right")
        table.add_column("kind")
        table.add_column("help", overflow="fold")

        for slot in self._registry:
            tokens = self._registry.names(slot)
            style = "option-name" if slot.kind.consuming else "flag-name"
            long = next((token for token in tokens if token.startswith("--")), "")
            short = next((token for token in tokens if not token.startswith("--")), "")
            descr = text(slot.descr, styler("argument-description"))
            if slot.required:
                descr = Text.assemble(descr, " ", text("(required)", styler("required")))
            table.add_row(
                text(short, styler(style)),
                text(long, styler(style)),
                text("<%s>" % slot.kind.value if slot.kind is not Kind.BOOL else "", styler("kind")),
                descr,
            )

        renderable = Group(text(self.welcome, styler("welcome")), table)

        if self.fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[", " ", f"{self.name} HELP".upper(), " ", "]", style=styler("panel-title")),
                title_align="left",
            )

        return renderable

    def __invoke__(self, prompt=Unset):
        """
        Parse a prompt and act on the outcome.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence (items kept as-is, empty ones too).

        Behavior
        - HELP: prints the help on stdout; exits 0 in shell mode, otherwise returns.
        - FAILED: in shell mode prints the help and the faults on stderr and exits 1;
          otherwise raises ParseExit.
        - MATCHED: returns the ParseResult.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        result = self.parse(tokens)

        if result.status is Status.HELP:
            Console().print(self)
            if self.shell:
                sys.exit(0)
        elif result.status is Status.FAILED:
            if self.shell:
                Console(stderr=True).print(self)
            trigger(
                ParseExit(result.faults),
                tool=self,
                shell=self.shell,
                fancy=self.fancy,
                colorful=self.colorful,
            )

        return result

    def __repr__(self):
        return "%s(%r, %r)" % (type(self).__name__, self._name, self._registry)


for _kind in Kind:
    setattr(Parser, _kind.value, _declarer(_kind))
del _kind


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for parsers.

    Parameters
    - object: an instance providing __invoke__(prompt).
    - prompt: Unset (sys.argv[1:]), a shell-like string or an iterable of strings.

    Returns
    - whatever __invoke__ returns (a ParseResult for Parser).

    Raises
    - TypeError when 'object' does not implement __invoke__.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "Parser",
    "invoke",
)
