"""
Argvault faults (parse errors, aggregated exits, programming errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- ParserException: base type for parse-time faults; carries message + options and
  knows how to render itself (rich) and how to surface itself (raise or print).
- UnknownArgumentError / ConversionError / MissingValueError / MissingRequiredError:
  the parse-time faults a registry collects while scanning. They are never raised
  during the scan, they are aggregated and reported together.
- ParseExit: ExceptionGroup bundling every fault of one failed parse.
- TypeMismatchError: programming error (wrong kind on read/write/default), raised
  immediately and never aggregated.
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Message contract
- The message of each parse-time fault is the exact line of the aggregated report:
    Unknown argument: <token>
    Error in argument: <token>, <conversion error>
    The following required arguments was not set: <labels>
  Titles and hints are presentation-only and live in the options.

Integration
- Registry.parse collects faults; invoke() bundles them in a ParseExit and calls
  trigger(exit, **ui). In non-shell mode the exit is raised, in shell mode it is
  printed through rich followed by sys.exit(1).
"""
import functools
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, UnsetType, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - scanning (1111x/1112x)
      • UNKNOWN_ARGUMENT, MISSING_VALUE, CONVERSION_FAILURE
    - validation (1112x)
      • MISSING_REQUIRED
    - programming (131xx)
      • TYPE_MISMATCH

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- scanning errors (11xxx) ---
    UNKNOWN_ARGUMENT   = 11112
    MISSING_VALUE      = 11117
    CONVERSION_FAILURE = 11123

    # --- validation errors (11xxx) ---
    MISSING_REQUIRED   = 11125

    # --- programming errors (13xxx) ---
    TYPE_MISMATCH      = 13101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _prog(options):
    main = __import__("__main__")
    if hasattr(main, "__prog__"):
        return main.__prog__
    tool = options.get("tool")
    if tool is not None:
        return tool.name
    return os.path.basename(sys.argv[0]) or "argvault"


def _palette(defaults, options):
    styles = defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))
    colorful = options.get("colorful", False)

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


class ParserException(Exception):
    """
    base of every parse-time fault.

    options (all optional, merged over time via __replace__)
    - code: FaultCode, title: str, hint: str, docs: str | None
    - input: the offending token, index: its 0-based position
    - tool/shell/fancy/colorful: ui context merged by trigger()
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        self.message = coalesce(message, "")
        self.options = MappingProxyType(options)
        super().__init__(self.message)

    def __str__(self):
        return self.message

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        styler, text = _palette({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, self.options)

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            text(_prog(self.options), styler("prog-name")),
            " — ",
            text(code.normalize() if code else "?", styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if self.options.get("fancy", False):
            width = console.width - 4
            try:
                width = int(width * self.options["ratio"])
            except KeyError:
                width = None
            return Panel(Group(*renders), title=header, title_align="left", width=width)

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})

    def __reduce__(self):
        return functools.partial(type(self), **self.options), (self.message,)


class UnknownArgumentError(ParserException): ...
class ConversionError(ParserException): ...
class MissingValueError(ConversionError): ...
class MissingRequiredError(ParserException): ...


class ParseExit(ExceptionGroup[ParserException]):
    """
    every fault of one failed parse, in report order.

    report is the newline-joined message text (what Registry.error holds).
    """

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad parse", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad parse", tuple(exceptions))
        self.options = MappingProxyType(options)

    @property
    def report(self):
        return "\n".join(exception.message for exception in self.exceptions)

    def __rich__(self):
        styler, text = _palette({
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title (Bad Parse)
        }, self.options)

        header = Text.assemble(
            "[ ", text(_prog(self.options), styler("prog-name")), " — ", text(self.message.title(), styler("title")), " ]"
        )

        ui = {key: self.options[key] for key in ("tool", "colorful", "fancy") if key in self.options}
        renders = [exception.__replace__(ratio=2/3, **ui) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})

    def __reduce__(self):
        return functools.partial(type(self), **self.options), (self.exceptions,)


class TypeMismatchError(TypeError):
    """
    a slot was read, written or declared with the wrong kind or value type.

    this is a programming error: it is raised on the spot and never becomes
    part of an aggregated parse report.
    """
    code = FaultCode.TYPE_MISMATCH

    def __init__(self, message, /, *, expected=Unset, received=Unset):
        super().__init__(message)
        self.expected = expected
        self.received = received


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised.
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

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "ParserException",
    "UnknownArgumentError",
    "ConversionError",
    "MissingValueError",
    "MissingRequiredError",
    "ParseExit",
    "TypeMismatchError",
    "trigger",
    "getdoc",
)
