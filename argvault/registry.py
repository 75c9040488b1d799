"""
Argvault registry: name tokens → slots, the parse scan, and help assembly.

What this module provides
- Registry: an ordered mapping from name tokens ('--count', '-c') to shared Slot
  instances plus:
  • register(): declare one argument and get its Handle back.
  • parse(): scan raw tokens, convert values, aggregate every fault.
  • render(): plain help text (one line per declared argument).
- Status / ParseResult: the tri-state outcome of a parse (matched, help, failed),
  the unmatched tokens and the collected faults.

Parsing algorithm (single left-to-right scan with an explicit cursor)
1. help: when help is enabled and the whole input is exactly '--help' or '-h',
   return Status.HELP straight away. Slots and required arguments are not looked at.
2. for each token:
   • unbound → appended to 'unmatched'; unless unknown arguments are allowed, an
     UnknownArgumentError is collected. The cursor moves by one.
   • bound → the slot converts the next token (Unset at end of input):
       CONSUMED → cursor moves by two, SKIPPED → by one,
       FAILED → a ConversionError (MissingValueError at end of input) is collected
       and the cursor moves by two.
3. every required slot that was not set is listed, aliases merged as
   '--long or -short', in one MissingRequiredError.
4. success means no fault at all. The report (Registry.error) joins the fault
   messages with newlines: scan faults in scan order, then the missing summary.

Notes
- Every parse resets the parse state of all slots; values are kept.
- parse() is not reentrant: serialize calls or use one registry per thread.
"""
import difflib
import logging
import re
from collections import namedtuple
from collections.abc import Iterable
from enum import Enum
from types import MappingProxyType

from .faults import *
from .kinds import Kind
from .slots import Handle, Outcome, Slot
from .utils import Unset, coalesce, mirror

logger = logging.getLogger(__name__)

WELCOME = "This are the arguments available for this program:"
HELPERS = ("--help", "-h")

_NAME = re.compile(r"[^\s=-][^\s=]*")


class Status(Enum):
    """
    tri-state outcome of a parse.
    """
    MATCHED = "matched"
    HELP    = "help"
    FAILED  = "failed"


class ParseResult(namedtuple("ParseResult", ("status", "unmatched", "faults"))):
    """
    result of Registry.parse.

    fields
    - status: Status
    - unmatched: tuple[str, ...], unbound tokens in input order (also filled when
      unknown arguments are allowed).
    - faults: tuple[ParserException, ...], in report order.

    truthiness follows success, so `if registry.parse(tokens): ...` reads naturally.
    """
    __slots__ = ()

    @property
    def success(self):
        return self.status is Status.MATCHED

    @property
    def error(self):
        return "\n".join(fault.message for fault in self.faults)

    def __bool__(self):
        return self.success


class Registry:
    """
    ordered mapping of name tokens to slots, with the parse contract.

    configuration (keyword-only, fixed at construction)
    - help_enabled: intercept a lone '--help'/'-h' (default True).
    - allow_unknown: do not report unbound tokens as faults (default False);
      they still land in ParseResult.unmatched.
    - welcome: first line of render() (default WELCOME).
    """

    help_enabled = mirror("help_enabled")
    allow_unknown = mirror("allow_unknown")
    welcome = mirror("welcome")

    def __init__(self, *, help_enabled=True, allow_unknown=False, welcome=Unset):
        if not isinstance(help_enabled, bool):
            raise TypeError("Registry 'help_enabled' must be a boolean")
        if not isinstance(allow_unknown, bool):
            raise TypeError("Registry 'allow_unknown' must be a boolean")
        if not isinstance(welcome := coalesce(welcome, WELCOME), str):
            raise TypeError("Registry 'welcome' must be a string")
        self._help_enabled = help_enabled
        self._allow_unknown = allow_unknown
        self._welcome = welcome
        self._bindings = {}
        self._names = {}
        self._faults = ()

    @property
    def bindings(self):
        return MappingProxyType(self._bindings)

    @property
    def faults(self):
        """
        faults collected by the last parse, in report order.
        """
        return self._faults

    @property
    def error(self):
        """
        aggregated report of the last parse ("" when it succeeded).
        """
        return "\n".join(fault.message for fault in self._faults)

    def register(self, kind, /, long="", short="", default=Unset, descr=Unset, required=False):
        """
        declare one argument and return its handle.

        parameters
        - kind: Kind of the value.
        - long: bound as '--<long>' when non-empty.
        - short: bound as '-<short>' when non-empty.
        - default: initial value (kind default when Unset).
        - descr: help text.
        - required: report the argument as missing when never set by a parse.

        raises
        - TypeError when no name is given, a name is not a string, or a token is
          already bound.
        - ValueError when a name starts with '-' or holds whitespace or '='.
        - TypeMismatchError when the default does not belong to the kind.
        """
        if not isinstance(kind, Kind):
            raise TypeError("register() 'kind' must be a kind")

        tokens = []
        for prefix, name in (("--", long), ("-", short)):
            if not isinstance(name, str):
                raise TypeError("register() names must be strings")
            if not name:
                continue
            if not _NAME.fullmatch(name):
                raise ValueError(f"register() name {name!r} must not start with '-' nor hold spaces or '='")
            if (token := prefix + name) in self._bindings:
                raise TypeError(f"register() name {token!r} is already in use")
            tokens.append(token)

        if not tokens:
            raise TypeError("register() requires at least one name")

        slot = Slot(kind, default, descr, required)
        self._bindings.update(dict.fromkeys(tokens, slot))
        self._names[slot] = tuple(tokens)
        return Handle(slot, kind, tokens)

    def lookup(self, token, /):
        """
        return a handle over the slot bound to token (KeyError when unbound).
        """
        slot = self._bindings[token]
        return Handle(slot, slot.kind, self._names[slot])

    def get(self, token, kind, /):
        """
        return the value bound to token read as kind (TypeMismatchError otherwise).
        """
        return self._bindings[token].get(kind)

    def names(self, slot, /):
        return self._names[slot]

    def __contains__(self, token):
        return token in self._bindings

    def __iter__(self):
        return iter(self._names)

    def __len__(self):
        return len(self._names)

    def parse(self, tokens, /):
        """
        parse raw tokens (program name excluded) into the declared slots.

        returns
        - ParseResult(Status.HELP, (), ()) for a lone help token (when enabled).
        - ParseResult(Status.MATCHED, unmatched, ()) when no fault was collected.
        - ParseResult(Status.FAILED, unmatched, faults) otherwise.

        raises
        - TypeError when tokens is a string or holds non-string items.
        """
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be an iterable of strings")

        self._faults = ()

        if self._help_enabled and len(tokens) == 1 and tokens[0] in HELPERS:
            logger.debug("help requested with %r", tokens[0])
            return ParseResult(Status.HELP, (), ())

        for slot in self:
            slot.reset()

        faults = []
        unmatched = []

        index = 0
        while index < len(tokens):
            token = tokens[index]

            try:
                slot = self._bindings[token]
            except KeyError:
                unmatched.append(token)
                if not self._allow_unknown:
                    faults.append(self._unknown(token, index))
                logger.debug("unmatched token %r at %d", token, index)
                index += 1
                continue

            raw = tokens[index + 1] if index + 1 < len(tokens) else Unset
            outcome = slot.convert(raw)

            if outcome is Outcome.FAILED:
                faults.append(self._failure(token, index, slot, raw))
                logger.debug("conversion of %r at %d failed: %s", token, index, slot.error)
                index += 2
                continue

            logger.debug("matched %r at %d (%s)", token, index, outcome.name.lower())
            index += 1 + outcome

        if labels := [" or ".join(self._names[slot]) for slot in self if slot.required and not slot.set]:
            faults.append(MissingRequiredError(
                "The following required arguments was not set: %s" % ", ".join(labels),
                title="missing required arguments",
                code=FaultCode.MISSING_REQUIRED,
                labels=tuple(labels),
                hint="add the missing arguments, run with '--help' to see all of them",
                docs=getdoc(FaultCode.MISSING_REQUIRED),
            ))

        self._faults = tuple(faults)
        status = Status.FAILED if faults else Status.MATCHED
        logger.debug("parse finished: %s (%d fault(s), %d unmatched)", status.value, len(faults), len(unmatched))
        return ParseResult(status, tuple(unmatched), self._faults)

    def _unknown(self, token, index):
        suggestions = difflib.get_close_matches(token, self._bindings.keys(), 3)
        if suggestions:
            hint = "did you mean %r? run with '--help' to see the available arguments" % suggestions[0]
        else:
            hint = "remove it, run with '--help' to see the available arguments"
        return UnknownArgumentError(
            "Unknown argument: %s" % token,
            title="unknown argument",
            code=FaultCode.UNKNOWN_ARGUMENT,
            input=token,
            index=index,
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_ARGUMENT),
        )

    def _failure(self, token, index, slot, raw):
        if raw is Unset:
            exception, code = MissingValueError, FaultCode.MISSING_VALUE
            hint = "add a %s value after %r" % (slot.kind.value, token)
        else:
            exception, code = ConversionError, FaultCode.CONVERSION_FAILURE
            hint = "pass a valid %s value after %r" % (slot.kind.value, token)
        return exception(
            "Error in argument: %s, %s" % (token, slot.error),
            title="invalid value" if raw is not Unset else "missing value",
            code=code,
            input=token,
            index=index,
            value=raw,
            slot=slot,
            hint=hint,
            docs=getdoc(code),
        )

    def render(self, welcome=Unset):
        """
        plain help text: the welcome line, then one line per declared argument.

        layout
        - short token and long token, each right-aligned in 10 columns, then
          ' : ' and the help text. A missing alias leaves its column blank.
        """
        lines = [coalesce(welcome, self._welcome)]
        for slot, tokens in self._names.items():
            long = next((token for token in tokens if token.startswith("--")), "")
            short = next((token for token in tokens if not token.startswith("--")), "")
            lines.append("%10s %10s : %s" % (short, long, slot.descr))
        return "\n".join(lines) + "\n"

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join(" | ".join(tokens) for tokens in self._names.values()))

    def __rich_repr__(self):
        for slot, tokens in self._names.items():
            yield " | ".join(tokens), slot


__all__ = (
    "WELCOME",
    "Status",
    "ParseResult",
    "Registry",
)
