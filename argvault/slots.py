"""
Argvault slots: per-argument storage and typed handles.

Overview
- Slot: holds one declared argument's current value (tagged with a Kind), its help
  text, its required flag, whether it was set by the last parse and the last
  conversion error. Exactly one Slot exists per declared argument, whatever the
  number of name tokens bound to it.
- Outcome: the signal returned by Slot.convert, read by the registry to move its
  cursor (CONSUMED → skip the value token too, SKIPPED → only the name token,
  FAILED → record the error and skip both).
- Handle: the typed read/write view a consumer receives when declaring an argument.

Semantics
- A slot is marked set only when a raw token is applied successfully. A failed
  numeric conversion leaves it unset, so a required argument with a bad value is
  reported both as a conversion error and as missing.
- BOOL and CHAR never consume the next token. BOOL toggles on presence, CHAR reads
  the first character of the next token and leaves that token to be scanned.
- Reading or writing with the wrong kind raises TypeMismatchError immediately.
"""
from enum import IntEnum

from .faults import TypeMismatchError
from .kinds import Kind
from .utils import Unset, UnsetType, coalesce, mirror


class Outcome(IntEnum):
    """
    cursor signal of a conversion attempt.

    the integer value is the number of value tokens consumed, FAILED is negative.
    """
    FAILED   = -1
    SKIPPED  = 0
    CONSUMED = 1


class Slot:
    """
    storage unit for one declared argument.

    read-only metadata
    - kind: Kind of the payload (runtime type tag).
    - descr: help text.
    - required: whether the parse fails when the slot is never set.

    parse state (owned by the registry, reset at the start of every parse)
    - set: True once a raw token was applied successfully.
    - error: message of the last failed conversion ("" otherwise).
    """
    __slots__ = ("_kind", "_value", "_descr", "_required", "_set", "_error")

    kind = mirror("kind")
    descr = mirror("descr")
    required = mirror("required")
    set = mirror("set")
    error = mirror("error")

    def __init__(self, kind, /, default=Unset, descr=Unset, required=False):
        if not isinstance(kind, Kind):
            raise TypeError("Slot 'kind' must be a kind")
        if not isinstance(descr, str | UnsetType):
            raise TypeError("Slot 'descr' must be a string")
        if not isinstance(required, bool):
            raise TypeError("Slot 'required' must be a boolean")
        self._kind = kind
        self._value = kind.check(coalesce(default, kind.default))
        self._descr = coalesce(descr, "")
        self._required = required
        self._set = False
        self._error = ""

    def get(self, kind, /):
        """
        return the stored value, read as the given kind.

        raises TypeMismatchError when kind is not the slot's kind.
        """
        if kind is not self._kind:
            raise TypeMismatchError(
                f"slot holds a {self._kind.value!r} value, not a {getattr(kind, 'value', kind)!r} one",
                expected=self._kind,
                received=kind,
            )
        return self._value

    def put(self, value, /):
        """
        assign a value programmatically (validated like a declaration default).

        this does not mark the slot as set: only parsing does.
        """
        self._value = self._kind.check(value)

    def convert(self, raw=Unset, /):
        """
        apply a raw token to the slot.

        parameters
        - raw: str | Unset
          the token following the argument name, Unset at end of input.

        returns
        - Outcome.CONSUMED for value-taking kinds on success.
        - Outcome.SKIPPED for BOOL and CHAR on success.
        - Outcome.FAILED when the text cannot be converted; error holds why.
        """
        if not isinstance(raw, str | UnsetType):
            raise TypeError("convert() argument must be a string")
        try:
            self._value = self._kind.convert(raw, self._value)
        except ValueError as error:
            self._error = str(error)
            return Outcome.FAILED
        self._error = ""
        self._set = True
        return Outcome.CONSUMED if self._kind.consuming else Outcome.SKIPPED

    def reset(self):
        """
        forget the parse state (set/error), keep the value.
        """
        self._set = False
        self._error = ""

    def __repr__(self):
        return "%s(kind=%r, value=%r, required=%r, set=%r)" % (
            type(self).__name__, self._kind.value, self._value, self._required, self._set
        )

    def __rich_repr__(self):
        yield "kind", self._kind.value
        yield "value", self._value
        yield "descr", self._descr, ""
        yield "required", self._required, False
        yield "set", self._set
        yield "error", self._error, ""


class Handle:
    """
    typed read/write view over a declared slot.

    the handle is what declaration returns: after parsing, handle.value holds
    the converted value (or the default). assigning handle.value validates the
    new value against the slot's kind.

    attributes
    - kind, names (bound tokens, long first), and the slot metadata
      (descr, required, set, error) forwarded read-only.
    """
    __slots__ = ("_slot", "_kind", "_names")

    kind = mirror("kind")
    names = mirror("names")

    def __init__(self, slot, kind=Unset, names=()):
        if not isinstance(slot, Slot):
            raise TypeError("Handle 'slot' must be a slot")
        self._slot = slot
        self._kind = coalesce(kind, slot.kind)
        self._names = tuple(names)
        # fail loudly on creation instead of on first read
        slot.get(self._kind)

    @property
    def value(self):
        return self._slot.get(self._kind)

    @value.setter
    def value(self, value):
        self._slot.get(self._kind)
        self._slot.put(value)

    @property
    def slot(self):
        return self._slot

    @property
    def descr(self):
        return self._slot.descr

    @property
    def required(self):
        return self._slot.required

    @property
    def set(self):
        return self._slot.set

    @property
    def error(self):
        return self._slot.error

    def __repr__(self):
        return "%s(%s, kind=%r, value=%r)" % (
            type(self).__name__, " | ".join(self._names) or "?", self._kind.value, self.value
        )

    def __rich_repr__(self):
        yield "names", self._names
        yield "kind", self._kind.value
        yield "value", self.value


__all__ = (
    "Outcome",
    "Slot",
    "Handle",
)
