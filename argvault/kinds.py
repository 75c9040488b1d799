r"""
Argvault kinds: the closed set of value types a slot can hold.

Overview
- Kind is an enumeration (a tagged union in disguise): every slot is tagged with
  exactly one Kind and the Kind carries everything that is type-specific:
  • type: the Python type of the payload (str, int, float, bool).
  • bounds: the inclusive (low, high) range of the integer kinds.
  • consuming: whether the kind needs the token following its name.
  • default: the value a slot starts with when no default is declared.
  • check(value): validate a programmatic value (defaults, handle writes).
  • convert(raw, current): turn raw command-line text into a value.

Kinds
- STRING                                  any text, stored verbatim
- INT / LONG / LONGLONG                   signed 32/64/64-bit integers
- UINT / ULONG / ULONGLONG                unsigned 32/64/64-bit integers
- FLOAT / DOUBLE                          binary32 / binary64 floating point
- BOOL                                    presence toggles the stored value
- CHAR                                    a single character

Conversion rules
- Integers use a strict whole-string, base-10 match: optional sign (no '-' for the
  unsigned kinds), ASCII digits only. No whitespace, no underscores, no prefixes.
- Floats accept decimal and scientific literals plus inf/infinity/nan (any case,
  optional sign). FLOAT values are rounded to binary32.
- Literals that are well formed but do not fit the kind are out of range.
- Conversion failures raise ValueError whose message is the slot error text, e.g.
    "12x" is not an integer.
    "-3" is not a positive integer.
    "pi" is not a number.
"""
import math
import re
import struct
from enum import Enum

from .faults import TypeMismatchError
from .utils import Unset

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"\+?[0-9]+")
_NUMBER = re.compile(r"[+-]?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)", re.IGNORECASE)

MISSING_VALUE = "missing value for argument."


class Kind(Enum):
    """
    payload kind of a slot.

    the value is the lowercase label used in messages, help and handle reprs.
    """
    STRING    = "string"
    INT       = "int"
    LONG      = "long"
    LONGLONG  = "longlong"
    UINT      = "uint"
    ULONG     = "ulong"
    ULONGLONG = "ulonglong"
    FLOAT     = "float"
    DOUBLE    = "double"
    BOOL      = "bool"
    CHAR      = "char"

    @property
    def type(self):
        match self:
            case Kind.STRING | Kind.CHAR:
                return str
            case Kind.FLOAT | Kind.DOUBLE:
                return float
            case Kind.BOOL:
                return bool
            case _:
                return int

    @property
    def bounds(self):
        """
        inclusive (low, high) range for integer kinds, None otherwise.
        """
        match self:
            case Kind.INT:
                return -2 ** 31, 2 ** 31 - 1
            case Kind.LONG | Kind.LONGLONG:
                return -2 ** 63, 2 ** 63 - 1
            case Kind.UINT:
                return 0, 2 ** 32 - 1
            case Kind.ULONG | Kind.ULONGLONG:
                return 0, 2 ** 64 - 1
            case _:
                return None

    @property
    def signed(self):
        return self in (Kind.INT, Kind.LONG, Kind.LONGLONG)

    @property
    def consuming(self):
        """
        True when the kind takes the following token as its value.
        """
        return self not in (Kind.BOOL, Kind.CHAR)

    @property
    def default(self):
        match self:
            case Kind.STRING:
                return ""
            case Kind.CHAR:
                return "\0"
            case Kind.BOOL:
                return False
            case Kind.FLOAT | Kind.DOUBLE:
                return 0.0
            case _:
                return 0

    def check(self, value, /):
        """
        validate a programmatic value and return it normalized for this kind.

        raises
        - TypeMismatchError when the Python type does not belong to the kind.
        - ValueError when the value has the right type but cannot be stored
          (integer out of range, FLOAT overflow, CHAR of the wrong length).
        """
        match self:
            case Kind.STRING:
                if not isinstance(value, str):
                    raise self._mismatch(value)
                return value
            case Kind.CHAR:
                if not isinstance(value, str):
                    raise self._mismatch(value)
                if len(value) != 1:
                    raise ValueError(f"kind {self.value!r} value must be a single character, got {value!r}")
                return value
            case Kind.BOOL:
                if not isinstance(value, bool):
                    raise self._mismatch(value)
                return value
            case Kind.FLOAT | Kind.DOUBLE:
                if isinstance(value, bool) or not isinstance(value, int | float):
                    raise self._mismatch(value)
                try:
                    return _binary32(float(value)) if self is Kind.FLOAT else float(value)
                except OverflowError:
                    raise ValueError(f"kind {self.value!r} value {value!r} is out of range") from None
            case _:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise self._mismatch(value)
                low, high = self.bounds
                if not low <= value <= high:
                    raise ValueError(f"kind {self.value!r} value {value!r} is out of range [{low}, {high}]")
                return value

    def convert(self, raw, current=Unset, /):
        """
        convert raw command-line text into a value of this kind.

        parameters
        - raw: str | Unset
          the token following the argument name, Unset when the name was the
          last token.
        - current: the slot's current value (BOOL toggles it).

        raises
        - ValueError with the slot error text on any failure.
        """
        if self is Kind.BOOL:
            return not current

        if raw is Unset:
            raise ValueError(MISSING_VALUE)

        match self:
            case Kind.STRING:
                return raw
            case Kind.CHAR:
                # an empty token still yields a character, the NUL one
                return raw[:1] or "\0"
            case Kind.FLOAT | Kind.DOUBLE:
                if not _NUMBER.fullmatch(raw):
                    raise ValueError('"%s" is not a number.' % raw)
                value = float(raw)
                if math.isinf(value) and "inf" not in raw.lower():
                    raise ValueError('"%s" is out of range.' % raw)
                if self is Kind.FLOAT:
                    try:
                        value = _binary32(value)
                    except OverflowError:
                        raise ValueError('"%s" is out of range.' % raw) from None
                return value
            case _:
                if not (_SIGNED if self.signed else _UNSIGNED).fullmatch(raw):
                    raise ValueError('"%s" is not %s.' % (raw, "an integer" if self.signed else "a positive integer"))
                # no kind holds more than 20 digits, longer literals never reach int()
                if len(raw.lstrip("+-").lstrip("0")) > 20:
                    raise ValueError('"%s" is out of range.' % raw)
                value = int(raw)
                low, high = self.bounds
                if not low <= value <= high:
                    raise ValueError('"%s" is out of range.' % raw)
                return value

    def _mismatch(self, value):
        return TypeMismatchError(
            f"kind {self.value!r} expects a {self.type.__name__} value, got {type(value).__name__}",
            expected=self,
            received=type(value),
        )


def _binary32(value):
    return struct.unpack("f", struct.pack("f", value))[0]


__all__ = (
    "Kind",
)
