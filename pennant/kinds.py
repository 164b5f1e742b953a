r"""
Pennant flag kinds, storage slots and value coercion.

Overview
- Kind: the eight flag kinds, {STRING, BOOL, INT, FLOAT} × {direct, callback}.
  A flag has exactly one kind; it decides how a raw token is coerced and where
  the coerced value goes (a Slot or a callback).
- Slot[_T]: a caller-owned, mutable storage cell. Direct-binding flags write
  into slot.value; whatever the caller put there first is the default.
- Coercion helpers (parse_bool, parse_int, parse_float) shared by both bindings.

Coercion rules
- bool: no value → True; "false", "FALSE" or "0" → False; anything else → True.
- int: the leading base-10 integer of the string, strtol-style (leading blanks,
  optional sign, digits; trailing junk ignored). Must fit a signed 64-bit integer.
- float: the leading decimal floating literal ("1.5", "-2e3", ".5", "inf", "nan").
- string: verbatim, including the empty string.

Numbers that cannot be read raise ValueError; the caller decides what to do
(the scanner keeps the previous value and emits an InvalidNumberWarning).

Quick example:
    >>> Kind.INT_CALLBACK.base is Kind.INT
    True
    >>> parse_int("42px")
    42
    >>> parse_bool("FALSE")
    False
"""
import re
from enum import Enum

INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1

FALSE_STRINGS = frozenset(("false", "FALSE", "0"))

_INTEGER = re.compile(r"[ \t\n\v\f\r]*(?P<number>[+-]?[0-9]+)")
_FLOATING = re.compile(
    r"[ \t\n\v\f\r]*(?P<number>[+-]?(?:(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan))",
    re.IGNORECASE
)


def parse_bool(value, /):
    """
    Coerce an optional token into a boolean (absent means True).
    """
    if value is None:
        return True
    return value not in FALSE_STRINGS


def parse_int(value, /):
    """
    Read the leading base-10 integer of a token.

    Raises
    - ValueError: no leading integer, or it does not fit 64 signed bits.
    """
    if not (match := _INTEGER.match(value)):
        raise ValueError("no leading integer in %r" % value)
    if not INT64_MIN <= (number := int(match["number"])) <= INT64_MAX:
        raise ValueError("integer %r is out of the 64-bit range" % match["number"])
    return number


def parse_float(value, /):
    """
    Read the leading floating-point literal of a token.

    Raises
    - ValueError: no leading number.
    """
    if not (match := _FLOATING.match(value)):
        raise ValueError("no leading number in %r" % value)
    return float(match["number"])


class Kind(Enum):
    """
    The kind of a flag: a value type paired with a binding style.

    Members ending in _CALLBACK deliver the coerced value to a function; the
    others write it into a Slot.
    """

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING_CALLBACK = "string-callback"
    BOOL_CALLBACK = "bool-callback"
    INT_CALLBACK = "int-callback"
    FLOAT_CALLBACK = "float-callback"

    @property
    def base(self):
        """
        The direct kind sharing this kind's value type.
        """
        return Kind(self.value.removesuffix("-callback"))

    @property
    def callback(self):
        return self.value.endswith("-callback")

    @property
    def boolean(self):
        return self.base is Kind.BOOL

    @property
    def numeric(self):
        return self.base in (Kind.INT, Kind.FLOAT)

    @property
    def requires_value(self):
        # booleans trigger fine without a value; every other kind needs one
        return not self.boolean

    def coerce(self, value, /):
        """
        Turn a raw token (or None for an absent value) into this kind's value type.

        Raises
        - ValueError: from parse_int/parse_float when the number is unreadable.
        """
        match self.base:
            case Kind.BOOL:
                return parse_bool(value)
            case Kind.INT:
                return parse_int(value)
            case Kind.FLOAT:
                return parse_float(value)
            case _:
                return value


class Slot[_T]:
    """
    Caller-owned storage for a direct-binding flag.

    The initial value is the default; parsing overwrites it on every match
    (last write wins) and leaves it alone when the flag never shows up.

        >>> count = Slot(0)
        >>> flags.add_int("c", "count", count)
    """

    __slots__ = ("value",)

    def __init__(self, value=None, /):
        self.value = value

    def __repr__(self):
        return "slot(%r)" % (self.value,)


__all__ = (
    # Types
    "Kind",
    "Slot",

    # Coercion
    "parse_bool",
    "parse_int",
    "parse_float",
)
