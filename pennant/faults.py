"""
Pennant faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain so logs and searches stay predictable.
- FlagException / FlagWarning: base types that carry a message plus options and
  know how to render themselves through rich.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).

Taxonomy
- registration (21xxx): DuplicateLongNameError, DuplicateShortNameError.
  Raised straight from Flags.register(); the registry is left untouched.
- parsing (22xxx): UnrecognizedFlagError, MissingValueError.
  Returned in ParseResult.error; parsing stops at the first one.
- warnings (23xxx): InvalidNumberWarning.
  Recoverable; the bound value is preserved and parsing goes on.

Messages
- The first line of every parse fault is the classic getopt-like form, e.g.
  "prog: unrecognized option '--nope'", so str(fault) can be printed as-is.

Integration
- Flags.trigger(fault) merges the runtime options (tool, shell, fancy, colorful).
- In non-shell mode exceptions are raised and warnings go through warnings.warn;
  in shell mode both are rendered via rich on stderr, and exceptions exit(1).
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

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - registration (2110x): DUPLICATE_LONG_NAME, DUPLICATE_SHORT_NAME
    - parsing (2210x): UNRECOGNIZED_FLAG, MISSING_VALUE
    - warnings (2310x): INVALID_NUMBER

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- registration errors (21xxx) ---
    DUPLICATE_LONG_NAME         = 21101
    DUPLICATE_SHORT_NAME        = 21102

    # --- parsing errors (22xxx) ---
    UNRECOGNIZED_FLAG           = 22101
    MISSING_VALUE               = 22102

    # --- warnings (23xxx) ---
    INVALID_NUMBER              = 23101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, title):
    """
    build the rich renderable shared by exceptions and warnings.

    layout
    - plain:  "[ <prog> — <code> | <Title> ]", the message, then " → <hint>".
    - <prog> is __prog__ from __main__, else the program of the registry that
      contextualized the fault; without either the "<prog> — " part is left out.
    - fancy:  same content inside a Panel titled with the header.
    """
    main = __import__("__main__")
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), styles[style])

    prog = getattr(main, "__prog__", Unset)
    if prog is Unset and (tool := fault.options.get("tool")) is not None:
        prog = tool.program

    code = fault.options.get("code")
    header = Text.assemble(
        "[ ",
        Text.assemble(text(prog, "prog-name"), " — ") if prog else "",
        text(code.normalize() if code is not None else "-", "code"),
        " | ",
        text(str(fault.options.get("title", "")).title(), title),
        " ]"
    )
    message = text(fault.message, "message")
    parts = [message]
    if hint := fault.options.get("hint"):
        parts.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fault.options.get("fancy", False):
        return Panel(Group(*parts), title=header, title_align="left")
    return Group(header, *parts)


class FlagException(Exception):
    """
    base of every fatal pennant fault.

    attributes
    - message: the user-facing line (also str(self)).
    - options: read-only mapping with code/title/hint plus context such as
      flag, input, index, tool, shell, fancy, colorful.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return coalesce(self.message, "")

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #FF4DA6",
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, "error-title")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DuplicateLongNameError(FlagException): ...
class DuplicateShortNameError(FlagException): ...
class UnrecognizedFlagError(FlagException): ...
class MissingValueError(FlagException): ...


class FlagWarning(Warning):
    """
    base of every recoverable pennant fault.

    same shape as FlagException; triggering emits a standard warning (so callers
    can filter or record it with the warnings module) instead of raising.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return coalesce(self.message, "")

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #FFC2E0",
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, "warning-title")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidNumberWarning(FlagWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - outside shell mode exceptions are raised and warnings are warned;
      inside it both are printed to stderr (and exceptions exit with status 1).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FlagException",
    "DuplicateLongNameError",
    "DuplicateShortNameError",
    "UnrecognizedFlagError",
    "MissingValueError",
    "FlagWarning",
    "InvalidNumberWarning",
    "FaultCode",
    "trigger",
)
