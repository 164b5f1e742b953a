"""
Pennant flag registry: declare flags, then parse argv against them.

What this module provides
- Flag: one recognized option (short alias, long name, description, kind,
  binding) plus its match counter.
- Flags: the ordered, append-only registry owned by the calling program. It is
  also the parser instance: parse(), parse_from(), format_usage(), print_usage().

Registration
- Flags.register(kind, short, long, binding, descr) is the generic entry point;
  add_string/add_bool/add_int/add_float and their *_callback twins are the
  everyday spelling. Callback helpers double as decorators when the callback
  is omitted:

    flags = Flags()
    verbose = flags.add_bool("v", "verbose", descr="repeat for more output")
    count = Slot(0)
    flags.add_int("c", "count", count, descr="enter a number")

    @flags.add_string_callback("f", "file", descr="process a file")
    def on_file(filename):
        ...

    result = flags.parse()
    result.check()  # raises (or prints and exits in shell mode) on failure
    print(verbose.count, count.value, result.positionals)

Invariants
- long names are non-empty and unique; short names are single characters and
  unique when present.
- registration order is preserved; it drives usage output order.
- a flag's names, kind and binding never change after registration; only
  count moves, and only while parsing.
"""
import copy
import os.path
import re
import sys

from .faults import *
from .kinds import Kind, Slot
from .scanner import Scanner
from .usage import format_usage, print_usage
from .utils import *

# long names are matched literally after "--" and split on the first "="
LONG_NAME_REGEX = r"[^\s=-][^\s=]*"


class Flag:
    """
    A single recognized option.

    Properties
    - short: str | None, the one-character alias used as -x.
    - long: str, the name used as --long.
    - descr: str | None, help text shown by the usage formatter.
    - kind: Kind, how values are coerced and delivered.
    - binding: Slot | Callable | None, where values go (None only counts).
    - count: int, matches during the current parse.

    Calling a flag triggers it once: the counter moves, the raw token is
    coerced and written to the slot or handed to the callback.
    """

    __introspectable__ = ("short", "long", "descr", "kind", "binding")

    short = mirror("short")
    long = mirror("long")
    descr = mirror("descr")
    kind = mirror("kind")
    binding = mirror("binding")

    def __init__(self, kind, short, long, binding, descr):
        self._kind = kind
        self._short = short
        self._long = long
        self._binding = binding
        self._descr = descr
        self.count = 0

    def __call__(self, value=None, /):
        """
        Trigger the flag with a raw token (None when no value was given).

        Returns
        - True when the value was delivered (or there is no binding).
        - False when a numeric token could not be read; the slot keeps its
          previous value and the callback is not invoked.

        Exceptions raised by a callback propagate unchanged.
        """
        self.count += 1
        try:
            object = self._kind.coerce(value)
        except ValueError:
            return False
        if self._binding is None:
            return True
        if self._kind.callback:
            self._binding(object)
        else:
            self._binding.value = object
        return True

    def __repr__(self):
        return "flag(%s, count=%d)" % (
            ", ".join("%s=%r" % (name, getattr(self, name)) for name in self.__introspectable__),
            self.count
        )


def _sanitize_names(short, long):
    """
    Internal: validate the short/long pair of a flag.

    Returns
    - (short, long) with short normalized to None when absent.

    Raises
    - TypeError: names that are not strings.
    - ValueError: malformed names.
    """
    short = coalesce(short)
    if short is not None:
        if not isinstance(short, str):
            raise TypeError("flag 'short' must be a single character string")
        if len(short) != 1 or short == "-" or short.isspace():
            raise ValueError("flag 'short' must be a single character other than '-' (got %r)" % short)

    if not isinstance(long, str):
        raise TypeError("flag 'long' must be a string")
    if not re.fullmatch(LONG_NAME_REGEX, long):
        raise ValueError(
            "flag 'long' must be non-empty, without blanks or '=', and not start with '-' (got %r)" % long
        )
    return short, long


def _sanitize_binding(kind, binding):
    if binding is None:
        return binding
    if kind.callback:
        if not callable(binding):
            raise TypeError("%s flag binding must be callable" % kind.value)
    elif not isinstance(binding, Slot):
        raise TypeError("%s flag binding must be a Slot" % kind.value)
    return binding


def _sanitize_descr(descr):
    if not isinstance(descr, str | Unset):
        raise TypeError("flag 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError("flag 'descr' cannot be empty")
    return coalesce(descr)


class Flags:
    """
    Ordered registry of flags and the parser that runs over it.

    Runtime options (keyword-only)
    - shell: render faults with rich and exit(1) instead of raising.
    - colorful: style usage and fault output (palette overridable via
      __styles__ in __main__).
    - fancy: wrap rendered faults and usage in a rich Panel.

    Not safe for concurrent parses; use one instance per parse stream.
    """

    shell = mirror("shell")
    colorful = mirror("colorful")
    fancy = mirror("fancy")

    def __init__(self, *, shell=False, colorful=True, fancy=False):
        self._flags = []
        self._longs = {}
        self._shorts = {}
        self._program = Unset
        self._failed = False
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)

    @property
    def program(self):
        """
        Program name from the last parse (argument 0), or the running script's name.
        """
        return coalesce(self._program, os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "")

    @property
    def failed(self):
        """
        True when the last parse stopped on an error.
        """
        return self._failed

    @property
    def flags(self):
        return tuple(self._flags)

    def __iter__(self):
        return iter(tuple(self._flags))

    def __len__(self):
        return len(self._flags)

    def __contains__(self, long):
        return long in self._longs

    def __repr__(self):
        return "flags(%s)" % ", ".join("--" + flag.long for flag in self._flags)

    # ============
    # Registration
    # ============
    def register(self, kind, short, long, binding=None, descr=Unset):
        """
        Append a new flag and return it.

        Parameters
        - kind: Kind
        - short: str | None, one character (None for no short alias).
        - long: str, the name after "--".
        - binding: Slot (direct kinds), callable (callback kinds) or None.
        - descr: str, help text.

        Raises
        - DuplicateLongNameError / DuplicateShortNameError: name already taken.
          The registry is left unchanged.
        - TypeError / ValueError: malformed arguments.
        """
        if not isinstance(kind, Kind):
            raise TypeError("register() 'kind' must be a Kind")
        short, long = _sanitize_names(short, long)
        binding = _sanitize_binding(kind, binding)
        descr = _sanitize_descr(descr)

        if long in self._longs:
            raise DuplicateLongNameError(
                "option '--%s' is already registered" % long,
                title="duplicate long name",
                code=FaultCode.DUPLICATE_LONG_NAME,
                hint="pick another long name; the first registration stays in place",
                flag=self._longs[long],
                input="--" + long,
            )
        if short is not None and short in self._shorts:
            raise DuplicateShortNameError(
                "option '-%s' is already registered (by '--%s')" % (short, self._shorts[short].long),
                title="duplicate short name",
                code=FaultCode.DUPLICATE_SHORT_NAME,
                hint="pick another short name or pass None for no short alias",
                flag=self._shorts[short],
                input="-" + short,
            )

        flag = Flag(kind, short, long, binding, descr)
        self._flags.append(flag)
        self._longs[long] = flag
        if short is not None:
            self._shorts[short] = flag
        return flag

    def add_string(self, short, long, binding=None, descr=Unset):
        return self.register(Kind.STRING, short, long, binding, descr)

    def add_bool(self, short, long, binding=None, descr=Unset):
        return self.register(Kind.BOOL, short, long, binding, descr)

    def add_int(self, short, long, binding=None, descr=Unset):
        return self.register(Kind.INT, short, long, binding, descr)

    def add_float(self, short, long, binding=None, descr=Unset):
        return self.register(Kind.FLOAT, short, long, binding, descr)

    def _register_callback(self, kind, short, long, callback, descr):
        """
        Register a callback flag now, or return a decorator that will.

        The decorator form returns the Flag, so the decorated name refers to
        the handle (useful to read count after parsing).
        """
        if callback is not Unset:
            return self.register(kind, short, long, callback, descr)

        @rename(kind.value.replace("-", "_"))
        def wrapper(callback, /):
            if not callable(callback):
                raise TypeError("@%s() must be applied to a callable" % wrapper.__name__)
            return self.register(kind, short, long, callback, descr)

        return wrapper

    def add_string_callback(self, short, long, callback=Unset, descr=Unset):
        return self._register_callback(Kind.STRING_CALLBACK, short, long, callback, descr)

    def add_bool_callback(self, short, long, callback=Unset, descr=Unset):
        return self._register_callback(Kind.BOOL_CALLBACK, short, long, callback, descr)

    def add_int_callback(self, short, long, callback=Unset, descr=Unset):
        return self._register_callback(Kind.INT_CALLBACK, short, long, callback, descr)

    def add_float_callback(self, short, long, callback=Unset, descr=Unset):
        return self._register_callback(Kind.FLOAT_CALLBACK, short, long, callback, descr)

    # ======
    # Lookup
    # ======
    def find_by_long(self, name, /):
        """
        Exact long-name lookup (no prefix matching); None when unknown.
        """
        return self._longs.get(name)

    def find_by_short(self, char, /):
        return self._shorts.get(char)

    # =======
    # Parsing
    # =======
    def parse(self, argv=Unset, /):
        """
        Parse an argv-like list whose first item is the program name.

        Defaults to sys.argv. Returns a ParseResult; unrecognized flags and
        missing values are reported in result.error rather than raised.
        """
        argv = list(coalesce(argv, sys.argv))
        if not argv:
            raise ValueError("parse() argument must contain at least the program name")
        return self.parse_from(argv[0], argv[1:])

    def parse_from(self, program, arguments, /):
        """
        Parse the arguments that follow the program name.
        """
        if not isinstance(program, str):
            raise TypeError("parse_from() program must be a string")
        self._program = program
        result = Scanner(self).scan(program, arguments)
        self._failed = not result
        return result

    # ======
    # Faults
    # ======
    def contextualize(self, fault, /, **options):
        """
        Return a copy of fault carrying this registry's runtime options.
        """
        return copy.replace(
            fault,
            **options,
            tool=self,
            shell=self.shell,
            fancy=self.fancy,
            colorful=self.colorful
        )

    def trigger(self, fault, /, **options):
        trigger(self.contextualize(fault, **options))

    # =====
    # Usage
    # =====
    def format_usage(self, usage="", header="", footer="", *, program=Unset):
        """
        Plain-text help block for this registry (see pennant.usage.format_usage).
        """
        return format_usage(self, usage, header, footer, program=program)

    def print_usage(self, usage="", header="", footer="", *, program=Unset, file=Unset):
        """
        Render the help block through rich (see pennant.usage.print_usage).
        """
        return print_usage(self, usage, header, footer, program=program, file=file)


__all__ = (
    "Flag",
    "Flags",
)
