r"""
Pennant argument scanner: one forward pass from raw tokens to side effects.

Token classification (left to right, no backtracking)
- after a bare "--": every token is positional (passthrough mode, never left).
- "abc": positional.
- "--": enters passthrough mode; emits nothing.
- "--key=value": long flag with an inline value (everything after the first '=',
  even when it looks like another flag).
- "--key": long flag; value kinds take the next token when it does not start
  with '-', boolean kinds never take it.
- "-abc": cluster of short flags; only the last one may take the next token,
  and only when it is a value kind. A bare "-" is an empty cluster:
  it triggers nothing and adds nothing.

Faults
- UnrecognizedFlagError: unknown long key or short character.
- MissingValueError: a value kind without an eligible value.
  Both stop the scan at once; flags already triggered keep their effects.
- InvalidNumberWarning: unreadable int/float value; the slot is left alone
  and the scan goes on.

The scanner never raises these faults itself: errors land in
ParseResult.error and the caller decides (result.check() raises them, or
prints them and exits in shell mode).
"""
import difflib
import shlex
from collections import deque

from .faults import *
from .kinds import Kind
from .utils import *

PASSTHROUGH_TOKEN = "--"
INLINE_VALUE_SEPARATOR = "="


def _ordinal(number):
    """
    english ordinal for 1-based token positions (1st, 2nd, 3rd, 11th, ...).
    """
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return "%d%s" % (number, suffix)


class ParseResult:
    """
    Outcome of one parse.

    Properties
    - program: argument 0.
    - positionals: tokens that were neither flags nor flag values, in order.
    - error: the FlagException that stopped the scan, or None.
    - warnings: FlagWarnings emitted along the way.

    A result is truthy when the parse succeeded.
    """

    program = mirror("program")
    positionals = mirror("positionals")
    error = mirror("error")
    warnings = mirror("warnings")

    def __init__(self, program):
        self._program = program
        self._positionals = []
        self._error = None
        self._warnings = []

    def __bool__(self):
        return self._error is None

    def __repr__(self):
        return "parse-result(program=%r, positionals=%r, error=%r)" % (
            self._program, self._positionals, self._error
        )

    def check(self):
        """
        Surface the stored error, if any, and return the positionals.

        Outside shell mode the error is raised; in shell mode it is printed to
        stderr and the process exits with status 1.
        """
        if self._error is not None:
            trigger(self._error)
        return self.positionals


class Scanner:
    """
    Walks a token list against a Flags registry.

    A scanner is single-use per scan() call; Flags.parse() builds a fresh one
    every time.
    """

    def __init__(self, flags):
        self._flags = flags
        self._tokens = deque()
        self._index = 0
        self._result = None

    def scan(self, program, arguments):
        """
        Classify every token, trigger flags, and collect positionals.

        Flag counters are reset first, so they describe this scan only.
        """
        for flag in self._flags:
            flag.count = 0

        self._result = result = ParseResult(program)
        self._tokens = deque(arguments)
        self._index = 1

        passthrough = False
        while self._tokens:
            token = self._tokens.popleft()

            if passthrough or not token.startswith("-"):
                result._positionals.append(token)
            elif token == PASSTHROUGH_TOKEN:
                passthrough = True
            elif token.startswith("--"):
                result._error = self._scan_long(token)
            else:
                result._error = self._scan_short(token)

            if result._error is not None:
                break
            self._index += 1

        return result

    def _peekable(self):
        # a following token is an eligible value only when it does not look like a flag
        return bool(self._tokens) and not self._tokens[0].startswith("-")

    def _consume(self):
        self._index += 1
        return self._tokens.popleft()

    def _scan_long(self, token):
        """
        handle "--key" and "--key=value"; returns a fault or None.
        """
        key, separator, value = token[2:].partition(INLINE_VALUE_SEPARATOR)
        input = "--" + key

        if (flag := self._flags.find_by_long(key)) is None:
            return self._unrecognized(input, token)

        if separator:
            self._dispatch(flag, input, value)
        elif not flag.kind.requires_value:
            self._dispatch(flag, input, None)
        elif self._peekable():
            self._dispatch(flag, input, self._consume())
        else:
            return self._missing(flag, input, "%s=<value>" % input)
        return None

    def _scan_short(self, token):
        """
        handle a "-abc" cluster; returns a fault or None.
        """
        cluster = token[1:]
        last = len(cluster) - 1

        for position, char in enumerate(cluster):
            input = "-" + char

            if (flag := self._flags.find_by_short(char)) is None:
                return self._unrecognized(input, token)

            if not flag.kind.requires_value:
                self._dispatch(flag, input, None)
            elif position == last and self._peekable():
                self._dispatch(flag, input, self._consume())
            else:
                return self._missing(flag, input, "%s <value>" % input)
        return None

    def _dispatch(self, flag, input, value):
        """
        trigger flag with value; an unreadable number becomes an InvalidNumberWarning.

        The warning is recorded in ParseResult.warnings and then surfaced. If
        the warnings filter escalates it to an exception (-W error), it stays
        recorded and the scan goes on; a bad number never fails a parse.
        """
        if flag(value) or not flag.kind.numeric:
            return
        kind = "integer" if flag.kind.base is Kind.INT else "floating-point"
        warning = self._flags.contextualize(InvalidNumberWarning(
            "%s: invalid %s value %r for option '%s'" % (self._result.program, kind, value, input),
            title="invalid number",
            code=FaultCode.INVALID_NUMBER,
            hint="the previous value of '%s' was kept" % input,
            flag=flag,
            input=input,
            value=value,
            index=self._index,
        ))
        self._result._warnings.append(warning)
        try:
            trigger(warning)
        except InvalidNumberWarning:
            # already in result.warnings
            pass

    def _unrecognized(self, input, token):
        longs = ["--" + flag.long for flag in self._flags]
        suggestions = difflib.get_close_matches(input, longs, 3)
        if suggestions:
            hint = "did you mean %r? (%s position, token %r)" % (suggestions[0], _ordinal(self._index), token)
        else:
            hint = "no option is registered under %r (%s position)" % (input, _ordinal(self._index))
        return self._flags.contextualize(UnrecognizedFlagError(
            "%s: unrecognized option '%s'" % (self._result.program, input),
            title="unrecognized option",
            code=FaultCode.UNRECOGNIZED_FLAG,
            hint=hint,
            input=input,
            token=token,
            index=self._index,
            suggestions=suggestions,
        ))

    def _missing(self, flag, input, example):
        return self._flags.contextualize(MissingValueError(
            "%s: option '%s' requires a value" % (self._result.program, input),
            title="missing option value",
            code=FaultCode.MISSING_VALUE,
            hint="provide a value (for example: %s)" % example,
            flag=flag,
            input=input,
            index=self._index,
        ))


def invoke(flags, prompt, /, *, program=Unset):
    """
    Parse a shell-like string against flags (handy in tests and REPLs).

        >>> invoke(flags, "-v --count=3 input.txt")

    The prompt is split with shlex; program defaults to flags.program.
    """
    if not isinstance(prompt, str):
        raise TypeError("invoke() prompt must be a string")
    return flags.parse_from(coalesce(program, flags.program), shlex.split(prompt))


__all__ = (
    "ParseResult",
    "Scanner",
    "invoke",
)
