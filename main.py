import sys

from rich.pretty import pprint

from pennant import Flags, Slot
from pennant.faults import console
from pennant.utils import Unset, coalesce

flags = Flags(shell=True)

show_help = Slot(False)
flags.add_bool(None, "help", show_help, "display this help and exit")

debug = Slot(False)
flags.add_bool("d", "debug", debug, "enable debug mode")

count = Slot(0)
flags.add_int("c", "count", count, "enter a number")

amount = Slot(0.0)
flags.add_float("a", "amount", amount, "enter a float")

flags.add_bool("q", "really-long-argument-name", None, "testing really long argument names")


@flags.add_string_callback("f", "file", descr="process a file")
def parse_file(filename):
    print("parsing %s" % filename)


@flags.add_string_callback("n", "name", descr="say hello to name")
def greet(name):
    print("Hello %s" % name)


verbose = flags.add_bool("v", "verbose", None, "enables verbose output, repeat up to 4 times for more verbosity")

USAGE = (
    "[OPTION]... [ARG]...",
    "Tests the pennant library.",
    "Additional information about this library can be found in its README."
)


def main(argv=Unset):
    argv = list(coalesce(argv, sys.argv))
    result = flags.parse(argv)
    if not result:
        # error first, then the usage text
        console.print(result.error)
        flags.print_usage(*USAGE)
        return 1
    if show_help.value or len(argv) == 1:
        flags.print_usage(*USAGE)
        return 0 if show_help.value else 1

    pprint({
        "help": show_help.value,
        "debug": debug.value,
        "count": count.value,
        "amount": amount.value,
        "verbosity": verbose.count,
        "positionals": result.positionals,
    })
    return 0


if __name__ == '__main__':
    sys.exit(main())
