"""
Pennant usage formatter.

Layout
    Usage: <program> <usage>
    <header>

      -d, --debug               enable debug mode
          --help                display this help and exit
      -q, --really-long-argument-name
                                testing really long argument names

    <footer>

- flags are listed in registration order.
- the long name is padded to DESCRIPTION_WIDTH characters; a longer name
  pushes the description onto the next line, aligned on the same column.

format_usage() returns that block as plain text; print_usage() renders the same
rows through a rich Console, styled when the registry is colorful.

Palette keys
- usage-label, program-name, usage-section, header-section, footer-section
- short-name, long-name, flag-description
- panel-title (fancy mode)

Define a mapping named __styles__ in __main__ to override any palette entry.
"""
from collections import defaultdict

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .utils import *

DESCRIPTION_WIDTH = 20
ROW_INDENT = "  "
# "  " + "-x, " + "--" + DESCRIPTION_WIDTH
DESCRIPTION_COLUMN = len(ROW_INDENT) + 4 + 2 + DESCRIPTION_WIDTH


def _render(flags, usage, header, footer, program, *, colorful):
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "usage-section": "bold #36C5F0",  # SKY-BLUE
        "header-section": "italic #A3A3A3",  # Neutral gray
        "footer-section": "#737373",  # Dim footer gray

        "short-name": "bold #22C55E",  # GREEN for aliases
        "long-name": "bold #00E6FF",  # CYAN for names
        "flag-description": "#9CA3AF",  # Muted gray

        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    text = Text()
    text.append("Usage", styler("usage-label")).append(": ")
    text.append(program, styler("program-name"))
    text.append(" ").append(usage, styler("usage-section")).append("\n")
    text.append(header, styler("header-section")).append("\n\n")

    for flag in flags:
        text.append(ROW_INDENT)
        if flag.short is not None:
            text.append("-" + flag.short, styler("short-name")).append(", ")
        else:
            text.append("    ")
        text.append("--" + flag.long, styler("long-name"))
        if len(flag.long) > DESCRIPTION_WIDTH:
            text.append("\n" + " " * DESCRIPTION_COLUMN)
        else:
            text.append(" " * (DESCRIPTION_WIDTH - len(flag.long)))
        text.append(coalesce(flag.descr) or "", styler("flag-description")).append("\n")

    text.append("\n").append(footer, styler("footer-section")).append("\n")
    return text, styler


def format_usage(flags, usage="", header="", footer="", *, program=Unset):
    """
    Build the help block as plain text.

    Parameters
    - flags: Flags registry (iterated in registration order).
    - usage: text after the program name on the first line, e.g. "[OPTION]... [ARG]...".
    - header: paragraph printed under the usage line.
    - footer: paragraph printed after the flag table.
    - program: defaults to flags.program (argument 0 of the last parse).

    Returns
    - str, ending with a newline. No side effects.
    """
    text, _ = _render(flags, usage, header, footer, coalesce(program, flags.program), colorful=False)
    return text.plain


def print_usage(flags, usage="", header="", footer="", *, program=Unset, file=Unset):
    """
    Render the help block through rich.

    Output goes to file when given, otherwise to stderr after a failed parse
    and stdout otherwise. Styling follows flags.colorful; flags.fancy wraps the
    block in a Panel titled with the program name.
    """
    program = coalesce(program, flags.program)
    if file is Unset:
        console = Console(stderr=flags.failed)
    else:
        console = Console(file=file)

    text, styler = _render(flags, usage, header, footer, program, colorful=flags.colorful)

    if flags.fancy:
        text.rstrip()
        console.print(Panel(text, title=Text(program, styler("panel-title")), title_align="left"))
        return
    console.print(text, end="", soft_wrap=True, highlight=False)


__all__ = (
    "format_usage",
    "print_usage",
)
