"""
getopts help formatting.

Layout (both renderers)
- the header on its own line;
- per option: the short-name column padded to the widest short column + 1,
  the long-name column padded to the widest long column + 1, then the first
  description line;
- further description lines are indented to the description column;
- a blank line separates consecutive option blocks.

Widths are terminal cells (rich.cells.cell_len), so wide characters in names
or metavars keep the columns aligned.

Renderers
- format_help(header, options) → str (plain text, stable for tests and pipes).
- render_help(header, options, colorful=True) → rich Text with palette styles.
  Palette keys: group-label, option-name, metavar, argument-description.
  Define a mapping named __styles__ in __main__ to override any entry.
"""
from collections import defaultdict

from rich.cells import cell_len
from rich.text import Text

from .options import decorations


def _lines(descr):
    # one entry per "\n"-terminated line; a trailing newline adds no empty line
    lines = descr.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def format_help(header, options, /):
    """
    Render the plain-text help block for the given options, in order.
    """
    if not isinstance(header, str):
        raise TypeError("format_help() first argument must be a string")

    helps = [option.render_help() for option in options]
    shorts = max((cell_len(help.shorts) for help in helps), default=0) + 1
    longs = max((cell_len(help.longs) for help in helps), default=0) + 1

    blocks = []
    for help in helps:
        block = help.shorts + " " * (shorts - cell_len(help.shorts))
        block += help.longs + " " * (longs - cell_len(help.longs))
        for index, line in enumerate(_lines(help.descr)):
            if index:
                block += "\n" + " " * (shorts + longs)
            block += line
        blocks.append(block)

    return header + "\n" + "\n\n".join(blocks)


def render_help(header, options, /, *, colorful=True):
    """
    Render the help block as a rich Text, with the same layout as format_help().
    """
    if not isinstance(header, str):
        raise TypeError("render_help() first argument must be a string")

    styles = defaultdict(str, {
        "group-label": "bold #FFFFFF",  # Pure white header
        "option-name": "bold #00E6FF",  # CYAN for option names
        "metavar": "bold #FFD600",  # AMBER for parameters
        "argument-description": "#9CA3AF",  # Muted gray
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def column(prefix, names, suffix):
        return Text(",").join(
            Text.assemble((prefix + name, styler("option-name")), (suffix, styler("metavar")))
            for name in names
        )

    columns = []
    for option in options:
        short, long = decorations(option.arity, option.metavar)
        columns.append((column("-", option.shorts, short), column("--", option.longs, long), option.descr))

    shorts = max((shorts.cell_len for shorts, _, _ in columns), default=0) + 1
    longs = max((longs.cell_len for _, longs, _ in columns), default=0) + 1

    output = Text(header, styler("group-label"))
    output.append("\n")
    for index, (short, long, descr) in enumerate(columns):
        if index:
            output.append("\n\n")
        output.append(short).append(" " * (shorts - short.cell_len))
        output.append(long).append(" " * (longs - long.cell_len))
        for number, line in enumerate(_lines(descr)):
            if number:
                output.append("\n" + " " * (shorts + longs))
            output.append(line, styler("argument-description"))
    return output


__all__ = (
    "format_help",
    "render_help",
)
