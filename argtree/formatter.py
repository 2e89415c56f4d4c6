"""
argtree usage and help rendering.

Every renderer is a pure function of a parser node (or argument): nothing is
mutated and nothing is printed. render_* functions build rich Text objects
styled with the palette below; format_* functions return their plain string.
Both can be called at any time after construction, before or after parsing.

Layout (plain form)

    usage: prog {build,test} [-v] [-o OUTPUT] file

    short description of the program

    arguments:
      -v, --verbose        talk more
      -o, --output OUTPUT  write results here (default: out.txt)
      file                 input file

    subcommands:
      build                build the project
      test                 run the test-suite

    epilogue text

Palette keys
- usage-label, program-name, subcommand-set, description-section,
  epilog-section, section-label, option-name, flag-name, positional-name,
  metavar, argument-description, default, children, children-description

Customization
- Define a mapping named __styles__ in __main__ to override palette entries.
- When colorful is False every style is dropped; the text is identical.
"""
from collections import defaultdict

from rich.text import Text

from .utils import *

# Widest names column before help text moves to its own line.
MAX_COLUMN = 24


def _styles():
    return defaultdict(str, {
        # === Head sections ===
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "subcommand-set": "bold #36C5F0",  # SKY-BLUE → softer than cyan
        "description-section": "italic #A3A3A3",  # Neutral gray
        "epilog-section": "#737373",  # Dim footer gray

        # === Sections / arguments ===
        "section-label": "bold #FFFFFF",  # Pure white headers
        "argument-description": "#9CA3AF",  # Muted gray
        "default": "italic #737373",

        # === Names / metavars ===
        "option-name": "bold #00E6FF",  # CYAN for options
        "flag-name": "bold #22C55E",  # GREEN for flags
        "positional-name": "bold #FFD600",
        "metavar": "bold #FFD600",  # AMBER for parameters

        # === Subcommands ===
        "children": "bold #36C5F0",
        "children-description": "#9CA3AF",
    } | getattr(__import__("__main__"), "__styles__", {}))


def _stylist(colorful):
    styles = _styles()

    def text(fragment, style=""):
        # Normalize to Rich Text; in non-colorful mode styles are stripped.
        if not fragment:
            return Text("")
        if not colorful:
            return Text(fragment.plain if isinstance(fragment, Text) else str(fragment))
        if isinstance(fragment, Text):
            return fragment.copy()
        return Text(str(fragment), styles[style])

    return text


def _name_style(argument):
    if argument.positional:
        return "positional-name"
    return "flag-name" if argument.flag else "option-name"


def _placeholders(argument, text):
    return Text(" ").join(text(argument.metavar, "metavar") for _ in range(argument.arity))


def render_argument_usage(argument, *, colorful=False):
    """
    usage fragment of one argument.

    - positional:  'file', '[file]' when optional, 'point point' for arity 2
    - flag:        '-v' or '[-v]'
    - value:       '-o OUTPUT' or '[-o OUTPUT]'
    """
    text = _stylist(colorful)
    if argument.positional:
        fragment = _placeholders(argument, lambda value, style: text(value, "positional-name"))
    else:
        fragment = text(argument.display, _name_style(argument))
        if not argument.flag:
            fragment = Text.assemble(fragment, " ", _placeholders(argument, text))
    if argument.is_required:
        return fragment
    return Text.assemble("[", fragment, "]")


def _argument_names(argument, text):
    if argument.positional:
        return _placeholders(argument, lambda value, style: text(value, "positional-name"))
    names = Text(", ").join(text(name, _name_style(argument)) for name in argument.names)
    if argument.flag:
        return names
    return Text.assemble(names, " ", _placeholders(argument, text))


def _row(left, right, width):
    # "  <left padded to width>  <right>", or right on its own line when left overflows.
    row = Text("  ").append_text(left)
    if not right:
        return row
    if len(left) > width:
        return row.append("\n").append(" " * (width + 4)).append_text(right)
    return row.append(" " * (width - len(left) + 2)).append_text(right)


def render_argument_help(argument, width=0, *, colorful=False):
    """
    one help line for an argument: names, placeholders, help text and the
    declared default (if any), with the names column padded to `width`
    (its own length when 0).
    """
    text = _stylist(colorful)
    description = text(argument.help, "argument-description")
    if argument.has_default:
        suffix = text("(default: %s)" % (argument.default,), "default")
        description = Text.assemble(description, " ", suffix) if description else suffix
    names = _argument_names(argument, text)
    return _row(names, description, width or len(names))


def _column(node):
    text = _stylist(False)
    lefts = [len(_argument_names(argument, text)) for argument in node.arguments]
    lefts += [len(name) for name in node.children]
    return min(max(lefts, default=0), MAX_COLUMN)


def render_usage(node, *, colorful=Unset):
    """
    'usage: <route>' then ' {c1,c2,...}' when the node has subcommands (in name
    order), then every argument's usage fragment in declaration order.
    """
    text = _stylist(coalesce(colorful, node.colorful))
    usage = Text()
    usage.append_text(text("usage", "usage-label")).append(": ")
    usage.append_text(text(node.route, "program-name"))
    if node.children:
        usage.append(" ").append_text(text("{%s}" % ",".join(sorted(node.children)), "subcommand-set"))
    for argument in node.arguments:
        usage.append(" ").append_text(render_argument_usage(argument, colorful=coalesce(colorful, node.colorful)))
    return usage


def render_help(node, *, colorful=Unset):
    """
    full help: usage, description, arguments (declaration order), subcommands
    (name order) and the epilogue, separated by blank lines.
    """
    colorful = coalesce(colorful, node.colorful)
    text = _stylist(colorful)
    width = _column(node)

    sections = [render_usage(node, colorful=colorful)]

    if node.description:
        sections.append(text(node.description, "description-section"))

    if node.arguments:
        section = Text()
        section.append_text(text("arguments", "section-label")).append(":")
        for argument in node.arguments:
            section.append("\n").append_text(render_argument_help(argument, width, colorful=colorful))
        sections.append(section)

    if node.children:
        section = Text()
        section.append_text(text("subcommands", "section-label")).append(":")
        for name in sorted(node.children):
            child = node.children[name]
            section.append("\n").append_text(_row(
                text(name, "children"),
                text(child.description, "children-description"),
                width
            ))
        sections.append(section)

    if node.epilogue:
        sections.append(text(node.epilogue, "epilog-section"))

    return Text("\n\n").join(sections)


def format_usage(node):
    """
    plain usage line of a node.
    """
    return render_usage(node, colorful=False).plain


def format_help(node):
    """
    plain help text of a node.
    """
    return render_help(node, colorful=False).plain


__all__ = (
    "render_argument_usage",
    "render_argument_help",
    "render_usage",
    "render_help",
    "format_usage",
    "format_help",
)
