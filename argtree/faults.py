"""
argtree faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep copy consistent and logs searchable.
- ConstructionError: raised immediately while a parser tree is being built.
  A malformed parser must never be built, so these always propagate.
- ParseError: describes one parse failure. The engine *returns* these as data;
  callers decide whether to raise, print, or recover.
- ParserWarning: soft, non-fatal notices (degraded name display).
- trigger(): central entry point to surface any fault, honouring the runtime
  options (shell/fancy/colorful/prog).

UX goals
- Position-first messages: parse errors say where the offending token was
  (“at third position”) so users can learn by trying.
- Soft but technical language: short titles, one-sentence bodies, one hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
import copy
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across argtree (stable identifiers).

    grouping (by high-level domain)
    - construction (101xx)
      • INVALID_NAME, DUPLICATE_NAME, NO_USABLE_ALIAS, DUPLICATE_SUBCOMMAND,
        FROZEN_PARSER
    - routing (1110x)
      • UNKNOWN_SUBCOMMAND
    - named arguments (1111x)
      • UNKNOWN_ARGUMENT, MISSING_VALUE, DUPLICATE_ARGUMENT, INVALID_VALUE,
        INVALID_CHOICE
    - positionals and requirements (1112x)
      • UNEXPECTED_POSITIONAL, MISSING_REQUIRED
    - input (1113x)
      • MALFORMED_INPUT
    - warnings (12xxx)
      • DEGRADED_NAME

    spacing leaves room for future additions without reshuffling codes.
    """
    # --- construction errors (10xxx) ---
    INVALID_NAME            = 10101
    DUPLICATE_NAME          = 10102
    NO_USABLE_ALIAS         = 10103
    DUPLICATE_SUBCOMMAND    = 10111
    FROZEN_PARSER           = 10121

    # --- routing errors (11xxx) ---
    UNKNOWN_SUBCOMMAND      = 11101

    # --- named argument errors (11xxx) ---
    UNKNOWN_ARGUMENT        = 11111
    MISSING_VALUE           = 11112
    DUPLICATE_ARGUMENT      = 11113
    INVALID_VALUE           = 11114
    INVALID_CHOICE          = 11115

    # --- positional/requirement errors (11xxx) ---
    UNEXPECTED_POSITIONAL   = 11121
    MISSING_REQUIRED        = 11122

    # --- input errors (11xxx) ---
    MALFORMED_INPUT         = 11131

    # --- warnings (12xxx) ---
    DEGRADED_NAME           = 12101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels. when no mapping is
        present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, kind):
    """
    build the rich renderable shared by errors and warnings.

    layout
    - header: "[ prog — code | title ]"
    - body:   the message
    - hint:   " → hint"
    with fancy=True the body and hint are wrapped in a panel titled by the header.
    """
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))
    colorful = fault.options.get("colorful", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    prog = getattr(__import__("__main__"), "__prog__", Unset) or fault.options.get("prog") or "argtree"

    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " — ",
        text(fault.code.normalize(), "code"),
        " | ",
        text(fault.title.title(), f"{kind}-title"),
        " ]"
    )
    message = text(fault.message, f"{kind}-message")
    hint = Text.assemble(text(" → ", "hint-arrow"), text(fault.hint, "hint")) if fault.hint else Text("")

    if fault.options.get("fancy", False):
        return Panel(Group(message, hint), title=header, title_align="left")
    return Group(header, message, hint)


_ERROR_STYLES = {
    # header parts
    "prog-name": "bold #E6E6F0",  # near-white program name
    "code": "bold #00E5FF",  # neon cyan fault code
    "error-title": "bold #FF4DA6",  # friendly pinky title

    # body
    "error-message": "#C8C8D0",  # soft light gray message
    "hint-arrow": "#9CE19C dim",  # gentle green arrow
    "hint": "italic #9CE19C",  # gentle green hint text
}


class ConstructionError(ValueError):
    """
    base type for faults raised while building a parser tree.

    construction faults are fatal to the builder call that caused them; they
    are raised immediately and never collected.
    """
    code = FaultCode.INVALID_NAME
    title = "invalid parser"

    def __init__(self, message, /, **options):
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def hint(self):
        return self.options.get("hint")

    def __rich__(self):
        return _render(self, _ERROR_STYLES, "error")


class InvalidNameError(ConstructionError):
    code = FaultCode.INVALID_NAME
    title = "invalid name"


class DuplicateNameError(ConstructionError):
    code = FaultCode.DUPLICATE_NAME
    title = "duplicate name"


class NoUsableAliasError(ConstructionError):
    code = FaultCode.NO_USABLE_ALIAS
    title = "no usable alias"


class DuplicateSubCommandError(ConstructionError):
    code = FaultCode.DUPLICATE_SUBCOMMAND
    title = "duplicate subcommand"


class FrozenParserError(ConstructionError):
    code = FaultCode.FROZEN_PARSER
    title = "frozen parser"


class ParseError(Exception):
    """
    base type for a single parse failure.

    the engine returns instances of these in place of a parse result; they are
    still exceptions so that run() and trigger() can raise them when the
    caller prefers control flow over data.

    options (read-only mapping, merged through copy.replace)
    - token:    the offending raw token, when there is one.
    - argument: the Argument involved, when there is one.
    - name:     the display name used in the message ("--range", "file").
    - index:    1-based position of the offending token in the raw vector.
    - route:    space-joined names from the root to the failing node.
    - hint:     a single actionable suggestion.
    - shell, fancy, colorful, prog: runtime rendering options.
    """
    code = FaultCode.UNKNOWN_ARGUMENT
    title = "parse error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def token(self):
        return self.options.get("token")

    @property
    def argument(self):
        return self.options.get("argument")

    @property
    def name(self):
        return self.options.get("name")

    @property
    def index(self):
        return self.options.get("index")

    @property
    def route(self):
        return self.options.get("route")

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        return str(self.message)

    def __repr__(self):
        detail = self.token if self.token is not None else self.name
        return f"{type(self).__name__}({detail!r})"

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return (self.message, self.token, self.name, self.index) == (other.message, other.token, other.name, other.index)

    def __hash__(self):
        return hash((type(self), self.message, self.token, self.name, self.index))

    def __rich__(self):
        return _render(self, _ERROR_STYLES, "error")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownArgumentError(ParseError):
    code = FaultCode.UNKNOWN_ARGUMENT
    title = "unknown argument"


class MissingValueError(ParseError):
    code = FaultCode.MISSING_VALUE
    title = "missing value"


class MissingRequiredError(ParseError):
    code = FaultCode.MISSING_REQUIRED
    title = "missing required argument"


class UnknownSubCommandError(ParseError):
    code = FaultCode.UNKNOWN_SUBCOMMAND
    title = "unknown subcommand"


class UnexpectedPositionalError(ParseError):
    code = FaultCode.UNEXPECTED_POSITIONAL
    title = "unexpected positional"


class DuplicateArgumentError(ParseError):
    code = FaultCode.DUPLICATE_ARGUMENT
    title = "duplicated argument"


class InvalidValueError(ParseError):
    code = FaultCode.INVALID_VALUE
    title = "invalid value"


class InvalidChoiceError(ParseError):
    code = FaultCode.INVALID_CHOICE
    title = "invalid choice"


class MalformedInputError(ParseError):
    code = FaultCode.MALFORMED_INPUT
    title = "malformed input"


class ParserWarning(Warning):
    """
    base type for non-fatal notices.

    outside shell mode these are emitted through warnings.warn so hosts can
    filter or escalate them, attributed to the first frame outside argtree;
    in shell mode they are printed to stderr.
    """
    code = FaultCode.DEGRADED_NAME
    title = "parser warning"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, skip_file_prefixes=(os.path.dirname(__file__) + os.sep,))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DegradedNameWarning(ParserWarning):
    code = FaultCode.DEGRADED_NAME
    title = "degraded name display"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(fault, **options)
      before triggering.
    - in shell mode errors are rendered on stderr and the process exits with
      status 1; otherwise they are raised. warnings are printed in shell mode
      and emitted through warnings.warn otherwise.
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
    "FaultCode",
    "ConstructionError",
    "InvalidNameError",
    "DuplicateNameError",
    "NoUsableAliasError",
    "DuplicateSubCommandError",
    "FrozenParserError",
    "ParseError",
    "UnknownArgumentError",
    "MissingValueError",
    "MissingRequiredError",
    "UnknownSubCommandError",
    "UnexpectedPositionalError",
    "DuplicateArgumentError",
    "InvalidValueError",
    "InvalidChoiceError",
    "MalformedInputError",
    "ParserWarning",
    "DegradedNameWarning",
    "trigger",
)
